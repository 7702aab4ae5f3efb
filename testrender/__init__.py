"""testrender: render component trees into memory for assertions.

Two engines share one component model:

    shallow/        one-level render of a single component, lifecycle
                    emulated without a host (ShallowRenderer)
    test_renderer/  full render into a no-op host; query the committed
                    tree through TestInstance, snapshot it with to_json /
                    to_tree, drive async rendering deterministically

Architecture layers (strict one-way dependency):
    scripts/ → testrender/{shallow,test_renderer}/ → testrender/reconciler/
             → testrender/core/ → testrender/utils/

Key invariants:
    - Same tree position → same TestInstance, across any number of commits
    - Reads never mutate the tree; serialization is recomputed per call
    - Update requests issued while a render is in flight never recurse
    - YAML-only configs and snapshots

Usage:
    from testrender import Component, create_element as h
    from testrender.test_renderer import create

    class Greeting(Component):
        def render(self):
            return h("span", None, self.props["name"])

    session = create(h(Greeting, {"name": "Ada"}))
    session.root.find_by_type("span").children   # ['Ada']
"""

__version__ = "16.4.0"

from .core.component import Component, PureComponent
from .core.elements import (
    Fragment,
    Profiler,
    StrictMode,
    create_context,
    create_element,
    create_portal,
    forward_ref,
    is_valid_element,
)
from .core.errors import CardinalityError, InvariantViolation, RendererError, UnmountedAccessError

__all__ = [
    'CardinalityError',
    'Component',
    'Fragment',
    'InvariantViolation',
    'Profiler',
    'PureComponent',
    'RendererError',
    'StrictMode',
    'UnmountedAccessError',
    'create_context',
    'create_element',
    'create_portal',
    'forward_ref',
    'is_valid_element',
]
