"""Full rendering into a no-op host, with queryable TestInstance trees.

Usage:
    from testrender.test_renderer import create

    session = create(element, {"create_node_mock": lambda el: FakeNode()})
    session.root.find_by_props({"id": "save"}).props["on_click"]()
    assert session.to_json() == expected
"""

from .serialization import TestRendererJSON, is_test_json
from .session import TestRenderer, create, unstable_batched_updates, unstable_set_now_implementation
from .test_instance import TestInstance

__all__ = [
    'TestInstance',
    'TestRenderer',
    'TestRendererJSON',
    'create',
    'is_test_json',
    'unstable_batched_updates',
    'unstable_set_now_implementation',
]
