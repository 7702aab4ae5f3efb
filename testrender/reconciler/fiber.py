"""Fiber tree nodes with double buffering.

Every tree position is backed by up to two Fiber objects, ``current`` (the
committed buffer) and its ``alternate`` (the work-in-progress buffer). A
commit swaps the roles. Both buffers share one :class:`FiberIdentity`,
which is the stable key for a position: it records which buffer is
committed, the class-component update queue, and is what test wrappers
memoize on.

Invariants:
    - ``fiber.identity is fiber.alternate.identity`` whenever both exist
    - ``identity.current`` is the committed buffer, or None once the
      position has been torn down
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from ..core.component import should_construct
from ..core.elements import (
    ContextConsumer,
    ContextProvider,
    Element,
    ForwardRef,
    Fragment,
    Portal,
    Profiler,
    StrictMode,
)
from ..core.errors import InvariantViolation


class WorkTag(IntEnum):
    """Kind of tree position."""

    FUNCTIONAL_COMPONENT = 1
    CLASS_COMPONENT = 2
    HOST_ROOT = 3
    HOST_PORTAL = 4
    HOST_COMPONENT = 5
    HOST_TEXT = 6
    FRAGMENT = 10
    MODE = 11
    CONTEXT_CONSUMER = 12
    CONTEXT_PROVIDER = 13
    FORWARD_REF = 14
    PROFILER = 15


class FiberIdentity:
    """Stable identity shared by a fiber and its alternate."""

    __slots__ = ("current", "update_queue", "__weakref__")

    def __init__(self) -> None:
        self.current: Fiber | None = None
        self.update_queue: list[Any] = []


class Fiber:
    """One buffer of one tree position."""

    def __init__(self, tag: WorkTag, pending_props: Any, key: Any = None, identity: FiberIdentity | None = None) -> None:
        self.tag = tag
        self.key = key
        self.type: Any = None
        self.state_node: Any = None

        self.return_fiber: Fiber | None = None
        self.child: Fiber | None = None
        self.sibling: Fiber | None = None
        self.index = 0
        self.ref: Any = None

        self.pending_props = pending_props
        self.memoized_props: Any = None
        self.memoized_state: Any = None

        self.alternate: Fiber | None = None
        self.identity = identity if identity is not None else FiberIdentity()
        self.deletions: list[Fiber] = []
        self.did_mount = False
        self.processed_updates = 0
        self.callbacks: list[Any] = []
        self.snapshot: Any = None
        self.should_update = True
        self.prev_props: Any = None
        self.prev_state: Any = None
        self.pushed_context = False

    def __repr__(self) -> str:
        name = getattr(self.type, "__name__", None) or repr(self.type)
        return f"<Fiber {self.tag.name} {name} key={self.key!r}>"


def create_work_in_progress(current: Fiber, pending_props: Any) -> Fiber:
    """Return the alternate buffer of ``current`` prepared for new work."""
    wip = current.alternate
    if wip is None:
        wip = Fiber(current.tag, pending_props, current.key, current.identity)
        wip.type = current.type
        wip.state_node = current.state_node
        wip.alternate = current
        current.alternate = wip
    else:
        wip.pending_props = pending_props
        wip.deletions = []
    wip.child = current.child
    wip.sibling = None
    wip.memoized_props = current.memoized_props
    wip.memoized_state = current.memoized_state
    wip.index = current.index
    wip.ref = current.ref
    wip.did_mount = False
    wip.processed_updates = 0
    wip.callbacks = []
    wip.snapshot = None
    wip.should_update = True
    wip.prev_props = None
    wip.prev_state = None
    wip.pushed_context = False
    return wip


def create_host_root_fiber() -> Fiber:
    return Fiber(WorkTag.HOST_ROOT, None)


def create_fiber_from_element(element: Element) -> Fiber:
    """Classify ``element.type`` into a work tag and build a fresh fiber."""
    type_ = element.type
    if should_construct(type_):
        tag = WorkTag.CLASS_COMPONENT
    elif isinstance(type_, str):
        tag = WorkTag.HOST_COMPONENT
    elif type_ is Fragment:
        tag = WorkTag.FRAGMENT
    elif type_ is StrictMode:
        tag = WorkTag.MODE
    elif type_ is Profiler:
        tag = WorkTag.PROFILER
    elif isinstance(type_, ContextProvider):
        tag = WorkTag.CONTEXT_PROVIDER
    elif isinstance(type_, ContextConsumer):
        tag = WorkTag.CONTEXT_CONSUMER
    elif isinstance(type_, ForwardRef):
        tag = WorkTag.FORWARD_REF
    elif callable(type_):
        tag = WorkTag.FUNCTIONAL_COMPONENT
    else:
        raise InvariantViolation(
            "Element type is invalid: expected a string (for host components) or a "
            f"class/function (for composite components) but got: {type(type_).__name__}."
        )
    props = element.props.get("children") if tag == WorkTag.FRAGMENT else element.props
    fiber = Fiber(tag, props, element.key)
    fiber.type = type_
    fiber.ref = element.ref
    return fiber


def create_fiber_from_text(text: str) -> Fiber:
    return Fiber(WorkTag.HOST_TEXT, text)


def create_fiber_from_fragment(children: list[Any], key: Any) -> Fiber:
    fiber = Fiber(WorkTag.FRAGMENT, children, key)
    fiber.type = Fragment
    return fiber


def create_fiber_from_portal(portal: Portal) -> Fiber:
    fiber = Fiber(WorkTag.HOST_PORTAL, portal.children, portal.key)
    fiber.state_node = portal.container
    return fiber


def iter_tree(fiber: Fiber | None):
    """Yield ``fiber`` and all its descendants, depth-first pre-order."""
    stack = [fiber] if fiber is not None else []
    while stack:
        node = stack.pop()
        yield node
        children = []
        child = node.child
        while child is not None:
            children.append(child)
            child = child.sibling
        stack.extend(reversed(children))


def iter_post_order(fiber: Fiber):
    """Yield the descendants of ``fiber`` children-first, then ``fiber``."""
    child = fiber.child
    while child is not None:
        yield from iter_post_order(child)
        child = child.sibling
    yield fiber
