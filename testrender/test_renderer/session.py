"""Render sessions: mount an element into a no-op container and inspect it.

``create(element, options)`` builds a container, asks the reconciler for a
root attached to it, renders ``element`` and returns a
:class:`TestRenderer` handle:

    root          top TestInstance (raises once unmounted / before children)
    to_json()     host-only snapshot view
    to_tree()     full composite + host view
    update(el)    re-render in place (same type + key) or remount
    unmount()     tear the tree down; the handle is unusable afterwards
    get_instance()  public instance of the root element, if any
    unstable_flush_all / unstable_flush_sync / unstable_flush_through /
    unstable_yield  deterministic control over async-mode rendering

Options (mapping or :class:`SessionOptions`; unknown keys ignored):
    create_node_mock(element) -> mock   stand-ins for host instances
    unstable_is_async: bool             defer rendering until flushed

Usage:
    from testrender.test_renderer import create

    session = create(h(Greeting, {"name": "Ada"}))
    assert session.to_json() == {"type": "span", "props": {}, "children": ["Ada"]}
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Optional

from ..core.errors import UnmountedAccessError
from ..reconciler import host_config
from ..reconciler.reconciler import FiberRoot, reconciler
from ..reconciler.scheduling import scheduler
from ..utils.logging_config import log_context
from ..utils.validators import SessionOptions
from .serialization import container_to_json, fiber_to_tree
from .test_instance import TestInstance, wrap_fiber

logger = logging.getLogger(__name__)

_session_ids = itertools.count(1)


class TestRenderer:
    """Handle over one mounted tree."""

    __test__ = False  # not a pytest test class

    def __init__(self, container: host_config.Container, root: FiberRoot) -> None:
        self._container: Optional[host_config.Container] = container
        self._root: Optional[FiberRoot] = root
        self.session_id = next(_session_ids)

    def __repr__(self) -> str:
        state = "mounted" if self._root is not None else "unmounted"
        return f"<TestRenderer session={self.session_id} {state}>"

    @property
    def root(self) -> TestInstance:
        if self._root is None or self._root.current.child is None:
            raise UnmountedAccessError("Can't access .root on unmounted test renderer")
        return wrap_fiber(self._root.current.child)

    def to_json(self) -> Any:
        if self._root is None or self._container is None:
            return None
        return container_to_json(self._container)

    def to_tree(self) -> Any:
        if self._root is None:
            return None
        return fiber_to_tree(self._root.current)

    def update(self, element: Any) -> None:
        if self._root is None:
            return
        with log_context(session=self.session_id):
            reconciler.update_container(element, self._root, None, None)

    def unmount(self) -> None:
        if self._root is None:
            return
        with log_context(session=self.session_id):
            reconciler.update_container(None, self._root, None, None)
            logger.debug("Unmounted session %d", self.session_id)
        self._container = None
        self._root = None

    def get_instance(self) -> Any:
        if self._root is None:
            return None
        return reconciler.get_public_root_instance(self._root)

    # ------------------------------------------------------------------
    # Scheduling controls
    # ------------------------------------------------------------------

    def unstable_flush_all(self) -> list[Any]:
        return scheduler.flush_all()

    def unstable_flush_sync(self, fn: Callable[[], Any]) -> list[Any]:
        return scheduler.with_clean_yields(lambda: reconciler.flush_sync(fn))

    def unstable_flush_through(self, expected_values: list[Any]) -> list[Any]:
        return scheduler.flush_through(expected_values)

    def unstable_yield(self, value: Any) -> None:
        scheduler.yield_value(value)


def create(element: Any, options: Any = None) -> TestRenderer:
    """Mount ``element`` into a fresh no-op container.

    Parameters
    ----------
    element : Element
        Element to render.
    options : Mapping or SessionOptions, optional
        ``create_node_mock`` and ``unstable_is_async``; other keys ignored.

    Returns
    -------
    TestRenderer
    """
    opts = SessionOptions.from_value(options)
    container = host_config.Container(opts.create_node_mock)
    root = reconciler.create_container(container, opts.unstable_is_async, False)
    session = TestRenderer(container, root)
    with log_context(session=session.session_id):
        logger.debug("Created session %d (%s mode)", session.session_id, "async" if opts.unstable_is_async else "sync")
        reconciler.update_container(element, root, None, None)
    return session


def unstable_batched_updates(fn: Callable[..., Any], *args: Any) -> Any:
    return reconciler.batched_updates(fn, *args)


def unstable_set_now_implementation(implementation: Callable[[], float]) -> None:
    scheduler.set_now_implementation(implementation)
