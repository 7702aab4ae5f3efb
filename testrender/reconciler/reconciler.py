"""Synchronous fiber reconciler attached to the no-op test host.

Turns an element graph into a double-buffered fiber tree and commits it to
the host objects in :mod:`host_config`. This is the collaborator the test
renderer drives; its surface is:

    create_container(container, is_async, hydrate) -> FiberRoot
    update_container(element | None, root, parent_component, callback)
    get_public_root_instance(root)
    batched_updates(fn, *args), flush_sync(fn)
    resolve_current_buffer(fiber) -> Fiber | None

Work loop:
    - begin_work renders a fiber and reconciles its children into
      work-in-progress fibers (reusing alternates for matching type + key)
    - complete_work creates host instances and pops context
    - commit tears down deleted positions, swaps buffers, rebuilds host
      children, then runs mount/update completion hooks, refs and callbacks

Sync roots render as soon as an update is scheduled (unless batched). Async
roots ask the scheduler for a callback and render only when test code
flushes; their work loop yields between units when the deadline runs out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..core.component import (
    LEGACY_MOUNT_HOOKS,
    LEGACY_RECEIVE_PROPS_HOOKS,
    LEGACY_UPDATE_HOOKS,
    call_hooks,
    get_component_name,
    has_hook,
    is_pure,
    uses_modern_lifecycle,
)
from ..core.elements import Element, Fragment, Portal
from ..core.errors import InvariantViolation
from ..core.prop_types import check_prop_types
from ..utils.compare import EMPTY_OBJECT, get_masked_context, is_same_value, shallow_equal
from . import host_config
from .fiber import (
    Fiber,
    WorkTag,
    create_fiber_from_element,
    create_fiber_from_fragment,
    create_fiber_from_portal,
    create_fiber_from_text,
    create_host_root_fiber,
    create_work_in_progress,
    iter_post_order,
    iter_tree,
)
from .scheduling import Deadline, Scheduler, scheduler as default_scheduler

logger = logging.getLogger(__name__)

SET_STATE = "set_state"
REPLACE_STATE = "replace_state"
FORCE_UPDATE = "force_update"

# Tags that may skip rendering when their props object is unchanged
_BAILOUT_TAGS = frozenset({
    WorkTag.FUNCTIONAL_COMPONENT,
    WorkTag.FORWARD_REF,
    WorkTag.HOST_COMPONENT,
    WorkTag.HOST_TEXT,
    WorkTag.HOST_PORTAL,
    WorkTag.FRAGMENT,
    WorkTag.MODE,
    WorkTag.PROFILER,
})


@dataclass
class Update:
    kind: str
    payload: Any = None
    callback: Optional[Callable[[], Any]] = None


@dataclass
class RootUpdate:
    element: Any
    callback: Optional[Callable[[], Any]] = None


class FiberRoot:
    """Book-keeping for one tree attached to one host container."""

    def __init__(self, container_info: host_config.Container, is_async: bool, context: Any = None) -> None:
        self.container_info = container_info
        self.is_async = is_async
        self.context = context if context is not None else EMPTY_OBJECT
        self.update_queue: list[RootUpdate] = []
        self.current = create_host_root_fiber()
        self.current.state_node = self
        self.current.identity.current = self.current

    def __repr__(self) -> str:
        mode = "async" if self.is_async else "sync"
        return f"<FiberRoot {mode}>"


def resolve_current_buffer(fiber: Fiber) -> Optional[Fiber]:
    """Committed counterpart of ``fiber``, or None once it was torn down."""
    return fiber.identity.current


class ClassComponentUpdater:
    """Receives state-change requests from mounted class instances."""

    def __init__(self, reconciler: "Reconciler") -> None:
        self._reconciler = reconciler

    def is_mounted(self, public_instance: Any) -> bool:
        identity = getattr(public_instance, "_fiber_identity", None)
        return identity is not None and identity.current is not None

    def _enqueue(self, public_instance: Any, update: Update, caller_name: str) -> None:
        identity = getattr(public_instance, "_fiber_identity", None)
        root = getattr(public_instance, "_fiber_root", None)
        if identity is None or root is None or (
            identity.current is None and not self._reconciler.is_rendering
        ):
            logger.warning(
                "Can't call %s on an unmounted component (%s). This is a no-op.",
                caller_name,
                type(public_instance).__name__,
            )
            return
        identity.update_queue.append(update)
        self._reconciler.schedule_work(root)

    def enqueue_set_state(self, public_instance: Any, partial_state: Any, callback: Any, caller_name: str) -> None:
        self._enqueue(public_instance, Update(SET_STATE, partial_state, callback), caller_name)

    def enqueue_replace_state(self, public_instance: Any, complete_state: Any, callback: Any, caller_name: str) -> None:
        self._enqueue(public_instance, Update(REPLACE_STATE, complete_state, callback), caller_name)

    def enqueue_force_update(self, public_instance: Any, callback: Any, caller_name: str) -> None:
        self._enqueue(public_instance, Update(FORCE_UPDATE, None, callback), caller_name)


class Reconciler:
    """Render/commit engine shared by every root it creates."""

    def __init__(self, scheduler: Scheduler | None = None) -> None:
        self.scheduler = scheduler or default_scheduler
        self.class_updater = ClassComponentUpdater(self)
        self.is_rendering = False
        self._is_committing = False
        self._batching_depth = 0
        self._is_flushing_sync = False
        self._pending_roots: list[FiberRoot] = []

        self._work_root: Optional[FiberRoot] = None
        self._work_root_fiber: Optional[Fiber] = None
        self._next_unit: Optional[Fiber] = None
        self._context_values: dict[Any, Any] = {}
        self._context_stack: list[tuple[Any, bool, Any]] = []
        self._legacy_context_stack: list[Any] = []

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    def create_container(
        self,
        container_info: host_config.Container,
        is_async: bool = False,
        hydrate: bool = False,
    ) -> FiberRoot:
        if hydrate:
            raise InvariantViolation("The test host does not support hydration.")
        return FiberRoot(container_info, is_async)

    def update_container(
        self,
        element: Any,
        root: FiberRoot,
        parent_component: Any = None,
        callback: Optional[Callable[[], Any]] = None,
    ) -> None:
        if parent_component is not None and has_hook(parent_component, "get_child_context"):
            root.context = dict(parent_component.get_child_context())
        root.update_queue.append(RootUpdate(element, callback))
        self.schedule_work(root)

    def get_public_root_instance(self, root: FiberRoot) -> Any:
        child = root.current.child
        if child is None:
            return None
        if child.tag == WorkTag.HOST_COMPONENT:
            return host_config.get_public_instance(child.state_node)
        return child.state_node

    def batched_updates(self, fn: Callable[..., Any], *args: Any) -> Any:
        self._batching_depth += 1
        try:
            return fn(*args)
        finally:
            self._batching_depth -= 1
            if self._batching_depth == 0 and not self.is_rendering and not self._is_committing:
                self._perform_sync_work()

    def flush_sync(self, fn: Optional[Callable[[], Any]] = None) -> Any:
        """Run ``fn`` batched, then flush all pending work, async roots included."""
        previous = self._is_flushing_sync
        self._is_flushing_sync = True
        try:
            self._batching_depth += 1
            try:
                result = fn() if fn is not None else None
            finally:
                self._batching_depth -= 1
            if self._batching_depth == 0:
                self._perform_sync_work()
            return result
        finally:
            self._is_flushing_sync = previous

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def schedule_work(self, root: FiberRoot) -> None:
        if root not in self._pending_roots:
            self._pending_roots.append(root)
        if self.is_rendering or self._is_committing:
            return
        if root.is_async and not self._is_flushing_sync:
            if not self.scheduler.has_pending_callback():
                self.scheduler.schedule_callback(self._perform_async_work)
            return
        if self._batching_depth > 0:
            return
        self._perform_sync_work()

    def _next_sync_root(self) -> Optional[FiberRoot]:
        for root in self._pending_roots:
            if not root.is_async or self._is_flushing_sync:
                return root
        return None

    def _perform_sync_work(self) -> None:
        root = self._next_sync_root()
        while root is not None:
            self._render_root(root, None)
            root = self._next_sync_root()

    def _perform_async_work(self, deadline: Deadline) -> None:
        while self._pending_roots:
            root = self._work_root if self._work_root in self._pending_roots else self._pending_roots[0]
            if not self._render_root(root, deadline):
                self.scheduler.schedule_callback(self._perform_async_work)
                return

    # ------------------------------------------------------------------
    # Render phase
    # ------------------------------------------------------------------

    def _prepare_fresh_stack(self, root: FiberRoot) -> None:
        self._work_root = root
        self._work_root_fiber = create_work_in_progress(root.current, None)
        self._work_root_fiber.return_fiber = None
        self._next_unit = self._work_root_fiber
        self._context_values = {}
        self._context_stack = []
        self._legacy_context_stack = [root.context]

    def _reset_work(self) -> None:
        self._work_root = None
        self._work_root_fiber = None
        self._next_unit = None
        self._context_values = {}
        self._context_stack = []
        self._legacy_context_stack = []

    def _render_root(self, root: FiberRoot, deadline: Optional[Deadline]) -> bool:
        """Render ``root``; commit when finished. False if the deadline ran out."""
        if self._work_root is not root or self._next_unit is None:
            self._prepare_fresh_stack(root)
        self.is_rendering = True
        try:
            while self._next_unit is not None:
                if deadline is not None and deadline.time_remaining() <= 0:
                    logger.debug("Yielding %r before the render finished", root)
                    return False
                self._next_unit = self._perform_unit_of_work(self._next_unit)
        except Exception:
            self._reset_work()
            root.update_queue.clear()
            if root in self._pending_roots:
                self._pending_roots.remove(root)
            raise
        finally:
            self.is_rendering = False

        finished_work = self._work_root_fiber
        self._reset_work()
        if root in self._pending_roots:
            self._pending_roots.remove(root)
        self._commit_root(root, finished_work)
        return True

    def _perform_unit_of_work(self, wip: Fiber) -> Optional[Fiber]:
        next_unit = self._begin_work(wip.alternate, wip)
        wip.memoized_props = wip.pending_props
        if next_unit is not None:
            return next_unit
        node: Optional[Fiber] = wip
        while node is not None:
            self._complete_work(node)
            if node is self._work_root_fiber:
                return None
            if node.sibling is not None:
                return node.sibling
            node = node.return_fiber
        return None

    def _has_pending_updates(self, wip: Fiber) -> bool:
        if wip.tag == WorkTag.HOST_ROOT:
            return bool(wip.state_node.update_queue)
        return bool(wip.identity.update_queue)

    def _begin_work(self, current: Optional[Fiber], wip: Fiber) -> Optional[Fiber]:
        if (
            current is not None
            and wip.tag in _BAILOUT_TAGS
            and wip.pending_props is current.memoized_props
            and not getattr(wip.type, "context_types", None)
        ):
            return self._bailout(wip)

        tag = wip.tag
        if tag == WorkTag.HOST_ROOT:
            return self._update_host_root(current, wip)
        if tag == WorkTag.CLASS_COMPONENT:
            return self._update_class_component(current, wip)
        if tag == WorkTag.FUNCTIONAL_COMPONENT:
            props = wip.pending_props
            if getattr(wip.type, "context_types", None):
                context = get_masked_context(wip.type.context_types, self._legacy_context())
                children = wip.type(props, context)
            else:
                children = wip.type(props)
            return self._reconcile_children(current, wip, children)
        if tag == WorkTag.FORWARD_REF:
            return self._reconcile_children(current, wip, wip.type.render(wip.pending_props, wip.ref))
        if tag == WorkTag.HOST_COMPONENT:
            return self._reconcile_children(current, wip, wip.pending_props.get("children"))
        if tag == WorkTag.HOST_TEXT:
            return None
        if tag in (WorkTag.FRAGMENT, WorkTag.HOST_PORTAL):
            return self._reconcile_children(current, wip, wip.pending_props)
        if tag in (WorkTag.MODE, WorkTag.PROFILER):
            return self._reconcile_children(current, wip, wip.pending_props.get("children"))
        if tag == WorkTag.CONTEXT_PROVIDER:
            context = wip.type.context
            had = context in self._context_values
            self._context_stack.append((context, had, self._context_values.get(context)))
            self._context_values[context] = wip.pending_props.get("value")
            return self._reconcile_children(current, wip, wip.pending_props.get("children"))
        if tag == WorkTag.CONTEXT_CONSUMER:
            context = wip.type.context
            render = wip.pending_props.get("children")
            if not callable(render):
                raise InvariantViolation("A context consumer expects a single function as its child.")
            value = self._context_values.get(context, context.default_value)
            return self._reconcile_children(current, wip, render(value))
        raise InvariantViolation(f"Unknown unit of work tag: {tag}")

    def _bailout(self, wip: Fiber) -> Optional[Fiber]:
        child = wip.child
        if child is None:
            return None
        previous = None
        while child is not None:
            clone = create_work_in_progress(child, child.memoized_props)
            clone.return_fiber = wip
            if previous is None:
                wip.child = clone
            else:
                previous.sibling = clone
            previous = clone
            child = child.sibling
        return wip.child

    def _update_host_root(self, current: Optional[Fiber], wip: Fiber) -> Optional[Fiber]:
        root: FiberRoot = wip.state_node
        element = current.memoized_state if current is not None else None
        for update in root.update_queue:
            element = update.element
            if update.callback is not None:
                wip.callbacks.append(update.callback)
        wip.processed_updates = len(root.update_queue)
        wip.memoized_state = element
        return self._reconcile_children(current, wip, element)

    def _legacy_context(self) -> Any:
        return self._legacy_context_stack[-1] if self._legacy_context_stack else EMPTY_OBJECT

    def _process_update_queue(self, wip: Fiber, instance: Any, state: Any, props: Any) -> tuple[Any, bool]:
        queue = wip.identity.update_queue
        forced = False
        for update in queue[wip.processed_updates:]:
            if update.kind == REPLACE_STATE:
                payload = update.payload
                state = payload(state, props) if callable(payload) else payload
            elif update.kind == FORCE_UPDATE:
                forced = True
            else:
                payload = update.payload
                partial = payload(state, props) if callable(payload) else payload
                if partial is not None:
                    state = {**(state or {}), **partial}
            if update.callback is not None:
                wip.callbacks.append(update.callback)
        wip.processed_updates = len(queue)
        return state, forced

    def _apply_derived_state(self, wip: Fiber, props: Any, state: Any) -> Any:
        derive = getattr(wip.type, "get_derived_state_from_props", None)
        if callable(derive):
            partial = derive(props, state)
            if partial is not None:
                state = {**(state or {}), **partial}
        return state

    def _update_class_component(self, current: Optional[Fiber], wip: Fiber) -> Optional[Fiber]:
        type_ = wip.type
        props = wip.pending_props
        context = get_masked_context(type_.context_types, self._legacy_context())
        instance = wip.state_node

        if instance is None:
            instance = type_(props, context, self.class_updater)
            instance.props = props
            instance.context = context
            instance.updater = self.class_updater
            instance._fiber_identity = wip.identity
            instance._fiber_root = self._work_root
            wip.state_node = instance
            if type_.context_types:
                check_prop_types(type_.context_types, context, "context", get_component_name(type_, instance))
            state = self._apply_derived_state(wip, props, instance.state)
            instance.state = state
            if not uses_modern_lifecycle(type_, instance):
                call_hooks(instance, LEGACY_MOUNT_HOOKS)
                state, _ = self._process_update_queue(wip, instance, instance.state, props)
                instance.state = state
            wip.did_mount = True
            should_update = True
        else:
            old_props = current.memoized_props if current is not None else instance.props
            old_state = current.memoized_state if current is not None else instance.state
            old_context = instance.context
            context_changed = not shallow_equal(old_context, context)
            legacy = not uses_modern_lifecycle(type_, instance)
            if legacy and (old_props is not props or context_changed):
                call_hooks(instance, LEGACY_RECEIVE_PROPS_HOOKS, props, context)
            state, forced = self._process_update_queue(wip, instance, old_state, props)
            state = self._apply_derived_state(wip, props, state)

            if old_props is props and old_state is state and not forced and not context_changed:
                should_update = False
            elif forced:
                should_update = True
            elif has_hook(instance, "should_component_update"):
                should_update = bool(instance.should_component_update(props, state, context))
            elif is_pure(type_):
                should_update = not shallow_equal(old_props, props) or not shallow_equal(old_state, state)
            else:
                should_update = True

            if should_update:
                if legacy:
                    call_hooks(instance, LEGACY_UPDATE_HOOKS, props, state, context)
                wip.prev_props = old_props
                wip.prev_state = old_state
            else:
                logger.debug("%s skipped render (should_update=False)", get_component_name(type_, instance))

            instance.props = props
            instance.state = state
            instance.context = context

        wip.memoized_props = props
        wip.memoized_state = instance.state
        wip.should_update = should_update

        if has_hook(instance, "get_child_context") and getattr(type_, "child_context_types", None):
            child_context = instance.get_child_context() or {}
            self._legacy_context_stack.append({**self._legacy_context(), **child_context})
            wip.pushed_context = True

        if not should_update:
            return self._bailout(wip)
        return self._reconcile_children(current, wip, instance.render())

    def _complete_work(self, wip: Fiber) -> None:
        tag = wip.tag
        if tag == WorkTag.HOST_COMPONENT:
            if wip.state_node is None:
                wip.state_node = host_config.create_instance(
                    wip.type, wip.memoized_props, self._work_root.container_info
                )
        elif tag == WorkTag.HOST_TEXT:
            if wip.state_node is None:
                wip.state_node = host_config.create_text_instance(wip.memoized_props)
        elif tag == WorkTag.CONTEXT_PROVIDER:
            context, had, previous = self._context_stack.pop()
            if had:
                self._context_values[context] = previous
            else:
                self._context_values.pop(context, None)
        elif tag == WorkTag.CLASS_COMPONENT and wip.pushed_context:
            self._legacy_context_stack.pop()

    # ------------------------------------------------------------------
    # Child reconciliation
    # ------------------------------------------------------------------

    def _reconcile_children(self, current: Optional[Fiber], wip: Fiber, new_children: Any) -> Optional[Fiber]:
        if isinstance(new_children, Element) and new_children.type is Fragment and new_children.key is None:
            new_children = new_children.props.get("children")
        if isinstance(new_children, (list, tuple)):
            items = list(new_children)
        else:
            items = [new_children]

        existing: dict[tuple[str, Any], Fiber] = {}
        old = current.child if current is not None else None
        while old is not None:
            slot = ("key", old.key) if old.key is not None else ("index", old.index)
            if slot in existing:
                wip.deletions.append(existing[slot])
            existing[slot] = old
            old = old.sibling

        first: Optional[Fiber] = None
        previous: Optional[Fiber] = None
        for index, item in enumerate(items):
            fiber = self._reconcile_child(existing, index, item)
            if fiber is None:
                continue
            fiber.index = index
            fiber.return_fiber = wip
            fiber.sibling = None
            if previous is None:
                first = fiber
            else:
                previous.sibling = fiber
            previous = fiber

        wip.deletions.extend(existing.values())
        wip.child = first
        return first

    def _reconcile_child(self, existing: dict, index: int, item: Any) -> Optional[Fiber]:
        if item is None or isinstance(item, bool):
            return None
        if isinstance(item, (str, int, float)):
            text = str(item)
            match = existing.get(("index", index))
            if match is not None and match.tag == WorkTag.HOST_TEXT:
                del existing[("index", index)]
                return create_work_in_progress(match, text)
            return create_fiber_from_text(text)
        if isinstance(item, Element):
            slot = ("key", item.key) if item.key is not None else ("index", index)
            match = existing.get(slot)
            pending = item.props.get("children") if item.type is Fragment else item.props
            if match is not None and is_same_value(match.type, item.type) and match.tag != WorkTag.HOST_TEXT:
                del existing[slot]
                fiber = create_work_in_progress(match, pending)
                fiber.ref = item.ref
                return fiber
            return create_fiber_from_element(item)
        if isinstance(item, (list, tuple)):
            match = existing.get(("index", index))
            if match is not None and match.tag == WorkTag.FRAGMENT:
                del existing[("index", index)]
                return create_work_in_progress(match, list(item))
            return create_fiber_from_fragment(list(item), None)
        if isinstance(item, Portal):
            slot = ("key", item.key) if item.key is not None else ("index", index)
            match = existing.get(slot)
            if match is not None and match.tag == WorkTag.HOST_PORTAL and match.state_node is item.container:
                del existing[slot]
                return create_work_in_progress(match, item.children)
            return create_fiber_from_portal(item)
        if callable(item):
            raise InvariantViolation(
                "Functions are not valid as a child. This may happen if you return a "
                "component instead of an element from render."
            )
        raise InvariantViolation(f"Objects are not valid as a child (found: {type(item).__name__}).")

    # ------------------------------------------------------------------
    # Commit phase
    # ------------------------------------------------------------------

    def _commit_root(self, root: FiberRoot, finished_work: Fiber) -> None:
        self._is_committing = True
        try:
            for fiber in iter_tree(finished_work):
                for deleted in fiber.deletions:
                    self._commit_deletion(deleted)
                fiber.deletions = []

            for fiber in iter_tree(finished_work):
                if (
                    fiber.tag == WorkTag.CLASS_COMPONENT
                    and fiber.should_update
                    and not fiber.did_mount
                    and has_hook(fiber.state_node, "get_snapshot_before_update")
                ):
                    fiber.snapshot = fiber.state_node.get_snapshot_before_update(fiber.prev_props, fiber.prev_state)

            root.current = finished_work
            leftover = False
            for fiber in iter_tree(finished_work):
                fiber.identity.current = fiber
                if fiber.tag == WorkTag.HOST_ROOT:
                    del root.update_queue[:fiber.processed_updates]
                    leftover = leftover or bool(root.update_queue)
                elif fiber.processed_updates:
                    del fiber.identity.update_queue[:fiber.processed_updates]
                    leftover = leftover or bool(fiber.identity.update_queue)
                    fiber.processed_updates = 0
            if leftover and root not in self._pending_roots:
                self._pending_roots.append(root)

            root.container_info.children = self._collect_host_children(finished_work.child)
            logger.debug("Committed %r (%d host root node(s))", root, len(root.container_info.children))

            for fiber in iter_post_order(finished_work):
                self._commit_lifecycles(fiber)
        finally:
            self._is_committing = False

    def _commit_deletion(self, deleted: Fiber) -> None:
        for node in iter_tree(deleted):
            if node.tag == WorkTag.CLASS_COMPONENT and node.state_node is not None:
                call_hooks(node.state_node, ("component_will_unmount",))
            elif node.tag == WorkTag.HOST_PORTAL:
                node.state_node.children = []
            if node.ref is not None:
                self._set_ref(node.ref, None)
            node.identity.current = None

    def _collect_host_children(self, first: Optional[Fiber]) -> list[Any]:
        out: list[Any] = []
        node = first
        while node is not None:
            if node.tag == WorkTag.HOST_COMPONENT:
                instance = node.state_node
                instance.props = node.memoized_props
                instance.children = self._collect_host_children(node.child)
                out.append(instance)
            elif node.tag == WorkTag.HOST_TEXT:
                node.state_node.text = node.memoized_props
                out.append(node.state_node)
            elif node.tag == WorkTag.HOST_PORTAL:
                node.state_node.children = self._collect_host_children(node.child)
            else:
                out.extend(self._collect_host_children(node.child))
            node = node.sibling
        return out

    def _commit_lifecycles(self, fiber: Fiber) -> None:
        previous = fiber.alternate
        mounted = fiber.did_mount or previous is None
        if fiber.tag == WorkTag.CLASS_COMPONENT:
            instance = fiber.state_node
            if fiber.did_mount:
                call_hooks(instance, ("component_did_mount",))
            elif fiber.should_update and fiber.prev_props is not None:
                call_hooks(instance, ("component_did_update",), fiber.prev_props, fiber.prev_state, fiber.snapshot)
        if fiber.ref is not None and fiber.tag in (WorkTag.CLASS_COMPONENT, WorkTag.HOST_COMPONENT):
            if mounted or previous.ref is not fiber.ref:
                if not mounted and previous.ref is not None:
                    self._set_ref(previous.ref, None)
                if fiber.tag == WorkTag.HOST_COMPONENT:
                    self._set_ref(fiber.ref, host_config.get_public_instance(fiber.state_node))
                else:
                    self._set_ref(fiber.ref, fiber.state_node)
        callbacks, fiber.callbacks = fiber.callbacks, []
        for callback in callbacks:
            callback()

    @staticmethod
    def _set_ref(ref: Any, value: Any) -> None:
        if callable(ref):
            ref(value)
        elif hasattr(ref, "current"):
            ref.current = value
        else:
            raise InvariantViolation(
                f"Expected ref to be a function or an object with a `current` attribute, got {type(ref).__name__}."
            )


reconciler = Reconciler()
