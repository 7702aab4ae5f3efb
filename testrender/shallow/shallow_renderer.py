"""Shallow renderer: one render pass of one component, no host.

Renders the outermost component exactly one level deep. Child elements in
the output are returned as-is and never instantiated. Class components are
constructed once and retained across ``render`` calls, so calling
``render`` again runs the update lifecycle against the retained instance.

Lifecycle emulation:
    - mount: constructor → get_derived_state_from_props → context check →
      component_will_mount (legacy only) → render
    - update: component_will_receive_props (legacy, props changed) →
      get_derived_state_from_props → should-update decision →
      component_will_update (legacy) → render (only if updating)
    - component_did_mount / component_did_update are never called: nothing
      is committed to a host

State machine:
    Idle --render()--> Rendering --done--> Idle
    A top-level ``render`` arriving while Rendering is a no-op returning
    None. Update requests from lifecycle hooks arrive through the updater;
    while Rendering they only fold their state into ``pending_state``, which
    the in-flight computation reads.

Usage:
    renderer = ShallowRenderer.create_renderer()
    output = renderer.render(create_element(Greeting, {"name": "Ada"}))
    assert output.type == "span"
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from ..core.component import (
    LEGACY_MOUNT_HOOKS,
    LEGACY_RECEIVE_PROPS_HOOKS,
    LEGACY_UPDATE_HOOKS,
    call_hooks,
    get_component_name,
    has_hook,
    is_pure,
    should_construct,
    uses_modern_lifecycle,
)
from ..core.elements import is_forward_ref, is_valid_element
from ..core.errors import invariant
from ..core.prop_types import check_prop_types
from ..utils.compare import EMPTY_OBJECT, get_masked_context, shallow_equal

logger = logging.getLogger(__name__)


class Updater:
    """Update side channel handed to the simulated instance.

    Every request registers its completion callback, folds the requested
    state into the renderer's pending state, and re-enters
    :meth:`ShallowRenderer.render` with the stored element and context.
    """

    def __init__(self, renderer: "ShallowRenderer") -> None:
        self._renderer = renderer
        self._callbacks: list[tuple[Callable[[], Any], Any]] = []

    def _enqueue_callback(self, callback: Optional[Callable[[], Any]], public_instance: Any) -> None:
        if callable(callback) and public_instance is not None:
            self._callbacks.append((callback, public_instance))

    def invoke_callbacks(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for callback, _ in callbacks:
            callback()

    def is_mounted(self, public_instance: Any) -> bool:
        return self._renderer._element is not None

    def _rerender(self) -> None:
        self._renderer.render(self._renderer._element, self._renderer._context)

    def enqueue_force_update(self, public_instance: Any, callback: Any, caller_name: str) -> None:
        self._enqueue_callback(callback, public_instance)
        self._renderer._forced_update = True
        self._rerender()

    def enqueue_replace_state(self, public_instance: Any, complete_state: Any, callback: Any, caller_name: str) -> None:
        self._enqueue_callback(callback, public_instance)
        self._renderer._new_state = complete_state
        self._rerender()

    def enqueue_set_state(self, public_instance: Any, partial_state: Any, callback: Any, caller_name: str) -> None:
        self._enqueue_callback(callback, public_instance)
        renderer = self._renderer
        current_state = renderer._new_state if renderer._new_state is not None else public_instance.state

        if callable(partial_state):
            partial_state = partial_state(current_state, public_instance.props)

        # None is a no-op; the callback still fires
        if partial_state is None:
            if not renderer._rendering:
                self.invoke_callbacks()
            return

        renderer._new_state = {**(current_state or {}), **partial_state}
        self._rerender()


class ShallowRenderer:
    """Renders a single component one level deep and retains its instance."""

    @classmethod
    def create_renderer(cls) -> "ShallowRenderer":
        return cls()

    def __init__(self) -> None:
        self._context: Any = None
        self._element: Any = None
        self._instance: Any = None
        self._new_state: Any = None
        self._rendered: Any = None
        self._rendering = False
        self._forced_update = False
        self._updater = Updater(self)

    def get_mounted_instance(self) -> Any:
        return self._instance

    def get_render_output(self) -> Any:
        """Output of the last completed render (no side effects)."""
        return self._rendered

    def render(self, element: Any, context: Optional[Mapping[str, Any]] = None) -> Any:
        """Render ``element`` one level deep and return its output.

        Parameters
        ----------
        element : Element
            Element whose type is a class, function, or forward_ref.
        context : Mapping, optional
            Ambient legacy context; masked to the type's ``context_types``.

        Returns
        -------
        Any
            The rendered output, or None for a re-entrant call.

        Raises
        ------
        InvariantViolation
            If ``element`` is not an element of a composite type.
        """
        invariant(
            is_valid_element(element),
            "ShallowRenderer render(): Invalid component element."
            + (
                " Instead of passing a component class, make sure to instantiate "
                "it by passing it to create_element."
                if callable(element)
                else ""
            ),
        )
        invariant(
            not isinstance(element.type, str),
            "ShallowRenderer render(): Shallow rendering works only with custom "
            f"components, not primitives ({element.type}). Instead of calling "
            "`.render(el)` and inspecting the rendered output, look at `el.props` "
            "directly instead.",
        )
        invariant(
            is_forward_ref(element) or callable(element.type),
            "ShallowRenderer render(): Shallow rendering works only with custom "
            "components, but the provided element type was "
            f"`{_describe_type(element.type)}`.",
        )

        if self._rendering:
            return None

        self._rendering = True
        try:
            self._element = element
            self._context = get_masked_context(getattr(element.type, "context_types", None), context)

            if self._instance is not None:
                self._update_class_component(element, self._context)
            elif is_forward_ref(element):
                self._rendered = element.type.render(element.props, element.ref)
            elif should_construct(element.type):
                self._instance = element.type(element.props, self._context, self._updater)
                self._update_state_from_static_lifecycle(element.props)
                if element.type.context_types:
                    check_prop_types(
                        element.type.context_types,
                        self._context,
                        "context",
                        get_component_name(element.type, self._instance),
                        element=element,
                    )
                self._mount_class_component(element, self._context)
            elif getattr(element.type, "context_types", None):
                self._rendered = element.type(element.props, self._context)
            else:
                self._rendered = element.type(element.props)
        finally:
            self._rendering = False
        self._updater.invoke_callbacks()

        return self.get_render_output()

    def unmount(self) -> None:
        if self._instance is not None:
            call_hooks(self._instance, ("component_will_unmount",))
            logger.debug("Unmounted %s", type(self._instance).__name__)

        self._context = None
        self._element = None
        self._new_state = None
        self._rendered = None
        self._instance = None
        self._forced_update = False

    # ------------------------------------------------------------------
    # Class component lifecycle
    # ------------------------------------------------------------------

    def _mount_class_component(self, element: Any, context: Any) -> None:
        instance = self._instance
        instance.context = context
        instance.props = element.props
        instance.updater = self._updater

        if any(has_hook(instance, name) for name in LEGACY_MOUNT_HOOKS):
            before_state = self._new_state
            if not uses_modern_lifecycle(element.type, instance):
                call_hooks(instance, LEGACY_MOUNT_HOOKS)
            # set_state may have been called during component_will_mount
            if before_state is not self._new_state:
                instance.state = self._new_state if self._new_state is not None else EMPTY_OBJECT

        self._new_state = None
        self._rendered = instance.render()
        logger.debug("Mounted %s", get_component_name(element.type, instance))

    def _update_class_component(self, element: Any, context: Any) -> None:
        props, type_ = element.props, element.type
        instance = self._instance

        old_state = instance.state if instance.state is not None else EMPTY_OBJECT
        old_props = instance.props
        legacy = not uses_modern_lifecycle(type_, instance)

        if old_props is not props and legacy:
            call_hooks(instance, LEGACY_RECEIVE_PROPS_HOOKS, props, context)
        self._update_state_from_static_lifecycle(props)

        # Read after component_will_receive_props in case it set state
        state = self._new_state if self._new_state is not None else old_state

        if self._forced_update:
            should_update = True
            self._forced_update = False
        elif has_hook(instance, "should_component_update"):
            should_update = bool(instance.should_component_update(props, state, context))
        elif is_pure(type_):
            should_update = not shallow_equal(old_props, props) or not shallow_equal(old_state, state)
        else:
            should_update = True

        if should_update and legacy:
            call_hooks(instance, LEGACY_UPDATE_HOOKS, props, state, context)

        instance.context = context
        instance.props = props
        instance.state = state
        self._new_state = None

        if should_update:
            self._rendered = instance.render()
        else:
            logger.debug("%s skipped render (should_update=False)", get_component_name(type_, instance))

    def _update_state_from_static_lifecycle(self, props: Any) -> None:
        derive = getattr(self._element.type, "get_derived_state_from_props", None)
        if not callable(derive):
            return
        partial_state = derive(props, self._instance.state)
        if partial_state is not None:
            old_state = self._new_state if self._new_state is not None else self._instance.state
            new_state = {**(old_state or {}), **partial_state}
            self._instance.state = self._new_state = new_state


def _describe_type(type_: Any) -> str:
    if isinstance(type_, (list, tuple)):
        return "array"
    if type_ is None:
        return "null"
    return type(type_).__name__


def create_renderer() -> ShallowRenderer:
    return ShallowRenderer.create_renderer()
