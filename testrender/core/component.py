"""Class-style component base classes.

Lifecycle hooks are optional and recognised by name on the instance:

Mount:
    get_derived_state_from_props (static) -> component_will_mount /
    unsafe_component_will_mount (legacy) -> render -> component_did_mount

Update:
    component_will_receive_props / unsafe_... (legacy, props changed)
    -> get_derived_state_from_props -> should_component_update
    -> component_will_update / unsafe_... (legacy) -> render
    -> get_snapshot_before_update -> component_did_update

Unmount:
    component_will_unmount

Legacy hooks never run for a type that uses the modern API
(``get_derived_state_from_props`` or ``get_snapshot_before_update``); see
:func:`uses_modern_lifecycle`. Hooks are deliberately not defined on the
base classes so their presence can be detected.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)

LEGACY_MOUNT_HOOKS = ("component_will_mount", "unsafe_component_will_mount")
LEGACY_RECEIVE_PROPS_HOOKS = ("component_will_receive_props", "unsafe_component_will_receive_props")
LEGACY_UPDATE_HOOKS = ("component_will_update", "unsafe_component_will_update")


class NoopUpdater:
    """Updater used before a renderer attaches its own.

    Update requests on an instance that no renderer owns are dropped with a
    warning.
    """

    def is_mounted(self, public_instance: Any) -> bool:
        return False

    def _warn(self, public_instance: Any, caller_name: str) -> None:
        logger.warning(
            "Can't call %s on a component that is not yet mounted (%s). "
            "This is a no-op.",
            caller_name,
            type(public_instance).__name__,
        )

    def enqueue_force_update(self, public_instance: Any, callback: Callable | None, caller_name: str) -> None:
        self._warn(public_instance, caller_name)

    def enqueue_replace_state(
        self, public_instance: Any, complete_state: Any, callback: Callable | None, caller_name: str
    ) -> None:
        self._warn(public_instance, caller_name)

    def enqueue_set_state(
        self, public_instance: Any, partial_state: Any, callback: Callable | None, caller_name: str
    ) -> None:
        self._warn(public_instance, caller_name)


NOOP_UPDATER = NoopUpdater()


class Component:
    """Base class for class-style components.

    Parameters
    ----------
    props : dict, optional
    context : Mapping, optional
        Masked legacy context (keys declared in ``context_types``).
    updater : object, optional
        Side channel that receives state-change requests.
    """

    is_component = True
    context_types: dict[str, Any] | None = None

    def __init__(self, props: Any = None, context: Any = None, updater: Any = None) -> None:
        self.props = props
        self.context = context
        self.updater = updater if updater is not None else NOOP_UPDATER
        self.state: Any = None

    def set_state(self, partial_state: Any, callback: Callable[[], Any] | None = None) -> None:
        """Request a shallow merge of ``partial_state`` into state.

        ``partial_state`` may be a mapping, None (no-op), or a function
        ``(state, props) -> mapping | None``.
        """
        if partial_state is not None and not isinstance(partial_state, Mapping) and not callable(partial_state):
            raise TypeError(
                "set_state(...) takes a dict of state variables to update or a "
                "function which returns a dict of state variables."
            )
        self.updater.enqueue_set_state(self, partial_state, callback, "set_state")

    def force_update(self, callback: Callable[[], Any] | None = None) -> None:
        self.updater.enqueue_force_update(self, callback, "force_update")

    def render(self) -> Any:
        raise NotImplementedError(f"{type(self).__name__}.render() is not implemented")


class PureComponent(Component):
    """Component that re-renders only when props or state shallowly change."""

    is_pure_component = True


def should_construct(component_type: Any) -> bool:
    """True if ``component_type`` must be instantiated rather than called."""
    return isinstance(component_type, type) and bool(getattr(component_type, "is_component", False))


def is_pure(component_type: Any) -> bool:
    return bool(getattr(component_type, "is_pure_component", False))


def has_hook(target: Any, name: str) -> bool:
    return callable(getattr(target, name, None))


def uses_modern_lifecycle(component_type: Any, instance: Any) -> bool:
    """Whether legacy ``component_will_*`` hooks are suppressed for this type."""
    return has_hook(component_type, "get_derived_state_from_props") or has_hook(
        instance, "get_snapshot_before_update"
    )


def call_hooks(instance: Any, names: tuple[str, ...], *args: Any) -> None:
    """Call each hook in ``names`` present on ``instance``, in order."""
    for name in names:
        hook = getattr(instance, name, None)
        if callable(hook):
            hook(*args)


def get_component_name(component_type: Any, instance: Any = None) -> str | None:
    klass = type(instance) if instance is not None else None
    return (
        getattr(component_type, "display_name", None)
        or getattr(klass, "display_name", None)
        or getattr(component_type, "__name__", None)
        or getattr(klass, "__name__", None)
    )
