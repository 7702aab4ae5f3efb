"""Runtime validation of props and legacy context against declared specs.

``prop_types`` and ``context_types`` map a key to a validator. A
validator is any callable
``(values, key, component_name, location) -> Exception | None``; the
helpers below build the common ones. Failures are *reported* through
logging (once per distinct message), never raised, matching how the host
framework treats type-checking as a development-time warning.

The element being validated is passed explicitly as ``element`` so the
warning can name where it was created; there is no process-wide
"currently validating" pointer.

Usage:
    from testrender.core import prop_types as pt

    class Title(Component):
        context_types = {"theme": pt.instance_of(str).is_required}
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from .elements import get_display_name

logger = logging.getLogger(__name__)

# Grows for the life of the process; see reset_logged_failures()
_logged_failures: set[str] = set()


class Validator:
    """Callable validator with an ``is_required`` variant."""

    def __init__(self, check: Callable[[Any], bool], expected: str, required: bool = False) -> None:
        self._check = check
        self.expected = expected
        self.required = required

    @property
    def is_required(self) -> "Validator":
        return Validator(self._check, self.expected, required=True)

    def __call__(self, values: Mapping[str, Any], key: str, component_name: str, location: str) -> Optional[Exception]:
        value = values.get(key)
        if value is None:
            if self.required:
                return TypeError(
                    f"The {location} `{key}` is marked as required in `{component_name}`, "
                    f"but its value is `None`."
                )
            return None
        if not self._check(value):
            return TypeError(
                f"Invalid {location} `{key}` of type `{type(value).__name__}` supplied to "
                f"`{component_name}`, expected {self.expected}."
            )
        return None


def instance_of(*types: type) -> Validator:
    names = " or ".join(f"`{t.__name__}`" for t in types)
    return Validator(lambda value: isinstance(value, types), names)


def callable_value() -> Validator:
    return Validator(callable, "a callable")


any_value = Validator(lambda value: True, "any value")


def describe_component_frame(element: Any) -> str:
    """One stack-style line naming ``element`` and its owner, if known."""
    if element is None:
        return ""
    frame = f"\n    in {get_display_name(element)}"
    owner = getattr(element, "owner", None)
    if owner is not None:
        frame += f" (created by {get_display_name(owner)})"
    return frame


def check_prop_types(
    type_specs: Optional[Mapping[str, Any]],
    values: Mapping[str, Any],
    location: str,
    component_name: Optional[str],
    element: Any = None,
) -> list[str]:
    """Validate ``values`` against ``type_specs`` and log each failure.

    Parameters
    ----------
    type_specs : Mapping or None
        Key -> validator.
    values : Mapping
        Props or masked context being checked.
    location : str
        ``"prop"`` or ``"context"``, used in messages.
    component_name : str or None
        Name of the component declaring the specs.
    element : Element, optional
        Element under validation; annotates messages.

    Returns
    -------
    list[str]
        Messages for every failure found (including already-logged ones).
    """
    failures: list[str] = []
    if not type_specs:
        return failures
    name = component_name or "<<anonymous>>"
    for key, validator in type_specs.items():
        if not callable(validator):
            error: Optional[Exception] = TypeError(
                f"{name}: {location} type `{key}` is invalid; it must be a callable validator."
            )
        else:
            try:
                error = validator(values, key, name, location)
            except Exception as exc:  # validators are user code
                error = exc
        if error is None:
            continue
        message = f"Failed {location} type: {error}{describe_component_frame(element)}"
        failures.append(message)
        if message not in _logged_failures:
            _logged_failures.add(message)
            logger.warning(message)
    return failures


def reset_logged_failures() -> None:
    """Forget which failures were already logged so they warn again."""
    _logged_failures.clear()
