"""Equality helpers shared by the shallow engine and tree search.

Provides:
    - is_same_value(): strict equality (value for scalars, identity otherwise)
    - shallow_equal(): one-level mapping comparison using is_same_value
    - get_masked_context(): subset of ambient context a type declares

Scalars (str, int, float, bool, bytes, None) compare by value because
Python does not guarantee identity for equal scalars; every other value
compares by identity. NaN is equal to itself.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional

EMPTY_OBJECT: Mapping[str, Any] = MappingProxyType({})

_SCALAR_TYPES = (str, int, float, bool, bytes, type(None))


def is_same_value(a: Any, b: Any) -> bool:
    """Return True if ``a`` and ``b`` are the same value.

    Parameters
    ----------
    a, b : Any
        Values to compare

    Returns
    -------
    bool
        True for identical objects, or equal scalars of the same type.

    Examples
    --------
    >>> is_same_value("a", "a")
    True
    >>> is_same_value({}, {})
    False
    """
    if a is b:
        return True
    if type(a) is not type(b) or not isinstance(a, _SCALAR_TYPES):
        return False
    if isinstance(a, float) and a != a and b != b:
        return True
    return a == b


def shallow_equal(a: Optional[Mapping[str, Any]], b: Optional[Mapping[str, Any]]) -> bool:
    """Compare two mappings one level deep.

    Parameters
    ----------
    a, b : Mapping or None
        Props or state mappings

    Returns
    -------
    bool
        True if both hold the same keys and every value is the same value.
    """
    if is_same_value(a, b):
        return True
    if not isinstance(a, Mapping) or not isinstance(b, Mapping):
        return False
    if len(a) != len(b):
        return False
    for key in a:
        if key not in b or not is_same_value(a[key], b[key]):
            return False
    return True


def get_masked_context(
    context_types: Optional[Mapping[str, Any]],
    unmasked_context: Optional[Mapping[str, Any]],
) -> Mapping[str, Any]:
    """Pick the keys declared by ``context_types`` out of ``unmasked_context``.

    Undeclared types see an empty, read-only context. Missing keys map to None.
    """
    if not context_types:
        return EMPTY_OBJECT
    source = unmasked_context or EMPTY_OBJECT
    return {key: source.get(key) for key in context_types}
