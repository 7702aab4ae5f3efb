"""Element model: the immutable description of what to render.

An element pairs a *type* with *props*:
    - str type: host element (``"div"``, ``"span"``)
    - Component subclass: class-style component
    - other callable: function-style component, ``fn(props)``
    - ForwardRef: ``forward_ref(render)``, rendered as ``render(props, ref)``
    - Fragment / StrictMode / Profiler: transparent grouping types
    - context.provider / context.consumer: new-style context
    - Portal: ``create_portal(children, container)``

Props are a fresh dict per element so a new render always carries a new
props reference. ``key`` and ``ref`` are kept off the props.

Usage:
    from testrender.core.elements import create_element as h

    tree = h("div", {"id": "root"}, h("span", None, "hello"))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable


class Element:
    """A single node of an element graph.

    Parameters
    ----------
    type : Any
        Element type (see module docstring).
    props : dict
        Props, including ``children`` when the element has any.
    key : Any, optional
        Reconciliation key among siblings.
    ref : Any, optional
        Callable or object with a ``current`` attribute.
    """

    __slots__ = ("type", "props", "key", "ref", "owner")

    def __init__(
        self,
        type: Any,
        props: dict[str, Any],
        key: Any = None,
        ref: Any = None,
        owner: Any = None,
    ) -> None:
        self.type = type
        self.props = props
        self.key = key
        self.ref = ref
        self.owner = owner

    def __repr__(self) -> str:
        key = f" key={self.key!r}" if self.key is not None else ""
        return f"<Element {get_type_name(self.type)}{key}>"


@dataclass(frozen=True, eq=False)
class SpecialType:
    """Marker type for built-in, non-component element types."""

    name: str

    def __repr__(self) -> str:
        return self.name


Fragment = SpecialType("Fragment")
StrictMode = SpecialType("StrictMode")
Profiler = SpecialType("Profiler")


@dataclass(frozen=True, eq=False)
class ForwardRef:
    """Element type whose render function receives ``(props, ref)``."""

    render: Callable[[Any, Any], Any]

    @property
    def display_name(self) -> str:
        inner = getattr(self.render, "display_name", None) or getattr(self.render, "__name__", "")
        return f"ForwardRef({inner})" if inner else "ForwardRef"


def forward_ref(render: Callable[[Any, Any], Any]) -> ForwardRef:
    """Wrap ``render(props, ref)`` as a forwarding element type."""
    if not callable(render):
        raise TypeError(f"forward_ref requires a render function, got {type(render).__name__}")
    return ForwardRef(render)


@dataclass(eq=False)
class Context:
    """New-style context object created by :func:`create_context`."""

    default_value: Any
    provider: "ContextProvider" = field(init=False, repr=False)
    consumer: "ContextConsumer" = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.provider = ContextProvider(self)
        self.consumer = ContextConsumer(self)


@dataclass(frozen=True, eq=False)
class ContextProvider:
    """Provides ``props["value"]`` to consumers below it."""

    context: Context

    def __repr__(self) -> str:
        return "Context.Provider"


@dataclass(frozen=True, eq=False)
class ContextConsumer:
    """Calls ``props["children"](value)`` with the nearest provided value."""

    context: Context

    def __repr__(self) -> str:
        return "Context.Consumer"


def create_context(default_value: Any = None) -> Context:
    return Context(default_value)


@dataclass(frozen=True, eq=False)
class Portal:
    """Renders ``children`` into a separate host container."""

    children: Any
    container: Any
    key: Any = None


def create_portal(children: Any, container: Any, key: Any = None) -> Portal:
    return Portal(children, container, key)


def create_element(type: Any, props: dict[str, Any] | None = None, *children: Any, key: Any = None, ref: Any = None) -> Element:
    """Build an :class:`Element`.

    Parameters
    ----------
    type : Any
        Element type.
    props : dict, optional
        Props; copied into a fresh dict. ``key``/``ref`` entries are lifted
        out of props.
    *children : Any
        One child is stored as ``props["children"]``; several as a list.
    key, ref : Any, optional
        Explicit key/ref (override entries found in ``props``).

    Returns
    -------
    Element
    """
    if type is None:
        raise TypeError("create_element: type is invalid, expected a string or a component but got None")
    new_props = dict(props) if props else {}
    if key is None:
        key = new_props.pop("key", None)
    else:
        new_props.pop("key", None)
    if ref is None:
        ref = new_props.pop("ref", None)
    else:
        new_props.pop("ref", None)
    if len(children) == 1:
        new_props["children"] = children[0]
    elif len(children) > 1:
        new_props["children"] = list(children)
    default_props = getattr(type, "default_props", None)
    if default_props:
        for name, value in default_props.items():
            if new_props.get(name) is None:
                new_props[name] = value
    return Element(type, new_props, key=key, ref=ref)


def is_valid_element(value: Any) -> bool:
    return isinstance(value, Element)


def is_forward_ref(element: Any) -> bool:
    return isinstance(element, Element) and isinstance(element.type, ForwardRef)


def get_type_name(type: Any) -> str:
    """Display name of an element type (``"Unknown"`` when anonymous)."""
    if isinstance(type, str):
        return type
    for attr in ("display_name", "__name__"):
        name = getattr(type, attr, None)
        if name:
            return name
    if isinstance(type, (SpecialType, ContextProvider, ContextConsumer)):
        return repr(type)
    return "Unknown"


def get_display_name(element: Any) -> str:
    """Display name of an element, text node, or empty slot."""
    if element is None:
        return "#empty"
    if isinstance(element, (str, int, float)) and not isinstance(element, bool):
        return "#text"
    return get_type_name(element.type)
