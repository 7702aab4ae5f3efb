"""No-op test host: plain Python objects stand in for platform nodes.

There is no screen or DOM. Host elements become :class:`Instance` objects
and text becomes :class:`TextInstance`; both are arranged under a
:class:`Container` at commit time and read by ``to_json``.

Public instances (what refs and ``TestInstance.instance`` see for host
nodes) come from the container's ``create_node_mock`` callback, which
receives an element-like ``{type, props}`` value and defaults to returning
None.
"""

from __future__ import annotations

from typing import Any, Callable

from ..core.elements import Element

INSTANCE = "INSTANCE"
TEXT = "TEXT"
CONTAINER = "CONTAINER"


def default_create_node_mock(element: Element) -> Any:
    return None


class Container:
    """Root host container."""

    tag = CONTAINER

    def __init__(self, create_node_mock: Callable[[Element], Any] | None = None) -> None:
        self.children: list[Instance | TextInstance] = []
        self.create_node_mock = create_node_mock or default_create_node_mock


class Instance:
    """Host node for a string-typed element."""

    tag = INSTANCE

    def __init__(self, type: str, props: dict[str, Any], root_container: Container) -> None:
        self.type = type
        self.props = props
        self.children: list[Instance | TextInstance] = []
        self.root_container = root_container

    def __repr__(self) -> str:
        return f"<Instance {self.type} children={len(self.children)}>"


class TextInstance:
    """Host node for a text child."""

    tag = TEXT

    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"<TextInstance {self.text!r}>"


def create_instance(type: str, props: dict[str, Any], root_container: Container) -> Instance:
    return Instance(type, props, root_container)


def create_text_instance(text: str) -> TextInstance:
    return TextInstance(text)


def get_public_instance(inst: Any) -> Any:
    if isinstance(inst, Instance):
        return inst.root_container.create_node_mock(Element(inst.type, inst.props))
    return inst
