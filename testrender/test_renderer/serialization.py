"""Read-only projections of a committed tree.

to_json:
    Host nodes and text only, for snapshot comparison. Each host node is a
    :class:`TestRendererJSON` (a dict with keys ``type``, ``props`` minus
    ``children``, and ``children``), tagged through the class attribute
    ``typeof`` so snapshot tooling can recognise it without an extra key.

to_tree:
    Every composite and host node, for structural assertions:
        composite → {node_type: "component", type, props, instance, rendered}
        host      → {node_type: "host", type, props, instance: None,
                     rendered: [flattened children]}
        text      → raw string
    Root, portal and transparent kinds are walked through without emitting a
    node. An unknown tag raises instead of being silently mis-described.

Both are pure and recompute on every call.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from ..core.errors import InvariantViolation
from ..reconciler import host_config
from ..reconciler.fiber import Fiber, WorkTag

TEST_JSON_MARKER = "testrender.test.json"

_TRANSPARENT_TAGS = frozenset({
    WorkTag.FRAGMENT,
    WorkTag.CONTEXT_PROVIDER,
    WorkTag.CONTEXT_CONSUMER,
    WorkTag.MODE,
    WorkTag.PROFILER,
    WorkTag.FORWARD_REF,
})


class TestRendererJSON(dict):
    """Serialized host node; compares equal to a plain dict."""

    __test__ = False  # not a pytest test class
    typeof = TEST_JSON_MARKER


JSONNode = Union[TestRendererJSON, str]


def is_test_json(value: Any) -> bool:
    return getattr(value, "typeof", None) == TEST_JSON_MARKER


def instance_to_json(inst: Any) -> JSONNode:
    """Serialize one host instance (recursively)."""
    if isinstance(inst, host_config.TextInstance):
        return inst.text
    if isinstance(inst, host_config.Instance):
        props = {key: value for key, value in inst.props.items() if key != "children"}
        rendered_children = [instance_to_json(child) for child in inst.children] if inst.children else None
        return TestRendererJSON(type=inst.type, props=props, children=rendered_children)
    raise InvariantViolation(f"Unexpected node type in to_json: {getattr(inst, 'tag', type(inst).__name__)}")


def container_to_json(container: Optional[host_config.Container]) -> Union[JSONNode, list[JSONNode], None]:
    if container is None or not container.children:
        return None
    if len(container.children) == 1:
        return instance_to_json(container.children[0])
    return [instance_to_json(child) for child in container.children]


def _siblings(node: Optional[Fiber]) -> list[Fiber]:
    out = []
    while node is not None:
        out.append(node)
        node = node.sibling
    return out


def flatten(values: list[Any]) -> list[Any]:
    """Flatten arbitrarily nested lists, dropping nothing."""
    result: list[Any] = []
    stack = [iter(values)]
    while stack:
        for value in stack[-1]:
            if isinstance(value, list):
                stack.append(iter(value))
                break
            result.append(value)
        else:
            stack.pop()
    return result


def children_to_tree(node: Optional[Fiber]) -> Any:
    if node is None:
        return None
    children = _siblings(node)
    if len(children) == 1:
        return fiber_to_tree(children[0])
    return flatten([fiber_to_tree(child) for child in children])


def fiber_to_tree(node: Optional[Fiber]) -> Any:
    if node is None:
        return None
    tag = node.tag
    if tag in (WorkTag.HOST_ROOT, WorkTag.HOST_PORTAL):
        return children_to_tree(node.child)
    if tag == WorkTag.CLASS_COMPONENT:
        return {
            "node_type": "component",
            "type": node.type,
            "props": dict(node.memoized_props),
            "instance": node.state_node,
            "rendered": children_to_tree(node.child),
        }
    if tag == WorkTag.FUNCTIONAL_COMPONENT:
        return {
            "node_type": "component",
            "type": node.type,
            "props": dict(node.memoized_props),
            "instance": None,
            "rendered": children_to_tree(node.child),
        }
    if tag == WorkTag.HOST_COMPONENT:
        return {
            "node_type": "host",
            "type": node.type,
            "props": dict(node.memoized_props),
            "instance": None,
            "rendered": flatten([fiber_to_tree(child) for child in _siblings(node.child)]),
        }
    if tag == WorkTag.HOST_TEXT:
        return node.memoized_props
    if tag in _TRANSPARENT_TAGS:
        return children_to_tree(node.child)
    raise InvariantViolation(f"to_tree() does not yet know how to handle nodes with tag={tag!r}")
