"""Test the component model shared by both engines.

Tests for testrender.core and testrender.utils.compare:
    - create_element copies props, lifts key/ref, packs children, applies defaults
    - forward_ref / create_context / special types
    - Component.set_state argument checking and the no-op updater
    - Lifecycle classification (uses_modern_lifecycle)
    - is_same_value / shallow_equal / get_masked_context
    - prop type validators report (once) instead of raising

Run:
    pytest tests/test_core.py -v
"""

import logging
import math

import pytest

from testrender.core import prop_types as pt
from testrender.core.component import (
    Component,
    PureComponent,
    call_hooks,
    get_component_name,
    is_pure,
    should_construct,
    uses_modern_lifecycle,
)
from testrender.core.elements import (
    Fragment,
    create_context,
    create_element as h,
    forward_ref,
    get_display_name,
    get_type_name,
    is_forward_ref,
    is_valid_element,
)
from testrender.core.errors import CardinalityError, InvariantViolation, RendererError, invariant
from testrender.utils.compare import EMPTY_OBJECT, get_masked_context, is_same_value, shallow_equal


# ============================================================================
# ELEMENTS
# ============================================================================

class TestCreateElement:

    def test_props_are_copied(self):
        props = {"id": "a"}
        el = h("div", props)
        assert el.props == {"id": "a"}
        assert el.props is not props

    def test_key_and_ref_lifted_out_of_props(self):
        ref = object()
        el = h("div", {"key": "k", "ref": ref, "id": "a"})
        assert el.key == "k"
        assert el.ref is ref
        assert el.props == {"id": "a"}

    def test_explicit_key_wins(self):
        el = h("div", {"key": "from-props"}, key="explicit")
        assert el.key == "explicit"
        assert "key" not in el.props

    def test_single_child_stored_directly(self):
        el = h("span", None, "hi")
        assert el.props["children"] == "hi"

    def test_several_children_stored_as_list(self):
        el = h("ul", None, h("li", None, "a"), h("li", None, "b"))
        assert isinstance(el.props["children"], list)
        assert len(el.props["children"]) == 2

    def test_default_props_fill_missing_and_none(self):
        class Button(Component):
            default_props = {"kind": "primary", "size": "m"}

            def render(self):
                return None

        el = h(Button, {"size": None, "label": "ok"})
        assert el.props == {"kind": "primary", "size": "m", "label": "ok"}

    def test_none_type_rejected(self):
        with pytest.raises(TypeError, match="type is invalid"):
            h(None)

    def test_every_call_builds_fresh_props(self):
        assert h("div").props is not h("div").props

    def test_is_valid_element(self):
        assert is_valid_element(h("div"))
        assert not is_valid_element("div")
        assert not is_valid_element({"type": "div"})


class TestSpecialTypes:

    def test_forward_ref_display_name(self):
        def FancyInput(props, ref):
            return h("input", {"ref": ref})

        fancy = forward_ref(FancyInput)
        assert fancy.display_name == "ForwardRef(FancyInput)"
        assert is_forward_ref(h(fancy))
        assert not is_forward_ref(h("input"))

    def test_forward_ref_requires_callable(self):
        with pytest.raises(TypeError, match="render function"):
            forward_ref("nope")

    def test_context_pairs_provider_and_consumer(self):
        ctx = create_context("light")
        assert ctx.default_value == "light"
        assert ctx.provider.context is ctx
        assert ctx.consumer.context is ctx

    def test_type_names(self):
        class Panel(Component):
            display_name = "FancyPanel"

        def list_item(props):
            return None

        assert get_type_name("div") == "div"
        assert get_type_name(Panel) == "FancyPanel"
        assert get_type_name(list_item) == "list_item"
        assert get_type_name(Fragment) == "Fragment"

    def test_display_names_for_children(self):
        assert get_display_name(None) == "#empty"
        assert get_display_name("text") == "#text"
        assert get_display_name(3) == "#text"
        assert get_display_name(h("p")) == "p"


# ============================================================================
# COMPONENT
# ============================================================================

class TestComponent:

    def test_initial_state_is_none(self):
        inst = Component({"a": 1})
        assert inst.props == {"a": 1}
        assert inst.state is None

    def test_set_state_rejects_non_mapping(self):
        inst = Component()
        with pytest.raises(TypeError, match="takes a dict of state variables"):
            inst.set_state(5)

    def test_unowned_instance_warns_on_set_state(self, caplog):
        class Orphan(Component):
            def render(self):
                return None

        with caplog.at_level(logging.WARNING):
            Orphan().set_state({"a": 1})
        assert "not yet mounted" in caplog.text
        assert "Orphan" in caplog.text

    def test_render_must_be_overridden(self):
        with pytest.raises(NotImplementedError):
            Component().render()

    def test_classification(self):
        class Plain(Component):
            pass

        class Pure(PureComponent):
            pass

        def fn(props):
            return None

        assert should_construct(Plain)
        assert not should_construct(fn)
        assert is_pure(Pure)
        assert not is_pure(Plain)

    def test_modern_lifecycle_detection(self):
        class Legacy(Component):
            def component_will_mount(self):
                pass

        class Derived(Component):
            @staticmethod
            def get_derived_state_from_props(props, state):
                return None

        class Snapshotting(Component):
            def get_snapshot_before_update(self, prev_props, prev_state):
                return None

        assert not uses_modern_lifecycle(Legacy, Legacy())
        assert uses_modern_lifecycle(Derived, Derived())
        assert uses_modern_lifecycle(Snapshotting, Snapshotting())

    def test_call_hooks_skips_missing(self):
        calls = []

        class Partial(Component):
            def unsafe_component_will_mount(self):
                calls.append("unsafe")

        call_hooks(Partial(), ("component_will_mount", "unsafe_component_will_mount"))
        assert calls == ["unsafe"]

    def test_component_name_prefers_display_name(self):
        class Widget(Component):
            pass

        assert get_component_name(Widget) == "Widget"
        Widget.display_name = "Gadget"
        assert get_component_name(Widget) == "Gadget"


# ============================================================================
# ERRORS
# ============================================================================

class TestErrors:

    def test_invariant(self):
        invariant(True, "never raised")
        with pytest.raises(InvariantViolation, match="boom"):
            invariant(False, "boom")

    def test_invariant_violation_is_value_error(self):
        assert issubclass(InvariantViolation, ValueError)
        assert issubclass(InvariantViolation, RendererError)

    def test_cardinality_messages(self):
        assert str(CardinalityError(0, 'with node type: "div"')) == 'No instances found with node type: "div"'
        err = CardinalityError(3, "with props: {}")
        assert str(err) == "Expected 1 but found 3 instances with props: {}"
        assert err.count == 3


# ============================================================================
# COMPARE
# ============================================================================

class TestCompare:

    def test_scalars_compare_by_value(self):
        assert is_same_value("abc", "".join(["a", "bc"]))
        assert is_same_value(10**20, 10**20)
        assert is_same_value(None, None)

    def test_nan_is_same_as_itself(self):
        assert is_same_value(math.nan, float("nan"))

    def test_different_types_never_same(self):
        assert not is_same_value(1, 1.0)
        assert not is_same_value(True, 1)

    def test_containers_compare_by_identity(self):
        shared = [1]
        assert is_same_value(shared, shared)
        assert not is_same_value([1], [1])
        assert not is_same_value({}, {})

    def test_shallow_equal(self):
        handler = object()
        assert shallow_equal({"a": 1, "f": handler}, {"a": 1, "f": handler})
        assert not shallow_equal({"a": 1}, {"a": 1, "b": 2})
        assert not shallow_equal({"a": [1]}, {"a": [1]})
        assert shallow_equal(None, None)
        assert not shallow_equal(None, {})

    def test_masked_context(self):
        ambient = {"theme": "dark", "user": "ada"}
        assert get_masked_context({"theme": pt.any_value}, ambient) == {"theme": "dark"}
        assert get_masked_context({"missing": pt.any_value}, ambient) == {"missing": None}
        assert get_masked_context(None, ambient) is EMPTY_OBJECT


# ============================================================================
# PROP TYPES
# ============================================================================

class TestPropTypes:

    def test_valid_values_pass(self):
        specs = {"theme": pt.instance_of(str), "on_click": pt.callable_value()}
        assert pt.check_prop_types(specs, {"theme": "dark", "on_click": print}, "prop", "Button") == []

    def test_optional_value_may_be_none(self):
        assert pt.check_prop_types({"theme": pt.instance_of(str)}, {}, "context", "Title") == []

    def test_required_value_reports(self):
        failures = pt.check_prop_types(
            {"theme": pt.instance_of(str).is_required}, {"theme": None}, "context", "RequiredTitle"
        )
        assert len(failures) == 1
        assert "marked as required in `RequiredTitle`" in failures[0]

    def test_wrong_type_reports_and_logs_once(self, caplog):
        specs = {"count": pt.instance_of(int)}
        with caplog.at_level(logging.WARNING):
            first = pt.check_prop_types(specs, {"count": "3"}, "prop", "CounterOnce")
            second = pt.check_prop_types(specs, {"count": "3"}, "prop", "CounterOnce")
        assert first == second
        assert "expected `int`" in first[0]
        assert caplog.text.count("Failed prop type") == 1

    def test_reset_logged_failures_warns_again(self, caplog):
        specs = {"count": pt.instance_of(int)}
        with caplog.at_level(logging.WARNING):
            pt.check_prop_types(specs, {"count": "3"}, "prop", "CounterReset")
            pt.reset_logged_failures()
            pt.check_prop_types(specs, {"count": "3"}, "prop", "CounterReset")
        assert caplog.text.count("Failed prop type") == 2

    def test_non_callable_spec_reports(self):
        failures = pt.check_prop_types({"x": "int"}, {"x": 1}, "prop", "BadSpec")
        assert "must be a callable validator" in failures[0]

    def test_failing_validator_reported_not_raised(self):
        def explode(values, key, name, location):
            raise RuntimeError("validator crashed")

        failures = pt.check_prop_types({"x": explode}, {"x": 1}, "prop", "Exploding")
        assert "validator crashed" in failures[0]

    def test_element_frame_in_message(self):
        el = h("section", None)
        failures = pt.check_prop_types({"x": pt.instance_of(int).is_required}, {}, "prop", "Framed", element=el)
        assert failures[0].endswith("in section")
