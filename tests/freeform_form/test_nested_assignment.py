"""
Tests for nested attribute mass-assignment

This module tests:
- Reconciliation of children count against parameter entries
- Positional distribution of attribute maps
- Idempotence of repeated assignments
- Error propagation without rollback
"""
import pytest

from freeform.error import UnprocessableError
from freeform.form import Form, NestedForm, normalize_entries

from freeform_test.order_app import LineItemForm, OrderForm


class PartForm(Form):
    __abstract__ = True
    name: str = None


class AssemblyForm(Form):
    __abstract__ = True
    label: str = None
    parts: NestedForm(PartForm)


class BuildForm(Form):
    __abstract__ = True
    assemblies: NestedForm(AssemblyForm)


class TestReconciliation:
    """Children are built to cover the entries, never removed"""

    def test_assign_to_empty_form(self, order):
        order.line_items_attributes = [(None, {"qty": 2}), (None, {"qty": 5})]

        assert len(order.line_items) == 2
        assert [item.qty for item in order.line_items] == [2, 5]
        assert all(isinstance(item, LineItemForm) for item in order.line_items)

    def test_existing_child_is_refilled(self, order):
        existing = order.build_line_item({"sku": "OLD", "qty": 9})

        order.line_items_attributes = [
            (None, {"sku": "A", "qty": 1}),
            (None, {"sku": "B", "qty": 2}),
            (None, {"sku": "C", "qty": 3}),
        ]

        assert len(order.line_items) == 3
        assert order.line_items[0] is existing
        assert existing.sku == "A"
        assert existing.qty == 1
        assert [item.sku for item in order.line_items] == ["A", "B", "C"]

    @pytest.mark.parametrize("existing, submitted", [(0, 0), (0, 3), (2, 1), (2, 2), (1, 4)])
    def test_children_count_is_max_of_existing_and_submitted(self, order, existing, submitted):
        for _ in range(existing):
            order.build_line_items()

        order.assign_nested("line_items", [(None, {"qty": i + 1}) for i in range(submitted)])

        assert len(order.line_items) == max(existing, submitted)

    def test_extra_children_are_untouched(self, order):
        first = order.build_line_item({"sku": "FIRST"})
        second = order.build_line_item({"sku": "SECOND", "qty": 7})

        order.line_items_attributes = [(None, {"sku": "NEW"})]

        assert order.line_items == [first, second]
        assert first.sku == "NEW"
        assert second.sku == "SECOND"
        assert second.qty == 7

    def test_empty_entries_build_nothing(self, order):
        order.line_items_attributes = []
        assert order.line_items == []

        order.line_items_attributes = None
        assert order.line_items == []


class TestDistribution:
    """Attribute maps are distributed positionally"""

    def test_identifier_is_not_matched(self, order):
        order.line_items_attributes = [("42", {"sku": "X"}), ("7", {"sku": "Y"})]

        assert [item.sku for item in order.line_items] == ["X", "Y"]

    def test_mapping_entries_keep_insertion_order(self, order):
        order.line_items_attributes = {"1": {"sku": "first"}, "0": {"sku": "second"}}

        assert [item.sku for item in order.line_items] == ["first", "second"]

    def test_fill_routes_nested_attributes(self):
        form = OrderForm({
            "customer": "ACME",
            "line_items_attributes": [(None, {"sku": "A1", "qty": "3"})],
        })

        assert form.customer == "ACME"
        assert len(form.line_items) == 1
        assert form.line_items[0].qty == 3

    def test_partial_attribute_map_keeps_other_values(self, order):
        item = order.build_line_item({"sku": "KEEP", "qty": 4})
        order.line_items_attributes = [(None, {"qty": 8})]

        assert item.sku == "KEEP"
        assert item.qty == 8

    def test_deeply_nested_assignment(self):
        form = BuildForm()
        form.fill({
            "assemblies_attributes": [
                (None, {"label": "frame", "parts_attributes": [(None, {"name": "bolt"}), (None, {"name": "nut"})]}),
                (None, {"label": "wheel"}),
            ]
        })

        assert [a.label for a in form.assemblies] == ["frame", "wheel"]
        assert [p.name for p in form.assemblies[0].parts] == ["bolt", "nut"]
        assert form.assemblies[1].parts == []


class TestIdempotence:
    """Assigning the same entries twice builds nothing the second time"""

    def test_repeat_assignment(self, order):
        entries = [(None, {"sku": "A", "qty": 2}), (None, {"sku": "B", "qty": 5})]

        order.line_items_attributes = entries
        children = list(order.line_items)
        first_pass = [item.to_dict() for item in order.line_items]

        order.line_items_attributes = entries

        assert len(order.line_items) == 2
        assert all(a is b for a, b in zip(children, order.line_items))
        assert [item.to_dict() for item in order.line_items] == first_pass


class TestAssignmentErrors:
    """Failures propagate, already built children stay appended"""

    def test_invalid_value_propagates_without_rollback(self, order):
        with pytest.raises(UnprocessableError) as excinfo:
            order.line_items_attributes = [(None, {"qty": 1}), (None, {"qty": "many"})]

        assert excinfo.value.errcode == "N00.202"
        assert len(order.line_items) == 2
        assert order.line_items[0].qty == 1

    def test_unknown_child_attribute_propagates(self, order):
        with pytest.raises(UnprocessableError) as excinfo:
            order.line_items_attributes = [(None, {"colour": "red"})]

        assert excinfo.value.errcode == "N00.203"
        assert len(order.line_items) == 1

    @pytest.mark.parametrize("entry", [(None,), ("a", {}, "extra"), "ab", {"qty": 1}])
    def test_malformed_entry_is_rejected_before_building(self, order, entry):
        with pytest.raises(UnprocessableError) as excinfo:
            order.line_items_attributes = [entry]

        assert excinfo.value.errcode == "N00.204"
        assert order.line_items == []

    def test_attributes_must_be_a_mapping(self, order):
        with pytest.raises(UnprocessableError) as excinfo:
            order.line_items_attributes = [(None, ["qty", 1])]

        assert excinfo.value.errcode == "N00.205"


def test_normalize_entries():
    assert normalize_entries(None, "items") == []
    assert normalize_entries({"0": {"a": 1}}, "items") == [("0", {"a": 1})]
    assert normalize_entries([[1, {"a": 1}], (2, None)], "items") == [(1, {"a": 1}), (2, None)]
