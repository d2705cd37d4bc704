"""
Tests for Form construction and fill

This module tests:
- Default values and default initializers
- Property validation through the annotations
- Strict and lenient handling of unknown attributes
"""
from decimal import Decimal
from typing import Any

import pytest

from freeform.error import UnprocessableError
from freeform.form import Form, NestedForm
from freeform.form import base as form_base

from freeform_test.order_app import AddressForm, LineItemForm, OrderForm, RushOrderForm


class CounterForm(Form):
    __abstract__ = True
    value: int = 0

    class Meta:
        initializer = lambda: {"value": 10}  # noqa: E731


class TestConstruction:

    def test_defaults(self):
        item = LineItemForm()

        assert item.sku is None
        assert item.qty == 1
        assert item.unit_price == Decimal("0")

    def test_params_and_keywords(self):
        item = LineItemForm({"sku": "A1", "qty": 2}, qty=3)

        assert item.sku == "A1"
        assert item.qty == 3

    def test_meta_initializer_is_merged_first(self):
        assert AddressForm().country == "US"
        assert AddressForm({"country": "FR"}).country == "FR"

    def test_callable_meta_initializer(self):
        assert CounterForm().value == 10
        assert CounterForm(value=1).value == 1

    def test_repr(self):
        form = OrderForm(customer="ACME")
        form.build_line_item()

        assert repr(form) == "<OrderForm customer='ACME' priority=0 line_items=[1] addresses=[0] notes=[0]>"


class TestFill:

    def test_values_are_validated(self):
        item = LineItemForm().fill({"qty": "4", "unit_price": "9.99"})

        assert item.qty == 4
        assert item.unit_price == Decimal("9.99")

    def test_fill_returns_form(self):
        item = LineItemForm()
        assert item.fill({"sku": "B2"}) is item
        assert item.fill(None) is item

    def test_invalid_value(self):
        with pytest.raises(UnprocessableError) as excinfo:
            LineItemForm({"qty": "a dozen"})

        error = excinfo.value
        assert error.errcode == "N00.202"
        assert error.status_code == 422
        assert error.details[0]["loc"] == ()
        assert "LineItemForm.qty" in error.message

    def test_params_must_be_a_mapping(self):
        with pytest.raises(UnprocessableError) as excinfo:
            LineItemForm().fill([("qty", 1)])

        assert excinfo.value.errcode == "N00.201"

    def test_unknown_attribute_is_rejected(self):
        with pytest.raises(UnprocessableError) as excinfo:
            OrderForm({"discount": 10})

        assert excinfo.value.errcode == "N00.203"
        assert excinfo.value.content["details"] == {"attribute": "discount"}

    def test_unknown_nested_attributes_key_is_rejected(self):
        with pytest.raises(UnprocessableError):
            OrderForm({"payments_attributes": [(None, {})]})

    def test_unknown_attribute_is_skipped_when_lenient(self, monkeypatch):
        monkeypatch.setattr(form_base, "STRICT_FILL", False)

        form = OrderForm({"discount": 10, "customer": "ACME"})

        assert form.customer == "ACME"
        assert not hasattr(form, "discount")


class KindForm(Form):
    __abstract__ = True
    kind: str = None
    note: Any = None

    class Meta:
        initializer = {"kind": "base"}


class SubKindForm(KindForm):
    __abstract__ = True


class KeyedSubKindForm(KindForm):
    __abstract__ = True

    class Meta:
        key = "keyed-sub-kind"


class KindHolderForm(Form):
    __abstract__ = True
    kinds: NestedForm(SubKindForm)


class TestInheritance:

    def test_meta_initializer_is_inherited(self):
        assert SubKindForm().kind == "base"
        assert KeyedSubKindForm().kind == "base"
        assert KeyedSubKindForm.Meta.key == "keyed-sub-kind"
        assert SubKindForm.Meta.key == "sub-kind-form"

    def test_inherited_meta_initializer_through_builder(self):
        holder = KindHolderForm()

        assert holder.build_kinds().kind == "base"

        holder.kinds_attributes = [(None, {}), (None, {"kind": "custom"})]
        assert [kind.kind for kind in holder.kinds] == ["base", "custom"]

    def test_plain_assignment_overrides_inherited_default(self):
        assert OrderForm().priority == 0
        assert RushOrderForm().priority == 1
        assert RushOrderForm.get_properties()["priority"].default == 1
        assert RushOrderForm(priority="3").priority == 3

        with pytest.raises(UnprocessableError):
            RushOrderForm(priority="urgent")


class TestProperties:

    def test_untyped_property_is_not_validated(self):
        prop = KindForm.get_properties()["note"]
        value = object()

        assert prop.annotation is None
        assert prop.adapter is None
        assert KindForm(note=value).note is value

    def test_typed_property_keeps_annotation(self):
        prop = LineItemForm.get_properties()["qty"]

        assert prop.annotation is int
        assert prop.default == 1
        assert prop.validate_value("7") == 7
