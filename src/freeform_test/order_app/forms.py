"""
Sample Form Definitions for FreeForm Testing

An order with its line items, shipping addresses and free-form notes.
Forms are defined as classes that inherit from Form and register
automatically.
"""
from decimal import Decimal
from typing import List, Optional

from freeform.form import Form, NestedForm


# ============================================================================
# Nested Forms
# ============================================================================

class LineItemForm(Form):
    """A product line of an order"""
    sku: Optional[str] = None
    qty: int = 1
    unit_price: Decimal = Decimal("0")

    class Meta:
        key = "line-item"
        name = "Line Item"


class AddressForm(Form):
    """Shipping address"""
    street: Optional[str] = None
    city: Optional[str] = None
    country: str = "US"
    tags: List[str] = []

    class Meta:
        key = "address"
        name = "Address"
        initializer = {"country": "US"}


# ============================================================================
# Order Form
# ============================================================================

class OrderForm(Form):
    """Customer order with nested line items and addresses"""
    customer: Optional[str] = None
    priority: int = 0

    line_items: NestedForm(LineItemForm, class_initializer="line_item_defaults")
    addresses: NestedForm(AddressForm)
    notes: NestedForm()

    class Meta:
        key = "order"
        name = "Order"
        desc = "Customer order with line items"


class RushOrderForm(OrderForm):
    """Order shipped with priority, its lines default to a single unit"""
    courier: Optional[str] = None
    priority = 1

    class Meta:
        key = "rush-order"
        name = "Rush Order"
