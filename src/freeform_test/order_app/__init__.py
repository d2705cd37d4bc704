"""
Order Test App - Sample Form definitions for testing FreeForm.

Usage:
    # Import to register the forms
    import freeform_test.order_app

    from freeform_test.order_app import OrderForm, LineItemForm
"""
from .forms import AddressForm, LineItemForm, OrderForm, RushOrderForm

__all__ = ["AddressForm", "LineItemForm", "OrderForm", "RushOrderForm"]
