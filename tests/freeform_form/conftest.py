import pytest

from freeform_test.order_app import OrderForm


@pytest.fixture(scope="function")
def order():
    """Empty order form - created once per test function"""
    return OrderForm()


@pytest.fixture(scope="function")
def line_item_defaults():
    """
    Yield a setter for the `line_item_defaults` class initializer of OrderForm
    and reset the slot once the test is done.
    """
    def _configure(value):
        OrderForm.set_initializer("line_item_defaults", value)

    yield _configure
    OrderForm.set_initializer("line_item_defaults", None)
