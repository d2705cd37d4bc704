from ._meta import config, logger
from .callback import NestedFormCallbacks
from .helper import nested_form_for

__all__ = ["config", "logger", "NestedFormCallbacks", "nested_form_for"]
