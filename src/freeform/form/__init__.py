from ._meta import config, logger
from .base import Form, FormRegistry
from .datadef import FormMeta, FormProperty, NestedFormSpec
from .nested import normalize_entries
from .property import NestedForm

__all__ = [
    "config", "logger",
    "Form", "FormRegistry", "FormMeta", "FormProperty",
    "NestedForm", "NestedFormSpec", "normalize_entries",
]
