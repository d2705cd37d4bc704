from collections.abc import Mapping
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError
from pyrsistent import pmap

from freeform.datadef import DataModel
from freeform.error import ConfigurationError, UnprocessableError


def freeze_initializer(value, source):
    ''' Validate an initializer (a mapping or a zero-argument callable)
        and freeze it, so defaults are never shared as a mutable dict.
    '''
    if value is None or callable(value):
        return value

    if isinstance(value, Mapping):
        return pmap(value)

    raise ConfigurationError(
        "N00.105",
        f"Initializer of [{source}] must be a mapping or a callable, got [{type(value).__name__}]",
        None
    )


def resolve_initializer(value, source):
    ''' Produce a fresh parameter dict from a frozen initializer. Callables are
        invoked on every call.
    '''
    if value is None:
        return {}

    if callable(value):
        value = value()

    if value is None:
        return {}

    if not isinstance(value, Mapping):
        raise ConfigurationError(
            "N00.107",
            f"Initializer of [{source}] must produce a mapping, got [{type(value).__name__}]",
            None
        )

    return dict(value)


class FormMeta(DataModel):
    """
    Metadata of a Form type. Built from the `Meta` inner class:
    - key: registry key (defaults to the lower-dashed class name)
    - name: human readable name
    - desc: description (optional)
    - initializer: default parameters, a mapping or a zero-argument callable (optional)
    """
    key: Optional[str] = None
    name: str
    desc: Optional[str] = None
    initializer: Any = None


class FormProperty(DataModel):
    ''' A declared scalar attribute of a form. '''
    name: str
    annotation: Any = None
    default: Any = None
    adapter: Any = None

    @classmethod
    def define(cls, name, annotation, default=None):
        # Untyped (Any) properties are stored without annotation nor adapter
        if annotation is Any or isinstance(annotation, str):
            return cls(name=name, default=default)

        return cls(name=name, annotation=annotation, default=default, adapter=TypeAdapter(annotation))

    def validate_value(self, value, form_name=None):
        if self.adapter is None:
            return value

        try:
            return self.adapter.validate_python(value)
        except ValidationError as e:
            raise UnprocessableError(
                "N00.202",
                f"Invalid value for [{form_name}.{self.name}]: {value!r}",
                e.errors(include_url=False)
            ) from e


class NestedFormDecl(DataModel):
    ''' Options collected from a `NestedForm(...)` annotation. '''
    form_class: Any = None
    class_initializer: Optional[str] = None
    initializer: Any = None


class NestedFormSpec(DataModel):
    """
    Registration of a nested attribute on a parent form type.

    A NestedFormSpec is immutable. Reconfiguring the class initializer replaces the
    spec registered on the parent with an updated copy.
    """
    name: str
    singular: str
    form_class: Any
    parent: str
    class_initializer: Optional[str] = None
    initializer: Any = None

    def default_params(self):
        return resolve_initializer(self.initializer, f"{self.parent}.{self.name}")

    def build(self, initializer=None):
        params = self.default_params()
        if initializer:
            params.update(initializer)

        return self.form_class(params)
