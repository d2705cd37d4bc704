"""
Form Type System

Form types are created by inheriting Form and declaring properties and
nested forms with annotation syntax.

Usage:
    class LineItemForm(Form):
        sku: str
        qty: int = 1

    class OrderForm(Form):
        customer: str
        line_items: NestedForm(LineItemForm, class_initializer="line_item_defaults")

        class Meta:
            key = "order"
            name = "Order"

    form = OrderForm({"customer": "ACME"})
    form.line_items_attributes = [(None, {"sku": "A1", "qty": 2})]
"""
from collections.abc import Mapping

from types import MappingProxyType

from pyrsistent import pmap

from freeform.error import ConfigurationError, UnprocessableError
from freeform.helper import ClassRegistry, camel_to_lower, camel_to_title

from ._meta import config, logger
from .datadef import FormMeta, resolve_initializer
from .nested import NestedFormMixin, check_member_name
from .property import default_value, extract_declarations

STRICT_FILL = config.STRICT_FILL


def _inherited(cls, attr, factory):
    table = {}
    for base in reversed(cls.__mro__[1:]):
        table.update(base.__dict__.get(attr, {}))

    return factory(table)


class Form(NestedFormMixin):
    """
    Base class of all form types.

    Subclasses are registered in `FormRegistry` under `Meta.key` (the lower
    dashed class name by default) unless they set `__abstract__ = True`.
    """
    __abstract__ = True
    __properties__ = MappingProxyType({})

    Meta = FormMeta(name="Form")

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        cls.__properties__ = _inherited(cls, "__properties__", MappingProxyType)
        cls.__nested__ = _inherited(cls, "__nested__", MappingProxyType)
        cls.__builders__ = _inherited(cls, "__builders__", pmap)

        properties, nested = extract_declarations(cls)
        for name in properties:
            check_member_name(cls, name)
            if name in cls.__nested__:
                raise ConfigurationError(
                    "N00.103",
                    f"Property [{name}] conflicts with a nested attribute of form [{cls.__name__}]",
                    {"attribute": name, "form": cls.__qualname__}
                )

        # Plain assignments (`priority = 5`) override inherited property defaults
        overrides = {
            name: prop.set(default=cls.__dict__[name])
            for name, prop in cls.__properties__.items()
            if name in cls.__dict__ and name not in properties
        }

        cls.__properties__ = MappingProxyType({**cls.__properties__, **overrides, **properties})

        for name, decl in nested.items():
            cls.declare_nested(
                name,
                decl.form_class,
                class_initializer=decl.class_initializer,
                initializer=decl.initializer,
            )

        # Key and name are per type, the initializer is inherited
        meta_cls = cls.__dict__.get('Meta')
        cls.Meta = FormMeta.create(meta_cls, defaults={
            'key': camel_to_lower(cls.__name__),
            'name': camel_to_title(cls.__name__),
            'initializer': super(cls, cls).Meta.initializer,
        })

        if cls.__dict__.get('__abstract__'):
            return

        FormRegistry.register(cls.Meta.key)(cls)

    def __init__(self, params=None, **kwargs):
        object.__setattr__(self, '_children', {})
        for name, prop in self.__properties__.items():
            object.__setattr__(self, name, default_value(prop))

        values = self.default_initializer()
        values.update(params or {})
        values.update(kwargs)
        self.fill(values)

    @classmethod
    def default_initializer(cls):
        return resolve_initializer(cls.Meta.initializer, cls.__name__)

    @classmethod
    def get_properties(cls):
        return cls.__properties__

    def fill(self, params):
        ''' Assign the values of a parameter map onto the form.

            Property values are validated against their annotation,
            `<attr>_attributes` keys are mass-assigned to the nested forms.
        '''
        if params is None:
            return self

        if not isinstance(params, Mapping):
            raise UnprocessableError(
                "N00.201",
                f"Form [{type(self).__name__}] must be filled with a mapping, got [{type(params).__name__}]",
                None
            )

        for key, value in params.items():
            self._fill_value(key, value)

        return self

    def _fill_value(self, key, value):
        cls = type(self)
        prop = cls.__properties__.get(key)
        if prop is not None:
            object.__setattr__(self, key, prop.validate_value(value, cls.__name__))
            return

        attribute = self._nested_attribute_of(key) if isinstance(key, str) else None
        if attribute is not None:
            self.assign_nested(attribute, value)
            return

        if STRICT_FILL:
            raise UnprocessableError(
                "N00.203",
                f"Unknown attribute [{key}] for form [{cls.__name__}]",
                {"attribute": key}
            )

        logger.debug('Skipped unknown attribute [%s] for form [%s]', key, cls.__name__)

    def to_dict(self):
        data = {name: getattr(self, name) for name in self.__properties__}
        for name in self.__nested__:
            data[name] = [child.to_dict() for child in self.nested(name)]

        return data

    def __repr__(self):
        fields = ' '.join(f'{name}={getattr(self, name)!r}' for name in self.__properties__)
        nested = ' '.join(f'{name}=[{len(self.nested(name))}]' for name in self.__nested__)
        return f"<{type(self).__name__} {' '.join(filter(None, (fields, nested)))}>"


FormRegistry = ClassRegistry(Form)
