"""
Nested forms

A form type registers nested (has-many) sub-forms in its `__nested__` table
(attribute name => NestedFormSpec). Every nested attribute `line_items` of a
form instance is then reachable through generic operations:

    form.nested("line_items")                   # or form.line_items
    form.build_nested("line_items", {...})      # or form.build_line_items / form.build_line_item
    form.assign_nested("line_items", entries)   # or form.line_items_attributes = entries

Mass-assignment reconciles the number of children with the number of
parameter entries (building the missing ones, never removing) and then fills
the children positionally. The identifier of each entry is not matched
against the children, callers submit entries in the children's order.
"""
from collections.abc import Mapping
from functools import partial
from types import MappingProxyType

from pyrsistent import pmap

from freeform.error import ConfigurationError, NotFoundError, UnprocessableError
from freeform.helper import ImmutableNamespace, is_identifier, singularize

from ._meta import config, logger
from .datadef import NestedFormSpec, freeze_initializer

BUILD_PREFIX = config.BUILD_PREFIX
NESTED_ATTRIBUTES_SUFFIX = config.NESTED_ATTRIBUTES_SUFFIX


def normalize_entries(entries, attribute):
    ''' Turn submitted parameters into a list of (identifier, attributes) pairs.

        A mapping (e.g. decoded `{"0": {...}, "1": {...}}` request parameters)
        contributes its items in insertion order.
    '''
    if entries is None:
        return []

    if isinstance(entries, Mapping):
        entries = entries.items()

    result = []
    for index, entry in enumerate(entries):
        if isinstance(entry, (str, bytes)) or not isinstance(entry, (tuple, list)) or len(entry) != 2:
            raise UnprocessableError(
                "N00.204",
                f"Nested entry #{index} of [{attribute}] must be an (identifier, attributes) pair",
                {"entry": repr(entry)}
            )

        identifier, attributes = entry
        if attributes is not None and not isinstance(attributes, Mapping):
            raise UnprocessableError(
                "N00.205",
                f"Attributes of nested entry #{index} of [{attribute}] must be a mapping",
                {"entry": repr(entry)}
            )

        result.append((identifier, attributes))

    return result


def check_member_name(cls, name):
    ''' Declared attributes must not shadow the members of Form (fill, nested, to_dict...) '''
    from .base import Form

    if hasattr(Form, name):
        raise ConfigurationError(
            "N00.109",
            f"Attribute [{name}] of form [{cls.__name__}] shadows a Form member",
            {"attribute": name, "form": cls.__qualname__}
        )


class NestedFormMixin(object):
    __nested__ = MappingProxyType({})
    __builders__ = pmap()

    # Declaration
    # ------------------------------------------------------------------------

    @classmethod
    def declare_nested(cls, attribute, form_class=None, class_initializer=None, initializer=None):
        """
        Register a nested form on this form type.

        Args:
            attribute: attribute name, unique within the form type
            form_class: Form type of the children (a form without fields when omitted)
            class_initializer: name of the initializer slot, see `get_initializer` / `set_initializer`
            initializer: default parameters of new children, a mapping or a zero-argument callable

        Returns:
            The registered NestedFormSpec
        """
        from .base import Form

        if not is_identifier(attribute):
            raise ConfigurationError(
                "N00.101",
                f"Invalid nested attribute name [{attribute!r}] on form [{cls.__name__}]",
                None
            )

        check_member_name(cls, attribute)

        if attribute in cls.__nested__:
            raise ConfigurationError(
                "N00.102",
                f"Nested attribute [{attribute}] is already declared on form [{cls.__name__}]",
                {"attribute": attribute, "form": cls.__qualname__}
            )

        if attribute in cls.__properties__:
            raise ConfigurationError(
                "N00.103",
                f"Nested attribute [{attribute}] conflicts with a property of form [{cls.__name__}]",
                {"attribute": attribute, "form": cls.__qualname__}
            )

        form_class = Form if form_class is None else form_class
        if not (isinstance(form_class, type) and issubclass(form_class, Form)):
            raise ConfigurationError(
                "N00.104",
                f"Nested form class of [{cls.__name__}.{attribute}] must be a Form subclass, got [{form_class!r}]",
                None
            )

        if class_initializer is not None and not is_identifier(class_initializer):
            raise ConfigurationError(
                "N00.106",
                f"Class initializer key of [{cls.__name__}.{attribute}] must be an identifier, "
                f"got [{class_initializer!r}]",
                None
            )

        spec = NestedFormSpec(
            name=attribute,
            singular=singularize(attribute),
            form_class=form_class,
            parent=cls.__qualname__,
            class_initializer=class_initializer,
            initializer=freeze_initializer(initializer, f"{cls.__name__}.{attribute}"),
        )

        cls.__nested__ = MappingProxyType({**cls.__nested__, attribute: spec})
        builders = cls.__builders__.set(attribute, attribute)
        if spec.singular not in builders:
            builders = builders.set(spec.singular, attribute)
        cls.__builders__ = builders

        logger.debug('Declared nested form [%s.%s => %s]', cls.__name__, attribute, form_class.__name__)
        return spec

    has_many = declare_nested
    has_one = declare_nested

    @classmethod
    def nested_forms(cls):
        return MappingProxyType({name: spec.form_class for name, spec in cls.__nested__.items()})

    @classmethod
    def get_nested_spec(cls, attribute) -> NestedFormSpec:
        try:
            return cls.__nested__[attribute]
        except KeyError:
            raise NotFoundError(
                "N00.404",
                f"Nested attribute [{attribute}] is not declared on form [{cls.__name__}]"
            ) from None

    @classmethod
    def reflect_on_association(cls, attribute):
        spec = cls.get_nested_spec(attribute)
        return ImmutableNamespace(name=spec.name, klass=spec.form_class, spec=spec)

    # Class initializer slots
    # ------------------------------------------------------------------------

    @classmethod
    def _initializer_specs(cls, key):
        specs = [spec for spec in cls.__nested__.values() if spec.class_initializer == key]
        if not specs:
            raise ConfigurationError(
                "N00.108",
                f"Unknown class initializer [{key}] on form [{cls.__name__}]",
                None
            )

        return specs

    @classmethod
    def get_initializer(cls, key):
        value = cls._initializer_specs(key)[0].initializer
        return {} if value is None else value

    @classmethod
    def set_initializer(cls, key, value):
        value = freeze_initializer(value, f"{cls.__name__}.{key}")
        for spec in cls._initializer_specs(key):
            cls.__nested__ = MappingProxyType({**cls.__nested__, spec.name: spec.set(initializer=value)})

        logger.debug('Configured class initializer [%s.%s]', cls.__name__, key)

    # Instance operations
    # ------------------------------------------------------------------------

    def nested(self, attribute):
        self.get_nested_spec(attribute)
        return self._children.setdefault(attribute, [])

    def build_nested(self, attribute, initializer=None):
        spec = self.get_nested_spec(attribute)
        child = spec.build(initializer)
        self.nested(attribute).append(child)
        return child

    def assign_nested(self, attribute, entries):
        self.get_nested_spec(attribute)
        entries = normalize_entries(entries, attribute)
        children = self.nested(attribute)

        deficit = len(entries) - len(children)
        for _ in range(deficit):
            self.build_nested(attribute)

        for child, (_identifier, attributes) in zip(children, entries):
            child.fill(attributes)

        logger.debug('Assigned %d entries to [%s.%s] (%d built)',
                     len(entries), type(self).__name__, attribute, max(deficit, 0))

    # Named accessors
    # ------------------------------------------------------------------------

    def _nested_attribute_of(self, name):
        if not name.endswith(NESTED_ATTRIBUTES_SUFFIX):
            return None

        attribute = name[:-len(NESTED_ATTRIBUTES_SUFFIX)]
        return attribute if attribute in type(self).__nested__ else None

    def __getattr__(self, name):
        # Only reached when the regular attribute lookup fails
        cls = type(self)
        if name in cls.__nested__:
            return self.nested(name)

        if name.startswith(BUILD_PREFIX):
            attribute = cls.__builders__.get(name[len(BUILD_PREFIX):])
            if attribute is not None:
                return partial(self.build_nested, attribute)

        raise AttributeError(f"'{cls.__name__}' object has no attribute '{name}'")

    def __setattr__(self, name, value):
        attribute = self._nested_attribute_of(name)
        if attribute is not None:
            self.assign_nested(attribute, value)
            return

        if name in type(self).__nested__:
            raise AttributeError(
                f"Nested attribute '{name}' of '{type(self).__name__}' is read-only, "
                f"assign '{name}{NESTED_ATTRIBUTES_SUFFIX}' instead"
            )

        super().__setattr__(name, value)
