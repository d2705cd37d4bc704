"""
Form property declaration

Scalar properties are declared with class annotations, the class level value
being the default. Nested forms are declared with the `NestedForm` marker:

    class OrderForm(Form):
        customer: str
        priority: int = 0
        line_items: NestedForm(LineItemForm, class_initializer="line_item_defaults")
"""
import copy
import inspect

from typing import Any, ClassVar, List, Annotated, get_origin, get_args

from .datadef import FormProperty, NestedFormDecl


def NestedForm(form_class=None, class_initializer=None, initializer=None) -> Any:
    """
    Declare a nested (has-many) form as a type annotation.

    Args:
        form_class: Form type of the children. A form without fields is used when omitted.
        class_initializer: name of the parent's initializer slot for this attribute
        initializer: default parameters of new children, a mapping or a zero-argument callable

    Returns:
        Annotated type carrying a NestedFormDecl
    """
    decl = NestedFormDecl(
        form_class=form_class,
        class_initializer=class_initializer,
        initializer=initializer,
    )
    return Annotated[List[form_class or Any], decl]


def _nested_decl(annotation):
    if get_origin(annotation) is not Annotated:
        return None

    for meta in get_args(annotation)[1:]:
        if isinstance(meta, NestedFormDecl):
            return meta

    return None


def extract_declarations(cls):
    ''' Split the class' own annotations into scalar properties and nested declarations. '''
    properties = {}
    nested = {}

    for name, annotation in inspect.get_annotations(cls, eval_str=True).items():
        if name.startswith('_'):
            continue

        if annotation is ClassVar or get_origin(annotation) is ClassVar:
            continue

        decl = _nested_decl(annotation)
        if decl is not None:
            nested[name] = decl
            continue

        properties[name] = FormProperty.define(name, annotation, cls.__dict__.get(name))

    return properties, nested


def default_value(prop):
    default = prop.default
    if isinstance(default, (list, dict, set)):
        return copy.deepcopy(default)

    return default
