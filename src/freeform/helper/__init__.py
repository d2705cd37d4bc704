from .genutil import (
    camel_to_lower,
    camel_to_title,
    consume_queue,
    is_identifier,
    singularize,
)

from .clsutil import ImmutableNamespace
from .registry import ClassRegistry
