from pyrsistent import pmap

from freeform import logger
from freeform.error import ConfigurationError, NotFoundError
from .genutil import camel_to_lower


def ClassRegistry(base_class):
    ''' Build a registry of the subclasses of `base_class`, keyed by string.

        `register` is usable as a bare decorator (@Registry.register, the key being
        the lower-dashed class name) or with an explicit key and extra options
        (@Registry.register('select', multiple=False)).
    '''

    lookup_table = dict()
    registry_hist = list()
    registry_name = base_class.__name__

    def _register(key=None, **kwargs):
        if isinstance(key, type):
            return _register()(key)

        def _decorator(cls):
            clsid = camel_to_lower(cls.__name__) if key is None else key
            # Only the class' own id counts, subclasses of a registered class get theirs
            current = cls.__dict__.get('__clsid__')

            if current is not None and current != clsid:
                raise ConfigurationError(
                    "H00.301",
                    f"Class [{cls.__name__}] is already registered as [{current}], not [{clsid}]",
                    None
                )

            if clsid in lookup_table:
                raise ConfigurationError(
                    "H00.302",
                    f"Key [{clsid}] already registered in registry [{registry_name}]",
                    {"key": clsid, "registered": lookup_table[clsid].__qualname__, "new": cls.__qualname__}
                )

            if not issubclass(cls, base_class):
                raise ConfigurationError(
                    "H00.303",
                    f"Registering class [{cls.__name__}] must be a subclass of [{registry_name}]",
                    None
                )

            cls.__clsid__ = clsid
            lookup_table[clsid] = cls
            registry_hist.append((cls, clsid, kwargs))

            logger.debug('Registered %s [%s => %s]', registry_name, clsid, cls.__name__)
            return cls

        return _decorator

    def _get_item(key_or_class):
        if isinstance(key_or_class, type):
            clsid = key_or_class.__dict__.get('__clsid__')
            if clsid is not None and lookup_table.get(clsid) is key_or_class:
                return key_or_class
        elif key_or_class in lookup_table:
            return lookup_table[key_or_class]

        raise NotFoundError(
            "H00.401",
            f"Registry item [{key_or_class}] not found in registry [{registry_name}]"
        )

    def _construct(key, *args, **kwargs) -> base_class:
        return _get_item(key)(*args, **kwargs)

    return type(f"{registry_name}Registry", (object,), dict(
        base_class=base_class,
        register=_register,
        get=_get_item,
        construct=_construct,
        contains=lambda key: key in lookup_table,
        keys=lambda: tuple(lookup_table),
        get_registry=lambda: pmap(lookup_table),
        get_history=lambda: tuple(registry_hist),
    ))
