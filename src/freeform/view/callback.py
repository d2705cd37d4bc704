from collections import deque

from markupsafe import Markup

from freeform.error import BadRequestError
from freeform.helper import consume_queue

from ._meta import config, logger

CALLBACK_SEPARATOR = config.CALLBACK_SEPARATOR


class NestedFormCallbacks(object):
    """
    Deferred fragments of a single render context.

    Templates register one callback per association (typically rendering the
    "new record" template of a nested form). The callbacks run once, at the
    end of the form block, when the renderer flushes the collector.

    An association registered once stays registered for the lifetime of the
    context, registering it again is a no-op even after a flush.
    """

    def __init__(self):
        self._associations = []
        self._callbacks = deque()

    def after_nested_form(self, association, callback):
        if not callable(callback):
            raise BadRequestError(
                "V00.101",
                f"Callback of association [{association}] must be callable",
                None
            )

        if association in self._associations:
            return False

        self._associations.append(association)
        self._callbacks.append(callback)
        logger.debug('Deferred nested form callback [%s]', association)
        return True

    @property
    def associations(self):
        return tuple(self._associations)

    @property
    def pending(self):
        return len(self._callbacks)

    def flush(self):
        fragments = []
        for callback in consume_queue(self._callbacks):
            fragment = callback()
            fragments.append(Markup("" if fragment is None else fragment))

        return Markup(CALLBACK_SEPARATOR).join(fragments)
