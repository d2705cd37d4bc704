from markupsafe import Markup

from .callback import NestedFormCallbacks


def nested_form_for(form, body, callbacks=None):
    ''' Render a form block and append the deferred nested form fragments.

        `body(form, callbacks)` produces the rendered block, it is expected to be
        escaped already by the host's template engine. The callbacks registered
        while rendering are flushed right after it.
    '''
    callbacks = NestedFormCallbacks() if callbacks is None else callbacks
    output = body(form, callbacks)
    return Markup('' if output is None else output) + callbacks.flush()
