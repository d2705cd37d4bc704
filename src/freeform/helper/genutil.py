import re

from collections import deque
from queue import Empty, Queue


RX_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')
RX_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z\d_]*$')

SINGULAR_RULES = (
    (re.compile(r'(quiz)zes$'), r'\1'),
    (re.compile(r'(matr|vert|ind)ices$'), r'\1ix'),
    (re.compile(r'(alias|status|address)es$'), r'\1'),
    (re.compile(r'([^aeiouy]|qu)ies$'), r'\1y'),
    (re.compile(r'(x|ch|ss|sh)es$'), r'\1'),
    (re.compile(r'([^f])ves$'), r'\1fe'),
    (re.compile(r'(ss|us)$'), r'\1'),
    (re.compile(r's$'), ''),
)


def camel_to_lower(name, sep='-'):
    ''' OrderLineItem => order-line-item '''
    return RX_CAMEL_BOUNDARY.sub(sep, name).lower()


def camel_to_title(name):
    ''' OrderLineItem => Order Line Item '''
    return RX_CAMEL_BOUNDARY.sub(' ', name)


def singularize(name):
    ''' Singular form of the last word of a snake_case name.

        Only the common english suffixes are handled, a name that does not
        end with any of them is returned as is. E.g. line_items => line_item,
        addresses => address, categories => category, people => people
    '''
    head, sep, word = name.rpartition('_')
    for pattern, repl in SINGULAR_RULES:
        if pattern.search(word):
            return head + sep + pattern.sub(repl, word, count=1)

    return name


def is_identifier(name):
    return isinstance(name, str) and RX_IDENTIFIER.match(name) is not None


def consume_queue(q):
    ''' Drain a queue (or deque) yielding the items in FIFO order. '''
    if isinstance(q, deque):
        while q:
            yield q.popleft()
        return

    if isinstance(q, Queue):
        while True:
            try:
                yield q.get_nowait()
            except Empty:
                return

    raise ValueError(f"Unable to consume object: {q}")
