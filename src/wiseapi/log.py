""" Logging setup for applications using the W.I.S.E. client. The library
    itself only ever logs through module-level loggers beneath the
    ``wiseapi`` logger; nothing is emitted until an application attaches a
    handler, either on its own or by calling :func:`setup`.
"""

import logging
import os
import sys

FORMAT = '[%(levelname)s] %(asctime)s . %(message)s'
root = logging.getLogger('wiseapi')


def requested_level(default=logging.WARNING):
    """ Return the logging level requested via the ``WISE_LOG_LEVEL``
        environment variable, which may be a level name (``DEBUG``) or a
        number. The *default* is returned if the variable is not set.
    """

    try:
        requested = os.environ['WISE_LOG_LEVEL']
    except KeyError:
        return default

    requested = requested.strip()

    if requested.isdigit():
        return int(requested)

    resolved = logging.getLevelName(requested.upper())

    if isinstance(resolved, int):
        return resolved

    raise ValueError('unrecognized WISE_LOG_LEVEL: ' + repr(requested))



def setup(level=None, stream=None):
    """ Attach a single stream handler to the ``wiseapi`` logger. Repeated
        calls adjust the level of the existing handler rather than adding
        another one.
    """

    if level is None:
        level = requested_level()

    if stream is None:
        stream = sys.stderr

    handler = None
    for existing in root.handlers:
        if isinstance(existing, logging.StreamHandler):
            handler = existing
            break

    if handler is None:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(FORMAT))
        root.addHandler(handler)

    handler.setLevel(level)
    root.setLevel(level)

    return root


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
