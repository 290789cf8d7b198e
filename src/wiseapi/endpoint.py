""" The endpoint registry holds the address and port of the W.I.S.E. Builder
    control socket. Every exchange reads the registry once, when it begins;
    changing the endpoint has no effect on exchanges already in flight.
"""

import os
import threading

default_address = '127.0.0.1'
default_port = 32479

_lock = threading.Lock()
_address = os.environ.get('WISE_BUILDER_ADDRESS', default_address)
_port = int(os.environ.get('WISE_BUILDER_PORT', default_port))


def initialize(address, port):
    """ Set the *address* and *port* to use when contacting the Builder.
    """

    global _address, _port

    if address is None or address == '':
        raise ValueError('the Builder address must be specified')

    port = int(port)
    if port <= 0 or port > 65535:
        raise ValueError('invalid Builder port: ' + str(port))

    with _lock:
        _address = str(address)
        _port = port


def address():
    with _lock:
        return _address


def port():
    with _lock:
        return _port


def get():
    """ Return a consistent (address, port) snapshot of the registry.
    """

    with _lock:
        return (_address, _port)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
