""" Shared machinery for the calculators that query the Builder over the
    control socket. Each :class:`Calculator` instance owns one
    :class:`wiseapi.transport.Session`, and so can have only one request in
    flight at a time; use separate instances for concurrent requests.
"""

import logging
import threading

from .protocol.request import ProtocolDecodeError
from .transport.session import Session

logger = logging.getLogger(__name__)


class Calculator:
    """ Base class for the calculators. A subclass builds a
        :class:`wiseapi.protocol.request.Request` and a *decode* method that
        copies the fields of the :class:`wiseapi.protocol.request.Response`
        onto the instance. A decode method that raises
        :class:`ProtocolDecodeError` leaves :attr:`calculated` False.

        :ivar calculated: True if the most recent response was understood.
    """

    def __init__(self):

        self.session = Session()
        self.calculated = False


    def _fetch(self, request, decode, timeout=None):

        return self.session.request(request, timeout, lambda response: self._decode(decode, response))


    def _fetch_async(self, request, decode, callback=None, error=None):

        return self.session.execute(request, lambda response: self._decode(decode, response), callback, error)


    def _decode(self, decode, response):

        try:
            decode(response)
        except ProtocolDecodeError as e:
            logger.error("%s: unable to interpret the response: %s", self.__class__.__name__, e)
            self.calculated = False
        else:
            self.calculated = True

        return self


# end of class Calculator



def number(text):
    """ Interpret a single response field as a float.
    """

    try:
        return float(text)
    except (TypeError, ValueError):
        raise ProtocolDecodeError('not a number: ' + repr(text))



def lookup(request, decode, timeout=None):
    """ Run a single *request* on a new session and return the result of
        applying *decode* to the response. This is the blocking form used by
        the list and single value queries.
    """

    session = Session()
    return session.request(request, timeout, decode)



def lookup_async(request, decode, callback=None, error=None):
    """ Run a single *request* on a new session in the background. The
        returned :class:`wiseapi.pending.Pending` settles with the result of
        applying *decode* to the response.
    """

    session = Session()
    return session.execute(request, decode, callback, error)



def background(target, name):
    """ Run *target* on a new daemon thread.
    """

    thread = threading.Thread(target=target, name=name, daemon=True)
    thread.start()
    return thread


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
