""" The :class:`Pending` class is the single result-or-error primitive shared
    by everything in this package that completes in the background: control
    socket exchanges, calculator requests, and broker publish
    acknowledgements. Callers either block on :func:`Pending.wait`, or
    register callbacks with :func:`Pending.add_callback`.
"""

import logging
import threading

logger = logging.getLogger(__name__)


class Pending:
    """ A :class:`Pending` instance is settled exactly once, either with a
        value via :func:`_complete` or with an exception via :func:`_fail`.
        If a *transform* is provided it is applied to the value before the
        instance settles; an exception raised by the *transform* settles
        the instance as a failure instead.

        :ivar value: The settled value, if any.
        :ivar error: The settled exception, if any.
    """

    def __init__(self, transform=None):

        self.transform = transform
        self.value = None
        self.error = None

        self._callbacks = list()
        self._lock = threading.Lock()
        self._settled = threading.Event()


    def __repr__(self):

        if self._settled.is_set() == False:
            state = 'pending'
        elif self.error is None:
            state = 'complete: ' + repr(self.value)
        else:
            state = 'failed: ' + repr(self.error)

        return '<Pending ' + state + '>'


    def add_callback(self, callback=None, error=None):
        """ Register a *callback* to receive the value, and/or an *error*
            callback to receive the exception. If the instance has already
            settled the appropriate callback is invoked immediately, in the
            calling thread; otherwise it will be invoked from whichever
            thread settles the instance.
        """

        if callback is not None and not callable(callback):
            raise TypeError('callback must be callable')

        if error is not None and not callable(error):
            raise TypeError('error callback must be callable')

        with self._lock:
            if self._settled.is_set() == False:
                self._callbacks.append((callback, error))
                return

        self._invoke(callback, error)


    def _complete(self, value):
        """ Settle this instance with *value*, after applying the transform.
        """

        if self.transform is not None:
            try:
                value = self.transform(value)
            except Exception as e:
                self._fail(e)
                return

        self._settle(value, None)


    def _fail(self, error):
        """ Settle this instance with the exception *error*.
        """

        self._settle(None, error)


    def _settle(self, value, error):

        with self._lock:
            if self._settled.is_set():
                raise RuntimeError('Pending instance already settled')

            self.value = value
            self.error = error
            self._settled.set()

            callbacks = self._callbacks
            self._callbacks = list()

        if error is not None and len(callbacks) == 0:
            logger.debug("unobserved failure: %s", error)

        for callback, errback in callbacks:
            self._invoke(callback, errback)


    def _invoke(self, callback, errback):

        try:
            if self.error is None:
                if callback is not None:
                    callback(self.value)
            elif errback is not None:
                errback(self.error)
            else:
                logger.warning("request failed with no error callback: %s", self.error)
        except Exception:
            logger.exception('exception raised by a completion callback')


    def poll(self):
        """ Return True if the instance has settled, otherwise False.
        """

        return self._settled.is_set()


    def wait(self, timeout=None):
        """ Block until the instance has settled. The settled value is
            returned; if the instance failed, the exception is raised. None
            is returned if the instance is still pending after *timeout*
            seconds. A *timeout* of None blocks indefinitely.
        """

        if self._settled.wait(timeout) == False:
            return None

        if self.error is not None:
            raise self.error

        return self.value


# end of class Pending


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
