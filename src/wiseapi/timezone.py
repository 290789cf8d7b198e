""" The named time zones known to the Builder. The *value* of a
    :class:`TimezoneName` can be passed to the Builder in place of a UTC
    offset.
"""

from . import calculator
from .protocol import fields
from .protocol.request import Policy, Request


class TimezoneName:

    def __init__(self, name, value):
        self.name = name
        self.value = value


    def __repr__(self):
        return 'TimezoneName(%r, %r)' % (self.name, self.value)


# end of class TimezoneName



def request():
    """ The time zone listing is not bracketed by the STARTUP and SHUTDOWN
        tokens, and only the first line of the response is meaningful.
    """

    return Request(fields.LIST_TIMEZONES, policy=Policy.MARKER, handshake=False)



def _timezones(response):

    if response.lines:
        values = response.lines[0].split(fields.SEPARATOR)
    else:
        values = list()

    found = list()

    for index in range(0, len(values) - 1, 2):
        try:
            value = int(values[index + 1])
        except ValueError:
            continue

        found.append(TimezoneName(values[index], value))

    return found



def get_timezones(timeout=None):
    """ Return the list of :class:`TimezoneName` instances known to the
        Builder.
    """

    return calculator.lookup(request(), _timezones, timeout)


def get_timezones_async(callback=None, error=None):
    return calculator.lookup_async(request(), _timezones, callback, error)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
