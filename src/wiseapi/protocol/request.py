""" Classes and functions implemented here describe a single request sent
    over the Builder control socket, and the shape of the response that
    comes back. Nothing here performs any I/O; see
    :class:`wiseapi.transport.session.Session` for that.
"""

import datetime
import enum
import re

from . import fields


class ProtocolDecodeError(ValueError):
    """ A response from the Builder did not have the expected shape. The
        session never raises this; decoders built on top of it do.
    """


class Policy(enum.Enum):
    """ How a response is known to be complete.
    """

    SINGLE = 'single'
    MARKER = 'marker'



class Request:
    """ A :class:`Request` names the operation *key* to invoke, the ordered
        *parameters* for that operation, and the completion *policy* for the
        response. The parameters are joined with a pipe character and sent
        as a single line; no parameter line is sent if there are none.

        Set *handshake* to False for operations that are not bracketed by
        the STARTUP and SHUTDOWN tokens.
    """

    def __init__(self, key, parameters=(), policy=Policy.SINGLE, handshake=True):

        if key is None or key == '':
            raise ValueError('the operation key must be specified')

        if isinstance(policy, Policy):
            pass
        else:
            policy = Policy(policy)

        self.key = str(key)
        self.parameters = tuple(parameters)
        self.policy = policy
        self.handshake = handshake


    def __repr__(self):
        return 'Request(%r, %r, %s)' % (self.key, self.parameters, self.policy.value)


    def lines(self):
        """ Return the sequence of lines, without line terminators, that
            open this request on the wire.
        """

        lines = list()

        if self.handshake:
            lines.append(fields.STARTUP)

        lines.append(self.key)

        if self.parameters:
            formatted = [format_parameter(value) for value in self.parameters]
            lines.append(fields.SEPARATOR.join(formatted))

        return lines


    def encode(self):
        """ Return the opening bytes for this request.
        """

        text = ''.join(line + fields.NEWLINE for line in self.lines())
        return text.encode(fields.ENCODING)


# end of class Request



class Accumulator:
    """ Collect the response bytes for a single request. :func:`feed` is
        called with each chunk read from the socket, and returns True once
        the response is complete according to the *policy*.
    """

    def __init__(self, policy):

        self.policy = policy
        self.buffer = bytearray()
        self.complete = False


    def feed(self, chunk):

        if self.complete:
            return True

        if chunk:
            self.buffer.extend(chunk)

        if self.policy == Policy.SINGLE:
            if len(self.buffer) > 0:
                self.complete = True
        elif fields.COMPLETE in self.buffer:
            self.complete = True

        return self.complete


    def response(self):
        """ Return the accumulated :class:`Response`. For a marker terminated
            response, the marker and anything after it are not included.
        """

        raw = bytes(self.buffer)

        if self.policy == Policy.MARKER:
            index = raw.find(fields.COMPLETE)
            if index >= 0:
                raw = raw[:index]

        return Response(raw.decode(fields.ENCODING, errors='replace'))


# end of class Accumulator



_line_break = re.compile(r'\r\n|\r|\n')


class Response:
    """ The raw text returned by the Builder for a single request, along
        with the standard ways of breaking it apart. The response *fields*
        are the non-empty lines split on the pipe character, in order.
    """

    def __init__(self, text):

        self.text = text
        self.lines = [line for line in _line_break.split(text) if line != '']

        fields_list = list()
        for line in self.lines:
            fields_list.extend(line.split(fields.SEPARATOR))

        self.fields = fields_list


    def __repr__(self):
        return 'Response(%r)' % (self.text)


    def __len__(self):
        return len(self.fields)


    def records(self, width):
        """ Regroup the response fields into records of *width* fields
            each. An incomplete trailing record is discarded.
        """

        width = int(width)
        if width <= 0:
            raise ValueError('record width must be positive')

        count = len(self.fields) // width
        return [self.fields[i * width:(i + 1) * width] for i in range(count)]


    def expect(self, count, minimum=False):
        """ Return the response fields, raising :class:`ProtocolDecodeError`
            if there are not exactly *count* of them (or at least *count*,
            if *minimum* is True).
        """

        found = len(self.fields)

        if found == count or (minimum and found > count):
            return self.fields

        raise ProtocolDecodeError("expected %d fields, received %d: %r" % (count, found, self.text))


# end of class Response



def format_parameter(value):
    """ Format a single request parameter the way the Builder expects to
        parse it.
    """

    if value is None:
        return 'null'

    if value is True:
        return 'true'

    if value is False:
        return 'false'

    if isinstance(value, float):
        if value.is_integer():
            return '%d' % (value)
        return repr(value)

    if isinstance(value, datetime.timedelta):
        return format_duration(value)

    if isinstance(value, enum.Enum):
        return format_parameter(value.value)

    return str(value)



def format_duration(span):
    """ Format a :class:`datetime.timedelta` as an ISO 8601 time duration,
        such as ``PT1H30M`` or ``-PT5S``. Spans of a day or more are expressed
        in hours, so one day is ``PT24H``.
    """

    total = int(round(span.total_seconds()))

    if total < 0:
        prefix = '-P'
        total = -total
    else:
        prefix = 'P'

    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)

    formatted = prefix

    if hours > 0 or minutes > 0 or seconds > 0:
        formatted += 'T'
        if hours > 0:
            formatted += '%dH' % (hours)
        if minutes > 0:
            formatted += '%dM' % (minutes)
        if seconds > 0:
            formatted += '%dS' % (seconds)

    if formatted == prefix:
        formatted += 'T0S'

    return formatted


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
