""" A class representation of a message received from the broker, and the
    :func:`decode` function that builds one from a raw topic and payload.
    Decoding never raises: anything that cannot be understood becomes a
    message of kind :attr:`Kind.UNKNOWN`, which never produces an event.
"""

import datetime
import enum
import logging

from .. import json
from . import fields
from .status import Status

logger = logging.getLogger(__name__)


class MessageDecodeError(ValueError):
    """ Raised internally when a payload cannot be decoded. :func:`decode`
        catches it; it never reaches callers.
    """


class Kind(enum.Enum):

    UNKNOWN = 'unknown'
    STATUS = fields.STATUS
    CHECKIN = fields.REPORTIN
    VALIDATE = fields.VALIDATE


_kinds = {
    fields.STATUS: Kind.STATUS,
    fields.REPORTIN: Kind.CHECKIN,
    fields.VALIDATE: Kind.VALIDATE,
}



class Statistic:
    """ A single named value from the statistics of a status message. The
        *value* is a number or a string.
    """

    def __init__(self, key, value):
        self.key = key
        self.value = value


    def __repr__(self):
        return 'Statistic(%r, %r)' % (self.key, self.value)


    def __eq__(self, other):
        if isinstance(other, Statistic):
            return self.key == other.key and self.value == other.value
        return NotImplemented


# end of class Statistic



class StatusReport:
    """ The decoded content of a status message. The *message* and the
        *statistics* are only populated when the status *code* is a
        recognized one; *sent_time* is None if the payload did not carry a
        usable time.
    """

    def __init__(self, code, status, message=None, sent_time=None, statistics=None):

        self.code = code
        self.status = status
        self.message = message
        self.sent_time = sent_time

        if statistics is None:
            statistics = list()

        self.statistics = statistics


    @property
    def name(self):
        return self.status.label


    def __repr__(self):
        return 'StatusReport(%r, %r, %r)' % (self.code, self.name, self.message)


# end of class StatusReport



class Validation:
    """ The decoded content of a validation message, taken verbatim from the
        payload. The complete decoded object is retained as *raw*.
    """

    def __init__(self, success=False, valid=False, load_warnings='', error_list=None, raw=None):

        if error_list is None:
            error_list = list()

        if raw is None:
            raw = dict()

        self.success = success
        self.valid = valid
        self.load_warnings = load_warnings
        self.error_list = error_list
        self.raw = raw


    @classmethod
    def from_dict(cls, content):

        return cls(success=content.get('success', False),
                   valid=content.get('valid', False),
                   load_warnings=content.get('load_warnings', ''),
                   error_list=content.get('error_list', list()),
                   raw=content)


    def __repr__(self):
        return 'Validation(success=%r, valid=%r)' % (self.success, self.valid)


# end of class Validation



class Message:
    """ A message received from the broker. The topic is expected to have
        the form ``base/sender/job/kind``; the *sender* and *job* are
        None if the topic is too short to contain them. The *content* is a
        :class:`StatusReport` for status messages, a :class:`Validation` for
        validation messages, and None otherwise.

        :ivar received: The time this message was received, in UTC.
    """

    def __init__(self, topic, payload, kind=Kind.UNKNOWN, sender=None, job=None, content=None, received=None):

        if received is None:
            received = datetime.datetime.now(datetime.timezone.utc)

        self.topic = topic
        self.payload = payload
        self.kind = kind
        self.sender = sender
        self.job = job
        self.content = content
        self.received = received


    def __repr__(self):
        return 'Message(%r, %s, %r)' % (self.topic, self.kind.name, self.content)


# end of class Message



def decode(topic, payload, received=None):
    """ Build a :class:`Message` from the raw *topic* and *payload* of a
        broker message. This function does not raise.
    """

    message = Message(topic, payload, received=received)

    segments = topic.split('/')

    if len(segments) < 4:
        return message

    message.sender = segments[1]
    message.job = segments[2]

    kind = _kinds.get(segments[3].lower(), Kind.UNKNOWN)

    if kind == Kind.UNKNOWN:
        return message

    if kind == Kind.CHECKIN:
        message.kind = kind
        return message

    try:
        content = _load(payload)

        if kind == Kind.STATUS:
            content = _status(content)
        else:
            content = Validation.from_dict(content)

    except MessageDecodeError as e:
        logger.debug("discarding undecodable message on %s: %s", topic, e)
        return message

    message.kind = kind
    message.content = content

    return message



def _load(payload):
    """ Interpret the payload as a JSON object.
    """

    if isinstance(payload, str):
        payload = payload.encode(fields.ENCODING)

    try:
        payload.decode(fields.ENCODING)
    except UnicodeDecodeError:
        raise MessageDecodeError('payload is not valid UTF-8')

    try:
        content = json.loads(payload)
    except json.DecodeError as e:
        raise MessageDecodeError('payload is not valid JSON: ' + str(e))

    if isinstance(content, dict):
        pass
    else:
        raise MessageDecodeError('payload is not a JSON object')

    return content



def _status(content):

    code = content.get('status')
    status = Status.lookup(code)

    report = StatusReport(code, status)

    if status.label != '':
        message = content.get('message')

        if message is None or isinstance(message, str):
            pass
        else:
            message = str(message)

        report.message = message

        stats = content.get('stats')
        if isinstance(stats, dict):
            for key, value in stats.items():
                report.statistics.append(Statistic(key, value))

    report.sent_time = parse_time(content.get('time'))

    return report



def parse_time(value):
    """ Interpret *value* as an ISO 8601 date and time, returning an aware
        :class:`datetime.datetime`. A trailing ``Z`` is accepted, and a value
        without an offset is taken to be UTC. None is returned if *value*
        cannot be interpreted.
    """

    if isinstance(value, str):
        pass
    else:
        return None

    value = value.strip()

    if value.endswith('Z') or value.endswith('z'):
        value = value[:-1] + '+00:00'

    try:
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)

    return parsed


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
