""" The :class:`JobManager` watches the broker for messages about a single
    job, and turns them into job lifecycle events delivered to registered
    listeners. Listeners are registered per :class:`wiseapi.events.Category`
    with :func:`JobManager.on`::

        manager = JobManager('job_20240101')
        manager.on(Category.SIMULATION_COMPLETE, finished)
        manager.start()

    Messages are handled strictly in the order they arrive: a message is
    not decoded until every listener for the previous message has returned.
"""

import datetime
import functools
import logging
import queue
import threading

from . import config
from . import events
from . import json
from . import transport
from .events import Category
from .protocol import fields
from .protocol.message import Kind, decode, parse_time
from .protocol.status import Status
from .transport.base import TransportConnectionError

logger = logging.getLogger(__name__)


def error_text(message):
    """ Derive the error description for a failed scenario from the status
        *message* text. The text following the ``Error:`` marker is used if
        the marker is present; otherwise the message is used verbatim, or a
        generic description if there is no message at all.
    """

    if message is None:
        message = ''

    index = message.find(fields.ERROR_MARKER)

    if index >= 0:
        return message[index + len(fields.ERROR_MARKER):].strip()

    if message != '':
        return message

    return fields.UNKNOWN_ERROR



class JobManager:
    """ Dispatch job lifecycle events for the job identified by *job*. The
        *broker* argument is a factory that accepts a
        :class:`wiseapi.config.BrokerOptions` instance and returns an
        unconnected :class:`wiseapi.transport.Broker`; the default is the
        backend selected by the ``WISE_BROKER`` environment variable.
    """

    def __init__(self, job, broker=None):

        job = str(job).strip()

        if job == '':
            raise ValueError('a job id is required')

        if broker is None:
            broker = transport.default_factory

        self.job = job
        self.options = None

        self._factory = broker
        self._broker = None
        self._lock = threading.Lock()
        self._listeners = dict()
        self._inbox = None
        self._dispatcher = None
        self._retired = None

        for category in Category:
            self._listeners[category] = list()


    def __repr__(self):
        return '<JobManager ' + self.job + '>'


    @property
    def started(self):
        broker = self._broker
        return broker is not None and broker.connected


    def on(self, category, listener):
        """ Register *listener* to be called with every event of the given
            *category*. Listeners are called in the order they were
            registered, from the dispatch thread.
        """

        category = Category(category)

        if callable(listener):
            pass
        else:
            raise TypeError('listener must be callable')

        with self._lock:
            self._listeners[category].append(listener)


    def off(self, category, listener):
        """ Remove a previously registered *listener*. Return True if it was
            registered, otherwise False.
        """

        category = Category(category)

        with self._lock:
            try:
                self._listeners[category].remove(listener)
            except ValueError:
                return False

        return True


    def topic_filter(self, kind):
        return '/'.join((self.options.topic, '+', self.job, kind))


    def start(self, options=None):
        """ Connect to the broker and subscribe to the status and validation
            topics for this job. Calling :func:`start` on a manager that is
            already connected does nothing. Raises
            :class:`wiseapi.transport.TransportConnectionError` if the broker
            cannot be reached.
        """

        with self._lock:
            if self._broker is not None and self._broker.connected:
                return

            if self._broker is not None:
                self._broker.disconnect()
                self._broker = None

            options = config.fill(options)
            broker = self._factory(options)

            if self._dispatcher is None:
                inbox = queue.SimpleQueue()
            else:
                inbox = self._inbox

            logger.debug("%s connecting as %s", self, options.client_id)
            broker.connect(functools.partial(self._receive, inbox))

            self.options = options
            self._broker = broker

            # A dispatcher retired by dispose() may still be running the
            # listeners for its last messages; its successor waits for it.

            if self._dispatcher is None:
                self._inbox = inbox
                self._dispatcher = threading.Thread(
                        target=self._dispatch,
                        args=(inbox, self._retired),
                        name='wiseapi dispatch ' + self.job,
                        daemon=True)
                self._retired = None
                self._dispatcher.start()

            for kind in (fields.STATUS, fields.VALIDATE):
                broker.subscribe(self.topic_filter(kind), fields.QOS)


    def dispose(self):
        """ Disconnect from the broker and stop the dispatch thread. Calling
            :func:`dispose` more than once is safe.
        """

        with self._lock:
            broker = self._broker
            dispatcher = self._dispatcher
            inbox = self._inbox
            self._broker = None
            self._dispatcher = None
            self._inbox = None

            if dispatcher is not None:
                self._retired = dispatcher

        if broker is not None:
            logger.debug("%s disconnecting", self)
            broker.disconnect()

        if dispatcher is not None:
            inbox.put(None)
            if dispatcher is not threading.current_thread():
                dispatcher.join()


    def broadcast_rerun(self, job):
        """ Ask every listening job manager to rerun *job*, deleting the
            results of the previous run. Returns a
            :class:`wiseapi.pending.Pending` that settles when the broker
            acknowledges the request.
        """

        broker = self._broker

        if broker is None or broker.connected == False:
            raise TransportConnectionError('the job manager for ' + self.job + ' is not started')

        topic = '/'.join((self.options.topic, self.options.client_id, fields.MANAGER, fields.MANAGE))

        payload = dict()
        payload['request'] = fields.RERUN
        payload['target'] = job
        payload['delete_old'] = True

        return broker.publish(topic, json.dumps(payload), fields.QOS)


    def _receive(self, inbox, topic, payload):
        """ Called from the broker network thread for every inbound message.
        """

        received = datetime.datetime.now(datetime.timezone.utc)
        inbox.put((topic, payload, received))


    def _dispatch(self, inbox, previous=None):

        if previous is not None:
            previous.join()

        while True:
            item = inbox.get()

            if item is None:
                break

            topic, payload, received = item

            try:
                self.process(topic, payload, received)
            except Exception:
                logger.exception("%s unable to handle a message on %s", self, topic)


    def process(self, topic, payload, received=None):
        """ Decode a single broker message and deliver the resulting event,
            if any, to the registered listeners. The event is returned.
        """

        message = decode(topic, payload, received)
        event = self.interpret(message)

        if event is not None:
            self._emit(event)

        return event


    def interpret(self, message):
        """ Return the event described by a decoded *message*, or None if
            the message does not describe one.
        """

        if message.kind == Kind.STATUS:
            return self._interpret_status(message)

        if message.kind == Kind.VALIDATE:
            validation = message.content

            time = parse_time(validation.raw.get('time'))
            if time is None:
                time = datetime.datetime.now(datetime.timezone.utc)

            return events.ValidationReceived(self, time, validation)

        return None


    def _interpret_status(self, message):

        report = message.content
        status = report.status

        time = report.sent_time
        if time is None:
            time = message.received

        if status == Status.COMPLETE:
            if report.message == fields.END_OF_RUN:
                return events.SimulationComplete(self, time)
            return events.ScenarioComplete(self, time, True)

        if status == Status.SCENARIO_FAILED:
            return events.ScenarioComplete(self, time, False, error_text(report.message))

        if status == Status.UNRECOGNIZED:
            return None

        if report.message and report.statistics:
            return events.StatisticsReceived(self, time, report.statistics)

        return None


    def _emit(self, event):

        with self._lock:
            listeners = list(self._listeners[event.category])

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("%s listener raised an exception handling %r", self, event)


# end of class JobManager


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
