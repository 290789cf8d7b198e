import pytest
import threading

import wiseapi
from wiseapi.protocol.request import Policy, Request
from wiseapi.transport import ConcurrentRequestError, Session, State, TransportConnectionError, TransportError


def test_single_exchange(builder):

    builder.respond('6:12|21:40|13:56\r\n')

    session = Session()
    assert session.state == State.READY

    response = session.request(Request('SOLAR_CALCULATOR', (62.5, -114, 0, 2024, 6, 21)), 5)

    assert response.fields == ['6:12', '21:40', '13:56']
    assert session.state == State.SUCCEEDED

    builder.wait_finished()
    assert builder.received == [b'STARTUP\nSOLAR_CALCULATOR\n62.5|-114|0|2024|6|21\nSHUTDOWN\n']


def test_no_parameter_line(builder):

    builder.respond('JOBLOCATION\n/jobs\n', lines=2)

    session = Session()
    session.request(Request('GETDEFAULTS'), 5)

    builder.wait_finished()
    assert builder.received == [b'STARTUP\nGETDEFAULTS\nSHUTDOWN\n']


def test_marker_exchange(builder):

    builder.respond('a|b|c\r\n', 'd|e|f\r\nCOMPLETE', 'g|h')

    session = Session()
    response = session.request(Request('FORECAST_GET', ('ab', 'Calgary'), Policy.MARKER), 5)

    assert response.records(3) == [['a', 'b', 'c'], ['d', 'e', 'f']]
    assert session.state == State.SUCCEEDED


def test_without_handshake(builder):

    builder.respond('Mountain|7\nCOMPLETE\n', lines=1)

    session = Session()
    response = session.request(Request('LIST_TIMEZONES', policy=Policy.MARKER, handshake=False), 5)

    assert response.lines == ['Mountain|7']

    builder.wait_finished()
    assert builder.received == [b'LIST_TIMEZONES\n']


def test_concurrent_request_rejected(builder):

    hold = threading.Event()
    builder.respond('first', hold=hold)

    session = Session()
    pending = session.execute(Request('DSR', (10,)))

    assert session.state == State.IN_FLIGHT

    with pytest.raises(ConcurrentRequestError):
        session.execute(Request('DSR', (20,)))

    hold.set()

    assert pending.wait(5).text == 'first'
    assert session.state == State.SUCCEEDED
    assert builder.connections == 1


def test_sequential_reuse(builder):

    builder.respond('1.5')
    builder.respond('2.5')

    session = Session()

    assert session.request(Request('DSR', (10,)), 5).text == '1.5'
    assert session.request(Request('DSR', (20,)), 5).text == '2.5'
    assert session.state == State.SUCCEEDED


def test_reuse_after_failure(builder):

    builder.respond('partial', close=True)
    builder.respond('recovered\nCOMPLETE')

    session = Session()
    request = Request('FORECAST_GET', ('ab',), Policy.MARKER)

    with pytest.raises(TransportConnectionError):
        session.request(request, 5)

    assert session.state == State.FAILED

    response = session.request(request, 5)
    assert response.lines == ['recovered']
    assert session.state == State.SUCCEEDED


def test_reusable_from_callback(builder):

    builder.respond('one')
    builder.respond('two')

    session = Session()
    results = list()
    done = threading.Event()

    def second(response):
        results.append(response.text)
        done.set()

    def first(response):
        results.append(response.text)
        session.execute(Request('DSR', (2,)), callback=second)

    session.execute(Request('DSR', (1,)), callback=first)

    assert done.wait(5)
    assert results == ['one', 'two']


def test_connection_refused(closed_port):

    session = Session()
    errors = list()

    pending = session.execute(Request('DSR', (10,)), error=errors.append)

    with pytest.raises(TransportError):
        pending.wait(5)

    assert session.state == State.FAILED
    assert isinstance(errors[0], TransportConnectionError)


def test_transform(builder):

    builder.respond('42.5')

    session = Session()
    value = session.request(Request('DSR', (10,)), 5, transform=lambda response: float(response.text))

    assert value == 42.5


def test_endpoint_read_per_exchange(builder):

    hold = threading.Event()
    builder.respond('here', hold=hold)

    session = Session()
    pending = session.execute(Request('DSR', (10,)))
    builder.wait_connections(1)

    # Changing the endpoint does not affect an exchange already begun.
    wiseapi.endpoint.initialize('127.0.0.1', 1)
    hold.set()

    assert pending.wait(5).text == 'here'


def test_independent_sessions(builder):

    hold = threading.Event()
    builder.respond('slow', hold=hold)
    builder.respond('fast')

    first = Session()
    second = Session()

    slow = first.execute(Request('DSR', (1,)))
    builder.wait_connections(1)
    fast = second.execute(Request('DSR', (2,)))

    assert fast.wait(5).text == 'fast'
    assert slow.poll() == False
    assert first.state == State.IN_FLIGHT

    hold.set()
    assert slow.wait(5).text == 'slow'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
