import datetime
import pytest

import wiseapi
from wiseapi.protocol.request import Accumulator, Policy, Request, Response


def test_request_lines():

    request = Request('SOLAR_CALCULATOR', (62.5, -114, 0, True, None))
    assert request.lines() == ['STARTUP', 'SOLAR_CALCULATOR', '62.5|-114|0|true|null']
    assert request.encode() == b'STARTUP\nSOLAR_CALCULATOR\n62.5|-114|0|true|null\n'


def test_request_without_parameters():

    request = Request('GETDEFAULTS')
    assert request.lines() == ['STARTUP', 'GETDEFAULTS']


def test_request_without_handshake():

    request = Request('LIST_TIMEZONES', policy=Policy.MARKER, handshake=False)
    assert request.encode() == b'LIST_TIMEZONES\n'


def test_request_validation():

    with pytest.raises(ValueError):
        Request('')

    with pytest.raises(ValueError):
        Request('FWI', policy='sometimes')

    request = Request('FWI', policy='marker')
    assert request.policy == Policy.MARKER


def test_format_parameter():

    format = wiseapi.protocol.request.format_parameter

    assert format(True) == 'true'
    assert format(False) == 'false'
    assert format(None) == 'null'
    assert format(85.0) == '85'
    assert format(0.35) == '0.35'
    assert format(-114.3718) == '-114.3718'
    assert format(7) == '7'
    assert format('C-1') == 'C-1'
    assert format(wiseapi.Province.ALBERTA) == 'ab'
    assert format(datetime.timedelta(hours=1)) == 'PT1H'


def test_format_duration():

    format = wiseapi.protocol.request.format_duration

    assert format(datetime.timedelta(0)) == 'PT0S'
    assert format(datetime.timedelta(hours=1)) == 'PT1H'
    assert format(datetime.timedelta(hours=24)) == 'PT24H'
    assert format(datetime.timedelta(minutes=5, seconds=30)) == 'PT5M30S'
    assert format(datetime.timedelta(hours=-2)) == '-PT2H'


def test_single_completes_on_first_read():

    accumulator = Accumulator(Policy.SINGLE)

    assert accumulator.feed(b'') == False
    assert accumulator.feed(b'6:12|21:40') == True
    assert accumulator.feed(b'|13:56') == True

    response = accumulator.response()
    assert response.text == '6:12|21:40'


def test_marker_accumulation():

    accumulator = Accumulator(Policy.MARKER)

    assert accumulator.feed(b'a|b|c\r\n') == False
    assert accumulator.feed(b'd|e|f\r\nCOMPLETE') == True

    response = accumulator.response()
    assert 'COMPLETE' not in response.text
    assert response.records(3) == [['a', 'b', 'c'], ['d', 'e', 'f']]


def test_marker_split_across_reads():

    accumulator = Accumulator(Policy.MARKER)

    assert accumulator.feed(b'x|y\nCOMP') == False
    assert accumulator.feed(b'LETE\n') == True
    assert accumulator.response().fields == ['x', 'y']


def test_trailing_fragment_discarded():

    response = Response('a|b|c\r\nd|e|f\r\ng|h')

    assert response.fields == ['a', 'b', 'c', 'd', 'e', 'f', 'g', 'h']
    assert response.records(3) == [['a', 'b', 'c'], ['d', 'e', 'f']]


def test_response_lines():

    response = Response('one\r\ntwo\n\nthree\r')

    assert response.lines == ['one', 'two', 'three']
    assert len(response) == 3


def test_expect():

    response = Response('1|2|3')

    assert response.expect(3) == ['1', '2', '3']
    assert response.expect(2, minimum=True) == ['1', '2', '3']

    with pytest.raises(wiseapi.protocol.ProtocolDecodeError):
        response.expect(4)

    with pytest.raises(wiseapi.protocol.ProtocolDecodeError):
        response.expect(2)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
