import pytest

import wiseapi


def test_encode_and_decode():

    input_dictionary = dict()
    input_dictionary['list'] = [1, 2, 3, 'a', 'b', None, 'c', 'z']
    input_dictionary['dict'] = {1: 'one', 'two': 2}
    input_dictionary['none'] = None
    input_dictionary['true'] = True
    input_dictionary['false'] = False

    encoded = wiseapi.json.dumps(input_dictionary)
    assert isinstance(encoded, bytes)

    decoded = wiseapi.json.loads(encoded)
    assert isinstance(decoded, dict)

    # Integer keys come back as strings; there is no way for the decoding
    # step to know the original key was an integer.

    assert decoded != input_dictionary

    del decoded['dict']['1']
    decoded['dict'][1] = 'one'
    assert decoded == input_dictionary


def test_indented():

    encoded = wiseapi.json.dumps({'broker': {'host': 'localhost'}}, indent=True)

    assert b'\n' in encoded
    assert wiseapi.json.loads(encoded.decode()) == {'broker': {'host': 'localhost'}}


def test_decode_error():

    with pytest.raises(wiseapi.json.DecodeError):
        wiseapi.json.loads(b'{"status": ')

    with pytest.raises(ValueError):
        wiseapi.json.loads(b'not json')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
