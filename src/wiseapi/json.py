''' JSON handling for broker payloads and the configuration file. Payloads
    arrive from the broker as bytes and are published as bytes, so
    :func:`dumps` always returns bytes; :func:`loads` accepts either bytes
    or str.
'''

import orjson

DecodeError = orjson.JSONDecodeError


def dumps(value, indent=False):
    """ Encode *value* as JSON. Non-string dictionary keys are converted to
        strings rather than rejected; set *indent* to produce output meant
        to be read by people.
    """

    option = orjson.OPT_NON_STR_KEYS

    if indent:
        option |= orjson.OPT_INDENT_2

    return orjson.dumps(value, option=option)



def loads(data):
    return orjson.loads(data)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
