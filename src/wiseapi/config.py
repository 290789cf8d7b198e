""" Configuration for the W.I.S.E. client: where configuration files live,
    the defaults used when connecting to the job status broker, and the
    ``config.json`` file that records both the Builder endpoint and the
    broker settings between sessions.
"""

import os
import socket
import threading
import uuid

from . import endpoint
from . import json

default_host = '127.0.0.1'
default_topic = 'wise'
client_prefix = 'pyapi_'

filename = 'config.json'

_lock = threading.Lock()
_defaults = dict()
_job_directory = None


class BrokerOptions:
    """ The connection settings for the job status broker. Any field left
        as None is filled from the module defaults by :func:`fill`; the
        *topic* is the base of every topic published by the Builder.
    """

    fields = ('host', 'port', 'topic', 'client_id', 'username', 'password')

    def __init__(self, host=None, port=None, topic=None, client_id=None, username=None, password=None):

        self.host = host
        self.port = port
        self.topic = topic
        self.client_id = client_id
        self.username = username
        self.password = password


    def __repr__(self):
        return 'BrokerOptions(%r, %r, %r, %r)' % (self.host, self.port, self.topic, self.client_id)


    def to_dict(self):
        """ Return the fields that are set, excluding the password.
        """

        result = dict()

        for field in self.fields:
            if field == 'password':
                continue

            value = getattr(self, field)
            if value is not None:
                result[field] = value

        return result


# end of class BrokerOptions



def _environment():

    found = dict()

    for field in ('host', 'port', 'topic', 'username', 'password'):
        variable = 'WISE_BROKER_' + field.upper()
        try:
            value = os.environ[variable]
        except KeyError:
            continue

        if field == 'port':
            value = int(value)

        found[field] = value

    return found



def directory(default=None):
    """ Return the directory location where we should be loading and/or saving
        configuration files. This defaults to ``$HOME/.wise``, but can be
        overridden by calling this method with a valid path, or by setting
        the ``WISE_HOME`` environment variable. Note that changes to the
        environment variable will be ignored unless it is set prior to the
        first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        os.environ['WISE_HOME'] = default
        directory.found = default


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['WISE_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('WISE_HOME and HOME environment variables not set, cannot determine W.I.S.E. configuration directory')

    found = os.path.join(home, '.wise')

    directory.found = found
    return found

directory.found = None



def set_defaults(**options):
    """ Set the default broker options used by :func:`fill`. Only the
        host, port, topic, username and password may be set; a client
        id is generated for each connection and never stored here. A value
        of None removes a previously set default.
    """

    allowed = set(BrokerOptions.fields)
    allowed.remove('client_id')

    for key in options.keys():
        if key in allowed:
            pass
        else:
            raise TypeError('not a broker default: ' + repr(key))

    with _lock:
        for key, value in options.items():
            if value is None:
                _defaults.pop(key, None)
            elif key == 'port':
                _defaults[key] = int(value)
            else:
                _defaults[key] = value



def defaults():
    """ Return a :class:`BrokerOptions` holding the current defaults.
    """

    with _lock:
        return BrokerOptions(**_defaults)



def client_id():
    """ Generate a client id unique to this process and host.
    """

    return client_prefix + uuid.uuid4().hex[:8] + '-' + socket.gethostname()



def fill(options=None):
    """ Return a new :class:`BrokerOptions` with every unset field of
        *options* filled in from the defaults. The port defaults to the
        standard port for the selected broker backend, and a client id is
        generated if none was provided.
    """

    if options is None:
        options = BrokerOptions()

    with _lock:
        current = dict(_defaults)

    filled = BrokerOptions()

    for field in BrokerOptions.fields:
        value = getattr(options, field)
        if value is None:
            value = current.get(field)
        setattr(filled, field, value)

    if filled.host is None:
        filled.host = default_host

    if filled.port is None:
        from . import transport
        filled.port = transport.broker.default_port

    if filled.topic is None:
        filled.topic = default_topic

    if filled.client_id is None:
        filled.client_id = client_id()

    filled.port = int(filled.port)

    return filled



def job_directory():
    """ Return the job directory recorded in the configuration file, if any.
    """

    return _job_directory



def set_job_directory(path):

    global _job_directory
    _job_directory = path



def path(name=None):

    if name is None:
        name = os.path.join(directory(), filename)

    return name



def load(name=None):
    """ Read the configuration file, if it exists, and apply it: the Builder
        address and port are handed to :func:`wiseapi.endpoint.initialize`,
        and the broker settings become the defaults for :func:`fill`. The
        decoded contents are returned; a missing file is not an error, and
        returns an empty dictionary.
    """

    name = path(name)

    try:
        raw_json = open(name, 'rb').read()
    except FileNotFoundError:
        return dict()

    configuration = json.loads(raw_json)

    if isinstance(configuration, dict):
        pass
    else:
        raise ValueError('configuration file must contain a JSON object: ' + name)

    builder = configuration.get('builder')

    if builder:
        address = builder.get('address', endpoint.address())
        port = builder.get('port', endpoint.port())
        endpoint.initialize(address, port)

    broker = configuration.get('broker')

    if broker:
        broker = dict(broker)
        broker.pop('client_id', None)
        set_defaults(**broker)

    located = configuration.get('job_directory')

    if located:
        set_job_directory(located)

    return configuration



def save(name=None):
    """ Write the current Builder endpoint, broker defaults and job
        directory to the configuration file. The broker password is
        never written.
    """

    name = path(name)

    configuration = dict()

    address, port = endpoint.get()
    configuration['builder'] = {'address': address, 'port': port}
    configuration['broker'] = defaults().to_dict()

    if _job_directory is not None:
        configuration['job_directory'] = _job_directory

    parent = os.path.dirname(name)

    if parent and os.path.exists(parent) == False:
        os.makedirs(parent, mode=0o775)

    raw_json = json.dumps(configuration, indent=True)

    writer = open(name, 'wb')
    writer.write(raw_json)
    writer.close()

    os.chmod(name, 0o664)

    return name


_defaults.update(_environment())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
