import pytest
import queue
import socket
import threading
import time

import wiseapi
from wiseapi import config
from wiseapi.pending import Pending
from wiseapi.transport.base import Broker


class Script:
    """ One scripted response from the fake Builder. The response is sent
        once *lines* request lines have been received, one read per chunk.
    """

    def __init__(self, chunks, lines=3, close=False, hold=None, delay=0.05):

        self.chunks = chunks
        self.lines = lines
        self.close = close
        self.hold = hold
        self.delay = delay


class FakeBuilder:
    """ Stand-in for the Builder control socket, listening on loopback.
        Each accepted connection is answered with the next :class:`Script`;
        everything the client sends on that connection is recorded in
        :attr:`received`, in connection order.
    """

    def __init__(self):

        self.socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.socket.bind(('127.0.0.1', 0))
        self.socket.listen(8)

        self.port = self.socket.getsockname()[1]
        self.scripts = queue.SimpleQueue()
        self.received = list()
        self.connections = 0
        self.finished = threading.Semaphore(0)

        self._running = True
        self._thread = threading.Thread(target=self._accept, daemon=True)
        self._thread.start()


    def respond(self, *chunks, **kwargs):

        chunks = [chunk.encode() if isinstance(chunk, str) else chunk for chunk in chunks]
        script = Script(chunks, **kwargs)
        self.scripts.put(script)
        return script


    def wait_finished(self, count=1, timeout=5):
        """ Wait until *count* connections have been fully handled.
        """

        for _ in range(count):
            assert self.finished.acquire(timeout=timeout)


    def wait_connections(self, count, timeout=5):
        """ Wait until at least *count* connections have been accepted.
        """

        deadline = time.time() + timeout

        while self.connections < count:
            assert time.time() < deadline
            time.sleep(0.01)


    def stop(self):

        self._running = False
        self.socket.close()


    def _accept(self):

        while self._running:
            try:
                connection, address = self.socket.accept()
            except OSError:
                break

            self.connections += 1
            script = self.scripts.get()
            slot = len(self.received)
            self.received.append(None)
            thread = threading.Thread(target=self._serve, args=(connection, script, slot), daemon=True)
            thread.start()


    def _serve(self, connection, script, slot):

        buffer = b''

        try:
            while buffer.count(b'\n') < script.lines:
                data = connection.recv(4096)
                if data == b'':
                    break
                buffer += data

            if script.hold is not None:
                script.hold.wait(5)

            for chunk in script.chunks:
                connection.sendall(chunk)
                time.sleep(script.delay)

            if script.close:
                connection.shutdown(socket.SHUT_RDWR)
            else:
                connection.settimeout(5)
                while True:
                    data = connection.recv(4096)
                    if data == b'':
                        break
                    buffer += data
        except OSError:
            pass
        finally:
            connection.close()
            self.received[slot] = buffer
            self.finished.release()


@pytest.fixture
def builder():

    original = wiseapi.endpoint.get()

    fake = FakeBuilder()
    wiseapi.endpoint.initialize('127.0.0.1', fake.port)

    yield fake

    fake.stop()
    wiseapi.endpoint.initialize(*original)


@pytest.fixture
def closed_port():
    """ A loopback port with nothing listening on it.
    """

    original = wiseapi.endpoint.get()

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()

    wiseapi.endpoint.initialize('127.0.0.1', port)

    yield port

    wiseapi.endpoint.initialize(*original)


@pytest.fixture
def clean_defaults():
    """ Clear the broker defaults for the duration of a test, restoring them
        along with the job directory and the Builder endpoint afterwards.
    """

    saved = dict(config._defaults)
    saved_job = config.job_directory()
    saved_endpoint = wiseapi.endpoint.get()
    config._defaults.clear()

    yield

    config._defaults.clear()
    config._defaults.update(saved)
    config.set_job_directory(saved_job)
    wiseapi.endpoint.initialize(*saved_endpoint)


class FakeBroker(Broker):
    """ In-memory broker; tests push inbound messages with :func:`deliver`.
    """

    def __init__(self, options):

        Broker.__init__(self, options)

        self.on_message = None
        self.subscriptions = list()
        self.published = list()
        self.connects = 0
        self.disconnects = 0
        self._connected = False


    @property
    def connected(self):
        return self._connected


    def connect(self, on_message):
        self.on_message = on_message
        self.connects += 1
        self._connected = True


    def subscribe(self, topic_filter, qos):
        self.subscriptions.append((topic_filter, qos))


    def publish(self, topic, payload, qos):
        self.published.append((topic, payload, qos))
        pending = Pending()
        pending._complete(None)
        return pending


    def disconnect(self):
        self.disconnects += 1
        self._connected = False


    def deliver(self, topic, payload):
        if isinstance(payload, str):
            payload = payload.encode()
        self.on_message(topic, payload)


@pytest.fixture
def brokers():
    """ A broker factory that remembers every broker it creates.
    """

    created = list()

    def factory(options):
        broker = FakeBroker(options)
        created.append(broker)
        return broker

    factory.created = created
    return factory


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
