import argparse
import datetime
import pytest

import wiseapi
from wiseapi import cli, events
from wiseapi.manager import JobManager
from wiseapi.pending import Pending
from wiseapi.protocol.message import Statistic, Validation
from wiseapi.transport import TransportConnectionError


@pytest.fixture
def quiet(monkeypatch):
    """ Keep :func:`wiseapi.cli.main` from attaching a handler to the
        captured stderr.
    """

    monkeypatch.setattr(wiseapi.log, 'setup', lambda level=None, stream=None: None)


def test_host_port():

    assert cli.host_port('localhost:1883') == ('localhost', 1883)
    assert cli.host_port('::1:32479') == ('::1', 32479)

    for invalid in ('localhost', ':1883', 'localhost:mqtt'):
        with pytest.raises(argparse.ArgumentTypeError):
            cli.host_port(invalid)


def test_describe():

    now = datetime.datetime.now(datetime.timezone.utc)

    assert cli.describe(events.SimulationComplete(None, now)) == 'simulation complete'
    assert cli.describe(events.ScenarioComplete(None, now, True)) == 'scenario complete'
    assert cli.describe(events.ScenarioComplete(None, now, False, 'disk full')) == 'scenario failed: disk full'

    statistics = [Statistic('burned', 12.5), Statistic('name', 'fire')]
    assert cli.describe(events.StatisticsReceived(None, now, statistics)) == 'statistics: burned=12.5, name=fire'

    validation = Validation(True, False, '', ['bad ignition', 'bad fuel'])
    assert cli.describe(events.ValidationReceived(None, now, validation)) == 'validation: valid=False, 2 errors'


def test_configure(quiet, clean_defaults, tmp_path, capsys):

    filename = str(tmp_path / 'config.json')

    result = cli.main(['--config', filename, 'configure',
                       '--builder', '10.0.0.5:32480',
                       '--broker', 'mq.example:1884',
                       '--topic', 'fires',
                       '--job-directory', '/data/jobs'])

    assert result == 0
    assert filename in capsys.readouterr().out

    saved = wiseapi.json.loads(open(filename, 'rb').read())
    assert saved['builder'] == {'address': '10.0.0.5', 'port': 32480}
    assert saved['broker'] == {'host': 'mq.example', 'port': 1884, 'topic': 'fires'}
    assert saved['job_directory'] == '/data/jobs'


def test_rerun(quiet, clean_defaults, tmp_path, capsys, monkeypatch, brokers):

    monkeypatch.setattr(cli, 'JobManager', lambda job: JobManager(job, broker=brokers))

    result = cli.main(['--config', str(tmp_path / 'absent.json'), 'rerun', 'job42'])

    assert result == 0
    assert 'job42' in capsys.readouterr().out

    broker = brokers.created[0]
    topic, payload, qos = broker.published[0]
    assert topic.endswith('/manager/manage')
    assert wiseapi.json.loads(payload)['target'] == 'job42'
    assert broker.disconnects == 1


def test_rerun_unreachable(quiet, clean_defaults, tmp_path, capsys, monkeypatch, brokers):

    def refuse(on_message):
        raise TransportConnectionError('connection refused')

    def unreachable(options):
        broker = brokers(options)
        broker.connect = refuse
        return broker

    monkeypatch.setattr(cli, 'JobManager', lambda job: JobManager(job, broker=unreachable))

    result = cli.main(['--config', str(tmp_path / 'absent.json'), 'rerun', 'job42'])

    assert result == 1
    assert 'connection refused' in capsys.readouterr().err


def test_rerun_unacknowledged(quiet, clean_defaults, tmp_path, capsys, monkeypatch, brokers):

    def silent(options):
        broker = brokers(options)
        broker.publish = lambda topic, payload, qos: Pending()
        return broker

    monkeypatch.setattr(cli, 'JobManager', lambda job: JobManager(job, broker=silent))

    result = cli.main(['--config', str(tmp_path / 'absent.json'), 'rerun', 'job42', '--timeout', '0.1'])

    assert result == 1

    output = capsys.readouterr()
    assert 'did not acknowledge' in output.err
    assert 'Requested' not in output.out
    assert brokers.created[0].disconnects == 1


def test_watch(quiet, clean_defaults, tmp_path, capsys, monkeypatch, brokers):

    def manager(job):
        created = JobManager(job, broker=brokers)
        start = created.start

        def start_and_deliver(options=None):
            start(options)
            broker = brokers.created[-1]
            broker.deliver('wise/app1/job42/status', '{"status":5,"message":"scen0"}')
            broker.deliver('wise/app1/job42/status', '{"status":5,"message":"WISE.EXE operations","time":"2024-01-01T00:00:00Z"}')

        created.start = start_and_deliver
        return created

    monkeypatch.setattr(cli, 'JobManager', manager)

    result = cli.main(['--config', str(tmp_path / 'absent.json'), 'watch', 'job42'])

    assert result == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].endswith('job42: scenario complete')
    assert lines[1] == '2024-01-01T00:00:00+00:00 job42: simulation complete'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
