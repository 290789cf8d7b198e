"""Command line entry point for the W.I.S.E. client.

``wise-api configure`` records the Builder and broker locations in the
configuration file, ``wise-api watch`` prints the lifecycle events of a
running job until it completes, and ``wise-api rerun`` asks the job
managers listening on the broker to run a job again.
"""

import argparse
import sys
import threading

from . import config
from . import endpoint
from . import log
from .events import Category
from .manager import JobManager
from .transport.base import TransportError


def host_port(text):
    """Split a ``HOST:PORT`` argument; the port is required."""
    host, separator, port = text.rpartition(':')

    if separator == '' or host == '':
        raise argparse.ArgumentTypeError('expected HOST:PORT, got ' + repr(text))

    try:
        port = int(port)
    except ValueError:
        raise argparse.ArgumentTypeError('invalid port in ' + repr(text))

    return host, port


def configure(args):
    if args.builder is not None:
        endpoint.initialize(*args.builder)

    if args.broker is not None:
        host, port = args.broker
        config.set_defaults(host=host, port=port)

    if args.topic is not None:
        config.set_defaults(topic=args.topic)

    if args.job_directory is not None:
        config.set_job_directory(args.job_directory)

    written = config.save(args.config)
    print(f"Wrote {written}")
    return 0


def describe(event):
    category = event.category

    if category == Category.SIMULATION_COMPLETE:
        return 'simulation complete'

    if category == Category.SCENARIO_COMPLETE:
        if event.success:
            return 'scenario complete'
        return 'scenario failed: ' + event.error_message

    if category == Category.STATISTICS_RECEIVED:
        pairs = ['%s=%s' % (stat.key, stat.value) for stat in event.statistics]
        return 'statistics: ' + ', '.join(pairs)

    validation = event.validation
    return 'validation: valid=%s, %d errors' % (validation.valid, len(validation.error_list))


def watch(args):
    manager = JobManager(args.job)
    finished = threading.Event()

    def report(event):
        print(f"{event.time.isoformat()} {args.job}: {describe(event)}")
        if event.category == Category.SIMULATION_COMPLETE:
            finished.set()

    for category in Category:
        manager.on(category, report)

    manager.start()

    try:
        finished.wait()
    except KeyboardInterrupt:
        pass
    finally:
        manager.dispose()

    return 0


def rerun(args):
    manager = JobManager(args.job)
    manager.start()

    try:
        pending = manager.broadcast_rerun(args.job)
        pending.wait(args.timeout)
    finally:
        manager.dispose()

    if pending.poll() == False:
        print(f"error: the broker did not acknowledge the rerun of {args.job} within {args.timeout:g} seconds", file=sys.stderr)
        return 1

    print(f"Requested a rerun of {args.job}")
    return 0


def parser():
    parser = argparse.ArgumentParser(
        prog='wise-api',
        description='Interact with a W.I.S.E. Builder and its job status broker'
    )
    parser.add_argument(
        '--config',
        help='Path to the configuration file (default: $WISE_HOME/config.json)',
        default=None
    )
    parser.add_argument(
        '-v', '--verbose',
        help='Log debug messages to stderr',
        action='store_true'
    )

    commands = parser.add_subparsers(dest='command', required=True)

    command = commands.add_parser('configure', help='Record the Builder and broker locations')
    command.add_argument('--builder', type=host_port, help='Builder control socket, as HOST:PORT')
    command.add_argument('--broker', type=host_port, help='Job status broker, as HOST:PORT')
    command.add_argument('--topic', help='Base topic used by the Builder')
    command.add_argument('--job-directory', help='Directory the Builder writes jobs to')
    command.set_defaults(handler=configure)

    command = commands.add_parser('watch', help='Print the lifecycle events of a job')
    command.add_argument('job', help='The job id')
    command.set_defaults(handler=watch)

    command = commands.add_parser('rerun', help='Ask the job managers to rerun a job')
    command.add_argument('job', help='The job id')
    command.add_argument('--timeout', type=float, default=10, help='Seconds to wait for the broker')
    command.set_defaults(handler=rerun)

    return parser


def main(argv=None):
    """Main entry point for the ``wise-api`` command."""
    args = parser().parse_args(argv)

    if args.verbose:
        log.setup('DEBUG')
    else:
        log.setup()

    config.load(args.config)

    try:
        return args.handler(args)
    except TransportError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
