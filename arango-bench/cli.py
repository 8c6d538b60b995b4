"""
Command line interface for the ArangoDB load generator.
"""

import re
import sys
import logging
import argparse

import uvloop

from configuration import (
    ARANGO_ENDPOINT,
    ARANGO_USER,
    ARANGO_PASSWORD,
    DEFAULT_NR_CONNECTIONS,
    DEFAULT_TESTCASE,
    DEFAULT_REPLICATION_FACTOR,
    DEFAULT_NR_REQUESTS,
    DEFAULT_PARALLELISM,
    DEFAULT_DELAY,
    DEFAULT_DISTRIBUTION,
    DEFAULT_PROTOCOL,
    DEFAULT_OUTPUT_FORMAT,
    SUPPORTED_DISTRIBUTIONS,
    OUTPUT_CSV,
    SECONDS_PER_MINUTE,
    SECONDS_PER_HOUR,
)
from common.errors import BenchmarkError
from common.metrics_utils import RunTotal
from common.system_factory import create_system
from common.worker_pool import RunConfig
from reporting.reporters import create_reporter
from runner.benchmark import BenchmarkRunner
from scenarios import testcase_names

logger = logging.getLogger(__name__)

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": float(SECONDS_PER_MINUTE),
    "h": float(SECONDS_PER_HOUR),
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """Parse a Go style duration ("10ms", "1.5s", "1m30s") into seconds.

    A plain number is taken as seconds.

    Raises:
        ValueError: If the text is not a duration
    """
    text = text.strip()
    try:
        return float(text)
    except ValueError:
        pass

    sign = -1.0 if text.startswith("-") else 1.0
    body = text.lstrip("+-")
    position = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(body):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    if not body or position != len(body):
        raise ValueError(f"invalid duration: {text!r}")
    return sign * seconds


def parse_bool(text: str) -> bool:
    """Parse flag values like Go's flag package does (true/false, 1/0, t/f)."""
    value = text.strip().lower()
    if value in ("1", "t", "true", "yes", "on"):
        return True
    if value in ("0", "f", "false", "no", "off"):
        return False
    raise ValueError(f"invalid boolean: {text!r}")


def configure_logging(output_format: str, verbose: bool = False) -> None:
    """Set up log output; CSV mode silences it so stdout carries only data rows."""
    if not logging.root.handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s',
        )
    if output_format == OUTPUT_CSV:
        logging.disable(logging.CRITICAL)


def _flag(name: str):
    """Accept both --name and the single dash -name spelling of the Go tool."""
    return (f"--{name}", f"-{name}")


class ArangoBenchCLI:
    """CLI interface for the ArangoDB load generator."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            description='ArangoDB latency benchmark',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # 10000 document inserts with 8 concurrent workers
  arango-bench --testcase postDocs --nrRequests 10000 --parallelism 8

  # Seed, read, replace and AQL scenarios in one run, CSV output
  arango-bench --testcase all --outputFormat csv > results.csv

  # Throttled reads over HTTP/2 with TLS
  arango-bench --testcase readDocs --protocol HTTP2 --useTLS --delay 5ms
            """
        )

        parser.add_argument(*_flag('nrConnections'), dest='nr_connections', type=int,
                            default=DEFAULT_NR_CONNECTIONS,
                            help=f'number of connections (default: {DEFAULT_NR_CONNECTIONS})')
        parser.add_argument(*_flag('endpoint'), dest='endpoint', default=ARANGO_ENDPOINT,
                            help=f'server endpoint (default: {ARANGO_ENDPOINT})')
        parser.add_argument(*_flag('testcase'), dest='testcase', default=DEFAULT_TESTCASE,
                            choices=testcase_names(),
                            help=f'test case (default: {DEFAULT_TESTCASE})')
        parser.add_argument(*_flag('replicationFactor'), dest='replication_factor', type=int,
                            default=DEFAULT_REPLICATION_FACTOR,
                            help='replication factor of collection')
        parser.add_argument(*_flag('nrRequests'), dest='nr_requests', type=int,
                            default=DEFAULT_NR_REQUESTS,
                            help=f'number of requests (default: {DEFAULT_NR_REQUESTS})')
        parser.add_argument(*_flag('parallelism'), dest='parallelism', type=int,
                            default=DEFAULT_PARALLELISM,
                            help=f'parallelism (default: {DEFAULT_PARALLELISM})')
        parser.add_argument(*_flag('delay'), dest='delay', type=parse_duration,
                            default=parse_duration(DEFAULT_DELAY),
                            help='delay per worker between operations, e.g. 10ms (default: 0)')
        parser.add_argument(*_flag('stagger'), dest='stagger', type=parse_bool, nargs='?',
                            const=True, default=True,
                            help='spread the first request of each worker over one delay (default: true)')
        parser.add_argument(*_flag('distribution'), dest='distribution',
                            choices=SUPPORTED_DISTRIBUTIONS, default=DEFAULT_DISTRIBUTION,
                            help=f'how requests are handed to workers (default: {DEFAULT_DISTRIBUTION})')
        parser.add_argument(*_flag('cleanup'), dest='cleanup', type=parse_bool, nargs='?',
                            const=True, default=True,
                            help='flag whether to perform cleanup (default: true)')
        parser.add_argument(*_flag('protocol'), dest='protocol', default=DEFAULT_PROTOCOL,
                            help=f'protocol: HTTP or HTTP2 (default: {DEFAULT_PROTOCOL})')
        parser.add_argument(*_flag('useTLS'), dest='use_tls', type=parse_bool, nargs='?',
                            const=True, default=False,
                            help='flag whether to use TLS')
        parser.add_argument(*_flag('auth.user'), dest='username', default=ARANGO_USER,
                            help='Authentication Username')
        parser.add_argument(*_flag('auth.pass'), dest='password', default=ARANGO_PASSWORD,
                            help='Authentication Password')
        parser.add_argument(*_flag('outputFormat'), dest='output_format',
                            default=DEFAULT_OUTPUT_FORMAT,
                            help=f'output format: console or csv (default: {DEFAULT_OUTPUT_FORMAT})')
        parser.add_argument('--verbose', '-v', action='store_true',
                            help='debug logging')

        return parser

    async def run_benchmark(self, args, reporter) -> RunTotal:
        """Connect to the server and run the selected testcase."""
        run_config = RunConfig(
            nr_requests=args.nr_requests,
            parallelism=args.parallelism,
            delay=args.delay,
            stagger=args.stagger,
            distribution=args.distribution,
        )
        system = create_system(
            args.protocol,
            args.endpoint,
            nr_connections=args.nr_connections,
            use_tls=args.use_tls,
            username=args.username,
            password=args.password,
        )

        async with system:
            runner = BenchmarkRunner(
                system,
                run_config,
                reporter,
                cleanup=args.cleanup,
                replication_factor=args.replication_factor,
            )
            return await runner.run(args.testcase)

    def run(self, args=None):
        """Run the CLI with the given arguments. Returns the process exit status."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        try:
            reporter = create_reporter(parsed_args.output_format)
        except BenchmarkError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        configure_logging(parsed_args.output_format, parsed_args.verbose)
        logger.info(
            f"Server endpoint: {parsed_args.endpoint} using {parsed_args.nr_connections} connections"
        )
        logger.info("")

        try:
            uvloop.run(self.run_benchmark(parsed_args, reporter))
            return 0
        except BenchmarkError as e:
            logger.error(str(e))
            if parsed_args.output_format == OUTPUT_CSV:
                print(f"Error: {e}", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1


def main():
    """Main entry point."""
    cli = ArangoBenchCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
