"""This module can be used to start catalogprep."""

import logging
import logging.config
import signal
import sys
import warnings

import click
from colorama import Fore

from catalogprep.filter.chain import FilterChain
from catalogprep.filter.events import FilterEvent
from catalogprep.runner import Runner
from catalogprep.util.configuration import Configuration, InvalidConfigurationError
from catalogprep.util.defaults import DEFAULT_LOG_CONFIG, EXITCODES
from catalogprep.util.dry_runner import DryRunner
from catalogprep.util.helper import get_versions_string, print_fcolor

warnings.simplefilter("always", DeprecationWarning)
logging.captureWarnings(True)
logging.config.dictConfig(DEFAULT_LOG_CONFIG)
logger = logging.getLogger("catalogprep")


def _print_version(config: "Configuration") -> None:
    print(get_versions_string(config))
    sys.exit(EXITCODES.SUCCESS.value)


def _get_configuration(config_paths: tuple[str]) -> Configuration:
    try:
        config = Configuration.from_sources(config_paths)
        config.logger.setup_logging()
        logging.getLogger("root").debug(f"Log level set to '{config.logger.level}'")
        return config
    except InvalidConfigurationError as error:
        print(f"InvalidConfigurationError: {error}", file=sys.stderr)
        sys.exit(EXITCODES.CONFIGURATION_ERROR.value)


@click.group(name="catalogprep")
@click.version_option(version=get_versions_string(), message="%(version)s")
def cli() -> None:
    """
    catalogprep filters and rewrites catalog records (origin, source, metric) by an ordered
    list of pattern based rules.
    """


@cli.command(short_help="Run catalogprep to filter catalog records")
@click.argument("configs", nargs=-1, required=False)
@click.option(
    "--input",
    "input_file",
    help="JSON lines file to read records from.",
    type=click.File("r", encoding="utf8"),
    default="-",
    show_default=True,
)
@click.option(
    "--output",
    "output_file",
    help="File to write the forwarded records to as JSON lines.",
    type=click.File("w", encoding="utf8"),
    default="-",
    show_default=True,
)
@click.option(
    "--version",
    is_flag=True,
    default=False,
    help="Print version and exit (includes also config version)",
)
def run(configs: tuple[str], input_file, output_file, version=None) -> None:
    """
    Run catalogprep with the given configuration.

    CONFIG is a path to a configuration file.
    """
    configuration = _get_configuration(configs)
    if version:
        _print_version(configuration)
    for version_line in get_versions_string(configuration).split("\n"):
        logger.info(version_line)
    logger.debug(f"Config path: {configs}")
    runner = Runner(configuration)
    if "pytest" not in sys.modules:  # needed for not blocking tests

        def signal_handler(__: int, _) -> None:
            """Handle signals for stopping the runner."""
            runner.stop()

        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)
    try:
        runner.start(input_file, output_file)
    except Exception as error:  # pylint: disable=broad-except
        logger.critical(f"A critical error occurred: {error}", exc_info=True)
        sys.exit(EXITCODES.ERROR.value)
    sys.exit(runner.exit_code.value)


@cli.group(name="test", short_help="Execute tests against a given configuration")
def test() -> None:
    """
    Verify the configuration or execute a dry run of the filter rules.
    """


@test.command(name="config")
@click.argument("configs", nargs=-1)
def test_config(configs: tuple[str]) -> None:
    """
    Verify the configuration file and its filter rules

    CONFIG is a path to a configuration file.
    """
    config = _get_configuration(configs)
    rejected: list[FilterEvent] = []
    chain = FilterChain(config.filters, output=None, name="test_config", observer=rejected.append)
    for event in rejected:
        color = Fore.RED if event.level >= logging.ERROR else Fore.YELLOW
        print_fcolor(color, event.render())
    if rejected:
        print_fcolor(
            Fore.RED,
            f"{len(rejected)} of {len(config.filters)} filter rules were rejected, "
            f"{len(chain.rules)} remain active",
        )
        sys.exit(EXITCODES.CONFIGURATION_ERROR.value)
    print_fcolor(Fore.GREEN, "The verification of the configuration was successful")


@test.command(name="dry-run", short_help="Execute a dry run against a configuration and records")
@click.argument("configs", nargs=-1)
@click.argument("records")
def dry_run(configs: tuple[str], records: str) -> None:
    """
    Execute a catalogprep dry run with the given configuration against a set of records. The
    results of the filtering will be printed in the terminal.

    \b
    CONFIG is a path to a configuration file.
    RECORDS is a path to a JSON lines file with catalog records.
    """
    config = _get_configuration(configs)
    dry_runner = DryRunner(records, config)
    dry_runner.run()


@cli.command(name="print", short_help="Prints the merged configuration")
@click.argument("configs", nargs=-1, required=False)
def print_config(configs: tuple[str]) -> None:
    """Prints the given configuration as yaml

    CONFIG is a path to a configuration file.
    """
    config = _get_configuration(configs)
    print(config.as_yaml())


def main() -> None:
    """Start the catalogprep command line interface."""
    cli()  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()
