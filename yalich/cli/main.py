import sys
from pathlib import Path
from typing import List, Optional, TextIO

import click

from .. import __version__
from ..config import Config, load_config
from ..console import print_license_summary
from ..exceptions import YalichError
from ..http_client import create_session
from ..logging_config import DEFAULT_LOG_LEVEL, logger, set_log_level
from ..models import Dependency
from ..pipeline import create_pipeline
from ..serialization import DEFAULT_FORMAT, SUPPORTED_FORMATS, write_dependencies
from ..telemetry import initialize_sentry

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def run(
    config: Config,
    output: TextIO,
    output_format: str = DEFAULT_FORMAT,
    sample: bool = False,
    quiet: bool = False,
) -> List[Dependency]:
    """
    Run the pipeline for a loaded configuration and write the license table.

    Args:
        config: Loaded configuration
        output: Stream receiving the table
        output_format: csv or json
        sample: Only process the first dependency of each ecosystem
        quiet: Skip the summary table on stderr

    Returns:
        The written dependencies

    Raises:
        YalichError: On the first fatal error
    """
    with create_session(config.user_agent) as session:
        pipeline = create_pipeline(config, session, sample=sample)
        dependencies = pipeline.run()

    write_dependencies(dependencies, output, output_format)
    logger.info(f"Wrote {len(dependencies)} dependencies")

    if not quiet:
        print_license_summary(pipeline.stats)
    return dependencies


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the TOML configuration file.",
)
@click.option(
    "-o",
    "--output",
    type=click.File("w", encoding="utf-8"),
    default="-",
    show_default=True,
    help="File to write the license table to ('-' for stdout).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(SUPPORTED_FORMATS),
    default=DEFAULT_FORMAT,
    show_default=True,
    help="Output format.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Stop after processing one dependency of each ecosystem.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
    envvar="YALICH_LOG_LEVEL",
    help="Logging verbosity (logs go to stderr).",
)
@click.option("-q", "--quiet", is_flag=True, default=False, help="Do not print the summary table.")
@click.version_option(__version__, prog_name="yalich")
def cli(
    config_path: Path,
    output: TextIO,
    output_format: str,
    debug: bool,
    log_level: str,
    quiet: bool,
) -> None:
    """Collect license metadata for Python, Rust and Node dependencies.

    Reads the manifests listed in the configuration file, looks every
    dependency up in PyPI, crates.io or npm, falls back to GitHub for
    missing licenses and writes one row per dependency.
    """
    set_log_level(log_level)
    initialize_sentry()

    try:
        config = load_config(config_path)
        run(config, output, output_format=output_format, sample=debug, quiet=quiet)
    except YalichError as e:
        logger.error(str(e))
        sys.exit(1)


def main(args: Optional[List[str]] = None) -> None:
    """Main entry point for yalich."""
    cli(args)


if __name__ == "__main__":
    main()
