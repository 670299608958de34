"""CLI interface for container-feeder"""

import logging
import sys

import click

from container_feeder.core.config import DEFAULT_CONFIG_FILE, Config
from container_feeder.core.orchestrator import Feeder
from container_feeder.exceptions import FeederError

DEFAULT_IMAGE_LOCATION = "/usr/share/suse-docker-images/native"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
    default="info",
    show_default=True,
    help="Log level",
)
@click.version_option(package_name="container-feeder")
@click.pass_context
def cli(ctx, log_level: str):
    """container-feeder - import container images delivered as RPMs

    Loads the images shipped in a directory into the local container
    engine, skipping the ones the engine already knows.
    """
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    logging.getLogger().setLevel(LOG_LEVELS[log_level.lower()])


@cli.command(name="import")
@click.option(
    "--dir",
    "directory",
    default=DEFAULT_IMAGE_LOCATION,
    show_default=True,
    help="Directory containing the images to import",
)
@click.option(
    "-c",
    "--config",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Path to configuration file",
)
@click.option(
    "--skip-verification",
    is_flag=True,
    help="Skip RPM verification of metadata files (insecure, only for testing)",
)
def import_images(directory: str, config: str, skip_verification: bool):
    """Import the missing images into the configured engine

    Examples:
        container-feeder import
        container-feeder --log-level debug import --dir /srv/images -c feeder.json
    """
    if not directory:
        click.echo("✗ Error: missing mandatory `--dir` value")
        sys.exit(1)

    try:
        cfg = Config(config)
        feeder = Feeder(cfg, verify_files=not skip_verification)

        if skip_verification:
            click.echo("⚠️  WARNING: RPM verification of image metadata is disabled!")

        response = feeder.import_images(directory)

    except FeederError as e:
        click.echo(f"\n✗ Something went wrong while importing the images: {e}")
        sys.exit(1)

    if response.successful_imports:
        click.echo("Successfully imported the following images:")
    for image in response.successful_imports:
        click.echo(f"  - {image}")

    if response.failed_imports:
        click.echo("The following images failed to be imported:")
    for failed in response.failed_imports:
        click.echo(f"  - {failed.image} with error: {failed.error}")

    if not response.successful_imports and not response.failed_imports:
        click.echo("✓ No images to import")

    sys.exit(0)


@cli.command()
@click.option(
    "-c",
    "--config",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Path to configuration file",
)
def validate(config: str):
    """Validate configuration file

    Examples:
        container-feeder validate -c /etc/container-feeder.json
    """
    try:
        cfg = Config(config)

        if not cfg.validate():
            click.echo("✗ Configuration validation failed")
            sys.exit(1)

        click.echo("✓ Configuration is valid")
        click.echo(f"  Feeder target: {cfg.feeder_target}")
        if cfg.whitelist:
            click.echo(f"  Whitelist: {', '.join(cfg.parsed_whitelist())}")
        else:
            click.echo("  Whitelist: all images allowed")

        sys.exit(0)

    except FeederError as e:
        click.echo(f"✗ Error: {e}")
        sys.exit(1)


def main():
    """Entry point for CLI"""
    cli()


if __name__ == "__main__":
    main()
