"""
Command Line Interface for the ECR image checker.
"""
import logging
import sys

import click
from dotenv import load_dotenv

from ..MANAGERS.image_checker import ImageChecker
from ..PARSERS.config_loader import DEFAULT_CONFIG_FILE
from ..errors import CheckerError

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    root.addHandler(handler)
    root.setLevel(level.upper())


@click.group()
@click.option(
    '--log-level',
    envvar='LOG_LEVEL',
    default='ERROR',
    show_default=True,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help='Log level for messages written to stderr',
)
@click.option(
    '--image-directory',
    envvar='IMAGE_DIRECTORY',
    default='.',
    show_default=True,
    help="Root directory which contains the image directories (each with its own config file)",
)
@click.option(
    '--defaults-file',
    envvar='DEFAULTS_FILE',
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help='Path to the defaults config file',
)
@click.pass_context
def cli(ctx, log_level, image_directory, defaults_file):
    """
    ECR image checker.

    Finds the images whose tag is missing from one or more ECR registries
    and prints them as a GitHub Actions matrix.
    """
    _setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj.setdefault('checker', ImageChecker(image_directory=image_directory, defaults_file=defaults_file))


@cli.command()
@click.pass_context
def run(ctx):
    """Check remote tags and print the targets that need building."""
    checker = ctx.obj['checker']
    try:
        output = checker.run()
    except CheckerError as e:
        logger.error("whilst running: %s", e)
        ctx.exit(1)
    click.echo(output)


@cli.command()
@click.pass_context
def lint(ctx):
    """Validate every image config without contacting AWS."""
    checker = ctx.obj['checker']
    try:
        images = checker.prepare()
    except CheckerError as e:
        logger.error("whilst linting: %s", e)
        ctx.exit(1)

    for path, image in images.items():
        for target in image.targets:
            click.echo(f"{path:40} {target.full_image_ref}")
    click.echo(f"{len(images)} image config(s) OK")


def main():
    """
    Main entry point for the CLI.
    """
    load_dotenv()
    cli(obj={})


if __name__ == '__main__':
    main()
