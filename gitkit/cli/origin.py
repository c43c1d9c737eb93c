"""cli command for blob provenance"""

import json
from pathlib import Path

import click
import yaml

from gitkit.cli.repo import fail, locked
from gitkit.cli.utils.logging import debug_option
from gitkit.exceptions import GitkitError
from gitkit.git import find_origin


@click.command("origin")
@debug_option
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--rev",
    "-r",
    default="HEAD",
    show_default=True,
    help="Reference revision whose files are traced.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    show_default=True,
    help="Output format.",
)
def origin(path: Path, rev: str, output_format: str):
    """Print, for each file at REV, the earliest commit holding the same content.

    Each entry maps a path to its blob hash and origin as [commit, index],
    index counting commits from the oldest (0). Files whose content never
    appears in history have a null origin.
    """
    with locked(path):
        try:
            provenance = find_origin(path, rev)
        except GitkitError as e:
            fail(e)

    data = provenance.to_dict()
    if output_format == "yaml":
        click.echo(yaml.safe_dump(data, sort_keys=True), nl=False)
    else:
        click.echo(json.dumps(data, indent=2, sort_keys=True))
