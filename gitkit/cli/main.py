"""gitkit CLI"""

import click

from gitkit import __version__
from gitkit.cli.origin import origin
from gitkit.cli.repo import clone, fail, ready, sync, update
from gitkit.cli.utils.logging import debug_option
from gitkit.exceptions import GitkitError
from gitkit.git import get_git_version


@click.group()
@click.version_option(__version__, prog_name="gitkit")
@debug_option
@click.pass_context
def cli(ctx):
    """
    gitkit: self-healing git mirrors and blob provenance.
    """
    ctx.ensure_object(dict)


@cli.command("git-version")
def git_version():
    """Show the version of the git executable in use."""
    try:
        click.echo(get_git_version())
    except GitkitError as e:
        fail(e)


cli.add_command(ready)
cli.add_command(clone)
cli.add_command(update)
cli.add_command(sync)
cli.add_command(origin)

if __name__ == "__main__":
    cli(obj={})
