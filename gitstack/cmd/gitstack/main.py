"""CLI entry point."""

import os
import sys
import click
from dataclasses import asdict
from typing import Dict, Optional, Tuple, Any
from click import Context

from ... import get_logger, setup_logging
from ...config import Config, default_config
from ...config.config_parser import parse_config
from ...git import (
    RealGit, get_local_commit_stack, get_local_top_commit, get_local_branch_name,
    branch_name_from_commit, parse_branch_name,
)
from ...pretty import print_header, print_json, stack_lines, commit_line
from ...typing import GitStackError

# Get module logger
logger = get_logger(__name__)

def check(err: Optional[Exception]) -> None:
    """Check for error and exit if needed."""
    if err:
        logger.error(f"{err}")
        sys.exit(1)

class AliasedGroup(click.Group):
    """Command group with support for aliases."""

    def __init__(self, name: Optional[str] = None, commands: Optional[Dict[str, click.Command]] = None, **attrs: Any) -> None:
        """Initialize with aliases map."""
        super().__init__(name, commands, **attrs)
        self.aliases: Dict[str, str] = {}

    def get_command(self, ctx: Context, cmd_name: str) -> Optional[click.Command]:
        """Get a command by name, supporting aliases."""
        if cmd_name in self.aliases:
            cmd_name = self.aliases[cmd_name]
        return super().get_command(ctx, cmd_name)

@click.group(cls=AliasedGroup)
@click.pass_context
def cli(ctx: Context) -> None:
    """gitstack - inspect the local stack of commits behind your review branches."""
    ctx.obj = {}

def setup_git(directory: Optional[str] = None) -> Tuple[Config, RealGit]:
    """Setup Git command and config."""
    if directory:
        os.chdir(directory)

    git_cmd = RealGit(default_config())
    try:
        git_cmd.run_cmd("rev-parse --git-dir")
    except GitStackError as e:
        logger.error(f"{e}")
        sys.exit(2)

    config = Config(parse_config())
    return config, RealGit(config)

directory_option = click.option(
    '-C', '--directory', type=click.Path(exists=True, file_okay=False, dir_okay=True),
    help='Run as if gitstack was started in DIRECTORY instead of the current working directory')
verbose_option = click.option(
    '-v', '--verbose', count=True, help="Increase verbosity (can be used multiple times for more verbosity)")

@cli.command(name="stack", help="Show the local commit stack, top commit first")
@directory_option
@verbose_option
@click.option('--json', 'as_json', is_flag=True, help="Print the stack as JSON, bottom commit first")
def stack(directory: Optional[str], verbose: int, as_json: bool) -> None:
    """Stack command."""
    setup_logging(verbose)
    config, git_cmd = setup_git(directory)
    try:
        commits = get_local_commit_stack(config, git_cmd)
        if as_json:
            print_json([asdict(c) for c in commits])
            return
        print_header(f"{get_local_branch_name(git_cmd)}: {len(commits)} unmerged commits")
        for line in stack_lines(commits):
            click.echo(line)
    except GitStackError as e:
        check(e)

@cli.command(name="top", help="Show the top commit of the local stack")
@directory_option
@verbose_option
def top(directory: Optional[str], verbose: int) -> None:
    """Top command."""
    setup_logging(verbose)
    config, git_cmd = setup_git(directory)
    try:
        commit = get_local_top_commit(config, git_cmd)
    except GitStackError as e:
        check(e)
        return
    click.echo(commit_line(commit) if commit else "no local commits")

@cli.command(name="branch-name", help="Show the review branch name of every commit that can be pushed")
@directory_option
@verbose_option
def branch_names(directory: Optional[str], verbose: int) -> None:
    """Branch name command."""
    setup_logging(verbose)
    config, git_cmd = setup_git(directory)
    try:
        commits = get_local_commit_stack(config, git_cmd)
    except GitStackError as e:
        check(e)
        return
    for commit in commits:
        if commit.wip:
            # WIP commits, and everything above them, are never pushed
            break
        click.echo(branch_name_from_commit(config, commit))

@cli.command(name="parse-branch", help="Split a review branch name into prefix, remote branch and commit-id")
@click.argument('name')
@click.option('--remote-branch', '-b', help="Remote branch the review branch targets, if it contains '/'")
def parse_branch(name: str, remote_branch: Optional[str]) -> None:
    """Parse branch command."""
    parsed = parse_branch_name(name, remote_branch)
    if parsed is None:
        logger.error(f"'{name}' is not a review branch name")
        sys.exit(1)
    print_json(parsed._asdict())

def main() -> None:
    """Main entry point."""
    cli.aliases['st'] = 'stack'
    cli(obj={})

if __name__ == "__main__":
    main()
