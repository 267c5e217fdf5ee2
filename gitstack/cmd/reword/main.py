"""Reword helper entry point, run by git as an editor."""

import sys
import click

from ... import get_logger, setup_logging
from ...reword import reword_file

logger = get_logger(__name__)

@click.command(help="Editor used by gitstack to add commit-ids during a rebase")
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('-v', '--verbose', count=True, help="Increase verbosity")
def reword(path: str, verbose: int) -> None:
    """Reword command."""
    setup_logging(verbose)
    try:
        reword_file(path)
    except OSError as e:
        logger.error(f"Failed to rewrite {path}: {e}")
        sys.exit(1)

def main() -> None:
    """Main entry point."""
    reword()

if __name__ == "__main__":
    main()
