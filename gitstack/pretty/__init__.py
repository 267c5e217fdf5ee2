"""Pretty formatting utilities for CLI output."""

import json
import shutil
import sys
from typing import IO, List, Optional

from ..typing import Commit

def get_term_width() -> int:
    """Get terminal width, default to 80 if can't detect."""
    try:
        return shutil.get_terminal_size().columns
    except Exception:
        return 80


def header(text: str) -> str:
    """Create a boxed header."""
    width = max(get_term_width(), len(text) + 4)
    h_line = "─" * (width - 2)
    v_line = "│"

    result = [
        f"┌{h_line}┐",
        f"{v_line} {text}{' ' * (width - len(text) - 3)}{v_line}",
        f"└{h_line}┘"
    ]

    return "\n".join(result)


def commit_line(commit: Commit) -> str:
    """Format a commit as '<hash8> <id> [WIP] <subject>'."""
    wip = " WIP" if commit.wip else ""
    return f"{commit.commit_hash[:8]} {commit.commit_id[:8]}{wip} {commit.subject}"


def stack_lines(commits: List[Commit]) -> List[str]:
    """Format a bottom-first stack for display, top commit first."""
    return [commit_line(c) for c in reversed(commits)]


def pretty_json(data: object, prefix: str = "") -> str:
    """Format JSON data with optional prefix."""
    raw = json.dumps(data, indent=2)
    if prefix:
        lines = raw.split("\n")
        return "\n".join(f"{prefix}{line}" for line in lines)
    return raw


def print_json(data: object, prefix: str = "", file: Optional[IO[str]] = None) -> None:
    """Print JSON data to file (default stdout)."""
    if file is None:
        file = sys.stdout
    print(pretty_json(data, prefix), file=file)


def print_header(text: str, file: Optional[IO[str]] = None) -> None:
    """Print a header to file (default stdout)."""
    if file is None:
        file = sys.stdout
    print(header(text), file=file)
