"""Editor helper that adds commit-ids while git rewrites the stack.

git runs the helper twice per rebase: once as the sequence editor on the todo
list, where every `pick` becomes `reword`, and then as the commit editor on each
commit message, where a `commit-id:xxxxxxxx` trailer is appended if missing.
"""

import os
import uuid
import logging
from typing import Optional

from ..git import COMMIT_ID_REGEX

logger = logging.getLogger(__name__)

REBASE_TODO_FILE = "git-rebase-todo"

def new_commit_id() -> str:
    """Get a fresh random commit-id."""
    return uuid.uuid4().hex[:8]

def is_rebase_todo(path: str) -> bool:
    """Check whether git handed us a rebase todo list rather than a commit message."""
    return os.path.basename(path) == REBASE_TODO_FILE

def reword_todo(todo: str) -> str:
    """Turn every pick in a rebase todo list into a reword."""
    lines = []
    for line in todo.split("\n"):
        if line.startswith("pick "):
            line = "reword " + line[len("pick "):]
        lines.append(line)
    return "\n".join(lines)

def add_commit_id(message: str, commit_id: Optional[str] = None) -> str:
    """Append a commit-id trailer to a commit message that lacks one.

    git comment lines ('#') stay after the trailer so they are still stripped.
    """
    lines = message.split("\n")
    end = len(lines)
    for index, line in enumerate(lines):
        if line.startswith("#"):
            end = index
            break

    text = "\n".join(lines[:end]).rstrip()
    if COMMIT_ID_REGEX.search(text):
        return message

    commit_id = commit_id or new_commit_id()
    logger.debug(f"Adding commit-id:{commit_id}")
    result = f"{text}\n\ncommit-id:{commit_id}\n"
    if end < len(lines):
        result += "\n" + "\n".join(lines[end:])
    return result

def reword_file(path: str) -> None:
    """Rewrite the file git asked us to edit."""
    with open(path, "r") as f:
        content = f.read()

    if is_rebase_todo(path):
        content = reword_todo(content)
    else:
        content = add_commit_id(content)

    with open(path, "w") as f:
        f.write(content)
