"""Common types used across the codebase."""

from dataclasses import dataclass
from typing import Dict, List, NewType, Optional, Protocol

# Create NewTypes for commit identifiers
CommitID = NewType('CommitID', str)
CommitHash = NewType('CommitHash', str)


@dataclass
class Commit:
    """One local, unmerged commit in the stack."""
    commit_id: CommitID
    commit_hash: CommitHash
    subject: str
    body: str = ""
    wip: bool = False

    @classmethod
    def from_strings(cls, commit_id: str, commit_hash: str, subject: str,
                     body: str = "", wip: bool = False) -> 'Commit':
        """Create a Commit from plain strings."""
        return cls(CommitID(commit_id), CommitHash(commit_hash), subject, body, wip)


class GitInterface(Protocol):
    """What the stack accessor needs from a git runner."""

    def run_cmd(self, command: str, env: Optional[Dict[str, str]] = None) -> str:
        ...

    def must_git(self, command: str) -> str:
        ...

    def git_with_editor(self, command: str, editor: str) -> str:
        ...


class GitStackError(Exception):
    """Base class for gitstack errors."""


class GitError(GitStackError):
    """A git command failed."""


class CommitStackParseError(GitStackError):
    """The commit log could not be turned into a valid stack."""


class MalformedCommitLogError(CommitStackParseError):
    """The commit log does not follow the `git log --format=medium` block grammar."""

    def __init__(self, message: str, line: Optional[int] = None):
        if line is not None:
            message = f"{message} (line {line + 1})"
        super().__init__(message)
        self.line = line


class MissingCommitIDError(CommitStackParseError):
    """A commit in the stack has no `commit-id:xxxxxxxx` trailer."""

    def __init__(self, commit_hash: str, subject: str = "", trailing: bool = False):
        where = "last commit in the log" if trailing else "commit"
        super().__init__(
            f"{where} {commit_hash[:8]} ('{subject}') is missing a `commit-id:xxxxxxxx` line"
        )
        self.commit_hash = commit_hash
        self.subject = subject
        self.trailing = trailing


class PatchIDError(MalformedCommitLogError):
    """A fallback identifier could not be derived for a commit."""


class CommitStackUnrecoverableError(GitStackError):
    """The stack is still invalid after rewriting local history."""


class RewordHelperNotFoundError(GitStackError):
    """The reword helper program is not on PATH."""


class DuplicateCommitIDError(GitStackError):
    """Two or more commits in the stack share a commit-id."""

    def __init__(self, duplicates: Dict[str, List[Commit]]):
        self.duplicates = duplicates
        lines = ["Duplicate commit-ids found in your stack:"]
        for commit_id, commits in duplicates.items():
            hashes = ", ".join(f"{c.commit_hash[:8]} ('{c.subject}')" for c in commits)
            lines.append(f"  commit-id:{commit_id} used by {hashes}")
        lines.append("This usually happens after a cherry-pick copies a commit message.")
        lines.append("Each commit needs a unique commit-id; remove the duplicated line and rerun.")
        super().__init__("\n".join(lines))
