"""Git interfaces and implementation."""

import os
import re
import shlex
import shutil
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, NamedTuple, Optional, Set, Tuple
import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..typing import (
    Commit, CommitID, GitInterface, GitError, CommitStackParseError,
    MalformedCommitLogError, MissingCommitIDError, PatchIDError,
    CommitStackUnrecoverableError, DuplicateCommitIDError, RewordHelperNotFoundError,
)
from ..config.models import GitStackConfig

# Get module logger
logger = logging.getLogger(__name__)

COMMIT_HASH_REGEX = re.compile(r'^commit ([a-f0-9]{40})')
COMMIT_ID_REGEX = re.compile(r'commit-id:([a-f0-9]{8})')
BRANCH_NAME_REGEX = re.compile(r'spr/([a-zA-Z0-9_\-/\.]+/)?([a-zA-Z0-9_\-/\.]+)/([a-f0-9]{8})$')

_SHORT_ID_REGEX = re.compile(r'^[a-f0-9]{8}$')
_FULL_HASH_REGEX = re.compile(r'^[a-f0-9]{40}$')
_BRANCH_SEGMENT_REGEX = re.compile(r'^[a-zA-Z0-9_\-/\.]+$')

# Editor program used by reword_local_commits, installed with the package
REWORD_HELPER = "gitstack-reword"

PatchIDFunc = Callable[[str], str]


def patch_id_for_commit(commit_hash: str) -> str:
    """Return a patch ID, a "fuzzy" inexact identifier of a commit's contents.

    A real patch id (`git diff-tree -p | git patch-id`) is not stable once a
    commit's description changes, e.g. when a commit-id is added, so it is only
    an approximation of a commit-id on the local system. Commits without a real
    commit-id are never pushed, so the commit hash serves the same purpose.

    Raises:
        PatchIDError: If commit_hash is not a full 40 character hash
    """
    if not _FULL_HASH_REGEX.match(commit_hash):
        raise PatchIDError(f"cannot derive a patch id for commit '{commit_hash}'")
    return commit_hash


# Phases of a commit block in `git log --format=medium` output
_METADATA = "metadata"  # Author:, Date:, Merge: lines up to the blank separator
_SUBJECT = "subject"    # blank separator seen, waiting for the first message line
_BODY = "body"          # subject seen, collecting message lines

@dataclass
class _Accumulating:
    """Scanner state while inside a commit block. Idle is represented by None."""
    commit: Commit
    phase: str = _METADATA

_ScanState = Optional[_Accumulating]


def _close_without_id(state: _Accumulating, index: int, patch_id_ok: bool,
                      patch_id: PatchIDFunc) -> Commit:
    """Finalize a commit whose block ended without a commit-id trailer."""
    commit = state.commit
    if state.phase != _BODY:
        raise MalformedCommitLogError(f"commit {commit.commit_hash[:8]} has no message", index)
    if not patch_id_ok:
        logger.debug(f"parse_local_commit_stack: missing commit-id in {commit.commit_hash[:8]}")
        raise MissingCommitIDError(commit.commit_hash, commit.subject)

    commit.commit_id = CommitID(patch_id(commit.commit_hash))
    commit.body = commit.body.strip()
    # All commits using a patch id must be WIP because we can never upload them
    commit.wip = True
    logger.debug(f"parse_local_commit_stack: {commit.commit_hash[:8]} has no commit-id, "
                 "using patch id and marking WIP")
    return commit


def _scan_line(state: _ScanState, index: int, line: str, patch_id_ok: bool,
               patch_id: PatchIDFunc) -> Tuple[_ScanState, Optional[Commit]]:
    """Advance the scanner by one line. Returns the new state and any finished commit."""
    hash_match = COMMIT_HASH_REGEX.match(line)
    if hash_match:
        finished = None
        if state is not None:
            finished = _close_without_id(state, index, patch_id_ok, patch_id)
        logger.debug(f"parse_local_commit_stack: commit {hash_match.group(1)[:8]} at line {index}")
        return _Accumulating(Commit.from_strings("", hash_match.group(1), "")), finished

    stripped = line.strip()
    if state is None:
        # Message lines are indented; anything else outside a block is not log output
        if stripped and not line[0].isspace():
            raise MalformedCommitLogError(f"unexpected line outside of a commit: '{stripped}'", index)
        return None, None

    id_match = COMMIT_ID_REGEX.search(line)
    if id_match:
        commit = state.commit
        commit.commit_id = CommitID(id_match.group(1))
        commit.body = commit.body.strip()
        if commit.subject.startswith("WIP"):
            commit.wip = True
        logger.debug(f"parse_local_commit_stack: {commit.commit_hash[:8]} has commit-id {commit.commit_id}")
        return None, commit

    if state.phase == _METADATA:
        if not stripped:
            return _Accumulating(state.commit, _SUBJECT), None
        return state, None

    if state.phase == _SUBJECT:
        if stripped:
            state.commit.subject = stripped
            return _Accumulating(state.commit, _BODY), None
        return state, None

    if stripped:
        state.commit.body += stripped + "\n"
    return state, None


def parse_local_commit_stack(commit_log: str, patch_id_ok: bool = False,
                             patch_id: PatchIDFunc = patch_id_for_commit) -> List[Commit]:
    """Parse `git log --format=medium` output into a commit stack.

    The log lists the most recent commit first; the returned list is ordered
    with the bottom commit first.

    Args:
        commit_log: Raw log text covering the unmerged commits
        patch_id_ok: Stand in a patch id for a commit missing its commit-id,
            except for the last commit in the log, and mark it WIP
        patch_id: Derives the stand-in id from a commit hash

    Raises:
        MissingCommitIDError: A commit has no commit-id and no patch id may be
            used, or the last commit in the log has no commit-id
        MalformedCommitLogError: The text is not a commit log
    """
    if not commit_log.strip():
        return []

    commits: List[Commit] = []
    seen: Set[str] = set()
    state: _ScanState = None

    lines = commit_log.split('\n')
    logger.debug(f"parse_local_commit_stack: {len(lines)} lines")
    for index, line in enumerate(lines):
        state, finished = _scan_line(state, index, line, patch_id_ok, patch_id)
        if finished is not None:
            if finished.commit_hash in seen:
                raise MalformedCommitLogError(f"commit {finished.commit_hash[:8]} appears twice", index)
            seen.add(finished.commit_hash)
            commits.append(finished)

    # The last commit in the log is expected to be annotated before it gets here,
    # so a missing commit-id on it is never papered over with a patch id
    if state is not None:
        logger.debug(f"parse_local_commit_stack: still scanning at end, last subject '{state.commit.subject}'")
        raise MissingCommitIDError(state.commit.commit_hash, state.commit.subject, trailing=True)

    commits.reverse()
    return commits


def check_for_duplicate_commit_ids(commits: List[Commit]) -> None:
    """Raise DuplicateCommitIDError if two commits share a commit-id.

    Commits without a commit-id are ignored.
    """
    by_id: Dict[str, List[Commit]] = {}
    for commit in commits:
        if not commit.commit_id:
            continue
        by_id.setdefault(commit.commit_id, []).append(commit)

    duplicates = {commit_id: dups for commit_id, dups in by_id.items() if len(dups) > 1}
    if duplicates:
        raise DuplicateCommitIDError(duplicates)


class BranchName(NamedTuple):
    """Parts of a review branch name."""
    prefix: str
    remote_branch: str
    commit_id: CommitID


def branch_name(remote_branch: str, commit_id: str, prefix: str = "") -> str:
    """Get the review branch name spr/<prefix>/<remote_branch>/<commit_id>.

    The prefix segment is left out when prefix is empty.
    """
    if not _SHORT_ID_REGEX.match(commit_id):
        raise ValueError(f"'{commit_id}' is not a commit-id, only commits with one get a review branch")
    for segment in (remote_branch, prefix) if prefix else (remote_branch,):
        if not _BRANCH_SEGMENT_REGEX.match(segment):
            raise ValueError(f"'{segment}' can't be used in a review branch name")

    elms = ["spr", remote_branch, commit_id]
    if prefix:
        elms.insert(1, prefix)
    return "/".join(elms)


def branch_name_from_commit(config: GitStackConfig, commit: Commit) -> str:
    """Get review branch name for commit."""
    return branch_name(config.repo.github_branch, commit.commit_id, config.repo.branch_prefix)


def parse_branch_name(name: str, remote_branch: Optional[str] = None) -> Optional[BranchName]:
    """Split a review branch name into prefix, remote branch and commit-id.

    Returns None if name is not a review branch name. Without remote_branch the
    last path segment before the commit-id is taken as the remote branch; pass
    it when it may contain a '/'.
    """
    if remote_branch is None:
        match = BRANCH_NAME_REGEX.search(name)
    else:
        match = re.search(
            r'spr/([a-zA-Z0-9_\-/\.]+/)?(' + re.escape(remote_branch) + r')/([a-f0-9]{8})$', name)
    if not match:
        return None
    prefix = match.group(1)[:-1] if match.group(1) else ""
    return BranchName(prefix, match.group(2), CommitID(match.group(3)))


def _log_command(config: GitStackConfig) -> str:
    remote = config.repo.github_remote
    branch = config.repo.github_branch
    return f"log --format=medium --no-color {remote}/{branch}..HEAD"


def reword_local_commits(config: GitStackConfig, git_cmd: GitInterface) -> None:
    """Rebase the stack through the reword helper so every commit gets a commit-id."""
    reword_path = shutil.which(REWORD_HELPER)
    if reword_path is None:
        raise RewordHelperNotFoundError(f"{REWORD_HELPER} not found on PATH")
    rebase_cmd = (f"rebase {config.repo.github_remote}/{config.repo.github_branch} "
                  "-i --autosquash --autostash")
    git_cmd.git_with_editor(rebase_cmd, reword_path)


def get_local_commit_stack(config: GitStackConfig, git_cmd: GitInterface,
                           recover: Optional[Callable[[], None]] = None) -> List[Commit]:
    """Get local commit stack. Returns commits ordered with bottom commit first.

    If the stack can't be parsed, recover (by default reword_local_commits) is
    run once to add missing commit-ids and the log is parsed again.

    Raises:
        CommitStackUnrecoverableError: The stack is still invalid after recovery
        DuplicateCommitIDError: Two commits share a commit-id
    """
    log_cmd = _log_command(config)
    patch_id_ok = config.user.allow_patch_ids

    try:
        commits = parse_local_commit_stack(git_cmd.must_git(log_cmd), patch_id_ok)
    except CommitStackParseError as e:
        logger.info(f"Local commit stack is invalid: {e}")
        logger.info("Rewriting local commits to add missing commit-ids")
        if recover is None:
            reword_local_commits(config, git_cmd)
        else:
            recover()

        try:
            commits = parse_local_commit_stack(git_cmd.must_git(log_cmd), patch_id_ok)
        except CommitStackParseError as retry_error:
            raise CommitStackUnrecoverableError(
                "unable to fetch local commits\n"
                " most likely this is an issue with missing commit-id in the commit body\n"
                f" {retry_error}"
            ) from retry_error

    logger.info(f"get_local_commit_stack: parsed {len(commits)} commits")
    for c in commits:
        logger.debug(f"  {c.commit_hash[:8]}: id={c.commit_id}, wip={c.wip}, subject='{c.subject}'")

    check_for_duplicate_commit_ids(commits)
    return commits


def get_local_top_commit(config: GitStackConfig, git_cmd: GitInterface,
                         recover: Optional[Callable[[], None]] = None) -> Optional[Commit]:
    """Get the top unmerged commit in the stack, None if there are no unmerged commits."""
    commits = get_local_commit_stack(config, git_cmd, recover)
    if not commits:
        return None
    return commits[-1]


def get_local_branch_name(git_cmd: GitInterface) -> str:
    """Get the current local git branch."""
    output = git_cmd.must_git("branch --no-color")
    for line in output.split("\n"):
        if line.startswith("* "):
            return line[2:]
    raise GitError("cannot determine local git branch name")


class RealGit:
    """Real Git implementation."""
    def __init__(self, config: GitStackConfig):
        """Initialize with config."""
        self.config: GitStackConfig = config

    def run_cmd(self, command: str, env: Optional[Dict[str, str]] = None) -> str:
        """Run git command."""
        cmd_str = command.strip()

        # Skip any commands that could modify commit hashes
        if self.config.user.no_rebase and cmd_str.startswith("rebase"):
            logger.debug(f"Skipping command '{cmd_str}' due to no_rebase")
            return ""

        if self.config.user.log_git_commands:
            logger.info(f"> git {cmd_str}")
        else:
            logger.debug(f"> git {cmd_str}")

        try:
            repo = git.Repo(os.getcwd(), search_parent_directories=True)
            cmd_parts = shlex.split(cmd_str)
            method = getattr(repo.git, cmd_parts[0].replace('-', '_'))
            if env:
                result = method(*cmd_parts[1:], env=env)
            else:
                result = method(*cmd_parts[1:])
            return result if isinstance(result, str) else str(result)
        except GitCommandError as e:
            raise GitError(f"Git command failed: {e}") from e
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise GitError("Not in a git repository") from e

    def must_git(self, command: str) -> str:
        """Run git command, failing on error."""
        return self.run_cmd(command)

    def git_with_editor(self, command: str, editor: str) -> str:
        """Run git command with editor as both the commit and sequence editor."""
        return self.run_cmd(command, env={"GIT_EDITOR": editor, "GIT_SEQUENCE_EDITOR": editor})
