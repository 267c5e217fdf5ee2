"""Shared utilities for gitstack tests."""
import subprocess
from typing import Optional
import logging

logger = logging.getLogger(__name__)

AUTHOR = "Author: Test User <test@example.com>"
DATE = "Date:   Mon Jan 1 00:00:00 2024 +0000"

def run_cmd(cmd: str, cwd: Optional[str] = None, check: bool = True) -> str:
    """Run shell command and return output.

    Args:
        cmd: Command to run
        cwd: Working directory
        check: Whether to check return code

    Returns:
        str: Command output
    """
    logger.debug(f"Running command: {cmd}")
    result = subprocess.run(
        cmd, shell=True, check=check, cwd=cwd,
        capture_output=True, text=True
    )
    logger.debug(f"Command output: {result.stdout.strip()}")
    if result.stderr:
        logger.debug(f"Command stderr: {result.stderr.strip()}")
    return result.stdout.strip()

def commit_block(commit_hash: str, subject: str, body: str = "",
                 commit_id: Optional[str] = None, header_extra: str = "") -> str:
    """Build one commit as `git log --format=medium` prints it."""
    lines = [f"commit {commit_hash}{header_extra}", AUTHOR, DATE, "", f"    {subject}"]
    if body:
        lines.append("")
        lines.extend(f"    {line}" if line else "" for line in body.split("\n"))
    if commit_id:
        lines.extend(["", f"    commit-id:{commit_id}"])
    return "\n".join(lines) + "\n"

def commit_log(*blocks: str) -> str:
    """Join commit blocks, most recent first, into one log."""
    return "\n".join(blocks)
