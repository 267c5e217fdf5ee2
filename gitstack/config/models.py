"""Pydantic models for config types."""

from pydantic import BaseModel, Field

class RepoConfig(BaseModel):
    """Repository configuration."""
    github_remote: str = "origin"
    github_branch: str = "main"
    branch_prefix: str = ""  # Optional segment between spr/ and the remote branch

    class Config:
        """Pydantic config."""
        extra = "allow"  # Allow extra fields for backward compatibility

class UserConfig(BaseModel):
    """User configuration."""
    no_rebase: bool = False
    log_git_commands: bool = False
    allow_patch_ids: bool = True  # Stand in for missing commit-ids instead of failing

    class Config:
        """Pydantic config."""
        extra = "allow"  # Allow extra fields

class GitStackConfig(BaseModel):
    """Full gitstack configuration."""
    repo: RepoConfig = Field(default_factory=RepoConfig)
    user: UserConfig = Field(default_factory=UserConfig)

    class Config:
        """Pydantic config."""
        extra = "allow"  # Allow extra fields
