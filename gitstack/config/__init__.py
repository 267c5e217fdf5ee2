"""Config module."""

from typing import Dict, Any
from .models import RepoConfig, UserConfig, GitStackConfig

class Config(GitStackConfig):
    """Config object holding repository and user config.

    Built from the nested dict produced by the config parser.
    """
    def __init__(self, config: Dict[str, Dict[str, Any]]):
        """Initialize with parsed config dict."""
        super().__init__(
            repo=RepoConfig.model_validate(config.get('repo', {})),
            user=UserConfig.model_validate(config.get('user', {})),
        )

def default_config() -> Config:
    """Get default config without reading any file."""
    return Config({
        'repo': {
            'github_remote': 'origin',
            'github_branch': 'main',
            'branch_prefix': '',
        },
        'user': {},
    })
