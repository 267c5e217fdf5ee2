"""Config parser logic."""

import os
from typing import Any, Dict
import logging
import yaml

# Get module logger
logger = logging.getLogger(__name__)

RepoConfig = Dict[str, Any]  # Use Any since yaml can return various types
Config = Dict[str, RepoConfig]

CONFIG_FILE = '.spr.yaml'

def parse_config(path: str = CONFIG_FILE) -> Config:
    """Parse config from the repository config file and environment."""
    config: Config = {
        'repo': {
            'github_remote': 'origin',
            'github_branch': 'main',
            'branch_prefix': '',
        },
        'user': {},
    }

    try:
        with open(path, 'r') as f:
            logger.info(f"Found {path}, loading...")
            repo_config = yaml.safe_load(f)
            logger.debug(f"Config from {path}: {repo_config}")
            if repo_config:
                if 'repo' in repo_config and isinstance(repo_config['repo'], dict):
                    config['repo'].update(repo_config['repo'])
                if 'user' in repo_config and isinstance(repo_config['user'], dict):
                    config['user'].update(repo_config['user'])
    except FileNotFoundError:
        logger.info(f"No {path} found, using defaults")

    if os.environ.get("SPR_NOREBASE", "").lower() == "true":
        logger.debug("SPR_NOREBASE set, disabling rebase")
        config['user']['no_rebase'] = True

    return config
