"""Shared pytest fixtures for hookwarden tests.

For stub validators and context builders, see tests/utils.py which can
be imported directly.
"""

import os

import pytest


@pytest.fixture
def clean_env(mocker, tmp_path):
    """Empty environment with the config file pointed at a missing path."""
    mocker.patch.dict(
        os.environ,
        {"HOOKWARDEN_CONFIG": str(tmp_path / "missing-config")},
        clear=True,
    )


@pytest.fixture
def in_git_repo(mocker):
    """Pretend the current directory is a git work tree."""
    return mocker.patch(
        "hookwarden.validators.git.find_git_root",
        return_value="/repo",
    )
