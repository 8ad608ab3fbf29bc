"""Shared fixtures for distribvc tests."""

import os
import pytest

from distribvc.config import get_default_config
from distribvc.services import RepositoryService


@pytest.fixture(autouse=True)
def isolated_home(tmp_path_factory, monkeypatch):
    """Keep the user's real config and environment out of every test."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("DISTRIBVC_"):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def service():
    return RepositoryService(config=get_default_config())


@pytest.fixture
def repo(service, tmp_path):
    return service.init(tmp_path / "work")

