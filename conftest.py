"""
Repository-level pytest configuration.

Keeps tests independent of any local configuration:
  - The configuration singleton is reset around every test
  - STEADYWEB_CONFIG points at a file that does not exist, so only
    defaults and explicit overrides apply
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from steadyweb.common.config_loader import ConfigLoader


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """Reset the configuration singleton and ignore any local config file."""
    monkeypatch.setenv("STEADYWEB_CONFIG", str(tmp_path / "no-config.yaml"))
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
