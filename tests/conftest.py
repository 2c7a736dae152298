"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
# This ensures that the local covgraph package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of covgraph modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("covgraph"):
        del sys.modules[module_name]


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point global config at a missing file and clear COVGRAPH__ env vars."""
    import covgraph.config.loader as loader

    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    for key in list(os.environ):
        if key.upper().startswith("COVGRAPH__"):
            monkeypatch.delenv(key)
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers bound to per-test streams."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
