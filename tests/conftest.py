"""
Pytest configuration and shared fixtures for all pmodules tests.

Layouts are written under tmp_path per test; nothing here is shared across
tests except the directive parser (immutable grammar).
"""

import sys
import pytest
from pathlib import Path
from typing import Callable, Dict

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from pmodules.analysis.module_system import PathResolver
from tests.test_utils import RecordingHost, write_layout


# =============================================================================
# Layout fixtures
# =============================================================================

@pytest.fixture
def layout(tmp_path) -> Callable[[Dict[str, str]], Path]:
    """
    Factory fixture: write {relative path: source} under tmp_path/src and
    return the src directory.
    """
    def _layout(files: Dict[str, str]) -> Path:
        return write_layout(tmp_path / "src", files)

    return _layout


@pytest.fixture
def app_layout(layout) -> Path:
    """
    The reference package:

        src/App.py            root
        src/Sub/Sub.py        parent App.Sub
        src/Sub/Helper.py     leaf App.Sub.Helper
    """
    return layout({
        "App.py": 'P("module App")\n',
        "Sub/Sub.py": 'P("module Sub")\n',
        "Sub/Helper.py": 'P("module Helper")\nVALUE = 42\n',
    })


@pytest.fixture(scope="session")
def path_resolver() -> PathResolver:
    """Stateless, safe to share."""
    return PathResolver()


@pytest.fixture
def recording_host() -> RecordingHost:
    return RecordingHost()


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (real files, Python host)"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
