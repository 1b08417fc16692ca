import shutil
import sys
import tempfile
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))

    return {"config": config_dir}


@pytest.fixture
def fake_ftl(temp_dir):
    """Argv prefix for a stand-in pihole-FTL that stores settings in a JSON file."""
    dst = temp_dir / "fake_ftl.py"
    shutil.copy(FIXTURES_DIR / "fake_ftl.py", dst)
    return [sys.executable, str(dst)]
