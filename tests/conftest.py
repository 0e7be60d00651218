import pytest


@pytest.fixture
def emd_home(tmp_path, monkeypatch):
    """Point EMD_HOME at a temporary directory."""
    home = tmp_path / "emd-home"
    monkeypatch.setenv("EMD_HOME", str(home))
    return home
