"""Shared test fixtures."""

import pytest

from inidb.log import set_level, set_sink


@pytest.fixture(autouse=True)
def quiet_log():
    """every test starts at info with no sink."""
    set_level("info")
    set_sink(None)
    yield
    set_level("info")
    set_sink(None)


@pytest.fixture
def ini_file(tmp_path):
    """write text to a temp .ini file and hand back its path."""
    def _write(text, name="test.ini"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write
