"""Tests for cli.py - help text and each command end to end."""

import os
import subprocess
import sys
from unittest.mock import patch

import pytest

from inidb.cli import main


def _run_inidb(*args):
    result = subprocess.run(
        [sys.executable, "-m", "inidb.cli", *args],
        capture_output=True, text=True, timeout=10,
    )
    return result


GOOD = """\
[Server]
host = example.org
port = 8080
debug = true

[Paths]
root = "/srv/my site"
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """no user or project config leaks into the commands."""
    monkeypatch.chdir(tmp_path)
    env = {k: v for k, v in os.environ.items() if not k.startswith("INIDB_")}
    with patch("inidb.paths.GLOBAL_CONFIG", tmp_path / "global.json"), \
         patch.dict(os.environ, env, clear=True):
        yield


class TestCLIHelp:
    def test_help(self):
        r = _run_inidb("--help")
        assert r.returncode == 0
        assert "inidb" in r.stdout

    def test_get_help(self):
        r = _run_inidb("get", "--help")
        assert r.returncode == 0
        assert "--type" in r.stdout
        assert "--default" in r.stdout

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out


class TestCheck:
    def test_ok(self, ini_file, capsys):
        assert main(["check", str(ini_file(GOOD))]) == 0
        assert "ok (2 sections, 4 pairs)" in capsys.readouterr().out

    def test_points_at_error(self, ini_file, capsys):
        path = ini_file("[s]\nkey key=value\n")
        assert main(["check", str(path)]) == 1
        out = capsys.readouterr().out
        assert "[malformed_pair] line 2, column 4" in out
        assert "    key key=value\n        ^" in out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "nope.ini")]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_trace_prints_spans(self, ini_file):
        r = _run_inidb("--trace", "check", str(ini_file(GOOD)))
        assert r.returncode == 0
        assert "ok (2 sections, 4 pairs)" in r.stdout
        assert "inidb.reader.read" in r.stderr
        assert "inidb.reader.read" not in r.stdout

    def test_subprocess(self, ini_file):
        r = _run_inidb("check", str(ini_file("[A]\n[A]\n")))
        assert r.returncode == 1
        assert "Duplicate section 'A'." in r.stdout


class TestGet:
    def test_string(self, ini_file, capsys):
        assert main(["get", str(ini_file(GOOD)), "Server", "host"]) == 0
        assert capsys.readouterr().out.strip() == "example.org"

    def test_unsigned(self, ini_file, capsys):
        assert main(["get", str(ini_file(GOOD)), "Server", "port", "-t", "unsigned"]) == 0
        assert capsys.readouterr().out.strip() == "8080"

    def test_bool(self, ini_file, capsys):
        assert main(["get", str(ini_file(GOOD)), "Server", "debug", "-t", "bool"]) == 0
        assert capsys.readouterr().out.strip() == "true"

    def test_default_used(self, ini_file, capsys):
        path = str(ini_file(GOOD))
        assert main(["get", path, "Server", "host", "-t", "signed", "-d", "-3"]) == 0
        assert capsys.readouterr().out.strip() == "-3"

    def test_missing(self, ini_file, capsys):
        assert main(["get", str(ini_file(GOOD)), "Server", "nope"]) == 1
        assert "no string at [Server] nope" in capsys.readouterr().out

    def test_bad_default(self, ini_file, capsys):
        path = str(ini_file(GOOD))
        assert main(["get", path, "Server", "port", "-t", "float", "-d", "abc"]) == 2
        assert "bad --default" in capsys.readouterr().out


class TestSections:
    def test_lists(self, ini_file, capsys):
        assert main(["sections", str(ini_file(GOOD))]) == 0
        out = capsys.readouterr().out
        assert "[Server] 3 pairs" in out
        assert "[Paths] 1 pairs" in out


class TestDump:
    def test_stdout(self, ini_file, capsys):
        assert main(["dump", str(ini_file(GOOD))]) == 0
        out = capsys.readouterr().out
        assert out.startswith("[Server]\nhost=example.org\n")
        assert 'root="/srv/my site"' in out

    def test_output_file(self, ini_file, tmp_path, capsys):
        target = tmp_path / "clean.ini"
        assert main(["dump", str(ini_file(GOOD)), "-o", str(target)]) == 0
        assert "wrote" in capsys.readouterr().out
        assert target.read_text().endswith('[Paths]\nroot="/srv/my site"\n')


class TestConfigCommand:
    def test_lists_keys(self, capsys):
        assert main(["config"]) == 0
        out = capsys.readouterr().out
        assert "max_string" in out
        assert "(default)" in out

    def test_env_source(self, capsys):
        with patch.dict(os.environ, {"INIDB_MAX_STRING": "12"}):
            main(["config"])
        assert "(env)" in capsys.readouterr().out
