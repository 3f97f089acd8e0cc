"""Unit tests for the lio command line tool."""

import json

import pytest

from lio.cli import main


@pytest.fixture
def principals_file(tmp_path):
    path = tmp_path / "principals.json"
    path.write_text(json.dumps({"principals": ["Alice", "Bob"]}))
    return str(path)


class TestCheck:
    def test_allowed_flow(self, capsys):
        assert main(["check", "Alice", "Alice,Bob"]) == 0
        assert capsys.readouterr().out.startswith("allowed:")

    def test_denied_flow(self, capsys):
        assert main(["check", "Alice", "Bob"]) == 1
        assert capsys.readouterr().out.startswith("denied:")

    def test_public_and_top(self):
        assert main(["check", "bot", "Alice"]) == 0
        assert main(["check", "Alice", "top"]) == 0
        assert main(["check", "top", "Alice,Bob"]) == 1

    def test_declared_principals(self, principals_file):
        assert main(["--principals", principals_file, "check", "Alice", "Alice,Bob"]) == 0

    def test_unknown_principal(self, principals_file, capsys):
        assert main(["--principals", principals_file, "check", "Mallory", "Alice"]) == 2
        assert "Mallory" in capsys.readouterr().err

    def test_missing_principals_file(self, tmp_path, capsys):
        missing = str(tmp_path / "missing.json")
        assert main(["--principals", missing, "check", "Alice", "Bob"]) == 2
        assert capsys.readouterr().err.startswith("error:")


class TestLatticeCommands:
    def test_join(self, capsys):
        assert main(["join", "Alice", "Bob"]) == 0
        assert capsys.readouterr().out.strip() == "Level({'Alice', 'Bob'})"

    def test_meet(self, capsys):
        assert main(["meet", "Alice,Bob", "Bob"]) == 0
        assert capsys.readouterr().out.strip() == "Level({'Bob'})"

    def test_levels(self, principals_file, capsys):
        assert main(["--principals", principals_file, "levels"]) == 0
        assert capsys.readouterr().out.split("\n")[:-1] == [
            "BOT",
            "Level({'Alice'})",
            "Level({'Bob'})",
            "Level({'Alice', 'Bob'})",
        ]

    def test_levels_needs_principals(self, capsys):
        assert main(["levels"]) == 2
        assert "open universe" in capsys.readouterr().err

    def test_missing_command(self):
        with pytest.raises(SystemExit):
            main([])
