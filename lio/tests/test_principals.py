"""Unit tests for declared principals."""

import json

import pytest

from lio import BOT, TOP, Principals, UnknownPrincipalError, level


@pytest.fixture
def principals_file(tmp_path):
    path = tmp_path / "principals.json"
    path.write_text(json.dumps({"principals": ["Alice", "Bob"]}))
    return path


class TestPrincipals:
    def test_load_from_json(self, principals_file):
        principals = Principals.load(str(principals_file))
        assert principals.names == frozenset({"Alice", "Bob"})

    def test_from_mapping_rejects_malformed(self):
        with pytest.raises(ValueError):
            Principals.from_mapping({"principals": "Alice"})
        with pytest.raises(ValueError):
            Principals.from_mapping({"names": ["Alice"]})
        with pytest.raises(ValueError):
            Principals.from_mapping({"principals": [""]})

    def test_load_rejects_non_object(self, tmp_path):
        path = tmp_path / "principals.json"
        path.write_text(json.dumps(["Alice"]))
        with pytest.raises(ValueError):
            Principals.load(str(path))

    def test_level_of_declared_principals(self):
        principals = Principals(frozenset({"Alice", "Bob"}))
        assert principals.level("Alice") == level("Alice")

    def test_level_of_unknown_principal_raises(self):
        principals = Principals(frozenset({"Alice", "Bob"}))
        with pytest.raises(UnknownPrincipalError) as exc:
            principals.level("Alice", "Mallory")
        assert exc.value.unknown == frozenset({"Mallory"})
        assert "Mallory" in str(exc.value)

    def test_open_universe_accepts_any_name(self):
        assert Principals(closed=False).level("Mallory") == level("Mallory")

    def test_parse(self):
        principals = Principals(frozenset({"Alice", "Bob"}))
        assert principals.parse("Alice, Bob") == level("Alice", "Bob")
        assert principals.parse("top") == TOP
        assert principals.parse("bot") == BOT
        assert principals.parse("") == BOT

    def test_levels_enumerates_powerset(self):
        principals = Principals(frozenset({"Alice", "Bob"}))
        assert list(principals.levels()) == [
            BOT,
            level("Alice"),
            level("Bob"),
            level("Alice", "Bob"),
        ]

    def test_open_universe_has_no_levels(self):
        with pytest.raises(ValueError):
            list(Principals(closed=False).levels())
