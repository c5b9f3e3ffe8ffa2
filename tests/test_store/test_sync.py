"""Tests for sync rules and path extraction."""

from __future__ import annotations

import pytest

from servstore.store import SyncRule, SyncRules


class TestSyncRule:
    def test_top_level_key(self) -> None:
        assert SyncRule("users", ("users",)).extract({"users": [1]}) == [1]

    def test_nested_path(self) -> None:
        rule = SyncRule("users", ("data", "members"))
        assert rule.extract({"data": {"members": []}}) == []

    def test_missing_key_does_not_match(self) -> None:
        rules = SyncRules()
        rules.add("users", ("data", "members"))
        assert list(rules.matches({"data": {}})) == []
        assert list(rules.matches({"data": [1, 2]})) == []
        assert list(rules.matches(["users"])) == []

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(ValueError):
            SyncRule("users", ())


class TestSyncRules:
    def test_add_is_deduplicated(self) -> None:
        rules = SyncRules()
        rules.add("users", ["users"])
        rules.add("users", ("users",))
        assert len(rules) == 1

    def test_remove(self) -> None:
        rules = SyncRules()
        rules.add("users", ("users",))
        assert rules.remove("users", ("users",)) is True
        assert rules.remove("users", ("users",)) is False

    def test_for_resource(self) -> None:
        rules = SyncRules()
        rules.add("users", ("users",))
        rules.add("users", ("data", "users"))
        rules.add("roles", ("roles",))
        assert [rule.path for rule in rules.for_resource("users")] == [("users",), ("data", "users")]

    def test_matches_skips_none_and_keeps_order(self) -> None:
        rules = SyncRules()
        rules.add("users", ("users",))
        rules.add("roles", ("roles",))
        rules.add("teams", ("teams",))
        body = {"teams": [], "users": [{"id": 1}], "roles": None}

        matched = [(rule.resource, value) for rule, value in rules.matches(body)]

        assert matched == [("users", [{"id": 1}]), ("teams", [])]
