"""Tests for the naming conventions table."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from servstore.store import DEFAULT_CONVENTIONS, Mutation, NamingConventions, Operation


class TestDefaults:
    @pytest.mark.parametrize(
        ("member", "identifier"),
        [
            (Operation.READ, "users/read"),
            (Operation.CREATE, "users/create"),
            (Operation.UPDATE, "users/update"),
            (Operation.DESTROY, "users/destroy"),
            (Operation.SET_ALL, "users/setAll"),
            (Operation.READ_ALL, "users/all"),
            (Operation.READ_BY_ID, "users/byId"),
            (Mutation.SET_ALL, "users/SET_ALL"),
            (Mutation.DELETE, "users/DELETE"),
        ],
    )
    def test_identifiers(self, member, identifier: str) -> None:
        assert DEFAULT_CONVENTIONS.identifier("users", member) == identifier

    def test_state_key(self) -> None:
        assert DEFAULT_CONVENTIONS.all_items_state == "data"

    def test_strings_pass_through(self) -> None:
        """Extra actions are addressed by their own suffix."""
        assert DEFAULT_CONVENTIONS.suffix("archive") == "archive"
        assert DEFAULT_CONVENTIONS.identifier("users", "archive") == "users/archive"

    def test_getter_operations(self) -> None:
        assert Operation.READ_ALL.is_getter
        assert Operation.READ_BY_ID.is_getter
        assert not Operation.READ.is_getter

    def test_set_all_operation_and_mutation_are_distinct(self) -> None:
        assert Operation.SET_ALL != Mutation.SET_ALL
        assert DEFAULT_CONVENTIONS.suffix(Operation.SET_ALL) != DEFAULT_CONVENTIONS.suffix(
            Mutation.SET_ALL
        )


class TestCustomConventions:
    def test_custom_separator_and_suffix(self) -> None:
        conventions = NamingConventions(separator=".", read_action="fetch")
        assert conventions.identifier("users", Operation.READ) == "users.fetch"

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            DEFAULT_CONVENTIONS.read_action = "fetch"

    def test_empty_suffix_rejected(self) -> None:
        with pytest.raises(ValidationError, match="non-empty"):
            NamingConventions(read_action="")

    def test_empty_separator_rejected(self) -> None:
        with pytest.raises(ValidationError, match="separator"):
            NamingConventions(separator="")

    def test_suffix_containing_separator_rejected(self) -> None:
        with pytest.raises(ValidationError, match="contains the separator"):
            NamingConventions(read_action="re/ad")

    def test_colliding_suffixes_rejected(self) -> None:
        with pytest.raises(ValidationError, match="unique"):
            NamingConventions(create_action="read")
