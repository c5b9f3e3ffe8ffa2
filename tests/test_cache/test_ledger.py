"""Tests for the CacheLedger endpoint -> timestamp map."""

from __future__ import annotations

import json

import pytest

from servstore.cache import CACHE_KEY, CacheLedger
from servstore.models import CacheConfig
from servstore.output import OutputFormat, OutputManager, set_output
from servstore.storage import MemoryStorage


class _BrokenStorage(MemoryStorage):
    """Storage whose writes always fail."""

    def set_item(self, key: str, value: str) -> None:
        raise OSError("disk full")


class _UnreadableStorage(MemoryStorage):
    def get_item(self, key: str):
        raise OSError("permission denied")


# ------------------------------------------------------------------ #
# Freshness
# ------------------------------------------------------------------ #


class TestFreshness:
    def test_unknown_endpoint_is_not_fresh(self, ledger: CacheLedger) -> None:
        assert ledger.is_fresh("users") is False

    def test_touched_endpoint_is_fresh(self, ledger: CacheLedger) -> None:
        ledger.touch("users")
        assert ledger.is_fresh("users") is True

    def test_fresh_until_just_before_duration(self, ledger: CacheLedger, clock) -> None:
        """Age 9 of 10 seconds is still fresh."""
        ledger.touch("users")
        clock.advance(9)
        assert ledger.is_fresh("users") is True

    def test_stale_at_exact_duration(self, ledger: CacheLedger, clock) -> None:
        """Age equal to the duration is no longer fresh."""
        ledger.touch("users")
        clock.advance(10)
        assert ledger.is_fresh("users") is False

    def test_explicit_now_overrides_clock(self, ledger: CacheLedger) -> None:
        ledger.touch("users", now=100)
        assert ledger.is_fresh("users", now=105) is True
        assert ledger.is_fresh("users", now=110) is False

    def test_endpoints_are_independent(self, ledger: CacheLedger) -> None:
        ledger.touch("users")
        assert ledger.is_fresh("roles") is False

    def test_disabled_config_is_never_fresh(self, clock) -> None:
        ledger = CacheLedger(MemoryStorage(), CacheConfig(enabled=False), clock=clock)
        ledger.touch("users")
        assert ledger.is_fresh("users") is False
        assert ledger.get("users") == clock.now

    def test_zero_duration_is_never_fresh(self, ledger: CacheLedger) -> None:
        ledger.duration = 0
        ledger.touch("users")
        assert ledger.is_fresh("users") is False


# ------------------------------------------------------------------ #
# Duration
# ------------------------------------------------------------------ #


class TestDuration:
    def test_default_duration_is_ten_seconds(self, ledger: CacheLedger) -> None:
        assert ledger.duration == 10

    def test_duration_from_config(self) -> None:
        ledger = CacheLedger(MemoryStorage(), CacheConfig(duration_seconds=60))
        assert ledger.duration == 60

    def test_negative_duration_rejected(self, ledger: CacheLedger) -> None:
        with pytest.raises(ValueError):
            ledger.duration = -1

    def test_longer_duration_extends_freshness(self, ledger: CacheLedger, clock) -> None:
        ledger.touch("users")
        clock.advance(30)
        ledger.duration = 60
        assert ledger.is_fresh("users") is True


# ------------------------------------------------------------------ #
# Persistence
# ------------------------------------------------------------------ #


class TestPersistence:
    def test_touch_persists_whole_mapping(self, clock) -> None:
        storage = MemoryStorage()
        ledger = CacheLedger(storage, clock=clock)
        ledger.touch("users")
        ledger.touch("roles", now=5)

        stored = json.loads(storage.get_item(CACHE_KEY))
        assert stored == {"users": clock.now, "roles": 5}

    def test_ledger_loads_persisted_entries(self, clock) -> None:
        storage = MemoryStorage()
        storage.set_item(CACHE_KEY, json.dumps({"users": clock.now - 3}))

        ledger = CacheLedger(storage, clock=clock)
        assert ledger.get("users") == clock.now - 3
        assert ledger.is_fresh("users") is True

    def test_corrupt_ledger_starts_empty(self) -> None:
        storage = MemoryStorage()
        storage.set_item(CACHE_KEY, "{not json")
        assert CacheLedger(storage).entries() == {}

    def test_non_mapping_ledger_starts_empty(self) -> None:
        storage = MemoryStorage()
        storage.set_item(CACHE_KEY, json.dumps(["users"]))
        assert CacheLedger(storage).entries() == {}

    def test_invalid_timestamps_are_dropped(self) -> None:
        storage = MemoryStorage()
        storage.set_item(CACHE_KEY, json.dumps({"users": 12, "roles": "soon", "teams": True}))
        assert CacheLedger(storage).entries() == {"users": 12}

    def test_write_failure_is_downgraded_to_warning(self, capsys) -> None:
        """A storage failure never propagates out of touch()."""
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        ledger = CacheLedger(_BrokenStorage())

        ledger.touch("users")

        assert "Could not persist cache ledger" in capsys.readouterr().err

    def test_unpersisted_entry_is_a_cache_miss(self, clock, quiet_output) -> None:
        ledger = CacheLedger(_BrokenStorage(), clock=clock)
        ledger.touch("users")
        assert ledger.get("users") is None
        assert ledger.is_fresh("users") is False

    def test_persist_reports_success(self, ledger: CacheLedger, quiet_output) -> None:
        assert ledger.persist() is True
        assert CacheLedger(_BrokenStorage()).persist() is False

    def test_read_failure_starts_empty(self, quiet_output) -> None:
        assert CacheLedger(_UnreadableStorage()).entries() == {}


# ------------------------------------------------------------------ #
# Inspection and removal
# ------------------------------------------------------------------ #


class TestInvalidate:
    def test_invalidate_known_endpoint(self, ledger: CacheLedger) -> None:
        ledger.touch("users")
        assert ledger.invalidate("users") is True
        assert ledger.is_fresh("users") is False

    def test_invalidate_unknown_endpoint(self, ledger: CacheLedger) -> None:
        assert ledger.invalidate("users") is False

    def test_clear_forgets_everything(self, ledger: CacheLedger) -> None:
        ledger.touch("users")
        ledger.touch("roles")
        ledger.clear()
        assert ledger.entries() == {}

    def test_entries_returns_copy(self, ledger: CacheLedger) -> None:
        ledger.touch("users")
        entries = ledger.entries()
        entries["roles"] = 1
        assert ledger.get("roles") is None
