"""Tests for the ordered middleware registries."""

from __future__ import annotations

from servstore.client import MiddlewareRegistry


class TestRegistry:
    def test_runs_in_registration_order(self) -> None:
        registry: MiddlewareRegistry[list] = MiddlewareRegistry("request")
        registry.register(lambda value: value.append("first"))
        registry.register(lambda value: value.append("second"))

        seen: list[str] = []
        registry.run(seen)

        assert seen == ["first", "second"]

    def test_return_values_are_ignored(self) -> None:
        registry: MiddlewareRegistry[dict] = MiddlewareRegistry("response")
        registry.register(lambda value: {"replaced": True})

        value = {"original": True}
        assert registry.run(value) is value

    def test_len_counts_callbacks(self) -> None:
        registry: MiddlewareRegistry[object] = MiddlewareRegistry("request")
        registry.register(print)
        registry.register(print)
        assert len(registry) == 2

    def test_clear(self) -> None:
        registry: MiddlewareRegistry[object] = MiddlewareRegistry("request")
        registry.register(print)
        registry.clear()
        assert len(registry) == 0

    def test_callback_registered_during_run_waits_for_next_run(self) -> None:
        registry: MiddlewareRegistry[list] = MiddlewareRegistry("response")

        def late(value: list) -> None:
            value.append("late")

        def registering(value: list) -> None:
            value.append("registering")
            registry.register(late)

        registry.register(registering)

        first: list[str] = []
        registry.run(first)
        assert first == ["registering"]


class TestHandle:
    def test_remove_unregisters_callback(self) -> None:
        registry: MiddlewareRegistry[list] = MiddlewareRegistry("request")
        handle = registry.register(lambda value: value.append("x"))

        handle.remove()

        seen: list[str] = []
        registry.run(seen)
        assert seen == []
        assert handle.active is False

    def test_remove_twice_is_noop(self) -> None:
        registry: MiddlewareRegistry[list] = MiddlewareRegistry("request")
        handle = registry.register(print)
        handle.remove()
        handle.remove()
        assert len(registry) == 0

    def test_same_callback_registered_twice_removed_once(self) -> None:
        """Each handle removes exactly one registration."""
        registry: MiddlewareRegistry[list] = MiddlewareRegistry("request")

        def tag(value: list) -> None:
            value.append("tag")

        first = registry.register(tag)
        registry.register(tag)
        first.remove()

        seen: list[str] = []
        registry.run(seen)
        assert seen == ["tag"]

    def test_removing_later_registration_keeps_order(self) -> None:
        registry: MiddlewareRegistry[list] = MiddlewareRegistry("request")

        def tag(value: list) -> None:
            value.append("tag")

        registry.register(tag)
        registry.register(lambda value: value.append("middle"))
        last = registry.register(tag)
        last.remove()

        seen: list[str] = []
        registry.run(seen)
        assert seen == ["tag", "middle"]
