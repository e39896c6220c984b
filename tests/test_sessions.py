"""Session registry: one slot per execution unit."""
import asyncio
import logging
import threading

import pytest

from signup_suite.sessions import (
    SessionError,
    SessionHandle,
    SessionRegistry,
    current_unit,
    describe_unit,
)


def _handle(unit) -> SessionHandle:
    return SessionHandle(unit=unit, engine=object(), browser=object(), context=object(), page=object())


def test_put_get_pop_removes_entry():
    registry = SessionRegistry()
    handle = _handle("unit-a")

    registry.put("unit-a", handle)

    assert registry.get("unit-a") is handle
    assert "unit-a" in registry
    assert len(registry) == 1
    assert registry.pop("unit-a") is handle
    assert "unit-a" not in registry
    assert len(registry) == 0
    assert list(registry) == []


def test_second_put_for_same_unit_is_rejected():
    registry = SessionRegistry()
    registry.put("unit-a", _handle("unit-a"))

    with pytest.raises(SessionError):
        registry.put("unit-a", _handle("unit-a"))

    assert len(registry) == 1


def test_pop_missing_unit_returns_none():
    assert SessionRegistry().pop("nobody") is None


def test_units_only_lists_live_sessions():
    registry = SessionRegistry()
    registry.put("a", _handle("a"))
    registry.put("b", _handle("b"))
    registry.pop("a")

    assert registry.units() == ["b"]


def test_current_unit_is_thread_outside_event_loop():
    assert current_unit() is threading.current_thread()


def test_current_unit_differs_per_thread():
    seen = {}

    def record(name):
        seen[name] = current_unit()

    threads = [threading.Thread(target=record, args=(f"t{i}",), name=f"t{i}") for i in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(unit) for unit in seen.values()}) == 3
    assert describe_unit(seen["t0"]) == "thread:t0"


def test_current_unit_is_task_inside_event_loop():
    async def main():
        first, second = await asyncio.gather(
            asyncio.create_task(_unit(), name="unit-1"),
            asyncio.create_task(_unit(), name="unit-2"),
        )
        return first, second

    async def _unit():
        return current_unit()

    first, second = asyncio.run(main())

    assert isinstance(first, asyncio.Task)
    assert first is not second
    assert describe_unit(first) == "task:unit-1"


def test_concurrent_threads_each_own_their_slot():
    registry = SessionRegistry()
    errors = []

    def worker(index):
        unit = current_unit()
        try:
            for _ in range(200):
                registry.put(unit, _handle(unit))
                assert registry.get(unit).unit is unit
                registry.pop(unit)
        except Exception as exc:  # surfaced through the errors list
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(registry) == 0


def test_handle_reports_closed_when_page_check_fails():
    class BrokenPage:
        def is_closed(self):
            raise RuntimeError("disconnected")

    handle = SessionHandle(unit="u", engine=object(), browser=object(), context=object(), page=BrokenPage())

    assert handle.is_closed is True


def test_register_and_unregister_are_logged(caplog):
    registry = SessionRegistry()

    with caplog.at_level(logging.DEBUG, logger="signup_suite.sessions"):
        registry.put("unit-a", _handle("unit-a"))
        registry.pop("unit-a")
        registry.pop("unit-a")

    messages = [record.getMessage() for record in caplog.records]
    assert len(messages) == 2
    assert messages[0].startswith("Registered session: SessionHandle(unit=unit-a")
    assert messages[1].startswith("Unregistered session: SessionHandle(unit=unit-a")
