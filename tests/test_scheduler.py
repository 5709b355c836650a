"""Tests for the timer facilities."""

import asyncio
import threading

from ttlstore.services.scheduler import AsyncioScheduler, ManualScheduler, ThreadTimerScheduler


def test_manual_fires_in_deadline_order():
    clock = ManualScheduler()
    fired = []
    clock.call_later(0.3, lambda: fired.append("c"))
    clock.call_later(0.1, lambda: fired.append("a"))
    clock.call_later(0.2, lambda: fired.append("b"))
    assert clock.advance(0.25) == 2
    assert fired == ["a", "b"]
    assert clock.pending() == 1
    assert clock.now == 0.25


def test_manual_cancel_is_idempotent():
    clock = ManualScheduler()
    fired = []
    timer = clock.call_later(0.1, lambda: fired.append(1))
    timer.cancel()
    timer.cancel()
    clock.advance(1)
    assert fired == []
    assert clock.pending() == 0


def test_manual_cancel_after_fire_is_harmless():
    clock = ManualScheduler()
    timer = clock.call_later(0.1, lambda: None)
    clock.advance(0.2)
    assert timer.fired
    timer.cancel()


def test_manual_timer_scheduled_from_callback_fires_in_same_advance():
    clock = ManualScheduler()
    fired = []

    def first():
        fired.append("first")
        clock.call_later(0.1, lambda: fired.append("second"))

    clock.call_later(0.1, first)
    clock.advance(0.5)
    assert fired == ["first", "second"]


async def test_asyncio_scheduler_uses_running_loop():
    done = asyncio.Event()
    handle = AsyncioScheduler().call_later(0.01, done.set)
    await asyncio.wait_for(done.wait(), timeout=1)
    handle.cancel()


async def test_asyncio_scheduler_cancel():
    fired = []
    handle = AsyncioScheduler(asyncio.get_running_loop()).call_later(0.01, lambda: fired.append(1))
    handle.cancel()
    await asyncio.sleep(0.03)
    assert fired == []


def test_thread_timer_fires_and_cancels():
    fired = threading.Event()
    ThreadTimerScheduler().call_later(0.01, fired.set)
    assert fired.wait(timeout=2)

    never = threading.Event()
    timer = ThreadTimerScheduler().call_later(0.05, never.set)
    timer.cancel()
    timer.cancel()
    assert not never.wait(timeout=0.15)


def test_asyncio_scheduler_without_loop_falls_back_to_thread():
    fired = threading.Event()
    handle = AsyncioScheduler().call_later(0.01, fired.set)
    assert isinstance(handle, threading.Timer)
    assert fired.wait(timeout=2)
