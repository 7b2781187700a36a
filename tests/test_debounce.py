"""Tests for the quiescence-window debouncer."""

from __future__ import annotations

import asyncio

import pytest

from catalog_browser.services.debounce import Debouncer


@pytest.mark.asyncio
async def test_value_updates_after_window():
    settled: list[str] = []
    debouncer = Debouncer("", 30, on_settle=settled.append)

    debouncer.push("phone")
    assert debouncer.value == ""
    assert debouncer.is_pending

    await asyncio.sleep(0.08)

    assert debouncer.value == "phone"
    assert settled == ["phone"]
    assert not debouncer.is_pending


@pytest.mark.asyncio
async def test_superseded_values_are_never_emitted():
    settled: list[str] = []
    debouncer = Debouncer("", 40, on_settle=settled.append)

    for text in ("p", "ph", "pho"):
        debouncer.push(text)
        await asyncio.sleep(0.01)

    await asyncio.sleep(0.1)

    assert settled == ["pho"]


@pytest.mark.asyncio
async def test_close_cancels_pending_timer():
    settled: list[int] = []
    debouncer = Debouncer(0, 20, on_settle=settled.append)

    debouncer.push(1)
    debouncer.close()
    await asyncio.sleep(0.05)

    assert settled == []
    assert debouncer.value == 0
    with pytest.raises(RuntimeError):
        debouncer.push(2)


@pytest.mark.asyncio
async def test_flush_emits_immediately():
    debouncer = Debouncer("", 1000)

    debouncer.push("now")
    debouncer.flush()

    assert debouncer.value == "now"
    assert not debouncer.is_pending


def test_negative_window_rejected():
    with pytest.raises(ValueError):
        Debouncer("", -1)
