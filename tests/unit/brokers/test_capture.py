"""Tests for the one-shot HeaderCapture handoff"""

import asyncio

import pytest

from schwabweb.infrastructure.brokers.schwab.capture import HeaderCapture
from schwabweb.shared.exceptions import SchwabAuthenticationError


@pytest.mark.unit
@pytest.mark.asyncio
async def test_second_offer_before_read_is_dropped_without_blocking():
    """Two matching requests fire before the login flow reads the slot"""
    capture = HeaderCapture()

    first = capture.offer({"authorization": "Bearer one", "x": "1"})
    second = capture.offer({"authorization": "Bearer two", "x": "2"})

    assert first is True
    assert second is False
    assert capture.dropped == 1

    headers = await capture.wait(timeout=1)
    assert headers == {"authorization": "Bearer one", "x": "1"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_offers_after_read_are_still_non_blocking():
    capture = HeaderCapture()
    capture.offer({"authorization": "Bearer one"})
    await capture.wait(timeout=1)

    assert capture.offer({"authorization": "Bearer late"}) is False
    assert (await capture.wait(timeout=1))["authorization"] == "Bearer one"


@pytest.mark.unit
def test_offer_without_authorization_is_ignored():
    capture = HeaderCapture()

    assert capture.offer({"accept": "application/json"}) is False
    assert capture.offer({"authorization": ""}) is False
    assert capture.offer(None) is False
    assert capture.captured is False
    assert capture.dropped == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_wait_receives_offer_from_concurrent_task():
    capture = HeaderCapture()

    async def intercept():
        await asyncio.sleep(0.01)
        capture.offer({"Authorization": "Bearer late"})
        capture.offer({"Authorization": "Bearer later"})

    task = asyncio.create_task(intercept())
    headers = await capture.wait(timeout=1)
    await task

    assert headers["Authorization"] == "Bearer late"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_wait_times_out():
    capture = HeaderCapture()

    with pytest.raises(SchwabAuthenticationError) as exc_info:
        await capture.wait(timeout=0.01)

    assert "no authorization header captured" in str(exc_info.value)
