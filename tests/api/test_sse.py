"""
Test cases for the live status event stream
"""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.api.routes.sse import live_event_stream
from solar_monitor.utils.charts import ChartRegistry


async def collect(stream):
    return [event async for event in stream]


def decode(event: str):
    assert event.startswith("data: ") and event.endswith("\n\n")
    return json.loads(event[len("data: "):])


@pytest.mark.asyncio
async def test_stream_emits_live_payloads(
    db: AsyncSession, session_factory, telemetry_client: MagicMock
):
    registry = ChartRegistry("live-status")

    events = await collect(
        live_event_stream(session_factory, telemetry_client, registry, interval=0, max_events=2)
    )

    assert len(events) == 2
    first, second = (decode(event) for event in events)
    assert first["view"]["battery_pct"] == 80
    # same chart instances, updated in place
    assert [chart["revision"] for chart in first["charts"]] == [0, 0, 0]
    assert [chart["revision"] for chart in second["charts"]] == [1, 1, 1]
    # second poll is answered from the cache
    telemetry_client.get_live_data.assert_awaited_once()


@pytest.mark.asyncio
async def test_stream_sends_heartbeat_without_data(
    db: AsyncSession, session_factory, telemetry_client: MagicMock
):
    telemetry_client.get_live_data.return_value = None

    events = await collect(
        live_event_stream(
            session_factory, telemetry_client, ChartRegistry("live-status"),
            interval=0, max_events=2,
        )
    )

    assert [decode(event) for event in events] == [{"heartbeat": True}, {"heartbeat": True}]


@pytest.mark.asyncio
async def test_stream_stops_on_error(db: AsyncSession, session_factory, telemetry_client: MagicMock):
    telemetry_client.get_live_data = AsyncMock(side_effect=RuntimeError("backend exploded"))

    events = await collect(
        live_event_stream(
            session_factory, telemetry_client, ChartRegistry("live-status"),
            interval=0, max_events=3,
        )
    )

    assert events == []
