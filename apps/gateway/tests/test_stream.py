"""订阅者事件流测试

事件流永不自行结束，因此直接驱动 subscriber_events 生成器，
SSE 帧格式通过 sse_starlette 的 ServerSentEvent 编码验证。
"""

import asyncio
import json

from commentpilot.core.models import ModerationEvent, ModerationStatus
from commentpilot.gateway.routes.stream import subscriber_events
from commentpilot.gateway.services.channel_registry import ChannelRegistry
from sse_starlette.sse import ServerSentEvent


class TestSubscriberEvents:
    async def test_registers_and_yields_events(self):
        registry = ChannelRegistry()
        gen = subscriber_events("u-1", registry, heartbeat_interval=5)

        first = asyncio.ensure_future(gen.__anext__())
        await asyncio.sleep(0.01)
        assert registry.is_registered("u-1")

        event = ModerationEvent(status=ModerationStatus.ANALYZING, comment_id="c-1").to_wire()
        await registry.send_to("u-1", event)

        frame = await asyncio.wait_for(first, timeout=1)
        assert json.loads(frame["data"]) == event

        await gen.aclose()
        assert not registry.is_registered("u-1")

    async def test_events_delivered_in_order(self):
        registry = ChannelRegistry()
        gen = subscriber_events("u-1", registry, heartbeat_interval=5)
        pending = asyncio.ensure_future(gen.__anext__())
        await asyncio.sleep(0.01)

        for status in ("analyzing", "done"):
            await registry.send_to("u-1", {"status": status})

        received = [json.loads((await asyncio.wait_for(pending, timeout=1))["data"])]
        received.append(json.loads((await asyncio.wait_for(gen.__anext__(), timeout=1))["data"]))
        await gen.aclose()

        assert [e["status"] for e in received] == ["analyzing", "done"]

    async def test_heartbeat_when_idle(self):
        registry = ChannelRegistry()
        gen = subscriber_events("u-1", registry, heartbeat_interval=0.01)

        frame = await asyncio.wait_for(gen.__anext__(), timeout=1)
        await gen.aclose()

        assert frame == {"comment": "heartbeat"}

    async def test_replaced_connection_teardown_keeps_successor(self):
        registry = ChannelRegistry()
        old = subscriber_events("u-1", registry, heartbeat_interval=0.01)
        await old.__anext__()
        new = subscriber_events("u-1", registry, heartbeat_interval=0.01)
        await new.__anext__()

        await old.aclose()
        assert registry.is_registered("u-1")

        await new.aclose()
        assert not registry.is_registered("u-1")


class TestFraming:
    def test_data_frame(self):
        payload = json.dumps({"status": "done", "commentId": "c-1"})
        encoded = ServerSentEvent(data=payload, sep="\n").encode()
        assert encoded == f"data: {payload}\n\n".encode()
