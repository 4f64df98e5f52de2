"""订阅者 SSE 事件流路由

GET /api/v1/ai-comments/events/{user_id}: 为订阅者注册通道，实时推送审核事件。
每个事件以 `data: <json>\\n\\n` 帧发送；空闲时发送心跳注释保活；
连接断开时注销通道。
"""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

from commentpilot.core.config import CHANNEL_QUEUE_MAXSIZE, SSE_HEARTBEAT_INTERVAL
from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from ..deps import get_channel_registry
from ..services.channel_registry import ChannelRegistry, QueueChannel
from .comments import API_PREFIX

router = APIRouter(prefix=API_PREFIX)


def _event_to_sse(event: dict[str, Any]) -> dict[str, str]:
    """将事件转换为 SSE data 帧"""
    return {"data": json.dumps(event, ensure_ascii=False)}


async def subscriber_events(
    subscriber_id: str,
    registry: ChannelRegistry,
    heartbeat_interval: float = SSE_HEARTBEAT_INTERVAL,
    queue_maxsize: int = CHANNEL_QUEUE_MAXSIZE,
) -> AsyncIterator[dict[str, str]]:
    """订阅者事件生成器

    1. 注册通道（同一 subscriber_id 的旧连接被替换）
    2. 从通道队列读取事件并推送
    3. 超时未收到事件时发送心跳
    4. 结束（断开/取消）时只注销自己的通道
    """
    channel = QueueChannel(maxsize=queue_maxsize)
    await registry.register(subscriber_id, channel)
    try:
        while True:
            try:
                event = await asyncio.wait_for(
                    channel.queue.get(), timeout=heartbeat_interval
                )
                yield _event_to_sse(event)
            except TimeoutError:
                # 心跳保活
                yield {"comment": "heartbeat"}
    finally:
        await registry.unregister(subscriber_id, channel)


@router.get("/events/{user_id}")
async def stream_subscriber_events(
    user_id: str,
    registry: ChannelRegistry = Depends(get_channel_registry),
):
    """SSE 事件流端点"""
    return EventSourceResponse(subscriber_events(user_id, registry), sep="\n")
