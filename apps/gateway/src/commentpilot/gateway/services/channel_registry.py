"""ChannelRegistry -- 内存中的订阅者通道注册表

每个订阅者标识最多对应一个活跃通道，后注册的通道替换先注册的。
投递为尽力而为：目标不存在时静默丢弃，投递异常只记录日志，不向发送方抛出。
注册表在应用 lifespan 中创建一次，通过 app.state 传递给需要它的组件。
"""

import asyncio
from typing import Any, Protocol

import structlog

log = structlog.get_logger()


class Channel(Protocol):
    """单方法投递能力 -- 注册表不关心底层传输（SSE、socket、测试替身）"""

    def deliver(self, event: dict[str, Any]) -> None:
        """投递一个可 JSON 序列化的事件，不得阻塞"""
        ...


class ChannelClosedError(Exception):
    """通道已无法接收事件（队列已满或连接已关闭）"""


class QueueChannel:
    """基于 asyncio.Queue 的通道 -- SSE 连接从队列中读取事件"""

    def __init__(self, maxsize: int = 100) -> None:
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=maxsize)

    def deliver(self, event: dict[str, Any]) -> None:
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull as e:
            raise ChannelClosedError("channel queue is full") from e


class ChannelRegistry:
    """订阅者标识 -> 通道

    锁只保护字典的修改与快照，投递在锁外进行。
    """

    def __init__(self) -> None:
        self._channels: dict[str, Channel] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._channels)

    def is_registered(self, subscriber_id: str) -> bool:
        return subscriber_id in self._channels

    async def register(self, subscriber_id: str, channel: Channel) -> None:
        """安装或替换 subscriber_id 的通道"""
        async with self._lock:
            replaced = subscriber_id in self._channels
            self._channels[subscriber_id] = channel
        log.info("channel_registered", subscriber_id=subscriber_id, replaced=replaced)

    async def unregister(
        self, subscriber_id: str, channel: Channel | None = None
    ) -> None:
        """移除 subscriber_id 的通道，不存在时无操作

        Args:
            subscriber_id: 订阅者标识
            channel: 指定时仅当它仍是当前活跃通道才移除，
                避免被替换的旧连接在断开时移除新连接
        """
        async with self._lock:
            current = self._channels.get(subscriber_id)
            if current is None:
                return
            if channel is not None and current is not channel:
                return
            del self._channels[subscriber_id]
        log.info("channel_unregistered", subscriber_id=subscriber_id)

    async def send_to(self, subscriber_id: str | None, event: dict[str, Any]) -> None:
        """向单个订阅者投递事件；无通道时静默丢弃"""
        if subscriber_id is None:
            log.debug("event_dropped_no_subscriber", status=event.get("status"))
            return

        async with self._lock:
            channel = self._channels.get(subscriber_id)

        if channel is None:
            log.debug(
                "event_dropped_unregistered",
                subscriber_id=subscriber_id,
                status=event.get("status"),
            )
            return

        await self._deliver(subscriber_id, channel, event)

    async def broadcast(self, event: dict[str, Any]) -> None:
        """向当前所有订阅者投递同一事件，单个通道失败不影响其他通道"""
        async with self._lock:
            snapshot = list(self._channels.items())

        for subscriber_id, channel in snapshot:
            await self._deliver(subscriber_id, channel, event)

    async def clear(self) -> None:
        """移除全部通道（应用关闭时调用）"""
        async with self._lock:
            count = len(self._channels)
            self._channels.clear()
        log.info("channel_registry_cleared", count=count)

    async def _deliver(
        self, subscriber_id: str, channel: Channel, event: dict[str, Any]
    ) -> None:
        try:
            channel.deliver(event)
        except ChannelClosedError:
            log.warning("channel_dead_removed", subscriber_id=subscriber_id)
            await self.unregister(subscriber_id, channel)
        except Exception as e:
            log.warning(
                "channel_delivery_failed",
                subscriber_id=subscriber_id,
                error=str(e),
                error_type=type(e).__name__,
            )
