"""ModerationStorageClient -- 将审核结论写入外部存储服务

POST {base_url}{STORAGE_PATH_SUFFIX}，body 为 {commentId, approved, reason, sentiment, title}。
任何 2xx 视为成功；其他状态码或传输异常视为存储失败，以 StorageResult 返回而不抛出。
"""

from dataclasses import dataclass

import httpx
import structlog
from commentpilot.core.config import STORAGE_PATH_SUFFIX
from commentpilot.core.models import ModerationDecision

log = structlog.get_logger()


@dataclass(frozen=True)
class StorageResult:
    ok: bool
    status_code: int | None = None
    error: str | None = None


class ModerationStorageClient:
    """审核结论存储回调客户端"""

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient,
        timeout_s: float = 10.0,
    ) -> None:
        """
        Args:
            base_url: 存储服务基础 URL（为空表示未配置）
            http_client: 共享的 httpx.AsyncClient，由 lifespan 负责关闭
            timeout_s: 请求超时（秒）
        """
        self._base_url = base_url.rstrip("/")
        self._http = http_client
        self._timeout_s = timeout_s

    @property
    def configured(self) -> bool:
        return bool(self._base_url)

    @property
    def url(self) -> str:
        return f"{self._base_url}{STORAGE_PATH_SUFFIX}"

    async def store(self, comment_id: str, decision: ModerationDecision) -> StorageResult:
        """发送审核结论

        Returns:
            StorageResult -- ok=True 表示存储服务返回 2xx
        """
        if not self.configured:
            log.warning("storage_not_configured", comment_id=comment_id)
            return StorageResult(ok=False, error="storage endpoint not configured")

        payload = decision.to_storage_payload(comment_id)
        try:
            resp = await self._http.post(self.url, json=payload, timeout=self._timeout_s)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log.error(
                "storage_request_failed",
                comment_id=comment_id,
                url=self.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return StorageResult(ok=False, error=f"{type(e).__name__}: {e}")

        if resp.is_success:
            log.info("storage_request_completed", comment_id=comment_id, status_code=resp.status_code)
            return StorageResult(ok=True, status_code=resp.status_code)

        log.warning(
            "storage_request_rejected",
            comment_id=comment_id,
            url=self.url,
            status_code=resp.status_code,
        )
        return StorageResult(
            ok=False,
            status_code=resp.status_code,
            error=f"HTTP {resp.status_code}",
        )
