"""
标签渲染服务客户端 - 提交ZPL，取回PNG

服务接口：
    POST {base_url}/v1/printers/{dpmm}dpmm/labels/{width}x{height}/0/
    Accept: image/png
成功返回图片字节；非2xx返回的文本作为错误信息，
请求失败（网络错误、地址无效）统一转为 RenderError。
"""

from __future__ import annotations

import logging

import httpx

from ..config import get_config
from ..config.runtime_config import RenderConfig
from ..interfaces import ILabelRenderer, RenderError
from ..models import LabelConfig

logger = logging.getLogger(__name__)


class LabelaryRenderer(ILabelRenderer):
    """Labelary 渲染客户端"""

    def __init__(
        self,
        config: RenderConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or get_config().render
        self._transport = transport

    def build_url(self, label: LabelConfig) -> str:
        base = self.config.base_url.rstrip("/")
        return f"{base}/v1/printers/{label.dpmm}dpmm/labels/{label.size_text}/0/"

    async def render(self, zpl: str, label: LabelConfig) -> bytes:
        url = self.build_url(label)
        headers = {
            "Accept": self.config.accept,
            "Content-Type": "application/x-www-form-urlencoded",
        }
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout_sec),
            transport=self._transport,
        ) as client:
            try:
                resp = await client.post(url, content=zpl.encode("utf-8"), headers=headers)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise RenderError(f"渲染服务请求失败: {e}") from e

        if resp.is_error:
            message = resp.text.strip() or f"HTTP {resp.status_code}"
            logger.warning(f"渲染失败 {resp.status_code}: {message}")
            raise RenderError(message)

        return resp.content
