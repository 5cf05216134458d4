"""
预览防抖调度 - 单槽可取消任务

职责：
1. 每次触发：代数+1，取消挂起任务，重新排程
2. 任务延迟结束后才取文档（总是最新字段值）并调用渲染服务
3. 只投递当前代数的结果，被取代的结果丢弃
4. 渲染失败以 PreviewResult.error 投递，不抛出

测试要点：
- test_burst_collapses_to_single_render: 连续触发只渲染一次
- test_stale_result_dropped: 过期结果不投递
- test_render_error_reported: 失败转为错误信息
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..config import get_config
from ..interfaces import ILabelRenderer, RenderError
from ..models import LabelConfig, PreviewResult

logger = logging.getLogger(__name__)


class PreviewScheduler:
    """防抖预览调度器"""

    def __init__(
        self,
        renderer: ILabelRenderer,
        on_result: Callable[[PreviewResult], None] | None = None,
        delay_sec: float | None = None,
    ):
        self.renderer = renderer
        self.on_result = on_result
        self.delay_sec = get_config().debounce_sec if delay_sec is None else delay_sec
        self._generation = 0
        self._pending: asyncio.Task[PreviewResult | None] | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def trigger(
        self,
        document_provider: Callable[[], str],
        label: LabelConfig,
    ) -> asyncio.Task[PreviewResult | None]:
        """排程一次预览（需在运行中的事件循环内调用）"""
        self._generation += 1
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(
            self._run(self._generation, document_provider, label)
        )
        return self._pending

    def cancel(self) -> None:
        """取消挂起任务（代数不变）"""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

    async def wait(self) -> PreviewResult | None:
        """等待当前任务结束；被取消时返回None"""
        task = self._pending
        if task is None:
            return None
        await asyncio.wait({task})
        if task.cancelled():
            return None
        return task.result()

    async def _run(
        self,
        generation: int,
        document_provider: Callable[[], str],
        label: LabelConfig,
    ) -> PreviewResult | None:
        await asyncio.sleep(self.delay_sec)

        document = document_provider()
        if not document:
            logger.debug(f"[预览#{generation}] 无可渲染内容")
            return None

        try:
            image = await self.renderer.render(document, label)
            result = PreviewResult(generation=generation, image=image)
        except RenderError as e:
            result = PreviewResult(generation=generation, error=str(e))

        if generation != self._generation:
            logger.debug(f"[预览#{generation}] 已被#{self._generation}取代，结果丢弃")
            return None

        if self.on_result is not None:
            self.on_result(result)
        return result
