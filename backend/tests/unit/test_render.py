"""
渲染客户端与预览调度单元测试
"""

import asyncio

import httpx
import pytest

from zpl_editor.config import RuntimeConfig
from zpl_editor.config.runtime_config import RenderConfig
from zpl_editor.interfaces import ILabelRenderer, RenderError
from zpl_editor.models import LabelConfig, PreviewResult
from zpl_editor.render import LabelaryRenderer, PreviewScheduler

PNG = b"\x89PNG\r\n\x1a\nfake"


def _renderer(handler) -> LabelaryRenderer:
    return LabelaryRenderer(
        config=RenderConfig(base_url="https://render.test/"),
        transport=httpx.MockTransport(handler),
    )


class FakeRenderer(ILabelRenderer):
    """记录调用的假渲染器"""

    def __init__(self, fail: bool = False):
        self.calls: list[str] = []
        self.fail = fail

    async def render(self, zpl: str, label: LabelConfig) -> bytes:
        self.calls.append(zpl)
        if self.fail:
            raise RenderError("ERROR: Invalid command")
        return PNG


class TestLabelaryRenderer:
    """渲染客户端测试"""

    def test_build_url(self, label_config: LabelConfig):
        renderer = LabelaryRenderer(config=RenderConfig(base_url="https://render.test/"))
        assert renderer.build_url(label_config) == "https://render.test/v1/printers/8dpmm/labels/4x6/0/"

    def test_render_posts_document(self, label_config: LabelConfig):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=PNG)

        image = asyncio.run(_renderer(handler).render("^XA^FDOlá^FS^XZ", label_config))

        assert image == PNG
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://render.test/v1/printers/8dpmm/labels/4x6/0/"
        assert request.headers["Accept"] == "image/png"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.content == "^XA^FDOlá^FS^XZ".encode("utf-8")

    def test_error_body_becomes_message(self, label_config: LabelConfig):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, text="ERROR: Label too large\n")

        with pytest.raises(RenderError, match="ERROR: Label too large"):
            asyncio.run(_renderer(handler).render("^XA^XZ", label_config))

    def test_invalid_url(self, label_config: LabelConfig):
        """地址无效同样转为 RenderError"""
        renderer = LabelaryRenderer(
            config=RenderConfig(base_url="https://render.test/\x01"),
            transport=httpx.MockTransport(lambda request: httpx.Response(200, content=PNG)),
        )
        with pytest.raises(RenderError, match="渲染服务请求失败"):
            asyncio.run(renderer.render("^XA^XZ", label_config))

    def test_transport_failure(self, label_config: LabelConfig):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RenderError, match="渲染服务请求失败"):
            asyncio.run(_renderer(handler).render("^XA^XZ", label_config))


class TestPreviewScheduler:
    """预览调度测试"""

    def test_delay_from_config(self, monkeypatch: pytest.MonkeyPatch):
        """未指定延迟时取配置中的防抖时长"""
        monkeypatch.setattr(
            "zpl_editor.config.runtime_config._config",
            RuntimeConfig(preview={"debounce_ms": 250}),
        )
        assert PreviewScheduler(FakeRenderer()).delay_sec == 0.25
        assert PreviewScheduler(FakeRenderer(), delay_sec=0).delay_sec == 0

    def test_burst_collapses_to_single_render(self, label_config: LabelConfig):
        """连续触发只渲染一次，且取的是最新文档"""
        renderer = FakeRenderer()
        delivered: list[PreviewResult] = []

        async def scenario():
            scheduler = PreviewScheduler(renderer, on_result=delivered.append, delay_sec=0.01)
            current = {"doc": ""}
            for doc in ("^XA1^XZ", "^XA2^XZ", "^XA3^XZ"):
                current["doc"] = doc
                scheduler.trigger(lambda: current["doc"], label_config)
            return await scheduler.wait()

        result = asyncio.run(scenario())

        assert renderer.calls == ["^XA3^XZ"]
        assert result is not None and result.ok
        assert result.generation == 3
        assert delivered == [result]

    def test_stale_result_dropped(self, label_config: LabelConfig):
        """渲染期间再次触发，旧结果不投递"""
        delivered: list[PreviewResult] = []

        class SlowRenderer(FakeRenderer):
            async def render(self, zpl: str, label: LabelConfig) -> bytes:
                self.calls.append(zpl)
                await asyncio.sleep(0.05)
                return PNG

        renderer = SlowRenderer()

        async def scenario():
            scheduler = PreviewScheduler(renderer, on_result=delivered.append, delay_sec=0)
            first = asyncio.create_task(scheduler._run(1, lambda: "^XAold^XZ", label_config))
            scheduler._generation = 1
            await asyncio.sleep(0.01)
            scheduler._generation = 2
            return await first

        assert asyncio.run(scenario()) is None
        assert renderer.calls == ["^XAold^XZ"]
        assert delivered == []

    def test_render_error_reported(self, label_config: LabelConfig):
        delivered: list[PreviewResult] = []

        async def scenario():
            scheduler = PreviewScheduler(FakeRenderer(fail=True), on_result=delivered.append, delay_sec=0)
            scheduler.trigger(lambda: "^XA^ZZ^XZ", label_config)
            return await scheduler.wait()

        result = asyncio.run(scenario())
        assert result is not None
        assert result.image is None
        assert result.error == "ERROR: Invalid command"
        assert delivered == [result]

    def test_empty_document_skipped(self, label_config: LabelConfig):
        renderer = FakeRenderer()

        async def scenario():
            scheduler = PreviewScheduler(renderer, delay_sec=0)
            scheduler.trigger(lambda: "", label_config)
            return await scheduler.wait()

        assert asyncio.run(scenario()) is None
        assert renderer.calls == []

    def test_cancel_pending(self, label_config: LabelConfig):
        renderer = FakeRenderer()

        async def scenario():
            scheduler = PreviewScheduler(renderer, delay_sec=0.05)
            scheduler.trigger(lambda: "^XA^XZ", label_config)
            scheduler.cancel()
            return await scheduler.wait()

        assert asyncio.run(scenario()) is None
        assert renderer.calls == []
