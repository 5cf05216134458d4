"""
结果模型 - 回写/导出/预览的输出

“无可处理内容”用空结果+提示信息表示，而不是抛异常
"""

from __future__ import annotations

from pydantic import BaseModel


class GenerationResult(BaseModel):
    """回写结果"""
    content: str = ""
    message: str | None = None

    @property
    def ok(self) -> bool:
        return bool(self.content)


class ExportResult(BaseModel):
    """导出结果"""
    file_name: str = ""
    content: str = ""
    message: str | None = None

    @property
    def ok(self) -> bool:
        return bool(self.content)


class PreviewResult(BaseModel):
    """预览渲染结果"""
    generation: int
    image: bytes | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.image is not None and self.error is None
