"""
图片定义合并 - 把其他文件中的 ~DG 定义追加到原文件末尾

输出结构：
    <原文件（去首尾空白）>

    /////////////////////////// <备注> ///////////////////////////

    ~DG<新名>,...     （每个来源的每个定义块，按输入顺序）

测试要点：
- test_compile_appends_renamed_blocks: 定义块改名后追加
- test_compile_requires_comment: 备注必填
- test_compile_requires_names: 每个来源必须给出调用名
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from pydantic import BaseModel, Field

from ..interfaces import CompileError
from ..models import ExportResult
from .image_store import DEFINITION_OPENER

logger = logging.getLogger(__name__)

SOURCE_BLOCK_PATTERN = re.compile(r"~DG[\s\S]*?(?=\^XA|$)")
BLOCK_NAME_PATTERN = re.compile(r"~DG[^,]+")
BANNER_RULE = "/" * 27


class ImageSource(BaseModel):
    """待合并的图片来源文件"""
    file_name: str = ""
    content: str = ""
    image_name: str = Field("", description="合并后的调用名")


class ImageCompiler:
    """图片定义合并器"""

    def __init__(self, output_prefix: str = "UPDATED_"):
        self.output_prefix = output_prefix

    def compile(
        self,
        original_name: str,
        original_content: str,
        sources: Sequence[ImageSource],
        comment: str,
    ) -> ExportResult:
        self._validate(original_content, sources, comment)

        parts = [original_content.strip(), "", f"{BANNER_RULE} {comment.strip()} {BANNER_RULE}", ""]
        appended = 0
        for source in sources:
            blocks = SOURCE_BLOCK_PATTERN.findall(source.content)
            if not blocks:
                logger.warning(f"来源中没有图片定义: {source.file_name or '<未命名>'}")
            for block in blocks:
                renamed = BLOCK_NAME_PATTERN.sub(
                    lambda _: DEFINITION_OPENER + source.image_name.strip(), block.strip(), count=1
                )
                parts.extend([renamed, ""])
                appended += 1

        logger.info(f"合并图片定义 {appended} 个 -> {original_name}")
        return ExportResult(
            file_name=f"{self.output_prefix}{original_name}",
            content="\n".join(parts) + "\n",
        )

    def _validate(self, original_content: str, sources: Sequence[ImageSource], comment: str) -> None:
        if not original_content.strip():
            raise CompileError("请先选择原始文件")
        if not sources:
            raise CompileError("至少需要添加一个新图片")
        if not comment.strip():
            raise CompileError("备注为必填项")
        if any(not s.image_name.strip() for s in sources):
            raise CompileError("请为所有新增图片填写调用名")
