"""
导出清理 - 将回写文档整理为可交付文件

步骤（按序执行，每步单独幂等）：
1. 每个 ^FD 前补 ^FH
2. ^FD…^FS 内的下划线占位 _5f 还原为 _
3. 删除 ^XA ^ID…^FS ^XZ 会话管理块
4. 删除正文中的 ~DG…^XA 原始定义段（保留 ^XA）
5. ^BE 条码的可读行标记强制为 Y
6. 勾选嵌入的图片：取原定义块、改名为当前值、去掉 ^XA/^XZ，
   成组插入到首个 ^XA 之后（首个格式内有 ^MC 时插在其前）

测试要点：
- test_embed_selected_image: 单个定义块改名后插入一次
- test_clean_twice_no_duplicate: 重复清理不重复插入
- test_strip_housekeeping_block: 删除 ^ID 块
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..interfaces import IExportCleaner
from ..models import FieldType, LabelField
from .encoding import UNDERSCORE_PLACEHOLDER
from .image_store import DEFINITION_OPENER, ImageDefinitionStore, definition_name_pattern

logger = logging.getLogger(__name__)

OPENING_MARKER = "^XA"
CLOSING_MARKER = "^XZ"
PRINT_BUFFER_MARKER = "^MC"

MISSING_HEX_PATTERN = re.compile(r"(?<!\^FH)(?<!\^FH.)\^FD")
PAYLOAD_PATTERN = re.compile(r"\^FD(.*?)\^FS", re.DOTALL)
HOUSEKEEPING_PATTERN = re.compile(r"\^XA\s*\^ID.*?\^FS\s*\^XZ\s*", re.DOTALL)
DEFINITION_BLOCK_PATTERN = re.compile(r"~DG(?:(?!\^XZ)[\s\S])*?\^XA")
EAN13_FLAG_PATTERN = re.compile(r"(\^BE[A-Z],\d*,)N(,[A-Z])")
WRAPPER_PATTERN = re.compile(r"\^(?:XA|XZ)")


class ExportCleaner(IExportCleaner):
    """导出清理器实现"""

    def clean(
        self,
        content: str,
        fields: Sequence[LabelField],
        store: ImageDefinitionStore,
    ) -> str:
        cleaned = self.ensure_hex_markers(content)
        cleaned = self.restore_underscores(cleaned)
        cleaned = self.strip_housekeeping(cleaned)
        cleaned = self.strip_definitions(cleaned)
        cleaned = self.force_interpretation_line(cleaned)
        return self.embed_selected_images(cleaned, fields, store)

    # === 单步 ===

    def ensure_hex_markers(self, content: str) -> str:
        return MISSING_HEX_PATTERN.sub("^FH^FD", content)

    def restore_underscores(self, content: str) -> str:
        return PAYLOAD_PATTERN.sub(
            lambda m: m.group(0).replace(UNDERSCORE_PLACEHOLDER, "_"), content
        )

    def strip_housekeeping(self, content: str) -> str:
        return HOUSEKEEPING_PATTERN.sub("", content)

    def strip_definitions(self, content: str) -> str:
        return DEFINITION_BLOCK_PATTERN.sub(OPENING_MARKER, content)

    def force_interpretation_line(self, content: str) -> str:
        return EAN13_FLAG_PATTERN.sub(r"\1Y\2", content)

    def embed_selected_images(
        self,
        content: str,
        fields: Sequence[LabelField],
        store: ImageDefinitionStore,
    ) -> str:
        blocks = self._collect_blocks(content, fields, store)
        if not blocks:
            return content

        open_at = content.find(OPENING_MARKER)
        if open_at == -1:
            logger.warning("文档缺少 ^XA，图片定义未嵌入")
            return content

        insert_at = open_at + len(OPENING_MARKER)
        close_at = content.find(CLOSING_MARKER, insert_at)
        buffer_at = content.find(PRINT_BUFFER_MARKER, insert_at)
        if buffer_at != -1 and (close_at == -1 or buffer_at < close_at):
            insert_at = buffer_at

        group = "\n" + "".join(block + "\n" for block in blocks)
        logger.info(f"嵌入图片定义 {len(blocks)} 个")
        return content[:insert_at] + group + content[insert_at:]

    def _collect_blocks(
        self,
        content: str,
        fields: Sequence[LabelField],
        store: ImageDefinitionStore,
    ) -> list[str]:
        seen_ids: set[str] = set()
        blocks: list[str] = []
        for field in fields:
            if field.type != FieldType.IMAGE or not field.is_selected_for_embedding:
                continue
            if not field.image_name or field.id in seen_ids:
                continue
            seen_ids.add(field.id)

            target = field.current_value
            if self._is_defined(content, target):
                continue

            definition = store.lookup(field.image_name)
            if not definition:
                logger.warning(f"未找到图片定义: {field.image_name}")
                continue

            block = self._rename(definition, field.image_name, target)
            block = WRAPPER_PATTERN.sub("", block).strip()
            if block not in blocks:
                blocks.append(block)
        return blocks

    def _is_defined(self, content: str, name: str) -> bool:
        pattern = definition_name_pattern([name])
        return pattern is not None and pattern.search(content) is not None

    def _rename(self, definition: str, old: str, new: str) -> str:
        # lookup 不区分大小写，这里只换开头的名称段
        return DEFINITION_OPENER + new + definition[len(DEFINITION_OPENER) + len(old):]
