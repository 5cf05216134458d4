"""
编辑会话 - 单个模板的加载/编辑/回写/导出

职责：
1. 载入模板：构建图片定义库、归一化文本、排序后的字段列表（整体重建）
2. 编辑：按ID整体替换字段（取值/坐标/嵌入），旧快照保持有效
3. 回写/预览/导出：无文档或无字段时返回带提示的空结果
4. 预览：交给防抖调度器，延迟结束时才取文档

测试要点：
- test_load_builds_fields: 载入后字段与定义库就绪
- test_update_value_replaces_snapshot: 编辑不影响旧快照
- test_export_file_name: 导出文件名替换扩展名
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import PurePath

from ..config import RuntimeConfig, get_config
from ..interfaces import FieldNotFoundError
from ..models import (
    ExportResult,
    FieldType,
    GenerationResult,
    LabelConfig,
    LabelField,
    PreviewResult,
)
from ..render import PreviewScheduler
from ..zpl import (
    ContentNormalizer,
    ExportCleaner,
    FieldExtractor,
    FieldOrderer,
    ImageDefinitionStore,
    Regenerator,
    build_preview_document,
)

logger = logging.getLogger(__name__)

NOTHING_TO_GENERATE = "没有已加载的模板或字段，无内容可生成"


class EditorSession:
    """编辑会话"""

    def __init__(self, config: RuntimeConfig | None = None):
        self.config = config or get_config()
        self.label: LabelConfig = self.config.label.model_copy()

        self.normalizer = ContentNormalizer()
        self.extractor = FieldExtractor()
        self.orderer = FieldOrderer()
        self.regenerator = Regenerator(cp850_remap=self.config.encoding.cp850_remap)
        self.cleaner = ExportCleaner()

        self.file_name = ""
        self.original_content = ""
        self.store = ImageDefinitionStore()
        self._fields: tuple[LabelField, ...] = ()

    # === 载入 ===

    def load(self, raw_content: str, file_name: str = "") -> tuple[LabelField, ...]:
        """载入模板（字段与定义库整体重建）"""
        self.file_name = file_name
        self.store = ImageDefinitionStore.from_source(raw_content)
        self.original_content = self.normalizer.normalize(raw_content)
        self._fields = tuple(self.orderer.order(self.extractor.extract(self.original_content)))

        logger.info(
            f"载入模板 {file_name or '<未命名>'}: 字段 {len(self._fields)} 个"
            f"{'，含图片定义' if self.store else ''}"
        )
        return self._fields

    @property
    def fields(self) -> tuple[LabelField, ...]:
        """当前字段快照"""
        return self._fields

    @property
    def is_loaded(self) -> bool:
        return bool(self.original_content)

    def get_field(self, field_id: str) -> LabelField:
        for field in self._fields:
            if field.id == field_id:
                return field
        raise FieldNotFoundError(f"字段不存在: {field_id}")

    # === 编辑 ===

    def update_value(self, field_id: str, value: str) -> LabelField:
        """修改字段当前值"""
        field = self.get_field(field_id)
        if self.config.editing.uppercase_codes and field.type in (FieldType.IMAGE, FieldType.BARCODE):
            value = value.upper()
        return self._replace(field.with_value(value))

    def update_position(self, field_id: str, x: int, y: int) -> LabelField:
        """修改字段坐标（排序序号不变，回写时重写定位命令）"""
        return self._replace(self.get_field(field_id).with_position(x, y))

    def set_embedding(self, field_id: str, selected: bool) -> LabelField:
        """勾选/取消图片嵌入"""
        return self._replace(self.get_field(field_id).with_embedding(selected))

    def update_label(self, **changes: float) -> LabelConfig:
        """修改标签参数（dpmm/width/height）"""
        self.label = LabelConfig(**{**self.label.model_dump(), **changes})
        return self.label

    def _replace(self, new_field: LabelField) -> LabelField:
        self._fields = tuple(
            new_field if f.id == new_field.id else f for f in self._fields
        )
        return new_field

    # === 输出 ===

    def generate(self) -> GenerationResult:
        """用当前值回写文档"""
        content = self.regenerator.regenerate(self.original_content, self._fields)
        if not content:
            return GenerationResult(message=NOTHING_TO_GENERATE)
        return GenerationResult(content=content)

    def preview_document(self) -> str:
        """预览请求体；无内容时为空串"""
        result = self.generate()
        if not result.ok:
            return ""
        return build_preview_document(result.content, self._fields, self.store)

    def schedule_preview(self, scheduler: PreviewScheduler) -> asyncio.Task[PreviewResult | None]:
        """排程一次防抖预览；文档在延迟结束时按最新字段生成"""
        return scheduler.trigger(self.preview_document, self.label)

    def export(self) -> ExportResult:
        """生成导出文件"""
        result = self.generate()
        if not result.ok:
            return ExportResult(message=result.message)

        content = self.cleaner.clean(result.content, self._fields, self.store)
        file_name = self.export_file_name()
        logger.info(f"导出 {file_name}")
        return ExportResult(file_name=file_name, content=content)

    def export_file_name(self) -> str:
        stem = PurePath(self.file_name).stem if self.file_name else "label"
        return f"{stem}{self.config.export.extension}"
