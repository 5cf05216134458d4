"""
字段提取器 - 在归一化文本上按模式发现可编辑字段

职责：
1. 图片：^FO 定位 + ^XG 调用名
2. 条码：^FT 定位 + ^BE/^BC + ^FD 数据，记录占用坐标
3. 文本：^FT 定位 + ^FD 数据，与条码坐标做差集排除

错误策略：
- 坐标无法解析为整数的匹配视为坏匹配，记日志后丢弃，不产出半成品字段

测试要点：
- test_extract_image: 图片字段（名即原值）
- test_barcode_excluded_from_text: 条码坐标不再计为文本
- test_malformed_match_dropped: 坏匹配丢弃
"""

from __future__ import annotations

import logging

from ..interfaces import IFieldExtractor, MalformedMatchError
from ..models import FieldType, LabelField
from .patterns import (
    BARCODE_MATCHER,
    IMAGE_MATCHER,
    TEXT_MATCHER,
    MatchRecord,
    claimed_barcode_positions,
)

logger = logging.getLogger(__name__)


class FieldExtractor(IFieldExtractor):
    """字段提取器实现"""

    def extract(self, content: str) -> list[LabelField]:
        fields: list[LabelField] = []

        for record in IMAGE_MATCHER.iter_matches(content):
            self._collect(fields, record, image_name=record.value)

        for record in BARCODE_MATCHER.iter_matches(content):
            self._collect(fields, record)

        # 文本是兜底模式，必须排除条码已占用的坐标
        claimed = claimed_barcode_positions(content)
        for record in TEXT_MATCHER.iter_matches(content):
            if record.try_position_key() in claimed:
                continue
            self._collect(fields, record)

        logger.debug(f"提取字段 {len(fields)} 个")
        return fields

    def _collect(
        self,
        fields: list[LabelField],
        record: MatchRecord,
        image_name: str | None = None,
    ) -> None:
        try:
            fields.append(self._build_field(record, image_name))
        except MalformedMatchError as e:
            logger.warning(f"丢弃坏匹配 #{record.ordinal}: {e}")

    def _build_field(self, record: MatchRecord, image_name: str | None) -> LabelField:
        position = record.parse_position()
        return LabelField(
            type=record.kind,
            position=position,
            original_value=record.value,
            current_value=record.value,
            source_ordinal=record.ordinal,
            image_name=image_name if record.kind == FieldType.IMAGE else None,
        )
