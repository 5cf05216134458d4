"""
回写器 - 用字段当前值重建完整文档

职责：
1. 在归一化源文本上用与提取相同的匹配器重新扫描
2. 按类型建立 原值 → 字段 的查找表（键为不可变的原值，不用当前值）
3. 命中且有改动的语句重写取值或坐标；未命中/未改动的语句原样输出
4. 文本取值含转义序列时补 ^FH（已有则不重复），转义序列沿用语句自身的转义符
5. 坐标无法解析的语句不参与回写

重复原值：同类型内原值重复的字段改用扫描序号定位，避免绑错实例。

测试要点：
- test_round_trip_no_edit: 未编辑时逐字节还原
- test_regenerate_idempotent: 相同输入两次输出一致
- test_replace_image_name: 图片名替换，定位命令不动
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence

from ..interfaces import IRegenerator
from ..models import FieldType, LabelField
from .encoding import ESCAPE_CHAR, needs_hex_marker, to_cp850
from .patterns import (
    BARCODE_MATCHER,
    IMAGE_MATCHER,
    TEXT_MATCHER,
    MatchRecord,
    claimed_barcode_positions,
)

logger = logging.getLogger(__name__)


class FieldLookup:
    """单一类型的字段查找表"""

    def __init__(self, fields: Iterable[LabelField]):
        fields = list(fields)
        counts = Counter(f.original_value for f in fields)
        self.ambiguous = {value for value, n in counts.items() if n > 1}
        self.by_value = {
            f.original_value: f for f in fields if f.original_value not in self.ambiguous
        }
        self.by_ordinal = {
            f.source_ordinal: f for f in fields if f.original_value in self.ambiguous
        }
        if self.ambiguous:
            logger.info(f"原值重复，按扫描序号定位: {sorted(self.ambiguous)}")

    def resolve(self, record: MatchRecord) -> LabelField | None:
        if record.value in self.ambiguous:
            field = self.by_ordinal.get(record.ordinal)
            if field is not None and field.original_value == record.value:
                return field
            return None
        return self.by_value.get(record.value)


class Regenerator(IRegenerator):
    """回写器实现"""

    def __init__(self, cp850_remap: bool = True):
        self.cp850_remap = cp850_remap

    def regenerate(self, content: str, fields: Sequence[LabelField]) -> str:
        if not content or not fields:
            return ""

        lookups = {
            t: FieldLookup(f for f in fields if f.type == t) for t in FieldType
        }
        edits: list[tuple[int, int, str]] = []

        for record in IMAGE_MATCHER.iter_matches(content):
            field = self._resolve(lookups[FieldType.IMAGE], record)
            if field is not None:
                value = field.current_value if field.is_edited else None
                edits.append(self._edit(content, record, field, value))

        for record in BARCODE_MATCHER.iter_matches(content):
            field = self._resolve(lookups[FieldType.BARCODE], record)
            if field is not None:
                value = None
                if field.is_edited:
                    value = self._encode(field.current_value, protect_underscore=False)
                edits.append(self._edit(content, record, field, value))

        claimed = claimed_barcode_positions(content)
        for record in TEXT_MATCHER.iter_matches(content):
            if record.try_position_key() in claimed:
                continue
            field = self._resolve(lookups[FieldType.TEXT], record)
            if field is not None:
                value, ensure_hex = None, False
                if field.is_edited:
                    value = self._encode(field.current_value, escape=record.hex_escape)
                    ensure_hex = self.cp850_remap and needs_hex_marker(value, record.hex_escape)
                edits.append(self._edit(content, record, field, value, ensure_hex))

        return self._apply(content, edits)

    @staticmethod
    def _resolve(lookup: FieldLookup, record: MatchRecord) -> LabelField | None:
        """命中且有改动的字段；坐标无法解析的语句（提取时已丢弃）不参与回写"""
        if record.try_position_key() is None:
            return None
        field = lookup.resolve(record)
        if field is None or not field.is_modified:
            return None
        return field

    @staticmethod
    def _edit(
        content: str,
        record: MatchRecord,
        field: LabelField,
        value: str | None,
        ensure_hex: bool = False,
    ) -> tuple[int, int, str]:
        position = field.current_position if field.is_moved else None
        return (record.start, record.end, record.render(content, value, ensure_hex, position))

    def _encode(self, value: str, protect_underscore: bool = True, escape: str = ESCAPE_CHAR) -> str:
        if not self.cp850_remap:
            return value
        return to_cp850(value, protect_underscore=protect_underscore, escape=escape)

    def _apply(self, content: str, edits: list[tuple[int, int, str]]) -> str:
        """按位置拼接替换段；与先登记的替换重叠的段被忽略"""
        accepted: list[tuple[int, int, str]] = []
        for start, end, text in edits:
            if any(start < a_end and a_start < end for a_start, a_end, _ in accepted):
                logger.warning(f"替换段重叠，已跳过: [{start}, {end})")
                continue
            accepted.append((start, end, text))

        parts: list[str] = []
        cursor = 0
        for start, end, text in sorted(accepted):
            parts.append(content[cursor:start])
            parts.append(text)
            cursor = end
        parts.append(content[cursor:])
        return "".join(parts)
