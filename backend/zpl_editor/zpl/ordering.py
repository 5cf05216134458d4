"""
字段排序 - 确定性的显示/编辑顺序

规则：按类型分组，组内按 (y, x) 升序（稳定排序，同坐标保持发现顺序），
再按 条码 → 图片 → 文本 拼接，order_index 即拼接后的位置。
排序只是展示元数据，回写按值查找，不依赖序号。
"""

from __future__ import annotations

from collections.abc import Iterable

from ..models import TYPE_PRECEDENCE, LabelField


class FieldOrderer:
    """字段排序器"""

    def order(self, fields: Iterable[LabelField]) -> list[LabelField]:
        """返回带 order_index 的新字段列表"""
        fields = list(fields)
        ordered: list[LabelField] = []
        for field_type in TYPE_PRECEDENCE:
            group = [f for f in fields if f.type == field_type]
            ordered.extend(sorted(group, key=lambda f: f.sort_key))

        return [
            f.model_copy(update={"order_index": i})
            for i, f in enumerate(ordered)
        ]
