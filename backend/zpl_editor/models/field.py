"""
标签字段模型 - 模板中可编辑的单元

字段不可变：编辑通过 model_copy 生成新实例后按 id 整体替换，
旧快照对并发读者（例如已发出的预览请求）保持有效。
"""

from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, Field


class FieldType(str, Enum):
    """字段类型"""
    IMAGE = "image"
    BARCODE = "barcode"
    TEXT = "text"


# 排序时各类型的先后
TYPE_PRECEDENCE: tuple[FieldType, ...] = (
    FieldType.BARCODE,
    FieldType.IMAGE,
    FieldType.TEXT,
)


def new_field_id() -> str:
    return str(uuid.uuid4())


class Position(BaseModel):
    """打印坐标（点）"""
    x: int
    y: int

    model_config = {"frozen": True}

    @property
    def key(self) -> tuple[int, int]:
        return (self.x, self.y)


class LabelField(BaseModel):
    """可编辑字段"""
    id: str = Field(default_factory=new_field_id, description="会话内唯一ID，提取时生成")
    type: FieldType
    position: Position = Field(..., description="源文本中的原坐标（排序键）")
    current_position: Position | None = Field(None, description="编辑后的坐标；None 表示未移动")
    original_value: str = Field(..., description="源文本中的原值（回写查找键）")
    current_value: str = Field(..., description="当前值")
    order_index: int = Field(0, description="排序后的序号")
    source_ordinal: int = Field(0, description="在同类匹配扫描中的序号")

    # 仅图片字段
    image_name: str | None = Field(None, description="引用的图片定义名")
    is_selected_for_embedding: bool = False

    model_config = {"frozen": True}

    @property
    def is_edited(self) -> bool:
        return self.current_value != self.original_value

    @property
    def is_moved(self) -> bool:
        return self.current_position is not None and self.current_position != self.position

    @property
    def is_modified(self) -> bool:
        """取值或坐标有改动（回写时需要重写该语句）"""
        return self.is_edited or self.is_moved

    @property
    def effective_position(self) -> Position:
        return self.current_position or self.position

    @property
    def sort_key(self) -> tuple[int, int]:
        """排序键：y 优先，x 其次"""
        return (self.position.y, self.position.x)

    def with_value(self, value: str) -> LabelField:
        """返回替换了当前值的新字段"""
        return self.model_copy(update={"current_value": value})

    def with_position(self, x: int, y: int) -> LabelField:
        """返回替换了坐标的新字段（原坐标与排序序号不变）"""
        return self.model_copy(update={"current_position": Position(x=x, y=y)})

    def with_embedding(self, selected: bool) -> LabelField:
        """返回替换了嵌入标记的新字段（非图片字段恒为False）"""
        return self.model_copy(
            update={"is_selected_for_embedding": selected and self.type == FieldType.IMAGE}
        )
