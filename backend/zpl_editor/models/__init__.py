"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- LabelField: 模板中的可编辑字段
- LabelConfig: 预览渲染的标签参数
- GenerationResult/ExportResult/PreviewResult: 各阶段输出
"""

from .field import TYPE_PRECEDENCE, FieldType, LabelField, Position, new_field_id
from .label import LabelConfig
from .results import ExportResult, GenerationResult, PreviewResult

__all__ = [
    "FieldType",
    "LabelField",
    "Position",
    "TYPE_PRECEDENCE",
    "new_field_id",
    "LabelConfig",
    "GenerationResult",
    "ExportResult",
    "PreviewResult",
]
