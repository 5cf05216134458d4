"""
数据模型单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_models.py -v
"""

import pydantic
import pytest

from zpl_editor.models import (
    ExportResult,
    FieldType,
    GenerationResult,
    LabelConfig,
    LabelField,
    Position,
    PreviewResult,
)


class TestLabelField:
    """字段模型测试"""

    def test_seeded_values(self, image_field: LabelField):
        """测试初始状态"""
        assert image_field.current_value == image_field.original_value
        assert not image_field.is_edited
        assert image_field.is_selected_for_embedding is False
        assert image_field.id

    def test_ids_unique(self):
        """测试ID唯一"""
        ids = {
            LabelField(
                type=FieldType.TEXT,
                position=Position(x=0, y=0),
                original_value="A",
                current_value="A",
            ).id
            for _ in range(50)
        }
        assert len(ids) == 50

    def test_frozen(self, image_field: LabelField):
        """测试字段不可原地修改"""
        with pytest.raises(pydantic.ValidationError):
            image_field.current_value = "X"

    def test_with_value_keeps_identity(self, image_field: LabelField):
        """测试改值生成新实例且ID不变"""
        edited = image_field.with_value("R:LOGO2.GRF")
        assert edited.id == image_field.id
        assert edited.current_value == "R:LOGO2.GRF"
        assert edited.original_value == "R:LOGO1.GRF"
        assert edited.is_edited
        assert image_field.current_value == "R:LOGO1.GRF"

    def test_with_embedding_only_for_images(self):
        """测试嵌入标记仅对图片生效"""
        text = LabelField(
            type=FieldType.TEXT,
            position=Position(x=0, y=0),
            original_value="A",
            current_value="A",
        )
        assert text.with_embedding(True).is_selected_for_embedding is False

    def test_sort_key(self, image_field: LabelField):
        """测试排序键 y 优先"""
        assert image_field.sort_key == (200, 100)

    def test_with_position(self, image_field: LabelField):
        """测试移动后原坐标与排序键不变"""
        moved = image_field.with_position(5, 6)
        assert moved.is_moved and moved.is_modified
        assert not moved.is_edited
        assert moved.effective_position == Position(x=5, y=6)
        assert moved.position == image_field.position
        assert moved.sort_key == image_field.sort_key
        assert image_field.effective_position == image_field.position
        assert not image_field.is_modified


class TestLabelConfig:
    """标签参数测试"""

    def test_size_text(self):
        assert LabelConfig(width=4, height=6).size_text == "4x6"
        assert LabelConfig(width=2.5, height=1).size_text == "2.5x1"


class TestResults:
    """结果模型测试"""

    def test_generation_empty_not_ok(self):
        result = GenerationResult(message="nothing")
        assert not result.ok

    def test_export_ok(self):
        assert ExportResult(file_name="a.zpl", content="^XA^XZ").ok

    def test_preview_error_not_ok(self):
        assert not PreviewResult(generation=1, error="boom").ok
        assert PreviewResult(generation=1, image=b"\x89PNG").ok
