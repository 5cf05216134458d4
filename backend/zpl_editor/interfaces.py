"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from zpl_editor.interfaces import ILabelRenderer

    class FakeRenderer(ILabelRenderer):
        async def render(self, zpl: str, label: LabelConfig) -> bytes:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import LabelConfig, LabelField
    from .zpl.image_store import ImageDefinitionStore


# ============================================================================
# ZPL 处理模块接口
# ============================================================================

class IContentNormalizer(ABC):
    """内容归一化接口 - 固定结构命令的相对顺序"""

    @abstractmethod
    def normalize(self, content: str) -> str:
        """
        归一化原始模板文本

        Args:
            content: 原始ZPL文本

        Returns:
            归一化后的文本（无标记行时原样返回）
        """
        ...


class IFieldExtractor(ABC):
    """字段提取器接口 - 按模式发现可编辑字段"""

    @abstractmethod
    def extract(self, content: str) -> list[LabelField]:
        """
        提取归一化文本中的全部字段

        Args:
            content: 归一化后的ZPL文本

        Returns:
            字段列表（尚未全局排序）
        """
        ...


class IRegenerator(ABC):
    """回写器接口 - 用当前值重建完整文档"""

    @abstractmethod
    def regenerate(self, content: str, fields: Sequence[LabelField]) -> str:
        """
        回写当前值

        Args:
            content: 归一化后的ZPL文本
            fields: 当前字段快照

        Returns:
            回写后的文本；源为空或无字段时返回空串
        """
        ...


class IExportCleaner(ABC):
    """导出清理器接口"""

    @abstractmethod
    def clean(
        self,
        content: str,
        fields: Sequence[LabelField],
        store: ImageDefinitionStore,
    ) -> str:
        """
        生成可交付的导出文本

        Args:
            content: 回写后的ZPL文本
            fields: 当前字段快照（用于选择嵌入的图片）
            store: 图片定义库

        Returns:
            最终导出文本
        """
        ...


# ============================================================================
# 预览渲染接口
# ============================================================================

class ILabelRenderer(ABC):
    """标签渲染服务接口（外部黑盒）"""

    @abstractmethod
    async def render(self, zpl: str, label: LabelConfig) -> bytes:
        """
        渲染ZPL为图片

        Args:
            zpl: 预览文档
            label: 标签参数

        Returns:
            图片字节

        Raises:
            RenderError: 服务返回非2xx或网络失败
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class ZplEditorError(Exception):
    """基础异常"""
    pass


class ExtractionError(ZplEditorError):
    """提取错误"""
    pass


class MalformedMatchError(ExtractionError):
    """模式命中但数值捕获无法解析"""
    pass


class RenderError(ZplEditorError):
    """渲染服务错误"""
    pass


class CompileError(ZplEditorError):
    """图片合并输入不完整"""
    pass


class FieldNotFoundError(ZplEditorError):
    """字段ID不存在"""
    pass
