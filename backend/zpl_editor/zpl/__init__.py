"""
ZPL 处理模块 - 模板字段提取与回写

子模块：
- patterns: 提取/回写共用的匹配器
- normalizer: 结构命令重排
- extractor: 字段提取
- ordering: 字段排序
- encoding: CP850 字符映射
- regenerator: 当前值回写
- image_store: 图片定义库
- export: 导出清理
- preview: 预览文档构建
- compiler: 图片定义合并
"""

from .compiler import ImageCompiler, ImageSource
from .export import ExportCleaner
from .extractor import FieldExtractor
from .image_store import ImageDefinitionStore
from .normalizer import ContentNormalizer
from .ordering import FieldOrderer
from .preview import build_preview_document
from .regenerator import Regenerator

__all__ = [
    "ContentNormalizer",
    "FieldExtractor",
    "FieldOrderer",
    "Regenerator",
    "ImageDefinitionStore",
    "ExportCleaner",
    "build_preview_document",
    "ImageCompiler",
    "ImageSource",
]
