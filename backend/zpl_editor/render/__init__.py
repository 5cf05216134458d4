"""
预览渲染模块 - 外部渲染服务与防抖调度

子模块：
- labelary: 渲染服务HTTP客户端
- scheduler: 防抖预览调度
"""

from .labelary import LabelaryRenderer
from .scheduler import PreviewScheduler

__all__ = [
    "LabelaryRenderer",
    "PreviewScheduler",
]
