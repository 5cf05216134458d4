"""
标签配置模型 - 预览渲染所需的物理参数

由外部提供，核心只做数值解析，不做范围校验
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LabelConfig(BaseModel):
    """标签物理参数"""
    dpmm: int = Field(8, description="打印分辨率(点/毫米)")
    width: float = Field(5, description="标签宽度(英寸)")
    height: float = Field(6, description="标签高度(英寸)")

    @property
    def size_text(self) -> str:
        """渲染服务路径中的尺寸片段，如 5x6"""
        return f"{self.width:g}x{self.height:g}"
