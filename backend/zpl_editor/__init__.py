"""
ZPL 标签模板编辑 - 后端核心模块

模块结构：
- config/     运行期配置加载
- models/     数据模型定义
- zpl/        ZPL 处理（归一化/字段提取/排序/回写/导出清理）
- render/     预览渲染服务客户端与防抖调度
- session/    编辑会话编排
"""

__version__ = "0.1.0"
