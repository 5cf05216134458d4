"""
会话模块 - 模板编辑编排

子模块：
- editor_session: 载入/编辑/回写/导出
"""

from .editor_session import NOTHING_TO_GENERATE, EditorSession

__all__ = [
    "EditorSession",
    "NOTHING_TO_GENERATE",
]
