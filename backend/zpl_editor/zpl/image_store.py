"""
图片定义库 - 一次捕获、多次读取

职责：
1. 载入时从未归一化的原文截取第一个 ~DG…^XA 定义段
2. 按名称精确查找单个定义块（名称转义，后接逗号，非子串匹配）
3. 批量改名渲染（预览用）

构建后不再修改；加载新文档时整体重建。
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

DEFINITION_OPENER = "~DG"
DEFINITIONS_PATTERN = re.compile(r"~DG[\s\S]*?\^XA")


def definition_pattern(name: str) -> re.Pattern[str]:
    """单个定义块：~DG<name>, 起，到下一个 ~DG/^XA/^XZ 止"""
    return re.compile(
        r"~DG" + re.escape(name) + r",[\s\S]*?(?=~DG|\^XA|\^XZ|\Z)",
        re.IGNORECASE,
    )


def definition_name_pattern(names: Iterable[str]) -> re.Pattern[str] | None:
    """匹配若干定义名的开头 ~DG<name>,（最长名优先）"""
    keys = sorted(set(names), key=len, reverse=True)
    if not keys:
        return None
    return re.compile(r"~DG(" + "|".join(re.escape(k) for k in keys) + r")(?=,)")


class ImageDefinitionStore:
    """图片定义库"""

    def __init__(self, definitions: str = ""):
        self._definitions = definitions

    @classmethod
    def from_source(cls, raw_content: str) -> ImageDefinitionStore:
        match = DEFINITIONS_PATTERN.search(raw_content)
        return cls(match.group(0) if match else "")

    @property
    def definitions(self) -> str:
        """原始定义段（含结尾 ^XA）"""
        return self._definitions

    def __bool__(self) -> bool:
        return bool(self._definitions)

    def lookup(self, name: str) -> str:
        """按名称取定义块，未找到返回空串"""
        if not name or not self._definitions:
            return ""
        match = definition_pattern(name).search(self._definitions)
        return match.group(0) if match else ""

    def renamed_definitions(self, renames: Mapping[str, str]) -> str:
        """
        返回全部定义（去掉结尾 ^XA），按映射一次性改名

        单次替换，A→B、B→C 不会串联。
        """
        body = self._definitions
        if body.endswith("^XA"):
            body = body[:-len("^XA")]
        body = body.rstrip()

        renames = {k: v for k, v in renames.items() if k and k != v}
        pattern = definition_name_pattern(renames)
        if pattern is None:
            return body
        return pattern.sub(lambda m: DEFINITION_OPENER + renames[m.group(1)], body)
