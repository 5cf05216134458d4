"""
输出字符集映射 - 重音字符转 CP850 十六进制转义（配合 ^FH 使用）

映射表为静态不可变数据，单次 str.translate 完成替换，
各条目的先后顺序不会影响结果（转义符占位也在同一次替换内完成）。

^FH 可指定转义符（如 ^FH\\），转义序列按语句自身的转义符生成。
"""

from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType

ESCAPE_CHAR = "_"
UNDERSCORE_PLACEHOLDER = "_5f"

# 字符 → CP850 码位（十六进制，小写）
CP850_CODES = MappingProxyType({
    "á": "a0", "é": "82", "í": "a1", "ó": "a2", "ú": "a3",
    "â": "83", "ê": "88", "ô": "93", "ã": "c6", "õ": "e4",
    "ç": "87", "à": "85", "è": "8a", "ì": "8d", "ò": "95", "ù": "97",
    "Á": "b5", "É": "90", "Í": "d6", "Ó": "e0", "Ú": "e9",
    "Â": "b6", "Ê": "d2", "Ô": "e2", "Ã": "c7", "Õ": "e5",
    "Ç": "80", "À": "b7", "È": "d4", "Ì": "de", "Ò": "e3", "Ù": "eb",
    "°": "f8",
})

CP850_MAP = MappingProxyType({char: ESCAPE_CHAR + code for char, code in CP850_CODES.items()})


@lru_cache(maxsize=None)
def _translation(escape: str, protect_escape: bool) -> dict[int, str]:
    table = {char: escape + code for char, code in CP850_CODES.items()}
    if protect_escape:
        table[escape] = f"{escape}{ord(escape):02x}"
    return str.maketrans(table)


def to_cp850(text: str, protect_underscore: bool = True, escape: str = ESCAPE_CHAR) -> str:
    """
    单次替换为 CP850 转义序列

    Args:
        text: 原文
        protect_underscore: 为真时字面转义符写成占位（下划线为 _5f，导出时再还原）
        escape: 语句 ^FH 指定的转义符
    """
    return text.translate(_translation(escape, protect_underscore))


def needs_hex_marker(text: str, escape: str = ESCAPE_CHAR) -> bool:
    """文本中含转义序列时需要 ^FH"""
    return escape in text
