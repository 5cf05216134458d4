"""
内容归一化 - 固定结构命令的相对顺序

职责：
1. 定位标记行（含 ^MNY）
2. 将标记之后的所有图片调用行（含 ^XG）按原相对顺序移到标记行之后
3. 其他行保持原顺序；无标记行时原样返回

测试要点：
- test_reorder_group_lines: 分组行紧随标记行
- test_no_marker_passthrough: 无标记原样返回
- test_lines_before_marker_untouched: 标记前的行不受影响
"""

from __future__ import annotations

from ..interfaces import IContentNormalizer

MARKER_TOKEN = "^MNY"
GROUP_TOKEN = "^XG"


class ContentNormalizer(IContentNormalizer):
    """内容归一化实现"""

    def __init__(self, marker: str = MARKER_TOKEN, group_token: str = GROUP_TOKEN):
        self.marker = marker
        self.group_token = group_token

    def normalize(self, content: str) -> str:
        lines = content.split("\n")
        marker_index = next(
            (i for i, line in enumerate(lines) if self.marker in line), -1
        )
        if marker_index == -1:
            return content

        head = lines[:marker_index + 1]
        tail = lines[marker_index + 1:]
        group = [line for line in tail if self.group_token in line]
        rest = [line for line in tail if self.group_token not in line]
        return "\n".join(head + group + rest)
