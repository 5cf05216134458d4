"""
ZPL 匹配器 - 提取与回写共用的有限模式集合

职责：
1. 每类字段一个独立匹配器（图片/条码/文本）
2. 在不可变源文本上惰性产出互不重叠的匹配记录
3. 匹配记录负责坐标解析与按原位置替换取值

约定：
- “语句”以 ^FS 结束，任何匹配都不跨越 ^FS
- 坐标按原样捕获，整数解析失败由调用方丢弃该匹配
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from ..interfaces import MalformedMatchError
from ..models import FieldType, Position

HEX_MARKER = "^FH"
DATA_COMMAND = "^FD"
DEFAULT_ESCAPE = "_"

# ^FH 可带一个字符参数指定转义符，缺省为下划线
HEX_MARKER_PATTERN = re.compile(r"\^FH([^\^\s]?)")

_COORDS = r"(?P<x>[^,^\s]*),(?P<y>[^,^\s]*)"

# ^FO x,y ... ^XG name,
IMAGE_PATTERN = re.compile(
    r"\^FO" + _COORDS
    + r"(?:(?!\^FS).)*?\^XG"
    + r"(?P<value>[^,^\r\n]+),",
    re.DOTALL,
)

# ^FT x,y ^BE|^BC o, ... ^FD payload ^FS
BARCODE_PATTERN = re.compile(
    r"\^FT" + _COORDS
    + r"\^(?:BE|BC)[A-Z],(?:(?!\^FS).)*?(?P<data>\^FD)"
    + r"(?P<value>.*?)\^FS",
    re.DOTALL,
)

# ^FT x,y ... ^FD payload ^FS
TEXT_PATTERN = re.compile(
    r"\^FT" + _COORDS
    + r"(?P<mid>(?:(?!\^FS|\^FD).)*?)(?P<data>\^FD)"
    + r"(?P<value>.*?)\^FS",
    re.DOTALL,
)


@dataclass(frozen=True)
class MatchRecord:
    """单次命中"""
    kind: FieldType
    ordinal: int
    start: int
    end: int
    raw_x: str
    raw_y: str
    value: str
    value_start: int
    value_end: int
    coords_start: int = 0
    coords_end: int = 0
    data_start: int | None = None   # ^FD 起点（仅条码/文本）
    has_hex_marker: bool = False
    hex_escape: str = DEFAULT_ESCAPE

    def parse_position(self) -> Position:
        """解析坐标，失败抛 MalformedMatchError"""
        try:
            return Position(x=int(self.raw_x), y=int(self.raw_y))
        except ValueError as e:
            raise MalformedMatchError(
                f"{self.kind.value} 坐标无法解析: ({self.raw_x!r}, {self.raw_y!r})"
            ) from e

    def try_position_key(self) -> tuple[int, int] | None:
        try:
            return self.parse_position().key
        except MalformedMatchError:
            return None

    def render(
        self,
        source: str,
        value: str | None = None,
        ensure_hex: bool = False,
        position: Position | None = None,
    ) -> str:
        """
        按原位置重写该匹配段

        Args:
            source: 扫描用的源文本
            value: 新取值；None 表示保留源文本中的取值
            ensure_hex: 缺少 ^FH 时在 ^FD 前补上
            position: 新坐标；None 表示保留原坐标
        """
        parts: list[str] = []
        cursor = self.start
        if position is not None:
            parts += [source[cursor:self.coords_start], f"{position.x},{position.y}"]
            cursor = self.coords_end
        if ensure_hex and not self.has_hex_marker and self.data_start is not None:
            parts += [source[cursor:self.data_start], HEX_MARKER]
            cursor = self.data_start
        if value is not None:
            parts += [source[cursor:self.value_start], value]
            cursor = self.value_end
        parts.append(source[cursor:self.end])
        return "".join(parts)


class Matcher:
    """单类字段的匹配器"""

    def __init__(self, kind: FieldType, pattern: re.Pattern[str]):
        self.kind = kind
        self.pattern = pattern

    def iter_matches(self, source: str) -> Iterator[MatchRecord]:
        """惰性产出匹配记录（ordinal 为扫描序号，含坏匹配）"""
        for ordinal, m in enumerate(self.pattern.finditer(source)):
            groups = m.groupdict()
            data_start = m.start("data") if "data" in groups else None
            mid = groups.get("mid") or ""
            hex_match = HEX_MARKER_PATTERN.search(mid)
            yield MatchRecord(
                kind=self.kind,
                ordinal=ordinal,
                start=m.start(),
                end=m.end(),
                raw_x=m.group("x"),
                raw_y=m.group("y"),
                value=m.group("value"),
                value_start=m.start("value"),
                value_end=m.end("value"),
                coords_start=m.start("x"),
                coords_end=m.end("y"),
                data_start=data_start,
                has_hex_marker=hex_match is not None,
                hex_escape=(hex_match.group(1) if hex_match else "") or DEFAULT_ESCAPE,
            )


IMAGE_MATCHER = Matcher(FieldType.IMAGE, IMAGE_PATTERN)
BARCODE_MATCHER = Matcher(FieldType.BARCODE, BARCODE_PATTERN)
TEXT_MATCHER = Matcher(FieldType.TEXT, TEXT_PATTERN)


def claimed_barcode_positions(source: str) -> set[tuple[int, int]]:
    """条码匹配占用的坐标集合（文本匹配需做差集排除）"""
    positions = set()
    for record in BARCODE_MATCHER.iter_matches(source):
        key = record.try_position_key()
        if key is not None:
            positions.add(key)
    return positions
