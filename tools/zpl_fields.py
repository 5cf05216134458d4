"""
ZPL 模板字段工具（命令行）

用法：
    python tools/zpl_fields.py fields label.prn
    python tools/zpl_fields.py export label.prn --set 0=7891234567895 --set 2="NOVO TEXTO" --embed 1 --move 3=40,120
    python tools/zpl_fields.py compile base.prn --image logo.prn=LOGO2 --comment "logo 2026"

--set/--move/--embed 以字段序号（fields 命令输出的第一列）指定字段。
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _load(path: Path):
    from zpl_editor.session import EditorSession

    session = EditorSession()
    session.load(_read(path), file_name=path.name)
    return session


def cmd_fields(args: argparse.Namespace) -> int:
    session = _load(Path(args.template))
    if args.json:
        rows = [f.model_dump(mode="json") for f in session.fields]
        print(json.dumps(rows, ensure_ascii=False, indent=2))
        return 0
    for f in session.fields:
        print(f"{f.order_index:>3}  {f.type.value:<8} ({f.effective_position.x},{f.effective_position.y})  {f.original_value}")
    return 0


def _parse_assignment(text: str) -> tuple[int, str]:
    index, sep, value = text.partition("=")
    if not sep or not index.strip().isdigit():
        raise argparse.ArgumentTypeError(f"格式应为 序号=值: {text}")
    return int(index), value


def _parse_move(text: str) -> tuple[int, int, int]:
    index, sep, coords = text.partition("=")
    x, comma, y = coords.partition(",")
    if not sep or not comma or not all(s.strip().lstrip("-").isdigit() for s in (index, x, y)):
        raise argparse.ArgumentTypeError(f"格式应为 序号=X,Y: {text}")
    return int(index), int(x), int(y)


def cmd_export(args: argparse.Namespace) -> int:
    template = Path(args.template)
    session = _load(template)
    by_index = {f.order_index: f for f in session.fields}

    for index, value in args.set or []:
        if index not in by_index:
            print(f"字段序号不存在: {index}", file=sys.stderr)
            return 2
        session.update_value(by_index[index].id, value)

    for index, x, y in args.move or []:
        if index not in by_index:
            print(f"字段序号不存在: {index}", file=sys.stderr)
            return 2
        session.update_position(by_index[index].id, x, y)

    for index in args.embed or []:
        if index not in by_index:
            print(f"字段序号不存在: {index}", file=sys.stderr)
            return 2
        session.set_embedding(by_index[index].id, True)

    result = session.export()
    if not result.ok:
        print(result.message, file=sys.stderr)
        return 1

    out = Path(args.out) if args.out else template.with_name(result.file_name)
    out.write_text(result.content, encoding="utf-8")
    print(out)
    return 0


def cmd_compile(args: argparse.Namespace) -> int:
    from zpl_editor.config import get_config
    from zpl_editor.interfaces import CompileError
    from zpl_editor.zpl import ImageCompiler, ImageSource

    base = Path(args.template)
    sources = []
    for item in args.image:
        path, sep, name = item.rpartition("=")
        if not sep:
            path, name = item, ""
        sources.append(ImageSource(file_name=Path(path).name, content=_read(Path(path)), image_name=name))

    compiler = ImageCompiler(output_prefix=get_config().export.compiled_prefix)
    try:
        result = compiler.compile(base.name, _read(base), sources, args.comment or "")
    except CompileError as e:
        print(e, file=sys.stderr)
        return 1

    out = Path(args.out) if args.out else base.with_name(result.file_name)
    out.write_text(result.content, encoding="utf-8")
    print(out)
    return 0


def main() -> int:
    ap = argparse.ArgumentParser(description="ZPL 模板字段工具")
    ap.add_argument("--config", help="运行期配置YAML")
    sub = ap.add_subparsers(dest="command", required=True)

    p_fields = sub.add_parser("fields", help="列出模板字段")
    p_fields.add_argument("template")
    p_fields.add_argument("--json", action="store_true")
    p_fields.set_defaults(func=cmd_fields)

    p_export = sub.add_parser("export", help="修改字段并导出")
    p_export.add_argument("template")
    p_export.add_argument("--set", action="append", type=_parse_assignment, metavar="N=VALUE")
    p_export.add_argument("--move", action="append", type=_parse_move, metavar="N=X,Y")
    p_export.add_argument("--embed", action="append", type=int, metavar="N")
    p_export.add_argument("--out")
    p_export.set_defaults(func=cmd_export)

    p_compile = sub.add_parser("compile", help="合并其他文件的图片定义")
    p_compile.add_argument("template")
    p_compile.add_argument("--image", action="append", required=True, metavar="FILE=NAME")
    p_compile.add_argument("--comment", required=True)
    p_compile.add_argument("--out")
    p_compile.set_defaults(func=cmd_compile)

    args = ap.parse_args()

    _add_backend_to_path()
    from zpl_editor.config import get_config, reload_config

    config = reload_config(args.config) if args.config else get_config()
    logging.basicConfig(
        level=config.logging.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
