"""
预览文档构建 - 渲染服务请求体

回写文本去掉 ~DG…^XA 定义段后，把全部图片定义（按图片字段当前值改名）
放回首个 ^XA 之前，渲染服务才能找到改名后的图片。
"""

from __future__ import annotations

from collections.abc import Sequence

from ..models import FieldType, LabelField
from .export import DEFINITION_BLOCK_PATTERN, OPENING_MARKER
from .image_store import ImageDefinitionStore


def build_preview_document(
    content: str,
    fields: Sequence[LabelField],
    store: ImageDefinitionStore,
) -> str:
    """生成预览用文档；无图片定义时原样返回"""
    if not content or not store:
        return content

    body = DEFINITION_BLOCK_PATTERN.sub(OPENING_MARKER, content)
    renames = {
        f.image_name: f.current_value
        for f in fields
        if f.type == FieldType.IMAGE and f.image_name
    }
    definitions = store.renamed_definitions(renames)

    open_at = body.find(OPENING_MARKER)
    if open_at == -1:
        return definitions + "\n" + body
    return body[:open_at] + definitions + "\n" + body[open_at:]
