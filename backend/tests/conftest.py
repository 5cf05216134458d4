"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(session, sample_zpl):
        session.load(sample_zpl)
"""

from __future__ import annotations

import pytest

from zpl_editor.config import RuntimeConfig
from zpl_editor.models import FieldType, LabelConfig, LabelField, Position
from zpl_editor.session import EditorSession
from zpl_editor.zpl import ContentNormalizer, FieldExtractor, FieldOrderer


# ============================================================================
# 模板 Fixtures
# ============================================================================

SAMPLE_ZPL = (
    "CT~~CD,~CC^~CT~\n"
    "~DGR:LOGO1.GRF,00004,002,\n"
    "FFFF\n"
    "~DGR:ICON.GRF,00004,002,\n"
    "0F0F\n"
    "^XA\n"
    "^MCY\n"
    "^MMT\n"
    "^PW400\n"
    "^MNY\n"
    "^FT300,120^A0N,28,28^FH\\^FDWORLD^FS\n"
    "^FO100,200^XGR:LOGO1.GRF,1,1^FS\n"
    "^FT50,50^BEN,100,N,N\n"
    "^FD12345^FS\n"
    "^FT10,10^A0N,28,28^FDHELLO^FS\n"
    "^FO20,400^XGR:ICON.GRF,1,1^FS\n"
    "^PQ1,0,1,Y^XZ\n"
    "^XA^IDR:LOGO1.GRF^FS^XZ\n"
)

# 归一化后：^XG 行紧随 ^MNY
NORMALIZED_ZPL = (
    "CT~~CD,~CC^~CT~\n"
    "~DGR:LOGO1.GRF,00004,002,\n"
    "FFFF\n"
    "~DGR:ICON.GRF,00004,002,\n"
    "0F0F\n"
    "^XA\n"
    "^MCY\n"
    "^MMT\n"
    "^PW400\n"
    "^MNY\n"
    "^FO100,200^XGR:LOGO1.GRF,1,1^FS\n"
    "^FO20,400^XGR:ICON.GRF,1,1^FS\n"
    "^FT300,120^A0N,28,28^FH\\^FDWORLD^FS\n"
    "^FT50,50^BEN,100,N,N\n"
    "^FD12345^FS\n"
    "^FT10,10^A0N,28,28^FDHELLO^FS\n"
    "^PQ1,0,1,Y^XZ\n"
    "^XA^IDR:LOGO1.GRF^FS^XZ\n"
)


@pytest.fixture
def sample_zpl() -> str:
    """含图片定义、条码、文本的模板"""
    return SAMPLE_ZPL


@pytest.fixture
def normalized_zpl() -> str:
    return NORMALIZED_ZPL


@pytest.fixture
def sample_fields(normalized_zpl: str) -> list[LabelField]:
    """提取并排序后的字段"""
    return FieldOrderer().order(FieldExtractor().extract(normalized_zpl))


# ============================================================================
# 配置与会话 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置（默认值）"""
    return RuntimeConfig()


@pytest.fixture
def label_config() -> LabelConfig:
    return LabelConfig(dpmm=8, width=4, height=6)


@pytest.fixture
def session(runtime_config: RuntimeConfig) -> EditorSession:
    """空会话"""
    return EditorSession(runtime_config)


@pytest.fixture
def loaded_session(session: EditorSession, sample_zpl: str) -> EditorSession:
    """已载入示例模板的会话"""
    session.load(sample_zpl, file_name="etiqueta.prn")
    return session


@pytest.fixture
def normalizer() -> ContentNormalizer:
    return ContentNormalizer()


@pytest.fixture
def image_field() -> LabelField:
    """单个图片字段"""
    return LabelField(
        type=FieldType.IMAGE,
        position=Position(x=100, y=200),
        original_value="R:LOGO1.GRF",
        current_value="R:LOGO1.GRF",
        image_name="R:LOGO1.GRF",
    )
