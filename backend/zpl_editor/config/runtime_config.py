"""
运行期配置 - 读取 config/zpl_editor.yaml

职责：
- 加载标签尺寸/渲染服务/防抖/导出等运行参数
- 提供环境变量覆盖机制
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from ..models.label import LabelConfig

DEFAULT_CONFIG_PATH = Path("config/zpl_editor.yaml")


class RenderConfig(BaseModel):
    """渲染服务配置"""

    base_url: str = "https://api.labelary.com"
    timeout_sec: float = 15.0
    accept: str = "image/png"


class PreviewConfig(BaseModel):
    """预览防抖配置"""

    debounce_ms: int = 500


class EncodingConfig(BaseModel):
    """输出字符集配置"""

    cp850_remap: bool = True


class EditingConfig(BaseModel):
    """编辑行为配置"""

    uppercase_codes: bool = True


class ExportConfig(BaseModel):
    """导出配置"""

    extension: str = ".zpl"
    compiled_prefix: str = "UPDATED_"


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    label: LabelConfig = Field(default_factory=LabelConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    editing: EditingConfig = Field(default_factory=EditingConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "ZPLEDITOR_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        return cls(
            label=LabelConfig(**cls._extract(runtime_opts, "label")),
            render=RenderConfig(**cls._extract(runtime_opts, "render")),
            preview=PreviewConfig(**cls._extract(runtime_opts, "preview")),
            encoding=EncodingConfig(**cls._extract(runtime_opts, "encoding")),
            editing=EditingConfig(**cls._extract(runtime_opts, "editing")),
            export=ExportConfig(**cls._extract(runtime_opts, "export")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    @property
    def debounce_sec(self) -> float:
        return self.preview.debounce_ms / 1000.0


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    _config = RuntimeConfig.from_yaml(yaml_path or DEFAULT_CONFIG_PATH)
    return _config
