from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
import tomllib
from typing import cast
import warnings

from .constants import Defaults, Models, OriginTypes

_TRUE_VALUES = frozenset({"1", "true", "yes", "on", "y"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", "n"})


@dataclass(frozen=True, slots=True)
class EngineConfig:
    model: str = Defaults.MODEL
    ct_dir: Path = field(default_factory=lambda: Path(Defaults.CT_DIR))
    allow_non_extensible_extension: bool = False
    strip_coded_value_whitespace: bool = True

    def __post_init__(self) -> None:
        if self.model not in Models.SUPPORTED:
            raise ValueError(
                f"model must be one of {', '.join(Models.SUPPORTED)}, got {self.model!r}"
            )

    @property
    def origin_types(self) -> tuple[str, ...]:
        return OriginTypes.BY_MODEL.get(self.model, ())

    @classmethod
    def from_env(cls) -> EngineConfig:
        return cls(
            model=os.getenv("DEFINE_MODEL", Defaults.MODEL),
            ct_dir=Path(os.getenv("CT_DIR", Defaults.CT_DIR)),
            allow_non_extensible_extension=_coerce_bool(
                os.getenv("ALLOW_NON_EXT_EXTENSION", "false"),
                key="ALLOW_NON_EXT_EXTENSION",
            ),
            strip_coded_value_whitespace=_coerce_bool(
                os.getenv("STRIP_CODED_VALUES", "true"), key="STRIP_CODED_VALUES"
            ),
        )


class ConfigLoader:
    @staticmethod
    def load(config_file: Path | None = None) -> EngineConfig:
        config = EngineConfig.from_env()
        if config_file is None:
            config_file = Path(Defaults.CONFIG_FILE)
        if config_file.exists():
            try:
                config = ConfigLoader._load_from_toml(config_file, config)
            except Exception as e:
                warnings.warn(
                    f"Failed to load config from {config_file}: {e}", stacklevel=2
                )
        return config

    @staticmethod
    def _load_from_toml(config_file: Path, base_config: EngineConfig) -> EngineConfig:
        with config_file.open("rb") as handle:
            data = tomllib.load(handle)
        paths = _get_table(data, "paths")
        default_section = _get_table(data, "default")
        editor = _get_table(data, "editor")
        model = base_config.model
        if value := default_section.get("model"):
            model = str(value)
        ct_dir = base_config.ct_dir
        if value := paths.get("ct_dir"):
            ct_dir = Path(str(value))
        allow_extension = base_config.allow_non_extensible_extension
        if (value := editor.get("allow_non_extensible_extension")) is not None:
            allow_extension = _coerce_bool(
                value, key="editor.allow_non_extensible_extension"
            )
        strip_whitespace = base_config.strip_coded_value_whitespace
        if (value := editor.get("strip_coded_value_whitespace")) is not None:
            strip_whitespace = _coerce_bool(
                value, key="editor.strip_coded_value_whitespace"
            )
        return EngineConfig(
            model=model,
            ct_dir=ct_dir,
            allow_non_extensible_extension=allow_extension,
            strip_coded_value_whitespace=strip_whitespace,
        )


def _get_table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}


def _coerce_bool(value: object, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
    raise ValueError(f"{key} must be a boolean, got {value!r}")
