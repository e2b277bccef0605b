# python/pfmerge/config.py
# Settings for the PF codec and the merge/rmse tools
# Exists so tools, tests and library callers resolve defaults, JSON files and env overrides the same way
# RELEVANT FILES: python/pfmerge/tools/merge.py, python/pfmerge/tools/rmse.py, tests/test_config.py

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .byteorder import ByteOrder, resolve_byte_order
from .tonemap import TONEMAP_MODES

ConfigSource = Union["PfmConfig", Mapping[str, Any], str, Path, None]

ENV_PREFIX = "PFMERGE_"

_BYTE_ORDERS: Dict[str, str] = {
    "native": "native",
    "host": "native",
    "little": "little",
    "le": "little",
    "big": "big",
    "be": "big",
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _normalize_key(value: Any) -> str:
    return "".join(
        c
        for c in str(value).strip().lower()
        if c not in {"-", "_", " ", "."}
    )


def _normalize_choice(value: Any, mapping: Mapping[str, str], label: str) -> str:
    key = _normalize_key(value)
    if key not in mapping:
        raise ValueError(f"Unknown {label}: {value!r}")
    return mapping[key]


def _to_bool(value: Any, label: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{label} must be a boolean, got {value!r}")


@dataclass
class PfmConfig:
    strict_payload: bool = True
    byte_order: str = "native"
    output: str = "output.pfm"
    log_level: str = "INFO"
    tonemap: str = "reinhard"
    exposure: float = 1.0

    def to_dict(self) -> dict:
        return {
            "strict_payload": self.strict_payload,
            "byte_order": self.byte_order,
            "output": self.output,
            "log_level": self.log_level,
            "tonemap": self.tonemap,
            "exposure": self.exposure,
        }

    def copy(self) -> "PfmConfig":
        return copy.deepcopy(self)

    def validate(self) -> None:
        if self.byte_order not in set(_BYTE_ORDERS.values()):
            raise ValueError(f"byte_order must be one of native, little, big; got {self.byte_order!r}")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}; got {self.log_level!r}")
        if self.tonemap not in TONEMAP_MODES:
            raise ValueError(f"tonemap must be one of {TONEMAP_MODES}; got {self.tonemap!r}")
        if self.exposure <= 0.0:
            raise ValueError(f"exposure must be positive: {self.exposure}")
        if not self.output:
            raise ValueError("output must be a non-empty path")

    def resolved_byte_order(self) -> ByteOrder:
        return resolve_byte_order(self.byte_order)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["PfmConfig"] = None) -> "PfmConfig":
        base = copy.deepcopy(default) if default is not None else cls()
        unknown = set(data) - set(base.to_dict())
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        if "strict_payload" in data:
            base.strict_payload = _to_bool(data["strict_payload"], "strict_payload")
        if "byte_order" in data:
            base.byte_order = _normalize_choice(data["byte_order"], _BYTE_ORDERS, "byte order")
        if "output" in data:
            base.output = str(data["output"])
        if "log_level" in data:
            base.log_level = str(data["log_level"]).strip().upper()
        if "tonemap" in data:
            base.tonemap = str(data["tonemap"]).strip().lower()
        if "exposure" in data:
            base.exposure = float(data["exposure"])
        return base


def _load_from_path(path: Path) -> Mapping[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix in {".json", ""}:
        data = json.loads(text)
        if not isinstance(data, Mapping):
            raise TypeError(f"config file must hold a JSON object: {path}")
        return data
    raise ValueError(f"Unsupported config file format: {path}")


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect ``PFMERGE_*`` variables that map onto config fields."""
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}
    for key in ("strict_payload", "byte_order", "log_level"):
        name = ENV_PREFIX + key.upper()
        if name in env:
            out[key] = env[name]
    return out


def load_config(
    config: ConfigSource = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PfmConfig:
    """Resolve settings: source, then ``PFMERGE_*`` environment, then ``overrides``.

    ``overrides`` entries whose value is ``None`` are ignored so argparse
    namespaces can be passed straight through.
    """
    if isinstance(config, PfmConfig):
        cfg = config.copy()
    elif isinstance(config, Mapping):
        cfg = PfmConfig.from_mapping(config)
    elif isinstance(config, (str, Path)):
        cfg = PfmConfig.from_mapping(_load_from_path(Path(config)))
    elif config is None:
        cfg = PfmConfig()
    else:
        raise TypeError("config must be PfmConfig, mapping, path, or None")

    from_env = env_overrides(environ)
    if from_env:
        cfg = PfmConfig.from_mapping(from_env, cfg)
    if overrides:
        explicit = {k: v for k, v in overrides.items() if v is not None}
        if explicit:
            cfg = PfmConfig.from_mapping(explicit, cfg)
    cfg.validate()
    return cfg


def configure_logging(cfg: PfmConfig) -> None:
    level = getattr(logging, cfg.log_level)
    logging.basicConfig(level=level, format="%(message)s")
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger("pfmerge").setLevel(level)


__all__ = ["PfmConfig", "ConfigSource", "ENV_PREFIX", "env_overrides", "load_config", "configure_logging"]
