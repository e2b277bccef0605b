# tests/test_config.py
# Settings resolution: defaults, mappings, JSON files, PFMERGE_* environment and overrides
# RELEVANT FILES: python/pfmerge/config.py

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from pfmerge.byteorder import ByteOrder
from pfmerge.config import PfmConfig, configure_logging, env_overrides, load_config


def test_defaults():
    cfg = load_config(environ={})
    assert cfg.strict_payload is True
    assert cfg.byte_order == "native"
    assert cfg.output == "output.pfm"
    assert cfg.resolved_byte_order() is ByteOrder.detect()


def test_from_mapping_normalizes():
    cfg = load_config({"byte_order": "LE", "log_level": "debug", "tonemap": "ACES", "strict_payload": "no"}, environ={})
    assert cfg.byte_order == "little"
    assert cfg.log_level == "DEBUG"
    assert cfg.tonemap == "aces"
    assert cfg.strict_payload is False
    assert cfg.resolved_byte_order() is ByteOrder.LITTLE


def test_json_path(tmp_path: Path):
    path = tmp_path / "pfmerge.json"
    path.write_text(json.dumps({"output": "merged.pfm", "exposure": 0.5}), encoding="utf-8")
    cfg = load_config(path, environ={})
    assert cfg.output == "merged.pfm"
    assert cfg.exposure == pytest.approx(0.5)


def test_unsupported_file_type(tmp_path: Path):
    path = tmp_path / "pfmerge.yaml"
    path.write_text("output: x", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported config file format"):
        load_config(path, environ={})


def test_environment_overlays_source():
    env = {"PFMERGE_STRICT_PAYLOAD": "0", "PFMERGE_BYTE_ORDER": "big", "UNRELATED": "1"}
    assert env_overrides(env) == {"strict_payload": "0", "byte_order": "big"}
    cfg = load_config({"byte_order": "little"}, environ=env)
    assert cfg.strict_payload is False
    assert cfg.byte_order == "big"


def test_explicit_overrides_win_and_none_is_ignored():
    env = {"PFMERGE_LOG_LEVEL": "ERROR"}
    cfg = load_config(None, overrides={"log_level": "WARNING", "output": None}, environ=env)
    assert cfg.log_level == "WARNING"
    assert cfg.output == "output.pfm"


def test_source_config_is_copied():
    base = PfmConfig(output="a.pfm")
    cfg = load_config(base, overrides={"output": "b.pfm"}, environ={})
    assert cfg.output == "b.pfm"
    assert base.output == "a.pfm"


@pytest.mark.parametrize(
    "data, message",
    [
        ({"byte_order": "middle"}, "Unknown byte order"),
        ({"tonemap": "filmic"}, "tonemap must be one of"),
        ({"exposure": 0}, "exposure must be positive"),
        ({"log_level": "LOUD"}, "log_level must be one of"),
        ({"strict_payload": "maybe"}, "must be a boolean"),
        ({"colour": "red"}, "Unknown config keys"),
    ],
)
def test_invalid_values(data, message):
    with pytest.raises(ValueError, match=message):
        load_config(data, environ={})


def test_bad_source_type():
    with pytest.raises(TypeError):
        load_config(42, environ={})


def test_configure_logging_sets_package_level():
    configure_logging(PfmConfig(log_level="DEBUG"))
    assert logging.getLogger("pfmerge").level == logging.DEBUG
    configure_logging(PfmConfig())
    assert logging.getLogger("pfmerge").level == logging.INFO
