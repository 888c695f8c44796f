"""
Configuration Loader for CollinearSelect (CSEL)

Sources, lowest priority first: defaults, YAML/JSON file, CSEL_* environment
variables, explicit overrides. Every value is converted to the type declared
on its Config field, so "0.6", "false" or "bio1,bio12" from the environment
land as float, bool and list.
"""

import os
import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union, get_args, get_origin

import yaml

from .settings import Config


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}
_NONE = {"", "none", "null"}


def load_config(
    path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    env_prefix: str = "CSEL_",
) -> Config:
    """
    Load configuration with priority: defaults < file < env < overrides

    Args:
        path: Path to YAML or JSON config file (optional)
        overrides: Explicit overrides, dotpath ("filtering.max_cor") or nested
        env_prefix: Prefix for environment variables (default: "CSEL_")

    Returns:
        Loaded and validated Config instance

    Raises:
        AttributeError: Unknown section or field
        ValueError: Value not convertible to the field type, or invalid

    Examples:
        >>> cfg = load_config("settings.yaml", overrides={"filtering.max_cor": 0.6})

        >>> # CSEL_IO_OMIT_COLUMNS=lon,lat,presence
        >>> cfg = load_config()
    """
    cfg = Config()

    if path:
        _apply(cfg, _read_file(path), source=str(path))

    env_values = _read_env(cfg, env_prefix)
    if env_values:
        _apply(cfg, env_values, source="environment")

    if overrides:
        _apply(cfg, overrides, source="overrides")

    return cfg.validate_and_finalize()


def _read_file(path: str) -> Dict[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = file_path.suffix.lower()
    with open(file_path, 'r', encoding='utf-8') as f:
        if suffix == ".json":
            data = json.load(f)
        elif suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(f)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                f"Supported formats: .json, .yaml, .yml"
            )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping of sections, got {type(data).__name__}")
    return data


def _read_env(cfg: Config, prefix: str) -> Dict[str, str]:
    """
    Look up {PREFIX}{SECTION}_{FIELD} for every known field

    CSEL_FILTERING_MAX_COR=0.6 → filtering.max_cor
    CSEL_IO_PREFERENCE_ORDER=bio1,bio12 → io.preference_order
    """
    values = {}
    for section in fields(cfg):
        for f in fields(getattr(cfg, section.name)):
            key = f"{prefix}{section.name}_{f.name}".upper()
            if key in os.environ:
                values[f"{section.name}.{f.name}"] = os.environ[key]
    return values


def _apply(cfg: Config, data: Dict[str, Any], source: str):
    """Set values given as {"section": {...}} or {"section.field": value}"""
    sections = {f.name: f for f in fields(cfg)}

    for key, value in data.items():
        if isinstance(value, dict) and "." not in key:
            items = [(f"{key}.{k}", v) for k, v in value.items()]
        else:
            items = [(key, value)]

        for dotpath, item in items:
            section_name, _, field_name = dotpath.partition(".")
            if section_name not in sections:
                raise AttributeError(
                    f"Invalid config path '{dotpath}' ({source}): Section '{section_name}' not found. "
                    f"Valid sections: {', '.join(sections)}"
                )

            section = getattr(cfg, section_name)
            known = {f.name: f for f in fields(section)}
            if field_name not in known:
                raise AttributeError(
                    f"Invalid config path '{dotpath}' ({source}): Field '{field_name}' not found "
                    f"in section '{section_name}'. Valid fields: {', '.join(known)}"
                )

            setattr(section, field_name, _coerce(item, known[field_name].type, dotpath))


def _coerce(value: Any, hint: Any, dotpath: str) -> Any:
    """Convert a file / env / override value to the declared field type"""
    origin = get_origin(hint)

    if origin is Union:
        if value is None or (isinstance(value, str) and value.strip().lower() in _NONE):
            return None
        inner = [a for a in get_args(hint) if a is not type(None)][0]
        return _coerce(value, inner, dotpath)

    if origin is list:
        if isinstance(value, str):
            text = value.strip()
            items = json.loads(text) if text.startswith("[") else text.split(",")
        elif isinstance(value, (list, tuple)):
            items = value
        else:
            raise ValueError(f"{dotpath} expects a list of names, got {value!r}")
        return [str(v).strip() for v in items if str(v).strip()]

    if origin is Literal:
        return str(value).strip()

    if hint is bool:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(f"{dotpath} expects true/false, got {value!r}")

    if hint in (int, float):
        if isinstance(value, bool):
            raise ValueError(f"{dotpath} expects a number, got {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{dotpath} expects a number, got {value!r}") from e
        if hint is int:
            if not number.is_integer():
                raise ValueError(f"{dotpath} expects an integer, got {value!r}")
            return int(number)
        return number

    if hint is str:
        return str(value)

    return value
