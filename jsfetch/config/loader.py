"""
jsfetch.config.loader

Resolve a FetchConfig from an explicit mapping, the process environment and
built-in defaults, in that order of precedence.

Only the hub location is read from the environment. Both the dotted
property-style names and their shell-friendly spellings are recognised; the
dotted names win when both are set.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from jsfetch.runtime.errors import ConfigError

from .schema import FetchConfig

JsonDict = dict[str, Any]

ENV_KEYS: dict[str, tuple[str, ...]] = {
    "hub.host": ("selenium.hub.host", "SELENIUM_HUB_HOST"),
    "hub.port": ("selenium.hub.port", "SELENIUM_HUB_PORT"),
}

# field name -> dotted name, so explicit values given either way are honoured
_FIELD_ALIASES = {"hub_host": "hub.host", "hub_port": "hub.port"}


def resolve_config(
    explicit: FetchConfig | Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> FetchConfig:
    """
    Build a validated FetchConfig.

    A FetchConfig instance counts as explicit only for the fields it was
    built with; the environment still fills the hub location it left unset.
    Raises ConfigError when validation fails.
    """
    environ = os.environ if environ is None else environ
    if isinstance(explicit, FetchConfig):
        data: JsonDict = explicit.model_dump(by_alias=True, exclude_unset=True)
    else:
        data = dict(explicit or {})

    for field_name, dotted in _FIELD_ALIASES.items():
        if field_name in data:
            data.setdefault(dotted, data.pop(field_name))

    for key, env_names in ENV_KEYS.items():
        if key in data:
            continue
        for env_name in env_names:
            value = environ.get(env_name)
            if value:
                data[key] = value
                break

    try:
        return FetchConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError("invalid fetch configuration", detail=_summarize(e)) from e


def load_config_file(path: str | Path) -> JsonDict:
    """
    Read a JSON or YAML mapping of fetch options.

    The format is picked from the file suffix; anything other than
    .yaml/.yml is parsed as JSON.
    """
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file: {p}", detail=str(e)) from e

    try:
        if p.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot parse config file: {p}", detail=str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file must contain a mapping: {p}")
    return data


def _summarize(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)
