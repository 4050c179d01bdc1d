"""
jsfetch.config.schema

Pydantic model for the fetch configuration.

Options are accepted under their dotted names ("render.min.ms", "hub.host")
as well as the Python field names. Unknown keys are ignored so a crawler can
hand over its whole key-value configuration.

Requires: pydantic>=2
"""

from __future__ import annotations

import codecs
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LEGACY_RENDER_KEY = "http.min.render"


class BrowserName(str, Enum):
    firefox = "firefox"
    chromium = "chromium"
    chrome = "chrome"
    edge = "edge"


class FetchConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    render_min_ms: int = Field(
        default=1500,
        ge=0,
        alias="render.min.ms",
        description="Minimum dwell on a page waiting for script-driven content.",
    )
    timeout_ms: int = Field(
        default=10_000,
        alias="http.timeout",
        description="Per-call timeout used when the caller does not pass one.",
    )

    hub_host: str = Field(default="localhost", alias="hub.host")
    hub_port: int = Field(default=4444, alias="hub.port")
    hub_path: str = Field(default="/wd/hub", alias="hub.path")

    browser: BrowserName = Field(default=BrowserName.firefox)
    javascript_enabled: bool = Field(default=True, alias="javascript.enabled")
    headless: bool = Field(default=True, alias="browser.headless")
    browser_args: tuple[str, ...] = Field(default=(), alias="browser.args")
    browser_capabilities: dict[str, Any] = Field(
        default_factory=dict,
        alias="browser.capabilities",
        description="Engine-specific capabilities, set on the profile verbatim.",
    )

    content_encoding: str = Field(default="UTF-8", alias="content.encoding")

    @model_validator(mode="before")
    @classmethod
    def _legacy_render_key(cls, data: Any) -> Any:
        if not isinstance(data, dict) or LEGACY_RENDER_KEY not in data:
            return data
        if "render.min.ms" in data or "render_min_ms" in data:
            return data
        data = dict(data)
        data["render.min.ms"] = data[LEGACY_RENDER_KEY]
        return data

    @field_validator("browser", mode="before")
    @classmethod
    def _normalize_browser(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("content_encoding")
    @classmethod
    def _validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown content encoding: {v!r}") from e
        return v

    @property
    def hub_url(self) -> str:
        return f"http://{self.hub_host}:{self.hub_port}{self.hub_path}"


def export_json_schema() -> dict[str, Any]:
    """JSON schema of FetchConfig, keyed by the dotted option names."""
    return FetchConfig.model_json_schema(by_alias=True)
