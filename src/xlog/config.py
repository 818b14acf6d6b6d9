"""
Pydantic configuration schema for xlog.

Severities may be written as labels (any case) or numeric values and are
validated at load time.

Usage:
    config = XlogConfig.from_yaml("logging.yaml")
    SiteReconfig().apply(config)

Example:
    default_severity: INFO
    severities:
      db: DEBUG
      http: WARN
    root_severity: TRACE
    stderr:
      enabled: true
      severity: DEBUG
      color: true
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from xlog.severity import Severity, resolve_severity


def _check(value: int | str | None) -> int | str | None:
    if value is not None:
        resolve_severity(value)
    return value


class StderrSinkConfig(BaseModel):
    enabled: bool = True
    severity: int | str = "TRACE"
    color: Optional[bool] = None

    @field_validator("severity")
    @classmethod
    def validate_severity(cls, v: int | str) -> int | str:
        return _check(v)

    @property
    def resolved_severity(self) -> Severity:
        return resolve_severity(self.severity)


class XlogConfig(BaseModel):
    default_severity: Optional[int | str] = None
    severities: dict[str, int | str] = Field(default_factory=dict)
    root_severity: Optional[int | str] = None
    stderr: Optional[StderrSinkConfig] = None

    @field_validator("default_severity", "root_severity")
    @classmethod
    def validate_severity(cls, v: int | str | None) -> int | str | None:
        return _check(v)

    @field_validator("severities")
    @classmethod
    def validate_severities(cls, v: dict[str, int | str]) -> dict[str, int | str]:
        for sev in v.values():
            resolve_severity(sev)
        return v

    @property
    def resolved_severities(self) -> dict[str, Severity]:
        return {name: resolve_severity(sev) for name, sev in self.severities.items()}

    @classmethod
    def from_yaml(cls, path: str | Path) -> "XlogConfig":
        """Load and validate from a YAML file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.from_yaml_string(raw)

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "XlogConfig":
        """Load and validate from a YAML string. An empty document is an empty config."""
        data = yaml.safe_load(yaml_string) or {}
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict) -> "XlogConfig":
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self, exclude_none: bool = True) -> dict:
        return self.model_dump(exclude_none=exclude_none)
