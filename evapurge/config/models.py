# evapurge/config/models.py
"""
Typed purge configuration.

``PurgeConfig`` is what the engine consumes; ``validate_purge_section``
checks a raw mapping first so every problem is reported in one go.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

# defaults applied when a config *file* supplies the purge section
FILE_DEFAULTS: dict[str, Any] = {
    "enabled": False,
    "content": ["**/*.{html,js,jsx,tsx,vue,svelte}"],
    "css": "dist/eva.css",
    "output": "dist/eva-purged.css",
    "safelist": ["theme-", "current-", "toggle-theme", "all-grads"],
}

# default content patterns for a bare command-line run
CLI_DEFAULT_CONTENT: List[str] = ["**/*.{html,js,vue,jsx,tsx}"]

_SAFELIST_GROUPS = ("standard", "deep", "greedy")


def flatten_safelist(value: Any) -> List[str]:
    """
    Accept ``"a,b"``, ``["a", "b"]`` or ``{"standard": [...], "deep": [...],
    "greedy": [...]}`` and return a flat list of entries.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    if isinstance(value, dict):
        out: List[str] = []
        for group in _SAFELIST_GROUPS:
            out.extend(flatten_safelist(value.get(group)))
        return out
    return [str(v).strip() for v in value if str(v).strip()]


def validate_purge_section(section: Any) -> List[str]:
    """Return one message per invalid field (empty list when valid)."""
    if not isinstance(section, dict):
        return ["purge: Must be an object"]

    errors: List[str] = []
    enabled = section.get("enabled")
    if enabled is not None and not isinstance(enabled, bool):
        errors.append("purge.enabled: Must be a boolean")

    content = section.get("content")
    if content is not None:
        if not isinstance(content, list):
            errors.append("purge.content: Must be an array of glob patterns")
        elif not content:
            errors.append("purge.content: Array cannot be empty")

    css = section.get("css")
    if css is not None and not isinstance(css, str):
        errors.append("purge.css: Must be a string (path to CSS file)")

    output = section.get("output")
    if output is not None and not isinstance(output, str):
        errors.append("purge.output: Must be a string (output path)")

    safelist = section.get("safelist")
    if safelist is not None and not isinstance(safelist, (list, dict)):
        errors.append("purge.safelist: Must be an array of strings or patterns")

    return errors


class PurgeConfig(BaseModel):
    """Resolved settings for one purge run (read-only to the engine)."""

    model_config = ConfigDict(extra="ignore")

    enabled: bool = False
    content: List[str] = Field(default_factory=lambda: list(CLI_DEFAULT_CONTENT))
    css: str | None = None
    output: str | None = None
    safelist: List[str] = Field(default_factory=list)

    @field_validator("safelist", mode="before")
    @classmethod
    def _flatten_safelist(cls, v: Any) -> List[str]:
        return flatten_safelist(v)

    @field_validator("content", mode="before")
    @classmethod
    def _listify_content(cls, v: Any) -> Any:
        return [v] if isinstance(v, str) else v

    # ---------- derived paths ---------------------------------------------------

    def resolved_output(self) -> str | None:
        """``output`` or ``<dir>/<stem>-purged<ext>`` beside the input."""
        if self.output:
            return self.output
        if not self.css:
            return None
        css = Path(self.css)
        return str(css.with_name(f"{css.stem}-purged{css.suffix}"))

    def merged(self, **overrides: Any) -> "PurgeConfig":
        """Copy with every non-empty override applied (flags beat files)."""
        data = self.model_dump()
        for key, value in overrides.items():
            if value is None or value == [] or value == "":
                continue
            data[key] = value
        return PurgeConfig.model_validate(data)
