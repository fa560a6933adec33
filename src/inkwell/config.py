"""Inkwell configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site, not in this module)
  2. Environment variables  (INKWELL_GENERATION_MODEL, INKWELL_PATCH_MODEL,
                             INKWELL_IDENTITY_ATTRIBUTE)
  3. Per-project inkwell.yaml  (in the working directory)
  4. Global ~/.inkwell/config.yaml  (defaults only, no API keys)
  5. Hardcoded defaults

Global config must never contain API keys; use environment variables instead.
All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from inkwell.markup.identity import DEFAULT_IDENTITY_ATTRIBUTE
from inkwell.markup.sanitizer import SanitizerPolicy

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".inkwell"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "inkwell.yaml"

# Fields that suggest an API key; forbidden in global config.
# Does NOT match legitimate config keys like max_tokens.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"  # api_key, api-key, api_secret, apikey
    r"|_token$"                  # github_token, access_token (suffix)
    r"|^token$"                  # exactly "token"
    r"|_secret$"                 # client_secret (suffix)
    r"|^secret$"                 # exactly "secret"
    r"|passw(?:ord|d)"           # password, passwd
    r"|credential",              # credential, credentials
    re.IGNORECASE,
)

# Identity attributes end up inside markup; keep them to plain attribute names.
_ATTRIBUTE_NAME_RE: re.Pattern[str] = re.compile(r"^[a-z_:][-a-z0-9_:.]*$")

_KNOWN_SECTIONS: frozenset[str] = frozenset(["generation", "markup", "sanitizer", "store"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class GenerationCfg:
    """Content generation configuration (inkwell.yaml: generation:)."""

    model: str = "gemini/gemini-2.0-flash"
    patch_model: str = "gemini/gemini-2.0-flash"
    max_tokens: int = 8_192
    temperature: float = 0.0


@dataclass
class MarkupCfg:
    """Markup handling configuration (inkwell.yaml: markup:).

    Attributes:
        identity_attribute: Attribute that names addressable elements.
        preserve_styles: Keep prior class/style when a nested element is patched.
    """

    identity_attribute: str = DEFAULT_IDENTITY_ATTRIBUTE
    preserve_styles: bool = True


@dataclass
class StoreCfg:
    """Project store configuration (inkwell.yaml: store:)."""

    path: str = ".inkwell.db"


@dataclass
class InkwellConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    generation: GenerationCfg = field(default_factory=GenerationCfg)
    markup: MarkupCfg = field(default_factory=MarkupCfg)
    sanitizer: SanitizerPolicy = field(default_factory=SanitizerPolicy)
    store: StoreCfg = field(default_factory=StoreCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _validate_identity_attribute(name: str) -> None:
    if not _ATTRIBUTE_NAME_RE.match(name):
        raise ConfigError(
            f"markup.identity_attribute must be a lower-case attribute name, got '{name}'.\n"
            "  Example:  markup.identity_attribute: data-inkwell-id"
        )


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}'; ignored.",
                UserWarning,
                stacklevel=4,
            )


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _str_list(raw: Any, default: list[str]) -> list[str]:
    if raw is None:
        return list(default)
    if not isinstance(raw, list):
        raise ConfigError(f"Expected a list of names, got {type(raw).__name__}: {raw!r}")
    return [str(item) for item in raw]


def _cfg_from_dict(data: dict[str, Any]) -> InkwellConfig:
    """Build an *InkwellConfig* from a merged raw YAML dict."""
    cfg = InkwellConfig()

    if "generation" in data:
        g = data["generation"] or {}
        cfg.generation = GenerationCfg(
            model=str(g.get("model", cfg.generation.model)),
            patch_model=str(g.get("patch_model", cfg.generation.patch_model)),
            max_tokens=int(g.get("max_tokens", cfg.generation.max_tokens)),
            temperature=float(g.get("temperature", cfg.generation.temperature)),
        )

    if "markup" in data:
        m = data["markup"] or {}
        cfg.markup = MarkupCfg(
            identity_attribute=str(m.get("identity_attribute", cfg.markup.identity_attribute)),
            preserve_styles=bool(m.get("preserve_styles", cfg.markup.preserve_styles)),
        )

    if "sanitizer" in data:
        s = data["sanitizer"] or {}
        defaults = SanitizerPolicy()
        cfg.sanitizer = SanitizerPolicy(
            allowed_tags=_str_list(s.get("allowed_tags"), defaults.allowed_tags),
            allowed_attributes=_str_list(s.get("allowed_attributes"), defaults.allowed_attributes),
            forbidden_tags=_str_list(s.get("forbidden_tags"), defaults.forbidden_tags),
            forbidden_attributes=_str_list(
                s.get("forbidden_attributes"), defaults.forbidden_attributes
            ),
            allow_data_attributes=bool(
                s.get("allow_data_attributes", defaults.allow_data_attributes)
            ),
        )

    if "store" in data:
        st = data["store"] or {}
        cfg.store = StoreCfg(path=str(st.get("path", cfg.store.path)))

    return cfg


def _apply_env_overrides(cfg: InkwellConfig) -> InkwellConfig:
    """Apply INKWELL_* environment variable overrides."""
    if model := os.environ.get("INKWELL_GENERATION_MODEL"):
        cfg.generation.model = model
    if model := os.environ.get("INKWELL_PATCH_MODEL"):
        cfg.generation.patch_model = model
    if attr := os.environ.get("INKWELL_IDENTITY_ATTRIBUTE"):
        cfg.markup.identity_attribute = attr
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> InkwellConfig:
    """Load and return a merged *InkwellConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *inkwell.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *InkwellConfig* with env var overrides applied.

    Raises:
        ConfigError: If global config contains API-key-like fields, a list
            setting is not a list, or the identity attribute is not a valid name.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    cfg = _apply_env_overrides(cfg)

    _validate_identity_attribute(cfg.markup.identity_attribute)
    return cfg

