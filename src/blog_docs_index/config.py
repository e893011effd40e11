from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from blog_docs_index.extract.extractors import FRONTMATTER, HTML, MULTIMARKDOWN, SUPPORTED_FORMATS, normalize_base_url

ROOT_ENV = "BLOG_DOCS_INDEX_ROOT"
CONFIG_ENV = "BLOG_DOCS_INDEX_CONFIG"
BASE_URL_ENV = "BLOG_DOCS_INDEX_BASE_URL"
_SECTIONS = ("site", "extract", "output")

DEFAULT_PATTERNS = {
    FRONTMATTER: ["**/*.md", "**/*.markdown"],
    MULTIMARKDOWN: ["**/*.md", "**/*.mmd"],
    HTML: ["**/*.html", "**/*.htm"],
}


@dataclass
class SiteConfig:
    base_url: str = "/blog"


@dataclass
class ExtractConfig:
    format: str = FRONTMATTER
    patterns: list[str] = field(default_factory=list)  # empty -> per-format defaults
    max_workers: int = 4
    encoding: str = "utf-8"


@dataclass
class OutputConfig:
    documents_path: str = "data/documents.jsonl"
    manifest_path: str = "data/manifest.json"


@dataclass
class Config:
    site: SiteConfig = field(default_factory=SiteConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self) -> None:
        fmt = (self.extract.format or "").strip().lower()
        if fmt not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported extract.format {self.extract.format!r}; "
                f"expected one of: {', '.join(SUPPORTED_FORMATS)}."
            )
        self.extract.format = fmt
        if self.extract.max_workers < 1:
            raise ValueError("extract.max_workers must be at least 1.")
        self.site.base_url = normalize_base_url(self.site.base_url or "")

    def file_patterns(self) -> list[str]:
        return list(self.extract.patterns) or list(DEFAULT_PATTERNS[self.extract.format])


def _validate_override_keys(overrides: Dict[str, Any], source: Optional[Path] = None) -> None:
    unknown = sorted(key for key in overrides if key not in _SECTIONS)
    if not unknown:
        return
    where = f" in {source}" if source is not None else ""
    raise ValueError(
        f"Unsupported config keys{where}: {', '.join(unknown)}. "
        f"Top-level sections are: {', '.join(_SECTIONS)}."
    )


def merge_config(base: Config, overrides: Dict[str, Any]) -> Config:
    """
    Merge dictionary overrides into a Config instance, returning a new instance.
    """
    _validate_override_keys(overrides)
    cfg_dict: Dict[str, Any] = {
        "site": dict(vars(base.site)),
        "extract": dict(vars(base.extract)),
        "output": dict(vars(base.output)),
    }

    def deep_update(target: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
        for key, value in incoming.items():
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                target[key] = deep_update(target.get(key, {}), value)
            else:
                target[key] = value
        return target

    merged = deep_update(cfg_dict, overrides)
    try:
        return Config(
            site=SiteConfig(**merged["site"]),
            extract=ExtractConfig(**merged["extract"]),
            output=OutputConfig(**merged["output"]),
        )
    except TypeError as exc:
        raise ValueError(f"Invalid config override: {exc}") from exc


def _repo_root() -> Path:
    root_override = os.environ.get(ROOT_ENV)
    if root_override:
        return Path(root_override).expanduser()
    return Path(__file__).resolve().parents[2]


def config_layer_paths(config_path: Optional[Path | str] = None) -> list[Path]:
    """
    Return config layer candidates in merge order (lowest -> highest precedence).
    """
    repo_root = _repo_root()
    env_override = os.environ.get(CONFIG_ENV)
    layers: list[Path] = [repo_root / "config.yaml", repo_root / "config.local.yaml"]
    if env_override:
        layers.append(Path(env_override).expanduser())
    if config_path is not None:
        layers.append(Path(config_path).expanduser())

    deduped: list[Path] = []
    seen: set[str] = set()
    for layer in layers:
        key = str(layer.resolve()) if layer.exists() else str(layer)
        if key in seen:
            continue
        seen.add(key)
        deduped.append(layer)
    return deduped


def load_config(config_path: Optional[Path | str] = None) -> Config:
    cfg = Config()
    for layer in config_layer_paths(config_path):
        if not layer.exists():
            continue
        with layer.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file must contain a YAML mapping: {layer}")
        _validate_override_keys(raw, source=layer)
        cfg = merge_config(cfg, raw)

    base_url = os.environ.get(BASE_URL_ENV)
    if base_url is not None and base_url.strip():
        cfg = merge_config(cfg, {"site": {"base_url": base_url.strip()}})
    return cfg


def config_signature(cfg: Config) -> str:
    """
    Stable hash of the effective configuration, recorded in the batch manifest.
    """
    as_dict = {
        "site": vars(cfg.site),
        "extract": vars(cfg.extract),
        "output": vars(cfg.output),
    }
    payload = json.dumps(as_dict, sort_keys=True)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()
