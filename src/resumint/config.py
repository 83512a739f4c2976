"""Application configuration loaded from config.yaml."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class ApiConfig:
    base_url: str = "http://localhost:5001/api"
    timeout: float = 30.0
    max_retries: int = 3


@dataclass(frozen=True)
class AutosaveConfig:
    enabled: bool = True
    debounce_seconds: float = 3.0
    retry_seconds: float = 10.0


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-3-7-sonnet-20250219"
    summary_max_tokens: int = 120
    cover_letter_max_tokens: int = 1024
    timeout: int = 60


@dataclass(frozen=True)
class StorageConfig:
    bucket: str = "profile-pictures"
    max_upload_bytes: int = 5 * 1024 * 1024


@dataclass(frozen=True)
class RouterConfig:
    base_domains: tuple[str, ...] = ("localhost", "resumint-xi.vercel.app")
    portfolio_prefix: str = "/portfolio"


@dataclass(frozen=True)
class UsageConfig:
    db_path: str = "~/.resumint/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    autosave: AutosaveConfig = field(default_factory=AutosaveConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    router: RouterConfig = field(default_factory=RouterConfig)
    usage: UsageConfig = field(default_factory=UsageConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults.

    ``RESUMINT_API_URL`` overrides ``api.base_url`` when set.
    """
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    api_raw = dict(raw.get("api", {}))
    env_url = os.environ.get("RESUMINT_API_URL")
    if env_url:
        api_raw["base_url"] = env_url

    router_raw = dict(raw.get("router", {}))
    if "base_domains" in router_raw:
        router_raw["base_domains"] = tuple(router_raw["base_domains"])

    return AppConfig(
        api=ApiConfig(**api_raw),
        autosave=AutosaveConfig(**raw.get("autosave", {})),
        llm=LLMConfig(**raw.get("llm", {})),
        storage=StorageConfig(**raw.get("storage", {})),
        router=RouterConfig(**router_raw),
        usage=UsageConfig(**raw.get("usage", {})),
    )
