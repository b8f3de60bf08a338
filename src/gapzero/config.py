"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float, high: float | None = None) -> None:
    if value < low or (high is not None and value > high):
        bound = f"between {low} and {high}" if high is not None else f"at least {low}"
        raise ValueError(f"{name} must be {bound}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-20250514"
    timeout: int = 120
    max_attempts: int = 1

    def __post_init__(self) -> None:
        _check_range("timeout", self.timeout, 1)
        _check_range("max_attempts", self.max_attempts, 1, 5)


@dataclass(frozen=True)
class PipelineConfig:
    job_posting_min_chars: int = 50
    companion_min_chars: int = 100
    max_cv_chars: int = 40000
    default_language: str = "en"
    timeout_seconds: float = 300.0
    cancel_on_disconnect: bool = True

    def __post_init__(self) -> None:
        _check_range("job_posting_min_chars", self.job_posting_min_chars, 0)
        _check_range("max_cv_chars", self.max_cv_chars, 1000)
        _check_range("timeout_seconds", self.timeout_seconds, 1)


@dataclass(frozen=True)
class UploadConfig:
    max_bytes: int = 5 * 1024 * 1024

    def __post_init__(self) -> None:
        _check_range("max_bytes", self.max_bytes, 1)


@dataclass(frozen=True)
class RateLimitConfig:
    enabled: bool = True
    limit: str = "10/hour"
    # memory:// for a single instance, redis://host:port for a shared counter
    storage_uri: str = "memory://"


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults.

    Raises ValueError when a value is out of range.
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

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
        upload=UploadConfig(**raw.get("upload", {})),
        rate_limit=RateLimitConfig(**raw.get("rate_limit", {})),
    )
