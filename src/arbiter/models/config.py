"""Project configuration model for Arbiter.

Captures arbiter.yaml fields with sensible defaults for the judge
model, embedding model, and retry behavior used by the CLI.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class JudgeConfig(BaseModel):
    """Configuration for the judge model used by LLM-based scorers."""

    model_config = {"extra": "forbid"}

    adapter: str = "openai"
    model: str = "gpt-4o-mini"
    temperature: float = 0.0
    max_tokens: int = Field(default=2048, ge=1)


class EmbeddingConfig(BaseModel):
    """Configuration for the embedding model used by similarity scorers."""

    model_config = {"extra": "forbid"}

    adapter: str = "openai"
    model: str = "text-embedding-3-small"


class RetryConfig(BaseModel):
    """Backoff settings applied around judge and embedding calls."""

    model_config = {"extra": "forbid"}

    max_retries: int = Field(default=3, ge=0, le=10)
    base_delay: float = Field(default=1.0, ge=0.0)
    max_delay: float = Field(default=30.0, ge=0.0)


class ProjectConfig(BaseModel):
    """Project-level configuration loaded from arbiter.yaml."""

    model_config = {"extra": "forbid"}

    judge: JudgeConfig = Field(default_factory=JudgeConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for arbiter.yaml.

    Returns:
        Directory containing arbiter.yaml, or cwd if none is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / "arbiter.yaml").exists():
            return current
        current = current.parent
    return Path.cwd()


def load_project_config(project_root: Path | None = None) -> ProjectConfig:
    """Load ProjectConfig from arbiter.yaml. Returns defaults if not found."""
    if project_root is None:
        project_root = find_project_root()
    config_path = project_root / "arbiter.yaml"
    if not config_path.exists():
        return ProjectConfig()
    import yaml

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        return ProjectConfig()
    return ProjectConfig.model_validate(raw)
