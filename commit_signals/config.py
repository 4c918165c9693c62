from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field  # type: ignore[import]
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore[import]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    repo_path: Path = Field(default_factory=Path.cwd, alias="COMMIT_SIGNALS_REPO_PATH", description="Git repository to analyze")
    staged: bool = Field(default=True, alias="COMMIT_SIGNALS_STAGED", description="Analyze the index instead of the working tree")
    include_untracked: bool = Field(default=True, alias="COMMIT_SIGNALS_INCLUDE_UNTRACKED")
    max_diff_chars: int = Field(default=120_000, ge=500, le=300_000, alias="COMMIT_SIGNALS_MAX_DIFF_CHARS")

    recent_commit_window: int = Field(default=12, ge=3, alias="COMMIT_SIGNALS_RECENT_COMMITS", description="History sampled for correlation")
    tone_history_window: int = Field(default=6, ge=1, alias="COMMIT_SIGNALS_TONE_HISTORY")
    min_correlation_score: float = Field(default=0.65, ge=0.0, le=1.0, alias="COMMIT_SIGNALS_MIN_CORRELATION")
    max_related_commits: int = Field(default=3, ge=0, alias="COMMIT_SIGNALS_MAX_RELATED")
    min_tone_score: float = Field(default=0.8, ge=0.5, le=1.0, alias="COMMIT_SIGNALS_MIN_TONE_SCORE")

    log_level: str = Field(default="INFO", alias="COMMIT_SIGNALS_LOG_LEVEL")
    console_width: Optional[int] = Field(default=None, description="Override console width for Rich output")


settings = Settings()
