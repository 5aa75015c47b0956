"""Configuration loader for Kali."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .constants import (
    CATALOG_FETCH_RETRIES,
    CATALOG_FETCH_TIMEOUT,
    SESSION_TIMEOUT_MINUTES,
    STARS_ONE_PERCENT,
    STARS_THREE_PERCENT,
    STARS_TWO_PERCENT,
    TYPO_MIN_DISTANCE,
    TYPO_RATIO,
)


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: str = "data/kali.db"


@dataclass
class CatalogConfig:
    """Where the course catalog is loaded from.

    A non-empty ``url`` takes precedence over the local ``path``.
    """

    path: str = "course.yaml"
    url: Optional[str] = None
    timeout: int = CATALOG_FETCH_TIMEOUT
    max_retries: int = CATALOG_FETCH_RETRIES


@dataclass
class EvaluationConfig:
    """Typo tolerance for free-text answers."""

    typo_ratio: float = TYPO_RATIO
    min_typo_distance: int = TYPO_MIN_DISTANCE


@dataclass
class ScoringConfig:
    """Star thresholds as score percentages."""

    three_star_percent: int = STARS_THREE_PERCENT
    two_star_percent: int = STARS_TWO_PERCENT
    one_star_percent: int = STARS_ONE_PERCENT


@dataclass
class SessionConfig:
    """Lesson attempt configuration."""

    timeout_minutes: int = SESSION_TIMEOUT_MINUTES


@dataclass
class Config:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    session: SessionConfig = field(default_factory=SessionConfig)


def load_config(config_path: str = "config.yaml") -> Config:
    """Load configuration from YAML file and environment variables."""
    # Load environment variables
    load_dotenv()

    # Read YAML config
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    database_data = data.get("database", {})
    catalog_data = data.get("catalog", {})
    evaluation_data = data.get("evaluation", {})
    scoring_data = data.get("scoring", {})
    session_data = data.get("session", {})

    # Environment overrides for deployment
    database_path = os.getenv("KALI_DATABASE_PATH") or database_data.get(
        "path", "data/kali.db"
    )
    catalog_url = os.getenv("KALI_CATALOG_URL") or catalog_data.get("url")

    return Config(
        database=DatabaseConfig(path=database_path),
        catalog=CatalogConfig(
            path=catalog_data.get("path", "course.yaml"),
            url=catalog_url or None,
            timeout=catalog_data.get("timeout", CATALOG_FETCH_TIMEOUT),
            max_retries=catalog_data.get("max_retries", CATALOG_FETCH_RETRIES),
        ),
        evaluation=EvaluationConfig(
            typo_ratio=evaluation_data.get("typo_ratio", TYPO_RATIO),
            min_typo_distance=evaluation_data.get(
                "min_typo_distance", TYPO_MIN_DISTANCE
            ),
        ),
        scoring=ScoringConfig(
            three_star_percent=scoring_data.get(
                "three_star_percent", STARS_THREE_PERCENT
            ),
            two_star_percent=scoring_data.get("two_star_percent", STARS_TWO_PERCENT),
            one_star_percent=scoring_data.get("one_star_percent", STARS_ONE_PERCENT),
        ),
        session=SessionConfig(
            timeout_minutes=session_data.get(
                "timeout_minutes", SESSION_TIMEOUT_MINUTES
            ),
        ),
    )
