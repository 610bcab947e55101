import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


PLAYER_DELETE_POLICIES = ("block", "cascade")


@dataclass(frozen=True)
class Settings:
    database_url: str
    player_delete_policy: str
    max_strokes_over_par: Optional[int]
    final_day: int
    log_level: str


def _normalize_database_url(value: Optional[str]) -> str:
    if not value:
        return "sqlite:///./golftrip.db"
    normalized = value.strip()
    if normalized.startswith("sqlite://"):
        return normalized
    if Path(normalized).suffix == ".db":  # plain file path
        return f"sqlite:///{normalized}"
    return normalized


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    return int(value)


def load_settings() -> Settings:
    policy = os.getenv("PLAYER_DELETE_POLICY", "block").strip().lower()
    if policy not in PLAYER_DELETE_POLICIES:
        raise ValueError(f"PLAYER_DELETE_POLICY must be one of {PLAYER_DELETE_POLICIES}, got {policy!r}")

    # below double bogey the cap would start awarding Stableford points
    max_over_par = _optional_int(os.getenv("MAX_STROKES_OVER_PAR"))
    if max_over_par is not None and max_over_par < 2:
        raise ValueError("MAX_STROKES_OVER_PAR must be at least 2")

    return Settings(
        database_url=_normalize_database_url(os.getenv("DATABASE_URL")),
        player_delete_policy=policy,
        max_strokes_over_par=max_over_par,
        final_day=int(os.getenv("FINAL_DAY", "3")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
