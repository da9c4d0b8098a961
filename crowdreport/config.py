# crowdreport/config.py
from __future__ import annotations

import os
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

# --- Load .env early so os.getenv works everywhere ---
load_dotenv()

DEFAULT_LEXICON_FILE = str(Path(__file__).resolve().parent / "data" / "lexicons.json")


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


# ---------------- Policy ----------------
@dataclass(frozen=True)
class Policy:
    """
    Tuning knobs of the scoring/correlation rules. The auto-verify threshold
    and the flag quorum are kept at the values the platform has always used.
    """
    auto_verify_threshold: float = 70.0
    flag_quorum: int = 3

    duplicate_radius_km: float = 0.5
    duplicate_window_hours: float = 24.0

    trend_window_days: float = 7.0
    trend_min_reports: int = 5
    trend_min_keyword_count: int = 3

    cluster_radius_km: float = 1.0
    cluster_window_minutes: float = 60.0
    cluster_min_reports: int = 5

    geo_index_resolution: int = 8
    hotspot_resolution: int = 7


def policy_from_env() -> Policy:
    return Policy(
        auto_verify_threshold=_env_float("AUTO_VERIFY_THRESHOLD", 70.0),
        flag_quorum=_env_int("FLAG_QUORUM", 3),
        duplicate_radius_km=_env_float("DUPLICATE_RADIUS_KM", 0.5),
        duplicate_window_hours=_env_float("DUPLICATE_WINDOW_HOURS", 24.0),
        trend_window_days=_env_float("TREND_WINDOW_DAYS", 7.0),
        trend_min_reports=_env_int("TREND_MIN_REPORTS", 5),
        trend_min_keyword_count=_env_int("TREND_MIN_KEYWORD_COUNT", 3),
        cluster_radius_km=_env_float("CLUSTER_RADIUS_KM", 1.0),
        cluster_window_minutes=_env_float("CLUSTER_WINDOW_MINUTES", 60.0),
        cluster_min_reports=_env_int("CLUSTER_MIN_REPORTS", 5),
        geo_index_resolution=_env_int("GEO_INDEX_RESOLUTION", 8),
        hotspot_resolution=_env_int("HOTSPOT_RESOLUTION", 7),
    )


# ---------------- Lexicon ----------------
@dataclass(frozen=True)
class Lexicon:
    """Keyword tables used by the classifier (loaded from JSON, never edited in code)."""
    priority_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...]
    sentiment_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...]
    topic_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...]
    urgency_base: Dict[str, int]
    default_urgency_base: int
    priority_multipliers: Dict[str, float]
    impact_bonuses: Tuple[Tuple[Tuple[str, ...], int], ...]
    impact_base: int

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Lexicon":
        def _ordered(section: Dict[str, List[str]]) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
            return tuple((k, tuple(w.lower() for w in v)) for k, v in section.items())

        return cls(
            priority_keywords=_ordered(raw["priority_keywords"]),
            sentiment_keywords=_ordered(raw["sentiment_keywords"]),
            topic_keywords=_ordered(raw["topic_keywords"]),
            urgency_base={k: int(v) for k, v in raw["urgency_base"].items()},
            default_urgency_base=int(raw.get("default_urgency_base", 50)),
            priority_multipliers={k: float(v) for k, v in raw["priority_multipliers"].items()},
            impact_bonuses=tuple(
                (tuple(w.lower() for w in b["keywords"]), int(b["bonus"]))
                for b in raw.get("impact_bonuses", [])
            ),
            impact_base=int(raw.get("impact_base", 50)),
        )


def load_lexicon(path: Optional[str] = None) -> Lexicon:
    path = path or os.getenv("LEXICON_FILE") or DEFAULT_LEXICON_FILE
    with open(path, "r", encoding="utf-8") as f:
        return Lexicon.from_dict(json.load(f))


# ---------------- Settings ----------------
@dataclass(frozen=True)
class Settings:
    store_backend: str = "memory"

    aws_region: str = "eu-north-1"
    reports_table: str = "Reports"
    reporters_table: str = "Reporters"
    trends_table: str = "Trends"
    alerts_table: str = "ReportAlerts"
    campaigns_table: str = "Campaigns"
    reports_cell_index: str = "cell-index"
    reports_category_index: str = "category-index"
    reports_reporter_index: str = "reporter-index"
    trends_category_index: str = "category-index"

    alerts_topic_arn: Optional[str] = None
    lexicon_file: Optional[str] = None

    policy: Policy = field(default_factory=Policy)


def load_settings() -> Settings:
    return Settings(
        store_backend=os.getenv("STORE_BACKEND", "memory").strip().lower(),
        aws_region=os.getenv("AWS_REGION", "eu-north-1"),
        reports_table=os.getenv("REPORTS_TABLE", "Reports"),
        reporters_table=os.getenv("REPORTERS_TABLE", "Reporters"),
        trends_table=os.getenv("TRENDS_TABLE", "Trends"),
        alerts_table=os.getenv("ALERTS_TABLE", "ReportAlerts"),
        campaigns_table=os.getenv("CAMPAIGNS_TABLE", "Campaigns"),
        reports_cell_index=os.getenv("REPORTS_CELL_INDEX", "cell-index"),
        reports_category_index=os.getenv("REPORTS_CATEGORY_INDEX", "category-index"),
        reports_reporter_index=os.getenv("REPORTS_REPORTER_INDEX", "reporter-index"),
        trends_category_index=os.getenv("TRENDS_CATEGORY_INDEX", "category-index"),
        alerts_topic_arn=os.getenv("ALERTS_TOPIC_ARN") or None,
        lexicon_file=os.getenv("LEXICON_FILE") or None,
        policy=policy_from_env(),
    )
