# crowdreport/dependencies.py
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from crowdreport.config import Settings, load_lexicon, load_settings
from crowdreport.db.base import ReportStore
from crowdreport.db.memory import MemoryReportStore
from crowdreport.services.engine import ReportingEngine

log = logging.getLogger(__name__)


def build_store(settings: Settings) -> ReportStore:
    if settings.store_backend == "dynamo":
        from crowdreport.db.dynamo import DynamoReportStore
        return DynamoReportStore(settings)
    if settings.store_backend != "memory":
        raise ValueError(f"unknown STORE_BACKEND: {settings.store_backend}")
    return MemoryReportStore()


def build_engine(settings: Optional[Settings] = None) -> ReportingEngine:
    settings = settings or load_settings()
    publisher = None
    if settings.alerts_topic_arn:
        from crowdreport.services.sns_alerts import SnsAlertPublisher
        publisher = SnsAlertPublisher(settings.alerts_topic_arn, region=settings.aws_region)

    log.info("Reporting engine: store=%s alerts_topic=%s", settings.store_backend, settings.alerts_topic_arn or "-")
    return ReportingEngine(
        build_store(settings),
        lexicon=load_lexicon(settings.lexicon_file),
        policy=settings.policy,
        publisher=publisher,
    )


@lru_cache(maxsize=1)
def get_engine() -> ReportingEngine:
    """FastAPI dependency: one engine per process (tests override it)."""
    return build_engine()
