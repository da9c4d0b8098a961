# crowdreport/services/classifier.py
"""
Sentiment & priority classifier.

Pure and deterministic: text in, classification out. All keyword tables come
from the Lexicon (crowdreport/data/lexicons.json), so tuning never touches code.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List

from crowdreport.config import Lexicon
from crowdreport.models.report import (
    Emotions,
    KeywordHit,
    ReportAnalysis,
    SentimentProfile,
)

# signed contribution of one lexicon hit, per sentiment bucket
SENTIMENT_WEIGHTS: Dict[str, float] = {
    "very_positive": 1.0,
    "positive": 0.5,
    "neutral": 0.0,
    "negative": -0.5,
    "very_negative": -1.0,
}
POSITIVE_BUCKETS = ("very_positive", "positive")
NEGATIVE_BUCKETS = ("negative", "very_negative")

MAX_KEYWORDS = 10

_WS = re.compile(r"\s+")


@dataclass(frozen=True)
class Classification:
    priority: str
    urgency_score: int
    impact_score: int
    sentiment: SentimentProfile
    analysis: ReportAnalysis


def _combined(title: str, description: str) -> str:
    return f"{title or ''} {description or ''}".lower()


def detect_priority(lexicon: Lexicon, title: str, description: str) -> str:
    """First tier (critical, high, medium) with any keyword match wins; else low."""
    text = _combined(title, description)
    for tier, keywords in lexicon.priority_keywords:
        if any(k in text for k in keywords):
            return tier
    return "low"


def priority_terms(lexicon: Lexicon, title: str, description: str) -> List[str]:
    """Every priority-lexicon term present in the text, in lexicon order."""
    text = _combined(title, description)
    return [k for _, keywords in lexicon.priority_keywords for k in keywords if k in text]


def urgency_score(lexicon: Lexicon, report_type: str, priority: str) -> int:
    base = lexicon.urgency_base.get(report_type, lexicon.default_urgency_base)
    score = base * lexicon.priority_multipliers.get(priority, 1.0)
    return int(max(0, min(100, round(score))))


def impact_score(lexicon: Lexicon, description: str) -> int:
    text = (description or "").lower()
    score = lexicon.impact_base
    for keywords, bonus in lexicon.impact_bonuses:
        if any(k in text for k in keywords):
            score += bonus
    return int(max(0, min(100, score)))


def label_for_score(score: float) -> str:
    if score >= 0.5:
        return "very_positive"
    if score >= 0.2:
        return "positive"
    if score >= -0.2:
        return "neutral"
    if score >= -0.5:
        return "negative"
    return "very_negative"


def extract_topics(lexicon: Lexicon, text: str) -> List[str]:
    return [topic for topic, keywords in lexicon.topic_keywords if any(k in text for k in keywords)]


def analyze_sentiment(lexicon: Lexicon, title: str, description: str) -> SentimentProfile:
    text = _combined(title, description)
    words = [w for w in _WS.split(text) if w]

    total = 0.0
    hits = 0
    found: List[KeywordHit] = []
    emotions = {"anger": 0.0, "fear": 0.0, "sadness": 0.0, "joy": 0.0, "surprise": 0.0, "trust": 0.0}

    for bucket, keywords in lexicon.sentiment_keywords:
        weight = SENTIMENT_WEIGHTS.get(bucket, 0.0)
        for keyword in keywords:
            count = sum(1 for w in words if keyword in w)
            if not count:
                continue
            hits += count
            total += weight * count
            found.append(KeywordHit(word=keyword, sentiment=bucket, frequency=count))
            if bucket in POSITIVE_BUCKETS:
                emotions["joy"] += count * 0.3
                emotions["trust"] += count * 0.3
            elif bucket in NEGATIVE_BUCKETS:
                emotions["anger"] += count * 0.2
                emotions["sadness"] += count * 0.2

    score = total / hits if hits else 0.0
    emotion_total = sum(emotions.values()) or 1.0

    return SentimentProfile(
        overall=label_for_score(score),
        score=max(-1.0, min(1.0, score)),
        confidence=min(95, 50 + 10 * hits),
        emotions=Emotions(**{k: v / emotion_total for k, v in emotions.items()}),
        keywords=found[:MAX_KEYWORDS],
        topics=extract_topics(lexicon, text),
    )


def classify(lexicon: Lexicon, report_type: str, title: str, description: str) -> Classification:
    """
    Full classification of a submission. Never fails on free text: no keyword
    match simply yields priority 'low' and a neutral sentiment.
    """
    priority = detect_priority(lexicon, title, description)
    sentiment = analyze_sentiment(lexicon, title, description)

    keywords: List[str] = []
    for word in [k.word for k in sentiment.keywords] + priority_terms(lexicon, title, description):
        if word not in keywords:
            keywords.append(word)

    return Classification(
        priority=priority,
        urgency_score=urgency_score(lexicon, report_type, priority),
        impact_score=impact_score(lexicon, description),
        sentiment=sentiment,
        analysis=ReportAnalysis(
            keywords=keywords,
            suggested_priority=priority,
            confidence=sentiment.confidence,
        ),
    )
