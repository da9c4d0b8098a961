# crowdreport/services/sns_alerts.py
from __future__ import annotations

import logging
from typing import Optional

import boto3

from crowdreport.models.alert import Alert

log = logging.getLogger(__name__)

SEVERITY_ICONS = {"critical": "🚨", "warning": "⚠️", "info": "ℹ️"}


# ----------------------------
# Formatters
# ----------------------------

def build_alert_message(alert: Alert) -> str:
    parts = [
        f"{SEVERITY_ICONS.get(alert.severity, '')} Report alert".strip(),
        f"Type: {alert.type}",
        f"Severity: {alert.severity}",
        alert.title,
    ]
    if alert.description:
        parts.append(alert.description)
    if alert.affected_area:
        a = alert.affected_area
        parts.append(f"Area: {a.lat:.4f},{a.lon:.4f} r={a.radius:g}km")
    parts.append(f"Reports: {len(alert.report_ids)}")
    return " | ".join(parts)


# ----------------------------
# Publisher
# ----------------------------

class SnsAlertPublisher:
    """Fans new alerts out to an SNS topic. Delivery problems never fail a submission."""

    def __init__(self, topic_arn: str, *, region: Optional[str] = None, sns=None):
        self.topic_arn = topic_arn
        self.sns = sns or boto3.client("sns", region_name=region)

    def __call__(self, alert: Alert) -> Optional[str]:
        try:
            resp = self.sns.publish(
                TopicArn=self.topic_arn,
                Message=build_alert_message(alert),
                Subject=f"Report alert: {alert.type}"[:100],
            )
            return resp["MessageId"]
        except Exception:
            log.exception("Failed to publish alert %s to %s", alert.id, self.topic_arn)
            return None
