"""
Prometheus metrics definitions for finedu.

- Progression metrics: events applied, XP awarded, level-ups, achievements
- Storage metrics: avatar load/save latency and failures
- Error metrics: errors by type and component

Metrics live in the default prometheus_client registry; exposing them is up
to the hosting application.
"""

import logging
from prometheus_client import Counter, Histogram

from finedu import config
from finedu.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)

# =============================================================================
# Progression Metrics
# =============================================================================

progression_events_total = Counter(
    "finedu_progression_events_total",
    "Total progression events applied to avatars",
    ["event_type", "outcome"],  # outcome: success/rejected
)

xp_awarded_total = Counter(
    "finedu_xp_awarded_total",
    "Total XP awarded (negative reversals excluded)",
    ["source"],
)

level_ups_total = Counter(
    "finedu_level_ups_total",
    "Total level-ups reached by learners",
)

achievements_unlocked_total = Counter(
    "finedu_achievements_unlocked_total",
    "Total achievements unlocked",
    ["achievement"],
)

# =============================================================================
# Storage Metrics
# =============================================================================

avatar_store_duration_seconds = Histogram(
    "finedu_avatar_store_duration_seconds",
    "Avatar store operation latency in seconds",
    ["operation"],  # operation: load/save
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

# =============================================================================
# Error Metrics
# =============================================================================

errors_total = Counter(
    "finedu_errors_total",
    "Total errors by type and component",
    ["error_type", "component"],  # component: engine/store/service
)


def record_event(event_type: str, success: bool, notifications: list[Notification]) -> None:
    """Update progression counters from one engine result"""
    if not config.ENABLE_METRICS:
        return

    progression_events_total.labels(
        event_type=event_type,
        outcome="success" if success else "rejected",
    ).inc()

    for notification in notifications:
        if notification.type == NotificationType.XP_GAINED and notification["amount"] > 0:
            xp_awarded_total.labels(source=notification["source"]).inc(notification["amount"])
        elif notification.type == NotificationType.LEVEL_UP:
            level_ups_total.inc()
        elif notification.type == NotificationType.ACHIEVEMENT_UNLOCKED:
            achievements_unlocked_total.labels(achievement=notification["achievement"]).inc()


def record_error(error_type: str, component: str) -> None:
    if config.ENABLE_METRICS:
        errors_total.labels(error_type=error_type, component=component).inc()
