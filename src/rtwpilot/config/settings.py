"""
RTWPilot Engine Settings

Thresholds used by the derivation engine. Defaults reproduce the compliance
rules the case-management team works to; a deployment can override them
with a YAML or JSON file (see config/loader.py).
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineConfig:
    """
    Derivation thresholds. All values are whole calendar days or case counts.

    Review and task severities use strict "greater than" comparisons:
    a review 8 days overdue is critical, 7 days is high.
    """

    # Reviews
    review_critical_after_days: int = 7
    review_high_after_days: int = 3
    upcoming_window_days: int = 7

    # RTW plan tasks
    task_critical_after_days: int = 5

    # Communication
    stale_communication_days: int = 14
    stale_communication_high_days: int = 30
    initial_contact_window_days: int = 3

    # Workload
    urgent_injury_window_days: int = 7
    workload_high_above: int = 10
    workload_overloaded_above: int = 15
    overdue_task_alert_above: int = 5
    quality_score_placeholder: int = 85

    # Urgent task queue
    urgent_review_critical_after_days: int = 7
    urgent_new_injury_window_days: int = 3


DEFAULT_CONFIG = EngineConfig()
