"""
RTWPilot Configuration Schema

Pydantic model for validating engine configuration files.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders should check version compatibility
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Threshold Schema
# =============================================================================

class EngineConfigSchema(BaseModel):
    """Schema for an engine configuration file."""

    model_config = {"extra": "forbid"}

    schema_version: str = Field(SCHEMA_VERSION, description="Config schema version")

    review_critical_after_days: int = Field(7, ge=0)
    review_high_after_days: int = Field(3, ge=0)
    upcoming_window_days: int = Field(7, ge=2, description="Must cover the day after tomorrow")

    task_critical_after_days: int = Field(5, ge=0)

    stale_communication_days: int = Field(14, ge=0)
    stale_communication_high_days: int = Field(30, ge=0)
    initial_contact_window_days: int = Field(3, ge=0)

    urgent_injury_window_days: int = Field(7, ge=0)
    workload_high_above: int = Field(10, ge=0)
    workload_overloaded_above: int = Field(15, ge=0)
    overdue_task_alert_above: int = Field(5, ge=0)
    quality_score_placeholder: int = Field(85, ge=0, le=100)

    urgent_review_critical_after_days: int = Field(7, ge=0)
    urgent_new_injury_window_days: int = Field(3, ge=0)

    @model_validator(mode="after")
    def validate_ordering(self) -> "EngineConfigSchema":
        """Escalation thresholds must be ordered."""
        if self.review_high_after_days > self.review_critical_after_days:
            raise ValueError(
                "review_high_after_days must not exceed review_critical_after_days"
            )
        if self.stale_communication_days > self.stale_communication_high_days:
            raise ValueError(
                "stale_communication_days must not exceed stale_communication_high_days"
            )
        if self.workload_high_above > self.workload_overloaded_above:
            raise ValueError(
                "workload_high_above must not exceed workload_overloaded_above"
            )
        return self


def check_schema_version(data: dict[str, Any]) -> bool:
    """Check the major version of a config document matches ours."""
    version = str(data.get("schema_version", SCHEMA_VERSION))
    return version.split(".")[0] == SCHEMA_VERSION.split(".")[0]


def validate_engine_config(data: dict[str, Any]) -> EngineConfigSchema:
    """Validate raw config data against the schema."""
    return EngineConfigSchema.model_validate(data)
