"""Quality-control endpoints: case flags and consultant performance."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from api.schemas.responses import FlagOut, PerformanceOut
from api.state import ServiceState, get_state, resolve_now
from rtwpilot.engine import aggregate_performance, derive_case_flags, filter_flags
from rtwpilot.models import FlagType, Priority

router = APIRouter(tags=["Quality Control"])


@router.get("/flags", response_model=list[FlagOut])
async def list_flags(
    consultant_id: Optional[str] = None,
    min_severity: Optional[Priority] = None,
    flag_type: Optional[FlagType] = None,
    now: Optional[datetime] = None,
    state: ServiceState = Depends(get_state),
):
    """
    Case flags across all cases, sorted by severity then recency.

    Optionally filter by consultant, minimum severity or flag type.
    """
    flags = derive_case_flags(state.cases(), state.directory(), resolve_now(now), state.config)
    flags = filter_flags(flags, consultant_id, min_severity, flag_type)
    return [FlagOut(**f.to_dict()) for f in flags]


@router.get("/performance", response_model=list[PerformanceOut])
async def list_performance(
    now: Optional[datetime] = None,
    state: ServiceState = Depends(get_state),
):
    """Per-consultant overdue actions and critically flagged cases."""
    performance = aggregate_performance(
        state.cases(), resolve_now(now), state.directory(), config=state.config
    )
    return [PerformanceOut(**p.to_dict()) for p in performance]
