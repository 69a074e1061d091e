"""Admin dashboard endpoints: consultant workloads and the urgent task queue."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from api.schemas.responses import UrgentTaskOut, WorkloadOut
from api.state import ServiceState, get_state, resolve_now
from rtwpilot.engine import derive_urgent_tasks, derive_workloads, needs_attention, workload_band

router = APIRouter(tags=["Workloads"])


@router.get("/workloads", response_model=list[WorkloadOut])
async def list_workloads(
    now: Optional[datetime] = None,
    state: ServiceState = Depends(get_state),
):
    """Counters per consultant, in the order consultants first appear."""
    workloads = derive_workloads(
        state.cases(), resolve_now(now), state.directory(), config=state.config
    )
    return [
        WorkloadOut(
            **w.to_dict(),
            band=workload_band(w, state.config).value,
            needs_attention=needs_attention(w, state.config),
        )
        for w in workloads
    ]


@router.get("/urgent-tasks", response_model=list[UrgentTaskOut])
async def list_urgent_tasks(
    now: Optional[datetime] = None,
    state: ServiceState = Depends(get_state),
):
    """Overdue reviews, overdue RTW tasks and new injuries awaiting setup."""
    tasks = derive_urgent_tasks(state.cases(), resolve_now(now), config=state.config)
    return [UrgentTaskOut(**t.to_dict()) for t in tasks]
