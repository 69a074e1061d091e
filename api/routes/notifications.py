"""Notification centre endpoints."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from api.schemas.responses import (
    BadgesOut,
    DiagnosticOut,
    NotificationListResponse,
    NotificationOut,
    OverlayUpdateResponse,
)
from api.session import optional_session, require_session
from api.state import ServiceState, get_state, resolve_now
from rtwpilot.engine import DiagnosticChannel, derive_notifications
from rtwpilot.models import (
    Notification,
    NotificationBadges,
    NotificationFilter,
    NotificationOverlay,
    filter_notifications,
)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def _derive(
    state: ServiceState,
    user_id: str,
    now: Optional[datetime],
    session_id: Optional[str],
    diagnostics: Optional[DiagnosticChannel] = None,
) -> list[Notification]:
    user = state.user(user_id)
    return derive_notifications(
        state.cases(),
        user,
        resolve_now(now),
        config=state.config,
        overlay=state.overlays.get(session_id),
        diagnostics=diagnostics,
    )


def _overlay_response(session_id: str, overlay: NotificationOverlay) -> OverlayUpdateResponse:
    return OverlayUpdateResponse(
        session_id=session_id,
        read_ids=sorted(overlay.read_ids),
        dismissed_ids=sorted(overlay.dismissed_ids),
    )


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    user_id: str,
    filter: NotificationFilter = NotificationFilter.ALL,
    now: Optional[datetime] = None,
    session_id: Optional[str] = Depends(optional_session),
    state: ServiceState = Depends(get_state),
):
    """
    Notifications for a user, sorted by priority then recency.

    Filter: all, unread, high_priority, supervisor. Badges are computed over
    the unfiltered list.
    """
    diagnostics = DiagnosticChannel()
    notifications = _derive(state, user_id, now, session_id, diagnostics)
    badges = NotificationBadges.from_notifications(notifications)

    return NotificationListResponse(
        user_id=user_id,
        filter=filter.value,
        notifications=[
            NotificationOut(**n.to_dict()) for n in filter_notifications(notifications, filter)
        ],
        badges=BadgesOut(**badges.to_dict()),
        diagnostics=[DiagnosticOut(**d.to_dict()) for d in diagnostics.reports],
    )


@router.get("/badges", response_model=BadgesOut)
async def get_badges(
    user_id: str,
    now: Optional[datetime] = None,
    session_id: Optional[str] = Depends(optional_session),
    state: ServiceState = Depends(get_state),
):
    """Unread, critical and unread-supervisor counts."""
    notifications = _derive(state, user_id, now, session_id)
    return BadgesOut(**NotificationBadges.from_notifications(notifications).to_dict())


@router.post("/read-all", response_model=OverlayUpdateResponse)
async def mark_all_read(
    user_id: str,
    now: Optional[datetime] = None,
    session_id: str = Depends(require_session),
    state: ServiceState = Depends(get_state),
):
    """Mark every notification currently derived for the user as read."""
    ids = [n.id for n in _derive(state, user_id, now, session_id)]
    overlay = state.overlays.update(session_id, lambda o: o.mark_all_read(ids))
    return _overlay_response(session_id, overlay)


@router.post("/{notification_id}/read", response_model=OverlayUpdateResponse)
async def mark_read(
    notification_id: str,
    session_id: str = Depends(require_session),
    state: ServiceState = Depends(get_state),
):
    """
    Mark one notification as read.

    Ids not in the current output are accepted; the state is kept in case
    the notification reappears.
    """
    overlay = state.overlays.update(session_id, lambda o: o.mark_read(notification_id))
    return _overlay_response(session_id, overlay)


@router.post("/{notification_id}/unread", response_model=OverlayUpdateResponse)
async def mark_unread(
    notification_id: str,
    session_id: str = Depends(require_session),
    state: ServiceState = Depends(get_state),
):
    overlay = state.overlays.update(session_id, lambda o: o.unmark_read(notification_id))
    return _overlay_response(session_id, overlay)


@router.post("/{notification_id}/dismiss", response_model=OverlayUpdateResponse)
async def dismiss(
    notification_id: str,
    session_id: str = Depends(require_session),
    state: ServiceState = Depends(get_state),
):
    """Hide a notification for the rest of the session."""
    overlay = state.overlays.update(session_id, lambda o: o.dismiss(notification_id))
    return _overlay_response(session_id, overlay)
