"""Dashboard, report, and team overview endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from teamdesk.api.deps import CALLER_RECORDS_DEP, SESSION_CONTEXT_DEP
from teamdesk.db.record_client import RecordClient
from teamdesk.schemas.dashboard import DashboardRead, TeamRead
from teamdesk.schemas.reports import ReportRead
from teamdesk.services.overview import build_dashboard, build_report, build_team
from teamdesk.services.session_store import SessionContext

router = APIRouter(tags=["reports"])


@router.get("/dashboard", response_model=DashboardRead)
async def dashboard(
    ctx: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> DashboardRead:
    """Landing-page counters and highlights."""
    return await build_dashboard(records, ctx)


@router.get("/reports", response_model=ReportRead)
async def reports(
    _: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> ReportRead:
    """Completion statistics per status, member, and department."""
    return await build_report(records)


@router.get("/team", response_model=TeamRead)
async def team(
    _: SessionContext = SESSION_CONTEXT_DEP,
    records: RecordClient = CALLER_RECORDS_DEP,
) -> TeamRead:
    """Team directory grouped by department."""
    return await build_team(records)
