"""REST endpoints for the NEO manifest: /api/neos, /api/stats, CSV report."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from neowatch.export import CSV_MEDIA_TYPE, build_csv, report_filename
from neowatch.feed import NeoRecord
from neowatch.models import NeoListResponse, NeoRow, StatsResponse
from neowatch.risk import classify, nearest_approach
from neowatch.routes import get_session
from neowatch.session import DashboardSession, FeedStatus
from neowatch.sorting import SortKey
from neowatch.stats import summarize

logger = logging.getLogger(__name__)

router = APIRouter()


def record_to_row(record: NeoRecord) -> NeoRow:
    approach = nearest_approach(record)
    return NeoRow(
        id=record.id,
        name=record.name,
        display_name=record.display_name,
        diameter_min_km=record.diameter_min_km,
        diameter_max_km=record.diameter_max_km,
        hazardous=record.hazardous,
        risk=classify(record),
        approach_date=approach.date,
        miss_distance_km=approach.miss_distance_km,
        miss_distance_au=approach.miss_distance_au,
        miss_distance_lunar=approach.miss_distance_lunar,
        velocity_km_s=approach.velocity_km_s,
        velocity_km_h=approach.velocity_km_h,
        orbiting_body=approach.orbiting_body,
        nasa_jpl_url=record.nasa_jpl_url,
    )


def _list_response(session: DashboardSession, q: str | None) -> NeoListResponse:
    snap = session.snapshot
    items = session.view(q)
    return NeoListResponse(
        status=snap.status.value,
        error=snap.error,
        sort_key=session.sort_state.key,
        sort_direction=session.sort_state.direction,
        query=q,
        total=len(snap.records),
        count=len(items),
        start_date=snap.start,
        end_date=snap.end,
        last_updated=snap.last_updated,
        items=[record_to_row(r) for r in items],
    )


@router.get("/api/neos", response_model=NeoListResponse)
async def list_neos(q: str | None = None, session: DashboardSession = Depends(get_session)):
    return _list_response(session, q)


@router.post("/api/neos/sort/{key}", response_model=NeoListResponse)
async def select_sort(key: SortKey, q: str | None = None, session: DashboardSession = Depends(get_session)):
    """Select a sort column; selecting the active column again flips direction."""
    session.sort_state.select(key)
    logger.info("Sort set to %s %s", session.sort_state.key.value, session.sort_state.direction.value)
    return _list_response(session, q)


@router.post("/api/neos/refresh", response_model=NeoListResponse)
async def refresh_neos(session: DashboardSession = Depends(get_session)):
    started = await session.refresh_feed()
    if not started:
        raise HTTPException(status_code=409, detail="A feed fetch is already in progress")
    if session.snapshot.status is FeedStatus.ERROR:
        raise HTTPException(status_code=502, detail=session.snapshot.error or "Feed fetch failed")
    return _list_response(session, None)


@router.get("/api/neos/report.csv")
async def download_report(q: str | None = None, session: DashboardSession = Depends(get_session)):
    rows = session.view(q)
    filename = report_filename(session.today())
    logger.info("Exporting %d NEOs to %s", len(rows), filename)
    return Response(
        content=build_csv(rows).encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/api/stats", response_model=StatsResponse)
async def get_stats(session: DashboardSession = Depends(get_session)):
    stats = summarize(session.snapshot.records)
    return StatsResponse(
        total=stats.total,
        hazardous=stats.hazardous,
        nearest_approach_mkm=stats.nearest_approach_mkm,
        avg_velocity_km_h=stats.avg_velocity_km_h,
        tiers=stats.tiers,
        alert=stats.alert,
    )
