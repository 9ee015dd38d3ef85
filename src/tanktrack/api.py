"""
HTTP API for tank progress.

Run standalone:
    uvicorn tanktrack.api:app --port 8080

Endpoints:
    GET    /tasks                              — all tanks, keyed by level
    POST   /tasks/seed                         — store the built-in tank list
    GET    /tasks/{level}/{tank_id}            — one tank with derived status
    PUT    /tasks/{level}/{tank_id}            — replace a tank record
    DELETE /tasks/{level}/{tank_id}            — remove a tank
    POST   /tasks/{level}/{tank_id}/advance    — complete a stage
    POST   /tasks/{level}/{tank_id}/undo       — reopen a stage (confirm=true)
    GET    /reports/inspection                 — tanks ready for inspection
    GET    /reports/status                     — counts per level
    GET    /reports/export.csv                 — progress spreadsheet

Levels accept the record key ("n10Tanks") or the short label ("N10").

Authentication: when API_KEY is set, every request needs a matching
X-Api-Key header.
"""

import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tanktrack.config import settings
from tanktrack.core.completion_service import (
    STATUS_COLORS,
    color_status,
    has_completed_ladder_installation,
)
from tanktrack.core.group_service import (
    advance_tank,
    applicable_stages,
    display_stage,
    normalize_tank,
    undo_tank,
)
from tanktrack.core.records import Level, Tank
from tanktrack.core.report_service import (
    build_inspection_report,
    build_status_report,
    export_progress_csv,
)
from tanktrack.core.stages import Stage
from tanktrack.core.tank_templates import build_seed_data
from tanktrack.db.repositories import (
    delete_tank,
    get_tank,
    get_tanks_data,
    save_tank,
    seed_tanks,
)
from tanktrack.db.session import get_session

logger = logging.getLogger(__name__)

app = FastAPI(title="Tank Progress API", version="1.0.0")


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Storage failures become a generic 500; details go to the log only."""
    logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Storage error"})


# ── Auth ──────────────────────────────────────────────────────


async def verify_api_key(x_api_key: str | None = Header(None)) -> None:
    """Shared-key check; disabled while API_KEY is empty."""
    if settings.api_key and x_api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid API key")


# ── Path parameters ───────────────────────────────────────────


def parse_level(level: str) -> Level:
    """Level from the URL: record key ("n10Tanks") or label ("N10")."""
    try:
        return Level(level)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown level: {level}") from None


# ── Schemas ───────────────────────────────────────────────────


class StageRequest(BaseModel):
    """Stage to act on; subIndex picks the sub-tank of a grouped tank."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    stage: Stage
    sub_index: int | None = None


class UndoRequest(StageRequest):
    confirm: bool = False


class SeedResult(BaseModel):
    written: int


# ── Helpers ───────────────────────────────────────────────────


def tank_view(tank: Tank, sub_index: int | None = None) -> dict:
    """Stored record plus the values derived from it on read."""
    stage = display_stage(tank, sub_index or 0)
    status = color_status(tank)
    return {
        "tank": tank.to_document(),
        "displayStage": stage.value if stage else None,
        "status": status.value,
        "color": STATUS_COLORS[status],
        "ladderInstalled": has_completed_ladder_installation(tank),
        "applicableStages": [s.value for s in applicable_stages(tank, sub_index)],
    }


async def _require_tank(session: AsyncSession, level: Level, tank_id: str) -> Tank:
    tank = await get_tank(session, level, tank_id)
    if tank is None:
        raise HTTPException(status_code=404, detail=f"Tank {tank_id} not found on {level.label}")
    return tank


def _check_sub_index(tank: Tank, sub_index: int | None) -> None:
    if sub_index is None:
        return
    if not tank.has_sub_tanks or not 0 <= sub_index < len(tank.sub_tanks):
        raise HTTPException(
            status_code=400,
            detail=f"Tank {tank.id} has no sub-tank #{sub_index}",
        )


# ── Tasks ─────────────────────────────────────────────────────


@app.get("/tasks")
async def list_tasks(
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    """Every tank, in the stored document shape."""
    data = await get_tanks_data(session)
    return data.to_document()


@app.post("/tasks/seed", response_model=SeedResult, status_code=201)
async def seed_tasks(
    overwrite: bool = False,
    sample: bool = False,
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    """
    Store the built-in tanks. Existing records are kept unless overwrite=true;
    sample=true seeds the demo site state instead of fresh progress.
    """
    written = await seed_tanks(session, build_seed_data(sample), overwrite=overwrite)
    return SeedResult(written=written)


@app.get("/tasks/{level}/{tank_id}")
async def read_task(
    tank_id: str,
    level: Level = Depends(parse_level),
    sub_index: int | None = None,
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    tank = await _require_tank(session, level, tank_id)
    _check_sub_index(tank, sub_index)
    return tank_view(tank, sub_index)


@app.put("/tasks/{level}/{tank_id}")
async def replace_task(
    tank_id: str,
    body: Tank,
    level: Level = Depends(parse_level),
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    """Store a whole tank record. Missing progress entries are back-filled."""
    if body.id != tank_id:
        raise HTTPException(status_code=400, detail="Tank id in body does not match the URL")
    tank = await save_tank(session, level, normalize_tank(body))
    return tank_view(tank)


@app.delete("/tasks/{level}/{tank_id}", status_code=204)
async def remove_task(
    tank_id: str,
    level: Level = Depends(parse_level),
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    if not await delete_tank(session, level, tank_id):
        raise HTTPException(status_code=404, detail=f"Tank {tank_id} not found on {level.label}")


@app.post("/tasks/{level}/{tank_id}/advance")
async def advance_task(
    tank_id: str,
    body: StageRequest,
    level: Level = Depends(parse_level),
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    """
    Complete a stage and open the next one.

    Stale requests (stage already completed, not applicable, out of turn)
    leave the record unchanged and still return 200 with the current view.
    """
    tank = await _require_tank(session, level, tank_id)
    _check_sub_index(tank, body.sub_index)

    updated = advance_tank(tank, body.stage, body.sub_index)
    if updated is not tank:
        await save_tank(session, level, updated)
    return tank_view(updated, body.sub_index)


@app.post("/tasks/{level}/{tank_id}/undo")
async def undo_task(
    tank_id: str,
    body: UndoRequest,
    level: Level = Depends(parse_level),
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    """Reopen a stage. Requires confirm=true."""
    if not body.confirm:
        raise HTTPException(status_code=409, detail="Undo must be confirmed (confirm=true)")

    tank = await _require_tank(session, level, tank_id)
    _check_sub_index(tank, body.sub_index)

    updated = undo_tank(tank, body.stage, body.sub_index)
    if updated is not tank:
        await save_tank(session, level, updated)
        logger.info("Undo via API: %s %s on %s", tank_id, body.stage.value, level.label)
    return tank_view(updated, body.sub_index)


# ── Reports ───────────────────────────────────────────────────


@app.get("/reports/inspection")
async def inspection_report(
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    return build_inspection_report(await get_tanks_data(session))


@app.get("/reports/status")
async def status_report(
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    return build_status_report(await get_tanks_data(session))


@app.get("/reports/export.csv")
async def export_report(
    _: None = Depends(verify_api_key),
    session: AsyncSession = Depends(get_session),
):
    body = export_progress_csv(await get_tanks_data(session))
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="tank-progress.csv"'},
    )
