"""Orbital animation endpoints: REST controls plus a frame-streaming WebSocket."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect

from neowatch.models import (
    AnimatingRequest,
    BodyPositionModel,
    BodySnapshotModel,
    OrbitPathModel,
    RegenerateRequest,
    SimulationFrame,
)
from neowatch.routes import get_session
from neowatch.session import DashboardSession
from neowatch.simulator import (
    DEFAULT_PARTICLE_COUNT,
    BodyKind,
    OrbitalSimulator,
    generate_particle_field,
    orbit_path,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Streaming rate for WS clients; the simulation itself ticks at the animation fps
WS_FRAME_INTERVAL_S = 0.1


def build_frame(sim: OrbitalSimulator) -> SimulationFrame:
    return SimulationFrame(
        frame=sim.frame,
        animating=sim.animating,
        camera_resets=sim.camera_resets,
        bodies=[
            BodyPositionModel(
                name=p.name,
                kind=p.kind,
                x=round(p.x, 4),
                y=round(p.y, 4),
                z=round(p.z, 4),
                size=p.size,
                color=p.color,
                moon=[round(c, 4) for c in p.moon] if p.moon else None,
                rings=list(p.rings) if p.rings else None,
            )
            for p in sim.positions()
        ],
    )


@router.get("/api/simulation/frame", response_model=SimulationFrame)
async def get_frame(session: DashboardSession = Depends(get_session)):
    return build_frame(session.simulator)


@router.post("/api/simulation/animating", response_model=SimulationFrame)
async def set_animating(body: AnimatingRequest, session: DashboardSession = Depends(get_session)):
    session.simulator.set_animating(body.animating)
    logger.info("Animation %s", "resumed" if body.animating else "paused")
    return build_frame(session.simulator)


@router.post("/api/simulation/reset-camera", response_model=SimulationFrame)
async def reset_camera(session: DashboardSession = Depends(get_session)):
    session.simulator.reset_camera()
    return build_frame(session.simulator)


@router.post("/api/simulation/regenerate", response_model=SimulationFrame)
async def regenerate(body: RegenerateRequest, session: DashboardSession = Depends(get_session)):
    session.simulator.regenerate(body.seed)
    logger.info("Asteroid population regenerated (seed=%s)", body.seed)
    return build_frame(session.simulator)


@router.get("/api/simulation/bodies/{name}", response_model=BodySnapshotModel)
async def select_body(name: str, session: DashboardSession = Depends(get_session)):
    try:
        snap = session.simulator.select(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown body: {name}")
    return BodySnapshotModel(name=snap.name, details=snap.details)


@router.get("/api/simulation/orbits", response_model=list[OrbitPathModel])
async def get_orbits(session: DashboardSession = Depends(get_session)):
    """Orbit polylines for the planets."""
    return [
        OrbitPathModel(name=b.name, points=[list(p) for p in orbit_path(b.orbit_radius)])
        for b in session.simulator.bodies
        if b.kind is BodyKind.PLANET
    ]


@router.get("/api/simulation/particles", response_model=list[BodyPositionModel])
async def get_particles(
    seed: int | None = None,
    count: int = Query(DEFAULT_PARTICLE_COUNT, ge=0, le=1000),
):
    """Starting positions of the background particle field for the mini orbit map."""
    field = OrbitalSimulator(generate_particle_field(seed, count))
    return [
        BodyPositionModel(
            name=p.name, kind=p.kind, x=round(p.x, 4), y=p.y, z=round(p.z, 4), size=p.size, color=p.color,
        )
        for p in field.positions()
    ]


@router.websocket("/ws/simulation")
async def simulation_ws(ws: WebSocket):
    """Push simulation frames to the client.

    Client sends: {"animating": false} | {"reset_camera": true} | {"select": "Earth"}
    Server sends: {"type": "frame", ...} every WS_FRAME_INTERVAL_S, plus
                  {"type": "selection", ...} replies.
    """
    await ws.accept()
    session: DashboardSession = ws.app.state.session
    sim = session.simulator
    logger.info("Simulation WS client connected")

    async def sender():
        try:
            while True:
                await ws.send_json({"type": "frame", **build_frame(sim).model_dump(mode="json")})
                await asyncio.sleep(WS_FRAME_INTERVAL_S)
        except asyncio.CancelledError:
            pass

    send_task = asyncio.create_task(sender())

    try:
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Simulation WS: ignoring non-JSON message")
                continue
            if not isinstance(msg, dict):
                logger.warning("Simulation WS: ignoring non-object message %r", msg)
                continue
            if "animating" in msg:
                sim.set_animating(bool(msg["animating"]))
            if msg.get("reset_camera"):
                sim.reset_camera()
            if "select" in msg:
                try:
                    snap = sim.select(str(msg["select"]))
                    await ws.send_json({"type": "selection", "name": snap.name, "details": snap.details})
                except KeyError:
                    await ws.send_json({"type": "error", "message": f"Unknown body: {msg['select']}"})
    except WebSocketDisconnect:
        logger.info("Simulation WS client disconnected")
    except Exception as exc:
        logger.exception("Simulation WS error: %s", exc)
    finally:
        send_task.cancel()
