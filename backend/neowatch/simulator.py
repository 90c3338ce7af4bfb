"""Frame-driven orbital animation of the solar system and a sampled asteroid belt.

Each body moves on a circle in the x/z plane. The only mutable state is one
phase angle per body, advanced by a fixed increment every frame:

    phase ← (phase + angular_speed · FRAME_DT) mod 2π
    position = (cos(phase) · r, y_offset, sin(phase) · r)

Motion is tied to frame count, not wall-clock time, so perceived speed follows
the display frame rate. Scales are visual ("AU (scaled)"), not physical.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

TAU = 2 * math.pi
FRAME_DT = 1.0  # nominal increment per animation frame

SUN_RADIUS = 10.0
SUN_COLOR = "#FDB813"
MOON_OFFSET = 5.0
MOON_SIZE = 0.7
ASTEROID_SIZE = 0.5
HAZARDOUS_COLOR = "#ff4444"
SAFE_COLOR = "#44ff44"

DEFAULT_ASTEROID_COUNT = 15
DEFAULT_PARTICLE_COUNT = 50

# name, orbit radius, size, color, angular speed (rad/frame), axial tilt (deg)
PLANET_DATA: list[dict] = [
    {"name": "Mercury", "distance": 15, "size": 1.5, "color": "#8C7853", "speed": 0.04, "tilt": 0.034},
    {"name": "Venus", "distance": 22, "size": 2.3, "color": "#FFC649", "speed": 0.015, "tilt": 2.64},
    {"name": "Earth", "distance": 30, "size": 2.5, "color": "#4a9eff", "speed": 0.01, "tilt": 23.5, "has_moon": True},
    {"name": "Mars", "distance": 40, "size": 2, "color": "#ff6b4a", "speed": 0.008, "tilt": 25.2},
    {"name": "Jupiter", "distance": 60, "size": 8, "color": "#DAA520", "speed": 0.002, "tilt": 3.13},
    {"name": "Saturn", "distance": 80, "size": 7, "color": "#F4C542", "speed": 0.0009, "tilt": 26.73, "has_rings": True},
    {"name": "Uranus", "distance": 100, "size": 5, "color": "#4FD0E7", "speed": 0.0004, "tilt": 97.77},
    {"name": "Neptune", "distance": 120, "size": 5, "color": "#4166F5", "speed": 0.0001, "tilt": 28.32},
]


class BodyKind(str, Enum):
    PLANET = "planet"
    ASTEROID = "asteroid"
    PARTICLE = "particle"


@dataclass(frozen=True)
class OrbitingBody:
    """Static configuration of one orbiting body. Phase lives in the simulator."""

    name: str
    kind: BodyKind
    orbit_radius: float
    angular_speed: float
    size: float
    color: str
    tilt_deg: float = 0.0
    initial_phase: float = 0.0
    y_offset: float = 0.0
    has_moon: bool = False
    has_rings: bool = False
    # Descriptive fields shown when an asteroid is selected
    hazardous: bool = False
    distance_au: float = 0.0
    diameter_km: float = 0.0
    velocity_km_h: int = 0


@dataclass(frozen=True)
class BodyPosition:
    name: str
    kind: BodyKind
    x: float
    y: float
    z: float
    size: float
    color: str
    moon: tuple[float, float, float] | None = None
    rings: tuple[float, float] | None = None


@dataclass(frozen=True)
class BodySnapshot:
    """Read-only description of a selected body."""

    name: str
    details: dict[str, str] = field(default_factory=dict)


SUN_SNAPSHOT = BodySnapshot("Sun", {"type": "Star", "temperature": "5,500°C"})


# ---------------------------------------------------------------------------
# Population generation (pure, seeded)
# ---------------------------------------------------------------------------


def build_planets(seed: int | None = None) -> list[OrbitingBody]:
    """The eight planets, each starting at a seeded random phase."""
    rng = np.random.default_rng(seed)
    return [
        OrbitingBody(
            name=p["name"],
            kind=BodyKind.PLANET,
            orbit_radius=float(p["distance"]),
            angular_speed=p["speed"],
            size=float(p["size"]),
            color=p["color"],
            tilt_deg=p["tilt"],
            initial_phase=float(rng.random() * TAU),
            has_moon=p.get("has_moon", False),
            has_rings=p.get("has_rings", False),
        )
        for p in PLANET_DATA
    ]


def generate_asteroids(seed: int | None = None, count: int = DEFAULT_ASTEROID_COUNT) -> list[OrbitingBody]:
    """Sample an asteroid population. Same seed to same population.

    Phases are spread evenly around the circle; the vertical offset keeps the
    belt from collapsing into a single flat ring.
    """
    rng = np.random.default_rng(seed)
    asteroids = []
    for i in range(count):
        hazardous = bool(rng.random() > 0.7)
        asteroids.append(OrbitingBody(
            name=f"Asteroid {i + 1}",
            kind=BodyKind.ASTEROID,
            hazardous=hazardous,
            distance_au=round(float(rng.random() * 2), 4),
            diameter_km=round(float(rng.random() * 500), 2),
            velocity_km_h=int(rng.random() * 50_000),
            orbit_radius=35 + float(rng.random()) * 30,
            angular_speed=0.005 + float(rng.random()) * 0.01,
            initial_phase=(i / count) * TAU,
            y_offset=(float(rng.random()) - 0.5) * 10,
            size=ASTEROID_SIZE,
            color=HAZARDOUS_COLOR if hazardous else SAFE_COLOR,
        ))
    return asteroids


def generate_particle_field(seed: int | None = None, count: int = DEFAULT_PARTICLE_COUNT) -> list[OrbitingBody]:
    """Background particles for the mini orbit map, mixed prograde/retrograde."""
    rng = np.random.default_rng(seed)
    particles = []
    for i in range(count):
        phase = float(rng.random() * TAU)
        radius = 50 + float(rng.random()) * 100
        speed = 0.002 + float(rng.random()) * 0.005
        direction = 1 if rng.random() < 0.5 else -1
        size = float(rng.random()) * 2 + 1
        color = "#22d3ee" if rng.random() > 0.8 else "#ffffff"
        particles.append(OrbitingBody(
            name=f"particle-{i}",
            kind=BodyKind.PARTICLE,
            orbit_radius=radius,
            angular_speed=speed * direction,
            initial_phase=phase,
            size=size,
            color=color,
        ))
    return particles


def orbit_path(radius: float, segments: int = 128) -> list[tuple[float, float, float]]:
    """Closed polyline tracing a circular orbit (segments + 1 points)."""
    return [
        (math.cos(i / segments * TAU) * radius, 0.0, math.sin(i / segments * TAU) * radius)
        for i in range(segments + 1)
    ]


# ---------------------------------------------------------------------------
# State transition
# ---------------------------------------------------------------------------


def advance(phases: np.ndarray, speeds: np.ndarray, dt: float = FRAME_DT) -> np.ndarray:
    """Pure per-frame transition: returns new phases wrapped into [0, 2π)."""
    return np.mod(phases + speeds * dt, TAU)


class OrbitalSimulator:
    """Owns the phase angles of a closed set of bodies plus the animation toggles.

    Camera state belongs to the renderer; the simulator only counts reset requests
    so a renderer can notice a new one.
    """

    def __init__(self, bodies: Sequence[OrbitingBody], animating: bool = True):
        self.animating = animating
        self.camera_resets = 0
        self.frame = 0
        self._load(bodies)

    def _load(self, bodies: Sequence[OrbitingBody], phases: np.ndarray | None = None) -> None:
        self._bodies: tuple[OrbitingBody, ...] = tuple(bodies)
        self._index = {b.name: i for i, b in enumerate(self._bodies)}
        self._radii = np.array([b.orbit_radius for b in self._bodies], dtype=float)
        self._speeds = np.array([b.angular_speed for b in self._bodies], dtype=float)
        self._offsets = np.array([b.y_offset for b in self._bodies], dtype=float)
        if phases is None:
            phases = np.array([b.initial_phase for b in self._bodies], dtype=float)
        self._phases = np.mod(phases, TAU)

    @classmethod
    def solar_system(cls, seed: int | None = None, asteroid_count: int = DEFAULT_ASTEROID_COUNT) -> "OrbitalSimulator":
        return cls(build_planets(seed) + generate_asteroids(seed, asteroid_count))

    # -- read side ---------------------------------------------------------

    @property
    def bodies(self) -> tuple[OrbitingBody, ...]:
        return self._bodies

    @property
    def phases(self) -> np.ndarray:
        return self._phases.copy()

    def phase(self, name: str) -> float:
        return float(self._phases[self._index[name]])

    def positions(self) -> list[BodyPosition]:
        xs = np.cos(self._phases) * self._radii
        zs = np.sin(self._phases) * self._radii
        out = []
        for i, body in enumerate(self._bodies):
            x, y, z = float(xs[i]), float(self._offsets[i]), float(zs[i])
            moon = None
            if body.has_moon:
                moon = (
                    x + MOON_OFFSET * math.cos(self._phases[i]),
                    y,
                    z + MOON_OFFSET * math.sin(self._phases[i]),
                )
            rings = (body.size * 1.5, body.size * 2.5) if body.has_rings else None
            out.append(BodyPosition(
                name=body.name, kind=body.kind, x=x, y=y, z=z,
                size=body.size, color=body.color, moon=moon, rings=rings,
            ))
        return out

    def select(self, name: str) -> BodySnapshot:
        """Describe a body from its configuration. Raises KeyError for unknown names."""
        if name == SUN_SNAPSHOT.name:
            return SUN_SNAPSHOT
        body = self._bodies[self._index[name]]
        if body.kind is BodyKind.ASTEROID:
            return BodySnapshot(body.name, {
                "type": "Asteroid",
                "status": "HAZARDOUS" if body.hazardous else "Safe",
                "distance": f"{body.distance_au} AU",
                "diameter": f"{body.diameter_km} km",
                "velocity": f"{body.velocity_km_h:,} km/h",
            })
        if body.kind is BodyKind.PLANET:
            return BodySnapshot(body.name, {
                "type": "Planet",
                "orbit": f"{body.orbit_radius:g} AU (scaled)",
                "orbitalSpeed": f"{body.angular_speed:.4f}",
                "axialTilt": f"{body.tilt_deg}°",
            })
        return BodySnapshot(body.name, {"type": "Particle", "orbit": f"{body.orbit_radius:.1f}"})

    # -- write side --------------------------------------------------------

    def tick(self) -> bool:
        """Advance one frame. Returns False (and changes nothing) while paused."""
        if not self.animating:
            return False
        self._phases = advance(self._phases, self._speeds, FRAME_DT)
        self.frame += 1
        return True

    def set_animating(self, animating: bool) -> None:
        self.animating = animating

    def toggle_animating(self) -> bool:
        self.animating = not self.animating
        return self.animating

    def reset_camera(self) -> int:
        self.camera_resets += 1
        return self.camera_resets

    def regenerate(self, seed: int | None = None) -> None:
        """Re-draw the asteroid population. Other bodies keep their current phase."""
        keep = [i for i, b in enumerate(self._bodies) if b.kind is not BodyKind.ASTEROID]
        count = sum(1 for b in self._bodies if b.kind is BodyKind.ASTEROID)
        asteroids = generate_asteroids(seed, count)
        bodies = [self._bodies[i] for i in keep] + asteroids
        phases = np.concatenate([
            self._phases[keep],
            np.array([a.initial_phase for a in asteroids], dtype=float),
        ])
        self._load(bodies, phases)
