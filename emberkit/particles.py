"""Billboard particle groups, their simulation and timed emitters."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from emberkit.matrix import (
    Matrix,
    billboard_matrix,
    identity,
    multiply,
    rotate_z_matrix,
    scale_matrix,
)
from emberkit.utility import log

Vector3 = tuple[float, float, float]
Vector4 = tuple[float, float, float, float]

FRAME_TIME = 1.0 / 60.0
"""Simulation step; one update is one frame at 60 frames per second."""

MAX_INSTANCE_COUNT = 10000
"""Most particles of one group that are turned into draw instances per update."""

INITIAL_BURST_FACTOR = 5
"""A new emitter emits this many times its usual count straight away."""


@dataclass(frozen=True)
class EmitSettings:
    """Ranges from which each emitted particle's properties are drawn uniformly."""

    velocity_min: Vector3 = (-1.0, -1.0, -1.0)
    velocity_max: Vector3 = (1.0, 1.0, 1.0)
    accel_min: Vector3 = (0.0, 0.0, 0.0)
    accel_max: Vector3 = (0.0, -9.8, 0.0)
    start_size_min: float = 0.5
    start_size_max: float = 1.0
    end_size_min: float = 0.0
    end_size_max: float = 0.0
    start_color_min: Vector4 = (1.0, 1.0, 1.0, 1.0)
    start_color_max: Vector4 = (1.0, 1.0, 1.0, 1.0)
    end_color_min: Vector4 = (1.0, 1.0, 1.0, 0.0)
    end_color_max: Vector4 = (1.0, 1.0, 1.0, 0.0)
    rotation_min: float = 0.0
    rotation_max: float = 0.0
    rotation_velocity_min: float = 0.0
    rotation_velocity_max: float = 0.0
    life_time_min: float = 1.0
    life_time_max: float = 3.0


@dataclass
class Particle:
    """State of one particle."""

    position: Vector3
    velocity: Vector3
    accel: Vector3
    color: Vector4
    start_size: float
    end_size: float
    size: float
    start_color: Vector4
    end_color: Vector4
    rotation: float
    rotation_velocity: float
    life_time: float
    life_time_max: float


@dataclass(frozen=True)
class ParticleInstance:
    """Per-instance draw data for one live particle."""

    wvp: Matrix
    world: Matrix
    color: Vector4


@dataclass
class ParticleGroup:
    """Particles that share one texture."""

    texture_path: str
    particles: list[Particle] = field(default_factory=list)
    instances: list[ParticleInstance] = field(default_factory=list)

    @property
    def instance_count(self) -> int:
        return len(self.instances)


def _vec(values: Sequence[float], size: int) -> tuple[float, ...]:
    result = tuple(float(v) for v in values)
    if len(result) != size:
        raise ValueError(f"expected a vector of {size} values, got {len(result)}")
    return result


def _lerp(a: float, b: float, t: float) -> float:
    return (1.0 - t) * a + t * b


class ParticleManager:
    """Holds named particle groups, emits particles into them and simulates them."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.random = random.Random(seed)
        self.groups: dict[str, ParticleGroup] = {}
        self.billboard: Matrix = identity()

    def create_group(self, name: str, texture_path: str) -> ParticleGroup:
        """Create a group; an existing group of that name is kept as it is."""
        existing = self.groups.get(name)
        if existing is not None:
            log(f"ParticleManager: Group already exists - {name}\n")
            return existing
        group = ParticleGroup(texture_path=texture_path)
        self.groups[name] = group
        log(f"ParticleManager: Created particle group - {name}\n")
        return group

    def _uniform(self, low: float, high: float) -> float:
        return self.random.uniform(low, high)

    def _uniform_vec(self, low: Sequence[float], high: Sequence[float]) -> tuple[float, ...]:
        return tuple(self._uniform(a, b) for a, b in zip(low, high))

    def emit(
        self,
        name: str,
        position: Sequence[float],
        count: int,
        settings: Optional[EmitSettings] = None,
    ) -> None:
        """Add ``count`` particles at ``position`` to the named group.

        Raises KeyError if there is no group of that name.
        """
        try:
            group = self.groups[name]
        except KeyError:
            raise KeyError(f"no particle group named {name!r}") from None
        if count < 0:
            raise ValueError("count must not be negative")
        s = settings if settings is not None else EmitSettings()
        origin = _vec(position, 3)

        for _ in range(count):
            velocity = self._uniform_vec(s.velocity_min, s.velocity_max)
            accel = self._uniform_vec(s.accel_min, s.accel_max)
            start_size = self._uniform(s.start_size_min, s.start_size_max)
            end_size = self._uniform(s.end_size_min, s.end_size_max)
            start_color = self._uniform_vec(s.start_color_min, s.start_color_max)
            end_color = self._uniform_vec(s.end_color_min, s.end_color_max)
            rotation = self._uniform(s.rotation_min, s.rotation_max)
            rotation_velocity = self._uniform(s.rotation_velocity_min, s.rotation_velocity_max)
            life_time_max = self._uniform(s.life_time_min, s.life_time_max)
            group.particles.append(
                Particle(
                    position=origin,
                    velocity=velocity,
                    accel=accel,
                    color=start_color,
                    start_size=start_size,
                    end_size=end_size,
                    size=start_size,
                    start_color=start_color,
                    end_color=end_color,
                    rotation=rotation,
                    rotation_velocity=rotation_velocity,
                    life_time=0.0,
                    life_time_max=life_time_max,
                )
            )

    def _advance(self, p: Particle) -> None:
        p.velocity = tuple(v + a * FRAME_TIME for v, a in zip(p.velocity, p.accel))
        p.position = tuple(x + v * FRAME_TIME for x, v in zip(p.position, p.velocity))
        p.rotation += p.rotation_velocity * FRAME_TIME
        t = p.life_time / p.life_time_max
        p.size = _lerp(p.start_size, p.end_size, t)
        p.color = tuple(_lerp(a, b, t) for a, b in zip(p.start_color, p.end_color))

    def _world(self, p: Particle) -> Matrix:
        world = multiply(scale_matrix((p.size, p.size, p.size)), rotate_z_matrix(p.rotation))
        world = multiply(world, self.billboard)
        rows = [list(row) for row in world]
        rows[3][0], rows[3][1], rows[3][2] = p.position
        return tuple(tuple(row) for row in rows)

    def update(
        self,
        view_matrix: Sequence[Sequence[float]],
        view_projection: Sequence[Sequence[float]],
    ) -> None:
        """Advance every particle by one frame and rebuild the draw instances."""
        self.billboard = billboard_matrix(view_matrix)
        for group in self.groups.values():
            group.instances = []
            survivors = []
            for p in group.particles:
                p.life_time += FRAME_TIME
                if p.life_time >= p.life_time_max:
                    continue
                self._advance(p)
                survivors.append(p)
                if len(group.instances) < MAX_INSTANCE_COUNT:
                    world = self._world(p)
                    group.instances.append(
                        ParticleInstance(
                            wvp=multiply(world, view_projection),
                            world=world,
                            color=p.color,
                        )
                    )
            group.particles = survivors

    def particle_count(self, name: str) -> int:
        """Number of live particles in a group; 0 if there is no such group."""
        group = self.groups.get(name)
        return len(group.particles) if group is not None else 0

    def instances(self, name: str) -> list[ParticleInstance]:
        """Draw instances built by the last update; empty if there is no such group."""
        group = self.groups.get(name)
        return list(group.instances) if group is not None else []


class ParticleEmitter:
    """Emits particles into a group at a fixed rate."""

    def __init__(
        self,
        manager: ParticleManager,
        name: str,
        position: Sequence[float],
        emit_count: int,
        emit_rate: float,
        settings: Optional[EmitSettings] = None,
    ) -> None:
        self.manager = manager
        self.name = name
        self.position: Vector3 = _vec(position, 3)
        self.rotation: Vector3 = (0.0, 0.0, 0.0)
        self.scale: Vector3 = (1.0, 1.0, 1.0)
        self.emit_count = emit_count
        self.emit_rate = emit_rate
        self.settings = settings if settings is not None else EmitSettings()
        self.emitting = True
        self.current_time = 0.0
        # A large first burst so the effect is visible immediately.
        manager.emit(name, self.position, emit_count * INITIAL_BURST_FACTOR, self.settings)

    def update(self) -> None:
        """Advance one frame and emit once the emission interval has passed."""
        if not self.emitting:
            return
        self.current_time += FRAME_TIME
        interval = math.inf if self.emit_rate == 0 else 1.0 / self.emit_rate
        if self.current_time >= interval:
            self.manager.emit(self.name, self.position, self.emit_count, self.settings)
            self.current_time -= interval