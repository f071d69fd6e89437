from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SimulationStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class DemoSimulationState:
    status: SimulationStatus
    current_segment_index: int
    position_in_segment: float  # [0, 1)
    current_speed_mps: float
    target_speed_mps: float
    last_update_ms: int
    speed_multiplier: float
    segment_count: int

    @property
    def is_active(self) -> bool:
        return self.status in (SimulationStatus.RUNNING, SimulationStatus.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self.status is SimulationStatus.PAUSED

    @property
    def is_finished(self) -> bool:
        return self.current_segment_index >= self.segment_count

    @property
    def progress_pct(self) -> float:
        if self.segment_count <= 0:
            return 0.0
        done = min(
            float(self.segment_count),
            self.current_segment_index + self.position_in_segment,
        )
        return done / self.segment_count * 100.0
