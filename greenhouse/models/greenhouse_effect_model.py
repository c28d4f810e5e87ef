import logging
from enum import Enum

from ..config import SimulationConfig

logger = logging.getLogger(__name__)

SLOW_SPEED_FACTOR = 0.5


class TimeSpeed(Enum):
    NORMAL = 1.0
    SLOW = SLOW_SPEED_FACTOR


class GreenhouseEffectModel:
    """
    Base of every screen model: owns the configuration and the shared random generator, and turns the
    frame times delivered by the host into model steps.
    """
    def __init__(self, config: SimulationConfig = None):
        self.config = SimulationConfig() if config is None else config
        self.rng = self.config.make_rng()
        self._initial_rng_state = self.rng.bit_generator.state

        self.is_playing = True
        self.time_speed = TimeSpeed.NORMAL
        self.time = 0.0

    def step(self, delta_t: float):
        """Advance the model by one frame, `delta_t` seconds long."""
        if delta_t < 0:
            raise ValueError(f"Time step can't be negative: {delta_t}")
        if delta_t > self.config.max_dt:
            logger.debug(f"Clamping frame time {delta_t:.3f}s to {self.config.max_dt}s")
            delta_t = self.config.max_dt

        if self.is_playing:
            self.step_model(delta_t * self.time_speed.value)

    def single_step(self):
        """Step forward by one model time step, typically while paused."""
        self.step_model(self.config.model_time_step)

    def step_model(self, delta_t: float):
        self.time += delta_t

    def reset(self):
        self.is_playing = True
        self.time_speed = TimeSpeed.NORMAL
        self.time = 0.0
        # Every component shares this generator, so rewinding it makes a reset run repeat the first one
        self.rng.bit_generator.state = self._initial_rng_state
