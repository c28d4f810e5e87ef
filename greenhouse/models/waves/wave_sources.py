import logging
from dataclasses import dataclass

import numpy as np

from ...constants import (SUNLIGHT_SPAN, VISIBLE_WAVELENGTH, INFRARED_WAVELENGTH, STRAIGHT_UP, STRAIGHT_DOWN,
                          MINIMUM_EARTH_AT_NIGHT_TEMPERATURE)
from ...math_utils import rotate_vector
from ..layers import GroundLayer
from ..sources import SunEnergySource
from .wave import Wave

logger = logging.getLogger(__name__)

INTER_WAVE_TIME = 0.75
WAVE_LIFETIME_RANGE = (10.0, 15.0)

MINIMUM_GROUND_WAVE_INTENSITY = 0.01
# Hottest ground temperature the model is expected to reach (K).
MAX_EXPECTED_TEMPERATURE = 295.0


@dataclass(frozen=True)
class WaveSourceSpec:
    """A pair of origins that successive waves alternate between, and their direction of travel."""
    min_x: float
    max_x: float
    propagation_direction: tuple

    def has_origin(self, x: float) -> bool:
        return x == self.min_x or x == self.max_x

    def other_origin(self, x: float) -> float:
        return self.max_x if x == self.min_x else self.min_x


@dataclass
class WaveCreationSpec:
    origin_x: float
    propagation_direction: tuple
    countdown: float


class EMWaveSource:
    """
    Keeps one sourced wave alive for every pair of origins while production is on.

    A sourced wave lives for a random time, then it is detached and a new one is queued at the other
    origin of its pair, `inter_wave_time` seconds later.
    """
    def __init__(self, waves: list[Wave], wavelength: float, wave_start_altitude: float, wave_end_altitude: float,
                 wave_source_specs: list[WaveSourceSpec], rng: np.random.Generator, **kwargs):
        self.waves = waves
        self.wavelength = wavelength
        self.wave_start_altitude = wave_start_altitude
        self.wave_end_altitude = wave_end_altitude
        self.wave_source_specs = wave_source_specs
        self.rng = rng
        self.inter_wave_time = INTER_WAVE_TIME if 'inter_wave_time' not in kwargs else kwargs['inter_wave_time']
        self.wave_lifetime_range = WAVE_LIFETIME_RANGE if 'wave_lifetime_range' not in kwargs \
            else kwargs['wave_lifetime_range']

        self.waves_to_lifetimes: dict[Wave, float] = {}
        self.wave_creation_queue: list[WaveCreationSpec] = []

    def wave_production_enabled(self) -> bool:
        return True

    def wave_intensity(self) -> float:
        return 1.0

    def step(self, delta_t: float):
        producing = self.wave_production_enabled()
        wave_intensity = self.wave_intensity()

        for spec in self.wave_source_specs:
            matching_wave = next((wave for wave in self.waves
                                  if wave.wavelength == self.wavelength and wave.is_sourced
                                  and spec.has_origin(wave.origin[0])
                                  and wave.origin[1] == self.wave_start_altitude), None)
            wave_is_queued = any(queued.propagation_direction == spec.propagation_direction
                                 and spec.has_origin(queued.origin_x)
                                 for queued in self.wave_creation_queue)

            if matching_wave is None:
                if not wave_is_queued and producing:
                    origin_x = spec.min_x if self.rng.random() < 0.5 else spec.max_x
                    self.add_wave(origin_x, spec.propagation_direction, wave_intensity)
                continue

            if not producing or matching_wave.existence_time > self.waves_to_lifetimes.get(matching_wave, np.inf):
                matching_wave.is_sourced = False
                self.waves_to_lifetimes.pop(matching_wave, None)
                if producing:
                    self.wave_creation_queue.append(WaveCreationSpec(spec.other_origin(matching_wave.origin[0]),
                                                                     spec.propagation_direction,
                                                                     self.inter_wave_time))

            if matching_wave.intensity_at(0) != wave_intensity:
                matching_wave.set_intensity_at_start(wave_intensity)

        for creation_spec in self.wave_creation_queue:
            creation_spec.countdown -= delta_t
            if creation_spec.countdown <= 0:
                self.add_wave(creation_spec.origin_x, creation_spec.propagation_direction, wave_intensity)
        self.wave_creation_queue = [spec for spec in self.wave_creation_queue if spec.countdown > 0]

    def add_wave(self, origin_x: float, propagation_direction, intensity: float) -> Wave:
        wave = Wave(self.wavelength, (origin_x, self.wave_start_altitude), propagation_direction,
                    self.wave_end_altitude, intensity_at_start=intensity)
        self.waves.append(wave)
        self.waves_to_lifetimes[wave] = self.rng.uniform(*self.wave_lifetime_range)
        logger.debug(f"Added {wave}")
        return wave

    def reset(self):
        self.waves_to_lifetimes.clear()
        self.wave_creation_queue.clear()


def direction_tuple(vector) -> tuple:
    return tuple(float(component) for component in vector)


class SunWaveSource(EMWaveSource):
    """Visible light coming straight down from the top of the atmosphere while the sun is shining."""
    WAVE_INTENSITY = 0.5

    def __init__(self, waves: list[Wave], sun_energy_source: SunEnergySource, wave_start_altitude: float,
                 wave_end_altitude: float, rng: np.random.Generator, **kwargs):
        sunlight_span = SUNLIGHT_SPAN if 'sunlight_span' not in kwargs else kwargs.pop('sunlight_span')
        down = direction_tuple(STRAIGHT_DOWN)
        specs = [
            WaveSourceSpec(-sunlight_span * 0.15, -sunlight_span * 0.15, down),
            WaveSourceSpec(sunlight_span * 0.20, sunlight_span * 0.20, down),
        ]
        super().__init__(waves, VISIBLE_WAVELENGTH, wave_start_altitude, wave_end_altitude, specs, rng, **kwargs)
        self.sun_energy_source = sun_energy_source

    def wave_production_enabled(self) -> bool:
        return self.sun_energy_source.is_shining

    def wave_intensity(self) -> float:
        return self.WAVE_INTENSITY


class GroundWaveSource(EMWaveSource):
    """Infrared radiated by the ground, more intense the warmer the ground is."""
    def __init__(self, waves: list[Wave], ground_layer: GroundLayer, wave_start_altitude: float,
                 wave_end_altitude: float, rng: np.random.Generator, **kwargs):
        sunlight_span = SUNLIGHT_SPAN if 'sunlight_span' not in kwargs else kwargs.pop('sunlight_span')
        specs = [
            WaveSourceSpec(-sunlight_span * 0.32, -sunlight_span * 0.27,
                           direction_tuple(rotate_vector(STRAIGHT_UP, np.pi * 0.08))),
            WaveSourceSpec(-sunlight_span * 0.1, -sunlight_span * 0.05,
                           direction_tuple(rotate_vector(STRAIGHT_UP, -np.pi * 0.1))),
            WaveSourceSpec(sunlight_span * 0.46, sunlight_span * 0.49,
                           direction_tuple(rotate_vector(STRAIGHT_UP, np.pi * 0.075))),
        ]
        super().__init__(waves, INFRARED_WAVELENGTH, wave_start_altitude, wave_end_altitude, specs, rng, **kwargs)
        self.ground_layer = ground_layer

    def wave_production_enabled(self) -> bool:
        # Just above the minimum, so a ground at rest stays dark
        return self.ground_layer.temperature > MINIMUM_EARTH_AT_NIGHT_TEMPERATURE + 1

    def wave_intensity(self) -> float:
        return ground_temperature_to_wave_intensity(self.ground_layer.temperature)


def ground_temperature_to_wave_intensity(temperature: float) -> float:
    intensity = ((temperature - MINIMUM_EARTH_AT_NIGHT_TEMPERATURE)
                 / (MAX_EXPECTED_TEMPERATURE - MINIMUM_EARTH_AT_NIGHT_TEMPERATURE))
    return float(np.clip(intensity, MINIMUM_GROUND_WAVE_INTENSITY, 1.0))
