import json
import dataclasses
from dataclasses import dataclass, field

import numpy as np

from .constants import (SUNLIGHT_SPAN, HEIGHT_OF_ATMOSPHERE, MAX_DT, MODEL_TIME_STEP,
                        MINIMUM_EARTH_AT_NIGHT_TEMPERATURE, GREEN_MEADOW_ALBEDO)


@dataclass(frozen=True)
class CloudSpec:
    x: float
    y: float
    width: float
    height: float
    enabled: bool = False


# Positions and sizes of the clouds over the landscape, in meters.
DEFAULT_CLOUDS = (
    CloudSpec(-20000.0, 20000.0, 15000.0, 3500.0),
    CloudSpec(24000.0, 25000.0, 18000.0, 3000.0),
    CloudSpec(5000.0, 32000.0, 12000.0, 2500.0),
)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable set of parameters shared by every model of the simulation.

    Attributes:
        seed: Seed of the random generator shared by all components. None means non-reproducible.
        max_dt: Largest frame time accepted by `step`; longer frames are clamped to it (s).
        model_time_step: Fixed sub-step used by the energy model (s).
        sunlight_span: Width of the modeled column of atmosphere (m).
        height_of_atmosphere: Altitude of the top of the atmosphere (m).
        number_of_atmosphere_layers: Number of atmosphere layers, evenly spaced below the top.
        minimum_ground_temperature: Floor of the ground temperature (K).
        initial_atmosphere_layer_absorption_proportion: Initial IR absorption proportion of every layer.
        atmosphere_layers_initially_active: Whether the atmosphere layers start out active.
        sun_photon_creation_rate: Visible photons created per second by the sun.
        ground_photon_rate_scale: Infrared photons per second, per kelvin above the minimum temperature.
        ground_albedo: Initial ground albedo.
        flux_sensor_altitude: Initial altitude of the flux meter sensor (m).
        clouds: Clouds placed over the landscape.
    """
    seed: int | None = None
    max_dt: float = MAX_DT
    model_time_step: float = MODEL_TIME_STEP
    sunlight_span: float = SUNLIGHT_SPAN
    height_of_atmosphere: float = HEIGHT_OF_ATMOSPHERE
    number_of_atmosphere_layers: int = 12
    minimum_ground_temperature: float = MINIMUM_EARTH_AT_NIGHT_TEMPERATURE
    initial_atmosphere_layer_absorption_proportion: float = 0.0
    atmosphere_layers_initially_active: bool = True
    sun_photon_creation_rate: float = 8.0
    ground_photon_rate_scale: float = 0.2
    ground_albedo: float = GREEN_MEADOW_ALBEDO
    flux_sensor_altitude: float = HEIGHT_OF_ATMOSPHERE * 0.3
    clouds: tuple[CloudSpec, ...] = field(default=DEFAULT_CLOUDS)

    def __post_init__(self):
        if self.max_dt <= 0 or self.model_time_step <= 0:
            raise ValueError(f"Time steps must be positive; got max_dt={self.max_dt}, "
                             f"model_time_step={self.model_time_step}.")
        if self.number_of_atmosphere_layers < 0:
            raise ValueError(f"Number of atmosphere layers can't be negative: {self.number_of_atmosphere_layers}")
        if not 0.0 <= self.initial_atmosphere_layer_absorption_proportion <= 1.0:
            raise ValueError("Initial absorption proportion must be within [0, 1]; "
                             f"got {self.initial_atmosphere_layer_absorption_proportion}")
        if not 0.0 <= self.ground_albedo <= 1.0:
            raise ValueError(f"Ground albedo must be within [0, 1]; got {self.ground_albedo}")
        if not 0.0 <= self.flux_sensor_altitude <= self.height_of_atmosphere:
            raise ValueError(f"Flux sensor altitude {self.flux_sensor_altitude} is outside the atmosphere.")

    def replace(self, **changes) -> 'SimulationConfig':
        return dataclasses.replace(self, **changes)

    def make_rng(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)

    @staticmethod
    def from_json(config_file: str) -> 'SimulationConfig':
        """Load a configuration whose values override the defaults from a JSON file."""
        with open(config_file, 'r') as f:
            data = json.load(f)

        known = {f.name for f in dataclasses.fields(SimulationConfig)}
        for key in data:
            if key not in known:
                raise KeyError(f"Unsupported configuration key: {key}")

        if 'clouds' in data:
            data['clouds'] = tuple(CloudSpec(**cloud) for cloud in data['clouds'])
        return SimulationConfig(**data)
