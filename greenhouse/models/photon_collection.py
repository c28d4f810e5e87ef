import logging

import numpy as np

from ..constants import SUNLIGHT_SPAN, HEIGHT_OF_ATMOSPHERE, VISIBLE_WAVELENGTH, INFRARED_WAVELENGTH
from ..math_utils import rotate_vector
from .photon import Photon
from .layers import GroundLayer, AtmosphereLayer
from .sources import SunEnergySource

logger = logging.getLogger(__name__)

# Maximum deviation from vertical of the infrared photons leaving the ground is half of this angle.
GROUND_PHOTON_ANGLE_SPREAD = np.pi / 8


class PhotonCollection:
    """
    The live photons of the discrete-photon screens.

    Creates visible photons from the sun and infrared photons from the warm ground, moves them, turns
    infrared photons around at the active atmosphere layers, and removes the ones that leave the atmosphere.
    The atmosphere layers must be in ascending order of altitude.
    """
    def __init__(self, sun_energy_source: SunEnergySource, ground_layer: GroundLayer,
                 atmosphere_layers: list[AtmosphereLayer], rng: np.random.Generator, **kwargs):
        altitudes = [layer.altitude for layer in atmosphere_layers]
        if any(a >= b for a, b in zip(altitudes, altitudes[1:])):
            raise ValueError("Atmosphere layers must be in order of ascending altitude")

        self.sun_energy_source = sun_energy_source
        self.ground_layer = ground_layer
        self.atmosphere_layers = atmosphere_layers
        self.rng = rng

        self.sunlight_span = SUNLIGHT_SPAN if 'sunlight_span' not in kwargs else float(kwargs['sunlight_span'])
        self.height_of_atmosphere = HEIGHT_OF_ATMOSPHERE if 'height_of_atmosphere' not in kwargs \
            else float(kwargs['height_of_atmosphere'])
        self.sun_photon_creation_rate = 8.0 if 'sun_photon_creation_rate' not in kwargs \
            else float(kwargs['sun_photon_creation_rate'])
        self.ground_photon_rate_scale = 0.2 if 'ground_photon_rate_scale' not in kwargs \
            else float(kwargs['ground_photon_rate_scale'])
        if self.sun_photon_creation_rate <= 0:
            raise ValueError(f"Sun photon creation rate must be positive: {self.sun_photon_creation_rate}")

        self.photons: list[Photon] = []
        self.photon_creation_countdown = 0.0
        self.ground_photon_production_rate = 0.0
        self.ground_photon_production_time_accumulator = 0.0

    @property
    def count(self) -> int:
        return len(self.photons)

    @property
    def visible_photons(self) -> list[Photon]:
        return [photon for photon in self.photons if photon.is_visible]

    @property
    def infrared_photons(self) -> list[Photon]:
        return [photon for photon in self.photons if photon.is_infrared]

    def add_photon(self, photon: Photon):
        self.photons.append(photon)

    def ground_temperature_to_photon_production_rate(self, ground_temperature: float) -> float:
        """Infrared photons per second leaving the ground; none at or below its minimum temperature."""
        excess_temperature = ground_temperature - self.ground_layer.minimum_temperature
        if excess_temperature <= 0:
            return 0.0
        return excess_temperature * self.ground_photon_rate_scale

    def step(self, delta_t: float):
        if self.sun_energy_source.is_shining:
            self.photon_creation_countdown -= delta_t
            while self.photon_creation_countdown <= 0:
                self.create_sun_photon()
                self.photon_creation_countdown += 1 / self.sun_photon_creation_rate

        self.ground_photon_production_rate = self.ground_temperature_to_photon_production_rate(
            self.ground_layer.temperature
        )
        if self.ground_photon_production_rate > 0:
            self.ground_photon_production_time_accumulator += delta_t
            emission_interval = 1 / self.ground_photon_production_rate
            while self.ground_photon_production_time_accumulator >= emission_interval:
                self.create_ground_photon()
                self.ground_photon_production_time_accumulator -= emission_interval
        else:
            self.ground_photon_production_time_accumulator = 0.0

        for photon in self.photons:
            photon.step(delta_t)
            if photon.is_infrared and photon.velocity[1] > 0:
                self.check_for_layer_reversal(photon)

        self.remove_departed_photons()

    def create_sun_photon(self):
        x = -self.sunlight_span / 2 + self.rng.random() * self.sunlight_span
        self.photons.append(Photon(np.array([x, self.height_of_atmosphere]), VISIBLE_WAVELENGTH,
                                   velocity=np.array([0.0, -Photon.SPEED])))

    def create_ground_photon(self):
        x = self.rng.uniform(-self.sunlight_span / 2, self.sunlight_span / 2)
        jitter = (self.rng.random() - 0.5) * GROUND_PHOTON_ANGLE_SPREAD
        velocity = rotate_vector(np.array([0.0, Photon.SPEED]), jitter)
        self.photons.append(Photon(np.array([x, 0.0]), INFRARED_WAVELENGTH, velocity=velocity))

    def check_for_layer_reversal(self, photon: Photon):
        """
        Turn an upward infrared photon around, with the layer's absorption proportion as probability, when
        it went through an active layer during the last step. One random draw per layer crossed.
        """
        pre_move_y = photon.previous_position[1]
        post_move_y = photon.position[1]
        for layer in self.atmosphere_layers:
            if layer.altitude > post_move_y:
                break
            if layer.is_active and pre_move_y <= layer.altitude < post_move_y:
                if self.rng.random() < layer.energy_absorption_proportion:
                    photon.velocity = np.array([photon.velocity[0], -photon.velocity[1]])
                    break

    def remove_departed_photons(self):
        remaining = []
        for photon in self.photons:
            leaving_top = photon.position[1] >= self.height_of_atmosphere and photon.velocity[1] > 0
            reached_ground = photon.position[1] < 0 and photon.velocity[1] < 0
            if not (leaving_top or reached_ground):
                remaining.append(photon)
        removed = len(self.photons) - len(remaining)
        if removed:
            logger.debug(f"Removed {removed} photons, {len(remaining)} remaining")
        self.photons[:] = remaining

    def reset(self):
        self.photons.clear()
        self.photon_creation_countdown = 0.0
        self.ground_photon_production_rate = 0.0
        self.ground_photon_production_time_accumulator = 0.0
