import logging
from dataclasses import dataclass

import numpy as np

from ...config import SimulationConfig
from ...constants import STRAIGHT_UP
from ...math_utils import rotate_vector
from ..cloud import Cloud
from ..concentration_model import ConcentrationModel
from ..layers import AtmosphereLayer
from .wave import Wave, TWO_PI
from .wave_sources import SunWaveSource, GroundWaveSource

logger = logging.getLogger(__name__)

# Largest proportion of an infrared wave that the atmosphere can send back to the ground.
MAX_ATMOSPHERIC_INTERACTION_PROPORTION = 0.75

# Proportion of the visible wave reflected by the cloud, chosen for the looks.
VISUAL_CLOUD_REFLECTIVITY = 0.4
GLACIER_REFLECTED_WAVE_INTENSITY = 0.25

WAVES_CLOUD_POSITION = (-16000.0, 20000.0)
WAVES_CLOUD_WIDTH = 18000.0
WAVES_CLOUD_HEIGHT = 4000.0


def concentration_to_attenuation(concentration: float) -> float:
    return MAX_ATMOSPHERIC_INTERACTION_PROPORTION * (-0.84 * concentration ** 2 + 1.66 * concentration)


@dataclass
class WaveAtmosphereInteraction:
    atmosphere_layer: AtmosphereLayer
    source_wave: Wave
    emitted_wave: Wave


def wave_crossing_x(wave: Wave, altitude: float):
    """Horizontal position where the drawn part of the wave crosses `altitude`, or None if it doesn't reach it."""
    start_y = wave.start_point[1]
    end_y = wave.end_altitude
    if not min(start_y, end_y) <= altitude <= max(start_y, end_y) or start_y == end_y:
        return None
    distance = (altitude - start_y) / wave.propagation_direction[1]
    return float(wave.start_point[0] + wave.propagation_direction[0] * distance)


class WavesModel(ConcentrationModel):
    """
    The "Waves" screen: the concentration model with light shown as continuous waves.

    Besides the sun and ground wave sources, waves are reflected by the cloud, sent back to the ground by
    the atmosphere in proportion to the concentration, and reflected by the glacier during the ice age.
    """
    def __init__(self, config: SimulationConfig = None, **kwargs):
        super().__init__(config, **kwargs)

        self.waves: list[Wave] = []
        self.sun_wave_source = SunWaveSource(self.waves, self.sun_energy_source, self.height_of_atmosphere, 0.0,
                                             self.rng, sunlight_span=self.sunlight_span)
        self.ground_wave_source = GroundWaveSource(self.waves, self.ground_layer, 0.0, self.height_of_atmosphere,
                                                   self.rng, sunlight_span=self.sunlight_span)

        # This screen has a single cloud of its own
        self.clouds = [Cloud(WAVES_CLOUD_POSITION, WAVES_CLOUD_WIDTH, WAVES_CLOUD_HEIGHT,
                             sunlight_span=self.sunlight_span)]

        self.cloud_reflected_waves: dict[Wave, Wave] = {}
        self.glacier_reflected_waves: dict[Wave, Wave] = {}
        self.wave_atmosphere_interactions: list[WaveAtmosphereInteraction] = []

        span = self.sunlight_span
        layer_x_ranges = ((4, (-span / 2, -span / 4)),
                          (6, (-span / 4, span / 4)),
                          (3, (span / 4, span)))
        self.atmosphere_layer_x_ranges = [(self.atmosphere_layers[index], x_range)
                                          for index, x_range in layer_x_ranges
                                          if index < len(self.atmosphere_layers)]

    @property
    def cloud_enabled(self) -> bool:
        return self.clouds[0].enabled

    @cloud_enabled.setter
    def cloud_enabled(self, value: bool):
        self.clouds[0].enabled = bool(value)

    def step_model(self, delta_t: float):
        super().step_model(delta_t)

        self.sun_wave_source.step(delta_t)
        self.ground_wave_source.step(delta_t)
        for wave in self.waves:
            wave.step(delta_t)

        self.update_wave_cloud_interactions()
        self.update_wave_atmosphere_interactions()
        self.update_wave_glacier_interactions()

        remaining = [wave for wave in self.waves if not wave.is_completely_propagated]
        if len(remaining) < len(self.waves):
            logger.debug(f"Removed {len(self.waves) - len(remaining)} completely propagated waves")
        self.waves[:] = remaining

    def update_wave_cloud_interactions(self):
        cloud = self.clouds[0]

        for source_wave, reflected_wave in list(self.cloud_reflected_waves.items()):
            if not cloud.enabled or source_wave.start_point[1] < cloud.altitude:
                reflected_wave.is_sourced = False
                del self.cloud_reflected_waves[source_wave]

        if not cloud.enabled:
            for wave in self.waves:
                if wave.has_attenuator(cloud):
                    wave.remove_attenuator(cloud)
            return

        cloud_x, cloud_y = cloud.position
        waves_crossing_the_cloud = [
            wave for wave in self.waves
            if wave.is_visible
            and wave.origin[1] == self.sun_wave_source.wave_start_altitude
            and wave.propagation_direction[1] < 0
            and wave.start_point[1] > cloud_y > wave.end_altitude
            and cloud_x - cloud.width / 2 < wave.start_point[0] < cloud_x + cloud.width / 2
        ]
        for incident_wave in waves_crossing_the_cloud:
            if incident_wave not in self.cloud_reflected_waves:
                angle = -np.pi * 0.1 if incident_wave.origin[0] > cloud_x else np.pi * 0.1
                reflected_wave = Wave(
                    incident_wave.wavelength, (incident_wave.origin[0], cloud_y), rotate_vector(STRAIGHT_UP, angle),
                    self.height_of_atmosphere,
                    intensity_at_start=incident_wave.intensity_at_start * VISUAL_CLOUD_REFLECTIVITY,
                    initial_phase_offset=(incident_wave.phase_at(incident_wave.origin[1] - cloud_y) + np.pi) % TWO_PI
                )
                self.waves.append(reflected_wave)
                self.cloud_reflected_waves[incident_wave] = reflected_wave
            if not incident_wave.has_attenuator(cloud):
                incident_wave.add_attenuator(incident_wave.start_point[1] - cloud_y, VISUAL_CLOUD_REFLECTIVITY, cloud)

    def update_wave_atmosphere_interactions(self):
        concentration = self.concentration
        attenuation = concentration_to_attenuation(concentration)

        for interaction in list(self.wave_atmosphere_interactions):
            source_wave = interaction.source_wave
            layer = interaction.atmosphere_layer
            # The source wave's attenuator is gone once its start point has reached the layer
            if (concentration == 0 or source_wave.start_point[1] > layer.altitude
                    or not source_wave.has_attenuator(layer) or source_wave not in self.waves):
                interaction.emitted_wave.is_sourced = False
                if source_wave.has_attenuator(layer):
                    source_wave.remove_attenuator(layer)
                self.wave_atmosphere_interactions.remove(interaction)
            else:
                source_wave.set_attenuation(layer, attenuation)
                emitted_wave_intensity = source_wave.intensity_at_start * attenuation
                if interaction.emitted_wave.intensity_at_start != emitted_wave_intensity:
                    interaction.emitted_wave.set_intensity_at_start(emitted_wave_intensity)

        interacting_waves = {id(interaction.source_wave) for interaction in self.wave_atmosphere_interactions}
        waves_from_the_ground = [wave for wave in self.waves
                                 if wave.is_infrared and wave.origin[1] == 0 and id(wave) not in interacting_waves]
        for ground_wave in waves_from_the_ground:
            for layer, (min_x, max_x) in self.atmosphere_layer_x_ranges:
                if layer.energy_absorption_proportion <= 0 or ground_wave.has_attenuator(layer):
                    continue
                crossing_x = wave_crossing_x(ground_wave, layer.altitude)
                if crossing_x is None or not min_x <= crossing_x <= max_x:
                    continue

                distance_from_start = (layer.altitude - ground_wave.start_point[1]) / ground_wave.propagation_direction[1]
                distance_from_origin = (layer.altitude - ground_wave.origin[1]) / ground_wave.propagation_direction[1]
                direction = ground_wave.propagation_direction
                emitted_wave = Wave(
                    ground_wave.wavelength, (crossing_x, layer.altitude), (direction[0], -direction[1]), 0.0,
                    intensity_at_start=ground_wave.intensity_at_start * attenuation,
                    initial_phase_offset=(ground_wave.phase_at(distance_from_origin) + np.pi) % TWO_PI
                )
                self.waves.append(emitted_wave)
                ground_wave.add_attenuator(distance_from_start, attenuation, layer)
                self.wave_atmosphere_interactions.append(WaveAtmosphereInteraction(layer, ground_wave, emitted_wave))

    def update_wave_glacier_interactions(self):
        glacier_present = self.is_ice_age and self.ground_layer.albedo > 0

        for source_wave, reflected_wave in list(self.glacier_reflected_waves.items()):
            if not glacier_present or source_wave not in self.waves:
                reflected_wave.is_sourced = False
                del self.glacier_reflected_waves[source_wave]

        if not glacier_present:
            return

        waves_hitting_the_glacier = [
            wave for wave in self.waves
            if wave.is_visible
            and wave.origin[0] > 0
            and wave.origin[1] == self.sun_wave_source.wave_start_altitude
            and wave.propagation_direction[1] < 0
            and wave.end_altitude == 0
        ]
        for incident_wave in waves_hitting_the_glacier:
            if incident_wave not in self.glacier_reflected_waves:
                reflected_wave = Wave(
                    incident_wave.wavelength, (incident_wave.origin[0], 0.0), rotate_vector(STRAIGHT_UP, np.pi * 0.05),
                    self.height_of_atmosphere,
                    intensity_at_start=GLACIER_REFLECTED_WAVE_INTENSITY,
                    initial_phase_offset=(incident_wave.phase_at(self.height_of_atmosphere) + np.pi) % TWO_PI
                )
                self.waves.append(reflected_wave)
                self.glacier_reflected_waves[incident_wave] = reflected_wave

    def reset(self):
        super().reset()
        self.waves.clear()
        self.cloud_reflected_waves.clear()
        self.glacier_reflected_waves.clear()
        self.wave_atmosphere_interactions.clear()
        self.sun_wave_source.reset()
        self.ground_wave_source.reset()
