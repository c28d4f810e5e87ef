import logging
from enum import Enum

from ..config import SimulationConfig
from ..constants import kelvin_to_celsius, kelvin_to_fahrenheit
from .greenhouse_effect_model import GreenhouseEffectModel
from .energy import EMEnergyPacket
from .layers import GroundLayer, AtmosphereLayer
from .sources import SunEnergySource, SpaceEnergySink
from .cloud import Cloud
from .flux_meter import FluxMeter

logger = logging.getLogger(__name__)

# Difference between incoming and outgoing flux below which the planet is in radiative balance (W/m²).
RADIATIVE_BALANCE_THRESHOLD = 5.0


class TemperatureUnits(Enum):
    KELVIN = 'K'
    CELSIUS = '°C'
    FAHRENHEIT = '°F'


class LayersModel(GreenhouseEffectModel):
    """
    The energy model: a sun, a ground layer, a stack of atmosphere layers, clouds and outer space
    exchanging packets of electromagnetic energy.
    """
    def __init__(self, config: SimulationConfig = None, **kwargs):
        super().__init__(config)
        config = self.config
        self.height_of_atmosphere = config.height_of_atmosphere
        self.sunlight_span = config.sunlight_span
        self.number_of_atmosphere_layers = config.number_of_atmosphere_layers \
            if 'number_of_atmosphere_layers' not in kwargs else int(kwargs['number_of_atmosphere_layers'])
        self.minimum_ground_temperature = config.minimum_ground_temperature \
            if 'minimum_ground_temperature' not in kwargs else float(kwargs['minimum_ground_temperature'])
        initial_absorption_proportion = config.initial_atmosphere_layer_absorption_proportion \
            if 'initial_atmosphere_layer_absorption_proportion' not in kwargs \
            else kwargs['initial_atmosphere_layer_absorption_proportion']
        layers_initially_active = config.atmosphere_layers_initially_active \
            if 'atmosphere_layers_initially_active' not in kwargs else kwargs['atmosphere_layers_initially_active']

        self.em_energy_packets: list[EMEnergyPacket] = []

        self.ground_layer = GroundLayer(minimum_temperature=self.minimum_ground_temperature,
                                        initial_albedo=config.ground_albedo,
                                        sunlight_span=self.sunlight_span)
        self.sun_energy_source = SunEnergySource(self.ground_layer.surface_area, self.em_energy_packets,
                                                 altitude=self.height_of_atmosphere)

        # Evenly spaced between the ground and the top of the atmosphere, in ascending order of altitude
        distance_between_layers = self.height_of_atmosphere / (self.number_of_atmosphere_layers + 1)
        self.atmosphere_layers = [
            AtmosphereLayer(distance_between_layers * (i + 1),
                            initially_active=layers_initially_active,
                            initial_energy_absorption_proportion=initial_absorption_proportion,
                            sunlight_span=self.sunlight_span)
            for i in range(self.number_of_atmosphere_layers)
        ]

        self.clouds = [Cloud((spec.x, spec.y), spec.width, spec.height, enabled=spec.enabled,
                             sunlight_span=self.sunlight_span)
                       for spec in config.clouds]
        self.outer_space = SpaceEnergySink(self.height_of_atmosphere)
        self.flux_meter = FluxMeter(config.flux_sensor_altitude, sunlight_span=self.sunlight_span)

        self.temperature_units = TemperatureUnits.KELVIN
        self.model_stepping_time = 0.0
        self.in_radiative_balance = True

        logger.info(f"Created {type(self).__name__} with {self.number_of_atmosphere_layers} atmosphere layers")

    def step_model(self, delta_t: float):
        super().step_model(delta_t)

        # The layers are stepped with a fixed time step; variable steps make their interactions unstable
        model_time_step = self.config.model_time_step
        self.model_stepping_time += delta_t
        while self.model_stepping_time >= model_time_step:
            self.sun_energy_source.produce_energy(model_time_step)

            for packet in self.em_energy_packets:
                packet.step(model_time_step)
            self.flux_meter.measure_energy_packet_flux(self.em_energy_packets, model_time_step)

            self.ground_layer.interact_with_energy(self.em_energy_packets, model_time_step)
            for atmosphere_layer in self.atmosphere_layers:
                atmosphere_layer.interact_with_energy(self.em_energy_packets, model_time_step)
            for cloud in self.clouds:
                cloud.interact_with_energy(self.em_energy_packets, model_time_step)
            self.outer_space.interact_with_energy(self.em_energy_packets, model_time_step)

            self.model_stepping_time -= model_time_step

        self.in_radiative_balance = abs(self.energy_in - self.energy_out) < RADIATIVE_BALANCE_THRESHOLD

    @property
    def energy_in(self) -> float:
        # W/m² arriving from the sun
        return self.sun_energy_source.output_energy_rate()

    @property
    def energy_out(self) -> float:
        # W/m² leaving through the top of the atmosphere
        return self.outer_space.incoming_energy_rate / self.ground_layer.surface_area

    @property
    def surface_temperature_kelvin(self) -> float:
        return self.ground_layer.temperature

    @property
    def surface_temperature_celsius(self) -> float:
        return kelvin_to_celsius(self.ground_layer.temperature)

    @property
    def surface_temperature_fahrenheit(self) -> float:
        return kelvin_to_fahrenheit(self.ground_layer.temperature)

    def surface_temperature(self, units: TemperatureUnits = None) -> float:
        units = self.temperature_units if units is None else units
        if units is TemperatureUnits.CELSIUS:
            return self.surface_temperature_celsius
        if units is TemperatureUnits.FAHRENHEIT:
            return self.surface_temperature_fahrenheit
        return self.surface_temperature_kelvin

    @property
    def active_atmosphere_layers(self) -> list[AtmosphereLayer]:
        return [layer for layer in self.atmosphere_layers if layer.is_active]

    def find_crossed_atmosphere_layer(self, start_altitude: float, end_altitude: float):
        """First active layer met when going from `start_altitude` to `end_altitude`, or None."""
        if start_altitude < end_altitude:
            for layer in self.atmosphere_layers:
                if layer.is_active and start_altitude < layer.altitude <= end_altitude:
                    return layer
        elif start_altitude > end_altitude:
            for layer in reversed(self.atmosphere_layers):
                if layer.is_active and start_altitude > layer.altitude >= end_altitude:
                    return layer
        return None

    def is_infrared_present(self) -> bool:
        return self.ground_layer.temperature > self.ground_layer.minimum_temperature

    def reset(self):
        super().reset()
        self.temperature_units = TemperatureUnits.KELVIN
        self.sun_energy_source.reset()
        self.ground_layer.reset()
        for atmosphere_layer in self.atmosphere_layers:
            atmosphere_layer.reset()
        for cloud in self.clouds:
            cloud.reset()
        self.outer_space.reset()
        self.flux_meter.reset()
        self.em_energy_packets.clear()
        self.model_stepping_time = 0.0
        self.in_radiative_balance = True
        logger.info(f"{type(self).__name__} reset")
