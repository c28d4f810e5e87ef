import logging
from enum import Enum

from ..constants import (SUNLIGHT_SPAN, LAYER_DEPTH, STEFAN_BOLTZMANN, MINIMUM_EARTH_AT_NIGHT_TEMPERATURE,
                         GREEN_MEADOW_ALBEDO, INFRARED_WAVELENGTH)
from .energy import EMEnergyPacket, EnergyDirection
from .materials import Materials

logger = logging.getLogger(__name__)

# Thickness of every layer (m). Thin layers change temperature quickly, which keeps the model responsive.
LAYER_THICKNESS = 3e-7

# Net flux (W/m²) below which a layer is considered to be in balance, and how long that has to last (s).
AT_EQUILIBRIUM_THRESHOLD = 0.004
EQUILIBRATION_TIME = 2.0


class Substance(Enum):
    GLASS = 'glass'
    EARTH = 'earth'

    def load(self) -> dict:
        return Materials.load('substances', self.value)


def check_proportion(value: float, name: str = 'proportion') -> float:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1]; got {value}")
    return float(value)


class EnergyAbsorbingEmittingLayer:
    """
    A horizontal slab that absorbs electromagnetic energy, heats up, and radiates like a black body.

    Temperature follows an explicit Euler update: absorbed energy raises it, energy radiated per the
    Stefan-Boltzmann law lowers it, and it never drops below `minimum_temperature`.
    """
    def __init__(self, altitude: float, **kwargs):
        self.altitude = float(altitude)
        self.substance = Substance.GLASS if 'substance' not in kwargs else Substance(kwargs['substance'])
        self.minimum_temperature = 0.0 if 'minimum_temperature' not in kwargs else float(kwargs['minimum_temperature'])
        self.sunlight_span = SUNLIGHT_SPAN if 'sunlight_span' not in kwargs else float(kwargs['sunlight_span'])
        self.initial_energy_absorption_proportion = check_proportion(
            1.0 if 'initial_energy_absorption_proportion' not in kwargs
            else kwargs['initial_energy_absorption_proportion'], 'Energy absorption proportion')

        material = self.substance.load()
        self.density = float(material['density'])
        self.specific_heat_capacity = float(material['specific_heat_capacity'])
        self.radiation_directions = tuple(EnergyDirection[d.upper()] for d in material['radiation_directions'])

        self.surface_area = self.sunlight_span * LAYER_DEPTH
        self.volume = self.surface_area * LAYER_THICKNESS
        self.mass = self.volume * self.density

        self.temperature = self.minimum_temperature
        self._energy_absorption_proportion = self.initial_energy_absorption_proportion
        self.at_equilibrium = True
        self.at_equilibrium_time = 0.0

    @property
    def heat_capacity(self) -> float:
        # J/K
        return self.mass * self.specific_heat_capacity

    @property
    def energy_absorption_proportion(self) -> float:
        return self._energy_absorption_proportion

    @energy_absorption_proportion.setter
    def energy_absorption_proportion(self, value: float):
        self._energy_absorption_proportion = check_proportion(value, 'Energy absorption proportion')

    @property
    def radiated_flux(self) -> float:
        # W/m², per radiating surface
        return STEFAN_BOLTZMANN * self.temperature ** 4

    def absorb_energy(self, em_energy_packets: list[EMEnergyPacket]) -> float:
        """Absorb energy from the packets that went through this layer, return the amount absorbed (J)."""
        absorbed_energy = 0.0
        for packet in em_energy_packets:
            if packet.crossed_altitude(self.altitude):
                energy_to_absorb = packet.energy * self.energy_absorption_proportion
                packet.energy -= energy_to_absorb
                absorbed_energy += energy_to_absorb
        return absorbed_energy

    def interact_with_energy(self, em_energy_packets: list[EMEnergyPacket], delta_t: float) -> float:
        absorbed_energy = self.absorb_energy(em_energy_packets)
        em_energy_packets[:] = [packet for packet in em_energy_packets if packet.energy > 0]

        # Both terms use the temperature from before this step
        temperature_change_from_absorption = absorbed_energy / self.heat_capacity

        number_of_radiating_surfaces = len(self.radiation_directions)
        radiated_energy = (STEFAN_BOLTZMANN * self.temperature ** 4 * delta_t * self.surface_area
                           * number_of_radiating_surfaces)
        net_temperature_change = temperature_change_from_absorption - radiated_energy / self.heat_capacity

        # Never radiate more than what keeps the layer at its minimum temperature
        if self.temperature + net_temperature_change < self.minimum_temperature:
            net_temperature_change = self.minimum_temperature - self.temperature
            radiated_energy = absorbed_energy - net_temperature_change * self.heat_capacity

        self.temperature += net_temperature_change

        net_flux = abs(absorbed_energy - radiated_energy) / self.surface_area / delta_t if delta_t > 0 else 0.0
        if net_flux < AT_EQUILIBRIUM_THRESHOLD:
            self.at_equilibrium_time = min(self.at_equilibrium_time + delta_t, EQUILIBRATION_TIME)
            self.at_equilibrium = self.at_equilibrium_time >= EQUILIBRATION_TIME
        else:
            self.at_equilibrium_time = 0.0
            self.at_equilibrium = False

        if radiated_energy > 0:
            energy_per_direction = radiated_energy / number_of_radiating_surfaces
            for direction in self.radiation_directions:
                em_energy_packets.append(
                    EMEnergyPacket(INFRARED_WAVELENGTH, energy_per_direction, self.altitude, direction)
                )

        return absorbed_energy

    def reset(self):
        self.temperature = self.minimum_temperature
        self._energy_absorption_proportion = self.initial_energy_absorption_proportion
        self.at_equilibrium = True
        self.at_equilibrium_time = 0.0


class GroundLayer(EnergyAbsorbingEmittingLayer):
    """The surface of the planet. Reflects part of the incoming visible light and absorbs everything else."""
    def __init__(self, **kwargs):
        kwargs['substance'] = Substance.EARTH.value
        kwargs['initial_energy_absorption_proportion'] = 1.0
        if 'minimum_temperature' not in kwargs:
            kwargs['minimum_temperature'] = MINIMUM_EARTH_AT_NIGHT_TEMPERATURE
        self.initial_albedo = check_proportion(
            GREEN_MEADOW_ALBEDO if 'initial_albedo' not in kwargs else kwargs.pop('initial_albedo'), 'Albedo')
        super().__init__(0.0, **kwargs)
        self._albedo = self.initial_albedo

    @property
    def albedo(self) -> float:
        return self._albedo

    @albedo.setter
    def albedo(self, value: float):
        self._albedo = check_proportion(value, 'Albedo')

    def absorb_energy(self, em_energy_packets: list[EMEnergyPacket]) -> float:
        absorbed_energy = 0.0
        for packet in em_energy_packets:
            if packet.direction is EnergyDirection.DOWN and packet.altitude <= self.altitude:
                albedo = self.albedo if packet.is_visible else 0.0
                absorbed_energy += packet.energy * (1 - albedo)
                if albedo > 0:
                    packet.energy *= albedo
                    packet.direction = EnergyDirection.UP
                else:
                    packet.energy = 0.0
        return absorbed_energy

    def reset(self):
        super().reset()
        self._albedo = self.initial_albedo


class AtmosphereLayer(EnergyAbsorbingEmittingLayer):
    """A layer of greenhouse gas. Only infrared energy is absorbed, and only while the layer is active."""
    def __init__(self, altitude: float, **kwargs):
        self.initially_active = True if 'initially_active' not in kwargs else bool(kwargs.pop('initially_active'))
        kwargs['substance'] = Substance.GLASS.value
        super().__init__(altitude, **kwargs)
        self._is_active = self.initially_active

    @property
    def is_active(self) -> bool:
        return self._is_active

    @is_active.setter
    def is_active(self, value: bool):
        if self._is_active and not value:
            # An inactive layer holds no heat
            self.temperature = self.minimum_temperature
            self.at_equilibrium = True
            self.at_equilibrium_time = 0.0
        self._is_active = bool(value)

    def absorb_energy(self, em_energy_packets: list[EMEnergyPacket]) -> float:
        absorbed_energy = 0.0
        for packet in em_energy_packets:
            if packet.is_infrared and packet.crossed_altitude(self.altitude):
                energy_to_absorb = packet.energy * self.energy_absorption_proportion
                packet.energy -= energy_to_absorb
                absorbed_energy += energy_to_absorb
        return absorbed_energy

    def interact_with_energy(self, em_energy_packets: list[EMEnergyPacket], delta_t: float) -> float:
        if not self.is_active:
            return 0.0
        return super().interact_with_energy(em_energy_packets, delta_t)

    def reset(self):
        super().reset()
        self._is_active = self.initially_active
