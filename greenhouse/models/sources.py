from ..constants import VISIBLE_WAVELENGTH, HEIGHT_OF_ATMOSPHERE
from .energy import EMEnergyPacket, EnergyDirection, EnergyRateTracker

# Average solar flux reaching the Earth, after accounting for the day/night cycle and latitude (W/m²).
OUTPUT_ENERGY_RATE = 240.0
OUTPUT_PROPORTION_RANGE = (0.5, 2.0)


class SunEnergySource:
    def __init__(self, surface_area_to_illuminate: float, em_energy_packets: list[EMEnergyPacket],
                 altitude: float = HEIGHT_OF_ATMOSPHERE):
        self.surface_area_to_illuminate = surface_area_to_illuminate
        self.em_energy_packets = em_energy_packets
        self.altitude = altitude
        self.is_shining = False
        self._proportion_of_max_energy_output = 1.0
        self.output_energy_rate_tracker = EnergyRateTracker()

    @property
    def proportion_of_max_energy_output(self) -> float:
        return self._proportion_of_max_energy_output

    @proportion_of_max_energy_output.setter
    def proportion_of_max_energy_output(self, value: float):
        low, high = OUTPUT_PROPORTION_RANGE
        if not low <= value <= high:
            raise ValueError(f"Sun output proportion must be within [{low}, {high}]; got {value}")
        self._proportion_of_max_energy_output = float(value)

    def produce_energy(self, delta_t: float):
        if self.is_shining:
            energy_to_produce = (OUTPUT_ENERGY_RATE * self.surface_area_to_illuminate
                                 * self.proportion_of_max_energy_output * delta_t)
            self.em_energy_packets.append(
                EMEnergyPacket(VISIBLE_WAVELENGTH, energy_to_produce, self.altitude, EnergyDirection.DOWN)
            )
            self.output_energy_rate_tracker.add_energy_info(energy_to_produce, delta_t)
        else:
            self.output_energy_rate_tracker.add_energy_info(0.0, delta_t)

    def output_energy_rate(self) -> float:
        # W/m²
        return OUTPUT_ENERGY_RATE * self.proportion_of_max_energy_output if self.is_shining else 0.0

    def reset(self):
        self.is_shining = False
        self._proportion_of_max_energy_output = 1.0
        self.output_energy_rate_tracker.reset()


class SpaceEnergySink:
    """Where the energy radiated out of the top of the atmosphere ends up."""
    def __init__(self, altitude: float = HEIGHT_OF_ATMOSPHERE):
        self.altitude = altitude
        self.incoming_upward_moving_energy_rate_tracker = EnergyRateTracker()

    def interact_with_energy(self, em_energy_packets: list[EMEnergyPacket], delta_t: float):
        energy_from_packets = 0.0
        remaining = []
        for packet in em_energy_packets:
            if packet.altitude >= self.altitude and packet.direction is EnergyDirection.UP:
                energy_from_packets += packet.energy
            else:
                remaining.append(packet)
        em_energy_packets[:] = remaining
        self.incoming_upward_moving_energy_rate_tracker.add_energy_info(energy_from_packets, delta_t)

    @property
    def incoming_energy_rate(self) -> float:
        # W
        return self.incoming_upward_moving_energy_rate_tracker.energy_rate

    def reset(self):
        self.incoming_upward_moving_energy_rate_tracker.reset()
