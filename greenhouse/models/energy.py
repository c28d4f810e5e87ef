from enum import Enum

from ..constants import SPEED_OF_LIGHT, VISIBLE_WAVELENGTH, INFRARED_WAVELENGTH
from ..math_utils import crossed_altitude

# Period over which energy rates are averaged (s).
DEFAULT_ACCUMULATION_PERIOD = 1.0

# Energy rates are rounded so that floating point noise doesn't show up in the readings.
DECIMAL_PLACES = 1


class EnergyDirection(Enum):
    UP = 1
    DOWN = -1

    @property
    def opposite(self) -> 'EnergyDirection':
        return EnergyDirection.DOWN if self is EnergyDirection.UP else EnergyDirection.UP


class EMEnergyPacket:
    """
    A quantity of electromagnetic energy moving vertically through the atmosphere.

    Only the altitude is modeled; the packet spreads over the whole width of the sunlight span.
    """
    def __init__(self, wavelength: float, energy: float, initial_altitude: float, direction: EnergyDirection):
        self.wavelength = wavelength
        self.energy = energy
        self.altitude = initial_altitude
        self.previous_altitude = initial_altitude
        self.direction = direction

    @property
    def is_visible(self) -> bool:
        return self.wavelength == VISIBLE_WAVELENGTH

    @property
    def is_infrared(self) -> bool:
        return self.wavelength == INFRARED_WAVELENGTH

    def step(self, delta_t: float):
        self.previous_altitude = self.altitude
        self.altitude += self.direction.value * SPEED_OF_LIGHT * delta_t

    def crossed_altitude(self, altitude: float) -> bool:
        return crossed_altitude(self.previous_altitude, self.altitude, altitude)

    def __repr__(self):
        return (f"EMEnergyPacket(wavelength={self.wavelength}, energy={self.energy:.3e}, "
                f"altitude={self.altitude:.1f}, direction={self.direction.name})")


class EnergyRateTracker:
    """
    Moving-window average of the energy flowing through something, in watts.

    Entries older than the accumulation period are dropped as new ones come in.
    """
    def __init__(self, accumulation_period: float = DEFAULT_ACCUMULATION_PERIOD):
        self.accumulation_period = accumulation_period
        self.energy_info_queue: list[tuple[float, float]] = []  # (dt, energy)
        self.energy_rate = 0.0

    def add_energy_info(self, energy: float, delta_t: float):
        self.energy_info_queue.append((delta_t, energy))

        total_energy = 0.0
        total_time = 0.0
        # Newest to oldest
        for i in range(len(self.energy_info_queue) - 1, -1, -1):
            dt, entry_energy = self.energy_info_queue[i]
            if total_time + dt <= self.accumulation_period:
                total_energy += entry_energy
                total_time += dt
            else:
                del self.energy_info_queue[:i + 1]
                break

        self.energy_rate = round(total_energy / total_time, DECIMAL_PLACES) if total_time > 0 else 0.0

    def reset(self):
        self.energy_info_queue.clear()
        self.energy_rate = 0.0
