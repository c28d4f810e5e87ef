import numpy as np

from ..constants import SUNLIGHT_SPAN, LAYER_DEPTH
from .energy import EMEnergyPacket, EnergyDirection, EnergyRateTracker


class FluxMeter:
    """
    A movable sensor that measures the visible and infrared energy crossing its altitude in each direction.

    Energy in the model only has an altitude, so the sensor takes the share of each packet that matches
    its area relative to the whole sunlight span.
    """
    def __init__(self, altitude: float, **kwargs):
        self.sunlight_span = SUNLIGHT_SPAN if 'sunlight_span' not in kwargs else float(kwargs['sunlight_span'])
        self.width = self.sunlight_span * 0.2 if 'width' not in kwargs else float(kwargs['width'])
        self.depth = LAYER_DEPTH
        if self.width > self.sunlight_span:
            raise ValueError(f"Flux sensor width {self.width} is larger than the sunlight span")

        self.initial_position = np.array([0.0, altitude], dtype=np.float64)
        self.position = self.initial_position.copy()
        self.proportion_of_energy_to_absorb = (self.width * self.depth) / (self.sunlight_span * LAYER_DEPTH)

        self.visible_light_down_energy_rate_tracker = EnergyRateTracker()
        self.visible_light_up_energy_rate_tracker = EnergyRateTracker()
        self.infrared_light_down_energy_rate_tracker = EnergyRateTracker()
        self.infrared_light_up_energy_rate_tracker = EnergyRateTracker()

    @property
    def altitude(self) -> float:
        return float(self.position[1])

    @property
    def area(self) -> float:
        return self.width * self.depth

    def move_to(self, x: float, altitude: float):
        self.position = np.array([x, altitude], dtype=np.float64)

    def measure_energy_packet_flux(self, em_energy_packets: list[EMEnergyPacket], delta_t: float):
        visible_down = visible_up = infrared_down = infrared_up = 0.0
        for packet in em_energy_packets:
            if not packet.crossed_altitude(self.altitude):
                continue
            if packet.is_visible:
                if packet.direction is EnergyDirection.DOWN:
                    visible_down += packet.energy
                else:
                    visible_up += packet.energy
            elif packet.direction is EnergyDirection.DOWN:
                infrared_down += packet.energy
            else:
                infrared_up += packet.energy

        share = self.proportion_of_energy_to_absorb
        self.visible_light_down_energy_rate_tracker.add_energy_info(visible_down * share, delta_t)
        self.visible_light_up_energy_rate_tracker.add_energy_info(visible_up * share, delta_t)
        self.infrared_light_down_energy_rate_tracker.add_energy_info(infrared_down * share, delta_t)
        self.infrared_light_up_energy_rate_tracker.add_energy_info(infrared_up * share, delta_t)

    @property
    def readings(self) -> dict[str, float]:
        """Energy rates through the sensor, in W/m²."""
        return {
            'visible_down': self.visible_light_down_energy_rate_tracker.energy_rate / self.area,
            'visible_up': self.visible_light_up_energy_rate_tracker.energy_rate / self.area,
            'infrared_down': self.infrared_light_down_energy_rate_tracker.energy_rate / self.area,
            'infrared_up': self.infrared_light_up_energy_rate_tracker.energy_rate / self.area,
        }

    def reset(self):
        self.position = self.initial_position.copy()
        self.visible_light_down_energy_rate_tracker.reset()
        self.visible_light_up_energy_rate_tracker.reset()
        self.infrared_light_down_energy_rate_tracker.reset()
        self.infrared_light_up_energy_rate_tracker.reset()
