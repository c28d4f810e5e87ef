import numpy as np

from ..constants import SUNLIGHT_SPAN
from .energy import EMEnergyPacket


class Cloud:
    """
    An elliptical cloud that reflects part of the light crossing its altitude.

    With the default reflectivities only visible light coming from above is reflected; infrared goes through.
    """
    def __init__(self, position, width: float, height: float, enabled: bool = False, **kwargs):
        self.sunlight_span = SUNLIGHT_SPAN if 'sunlight_span' not in kwargs else float(kwargs['sunlight_span'])
        if width > self.sunlight_span:
            raise ValueError(f"Cloud width {width} can't exceed the sunlight span {self.sunlight_span}")

        self.position = np.array(position, dtype=np.float64)
        self.width = float(width)
        self.height = float(height)
        self.initially_enabled = enabled
        self.enabled = enabled

        self.top_visible_light_reflectivity = 0.08 if 'top_visible_light_reflectivity' not in kwargs \
            else float(kwargs['top_visible_light_reflectivity'])
        self.bottom_visible_light_reflectivity = 0.0 if 'bottom_visible_light_reflectivity' not in kwargs \
            else float(kwargs['bottom_visible_light_reflectivity'])
        self.top_infrared_light_reflectivity = 0.0 if 'top_infrared_light_reflectivity' not in kwargs \
            else float(kwargs['top_infrared_light_reflectivity'])
        self.bottom_infrared_light_reflectivity = 0.0 if 'bottom_infrared_light_reflectivity' not in kwargs \
            else float(kwargs['bottom_infrared_light_reflectivity'])
        for reflectivity in (self.top_visible_light_reflectivity, self.bottom_visible_light_reflectivity,
                             self.top_infrared_light_reflectivity, self.bottom_infrared_light_reflectivity):
            if not 0.0 <= reflectivity <= 1.0:
                raise ValueError(f"Cloud reflectivity must be within [0, 1]; got {reflectivity}")

    @property
    def altitude(self) -> float:
        return float(self.position[1])

    def contains_point(self, point) -> bool:
        dx = (point[0] - self.position[0]) / (self.width / 2)
        dy = (point[1] - self.position[1]) / (self.height / 2)
        return dx ** 2 + dy ** 2 <= 1.0

    def interact_with_energy(self, em_energy_packets: list[EMEnergyPacket], delta_t: float):
        if not self.enabled:
            return

        sunlight_span_width_proportion = self.width / self.sunlight_span
        altitude = self.altitude
        reflected_packets = []
        for packet in em_energy_packets:
            if packet.previous_altitude > altitude >= packet.altitude:
                reflectivity = self.top_visible_light_reflectivity if packet.is_visible \
                    else self.top_infrared_light_reflectivity
            elif packet.previous_altitude < altitude <= packet.altitude:
                reflectivity = self.bottom_visible_light_reflectivity if packet.is_visible \
                    else self.bottom_infrared_light_reflectivity
            else:
                continue

            reflected_energy = packet.energy * reflectivity * sunlight_span_width_proportion
            if reflected_energy > 0:
                packet.energy -= reflected_energy
                reflected_packets.append(
                    EMEnergyPacket(packet.wavelength, reflected_energy, altitude, packet.direction.opposite)
                )
        em_energy_packets.extend(reflected_packets)

    def reset(self):
        self.enabled = self.initially_enabled
