import numpy as np

from ..constants import SPEED_OF_LIGHT, VISIBLE_WAVELENGTH, INFRARED_WAVELENGTH


class Photon:
    """A single light quantum travelling in the plane of the atmosphere."""
    SPEED = SPEED_OF_LIGHT

    def __init__(self, position: np.ndarray, wavelength: float, velocity: np.ndarray = None):
        if wavelength not in (VISIBLE_WAVELENGTH, INFRARED_WAVELENGTH):
            raise ValueError(f"Unsupported photon wavelength: {wavelength}")
        self.position = np.array(position, dtype=np.float64)
        self.previous_position = self.position.copy()
        self.velocity = np.zeros(2, dtype=np.float64) if velocity is None else np.array(velocity, dtype=np.float64)
        self.wavelength = wavelength

    @property
    def is_visible(self) -> bool:
        return self.wavelength == VISIBLE_WAVELENGTH

    @property
    def is_infrared(self) -> bool:
        return self.wavelength == INFRARED_WAVELENGTH

    def step(self, delta_t: float):
        self.previous_position = self.position.copy()
        self.position = self.position + self.velocity * delta_t

    def reset_previous_position(self):
        self.previous_position = self.position.copy()

    def __repr__(self):
        kind = 'visible' if self.is_visible else 'infrared'
        return f"Photon({kind}, position={self.position.tolist()}, velocity={self.velocity.tolist()})"
