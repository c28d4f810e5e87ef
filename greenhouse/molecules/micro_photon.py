import numpy as np

from .wavelengths import EMITTABLE_WAVELENGTHS


class MicroPhoton:
    """A photon at molecule scale; position in picometers, velocity in picometers per second."""
    def __init__(self, wavelength: float, position=(0.0, 0.0), velocity=(0.0, 0.0)):
        if wavelength not in EMITTABLE_WAVELENGTHS:
            raise ValueError(f"Unsupported photon wavelength: {wavelength}")
        self.wavelength = wavelength
        self.position = np.array(position, dtype=np.float64)
        self.velocity = np.array(velocity, dtype=np.float64)

    def set_velocity(self, vx: float, vy: float):
        self.velocity = np.array([vx, vy], dtype=np.float64)

    def step(self, delta_t: float):
        self.position = self.position + self.velocity * delta_t

    def __repr__(self):
        return f"MicroPhoton(wavelength={self.wavelength}, position={self.position.tolist()})"
