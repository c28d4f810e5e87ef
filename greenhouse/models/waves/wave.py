import numpy as np

from ...constants import SPEED_OF_LIGHT, VISIBLE_WAVELENGTH, INFRARED_WAVELENGTH
from ...math_utils import is_unit_vector

TWO_PI = 2 * np.pi
PHASE_RATE = -np.pi  # rad/s

# Wavelengths used to draw the waves (m); the real ones are far too short to see at this scale.
REAL_TO_RENDERING_WAVELENGTH = {
    VISIBLE_WAVELENGTH: 8000.0,
    INFRARED_WAVELENGTH: 12000.0,
}


class WaveAttenuator:
    """Reduction of a wave's intensity caused by something the wave goes through."""
    def __init__(self, attenuation: float, distance_from_start: float):
        self.attenuation = attenuation
        self.distance_from_start = distance_from_start

    def __repr__(self):
        return f"WaveAttenuator(attenuation={self.attenuation}, distance_from_start={self.distance_from_start})"


def check_attenuation(attenuation: float) -> float:
    if not 0.0 <= attenuation <= 1.0:
        raise ValueError(f"Attenuation must be within [0, 1]; got {attenuation}")
    return float(attenuation)


def check_intensity(intensity: float) -> float:
    if not 0.0 < intensity <= 1.0:
        raise ValueError(f"Intensity must be within (0, 1]; got {intensity}")
    return float(intensity)


class Wave:
    """
    A segment of an electromagnetic wave moving in a straight line from its origin towards a limiting altitude.

    While the wave is sourced it stays attached to its origin and grows in length; once it is no longer
    sourced its start point travels along the propagation direction. Its length never reaches beyond
    `propagation_limit`.

    Intensity is `intensity_at_start` at the start point and drops at every attenuator further along the
    wave. Attenuators are keyed by the model element (a layer, a cloud) that causes them.
    """
    def __init__(self, wavelength: float, origin, propagation_direction, propagation_limit: float, **kwargs):
        intensity_at_start = 1.0 if 'intensity_at_start' not in kwargs else float(kwargs['intensity_at_start'])
        initial_phase_offset = 0.0 if 'initial_phase_offset' not in kwargs else float(kwargs['initial_phase_offset'])

        origin = np.array(origin, dtype=np.float64)
        propagation_direction = np.array(propagation_direction, dtype=np.float64)
        if not 0.0 <= initial_phase_offset <= TWO_PI:
            raise ValueError(f"Initial phase offset must be within [0, 2π]; got {initial_phase_offset}")
        if not is_unit_vector(propagation_direction):
            raise ValueError(f"Propagation direction must be a unit vector; got {propagation_direction}")
        if propagation_direction[1] == 0:
            raise ValueError("Fully horizontal waves are not supported")
        if np.sign(propagation_direction[1]) != np.sign(propagation_limit - origin[1]):
            raise ValueError(f"Propagation limit {propagation_limit} is on the wrong side of the origin "
                             f"for direction {propagation_direction}")
        if wavelength not in REAL_TO_RENDERING_WAVELENGTH:
            raise ValueError(f"Unsupported wave wavelength: {wavelength}")
        check_intensity(intensity_at_start)

        self.wavelength = wavelength
        self.origin = origin
        self.propagation_direction = propagation_direction
        self.propagation_limit = float(propagation_limit)
        self.start_point = origin.copy()
        self.length = 0.0
        self.is_sourced = True
        self.existence_time = 0.0
        self.phase_offset_at_origin = initial_phase_offset
        self.intensity_at_start = intensity_at_start
        self.rendering_wavelength = REAL_TO_RENDERING_WAVELENGTH[wavelength]
        self.attenuators: dict[object, WaveAttenuator] = {}

    @property
    def is_visible(self) -> bool:
        return self.wavelength == VISIBLE_WAVELENGTH

    @property
    def is_infrared(self) -> bool:
        return self.wavelength == INFRARED_WAVELENGTH

    def step(self, delta_t: float):
        propagation_distance = SPEED_OF_LIGHT * delta_t

        if self.is_sourced:
            self.length += propagation_distance
        else:
            dy = self.propagation_direction[1] * propagation_distance
            remaining_dy = self.propagation_limit - self.start_point[1]
            if abs(dy) >= abs(remaining_dy):
                y = self.propagation_limit
            else:
                y = self.start_point[1] + dy
            self.start_point = np.array([self.start_point[0] + self.propagation_direction[0] * propagation_distance, y])
            for attenuator in self.attenuators.values():
                attenuator.distance_from_start -= propagation_distance

        self.length = min(self.length, (self.propagation_limit - self.start_point[1]) / self.propagation_direction[1])

        # Attenuators that the start point went past are folded into the intensity at the start
        for model_element, attenuator in list(self.attenuators.items()):
            if attenuator.distance_from_start <= 0:
                self.remove_attenuator(model_element)
                self.intensity_at_start *= 1 - attenuator.attenuation

        self.phase_offset_at_origin += PHASE_RATE * delta_t
        if self.phase_offset_at_origin >= TWO_PI:
            self.phase_offset_at_origin -= TWO_PI
        elif self.phase_offset_at_origin < 0:
            self.phase_offset_at_origin += TWO_PI

        self.existence_time += delta_t

    @property
    def end_altitude(self) -> float:
        return float(self.start_point[1] + self.length * self.propagation_direction[1])

    @property
    def end_point(self) -> np.ndarray:
        return self.start_point + self.propagation_direction * self.length

    @property
    def is_completely_propagated(self) -> bool:
        return self.start_point[1] == self.propagation_limit

    def intensity_at(self, distance_from_start: float) -> float:
        intensity = self.intensity_at_start
        for attenuator in self.sorted_attenuators():
            if attenuator.distance_from_start < distance_from_start:
                intensity *= 1 - attenuator.attenuation
        return intensity

    def set_intensity_at_start(self, intensity: float):
        self.intensity_at_start = check_intensity(intensity)

    def add_attenuator(self, distance_from_start: float, attenuation: float, model_element):
        check_attenuation(attenuation)
        if model_element in self.attenuators:
            raise ValueError(f"{model_element!r} already has an attenuator on this wave")
        self.attenuators[model_element] = WaveAttenuator(attenuation, distance_from_start)

    def remove_attenuator(self, model_element):
        if model_element not in self.attenuators:
            raise KeyError(f"No attenuator on this wave for {model_element!r}")
        del self.attenuators[model_element]

    def has_attenuator(self, model_element) -> bool:
        return model_element in self.attenuators

    def set_attenuation(self, model_element, attenuation: float):
        if model_element not in self.attenuators:
            raise KeyError(f"No attenuator on this wave for {model_element!r}")
        self.attenuators[model_element].attenuation = check_attenuation(attenuation)

    def sorted_attenuators(self) -> list[WaveAttenuator]:
        return sorted(self.attenuators.values(), key=lambda attenuator: attenuator.distance_from_start)

    def phase_at(self, distance_from_origin: float) -> float:
        return (self.phase_offset_at_origin + distance_from_origin / self.rendering_wavelength * TWO_PI) % TWO_PI

    def __repr__(self):
        kind = 'visible' if self.is_visible else 'infrared'
        return (f"Wave({kind}, start={self.start_point.tolist()}, length={self.length:.1f}, "
                f"sourced={self.is_sourced})")
