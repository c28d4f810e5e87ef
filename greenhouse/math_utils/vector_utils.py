import numpy as np
from scipy.spatial.transform import Rotation


def rotate_vector(vector: np.ndarray, angle_rad: float) -> np.ndarray:
    """Rotate a 2D vector (or an array of them) counterclockwise around the origin using quaternions."""
    vector = np.asarray(vector, dtype=np.float64)
    padded = np.concatenate([vector, np.zeros(vector.shape[:-1] + (1,))], axis=-1)
    rotation = Rotation.from_rotvec(angle_rad * np.array([0.0, 0.0, 1.0]))
    return rotation.apply(padded)[..., :2]


def is_unit_vector(vector: np.ndarray, tolerance: float = 1e-6) -> bool:
    return abs(np.linalg.norm(vector) - 1.0) < tolerance


def crossed_altitude(previous_altitude: float, altitude: float, target_altitude: float) -> bool:
    """
    Whether a move from `previous_altitude` to `altitude` went through `target_altitude`.

    Landing exactly on the target counts as crossing it; leaving from it does not.
    """
    return (previous_altitude > target_altitude >= altitude) or (previous_altitude < target_altitude <= altitude)
