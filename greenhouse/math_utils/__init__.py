from .vector_utils import rotate_vector, is_unit_vector, crossed_altitude
