import numpy as np
from scipy import constants

# Model-wide physical constants. Distances are in meters, times in seconds, energies in joules.

# Width of the sunlight beam; every layer is SUNLIGHT_SPAN wide and 1 m deep.
SUNLIGHT_SPAN = 85000.0
LAYER_DEPTH = 1.0

HEIGHT_OF_ATMOSPHERE = 50000.0

# Deliberately slow so that the light can be seen crossing the atmosphere.
SPEED_OF_LIGHT = 8000.0

STEFAN_BOLTZMANN = constants.Stefan_Boltzmann

MICRO_WAVELENGTH = 0.2
INFRARED_WAVELENGTH = 850e-9
VISIBLE_WAVELENGTH = 580e-9
ULTRAVIOLET_WAVELENGTH = 100e-9

STRAIGHT_UP = np.array([0.0, 1.0])
STRAIGHT_DOWN = np.array([0.0, -1.0])

MAX_DT = 0.1
MODEL_TIME_STEP = 1 / 60

MINIMUM_EARTH_AT_NIGHT_TEMPERATURE = 245.0

GREEN_MEADOW_ALBEDO = 0.2
PARTIALLY_GLACIATED_LAND_ALBEDO = 0.225


def kelvin_to_celsius(temperature):
    return temperature - constants.zero_Celsius

def kelvin_to_fahrenheit(temperature):
    return kelvin_to_celsius(temperature) * 9 / 5 + 32
