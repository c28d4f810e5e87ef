import numpy as np
from enum import Enum

from ..config import SimulationConfig
from ..constants import GREEN_MEADOW_ALBEDO, PARTIALLY_GLACIATED_LAND_ALBEDO
from .layers import check_proportion
from .layers_model import LayersModel

# Scale height of the Earth's atmosphere (m), used in the barometric formula.
SCALE_HEIGHT_OF_ATMOSPHERE = 8400.0

# Absorption proportion at sea level for a concentration of 1. Tuned so that the maximum concentration
# equilibrates near 295 K.
SEA_LEVEL_ABSORPTION_FACTOR = 0.85

DEFAULT_CONCENTRATION = 0.5


class ConcentrationControlMode(Enum):
    BY_VALUE = 'by_value'
    BY_DATE = 'by_date'


class ConcentrationDate(Enum):
    ICE_AGE = 0.625
    SEVENTEEN_FIFTY = 0.7147
    NINETEEN_FIFTY = 0.7182
    TWENTY_TWENTY = 0.7446

    @property
    def concentration(self) -> float:
        return self.value


def concentration_to_absorption_proportion(concentration: float, altitude: float) -> float:
    return SEA_LEVEL_ABSORPTION_FACTOR * concentration * float(np.exp(-altitude / SCALE_HEIGHT_OF_ATMOSPHERE))


class ConcentrationModel(LayersModel):
    """
    Layers model whose atmosphere absorption follows a single greenhouse gas concentration, set either
    directly or by picking a date in the Earth's history.
    """
    def __init__(self, config: SimulationConfig = None, **kwargs):
        super().__init__(config, **kwargs)
        self._concentration_control_mode = ConcentrationControlMode.BY_VALUE
        self._date = ConcentrationDate.SEVENTEEN_FIFTY
        self._manually_controlled_concentration = DEFAULT_CONCENTRATION
        self.update_layer_absorption()

    @property
    def concentration(self) -> float:
        if self._concentration_control_mode is ConcentrationControlMode.BY_VALUE:
            return self._manually_controlled_concentration
        return self._date.concentration

    @property
    def manually_controlled_concentration(self) -> float:
        return self._manually_controlled_concentration

    @manually_controlled_concentration.setter
    def manually_controlled_concentration(self, value: float):
        self._manually_controlled_concentration = check_proportion(value, 'Concentration')
        self.update_layer_absorption()

    @property
    def concentration_control_mode(self) -> ConcentrationControlMode:
        return self._concentration_control_mode

    @concentration_control_mode.setter
    def concentration_control_mode(self, mode: ConcentrationControlMode):
        self._concentration_control_mode = ConcentrationControlMode(mode)
        self.update_layer_absorption()

    @property
    def date(self) -> ConcentrationDate:
        return self._date

    @date.setter
    def date(self, date: ConcentrationDate):
        self._date = ConcentrationDate(date)
        self.update_layer_absorption()

    @property
    def is_ice_age(self) -> bool:
        return (self._concentration_control_mode is ConcentrationControlMode.BY_DATE
                and self._date is ConcentrationDate.ICE_AGE)

    def update_layer_absorption(self):
        """Push the current concentration to the layers, higher layers absorbing less, and set the matching albedo."""
        concentration = self.concentration
        for layer in self.atmosphere_layers:
            layer.energy_absorption_proportion = concentration_to_absorption_proportion(concentration, layer.altitude)
        self.ground_layer.albedo = PARTIALLY_GLACIATED_LAND_ALBEDO if self.is_ice_age else GREEN_MEADOW_ALBEDO

    def reset(self):
        super().reset()
        self._concentration_control_mode = ConcentrationControlMode.BY_VALUE
        self._date = ConcentrationDate.SEVENTEEN_FIFTY
        self._manually_controlled_concentration = DEFAULT_CONCENTRATION
        self.update_layer_absorption()
