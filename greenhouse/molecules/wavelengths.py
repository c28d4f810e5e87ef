import logging
from enum import Enum

from ..constants import MICRO_WAVELENGTH, INFRARED_WAVELENGTH, VISIBLE_WAVELENGTH, ULTRAVIOLET_WAVELENGTH

logger = logging.getLogger(__name__)


class LightSource(Enum):
    MICROWAVE = 'microwave'
    INFRARED = 'infrared'
    VISIBLE = 'visible'
    ULTRAVIOLET = 'ultraviolet'
    UNKNOWN = 'unknown'

    @property
    def wavelength(self) -> float:
        if self is LightSource.UNKNOWN:
            raise ValueError("The unknown light source has no wavelength")
        return WAVELENGTHS[self]

    @staticmethod
    def lookup(name: str) -> 'LightSource':
        """Light source called `name`, or UNKNOWN when there is none."""
        try:
            return LightSource(name)
        except ValueError:
            logger.warning(f"Unknown light source '{name}'")
            return LightSource.UNKNOWN


WAVELENGTHS = {
    LightSource.MICROWAVE: MICRO_WAVELENGTH,
    LightSource.INFRARED: INFRARED_WAVELENGTH,
    LightSource.VISIBLE: VISIBLE_WAVELENGTH,
    LightSource.ULTRAVIOLET: ULTRAVIOLET_WAVELENGTH,
}

EMITTABLE_WAVELENGTHS = tuple(WAVELENGTHS.values())


def light_source_for_wavelength(wavelength: float) -> LightSource:
    for light_source, light_source_wavelength in WAVELENGTHS.items():
        if wavelength == light_source_wavelength:
            return light_source
    logger.warning(f"No light source emits at wavelength {wavelength}")
    return LightSource.UNKNOWN
