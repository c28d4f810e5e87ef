import logging

import numpy as np

from ..config import SimulationConfig
from ..constants import INFRARED_WAVELENGTH
from ..models.greenhouse_effect_model import GreenhouseEffectModel
from .micro_photon import MicroPhoton
from .molecule import Molecule, PHOTON_EMISSION_SPEED
from .species import PhotonTarget
from .wavelengths import LightSource, EMITTABLE_WAVELENGTHS, light_source_for_wavelength

logger = logging.getLogger(__name__)

# Distances in picometers, times in seconds.
PHOTON_EMISSION_POSITION = (-1350.0, 0.0)
EMITTER_ON_EMISSION_PERIOD = 0.8
EMITTER_OFF_EMISSION_PERIOD = np.inf
INITIAL_COUNTDOWN_WHEN_EMISSION_ENABLED = 0.0

# Frames longer than this are dropped rather than clamped
MAX_FRAME_TIME = 0.2

# Observation window around the target molecule
OBSERVATION_BOUNDS_X = (-1600.0, 1600.0)
OBSERVATION_BOUNDS_Y = (-1100.0, 1100.0)


def is_within_observation_bounds(position) -> bool:
    return (OBSERVATION_BOUNDS_X[0] <= position[0] <= OBSERVATION_BOUNDS_X[1]
            and OBSERVATION_BOUNDS_Y[0] <= position[1] <= OBSERVATION_BOUNDS_Y[1])


class PhotonAbsorptionModel(GreenhouseEffectModel):
    """
    A photon emitter firing photons of one wavelength, straight to the right, at a single target molecule.

    The target can absorb, re-emit or break apart on the photons. After a break apart the fragments replace
    the target in `active_molecules` until the target is restored.
    """
    def __init__(self, config: SimulationConfig = None,
                 initial_photon_target: PhotonTarget = PhotonTarget.SINGLE_CO_MOLECULE):
        super().__init__(config)
        self.initial_photon_target = PhotonTarget(initial_photon_target)

        self.photons: list[MicroPhoton] = []
        self.active_molecules: list[Molecule] = []
        self.target_molecule: Molecule | None = None

        self._photon_target = self.initial_photon_target
        self._emitted_wavelength = INFRARED_WAVELENGTH
        self.photon_emission_period = EMITTER_OFF_EMISSION_PERIOD
        self.photon_emission_countdown_time = EMITTER_OFF_EMISSION_PERIOD

        self.update_active_molecule()
        logger.info(f"Photon absorption model created with target {self.photon_target.value}")

    @property
    def photon_target(self) -> PhotonTarget:
        return self._photon_target

    @photon_target.setter
    def photon_target(self, photon_target: PhotonTarget):
        self._photon_target = PhotonTarget(photon_target)
        self.photons.clear()
        self.update_active_molecule()

    @property
    def emitted_wavelength(self) -> float:
        return self._emitted_wavelength

    @emitted_wavelength.setter
    def emitted_wavelength(self, wavelength: float):
        if wavelength not in EMITTABLE_WAVELENGTHS:
            raise ValueError(f"The emitter can't produce photons of wavelength {wavelength}")
        if wavelength == self._emitted_wavelength:
            return
        self._emitted_wavelength = wavelength
        self.photons.clear()
        if self.photon_emitter_on:
            self.photon_emission_countdown_time = INITIAL_COUNTDOWN_WHEN_EMISSION_ENABLED

    @property
    def light_source(self) -> LightSource:
        return light_source_for_wavelength(self._emitted_wavelength)

    @light_source.setter
    def light_source(self, light_source: LightSource):
        # UNKNOWN raises here, since it has no wavelength
        self.emitted_wavelength = LightSource(light_source).wavelength

    @property
    def photon_emitter_on(self) -> bool:
        return self.photon_emission_period != EMITTER_OFF_EMISSION_PERIOD

    @photon_emitter_on.setter
    def photon_emitter_on(self, on: bool):
        self.set_photon_emission_period(EMITTER_ON_EMISSION_PERIOD if on else EMITTER_OFF_EMISSION_PERIOD)

    def set_photon_emission_period(self, period: float):
        if period == self.photon_emission_period:
            return
        if self.photon_emission_period == np.inf and period != np.inf and not self.photons:
            # First photon of a fresh emission comes out right away
            self.photon_emission_countdown_time = INITIAL_COUNTDOWN_WHEN_EMISSION_ENABLED
        elif period < self.photon_emission_countdown_time or period == np.inf:
            self.photon_emission_countdown_time = period
        self.photon_emission_period = period

    def step(self, delta_t: float):
        if delta_t < 0:
            raise ValueError(f"Time step can't be negative: {delta_t}")
        if delta_t > MAX_FRAME_TIME:
            logger.debug(f"Dropping frame of {delta_t:.3f}s")
            return
        if self.is_playing:
            self.step_model(delta_t * self.time_speed.value)

    def manual_step(self, delta_t: float = None):
        """Step forward by one frame while paused; emission is checked before the photons move."""
        delta_t = self.config.model_time_step if delta_t is None else delta_t
        self.time += delta_t
        self.check_emission_timer(delta_t)
        self.step_photons(delta_t)
        self.step_molecules(delta_t)
        self.remove_departed_photons()

    def single_step(self):
        self.manual_step()

    def step_model(self, delta_t: float):
        super().step_model(delta_t)
        self.step_photons(delta_t)
        self.check_emission_timer(delta_t)
        self.step_molecules(delta_t)
        self.remove_departed_photons()

    def check_emission_timer(self, delta_t: float):
        if self.photon_emission_countdown_time == np.inf:
            return
        self.photon_emission_countdown_time -= delta_t
        if self.photon_emission_countdown_time <= 0:
            self.emit_photon(abs(self.photon_emission_countdown_time))
            self.photon_emission_countdown_time = self.photon_emission_period

    def emit_photon(self, advance_amount: float = 0.0) -> MicroPhoton:
        """Fire a photon to the right, placed as far along as it would have travelled in `advance_amount` seconds."""
        position = (PHOTON_EMISSION_POSITION[0] + PHOTON_EMISSION_SPEED * advance_amount, PHOTON_EMISSION_POSITION[1])
        photon = MicroPhoton(self._emitted_wavelength, position, (PHOTON_EMISSION_SPEED, 0.0))
        self.photons.append(photon)
        return photon

    def step_photons(self, delta_t: float):
        absorbed = []
        for photon in self.photons:
            for molecule in self.active_molecules:
                if molecule.query_absorb_photon(photon):
                    absorbed.append(photon)
                    break
            photon.step(delta_t)
        if absorbed:
            self.photons[:] = [photon for photon in self.photons if not any(photon is a for a in absorbed)]

    def step_molecules(self, delta_t: float):
        for molecule in list(self.active_molecules):
            molecule.step(delta_t)
            if molecule.break_apart_products is not None:
                self.replace_broken_molecule(molecule)

    def replace_broken_molecule(self, molecule: Molecule):
        products = molecule.break_apart_products
        self.active_molecules.remove(molecule)
        if molecule is self.target_molecule:
            self.target_molecule = None
        for product in products:
            product.photons = self.photons
            self.active_molecules.append(product)
        logger.debug(f"{molecule.name} replaced by {', '.join(product.name for product in products)}")

    def remove_departed_photons(self):
        departed = sum(1 for photon in self.photons if not is_within_observation_bounds(photon.position))
        if departed:
            self.photons[:] = [photon for photon in self.photons if is_within_observation_bounds(photon.position)]
            logger.debug(f"Removed {departed} photons that left the observation window")

    def update_active_molecule(self):
        molecule = self._photon_target.create_molecule(self.rng)
        molecule.photons = self.photons
        self.active_molecules = [molecule]
        self.target_molecule = molecule

    def restore_active_molecule(self):
        self.update_active_molecule()

    def has_both_constituent_molecules(self, molecule_a: Molecule, molecule_b: Molecule) -> bool:
        return (any(molecule_a is m for m in self.active_molecules)
                and any(molecule_b is m for m in self.active_molecules))

    @property
    def is_molecule_off_window(self) -> bool:
        return any(not is_within_observation_bounds(molecule.center_of_gravity) for molecule in self.active_molecules)

    def reset(self):
        super().reset()
        self.photons.clear()
        self._emitted_wavelength = INFRARED_WAVELENGTH
        self.photon_emission_period = EMITTER_OFF_EMISSION_PERIOD
        self.photon_emission_countdown_time = EMITTER_OFF_EMISSION_PERIOD
        self._photon_target = self.initial_photon_target
        self.update_active_molecule()
        logger.info("Photon absorption model reset")
