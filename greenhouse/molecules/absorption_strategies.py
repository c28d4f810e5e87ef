import logging
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_ABSORPTION_PROBABILITY = 0.5
MIN_PHOTON_HOLD_TIME = 1.1  # s
MAX_PHOTON_HOLD_TIME = 1.3  # s


class ExcitationState(Enum):
    IDLE = 'idle'
    ABSORBING = 'absorbing'
    VIBRATING = 'vibrating'
    ROTATING = 'rotating'
    GLOWING = 'glowing'
    EMITTING = 'emitting'
    BREAKING_APART = 'breaking_apart'


class PhotonAbsorptionStrategy:
    """
    Decides whether a molecule absorbs a photon of one wavelength, and what the molecule does with it.

    Each strategy belongs to one molecule and draws from that molecule's random generator.
    """
    excitation_state = ExcitationState.IDLE

    def __init__(self, molecule, absorption_probability: float = DEFAULT_ABSORPTION_PROBABILITY):
        if not 0.0 <= absorption_probability <= 1.0:
            raise ValueError(f"Absorption probability must be within [0, 1]; got {absorption_probability}")
        self.molecule = molecule
        self.absorption_probability = absorption_probability
        self.is_photon_absorbed = False
        self.photon_hold_countdown_time = 0.0

    def query_and_absorb_photon(self, photon) -> bool:
        rng = self.molecule.rng
        absorbed = not self.is_photon_absorbed and rng.random() < self.absorption_probability
        if absorbed:
            self.is_photon_absorbed = True
            self.photon_hold_countdown_time = rng.uniform(MIN_PHOTON_HOLD_TIME, MAX_PHOTON_HOLD_TIME)
        return absorbed

    def step(self, delta_t: float):
        raise NotImplementedError(f"{type(self).__name__} doesn't implement step")

    def reset(self):
        self.is_photon_absorbed = False
        self.photon_hold_countdown_time = 0.0


class NullPhotonAbsorptionStrategy(PhotonAbsorptionStrategy):
    """Held by a molecule that isn't doing anything with a photon."""
    def step(self, delta_t: float):
        pass

    def query_and_absorb_photon(self, photon) -> bool:
        return False


class PhotonHoldStrategy(PhotonAbsorptionStrategy):
    """Keeps the absorbed photon for a while, then re-emits one of the same wavelength."""
    def __init__(self, molecule, absorption_probability: float = DEFAULT_ABSORPTION_PROBABILITY):
        super().__init__(molecule, absorption_probability)
        self.absorbed_wavelength = None

    def query_and_absorb_photon(self, photon) -> bool:
        absorbed = super().query_and_absorb_photon(photon)
        if absorbed:
            self.absorbed_wavelength = photon.wavelength
            self.molecule.excitation_state = self.excitation_state
            self.photon_absorbed()
        return absorbed

    def step(self, delta_t: float):
        self.photon_hold_countdown_time -= delta_t
        if self.photon_hold_countdown_time <= 0:
            self.reemit_photon()

    def photon_absorbed(self):
        pass

    def reemit_photon(self):
        if self.absorbed_wavelength is None:
            raise RuntimeError("A photon can only be re-emitted after one has been absorbed")
        self.molecule.emit_photon(self.absorbed_wavelength)
        self.molecule.active_photon_absorption_strategy = NullPhotonAbsorptionStrategy(self.molecule)
        # Back to IDLE on the molecule's next step
        self.molecule.excitation_state = ExcitationState.EMITTING
        self.is_photon_absorbed = False


class VibrationStrategy(PhotonHoldStrategy):
    excitation_state = ExcitationState.VIBRATING

    def photon_absorbed(self):
        self.molecule.vibrating = True

    def reemit_photon(self):
        super().reemit_photon()
        self.molecule.vibrating = False
        self.molecule.set_vibration(0.0)


class RotationStrategy(PhotonHoldStrategy):
    excitation_state = ExcitationState.ROTATING

    def photon_absorbed(self):
        self.molecule.rotation_direction_clockwise = bool(self.molecule.rng.random() < 0.5)
        self.molecule.rotating = True

    def reemit_photon(self):
        super().reemit_photon()
        self.molecule.rotating = False


class ExcitationStrategy(PhotonHoldStrategy):
    """The molecule glows in a high electronic energy state while it holds the photon."""
    excitation_state = ExcitationState.GLOWING

    def photon_absorbed(self):
        self.molecule.high_electronic_energy_state = True

    def reemit_photon(self):
        super().reemit_photon()
        self.molecule.high_electronic_energy_state = False


class BreakApartStrategy(PhotonAbsorptionStrategy):
    """The molecule splits into smaller molecules on the step after absorbing the photon."""
    excitation_state = ExcitationState.BREAKING_APART

    def query_and_absorb_photon(self, photon) -> bool:
        absorbed = super().query_and_absorb_photon(photon)
        if absorbed:
            self.molecule.excitation_state = self.excitation_state
        return absorbed

    def step(self, delta_t: float):
        self.molecule.break_apart()
        self.molecule.active_photon_absorption_strategy = NullPhotonAbsorptionStrategy(self.molecule)
