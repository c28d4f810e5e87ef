import logging
from collections import deque
from enum import Enum

import numpy as np

from ..math_utils import rotate_vector
from .absorption_strategies import ExcitationState, PhotonAbsorptionStrategy, NullPhotonAbsorptionStrategy
from .atoms import Atom, AtomicBond
from .micro_photon import MicroPhoton

logger = logging.getLogger(__name__)

# Distances in picometers, times in seconds.
PHOTON_EMISSION_SPEED = 3000.0
PHOTON_ABSORPTION_DISTANCE = 100.0
VIBRATION_FREQUENCY = 5.0
ROTATION_RATE = 1.1  # rev/s
ABSORPTION_HYSTERESIS_TIME = 0.2
PASS_THROUGH_PHOTON_LIST_SIZE = 10

# Re-emitted photons leave along one of the four axes or one of the four diagonals.
EMISSION_ANGLES = tuple(np.pi / 4 * i for i in range(8))


class Geometry(Enum):
    LINEAR = 'linear'
    BENT = 'bent'
    TETRAHEDRAL = 'tetrahedral'
    DIATOMIC = 'diatomic'
    MONATOMIC = 'monatomic'


class MoleculeKind(Enum):
    CO = 'CO'
    N2 = 'N2'
    O2 = 'O2'
    CO2 = 'CO2'
    CH4 = 'CH4'
    H2O = 'H2O'
    NO2 = 'NO2'
    O3 = 'O3'
    NO = 'NO'
    O = 'O'
    UNKNOWN = 'unknown'

    @staticmethod
    def lookup(formula: str) -> 'MoleculeKind':
        """Kind of molecule with the given formula, or UNKNOWN when there is none."""
        try:
            return MoleculeKind(formula)
        except ValueError:
            logger.warning(f"Unknown molecule '{formula}'")
            return MoleculeKind.UNKNOWN


class Molecule:
    """
    A gas molecule: atoms held at fixed offsets from the center of gravity, moved by vibration and rotation.

    Photons that come close enough may be absorbed, depending on the strategy registered for their wavelength.
    The molecule goes through the excitation states while it holds a photon, and ends up either re-emitting
    it or breaking apart. After a break apart `break_apart_products` holds the molecules that replace this one.
    """
    kind = MoleculeKind.UNKNOWN
    geometry = Geometry.MONATOMIC

    def __init__(self, rng: np.random.Generator, position=(0.0, 0.0)):
        self.rng = rng
        self.initial_position = np.array(position, dtype=np.float64)
        self.center_of_gravity = self.initial_position.copy()
        self.velocity = np.zeros(2)

        self.atoms: list[Atom] = []
        self.atomic_bonds: list[AtomicBond] = []
        self.atom_cog_offsets: dict[int, np.ndarray] = {}
        self.absorption_strategies: dict[float, PhotonAbsorptionStrategy] = {}
        self.active_photon_absorption_strategy: PhotonAbsorptionStrategy = NullPhotonAbsorptionStrategy(self)
        self.excitation_state = ExcitationState.IDLE

        self.absorption_hysteresis_countdown_time = 0.0
        self.pass_through_photons = deque(maxlen=PASS_THROUGH_PHOTON_LIST_SIZE)

        self.current_vibration_radians = 0.0
        self.current_rotation_radians = 0.0
        self.vibrating = False
        self.rotating = False
        self.rotation_direction_clockwise = True
        self.high_electronic_energy_state = False

        # Where emitted photons go; set by the model that owns the molecule
        self.photons = None
        self.break_apart_products = None

    @property
    def name(self) -> str:
        return self.kind.value

    def add_atom(self, atom: Atom, offset=(0.0, 0.0)):
        self.atoms.append(atom)
        self.atom_cog_offsets[atom.unique_id] = np.array(offset, dtype=np.float64)

    def add_atomic_bond(self, atomic_bond: AtomicBond):
        self.atomic_bonds.append(atomic_bond)

    def set_atom_cog_offset(self, atom: Atom, offset):
        if atom.unique_id not in self.atom_cog_offsets:
            raise KeyError(f"{atom!r} is not part of {self.name}")
        self.atom_cog_offsets[atom.unique_id] = np.array(offset, dtype=np.float64)

    def atom_cog_offset(self, atom: Atom) -> np.ndarray:
        return self.atom_cog_offsets[atom.unique_id]

    def set_photon_absorption_strategy(self, wavelength: float, strategy: PhotonAbsorptionStrategy):
        self.absorption_strategies[wavelength] = strategy

    def photon_absorption_strategy_for(self, wavelength: float):
        return self.absorption_strategies.get(wavelength)

    @property
    def is_photon_absorbed(self) -> bool:
        return not isinstance(self.active_photon_absorption_strategy, NullPhotonAbsorptionStrategy)

    def step(self, delta_t: float):
        # A molecule is seen emitting for the one step after it lets its photon go
        if self.excitation_state is ExcitationState.EMITTING:
            self.excitation_state = ExcitationState.IDLE
        self.active_photon_absorption_strategy.step(delta_t)

        if self.absorption_hysteresis_countdown_time > 0:
            self.absorption_hysteresis_countdown_time -= delta_t

        if self.vibrating:
            self.set_vibration(self.current_vibration_radians + delta_t * VIBRATION_FREQUENCY * 2 * np.pi)

        if self.rotating:
            direction = -1 if self.rotation_direction_clockwise else 1
            self.rotate(delta_t * ROTATION_RATE * 2 * np.pi * direction)

        self.set_center_of_gravity(self.center_of_gravity + self.velocity * delta_t)

    def set_center_of_gravity(self, position):
        self.center_of_gravity = np.array(position, dtype=np.float64)
        self.update_atom_positions()

    def set_vibration(self, vibration_radians: float):
        """Move the atoms to the given phase of the vibration. Molecules that can't vibrate only keep the phase."""
        self.current_vibration_radians = vibration_radians
        self.update_atom_positions()

    def rotate(self, delta_radians: float):
        self.set_rotation((self.current_rotation_radians + delta_radians) % (2 * np.pi))

    def set_rotation(self, radians: float):
        self.current_rotation_radians = radians
        self.update_atom_positions()

    def update_atom_positions(self):
        for atom in self.atoms:
            offset = rotate_vector(self.atom_cog_offsets[atom.unique_id], self.current_rotation_radians)
            atom.position = self.center_of_gravity + offset

    def mark_photon_for_pass_through(self, photon):
        self.pass_through_photons.append(photon)

    def is_photon_marked_for_pass_through(self, photon) -> bool:
        return any(photon is marked for marked in self.pass_through_photons)

    def query_absorb_photon(self, photon) -> bool:
        """
        Offer a nearby photon to the molecule. Returns True if it was absorbed, in which case the caller
        must remove the photon. A photon that is turned down once is never offered again.
        """
        if (self.absorption_hysteresis_countdown_time > 0
                or np.linalg.norm(photon.position - self.center_of_gravity) >= PHOTON_ABSORPTION_DISTANCE
                or self.is_photon_marked_for_pass_through(photon)):
            return False

        strategy = self.absorption_strategies.get(photon.wavelength)
        if strategy is None or self.is_photon_absorbed:
            self.mark_photon_for_pass_through(photon)
            return False

        self.excitation_state = ExcitationState.ABSORBING
        if strategy.query_and_absorb_photon(photon):
            self.active_photon_absorption_strategy = strategy
            logger.debug(f"{self.name} absorbed a photon and is now {self.excitation_state.value}")
            return True

        self.excitation_state = ExcitationState.IDLE
        self.mark_photon_for_pass_through(photon)
        return False

    def emit_photon(self, wavelength: float):
        if self.photons is None:
            raise RuntimeError(f"{self.name} has nowhere to emit photons")
        emission_angle = EMISSION_ANGLES[self.rng.integers(len(EMISSION_ANGLES))]
        velocity = PHOTON_EMISSION_SPEED * np.array([np.cos(emission_angle), np.sin(emission_angle)])
        photon = MicroPhoton(wavelength, self.center_of_gravity.copy(), velocity)
        self.photons.append(photon)
        self.absorption_hysteresis_countdown_time = ABSORPTION_HYSTERESIS_TIME
        logger.debug(f"{self.name} emitted {photon}")
        return photon

    def break_apart(self):
        raise NotImplementedError(f"{self.name} can't break apart")

    def reset(self):
        self.active_photon_absorption_strategy.reset()
        self.active_photon_absorption_strategy = NullPhotonAbsorptionStrategy(self)
        for strategy in self.absorption_strategies.values():
            strategy.reset()
        self.excitation_state = ExcitationState.IDLE
        self.absorption_hysteresis_countdown_time = 0.0
        self.pass_through_photons.clear()
        self.vibrating = False
        self.rotating = False
        self.rotation_direction_clockwise = True
        self.high_electronic_energy_state = False
        self.velocity = np.zeros(2)
        self.break_apart_products = None
        self.center_of_gravity = self.initial_position.copy()
        self.current_rotation_radians = 0.0
        self.set_vibration(0.0)

    def __repr__(self):
        return (f"{type(self).__name__}(state={self.excitation_state.value}, "
                f"center_of_gravity={self.center_of_gravity.tolist()})")
