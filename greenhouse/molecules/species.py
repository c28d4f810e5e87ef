"""
The molecules that photons can be aimed at, and the fragments that some of them break into.

Offsets of the atoms from the center of gravity are in picometers. Bent molecules are laid out so that
the mass-weighted offsets add up to zero.
"""
import logging
from enum import Enum

import numpy as np

from ..constants import MICRO_WAVELENGTH, INFRARED_WAVELENGTH, VISIBLE_WAVELENGTH, ULTRAVIOLET_WAVELENGTH
from .absorption_strategies import VibrationStrategy, RotationStrategy, ExcitationStrategy, BreakApartStrategy
from .atoms import Atom, AtomicBond
from .molecule import Molecule, MoleculeKind, Geometry

logger = logging.getLogger(__name__)

DIATOMIC_ATOM_DISTANCE = 170.0
BREAK_APART_VELOCITY = 3000.0


class DiatomicMolecule(Molecule):
    geometry = Geometry.DIATOMIC
    bond_count = 1

    def __init__(self, rng: np.random.Generator, position=(0.0, 0.0)):
        super().__init__(rng, position)
        self.atom1, self.atom2 = self.create_atoms()
        self.add_atom(self.atom1, (-DIATOMIC_ATOM_DISTANCE / 2, 0.0))
        self.add_atom(self.atom2, (DIATOMIC_ATOM_DISTANCE / 2, 0.0))
        self.add_atomic_bond(AtomicBond(self.atom1, self.atom2, self.bond_count))
        self.update_atom_positions()

    def create_atoms(self) -> tuple[Atom, Atom]:
        raise NotImplementedError


class CO(DiatomicMolecule):
    kind = MoleculeKind.CO
    bond_count = 3

    def __init__(self, rng: np.random.Generator, position=(0.0, 0.0)):
        super().__init__(rng, position)
        self.set_photon_absorption_strategy(MICRO_WAVELENGTH, RotationStrategy(self))
        self.set_photon_absorption_strategy(INFRARED_WAVELENGTH, VibrationStrategy(self))

    def create_atoms(self):
        return Atom.carbon(), Atom.oxygen()


class N2(DiatomicMolecule):
    kind = MoleculeKind.N2
    bond_count = 3

    def create_atoms(self):
        return Atom.nitrogen(), Atom.nitrogen()


class O2(DiatomicMolecule):
    kind = MoleculeKind.O2
    bond_count = 2

    def create_atoms(self):
        return Atom.oxygen(), Atom.oxygen()


class NO(DiatomicMolecule):
    kind = MoleculeKind.NO
    bond_count = 2

    def create_atoms(self):
        return Atom.nitrogen(), Atom.oxygen()


class O(Molecule):
    kind = MoleculeKind.O
    geometry = Geometry.MONATOMIC

    def __init__(self, rng: np.random.Generator, position=(0.0, 0.0)):
        super().__init__(rng, position)
        self.oxygen_atom = Atom.oxygen()
        self.add_atom(self.oxygen_atom)
        self.update_atom_positions()


class CO2(Molecule):
    kind = MoleculeKind.CO2
    geometry = Geometry.LINEAR

    CARBON_OXYGEN_DISTANCE = 170.0
    CARBON_MAX_DEFLECTION = 40.0

    def __init__(self, rng: np.random.Generator, position=(0.0, 0.0)):
        super().__init__(rng, position)
        self.carbon_atom = Atom.carbon()
        self.oxygen_atom1 = Atom.oxygen()
        self.oxygen_atom2 = Atom.oxygen()
        # The oxygens move the opposite way so the center of gravity stays put
        self.oxygen_max_deflection = (self.carbon_atom.mass * self.CARBON_MAX_DEFLECTION
                                      / (2 * self.oxygen_atom1.mass))

        self.add_atom(self.carbon_atom, (0.0, 0.0))
        self.add_atom(self.oxygen_atom1, (self.CARBON_OXYGEN_DISTANCE, 0.0))
        self.add_atom(self.oxygen_atom2, (-self.CARBON_OXYGEN_DISTANCE, 0.0))
        self.add_atomic_bond(AtomicBond(self.carbon_atom, self.oxygen_atom1, 2))
        self.add_atomic_bond(AtomicBond(self.carbon_atom, self.oxygen_atom2, 2))
        self.set_photon_absorption_strategy(INFRARED_WAVELENGTH, VibrationStrategy(self))
        self.update_atom_positions()

    def set_vibration(self, vibration_radians: float):
        self.current_vibration_radians = vibration_radians
        mult_factor = np.sin(vibration_radians)
        self.set_atom_cog_offset(self.carbon_atom, (0.0, mult_factor * self.CARBON_MAX_DEFLECTION))
        self.set_atom_cog_offset(self.oxygen_atom1, (self.CARBON_OXYGEN_DISTANCE,
                                                     -mult_factor * self.oxygen_max_deflection))
        self.set_atom_cog_offset(self.oxygen_atom2, (-self.CARBON_OXYGEN_DISTANCE,
                                                     -mult_factor * self.oxygen_max_deflection))
        self.update_atom_positions()


class H2O(Molecule):
    kind = MoleculeKind.H2O
    geometry = Geometry.BENT

    OXYGEN_HYDROGEN_BOND_LENGTH = 130.0
    HYDROGEN_OXYGEN_HYDROGEN_ANGLE = np.deg2rad(109)
    MAX_OXYGEN_DISPLACEMENT = 3.0
    MAX_HYDROGEN_DISPLACEMENT = 18.0

    def __init__(self, rng: np.random.Generator, position=(0.0, 0.0)):
        super().__init__(rng, position)
        self.oxygen_atom = Atom.oxygen()
        self.hydrogen_atom1 = Atom.hydrogen()
        self.hydrogen_atom2 = Atom.hydrogen()

        height = self.OXYGEN_HYDROGEN_BOND_LENGTH * np.cos(self.HYDROGEN_OXYGEN_HYDROGEN_ANGLE / 2)
        total_mass = self.oxygen_atom.mass + 2 * self.hydrogen_atom1.mass
        self.oxygen_vertical_offset = height * 2 * self.hydrogen_atom1.mass / total_mass
        self.hydrogen_vertical_offset = -(height - self.oxygen_vertical_offset)
        self.hydrogen_horizontal_offset = (self.OXYGEN_HYDROGEN_BOND_LENGTH
                                           * np.sin(self.HYDROGEN_OXYGEN_HYDROGEN_ANGLE / 2))

        self.add_atom(self.oxygen_atom)
        self.add_atom(self.hydrogen_atom1)
        self.add_atom(self.hydrogen_atom2)
        self.add_atomic_bond(AtomicBond(self.oxygen_atom, self.hydrogen_atom1, 1))
        self.add_atomic_bond(AtomicBond(self.oxygen_atom, self.hydrogen_atom2, 1))
        self.set_photon_absorption_strategy(MICRO_WAVELENGTH, RotationStrategy(self))
        self.set_photon_absorption_strategy(INFRARED_WAVELENGTH, VibrationStrategy(self))
        self.set_vibration(0.0)

    def set_vibration(self, vibration_radians: float):
        self.current_vibration_radians = vibration_radians
        mult_factor = np.sin(vibration_radians)
        hydrogen_displacement = mult_factor * self.MAX_HYDROGEN_DISPLACEMENT
        self.set_atom_cog_offset(self.oxygen_atom,
                                 (0.0, self.oxygen_vertical_offset - mult_factor * self.MAX_OXYGEN_DISPLACEMENT))
        self.set_atom_cog_offset(self.hydrogen_atom1,
                                 (self.hydrogen_horizontal_offset + hydrogen_displacement,
                                  self.hydrogen_vertical_offset + hydrogen_displacement))
        self.set_atom_cog_offset(self.hydrogen_atom2,
                                 (-self.hydrogen_horizontal_offset - hydrogen_displacement,
                                  self.hydrogen_vertical_offset + hydrogen_displacement))
        self.update_atom_positions()


class CH4(Molecule):
    """Methane, drawn flat with a slight perspective so that all four hydrogens show."""
    kind = MoleculeKind.CH4
    geometry = Geometry.TETRAHEDRAL

    CARBON_HYDROGEN_DISTANCE = 155.0
    BOND_ANGLE = np.pi * 0.9
    PERSPECTIVE_OFFSET = 30.0
    HYDROGEN_VIBRATION_DISTANCE = 30.0
    HYDROGEN_VIBRATION_ANGLE = np.pi / 4

    def __init__(self, rng: np.random.Generator, position=(0.0, 0.0)):
        super().__init__(rng, position)
        self.carbon_atom = Atom.carbon()
        self.hydrogen_atoms = [Atom.hydrogen(top_layer=True), Atom.hydrogen(), Atom.hydrogen(),
                               Atom.hydrogen(top_layer=True)]

        self.add_atom(self.carbon_atom)
        for hydrogen_atom in self.hydrogen_atoms:
            self.add_atom(hydrogen_atom)
        perspective = self.PERSPECTIVE_OFFSET
        self.add_atomic_bond(AtomicBond(self.carbon_atom, self.hydrogen_atoms[0], top_layer=True,
                                        atom1_position_offset=(0.0, perspective)))
        self.add_atomic_bond(AtomicBond(self.carbon_atom, self.hydrogen_atoms[1]))
        self.add_atomic_bond(AtomicBond(self.carbon_atom, self.hydrogen_atoms[2]))
        self.add_atomic_bond(AtomicBond(self.carbon_atom, self.hydrogen_atoms[3], top_layer=True,
                                        atom1_position_offset=(perspective / 2, -perspective)))
        self.set_photon_absorption_strategy(INFRARED_WAVELENGTH, VibrationStrategy(self))
        self.set_vibration(0.0)

    def set_vibration(self, vibration_radians: float):
        self.current_vibration_radians = vibration_radians
        distance = self.CARBON_HYDROGEN_DISTANCE
        rotated_x = distance * np.cos(self.BOND_ANGLE)
        rotated_y = distance * np.sin(self.BOND_ANGLE)
        perspective = self.PERSPECTIVE_OFFSET

        mult_factor = 1.5 * np.sin(vibration_radians)
        dx = mult_factor * self.HYDROGEN_VIBRATION_DISTANCE * np.cos(self.HYDROGEN_VIBRATION_ANGLE)
        dy = mult_factor * self.HYDROGEN_VIBRATION_DISTANCE * np.sin(self.HYDROGEN_VIBRATION_ANGLE)
        hydrogen_offsets = [
            (dx, distance - abs(dy)),
            (rotated_x + dx, -rotated_y - dy),
            (-rotated_x - dx, -rotated_y - dy + perspective),
            (perspective + dx, -distance + abs(dy) + perspective),
        ]
        for hydrogen_atom, offset in zip(self.hydrogen_atoms, hydrogen_offsets):
            self.set_atom_cog_offset(hydrogen_atom, offset)

        if vibration_radians == 0:
            self.set_atom_cog_offset(self.carbon_atom, (0.0, 0.0))
        else:
            # The carbon moves against the hydrogens
            mass_ratio = self.hydrogen_atoms[0].mass / self.carbon_atom.mass
            self.set_atom_cog_offset(self.carbon_atom, -mass_ratio * np.sum(hydrogen_offsets, axis=0))
        self.update_atom_positions()


class BentTriatomicMolecule(Molecule):
    """
    A central atom bonded to two outer oxygens, one bond single and one double, on a random side.
    Ultraviolet light breaks off the singly bonded oxygen.
    """
    geometry = Geometry.BENT

    BOND_LENGTH = 180.0
    BOND_ANGLE = np.deg2rad(120)
    MAX_CENTER_DISPLACEMENT = 30.0
    MAX_OUTER_DISPLACEMENT = 15.0

    def __init__(self, rng: np.random.Generator, position=(0.0, 0.0)):
        super().__init__(rng, position)
        self.center_atom = self.create_center_atom()
        self.right_oxygen_atom = Atom.oxygen()
        self.left_oxygen_atom = Atom.oxygen()

        height = self.BOND_LENGTH * np.cos(self.BOND_ANGLE / 2)
        total_mass = self.center_atom.mass + 2 * self.right_oxygen_atom.mass
        self.center_vertical_offset = height * 2 * self.right_oxygen_atom.mass / total_mass
        self.outer_vertical_offset = -(height - self.center_vertical_offset)
        self.outer_horizontal_offset = self.BOND_LENGTH * np.sin(self.BOND_ANGLE / 2)

        self.add_atom(self.center_atom)
        self.add_atom(self.right_oxygen_atom)
        self.add_atom(self.left_oxygen_atom)
        self.double_bond_on_right = bool(rng.random() < 0.5)
        right_bond_count, left_bond_count = (2, 1) if self.double_bond_on_right else (1, 2)
        self.add_atomic_bond(AtomicBond(self.center_atom, self.right_oxygen_atom, right_bond_count))
        self.add_atomic_bond(AtomicBond(self.center_atom, self.left_oxygen_atom, left_bond_count))

        self.set_photon_absorption_strategy(MICRO_WAVELENGTH, RotationStrategy(self))
        self.set_photon_absorption_strategy(INFRARED_WAVELENGTH, VibrationStrategy(self))
        self.set_photon_absorption_strategy(ULTRAVIOLET_WAVELENGTH, BreakApartStrategy(self))
        self.set_vibration(0.0)

    def create_center_atom(self) -> Atom:
        raise NotImplementedError

    def create_diatomic_fragment(self, position) -> DiatomicMolecule:
        raise NotImplementedError

    def set_vibration(self, vibration_radians: float):
        self.current_vibration_radians = vibration_radians
        mult_factor = np.sin(vibration_radians)
        outer_displacement = mult_factor * self.MAX_OUTER_DISPLACEMENT
        self.set_atom_cog_offset(self.center_atom,
                                 (0.0, self.center_vertical_offset - mult_factor * self.MAX_CENTER_DISPLACEMENT))
        self.set_atom_cog_offset(self.right_oxygen_atom,
                                 (self.outer_horizontal_offset + outer_displacement,
                                  self.outer_vertical_offset + outer_displacement))
        self.set_atom_cog_offset(self.left_oxygen_atom,
                                 (-self.outer_horizontal_offset - outer_displacement,
                                  self.outer_vertical_offset + outer_displacement))
        self.update_atom_positions()

    def break_apart(self):
        """Split into the diatomic fragment and a lone oxygen atom, flying apart in opposite directions."""
        diatomic_rotation_angle = np.pi / 2 - self.BOND_ANGLE / 2
        center_offset = self.atom_cog_offset(self.center_atom)

        if self.double_bond_on_right:
            bonded_offset = self.atom_cog_offset(self.right_oxygen_atom)
            lone_oxygen_offset = np.array([-self.outer_horizontal_offset, self.outer_vertical_offset])
            fragment_rotation = -diatomic_rotation_angle
            break_apart_angle = np.pi / 4 + self.rng.random() * np.pi / 4
        else:
            bonded_offset = self.atom_cog_offset(self.left_oxygen_atom)
            lone_oxygen_offset = np.array([self.outer_horizontal_offset, self.outer_vertical_offset])
            fragment_rotation = np.pi + diatomic_rotation_angle
            break_apart_angle = np.pi / 2 + self.rng.random() * np.pi / 4

        diatomic_fragment = self.create_diatomic_fragment(self.center_of_gravity + (center_offset + bonded_offset) / 2)
        diatomic_fragment.rotate(fragment_rotation)
        oxygen_atom = O(self.rng, self.center_of_gravity + lone_oxygen_offset)

        direction = np.array([np.cos(break_apart_angle), np.sin(break_apart_angle)])
        diatomic_fragment.velocity = BREAK_APART_VELOCITY * 0.33 * direction
        oxygen_atom.velocity = -BREAK_APART_VELOCITY * 0.67 * direction

        self.break_apart_products = (diatomic_fragment, oxygen_atom)
        logger.debug(f"{self.name} broke apart into {diatomic_fragment.name} and {oxygen_atom.name}")


class NO2(BentTriatomicMolecule):
    kind = MoleculeKind.NO2

    def __init__(self, rng: np.random.Generator, position=(0.0, 0.0)):
        super().__init__(rng, position)
        self.set_photon_absorption_strategy(VISIBLE_WAVELENGTH, ExcitationStrategy(self))

    def create_center_atom(self):
        return Atom.nitrogen()

    def create_diatomic_fragment(self, position):
        return NO(self.rng, position)


class O3(BentTriatomicMolecule):
    kind = MoleculeKind.O3

    def create_center_atom(self):
        return Atom.oxygen()

    def create_diatomic_fragment(self, position):
        return O2(self.rng, position)


class PhotonTarget(Enum):
    SINGLE_CO_MOLECULE = 'CO'
    SINGLE_N2_MOLECULE = 'N2'
    SINGLE_O2_MOLECULE = 'O2'
    SINGLE_CO2_MOLECULE = 'CO2'
    SINGLE_CH4_MOLECULE = 'CH4'
    SINGLE_H2O_MOLECULE = 'H2O'
    SINGLE_NO2_MOLECULE = 'NO2'
    SINGLE_O3_MOLECULE = 'O3'

    @property
    def molecule_class(self) -> type:
        return MOLECULE_CLASSES[MoleculeKind(self.value)]

    def create_molecule(self, rng: np.random.Generator, position=(0.0, 0.0)) -> Molecule:
        return self.molecule_class(rng, position)


MOLECULE_CLASSES = {
    MoleculeKind.CO: CO,
    MoleculeKind.N2: N2,
    MoleculeKind.O2: O2,
    MoleculeKind.CO2: CO2,
    MoleculeKind.CH4: CH4,
    MoleculeKind.H2O: H2O,
    MoleculeKind.NO2: NO2,
    MoleculeKind.O3: O3,
    MoleculeKind.NO: NO,
    MoleculeKind.O: O,
}
