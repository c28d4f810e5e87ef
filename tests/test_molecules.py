import logging

import numpy as np
import pytest

from greenhouse.constants import MICRO_WAVELENGTH, INFRARED_WAVELENGTH, VISIBLE_WAVELENGTH, ULTRAVIOLET_WAVELENGTH
from greenhouse.molecules import (Atom, AtomicBond, ExcitationState, Geometry, LightSource, MicroPhoton, MoleculeKind,
                                  PhotonTarget, light_source_for_wavelength, CO, N2, O2, CO2, CH4, H2O, NO2, O3, NO, O)


def photon_at(wavelength, position=(0.0, 0.0)):
    return MicroPhoton(wavelength, position, (3000.0, 0.0))


def ready_to_absorb(molecule, wavelength):
    molecule.photons = []
    molecule.photon_absorption_strategy_for(wavelength).absorption_probability = 1.0
    return molecule


def mass_weighted_center(molecule):
    masses = np.array([atom.mass for atom in molecule.atoms])
    positions = np.array([atom.position for atom in molecule.atoms])
    return masses @ positions / masses.sum()


class TestAtoms:
    def test_element_data(self):
        oxygen = Atom.oxygen()
        assert oxygen.symbol == 'O'
        assert oxygen.mass == pytest.approx(15.9994)
        assert Atom.carbon().mass == pytest.approx(12.011)
        assert Atom.hydrogen().radius < Atom.nitrogen().radius

    def test_atoms_get_unique_ids(self):
        assert len({Atom.oxygen().unique_id for _ in range(5)}) == 5

    def test_bond_count(self):
        with pytest.raises(ValueError):
            AtomicBond(Atom.oxygen(), Atom.oxygen(), 4)


class TestSpecies:
    @pytest.mark.parametrize('molecule_class, kind, geometry, atom_count, wavelengths', [
        (CO, MoleculeKind.CO, Geometry.DIATOMIC, 2, {MICRO_WAVELENGTH, INFRARED_WAVELENGTH}),
        (N2, MoleculeKind.N2, Geometry.DIATOMIC, 2, set()),
        (O2, MoleculeKind.O2, Geometry.DIATOMIC, 2, set()),
        (NO, MoleculeKind.NO, Geometry.DIATOMIC, 2, set()),
        (O, MoleculeKind.O, Geometry.MONATOMIC, 1, set()),
        (CO2, MoleculeKind.CO2, Geometry.LINEAR, 3, {INFRARED_WAVELENGTH}),
        (H2O, MoleculeKind.H2O, Geometry.BENT, 3, {MICRO_WAVELENGTH, INFRARED_WAVELENGTH}),
        (CH4, MoleculeKind.CH4, Geometry.TETRAHEDRAL, 5, {INFRARED_WAVELENGTH}),
        (NO2, MoleculeKind.NO2, Geometry.BENT, 3,
         {MICRO_WAVELENGTH, INFRARED_WAVELENGTH, VISIBLE_WAVELENGTH, ULTRAVIOLET_WAVELENGTH}),
        (O3, MoleculeKind.O3, Geometry.BENT, 3, {MICRO_WAVELENGTH, INFRARED_WAVELENGTH, ULTRAVIOLET_WAVELENGTH}),
    ])
    def test_structure_and_strategies(self, rng, molecule_class, kind, geometry, atom_count, wavelengths):
        molecule = molecule_class(rng)
        assert molecule.kind is kind
        assert molecule.name == kind.value
        assert molecule.geometry is geometry
        assert len(molecule.atoms) == atom_count
        assert len(molecule.atomic_bonds) == atom_count - 1
        assert set(molecule.absorption_strategies) == wavelengths
        assert molecule.excitation_state is ExcitationState.IDLE

    def test_bond_counts(self, rng):
        assert CO(rng).atomic_bonds[0].bond_count == 3
        assert O2(rng).atomic_bonds[0].bond_count == 2
        assert [bond.bond_count for bond in CO2(rng).atomic_bonds] == [2, 2]
        assert sorted(bond.bond_count for bond in O3(rng).atomic_bonds) == [1, 2]

    @pytest.mark.parametrize('molecule_class', [CO2, H2O, NO2, O3])
    def test_center_of_gravity_at_rest(self, rng, molecule_class):
        molecule = molecule_class(rng, (200.0, -50.0))
        np.testing.assert_allclose(mass_weighted_center(molecule), [200.0, -50.0], atol=1e-9)

    def test_carbon_dioxide_bends_around_its_center_of_gravity(self, rng):
        molecule = CO2(rng)
        molecule.set_vibration(np.pi / 2)
        assert molecule.carbon_atom.position[1] == pytest.approx(40.0)
        assert molecule.oxygen_atom1.position[1] < 0
        np.testing.assert_allclose(mass_weighted_center(molecule), [0.0, 0.0], atol=1e-9)

    def test_diatomic_atoms_distance(self, rng):
        molecule = N2(rng, (10.0, 10.0))
        assert np.linalg.norm(molecule.atom1.position - molecule.atom2.position) == pytest.approx(170.0)

    def test_photon_target(self, rng):
        assert PhotonTarget.SINGLE_O3_MOLECULE.molecule_class is O3
        molecule = PhotonTarget.SINGLE_CH4_MOLECULE.create_molecule(rng)
        assert isinstance(molecule, CH4)
        assert len(molecule.hydrogen_atoms) == 4


class TestAbsorption:
    def test_absorb_vibrate_and_reemit(self, rng):
        molecule = ready_to_absorb(CO2(rng), INFRARED_WAVELENGTH)
        assert molecule.query_absorb_photon(photon_at(INFRARED_WAVELENGTH))
        assert molecule.excitation_state is ExcitationState.VIBRATING
        assert molecule.is_photon_absorbed
        assert molecule.vibrating

        for _ in range(40):
            molecule.step(0.05)
            if molecule.photons:
                break
        assert len(molecule.photons) == 1
        assert molecule.excitation_state is ExcitationState.EMITTING
        assert not molecule.vibrating
        assert not molecule.is_photon_absorbed
        molecule.step(0.01)
        assert molecule.excitation_state is ExcitationState.IDLE

        emitted = molecule.photons[0]
        assert emitted.wavelength == INFRARED_WAVELENGTH
        assert np.linalg.norm(emitted.velocity) == pytest.approx(3000.0)
        angle = np.arctan2(emitted.velocity[1], emitted.velocity[0]) % (2 * np.pi)
        assert (angle / (np.pi / 4)) == pytest.approx(round(angle / (np.pi / 4)), abs=1e-9)

        # Nothing gets absorbed right after an emission
        late_photon = photon_at(INFRARED_WAVELENGTH)
        assert not molecule.query_absorb_photon(late_photon)
        assert not molecule.is_photon_marked_for_pass_through(late_photon)
        molecule.step(0.25)
        assert molecule.query_absorb_photon(late_photon)

    def test_hold_time(self, rng):
        molecule = ready_to_absorb(CO(rng), INFRARED_WAVELENGTH)
        molecule.query_absorb_photon(photon_at(INFRARED_WAVELENGTH))
        elapsed = 0.0
        while not molecule.photons:
            molecule.step(0.01)
            elapsed += 0.01
        assert 1.1 <= elapsed <= 1.32

    def test_photon_without_strategy_passes_through(self, rng):
        molecule = N2(rng)
        photon = photon_at(INFRARED_WAVELENGTH)
        assert not molecule.query_absorb_photon(photon)
        assert molecule.is_photon_marked_for_pass_through(photon)

    def test_turned_down_photon_is_never_offered_again(self, rng):
        molecule = CO2(rng)
        molecule.photon_absorption_strategy_for(INFRARED_WAVELENGTH).absorption_probability = 0.0
        photon = photon_at(INFRARED_WAVELENGTH)
        assert not molecule.query_absorb_photon(photon)
        assert molecule.excitation_state is ExcitationState.IDLE
        molecule.photon_absorption_strategy_for(INFRARED_WAVELENGTH).absorption_probability = 1.0
        assert not molecule.query_absorb_photon(photon)

    def test_distant_photon_is_ignored(self, rng):
        molecule = ready_to_absorb(CO2(rng), INFRARED_WAVELENGTH)
        photon = photon_at(INFRARED_WAVELENGTH, (150.0, 0.0))
        assert not molecule.query_absorb_photon(photon)
        assert not molecule.is_photon_marked_for_pass_through(photon)

    def test_microwave_makes_carbon_monoxide_rotate(self, rng):
        molecule = ready_to_absorb(CO(rng), MICRO_WAVELENGTH)
        assert molecule.query_absorb_photon(photon_at(MICRO_WAVELENGTH))
        assert molecule.excitation_state is ExcitationState.ROTATING
        molecule.step(0.1)
        turned = min(molecule.current_rotation_radians, 2 * np.pi - molecule.current_rotation_radians)
        assert turned == pytest.approx(0.22 * np.pi)
        assert np.linalg.norm(molecule.atom1.position - molecule.center_of_gravity) == pytest.approx(85.0)

    def test_visible_light_makes_nitrogen_dioxide_glow(self, rng):
        molecule = ready_to_absorb(NO2(rng), VISIBLE_WAVELENGTH)
        assert molecule.query_absorb_photon(photon_at(VISIBLE_WAVELENGTH))
        assert molecule.excitation_state is ExcitationState.GLOWING
        assert molecule.high_electronic_energy_state
        for _ in range(30):
            molecule.step(0.05)
        assert not molecule.high_electronic_energy_state
        assert molecule.photons[0].wavelength == VISIBLE_WAVELENGTH

    def test_emitting_without_a_photon_list(self, rng):
        with pytest.raises(RuntimeError):
            CO(rng).emit_photon(INFRARED_WAVELENGTH)

    def test_reset(self, rng):
        molecule = ready_to_absorb(H2O(rng, (30.0, 0.0)), MICRO_WAVELENGTH)
        molecule.query_absorb_photon(photon_at(MICRO_WAVELENGTH, (30.0, 0.0)))
        molecule.step(0.3)
        molecule.reset()
        assert molecule.excitation_state is ExcitationState.IDLE
        assert not molecule.rotating
        assert molecule.current_rotation_radians == 0.0
        np.testing.assert_allclose(mass_weighted_center(molecule), [30.0, 0.0], atol=1e-9)


class TestBreakApart:
    @pytest.mark.parametrize('molecule_class, fragment_kind', [(O3, MoleculeKind.O2), (NO2, MoleculeKind.NO)])
    def test_ultraviolet_breaks_the_molecule(self, rng, molecule_class, fragment_kind):
        molecule = ready_to_absorb(molecule_class(rng), ULTRAVIOLET_WAVELENGTH)
        assert molecule.query_absorb_photon(photon_at(ULTRAVIOLET_WAVELENGTH))
        assert molecule.excitation_state is ExcitationState.BREAKING_APART
        assert molecule.break_apart_products is None

        molecule.step(0.01)
        fragment, oxygen = molecule.break_apart_products
        assert fragment.kind is fragment_kind
        assert oxygen.kind is MoleculeKind.O
        assert np.linalg.norm(fragment.velocity) == pytest.approx(990.0)
        assert np.linalg.norm(oxygen.velocity) == pytest.approx(2010.0)
        assert np.dot(fragment.velocity, oxygen.velocity) < 0
        assert np.linalg.norm(fragment.atom1.position - fragment.atom2.position) == pytest.approx(170.0)
        assert not molecule.is_photon_absorbed

    def test_molecules_without_fragments_cant_break(self, rng):
        with pytest.raises(NotImplementedError):
            CO2(rng).break_apart()


class TestLookups:
    def test_molecule_kind_lookup(self, caplog):
        assert MoleculeKind.lookup('CO2') is MoleculeKind.CO2
        with caplog.at_level(logging.WARNING):
            assert MoleculeKind.lookup('XeF4') is MoleculeKind.UNKNOWN
        assert 'XeF4' in caplog.text

    def test_light_source_lookup(self, caplog):
        assert LightSource.lookup('visible') is LightSource.VISIBLE
        with caplog.at_level(logging.WARNING):
            assert LightSource.lookup('x-ray') is LightSource.UNKNOWN
        assert 'x-ray' in caplog.text
        with pytest.raises(ValueError):
            LightSource.UNKNOWN.wavelength

    def test_light_source_for_wavelength(self, caplog):
        assert light_source_for_wavelength(ULTRAVIOLET_WAVELENGTH) is LightSource.ULTRAVIOLET
        assert LightSource.MICROWAVE.wavelength == MICRO_WAVELENGTH
        with caplog.at_level(logging.WARNING):
            assert light_source_for_wavelength(1e-12) is LightSource.UNKNOWN
        assert 'wavelength' in caplog.text

    def test_micro_photon(self):
        with pytest.raises(ValueError):
            MicroPhoton(1e-12)
        photon = MicroPhoton(INFRARED_WAVELENGTH, (0.0, 0.0), (3000.0, 0.0))
        photon.step(0.1)
        np.testing.assert_allclose(photon.position, [300.0, 0.0])
