import numpy as np
import pytest

from greenhouse.constants import INFRARED_WAVELENGTH, VISIBLE_WAVELENGTH, ULTRAVIOLET_WAVELENGTH
from greenhouse.models import TimeSpeed
from greenhouse.molecules import LightSource, MoleculeKind, PhotonAbsorptionModel, PhotonTarget, CO, O3
from greenhouse.molecules.photon_absorption_model import is_within_observation_bounds


def run_micro(model, duration, delta_t=0.05):
    for _ in range(int(round(duration / delta_t))):
        model.step(delta_t)


def photon_positions(model):
    return [photon.position.tolist() for photon in model.photons]


class TestEmitter:
    def test_emitter_starts_off(self, micro_model):
        assert not micro_model.photon_emitter_on
        assert micro_model.emitted_wavelength == INFRARED_WAVELENGTH
        assert micro_model.light_source is LightSource.INFRARED
        run_micro(micro_model, 1.0)
        assert micro_model.photons == []

    def test_first_photon_comes_out_right_away(self, micro_model):
        micro_model.photon_emitter_on = True
        micro_model.step(0.01)
        assert len(micro_model.photons) == 1
        photon = micro_model.photons[0]
        np.testing.assert_allclose(photon.position, [-1320.0, 0.0])
        np.testing.assert_allclose(photon.velocity, [3000.0, 0.0])
        assert micro_model.photon_emission_countdown_time == pytest.approx(0.8)

    def test_emission_period(self, micro_model):
        micro_model.photon_emitter_on = True
        micro_model.step(0.1)
        micro_model.set_photon_emission_period(0.5)
        assert micro_model.photon_emission_countdown_time == pytest.approx(0.5)
        micro_model.photon_emitter_on = False
        assert micro_model.photon_emission_countdown_time == np.inf
        assert not micro_model.photon_emitter_on

    def test_photons_leaving_the_window_are_removed(self, micro_model):
        micro_model.photon_target = PhotonTarget.SINGLE_N2_MOLECULE
        micro_model.photon_emitter_on = True
        for _ in range(60):
            micro_model.step(0.05)
            assert all(is_within_observation_bounds(photon.position) for photon in micro_model.photons)
        assert 1 <= len(micro_model.photons) <= 2

    def test_changing_the_wavelength_clears_the_photons(self, micro_model):
        micro_model.photon_emitter_on = True
        micro_model.step(0.1)
        micro_model.light_source = LightSource.VISIBLE
        assert micro_model.photons == []
        assert micro_model.emitted_wavelength == VISIBLE_WAVELENGTH
        assert micro_model.photon_emission_countdown_time == 0.0
        micro_model.step(0.01)
        assert micro_model.photons[0].wavelength == VISIBLE_WAVELENGTH

    def test_unsupported_wavelengths(self, micro_model):
        with pytest.raises(ValueError):
            micro_model.emitted_wavelength = 1e-12
        with pytest.raises(ValueError):
            micro_model.light_source = LightSource.UNKNOWN
        assert micro_model.emitted_wavelength == INFRARED_WAVELENGTH


class TestStepping:
    def test_long_frames_are_dropped(self, micro_model):
        micro_model.step(0.3)
        assert micro_model.time == 0.0
        micro_model.step(0.2)
        assert micro_model.time == pytest.approx(0.2)
        with pytest.raises(ValueError):
            micro_model.step(-0.1)

    def test_slow_speed(self, micro_model):
        micro_model.time_speed = TimeSpeed.SLOW
        micro_model.step(0.1)
        assert micro_model.time == pytest.approx(0.05)

    def test_manual_step_while_paused(self, micro_model):
        micro_model.is_playing = False
        micro_model.photon_emitter_on = True
        micro_model.step(0.1)
        assert micro_model.photons == []
        micro_model.single_step()
        assert micro_model.time == pytest.approx(1 / 60)
        assert len(micro_model.photons) == 1
        micro_model.manual_step(0.1)
        assert micro_model.photons[0].position[0] > -1350.0


class TestTargets:
    def test_default_target(self, micro_model):
        assert isinstance(micro_model.target_molecule, CO)
        assert micro_model.active_molecules == [micro_model.target_molecule]
        assert micro_model.target_molecule.photons is micro_model.photons

    def test_changing_the_target(self, micro_model):
        micro_model.photon_emitter_on = True
        micro_model.step(0.1)
        micro_model.photon_target = PhotonTarget.SINGLE_O3_MOLECULE
        assert isinstance(micro_model.target_molecule, O3)
        assert micro_model.active_molecules == [micro_model.target_molecule]
        assert micro_model.photons == []

    def test_infrared_photon_is_absorbed_and_reemitted(self, config):
        model = PhotonAbsorptionModel(config, PhotonTarget.SINGLE_CO2_MOLECULE)
        target = model.target_molecule
        target.photon_absorption_strategy_for(INFRARED_WAVELENGTH).absorption_probability = 1.0
        model.photon_emitter_on = True
        run_micro(model, 0.6)
        assert target.vibrating
        assert model.photons == []
        run_micro(model, 1.4)
        assert not target.vibrating
        assert not target.is_photon_absorbed
        assert target.excitation_state is target.excitation_state.IDLE

    def test_ozone_breaks_apart_in_ultraviolet(self, config):
        model = PhotonAbsorptionModel(config, PhotonTarget.SINGLE_O3_MOLECULE)
        model.target_molecule.photon_absorption_strategy_for(ULTRAVIOLET_WAVELENGTH).absorption_probability = 1.0
        model.light_source = LightSource.ULTRAVIOLET
        model.photon_emitter_on = True
        run_micro(model, 2.0)

        assert model.target_molecule is None
        assert sorted(molecule.name for molecule in model.active_molecules) == ['O', 'O2']
        fragment = next(m for m in model.active_molecules if m.kind is MoleculeKind.O2)
        oxygen = next(m for m in model.active_molecules if m.kind is MoleculeKind.O)
        assert model.has_both_constituent_molecules(fragment, oxygen)
        assert all(molecule.photons is model.photons for molecule in model.active_molecules)
        assert model.is_molecule_off_window

        model.restore_active_molecule()
        assert isinstance(model.target_molecule, O3)
        assert not model.has_both_constituent_molecules(fragment, oxygen)
        assert not model.is_molecule_off_window


class TestReset:
    def test_reset_restores_defaults(self, config):
        model = PhotonAbsorptionModel(config, PhotonTarget.SINGLE_H2O_MOLECULE)
        model.photon_target = PhotonTarget.SINGLE_NO2_MOLECULE
        model.light_source = LightSource.VISIBLE
        model.photon_emitter_on = True
        run_micro(model, 1.0)
        model.reset()
        assert model.time == 0.0
        assert model.photons == []
        assert model.photon_target is PhotonTarget.SINGLE_H2O_MOLECULE
        assert model.emitted_wavelength == INFRARED_WAVELENGTH
        assert not model.photon_emitter_on

    def test_runs_after_reset_repeat(self, config):
        model = PhotonAbsorptionModel(config, PhotonTarget.SINGLE_CO2_MOLECULE)

        def run_once():
            model.photon_emitter_on = True
            snapshots = []
            for _ in range(8):
                run_micro(model, 0.5)
                snapshots.append((photon_positions(model), model.target_molecule.excitation_state))
            return snapshots

        first = run_once()
        model.reset()
        model.reset()
        assert run_once() == first
