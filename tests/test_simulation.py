import json

import numpy as np
import pytest

import run
from greenhouse.plot import Plot
from greenhouse.simulation import Simulation


@pytest.fixture
def layer_model_sim(config):
    sim = Simulation('temperature', 'layer_model', config, number_of_active_layers=2)
    sim.run(5.0, 0.1, 0.5)
    return sim


@pytest.fixture
def micro_sim(config):
    sim = Simulation('molecule', 'micro', config, photon_target='O3', light_source='ultraviolet')
    sim.run(2.0, 0.05, 0.1)
    return sim


class TestSimulation:
    def test_layer_model_history(self, layer_model_sim):
        history = layer_model_sim.history
        assert history['time'].shape == (10,)
        assert history['layer_temperatures'].shape == (10, 3)
        assert history['time'][0] == 0.0
        assert np.all(np.diff(history['time']) > 0)
        assert np.all(history['ground_temperature'] >= 245.0)
        assert layer_model_sim.model.number_of_active_layers == 2

    def test_micro_history(self, micro_sim):
        history = micro_sim.history
        assert history['time'].shape == (20,)
        assert set(history) == {'time', 'photon_count', 'molecule_count', 'excitation_state'}
        assert np.all(history['molecule_count'] >= 1)
        assert history['excitation_state'][0] == 'idle'
        assert micro_sim.model.photon_emitter_on

    def test_photons_screen(self, config):
        sim = Simulation('photons', 'photons', config)
        sim.run(3.0, 0.1, 1.0)
        assert sim.history['photon_count'].shape == (3,)
        assert sim.history['photon_count'][-1] > 0
        assert np.all(sim.history['wave_count'] == 0)

    def test_waves_screen(self, config):
        sim = Simulation('waves', 'waves', config)
        sim.run(2.0, 0.1, 0.5)
        assert sim.history['wave_count'][-1] >= 2

    def test_unknown_screen(self, config):
        with pytest.raises(ValueError):
            Simulation('none', 'planet', config)

    @pytest.mark.parametrize('duration, delta_t', [(1.0, 0.0), (-1.0, 0.1)])
    def test_invalid_run_arguments(self, config, duration, delta_t):
        sim = Simulation('none', 'photons', config)
        with pytest.raises(ValueError):
            sim.run(duration, delta_t)

    def test_model_errors_are_reported_with_the_time(self, config, monkeypatch):
        sim = Simulation('none', 'layer_model', config)

        def broken_step(delta_t):
            raise ArithmeticError('overflow')

        monkeypatch.setattr(sim.model, 'step', broken_step)
        with pytest.raises(RuntimeError, match='Error running simulation at 0.0 seconds'):
            sim.run(1.0, 0.1)


class TestPlot:
    def test_temperature(self, layer_model_sim, no_show):
        Plot('temperature', layer_model_sim)
        Plot('temperature', layer_model_sim, celsius=True)

    def test_temperature_needs_a_temperature_history(self, micro_sim, no_show):
        with pytest.raises(ValueError):
            Plot('temperature', micro_sim)

    def test_photons(self, layer_model_sim, no_show):
        Plot('photons', layer_model_sim)

    def test_waves(self, config, no_show):
        sim = Simulation('waves', 'waves', config)
        sim.run(3.0, 0.1, 1.0)
        Plot('waves', sim)
        with pytest.raises(ValueError):
            Plot('waves', Simulation('none', 'photons', config))

    def test_molecule(self, micro_sim, no_show):
        Plot('molecule', micro_sim)

    def test_none(self, micro_sim):
        Plot('none', micro_sim)

    def test_unknown_plot_type(self, micro_sim):
        with pytest.raises(ValueError):
            Plot('histogram', micro_sim)


class TestCommandLine:
    def test_run(self, no_show):
        sim = run.run(['run.py', 'none', 'micro', '1', '0.05'])
        assert sim.screen == 'micro'
        assert sim.time >= 1.0 - 1e-9

    def test_config_file(self, tmp_path, no_show):
        config_file = tmp_path / 'config.json'
        config_file.write_text(json.dumps({'seed': 3, 'number_of_atmosphere_layers': 4}))
        sim = run.run(['run.py', 'none', 'photons', '1', '0.1', '0.5', str(config_file)])
        assert len(sim.model.atmosphere_layers) == 4
        assert sim.history['layer_temperatures'].shape == (2, 4)

    def test_too_many_arguments(self):
        with pytest.raises(TypeError):
            run.run(['run.py', 'none', 'micro', '1', '0.05', '0.1', 'config.json', 'extra'])
