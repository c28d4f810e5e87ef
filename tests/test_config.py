import json
import logging

import numpy as np
import pytest

from greenhouse.config import SimulationConfig, CloudSpec, DEFAULT_CLOUDS
from greenhouse.constants import kelvin_to_celsius, kelvin_to_fahrenheit
from greenhouse.logging_config import setup_logging
from greenhouse.math_utils import rotate_vector, crossed_altitude, is_unit_vector


class TestSimulationConfig:
    def test_defaults(self):
        config = SimulationConfig()
        assert config.max_dt == pytest.approx(0.1)
        assert config.model_time_step == pytest.approx(1 / 60)
        assert config.minimum_ground_temperature == 245.0
        assert config.sun_photon_creation_rate == 8.0
        assert config.clouds == DEFAULT_CLOUDS

    def test_replace_returns_a_modified_copy(self):
        config = SimulationConfig(seed=3)
        other = config.replace(number_of_atmosphere_layers=4)
        assert other.number_of_atmosphere_layers == 4
        assert other.seed == 3
        assert config.number_of_atmosphere_layers == 12

    @pytest.mark.parametrize('changes', [
        {'max_dt': 0.0},
        {'number_of_atmosphere_layers': -1},
        {'ground_albedo': 1.5},
        {'initial_atmosphere_layer_absorption_proportion': -0.1},
        {'flux_sensor_altitude': 60000.0},
    ])
    def test_invalid_values_are_rejected(self, changes):
        with pytest.raises(ValueError):
            SimulationConfig(**changes)

    def test_same_seed_gives_same_random_sequence(self):
        config = SimulationConfig(seed=99)
        np.testing.assert_array_equal(config.make_rng().random(5), config.make_rng().random(5))

    def test_from_json(self, tmp_path):
        config_file = tmp_path / 'config.json'
        config_file.write_text(json.dumps({
            'seed': 7,
            'number_of_atmosphere_layers': 5,
            'clouds': [{'x': 0.0, 'y': 10000.0, 'width': 5000.0, 'height': 1000.0, 'enabled': True}],
        }))
        config = SimulationConfig.from_json(str(config_file))
        assert config.seed == 7
        assert config.number_of_atmosphere_layers == 5
        assert config.clouds == (CloudSpec(0.0, 10000.0, 5000.0, 1000.0, True),)

    def test_from_json_rejects_unknown_keys(self, tmp_path):
        config_file = tmp_path / 'config.json'
        config_file.write_text(json.dumps({'gravity': 9.8}))
        with pytest.raises(KeyError):
            SimulationConfig.from_json(str(config_file))


class TestConstants:
    def test_temperature_conversions(self):
        assert kelvin_to_celsius(273.15) == pytest.approx(0.0)
        assert kelvin_to_fahrenheit(373.15) == pytest.approx(212.0)


class TestVectorUtils:
    def test_rotate_vector_quarter_turn(self):
        np.testing.assert_allclose(rotate_vector(np.array([1.0, 0.0]), np.pi / 2), [0.0, 1.0], atol=1e-12)

    def test_rotate_vector_keeps_length(self):
        rotated = rotate_vector(np.array([3.0, 4.0]), 0.7)
        assert np.linalg.norm(rotated) == pytest.approx(5.0)

    def test_unit_vectors(self):
        assert is_unit_vector(np.array([0.6, 0.8]))
        assert not is_unit_vector(np.array([0.0, 2.0]))

    def test_crossed_altitude(self):
        assert crossed_altitude(10.0, 5.0, 7.0)
        assert crossed_altitude(0.0, 5.0, 5.0)
        assert not crossed_altitude(5.0, 10.0, 5.0)
        assert not crossed_altitude(0.0, 4.0, 5.0)


class TestLogging:
    def test_setup_logging_does_not_duplicate_handlers(self):
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)
        logger = logging.getLogger('greenhouse')
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)

    def test_setup_logging_to_file(self, tmp_path):
        log_file = tmp_path / 'run.log'
        setup_logging(logging.INFO, str(log_file))
        logging.getLogger('greenhouse.test').info('hello')
        logger = logging.getLogger('greenhouse')
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        content = log_file.read_text()
        assert 'Logging initialized.' in content
        assert 'hello' in content
