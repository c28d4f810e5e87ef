import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest

from greenhouse.config import SimulationConfig
from greenhouse.models import LayersModel, LayerModelModel, PhotonsModel
from greenhouse.models.waves import WavesModel
from greenhouse.molecules import PhotonAbsorptionModel


@pytest.fixture
def config():
    return SimulationConfig(seed=1234)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def layers_model(config):
    return LayersModel(config)


@pytest.fixture
def layer_model_model(config):
    model = LayerModelModel(config)
    model.sun_energy_source.is_shining = True
    return model


@pytest.fixture
def photons_model(config):
    model = PhotonsModel(config)
    model.sun_energy_source.is_shining = True
    return model


@pytest.fixture
def waves_model(config):
    model = WavesModel(config)
    model.sun_energy_source.is_shining = True
    return model


@pytest.fixture
def micro_model(config):
    return PhotonAbsorptionModel(config)


@pytest.fixture
def no_show(monkeypatch):
    import matplotlib.pyplot as plt
    monkeypatch.setattr(plt, 'show', lambda *args, **kwargs: None)
    yield
    plt.close('all')


@pytest.fixture
def run_for():
    """Step a model with fixed frames for `duration` seconds of frame time."""
    def run(model, duration: float, delta_t: float = 0.1):
        for _ in range(int(round(duration / delta_t))):
            model.step(delta_t)
    return run
