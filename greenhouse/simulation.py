import logging

import numpy as np

from .config import SimulationConfig
from .models import LayerModelModel, PhotonsModel
from .models.waves import WavesModel
from .molecules import PhotonAbsorptionModel, PhotonTarget, LightSource

logger = logging.getLogger(__name__)

SCREENS = {
    'layer_model': LayerModelModel,
    'photons': PhotonsModel,
    'waves': WavesModel,
    'micro': PhotonAbsorptionModel,
}


class Simulation:
    """
    Runs one screen's model for a while, with the sun (or the photon emitter) switched on, and keeps
    snapshots of its state every `time_between_snapshots` seconds in `history`.
    """
    def __init__(self, plot_type: str, screen: str, config: SimulationConfig = None, **kwargs):
        if screen not in SCREENS:
            raise ValueError(f"Unknown screen '{screen}'; expected one of {', '.join(SCREENS)}")
        self.plot_type = plot_type
        self.screen = screen
        self.config = SimulationConfig() if config is None else config

        if screen == 'micro':
            photon_target = PhotonTarget.SINGLE_CO2_MOLECULE if 'photon_target' not in kwargs \
                else PhotonTarget(kwargs['photon_target'])
            self.model = PhotonAbsorptionModel(self.config, photon_target)
            self.model.light_source = LightSource.INFRARED if 'light_source' not in kwargs \
                else LightSource(kwargs['light_source'])
            self.model.photon_emitter_on = True
        else:
            self.model = SCREENS[screen](self.config)
            self.model.sun_energy_source.is_shining = True
            if screen == 'layer_model' and 'number_of_active_layers' in kwargs:
                self.model.number_of_active_layers = kwargs['number_of_active_layers']

        self.time = 0.0
        self.history = None

    @property
    def is_micro(self) -> bool:
        return self.screen == 'micro'

    def _new_history(self, n_snapshots: int) -> dict:
        history = {'time': np.zeros((n_snapshots,), dtype=np.float64),
                   'photon_count': np.zeros((n_snapshots,), dtype=np.int64)}
        if self.is_micro:
            history['molecule_count'] = np.zeros((n_snapshots,), dtype=np.int64)
            history['excitation_state'] = np.empty((n_snapshots,), dtype=object)
        else:
            n_layers = len(self.model.atmosphere_layers)
            history['ground_temperature'] = np.zeros((n_snapshots,), dtype=np.float64)
            history['layer_temperatures'] = np.zeros((n_snapshots, n_layers), dtype=np.float64)
            history['wave_count'] = np.zeros((n_snapshots,), dtype=np.int64)
        return history

    def _take_snapshot(self, i_snapshot: int):
        model = self.model
        self.history['time'][i_snapshot] = self.time
        if self.is_micro:
            self.history['photon_count'][i_snapshot] = len(model.photons)
            self.history['molecule_count'][i_snapshot] = len(model.active_molecules)
            target = model.target_molecule
            self.history['excitation_state'][i_snapshot] = 'broken_apart' if target is None \
                else target.excitation_state.value
        else:
            self.history['ground_temperature'][i_snapshot] = model.ground_layer.temperature
            self.history['layer_temperatures'][i_snapshot] = [layer.temperature for layer in model.atmosphere_layers]
            self.history['photon_count'][i_snapshot] = len(model.photons) if hasattr(model, 'photons') else 0
            self.history['wave_count'][i_snapshot] = len(model.waves) if hasattr(model, 'waves') else 0

    def run(self, duration: float, delta_t: float, time_between_snapshots: float = None):
        if delta_t <= 0 or duration < 0:
            raise ValueError(f"Duration must be non-negative and the time step positive; "
                             f"got duration={duration}, delta_t={delta_t}")
        time_between_snapshots = delta_t if not time_between_snapshots else time_between_snapshots
        n_snapshots = max(1, int(np.ceil(duration / time_between_snapshots)))
        self.history = self._new_history(n_snapshots)

        logger.info(f"Running the {self.screen} screen for {duration}s in steps of {delta_t}s "
                    f"({n_snapshots} snapshots)")
        time_since_snapshot = time_between_snapshots
        i_snapshot = 0
        while i_snapshot < n_snapshots:
            try:
                if time_since_snapshot >= time_between_snapshots:
                    time_since_snapshot = 0.0
                    self._take_snapshot(i_snapshot)
                    i_snapshot += 1

                self.model.step(delta_t)
            except Exception as err:
                raise RuntimeError(f"Error running simulation at {self.time} seconds:\n{err}") from err

            self.time += delta_t
            time_since_snapshot += delta_t
        logger.info(f"Simulation finished at {self.time:.2f}s")
