from ..config import SimulationConfig
from .concentration_model import ConcentrationModel
from .photon_collection import PhotonCollection


class PhotonsModel(ConcentrationModel):
    """The "Photons" screen: the concentration model with light shown as individual photons."""
    def __init__(self, config: SimulationConfig = None, **kwargs):
        super().__init__(config, **kwargs)
        self.photon_collection = PhotonCollection(self.sun_energy_source, self.ground_layer, self.atmosphere_layers,
                                                  self.rng,
                                                  sunlight_span=self.sunlight_span,
                                                  height_of_atmosphere=self.height_of_atmosphere,
                                                  sun_photon_creation_rate=self.config.sun_photon_creation_rate,
                                                  ground_photon_rate_scale=self.config.ground_photon_rate_scale)
        self._initial_number_of_active_clouds = sum(1 for cloud in self.clouds if cloud.enabled)
        self._number_of_active_clouds = self._initial_number_of_active_clouds

    @property
    def photons(self):
        return self.photon_collection.photons

    @property
    def number_of_active_clouds(self) -> int:
        return self._number_of_active_clouds

    @number_of_active_clouds.setter
    def number_of_active_clouds(self, value: int):
        if not 0 <= value <= len(self.clouds):
            raise ValueError(f"Number of active clouds must be within [0, {len(self.clouds)}]; got {value}")
        self._number_of_active_clouds = int(value)
        for index, cloud in enumerate(self.clouds):
            cloud.enabled = self._number_of_active_clouds > index

    def step_model(self, delta_t: float):
        self.photon_collection.step(delta_t)
        super().step_model(delta_t)

    def reset(self):
        self.photon_collection.reset()
        super().reset()
        self._number_of_active_clouds = self._initial_number_of_active_clouds
