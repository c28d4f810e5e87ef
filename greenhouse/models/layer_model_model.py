from ..config import SimulationConfig
from .layers_model import LayersModel
from .photon_collection import PhotonCollection

INITIAL_ABSORPTION_PROPORTION = 1.0
IR_ABSORBANCE_RANGE = (0.1, 1.0)


class LayerModelModel(LayersModel):
    """
    The "Layer Model" screen: a few atmosphere layers that are switched on from the bottom up, sharing a
    single infrared absorbance, with the sun output and the surface albedo under the user's control.
    Light is shown as individual photons.
    """
    def __init__(self, config: SimulationConfig = None, **kwargs):
        kwargs.setdefault('number_of_atmosphere_layers', 3)
        kwargs.setdefault('initial_atmosphere_layer_absorption_proportion', INITIAL_ABSORPTION_PROPORTION)
        kwargs.setdefault('atmosphere_layers_initially_active', False)
        super().__init__(config, **kwargs)

        self.photon_collection = PhotonCollection(self.sun_energy_source, self.ground_layer, self.atmosphere_layers,
                                                  self.rng,
                                                  sunlight_span=self.sunlight_span,
                                                  height_of_atmosphere=self.height_of_atmosphere,
                                                  sun_photon_creation_rate=self.config.sun_photon_creation_rate,
                                                  ground_photon_rate_scale=self.config.ground_photon_rate_scale)
        self.all_photons_visible = False

        self._initial_number_of_active_layers = len(self.active_atmosphere_layers)
        self._number_of_active_layers = self._initial_number_of_active_layers
        self._layers_infrared_absorbance = INITIAL_ABSORPTION_PROPORTION

    @property
    def photons(self):
        return self.photon_collection.photons

    @property
    def number_of_active_layers(self) -> int:
        return self._number_of_active_layers

    @number_of_active_layers.setter
    def number_of_active_layers(self, value: int):
        if not 0 <= value <= len(self.atmosphere_layers):
            raise ValueError(f"Number of active layers must be within [0, {len(self.atmosphere_layers)}]; "
                             f"got {value}")
        self._number_of_active_layers = int(value)
        # Layers are switched on from the ground up
        for index, layer in enumerate(self.atmosphere_layers):
            layer.is_active = self._number_of_active_layers > index

    @property
    def layers_infrared_absorbance(self) -> float:
        return self._layers_infrared_absorbance

    @layers_infrared_absorbance.setter
    def layers_infrared_absorbance(self, value: float):
        low, high = IR_ABSORBANCE_RANGE
        if not low <= value <= high:
            raise ValueError(f"Infrared absorbance must be within [{low}, {high}]; got {value}")
        self._layers_infrared_absorbance = float(value)
        for layer in self.atmosphere_layers:
            layer.energy_absorption_proportion = self._layers_infrared_absorbance

    @property
    def sun_output_proportion(self) -> float:
        return self.sun_energy_source.proportion_of_max_energy_output

    @sun_output_proportion.setter
    def sun_output_proportion(self, value: float):
        self.sun_energy_source.proportion_of_max_energy_output = value

    @property
    def surface_albedo(self) -> float:
        return self.ground_layer.albedo

    @surface_albedo.setter
    def surface_albedo(self, value: float):
        self.ground_layer.albedo = value

    def step_model(self, delta_t: float):
        self.photon_collection.step(delta_t)
        super().step_model(delta_t)

    def reset(self):
        self.photon_collection.reset()
        self.all_photons_visible = False
        super().reset()
        self._number_of_active_layers = self._initial_number_of_active_layers
        self._layers_infrared_absorbance = INITIAL_ABSORPTION_PROPORTION
