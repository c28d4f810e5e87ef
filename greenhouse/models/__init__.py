from .photon import Photon
from .energy import EMEnergyPacket, EnergyDirection, EnergyRateTracker
from .layers import Substance, EnergyAbsorbingEmittingLayer, GroundLayer, AtmosphereLayer
from .greenhouse_effect_model import GreenhouseEffectModel, TimeSpeed
from .layers_model import LayersModel, TemperatureUnits
from .concentration_model import ConcentrationModel, ConcentrationControlMode, ConcentrationDate
from .photon_collection import PhotonCollection
from .layer_model_model import LayerModelModel
from .photons_model import PhotonsModel
