from .wave import Wave, WaveAttenuator, REAL_TO_RENDERING_WAVELENGTH
from .wave_sources import EMWaveSource, WaveSourceSpec, SunWaveSource, GroundWaveSource
from .waves_model import WavesModel, concentration_to_attenuation
