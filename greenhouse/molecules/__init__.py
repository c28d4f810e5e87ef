from .wavelengths import LightSource, light_source_for_wavelength
from .atoms import Atom, AtomicBond, Element
from .absorption_strategies import ExcitationState
from .micro_photon import MicroPhoton
from .molecule import Molecule, MoleculeKind, Geometry
from .species import CO, N2, O2, CO2, CH4, H2O, NO2, O3, NO, O, PhotonTarget
from .photon_absorption_model import PhotonAbsorptionModel
