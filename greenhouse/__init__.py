from .config import SimulationConfig, CloudSpec
from .logging_config import setup_logging

__version__ = '0.1.0'
