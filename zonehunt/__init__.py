"""zonehunt -- Keep launching an OCI instance until a zone has capacity."""

from zonehunt.classify import Outcome, classify
from zonehunt.config import Settings, load_settings
from zonehunt.exceptions import ConfigurationError, ZoneDirectoryError, ZonehuntError
from zonehunt.scheduler import Scheduler, run_pass

__all__ = [
    "ConfigurationError",
    "Outcome",
    "Scheduler",
    "Settings",
    "ZoneDirectoryError",
    "ZonehuntError",
    "classify",
    "load_settings",
    "run_pass",
]
