"""Zonehunt exceptions."""


class ZonehuntError(Exception):
    """Base class for setup failures that abort the run."""


class ConfigurationError(ZonehuntError):
    """The environment does not describe a launchable instance.

    Raised before any API call is made, either because a required value is
    missing or because an OCID does not look like one for this region.

    Attributes:
        field: Name of the offending settings field, if known.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class ZoneDirectoryError(ZonehuntError):
    """Availability domains could not be listed for the tenancy."""
