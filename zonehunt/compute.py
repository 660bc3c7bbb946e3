"""OCI compute and identity access for zonehunt."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import oci

from zonehunt.config import Settings
from zonehunt.exceptions import ConfigurationError, ZoneDirectoryError
from zonehunt.request import LaunchRequest, Zone


@dataclass(frozen=True)
class LaunchResult:
    """What came back from one ``launch_instance`` call.

    ``error`` is None when the instance was accepted.
    """

    zone: Zone
    error: str | None = None
    instance_id: str | None = None
    lifecycle_state: str | None = None


def sdk_config(settings: Settings) -> dict:
    """Build the dict the OCI SDK clients authenticate with."""
    return {
        "user": settings.user_id,
        "tenancy": settings.tenancy_id,
        "fingerprint": settings.fingerprint,
        "region": settings.region,
        "key_file": str(Path(settings.key_path).expanduser()),
    }


class ComputeManager:
    """Lists availability domains and launches instances."""

    def __init__(self, settings: Settings, compute_client, identity_client) -> None:
        self.settings = settings
        self.compute = compute_client
        self.identity = identity_client

    @classmethod
    def from_settings(cls, settings: Settings) -> ComputeManager:
        """Authenticate with the API key described by *settings*.

        Raises ConfigurationError if the SDK rejects the key material.
        """
        config = sdk_config(settings)
        try:
            oci.config.validate_config(config)
            compute = oci.core.ComputeClient(config)
            identity = oci.identity.IdentityClient(config)
        except oci.exceptions.ClientError as e:
            raise ConfigurationError(f"OCI authentication setup failed: {e}") from e
        return cls(settings, compute, identity)

    def list_zones(self) -> tuple[Zone, ...]:
        """Return the tenancy's availability domains in API order.

        Raises ZoneDirectoryError if the call fails or returns nothing.
        """
        try:
            resp = self.identity.list_availability_domains(
                compartment_id=self.settings.tenancy_id,
            )
        except (oci.exceptions.ServiceError, oci.exceptions.RequestException) as e:
            raise ZoneDirectoryError(
                f"Could not list availability domains in {self.settings.region}: {e}"
            ) from e

        zones = tuple(Zone(id=ad.id, name=ad.name) for ad in resp.data)
        if not zones:
            raise ZoneDirectoryError(
                f"No availability domains found for tenancy in {self.settings.region}"
            )
        return zones

    def launch(self, request: LaunchRequest, zone: Zone) -> LaunchResult:
        """Try to launch *request*; any failure is returned as error text."""
        details = request.to_details()
        try:
            resp = self.compute.launch_instance(details)
        except oci.exceptions.ServiceError as e:
            return LaunchResult(zone=zone, error=str(e))
        except Exception as e:
            # transport errors are retried in the next zone like any other failure
            return LaunchResult(zone=zone, error=f"{type(e).__name__}: {e}")

        instance = resp.data
        return LaunchResult(
            zone=zone,
            instance_id=getattr(instance, "id", None),
            lifecycle_state=getattr(instance, "lifecycle_state", None),
        )
