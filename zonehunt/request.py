"""Launch request construction."""

from __future__ import annotations

from dataclasses import asdict, dataclass

import oci

from zonehunt.config import Settings


@dataclass(frozen=True)
class Zone:
    """An availability domain: OCID plus the name the launch API expects."""

    id: str
    name: str


@dataclass(frozen=True)
class LaunchRequest:
    """Provider-neutral description of one launch attempt in one zone."""

    availability_domain: str
    compartment_id: str
    shape: str
    subnet_id: str
    display_name: str
    ssh_authorized_keys: str
    ocpus: float
    image_id: str
    boot_volume_size_in_gbs: int
    memory_in_gbs: float | None = None
    assign_public_ip: bool = True
    is_pv_encryption_in_transit_enabled: bool = True

    def to_details(self) -> oci.core.models.LaunchInstanceDetails:
        """Translate into the SDK model passed to ``launch_instance``."""
        shape_config = oci.core.models.LaunchInstanceShapeConfigDetails(ocpus=self.ocpus)
        if self.memory_in_gbs is not None:
            shape_config.memory_in_gbs = self.memory_in_gbs
        return oci.core.models.LaunchInstanceDetails(
            availability_domain=self.availability_domain,
            compartment_id=self.compartment_id,
            shape=self.shape,
            create_vnic_details=oci.core.models.CreateVnicDetails(
                assign_public_ip=self.assign_public_ip,
                subnet_id=self.subnet_id,
            ),
            display_name=self.display_name,
            metadata={"ssh_authorized_keys": self.ssh_authorized_keys},
            shape_config=shape_config,
            source_details=oci.core.models.InstanceSourceViaImageDetails(
                source_type="image",
                image_id=self.image_id,
                boot_volume_size_in_gbs=self.boot_volume_size_in_gbs,
            ),
            is_pv_encryption_in_transit_enabled=self.is_pv_encryption_in_transit_enabled,
        )

    def summary(self) -> dict:
        """Fields worth printing next to an unexpected error."""
        data = asdict(self)
        data.pop("ssh_authorized_keys")
        return data


def build_request(settings: Settings, zone: Zone) -> LaunchRequest:
    """Describe a launch of the configured instance in *zone*."""
    return LaunchRequest(
        availability_domain=zone.name,
        compartment_id=settings.tenancy_id,
        shape=settings.shape,
        subnet_id=settings.subnet_id,
        display_name=settings.display_name,
        ssh_authorized_keys=settings.ssh_key,
        ocpus=float(settings.cpus),
        image_id=settings.image_id,
        boot_volume_size_in_gbs=settings.volume_size,
        memory_in_gbs=settings.memory_gb,
    )
