"""Settings loaded from the environment and validated once at startup."""

from __future__ import annotations

import math
import os
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Mapping

from dotenv import dotenv_values

from zonehunt.exceptions import ConfigurationError
from zonehunt.reporter import parse_level


def _epoch_millis() -> str:
    return str(int(time.time() * 1000))


# (field, environment variable, default, type). A default of None marks the
# value as required; a callable default is evaluated at load time.
ENV_BINDINGS: list[tuple[str, str, object, type]] = [
    ("log_level",               "LOG_LEVEL",               "info",                str),
    # OCI identity
    ("user_id",                 "OCI_USER_ID",             None,                  str),
    ("tenancy_id",              "OCI_TENANCY_ID",          None,                  str),
    ("subnet_id",               "OCI_SUBNET_ID",           None,                  str),
    ("image_id",                "OCI_IMAGE_ID",            None,                  str),
    ("fingerprint",             "OCI_FINGERPRINT",         None,                  str),
    ("region",                  "OCI_REGION",              None,                  str),
    ("key_path",                "KEY_PATH",                "oci.key",             str),
    # instance
    ("shape",                   "SHAPE",                   "VM.Standard.A1.Flex", str),
    ("display_name",            "DISPLAY_NAME",            _epoch_millis,         str),
    ("cpus",                    "CPUS",                    4,                     int),
    ("memory_gb",               "MEMORY_GB",               "",                    float),
    ("volume_size",             "VOLUME_SIZE",             50,                    int),
    ("ssh_key",                 "SSH_KEY",                 None,                  str),
    # timing
    ("create_interval_seconds", "CREATE_INTERVAL_SECONDS", 60,                    int),
    ("zone_interval_seconds",   "CREATE_ZONE_SECONDS",     10,                    int),
    ("backoff_step_seconds",    "BACKOFF_STEP_SECONDS",    1,                     int),
    ("backoff_ceiling_seconds", "BACKOFF_CEILING_SECONDS", 20,                    int),
]

_SECRET_FIELDS = ("fingerprint", "ssh_key")


@dataclass(frozen=True)
class Settings:
    """Everything needed to authenticate and describe the instance to launch."""

    user_id: str
    tenancy_id: str
    subnet_id: str
    image_id: str
    fingerprint: str
    region: str
    ssh_key: str
    key_path: str = "oci.key"
    shape: str = "VM.Standard.A1.Flex"
    display_name: str = ""
    cpus: int = 4
    memory_gb: float | None = None
    volume_size: int = 50
    create_interval_seconds: int = 60
    zone_interval_seconds: int = 10
    backoff_step_seconds: int = 1
    backoff_ceiling_seconds: int = 20
    log_level: str = "info"


def load_settings(
    environ: Mapping[str, str] | None = None,
    env_file: str | None = None,
) -> Settings:
    """Read every binding from *environ* (default ``os.environ``) and validate.

    Values from *env_file* are used only where the environment has none.
    Empty variables count as unset. Raises ConfigurationError on any problem.
    """
    environ = os.environ if environ is None else environ
    values: dict[str, str | None] = {}
    if env_file:
        if not Path(env_file).is_file():
            raise ConfigurationError(f"env file not found: {env_file}")
        values.update(dotenv_values(env_file))
    values.update({k: v for k, v in environ.items() if v != ""})

    kwargs: dict[str, object] = {}
    for field, env_var, default, cast in ENV_BINDINGS:
        raw = values.get(env_var)
        if raw is None or raw == "":
            if default is None:
                # left empty for validate() to report with its own message
                kwargs[field] = ""
                continue
            raw = default() if callable(default) else default
        kwargs[field] = _convert(field, env_var, raw, cast)

    return validate(Settings(**kwargs))


def _convert(field: str, env_var: str, raw: object, cast: Callable) -> object:
    if cast is str:
        return str(raw).strip()
    if raw == "":
        return None
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"{env_var} must be a number, got {raw!r}", field=field
        ) from None
    if not math.isfinite(value):
        raise ConfigurationError(f"{env_var} must be a finite number, got {raw!r}", field=field)
    if value <= 0:
        raise ConfigurationError(f"{env_var} must be positive, got {raw!r}", field=field)
    return value


def validate(s: Settings) -> Settings:
    """Check presence and shape of every value.

    Returns *s* with the log level normalised.
    """
    try:
        level = parse_level(s.log_level)
    except ValueError as e:
        raise ConfigurationError(f"LOG_LEVEL: {e}", field="log_level") from None

    if not s.subnet_id or ".subnet." not in s.subnet_id:
        raise ConfigurationError(
            "invalid subnet id, please specify with OCI_SUBNET_ID. It should look "
            "similar to ocid1.subnet.oc1.your-region.verylongrandomstring",
            field="subnet_id",
        )
    if not s.image_id or ".image." not in s.image_id:
        raise ConfigurationError(
            "invalid image id, please specify with OCI_IMAGE_ID. It should look "
            "similar to ocid1.image.oc1.your-region.verylongrandomstring",
            field="image_id",
        )
    if not s.user_id or ".user." not in s.user_id:
        raise ConfigurationError(
            "invalid user id, please specify with OCI_USER_ID. It should look "
            "similar to ocid1.user.oc1..verylongrandomstring",
            field="user_id",
        )
    if not s.tenancy_id or ".tenancy." not in s.tenancy_id:
        raise ConfigurationError(
            "invalid tenancy id, please specify with OCI_TENANCY_ID. It should look "
            "similar to ocid1.tenancy.oc1..verylongrandomstring",
            field="tenancy_id",
        )
    if not s.ssh_key:
        raise ConfigurationError(
            "please specify your SSH public key using SSH_KEY. It should look "
            "similar to ssh-rsa verylongstring user@example.com",
            field="ssh_key",
        )
    if not s.region:
        raise ConfigurationError("please specify your region using OCI_REGION", field="region")
    if not s.fingerprint or ":" not in s.fingerprint:
        raise ConfigurationError(
            "please specify OCI_FINGERPRINT matching the supplied API key",
            field="fingerprint",
        )
    if s.region not in s.image_id:
        raise ConfigurationError("OCI_IMAGE_ID must contain the region identifier", field="image_id")
    if s.region not in s.subnet_id:
        raise ConfigurationError("OCI_SUBNET_ID must contain the region identifier", field="subnet_id")
    if not s.display_name:
        raise ConfigurationError("DISPLAY_NAME must not be empty", field="display_name")
    if not Path(s.key_path).expanduser().is_file():
        raise ConfigurationError(
            f"API signing key not found at {s.key_path}, set KEY_PATH", field="key_path"
        )
    return replace(s, log_level=level)


def settings_rows(s: Settings) -> list[tuple[str, str]]:
    """(env var, display value) pairs with secrets shortened."""
    rows = []
    for field, env_var, _, _ in ENV_BINDINGS:
        value = getattr(s, field)
        text = "" if value is None else str(value)
        if field in _SECRET_FIELDS and len(text) > 16:
            text = f"{text[:8]}...{text[-6:]}"
        rows.append((env_var, text))
    return rows
