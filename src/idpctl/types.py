"""Identity provider types and the flags each one requires."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

IdentityProviderType = Literal["kubernetes"]

KUBERNETES: IdentityProviderType = "kubernetes"


@dataclass(frozen=True)
class RequiredField:
    attribute: str
    flag: str


# Order matters: missing fields are reported in this sequence.
REQUIRED_FIELDS: dict[str, tuple[RequiredField, ...]] = {
    KUBERNETES: (
        RequiredField("kubernetes_host", "--kubernetes-host"),
        RequiredField("kubernetes_ca_cert", "--kubernetes-ca-cert"),
        RequiredField("kubernetes_service_account_jwt", "--kubernetes-service-account-jwt"),
    ),
}

ALLOWED_IDENTITY_PROVIDER_TYPES: tuple[str, ...] = tuple(REQUIRED_FIELDS)


def is_supported_type(value: str) -> bool:
    return value in REQUIRED_FIELDS


def required_fields_for(value: str) -> tuple[RequiredField, ...]:
    try:
        return REQUIRED_FIELDS[value]
    except KeyError:
        raise ValueError(
            "identity provider type must be one of: " + ", ".join(ALLOWED_IDENTITY_PROVIDER_TYPES)
        ) from None


def first_missing_field(value: str, supplied: dict[str, str | None]) -> RequiredField | None:
    """Return the first required field for ``value`` that is absent or empty in ``supplied``."""
    for field in required_fields_for(value):
        if not supplied.get(field.attribute):
            return field
    return None
