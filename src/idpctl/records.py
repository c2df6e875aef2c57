"""Identity provider records and the builders used by create/update."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from idpctl.types import (
    KUBERNETES,
    IdentityProviderType,
    first_missing_field,
    is_supported_type,
)

# Fields an update may overwrite; name and type are immutable.
MUTABLE_FIELDS = (
    "description",
    "kubernetes_host",
    "kubernetes_ca_cert",
    "kubernetes_service_account_jwt",
)

# Mutable fields an empty value may clear; the rest keep their stored value.
CLEARABLE_FIELDS = ("description",)


class IdentityProviderListEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(..., alias="Name")
    # Stubs only label the record, so list output still works for types this
    # client cannot manage.
    type: str = Field(..., alias="Type")
    description: str = Field("", alias="Description")
    create_index: Optional[int] = Field(None, alias="CreateIndex")
    modify_index: Optional[int] = Field(None, alias="ModifyIndex")


class IdentityProvider(IdentityProviderListEntry):
    type: IdentityProviderType = Field(..., alias="Type")
    kubernetes_host: str = Field("", alias="KubernetesHost")
    kubernetes_ca_cert: str = Field("", alias="KubernetesCACert")
    kubernetes_service_account_jwt: str = Field("", alias="KubernetesServiceAccountJWT")

    def to_wire(self) -> dict[str, Any]:
        """Request body for create/update; server-assigned indexes are never sent."""
        return self.model_dump(
            by_alias=True,
            exclude={"create_index", "modify_index"},
        )


class MissingFieldError(ValueError):
    """Raised when a required flag was not supplied."""

    def __init__(self, flag: str) -> None:
        super().__init__(f"missing required '{flag}' flag")
        self.flag = flag


class UnsupportedTypeError(ValueError):
    """Raised when asked to build an identity provider of an unknown type."""


def build_identity_provider(
    *,
    name: str,
    idp_type: str,
    description: str | None = None,
    kubernetes_host: str | None = None,
    kubernetes_ca_cert: str | None = None,
    kubernetes_service_account_jwt: str | None = None,
) -> IdentityProvider:
    """Build a complete record, requiring every field the type needs."""
    if not is_supported_type(idp_type):
        raise UnsupportedTypeError(
            f"this tool can only create identity providers of type={KUBERNETES} at this time."
        )

    supplied = {
        "kubernetes_host": kubernetes_host,
        "kubernetes_ca_cert": kubernetes_ca_cert,
        "kubernetes_service_account_jwt": kubernetes_service_account_jwt,
    }
    missing = first_missing_field(idp_type, supplied)
    if missing is not None:
        raise MissingFieldError(missing.flag)

    return IdentityProvider(
        name=name,
        type=idp_type,
        description=description or "",
        kubernetes_host=kubernetes_host,
        kubernetes_ca_cert=kubernetes_ca_cert,
        kubernetes_service_account_jwt=kubernetes_service_account_jwt,
    )


def merge_identity_provider(current: IdentityProvider, **updates: str | None) -> IdentityProvider:
    """Overlay supplied values onto a fetched record.

    A value of ``None`` means the flag was not given and the stored value is
    kept. An empty value is ignored too, except for fields in
    ``CLEARABLE_FIELDS``. Name and type are carried over from ``current``.
    """
    unknown = set(updates) - set(MUTABLE_FIELDS)
    if unknown:
        raise ValueError(f"cannot update fields: {', '.join(sorted(unknown))}")

    changes = {
        key: value
        for key, value in updates.items()
        if value is not None and (value or key in CLEARABLE_FIELDS)
    }
    return current.model_copy(update=changes)
