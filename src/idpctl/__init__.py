"""idpctl public surface."""

from idpctl.client import ACLClient
from idpctl.errors import (
    IdentityProviderNotFoundError,
    IDPCtlError,
    ServiceRequestError,
    ServiceUnavailableError,
    ValueFileError,
)
from idpctl.records import (
    IdentityProvider,
    IdentityProviderListEntry,
    MissingFieldError,
    UnsupportedTypeError,
    build_identity_provider,
    merge_identity_provider,
)
from idpctl.types import (
    ALLOWED_IDENTITY_PROVIDER_TYPES,
    KUBERNETES,
    IdentityProviderType,
    first_missing_field,
    is_supported_type,
)
from idpctl.values import resolve_value_or_file

__all__ = [
    "IDPCtlError",
    "ACLClient",
    "ServiceUnavailableError",
    "ServiceRequestError",
    "IdentityProviderNotFoundError",
    "ValueFileError",
    "IdentityProvider",
    "IdentityProviderListEntry",
    "MissingFieldError",
    "UnsupportedTypeError",
    "build_identity_provider",
    "merge_identity_provider",
    "IdentityProviderType",
    "KUBERNETES",
    "ALLOWED_IDENTITY_PROVIDER_TYPES",
    "first_missing_field",
    "is_supported_type",
    "resolve_value_or_file",
]
