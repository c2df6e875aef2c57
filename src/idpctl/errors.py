"""idpctl error types."""

from __future__ import annotations


class IDPCtlError(RuntimeError):
    """Base idpctl error."""


class ServiceUnavailableError(IDPCtlError):
    """Access-control service could not be reached."""


class ServiceRequestError(ServiceUnavailableError):
    """Access-control service returned an HTTP error response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: object | None = None,
        body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
        self.body = body


class IdentityProviderNotFoundError(IDPCtlError):
    """No identity provider exists with the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f'identity provider not found with name "{name}"')
        self.name = name


class ValueFileError(ValueError):
    """A value-or-@file reference could not be read."""
