"""Typed client for the access-control identity provider endpoints."""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import quote

from pydantic import ValidationError

from idpctl.errors import (
    IdentityProviderNotFoundError,
    ServiceRequestError,
    ServiceUnavailableError,
)
from idpctl.records import IdentityProvider, IdentityProviderListEntry

HTTP_TOKEN_ENV_VAR = "IDPCTL_HTTP_TOKEN"
TOKEN_HEADER = "X-ACL-Token"


def _parse(model, payload: object):
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ServiceUnavailableError(f"unexpected response from service: {exc}") from exc


@dataclass
class ACLClient:
    base_url: str
    token: str | None = None
    timeout: float = 10.0
    retries: int = 0

    def __post_init__(self) -> None:
        try:
            import requests
            from requests.adapters import HTTPAdapter
            from urllib3.util.retry import Retry
        except Exception as exc:  # pragma: no cover
            raise ServiceUnavailableError(f"requests stack unavailable: {exc}") from exc

        self._requests = requests
        self._session = requests.Session()
        retry = Retry(
            total=max(0, int(self.retries)),
            connect=max(0, int(self.retries)),
            read=max(0, int(self.retries)),
            status=max(0, int(self.retries)),
            status_forcelist=(429, 500, 502, 503, 504),
            backoff_factor=0.2,
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)
        if self.token is None:
            env_token = os.getenv(HTTP_TOKEN_ENV_VAR)
            self.token = env_token.strip() or None if env_token else None

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, *, json_payload: dict | None = None) -> object:
        headers = {TOKEN_HEADER: self.token} if self.token else None
        try:
            response = self._session.request(
                method,
                self._url(path),
                json=json_payload,
                headers=headers,
                timeout=self.timeout,
            )
        except self._requests.RequestException as exc:
            raise ServiceUnavailableError(str(exc)) from exc

        if response.status_code >= 400:
            body: object | None = None
            detail: object | None = None
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                detail = body.get("detail") or body.get("error")
            if isinstance(detail, str):
                message = f"request failed: {response.status_code} {detail}"
            else:
                message = f"request failed: {response.status_code} {response.text.strip()}"
            raise ServiceRequestError(
                message,
                status_code=response.status_code,
                detail=detail,
                body=body,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ServiceUnavailableError(
                f"invalid JSON in response: {response.status_code}"
            ) from exc

    def create_identity_provider(self, idp: IdentityProvider) -> IdentityProvider:
        payload = self._request("PUT", "/v1/acl/idp", json_payload=idp.to_wire())
        return _parse(IdentityProvider, payload)

    def read_identity_provider(self, name: str) -> IdentityProvider | None:
        """Fetch one identity provider; ``None`` means it does not exist."""
        try:
            payload = self._request("GET", f"/v1/acl/idp/{quote(name, safe='')}")
        except ServiceRequestError as exc:
            if exc.status_code == 404:
                return None
            raise
        if payload is None:
            return None
        return _parse(IdentityProvider, payload)

    def list_identity_providers(self) -> list[IdentityProviderListEntry]:
        payload = self._request("GET", "/v1/acl/idps")
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ServiceUnavailableError("unexpected identity provider list response")
        return [_parse(IdentityProviderListEntry, item) for item in payload]

    def update_identity_provider(self, idp: IdentityProvider) -> IdentityProvider:
        """Replace the stored record named ``idp.name`` with ``idp`` in full."""
        try:
            payload = self._request(
                "PUT",
                f"/v1/acl/idp/{quote(idp.name, safe='')}",
                json_payload=idp.to_wire(),
            )
        except ServiceRequestError as exc:
            if exc.status_code == 404:
                raise IdentityProviderNotFoundError(idp.name) from exc
            raise
        return _parse(IdentityProvider, payload)


__all__ = ["ACLClient"]
