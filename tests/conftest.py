from __future__ import annotations

import datetime
from uuid import uuid4

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID

from idpctl.errors import IdentityProviderNotFoundError
from idpctl.records import IdentityProvider, IdentityProviderListEntry

GOOD_JWT_A = (
    "eyJhbGciOiJSUzI1NiIsImtpZCI6IiJ9."
    "eyJpc3MiOiJrdWJlcm5ldGVzL3NlcnZpY2VhY2NvdW50Iiwic3ViIjoic3lzdGVtOnNlcnZpY2VhY2NvdW50OmRlZmF1bHQ6ZGVtbyJ9."
    "ZiAHjijBAOsKdum0Aix6lgtkLkGo9_Tu87dWQ5Zfwnn3r2FejEWDAnftTft1MqqnMzivZ9Wyyki5ZjQRmTAtnMPJuHC"
)
GOOD_JWT_B = (
    "eyJhbGciOiJSUzI1NiIsImtpZCI6IiJ9."
    "eyJpc3MiOiJrdWJlcm5ldGVzL3NlcnZpY2VhY2NvdW50Iiwic3ViIjoic3lzdGVtOnNlcnZpY2VhY2NvdW50OmRlZmF1bHQ6aWRwIn0."
    "uMb66tZ8d8gNzS8EnjlkzbrGKc5M-BESwS5B46IUbKfdMtajsCwgBXICytWKQ2X7wfm4QQykHVaElijBlO8QVvYeYzQE"
)


def _generate_ca_pem(common_name: str) -> str:
    key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(Encoding.PEM).decode("ascii")


@pytest.fixture(scope="session")
def ca_pem() -> str:
    return _generate_ca_pem("Test CA 1")


@pytest.fixture(scope="session")
def ca2_pem() -> str:
    return _generate_ca_pem("Test CA 2")


class FakeACLService:
    """In-memory stand-in for the access-control service."""

    def __init__(self) -> None:
        self.records: dict[str, IdentityProvider] = {}
        self.calls: list[str] = []
        self.clients: list[dict] = []
        self.index = 0
        self.fail_with: Exception | None = None

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _store(self, idp: IdentityProvider, *, create_index: int) -> IdentityProvider:
        self.index += 1
        stored = idp.model_copy(
            update={"create_index": create_index, "modify_index": self.index}
        )
        self.records[stored.name] = stored
        return stored.model_copy()

    def add(self, name: str, ca_cert: str, *, description: str = "test idp") -> IdentityProvider:
        idp = IdentityProvider(
            name=name,
            type="kubernetes",
            description=description,
            kubernetes_host="https://foo.internal:8443",
            kubernetes_ca_cert=ca_cert,
            kubernetes_service_account_jwt=GOOD_JWT_A,
        )
        return self._store(idp, create_index=self.index + 1)

    def create_identity_provider(self, idp: IdentityProvider) -> IdentityProvider:
        self.calls.append(f"create {idp.name}")
        self._maybe_fail()
        return self._store(idp, create_index=self.index + 1)

    def read_identity_provider(self, name: str) -> IdentityProvider | None:
        self.calls.append(f"read {name}")
        self._maybe_fail()
        stored = self.records.get(name)
        return stored.model_copy() if stored is not None else None

    def list_identity_providers(self) -> list[IdentityProviderListEntry]:
        self.calls.append("list")
        self._maybe_fail()
        return [
            IdentityProviderListEntry.model_validate(record.model_dump())
            for record in self.records.values()
        ]

    def update_identity_provider(self, idp: IdentityProvider) -> IdentityProvider:
        self.calls.append(f"update {idp.name}")
        self._maybe_fail()
        current = self.records.get(idp.name)
        if current is None:
            raise IdentityProviderNotFoundError(idp.name)
        return self._store(idp, create_index=current.create_index or 0)


@pytest.fixture
def fake_service(monkeypatch) -> FakeACLService:
    service = FakeACLService()

    def _factory(**kwargs):
        service.clients.append(kwargs)
        return service

    monkeypatch.setattr("idpctl.cli.main.ACLClient", _factory)
    monkeypatch.setenv("IDPCTL_HTTP_ADDR", "http://127.0.0.1:8500")
    monkeypatch.delenv("IDPCTL_HTTP_TOKEN", raising=False)
    return service


@pytest.fixture
def idp_name() -> str:
    return f"k8s-{uuid4()}"


@pytest.fixture
def jwt_a() -> str:
    return GOOD_JWT_A


@pytest.fixture
def jwt_b() -> str:
    return GOOD_JWT_B
