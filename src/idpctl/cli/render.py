"""Text and JSON output for identity provider records."""

from __future__ import annotations

import json
from typing import Sequence

from idpctl.records import IdentityProvider, IdentityProviderListEntry
from idpctl.types import KUBERNETES


def _payload(entry: IdentityProviderListEntry) -> dict:
    return entry.model_dump(mode="json")


def print_identity_provider(idp: IdentityProvider, stdout, *, show_meta: bool = False) -> None:
    print(f"name: {idp.name}", file=stdout)
    print(f"type: {idp.type}", file=stdout)
    print(f"description: {idp.description}", file=stdout)
    if show_meta:
        print(f"create_index: {idp.create_index}", file=stdout)
        print(f"modify_index: {idp.modify_index}", file=stdout)
    if idp.type == KUBERNETES:
        print(f"kubernetes_host: {idp.kubernetes_host}", file=stdout)
        print("kubernetes_ca_cert:", file=stdout)
        print(idp.kubernetes_ca_cert.rstrip("\n"), file=stdout)
        print(
            f"kubernetes_service_account_jwt: {idp.kubernetes_service_account_jwt}",
            file=stdout,
        )


def print_identity_provider_list(
    entries: Sequence[IdentityProviderListEntry],
    stdout,
    *,
    show_meta: bool = False,
) -> None:
    for index, entry in enumerate(entries):
        if index:
            print("", file=stdout)
        print(f"{entry.name}:", file=stdout)
        print(f"  type: {entry.type}", file=stdout)
        print(f"  description: {entry.description}", file=stdout)
        if show_meta:
            print(f"  create_index: {entry.create_index}", file=stdout)
            print(f"  modify_index: {entry.modify_index}", file=stdout)


def print_identity_provider_json(idp: IdentityProvider, stdout) -> None:
    print(json.dumps(_payload(idp), sort_keys=True), file=stdout)


def print_identity_provider_list_json(
    entries: Sequence[IdentityProviderListEntry], stdout
) -> None:
    print(json.dumps([_payload(entry) for entry in entries], sort_keys=True), file=stdout)
