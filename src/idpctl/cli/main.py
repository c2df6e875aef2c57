"""Command-line interface for idpctl."""

from __future__ import annotations

import argparse
import re
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Sequence

from idpctl.cli.config import CLIConfig, ConfigError, load_cli_config
from idpctl.cli.render import (
    print_identity_provider,
    print_identity_provider_json,
    print_identity_provider_list,
    print_identity_provider_list_json,
)
from idpctl.client import ACLClient
from idpctl.errors import IdentityProviderNotFoundError, IDPCtlError, ValueFileError
from idpctl.records import (
    IdentityProvider,
    MissingFieldError,
    UnsupportedTypeError,
    build_identity_provider,
    merge_identity_provider,
)
from idpctl.types import KUBERNETES
from idpctl.values import resolve_value_or_file

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_SENSITIVE_FIELDS = (
    "service_account_jwt",
    "jwt",
    "token",
    "secret",
    "authorization",
)


def _package_version() -> str:
    try:
        return pkg_version("idpctl")
    except PackageNotFoundError:
        return "0.0.0+local"


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--http-addr",
        default=None,
        help="Access-control service address (default from config or IDPCTL_HTTP_ADDR)",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="ACL token used for the request (default from config or IDPCTL_HTTP_TOKEN)",
    )


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--meta",
        action="store_true",
        help="Include create/modify indexes in text output",
    )
    output.add_argument("--json", action="store_true", help="Print records as JSON")


def _add_kubernetes_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--kubernetes-host",
        default=None,
        help="Address of the Kubernetes API server",
    )
    parser.add_argument(
        "--kubernetes-ca-cert",
        default=None,
        help="PEM encoded CA cert for the Kubernetes API server; prefix with @ to read a file",
    )
    parser.add_argument(
        "--kubernetes-service-account-jwt",
        default=None,
        help="Service account JWT used to call the Kubernetes TokenReview API",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="idpctl")
    parser.add_argument(
        "--version",
        action="version",
        version=f"idpctl {_package_version()}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to CLI config TOML (default: ~/.idpctl/config.toml)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    idp = sub.add_parser("idp", help="Manage ACL identity providers")
    idp_sub = idp.add_subparsers(dest="idp_command", required=True)

    create = idp_sub.add_parser("create", help="Create an identity provider")
    _add_connection_args(create)
    create.add_argument(
        "--type",
        default=None,
        help=f"Identity provider type; only '{KUBERNETES}' is supported",
    )
    create.add_argument("--name", default=None, help="Name of the identity provider")
    create.add_argument("--description", default=None, help="Human readable description")
    _add_kubernetes_args(create)
    _add_output_args(create)

    read = idp_sub.add_parser("read", help="Read an identity provider by name")
    _add_connection_args(read)
    read.add_argument("--name", default=None, help="Name of the identity provider to read")
    _add_output_args(read)

    list_ = idp_sub.add_parser("list", help="List all identity providers")
    _add_connection_args(list_)
    _add_output_args(list_)

    update = idp_sub.add_parser("update", help="Update an identity provider")
    _add_connection_args(update)
    update.add_argument("--name", default=None, help="Name of the identity provider to update")
    update.add_argument("--description", default=None, help="Human readable description")
    _add_kubernetes_args(update)
    update.add_argument(
        "--no-merge",
        action="store_true",
        help=(
            "Replace the identity provider outright instead of merging flags into the "
            "current record; all kubernetes flags become required"
        ),
    )
    _add_output_args(update)

    return parser


def _sanitize_error_text(value: str) -> str:
    redacted = value
    for field in _SENSITIVE_FIELDS:
        redacted = re.sub(
            rf"(?i)({field}\s*[=:]\s*)([^,\s]+)",
            r"\1[REDACTED]",
            redacted,
        )
    redacted = re.sub(r"(?i)([?&](?:secret|token)=)([^&\s]+)", r"\1[REDACTED]", redacted)
    return redacted


def _print_error(stderr, prefix: str, message: str, *, code: int = EXIT_FAILURE) -> int:
    print(f"{prefix}: {_sanitize_error_text(message)}", file=stderr)
    return code


def _build_client(*, args, config: CLIConfig) -> ACLClient:
    return ACLClient(
        base_url=args.http_addr or config.http_addr,
        token=args.token or config.token,
        timeout=config.timeout,
    )


def _resolve_ca_cert(raw: str | None) -> str | None:
    ca_cert = resolve_value_or_file(raw)
    if raw and not ca_cert:
        raise ValueFileError(f"file {raw[1:]} is empty")
    return ca_cert


def _emit_identity_provider(idp: IdentityProvider, *, args, stdout) -> None:
    if args.json:
        print_identity_provider_json(idp, stdout)
    else:
        print_identity_provider(idp, stdout, show_meta=args.meta)


def _run_idp_create(*, args, config: CLIConfig, stdout, stderr) -> int:
    if not args.type:
        return _print_error(stderr, "validation error", "missing required '--type' flag")
    if not args.name:
        return _print_error(stderr, "validation error", "missing required '--name' flag")

    try:
        idp = build_identity_provider(
            name=args.name,
            idp_type=args.type,
            description=args.description,
            kubernetes_host=args.kubernetes_host,
            kubernetes_ca_cert=args.kubernetes_ca_cert,
            kubernetes_service_account_jwt=args.kubernetes_service_account_jwt,
        )
    except (UnsupportedTypeError, MissingFieldError) as exc:
        return _print_error(stderr, "validation error", str(exc))

    try:
        idp.kubernetes_ca_cert = _resolve_ca_cert(idp.kubernetes_ca_cert)
    except ValueFileError as exc:
        return _print_error(stderr, "file error", f"--kubernetes-ca-cert: {exc}")

    client = _build_client(args=args, config=config)
    try:
        created = client.create_identity_provider(idp)
    except IDPCtlError as exc:
        return _print_error(stderr, "failed to create identity provider", str(exc))

    _emit_identity_provider(created, args=args, stdout=stdout)
    return EXIT_SUCCESS


def _run_idp_read(*, args, config: CLIConfig, stdout, stderr) -> int:
    if not args.name:
        return _print_error(stderr, "validation error", "must specify the --name parameter")

    client = _build_client(args=args, config=config)
    try:
        idp = client.read_identity_provider(args.name)
    except IDPCtlError as exc:
        return _print_error(stderr, "failed to read identity provider", str(exc))
    if idp is None:
        return _print_error(
            stderr, "not found", str(IdentityProviderNotFoundError(args.name))
        )

    _emit_identity_provider(idp, args=args, stdout=stdout)
    return EXIT_SUCCESS


def _run_idp_list(*, args, config: CLIConfig, stdout, stderr) -> int:
    client = _build_client(args=args, config=config)
    try:
        entries = client.list_identity_providers()
    except IDPCtlError as exc:
        return _print_error(stderr, "failed to list identity providers", str(exc))

    if not entries:
        return EXIT_SUCCESS
    if args.json:
        print_identity_provider_list_json(entries, stdout)
    else:
        print_identity_provider_list(entries, stdout, show_meta=args.meta)
    return EXIT_SUCCESS


def _replacement_from_flags(args) -> IdentityProvider:
    return build_identity_provider(
        name=args.name,
        idp_type=KUBERNETES,
        description=args.description,
        kubernetes_host=args.kubernetes_host,
        kubernetes_ca_cert=args.kubernetes_ca_cert,
        kubernetes_service_account_jwt=args.kubernetes_service_account_jwt,
    )


def _run_idp_update(*, args, config: CLIConfig, stdout, stderr) -> int:
    if not args.name:
        return _print_error(
            stderr,
            "validation error",
            "cannot update an identity provider without specifying the --name parameter",
        )

    replacement: IdentityProvider | None = None
    if args.no_merge:
        try:
            replacement = _replacement_from_flags(args)
        except MissingFieldError as exc:
            return _print_error(stderr, "validation error", str(exc))

    try:
        ca_cert = _resolve_ca_cert(args.kubernetes_ca_cert)
    except ValueFileError as exc:
        return _print_error(stderr, "file error", f"--kubernetes-ca-cert: {exc}")

    client = _build_client(args=args, config=config)

    if replacement is not None:
        replacement.kubernetes_ca_cert = ca_cert
        target = replacement
    else:
        # Read-modify-write: the service has no conditional write, so a
        # concurrent update between these two calls is overwritten.
        try:
            current = client.read_identity_provider(args.name)
        except IDPCtlError as exc:
            return _print_error(
                stderr, "failed to read current identity provider", str(exc)
            )
        if current is None:
            return _print_error(
                stderr, "not found", str(IdentityProviderNotFoundError(args.name))
            )
        target = merge_identity_provider(
            current,
            description=args.description,
            kubernetes_host=args.kubernetes_host,
            kubernetes_ca_cert=ca_cert,
            kubernetes_service_account_jwt=args.kubernetes_service_account_jwt,
        )

    try:
        updated = client.update_identity_provider(target)
    except IdentityProviderNotFoundError as exc:
        return _print_error(stderr, "not found", str(exc))
    except IDPCtlError as exc:
        return _print_error(stderr, "failed to update identity provider", str(exc))

    _emit_identity_provider(updated, args=args, stdout=stdout)
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None, *, stdout=sys.stdout, stderr=sys.stderr) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_cli_config(args.config)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc))

    if args.command == "idp":
        if args.idp_command == "create":
            return _run_idp_create(args=args, config=config, stdout=stdout, stderr=stderr)
        if args.idp_command == "read":
            return _run_idp_read(args=args, config=config, stdout=stdout, stderr=stderr)
        if args.idp_command == "list":
            return _run_idp_list(args=args, config=config, stdout=stdout, stderr=stderr)
        if args.idp_command == "update":
            return _run_idp_update(args=args, config=config, stdout=stdout, stderr=stderr)

    print("unknown command", file=stderr)
    return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
