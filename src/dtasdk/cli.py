"""DTA signing CLI."""

from __future__ import annotations

import argparse
import json
import uuid

import nacl.utils

from dtasdk.credentials import load_default_store
from dtasdk.errors import DTASDKError
from dtasdk.request import Request
from dtasdk.signer import Signer
from dtasdk.types import Credential

SECRET_KEY_BYTES = 32


def generate_credential() -> Credential:
    return Credential(
        secret_key=nacl.utils.random(SECRET_KEY_BYTES).hex(),
        public_key=str(uuid.uuid4()),
    )


def _header(value: str) -> tuple[str, str]:
    name, separator, header_value = value.partition(":")
    if not separator or not name.strip():
        raise argparse.ArgumentTypeError(f"Header must be name:value, got {value!r}")
    return name.strip(), header_value.strip()


def _add_request_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("url")
    parser.add_argument("--method", default="POST")
    parser.add_argument("-H", "--header", dest="headers", action="append", type=_header, default=[])
    parser.add_argument("--body", default=None)
    parser.add_argument("--credentials", default=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dtasdk", description="DTA request signing CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    keygen_parser = subparsers.add_parser("keygen", help="Generate a new credential line")
    keygen_parser.add_argument("--json", action="store_true")

    keys_parser = subparsers.add_parser("keys", help="List public keys in a credential file")
    keys_parser.add_argument("--credentials", default=None)
    keys_parser.add_argument("--json", action="store_true")

    sign_parser = subparsers.add_parser("sign", help="Sign a request and print its headers")
    _add_request_arguments(sign_parser)
    sign_parser.add_argument("--key-id", required=True)
    sign_parser.add_argument("--json", action="store_true")

    verify_parser = subparsers.add_parser("verify", help="Verify a signed request")
    _add_request_arguments(verify_parser)

    return parser


def _run(args: argparse.Namespace) -> int:
    if args.command == "keygen":
        credential = generate_credential()
        if args.json:
            print(
                json.dumps(
                    {"secret_key": credential.secret_key, "public_key": credential.public_key},
                    sort_keys=True,
                )
            )
            return 0
        print(f"{credential.secret_key} {credential.public_key}")
        return 0

    if args.command == "keys":
        public_keys = load_default_store(args.credentials).public_keys()
        if args.json:
            print(json.dumps({"command": "keys", "count": len(public_keys), "public_keys": public_keys}))
            return 0
        for public_key in public_keys:
            print(public_key)
        return 0

    store = load_default_store(args.credentials)
    request = Request(args.url, method=args.method, body=args.body, headers=args.headers)

    if args.command == "sign":
        Signer().sign(request, store.get(args.key_id))
        if args.json:
            print(json.dumps(dict(request.headers.items()), sort_keys=True))
            return 0
        for name, value in request.headers.items():
            print(f"{name}: {value}")
        return 0

    if args.command == "verify":
        result = Signer().check(request, store)
        if result.valid:
            print(f"valid: {result.public_key}")
            return 0
        print(f"invalid: {result.reason.value if result.reason else 'unknown'}")
        return 1

    return 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return _run(args)
    except DTASDKError as error:
        parser.exit(2, f"dtasdk: error: {error}\n")


if __name__ == "__main__":
    raise SystemExit(main())
