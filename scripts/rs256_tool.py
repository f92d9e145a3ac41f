#!/usr/bin/env python3
"""
Sign and verify files with RS256, or export a PEM public key as a JWK.

Settings are read from the environment (and a local .env file):
  RS256_STRICT_COMPONENTS, RS256_ALLOW_LEADING_ZERO
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from rs256 import (
    RS256Error,
    RsaJwk,
    Settings,
    create_rs256_signer,
    create_rs256_verifier,
    decode_pem_key_pair,
    make_verifier,
    make_verifier_from_jwk,
)
from rs256.common.utils import b64u, ub64u

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def _read_bytes(path):
    with open(path, "rb") as f:
        return f.read()


def _password():
    value = os.environ.get("RS256_KEY_PASSPHRASE")
    return value.encode() if value else None


def cmd_sign(args, settings):
    signer = create_rs256_signer(_read_bytes(args.key), password=_password())
    signature = signer.sign(_read_bytes(args.input))
    print(b64u(signature))
    return EXIT_OK


def cmd_verify(args, settings):
    if args.jwk:
        with open(args.jwk, "r", encoding="utf-8") as f:
            verifier = make_verifier_from_jwk(f.read(), settings)
    else:
        verifier = create_rs256_verifier(_read_bytes(args.key), password=_password())

    if verifier.verify(_read_bytes(args.input), ub64u(args.sig.strip())):
        print("[+] VALID")
        return EXIT_OK
    print("[-] INVALID")
    return EXIT_INVALID


def cmd_jwk(args, settings):
    pair = decode_pem_key_pair(_read_bytes(args.key), password=_password())
    verifier = make_verifier(pair)
    print(verifier.to_jwk(kid=args.kid).to_json())
    return EXIT_OK


def build_parser():
    parser = argparse.ArgumentParser(description="RS256 sign/verify tool")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_sign = sub.add_parser("sign", help="sign a file, print base64url signature")
    p_sign.add_argument("--key", required=True, help="PEM private key")
    p_sign.add_argument("--in", dest="input", required=True, help="file to sign")
    p_sign.set_defaults(func=cmd_sign)

    p_verify = sub.add_parser("verify", help="verify a base64url signature")
    source = p_verify.add_mutually_exclusive_group(required=True)
    source.add_argument("--key", help="PEM public (or private) key")
    source.add_argument("--jwk", help="RSA JWK JSON file")
    p_verify.add_argument("--in", dest="input", required=True, help="signed file")
    p_verify.add_argument("--sig", required=True, help="base64url signature")
    p_verify.set_defaults(func=cmd_verify)

    p_jwk = sub.add_parser("jwk", help="print the public JWK of a PEM key")
    p_jwk.add_argument("--key", required=True, help="PEM public or private key")
    p_jwk.add_argument("--kid", help="key id to embed")
    p_jwk.set_defaults(func=cmd_jwk)

    return parser


def main(argv=None):
    load_dotenv()
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = Settings.from_env()
        return args.func(args, settings)
    except FileNotFoundError as e:
        print(f"[-] Missing file: {e.filename}")
        return EXIT_ERROR
    except RS256Error as e:
        print(f"[-] {type(e).__name__}: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
