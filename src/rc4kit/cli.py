"""
Command-line front end.

Usage:
  rc4kit encrypt --key KEY --text "attack at dawn"
  echo -n "45a01f..." | rc4kit decrypt --key KEY
  rc4kit keystream --key KEY --length 16
  rc4kit config init
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path
from typing import Any

from rc4kit import __version__
from rc4kit.infra.config import (
    ConfigAdapter,
    copy_default_config,
    load_config,
    save_config_file,
)
from rc4kit.infra.paths import DEFAULT_CONFIG_FILENAME
from rc4kit.libs.crypto import RC4, RC4Error, decrypt_text, encrypt_text
from rc4kit.libs.crypto.text import ENCODINGS, OUTPUT_FORMATS
from rc4kit.schemas import CipherConfig

logger = logging.getLogger(__name__)


def _non_negative(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer: {value}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rc4kit",
        description="Encrypt and decrypt text with the RC4 stream cipher.",
        epilog="RC4 is broken; use it for learning and compatibility only.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--config", type=Path, help="Path to a settings file")
    parser.add_argument("--profile", help="Settings profile to apply")

    sub = parser.add_subparsers(dest="command", required=True)

    for name, text_help in (
        ("encrypt", "Plaintext (read from stdin if omitted)"),
        ("decrypt", "Ciphertext (read from stdin if omitted)"),
    ):
        p = sub.add_parser(name, help=f"{name.capitalize()} text")
        p.add_argument("-k", "--key", required=True, help="Key text")
        p.add_argument("-t", "--text", help=text_help)
        p.add_argument("--encoding", choices=ENCODINGS, help="Text encoding")
        p.add_argument("--format", choices=OUTPUT_FORMATS, help="Ciphertext format")
        p.add_argument("--drop", type=_non_negative, help="Keystream bytes to drop")

    ks = sub.add_parser("keystream", help="Print raw keystream bytes as hex")
    ks.add_argument("-k", "--key", required=True, help="Key text (UTF-8)")
    ks.add_argument("-n", "--length", type=_non_negative, required=True)
    ks.add_argument("--drop", type=_non_negative, help="Keystream bytes to drop")

    cfg = sub.add_parser("config", help="Manage settings files")
    cfg_sub = cfg.add_subparsers(dest="config_command", required=True)
    init = cfg_sub.add_parser(
        "init", help=f"Write a sample {DEFAULT_CONFIG_FILENAME} to the current dir"
    )
    init.add_argument("--force", action="store_true", help="Overwrite existing file")
    install = cfg_sub.add_parser("set", help="Install a settings file as the default")
    install.add_argument("path", type=Path)

    return parser


def _load_settings(config_path: Path | None) -> dict[str, Any]:
    try:
        return load_config(config_path)
    except FileNotFoundError:
        if config_path is not None:
            raise
        logger.debug("No settings file found, using defaults")
        return {}


def _resolve_cipher_config(args: argparse.Namespace) -> CipherConfig:
    adapter = ConfigAdapter(_load_settings(args.config))
    cfg = adapter.get_cipher_config(args.profile)

    overrides: dict[str, Any] = {}
    if getattr(args, "encoding", None):
        overrides["text_encoding"] = args.encoding
    if getattr(args, "format", None):
        overrides["output_format"] = args.format
    if args.drop is not None:
        overrides["drop"] = args.drop
    return replace(cfg, **overrides)


def _read_text(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    # newline="" keeps CR characters of raw ciphertext untranslated
    stream = io.TextIOWrapper(
        sys.stdin.buffer, encoding=sys.stdin.encoding, newline=""
    )
    try:
        return stream.read()
    finally:
        stream.detach()


def _run_cipher(args: argparse.Namespace) -> None:
    cfg = _resolve_cipher_config(args)
    func = encrypt_text if args.command == "encrypt" else decrypt_text
    result = func(
        args.key,
        _read_text(args),
        encoding=cfg.text_encoding,
        output_format=cfg.output_format,
        drop=cfg.drop,
        max_key_length=cfg.max_key_length,
    )
    # Every raw character is a ciphertext byte, so no trailing newline
    raw = args.command == "encrypt" and cfg.output_format == "raw"
    sys.stdout.write(result if raw else result + "\n")


def _run_keystream(args: argparse.Namespace) -> None:
    cfg = _resolve_cipher_config(args)
    cipher = RC4(args.key.encode("utf-8"), drop=cfg.drop)
    sys.stdout.write(cipher.keystream(args.length).hex() + "\n")


def _run_config(args: argparse.Namespace) -> None:
    if args.config_command == "init":
        target = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if target.exists() and not args.force:
            raise FileExistsError(f"{target} already exists (use --force)")
        copy_default_config(target)
    else:
        save_config_file(args.path)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "encrypt": _run_cipher,
        "decrypt": _run_cipher,
        "keystream": _run_keystream,
        "config": _run_config,
    }
    try:
        handlers[args.command](args)
    except (RC4Error, ValueError, KeyError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
