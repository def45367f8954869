from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from .result import Result
from .timeutil import ms_to_iso
from .ulid import decode, decode_bytes, encode, generate, to_binary


logger = logging.getLogger(__name__)


def _unwrap(res: Result) -> Any:
    if not res.ok:
        logger.debug("%s: %s", res.kind.value, res.detail)
        raise SystemExit(res.detail)
    return res.value


def _parse_hex(value: str) -> bytes:
    try:
        return bytes.fromhex(value.strip())
    except ValueError as e:
        raise SystemExit(f"invalid hex input: {value!r}") from e


def _iso_or_none(ms: int) -> str | None:
    try:
        return ms_to_iso(ms)
    except OverflowError:
        return None


def _cmd_generate(args: argparse.Namespace) -> int:
    if args.count < 1:
        raise SystemExit("--count must be >= 1")
    for _ in range(args.count):
        value = _unwrap(generate() if args.time is None else generate(args.time))
        print(f"{args.prefix}_{value}" if args.prefix else value)
    return 0


def _cmd_encode(args: argparse.Namespace) -> int:
    print(_unwrap(encode(_parse_hex(args.hex))))
    return 0


def _cmd_decode(args: argparse.Namespace) -> int:
    if args.bytes:
        time, rand = _unwrap(decode_bytes(args.ulid))
        rand = rand.hex()
    else:
        time, rand = _unwrap(decode(args.ulid))

    if args.json:
        print(json.dumps({"time": time, "timeIso": _iso_or_none(time), "randomness": rand}, ensure_ascii=False))
    else:
        print(f"{time}\t{rand}")
    return 0


def _cmd_to_binary(args: argparse.Namespace) -> int:
    print(_unwrap(to_binary(args.ulid)).hex())
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ulidkit", description="Generate and parse ULIDs.")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_gen = sub.add_parser("generate", help="Generate ULIDs.")
    p_gen.add_argument("--time", type=int, help="Epoch milliseconds (default: now).")
    p_gen.add_argument("--count", type=int, default=1)
    p_gen.add_argument("--prefix", help="Emit <prefix>_<ulid> ids.")
    p_gen.set_defaults(func=_cmd_generate)

    p_enc = sub.add_parser("encode", help="Encode a 16-byte binary ULID given as hex.")
    p_enc.add_argument("hex")
    p_enc.set_defaults(func=_cmd_encode)

    p_dec = sub.add_parser("decode", help="Decode a ULID into time and randomness.")
    p_dec.add_argument("ulid")
    p_dec.add_argument("--json", action="store_true", help="Emit JSON.")
    p_dec.add_argument("--bytes", action="store_true", help="Show randomness as hex bytes.")
    p_dec.set_defaults(func=_cmd_decode)

    p_bin = sub.add_parser("to-binary", help="Convert a ULID to its binary form (hex).")
    p_bin.add_argument("ulid")
    p_bin.set_defaults(func=_cmd_to_binary)

    p_serve = sub.add_parser("serve", help="Run the ulidkit API server.")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8787)
    p_serve.add_argument("--reload", action="store_true", help="Enable auto-reload (dev only).")
    p_serve.set_defaults(func=_cmd_serve)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return int(args.func(args))


def _cmd_serve(args: argparse.Namespace) -> int:
    from .server import create_app

    try:
        import uvicorn
    except Exception as e:  # pragma: no cover
        raise SystemExit(f"uvicorn is required to run the server: {e}")

    app = create_app()
    logger.info("serving on %s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, reload=bool(args.reload))
    return 0
