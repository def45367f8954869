from __future__ import annotations

import io
import json
import unittest
from contextlib import redirect_stdout

from ulidkit.cli import build_parser, main


KNOWN = "01ARYZ6S41" + "0" * 15 + "1"


def _run(argv: list[str]) -> str:
    buf = io.StringIO()
    with redirect_stdout(buf):
        rc = main(argv)
    assert rc == 0
    return buf.getvalue()


class TestCliSurface(unittest.TestCase):
    def test_top_level_commands(self) -> None:
        parser = build_parser()
        subactions = [a for a in parser._actions if getattr(a, "choices", None)]
        choices = set()
        for a in subactions:
            choices.update(a.choices.keys())
        for cmd in ("generate", "encode", "decode", "to-binary", "serve"):
            self.assertIn(cmd, choices)

    def test_generate_flags(self) -> None:
        parser = build_parser()
        ns = parser.parse_args(["generate", "--time", "1469918176385", "--count", "3", "--prefix", "evt"])
        self.assertEqual(ns.time, 1469918176385)
        self.assertEqual(ns.count, 3)
        self.assertEqual(ns.prefix, "evt")

    def test_serve_defaults(self) -> None:
        ns = build_parser().parse_args(["serve"])
        self.assertEqual(ns.host, "127.0.0.1")
        self.assertEqual(ns.port, 8787)
        self.assertFalse(ns.reload)


class TestCliCommands(unittest.TestCase):
    def test_generate_at_time(self) -> None:
        lines = _run(["generate", "--time", "1469918176385", "--count", "2"]).split()
        self.assertEqual(len(lines), 2)
        for line in lines:
            self.assertEqual(len(line), 26)
            self.assertTrue(line.startswith("01ARYZ6S41"))

    def test_generate_with_prefix(self) -> None:
        line = _run(["generate", "--prefix", "tx"]).strip()
        self.assertTrue(line.startswith("tx_"))
        self.assertEqual(len(line), 29)

    def test_generate_rejects_overflow(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            main(["generate", "--time", "281474976710656"])
        self.assertIn("2^48", str(ctx.exception.code))

    def test_encode_and_to_binary(self) -> None:
        raw = bytes.fromhex("01563df36481" + "00" * 9 + "01")
        out = _run(["encode", raw.hex()]).strip()
        self.assertEqual(out, KNOWN)
        self.assertEqual(_run(["to-binary", out]).strip(), raw.hex())

    def test_encode_rejects_bad_hex(self) -> None:
        with self.assertRaises(SystemExit):
            main(["encode", "zz"])
        with self.assertRaises(SystemExit):
            main(["encode", "00ff"])

    def test_decode_plain_and_json(self) -> None:
        self.assertEqual(_run(["decode", KNOWN]).strip(), "1469918176385\t" + KNOWN[10:])

        obj = json.loads(_run(["decode", KNOWN, "--json"]))
        self.assertEqual(obj["time"], 1469918176385)
        self.assertEqual(obj["timeIso"], "2016-07-30T22:36:16.385Z")
        self.assertEqual(obj["randomness"], KNOWN[10:])

        obj = json.loads(_run(["decode", KNOWN, "--json", "--bytes"]))
        self.assertEqual(obj["randomness"], "00" * 9 + "01")

    def test_decode_rejects_malformed(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            main(["decode", KNOWN[:-1]])
        self.assertIn("26 characters", str(ctx.exception.code))
