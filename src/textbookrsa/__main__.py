"""The Command Line Interface for the utility.

A thin non-interactive wrapper over the library. Keys and messages travel as plain integers on the command line
and are printed as decimal lines; this is a convenience for experiments and not a key format.

Typical usage example:

    textbookrsa keygen --bits 512
    OR
    python -m textbookrsa encrypt --n 3233 --e 17 --message 65
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import random
import sys
import typing

import textbookrsa
from textbookrsa import numtheory
from textbookrsa import rsa


def big_int(value: str) -> int:
    """Parse any Python integer literal (decimal, 0x, 0o, 0b)."""
    try:
        return int(value, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from exc


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Callable = big_int


help_dict: dict[str, HelpData] = {
    "keygen": HelpData("Key generation utility."),
    "encrypt": HelpData("Encryption utility."),
    "decrypt": HelpData("Decryption utility."),
    "sign": HelpData("Signing utility."),
    "verify": HelpData("Signature verification utility, prints the recovered message."),
    "prime": HelpData("Random probable prime generator."),
    "isprime": HelpData("Miller-Rabin primality check."),
    "n": HelpData("The key modulus."),
    "e": HelpData("The public exponent."),
    "d": HelpData("The private exponent."),
    "message": HelpData("The integer message, in [0, n)."),
    "signature": HelpData("The integer signature."),
    "expected": HelpData("The message the signature should recover. Exits with 1 on mismatch."),
    "bits": HelpData("Size in bits.", int),
    "seed": HelpData("Seed for a deterministic (insecure!) random source.", int),
    "bases": HelpData("Number of Miller-Rabin bases. Defaults to the FIPS 186-5 table.", int),
    "value": HelpData("The candidate to test."),
}

modulus = argparse.ArgumentParser(add_help=False)
modulus.add_argument("--n", "-N", required=True, type=help_dict["n"].format, help=help_dict["n"].description)
pubexp = argparse.ArgumentParser(add_help=False)
pubexp.add_argument("--e", "-e", required=True, type=help_dict["e"].format, help=help_dict["e"].description)
privexp = argparse.ArgumentParser(add_help=False)
privexp.add_argument("--d", "-d", required=True, type=help_dict["d"].format, help=help_dict["d"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message",
                      "-m",
                      required=True,
                      type=help_dict["message"].format,
                      help=help_dict["message"].description)
seeded = argparse.ArgumentParser(add_help=False)
seeded.add_argument("--seed", type=help_dict["seed"].format, help=help_dict["seed"].description)
corep = argparse.ArgumentParser(prog="textbookrsa")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {textbookrsa.__version__}")
corep.add_argument("--verbose", "-V", action="store_true", help="Enable debug logging")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands", required=True)

keygen = commands.add_parser("keygen", parents=[seeded], help=help_dict["keygen"].description)
keygen.add_argument("--bits",
                    "-b",
                    type=help_dict["bits"].format,
                    default=rsa.DEFAULT_KEY_SIZE,
                    help=help_dict["bits"].description)
commands.add_parser("encrypt", parents=[modulus, pubexp, payloads], help=help_dict["encrypt"].description)
commands.add_parser("decrypt", parents=[modulus, privexp, payloads], help=help_dict["decrypt"].description)
commands.add_parser("sign", parents=[modulus, privexp, payloads], help=help_dict["sign"].description)
verify = commands.add_parser("verify", parents=[modulus, pubexp], help=help_dict["verify"].description)
verify.add_argument("--message",
                    "-m",
                    type=help_dict["expected"].format,
                    help=help_dict["expected"].description)
verify.add_argument("--signature",
                    "-S",
                    required=True,
                    type=help_dict["signature"].format,
                    help=help_dict["signature"].description)
prime = commands.add_parser("prime", parents=[seeded], help=help_dict["prime"].description)
prime.add_argument("--bits", "-b", type=help_dict["bits"].format, required=True, help=help_dict["bits"].description)
isprime = commands.add_parser("isprime", help=help_dict["isprime"].description)
isprime.add_argument("value", type=help_dict["value"].format, help=help_dict["value"].description)
isprime.add_argument("--bases", "-k", type=help_dict["bases"].format, help=help_dict["bases"].description)


def main(argv: list[str] | None = None) -> None:
    """Core Command Line Interface"""
    args = corep.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    rng = random.Random(args.seed) if getattr(args, "seed", None) is not None else None
    try:
        match args.subcommand:
            case "keygen":
                key = rsa.RSAKey.generate_random_key(args.bits, rng)
                print(key.n)
                print(key.e)
                print(key.d)
            case "encrypt":
                print(rsa.RSAPublicKey(args.n, args.e).encrypt(args.message))
            case "decrypt" | "sign":
                # Both are message**d mod n; only the private half is known here.
                print(pow(args.message, args.d, args.n))
            case "verify":
                recovered = rsa.RSAPublicKey(args.n, args.e).verify(args.signature)
                print(recovered)
                if args.message is not None and recovered != args.message:
                    print("Signature Verification Failed!", file=sys.stderr)
                    sys.exit(1)
            case "prime":
                print(numtheory.generate_random_prime(args.bits, rng))
            case "isprime":
                if numtheory.is_prime(args.value, args.bases):
                    print("probably prime")
                else:
                    print("composite")
                    sys.exit(1)
    except ValueError as exc:
        corep.error(str(exc))


if __name__ == "__main__":
    main()
