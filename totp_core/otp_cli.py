#!/usr/bin/env python3
"""
otp_cli.py: command-line wrapper around otp_core.py

Subcommands:
- code       : print the current TOTP code for a secret
- watch      : show the TOTP code in real time
- hotp       : HOTP code for a given counter
- verify     : check a code (exit status 0 = valid, 1 = invalid)
- new-secret : print a random Base32 secret

Examples:
    totp-cli code --secret "GEZD GNBV GY3T QOJQ"
    totp-cli code --secret GEZDGNBVGY3TQOJQ --algorithm SHA256 --digits 8 --json
    totp-cli watch --secret GEZDGNBVGY3TQOJQ --period 60
    totp-cli hotp --secret GEZDGNBVGY3TQOJQ --counter 42
    totp-cli verify --secret GEZDGNBVGY3TQOJQ --code 123456 --window 1
"""

import argparse
import json
import sys
import time

from totp_core import otp_core

EXIT_INVALID_INPUT = 2


def log(msg: str, verbose: bool):
    if verbose:
        print(f"[+] {msg}")


# --- CLI command handlers ---
def cmd_code(args):
    result = otp_core.generate(
        args.secret,
        period=args.period,
        digits=args.digits,
        algorithm=args.algorithm,
        now=args.time,
    )
    log(f"TOTP: time={result.timestamp}, counter={result.timestamp // result.period}, "
        f"algorithm={result.algorithm}", args.verbose)
    if args.json:
        print(json.dumps(result.as_dict()))
    else:
        print(f"TOTP ({result.digits}d, {result.algorithm}): {result.code}  (valid ~{result.remaining:2d}s)")
    return 0


def cmd_watch(args):
    print("Press Ctrl+C to quit. Generating TOTP in real time...\n")
    last_code = None
    try:
        while True:
            result = otp_core.generate(
                args.secret, period=args.period, digits=args.digits, algorithm=args.algorithm
            )
            if result.code != last_code:
                print(f"TOTP: {result.code}  (valid ~{result.remaining:2d}s)")
                last_code = result.code
            else:
                print(f".. {result.remaining:2d}s left", end='\r', flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")
    return 0


def cmd_hotp(args):
    otp_core.validate_digits(args.digits)
    algorithm = otp_core.resolve_algorithm(args.algorithm)
    key = otp_core.decode_base32(args.secret)
    log(f"HOTP: HMAC-{algorithm}(key=secret, msg=counter={args.counter})", args.verbose)
    code = otp_core.hotp(key, args.counter, args.digits, algorithm)
    print(f"HOTP(counter={args.counter}): {code}")
    return 0


def cmd_verify(args):
    ok = otp_core.verify(
        args.secret,
        args.code,
        period=args.period,
        digits=args.digits,
        algorithm=args.algorithm,
        window=args.window,
        now=args.time,
    )
    if ok:
        print("[+] TOTP code is VALID")
        return 0
    print("[-] TOTP code is INVALID")
    return 1


def cmd_new_secret(args):
    print(otp_core.generate_base32_secret(args.length))
    return 0


def cmd_help(args):
    print("No command specified. Use -h for help.")
    return 0


# --- Argparse builder ---
def _add_totp_options(p: argparse.ArgumentParser, with_time: bool = True):
    p.add_argument("--secret", required=True, help="Base32 secret (spaces allowed)")
    p.add_argument("--period", type=int, default=otp_core.DEFAULT_TIME_STEP, help="TOTP time step (seconds)")
    p.add_argument("--digits", type=int, default=otp_core.DEFAULT_DIGITS, help="Number of OTP digits")
    p.add_argument("--algorithm", default=otp_core.DEFAULT_ALGORITHM, help="SHA1, SHA256 or SHA512")
    if with_time:
        p.add_argument("--time", type=int, default=None, help="Unix time to use instead of now")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="totp-cli", description="TOTP/HOTP generator (HMAC-SHA1/256/512)")
    p.add_argument("--verbose", action="store_true", help="Verbose output")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    # code
    pc = sub.add_parser("code", help="Print the current TOTP code")
    _add_totp_options(pc)
    pc.add_argument("--json", action="store_true", help="Print the full result as JSON")
    pc.set_defaults(func=cmd_code)

    # watch
    pw = sub.add_parser("watch", help="Show TOTP code in real time")
    _add_totp_options(pw, with_time=False)
    pw.set_defaults(func=cmd_watch)

    # hotp
    ph = sub.add_parser("hotp", help="Generate HOTP code for a specific counter")
    ph.add_argument("--secret", required=True, help="Base32 secret (spaces allowed)")
    ph.add_argument("--counter", type=int, required=True)
    ph.add_argument("--digits", type=int, default=otp_core.DEFAULT_DIGITS)
    ph.add_argument("--algorithm", default=otp_core.DEFAULT_ALGORITHM)
    ph.set_defaults(func=cmd_hotp)

    # verify
    pv = sub.add_parser("verify", help="Verify a TOTP code")
    _add_totp_options(pv)
    pv.add_argument("--code", required=True, help="OTP code to verify")
    pv.add_argument("--window", type=int, default=1, help="Allowed +/- step window")
    pv.set_defaults(func=cmd_verify)

    # new-secret
    pn = sub.add_parser("new-secret", help="Print a random Base32 secret")
    pn.add_argument("--length", type=int, default=32, help="Number of Base32 characters (>= 32)")
    pn.set_defaults(func=cmd_new_secret)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except ValueError as e:
        # otp_core.OTPError and pyotp's length check are both ValueErrors
        print(f"[!] {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT


if __name__ == "__main__":
    sys.exit(main())
