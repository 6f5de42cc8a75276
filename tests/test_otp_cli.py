"""Tests for the totp-cli command line front end."""
import json

import pytest

from totp_core import otp_cli

SECRET = "GEZDGNBVGY3TQOJQ"


def test_code(capsys):
    assert otp_cli.main(["code", "--secret", "GEZD GNBV GY3T QOJQ", "--time", "1111111109"]) == 0
    out = capsys.readouterr().out
    assert "343526" in out
    assert "SHA1" in out


def test_code_json(capsys):
    otp_cli.main(["code", "--secret", SECRET, "--time", "1111111109", "--digits", "8", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["code"] == "93343526"
    assert data["remaining"] == 1
    assert data["secret"] == SECRET


def test_code_verbose(capsys):
    otp_cli.main(["--verbose", "code", "--secret", SECRET, "--time", "1111111109"])
    assert "[+] TOTP: time=1111111109, counter=37037036" in capsys.readouterr().out


def test_hotp(capsys):
    assert otp_cli.main(["hotp", "--secret", SECRET, "--counter", "0"]) == 0
    assert "HOTP(counter=0): 891490" in capsys.readouterr().out


@pytest.mark.parametrize("code,status", [("343526", 0), ("000000", 1)])
def test_verify(capsys, code, status):
    argv = ["verify", "--secret", SECRET, "--code", code, "--time", "1111111109"]
    assert otp_cli.main(argv) == status


def test_new_secret(capsys):
    assert otp_cli.main(["new-secret"]) == 0
    assert len(capsys.readouterr().out.strip()) == 32


@pytest.mark.parametrize("argv", [
    ["code", "--secret", "GEZDGNBVGY3TQOJ1"],
    ["code", "--secret", SECRET, "--period", "0"],
    ["code", "--secret", SECRET, "--digits", "11"],
    ["hotp", "--secret", "   ", "--counter", "1"],
    ["new-secret", "--length", "8"],
    ["verify", "--secret", SECRET, "--code", "343526", "--window", "-1"],
    ["code", "--secret", SECRET, "--time", "-1"],
])
def test_invalid_input_exits_with_2(capsys, argv):
    assert otp_cli.main(argv) == otp_cli.EXIT_INVALID_INPUT
    assert capsys.readouterr().err.startswith("[!] ")


def test_no_command(capsys):
    assert otp_cli.main([]) == 0
    assert "Use -h for help" in capsys.readouterr().out
