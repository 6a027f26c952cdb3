"""CLI smoke tests against the fake engine."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from pgpsign import __version__
from pgpsign.cli import EXIT_BAD_SIGNATURE, EXIT_ERROR, app
from pgpsign.config import Settings
from pgpsign.utils.armor import BEGIN_MARKER

runner = CliRunner()


@pytest.fixture
def passphrase_file(tmp_path: Path) -> Path:
    path = tmp_path / "passphrase"
    path.write_text("testing\n", encoding="utf-8")
    return path


@pytest.fixture
def document(tmp_path: Path) -> Path:
    path = tmp_path / "document.txt"
    path.write_text("hello\n", encoding="utf-8")
    return path


def _sign(fake_gpg: Path, passphrase_file: Path, output: Path, *args: str) -> None:
    result = runner.invoke(
        app,
        [
            "--path",
            str(fake_gpg),
            "sign",
            "testkey",
            *args,
            "--passphrase-file",
            str(passphrase_file),
            "--output",
            str(output),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Signature written to" in result.output


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"pgpsign version {__version__}" in result.stdout


def test_sign_then_verify_file(
    override_settings: Settings,
    fake_gpg: Path,
    passphrase_file: Path,
    document: Path,
    tmp_path: Path,
) -> None:
    signature = tmp_path / "document.sig"
    _sign(fake_gpg, passphrase_file, signature, str(document))

    assert BEGIN_MARKER not in signature.read_text(encoding="utf-8")

    result = runner.invoke(
        app, ["--path", str(fake_gpg), "verify", str(signature), str(document)]
    )
    assert result.exit_code == 0, result.output
    assert "Good signature from testkey" in result.output


def test_armored_signature_verifies(
    override_settings: Settings,
    fake_gpg: Path,
    passphrase_file: Path,
    document: Path,
    tmp_path: Path,
) -> None:
    signature = tmp_path / "document.asc"
    _sign(fake_gpg, passphrase_file, signature, str(document), "--armor")

    assert signature.read_text(encoding="utf-8").startswith(BEGIN_MARKER)

    result = runner.invoke(
        app, ["--path", str(fake_gpg), "verify", str(signature), str(document)]
    )
    assert result.exit_code == 0, result.output


def test_sign_reads_stdin_when_no_files(
    override_settings: Settings,
    fake_gpg: Path,
    passphrase_file: Path,
    document: Path,
    tmp_path: Path,
) -> None:
    signature = tmp_path / "stdin.sig"
    result = runner.invoke(
        app,
        [
            "--path",
            str(fake_gpg),
            "sign",
            "testkey",
            "--passphrase-file",
            str(passphrase_file),
            "-o",
            str(signature),
        ],
        input="hello\n",
    )
    assert result.exit_code == 0, result.output

    verified = runner.invoke(
        app, ["--path", str(fake_gpg), "verify", str(signature), str(document)]
    )
    assert verified.exit_code == 0, verified.output


def test_tampered_file_exits_with_bad_signature(
    override_settings: Settings,
    fake_gpg: Path,
    passphrase_file: Path,
    document: Path,
    tmp_path: Path,
) -> None:
    signature = tmp_path / "document.sig"
    _sign(fake_gpg, passphrase_file, signature, str(document))
    document.write_text("hello\nx", encoding="utf-8")

    result = runner.invoke(
        app, ["--path", str(fake_gpg), "verify", str(signature), str(document)]
    )
    assert result.exit_code == EXIT_BAD_SIGNATURE
    assert "BAD signature" in result.output


def test_munge_flag_ignores_trailing_spaces(
    override_settings: Settings,
    fake_gpg: Path,
    passphrase_file: Path,
    document: Path,
    tmp_path: Path,
) -> None:
    signature = tmp_path / "document.sig"
    _sign(fake_gpg, passphrase_file, signature, str(document))
    spaced = tmp_path / "spaced.txt"
    spaced.write_text("hello   \n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["--path", str(fake_gpg), "--munge", "verify", str(signature), str(spaced)],
    )
    assert result.exit_code == 0, result.output


def test_wrong_passphrase_exits_with_error(
    override_settings: Settings,
    fake_gpg: Path,
    document: Path,
    tmp_path: Path,
) -> None:
    wrong = tmp_path / "wrong"
    wrong.write_text("nope\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "--path",
            str(fake_gpg),
            "sign",
            "testkey",
            str(document),
            "--passphrase-file",
            str(wrong),
        ],
    )
    assert result.exit_code == EXIT_ERROR
    assert "Bad passphrase" in result.output


def test_garbage_signature_exits_with_error(
    override_settings: Settings, fake_gpg: Path, document: Path, tmp_path: Path
) -> None:
    signature = tmp_path / "garbage.sig"
    signature.write_text("not a signature\n", encoding="utf-8")

    result = runner.invoke(
        app, ["--path", str(fake_gpg), "verify", str(signature), str(document)]
    )
    assert result.exit_code == EXIT_ERROR
    assert "failed with status 2" in result.output


def test_unknown_style_rejected(override_settings: Settings, document: Path) -> None:
    result = runner.invoke(app, ["--style", "PGP5", "verify", str(document)])
    assert result.exit_code != 0
    assert override_settings.style == "GPG"


def test_doctor_passes_with_supported_engine(
    override_settings: Settings, fake_gpg: Path
) -> None:
    override_settings.home.mkdir()

    result = runner.invoke(app, ["--path", str(fake_gpg), "doctor"])

    assert result.exit_code == 0, result.output
    assert "Version 2.4.4 (style GPG)" in result.output


def test_doctor_flags_old_engine(
    override_settings: Settings, fake_gpg: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    override_settings.home.mkdir()
    monkeypatch.setenv("FAKE_GPG_VERSION", "gpg (GnuPG) 2.0.22")

    result = runner.invoke(app, ["--path", str(fake_gpg), "doctor"])

    assert result.exit_code == 1
    assert "2.1.12+" in result.output


def test_doctor_flags_missing_engine(override_settings: Settings, tmp_path: Path) -> None:
    result = runner.invoke(app, ["--path", str(tmp_path / "absent-gpg"), "doctor"])

    assert result.exit_code == 1
    assert "Install GnuPG" in result.output


def test_oversized_passphrase_exits_with_error(
    override_settings: Settings, fake_gpg: Path, document: Path, tmp_path: Path
) -> None:
    huge = tmp_path / "huge"
    huge.write_text("x" * 100_000 + "\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["--path", str(fake_gpg), "sign", "testkey", str(document), "--passphrase-file", str(huge)],
    )
    assert result.exit_code == EXIT_ERROR
    assert "Passphrase longer" in result.output
