"""pgpsign CLI application with Typer."""

import shutil
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from pgpsign import __version__
from pgpsign.bootstrap import bootstrap_signer, configure_logging
from pgpsign.config import get_settings, set_settings
from pgpsign.errors import PGPSignError
from pgpsign.utils.armor import BEGIN_MARKER, armor_signature, extract_signature
from pgpsign.utils.version import MIN_GPG2_VERSION, detect_style, engine_version

app = typer.Typer(
    name="pgpsign",
    help="Create and verify detached PGP signatures using GnuPG",
    add_completion=False,
    no_args_is_help=True,
)

EXIT_BAD_SIGNATURE = 1
EXIT_ERROR = 2


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"pgpsign version {__version__}")
        raise typer.Exit()


def _fail(exc: Exception) -> NoReturn:
    typer.secho(str(exc), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=EXIT_ERROR) from exc


def _read_passphrase(passphrase_file: Path | None) -> str:
    if passphrase_file is None:
        return typer.prompt("Passphrase", hide_input=True)
    with passphrase_file.open(encoding="utf-8") as handle:
        return handle.readline().rstrip("\r\n")


def _open_inputs(stack: ExitStack, files: list[Path] | None) -> list:
    if not files:
        return [sys.stdin.buffer]
    return [stack.enter_context(path.open("rb")) for path in files]


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
    path: Annotated[
        str | None,
        typer.Option("--path", help="GnuPG binary to run"),
    ] = None,
    style: Annotated[
        str | None,
        typer.Option("--style", help="Backend style: GPG (GnuPG 2.1.12+) or GPG1"),
    ] = None,
    home: Annotated[
        Path | None,
        typer.Option("--home", help="GnuPG home directory holding the key rings"),
    ] = None,
    tmpdir: Annotated[
        Path | None,
        typer.Option("--tmpdir", help="Directory for temporary files"),
    ] = None,
    munge: Annotated[
        bool | None,
        typer.Option("--munge/--no-munge", help="Strip trailing whitespace from each line"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log engine invocations to stderr"),
    ] = False,
) -> None:
    """pgpsign - detached PGP signatures, securely."""
    # Update settings with CLI flags
    settings = get_settings()
    if path:
        settings.path = path
    if style:
        if style.upper() not in ("GPG", "GPG1"):
            raise typer.BadParameter(f"Unknown backend style {style}", param_hint="--style")
        settings.style = style.upper()  # type: ignore[assignment]
    if home:
        settings.home = home
    if tmpdir:
        settings.tmpdir = tmpdir
    if munge is not None:
        settings.munge = munge
    set_settings(settings)
    configure_logging(settings, verbose=verbose)


@app.command("sign")
def sign(
    keyid: Annotated[str, typer.Argument(help="Key ID or user ID to sign with")],
    files: Annotated[
        list[Path] | None,
        typer.Argument(help="Files to sign, concatenated in order (stdin if omitted)", exists=True),
    ] = None,
    passphrase_file: Annotated[
        Path | None,
        typer.Option(
            "--passphrase-file",
            help="Read the passphrase from the first line of this file instead of prompting",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the signature here instead of stdout"),
    ] = None,
    armor: Annotated[
        bool,
        typer.Option("--armor", help="Emit a complete armored block with markers"),
    ] = False,
) -> None:
    """Create a detached signature."""

    passphrase = _read_passphrase(passphrase_file)
    signer = bootstrap_signer()

    with ExitStack() as stack:
        try:
            signature = signer.sign(keyid, passphrase, *_open_inputs(stack, files))
        except PGPSignError as exc:
            _fail(exc)

    text = armor_signature(signature) if armor else signature + "\n"
    if output is None:
        typer.echo(text, nl=False)
    else:
        output.write_text(text, encoding="utf-8")
        typer.secho(f"Signature written to {output}", fg=typer.colors.GREEN, err=True)


@app.command("verify")
def verify(
    signature_file: Annotated[
        Path,
        typer.Argument(help="Signature body or armored .asc file", exists=True, dir_okay=False),
    ],
    files: Annotated[
        list[Path] | None,
        typer.Argument(help="Signed files, concatenated in order (stdin if omitted)", exists=True),
    ] = None,
) -> None:
    """Verify a detached signature.

    Exits 0 for a good signature, 1 for a bad one and 2 when verification
    could not be carried out.
    """

    signature = signature_file.read_text(encoding="utf-8")
    signer = bootstrap_signer()

    with ExitStack() as stack:
        try:
            if BEGIN_MARKER in signature:
                signature = extract_signature(signature)
            verdict = signer.check(signature, *_open_inputs(stack, files))
        except PGPSignError as exc:
            _fail(exc)

    if verdict.good:
        typer.secho(f"Good signature from {verdict.signer}", fg=typer.colors.GREEN)
        return
    typer.secho("BAD signature", fg=typer.colors.RED)
    raise typer.Exit(code=EXIT_BAD_SIGNATURE)


@app.command("doctor")
def doctor() -> None:
    """Check that the configured GnuPG binary is usable."""

    settings = get_settings()
    config = settings.backend_config()
    checks: list[tuple[bool, str, str]] = []

    binary = shutil.which(config.path)
    checks.append(
        (
            binary is not None,
            f"Engine: {binary or config.path}",
            f"Install GnuPG or pass --path (looked for {config.path!r})",
        )
    )

    version = engine_version(config.path) if binary else None
    if version is not None:
        if config.style == "GPG1":
            hint = "Style GPG1 needs GnuPG 1.x; use --style GPG"
        else:
            minimum = ".".join(str(part) for part in MIN_GPG2_VERSION)
            hint = f"Style GPG needs GnuPG {minimum}+; use --style GPG1 for GnuPG 1.x"
        ok = detect_style(config.path) == config.style
        checks.append((ok, f"Version {version} (style {config.style})", hint))
    elif binary:
        checks.append((False, "Cannot determine engine version", "Check the --path binary"))

    home = settings.get_home()
    checks.append(
        (home.is_dir(), f"Key rings: {home}", "Create the key ring or pass --home")
    )

    all_passed = True
    for passed, message, suggestion in checks:
        icon = "✓" if passed else "✗"
        color = typer.colors.GREEN if passed else typer.colors.RED
        typer.secho(f"  {icon} {message}", fg=color)
        if not passed:
            all_passed = False
            typer.secho(f"    → {suggestion}", fg=typer.colors.YELLOW)

    if not all_passed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
