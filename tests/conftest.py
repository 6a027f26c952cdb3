"""Pytest configuration and fixtures."""

import os
import shutil
import stat
import subprocess
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

from pgpsign.app.ports.signer import BackendConfig
from pgpsign.config import Settings
from pgpsign.utils.version import gpg2_is_new_enough

FAKE_GPG = Path(__file__).resolve().parent / "fake_gpg.py"


@pytest.fixture
def fake_gpg(tmp_path: Path) -> Path:
    """Executable wrapper running the fake engine with this interpreter."""

    wrapper = tmp_path / "bin" / "fake-gpg"
    wrapper.parent.mkdir()
    wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{FAKE_GPG}" "$@"\n')
    wrapper.chmod(wrapper.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return wrapper


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    """Empty directory for verification temp files, so leaks are visible."""

    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def fake_config(fake_gpg: Path, scratch_dir: Path) -> BackendConfig:
    """Backend configuration pointing at the fake engine."""

    return BackendConfig(path=str(fake_gpg), tmpdir=scratch_dir)


@pytest.fixture
def argv_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Ask the fake engine to record its argv."""

    path = tmp_path / "argv.json"
    monkeypatch.setenv("FAKE_GPG_ARGV_LOG", str(path))
    return path


@pytest.fixture
def override_settings(tmp_path: Path) -> Generator[Settings, None, None]:
    """Provide isolated pgpsign settings scoped to tests."""

    import pgpsign.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(
        home=tmp_path / "gnupg",
        tmpdir=tmp_path,
        _env_file=None,
    )

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture(scope="session")
def gpg_home(tmp_path_factory: pytest.TempPathFactory) -> Generator[Path, None, None]:
    """Throwaway GnuPG home with a ``testkey`` key protected by ``testing``."""

    gpg = shutil.which("gpg")
    if gpg is None or not gpg2_is_new_enough(gpg):
        pytest.skip("GnuPG 2.1.12+ not installed")

    # gpg-agent sockets live in the home directory, so keep the path short.
    home = Path(tmp_path_factory.mktemp("gpg"))
    home.chmod(0o700)
    # A cached passphrase would let later signs succeed with any passphrase.
    (home / "gpg-agent.conf").write_text(
        "default-cache-ttl 0\nmax-cache-ttl 0\nallow-loopback-pinentry\n",
        encoding="utf-8",
    )
    result = subprocess.run(
        [
            gpg, "--homedir", str(home), "--batch", "--pinentry-mode", "loopback",
            "--passphrase", "testing", "--quick-generate-key", "testkey",
            "default", "sign", "never",
        ],
        capture_output=True,
        text=True,
        check=False,
    )  # fmt: skip
    if result.returncode != 0:
        pytest.skip(f"Cannot create test key: {result.stderr.strip()}")

    try:
        yield home
    finally:
        gpgconf = shutil.which("gpgconf")
        if gpgconf is not None:
            subprocess.run(
                [gpgconf, "--homedir", str(home), "--kill", "gpg-agent"],
                capture_output=True,
                check=False,
                env={**os.environ, "GNUPGHOME": str(home)},
            )
