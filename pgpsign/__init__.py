"""pgpsign - Create and verify detached PGP signatures, securely.

Signing and verification are delegated to an external GnuPG binary; this
package only handles the subprocess protocol around it.
"""

__version__ = "1.0.0"
__author__ = "pgpsign Contributors"

from pgpsign.app.adapters.gnupg import GnuPGSigner
from pgpsign.app.ports.signer import BackendConfig
from pgpsign.config import Settings, get_settings
from pgpsign.errors import (
    ExecutionError,
    NoSignatureError,
    PassphraseError,
    PGPSignError,
    SpawnError,
    TempFileError,
    WriteError,
)
from pgpsign.utils.status import Verdict

__all__ = [
    "BackendConfig",
    "ExecutionError",
    "GnuPGSigner",
    "NoSignatureError",
    "PassphraseError",
    "PGPSignError",
    "Settings",
    "SpawnError",
    "TempFileError",
    "Verdict",
    "WriteError",
    "get_settings",
    "__version__",
]
