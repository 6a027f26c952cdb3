"""Port interfaces for the pgpsign application layer.

Callers depend on these protocols, never on a concrete adapter.
"""

__all__ = [
    "BackendConfig",
    "BackendStyle",
    "SignerPort",
]

from pgpsign.app.ports.signer import BackendConfig, BackendStyle, SignerPort
