"""Application layer for pgpsign.

Ports describe what a signer must do; adapters implement them on top of the
subprocess utilities in :mod:`pgpsign.utils`.
"""
