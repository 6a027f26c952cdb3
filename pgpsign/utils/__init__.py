"""Utility modules for talking to the OpenPGP engine."""

from pgpsign.utils.armor import armor_signature, extract_signature
from pgpsign.utils.feeder import WhitespaceMunger, feed
from pgpsign.utils.process import PassphraseChannel, ProcessResult, run_process
from pgpsign.utils.sources import (
    BufferSource,
    CallableSource,
    ChunksSource,
    StreamSource,
    as_source,
)
from pgpsign.utils.status import Verdict, parse_status
from pgpsign.utils.tempfiles import secure_tempfile

__all__ = [
    "armor_signature",
    "extract_signature",
    "feed",
    "WhitespaceMunger",
    "PassphraseChannel",
    "ProcessResult",
    "run_process",
    "BufferSource",
    "CallableSource",
    "ChunksSource",
    "StreamSource",
    "as_source",
    "Verdict",
    "parse_status",
    "secure_tempfile",
]
