"""Parse GnuPG ``--status-fd`` output into a verification verdict."""

from __future__ import annotations

import re
from dataclasses import dataclass

# GnuPG 1.4 and 2.x emit the same tokens, e.g.
#   [GNUPG:] GOODSIG 7D80315C5736DE75 Russ Allbery <eagle@eyrie.org>
#   [GNUPG:] BADSIG 7D80315C5736DE75 Russ Allbery <eagle@eyrie.org>
_GOODSIG = re.compile(r"\[GNUPG:\]\s+GOODSIG\s+(\S+)\s+(.*)")
_BADSIG = re.compile(r"^\[GNUPG:\]\s+BADSIG\s+(\S+)")


@dataclass(frozen=True, slots=True)
class Verdict:
    """Outcome of a verification the engine ran to completion.

    ``signer`` is the human-readable user ID of a good signature and the
    empty string for a bad one.
    """

    good: bool
    key_id: str | None = None
    signer: str = ""

    def __bool__(self) -> bool:
        return self.good


def parse_status(output: str) -> Verdict | None:
    """Return the verdict from the first GOODSIG/BADSIG line, if any."""
    for line in output.splitlines():
        good = _GOODSIG.search(line)
        if good:
            return Verdict(good=True, key_id=good.group(1), signer=good.group(2).rstrip())
        bad = _BADSIG.match(line)
        if bad:
            return Verdict(good=False, key_id=bad.group(1))
    return None
