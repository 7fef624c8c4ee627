from __future__ import annotations

import logging
from typing import Iterable

from ..core.constants import GENESIS_HASH
from ..core.enums import IntegrityIssue
from .codec import hash_of
from .model import IntegrityFinding, LedgerEntry, VerificationReport
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


def verify_entries(entries: Iterable[LedgerEntry]) -> VerificationReport:
    """Replay entries (ascending id) from GENESIS and report tampering.

    Each entry is checked twice: its stored ``previous_hash`` against the
    stored hash of the entry before it, and its stored ``entry_hash`` against
    a hash recomputed from its stored fields. The expected pointer always
    moves on to the *stored* hash, so one altered entry is reported once and
    does not make every later entry look broken.
    """

    total = 0
    valid_count = 0
    chain_broken = False
    invalid: list[IntegrityFinding] = []
    expected_previous = GENESIS_HASH

    for entry in entries:
        total += 1

        if entry.previous_hash != expected_previous:
            chain_broken = True
            invalid.append(
                IntegrityFinding(
                    entry_id=entry.entry_id,
                    reason=IntegrityIssue.CHAIN_BROKEN,
                    expected=expected_previous,
                    actual=entry.previous_hash,
                )
            )

        recomputed = hash_of(entry)
        if recomputed != entry.entry_hash:
            invalid.append(
                IntegrityFinding(
                    entry_id=entry.entry_id,
                    reason=IntegrityIssue.CONTENT_TAMPERED,
                    expected=recomputed,
                    actual=entry.entry_hash,
                )
            )
        else:
            valid_count += 1

        expected_previous = entry.entry_hash

    return VerificationReport(
        total=total,
        valid_count=valid_count,
        invalid=tuple(invalid),
        chain_broken=chain_broken,
    )


class IntegrityVerifier:
    def __init__(self, repo: LedgerRepository):
        self._repo = repo

    def verify(self) -> VerificationReport:
        report = verify_entries(self._repo.list_all())
        if report.invalid:
            logger.warning(
                "Ledger verification: %d of %d entries intact, %d findings, chain_broken=%s",
                report.valid_count, report.total, len(report.invalid), report.chain_broken,
            )
        else:
            logger.info("Ledger verification: %d entries intact", report.total)
        return report
