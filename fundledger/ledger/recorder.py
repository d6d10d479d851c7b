"""
Transaction Recorder

The only place Transaction records are created.

Records are prepended to the log (newest first). Several drafts recorded
together share one timestamp and land as one contiguous block, in the
order they were given, ahead of everything already in the log.
"""

from typing import Iterable, Sequence

from fundledger.models.ledger import LedgerState, Transaction, TransactionDraft


def unique_id(stamp: int, taken: set[str], start: int = 1) -> tuple[str, int]:
    """
    First free `<stamp>-<seq>` id at or after `start`.

    Returns the id and the sequence number used.
    """
    seq = start
    candidate = f"{stamp}-{seq}"
    while candidate in taken:
        seq += 1
        candidate = f"{stamp}-{seq}"
    return candidate, seq


class TransactionRecorder:
    """Builds immutable transactions and prepends them to a ledger state."""

    def record(
        self,
        state: LedgerState,
        draft: TransactionDraft,
        date: int,
    ) -> tuple[LedgerState, Transaction]:
        """Record a single transaction. Returns the new state and the record."""
        new_state, recorded = self.record_batch(state, [draft], date)
        return new_state, recorded[0]

    def record_batch(
        self,
        state: LedgerState,
        drafts: Sequence[TransactionDraft],
        date: int,
    ) -> tuple[LedgerState, tuple[Transaction, ...]]:
        """
        Record several transactions sharing one timestamp.

        Ids stay unique even when the timestamp matches earlier records.
        Balances are NOT touched here; the caller updates them in the
        same new state.
        """
        recorded = tuple(self._build(drafts, date, {t.id for t in state.transactions}))
        new_state = state.model_copy(
            update={"transactions": recorded + state.transactions}
        )
        return new_state, recorded

    def _build(
        self,
        drafts: Iterable[TransactionDraft],
        date: int,
        taken: set[str],
    ) -> Iterable[Transaction]:
        seq = 0
        for draft in drafts:
            transaction_id, seq = unique_id(date, taken, seq + 1)
            taken.add(transaction_id)
            yield Transaction(
                id=transaction_id,
                amount=draft.amount,
                fund_type=draft.fund_type,
                type=draft.type,
                description=draft.description,
                date=date,
            )
