"""
Ledger Store

The single owner of the LedgerState.

DESIGN DECISION: Every mutation follows the same steps:
1. Read the current state
2. Build a NEW state (balances and log changed together)
3. Write the new state to storage
4. Only then publish it as the current state

If step 3 fails, step 4 never happens: the previous state stays current
and there is never a moment where balances and log disagree.

Other components read `store.state` and change it only through the
operations below (or the GoalManager, which goes through `save`).
"""

import json
import time
from decimal import Decimal
from typing import Any, Callable, Optional

from fundledger.audit import AuditLogger
from fundledger.errors import (
    InsufficientFundsError,
    InvalidInputError,
    PersistenceCorruptError,
)
from fundledger.ledger.migration import default_state, migrate_state
from fundledger.ledger.recorder import TransactionRecorder
from fundledger.models.ledger import (
    BALANCE_FIELDS,
    Allocation,
    FundType,
    LedgerState,
    Percentages,
    TransactionDraft,
    TransactionType,
)
from fundledger.services.storage import StateStorageInterface, StorageError
from fundledger.validation.validator import MONEY_PLACES, exact_decimal


DEFAULT_STORAGE_KEY = "moneys-wisdom-ledger-v1"
ALLOCATION_DESCRIPTION = "Income allocation"
PLAY_SPEND_DESCRIPTION = "Play spending"


def epoch_millis() -> int:
    return int(time.time() * 1000)


class LedgerStore:
    """
    Owns the ledger state and keeps balances, log and storage in lockstep.

    Usage:
        store = LedgerStore(JsonFileStorage("~/.fundledger"))
        store.load()
        store.apply_allocation(Allocation(freedom=500, dream=400, play=100))
    """

    def __init__(
        self,
        storage: StateStorageInterface,
        recorder: Optional[TransactionRecorder] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], int]] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        default_percentages: Optional[Percentages] = None,
    ):
        """
        Initialize the store with an empty default state.

        Call load() to pick up a previously saved ledger.

        Args:
            storage: Backend holding the serialized ledger
            recorder: Builds transaction records
            audit_logger: Receives an event for every change and rejection
            clock: Returns "now" in epoch milliseconds
            storage_key: Key of the ledger document
            default_percentages: Split used for a new or unreadable ledger
        """
        self._storage = storage
        self._recorder = recorder or TransactionRecorder()
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock or epoch_millis
        self._storage_key = storage_key
        self._default_percentages = default_percentages or Percentages()
        self._state = default_state(self._default_percentages)

    @property
    def state(self) -> LedgerState:
        """The current ledger state (read-only value)."""
        return self._state

    @property
    def recorder(self) -> TransactionRecorder:
        return self._recorder

    @property
    def storage_key(self) -> str:
        return self._storage_key

    def now(self) -> int:
        return self._clock()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> LedgerState:
        """
        Load the saved ledger, migrating older documents.

        Never raises: a missing document gives the default state, an
        unreadable one is logged and also gives the default state.
        """
        try:
            document = self._storage.read(self._storage_key)
            if document is None:
                state = default_state(self._default_percentages)
                self._audit_logger.log_state_initialized(self._storage_key)
            else:
                state = self.migrate(json.loads(document))
                self._audit_logger.log_state_loaded(
                    len(state.transactions), len(state.dream_goals)
                )
        except (StorageError, ValueError, PersistenceCorruptError) as e:
            self._audit_logger.log_state_corrupt(self._storage_key, str(e))
            state = default_state(self._default_percentages)

        drift = {
            fund.value: {
                "cached": str(state.balance(fund)),
                "from_log": str(state.derived_balance(fund)),
            }
            for fund in state.drifted_funds()
        }
        if drift:
            self._audit_logger.log_ledger_drift(drift)

        self._state = state
        return state

    def migrate(self, raw: Any) -> LedgerState:
        """Back-fill fields missing from an older document. Idempotent."""
        return migrate_state(raw, self._default_percentages)

    def save(self, state: Optional[LedgerState] = None) -> LedgerState:
        """
        Persist a state and make it the current one.

        Raises:
            StorageError: If the write fails (the current state is unchanged)
        """
        state = state if state is not None else self._state
        try:
            self._storage.write(self._storage_key, state.to_json())
        except StorageError as e:
            self._audit_logger.log_save_failed(self._storage_key, str(e))
            raise
        self._state = state
        self._audit_logger.log_state_saved(self._storage_key, len(state.transactions))
        return state

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _exact(
        self,
        operation: str,
        value: Any,
        field: str,
        places: Optional[int] = MONEY_PLACES,
    ) -> Decimal:
        """Reject numbers the JSON document could not hold exactly."""
        try:
            return exact_decimal(value, field, places)
        except InvalidInputError as e:
            self._audit_logger.log_rejected(operation, str(e), {"value": str(value)})
            raise

    def apply_allocation(self, contributions: Allocation) -> LedgerState:
        """
        Deposit an income split into the funds.

        One DEPOSIT per fund with a positive contribution, all sharing one
        timestamp. This is the only way the freedom fund grows.

        Raises:
            InvalidInputError: If a contribution cannot be stored exactly,
                or no contribution is positive
        """
        contributions = Allocation(**{
            fund.value.lower(): self._exact(
                "apply_allocation",
                contributions.amount_for(fund),
                f"allocation.{fund.value.lower()}",
            )
            for fund in FundType
        })
        drafts = [
            TransactionDraft(
                amount=contributions.amount_for(fund),
                fund_type=fund,
                type=TransactionType.DEPOSIT,
                description=ALLOCATION_DESCRIPTION,
            )
            for fund in FundType
            if contributions.amount_for(fund) > 0
        ]
        if not drafts:
            self._audit_logger.log_rejected(
                "apply_allocation", "No positive contribution to allocate"
            )
            raise InvalidInputError(
                "Nothing to allocate: every contribution is zero or negative",
                field="allocation",
            )

        state = self._state
        new_state, recorded = self._recorder.record_batch(state, drafts, self.now())
        new_state = new_state.model_copy(update={
            BALANCE_FIELDS[draft.fund_type]: state.balance(draft.fund_type) + draft.amount
            for draft in drafts
        })

        self.save(new_state)
        self._audit_logger.log_allocation_applied(
            [t.id for t in recorded],
            {t.fund_type.value: t.amount for t in recorded},
        )
        return new_state

    def apply_play_spend(self, amount: Decimal, description: str = "") -> LedgerState:
        """
        Spend from the play fund.

        Raises:
            InvalidInputError: If the amount cannot be stored exactly
            InsufficientFundsError: If amount <= 0 or amount > play fund
        """
        amount = self._exact("apply_play_spend", amount, "amount")
        state = self._state

        if amount <= 0 or amount > state.play_fund:
            reason = (
                "Amount must be positive"
                if amount <= 0
                else f"Play fund has {state.play_fund}"
            )
            self._audit_logger.log_rejected(
                "apply_play_spend", reason, {"amount": str(amount)}
            )
            raise InsufficientFundsError(FundType.PLAY, amount, state.play_fund)

        draft = TransactionDraft(
            amount=amount,
            fund_type=FundType.PLAY,
            type=TransactionType.WITHDRAWAL,
            description=(description or "").strip() or PLAY_SPEND_DESCRIPTION,
        )
        new_state, transaction = self._recorder.record(state, draft, self.now())
        new_state = new_state.model_copy(update={"play_fund": state.play_fund - amount})

        self.save(new_state)
        self._audit_logger.log_play_spent(transaction.id, amount, new_state.play_fund)
        return new_state

    def update_percentages(
        self,
        freedom: Optional[Decimal] = None,
        dream: Optional[Decimal] = None,
        play: Optional[Decimal] = None,
    ) -> LedgerState:
        """
        Change one or more shares of the split.

        The sum is deliberately not checked; see validation.check_percentages.

        Raises:
            InvalidInputError: If a share is not a finite number of at most
                MAX_SIGNIFICANT_DIGITS digits
        """
        shares = self._state.percentages.model_dump()
        for fund, value in (
            (FundType.FREEDOM, freedom),
            (FundType.DREAM, dream),
            (FundType.PLAY, play),
        ):
            if value is not None:
                field = f"percentages.{fund.value.lower()}"
                shares[fund.value.lower()] = self._exact(
                    "update_percentages", value, field, places=None
                )
        percentages = Percentages.model_validate(shares)

        new_state = self._state.model_copy(update={"percentages": percentages})
        self.save(new_state)
        self._audit_logger.log_percentages_updated({
            fund.value: percentages.share(fund) for fund in FundType
        })
        return new_state
