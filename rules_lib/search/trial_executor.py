"""
Time-Bounded Trial Executor.

Runs one miner invocation under a wall-clock budget:

    caller ──start──> worker thread ──invoke(cancel_event)──> miner
       │                                    │
       └── wait(budget) ── expired? ── set cancel_event, join(grace) ── TIMED_OUT

Design principles:
- One trial in flight at a time; the worker exists only to enforce the budget
- Cancellation is advisory: the miner may keep running after TIMED_OUT
- Each trial writes into its own slot, so a late result from an abandoned
  trial can never reach a later trial
- Miner exceptions become ERRORED results and never reach the caller
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from rules_lib.constants import DEFAULT_GRACE_PERIOD_SECONDS
from rules_lib.logging_config import get_logger
from rules_lib.models.mining_config import ConfigurationError
from rules_lib.models.result import RuleMiningResult
from rules_lib.models.rule import Rule

logger = get_logger(__name__)

TrialInvocation = Callable[[threading.Event], Optional[Sequence[Rule]]]


@dataclass
class _TrialSlot:
    """Private mailbox between one worker thread and the caller."""
    cancel_event: threading.Event = field(default_factory=threading.Event)
    done: threading.Event = field(default_factory=threading.Event)
    rules: Optional[List[Rule]] = None
    error: Optional[Exception] = None
    finished_at: Optional[float] = None


class TrialExecutor:
    """
    Run a miner invocation with a hard budget and a bounded grace period.

    Parameters
    ----------
    grace_period_seconds : float
        How long the caller waits for a timed-out worker to acknowledge
        cancellation before reporting TIMED_OUT regardless

    Examples
    --------
    >>> executor = TrialExecutor(grace_period_seconds=0.1)
    >>> result = executor.run(lambda cancel: miner.mine(table, cfg, False, cancel),
    ...                       budget_seconds=30.0)
    >>> result.kind
    <ResultKind.FOUND: 'found'>
    """

    def __init__(self, grace_period_seconds: float = DEFAULT_GRACE_PERIOD_SECONDS):
        if grace_period_seconds < 0:
            raise ConfigurationError(
                f"grace_period_seconds cannot be negative, got {grace_period_seconds}"
            )
        self.grace_period_seconds = grace_period_seconds

    def run(
        self,
        invoke: TrialInvocation,
        budget_seconds: float,
        label: str = "trial",
        grace_seconds: Optional[float] = None,
    ) -> RuleMiningResult:
        """
        Run ``invoke`` and resolve it to a RuleMiningResult.

        Args:
            invoke: Callable receiving the cancellation token and returning
                rules (or None)
            budget_seconds: Wall-clock budget for the invocation
            label: Name used for the worker thread and log events
            grace_seconds: Cap on the grace wait for this call (default: the
                executor's grace period). Callers running several trials
                pass what is left of a shared allowance.

        Returns:
            FOUND (>= 1 rule), NOT_FOUND, TIMED_OUT or ERRORED

        Raises:
            ConfigurationError: If ``budget_seconds`` is not positive
        """
        if budget_seconds <= 0:
            raise ConfigurationError(f"budget_seconds must be positive, got {budget_seconds}")

        slot = _TrialSlot()
        worker = threading.Thread(
            target=self._execute,
            args=(invoke, slot),
            name=f"rule-trial-{label}",
            daemon=True,
        )

        started = time.monotonic()
        worker.start()

        if not slot.done.wait(budget_seconds):
            slot.cancel_event.set()
            grace = self.grace_period_seconds
            if grace_seconds is not None:
                grace = max(0.0, min(grace, grace_seconds))
            if grace > 0:
                worker.join(grace)
            logger.warning(
                "trial_timed_out",
                trial=label,
                budget_seconds=budget_seconds,
                waited_seconds=round(time.monotonic() - started, 4),
                worker_alive=worker.is_alive(),
            )
            return RuleMiningResult.timed_out()

        elapsed = slot.finished_at - started
        if slot.error is not None:
            reason = f"{type(slot.error).__name__}: {slot.error}"
            logger.warning("trial_errored", trial=label, reason=reason)
            return RuleMiningResult.errored(reason, elapsed_seconds=elapsed)

        if slot.rules:
            return RuleMiningResult.found(slot.rules, elapsed_seconds=elapsed)
        return RuleMiningResult.not_found(elapsed_seconds=elapsed)

    @staticmethod
    def _execute(invoke: TrialInvocation, slot: _TrialSlot) -> None:
        try:
            rules = invoke(slot.cancel_event)
            slot.rules = list(rules) if rules is not None else []
        except Exception as e:
            slot.error = e
        finally:
            slot.finished_at = time.monotonic()
            slot.done.set()
