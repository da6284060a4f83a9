"""Resolve confirmation-gated invocations left pending by earlier turns."""

from __future__ import annotations

from dataclasses import dataclass, field
import asyncio
from typing import Dict, List, MutableMapping, Optional

from .executor import ToolExecutor
from ..models import ConfirmationList, ConfirmationOutcome, ToolCallResult, DENIAL_MESSAGE
from ...logger import get_logger
from ...messages import Conversation, ToolInvocation, ToolMessage

logger = get_logger(__name__)


@dataclass
class ResolutionReport:
    """Outcome of one resolver pass.

    Attributes:
        resolved: Results appended to the conversation during this pass, in history order.
        pending: Invocations still waiting for a signal, in history order.
    """

    resolved: List[ToolCallResult] = field(default_factory=list)
    pending: List[ToolInvocation] = field(default_factory=list)


class PendingCallResolver:
    """Patch the conversation with results for invocations the user has decided on.

    Only invocations of confirmation-listed tools are inspected. For each one
    still in the ``requested`` state:

    * approved: run it once through ``ToolExecutor.execute_confirmed``;
    * rejected: answer with the fixed denial message, no remote call;
    * no signal: leave it alone and report it as pending.

    Results are appended as ``ToolMessage`` records. Already resolved
    invocations are skipped, so running the resolver twice is harmless.
    """

    def __init__(self, confirmation_list: ConfirmationList, executor: ToolExecutor) -> None:
        self._confirmation_list = confirmation_list
        self._executor = executor

    async def resolve(
        self,
        conversation: Conversation,
        signals: MutableMapping[str, ConfirmationOutcome],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ResolutionReport:
        """Apply the available signals to the conversation.

        Signals that were applied are removed from ``signals``. Signals for
        invocations that are already resolved are dropped as stale.

        Args:
            conversation: History to scan and append to.
            signals: Outcome per invocation id, supplied by the UI.
            cancel_event: Once set, no further invocation is started; the
                remaining signals stay queued.

        Returns:
            What was resolved and what is still pending.
        """
        report = ResolutionReport()

        for invocation in conversation.invocations():
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Resolution cancelled; remaining decisions stay queued.")
                break

            if not self._confirmation_list.requires_confirmation(invocation.name):
                continue

            if conversation.is_resolved(invocation.call_id):
                if signals.pop(invocation.call_id, None) is not None:
                    logger.warning("Ignoring signal for already resolved invocation '%s'.", invocation.call_id)
                continue

            outcome = signals.get(invocation.call_id)
            if outcome is None:
                report.pending.append(invocation)
                continue

            if outcome is ConfirmationOutcome.APPROVED:
                result = await self._executor.execute_confirmed(invocation)
            else:
                logger.info("User rejected tool '%s' (ID: %s).", invocation.name, invocation.call_id)
                result = ToolCallResult(name=invocation.name, call_id=invocation.call_id, output=DENIAL_MESSAGE)

            conversation.append(
                ToolMessage(content=result.output or "", tool_call_id=invocation.call_id, name=invocation.name)
            )
            del signals[invocation.call_id]
            report.resolved.append(result)

        unmatched: Dict[str, ConfirmationOutcome] = {
            call_id: outcome for call_id, outcome in signals.items() if conversation.find_invocation(call_id) is None
        }
        for call_id in unmatched:
            logger.warning("Dropping signal for unknown invocation '%s'.", call_id)
            del signals[call_id]

        return report
