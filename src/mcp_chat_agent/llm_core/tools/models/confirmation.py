"""Confirmation list configuration and approve/reject signals."""

from enum import Enum
from typing import FrozenSet, Iterable

from pydantic import BaseModel, ConfigDict, Field

DENIAL_MESSAGE = "User denied tool execution."


class ConfirmationOutcome(str, Enum):
    """Decision a user can take on a pending tool invocation."""

    APPROVED = "approved"
    REJECTED = "rejected"


class ConfirmationSignal(BaseModel):
    """External decision for one invocation, keyed by its call id."""

    model_config = ConfigDict(frozen=True)

    call_id: str
    outcome: ConfirmationOutcome


class ConfirmationList(BaseModel):
    """Immutable set of tool names whose calls need explicit approval.

    Built once from configuration and injected wherever tools are partitioned.
    """

    model_config = ConfigDict(frozen=True)

    tool_names: FrozenSet[str] = Field(default_factory=frozenset)

    @classmethod
    def of(cls, names: Iterable[str]) -> "ConfirmationList":
        return cls(tool_names=frozenset(n.strip() for n in names if n and n.strip()))

    def requires_confirmation(self, tool_name: str) -> bool:
        return tool_name in self.tool_names

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self.tool_names
