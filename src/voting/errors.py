from __future__ import annotations

from typing import Any, Optional


class VotingError(ValueError):
    """
    Base class for every revert raised by the ballot contract.

    `reason` is the stable, human-readable revert string surfaced to callers.
    """

    default_reason = "reverted"

    def __init__(self, reason: Optional[str] = None) -> None:
        self.reason = reason or self.default_reason
        super().__init__(self.reason)

    def __str__(self) -> str:
        return self.reason


class Unauthorized(VotingError):
    default_reason = "Ownable: caller is not the owner"


class NotVoter(VotingError):
    default_reason = "You're not a voter"


class AlreadyRegistered(VotingError):
    default_reason = "Already registered"


class EmptyProposal(VotingError):
    default_reason = "Vous ne pouvez pas ne rien proposer"


class AlreadyVoted(VotingError):
    default_reason = "You have already voted"


class ProposalNotFound(VotingError):
    default_reason = "Proposal not found"


class WrongPhase(VotingError):
    default_reason = "Wrong workflow status"

    def __init__(
        self,
        reason: str,
        *,
        operation: str,
        current: Any,
        required: Any,
        too_early: bool,
    ) -> None:
        super().__init__(reason)
        self.operation = operation
        self.current = current
        self.required = required
        self.too_early = too_early
