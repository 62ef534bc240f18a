from voting.contract import TxReceipt, Voting
from voting.errors import (
    AlreadyRegistered,
    AlreadyVoted,
    EmptyProposal,
    NotVoter,
    ProposalNotFound,
    Unauthorized,
    VotingError,
    WrongPhase,
)
from voting.events import ContractEvent
from voting.journal import Journal, JournalIntegrityError
from voting.state import ContractState, Proposal, Voter
from voting.workflow import WorkflowStatus

__version__ = "0.1.0"

__all__ = [
    "AlreadyRegistered",
    "AlreadyVoted",
    "ContractEvent",
    "ContractState",
    "EmptyProposal",
    "Journal",
    "JournalIntegrityError",
    "NotVoter",
    "Proposal",
    "ProposalNotFound",
    "TxReceipt",
    "Unauthorized",
    "Voter",
    "Voting",
    "VotingError",
    "WorkflowStatus",
    "WrongPhase",
    "__version__",
]
