from __future__ import annotations

from typing import TYPE_CHECKING

from voting.errors import Unauthorized

if TYPE_CHECKING:
    from voting.state import ContractState


def is_owner(state: "ContractState", caller: str) -> bool:
    return caller == state.owner


def require_owner(state: "ContractState", caller: str) -> None:
    """
    Raises Unauthorized unless caller is the address fixed as owner at deployment.
    """
    if not is_owner(state, caller):
        raise Unauthorized()
