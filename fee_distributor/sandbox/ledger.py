"""
In-memory asset ledger with allowances and per-asset transfer hooks.
"""

from typing import Callable, Dict, Optional, Tuple

import structlog

from fee_distributor.core.exceptions import TransferFailedError


logger = structlog.get_logger(__name__)

# Called as hook(sender, recipient, amount) before a transfer of the hooked asset moves funds
TransferHook = Callable[[str, str, int], None]


class InMemoryLedger:
    """Balances for every asset and holder, LP positions included."""

    def __init__(self):
        self._balances: Dict[Tuple[str, str], int] = {}
        self._allowances: Dict[Tuple[str, str, str], int] = {}
        self._supply: Dict[str, int] = {}
        self._pair_tokens: Dict[str, Tuple[str, str]] = {}
        self._hooks: Dict[str, TransferHook] = {}

    # Reads

    def balance_of(self, asset: str, holder: str) -> int:
        return self._balances.get((asset, holder), 0)

    def total_supply(self, asset: str) -> int:
        return self._supply.get(asset, 0)

    def allowance(self, asset: str, owner: str, spender: str) -> int:
        return self._allowances.get((asset, owner, spender), 0)

    def pair_tokens(self, asset: str) -> Optional[Tuple[str, str]]:
        return self._pair_tokens.get(asset)

    # Setup

    def register_pair_tokens(self, asset: str, token0: str, token1: str) -> None:
        """Make `asset` claim to be an LP position of token0/token1."""
        self._pair_tokens[asset] = (token0, token1)

    def set_transfer_hook(self, asset: str, hook: Optional[TransferHook]) -> None:
        if hook is None:
            self._hooks.pop(asset, None)
        else:
            self._hooks[asset] = hook

    def mint(self, asset: str, holder: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot mint a negative amount")
        self._balances[(asset, holder)] = self.balance_of(asset, holder) + amount
        self._supply[asset] = self.total_supply(asset) + amount

    def burn(self, asset: str, holder: str, amount: int) -> None:
        balance = self.balance_of(asset, holder)
        if amount > balance:
            raise TransferFailedError(
                f"Burn exceeds balance of {asset}",
                {"asset": asset, "holder": holder, "amount": amount, "balance": balance}
            )
        self._balances[(asset, holder)] = balance - amount
        self._supply[asset] = self.total_supply(asset) - amount

    # Writes

    def approve(self, asset: str, owner: str, spender: str, amount: int) -> None:
        self._allowances[(asset, owner, spender)] = amount

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        hook = self._hooks.get(asset)
        if hook is not None:
            hook(sender, recipient, amount)

        balance = self.balance_of(asset, sender)
        if amount < 0 or amount > balance:
            raise TransferFailedError(
                f"Transfer of {amount} {asset} exceeds balance {balance}",
                {"asset": asset, "sender": sender, "recipient": recipient, "amount": amount}
            )
        self._balances[(asset, sender)] = balance - amount
        self._balances[(asset, recipient)] = self.balance_of(asset, recipient) + amount

    def transfer_from(self, asset: str, spender: str, sender: str, recipient: str, amount: int) -> None:
        allowed = self.allowance(asset, sender, spender)
        if amount > allowed:
            raise TransferFailedError(
                f"Allowance of {spender} on {asset} too low",
                {"asset": asset, "allowed": allowed, "amount": amount}
            )
        self.transfer(asset, sender, recipient, amount)
        self._allowances[(asset, sender, spender)] = allowed - amount
