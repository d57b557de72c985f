"""Checks that the relayer's accounts are active and funded."""

from __future__ import annotations

import asyncio
import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, Sequence

from tonrelay.cells import TonAddress

logger = logging.getLogger(__name__)

CHECK_INTERVAL_SECONDS = 45

_U64_PATTERN = re.compile(r"\+?[0-9]+")
_U64_LIMIT = 1 << 64


@dataclass(frozen=True)
class AccountState:
    """The state of an account as reported by the node API."""

    address: TonAddress
    account_state_hash: str
    balance: str
    status: str


class AccountCheckStatus(enum.Enum):
    """Outcome of checking one account."""

    VALID = "valid"
    INACTIVE = "inactive"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    INVALID_BALANCE_FORMAT = "invalid_balance_format"


@dataclass(frozen=True)
class AccountCheck:
    """An account check outcome; balances are set for insufficient balance only."""

    status: AccountCheckStatus
    balance: int | None = None
    required: int | None = None


def _parse_balance(text: str) -> int | None:
    if not _U64_PATTERN.fullmatch(text):
        return None
    value = int(text)
    return value if value < _U64_LIMIT else None


def check_account_status(account: AccountState, min_balance: int) -> AccountCheck:
    """Classify an account by its status and balance."""
    balance = _parse_balance(account.balance)
    if balance is None:
        return AccountCheck(AccountCheckStatus.INVALID_BALANCE_FORMAT)
    if account.status != "active":
        return AccountCheck(AccountCheckStatus.INACTIVE)
    if balance < min_balance:
        return AccountCheck(
            AccountCheckStatus.INSUFFICIENT_BALANCE, balance=balance, required=min_balance
        )
    return AccountCheck(AccountCheckStatus.VALID)


def _report(account: AccountState, min_balance: int) -> None:
    check = check_account_status(account, min_balance)
    if check.status is AccountCheckStatus.VALID:
        logger.info(
            "Account %s is active and has sufficient balance: %s",
            account.address,
            account.balance,
        )
    elif check.status is AccountCheckStatus.INACTIVE:
        logger.error("Account %s is not active. Status: %s", account.address, account.status)
    elif check.status is AccountCheckStatus.INSUFFICIENT_BALANCE:
        logger.error(
            "Account %s has insufficient balance. Balance: %s, Required: %s",
            account.address,
            check.balance,
            check.required,
        )
    else:
        logger.error("Invalid balance for address %s: %s", account.address, account.balance)


async def check_accounts(
    client: Any,
    addresses: Sequence[TonAddress],
    min_balance: int,
    forever: bool,
) -> None:
    """Fetch and log the state of each address, once or every 45 seconds."""
    while True:
        try:
            accounts = await client.get_account_states(list(addresses))
        except Exception as exc:  # noqa: BLE001 - any fetch failure is logged and retried
            logger.error("Failed to fetch account states: %r", exc)
        else:
            for account in accounts:
                _report(account, min_balance)
        if not forever:
            break
        await asyncio.sleep(CHECK_INTERVAL_SECONDS)