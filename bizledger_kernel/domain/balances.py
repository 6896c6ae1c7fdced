"""
Normal-balance rules.

Responsibility:
    Decide, per account type, which side is the account's normal balance
    and compute the signed net balance from debit and credit totals.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.

Invariants enforced:
    - Dispatch over AccountType is exhaustive.  Adding a member to
      AccountType without extending ``normal_balance_for`` is a type error
      (``assert_never``), and an unrecognised stored type string raises
      UnknownAccountTypeError rather than defaulting to either side.

        debit-normal  {ASSET, EXPENSE}            net = debit - credit
        credit-normal {LIABILITY, EQUITY, INCOME} net = credit - debit

Failure modes:
    - UnknownAccountTypeError from ``parse_account_type``.
"""

from decimal import Decimal
from typing import assert_never

from bizledger_kernel.exceptions import UnknownAccountTypeError
from bizledger_kernel.models.account import AccountType, NormalBalance


def debit_normal_net(debit_total: Decimal, credit_total: Decimal) -> Decimal:
    return debit_total - credit_total


def credit_normal_net(debit_total: Decimal, credit_total: Decimal) -> Decimal:
    return credit_total - debit_total


def normal_balance_for(account_type: AccountType) -> NormalBalance:
    """Return the normal balance side of an account type."""
    match account_type:
        case AccountType.ASSET | AccountType.EXPENSE:
            return NormalBalance.DEBIT
        case AccountType.LIABILITY | AccountType.EQUITY | AccountType.INCOME:
            return NormalBalance.CREDIT
        case _:
            assert_never(account_type)


def natural_balance(
    account_type: AccountType,
    debit_total: Decimal,
    credit_total: Decimal,
) -> Decimal:
    """
    Signed net balance, positive when the account sits on its normal side.

    A contra-account (typed ASSET but credit-natured) comes out negative.
    """
    match normal_balance_for(account_type):
        case NormalBalance.DEBIT:
            return debit_normal_net(debit_total, credit_total)
        case NormalBalance.CREDIT:
            return credit_normal_net(debit_total, credit_total)
        case other:
            assert_never(other)


def parse_account_type(account_id: object, raw: str | AccountType) -> AccountType:
    """
    Convert a stored account type string into AccountType.

    Raises:
        UnknownAccountTypeError: ``raw`` is not an AccountType value.
    """
    if isinstance(raw, AccountType):
        return raw
    try:
        return AccountType(raw)
    except ValueError:
        raise UnknownAccountTypeError(str(account_id), str(raw)) from None
