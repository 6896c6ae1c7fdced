"""
Reporting Configuration Schema.

Defines which chart-of-accounts codes play well-known roles (receivables,
payables, inventory, cost of goods sold), per-business overrides of those
codes, and report presentation options.  Loadable from YAML.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Self

import yaml

from bizledger_kernel.exceptions import ConfigurationError
from bizledger_kernel.logging_config import get_logger

logger = get_logger("reporting.config")


@dataclass(frozen=True)
class AccountCodes:
    """
    Account codes with a fixed reporting role.

    Defaults follow the standard chart seeded for every new business.
    """

    accounts_receivable: str = "1100"
    accounts_payable: str = "2001"
    inventory_asset: str = "1200"
    cogs: str = "5000"

    @classmethod
    def from_dict(cls, data: dict, *, field_name: str = "account_codes") -> Self:
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(field_name, f"unknown keys {unknown}")
        # YAML reads an unquoted 1100 as an int
        return cls(**{k: str(v) for k, v in data.items()})


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    balance_tolerance of zero means "balanced" is exact Decimal equality.
    A positive tolerance eps accepts |difference| < eps.
    """

    account_codes: AccountCodes = field(default_factory=AccountCodes)

    # Keyed by str(business_id)
    business_overrides: dict[str, AccountCodes] = field(default_factory=dict)

    entity_name: str = "Company"

    currency: str = "USD"

    balance_tolerance: Decimal = Decimal("0")

    default_trend_months: int = 6

    def __post_init__(self):
        if len(self.currency) != 3:
            raise ConfigurationError(
                "currency", "must be a 3-letter ISO 4217 code",
            )
        if not isinstance(self.balance_tolerance, Decimal):
            raise ConfigurationError("balance_tolerance", "must be a Decimal")
        if self.balance_tolerance < 0:
            raise ConfigurationError("balance_tolerance", "cannot be negative")
        if self.default_trend_months < 1:
            raise ConfigurationError("default_trend_months", "must be at least 1")

    def codes_for(self, business_id: object) -> AccountCodes:
        """Account codes for a business, falling back to the defaults."""
        return self.business_overrides.get(str(business_id), self.account_codes)

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """
        Create config from a plain dictionary (e.g. parsed YAML).

        Raises:
            ConfigurationError: unknown keys or malformed values.
        """
        data = dict(data)
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError("reporting", f"unknown keys {unknown}")

        if isinstance(data.get("account_codes"), dict):
            data["account_codes"] = AccountCodes.from_dict(data["account_codes"])

        if "business_overrides" in data:
            overrides = data["business_overrides"] or {}
            if not isinstance(overrides, dict):
                raise ConfigurationError("business_overrides", "must be a mapping")
            data["business_overrides"] = {
                str(business_id): AccountCodes.from_dict(
                    codes or {}, field_name=f"business_overrides.{business_id}",
                )
                for business_id, codes in overrides.items()
            }

        if "balance_tolerance" in data:
            try:
                # str() first so a YAML float like 0.01 stays exact
                data["balance_tolerance"] = Decimal(str(data["balance_tolerance"]))
            except InvalidOperation:
                raise ConfigurationError(
                    "balance_tolerance", f"not a number: {data['balance_tolerance']!r}",
                ) from None

        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)


def load_reporting_config(path: str | Path) -> ReportingConfig:
    """
    Load a ReportingConfig from a YAML file.

    The document may hold the settings at the top level or under a
    ``reporting`` key.

    Raises:
        FileNotFoundError: if the file does not exist.
        ConfigurationError: invalid YAML or invalid settings.
    """
    with open(path) as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(str(path), f"invalid YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")

    section = raw.get("reporting", raw)
    if not isinstance(section, dict):
        raise ConfigurationError("reporting", "must be a mapping")

    logger.info("reporting_config_file_loaded", extra={"path": str(path)})
    return ReportingConfig.from_dict(section)
