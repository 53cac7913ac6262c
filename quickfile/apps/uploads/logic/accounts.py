"""Per-account upload limits resolved from settings."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, final

from django.conf import settings


@final
@dataclass(frozen=True, slots=True)
class AccountLimits:
    """Effective quota and expiry bounds for one account."""

    byte_limit: int
    file_limit: int
    min_expire: timedelta
    max_expire: timedelta


def get_account_limits(account: str) -> AccountLimits | None:
    """Resolve limits for an account.

    Each value is the larger of the account override in
    ``UPLOAD_ACCOUNTS`` and the matching ``UPLOAD_DEFAULT_*`` setting, so
    an override can only raise a limit.

    Args:
        account: Account name.

    Returns:
        AccountLimits, or None if the account is not configured.
    """
    accounts: dict[str, dict[str, Any] | None] = settings.UPLOAD_ACCOUNTS
    if account not in accounts:
        return None

    overrides = accounts[account] or {}

    def resolve(key: str, default: Any) -> Any:
        return max(overrides.get(key, default), default)

    return AccountLimits(
        byte_limit=resolve('byte_limit', settings.UPLOAD_DEFAULT_BYTE_LIMIT),
        file_limit=resolve('file_limit', settings.UPLOAD_DEFAULT_FILE_LIMIT),
        min_expire=resolve('min_expire', settings.UPLOAD_DEFAULT_MIN_EXPIRE),
        max_expire=resolve('max_expire', settings.UPLOAD_DEFAULT_MAX_EXPIRE),
    )


def get_default_expire() -> timedelta:
    """Get the expiry applied when an upload does not ask for one."""
    return settings.UPLOAD_DEFAULT_EXPIRE
