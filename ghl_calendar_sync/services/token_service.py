"""
Token lifecycle management for tenant accounts.

A stored access token is stale once its age reaches its declared lifetime
(age >= expires_in, no grace period). Stale tokens are refreshed through a
refresh collaborator, which also persists the new credential; this service
only reads storage.
"""

from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from ..constants import AccountKind
from ..exceptions import BaseError, CredentialNotFoundError, TokenUnavailableError
from ..repositories.sync_repository import SyncRepository
from ..schemas.credential_schemas import RefreshResult
from ..utils.logger import get_logger
from ..utils.time_utils import seconds_since


class TokenRefresher(Protocol):
    def refresh(self, account_id: str, account_kind: AccountKind) -> RefreshResult: ...


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


def is_token_stale(updated_at: Optional[datetime], expires_in: Optional[int], now: datetime) -> bool:
    """
    True when the token's age has reached its lifetime.

    A token with no issue time or no positive lifetime is always stale.
    """
    if updated_at is None or not expires_in or expires_in <= 0:
        return True
    return seconds_since(updated_at, now) >= expires_in


class TokenService:
    """Returns a usable access token for an account, refreshing it when stale."""

    def __init__(
        self,
        repository: SyncRepository,
        refresher: TokenRefresher,
        clock: Callable[[], datetime] = utc_clock,
    ):
        self.repository = repository
        self.refresher = refresher
        self.clock = clock
        self.logger = get_logger()

    def get_usable_token(
        self,
        account_id: str,
        account_kind: Optional[AccountKind] = None,
        allow_stale: bool = False,
    ) -> str:
        """
        Get an access token for the account.

        Args:
            account_id: Location or company id
            account_kind: Restrict to one credential kind; any when None
            allow_stale: Return the last-known token when refresh fails

        Returns:
            A non-empty access token

        Raises:
            CredentialNotFoundError: If the account has no credential
            TokenUnavailableError: If the token is stale and could not be refreshed
        """
        credential = self.repository.get_credential(account_id, account_kind)
        if credential is None:
            raise CredentialNotFoundError(
                f"No credential stored for account '{account_id}'",
                account_id=account_id,
                account_kind=account_kind.value if account_kind else None,
            )

        token = credential.access_token
        if token and not is_token_stale(credential.updated_at, credential.expires_in, self.clock()):
            return token

        kind = AccountKind(credential.account_kind)
        self.logger.info(
            "Access token is stale, refreshing",
            extra={"account_id": account_id, "account_kind": kind.value},
        )

        refreshed = self._refresh(account_id, kind)
        if refreshed:
            return refreshed

        if allow_stale and token:
            self.logger.warning(
                "Refresh failed, using stale token",
                extra={"account_id": account_id, "account_kind": kind.value},
            )
            return token

        raise TokenUnavailableError(
            f"Access token for account '{account_id}' is stale and could not be refreshed",
            account_id=account_id,
            account_kind=kind.value,
        )

    def _refresh(self, account_id: str, account_kind: AccountKind) -> Optional[str]:
        try:
            result = self.refresher.refresh(account_id, account_kind)
        except BaseError:
            # Already logged by the error itself
            return None
        except Exception as e:
            self.logger.error(
                "Refresh collaborator raised",
                extra={"account_id": account_id, "error": str(e)},
            )
            return None

        if result is None or not result.access_token:
            self.logger.warning(
                "Refresh returned no token",
                extra={
                    "account_id": account_id,
                    "message": getattr(result, "message", None),
                },
            )
            return None
        return result.access_token
