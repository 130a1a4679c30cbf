"""
OAuth credential issuance and refresh for tenant accounts.

AuthService is the refresh collaborator of the token lifecycle manager: it
owns the OAuth round-trip and persists the resulting AccountCredential. It
never raises past its boundary; callers inspect RefreshResult.success.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..clients.ghl_client import LeadConnectorClient
from ..config import GHLApiConfig, get_config
from ..constants import AccountKind, OAuthGrantType
from ..exceptions import BaseError, CredentialNotFoundError
from ..repositories.sync_repository import SyncRepository
from ..schemas.credential_schemas import (
    AccountCredentialCreate,
    OAuthTokenResponse,
    RefreshedToken,
    RefreshResult,
)
from ..utils.credential_utils import apply_token_response, store_credential
from ..utils.logger import get_logger


class AuthService:
    """Exchanges authorization codes and refresh tokens for access tokens."""

    def __init__(
        self,
        repository: SyncRepository,
        client: Optional[LeadConnectorClient] = None,
        config: Optional[GHLApiConfig] = None,
    ):
        self.repository = repository
        self.config = config or get_config().ghl
        self.client = client or LeadConnectorClient(self.config)
        self.logger = get_logger()

    def _grant(self, grant_type: OAuthGrantType, user_type: str, **fields) -> OAuthTokenResponse:
        form = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "grant_type": grant_type.value,
            "user_type": user_type,
            **fields,
        }
        body = self.client.request_token(form)
        return OAuthTokenResponse.model_validate(body)

    def authorize(self, code: str, user_type: AccountKind = AccountKind.LOCATION) -> RefreshResult:
        """
        Exchange an authorization code for the account's first credential.

        Re-authorizing an account replaces its credential in place.
        """
        try:
            response = self._grant(
                OAuthGrantType.AUTHORIZATION_CODE, AccountKind(user_type).value, code=code
            )
            credential_create = AccountCredentialCreate.from_token_response(response)
            store_credential(self.repository.session, credential_create)
        except (BaseError, PydanticValidationError) as e:
            self.logger.error(
                "Authorization code exchange failed",
                extra={"user_type": AccountKind(user_type).value, "error": str(e)},
            )
            return RefreshResult(success=False, message=str(e))

        self.logger.info(
            "Account authorized",
            extra={
                "account_id": credential_create.account_id,
                "account_kind": credential_create.account_kind.value,
            },
        )
        return RefreshResult(
            success=True, data=[RefreshedToken(access_token=response.access_token)]
        )

    def refresh(self, account_id: str, account_kind: AccountKind) -> RefreshResult:
        """
        Refresh the stored credential for (account_id, account_kind).

        On success the credential row is updated in place and the new token
        is returned as ``data[0].access_token``.
        """
        kind = AccountKind(account_kind)
        try:
            credential = self.repository.get_credential(account_id, kind)
            if credential is None:
                raise CredentialNotFoundError(
                    f"No credential to refresh for account '{account_id}'",
                    account_id=account_id,
                    account_kind=kind.value,
                )
            if not credential.refresh_token:
                return RefreshResult(success=False, message="Credential has no refresh token")

            response = self._grant(
                OAuthGrantType.REFRESH_TOKEN,
                kind.value,
                refresh_token=credential.refresh_token,
            )
            apply_token_response(self.repository.session, credential, response)
        except (BaseError, PydanticValidationError) as e:
            self.logger.warning(
                "Token refresh failed",
                extra={"account_id": account_id, "account_kind": kind.value, "error": str(e)},
            )
            return RefreshResult(success=False, message=str(e))

        self.logger.info(
            "Token refreshed",
            extra={
                "account_id": account_id,
                "account_kind": kind.value,
                "expires_in": response.expires_in,
            },
        )
        return RefreshResult(
            success=True, data=[RefreshedToken(access_token=response.access_token)]
        )
