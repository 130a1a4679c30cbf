"""
Pydantic schemas for tenant account credentials and OAuth token responses.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import AccountKind


class OAuthTokenResponse(BaseModel):
    """Body returned by the OAuth token endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = None
    token_type: str = "Bearer"
    expires_in: int = Field(default=0, ge=0, description="Token lifetime in seconds")
    scope: Optional[str] = None
    user_type: Optional[str] = Field(default=None, alias="userType")
    location_id: Optional[str] = Field(default=None, alias="locationId")
    company_id: Optional[str] = Field(default=None, alias="companyId")

    def account_kind(self) -> AccountKind:
        """Location tokens carry a locationId, company tokens only a companyId."""
        if self.location_id or (self.user_type or "").lower() == "location":
            return AccountKind.LOCATION
        return AccountKind.COMPANY

    def account_id(self) -> Optional[str]:
        if self.account_kind() == AccountKind.LOCATION:
            return self.location_id
        return self.company_id


class AccountCredentialCreate(BaseModel):
    """Validated values for creating or replacing an AccountCredential."""

    model_config = ConfigDict(str_strip_whitespace=True)

    account_id: str = Field(..., min_length=1)
    account_kind: AccountKind = AccountKind.LOCATION
    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = None
    expires_in: int = Field(default=0, ge=0)
    company_id: Optional[str] = None
    user_type: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_token_response(
        cls, response: OAuthTokenResponse, account_id: Optional[str] = None
    ) -> "AccountCredentialCreate":
        return cls(
            account_id=account_id or response.account_id() or "",
            account_kind=response.account_kind(),
            access_token=response.access_token,
            refresh_token=response.refresh_token,
            expires_in=response.expires_in,
            company_id=response.company_id,
            user_type=response.user_type,
            scope=response.scope,
        )


class RefreshedToken(BaseModel):
    access_token: str


class RefreshResult(BaseModel):
    """Outcome of a refresh: ``data[0].access_token`` is the new token."""

    success: bool
    data: List[RefreshedToken] = Field(default_factory=list)
    message: Optional[str] = None

    @property
    def access_token(self) -> Optional[str]:
        if self.success and self.data:
            return self.data[0].access_token
        return None
