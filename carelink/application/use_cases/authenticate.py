"""
Name: Authenticate Identity Use Case

Responsibilities:
  - Verify username/password within one role namespace
  - Refuse blocked accounts
  - Hold back tokens from operators whose application is not approved

Collaborators:
  - IdentityRepository (role namespace)
  - passwords.verify_password, tokens.issue_token

Constraints:
  - Unknown username and wrong password produce the same error
  - Order for operators: credentials, blocked, approval status
"""

from dataclasses import dataclass

from ...domain.entities import ApprovalStatus, ElderHomeOperator, Role
from ...domain.repositories import IdentityRepository
from ...logger import logger
from ...passwords import verify_password
from ...tokens import issue_token
from .identity_results import (
    IdentityError,
    IdentityErrorCode,
    LoginOutcome,
    LoginResult,
)

BLOCKED_MESSAGE = "Your account has been blocked. Please contact admin."
PENDING_LOGIN_MESSAGE = "Your account is pending approval from admin."
REJECTED_LOGIN_MESSAGE = "Your account application was rejected."


@dataclass
class AuthenticateInput:
    username: str
    password: str


def invalid_credentials_message(role: Role) -> str:
    if role == Role.ADMIN:
        return "Invalid admin credentials"
    return "Invalid username or password"


class AuthenticateUseCase:
    """R: Credential check for one role."""

    def __init__(self, repository: IdentityRepository):
        self.repository = repository

    def execute(self, input_data: AuthenticateInput) -> LoginResult:
        role = self.repository.role
        username = (input_data.username or "").strip()
        if role == Role.VOLUNTEER:
            username = username.lower()

        identity = self.repository.get_by_username(username) if username else None
        if identity is None or not verify_password(
            input_data.password or "", identity.password_hash
        ):
            logger.info("Login rejected", extra={"role": role.value})
            return LoginResult(
                error=IdentityError(
                    IdentityErrorCode.UNAUTHORIZED, invalid_credentials_message(role)
                )
            )

        if identity.is_blocked:
            logger.info(
                "Blocked account attempted login",
                extra={"role": role.value, "identity_id": str(identity.id)},
            )
            return LoginResult(
                error=IdentityError(IdentityErrorCode.FORBIDDEN, BLOCKED_MESSAGE)
            )

        if isinstance(identity, ElderHomeOperator):
            if identity.approval_status == ApprovalStatus.PENDING:
                return LoginResult(identity=identity, outcome=LoginOutcome.PENDING)
            if identity.approval_status == ApprovalStatus.REJECTED:
                return LoginResult(identity=identity, outcome=LoginOutcome.REJECTED)

        return LoginResult(
            identity=identity,
            token=issue_token(identity.id, role),
            outcome=LoginOutcome.AUTHENTICATED,
        )
