"""Application use cases"""

from .admin_dashboard import AdminDashboardUseCase
from .authenticate import AuthenticateInput, AuthenticateUseCase
from .delete_account import DeleteAccountUseCase
from .identity_queries import (
    CheckAvailabilityUseCase,
    GetIdentityUseCase,
    ListIdentitiesUseCase,
    operator_status,
)
from .identity_results import (
    AdminDashboard,
    DeleteAccountResult,
    FeedbackResult,
    IdentityError,
    IdentityErrorCode,
    IdentityListResult,
    LoginOutcome,
    LoginResult,
    ModerationResult,
    OperatorStatus,
    ProfileResult,
    RegistrationResult,
    ToggleBlockResult,
)
from .moderate_operator import ApproveOperatorUseCase, RejectOperatorUseCase
from .register_donor import RegisterDonorInput, RegisterDonorUseCase
from .register_operator import RegisterOperatorInput, RegisterOperatorUseCase
from .register_volunteer import RegisterVolunteerInput, RegisterVolunteerUseCase
from .toggle_block import ToggleBlockUseCase
from .update_profile import UpdateProfileInput, UpdateProfileUseCase
from .volunteer_feedback import SubmitFeedbackInput, SubmitFeedbackUseCase

__all__ = [
    "AdminDashboard",
    "AdminDashboardUseCase",
    "ApproveOperatorUseCase",
    "AuthenticateInput",
    "AuthenticateUseCase",
    "CheckAvailabilityUseCase",
    "DeleteAccountResult",
    "DeleteAccountUseCase",
    "FeedbackResult",
    "GetIdentityUseCase",
    "IdentityError",
    "IdentityErrorCode",
    "IdentityListResult",
    "ListIdentitiesUseCase",
    "LoginOutcome",
    "LoginResult",
    "ModerationResult",
    "OperatorStatus",
    "ProfileResult",
    "RegisterDonorInput",
    "RegisterDonorUseCase",
    "RegisterOperatorInput",
    "RegisterOperatorUseCase",
    "RegisterVolunteerInput",
    "RegisterVolunteerUseCase",
    "RegistrationResult",
    "RejectOperatorUseCase",
    "SubmitFeedbackInput",
    "SubmitFeedbackUseCase",
    "ToggleBlockResult",
    "ToggleBlockUseCase",
    "UpdateProfileInput",
    "UpdateProfileUseCase",
    "operator_status",
]
