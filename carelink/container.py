"""
Name: Dependency Injection Container

Responsibilities:
  - Wire up repositories, storage and the donation ledger
  - Provide factory functions for use cases
  - Manage singleton instances of repositories and services
  - Enable dependency injection in FastAPI endpoints

Collaborators:
  - infrastructure.repositories: PostgreSQL and in-memory implementations
  - infrastructure.storage: LocalFileStorage, S3FileStorageAdapter
  - application.use_cases: account and admission use cases
  - FastAPI Depends(): Dependency injection mechanism

Constraints:
  - Manual DI (no library like dependency-injector)
  - Singletons via functools.lru_cache
  - Environment-based configuration (APP_ENV=test selects in-memory stores)

Notes:
  - This is the composition root (where dependencies are wired)
  - Use cases don't know about concrete implementations
  - Tests reset the singletons through reset_container()
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, TypeVar

from .config import get_settings
from .domain.entities import Role
from .domain.repositories import DonationLedger, IdentityRepository
from .domain.services import FileStoragePort
from .infrastructure.repositories import (
    IDENTITY_TABLES,
    InMemoryDonationLedger,
    InMemoryIdentityRepository,
    PostgresDonationLedger,
    PostgresIdentityRepository,
)
from .infrastructure.storage import LocalFileStorage, S3Config, S3FileStorageAdapter
from .application.use_cases import (
    AdminDashboardUseCase,
    ApproveOperatorUseCase,
    RegisterDonorUseCase,
    RegisterOperatorUseCase,
    RegisterVolunteerUseCase,
    RejectOperatorUseCase,
    SubmitFeedbackUseCase,
)

T = TypeVar("T")


@dataclass(frozen=True)
class IdentityRepositories:
    """R: One credential store per role namespace."""

    donors: IdentityRepository
    volunteers: IdentityRepository
    operators: IdentityRepository
    admins: IdentityRepository

    def for_role(self, role: Role | str) -> IdentityRepository:
        return {
            Role.DONOR: self.donors,
            Role.VOLUNTEER: self.volunteers,
            Role.OPERATOR: self.operators,
            Role.ADMIN: self.admins,
        }[Role(role)]


# R: Repository registry (singleton)
@lru_cache
def get_identity_repositories() -> IdentityRepositories:
    """
    R: Get singleton registry of identity repositories.

    Returns:
        In-memory repositories under APP_ENV=test, PostgreSQL otherwise
    """
    if get_settings().is_test():
        return IdentityRepositories(
            donors=InMemoryIdentityRepository(Role.DONOR),
            volunteers=InMemoryIdentityRepository(Role.VOLUNTEER),
            operators=InMemoryIdentityRepository(Role.OPERATOR),
            admins=InMemoryIdentityRepository(Role.ADMIN),
        )
    return IdentityRepositories(
        donors=PostgresIdentityRepository(IDENTITY_TABLES[Role.DONOR]),
        volunteers=PostgresIdentityRepository(IDENTITY_TABLES[Role.VOLUNTEER]),
        operators=PostgresIdentityRepository(IDENTITY_TABLES[Role.OPERATOR]),
        admins=PostgresIdentityRepository(IDENTITY_TABLES[Role.ADMIN]),
    )


@lru_cache
def get_donation_ledger() -> DonationLedger:
    """R: Get singleton donation ledger."""
    if get_settings().is_test():
        return InMemoryDonationLedger()
    return PostgresDonationLedger()


@lru_cache
def get_file_storage() -> FileStoragePort:
    """
    R: Get file storage adapter.

    Returns:
        S3FileStorageAdapter when S3_BUCKET is set, else LocalFileStorage
    """
    settings = get_settings()
    if settings.s3_bucket:
        config = S3Config(
            bucket=settings.s3_bucket,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
            region=settings.s3_region or None,
            endpoint_url=settings.s3_endpoint_url or None,
        )
        return S3FileStorageAdapter(config)
    return LocalFileStorage(settings.upload_dir)


def repository_provider(role: Role) -> Callable[[], IdentityRepository]:
    """R: FastAPI dependency returning the repository of one role."""

    def provider() -> IdentityRepository:
        return get_identity_repositories().for_role(role)

    return provider


def role_use_case(
    use_case_cls: Callable[..., T], role: Role, *, with_storage: bool = False
) -> Callable[[], T]:
    """
    R: Build a dependency provider for a use case scoped to one role.

    Args:
        use_case_cls: Use case taking (repository) or (repository, storage)
        role: Role namespace the use case operates on
        with_storage: Also inject the file storage adapter
    """

    def provider() -> T:
        repository = get_identity_repositories().for_role(role)
        if with_storage:
            return use_case_cls(repository, get_file_storage())
        return use_case_cls(repository)

    return provider


# R: Registration use case factories (new instance per request)
def get_register_donor_use_case() -> RegisterDonorUseCase:
    return RegisterDonorUseCase(
        repository=get_identity_repositories().donors,
        storage=get_file_storage(),
    )


def get_register_volunteer_use_case() -> RegisterVolunteerUseCase:
    return RegisterVolunteerUseCase(
        repository=get_identity_repositories().volunteers,
        storage=get_file_storage(),
    )


def get_register_operator_use_case() -> RegisterOperatorUseCase:
    return RegisterOperatorUseCase(
        repository=get_identity_repositories().operators,
        storage=get_file_storage(),
    )


# R: Moderation use case factories
def get_approve_operator_use_case() -> ApproveOperatorUseCase:
    return ApproveOperatorUseCase(get_identity_repositories().operators)


def get_reject_operator_use_case() -> RejectOperatorUseCase:
    return RejectOperatorUseCase(get_identity_repositories().operators)


def get_admin_dashboard_use_case() -> AdminDashboardUseCase:
    repositories = get_identity_repositories()
    return AdminDashboardUseCase(
        donors=repositories.donors,
        volunteers=repositories.volunteers,
        operators=repositories.operators,
        ledger=get_donation_ledger(),
    )


def get_submit_feedback_use_case() -> SubmitFeedbackUseCase:
    return SubmitFeedbackUseCase(get_identity_repositories().volunteers)


def reset_container() -> None:
    """R: Drop cached singletons (tests, settings reload)."""
    get_identity_repositories.cache_clear()
    get_donation_ledger.cache_clear()
    get_file_storage.cache_clear()
