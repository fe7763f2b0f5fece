"""
Name: Elder Home Operator API Controllers

Responsibilities:
  - Operator application (license document + home photos) and login
  - Status-aware dashboard for any signed-in operator
  - Profile read / update / delete for approved operators only
  - Public listing and lookup of approved elder homes

Collaborators:
  - guards.require_identity / require_approved_operator
  - application.use_cases: RegisterOperatorUseCase, AuthenticateUseCase, ...

Constraints:
  - Login of a pending operator answers 202 without a token
  - Login of a rejected operator answers 403 with the rejection reason
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..application.uploads import UploadField
from ..application.use_cases import (
    AuthenticateInput,
    AuthenticateUseCase,
    CheckAvailabilityUseCase,
    DeleteAccountUseCase,
    GetIdentityUseCase,
    ListIdentitiesUseCase,
    LoginOutcome,
    RegisterOperatorInput,
    RegisterOperatorUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
    operator_status,
)
from ..application.use_cases.authenticate import (
    PENDING_LOGIN_MESSAGE,
    REJECTED_LOGIN_MESSAGE,
)
from ..config import get_settings
from ..container import get_register_operator_use_case, role_use_case
from ..domain.entities import ApprovalStatus, ElderHomeOperator, Role
from ..error_responses import forbidden, not_found
from ..guards import require_approved_operator, require_identity
from ..metrics import record_login, record_registration
from .common import (
    AvailableRes,
    CamelModel,
    ElderHomePublicRes,
    LoginReq,
    MessageRes,
    OperatorAuthRes,
    OperatorRes,
    elder_home_public_res,
    login_outcome_label,
    operator_res,
    raise_for_error,
)
from .uploads import ingest_uploads, single

router = APIRouter(prefix="/elder-homes", tags=["elder-homes"])

require_operator = require_identity(Role.OPERATOR)
require_approved = require_approved_operator()

REGISTRATION_MESSAGE = (
    "Registration successful! Your application is pending admin approval."
)


class OperatorRegistrationRes(CamelModel):
    message: str
    approval_status: str
    id: UUID


class OwnerRes(CamelModel):
    id: UUID
    full_name: str
    email: str
    address: str
    contact_number: str
    username: str


class ElderHomeRes(CamelModel):
    id: UUID
    name: str
    address: str
    account_number: str
    capacity: int
    license: Optional[str] = None
    home_photos: List[str] = []


class OperatorDashboardRes(CamelModel):
    approval_status: str
    message: Optional[str] = None
    rejection_reason: Optional[str] = None
    owner: Optional[OwnerRes] = None
    elder_home: Optional[ElderHomeRes] = None
    is_blocked: Optional[bool] = None
    joined_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None


def _with_token(operator: ElderHomeOperator, token: str) -> OperatorAuthRes:
    return OperatorAuthRes(**operator_res(operator).model_dump(), token=token)


@router.post("/register", response_model=OperatorRegistrationRes, status_code=201)
async def register_operator(
    full_name: str = Form("", alias="fullName"),
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    contact_number: str = Form("", alias="contactNumber"),
    address: str = Form(""),
    elder_home_name: str = Form("", alias="elderHomeName"),
    elder_home_address: str = Form("", alias="elderHomeAddress"),
    account_number: str = Form("", alias="accountNumber"),
    capacity: str = Form(""),
    description: str = Form(""),
    license_document: Optional[List[UploadFile]] = File(None, alias="licenseDocument"),
    home_photos: Optional[List[UploadFile]] = File(None, alias="homePhotos"),
    use_case: RegisterOperatorUseCase = Depends(get_register_operator_use_case),
):
    files = await ingest_uploads(
        {
            UploadField.LICENSE_DOCUMENT: license_document,
            UploadField.HOME_PHOTOS: home_photos,
        }
    )
    result = await run_in_threadpool(
        use_case.execute,
        RegisterOperatorInput(
            full_name=full_name,
            username=username,
            email=email,
            password=password,
            contact_number=contact_number,
            address=address,
            elder_home_name=elder_home_name,
            elder_home_address=elder_home_address,
            account_number=account_number,
            capacity=capacity,
            description=description,
            license_document=single(files, UploadField.LICENSE_DOCUMENT),
            home_photos=files[UploadField.HOME_PHOTOS],
            max_home_photos=get_settings().max_home_photos,
        ),
    )
    record_registration(Role.OPERATOR.value, "rejected" if result.error else "pending")
    raise_for_error(result.error)
    return OperatorRegistrationRes(
        message=REGISTRATION_MESSAGE,
        approval_status=ApprovalStatus.PENDING.value,
        id=result.identity.id,
    )


@router.post(
    "/login",
    response_model=OperatorAuthRes,
    responses={202: {"description": "Application pending approval"}},
)
def login_operator(
    req: LoginReq,
    use_case: AuthenticateUseCase = Depends(
        role_use_case(AuthenticateUseCase, Role.OPERATOR)
    ),
):
    result = use_case.execute(AuthenticateInput(username=req.username, password=req.password))
    record_login(Role.OPERATOR.value, login_outcome_label(result))
    raise_for_error(result.error)

    operator = result.identity
    if result.outcome == LoginOutcome.PENDING:
        return JSONResponse(
            status_code=202,
            content={
                "message": PENDING_LOGIN_MESSAGE,
                "approvalStatus": ApprovalStatus.PENDING.value,
                "id": str(operator.id),
            },
        )
    if result.outcome == LoginOutcome.REJECTED:
        raise forbidden(
            REJECTED_LOGIN_MESSAGE,
            extra={
                "approvalStatus": ApprovalStatus.REJECTED.value,
                "rejectionReason": operator.rejection_reason,
                "id": str(operator.id),
            },
        )
    return _with_token(operator, result.token)


@router.get(
    "/dashboard",
    response_model=OperatorDashboardRes,
    response_model_exclude_none=True,
)
def get_operator_dashboard(operator: ElderHomeOperator = Depends(require_operator)):
    status = operator_status(operator)
    if status is not None:
        return OperatorDashboardRes(
            approval_status=status.approval_status.value,
            message=status.message,
            rejection_reason=status.rejection_reason,
        )
    return OperatorDashboardRes(
        approval_status=operator.approval_status.value,
        owner=OwnerRes(
            id=operator.id,
            full_name=operator.full_name,
            email=operator.email,
            address=operator.address,
            contact_number=operator.contact_number,
            username=operator.username,
        ),
        elder_home=ElderHomeRes(
            id=operator.id,
            name=operator.elder_home_name,
            address=operator.elder_home_address,
            account_number=operator.account_number,
            capacity=operator.capacity,
            license=operator.license_path,
            home_photos=list(operator.home_photos),
        ),
        is_blocked=operator.is_blocked,
        joined_date=operator.created_at,
        last_updated=operator.updated_at,
    )


@router.get("/profile", response_model=OperatorRes)
def get_operator_profile(operator: ElderHomeOperator = Depends(require_approved)):
    return operator_res(operator)


@router.put("/profile", response_model=OperatorAuthRes)
async def update_operator_profile(
    full_name: Optional[str] = Form(None, alias="fullName"),
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    contact_number: Optional[str] = Form(None, alias="contactNumber"),
    address: Optional[str] = Form(None),
    elder_home_name: Optional[str] = Form(None, alias="elderHomeName"),
    elder_home_address: Optional[str] = Form(None, alias="elderHomeAddress"),
    account_number: Optional[str] = Form(None, alias="accountNumber"),
    capacity: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    license_document: Optional[List[UploadFile]] = File(None, alias="licenseDocument"),
    home_photos: Optional[List[UploadFile]] = File(None, alias="homePhotos"),
    operator: ElderHomeOperator = Depends(require_approved),
    use_case: UpdateProfileUseCase = Depends(
        role_use_case(UpdateProfileUseCase, Role.OPERATOR, with_storage=True)
    ),
):
    files = await ingest_uploads(
        {
            UploadField.LICENSE_DOCUMENT: license_document,
            UploadField.HOME_PHOTOS: home_photos,
        }
    )
    result = await run_in_threadpool(
        use_case.execute,
        UpdateProfileInput(
            identity_id=operator.id,
            changes={
                "full_name": full_name,
                "username": username,
                "email": email,
                "password": password,
                "contact_number": contact_number,
                "address": address,
                "elder_home_name": elder_home_name,
                "elder_home_address": elder_home_address,
                "account_number": account_number,
                "capacity": capacity,
                "description": description,
            },
            license_document=single(files, UploadField.LICENSE_DOCUMENT),
            home_photos=files[UploadField.HOME_PHOTOS],
        ),
    )
    raise_for_error(result.error)
    return _with_token(result.identity, result.token)


@router.delete("/profile", response_model=MessageRes)
def delete_operator_account(
    operator: ElderHomeOperator = Depends(require_approved),
    use_case: DeleteAccountUseCase = Depends(
        role_use_case(DeleteAccountUseCase, Role.OPERATOR, with_storage=True)
    ),
):
    result = use_case.execute(operator.id)
    raise_for_error(result.error)
    return MessageRes(message="Account deleted successfully")


@router.get("/check-name/{name}", response_model=AvailableRes)
def check_elder_home_name(
    name: str,
    use_case: CheckAvailabilityUseCase = Depends(
        role_use_case(CheckAvailabilityUseCase, Role.OPERATOR)
    ),
):
    return AvailableRes(available=use_case.execute("elder_home_name", name))


@router.get("", response_model=List[ElderHomePublicRes])
def list_elder_homes(
    use_case: ListIdentitiesUseCase = Depends(
        role_use_case(ListIdentitiesUseCase, Role.OPERATOR)
    ),
):
    result = use_case.execute(approval_status=ApprovalStatus.APPROVED)
    return [elder_home_public_res(operator) for operator in result.identities]


@router.get("/{operator_id}", response_model=ElderHomePublicRes)
def get_elder_home(
    operator_id: UUID,
    use_case: GetIdentityUseCase = Depends(role_use_case(GetIdentityUseCase, Role.OPERATOR)),
):
    result = use_case.execute(operator_id)
    if result.error or not result.identity.is_approved:
        raise not_found("Elder home not found")
    return elder_home_public_res(result.identity)
