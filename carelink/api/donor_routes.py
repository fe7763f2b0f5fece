"""
Name: Donor API Controllers

Responsibilities:
  - Donor registration (multipart, optional profile photo) and login
  - Self-service profile read / update / delete
  - Username and email availability probes

Collaborators:
  - application.use_cases: RegisterDonorUseCase, AuthenticateUseCase, ...
  - guards.require_identity(Role.DONOR)
  - api.uploads.ingest_uploads

Notes:
  - This module stays thin (controllers only)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from ..application.uploads import UploadField
from ..application.use_cases import (
    AuthenticateInput,
    AuthenticateUseCase,
    CheckAvailabilityUseCase,
    DeleteAccountUseCase,
    RegisterDonorInput,
    RegisterDonorUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from ..container import get_register_donor_use_case, role_use_case
from ..domain.entities import Donor, Role
from ..guards import require_identity
from ..metrics import record_login, record_registration
from .common import (
    AvailableRes,
    DonorAuthRes,
    DonorRes,
    LoginReq,
    MessageRes,
    donor_res,
    login_outcome_label,
    raise_for_error,
)
from .uploads import ingest_uploads, single

router = APIRouter(prefix="/donors", tags=["donors"])

require_donor = require_identity(Role.DONOR)


def _with_token(donor: Donor, token: str) -> DonorAuthRes:
    return DonorAuthRes(**donor_res(donor).model_dump(), token=token)


@router.post("/register", response_model=DonorAuthRes, status_code=201)
async def register_donor(
    full_name: str = Form("", alias="fullName"),
    email: str = Form(""),
    address: str = Form(""),
    contact_number: str = Form("", alias="contactNumber"),
    username: str = Form(""),
    password: str = Form(""),
    description: str = Form(""),
    profile_photo: Optional[List[UploadFile]] = File(None, alias="profilePhoto"),
    use_case: RegisterDonorUseCase = Depends(get_register_donor_use_case),
):
    files = await ingest_uploads({UploadField.PROFILE_PHOTO: profile_photo})
    result = await run_in_threadpool(
        use_case.execute,
        RegisterDonorInput(
            full_name=full_name,
            email=email,
            address=address,
            contact_number=contact_number,
            username=username,
            password=password,
            description=description,
            profile_photo=single(files, UploadField.PROFILE_PHOTO),
        ),
    )
    record_registration(Role.DONOR.value, "rejected" if result.error else "created")
    raise_for_error(result.error)
    return _with_token(result.identity, result.token)


@router.post("/login", response_model=DonorAuthRes)
def login_donor(
    req: LoginReq,
    use_case: AuthenticateUseCase = Depends(role_use_case(AuthenticateUseCase, Role.DONOR)),
):
    result = use_case.execute(AuthenticateInput(username=req.username, password=req.password))
    record_login(Role.DONOR.value, login_outcome_label(result))
    raise_for_error(result.error)
    return _with_token(result.identity, result.token)


@router.get("/profile", response_model=DonorRes)
def get_donor_profile(donor: Donor = Depends(require_donor)):
    return donor_res(donor)


@router.put("/profile", response_model=DonorAuthRes)
async def update_donor_profile(
    full_name: Optional[str] = Form(None, alias="fullName"),
    email: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    contact_number: Optional[str] = Form(None, alias="contactNumber"),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    profile_photo: Optional[List[UploadFile]] = File(None, alias="profilePhoto"),
    donor: Donor = Depends(require_donor),
    use_case: UpdateProfileUseCase = Depends(
        role_use_case(UpdateProfileUseCase, Role.DONOR, with_storage=True)
    ),
):
    files = await ingest_uploads({UploadField.PROFILE_PHOTO: profile_photo})
    result = await run_in_threadpool(
        use_case.execute,
        UpdateProfileInput(
            identity_id=donor.id,
            changes={
                "full_name": full_name,
                "email": email,
                "address": address,
                "contact_number": contact_number,
                "username": username,
                "password": password,
                "description": description,
            },
            profile_photo=single(files, UploadField.PROFILE_PHOTO),
        ),
    )
    raise_for_error(result.error)
    return _with_token(result.identity, result.token)


@router.delete("/profile", response_model=MessageRes)
def delete_donor_account(
    donor: Donor = Depends(require_donor),
    use_case: DeleteAccountUseCase = Depends(
        role_use_case(DeleteAccountUseCase, Role.DONOR, with_storage=True)
    ),
):
    result = use_case.execute(donor.id)
    raise_for_error(result.error)
    return MessageRes(message="Account deleted successfully")


@router.get("/check-username/{username}", response_model=AvailableRes)
def check_donor_username(
    username: str,
    use_case: CheckAvailabilityUseCase = Depends(
        role_use_case(CheckAvailabilityUseCase, Role.DONOR)
    ),
):
    return AvailableRes(available=use_case.execute("username", username))


@router.get("/check-email/{email}", response_model=AvailableRes)
def check_donor_email(
    email: str,
    use_case: CheckAvailabilityUseCase = Depends(
        role_use_case(CheckAvailabilityUseCase, Role.DONOR)
    ),
):
    return AvailableRes(available=use_case.execute("email", email))
