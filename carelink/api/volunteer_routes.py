"""
Name: Volunteer API Controllers

Responsibilities:
  - Volunteer registration (multipart, JSON-encoded skills/availability)
  - Login, profile read / update / delete, dashboard
  - Availability probes and public feedback
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from ..application.uploads import UploadField
from ..application.use_cases import (
    AuthenticateInput,
    AuthenticateUseCase,
    CheckAvailabilityUseCase,
    DeleteAccountUseCase,
    RegisterVolunteerInput,
    RegisterVolunteerUseCase,
    SubmitFeedbackInput,
    SubmitFeedbackUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from ..container import (
    get_register_volunteer_use_case,
    get_submit_feedback_use_case,
    role_use_case,
)
from ..domain.entities import Role, Volunteer
from ..guards import require_identity
from ..metrics import record_login, record_registration
from .common import (
    AvailableRes,
    CamelModel,
    LoginReq,
    MessageRes,
    VolunteerAuthRes,
    VolunteerRes,
    login_outcome_label,
    raise_for_error,
    volunteer_res,
)
from .uploads import ingest_uploads, single

router = APIRouter(prefix="/volunteers", tags=["volunteers"])

require_volunteer = require_identity(Role.VOLUNTEER)


class VolunteerDashboardRes(CamelModel):
    personal_info: VolunteerRes
    joined_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None


class FeedbackReq(CamelModel):
    rating: Optional[float] = None
    feedback: Optional[str] = None


class FeedbackVolunteerRes(CamelModel):
    id: UUID
    name: str
    average_rating: float
    total_ratings: int


class FeedbackRes(CamelModel):
    message: str
    volunteer: FeedbackVolunteerRes


def _with_token(volunteer: Volunteer, token: str) -> VolunteerAuthRes:
    return VolunteerAuthRes(**volunteer_res(volunteer).model_dump(), token=token)


@router.post("/register", response_model=VolunteerAuthRes, status_code=201)
async def register_volunteer(
    name: str = Form(""),
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    phone: str = Form(""),
    age: str = Form(""),
    date_of_birth: str = Form("", alias="dateOfBirth"),
    address: str = Form(""),
    role: str = Form(""),
    description: str = Form(""),
    skills: Optional[str] = Form(None),
    availability: Optional[str] = Form(None),
    profile_photo: Optional[List[UploadFile]] = File(None, alias="profilePhoto"),
    use_case: RegisterVolunteerUseCase = Depends(get_register_volunteer_use_case),
):
    files = await ingest_uploads({UploadField.PROFILE_PHOTO: profile_photo})
    result = await run_in_threadpool(
        use_case.execute,
        RegisterVolunteerInput(
            name=name,
            username=username,
            email=email,
            password=password,
            phone=phone,
            age=age,
            date_of_birth=date_of_birth,
            address=address,
            role=role,
            description=description,
            skills=skills,
            availability=availability,
            profile_photo=single(files, UploadField.PROFILE_PHOTO),
        ),
    )
    record_registration(Role.VOLUNTEER.value, "rejected" if result.error else "created")
    raise_for_error(result.error)
    return _with_token(result.identity, result.token)


@router.post("/login", response_model=VolunteerAuthRes)
def login_volunteer(
    req: LoginReq,
    use_case: AuthenticateUseCase = Depends(
        role_use_case(AuthenticateUseCase, Role.VOLUNTEER)
    ),
):
    result = use_case.execute(AuthenticateInput(username=req.username, password=req.password))
    record_login(Role.VOLUNTEER.value, login_outcome_label(result))
    raise_for_error(result.error)
    return _with_token(result.identity, result.token)


@router.get("/profile", response_model=VolunteerRes)
def get_volunteer_profile(volunteer: Volunteer = Depends(require_volunteer)):
    return volunteer_res(volunteer)


@router.put("/profile", response_model=VolunteerAuthRes)
async def update_volunteer_profile(
    name: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    age: Optional[str] = Form(None),
    date_of_birth: Optional[str] = Form(None, alias="dateOfBirth"),
    address: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    availability: Optional[str] = Form(None),
    profile_photo: Optional[List[UploadFile]] = File(None, alias="profilePhoto"),
    volunteer: Volunteer = Depends(require_volunteer),
    use_case: UpdateProfileUseCase = Depends(
        role_use_case(UpdateProfileUseCase, Role.VOLUNTEER, with_storage=True)
    ),
):
    files = await ingest_uploads({UploadField.PROFILE_PHOTO: profile_photo})
    result = await run_in_threadpool(
        use_case.execute,
        UpdateProfileInput(
            identity_id=volunteer.id,
            changes={
                "name": name,
                "username": username,
                "email": email,
                "password": password,
                "phone": phone,
                "age": age,
                "date_of_birth": date_of_birth,
                "address": address,
                "role": role,
                "description": description,
                "skills": skills,
                "availability": availability,
            },
            profile_photo=single(files, UploadField.PROFILE_PHOTO),
        ),
    )
    raise_for_error(result.error)
    return _with_token(result.identity, result.token)


@router.delete("/profile", response_model=MessageRes)
def delete_volunteer_profile(
    volunteer: Volunteer = Depends(require_volunteer),
    use_case: DeleteAccountUseCase = Depends(
        role_use_case(DeleteAccountUseCase, Role.VOLUNTEER, with_storage=True)
    ),
):
    result = use_case.execute(volunteer.id)
    raise_for_error(result.error)
    return MessageRes(message="Volunteer removed")


@router.get("/dashboard", response_model=VolunteerDashboardRes)
def get_volunteer_dashboard(volunteer: Volunteer = Depends(require_volunteer)):
    return VolunteerDashboardRes(
        personal_info=volunteer_res(volunteer),
        joined_date=volunteer.created_at,
        last_updated=volunteer.updated_at,
    )


@router.get("/check-username/{username}", response_model=AvailableRes)
def check_volunteer_username(
    username: str,
    use_case: CheckAvailabilityUseCase = Depends(
        role_use_case(CheckAvailabilityUseCase, Role.VOLUNTEER)
    ),
):
    return AvailableRes(available=use_case.execute("username", username))


@router.get("/check-email/{email}", response_model=AvailableRes)
def check_volunteer_email(
    email: str,
    use_case: CheckAvailabilityUseCase = Depends(
        role_use_case(CheckAvailabilityUseCase, Role.VOLUNTEER)
    ),
):
    return AvailableRes(available=use_case.execute("email", email))


@router.post("/{volunteer_id}/feedback", response_model=FeedbackRes, status_code=201)
def submit_volunteer_feedback(
    volunteer_id: UUID,
    req: FeedbackReq,
    use_case: SubmitFeedbackUseCase = Depends(get_submit_feedback_use_case),
):
    result = use_case.execute(
        SubmitFeedbackInput(
            volunteer_id=volunteer_id, rating=req.rating, feedback=req.feedback
        )
    )
    raise_for_error(result.error)
    volunteer = result.volunteer
    return FeedbackRes(
        message="Feedback submitted successfully",
        volunteer=FeedbackVolunteerRes(
            id=volunteer.id,
            name=volunteer.name,
            average_rating=volunteer.average_rating,
            total_ratings=len(volunteer.ratings),
        ),
    )
