"""
Name: Administrator API Controllers

Responsibilities:
  - Admin login and status probe (public)
  - Dashboard aggregates
  - Listing, lookup and block toggling of donors, volunteers, elder homes
  - Approval / rejection of elder home applications

Constraints:
  - Everything except /status and /login requires an admin token
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends

from ..application.use_cases import (
    AdminDashboardUseCase,
    ApproveOperatorUseCase,
    AuthenticateInput,
    AuthenticateUseCase,
    GetIdentityUseCase,
    ListIdentitiesUseCase,
    RejectOperatorUseCase,
    ToggleBlockUseCase,
)
from ..container import (
    get_admin_dashboard_use_case,
    get_approve_operator_use_case,
    get_reject_operator_use_case,
    role_use_case,
)
from ..domain.entities import Administrator, ApprovalStatus, Role
from ..guards import require_admin
from ..metrics import record_login, record_moderation
from .common import (
    CamelModel,
    DonorRes,
    LoginReq,
    OperatorRes,
    VolunteerRes,
    donor_res,
    login_outcome_label,
    operator_res,
    raise_for_error,
    volunteer_res,
)

router = APIRouter(prefix="/admin", tags=["admin"])

admin_guard = require_admin()


class AdminStatusRes(CamelModel):
    status: str
    message: str
    timestamp: datetime


class AdminAuthRes(CamelModel):
    id: UUID
    username: str
    name: str = "Administrator"
    is_admin: bool = True
    token: str


class AdminDashboardRes(CamelModel):
    total_users: int
    total_donors: int
    total_volunteers: int
    total_elder_homes: int
    pending_approvals: int
    rejected_applications: int
    total_donations: float
    recent_donations: float


class BlockToggleRes(CamelModel):
    id: UUID
    is_blocked: bool
    message: str


class ModerationRes(CamelModel):
    id: UUID
    approval_status: str
    rejection_reason: Optional[str] = None
    message: str


class RejectReq(CamelModel):
    rejection_reason: Optional[str] = None


def _toggle(use_case: ToggleBlockUseCase, identity_id: UUID) -> BlockToggleRes:
    result = use_case.execute(identity_id)
    raise_for_error(result.error)
    record_moderation(
        use_case.repository.role.value, "block" if result.is_blocked else "unblock"
    )
    return BlockToggleRes(
        id=result.identity.id, is_blocked=result.is_blocked, message=result.message
    )


@router.get("/status", response_model=AdminStatusRes)
def admin_status():
    return AdminStatusRes(
        status="ok",
        message="Admin API is running",
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/login", response_model=AdminAuthRes)
def login_admin(
    req: LoginReq,
    use_case: AuthenticateUseCase = Depends(role_use_case(AuthenticateUseCase, Role.ADMIN)),
):
    result = use_case.execute(AuthenticateInput(username=req.username, password=req.password))
    record_login(Role.ADMIN.value, login_outcome_label(result))
    raise_for_error(result.error)
    return AdminAuthRes(
        id=result.identity.id, username=result.identity.username, token=result.token
    )


@router.get("/dashboard", response_model=AdminDashboardRes)
def admin_dashboard(
    _admin: Administrator = Depends(admin_guard),
    use_case: AdminDashboardUseCase = Depends(get_admin_dashboard_use_case),
):
    stats = use_case.execute()
    return AdminDashboardRes(
        total_users=stats.total_users,
        total_donors=stats.total_donors,
        total_volunteers=stats.total_volunteers,
        total_elder_homes=stats.total_elder_homes,
        pending_approvals=stats.pending_approvals,
        rejected_applications=stats.rejected_applications,
        total_donations=stats.total_donations,
        recent_donations=stats.recent_donations,
    )


# R: Donors
@router.get("/donors", response_model=List[DonorRes])
def list_donors(
    _admin: Administrator = Depends(admin_guard),
    use_case: ListIdentitiesUseCase = Depends(role_use_case(ListIdentitiesUseCase, Role.DONOR)),
):
    return [donor_res(d) for d in use_case.execute().identities]


@router.get("/donors/{donor_id}", response_model=DonorRes)
def get_donor(
    donor_id: UUID,
    _admin: Administrator = Depends(admin_guard),
    use_case: GetIdentityUseCase = Depends(role_use_case(GetIdentityUseCase, Role.DONOR)),
):
    result = use_case.execute(donor_id)
    raise_for_error(result.error)
    return donor_res(result.identity)


@router.put("/donors/{donor_id}/block", response_model=BlockToggleRes)
def toggle_block_donor(
    donor_id: UUID,
    _admin: Administrator = Depends(admin_guard),
    use_case: ToggleBlockUseCase = Depends(role_use_case(ToggleBlockUseCase, Role.DONOR)),
):
    return _toggle(use_case, donor_id)


# R: Elder homes
@router.get("/elder-homes", response_model=List[OperatorRes])
def list_elder_homes(
    _admin: Administrator = Depends(admin_guard),
    use_case: ListIdentitiesUseCase = Depends(
        role_use_case(ListIdentitiesUseCase, Role.OPERATOR)
    ),
):
    return [operator_res(o) for o in use_case.execute().identities]


@router.get("/elder-homes/pending", response_model=List[OperatorRes])
def list_pending_elder_homes(
    _admin: Administrator = Depends(admin_guard),
    use_case: ListIdentitiesUseCase = Depends(
        role_use_case(ListIdentitiesUseCase, Role.OPERATOR)
    ),
):
    result = use_case.execute(approval_status=ApprovalStatus.PENDING)
    return [operator_res(o) for o in result.identities]


@router.get("/elder-homes/{operator_id}", response_model=OperatorRes)
def get_elder_home_owner(
    operator_id: UUID,
    _admin: Administrator = Depends(admin_guard),
    use_case: GetIdentityUseCase = Depends(role_use_case(GetIdentityUseCase, Role.OPERATOR)),
):
    result = use_case.execute(operator_id)
    raise_for_error(result.error)
    return operator_res(result.identity)


@router.put("/elder-homes/{operator_id}/approve", response_model=ModerationRes)
def approve_elder_home_owner(
    operator_id: UUID,
    _admin: Administrator = Depends(admin_guard),
    use_case: ApproveOperatorUseCase = Depends(get_approve_operator_use_case),
):
    result = use_case.execute(operator_id)
    raise_for_error(result.error)
    record_moderation(Role.OPERATOR.value, "approve")
    return ModerationRes(
        id=result.identity.id,
        approval_status=result.identity.approval_status.value,
        message=result.message,
    )


@router.put("/elder-homes/{operator_id}/reject", response_model=ModerationRes)
def reject_elder_home_owner(
    operator_id: UUID,
    req: Optional[RejectReq] = Body(None),
    _admin: Administrator = Depends(admin_guard),
    use_case: RejectOperatorUseCase = Depends(get_reject_operator_use_case),
):
    result = use_case.execute(operator_id, req.rejection_reason if req else None)
    raise_for_error(result.error)
    record_moderation(Role.OPERATOR.value, "reject")
    return ModerationRes(
        id=result.identity.id,
        approval_status=result.identity.approval_status.value,
        rejection_reason=result.identity.rejection_reason,
        message=result.message,
    )


@router.put("/elder-homes/{operator_id}/block", response_model=BlockToggleRes)
def toggle_block_elder_home_owner(
    operator_id: UUID,
    _admin: Administrator = Depends(admin_guard),
    use_case: ToggleBlockUseCase = Depends(role_use_case(ToggleBlockUseCase, Role.OPERATOR)),
):
    return _toggle(use_case, operator_id)


# R: Volunteers
@router.get("/volunteers", response_model=List[VolunteerRes])
def list_volunteers(
    _admin: Administrator = Depends(admin_guard),
    use_case: ListIdentitiesUseCase = Depends(
        role_use_case(ListIdentitiesUseCase, Role.VOLUNTEER)
    ),
):
    return [volunteer_res(v) for v in use_case.execute().identities]


@router.get("/volunteers/{volunteer_id}", response_model=VolunteerRes)
def get_volunteer(
    volunteer_id: UUID,
    _admin: Administrator = Depends(admin_guard),
    use_case: GetIdentityUseCase = Depends(role_use_case(GetIdentityUseCase, Role.VOLUNTEER)),
):
    result = use_case.execute(volunteer_id)
    raise_for_error(result.error)
    return volunteer_res(result.identity)


@router.put("/volunteers/{volunteer_id}/block", response_model=BlockToggleRes)
def toggle_block_volunteer(
    volunteer_id: UUID,
    _admin: Administrator = Depends(admin_guard),
    use_case: ToggleBlockUseCase = Depends(
        role_use_case(ToggleBlockUseCase, Role.VOLUNTEER)
    ),
):
    return _toggle(use_case, volunteer_id)
