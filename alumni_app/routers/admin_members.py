from fastapi import APIRouter, Depends, Query, status

from alumni_app.database import MemberStore, get_member_store
from alumni_app.models.member import MemberStatus
from alumni_app.schemas.member import ApproveMemberRequest, MemberWithProfile, RejectMemberRequest
from alumni_app.services.approval_service import ApprovalService, get_approval_service
from alumni_app.services.auth_middleware import get_current_admin
from alumni_app.services.errors import BadRequest
from alumni_app.utils.response import create_response, handle_exception

router = APIRouter(prefix="/admin/members", tags=["Admin Members"])


@router.get("")
async def list_members(
    member_status: MemberStatus = Query(MemberStatus.pending, alias="status"),
    store: MemberStore = Depends(get_member_store),
    admin_id: str = Depends(get_current_admin),
):
    del admin_id
    try:
        applications = await store.list_applications(member_status)
        members = []
        for application in applications:
            profile = await store.get_profile(application.user_id) if application.user_id else None
            members.append(MemberWithProfile.build(application, profile).model_dump())
        return create_response(
            message="Members fetched successfully",
            data={"members": members, "count": len(members)},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to fetch members")


@router.post("/approve")
async def approve_member(
    body: ApproveMemberRequest,
    admin_id: str = Depends(get_current_admin),
    service: ApprovalService = Depends(get_approval_service),
):
    try:
        if not body.member_id:
            raise BadRequest("Member ID is required")

        result = await service.approve(admin_id, body.member_id)
        return create_response(
            message=result.message,
            data=result.to_payload(),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to approve member")


@router.post("/reject")
async def reject_member(
    body: RejectMemberRequest,
    admin_id: str = Depends(get_current_admin),
    service: ApprovalService = Depends(get_approval_service),
):
    try:
        if not body.member_id:
            raise BadRequest("Member ID is required")

        result = await service.reject(admin_id, body.member_id, body.reason)
        return create_response(
            message=result.message,
            data=result.to_payload(),
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to reject member")
