from fastapi import APIRouter, Depends, status

from alumni_app.database import MemberStore, get_member_store
from alumni_app.models.account import Role
from alumni_app.schemas.user import RoleUpdateRequest
from alumni_app.services.auth_middleware import get_current_admin
from alumni_app.services.errors import BadRequest
from alumni_app.utils.response import create_response, handle_exception
from alumni_app.utils.timestamps import utc_now_iso

router = APIRouter(prefix="/admin/users", tags=["Admin Users"])

VALID_ROLES = {role.value for role in Role}


@router.post("/update-role")
async def update_role(
    body: RoleUpdateRequest,
    store: MemberStore = Depends(get_member_store),
    admin_id: str = Depends(get_current_admin),
):
    del admin_id
    try:
        if not body.user_id or not body.role:
            raise BadRequest("User ID and role are required")
        if body.role not in VALID_ROLES:
            raise BadRequest(f"Role must be one of: {', '.join(sorted(VALID_ROLES))}")

        await store.set_role(body.user_id, Role(body.role), utc_now_iso())
        return create_response(
            message=f"User role updated to {body.role}",
            data={"success": True},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to update user role")
