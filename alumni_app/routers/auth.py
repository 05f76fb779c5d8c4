from fastapi import APIRouter, Depends, status

from alumni_app.database import MemberStore, get_member_store
from alumni_app.schemas.user import RegisterRequest
from alumni_app.services.auth_middleware import get_current_uid
from alumni_app.services.profile_service import register_member
from alumni_app.utils.response import create_response, handle_exception

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register")
async def register(
    body: RegisterRequest,
    uid: str = Depends(get_current_uid),
    store: MemberStore = Depends(get_member_store),
):
    try:
        application = await register_member(store, uid, body.full_name.strip(), body.email)
        return create_response(
            message="Registration received. Your membership is pending admin approval.",
            data={"memberId": application.id, "status": application.status.value},
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to register")
