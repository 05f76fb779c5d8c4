from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials

from alumni_app.config import settings
from alumni_app.database import MemberStore, get_member_store
from alumni_app.models.account import Role
from alumni_app.services.errors import Forbidden, Unauthorized
from alumni_app.services.firebase_service import get_token_verifier


async def get_current_uid(
    credentials: HTTPAuthorizationCredentials | None = Depends(settings.bearer_scheme),
    verify_token=Depends(get_token_verifier),
) -> str:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Unauthorized: No token provided")
    return await verify_token(credentials.credentials)


async def get_current_admin(
    uid: str = Depends(get_current_uid),
    store: MemberStore = Depends(get_member_store),
) -> str:
    role = await store.resolve_role(uid)
    if role != Role.admin:
        raise Forbidden("Unauthorized: Admin access required")
    return uid
