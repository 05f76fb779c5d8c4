import logging

from fastapi import APIRouter, Depends, status

from alumni_app.database import MemberStore, get_member_store
from alumni_app.models.member import MemberStatus
from alumni_app.schemas.member import DirectoryEntry
from alumni_app.utils.response import create_response, handle_exception

router = APIRouter(prefix="/members", tags=["Members"])
logger = logging.getLogger(__name__)


@router.get("")
async def list_approved_members(store: MemberStore = Depends(get_member_store)):
    try:
        applications = await store.list_applications(MemberStatus.approved)
        entries = []
        for application in applications:
            profile = None
            if application.user_id:
                try:
                    profile = await store.get_profile(application.user_id)
                except Exception:
                    logger.warning("Could not load profile for member %s", application.user_id, exc_info=True)
            entry = DirectoryEntry(
                id=application.id,
                user_id=application.user_id,
                full_name=application.full_name,
                email=application.email,
                status=application.status.value,
                created_at=application.created_at,
                profile=_public_profile(profile),
            )
            entries.append(entry.model_dump())

        return create_response(
            message="Members fetched successfully",
            data={"members": entries, "count": len(entries)},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to fetch members")


def _public_profile(profile) -> dict | None:
    if profile is None:
        return None
    payload = profile.to_document()
    payload.pop("documents", None)
    return payload
