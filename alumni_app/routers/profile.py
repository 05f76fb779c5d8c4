from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from alumni_app.config import settings
from alumni_app.database import MemberStore, get_member_store
from alumni_app.schemas.profile import DeleteDocumentRequest, ProfileUpdate
from alumni_app.services import profile_service
from alumni_app.services.auth_middleware import get_current_uid
from alumni_app.services.errors import BadRequest
from alumni_app.services.spaces_service import DocumentStorage, get_document_storage
from alumni_app.utils.response import create_response, handle_exception

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("")
async def get_profile(
    uid: str = Depends(get_current_uid),
    store: MemberStore = Depends(get_member_store),
):
    try:
        profile = await store.get_profile(uid)
        return create_response(
            message="Profile fetched successfully",
            data={"profile": profile.to_document() if profile else None},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to fetch profile")


@router.post("")
@router.put("")
async def save_profile(
    update: ProfileUpdate,
    uid: str = Depends(get_current_uid),
    store: MemberStore = Depends(get_member_store),
):
    try:
        profile = await profile_service.save_profile(store, uid, update.model_dump(exclude_unset=True))
        complete = profile.is_complete
        return create_response(
            message="Profile saved successfully" if complete else "Profile saved. Please complete all mandatory fields.",
            data={"profile": profile.to_document(), "profileComplete": complete},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to save profile")


@router.post("/documents")
async def upload_document(
    file: UploadFile = File(...),
    uid: str = Depends(get_current_uid),
    store: MemberStore = Depends(get_member_store),
    storage: DocumentStorage = Depends(get_document_storage),
):
    try:
        contents = await file.read()
        profile_service.validate_document(file.content_type, len(contents), settings.MAX_DOCUMENT_BYTES)

        document = await profile_service.add_document(
            store,
            storage,
            uid,
            file.filename or "document",
            file.content_type,
            contents,
        )
        return create_response(
            message="Document uploaded successfully",
            data={"document": document.model_dump(mode="json", by_alias=True)},
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to upload document")


@router.post("/photos")
async def upload_photo(
    file: UploadFile = File(...),
    photo_type: str | None = Form(None, alias="photoType"),
    uid: str = Depends(get_current_uid),
    store: MemberStore = Depends(get_member_store),
    storage: DocumentStorage = Depends(get_document_storage),
):
    try:
        kind = profile_service.parse_photo_type(photo_type)
        contents = await file.read()
        profile_service.validate_photo(file.content_type, len(contents), settings.MAX_PHOTO_BYTES)

        url = await profile_service.set_photo(store, storage, uid, kind, file.filename, file.content_type, contents)
        return create_response(
            message="Photo uploaded successfully",
            data={"success": True, "url": url, "photoType": kind.value},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to upload photo")


@router.delete("/documents")
async def delete_document(
    body: DeleteDocumentRequest,
    uid: str = Depends(get_current_uid),
    store: MemberStore = Depends(get_member_store),
    storage: DocumentStorage = Depends(get_document_storage),
):
    try:
        if not body.document_url:
            raise BadRequest("Document URL is required")

        await profile_service.remove_document(store, storage, uid, body.document_url)
        return create_response(
            message="Document deleted successfully",
            data={"success": True},
            status_code=status.HTTP_200_OK,
        )
    except Exception as exc:
        return handle_exception(exc, "Failed to delete document")
