import logging
import time

from alumni_app.database import MemberStore
from alumni_app.models.account import Account, Role
from alumni_app.models.member import MemberApplication, MemberStatus
from alumni_app.models.profile import PhotoType, Profile, ProfileDocument
from alumni_app.services.errors import BadRequest, Forbidden
from alumni_app.services.spaces_service import DocumentStorage
from alumni_app.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

ALLOWED_DOCUMENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
}

ALLOWED_PHOTO_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
}


async def register_member(store: MemberStore, uid: str, full_name: str, email: str | None) -> MemberApplication:
    now = utc_now_iso()
    account = Account(id=uid, email=email, role=Role.user, created_at=now, updated_at=now)
    application = MemberApplication(
        id="",
        user_id=uid,
        full_name=full_name,
        email=email,
        status=MemberStatus.pending,
        created_at=now,
        updated_at=now,
    )
    profile = Profile(user_id=uid, full_name=full_name, email=email, created_at=now, updated_at=now)
    return await store.register(account, application, profile)


async def save_profile(store: MemberStore, uid: str, updates: dict) -> Profile:
    """Merge `updates` into the stored profile and persist it with its
    completeness flag."""
    now = utc_now_iso()
    existing = await store.get_profile(uid)
    base = existing.model_dump() if existing else {"created_at": now}
    base.update(updates)
    base.update({"user_id": uid, "updated_at": now})
    profile = Profile.model_validate(base)

    await store.save_profile(uid, profile, now)
    logger.info("Saved profile for %s (complete=%s)", uid, profile.is_complete)
    return profile


def validate_document(content_type: str | None, size: int, max_bytes: int) -> None:
    if content_type not in ALLOWED_DOCUMENT_TYPES:
        raise BadRequest("Invalid file type. Only PDF, DOC, DOCX, JPG, and PNG are allowed.")
    if size == 0:
        raise BadRequest("Empty file upload")
    if size > max_bytes:
        raise BadRequest(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.")


async def add_document(
    store: MemberStore,
    storage: DocumentStorage,
    uid: str,
    filename: str,
    content_type: str,
    data: bytes,
) -> ProfileDocument:
    key = storage.build_key(uid, filename, int(time.time() * 1000))
    url = await storage.upload(data, key, content_type)

    now = utc_now_iso()
    document = ProfileDocument(name=filename, url=url, type=content_type, uploaded_at=now)
    await store.add_document(uid, document, now)
    return document


async def remove_document(store: MemberStore, storage: DocumentStorage, uid: str, document_url: str) -> None:
    key = storage.key_from_url(document_url)
    if key is None:
        raise BadRequest("Invalid document URL")
    if not key.startswith(storage.member_folder(uid)):
        raise Forbidden("Unauthorized to delete this document")

    await storage.delete(key)
    await store.remove_document(uid, document_url, utc_now_iso())


def parse_photo_type(value: str | None) -> PhotoType:
    try:
        return PhotoType(value)
    except ValueError:
        raise BadRequest("Invalid photo type") from None


def validate_photo(content_type: str | None, size: int, max_bytes: int) -> None:
    if content_type not in ALLOWED_PHOTO_TYPES:
        raise BadRequest("Invalid file type. Only JPEG and PNG are allowed.")
    if size == 0:
        raise BadRequest("Empty file upload")
    if size > max_bytes:
        raise BadRequest(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.")


def _photo_extension(filename: str | None, content_type: str) -> str:
    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[1].strip().lower()
        if extension.isalnum():
            return extension
    return ALLOWED_PHOTO_TYPES[content_type]


async def set_photo(
    store: MemberStore,
    storage: DocumentStorage,
    uid: str,
    photo_type: PhotoType,
    filename: str | None,
    content_type: str,
    data: bytes,
) -> str:
    """Upload a profile or family photo and point the profile at it."""
    extension = _photo_extension(filename, content_type)
    key = storage.photo_key(uid, photo_type.value, int(time.time() * 1000), extension)
    url = await storage.upload(data, key, content_type)
    await store.set_photo(uid, photo_type, url, utc_now_iso())
    logger.info("Stored %s photo for %s", photo_type.value, uid)
    return url
