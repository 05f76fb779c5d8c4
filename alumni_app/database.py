import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from firebase_admin import firestore

from alumni_app.models.account import ROLES_COLLECTION, USERS_COLLECTION, Account, Role, RoleAssignment
from alumni_app.models.member import MEMBERS_COLLECTION, MemberApplication, MemberStatus
from alumni_app.models.profile import PROFILES_COLLECTION, UPLOAD_MANAGED_KEYS, PhotoType, Profile, ProfileDocument
from alumni_app.services.errors import Conflict, NotFound
from alumni_app.services.firebase_service import get_firestore_client

logger = logging.getLogger(__name__)


@dataclass
class StateChange:
    """Field updates produced by a workflow decision, written as one unit."""

    application_update: dict
    account_update: dict | None = None
    profile_update: dict | None = None
    result: Any = None


# decide(application, account, profile) -> StateChange
Decision = Callable[[MemberApplication, Account | None, Profile | None], StateChange]


class MemberStore(ABC):
    """Persistence for accounts, member applications, profiles and legacy roles."""

    @abstractmethod
    async def get_account(self, account_id: str) -> Account | None: ...

    @abstractmethod
    async def get_role_assignments(self, account_id: str) -> list[RoleAssignment]: ...

    @abstractmethod
    async def list_role_assignments(self) -> list[RoleAssignment]: ...

    @abstractmethod
    async def set_role(self, account_id: str, role: Role, now: str) -> None: ...

    @abstractmethod
    async def get_application(self, member_id: str) -> MemberApplication | None: ...

    @abstractmethod
    async def list_applications(self, status: MemberStatus) -> list[MemberApplication]: ...

    @abstractmethod
    async def get_profile(self, account_id: str) -> Profile | None: ...

    @abstractmethod
    async def register(self, account: Account, application: MemberApplication, profile: Profile) -> MemberApplication:
        """Create all three records together; `Conflict` if the account exists."""

    @abstractmethod
    async def save_profile(self, account_id: str, profile: Profile, now: str) -> None:
        """Write the profile, the account's `profile_complete` flag and the
        member's name/email in a single batch."""

    @abstractmethod
    async def add_document(self, account_id: str, document: ProfileDocument, now: str) -> None:
        """Append one entry to the profile's document list atomically."""

    @abstractmethod
    async def remove_document(self, account_id: str, document_url: str, now: str) -> None:
        """Drop the entry with `document_url` atomically; a missing entry is ignored."""

    @abstractmethod
    async def set_photo(self, account_id: str, photo_type: PhotoType, url: str, now: str) -> None: ...

    @abstractmethod
    async def transition(self, member_id: str, decide: Decision) -> StateChange:
        """Read application, account and profile, apply `decide`, and write the
        resulting updates atomically. Raises `NotFound` for an unknown member."""

    async def resolve_role(self, account_id: str) -> Role:
        account = await self.get_account(account_id)
        if account and account.role == Role.admin:
            return Role.admin
        # Legacy rows; retire once migrate_legacy_roles has run everywhere.
        assignments = await self.get_role_assignments(account_id)
        if any(assignment.role == Role.admin for assignment in assignments):
            logger.info("Resolved admin role for %s from legacy user_roles", account_id)
            return Role.admin
        return Role.user


class FirestoreMemberStore(MemberStore):
    def __init__(self, client):
        self.client = client

    def _users(self):
        return self.client.collection(USERS_COLLECTION)

    def _members(self):
        return self.client.collection(MEMBERS_COLLECTION)

    def _profiles(self):
        return self.client.collection(PROFILES_COLLECTION)

    def _roles(self):
        return self.client.collection(ROLES_COLLECTION)

    async def get_account(self, account_id: str) -> Account | None:
        snapshot = await self._users().document(account_id).get()
        if not snapshot.exists:
            return None
        return Account.from_document(snapshot.id, snapshot.to_dict())

    async def get_role_assignments(self, account_id: str) -> list[RoleAssignment]:
        query = self._roles().where(filter=firestore.FieldFilter("user_id", "==", account_id))
        snapshots = await query.get()
        return [RoleAssignment.from_document(snapshot.id, snapshot.to_dict()) for snapshot in snapshots]

    async def list_role_assignments(self) -> list[RoleAssignment]:
        snapshots = await self._roles().get()
        return [
            RoleAssignment.from_document(snapshot.id, snapshot.to_dict())
            for snapshot in snapshots
            if (snapshot.to_dict() or {}).get("user_id")
        ]

    async def set_role(self, account_id: str, role: Role, now: str) -> None:
        account_ref = self._users().document(account_id)
        account_snapshot = await account_ref.get()
        if not account_snapshot.exists:
            raise NotFound("User not found")

        batch = self.client.batch()
        batch.update(account_ref, {"role": role.value, "updated_at": now})
        legacy = await self.get_role_assignments(account_id)
        if legacy:
            batch.update(self._roles().document(legacy[0].id), {"role": role.value})
        else:
            batch.set(self._roles().document(), {"user_id": account_id, "role": role.value})
        await batch.commit()

    async def get_application(self, member_id: str) -> MemberApplication | None:
        snapshot = await self._members().document(member_id).get()
        if not snapshot.exists:
            return None
        return MemberApplication.from_document(snapshot.id, snapshot.to_dict())

    async def _find_application_ref(self, account_id: str):
        query = self._members().where(filter=firestore.FieldFilter("user_id", "==", account_id)).limit(1)
        snapshots = await query.get()
        return snapshots[0].reference if snapshots else None

    async def list_applications(self, status: MemberStatus) -> list[MemberApplication]:
        # Sorted in memory so no composite (status, created_at) index is needed.
        query = self._members().where(filter=firestore.FieldFilter("status", "==", status.value))
        snapshots = await query.get()
        applications = [MemberApplication.from_document(snapshot.id, snapshot.to_dict()) for snapshot in snapshots]
        applications.sort(key=lambda application: application.created_at or "", reverse=True)
        return applications

    async def get_profile(self, account_id: str) -> Profile | None:
        snapshot = await self._profiles().document(account_id).get()
        if not snapshot.exists:
            return None
        return Profile.from_document(snapshot.to_dict())

    async def register(self, account: Account, application: MemberApplication, profile: Profile) -> MemberApplication:
        account_ref = self._users().document(account.id)
        if (await account_ref.get()).exists:
            raise Conflict("Account already registered")

        member_ref = self._members().document()
        application = application.model_copy(update={"id": member_ref.id})

        batch = self.client.batch()
        batch.set(account_ref, account.to_document())
        batch.set(member_ref, application.to_document())
        batch.set(self._profiles().document(account.id), profile.to_document())
        await batch.commit()
        logger.info("Registered account %s with application %s", account.id, member_ref.id)
        return application

    async def save_profile(self, account_id: str, profile: Profile, now: str) -> None:
        account_ref = self._users().document(account_id)
        account_exists = (await account_ref.get()).exists
        member_ref = await self._find_application_ref(account_id)

        # Documents and photos are owned by the upload/approval paths.
        profile_data = profile.to_document()
        for key in UPLOAD_MANAGED_KEYS:
            profile_data.pop(key, None)

        batch = self.client.batch()
        batch.set(self._profiles().document(account_id), profile_data, merge=True)
        if account_exists:
            batch.update(account_ref, {"profile_complete": profile.is_complete, "updated_at": now})
        if member_ref is not None:
            member_fields = {"updated_at": now}
            if profile.full_name:
                member_fields["full_name"] = profile.full_name
            if profile.email:
                member_fields["email"] = profile.email
            batch.update(member_ref, member_fields)
        await batch.commit()

    async def add_document(self, account_id: str, document: ProfileDocument, now: str) -> None:
        # ArrayUnion is applied server side, so it commutes with the approval
        # transaction and with other uploads.
        entry = document.model_dump(mode="json", by_alias=True)
        await self._profiles().document(account_id).set(
            {"documents": firestore.ArrayUnion([entry]), "updatedAt": now},
            merge=True,
        )

    async def remove_document(self, account_id: str, document_url: str, now: str) -> None:
        profile_ref = self._profiles().document(account_id)
        transaction = self.client.transaction()

        @firestore.async_transactional
        async def _apply(transaction):
            snapshot = await profile_ref.get(transaction=transaction)
            if not snapshot.exists:
                return
            documents = (snapshot.to_dict() or {}).get("documents") or []
            remaining = [entry for entry in documents if entry.get("url") != document_url]
            if len(remaining) != len(documents):
                transaction.update(profile_ref, {"documents": remaining, "updatedAt": now})

        await _apply(transaction)

    async def set_photo(self, account_id: str, photo_type: PhotoType, url: str, now: str) -> None:
        await self._profiles().document(account_id).set(
            {photo_type.profile_key: url, "updatedAt": now},
            merge=True,
        )

    async def transition(self, member_id: str, decide: Decision) -> StateChange:
        member_ref = self._members().document(member_id)
        transaction = self.client.transaction()

        @firestore.async_transactional
        async def _apply(transaction):
            member_snapshot = await member_ref.get(transaction=transaction)
            if not member_snapshot.exists:
                raise NotFound("Member not found")
            application = MemberApplication.from_document(member_snapshot.id, member_snapshot.to_dict())

            account_ref = profile_ref = None
            account = profile = None
            if application.user_id:
                account_ref = self._users().document(application.user_id)
                profile_ref = self._profiles().document(application.user_id)
                account_snapshot = await account_ref.get(transaction=transaction)
                profile_snapshot = await profile_ref.get(transaction=transaction)
                if account_snapshot.exists:
                    account = Account.from_document(account_snapshot.id, account_snapshot.to_dict())
                if profile_snapshot.exists:
                    profile = Profile.from_document(profile_snapshot.to_dict())

            change = decide(application, account, profile)
            transaction.update(member_ref, change.application_update)
            if change.account_update is not None and account is not None:
                transaction.update(account_ref, change.account_update)
            if change.profile_update is not None and profile is not None:
                transaction.update(profile_ref, change.profile_update)
            return change

        return await _apply(transaction)


_store: MemberStore | None = None


async def get_member_store() -> MemberStore:
    global _store
    if _store is None:
        _store = FirestoreMemberStore(get_firestore_client())
    return _store
