"""Dual-admin member approval workflow.

An application moves from ``pending`` to ``approved`` once enough distinct
admins have voted for it and the member's profile is complete, or to
``rejected`` on an explicit admin decision. Both terminal states are final:
votes on a rejected application and rejections of an approved one are
refused with ``Conflict``.

The vote check, the approval-set update and the writes to the account,
application and profile happen in one store transition. Deleting stored
documents and emailing the member run only after that commits, and their
failures are logged without failing the request.
"""

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Awaitable, Callable

from fastapi import Depends

from alumni_app.config import MIN_REQUIRED_APPROVALS, settings
from alumni_app.database import MemberStore, StateChange, get_member_store
from alumni_app.models.account import Account
from alumni_app.models.member import MemberApplication, MemberStatus
from alumni_app.models.profile import Profile, ProfileDocument
from alumni_app.services.email_services import get_mailer
from alumni_app.services.errors import AlreadyApproved, Conflict, NotFound
from alumni_app.services.spaces_service import DocumentStorage, get_document_storage
from alumni_app.utils.timestamps import utc_now_iso

DEFAULT_REQUIRED_APPROVALS = MIN_REQUIRED_APPROVALS

Mailer = Callable[[str, str], Awaitable[None]]


@dataclass
class ApprovalResult:
    member_id: str
    approval_count: int
    approved: bool
    profile_complete: bool
    required_approvals: int = DEFAULT_REQUIRED_APPROVALS
    email: str | None = None
    full_name: str | None = None
    purged_documents: list[ProfileDocument] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.approved:
            return f"Member approved successfully ({self.approval_count} admin approvals received)"
        if not self.profile_complete:
            waiting = "Member must also complete mandatory profile fields."
        elif self.required_approvals - self.approval_count == 1:
            waiting = "Waiting for second admin approval." if self.required_approvals == 2 else "Waiting for one more admin approval."
        else:
            waiting = f"Waiting for {self.required_approvals - self.approval_count} more admin approvals."
        return f"Approval recorded ({self.approval_count}/{self.required_approvals} admin approvals). {waiting}"

    def to_payload(self) -> dict:
        return {
            "memberId": self.member_id,
            "approvalCount": self.approval_count,
            "approved": self.approved,
            "profileComplete": self.profile_complete,
        }


@dataclass
class RejectionResult:
    member_id: str
    reason: str | None = None
    purged_documents: list[ProfileDocument] = field(default_factory=list)

    message = "Member rejected successfully"

    def to_payload(self) -> dict:
        return {"memberId": self.member_id}


def is_profile_complete(profile: Profile | None) -> bool:
    return profile is not None and profile.is_complete


def _unique(*groups: list[str]) -> list[str]:
    seen: list[str] = []
    for group in groups:
        for value in group:
            if value not in seen:
                seen.append(value)
    return seen


def _documents_purge(profile: Profile | None, now: str) -> tuple[dict | None, list[ProfileDocument]]:
    if profile is None or not profile.documents:
        return None, []
    return {"documents": [], "updatedAt": now}, list(profile.documents)


def evaluate_approval(
    application: MemberApplication,
    account: Account | None,
    profile: Profile | None,
    *,
    admin_id: str,
    required_approvals: int,
    now: str,
) -> StateChange:
    """Record `admin_id`'s vote and decide whether the application finalizes."""
    if account is None:
        raise NotFound("User document not found")
    if application.status == MemberStatus.rejected:
        raise Conflict("Member has already been rejected")

    # The account and application mirror each other; merge in case an older
    # non-atomic write left them apart.
    approvers = _unique(application.approved_by_admins, account.approved_by_admins)
    if admin_id in approvers:
        raise AlreadyApproved()
    if application.status == MemberStatus.approved:
        raise Conflict("Member is already approved")

    approvers.append(admin_id)
    approval_count = len(approvers)
    profile_complete = is_profile_complete(profile)
    finalize = profile_complete and approval_count >= required_approvals
    status = MemberStatus.approved if finalize else MemberStatus.pending

    account_update = {
        "approved_by_admins": approvers,
        "approval_count": approval_count,
        "approval_status": status.value,
        "updated_at": now,
    }
    application_update = {
        "status": status.value,
        "approved_by_admins": approvers,
        "approval_count": approval_count,
        "updated_at": now,
    }
    profile_update, purged = None, []
    if finalize:
        account_update["approved_at"] = now
        application_update["approved_at"] = now
        profile_update, purged = _documents_purge(profile, now)

    result = ApprovalResult(
        member_id=application.id,
        approval_count=approval_count,
        approved=finalize,
        profile_complete=profile_complete,
        required_approvals=required_approvals,
        email=application.email or account.email,
        full_name=(profile.full_name if profile else None) or application.full_name,
        purged_documents=purged,
    )
    return StateChange(application_update, account_update, profile_update, result)


def evaluate_rejection(
    application: MemberApplication,
    account: Account | None,
    profile: Profile | None,
    *,
    admin_id: str,
    reason: str | None,
    now: str,
) -> StateChange:
    if application.status == MemberStatus.approved:
        raise Conflict("Member is already approved")

    application_update = {
        "status": MemberStatus.rejected.value,
        "rejected_at": now,
        "rejected_by": admin_id,
        "rejection_reason": reason or None,
        "updated_at": now,
    }
    account_update = None
    if account is not None:
        account_update = {"approval_status": MemberStatus.rejected.value, "updated_at": now}
    profile_update, purged = _documents_purge(profile, now)

    result = RejectionResult(member_id=application.id, reason=reason or None, purged_documents=purged)
    return StateChange(application_update, account_update, profile_update, result)


class ApprovalService:
    def __init__(
        self,
        store: MemberStore,
        storage: DocumentStorage,
        send_email: Mailer,
        required_approvals: int = DEFAULT_REQUIRED_APPROVALS,
        logger: logging.Logger | None = None,
    ):
        if required_approvals < MIN_REQUIRED_APPROVALS:
            raise ValueError(f"required_approvals must be at least {MIN_REQUIRED_APPROVALS}")
        self.store = store
        self.storage = storage
        self.send_email = send_email
        self.required_approvals = required_approvals
        self.logger = logger or logging.getLogger(__name__)

    async def approve(self, admin_id: str, member_id: str) -> ApprovalResult:
        decide = partial(
            evaluate_approval,
            admin_id=admin_id,
            required_approvals=self.required_approvals,
            now=utc_now_iso(),
        )
        change = await self.store.transition(member_id, decide)
        result: ApprovalResult = change.result
        self.logger.info(
            "Admin %s approved member %s (%s/%s, profile_complete=%s, approved=%s)",
            admin_id,
            member_id,
            result.approval_count,
            self.required_approvals,
            result.profile_complete,
            result.approved,
        )

        if result.approved:
            await self._purge_documents(member_id, result.purged_documents)
            await self._notify(result)
        return result

    async def reject(self, admin_id: str, member_id: str, reason: str | None = None) -> RejectionResult:
        decide = partial(evaluate_rejection, admin_id=admin_id, reason=reason, now=utc_now_iso())
        change = await self.store.transition(member_id, decide)
        result: RejectionResult = change.result
        self.logger.info("Admin %s rejected member %s (reason=%s)", admin_id, member_id, result.reason)
        await self._purge_documents(member_id, result.purged_documents)
        return result

    async def _purge_documents(self, member_id: str, documents: list[ProfileDocument]) -> None:
        for document in documents:
            key = self.storage.key_from_url(document.url)
            if key is None:
                self.logger.warning(
                    "Skipping document outside storage: %s",
                    document.url,
                    extra={"member_id": member_id, "document": document.name},
                )
                continue
            try:
                await self.storage.delete(key)
            except Exception:
                self.logger.warning(
                    "Failed to delete document %s",
                    document.name,
                    exc_info=True,
                    extra={"member_id": member_id, "document": document.name},
                )

    async def _notify(self, result: ApprovalResult) -> None:
        if not result.email:
            self.logger.warning("No email on file; approval notice not sent", extra={"member_id": result.member_id})
            return
        try:
            await self.send_email(result.email, result.full_name or result.email)
        except Exception:
            self.logger.warning(
                "Failed to send approval email to %s",
                result.email,
                exc_info=True,
                extra={"member_id": result.member_id},
            )


def get_approval_service(
    store: MemberStore = Depends(get_member_store),
    storage: DocumentStorage = Depends(get_document_storage),
    send_email: Mailer = Depends(get_mailer),
) -> ApprovalService:
    return ApprovalService(store, storage, send_email, required_approvals=settings.REQUIRED_APPROVALS)
