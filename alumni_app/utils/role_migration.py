"""Copy admin roles from the legacy ``user_roles`` collection onto accounts.

Run once per environment with ``python -m alumni_app.utils.role_migration``;
afterwards ``users.role`` alone decides who is an admin.
"""

import argparse
import asyncio
import logging

from alumni_app.database import FirestoreMemberStore, MemberStore
from alumni_app.models.account import Role
from alumni_app.services.firebase_service import get_firestore_client
from alumni_app.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)


async def migrate_legacy_roles(store: MemberStore, dry_run: bool = False) -> list[str]:
    promoted: list[str] = []
    for assignment in await store.list_role_assignments():
        if assignment.role != Role.admin or assignment.user_id in promoted:
            continue
        account = await store.get_account(assignment.user_id)
        if account is None:
            logger.warning("Legacy admin role for unknown account %s", assignment.user_id)
            continue
        if account.role == Role.admin:
            continue
        if not dry_run:
            await store.set_role(account.id, Role.admin, utc_now_iso())
        promoted.append(account.id)
        logger.info("Promoted %s to admin from legacy role%s", account.id, " (dry run)" if dry_run else "")
    return promoted


async def _run(dry_run: bool) -> list[str]:
    store = FirestoreMemberStore(get_firestore_client())
    return await migrate_legacy_roles(store, dry_run=dry_run)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--dry-run", action="store_true", help="report accounts without writing")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    promoted = asyncio.run(_run(args.dry_run))
    logger.info("Role migration finished: %s account(s) promoted", len(promoted))


if __name__ == "__main__":
    main()
