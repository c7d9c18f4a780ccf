import logging
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.group import STATUS_APPROVED, STATUS_REJECTED
from app.schemas.admin import GroupNotification
from app.services.group_services import get_group, get_group_or_404, list_group_members
from app.services.user_service import get_users_for_notification, get_users_by_ids
from app.core.exceptions import ValidationFailed

logger = logging.getLogger(__name__)

def build_notification(group) -> GroupNotification:
    return GroupNotification(
        user_email=group.creator.email,
        user_name=group.creator.name,
        group_title=group.title,
        group_subject=group.subject or "",
        group_description=group.description or "",
        status=group.status,
    )

async def set_group_status(db: AsyncSession, group_id: int, status: str):
    if status not in (STATUS_APPROVED, STATUS_REJECTED):
        raise ValidationFailed(f"Unsupported status '{status}'")

    group = await get_group_or_404(db, group_id)
    previous = group.status

    # a decided group may be decided again; the new status simply overwrites the old one
    group.status = status
    await db.commit()

    logger.info("Group %s moved %s -> %s", group_id, previous, status)
    group = await get_group(db, group_id)
    return group, build_notification(group)

async def approve_group(db: AsyncSession, group_id: int):
    return await set_group_status(db, group_id, STATUS_APPROVED)

async def reject_group(db: AsyncSession, group_id: int):
    return await set_group_status(db, group_id, STATUS_REJECTED)

async def resolve_broadcast_recipients(db: AsyncSession, data):
    eligible = await get_users_for_notification(db)

    if data.recipient_type == "all":
        return eligible

    eligible_ids = {u.id for u in eligible}

    if data.recipient_type == "group":
        members = await list_group_members(db, data.group_id)
        return [u for u in members if u.id in eligible_ids]

    users = await get_users_by_ids(db, data.user_ids)
    return [u for u in users if u.id in eligible_ids]
