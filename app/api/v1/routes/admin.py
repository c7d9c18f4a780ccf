from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.models.group import STATUS_APPROVED
from app.schemas.admin import ModerationOut, BroadcastCreate, BroadcastOut
from app.schemas.group import GroupOut
from app.schemas.user import UserOut
from app.services.admin_services import approve_group, reject_group, resolve_broadcast_recipients
from app.services.group_services import list_all_groups, list_group_members
from app.services.user_service import get_users_for_notification
from app.services.notification_service import EmailNotifier
from app.core.dependencies import require_permission, get_notifier
from app.core.permissions import AuthContext, Permission

router = APIRouter()

moderator = require_permission(Permission.MODERATE_GROUPS)

@router.get("/groups", response_model=list[GroupOut])
async def all_groups(db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(moderator)):
    return await list_all_groups(db)

@router.get("/approved-groups", response_model=list[GroupOut])
async def approved_groups(db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(moderator)):
    return await list_all_groups(db, status=STATUS_APPROVED)

@router.put("/groups/{group_id}/approve", response_model=ModerationOut)
async def approve(
    group_id: int,
    db: AsyncSession = Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
    ctx: AuthContext = Depends(moderator)
):
    group, notification = await approve_group(db, group_id)
    sent = await notifier.send_group_status(notification)
    return {
        "message": "Group approved successfully",
        "group": group,
        "notification_data": notification,
        "notification_sent": sent,
    }

@router.put("/groups/{group_id}/reject", response_model=ModerationOut)
async def reject(
    group_id: int,
    db: AsyncSession = Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
    ctx: AuthContext = Depends(moderator)
):
    group, notification = await reject_group(db, group_id)
    sent = await notifier.send_group_status(notification)
    return {
        "message": "Group rejected successfully",
        "group": group,
        "notification_data": notification,
        "notification_sent": sent,
    }

@router.get("/groups/{group_id}/users", response_model=list[UserOut])
async def group_users(group_id: int, db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(moderator)):
    return await list_group_members(db, group_id)

@router.get("/users-for-notification", response_model=list[UserOut])
async def users_for_notification(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(require_permission(Permission.MANAGE_USERS))
):
    return await get_users_for_notification(db)

@router.post("/notifications", response_model=BroadcastOut)
async def send_notification(
    data: BroadcastCreate,
    db: AsyncSession = Depends(get_db),
    notifier: EmailNotifier = Depends(get_notifier),
    ctx: AuthContext = Depends(require_permission(Permission.MANAGE_USERS))
):
    users = await resolve_broadcast_recipients(db, data)
    return await notifier.broadcast(users, data.subject, data.message)
