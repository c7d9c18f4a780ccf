import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import or_
from app.models.group import Group, STATUS_APPROVED, STATUS_PENDING
from app.models.group_member import GroupMember
from app.models.message import GroupMessage
from app.models.material import Material
from app.core.config import settings
from app.core.exceptions import NotFound, ValidationFailed
from app.core.permissions import AuthContext, Permission, authorize

logger = logging.getLogger(__name__)

async def get_group(db: AsyncSession, group_id: int):
    q = (
        select(Group)
        .where(Group.id == group_id)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return res.scalar_one_or_none()

async def get_group_or_404(db: AsyncSession, group_id: int):
    group = await get_group(db, group_id)
    if not group:
        raise NotFound("Group not found")
    return group

async def create_group(db: AsyncSession, data, creator_id: int):
    group = Group(
        title=data.title,
        subject=data.subject,
        description=data.description,
        image=data.image or settings.DEFAULT_GROUP_IMAGE,
        max_members=data.max_members,
        creator_id=creator_id,
        status=STATUS_PENDING,
    )
    db.add(group)
    await db.flush()

    member = GroupMember(group_id=group.id, user_id=creator_id)
    db.add(member)

    await db.commit()
    logger.info("User %s created group %s", creator_id, group.id)
    return await get_group(db, group.id)

async def list_approved_groups(db: AsyncSession, search: str | None = None, subject: str | None = None):
    q = select(Group).where(Group.status == STATUS_APPROVED)

    if subject:
        q = q.where(Group.subject.ilike(subject.strip()))

    if search:
        pattern = f"%{search.strip()}%"
        q = q.where(or_(
            Group.title.ilike(pattern),
            Group.subject.ilike(pattern),
            Group.description.ilike(pattern),
        ))

    res = await db.execute(q.order_by(Group.created_at.desc(), Group.id.desc()))
    return res.scalars().all()

async def list_all_groups(db: AsyncSession, status: str | None = None):
    q = select(Group)
    if status:
        q = q.where(Group.status == status)
    res = await db.execute(q.order_by(Group.created_at.desc(), Group.id.desc()))
    return res.scalars().all()

async def list_group_for_user(db: AsyncSession, user_id: int):
    q = (
        select(Group)
        .join(GroupMember)
        .where(GroupMember.user_id == user_id)
        .order_by(GroupMember.joined_at.desc(), Group.id.desc())
    )
    result = await db.execute(q)
    return result.scalars().all()

async def list_groups_created_by(db: AsyncSession, user_id: int):
    q = (
        select(Group)
        .where(Group.creator_id == user_id)
        .order_by(Group.created_at.desc(), Group.id.desc())
    )
    result = await db.execute(q)
    return result.scalars().all()

async def view_group(db: AsyncSession, ctx: AuthContext, group_id: int):
    group = await get_group_or_404(db, group_id)
    authorize(ctx, Permission.VIEW_GROUP, group)
    return group

async def edit_group(db: AsyncSession, ctx: AuthContext, group_id: int, data):
    group = await get_group_or_404(db, group_id)
    authorize(ctx, Permission.EDIT_GROUP, group)

    changes = data.model_dump(exclude_unset=True)

    if changes.get("max_members") is not None and changes["max_members"] < group.member_count:
        raise ValidationFailed(
            f"Max members cannot be less than the current member count ({group.member_count})"
        )

    for field in ("title", "subject", "description", "max_members"):
        value = changes.get(field)
        if value is not None:
            setattr(group, field, value.strip() if isinstance(value, str) else value)

    if "image" in changes:
        group.image = changes["image"] or settings.DEFAULT_GROUP_IMAGE

    await db.commit()
    return await get_group(db, group_id)

async def delete_group(db: AsyncSession, ctx: AuthContext, group_id: int):
    group = await get_group_or_404(db, group_id)
    authorize(ctx, Permission.DELETE_GROUP, group)

    await db.delete(group)
    await db.commit()

    logger.info("Group %s deleted by user %s", group_id, ctx.user_id)
    return {"message": "Group deleted successfully"}

async def join_group(db: AsyncSession, ctx: AuthContext, group_id: int):
    group = await get_group_or_404(db, group_id)
    authorize(ctx, Permission.JOIN_GROUP, group)

    db.add(GroupMember(group_id=group_id, user_id=ctx.user_id))
    await db.commit()
    return await get_group(db, group_id)

async def leave_group(db: AsyncSession, ctx: AuthContext, group_id: int):
    group = await get_group_or_404(db, group_id)
    authorize(ctx, Permission.LEAVE_GROUP, group)

    membership = next(m for m in group.memberships if m.user_id == ctx.user_id)
    group.memberships.remove(membership)
    await db.commit()
    return await get_group(db, group_id)

async def post_message(db: AsyncSession, ctx: AuthContext, group_id: int, content: str):
    group = await get_group_or_404(db, group_id)
    authorize(ctx, Permission.POST_MESSAGE, group)

    db.add(GroupMessage(group_id=group_id, user_id=ctx.user_id, content=content))
    await db.commit()
    return await get_group(db, group_id)

async def add_material(db: AsyncSession, ctx: AuthContext, group_id: int, title: str, url: str):
    group = await get_group_or_404(db, group_id)
    authorize(ctx, Permission.ADD_MATERIAL, group)

    db.add(Material(group_id=group_id, title=title, url=url, uploaded_by=ctx.user_id))
    await db.commit()
    return await get_group(db, group_id)

async def list_group_members(db: AsyncSession, group_id: int):
    group = await get_group_or_404(db, group_id)
    return group.members
