import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, update
from app.models.user import User, ROLE_ADMIN, ROLE_USER
from app.models.group import Group
from app.models.group_member import GroupMember
from app.models.message import GroupMessage
from app.models.material import Material
from app.schemas.user import UserCreate
from app.core.security import hash_password
from app.core.exceptions import Conflict, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

async def get_user_by_email(db: AsyncSession, email:str):
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()

async def get_user_by_id(db: AsyncSession, id:int):
    result = await db.execute(select(User).where(User.id == id))
    return result.scalar_one_or_none()

async def get_user_or_404(db: AsyncSession, user_id: int):
    user = await get_user_by_id(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user

async def get_all_users(db: AsyncSession):
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return result.scalars().all()

async def get_users_for_notification(db: AsyncSession):
    q = (
        select(User)
        .where(User.role != ROLE_ADMIN, User.is_blocked.is_(False))
        .order_by(User.name)
    )
    result = await db.execute(q)
    return result.scalars().all()

async def get_users_by_ids(db: AsyncSession, user_ids):
    if not user_ids:
        return []
    result = await db.execute(select(User).where(User.id.in_(list(user_ids))))
    return result.scalars().all()

async def create_user(db: AsyncSession, data: UserCreate, role: str = ROLE_USER):
    if not data.terms_accepted:
        raise ValidationFailed("You must accept the terms and conditions")

    existing = await get_user_by_email(db, data.email)
    if existing:
        raise Conflict("User already exists with this email")

    user = User(
        email = data.email.strip().lower(),
        name = data.name,
        contact_number = data.contact_number,
        password_hash = hash_password(data.password),
        role = role,
    )

    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, role)
    return user

async def edit_user(db : AsyncSession, data ,user_id: int):
    user = await get_user_or_404(db, user_id)

    if data.name:
        user.name = data.name.strip()

    if data.contact_number:
        user.contact_number = data.contact_number.strip()

    await db.commit()
    await db.refresh(user)

    return user

async def set_refresh_token(db: AsyncSession, user: User, token):
    user.refresh_token = token
    await db.commit()

async def _get_target_user(db: AsyncSession, user_id: int):
    user = await get_user_or_404(db, user_id)
    if user.role == ROLE_ADMIN:
        raise ValidationFailed("Admin accounts cannot be modified here")
    return user

async def set_blocked(db: AsyncSession, user_id: int, blocked: bool):
    user = await _get_target_user(db, user_id)
    user.is_blocked = blocked
    if blocked:
        # revoke the session so the refresh cookie stops working
        user.refresh_token = None
    await db.commit()
    await db.refresh(user)
    logger.info("User %s %s", user_id, "blocked" if blocked else "unblocked")
    return user

async def delete_user(db: AsyncSession, user_id: int):
    user = await _get_target_user(db, user_id)

    res = await db.execute(select(Group).where(Group.creator_id == user_id))
    created = res.scalars().all()
    for group in created:
        await db.delete(group)

    await db.execute(delete(GroupMember).where(GroupMember.user_id == user_id))
    await db.execute(
        update(GroupMessage).where(GroupMessage.user_id == user_id).values(user_id=None)
    )
    await db.execute(
        update(Material).where(Material.uploaded_by == user_id).values(uploaded_by=None)
    )

    await db.delete(user)
    await db.commit()

    logger.info("Deleted user %s and %d created group(s)", user_id, len(created))
    return {"message": "User deleted successfully", "deleted_groups": len(created)}

async def ensure_admin(db: AsyncSession, name: str, email: str, password: str):
    user = await get_user_by_email(db, email)
    if user:
        if user.role != ROLE_ADMIN:
            logger.warning("Configured admin email %s belongs to a non-admin account", email)
        return user

    user = User(
        name=name,
        email=email.strip().lower(),
        password_hash=hash_password(password),
        role=ROLE_ADMIN,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Created admin account %s", user.email)
    return user
