from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.schemas.user import UserOut, UserUpdate, ProfileUpdateOut
from app.schemas.group import ProfileOut, GroupOut
from app.services.user_service import get_all_users, edit_user, set_blocked, delete_user
from app.services.group_services import list_group_for_user, list_groups_created_by
from app.core.dependencies import get_auth_context, require_permission
from app.core.permissions import AuthContext, Permission

router = APIRouter()

@router.get("/profile", response_model=ProfileOut)
async def get_profile(db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    joined = await list_group_for_user(db, ctx.user_id)
    created = await list_groups_created_by(db, ctx.user_id)
    user = UserOut.model_validate(ctx.user)

    return ProfileOut(
        **user.model_dump(),
        joined_groups=[GroupOut.model_validate(g) for g in joined],
        created_groups=[GroupOut.model_validate(g) for g in created],
    )

@router.put("/profile", response_model=ProfileUpdateOut)
async def update_profile(data: UserUpdate, db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    user = await edit_user(db, data, user_id=ctx.user_id)
    return {"message": "Profile updated successfully", "user": user}

@router.get("/", response_model=list[UserOut])
async def get_all(
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(require_permission(Permission.MANAGE_USERS))
):
    return await get_all_users(db)

@router.put("/{user_id}/block", response_model=UserOut)
async def block_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(require_permission(Permission.MANAGE_USERS))
):
    return await set_blocked(db, user_id, True)

@router.put("/{user_id}/unblock", response_model=UserOut)
async def unblock_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(require_permission(Permission.MANAGE_USERS))
):
    return await set_blocked(db, user_id, False)

@router.delete("/{user_id}")
async def remove_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(require_permission(Permission.MANAGE_USERS))
):
    return await delete_user(db, user_id)
