from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.services.group_services import (
    create_group,
    list_approved_groups,
    view_group,
    edit_group,
    delete_group,
    join_group,
    leave_group,
    post_message,
    add_material,
)
from app.schemas.group import GroupCreate, GroupUpdate, GroupOut, GroupDetailOut, MessageCreate, MaterialCreate
from app.core.dependencies import get_auth_context
from app.core.permissions import AuthContext

router = APIRouter()

@router.get("/", response_model=list[GroupOut], description="list approved groups")
async def list_groups(
    search: str | None = None,
    subject: str | None = None,
    db: AsyncSession = Depends(get_db)
):
    return await list_approved_groups(db, search=search, subject=subject)

@router.post("/", response_model=GroupDetailOut, status_code=201, description="create new group")
async def create_new_group(
    data:GroupCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context)
):
    return await create_group(db, data, ctx.user_id)

@router.get("/{group_id}", response_model=GroupDetailOut)
async def get_group_detail(group_id: int, db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    return await view_group(db, ctx, group_id)

@router.put("/{group_id}", response_model=GroupDetailOut)
async def edit(group_id: int, data: GroupUpdate, db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    return await edit_group(db, ctx, group_id, data)

@router.delete("/{group_id}")
async def del_group(group_id: int, db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    return await delete_group(db, ctx, group_id)

@router.post("/{group_id}/join", response_model=GroupDetailOut)
async def join(group_id: int, db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    return await join_group(db, ctx, group_id)

@router.post("/{group_id}/leave", response_model=GroupDetailOut)
async def leave(group_id: int, db: AsyncSession = Depends(get_db), ctx: AuthContext = Depends(get_auth_context)):
    return await leave_group(db, ctx, group_id)

@router.post("/{group_id}/messages", response_model=GroupDetailOut, status_code=201)
async def send_message(
    group_id: int,
    data: MessageCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context)
):
    return await post_message(db, ctx, group_id, data.content)

@router.post("/{group_id}/materials", response_model=GroupDetailOut, status_code=201)
async def share_material(
    group_id: int,
    data: MaterialCreate,
    db: AsyncSession = Depends(get_db),
    ctx: AuthContext = Depends(get_auth_context)
):
    return await add_material(db, ctx, group_id, data.title, data.url)
