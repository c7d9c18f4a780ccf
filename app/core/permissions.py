"""Capabilities and the single authorization gate for groups and users.

Every handler resolves an ``AuthContext`` for the caller and asks ``authorize``
whether an action is allowed. Role-wide capabilities (moderation, user
management) come from ``ROLE_PERMISSIONS``; group-scoped ones are decided from
the caller's relationship to the group (creator, member) and the group state.

``authorize`` raises the matching domain error and returns ``None`` on success.
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet

from app.core.exceptions import (
    AlreadyMember,
    CapacityExceeded,
    CreatorCannotLeave,
    GroupNotOpen,
    NotAMember,
    NotFound,
    Unauthorized,
)
from app.models.group import STATUS_APPROVED
from app.models.user import ROLE_ADMIN, ROLE_USER


class Permission(str, Enum):
    VIEW_GROUP = "view_group"
    EDIT_GROUP = "edit_group"
    DELETE_GROUP = "delete_group"
    JOIN_GROUP = "join_group"
    LEAVE_GROUP = "leave_group"
    POST_MESSAGE = "post_message"
    ADD_MATERIAL = "add_material"
    MODERATE_GROUPS = "moderate_groups"
    MANAGE_USERS = "manage_users"


ROLE_PERMISSIONS = {
    ROLE_USER: frozenset(),
    ROLE_ADMIN: frozenset({Permission.MODERATE_GROUPS, Permission.MANAGE_USERS}),
}


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller for one request."""

    user: object
    permissions: FrozenSet[Permission]

    @classmethod
    def for_user(cls, user) -> "AuthContext":
        return cls(user=user, permissions=ROLE_PERMISSIONS.get(user.role, frozenset()))

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def is_admin(self) -> bool:
        return Permission.MODERATE_GROUPS in self.permissions

    def has(self, permission: Permission) -> bool:
        return permission in self.permissions


def is_creator(ctx: AuthContext, group) -> bool:
    return group.creator_id == ctx.user_id


def is_member(ctx: AuthContext, group) -> bool:
    return ctx.user_id in group.member_ids


def is_visible(ctx: AuthContext, group) -> bool:
    return group.status == STATUS_APPROVED or is_creator(ctx, group) or ctx.is_admin


def _check_owner_or_admin(ctx: AuthContext, group, action: str):
    if not (is_creator(ctx, group) or ctx.is_admin):
        raise Unauthorized(f"Only the group creator or an admin can {action} this group")


def _check_join(ctx: AuthContext, group):
    if not is_visible(ctx, group):
        raise NotFound("Group not found")
    if group.status != STATUS_APPROVED:
        raise GroupNotOpen()
    if is_member(ctx, group):
        raise AlreadyMember()
    # check-then-insert; concurrent joins near capacity are not serialized
    if group.member_count >= group.max_members:
        raise CapacityExceeded()


def _check_leave(ctx: AuthContext, group):
    if not is_member(ctx, group):
        raise NotAMember()
    if is_creator(ctx, group):
        raise CreatorCannotLeave()


def authorize(ctx: AuthContext, permission: Permission, group=None):
    if permission in (Permission.MODERATE_GROUPS, Permission.MANAGE_USERS):
        if not ctx.has(permission):
            raise Unauthorized("Admin access required")
        return

    if group is None:
        raise ValueError(f"{permission.value} requires a group")

    if permission == Permission.VIEW_GROUP:
        if not is_visible(ctx, group):
            raise NotFound("Group not found")
    elif permission == Permission.EDIT_GROUP:
        _check_owner_or_admin(ctx, group, "edit")
    elif permission == Permission.DELETE_GROUP:
        _check_owner_or_admin(ctx, group, "delete")
    elif permission == Permission.JOIN_GROUP:
        _check_join(ctx, group)
    elif permission == Permission.LEAVE_GROUP:
        _check_leave(ctx, group)
    elif permission in (Permission.POST_MESSAGE, Permission.ADD_MATERIAL):
        if not is_member(ctx, group):
            raise NotAMember()
    else:
        raise ValueError(f"Unknown permission {permission!r}")

