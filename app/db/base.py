# Import every model so relationship strings resolve and metadata is complete
from app.db.session import Base
from app.models.user import User
from app.models.group import Group
from app.models.group_member import GroupMember
from app.models.message import GroupMessage
from app.models.material import Material

__all__ = ["Base", "User", "Group", "GroupMember", "GroupMessage", "Material"]
