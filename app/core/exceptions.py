from fastapi import HTTPException

class ValidationFailed(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=400, detail=detail)

class Conflict(HTTPException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=400, detail=detail)

class NotAuthenticated(HTTPException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(status_code=401, detail=detail)

class Unauthorized(HTTPException):
    """Caller is authenticated but lacks the role or ownership for the action."""

    def __init__(self, detail: str = "Not authorized to perform this action"):
        super().__init__(status_code=403, detail=detail)

class AccountBlocked(HTTPException):
    def __init__(self, detail: str = "Your account has been blocked. Please contact the administrator."):
        super().__init__(status_code=403, detail=detail)

class NotFound(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=404, detail=detail)

# membership state errors

class CapacityExceeded(HTTPException):
    def __init__(self, detail: str = "Group is full"):
        super().__init__(status_code=400, detail=detail)

class AlreadyMember(HTTPException):
    def __init__(self, detail: str = "You are already a member of this group"):
        super().__init__(status_code=400, detail=detail)

class NotAMember(HTTPException):
    def __init__(self, detail: str = "You are not a member of this group"):
        super().__init__(status_code=403, detail=detail)

class CreatorCannotLeave(HTTPException):
    def __init__(self, detail: str = "Group creator cannot leave the group"):
        super().__init__(status_code=400, detail=detail)

class GroupNotOpen(HTTPException):
    def __init__(self, detail: str = "Group is not open for joining"):
        super().__init__(status_code=400, detail=detail)
