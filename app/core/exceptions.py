"""
Domain exceptions raised by services and authentication adapters.

Routes never build HTTP errors for these themselves; app.main maps every
AppException to a JSON response using its status_code.
"""

from typing import Iterable, List, Optional


class AppException(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundException(AppException):
    status_code = 404

    def __init__(self, entity: str, identifier: str):
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier


class UserNotFoundException(NotFoundException):
    def __init__(self, identifier: str):
        super().__init__("User", identifier)


class _MissingIdsException(NotFoundException):
    entity_name = ""

    def __init__(self, ids: Iterable[str]):
        self.ids: List[str] = list(ids)
        super().__init__(self.entity_name, ",".join(self.ids))


class GroupNotFoundException(_MissingIdsException):
    entity_name = "Group"


class PermissionNotFoundException(_MissingIdsException):
    entity_name = "Permission"


class GroupInUseException(AppException):
    status_code = 409

    def __init__(self, group_id: str, member_count: int):
        super().__init__(
            f"Group {group_id} cannot be deleted while it has {member_count} member(s)"
        )
        self.group_id = group_id
        self.member_count = member_count


class AuthenticationException(AppException):
    status_code = 401


class InvalidCredentialsException(AuthenticationException):
    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "Invalid credentials")


class UserExistsException(AppException):
    status_code = 409

    def __init__(self, identifier: str):
        super().__init__(f"User already exists: {identifier}")
        self.identifier = identifier


class PermissionExistsException(AppException):
    status_code = 409

    def __init__(self, name: str):
        super().__init__(f"Permission already exists: {name}")
        self.name = name


class StoreException(AppException):
    status_code = 500
