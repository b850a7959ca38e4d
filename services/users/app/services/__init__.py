from .user_service import ServiceError, UserHasOrdersError, UserNotFoundError, UserService

__all__ = ["ServiceError", "UserHasOrdersError", "UserNotFoundError", "UserService"]
