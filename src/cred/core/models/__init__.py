from .auth import AuthUser, DeleteUsersSummary, ListUsersResult

__all__ = ["AuthUser", "DeleteUsersSummary", "ListUsersResult"]
