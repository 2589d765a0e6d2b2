from .roles import Role, UnknownRole, exhaustive, dispatch
from .permissions import ROLE_SCOPES, role_has_scope

__all__ = ["Role", "UnknownRole", "exhaustive", "dispatch", "ROLE_SCOPES", "role_has_scope"]
