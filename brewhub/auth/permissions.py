"""
Central registry of allowed actions per role.
"""
from .roles import Role, exhaustive

ROLE_SCOPES = exhaustive({
    Role.CUSTOMER: {"place_order", "cancel_own_order", "apply_vendor", "favorite"},
    Role.VENDOR:   {"advance_order", "cancel_order", "update_payment", "manage_menu"},
    Role.ADMIN:    {"*"},
})

def role_has_scope(role, action: str) -> bool:
    scopes = ROLE_SCOPES[Role.parse(role)]
    return "*" in scopes or action in scopes
