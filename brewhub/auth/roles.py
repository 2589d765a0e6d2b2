from enum import Enum
from typing import Callable, Dict, Mapping, TypeVar

T = TypeVar("T")


class UnknownRole(ValueError):
    pass


class Role(str, Enum):
    ADMIN = "admin"
    VENDOR = "vendor"
    CUSTOMER = "customer"

    @classmethod
    def parse(cls, value) -> "Role":
        """Return the Role for a stored value, refusing anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownRole(f"Unknown role: {value!r}") from None


def exhaustive(handlers: Mapping[Role, T]) -> Dict[Role, T]:
    """Validate that a role dispatch table covers every Role.

    Called at import time so a new role cannot be added without every
    dispatch site being updated.
    """
    missing = set(Role) - set(handlers)
    if missing:
        names = ", ".join(sorted(r.value for r in missing))
        raise ValueError(f"role dispatch table is missing: {names}")
    return dict(handlers)


def dispatch(handlers: Mapping[Role, Callable[..., T]], role, *args, **kwargs) -> T:
    return handlers[Role.parse(role)](*args, **kwargs)
