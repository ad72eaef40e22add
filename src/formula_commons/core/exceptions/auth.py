"""Authorization and configuration exceptions for formula-commons."""

from typing import Iterable, Optional

from .base import FormulaCommonsError


class ConfigurationError(FormulaCommonsError):
    """Raised when static configuration is inconsistent."""
    pass


class RoleConfigurationError(ConfigurationError):
    """Raised when a role's permission set disagrees with its flag list."""

    def __init__(self, message: str, problems: Optional[Iterable[str]] = None):
        problems = list(problems or [])
        super().__init__(message, "ROLE_CONFIGURATION_INVALID", {"problems": problems})
        self.problems = problems


class AuthorizationError(FormulaCommonsError):
    """Base exception for authorization faults (never used for denials)."""
    pass


class UnknownPermissionNameError(AuthorizationError):
    """Raised when a legacy permission name has no bitwise equivalent."""

    def __init__(self, name: str):
        super().__init__(
            f"Unknown legacy permission name: {name}",
            "UNKNOWN_PERMISSION_NAME",
            {"name": name},
        )
        self.name = name


class PermissionDeniedError(AuthorizationError):
    """Raised by the HTTP adapters when a decision comes back False."""
    pass
