"""
Role-based access gate.

A single predicate, ``is_authorized``, decides visibility everywhere: API
dependencies, navigation entries and client-side route guards. Denied routes
redirect home; they never surface an error page.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional

logger = logging.getLogger(__name__)

HOME_PATH = "/"


class RoleName(str, enum.Enum):
    SUPER_ADMIN = "Super Admin"
    ADMIN = "Admin"
    USER = "User"


def _names(roles: Optional[Iterable]) -> FrozenSet[str]:
    if not roles:
        return frozenset()
    return frozenset(role.value if isinstance(role, RoleName) else str(role) for role in roles)


def is_authorized(current_roles: Optional[Iterable], required_roles: Optional[Iterable]) -> bool:
    """True when nothing is required or the two role sets intersect."""
    required = _names(required_roles)
    if not required:
        return True
    return not required.isdisjoint(_names(current_roles))


@dataclass(frozen=True)
class NavItem:
    label: str
    path: str
    roles: Optional[FrozenSet[str]] = None


NAV_ITEMS: List[NavItem] = [
    NavItem("Dashboard", "/"),
    NavItem("Invoices", "/invoice-management", frozenset({RoleName.SUPER_ADMIN.value})),
    NavItem("Tenants", "/tenant-management", frozenset({RoleName.SUPER_ADMIN.value})),
    NavItem(
        "Users",
        "/user-management",
        frozenset({RoleName.ADMIN.value, RoleName.SUPER_ADMIN.value}),
    ),
    NavItem("Secrets", "/secrets", frozenset({RoleName.ADMIN.value})),
]

ROUTE_REQUIREMENTS: Dict[str, FrozenSet[str]] = {
    HOME_PATH: frozenset(),
    "/tenant-management": frozenset({RoleName.SUPER_ADMIN.value}),
    "/invoice-management": frozenset({RoleName.SUPER_ADMIN.value}),
    "/user-management": frozenset({RoleName.ADMIN.value, RoleName.SUPER_ADMIN.value}),
    "/secrets": frozenset({RoleName.ADMIN.value}),
}


def filter_nav_items(items: Iterable[NavItem], current_roles: Optional[Iterable]) -> List[NavItem]:
    return [item for item in items if is_authorized(current_roles, item.roles)]


@dataclass(frozen=True)
class RouteDecision:
    allowed: bool
    redirect_to: Optional[str] = None
    # Attempted location, kept for a post-sign-in redirect
    from_location: Optional[str] = None


def guard_route(
    path: str,
    authenticated: bool,
    current_roles: Optional[Iterable],
    required_roles: Optional[Iterable] = None,
) -> RouteDecision:
    """
    Decide whether a client route may render.

    When ``required_roles`` is omitted the requirement is looked up in
    ``ROUTE_REQUIREMENTS``; unknown paths fall back to home like the catch-all
    route does.
    """
    if required_roles is None:
        if path not in ROUTE_REQUIREMENTS:
            return RouteDecision(allowed=False, redirect_to=HOME_PATH)
        required_roles = ROUTE_REQUIREMENTS[path]

    if path == HOME_PATH:
        return RouteDecision(allowed=True)

    if not authenticated:
        logger.debug(f"Redirecting unauthenticated visitor away from {path}")
        return RouteDecision(allowed=False, redirect_to=HOME_PATH, from_location=path)

    if not is_authorized(current_roles, required_roles):
        logger.debug(f"Redirecting user without required roles away from {path}")
        return RouteDecision(allowed=False, redirect_to=HOME_PATH, from_location=path)

    return RouteDecision(allowed=True)
