"""Route classification and the redirect policy applied to every request.

``decide`` is a pure function of the path, the authentication state and a
lazily evaluated profile check; the web layer only turns its result into a
response.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"
SETUP_PROFILE_PATH = "/setup-profile"
ROOT_PATH = "/"

AUTH_ROUTES = (LOGIN_PATH,)
PROTECTED_PREFIXES = (
    "/dashboard",
    "/athletes",
    "/notes",
    "/recommendations",
    "/my-recommendations",
    "/profile",
    SETUP_PROFILE_PATH,
)


class RouteKind(str, Enum):
    root = "root"
    auth_only = "auth_only"
    protected = "protected"
    public = "public"


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Redirect:
    target: str


Decision = Union[Allow, Redirect]


def is_auth_route(path: str) -> bool:
    return path in AUTH_ROUTES


def is_protected(path: str) -> bool:
    return any(path.startswith(prefix) for prefix in PROTECTED_PREFIXES)


def classify_route(path: str) -> RouteKind:
    if path == ROOT_PATH:
        return RouteKind.root
    if is_auth_route(path):
        return RouteKind.auth_only
    if is_protected(path):
        return RouteKind.protected
    return RouteKind.public


def decide(path: str, authenticated: bool, profile_exists: Callable[[], bool]) -> Decision:
    """Return where a request for ``path`` should go.

    Rules are evaluated in order: auth-only routes, protected routes without a
    session, missing profile, then the root path. ``profile_exists`` is only
    called for an authenticated request to a protected route other than the
    profile setup page.
    """
    if authenticated and is_auth_route(path):
        return Redirect(DASHBOARD_PATH)

    if not authenticated and is_protected(path):
        return Redirect(LOGIN_PATH)

    if authenticated and path != SETUP_PROFILE_PATH and is_protected(path):
        if not profile_exists():
            return Redirect(SETUP_PROFILE_PATH)

    if path == ROOT_PATH:
        return Redirect(DASHBOARD_PATH if authenticated else LOGIN_PATH)

    return Allow()
