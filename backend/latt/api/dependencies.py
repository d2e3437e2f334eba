"""Request Dependencies: session-derived user identity.

Invariants:
    - The session cookie holds only the integer user id
    - A missing or malformed session raises AuthenticationRequiredError (401)
"""

from typing import Annotated

from fastapi import Depends, Request

from latt.core.domain_types import UserId
from latt.core.errors import AuthenticationRequiredError

SESSION_USER_KEY = "user_id"


def require_user_id(request: Request) -> UserId:
    """Return the logged-in user's id or raise 401."""
    raw = request.session.get(SESSION_USER_KEY)
    if raw is None:
        raise AuthenticationRequiredError()
    try:
        return UserId(int(raw))
    except (TypeError, ValueError):
        request.session.clear()
        raise AuthenticationRequiredError()


CurrentUserId = Annotated[UserId, Depends(require_user_id)]
