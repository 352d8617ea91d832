# tests/helpers.py

from __future__ import annotations

import time

from jose import jwt

from todo_app.middleware.auth import AUTH_ALGORITHM, AUTH_SECRET

ALICE = "alice@example.com"
BOB = "bob@example.com"


def make_token(secret: str = AUTH_SECRET, **claims) -> str:
    """Mint a bearer token the way the identity provider would."""
    claims.setdefault("exp", int(time.time()) + 3600)
    return jwt.encode(claims, secret, algorithm=AUTH_ALGORITHM)
