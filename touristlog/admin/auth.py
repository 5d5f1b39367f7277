# touristlog/admin/auth.py
import hmac

from flask import current_app, session


def passkey_matches(attempt: str | None) -> bool:
    expected = current_app.config.get("ADMIN_PASSKEY") or ""
    if not expected:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), (attempt or "").encode("utf-8"))


def is_admin() -> bool:
    return bool(session.get("is_admin"))


def sign_in() -> None:
    session.clear()
    session["is_admin"] = True
    session["role"] = "admin"


def sign_out() -> None:
    for k in ("is_admin", "role"):
        session.pop(k, None)
