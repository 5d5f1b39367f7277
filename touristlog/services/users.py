# touristlog/services/users.py
from flask import current_app
from sqlalchemy.exc import IntegrityError

from touristlog.extensions import db
from touristlog.models.auth import User


class DuplicateUsername(ValueError):
    pass


def get_user_by_username(username: str) -> User | None:
    username = (username or "").strip()
    if not username:
        return None
    return User.query.filter_by(username=username).first()


def create_user(username: str, password: str) -> User:
    username = (username or "").strip()
    if get_user_by_username(username):
        raise DuplicateUsername(f"Username already exists: {username}")

    user = User(username=username)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateUsername(f"Username already exists: {username}") from None

    current_app.logger.info("user created id=%s username=%s", user.id, username)
    return user
