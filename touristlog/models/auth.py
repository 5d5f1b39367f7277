# touristlog/models/auth.py
import uuid
from datetime import datetime

from werkzeug.security import generate_password_hash, check_password_hash

from touristlog.extensions import db


class User(db.Model):
    __tablename__ = "user"
    id            = db.Column(db.String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    username      = db.Column(db.String(150), unique=True, index=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at    = db.Column(db.DateTime, nullable=False, default=datetime.now)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash or "", password or "")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "createdAt": self.created_at.isoformat(timespec="milliseconds") if self.created_at else None,
        }

    def __repr__(self):
        return f"<User {self.username}>"
