# touristlog/models/visitor.py
import uuid
from datetime import datetime

from touristlog.extensions import db

GENDERS = ("male", "female", "prefer_not_to_say")

PURPOSES = {
    "sightseeing": "Sightseeing / Tour",
    "ocular": "Ocular inspection",
    "business": "Business / Meeting",
    "event": "Event / Function",
    "official": "Official visit",
    "other": "Other",
}


def _new_id() -> str:
    return uuid.uuid4().hex


class Visitor(db.Model):
    __tablename__ = "visitor"

    id             = db.Column(db.String(32), primary_key=True, default=_new_id)
    control_number = db.Column(db.String(32), unique=True, nullable=False, index=True)
    name           = db.Column(db.String(200), nullable=False)
    gender         = db.Column(db.String(32), nullable=True)
    phone          = db.Column(db.String(40), nullable=True)
    email          = db.Column(db.String(320), nullable=True)
    purpose        = db.Column(db.String(40), nullable=False)
    purpose_other  = db.Column(db.String(255), nullable=True)
    # local wall-clock time; never touched after insert
    created_at     = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)

    # fields an admin may change after registration
    EDITABLE = ("name", "gender", "phone", "email", "purpose", "purpose_other")

    @property
    def purpose_label(self) -> str:
        if self.purpose == "other" and self.purpose_other:
            return f"Other: {self.purpose_other}"
        return PURPOSES.get(self.purpose, (self.purpose or "").replace("_", " ").title())

    @property
    def contact(self) -> str:
        return self.phone or self.email or "N/A"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "controlNumber": self.control_number,
            "name": self.name,
            "gender": self.gender,
            "phone": self.phone,
            "email": self.email,
            "purpose": self.purpose,
            "purposeOther": self.purpose_other,
            "createdAt": self.created_at.isoformat(timespec="milliseconds") if self.created_at else None,
        }

    def __repr__(self):
        return f"<Visitor {self.control_number} {self.name!r}>"


class ControlCounter(db.Model):
    """Last issued control-number sequence, one row per year."""
    __tablename__ = "control_counter"

    year          = db.Column(db.Integer, primary_key=True, autoincrement=False)
    last_sequence = db.Column(db.Integer, nullable=False, default=0)
    updated_at    = db.Column(db.DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def __repr__(self):
        return f"<ControlCounter {self.year}: {self.last_sequence}>"
