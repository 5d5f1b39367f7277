# touristlog/models/__init__.py
from .auth import User
from .visitor import Visitor, ControlCounter, GENDERS, PURPOSES

__all__ = ["User", "Visitor", "ControlCounter", "GENDERS", "PURPOSES"]
