from .user import UserFactory
from .document import DocumentFactory

__all__ = [
    "UserFactory",
    "DocumentFactory",
]
