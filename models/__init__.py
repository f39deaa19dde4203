"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.event import Event
from models.outfit import Outfit
from models.piece import Piece
from models.shelf import Shelf
from models.transaction import Transaction
from models.user import User
from models.user_profile import UserProfile

__all__ = ["Event", "Outfit", "Piece", "Shelf", "Transaction", "User", "UserProfile"]
