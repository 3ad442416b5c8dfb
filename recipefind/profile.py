"""
Profile helpers: the profile page summary and profile picture handling.

Profile pictures are stored on the user record as data URIs
("data:<mime>;base64,<payload>"), the same shape a browser FileReader produces.
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .auth import AuthService
from .catalog import get_recipes_by_ids
from .models import Recipe, User

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpeg", "image/gif", "image/webp"}

# 5 MB, measured on the raw image bytes
MAX_PICTURE_BYTES = 5 * 1024 * 1024


@dataclass
class ProfileSummary:
    """
    Everything the profile page shows for one user.

    favorites and saved hold resolved recipes; ids with no catalog entry are omitted,
    so the counts reflect what can actually be displayed.
    """
    name: str
    email: str
    member_since: str
    has_picture: bool
    favorites: List[Recipe] = field(default_factory=list)
    saved: List[Recipe] = field(default_factory=list)
    search_history: List[str] = field(default_factory=list)

    @property
    def tab_counts(self) -> dict:
        return {
            "favorites": len(self.favorites),
            "saved": len(self.saved),
            "history": len(self.search_history),
        }


def build_profile_summary(user: User) -> ProfileSummary:
    """Resolve a user's collections against the catalog."""
    return ProfileSummary(
        name=user.name,
        email=user.email,
        member_since=user.created_at[:10],
        has_picture=bool(user.profile_picture),
        favorites=get_recipes_by_ids(user.favorite_recipes),
        saved=get_recipes_by_ids(user.saved_recipes),
        search_history=list(user.search_history),
    )


def encode_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> Optional[tuple]:
    """
    Split a base64 data URI into (mime_type, bytes).

    Returns None if uri is not a well-formed base64 data URI.
    """
    if not uri.startswith("data:") or ";base64," not in uri:
        return None
    header, payload = uri[5:].split(";base64,", 1)
    try:
        return header, base64.b64decode(payload, validate=True)
    except ValueError:
        return None


def set_profile_picture(auth: AuthService, data: bytes, mime_type: str) -> Optional[User]:
    """
    Store an uploaded image as the current user's profile picture.

    Returns:
        The updated user, or None if nobody is logged in or the image is rejected
        (unsupported type, empty, or larger than MAX_PICTURE_BYTES)
    """
    mime_type = mime_type.lower()
    if mime_type not in ALLOWED_IMAGE_TYPES:
        logger.debug("Profile picture rejected: unsupported type %s", mime_type)
        return None
    if not data or len(data) > MAX_PICTURE_BYTES:
        logger.debug("Profile picture rejected: size %d bytes", len(data))
        return None
    return auth.update_profile(profile_picture=encode_data_uri(data, mime_type))


def remove_profile_picture(auth: AuthService) -> Optional[User]:
    """Remove the current user's profile picture."""
    return auth.update_profile(profile_picture=None)
