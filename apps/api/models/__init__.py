"""Models package."""

from .user import User
from .link import Link
from .collection import Collection
from .saved_link import SavedLink
from .tag_color import TagColor
