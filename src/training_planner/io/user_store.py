"""
JSON-based user storage.

Each user is one JSON document holding preferences and the full plan
history.  The store is the only component that touches the filesystem; the
planning core works on the in-memory User it hands out.
"""

import os
import tempfile
from pathlib import Path

from ..core.config import get_app_dir
from ..core.models import User
from .serializers import ValidationError, json_to_user, user_to_json


class UserStore:
    """
    Manages user documents stored under ``<data_dir>/users/<user_id>.json``.

    ``save_user`` writes to a temporary file and renames it over the target,
    so a document is either fully replaced or left untouched.  No locking is
    done; callers serialize access.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Root directory for user documents
        """
        self.data_dir = Path(data_dir)
        self.users_dir = self.data_dir / "users"

    def user_path(self, user_id: str) -> Path:
        """
        Return the document path for a user.

        Raises:
            ValidationError: If user_id cannot be used as a file name
        """
        if (
            not user_id
            or not user_id.strip()
            or user_id.startswith(".")
            or "/" in user_id
            or "\\" in user_id
        ):
            raise ValidationError(f"Invalid user id: {user_id!r}")
        return self.users_dir / f"{user_id}.json"

    def exists(self, user_id: str) -> bool:
        """Check if a document exists for the user."""
        return self.user_path(user_id).exists()

    def load_user(self, user_id: str) -> User | None:
        """
        Load a user.

        Returns:
            User, or None if no document exists

        Raises:
            ValidationError: If the document is corrupt
        """
        path = self.user_path(user_id)
        if not path.exists():
            return None

        try:
            return json_to_user(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise ValidationError(f"Error parsing {path}: {e}") from e

    def save_user(self, user: User) -> None:
        """
        Atomically write the user's document.

        Args:
            user: User to persist
        """
        path = self.user_path(user.user_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(user_to_json(user))
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def list_users(self) -> list[str]:
        """Return the ids of all stored users, sorted."""
        if not self.users_dir.is_dir():
            return []
        return sorted(p.stem for p in self.users_dir.glob("*.json") if not p.name.startswith("."))


def get_default_data_dir() -> Path:
    """
    Get the default data directory.

    Returns:
        ``~/.training-planner``
    """
    return get_app_dir()


def get_default_store() -> UserStore:
    """
    Get a UserStore at the default location.

    Returns:
        UserStore instance
    """
    return UserStore(get_default_data_dir())
