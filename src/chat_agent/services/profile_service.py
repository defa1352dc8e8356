from __future__ import annotations

import secrets
import string
from typing import Any

from chat_shared.redis_manager import RedisManager

PROFILE_CATEGORIES = ("information", "note", "preference")
ENTRY_ID_LENGTH = 5
_ID_ALPHABET = string.ascii_lowercase + string.digits


class ProfileService:
    """
    Per-user profile persistence.

    A user has a free-text profile (injected into the conversation by the profile
    decorator) and a list of categorised entries (managed by the profile tools).
    """

    def __init__(self, redis_manager: RedisManager) -> None:
        self.redis_manager = redis_manager

    def get_profile(self, user_key: str) -> str:
        """Return the stored profile text, or an empty string if there is none."""
        return self.redis_manager.get_text(self.redis_manager.get_profile_key(user_key)) or ""

    def set_profile(self, user_key: str, profile: str) -> None:
        self.redis_manager.set_text(self.redis_manager.get_profile_key(user_key), profile)

    def get_entries(self, user_key: str) -> list[dict[str, Any]]:
        record = self.redis_manager.get_json(self.redis_manager.get_profile_entries_key(user_key))
        if not record:
            return []
        return list(record.get("entries", []))

    def append_entry(self, user_key: str, category: str, content: str) -> dict[str, Any]:
        """
        Add an entry to the profile of `user_key`.

        Args:
            user_key (str): Profile owner.
            category (str): One of PROFILE_CATEGORIES.
            content (str): Entry text.

        Returns:
            dict[str, Any]: The stored entry, including its generated id.

        Raises:
            ValueError: If the category is unknown or the content is empty.
        """
        if category not in PROFILE_CATEGORIES:
            raise ValueError(f"Unknown profile category: {category}")
        if not content:
            raise ValueError("Profile entry content is empty")

        entries = self.get_entries(user_key)
        existing = {entry["id"] for entry in entries}
        entry_id = _new_entry_id()
        while entry_id in existing:
            entry_id = _new_entry_id()

        entry = {"id": entry_id, "category": category, "content": content}
        entries.append(entry)
        self._save_entries(user_key, entries)
        return entry

    def update_entry(
        self, user_key: str, entry_id: str, content: str, category: str | None = None
    ) -> dict[str, Any] | None:
        """
        Replace the content (and optionally the category) of an entry.

        Returns:
            dict[str, Any] | None: The updated entry, or None if `entry_id` is unknown.

        Raises:
            ValueError: If the new category is unknown or the content is empty.
        """
        if category is not None and category not in PROFILE_CATEGORIES:
            raise ValueError(f"Unknown profile category: {category}")
        if not content:
            raise ValueError("Profile entry content is empty")

        entries = self.get_entries(user_key)
        for entry in entries:
            if entry["id"] == entry_id:
                entry["content"] = content
                if category is not None:
                    entry["category"] = category
                self._save_entries(user_key, entries)
                return entry
        return None

    def _save_entries(self, user_key: str, entries: list[dict[str, Any]]) -> None:
        self.redis_manager.set_json(
            self.redis_manager.get_profile_entries_key(user_key), {"entries": entries}
        )


def _new_entry_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(ENTRY_ID_LENGTH))
