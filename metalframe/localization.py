"""
Localized text helpers shared by the API and the sync client.
"""
import json
from typing import Any, Dict, Optional, Union

SUPPORTED_LANGUAGES = ("en", "uk")
DEFAULT_LANGUAGE = "en"

# Admin panel status texts, keyed like the site's locale files.
MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "admin.table.created": "Post created.",
        "admin.table.updated": "Post updated.",
        "admin.table.localCreated": "Post created (local).",
        "admin.table.localUpdated": "Post updated (local).",
        "admin.table.deleted": "Post deleted.",
        "admin.table.deleteFail": "Failed to delete.",
        "admin.table.submitFail": "Failed to submit. Ensure the server is running.",
        "admin.table.requestFail": "Request failed",
        "admin.table.notFoundLocal": "Post not found locally",
        "admin.table.needImage": "Please choose an image",
        "admin.table.needTitle": "Please enter a title",
        "admin.table.needDesc": "Please enter a description",
        "admin.table.imported": "Posts imported.",
    },
    "uk": {
        "admin.table.created": "Пост створено.",
        "admin.table.updated": "Пост оновлено.",
        "admin.table.localCreated": "Пост створено (локально).",
        "admin.table.localUpdated": "Пост оновлено (локально).",
        "admin.table.deleted": "Пост видалено.",
        "admin.table.deleteFail": "Не вдалося видалити.",
        "admin.table.submitFail": "Не вдалося надіслати. Переконайтеся, що сервер запущено.",
        "admin.table.requestFail": "Запит не вдався",
        "admin.table.notFoundLocal": "Пост не знайдено локально",
        "admin.table.needImage": "Виберіть зображення",
        "admin.table.needTitle": "Вкажіть заголовок",
        "admin.table.needDesc": "Вкажіть опис",
        "admin.table.imported": "Пости імпортовано.",
    },
}


def resolve_localized(value: Union[str, Dict[str, Optional[str]], None], lang: str = DEFAULT_LANGUAGE) -> str:
    """Pick the text for ``lang`` from a localized value.

    Plain strings are returned as-is. Mappings fall back from the requested
    language to English, then Ukrainian, then an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.get(lang) or value.get("en") or value.get("uk") or ""


def display_title(value: Any) -> str:
    """Title used in server log lines."""
    if isinstance(value, dict):
        return value.get("en") or value.get("uk") or "Untitled"
    return value or "Untitled"


def parse_localized_field(value: Optional[str]) -> Any:
    """Decode a form field that may carry a JSON-encoded language mapping."""
    if isinstance(value, str) and value.strip().startswith("{"):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def translate(key: str, lang: str = DEFAULT_LANGUAGE) -> str:
    table = MESSAGES.get(lang) or MESSAGES[DEFAULT_LANGUAGE]
    return table.get(key) or MESSAGES[DEFAULT_LANGUAGE].get(key, key)
