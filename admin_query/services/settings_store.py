from __future__ import annotations

import json
import logging
from threading import Lock
from typing import Any, Protocol

import redis

from admin_query.core.config import settings
from admin_query.schemas.settings import UiSettings

_LOG = logging.getLogger("admin_query.settings_store")


class SettingsStorage(Protocol):
    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    def __init__(self):
        self._data: dict[str, str] = {}
        self._lock = Lock()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class RedisStorage:
    def __init__(self, client: redis.Redis):
        self.client = client

    def get_item(self, key: str) -> str | None:
        value = self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set_item(self, key: str, value: str) -> None:
        self.client.set(key, value)

    def remove_item(self, key: str) -> None:
        self.client.delete(key)


def build_storage(redis_url: str | None = None) -> SettingsStorage:
    url = str(redis_url if redis_url is not None else settings.REDIS_URL or "").strip()
    if not url:
        return MemoryStorage()
    try:
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=0.4,
            socket_connect_timeout=0.4,
        )
        client.ping()
        return RedisStorage(client)
    except (redis.RedisError, ValueError):
        _LOG.warning("Redis settings storage unavailable; fallback to in-memory storage")
        return MemoryStorage()


DEFAULT_UI_SETTINGS = UiSettings()


class SettingsStore:
    def __init__(self, storage: SettingsStorage, key: str | None = None):
        self.storage = storage
        self.key = key or settings.SETTINGS_STORAGE_KEY

    def restore(self) -> UiSettings | None:
        raw = self.storage.get_item(self.key)
        if not raw:
            return None
        try:
            return UiSettings.model_validate(json.loads(raw))
        except ValueError:
            _LOG.warning("Stored UI settings are unreadable key=%s", self.key)
            return None

    def save(self, ui_settings: UiSettings) -> None:
        self.storage.set_item(self.key, ui_settings.model_dump_json(by_alias=True))

    def reset(self) -> None:
        self.storage.remove_item(self.key)

    def update(self, **changes: Any) -> UiSettings:
        current = self.restore() or DEFAULT_UI_SETTINGS
        merged = UiSettings.model_validate({**current.model_dump(), **changes})
        self.save(merged)
        return merged

    def is_custom(self, ui_settings: UiSettings) -> bool:
        return ui_settings != DEFAULT_UI_SETTINGS
