"""Game configuration entries: an unpaginated key/value list."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from chicken_admin.core.errors import FormValidationError
from chicken_admin.domain.models import GameConfig
from chicken_admin.integrations.api_result import ApiFailure, ApiResult
from chicken_admin.stores.base import BaseStore, StoreStatus
from chicken_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


def _require(name: str, value: Optional[str]) -> str:
    text = (value or "").strip()
    if not text:
        raise FormValidationError(f"{name} is required", field=name)
    return text


class ConfigStore(BaseStore):
    domain = "config"

    def __init__(self, api: Any):
        super().__init__(api)
        self.configs: List[GameConfig] = []
        self.selected: Optional[GameConfig] = None

    async def fetch_configs(self) -> ApiResult:
        def replace(configs: List[GameConfig]) -> None:
            self.configs = sorted(configs, key=lambda config: config.key)

        return await self._load("fetch_configs", self.api.get_configs, replace)

    async def fetch_config(self, key: str) -> ApiResult:
        def select(config: GameConfig) -> None:
            self.selected = config

        self.selected = None
        return await self._load("fetch_config", lambda: self.api.get_config(key), select)

    async def create_config(self, key: str, value: str) -> ApiResult:
        try:
            key, value = _require("key", key), _require("value", value)
        except FormValidationError as e:
            logger.info("config_create_rejected", field=e.field)
            raise
        return await self._mutate("create_config", lambda: self.api.create_config(key, value))

    async def update_config(self, key: str, value: str) -> ApiResult:
        value = _require("value", value)
        return await self._mutate("update_config", lambda: self.api.update_config(key, value))

    async def delete_config(self, key: str) -> ApiResult:
        return await self._mutate("delete_config", lambda: self.api.delete_config(key))

    async def _mutate(self, action: str, call: Callable[[], Any]) -> ApiResult:
        self.is_loading = True
        self.error = None
        self.status = StoreStatus.LOADING
        self._notify()
        result = await call()
        if isinstance(result, ApiFailure):
            self._fail(result.error, action)
            return result
        logger.info("store_mutation_succeeded", domain=self.domain, action=action)
        await self.fetch_configs()
        return result
