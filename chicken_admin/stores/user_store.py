"""Users list (no totals) and user create/edit/delete keyed by (userId, agentId)."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from chicken_admin.core.config import Config
from chicken_admin.core.errors import FormValidationError
from chicken_admin.domain.filters import UserFilters
from chicken_admin.domain.models import User
from chicken_admin.integrations.api_result import ApiResult
from chicken_admin.services.paginated_fetcher import DomainEndpoints, PaginatedFetcher
from chicken_admin.stores.base import DomainStore
from chicken_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

REQUIRED_USER_FIELDS = ("userId", "agentId", "currency", "betLimit")
EDITABLE_USER_FIELDS = ("username", "currency", "betLimit", "language", "avatar")


def build_user_payload(data: Mapping[str, Any], *, creating: bool) -> Dict[str, Any]:
    """
    Build a user create/update body.

    Raises:
        FormValidationError: When a required create field is blank or the bet
            limit is not a positive number.
    """
    cleaned = {
        key: (value.strip() if isinstance(value, str) else value)
        for key, value in data.items()
        if value is not None
    }
    if creating:
        cleaned.setdefault("currency", Config.DEFAULT_CURRENCY)
        for name in REQUIRED_USER_FIELDS:
            if cleaned.get(name) in (None, ""):
                raise FormValidationError(f"{name} is required", field=name)

    bet_limit = cleaned.get("betLimit")
    if bet_limit not in (None, ""):
        try:
            amount = float(bet_limit)
        except (TypeError, ValueError):
            raise FormValidationError("betLimit must be a number", field="betLimit") from None
        if amount <= 0:
            raise FormValidationError("betLimit must be greater than zero", field="betLimit")
        cleaned["betLimit"] = str(bet_limit)

    allowed = REQUIRED_USER_FIELDS + EDITABLE_USER_FIELDS if creating else EDITABLE_USER_FIELDS
    return {key: cleaned[key] for key in allowed if cleaned.get(key) not in (None, "")}


class UserStore(DomainStore[UserFilters]):
    domain = "users"
    filters_cls = UserFilters

    def __init__(self, api: Any, fetcher: Optional[PaginatedFetcher] = None):
        super().__init__(api, fetcher)
        self.selected: Optional[User] = None

    def _endpoints(self) -> DomainEndpoints:
        return DomainEndpoints(list_call=self.api.get_users)

    async def fetch_user(self, user_id: str, agent_id: str) -> ApiResult:
        def select(user: User) -> None:
            self.selected = user

        self.selected = None
        return await self._load("fetch_user", lambda: self.api.get_user(user_id, agent_id), select)

    async def create_user(self, data: Mapping[str, Any]) -> ApiResult:
        try:
            payload = build_user_payload(data, creating=True)
        except FormValidationError as e:
            logger.info("user_create_rejected", field=e.field, message=e.message)
            raise
        return await self._mutate("create_user", lambda: self.api.create_user(payload))

    async def update_user(self, user_id: str, agent_id: str, data: Mapping[str, Any]) -> ApiResult:
        payload = build_user_payload(data, creating=False)
        return await self._mutate("update_user", lambda: self.api.update_user(user_id, agent_id, payload))

    async def delete_user(self, user_id: str, agent_id: str) -> ApiResult:
        return await self._mutate("delete_user", lambda: self.api.delete_user(user_id, agent_id))
