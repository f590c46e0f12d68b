"""
Agent statistics list plus agent create/edit/delete.

The list rows are per agent-platform-game aggregates; the detail and
mutation endpoints work on the agent record itself.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

from chicken_admin.core.config import Config
from chicken_admin.core.errors import FormValidationError
from chicken_admin.domain.filters import AgentFilters
from chicken_admin.domain.models import Agent, AgentTotals
from chicken_admin.integrations.api_result import ApiResult
from chicken_admin.services.paginated_fetcher import DomainEndpoints, PaginatedFetcher
from chicken_admin.stores.base import DomainStore
from chicken_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

AGENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
AGENT_ID_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
REQUIRED_CREATE_FIELDS = ("agentId", "cert", "agentIPaddress", "callbackURL", "password")
UPDATABLE_FIELDS = ("cert", "agentIPaddress", "callbackURL", "isWhitelisted", "currency", "allowedGameCodes")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def build_agent_create_payload(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate a create-agent form and build the request body.

    Raises:
        FormValidationError: If a required field is missing, the agent id is
            not alphanumeric or longer than 20 characters, or the password is
            shorter than 8 characters.
    """
    missing = [name for name in REQUIRED_CREATE_FIELDS if _blank(data.get(name))]
    if missing:
        raise FormValidationError("Please fill in all required fields", field=missing[0])

    agent_id = str(data["agentId"]).strip()
    if not AGENT_ID_PATTERN.match(agent_id):
        raise FormValidationError("Agent ID must contain only alphanumeric characters", field="agentId")
    if len(agent_id) > AGENT_ID_MAX_LENGTH:
        raise FormValidationError(
            f"Agent ID must be {AGENT_ID_MAX_LENGTH} characters or less", field="agentId"
        )
    if len(str(data["password"])) < PASSWORD_MIN_LENGTH:
        raise FormValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long", field="password"
        )

    return {
        "agentId": agent_id,
        "cert": str(data["cert"]).strip(),
        "agentIPaddress": str(data["agentIPaddress"]).strip(),
        "callbackURL": str(data["callbackURL"]).strip(),
        "currency": (data.get("currency") or Config.DEFAULT_CURRENCY),
        "isWhitelisted": bool(data.get("isWhitelisted", False)),
        "allowedGameCodes": list(data.get("allowedGameCodes") or []),
        "password": str(data["password"]),
    }


def build_agent_update_payload(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only editable fields; blank text means "leave unchanged"."""
    payload: Dict[str, Any] = {}
    for name in UPDATABLE_FIELDS:
        if name not in data:
            continue
        value = data[name]
        if name == "allowedGameCodes":
            payload[name] = list(value or [])
        elif name == "isWhitelisted":
            payload[name] = bool(value)
        elif not _blank(value):
            payload[name] = str(value).strip()
    return payload


class AgentStore(DomainStore[AgentFilters]):
    domain = "agents"
    filters_cls = AgentFilters

    def __init__(self, api: Any, fetcher: Optional[PaginatedFetcher] = None):
        super().__init__(api, fetcher)
        self.totals: Optional[AgentTotals] = None
        self.selected: Optional[Agent] = None

    def _endpoints(self) -> DomainEndpoints:
        return DomainEndpoints(list_call=self.api.get_agents, totals_call=self.api.get_agent_totals)

    def _filter_options_call(self):
        return self.api.get_agent_filter_options

    async def fetch_agent(self, agent_id: str) -> ApiResult:
        def select(agent: Agent) -> None:
            self.selected = agent

        self.selected = None
        return await self._load("fetch_agent", lambda: self.api.get_agent(agent_id), select)

    async def create_agent(self, data: Mapping[str, Any]) -> ApiResult:
        try:
            payload = build_agent_create_payload(data)
        except FormValidationError as e:
            logger.info("agent_create_rejected", field=e.field, message=e.message)
            raise
        return await self._mutate("create_agent", lambda: self.api.create_agent(payload))

    async def update_agent(self, agent_id: str, data: Mapping[str, Any]) -> ApiResult:
        payload = build_agent_update_payload(data)
        return await self._mutate("update_agent", lambda: self.api.update_agent(agent_id, payload))

    async def delete_agent(self, agent_id: str) -> ApiResult:
        result = await self._mutate("delete_agent", lambda: self.api.delete_agent(agent_id))
        if result.ok and self.selected is not None and self.selected.agent_id == agent_id:
            self.selected = None
        return result
