import logging
from dataclasses import dataclass, field
from typing import List, Optional

from registry_api.db.store import RegistryStore
from registry_api.schemas.lookup import ConfigurationSummary, ServerMatch
from registry_api.schemas.server_config import is_quick_install
from registry_api.services.lookup_pipeline import MatchCandidate

logger = logging.getLogger(__name__)

OAUTH_AUTH_TYPE = "oauth2"
RUNTIME_PREREQUISITE = "runtime"
TOP_TOOLS_LIMIT = 5

# Setup time estimate: minutes per prerequisite, capped; servers without prerequisites get the base value
MINUTES_PER_PREREQUISITE = 5
MAX_SETUP_MINUTES = 30
BASE_SETUP_MINUTES = 5

CONFIGURATIONS_SQL = """
    SELECT
      config_id,
      runtime,
      transport,
      installation_type
    FROM configurations
    WHERE server_id = :server_id
    ORDER BY priority ASC
"""

AUTHENTICATION_SQL = """
    SELECT
      auth_type,
      required,
      config_data
    FROM authentication_configs
    WHERE server_id = :server_id
    ORDER BY priority ASC
"""

# No ORDER BY: "top" tools are the first ones in storage order
TOOLS_SQL = f"""
    SELECT
      tool_name,
      display_name
    FROM tools
    WHERE server_id = :server_id
    LIMIT {TOP_TOOLS_LIMIT}
"""

PREREQUISITES_SQL = """
    SELECT
      prerequisite_type,
      name,
      version
    FROM installation_prerequisites
    WHERE server_id = :server_id
"""

RESOURCE_COUNT_SQL = """
    SELECT COUNT(*) AS count
    FROM resources
    WHERE server_id = :server_id
"""


@dataclass
class AuthenticationSummary:
    required: bool = False
    auth_type: Optional[str] = None
    oauth_ready: bool = False
    methods: List[str] = field(default_factory=list)


@dataclass
class ToolsSummary:
    count: int = 0
    top_tools: List[str] = field(default_factory=list)


@dataclass
class PrerequisitesSummary:
    complexity: str = "simple"
    estimated_minutes: int = BASE_SETUP_MINUTES
    requires_restart: bool = False
    summary: Optional[str] = None


class ServerEnricher:
    """
    Joins auxiliary registry data onto a matched server row.

    Every query error propagates; a server is either fully enriched or the
    lookup fails.
    """

    def __init__(self, store: RegistryStore):
        self.store = store

    async def configuration_summaries(self, server_id: str) -> List[ConfigurationSummary]:
        rows = await self.store.query_all(CONFIGURATIONS_SQL, {"server_id": server_id})
        return [
            ConfigurationSummary(
                config_id=row["config_id"],
                runtime=row["runtime"] or None,
                transport=row["transport"],
                quick_install=is_quick_install(row["installation_type"]),
            )
            for row in rows
        ]

    async def authentication_summary(self, server_id: str) -> AuthenticationSummary:
        rows = await self.store.query_all(AUTHENTICATION_SQL, {"server_id": server_id})
        if not rows:
            return AuthenticationSummary()

        primary = rows[0]
        methods = [row["auth_type"] for row in rows]
        return AuthenticationSummary(
            required=bool(primary["required"]),
            auth_type=primary["auth_type"],
            oauth_ready=OAUTH_AUTH_TYPE in methods,
            methods=methods,
        )

    async def tools_summary(self, server_id: str) -> ToolsSummary:
        rows = await self.store.query_all(TOOLS_SQL, {"server_id": server_id})
        return ToolsSummary(
            count=len(rows),
            top_tools=[row["display_name"] or row["tool_name"] for row in rows],
        )

    async def prerequisites_summary(self, server_id: str) -> PrerequisitesSummary:
        rows = await self.store.query_all(PREREQUISITES_SQL, {"server_id": server_id})
        if not rows:
            return PrerequisitesSummary()

        count = len(rows)
        if count > 3:
            complexity = "complex"
        elif count > 1:
            complexity = "moderate"
        else:
            complexity = "simple"

        summary = ", ".join(
            f"{row['name']} {row['version']}" if row["version"] else row["name"] for row in rows
        )
        return PrerequisitesSummary(
            complexity=complexity,
            estimated_minutes=min(count * MINUTES_PER_PREREQUISITE, MAX_SETUP_MINUTES),
            requires_restart=any(row["prerequisite_type"] == RUNTIME_PREREQUISITE for row in rows),
            summary=summary or None,
        )

    async def has_resources(self, server_id: str) -> bool:
        row = await self.store.query_one(RESOURCE_COUNT_SQL, {"server_id": server_id})
        return bool(row) and row["count"] > 0

    async def enrich(self, candidate: MatchCandidate) -> ServerMatch:
        """Build the response record for one matched server."""
        row = candidate.row
        server_id = candidate.server_id

        # One AsyncSession cannot run statements concurrently, so these are awaited in turn
        configurations = await self.configuration_summaries(server_id)
        auth = await self.authentication_summary(server_id)
        tools = await self.tools_summary(server_id)
        prerequisites = await self.prerequisites_summary(server_id)
        resources_available = await self.has_resources(server_id)

        return ServerMatch(
            server_id=server_id,
            name=row["name"],
            description=row["description"],
            version=row["version"],
            deployment_type=row["deployment_type"],
            match_type=candidate.match_type,
            match_confidence=candidate.confidence,
            priority=row["priority"] if row["priority"] is not None else 1,
            auto_suggest=bool(row["auto_suggest"]),
            installation_complexity=prerequisites.complexity,
            estimated_setup_minutes=prerequisites.estimated_minutes,
            requires_restart=prerequisites.requires_restart,
            prerequisites_summary=prerequisites.summary,
            auth_required=auth.required,
            auth_type=auth.auth_type,
            oauth_ready=auth.oauth_ready,
            auth_methods=auth.methods,
            configurations=configurations,
            tools_count=tools.count,
            top_tools=tools.top_tools,
            resources_available=resources_available,
            trust_level=row["trust_level"],
            popularity_score=row["popularity_score"] or 0,
            install_count=row["install_count"] or 0,
            last_updated=row["last_updated"],
        )
