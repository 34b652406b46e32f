import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from registry_api.db.seed import GITHUB_TOOLS
from registry_api.db.store import RegistryStore
from registry_api.models import (
    AuthenticationConfig,
    Configuration,
    DomainMapping,
    InstallationPrerequisite,
    Resource,
    Server,
    Tool,
)
from registry_api.schemas.lookup import LookupQuery
from registry_api.services.lookup_cache import LookupCache
from registry_api.services.lookup_service import LookupService


def make_server(server_id: str, pattern: str, match_type: str = "exact", **overrides) -> Server:
    fields = dict(
        server_id=server_id,
        name=f"{server_id} server",
        description=f"Test server {server_id}",
        version="1.0.0",
        deployment_type="local",
        trust_level="verified",
        popularity_score=50,
        install_count=10,
        domain_mappings=[DomainMapping(domain_pattern=pattern, match_type=match_type, priority=1)],
    )
    fields.update(overrides)
    return Server(**fields)


@pytest.fixture
def service(store: RegistryStore, lookup_cache: LookupCache) -> LookupService:
    return LookupService(store, lookup_cache)


@pytest_asyncio.fixture
async def github_and_jira(db_session: AsyncSession) -> None:
    db_session.add_all([
        make_server("github-mcp", "github.com"),
        make_server("jira-mcp", "*.atlassian.net", match_type="wildcard", trust_level="community"),
    ])
    await db_session.commit()


@pytest.mark.asyncio
async def test_exact_match(service: LookupService, github_and_jira):
    result = await service.lookup_servers(LookupQuery(domain="github.com"))

    assert result.domain == "github.com"
    assert result.match_metadata.match_count == 1
    assert result.match_metadata.cache_hit is False
    match = result.matches[0]
    assert match.server_id == "github-mcp"
    assert match.match_type == "exact"
    assert match.match_confidence == 100


@pytest.mark.asyncio
async def test_wildcard_match(service: LookupService, github_and_jira):
    result = await service.lookup_servers(LookupQuery(domain="acme.atlassian.net"))

    assert result.match_metadata.match_count == 1
    match = result.matches[0]
    assert match.server_id == "jira-mcp"
    assert match.match_type == "wildcard"
    assert 70 <= match.match_confidence <= 100
    # 2 literal segments out of 3 domain segments
    assert match.match_confidence == 83


@pytest.mark.asyncio
async def test_wildcard_does_not_match_bare_suffix(service: LookupService, github_and_jira):
    result = await service.lookup_servers(LookupQuery(domain="atlassian.net"))

    assert result.matches == []
    assert result.match_metadata.match_count == 0


@pytest.mark.asyncio
async def test_no_match_returns_empty_result(service: LookupService, github_and_jira):
    result = await service.lookup_servers(LookupQuery(domain="nonexistent-domain-12345.com"))

    assert result.matches == []
    assert result.match_metadata.match_count == 0
    assert result.match_metadata.cache_hit is False


@pytest.mark.asyncio
async def test_trust_filter_excludes_unverified(service: LookupService, db_session: AsyncSession):
    db_session.add(make_server("sketchy-mcp", "example.org", trust_level="unverified"))
    await db_session.commit()

    default_result = await service.lookup_servers(LookupQuery(domain="example.org"))
    assert default_result.matches == []

    opted_in = await service.lookup_servers(
        LookupQuery(domain="example.org", trust_levels=["unverified"])
    )
    assert [m.server_id for m in opted_in.matches] == ["sketchy-mcp"]
    assert opted_in.matches[0].trust_level == "unverified"


@pytest.mark.asyncio
async def test_deployment_filter(service: LookupService, db_session: AsyncSession):
    db_session.add(make_server("remote-mcp", "remote.example.com", deployment_type="remote"))
    await db_session.commit()

    local_only = await service.lookup_servers(
        LookupQuery(domain="remote.example.com", deployment_types=["local"])
    )
    assert local_only.matches == []

    remote = await service.lookup_servers(
        LookupQuery(domain="remote.example.com", deployment_types=["remote", "hybrid"])
    )
    assert [m.deployment_type for m in remote.matches] == ["remote"]


@pytest.mark.asyncio
async def test_repeated_lookup_is_served_from_cache(service: LookupService, github_and_jira):
    query = LookupQuery(domain="github.com")

    first = await service.lookup_servers(query)
    second = await service.lookup_servers(query)

    assert first.match_metadata.cache_hit is False
    assert second.match_metadata.cache_hit is True
    assert second.matches == first.matches
    assert second.match_metadata.match_count == first.match_metadata.match_count


@pytest.mark.asyncio
async def test_cache_entry_expires_after_ttl(service: LookupService, github_and_jira, clock):
    query = LookupQuery(domain="github.com")
    await service.lookup_servers(query)

    clock.advance(899)
    assert (await service.lookup_servers(query)).match_metadata.cache_hit is True

    clock.advance(1)
    assert (await service.lookup_servers(query)).match_metadata.cache_hit is False


@pytest.mark.asyncio
async def test_filter_order_does_not_change_cache_key(service: LookupService, github_and_jira):
    await service.lookup_servers(LookupQuery(domain="github.com", trust_levels=["verified", "community"]))
    result = await service.lookup_servers(LookupQuery(domain="github.com", trust_levels=["community", "verified"]))

    assert result.match_metadata.cache_hit is True


@pytest.mark.asyncio
async def test_different_filters_are_cached_separately(service: LookupService, github_and_jira):
    await service.lookup_servers(LookupQuery(domain="github.com"))
    result = await service.lookup_servers(LookupQuery(domain="github.com", max_results=5))

    assert result.match_metadata.cache_hit is False


@pytest.mark.asyncio
async def test_clear_cache_forces_recomputation(service: LookupService, github_and_jira):
    query = LookupQuery(domain="github.com")
    await service.lookup_servers(query)

    service.clear_cache()

    assert (await service.lookup_servers(query)).match_metadata.cache_hit is False


@pytest.mark.asyncio
async def test_empty_results_are_cached(service: LookupService, github_and_jira):
    query = LookupQuery(domain="nothing-here.com")
    await service.lookup_servers(query)

    assert (await service.lookup_servers(query)).match_metadata.cache_hit is True


@pytest.mark.asyncio
async def test_results_bounded_by_max_results(service: LookupService, db_session: AsyncSession):
    db_session.add_all([make_server(f"multi-{i}", "multi.example.com", popularity_score=i) for i in range(5)])
    await db_session.commit()

    result = await service.lookup_servers(LookupQuery(domain="multi.example.com", max_results=3))

    assert result.match_metadata.match_count == 3
    # Same priority, so more popular servers come first
    assert [m.server_id for m in result.matches] == ["multi-4", "multi-3", "multi-2"]


@pytest.mark.asyncio
async def test_exact_matches_precede_wildcard_matches(service: LookupService, db_session: AsyncSession):
    db_session.add_all([
        make_server("wild", "*.example.com", match_type="wildcard", popularity_score=99),
        make_server("exact", "docs.example.com", popularity_score=1),
    ])
    await db_session.commit()

    result = await service.lookup_servers(LookupQuery(domain="docs.example.com"))

    assert [(m.server_id, m.match_type) for m in result.matches] == [("exact", "exact"), ("wild", "wildcard")]


@pytest.mark.asyncio
async def test_exact_matches_filling_budget_skip_wildcards(service: LookupService, db_session: AsyncSession):
    db_session.add_all([
        make_server("wild", "*.example.com", match_type="wildcard"),
        make_server("exact", "docs.example.com"),
    ])
    await db_session.commit()

    result = await service.lookup_servers(LookupQuery(domain="docs.example.com", max_results=1))

    assert [m.match_type for m in result.matches] == ["exact"]


@pytest.mark.asyncio
async def test_enrichment_summarizes_related_rows(service: LookupService, db_session: AsyncSession):
    server = make_server(
        "rich-mcp",
        "rich.example.com",
        configurations=[
            Configuration(config_id="cfg-docker", transport="http", installation_type="docker", priority=1),
            Configuration(
                config_id="cfg-npm", runtime="nodejs", transport="stdio", installation_type="npm", priority=0
            ),
        ],
        authentication_configs=[
            AuthenticationConfig(auth_type="api_key", priority=1, required=True, config_data="{}"),
            AuthenticationConfig(
                auth_type="oauth2", priority=2, required=False, config_data='{"provider": "example"}'
            ),
        ],
        tools=[
            Tool(tool_name=f"tool_{i}", display_name=None if i == 0 else f"Tool {i}", description="t", input_schema={})
            for i in range(7)
        ],
        resources=[Resource(uri_template="rich://{id}", name="item", description="An item")],
        prerequisites=[
            InstallationPrerequisite(prerequisite_type="runtime", name="Node.js", version=">=18"),
            InstallationPrerequisite(prerequisite_type="credential", name="Rich API key"),
        ],
    )
    db_session.add(server)
    await db_session.commit()

    result = await service.lookup_servers(LookupQuery(domain="rich.example.com"))
    match = result.matches[0]

    assert [(c.config_id, c.runtime, c.transport, c.quick_install) for c in match.configurations] == [
        ("cfg-npm", "nodejs", "stdio", True),
        ("cfg-docker", None, "http", False),
    ]
    assert match.auth_required is True
    assert match.auth_type == "api_key"
    assert match.oauth_ready is True
    assert match.auth_methods == ["api_key", "oauth2"]
    # Tool lookups are capped at five rows
    assert match.tools_count == 5
    assert len(match.top_tools) == 5
    assert match.resources_available is True
    assert match.installation_complexity == "moderate"
    assert match.estimated_setup_minutes == 10
    assert match.requires_restart is True
    assert match.prerequisites_summary == "Node.js >=18, Rich API key"


@pytest.mark.asyncio
async def test_enrichment_defaults_for_bare_server(service: LookupService, db_session: AsyncSession):
    db_session.add(make_server("bare-mcp", "bare.example.com"))
    await db_session.commit()

    match = (await service.lookup_servers(LookupQuery(domain="bare.example.com"))).matches[0]

    assert match.configurations == []
    assert match.auth_required is False
    assert match.auth_type is None
    assert match.oauth_ready is False
    assert match.auth_methods == []
    assert match.tools_count == 0
    assert match.top_tools == []
    assert match.resources_available is False
    assert match.installation_complexity == "simple"
    assert match.estimated_setup_minutes == 5
    assert match.requires_restart is False
    assert match.prerequisites_summary is None


@pytest.mark.asyncio
async def test_sample_data_lookups(service: LookupService, seeded_servers):
    github = await service.lookup_servers(LookupQuery(domain="github.com"))
    match = github.matches[0]

    assert match.name == "GitHub MCP Server"
    assert match.match_type == "exact"
    assert match.trust_level == "verified"
    assert match.auth_type == "api_key"
    assert match.tools_count == len(GITHUB_TOOLS)
    assert match.top_tools[0] == "Create or Update File"
    assert match.configurations[0].quick_install is True
    assert match.popularity_score == 95
    assert match.install_count == 15000

    jira = await service.lookup_servers(LookupQuery(domain="mycompany.atlassian.net"))
    match = jira.matches[0]

    assert match.name == "Jira MCP Server"
    assert match.match_type == "wildcard"
    assert match.deployment_type == "remote"
    assert match.oauth_ready is True
    assert match.configurations[0].transport == "http"
    assert match.configurations[0].quick_install is False
