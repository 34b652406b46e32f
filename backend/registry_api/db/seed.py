"""
Sample registry data: a GitHub server mapped to ``github.com`` (exact) and a
Jira server mapped to ``*.atlassian.net`` (wildcard).
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from registry_api.models import (
    Author,
    AuthenticationConfig,
    Configuration,
    DomainMapping,
    Server,
    Tool,
)
from registry_api.schemas.server_config import (
    ApiKeyAuthConfig,
    OAuth2AuthConfig,
    PackageManagerInstall,
    dump_auth_config,
)

logger = logging.getLogger(__name__)

GITHUB_TOOLS = [
    ("create_or_update_file", "Create or Update File", "Create or update a single file in a GitHub repository"),
    ("push_files", "Push Files", "Push multiple files to a GitHub repository in a single commit"),
    ("create_issue", "Create Issue", "Create a new issue in a GitHub repository"),
    ("create_pull_request", "Create Pull Request", "Create a new pull request in a GitHub repository"),
    ("search_repositories", "Search Repositories", "Search for GitHub repositories"),
]

JIRA_TOOLS = [
    ("get_issue", "Get Issue", "Get details of a Jira issue"),
    ("create_issue", "Create Issue", "Create a new Jira issue"),
]


def _tools(specs) -> List[Tool]:
    return [
        Tool(tool_name=name, display_name=display_name, description=description, input_schema={}, requires_auth=True)
        for name, display_name, description in specs
    ]


def build_github_server(author: Author) -> Server:
    install = PackageManagerInstall(installation_type="npm", package="@modelcontextprotocol/server-github")
    auth = ApiKeyAuthConfig(method="bearer", token_location="env_variable", env_variable_name="GITHUB_TOKEN")

    return Server(
        name="GitHub MCP Server",
        description="Access GitHub repositories, issues, pull requests, and more through MCP.",
        version="1.0.0",
        author=author,
        repository_type="github",
        repository_url="https://github.com/modelcontextprotocol/servers",
        deployment_type="local",
        trust_level="verified",
        categories=["code-hosting", "version-control"],
        tags=["github", "git", "source-control"],
        popularity_score=95,
        install_count=15000,
        last_updated=datetime.now(timezone.utc).isoformat(),
        domain_mappings=[
            DomainMapping(domain_pattern="github.com", match_type="exact", priority=1, auto_suggest=True),
        ],
        configurations=[
            Configuration(
                runtime="nodejs",
                transport="stdio",
                installation_type=install.installation_type,
                installation_package=install.package,
                is_default=True,
                priority=0,
            ),
        ],
        authentication_configs=[
            AuthenticationConfig(
                auth_type=auth.auth_type,
                priority=1,
                is_default=True,
                required=True,
                recommended=True,
                display_name="GitHub Personal Access Token",
                description="Required to access GitHub API",
                config_data=dump_auth_config(auth),
            ),
        ],
        tools=_tools(GITHUB_TOOLS),
    )


def build_jira_server() -> Server:
    auth = OAuth2AuthConfig(flow_type="authorization_code", provider="atlassian")

    return Server(
        name="Jira MCP Server",
        description="Access Jira issues, projects, and workflows through MCP.",
        version="0.9.0",
        deployment_type="remote",
        trust_level="community",
        categories=["project-management", "issue-tracking"],
        tags=["jira", "atlassian", "agile"],
        popularity_score=75,
        install_count=5000,
        last_updated=datetime.now(timezone.utc).isoformat(),
        domain_mappings=[
            DomainMapping(domain_pattern="*.atlassian.net", match_type="wildcard", priority=2, auto_suggest=True),
        ],
        configurations=[
            Configuration(transport="http", connection_base_url="https://api.jira-mcp.com", is_default=True, priority=0),
        ],
        authentication_configs=[
            AuthenticationConfig(
                auth_type=auth.auth_type,
                priority=1,
                is_default=True,
                required=True,
                recommended=True,
                display_name="Atlassian OAuth",
                description="OAuth 2.0 authentication with Atlassian",
                config_data=dump_auth_config(auth),
            ),
        ],
        tools=_tools(JIRA_TOOLS),
    )


async def seed_sample_data(session: AsyncSession) -> List[Server]:
    """
    Insert the sample servers and commit.

    Returns:
        The created servers, GitHub first.
    """
    author = Author(name="GitHub Inc", url="https://github.com", verified=True)
    servers = [build_github_server(author), build_jira_server()]

    session.add(author)
    session.add_all(servers)
    await session.commit()

    for server in servers:
        logger.info(f"Seeded {server.name} ({server.server_id})")
    return servers
