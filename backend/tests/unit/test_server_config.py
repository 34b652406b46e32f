import json

import pytest
from pydantic import ValidationError

from registry_api.models import AuthenticationConfig, Configuration
from registry_api.schemas.server_config import (
    ApiKeyAuthConfig,
    BinaryInstall,
    CustomAuthConfig,
    DockerInstall,
    MultipleAuthConfig,
    NoAuthConfig,
    OAuth2AuthConfig,
    PackageManagerInstall,
    dump_auth_config,
    is_quick_install,
    parse_auth_config,
    parse_installation,
)


def test_parse_api_key_from_column_text():
    config = parse_auth_config("api_key", '{"method": "header", "header_name": "X-Api-Key"}')

    assert isinstance(config, ApiKeyAuthConfig)
    assert config.method == "header"
    assert config.header_name == "X-Api-Key"
    assert config.token_location == "env_variable"


def test_parse_oauth2_from_mapping():
    config = parse_auth_config("oauth2", {"provider": "atlassian", "scopes": ["read:jira-work"]})

    assert isinstance(config, OAuth2AuthConfig)
    assert config.flow_type == "authorization_code"
    assert config.scopes == ["read:jira-work"]


@pytest.mark.parametrize("raw", [None, "", "{}"])
def test_parse_none_accepts_empty_blobs(raw):
    assert isinstance(parse_auth_config("none", raw), NoAuthConfig)


def test_parse_custom_and_multiple():
    assert parse_auth_config("custom", {"details": {"flow": "magic"}}) == CustomAuthConfig(details={"flow": "magic"})

    multiple = parse_auth_config("multiple", {"default_method": "oauth2", "methods": ["oauth2", "api_key"]})
    assert isinstance(multiple, MultipleAuthConfig)
    assert multiple.methods == ["oauth2", "api_key"]


def test_auth_type_column_wins_over_blob():
    config = parse_auth_config("none", {"auth_type": "oauth2"})

    assert isinstance(config, NoAuthConfig)


def test_parse_rejects_unknown_auth_type():
    with pytest.raises(ValidationError):
        parse_auth_config("kerberos", {})


def test_parse_rejects_missing_required_field():
    with pytest.raises(ValidationError):
        parse_auth_config("oauth2", {"flow_type": "implicit"})


def test_parse_rejects_non_json_text():
    with pytest.raises(json.JSONDecodeError):
        parse_auth_config("api_key", "not json")


def test_dump_omits_discriminator_and_nulls():
    text = dump_auth_config(ApiKeyAuthConfig(env_variable_name="GITHUB_TOKEN"))

    data = json.loads(text)
    assert "auth_type" not in data
    assert "header_name" not in data
    assert data["env_variable_name"] == "GITHUB_TOKEN"
    assert parse_auth_config("api_key", text) == ApiKeyAuthConfig(env_variable_name="GITHUB_TOKEN")


def test_auth_row_exposes_parsed_config():
    row = AuthenticationConfig(auth_type="oauth2", config_data='{"provider": "github"}')

    assert row.parsed_config == OAuth2AuthConfig(provider="github")


@pytest.mark.parametrize(
    "installation_type,expected",
    [("npm", True), ("pip", True), ("binary", False), ("docker", False), (None, False), ("", False)],
)
def test_is_quick_install(installation_type, expected):
    assert is_quick_install(installation_type) is expected


def test_parse_installation_variants():
    npm = parse_installation("npm", package="@modelcontextprotocol/server-github")
    assert isinstance(npm, PackageManagerInstall)
    assert npm.quick_install is True

    binary = parse_installation("binary", command="./server --stdio")
    assert isinstance(binary, BinaryInstall)
    assert binary.quick_install is False

    docker = parse_installation("docker", package="ghcr.io/example/mcp", version="1.2")
    assert isinstance(docker, DockerInstall)
    assert docker.quick_install is False


def test_parse_installation_without_type():
    assert parse_installation(None) is None


def test_parse_installation_requires_package_for_npm():
    with pytest.raises(ValidationError):
        parse_installation("npm")


def test_configuration_row_exposes_installation():
    row = Configuration(transport="stdio", installation_type="pip", installation_package="mcp-server-git")

    assert row.installation == PackageManagerInstall(installation_type="pip", package="mcp-server-git")
    assert Configuration(transport="http").installation is None
