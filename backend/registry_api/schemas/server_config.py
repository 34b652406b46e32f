"""
Typed shapes for the free-form JSON stored alongside configurations and
authentication methods.

The ``config_data`` column of ``authentication_configs`` holds a different
structure for every ``auth_type``, and a configuration's installation
details differ by ``installation_type``. Both are modelled as discriminated
unions so every variant's fields are known up front.
"""

import json
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


# Authentication config variants (keyed by auth_type)

class NoAuthConfig(BaseModel):
    auth_type: Literal["none"] = "none"


class ApiKeyAuthConfig(BaseModel):
    auth_type: Literal["api_key"] = "api_key"
    method: Literal["bearer", "header", "query_param"] = "bearer"
    token_location: Literal["env_variable", "header", "config_file"] = "env_variable"
    env_variable_name: Optional[str] = None
    header_name: Optional[str] = None
    scopes_required: List[str] = []


class OAuth2AuthConfig(BaseModel):
    auth_type: Literal["oauth2"] = "oauth2"
    flow_type: Literal["authorization_code", "implicit", "client_credentials", "device_code"] = "authorization_code"
    provider: str
    provider_id: Optional[str] = None
    scopes: List[str] = []


class CustomAuthConfig(BaseModel):
    auth_type: Literal["custom"] = "custom"
    details: Dict[str, Any] = {}


class MultipleAuthConfig(BaseModel):
    auth_type: Literal["multiple"] = "multiple"
    default_method: str
    methods: List[str] = []


AuthConfigData = Annotated[
    Union[NoAuthConfig, ApiKeyAuthConfig, OAuth2AuthConfig, CustomAuthConfig, MultipleAuthConfig],
    Field(discriminator="auth_type"),
]

_auth_config_adapter = TypeAdapter(AuthConfigData)


def parse_auth_config(auth_type: str, raw: Union[str, Mapping[str, Any], None]) -> AuthConfigData:
    """
    Decode a stored ``config_data`` value into its typed variant.

    Args:
        auth_type: The row's auth_type column; selects the variant.
        raw: The column text (JSON) or an already decoded mapping.

    Raises:
        pydantic.ValidationError: If the data does not fit the variant.
        json.JSONDecodeError: If ``raw`` is text that is not JSON.
    """
    if raw is None or raw == "":
        data: Dict[str, Any] = {}
    elif isinstance(raw, str):
        data = json.loads(raw)
    else:
        data = dict(raw)

    # The discriminator lives in its own column, not inside the blob
    data["auth_type"] = auth_type
    return _auth_config_adapter.validate_python(data)


def dump_auth_config(config: AuthConfigData) -> str:
    """Serialize a variant to the text stored in ``config_data``."""
    return config.model_dump_json(exclude={"auth_type"}, exclude_none=True)


# Installation variants (keyed by installation_type)

class PackageManagerInstall(BaseModel):
    installation_type: Literal["npm", "pip"]
    package: str
    version: Optional[str] = None
    command: Optional[str] = None

    @property
    def quick_install(self) -> bool:
        return True


class BinaryInstall(BaseModel):
    installation_type: Literal["binary"] = "binary"
    package: Optional[str] = None
    version: Optional[str] = None
    command: Optional[str] = None

    @property
    def quick_install(self) -> bool:
        return False


class DockerInstall(BaseModel):
    installation_type: Literal["docker"] = "docker"
    package: str
    version: Optional[str] = None
    command: Optional[str] = None

    @property
    def quick_install(self) -> bool:
        return False


InstallationDetails = Annotated[
    Union[PackageManagerInstall, BinaryInstall, DockerInstall],
    Field(discriminator="installation_type"),
]

_installation_adapter = TypeAdapter(InstallationDetails)

# Installation types served by a standard package manager command
QUICK_INSTALL_TYPES = frozenset({"npm", "pip"})


def is_quick_install(installation_type: Optional[str]) -> bool:
    return installation_type in QUICK_INSTALL_TYPES


def parse_installation(
    installation_type: Optional[str],
    package: Optional[str] = None,
    version: Optional[str] = None,
    command: Optional[str] = None,
) -> Optional[InstallationDetails]:
    """Build the installation variant from configuration columns, or None for remote configs."""
    if not installation_type:
        return None
    return _installation_adapter.validate_python(
        {
            "installation_type": installation_type,
            "package": package,
            "version": version,
            "command": command,
        }
    )
