import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

TrustLevel = Literal["verified", "community", "unverified"]
DeploymentType = Literal["local", "remote", "hybrid"]
MatchType = Literal["exact", "wildcard", "category"]
InstallationComplexity = Literal["simple", "moderate", "complex"]

DEFAULT_TRUST_LEVELS: List[str] = ["verified", "community"]
DEFAULT_DEPLOYMENT_TYPES: List[str] = ["local", "remote", "hybrid"]
DEFAULT_MAX_RESULTS = 10
MAX_RESULTS_LIMIT = 50
MAX_DOMAIN_LENGTH = 253

# Dot-separated labels of 1-63 alphanumerics/hyphens, not starting or ending with a hyphen
DOMAIN_PATTERN = re.compile(
    r"[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)


def _split_csv(value: Any, default: List[str]) -> Any:
    if value is None:
        return list(default)
    if isinstance(value, str):
        value = [part.strip() for part in value.split(",")]
    items = [item for item in value if item]
    if not items:
        return list(default)
    # Filters are sets; keep first-seen order for readable error locations
    return list(dict.fromkeys(items))


class LookupQuery(BaseModel):
    """
    Validated lookup request.

    Accepts either the raw query-string forms (comma-separated lists, "1"/"true"
    flags, numeric strings) or already typed values.
    """
    domain: str = Field(default="", validate_default=True)
    trust_levels: List[TrustLevel] = list(DEFAULT_TRUST_LEVELS)
    deployment_types: List[DeploymentType] = list(DEFAULT_DEPLOYMENT_TYPES)
    max_results: int = DEFAULT_MAX_RESULTS
    include_categories: bool = False
    # Accepted for forward compatibility; lookups do not use it
    user_context: Optional[str] = None

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        if not v:
            raise ValueError("Domain is required")
        if len(v) > MAX_DOMAIN_LENGTH:
            raise ValueError(f"Domain must be less than {MAX_DOMAIN_LENGTH} characters")
        if not DOMAIN_PATTERN.fullmatch(v):
            raise ValueError("Invalid domain format")
        return v

    @field_validator("trust_levels", mode="before")
    @classmethod
    def parse_trust_levels(cls, v: Any) -> Any:
        return _split_csv(v, DEFAULT_TRUST_LEVELS)

    @field_validator("deployment_types", mode="before")
    @classmethod
    def parse_deployment_types(cls, v: Any) -> Any:
        return _split_csv(v, DEFAULT_DEPLOYMENT_TYPES)

    @field_validator("max_results", mode="before")
    @classmethod
    def parse_max_results(cls, v: Any) -> int:
        # Anything unusable falls back to the default instead of failing the request
        try:
            num = int(v)
        except (TypeError, ValueError):
            return DEFAULT_MAX_RESULTS
        if num < 1 or num > MAX_RESULTS_LIMIT:
            return DEFAULT_MAX_RESULTS
        return num

    @field_validator("include_categories", mode="before")
    @classmethod
    def parse_include_categories(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        return str(v) in ("true", "1")


class ConfigurationSummary(BaseModel):
    config_id: str
    runtime: Optional[str] = None
    transport: str
    quick_install: bool


class ServerMatch(BaseModel):
    # Core identity
    server_id: str
    name: str
    description: str
    version: str
    deployment_type: DeploymentType

    # Match context
    match_type: MatchType
    match_confidence: int  # 0-100
    priority: int
    auto_suggest: bool

    # Installation requirements (abbreviated)
    installation_complexity: InstallationComplexity
    estimated_setup_minutes: int
    requires_restart: bool
    prerequisites_summary: Optional[str] = None

    # Authentication summary
    auth_required: bool
    auth_type: Optional[str] = None
    oauth_ready: bool
    auth_methods: List[str]

    # Configuration preview
    configurations: List[ConfigurationSummary]

    # Capabilities summary
    tools_count: int
    top_tools: List[str]
    resources_available: bool

    # Trust & quality
    trust_level: TrustLevel
    popularity_score: int
    install_count: int
    last_updated: Optional[str] = None


class MatchMetadata(BaseModel):
    match_count: int
    search_time_ms: int
    cache_hit: bool


class LookupResponse(BaseModel):
    domain: str
    match_metadata: MatchMetadata
    matches: List[ServerMatch]


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
    domain: Optional[str] = None
    request_id: Optional[str] = None
