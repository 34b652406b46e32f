from registry_api.db.base import Base
from registry_api.models.author import Author
from registry_api.models.server import Server
from registry_api.models.domain_mapping import DomainMapping
from registry_api.models.configuration import Configuration, EnvironmentVariable
from registry_api.models.authentication import AuthenticationConfig
from registry_api.models.capability import Prompt, Resource, Tool
from registry_api.models.prerequisite import InstallationPrerequisite

__all__ = [
    "Base",
    "Author",
    "Server",
    "DomainMapping",
    "Configuration",
    "EnvironmentVariable",
    "AuthenticationConfig",
    "Tool",
    "Resource",
    "Prompt",
    "InstallationPrerequisite",
]
