"""Server model: the unit the registry answers lookups with."""
from datetime import datetime
from typing import TYPE_CHECKING, Any, List

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from registry_api.db.base import Base
from registry_api.models._common import new_id, utcnow

if TYPE_CHECKING:
    from registry_api.models.author import Author
    from registry_api.models.authentication import AuthenticationConfig
    from registry_api.models.capability import Prompt, Resource, Tool
    from registry_api.models.configuration import Configuration
    from registry_api.models.domain_mapping import DomainMapping
    from registry_api.models.prerequisite import InstallationPrerequisite

DEPLOYMENT_TYPES = ("local", "remote", "hybrid")
TRUST_LEVELS = ("verified", "community", "unverified")


class Server(Base):
    """
    An MCP server listed in the registry.

    deployment_type and trust_level are closed enumerations enforced by CHECK
    constraints. categories and tags are JSON arrays of strings.
    """
    __tablename__ = "servers"
    __table_args__ = (
        CheckConstraint(
            "deployment_type IN ('local', 'remote', 'hybrid')", name="ck_servers_deployment_type"
        ),
        CheckConstraint(
            "trust_level IN ('verified', 'community', 'unverified')", name="ck_servers_trust_level"
        ),
    )

    server_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[str] = mapped_column(String(64), nullable=False)
    author_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("authors.author_id", ondelete="SET NULL"), index=True
    )

    # Repository information
    repository_type: Mapped[str | None] = mapped_column(String(32))
    repository_url: Mapped[str | None] = mapped_column(String(512))
    repository_directory: Mapped[str | None] = mapped_column(String(512))

    # Deployment and trust
    deployment_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    trust_level: Mapped[str] = mapped_column(String(16), nullable=False, default="unverified", index=True)

    categories: Mapped[List[Any]] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[List[Any]] = mapped_column(JSON, nullable=False, default=list)

    # Popularity metrics
    popularity_score: Mapped[int] = mapped_column(Integer, default=0, index=True)
    install_count: Mapped[int] = mapped_column(Integer, default=0)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    # ISO 8601 timestamp reported by the upstream source, returned verbatim in lookups
    last_updated: Mapped[str | None] = mapped_column(String(64))

    # Relationships
    author: Mapped["Author | None"] = relationship("Author", back_populates="servers")
    domain_mappings: Mapped[list["DomainMapping"]] = relationship(
        "DomainMapping", back_populates="server", cascade="all, delete-orphan"
    )
    configurations: Mapped[list["Configuration"]] = relationship(
        "Configuration", back_populates="server", cascade="all, delete-orphan"
    )
    authentication_configs: Mapped[list["AuthenticationConfig"]] = relationship(
        "AuthenticationConfig", back_populates="server", cascade="all, delete-orphan"
    )
    tools: Mapped[list["Tool"]] = relationship("Tool", back_populates="server", cascade="all, delete-orphan")
    resources: Mapped[list["Resource"]] = relationship(
        "Resource", back_populates="server", cascade="all, delete-orphan"
    )
    prompts: Mapped[list["Prompt"]] = relationship("Prompt", back_populates="server", cascade="all, delete-orphan")
    prerequisites: Mapped[list["InstallationPrerequisite"]] = relationship(
        "InstallationPrerequisite", back_populates="server", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Server(server_id={self.server_id}, name={self.name}, trust_level={self.trust_level})>"
