from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from registry_api.db.base import Base
from registry_api.models._common import new_id, utcnow
from registry_api.schemas.server_config import InstallationDetails, parse_installation

if TYPE_CHECKING:
    from registry_api.models.server import Server


class Configuration(Base):
    """
    A runtime/transport descriptor for a server.

    Local configurations carry installation and execution details (e.g. an
    npm package run over stdio by Node.js); remote ones carry connection
    details (e.g. an HTTP base URL).
    """
    __tablename__ = "configurations"
    __table_args__ = (
        CheckConstraint("transport IN ('stdio', 'sse', 'http')", name="ck_configurations_transport"),
        CheckConstraint("mode IS NULL OR mode IN ('local', 'remote')", name="ck_configurations_mode"),
    )

    config_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    server_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("servers.server_id", ondelete="CASCADE"), nullable=False, index=True
    )

    # nodejs, python, deno, bun, binary (local only)
    runtime: Mapped[str | None] = mapped_column(String(32), index=True)
    transport: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    # Only set for hybrid servers
    mode: Mapped[str | None] = mapped_column(String(16))

    # Installation (local servers)
    installation_type: Mapped[str | None] = mapped_column(String(16))
    installation_package: Mapped[str | None] = mapped_column(String(255))
    installation_version: Mapped[str | None] = mapped_column(String(64))
    installation_command: Mapped[str | None] = mapped_column(Text)
    installation_data: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    # Execution (local servers)
    execution_command: Mapped[str | None] = mapped_column(Text)
    execution_args: Mapped[list[str] | None] = mapped_column(JSON)
    working_directory: Mapped[str | None] = mapped_column(String(512))
    timeout_ms: Mapped[int | None] = mapped_column(Integer)
    execution_data: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    # Connection (remote servers)
    connection_base_url: Mapped[str | None] = mapped_column(String(512))
    connection_endpoint: Mapped[str | None] = mapped_column(String(512))
    connection_method: Mapped[str | None] = mapped_column(String(16))
    connection_protocol_version: Mapped[str | None] = mapped_column(String(32))
    connection_timeout_ms: Mapped[int | None] = mapped_column(Integer)
    connection_data: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    # {"os": [...], "min_memory_mb": ..., "network_access": ...}
    system_requirements: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recommended_for: Mapped[list[str] | None] = mapped_column(JSON)
    priority: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    server: Mapped["Server"] = relationship("Server", back_populates="configurations")
    environment_variables: Mapped[list["EnvironmentVariable"]] = relationship(
        "EnvironmentVariable", back_populates="configuration", cascade="all, delete-orphan"
    )

    @property
    def installation(self) -> Optional[InstallationDetails]:
        """Typed installation details, or None for configurations without an install step."""
        return parse_installation(
            self.installation_type,
            package=self.installation_package,
            version=self.installation_version,
            command=self.installation_command,
        )


class EnvironmentVariable(Base):
    """An environment variable a configuration expects at launch."""
    __tablename__ = "environment_variables"
    __table_args__ = (UniqueConstraint("config_id", "name", name="uq_environment_variables_config_name"),)

    env_var_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    config_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("configurations.config_id", ondelete="CASCADE"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    description: Mapped[str | None] = mapped_column(Text)
    validation_regex: Mapped[str | None] = mapped_column(String(512))
    help_url: Mapped[str | None] = mapped_column(String(512))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    configuration: Mapped["Configuration"] = relationship("Configuration", back_populates="environment_variables")
