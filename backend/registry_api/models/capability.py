"""Capabilities a server offers: tools, resources and prompts."""
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, DateTime, ForeignKey, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from registry_api.db.base import Base
from registry_api.models._common import new_id, utcnow

if TYPE_CHECKING:
    from registry_api.models.server import Server


class Tool(Base):
    __tablename__ = "tools"
    __table_args__ = (UniqueConstraint("server_id", "tool_name", name="uq_tools_server_tool_name"),)

    tool_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    server_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("servers.server_id", ondelete="CASCADE"), nullable=False, index=True
    )

    tool_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # JSON Schema for the tool's input
    input_schema: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    requires_auth: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    min_auth_scopes: Mapped[list[str] | None] = mapped_column(JSON)

    # {"calls_per_hour": ..., "shared_with": [...]}
    rate_limit_data: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    examples: Mapped[list[Any] | None] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    server: Mapped["Server"] = relationship("Server", back_populates="tools")


class Resource(Base):
    __tablename__ = "resources"

    resource_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    server_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("servers.server_id", ondelete="CASCADE"), nullable=False, index=True
    )

    uri_template: Mapped[str] = mapped_column(String(512), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    mime_type: Mapped[str | None] = mapped_column(String(128))

    requires_auth: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # public, private, public_and_private
    access_level: Mapped[str | None] = mapped_column(String(32))
    examples: Mapped[list[Any] | None] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    server: Mapped["Server"] = relationship("Server", back_populates="resources")


class Prompt(Base):
    __tablename__ = "prompts"
    __table_args__ = (UniqueConstraint("server_id", "prompt_name", name="uq_prompts_server_prompt_name"),)

    prompt_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    server_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("servers.server_id", ondelete="CASCADE"), nullable=False, index=True
    )

    prompt_name: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, nullable=False)
    arguments_schema: Mapped[list[Any] | None] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    server: Mapped["Server"] = relationship("Server", back_populates="prompts")
