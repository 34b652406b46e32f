from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from registry_api.db.base import Base
from registry_api.models._common import new_id, utcnow
from registry_api.schemas.server_config import AuthConfigData, parse_auth_config

if TYPE_CHECKING:
    from registry_api.models.server import Server


class AuthenticationConfig(Base):
    """
    One authentication method a server supports.

    The row with the lowest priority number is the server's primary method.
    config_data is JSON text whose shape depends on auth_type; use
    ``parsed_config`` to get the typed variant.
    """
    __tablename__ = "authentication_configs"
    __table_args__ = (
        CheckConstraint(
            "auth_type IN ('none', 'api_key', 'oauth2', 'custom', 'multiple')",
            name="ck_authentication_configs_auth_type",
        ),
        Index("idx_auth_configs_priority", "server_id", "priority"),
    )

    auth_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    server_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("servers.server_id", ondelete="CASCADE"), nullable=False, index=True
    )

    auth_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    priority: Mapped[int] = mapped_column(Integer, default=1)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    recommended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Display info
    display_name: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    reason: Mapped[str | None] = mapped_column(Text)

    config_data: Mapped[str] = mapped_column(Text, nullable=False, default="{}")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    server: Mapped["Server"] = relationship("Server", back_populates="authentication_configs")

    @property
    def parsed_config(self) -> AuthConfigData:
        return parse_auth_config(self.auth_type, self.config_data)
