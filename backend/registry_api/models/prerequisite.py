from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from registry_api.db.base import Base
from registry_api.models._common import new_id, utcnow

if TYPE_CHECKING:
    from registry_api.models.server import Server


class InstallationPrerequisite(Base):
    """Something that must be present before a server can be installed (a runtime, a credential, ...)."""
    __tablename__ = "installation_prerequisites"
    __table_args__ = (
        CheckConstraint(
            "prerequisite_type IN ('runtime', 'credential', 'system', 'network')",
            name="ck_installation_prerequisites_type",
        ),
    )

    prerequisite_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    server_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("servers.server_id", ondelete="CASCADE"), nullable=False, index=True
    )

    prerequisite_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Version requirement, e.g. ">=18" for a runtime
    version: Mapped[str | None] = mapped_column(String(64))
    description: Mapped[str | None] = mapped_column(Text)

    check_command: Mapped[str | None] = mapped_column(Text)
    install_url: Mapped[str | None] = mapped_column(String(512))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    server: Mapped["Server"] = relationship("Server", back_populates="prerequisites")
