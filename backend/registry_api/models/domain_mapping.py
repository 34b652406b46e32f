from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from registry_api.db.base import Base
from registry_api.models._common import new_id, utcnow

if TYPE_CHECKING:
    from registry_api.models.server import Server


class DomainMapping(Base):
    """
    Associates a server with a domain pattern.

    match_type is 'exact' (pattern equals the domain), 'wildcard' ('*' globs,
    e.g. '*.atlassian.net') or 'regex' (stored but not used by lookups).
    Lower priority values take precedence.
    """
    __tablename__ = "domain_mappings"
    __table_args__ = (
        CheckConstraint("match_type IN ('exact', 'wildcard', 'regex')", name="ck_domain_mappings_match_type"),
    )

    mapping_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    server_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("servers.server_id", ondelete="CASCADE"), nullable=False, index=True
    )

    domain_pattern: Mapped[str] = mapped_column(String(253), nullable=False, index=True)
    match_type: Mapped[str] = mapped_column(String(16), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=1, index=True)

    # e.g. {"url_patterns": [...], "page_indicators": {...}}
    context_requirements: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    # Behavior flags
    auto_suggest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    auto_install: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # e.g. [{"pattern": ..., "context": ..., "tools_filter": [...]}]
    sub_patterns: Mapped[list[Any] | None] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    server: Mapped["Server"] = relationship("Server", back_populates="domain_mappings")
