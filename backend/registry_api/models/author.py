"""Author model for server publishers."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from registry_api.db.base import Base
from registry_api.models._common import new_id, utcnow

if TYPE_CHECKING:
    from registry_api.models.server import Server


class Author(Base):
    """
    Publisher of one or more MCP servers.

    Attributes:
        author_id: Primary key
        name: Display name of the publisher
        url: Homepage of the publisher
        verified: Whether the publisher identity has been checked
    """
    __tablename__ = "authors"

    author_id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str | None] = mapped_column(String(512))
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    servers: Mapped[list["Server"]] = relationship("Server", back_populates="author")

    def __repr__(self) -> str:
        return f"<Author(author_id={self.author_id}, name={self.name})>"
