from datetime import datetime, timezone
from typing import Any
from sqlalchemy import String, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from productsearch.database import Base


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("index_name", "doc_id", name="uq_documents_index_doc"),)

    # Autoincrement id doubles as the rank order of search results
    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    index_name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    doc_id: Mapped[str] = mapped_column(String(255), nullable=False)
    source: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def to_dict(self) -> dict[str, Any]:
        return {**self.source, "id": self.doc_id}
