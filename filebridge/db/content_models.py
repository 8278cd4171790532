"""
FileBridge Content Models — platform file storage tables.

Tables:
1. users                   — file owners (display name lookup)
2. content_documents       — one row per logical file
3. content_versions        — every uploaded version; the document points at its
                             latest published version
4. content_document_links  — links a document to any record (polymorphic
                             linked_entity_id)

A file may be linked to many records; each link is one row in
content_document_links.
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from filebridge.db.base import Base, TimestampMixin

# Key prefixes for platform-owned types
USER_KEY_PREFIX = "005"
CONTENT_DOCUMENT_KEY_PREFIX = "069"
CONTENT_VERSION_KEY_PREFIX = "068"
CONTENT_DOCUMENT_LINK_KEY_PREFIX = "06A"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String(18), primary_key=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', username='{self.username}')>"


class ContentDocument(Base, TimestampMixin):
    __tablename__ = "content_documents"

    id = Column(String(18), primary_key=True)
    title = Column(String(255), nullable=False)
    owner_id = Column(String(18), ForeignKey("users.id"), nullable=True)
    latest_published_version_id = Column(
        String(18),
        ForeignKey("content_versions.id", use_alter=True, name="fk_document_latest_version"),
        nullable=True,
    )
    is_deleted = Column(Boolean, default=False, nullable=False)

    latest_published_version = relationship(
        "ContentVersion",
        foreign_keys=[latest_published_version_id],
        post_update=True,
    )
    links = relationship("ContentDocumentLink", back_populates="document")

    def __repr__(self) -> str:
        return f"<ContentDocument(id='{self.id}', title='{self.title}')>"


class ContentVersion(Base, TimestampMixin):
    __tablename__ = "content_versions"

    id = Column(String(18), primary_key=True)
    content_document_id = Column(String(18), ForeignKey("content_documents.id"), nullable=False)
    title = Column(String(255), nullable=False)
    version_number = Column(Integer, default=1, nullable=False)
    content_size = Column(BigInteger, default=0, nullable=False)
    path_on_client = Column(String(500), nullable=True)
    file_extension = Column(String(40), nullable=True)
    file_type = Column(String(40), nullable=True)
    owner_id = Column(String(18), ForeignKey("users.id"), nullable=True)
    is_latest = Column(Boolean, default=True, nullable=False)

    owner = relationship("User", foreign_keys=[owner_id])

    __table_args__ = (
        Index("idx_cv_document_id", "content_document_id"),
    )

    def __repr__(self) -> str:
        return f"<ContentVersion(id='{self.id}', document='{self.content_document_id}', v={self.version_number})>"


class ContentDocumentLink(Base):
    __tablename__ = "content_document_links"

    id = Column(String(18), primary_key=True)
    content_document_id = Column(String(18), ForeignKey("content_documents.id"), nullable=False)
    linked_entity_id = Column(String(18), nullable=False)
    share_type = Column(String(1), default="V", nullable=False)
    visibility = Column(String(20), default="AllUsers", nullable=False)

    document = relationship("ContentDocument", back_populates="links")

    __table_args__ = (
        UniqueConstraint("content_document_id", "linked_entity_id", name="uq_document_entity"),
        Index("idx_cdl_linked_entity_id", "linked_entity_id"),
    )

    def __repr__(self) -> str:
        return f"<ContentDocumentLink(document='{self.content_document_id}', entity='{self.linked_entity_id}')>"
