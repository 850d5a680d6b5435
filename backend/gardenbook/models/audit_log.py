"""Audit log model for tracking changes."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from gardenbook.database import Base


class AuditLog(Base):
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    entity_type = Column(String(20), nullable=False)  # 'plant', 'fish' or 'category'
    entity_id = Column(Integer, nullable=False, index=True)
    action = Column(String(30), nullable=False)  # 'CREATE', 'UPDATE', 'DELETE', 'REGENERATE_SCAN_CODE'
    diff_json = Column(JSON, nullable=False)  # {before: {...}, after: {...}}

    # Relationships
    user = relationship("User")
