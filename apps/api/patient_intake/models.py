from sqlalchemy import Column, Integer, String, DateTime, JSON, Index
from sqlalchemy.sql import func
from .db import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(Integer, primary_key=True)
    actor = Column(String(128))
    action = Column(String(128), index=True)      # USER_CREATED | PATIENT_REGISTERED | ...
    target = Column(String(128), nullable=True)   # records-backend id
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


Index("ix_audit_action_time", AuditLog.action, AuditLog.created_at.desc())
