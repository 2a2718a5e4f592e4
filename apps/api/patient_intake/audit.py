import logging

from .models import AuditLog

logger = logging.getLogger("api")

def audit_safe(db, action: str, actor: str, target: str | None = None, details: dict | None = None) -> bool:
    """
    Best-effort audit insert. Returns True when the row was written.
    Never raises: an audit failure must not undo a submission the records
    backend already accepted.
    """
    try:
        db.add(AuditLog(actor=actor, action=action, target=target, details=details or {}))
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        logger.warning("audit insert failed (non-fatal): %s", e)
        return False
