"""Audit trail of security-relevant actions."""
from siwesecure import db
from siwesecure.models.base import BaseModel


class AuditLog(BaseModel):
    """Append-only audit event."""

    __tablename__ = 'audit_logs'
    __table_args__ = (
        db.Index('idx_audit_actor', 'actor_id', 'actor_role'),
        db.Index('idx_audit_action', 'action'),
        db.Index('idx_audit_created', 'created_at'),
    )

    actor_id = db.Column(db.Integer, nullable=True)
    actor_role = db.Column(db.String(50), nullable=True)
    action = db.Column(db.String(100), nullable=False)
    resource = db.Column(db.String(255), nullable=True)
    success = db.Column(db.Boolean, nullable=False)
    ip_address = db.Column(db.String(45), nullable=True)  # IPv6 compatible
