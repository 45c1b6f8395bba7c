"""Append-only audit trail for ledger events."""

import json

from sqlalchemy.orm import Session

from smb_ledger.models.audit_log import AuditLog


def record_event(
    db: Session, company_id: int | None, event_type: str, **details
) -> AuditLog:
    """Add an audit record to the current transaction."""
    entry = AuditLog(
        company_id=company_id,
        event_type=event_type,
        details=json.dumps(details, default=str, sort_keys=True),
    )
    db.add(entry)
    return entry
