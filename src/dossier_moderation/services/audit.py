"""Append-only audit log of administrative actions."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dossier_moderation.core.security import AuthContext, require_admin
from dossier_moderation.models import AdminAction

logger = logging.getLogger(__name__)


class AuditLog:
    """Writes and reads ``AdminAction`` rows.

    Writes are best effort: callers record an action only after their primary
    mutation has been committed, and a failing write is logged rather than
    raised so it can never unwind that mutation.
    """

    @staticmethod
    def record(
        db: Session,
        *,
        admin_id: str | None,
        action_type: str,
        target_type: str,
        target_id: str,
        reason: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> AdminAction | None:
        """Append an audit entry and commit it.

        Args:
            db: Database session whose primary work is already committed
            admin_id: Acting admin; nothing is written without one
            action_type: One of the ``ACTION_*`` constants
            target_type: One of the ``TARGET_*`` constants
            target_id: Identifier of the affected comment, keyword or user
            reason: Optional admin note
            metadata: JSON snapshot of the relevant before-state

        Returns:
            The persisted entry, or None if nothing was written.
        """
        if not admin_id:
            return None

        entry = AdminAction(
            admin_id=admin_id,
            action_type=action_type,
            target_type=target_type,
            target_id=target_id,
            reason=reason or None,
            metadata_=metadata,
        )
        try:
            db.add(entry)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(
                "Failed to write audit entry %s for %s %s", action_type, target_type, target_id
            )
            return None
        return entry

    @staticmethod
    def list_actions(
        db: Session,
        auth: AuthContext,
        *,
        limit: int = 100,
        action_type: str | None = None,
    ) -> list[AdminAction]:
        """Return audit entries, newest first. Admin only."""
        require_admin(auth, "view the audit log")
        query = db.query(AdminAction)
        if action_type:
            query = query.filter(AdminAction.action_type == action_type)
        return query.order_by(AdminAction.created_at.desc()).limit(limit).all()
