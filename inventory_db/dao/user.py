"""User data access and audit logging."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import insert, select
from sqlalchemy.engine import RowMapping

from inventory_db.dao.base import KeyedDAO, LiveBackend, OfflineBackend, as_bool, as_int, as_text
from inventory_db.records import User, UserRole
from inventory_db.sql.models import AuditLogModel, UserModel

logger = logging.getLogger(__name__)


class UserLiveBackend(LiveBackend[User]):
    table = UserModel.__table__
    id_column = "user_id"
    unique_key = "username"

    def _map_row(self, row: RowMapping) -> User:
        return User(
            user_id=as_int(row, "user_id"),
            username=as_text(row, "username"),
            password=as_text(row, "password"),
            role=UserRole(row.get("role") or UserRole.STAFF.value),
            email=as_text(row, "email"),
            is_active=as_bool(row, "is_active"),
        )

    def _to_values(self, user: User) -> Dict[str, Any]:
        return {
            "username": user.username,
            "password": user.password,
            "role": user.role.value,
            "email": user.email,
            "is_active": user.is_active,
        }

    def _select_all(self):
        return (
            select(self.table)
            .where(self.table.c.is_active.is_(True))
            .order_by(self.table.c.username)
        )

    def get_by_username(self, username: str) -> Optional[User]:
        statement = select(self.table).where(self.table.c.username == username)
        return self._fetch_one("get_by_username", statement)

    def log_audit(
        self,
        user_id: int,
        action: str,
        table_name: str,
        record_id: Optional[int] = None,
        old_values: Optional[str] = None,
        new_values: Optional[str] = None,
    ) -> None:
        audit_log = AuditLogModel.__table__
        statement = insert(audit_log).values(
            user_id=user_id,
            action=action,
            table_name=table_name,
            record_id=record_id,
            old_values=old_values,
            new_values=new_values,
        )
        self._rowcount("log_audit", statement, table=audit_log)
        logger.debug("Audit: user %s %s on %s row %s", user_id, action, table_name, record_id)


class UserOfflineBackend(OfflineBackend[User]):
    table = UserModel.__table__
    id_column = "user_id"

    def _placeholder(self, user_id: int) -> User:
        return User(
            user_id=user_id,
            username="testuser",
            password="pwd",
            role=UserRole.STAFF,
            email="test@example.com",
            is_active=True,
        )

    def get_by_username(self, username: str) -> Optional[User]:
        return None

    def log_audit(self, user_id, action, table_name, record_id=None, old_values=None, new_values=None) -> None:
        logger.debug("Offline: audit entry for user %s dropped", user_id)


class UserDAO(KeyedDAO[User]):
    """Till users, listed by username (active only). The business key is the username.

    Passwords are stored exactly as given; hashing is up to the caller.
    """

    live_backend = UserLiveBackend
    offline_backend = UserOfflineBackend

    def get_by_username(self, username: str) -> Optional[User]:
        """Look a user up by login name, active or not. None offline."""
        return self._backend.get_by_username(username)

    def log_audit(
        self,
        user_id: int,
        action: str,
        table_name: str,
        record_id: Optional[int] = None,
        old_values: Optional[str] = None,
        new_values: Optional[str] = None,
    ) -> None:
        """Append an entry to the audit log. Does nothing offline.

        Args:
            user_id: Acting user
            action: What was done, e.g. "update"
            table_name: Affected table
            record_id: Affected row, if any
            old_values: Serialized values before the change
            new_values: Serialized values after the change
        """
        self._backend.log_audit(user_id, action, table_name, record_id, old_values, new_values)
