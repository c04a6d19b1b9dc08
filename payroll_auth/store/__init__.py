from .backend import (
    InMemoryLoginAuditLog,
    InMemoryUserStore,
    LoginAttempt,
    LoginAttemptQuery,
    LoginAuditLog,
    UserRecord,
    UserStore,
)
from .sql import SQLLoginAuditLog, SQLUserStore, create_db_engine

__all__ = [
    "InMemoryLoginAuditLog",
    "InMemoryUserStore",
    "LoginAttempt",
    "LoginAttemptQuery",
    "LoginAuditLog",
    "UserRecord",
    "UserStore",
    "SQLLoginAuditLog",
    "SQLUserStore",
    "create_db_engine",
]
