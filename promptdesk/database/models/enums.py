"""
Enumerations stored as plain strings in the database.
"""
from enum import Enum


class PromptType(str, Enum):
    TEXT = "TEXT"
    CODE = "CODE"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    CUSTOM = "CUSTOM"


class Language(str, Enum):
    EN = "EN"
    FA = "FA"


class ExecutionStatus(str, Enum):
    """
    Lifecycle of an execution record.

    Only RUNNING, SUCCESS and FAILED are produced today. PENDING, CANCELLED and
    TIMEOUT are reserved for executions that run outside the request.
    """
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    TIMEOUT = "TIMEOUT"
