from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    CONFIGURATION = "configuration"
    DEPLOYER = "deployer"
    TRANSLATIONS = "translations"
    DEFERRED_OPERATIONS = "deferred operations"
    RUNTIME_CONFIG = "runtime configuration"


@dataclass(frozen=True)
class StageResult:
    """Outcome of a deployment stage: success, or an error kind with a message."""

    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> "StageResult":
        return cls()

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "StageResult":
        return cls(error, message)
