from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Issue(BaseModel):
    code: str = Field(description="Issue code, e.g. UNDECLARED_REFERENCE")
    severity: Severity = Field(description="Error or warning")
    message: str = Field(description="Human-readable description")
    location: str = Field(description="Path to issue, e.g. transitions[3]")
    automaton_id: str | None = Field(
        default=None, description="Automaton ID for aggregated diagnostics"
    )
    state: Any = Field(
        default=None, description="Offending state, when there is one"
    )
    symbol: Any = Field(
        default=None, description="Offending symbol, when there is one"
    )
