from collections.abc import Hashable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

State = Hashable
Symbol = Hashable

# Reserved label for empty-input moves; never a member of an alphabet.
EPSILON = "ε"


class AutomatonKind(str, Enum):
    DFA = "dfa"
    NFA = "nfa"
    EPSILON_NFA = "epsilon_nfa"


class Verdict(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Transition(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: State
    symbol: Symbol
    target: State

    @property
    def is_epsilon(self) -> bool:
        return self.symbol == EPSILON


class AutomatonSpec(BaseModel):
    """Draft automaton: declarations plus the raw transition edges.

    Domain problems (undeclared states, unreachable finals, ...) are left
    for ``validate_automaton`` to report; only the shape is checked here.
    """

    kind: AutomatonKind = AutomatonKind.NFA
    states: list[State] = Field(default_factory=list)
    alphabet: list[Symbol] = Field(default_factory=list)
    initial_state: State
    final_states: list[State] = Field(default_factory=list)
    transitions: list[Transition] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def validate_input_spec(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        for field_name in ("states", "alphabet", "final_states"):
            value = data.get(field_name)
            if isinstance(value, (set, frozenset)):
                data = {**data, field_name: list(value)}
        return data


class RunResult(BaseModel):
    verdict: Verdict
    final_states: frozenset[State] = Field(
        default_factory=frozenset,
        description="Run state after the last consumed symbol",
    )
    symbols_consumed: int = Field(ge=0)

    @property
    def accepted(self) -> bool:
        return self.verdict == Verdict.ACCEPTED
