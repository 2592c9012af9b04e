from collections.abc import Iterable

from fsaengine.core.models import (
    EPSILON,
    AutomatonKind,
    AutomatonSpec,
    State,
    Symbol,
    Transition,
)


class AutomatonBuildError(ValueError):
    """Raised when a draft cannot be assembled (e.g. no initial state)."""


class AutomatonBuilder:
    """Chainable construction of an ``AutomatonSpec`` draft.

    With ``infer_declarations=True`` every state and symbol referenced by
    ``set_initial``, ``add_final`` or ``add_transition`` is declared on the
    fly; otherwise references are recorded as given and left for the
    validator to check.
    """

    def __init__(
        self,
        kind: AutomatonKind = AutomatonKind.NFA,
        *,
        infer_declarations: bool = False,
    ) -> None:
        self.kind = AutomatonKind(kind)
        self.infer_declarations = infer_declarations
        self._states: dict[State, None] = {}
        self._alphabet: dict[Symbol, None] = {}
        self._initial: State | None = None
        self._has_initial = False
        self._finals: dict[State, None] = {}
        self._transitions: dict[Transition, None] = {}

    def add_state(self, state: State) -> "AutomatonBuilder":
        self._states[state] = None
        return self

    def add_states(self, states: Iterable[State]) -> "AutomatonBuilder":
        for state in states:
            self.add_state(state)
        return self

    def add_symbol(self, symbol: Symbol) -> "AutomatonBuilder":
        self._alphabet[symbol] = None
        return self

    def add_symbols(self, symbols: Iterable[Symbol]) -> "AutomatonBuilder":
        for symbol in symbols:
            self.add_symbol(symbol)
        return self

    def set_initial(self, state: State) -> "AutomatonBuilder":
        self._initial = state
        self._has_initial = True
        if self.infer_declarations:
            self.add_state(state)
        return self

    def add_final(self, state: State) -> "AutomatonBuilder":
        self._finals[state] = None
        if self.infer_declarations:
            self.add_state(state)
        return self

    def add_transition(
        self, source: State, symbol: Symbol, target: State
    ) -> "AutomatonBuilder":
        if symbol == EPSILON:
            return self.add_epsilon_transition(source, target)
        self._transitions[
            Transition(source=source, symbol=symbol, target=target)
        ] = None
        if self.infer_declarations:
            self.add_state(source)
            self.add_state(target)
            self.add_symbol(symbol)
        return self

    def add_epsilon_transition(
        self, source: State, target: State
    ) -> "AutomatonBuilder":
        self.kind = AutomatonKind.EPSILON_NFA
        self._transitions[
            Transition(source=source, symbol=EPSILON, target=target)
        ] = None
        if self.infer_declarations:
            self.add_state(source)
            self.add_state(target)
        return self

    def build(self) -> AutomatonSpec:
        if not self._has_initial:
            raise AutomatonBuildError("Missing initial state")
        return AutomatonSpec(
            kind=self.kind,
            states=list(self._states),
            alphabet=list(self._alphabet),
            initial_state=self._initial,
            final_states=list(self._finals),
            transitions=list(self._transitions),
        )
