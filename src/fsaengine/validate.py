import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from fsaengine.core.graph import (
    EpsilonTable,
    TransitionTable,
    build_adjacency,
    build_tables,
    canonical_order,
    reachable_from,
)
from fsaengine.core.identity import automaton_id_from_spec
from fsaengine.core.models import (
    EPSILON,
    AutomatonKind,
    AutomatonSpec,
    State,
    Symbol,
)
from fsaengine.core.validate import Issue, Severity

logger = logging.getLogger(__name__)

CODE_SPEC_DESERIALIZE_ERROR = "SPEC_DESERIALIZE_ERROR"
CODE_RESERVED_SYMBOL = "RESERVED_SYMBOL"
CODE_UNDECLARED_REFERENCE = "UNDECLARED_REFERENCE"
CODE_UNREACHABLE_STATE = "UNREACHABLE_STATE"
CODE_NO_FINAL_STATE_REACHABLE = "NO_FINAL_STATE_REACHABLE"
CODE_UNREACHABLE_FINAL_STATE = "UNREACHABLE_FINAL_STATE"
CODE_NON_DETERMINISTIC_TRANSITION = "NON_DETERMINISTIC_TRANSITION"

_spec_adapter = TypeAdapter(AutomatonSpec)
_VALIDATION_TOKEN = object()


class AutomatonValidationError(ValueError):
    """Raised by ``ValidationResult.unwrap`` when validation failed."""

    def __init__(self, issues: list[Issue]) -> None:
        self.issues = issues
        errors = [i for i in issues if i.severity == Severity.ERROR]
        summary = "; ".join(f"{i.code}: {i.message}" for i in errors[:3])
        if len(errors) > 3:
            summary += f"; ... ({len(errors) - 3} more)"
        super().__init__(f"Automaton failed validation: {summary}")


class ValidatedAutomaton:
    """Immutable automaton whose structure has passed validation.

    Instances are only produced by ``validate_automaton``. Engines accept
    nothing else, so simulation never runs over an unchecked table.
    """

    __slots__ = (
        "_spec",
        "_kind",
        "_states",
        "_alphabet",
        "_initial_state",
        "_final_states",
        "_transitions",
        "_epsilon_transitions",
        "_automaton_id",
        "_issues",
    )

    def __init__(
        self,
        spec: AutomatonSpec,
        transitions: TransitionTable,
        epsilon_transitions: EpsilonTable,
        automaton_id: str,
        issues: list[Issue],
        *,
        _token: object = None,
    ) -> None:
        if _token is not _VALIDATION_TOKEN:
            raise TypeError(
                "ValidatedAutomaton instances are produced by "
                "validate_automaton()"
            )
        self._spec = spec.model_copy(deep=True)
        self._kind = spec.kind
        self._states = frozenset(spec.states)
        self._alphabet = frozenset(spec.alphabet)
        self._initial_state = spec.initial_state
        self._final_states = frozenset(spec.final_states)
        self._transitions = MappingProxyType(dict(transitions))
        self._epsilon_transitions = MappingProxyType(dict(epsilon_transitions))
        self._automaton_id = automaton_id
        self._issues = tuple(issues)

    def __repr__(self) -> str:
        return (
            f"ValidatedAutomaton(id={self._automaton_id!r}, "
            f"kind={self._kind.value!r}, states={len(self._states)}, "
            f"alphabet={len(self._alphabet)})"
        )

    @property
    def spec(self) -> AutomatonSpec:
        return self._spec.model_copy(deep=True)

    @property
    def kind(self) -> AutomatonKind:
        return self._kind

    @property
    def states(self) -> frozenset[State]:
        return self._states

    @property
    def alphabet(self) -> frozenset[Symbol]:
        return self._alphabet

    @property
    def initial_state(self) -> State:
        return self._initial_state

    @property
    def final_states(self) -> frozenset[State]:
        return self._final_states

    @property
    def transitions(self) -> Mapping[tuple[State, Symbol], frozenset[State]]:
        return self._transitions

    @property
    def epsilon_transitions(self) -> Mapping[State, frozenset[State]]:
        return self._epsilon_transitions

    @property
    def has_epsilon(self) -> bool:
        return bool(self._epsilon_transitions)

    @property
    def automaton_id(self) -> str:
        return self._automaton_id

    @property
    def issues(self) -> tuple[Issue, ...]:
        return self._issues

    def successors(self, state: State, symbol: Symbol) -> frozenset[State]:
        return self._transitions.get((state, symbol), frozenset())

    def epsilon_successors(self, state: State) -> frozenset[State]:
        return self._epsilon_transitions.get(state, frozenset())


class ValidationResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    issues: list[Issue] = Field(default_factory=list)
    automaton: ValidatedAutomaton | None = None

    @property
    def ok(self) -> bool:
        return self.automaton is not None

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    def codes(self) -> set[str]:
        return {i.code for i in self.issues}

    def unwrap(self) -> ValidatedAutomaton:
        if self.automaton is None:
            raise AutomatonValidationError(self.issues)
        return self.automaton


def _validate_spec_deserialize(
    data: AutomatonSpec | dict[str, Any],
) -> tuple[list[Issue], AutomatonSpec | None]:
    if isinstance(data, AutomatonSpec):
        return [], data
    try:
        return [], _spec_adapter.validate_python(data)
    except ValidationError as e:
        return [
            Issue(
                code=CODE_SPEC_DESERIALIZE_ERROR,
                severity=Severity.ERROR,
                message=f"Failed to deserialize automaton spec: {e}",
                location="spec",
            )
        ], None


def _validate_reserved_symbol(
    spec: AutomatonSpec, automaton_id: str
) -> list[Issue]:
    issues: list[Issue] = []
    for i, symbol in enumerate(spec.alphabet):
        if symbol != EPSILON:
            continue
        issues.append(
            Issue(
                code=CODE_RESERVED_SYMBOL,
                severity=Severity.ERROR,
                message=(
                    f"Alphabet must not contain the epsilon marker {EPSILON!r}"
                ),
                location=f"alphabet[{i}]",
                automaton_id=automaton_id,
                symbol=symbol,
            )
        )
    return issues


def _undeclared_state(
    state: State, location: str, automaton_id: str
) -> Issue:
    return Issue(
        code=CODE_UNDECLARED_REFERENCE,
        severity=Severity.ERROR,
        message=f"State {state!r} is not declared in states",
        location=location,
        automaton_id=automaton_id,
        state=state,
    )


def _validate_domain(spec: AutomatonSpec, automaton_id: str) -> list[Issue]:
    issues: list[Issue] = []
    state_set = set(spec.states)
    alphabet_set = set(spec.alphabet)

    if spec.initial_state not in state_set:
        issues.append(
            _undeclared_state(
                spec.initial_state, "initial_state", automaton_id
            )
        )

    for i, state in enumerate(spec.final_states):
        if state not in state_set:
            issues.append(
                _undeclared_state(state, f"final_states[{i}]", automaton_id)
            )

    for i, transition in enumerate(spec.transitions):
        if transition.source not in state_set:
            issues.append(
                _undeclared_state(
                    transition.source,
                    f"transitions[{i}].source",
                    automaton_id,
                )
            )
        if transition.target not in state_set:
            issues.append(
                _undeclared_state(
                    transition.target,
                    f"transitions[{i}].target",
                    automaton_id,
                )
            )

        if transition.is_epsilon:
            if spec.kind == AutomatonKind.EPSILON_NFA:
                continue
            message = (
                "Epsilon transitions are only allowed for kind "
                f"'{AutomatonKind.EPSILON_NFA.value}', got '{spec.kind.value}'"
            )
        elif transition.symbol not in alphabet_set:
            message = (
                f"Symbol {transition.symbol!r} is not declared in alphabet"
            )
        else:
            continue
        issues.append(
            Issue(
                code=CODE_UNDECLARED_REFERENCE,
                severity=Severity.ERROR,
                message=message,
                location=f"transitions[{i}].symbol",
                automaton_id=automaton_id,
                state=transition.source,
                symbol=transition.symbol,
            )
        )

    return issues


def _live_states(
    spec: AutomatonSpec,
    transitions: TransitionTable,
    epsilon_transitions: EpsilonTable,
) -> set[State] | None:
    # None when the initial state is undeclared; reachability is skipped.
    state_set = set(spec.states)
    if spec.initial_state not in state_set:
        return None
    adjacency = build_adjacency(transitions, epsilon_transitions)
    # Undeclared endpoints were already reported; keep the live set in-domain.
    return reachable_from(adjacency, spec.initial_state) & state_set


def _validate_reachability(
    spec: AutomatonSpec,
    live: set[State],
    automaton_id: str,
    strict: bool,
) -> list[Issue]:
    issues: list[Issue] = []
    severity = Severity.ERROR if strict else Severity.WARNING
    final_set = set(spec.final_states)

    for i, state in enumerate(spec.states):
        if state in live or state in final_set:
            continue
        issues.append(
            Issue(
                code=CODE_UNREACHABLE_STATE,
                severity=severity,
                message=(
                    f"State {state!r} is not reachable from initial state "
                    f"{spec.initial_state!r}"
                ),
                location=f"states[{i}]",
                automaton_id=automaton_id,
                state=state,
            )
        )

    return issues


def _validate_final_reachability(
    spec: AutomatonSpec,
    live: set[State],
    automaton_id: str,
    strict: bool,
) -> list[Issue]:
    severity = Severity.ERROR if strict else Severity.WARNING

    if not any(state in live for state in spec.final_states):
        if spec.final_states:
            message = (
                "No final state is reachable from initial state "
                f"{spec.initial_state!r}; the automaton accepts nothing"
            )
        else:
            message = "No final states declared; the automaton accepts nothing"
        return [
            Issue(
                code=CODE_NO_FINAL_STATE_REACHABLE,
                severity=severity,
                message=message,
                location="final_states",
                automaton_id=automaton_id,
            )
        ]

    issues: list[Issue] = []
    state_set = set(spec.states)
    for i, state in enumerate(spec.final_states):
        # Undeclared finals are already UNDECLARED_REFERENCE errors.
        if state in live or state not in state_set:
            continue
        issues.append(
            Issue(
                code=CODE_UNREACHABLE_FINAL_STATE,
                severity=severity,
                message=(
                    f"Final state {state!r} is not reachable from initial "
                    f"state {spec.initial_state!r}"
                ),
                location=f"final_states[{i}]",
                automaton_id=automaton_id,
                state=state,
            )
        )
    return issues


def _validate_determinism(
    spec: AutomatonSpec,
    transitions: TransitionTable,
    automaton_id: str,
) -> list[Issue]:
    issues: list[Issue] = []
    first_index: dict[tuple[State, Any], int] = {}
    for i, transition in enumerate(spec.transitions):
        first_index.setdefault((transition.source, transition.symbol), i)

    for (state, symbol), targets in transitions.items():
        if len(targets) <= 1:
            continue
        index = first_index[(state, symbol)]
        issues.append(
            Issue(
                code=CODE_NON_DETERMINISTIC_TRANSITION,
                severity=Severity.ERROR,
                message=(
                    f"Transition ({state!r}, {symbol!r}) has "
                    f"{len(targets)} targets: {canonical_order(targets)!r}"
                ),
                location=f"transitions[{index}]",
                automaton_id=automaton_id,
                state=state,
                symbol=symbol,
            )
        )

    return issues


def _truncate_at_first_error(issues: list[Issue]) -> list[Issue]:
    for i, issue in enumerate(issues):
        if issue.severity == Severity.ERROR:
            return issues[: i + 1]
    return issues


def validate_automaton(
    spec: AutomatonSpec | dict[str, Any],
    *,
    kind: AutomatonKind | None = None,
    strict: bool = False,
    fail_fast: bool = False,
) -> ValidationResult:
    issues, parsed = _validate_spec_deserialize(spec)
    if parsed is None:
        return ValidationResult(issues=issues)

    if kind is not None and AutomatonKind(kind) != parsed.kind:
        parsed = parsed.model_copy(update={"kind": AutomatonKind(kind)})

    automaton_id = automaton_id_from_spec(
        parsed.kind.value, parsed.model_dump()
    )
    transitions, epsilon_transitions = build_tables(parsed.transitions)

    def _has_error() -> bool:
        return fail_fast and any(i.severity == Severity.ERROR for i in issues)

    live = _live_states(parsed, transitions, epsilon_transitions)
    stages = (
        lambda: _validate_reserved_symbol(parsed, automaton_id),
        lambda: _validate_domain(parsed, automaton_id),
        lambda: (
            _validate_reachability(parsed, live, automaton_id, strict)
            if live is not None
            else []
        ),
        lambda: (
            _validate_final_reachability(parsed, live, automaton_id, strict)
            if live is not None
            else []
        ),
        lambda: (
            _validate_determinism(parsed, transitions, automaton_id)
            if parsed.kind == AutomatonKind.DFA
            else []
        ),
    )
    for stage in stages:
        issues.extend(stage())
        if _has_error():
            issues = _truncate_at_first_error(issues)
            break

    automaton = None
    if not any(i.severity == Severity.ERROR for i in issues):
        automaton = ValidatedAutomaton(
            parsed,
            transitions,
            epsilon_transitions,
            automaton_id,
            issues,
            _token=_VALIDATION_TOKEN,
        )

    logger.debug(
        "validated %s: %d issue(s), ok=%s",
        automaton_id,
        len(issues),
        automaton is not None,
    )
    return ValidationResult(issues=issues, automaton=automaton)
