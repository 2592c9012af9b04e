import logging
from collections import deque
from collections.abc import Iterable
from typing import Any

from fsaengine.core.graph import canonical_order
from fsaengine.core.models import (
    AutomatonKind,
    AutomatonSpec,
    State,
    Transition,
)
from fsaengine.core.validate import Severity
from fsaengine.nfa.closure import closure_over
from fsaengine.validate import (
    ValidatedAutomaton,
    ValidationResult,
    validate_automaton,
)

logger = logging.getLogger(__name__)

Subset = tuple[State, ...]


def canonical_subset(states: Iterable[State]) -> Subset:
    """Hashable, order-stable encoding of a set of NFA states."""
    return tuple(canonical_order(set(states)))


def _subset_spec(automaton: ValidatedAutomaton) -> AutomatonSpec:
    epsilon_table = automaton.epsilon_transitions
    symbols = canonical_order(automaton.alphabet)

    start = canonical_subset(
        closure_over(epsilon_table, (automaton.initial_state,))
    )
    discovered: dict[Subset, None] = {start: None}
    finals: list[Subset] = []
    transitions: list[Transition] = []
    queue: deque[Subset] = deque([start])

    while queue:
        subset = queue.popleft()
        if not automaton.final_states.isdisjoint(subset):
            finals.append(subset)

        for symbol in symbols:
            successors: set[State] = set()
            for state in subset:
                successors.update(automaton.successors(state, symbol))
            if not successors:
                continue

            target = canonical_subset(closure_over(epsilon_table, successors))
            transitions.append(
                Transition(source=subset, symbol=symbol, target=target)
            )
            if target in discovered:
                continue
            discovered[target] = None
            queue.append(target)

    return AutomatonSpec(
        kind=AutomatonKind.DFA,
        states=list(discovered),
        alphabet=symbols,
        initial_state=start,
        final_states=finals,
        transitions=transitions,
    )


def determinize(automaton: ValidatedAutomaton) -> ValidatedAutomaton:
    """Subset construction: an equivalent DFA over tuples of NFA states.

    Each DFA state is the sorted tuple of the epsilon-closed NFA states it
    stands for. Empty subsets are not materialized, so a missing transition
    in the result rejects exactly where every NFA branch would have died.
    """
    if not isinstance(automaton, ValidatedAutomaton):
        raise TypeError(
            "determinize requires a ValidatedAutomaton, got "
            f"{type(automaton).__name__}; use determinize_spec for drafts"
        )

    spec = _subset_spec(automaton)
    result = validate_automaton(spec, strict=False)
    if result.automaton is None:
        raise RuntimeError(
            "Subset construction produced an invalid DFA for "
            f"{automaton.automaton_id}: "
            f"{[issue.code for issue in result.errors]}"
        )

    logger.debug(
        "determinized %s (%d states) into %s (%d states)",
        automaton.automaton_id,
        len(automaton.states),
        result.automaton.automaton_id,
        len(spec.states),
    )
    return result.automaton


def determinize_spec(
    spec: AutomatonSpec | dict[str, Any],
    strict: bool = False,
) -> ValidationResult:
    """Validate a draft as an NFA, then determinize it.

    A draft declared as a DFA is checked as a plain NFA, so nondeterminism
    is not an error here. Validation problems of the draft are returned
    as-is; on success the result carries the DFA plus the draft's
    non-fatal issues.
    """
    if isinstance(spec, AutomatonSpec):
        draft_kind = spec.kind
    else:
        draft_kind = spec.get("kind", AutomatonKind.NFA)
    kind = AutomatonKind.NFA if draft_kind == AutomatonKind.DFA else None

    nfa_result = validate_automaton(spec, kind=kind, strict=strict)
    if nfa_result.automaton is None:
        return nfa_result

    dfa = determinize(nfa_result.automaton)
    issues = [
        i for i in nfa_result.issues if i.severity == Severity.WARNING
    ]
    return ValidationResult(issues=issues, automaton=dfa)
