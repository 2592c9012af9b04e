from collections.abc import Iterable

from fsaengine.core.models import RunResult, State, Symbol, Verdict
from fsaengine.core.trace import TraceStep, trace_step
from fsaengine.nfa.closure import closure_over
from fsaengine.validate import ValidatedAutomaton


def _require_validated(automaton: object) -> ValidatedAutomaton:
    if not isinstance(automaton, ValidatedAutomaton):
        raise TypeError(
            "run_nfa requires a ValidatedAutomaton, got "
            f"{type(automaton).__name__}; call validate_automaton() first"
        )
    return automaton


def initial_configuration(automaton: ValidatedAutomaton) -> frozenset[State]:
    return closure_over(
        automaton.epsilon_transitions, (automaton.initial_state,)
    )


def step_configuration(
    automaton: ValidatedAutomaton,
    configuration: Iterable[State],
    symbol: Symbol,
) -> frozenset[State]:
    successors: set[State] = set()
    for state in configuration:
        successors.update(automaton.successors(state, symbol))
    return closure_over(automaton.epsilon_transitions, successors)


def run_nfa(
    automaton: ValidatedAutomaton,
    symbols: Iterable[Symbol],
    trace: list[TraceStep] | None = None,
) -> RunResult:
    automaton = _require_validated(automaton)
    configuration = initial_configuration(automaton)
    consumed = 0

    for symbol in symbols:
        next_configuration = step_configuration(
            automaton, configuration, symbol
        )
        trace_step(
            trace,
            "consume",
            f"{symbol!r}: {len(configuration)} -> "
            f"{len(next_configuration)} state(s)",
            sorted(map(repr, next_configuration)),
        )
        if not next_configuration:
            # No branch survives; the remaining input cannot change that.
            return RunResult(
                verdict=Verdict.REJECTED,
                final_states=frozenset(),
                symbols_consumed=consumed,
            )
        configuration = next_configuration
        consumed += 1

    accepted = not configuration.isdisjoint(automaton.final_states)
    return RunResult(
        verdict=Verdict.ACCEPTED if accepted else Verdict.REJECTED,
        final_states=configuration,
        symbols_consumed=consumed,
    )


def accepts_nfa(
    automaton: ValidatedAutomaton, symbols: Iterable[Symbol]
) -> bool:
    return run_nfa(automaton, symbols).accepted
