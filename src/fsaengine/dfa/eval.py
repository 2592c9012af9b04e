from collections.abc import Iterable

from fsaengine.core.models import AutomatonKind, RunResult, Symbol, Verdict
from fsaengine.core.trace import TraceStep, trace_step
from fsaengine.validate import ValidatedAutomaton


def _require_dfa(automaton: object) -> ValidatedAutomaton:
    if not isinstance(automaton, ValidatedAutomaton):
        raise TypeError(
            "run_dfa requires a ValidatedAutomaton, got "
            f"{type(automaton).__name__}; call validate_automaton() first"
        )
    if automaton.kind != AutomatonKind.DFA:
        raise ValueError(
            f"run_dfa requires kind '{AutomatonKind.DFA.value}', got "
            f"'{automaton.kind.value}'; use run_nfa or determinize()"
        )
    return automaton


def run_dfa(
    automaton: ValidatedAutomaton,
    symbols: Iterable[Symbol],
    trace: list[TraceStep] | None = None,
) -> RunResult:
    automaton = _require_dfa(automaton)
    current = automaton.initial_state
    consumed = 0

    for symbol in symbols:
        targets = automaton.successors(current, symbol)
        if not targets:
            trace_step(
                trace,
                "stuck",
                f"No transition from {current!r} on {symbol!r}",
                None,
            )
            return RunResult(
                verdict=Verdict.REJECTED,
                final_states=frozenset(),
                symbols_consumed=consumed,
            )
        (target,) = targets
        trace_step(
            trace,
            "consume",
            f"{current!r} --{symbol!r}--> {target!r}",
            target,
        )
        current = target
        consumed += 1

    accepted = current in automaton.final_states
    return RunResult(
        verdict=Verdict.ACCEPTED if accepted else Verdict.REJECTED,
        final_states=frozenset({current}),
        symbols_consumed=consumed,
    )


def accepts_dfa(
    automaton: ValidatedAutomaton, symbols: Iterable[Symbol]
) -> bool:
    return run_dfa(automaton, symbols).accepted
