"""nfa: nondeterministic simulation, epsilon closure and determinization."""

from fsaengine.nfa.closure import closure_over, epsilon_closure
from fsaengine.nfa.determinize import (
    canonical_subset,
    determinize,
    determinize_spec,
)
from fsaengine.nfa.eval import (
    accepts_nfa,
    initial_configuration,
    run_nfa,
    step_configuration,
)

__all__ = [
    "accepts_nfa",
    "canonical_subset",
    "closure_over",
    "determinize",
    "determinize_spec",
    "epsilon_closure",
    "initial_configuration",
    "run_nfa",
    "step_configuration",
]
