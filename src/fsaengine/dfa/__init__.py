"""dfa: deterministic simulation over validated automata."""

from fsaengine.dfa.eval import accepts_dfa, run_dfa

__all__ = [
    "accepts_dfa",
    "run_dfa",
]
