from collections import deque
from collections.abc import Iterable, Mapping

from fsaengine.core.models import State
from fsaengine.validate import ValidatedAutomaton


def closure_over(
    epsilon_table: Mapping[State, frozenset[State]],
    states: Iterable[State],
) -> frozenset[State]:
    visited = set(states)
    if not epsilon_table:
        return frozenset(visited)

    queue: deque[State] = deque(visited)
    while queue:
        state = queue.popleft()
        for neighbor in epsilon_table.get(state, ()):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            queue.append(neighbor)

    return frozenset(visited)


def epsilon_closure(
    automaton: ValidatedAutomaton,
    states: Iterable[State],
) -> frozenset[State]:
    """States reachable from ``states`` using only epsilon moves.

    Reflexive, so every input state is part of the result. Cyclic epsilon
    edges are fine; each state is expanded at most once.
    """
    if not isinstance(automaton, ValidatedAutomaton):
        raise TypeError(
            "epsilon_closure requires a ValidatedAutomaton, got "
            f"{type(automaton).__name__}"
        )
    return closure_over(automaton.epsilon_transitions, states)
