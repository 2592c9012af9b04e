from collections import defaultdict, deque
from collections.abc import Iterable
from typing import Any

from fsaengine.core.models import State, Symbol, Transition

TransitionTable = dict[tuple[State, Symbol], frozenset[State]]
EpsilonTable = dict[State, frozenset[State]]
Adjacency = dict[State, list[State]]


def _safe_repr(value: Any) -> str:
    try:
        rep = repr(value)
    except Exception as exc:  # pragma: no cover
        return f"<repr_error:{type(exc).__name__}>"
    if not isinstance(rep, str):
        return f"<non_str_repr:{type(rep).__name__}>"
    return rep


def canonical_sort_key(value: Any) -> tuple[str, str, int | float, str]:
    typ = type(value)
    # Numbers of one type order by value so that 2 sorts before 10.
    number = value if typ in (int, float) else 0
    return (typ.__module__, typ.__qualname__, number, _safe_repr(value))


def canonical_order(values: Iterable[Any]) -> list[Any]:
    """Sort hashable values deterministically, even across mixed types."""
    return sorted(values, key=canonical_sort_key)


def build_tables(
    transitions: Iterable[Transition],
) -> tuple[TransitionTable, EpsilonTable]:
    symbol_targets: dict[tuple[State, Symbol], set[State]] = defaultdict(set)
    epsilon_targets: dict[State, set[State]] = defaultdict(set)

    for transition in transitions:
        if transition.is_epsilon:
            epsilon_targets[transition.source].add(transition.target)
        else:
            key = (transition.source, transition.symbol)
            symbol_targets[key].add(transition.target)

    table: TransitionTable = {
        key: frozenset(targets) for key, targets in symbol_targets.items()
    }
    epsilon_table: EpsilonTable = {
        state: frozenset(targets) for state, targets in epsilon_targets.items()
    }
    return table, epsilon_table


def build_adjacency(
    table: TransitionTable,
    epsilon_table: EpsilonTable,
) -> Adjacency:
    adjacency: dict[State, set[State]] = defaultdict(set)
    for (source, _), targets in table.items():
        adjacency[source].update(targets)
    for source, targets in epsilon_table.items():
        adjacency[source].update(targets)
    return {
        state: canonical_order(neighbors)
        for state, neighbors in adjacency.items()
    }


def reachable_from(adjacency: Adjacency, start: State) -> set[State]:
    visited = {start}
    queue: deque[State] = deque([start])

    while queue:
        node = queue.popleft()
        for neighbor in adjacency.get(node, ()):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            queue.append(neighbor)

    return visited
