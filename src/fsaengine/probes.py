import random
from collections import deque
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field

from fsaengine.core.graph import canonical_order
from fsaengine.core.models import State, Symbol, Verdict
from fsaengine.nfa.eval import (
    initial_configuration,
    run_nfa,
    step_configuration,
)
from fsaengine.validate import ValidatedAutomaton

Word = tuple[Symbol, ...]


class ProbeTag(str, Enum):
    TYPICAL = "typical"
    BOUNDARY = "boundary"
    COVERAGE = "coverage"
    ADVERSARIAL = "adversarial"


class Probe(BaseModel):
    word: Word = Field(description="Input symbol sequence")
    verdict: Verdict = Field(description="Expected verdict for the word")
    tag: ProbeTag = Field(description="Probe category for analysis")


def shortest_accepted_word(automaton: ValidatedAutomaton) -> Word | None:
    """Breadth-first search over configurations; ``None`` if nothing is
    accepted."""
    symbols = canonical_order(automaton.alphabet)
    start = initial_configuration(automaton)
    seen: set[frozenset[State]] = {start}
    queue: deque[tuple[frozenset[State], Word]] = deque([(start, ())])

    while queue:
        configuration, word = queue.popleft()
        if not configuration.isdisjoint(automaton.final_states):
            return word
        for symbol in symbols:
            following = step_configuration(automaton, configuration, symbol)
            if not following or following in seen:
                continue
            seen.add(following)
            queue.append((following, word + (symbol,)))

    return None


def _dead_symbol(
    automaton: ValidatedAutomaton, word: Word
) -> Symbol | None:
    """A symbol on which every branch dies after ``word``, if any."""
    configuration = initial_configuration(automaton)
    for symbol in word:
        configuration = step_configuration(automaton, configuration, symbol)
    for symbol in canonical_order(automaton.alphabet):
        if not step_configuration(automaton, configuration, symbol):
            return symbol
    return None


def generate_probes(
    automaton: ValidatedAutomaton,
    rng: random.Random | None = None,
    max_length: int = 6,
    n_typical: int = 8,
) -> list[Probe]:
    if rng is None:
        rng = random.Random()  # noqa: S311
    if max_length < 0:
        raise ValueError(f"max_length must be >= 0, got {max_length}")

    symbols = canonical_order(automaton.alphabet)
    probes: list[Probe] = []
    seen: set[tuple[ProbeTag, Word]] = set()

    def _append_probe(word: Word, tag: ProbeTag) -> bool:
        key = (tag, word)
        if key in seen:
            return False
        seen.add(key)
        probes.append(
            Probe(word=word, verdict=run_nfa(automaton, word).verdict, tag=tag)
        )
        return True

    _append_probe((), ProbeTag.COVERAGE)
    for symbol in symbols:
        _append_probe((symbol,), ProbeTag.COVERAGE)

    shortest = shortest_accepted_word(automaton)
    if shortest is not None:
        _append_probe(shortest, ProbeTag.BOUNDARY)
        if symbols:
            _append_probe(shortest + (symbols[-1],), ProbeTag.BOUNDARY)

    if symbols:
        for _ in range(n_typical):
            length = rng.randint(0, max_length)
            word = tuple(rng.choice(symbols) for _ in range(length))
            _append_probe(word, ProbeTag.TYPICAL)

    prefix = shortest if shortest is not None else ()
    dead = _dead_symbol(automaton, prefix)
    if dead is not None:
        _append_probe(prefix + (dead,), ProbeTag.ADVERSARIAL)
        if symbols:
            _append_probe(prefix + (dead, symbols[0]), ProbeTag.ADVERSARIAL)

    return probes


def find_disagreement(
    left: ValidatedAutomaton,
    right: ValidatedAutomaton,
    words: Iterable[Iterable[Symbol]],
) -> Word | None:
    """First word on which the two automata give different verdicts."""
    for word in words:
        word = tuple(word)
        if run_nfa(left, word).verdict != run_nfa(right, word).verdict:
            return word
    return None
