import random

import pytest
from pydantic import ValidationError

from fsaengine.core.models import EPSILON, AutomatonKind
from fsaengine.core.sampling import (
    pick_distinct,
    sample_int_range,
    sample_probability,
)
from fsaengine.core.trace import TraceStep
from fsaengine.sampler import (
    MAX_ALPHABET_SIZE,
    AutomatonAxes,
    sample_automaton_spec,
)
from fsaengine.validate import (
    CODE_NON_DETERMINISTIC_TRANSITION,
    validate_automaton,
)


class TestAxesValidation:
    def test_defaults(self) -> None:
        axes = AutomatonAxes()
        assert set(axes.kinds) == set(AutomatonKind)
        assert axes.n_states_range == (2, 6)

    def test_empty_kinds_rejected(self) -> None:
        with pytest.raises(ValidationError, match="kinds must not be empty"):
            AutomatonAxes(kinds=[])

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(ValidationError, match="n_states_range"):
            AutomatonAxes(n_states_range=(5, 2))

    def test_bool_bounds_rejected(self) -> None:
        with pytest.raises(ValidationError, match="bool is not allowed"):
            AutomatonAxes(n_states_range=(True, 3))

    def test_zero_states_rejected(self) -> None:
        with pytest.raises(ValidationError, match="low must be >= 1"):
            AutomatonAxes(n_states_range=(0, 3))

    def test_alphabet_too_large(self) -> None:
        with pytest.raises(ValidationError, match="alphabet_size_range"):
            AutomatonAxes(alphabet_size_range=(1, MAX_ALPHABET_SIZE + 1))

    def test_probability_outside_unit_interval(self) -> None:
        with pytest.raises(ValidationError, match="final_prob_range"):
            AutomatonAxes(final_prob_range=(0.5, 1.5))


class TestSamplingHelpers:
    def test_int_range_inclusive(self) -> None:
        rng = random.Random(0)
        values = {sample_int_range((1, 3), rng) for _ in range(100)}
        assert values == {1, 2, 3}

    def test_int_range_malformed(self) -> None:
        with pytest.raises(ValueError, match="malformed"):
            sample_int_range((3, 1), random.Random(0))

    def test_probability_bounds(self) -> None:
        rng = random.Random(0)
        for _ in range(50):
            assert 0.2 <= sample_probability((0.2, 0.3), rng) <= 0.3
        with pytest.raises(ValueError, match="within"):
            sample_probability((-0.1, 0.5), rng)

    def test_probability_degenerate_and_malformed(self) -> None:
        rng = random.Random(0)
        assert sample_probability((1.0, 1.0), rng) == 1.0
        assert sample_probability((0.0, 0.0), rng) == 0.0
        with pytest.raises(ValueError, match="prob_range is malformed"):
            sample_probability((0.6, 0.4), rng)

    def test_pick_distinct(self) -> None:
        rng = random.Random(0)
        picked = pick_distinct([1, 2, 3, 4], 2, rng)
        assert len(set(picked)) == 2
        assert pick_distinct([1, 2], 5, rng) == [1, 2]
        with pytest.raises(ValueError):
            pick_distinct([1], -1, rng)


class TestSampleAutomatonSpec:
    def test_seeded_output_is_reproducible(self) -> None:
        first = sample_automaton_spec(rng=random.Random(42))
        second = sample_automaton_spec(rng=random.Random(42))
        assert first == second

    def test_respects_axes(self) -> None:
        axes = AutomatonAxes(
            kinds=[AutomatonKind.NFA],
            n_states_range=(4, 4),
            alphabet_size_range=(2, 2),
        )
        spec = sample_automaton_spec(axes, random.Random(1))
        assert spec.kind == AutomatonKind.NFA
        assert spec.states == [0, 1, 2, 3]
        assert spec.alphabet == ["a", "b"]
        assert spec.initial_state == 0
        assert spec.final_states
        assert all(t.symbol != EPSILON for t in spec.transitions)

    def test_dfa_drafts_are_deterministic(self) -> None:
        axes = AutomatonAxes(
            kinds=[AutomatonKind.DFA], transitions_per_state_range=(2, 6)
        )
        rng = random.Random(3)
        for _ in range(30):
            spec = sample_automaton_spec(axes, rng)
            result = validate_automaton(spec)
            assert result.ok, result.issues
            assert CODE_NON_DETERMINISTIC_TRANSITION not in result.codes()

    def test_epsilon_only_for_epsilon_nfa(self) -> None:
        axes = AutomatonAxes(
            kinds=[AutomatonKind.EPSILON_NFA],
            epsilon_prob_range=(1.0, 1.0),
            transitions_per_state_range=(1, 1),
        )
        spec = sample_automaton_spec(axes, random.Random(5))
        assert all(t.symbol == EPSILON for t in spec.transitions)
        assert validate_automaton(spec).ok

    def test_trace_records_choices(self) -> None:
        trace: list[TraceStep] = []
        spec = sample_automaton_spec(rng=random.Random(9), trace=trace)
        steps = [t.step for t in trace]
        assert steps == [
            "sample_kind",
            "sample_n_states",
            "sample_alphabet",
            "sample_final_states",
            "sample_transition_count",
        ]
        assert trace[0].value == spec.kind.value
        assert trace[1].value == len(spec.states)
        assert trace[-1].value == len(spec.transitions)


@pytest.mark.slow
def test_sampled_drafts_always_validate() -> None:
    rng = random.Random(11)
    axes = AutomatonAxes(n_states_range=(1, 10), alphabet_size_range=(1, 5))
    for _ in range(200):
        result = validate_automaton(sample_automaton_spec(axes, rng))
        assert result.ok, result.issues
