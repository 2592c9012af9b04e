import random
import string
from typing import Any

from pydantic import BaseModel, Field, model_validator

from fsaengine.core.models import (
    EPSILON,
    AutomatonKind,
    AutomatonSpec,
    Transition,
)
from fsaengine.core.sampling import (
    pick_distinct,
    sample_int_range,
    sample_probability,
)
from fsaengine.core.trace import TraceStep, trace_step

_INT_RANGE_FIELDS = (
    "n_states_range",
    "alphabet_size_range",
    "transitions_per_state_range",
)
_PROB_RANGE_FIELDS = (
    "epsilon_prob_range",
    "final_prob_range",
)
MAX_ALPHABET_SIZE = len(string.ascii_lowercase)


def _validate_no_bool_int_range_bounds(data: Any) -> None:
    if not isinstance(data, dict):
        return

    for field_name in _INT_RANGE_FIELDS:
        value = data.get(field_name)
        if not isinstance(value, (tuple, list)) or len(value) != 2:
            continue
        low, high = value
        if isinstance(low, bool) or isinstance(high, bool):
            raise ValueError(
                f"{field_name}: bool is not allowed for int range bounds"
            )


class AutomatonAxes(BaseModel):
    kinds: list[AutomatonKind] = Field(
        default_factory=lambda: list(AutomatonKind)
    )
    n_states_range: tuple[int, int] = Field(default=(2, 6))
    alphabet_size_range: tuple[int, int] = Field(default=(1, 3))
    transitions_per_state_range: tuple[int, int] = Field(default=(0, 4))
    epsilon_prob_range: tuple[float, float] = Field(default=(0.1, 0.4))
    final_prob_range: tuple[float, float] = Field(default=(0.2, 0.5))

    @model_validator(mode="before")
    @classmethod
    def validate_input_axes(cls, data: Any) -> Any:
        _validate_no_bool_int_range_bounds(data)
        return data

    @model_validator(mode="after")
    def validate_axes(self) -> "AutomatonAxes":
        if not self.kinds:
            raise ValueError("kinds must not be empty")

        for name in _INT_RANGE_FIELDS + _PROB_RANGE_FIELDS:
            lo, hi = getattr(self, name)
            if lo > hi:
                raise ValueError(f"{name}: low ({lo}) must be <= high ({hi})")

        if self.n_states_range[0] < 1:
            raise ValueError("n_states_range: low must be >= 1")
        if self.alphabet_size_range[0] < 1:
            raise ValueError("alphabet_size_range: low must be >= 1")
        if self.alphabet_size_range[1] > MAX_ALPHABET_SIZE:
            raise ValueError(
                f"alphabet_size_range: high must be <= {MAX_ALPHABET_SIZE}"
            )
        if self.transitions_per_state_range[0] < 0:
            raise ValueError("transitions_per_state_range: low must be >= 0")

        for name in _PROB_RANGE_FIELDS:
            lo, hi = getattr(self, name)
            if lo < 0.0 or hi > 1.0:
                raise ValueError(f"{name}: values must be in [0.0, 1.0]")

        return self


def _sample_transitions(
    kind: AutomatonKind,
    states: list[int],
    alphabet: list[str],
    axes: AutomatonAxes,
    epsilon_prob: float,
    rng: random.Random,
) -> list[Transition]:
    transitions: list[Transition] = []
    pairs = [(state, symbol) for state in states for symbol in alphabet]

    allow_epsilon = kind == AutomatonKind.EPSILON_NFA
    for source in states:
        count = sample_int_range(axes.transitions_per_state_range, rng)
        for _ in range(count):
            target = rng.choice(states)
            if allow_epsilon and rng.random() < epsilon_prob:
                symbol = EPSILON
            else:
                symbol = rng.choice(alphabet)
            transitions.append(
                Transition(source=source, symbol=symbol, target=target)
            )

    if kind != AutomatonKind.DFA:
        return transitions

    # Keep the first target per (state, symbol) so the draft stays
    # deterministic, then give unused pairs a chance to be filled.
    chosen: dict[tuple[int, str], Transition] = {}
    for transition in transitions:
        chosen.setdefault((transition.source, transition.symbol), transition)
    for state, symbol in pairs:
        if (state, symbol) in chosen or rng.random() < 0.5:
            continue
        chosen[(state, symbol)] = Transition(
            source=state, symbol=symbol, target=rng.choice(states)
        )
    return list(chosen.values())


def sample_automaton_spec(
    axes: AutomatonAxes | None = None,
    rng: random.Random | None = None,
    trace: list[TraceStep] | None = None,
) -> AutomatonSpec:
    if axes is None:
        axes = AutomatonAxes()
    if rng is None:
        rng = random.Random()  # noqa: S311

    kind = rng.choice(axes.kinds)
    n_states = sample_int_range(axes.n_states_range, rng)
    alphabet_size = sample_int_range(axes.alphabet_size_range, rng)
    epsilon_prob = sample_probability(axes.epsilon_prob_range, rng)
    final_prob = sample_probability(axes.final_prob_range, rng)

    states = list(range(n_states))
    alphabet = list(string.ascii_lowercase[:alphabet_size])
    finals = [state for state in states if rng.random() < final_prob]
    if not finals:
        finals = pick_distinct(states, 1, rng)

    transitions = _sample_transitions(
        kind, states, alphabet, axes, epsilon_prob, rng
    )

    trace_step(trace, "sample_kind", f"Kind: {kind.value}", kind.value)
    trace_step(trace, "sample_n_states", f"State count: {n_states}", n_states)
    trace_step(
        trace,
        "sample_alphabet",
        f"Alphabet: {''.join(alphabet)}",
        alphabet,
    )
    trace_step(
        trace,
        "sample_final_states",
        f"Final states: {finals}",
        finals,
    )
    trace_step(
        trace,
        "sample_transition_count",
        f"Transition count: {len(transitions)}",
        len(transitions),
    )

    return AutomatonSpec(
        kind=kind,
        states=states,
        alphabet=alphabet,
        initial_state=0,
        final_states=finals,
        transitions=transitions,
    )
