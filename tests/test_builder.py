import pytest

from fsaengine.core.builder import AutomatonBuildError, AutomatonBuilder
from fsaengine.core.models import EPSILON, AutomatonKind, Transition


class TestAutomatonBuilder:
    def test_chained_build(self) -> None:
        spec = (
            AutomatonBuilder(AutomatonKind.DFA)
            .add_states([0, 1])
            .add_symbols("ab")
            .set_initial(0)
            .add_final(1)
            .add_transition(0, "a", 1)
            .build()
        )
        assert spec.kind == AutomatonKind.DFA
        assert spec.states == [0, 1]
        assert spec.alphabet == ["a", "b"]
        assert spec.initial_state == 0
        assert spec.final_states == [1]
        assert spec.transitions == [Transition(source=0, symbol="a", target=1)]

    def test_missing_initial_state_raises(self) -> None:
        builder = AutomatonBuilder().add_state(0).add_final(0)
        with pytest.raises(AutomatonBuildError, match="Missing initial state"):
            builder.build()

    def test_build_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            AutomatonBuilder().build()

    def test_explicit_declarations_are_not_inferred(self) -> None:
        spec = (
            AutomatonBuilder()
            .set_initial(0)
            .add_final(3)
            .add_transition(0, "t", 1)
            .build()
        )
        assert spec.states == []
        assert spec.alphabet == []

    def test_infer_declarations_preserves_order(self) -> None:
        spec = (
            AutomatonBuilder(infer_declarations=True)
            .set_initial(0)
            .add_final(0)
            .add_transition(0, "t", 1)
            .add_transition(1, "o", 2)
            .add_transition(2, "t", 3)
            .add_transition(3, "o", 0)
            .build()
        )
        assert spec.states == [0, 1, 2, 3]
        assert spec.alphabet == ["t", "o"]

    def test_duplicates_are_dropped(self) -> None:
        spec = (
            AutomatonBuilder()
            .add_states([0, 0, 1])
            .add_symbol("a")
            .add_symbol("a")
            .set_initial(0)
            .add_transition(0, "a", 1)
            .add_transition(0, "a", 1)
            .build()
        )
        assert spec.states == [0, 1]
        assert spec.alphabet == ["a"]
        assert len(spec.transitions) == 1

    def test_epsilon_transition_switches_kind(self) -> None:
        builder = AutomatonBuilder(AutomatonKind.NFA, infer_declarations=True)
        spec = builder.set_initial(0).add_epsilon_transition(0, 1).build()
        assert spec.kind == AutomatonKind.EPSILON_NFA
        assert spec.transitions == [
            Transition(source=0, symbol=EPSILON, target=1)
        ]
        assert spec.alphabet == []

    def test_epsilon_label_in_add_transition(self) -> None:
        spec = (
            AutomatonBuilder()
            .set_initial(0)
            .add_transition(0, EPSILON, 1)
            .build()
        )
        assert spec.kind == AutomatonKind.EPSILON_NFA
        assert spec.transitions[0].is_epsilon
