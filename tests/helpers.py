from fsaengine.core.builder import AutomatonBuilder
from fsaengine.core.models import AutomatonKind, AutomatonSpec, Transition
from fsaengine.validate import ValidatedAutomaton, validate_automaton


def validated(spec: AutomatonSpec, **kwargs: object) -> ValidatedAutomaton:
    result = validate_automaton(spec, **kwargs)
    assert result.automaton is not None, result.issues
    return result.automaton


def scenario_a_spec() -> AutomatonSpec:
    """{0,1} over {a,b}; 0 -a-> 1, 1 -b-> 1; final {1}."""
    return AutomatonSpec(
        kind=AutomatonKind.DFA,
        states=[0, 1],
        alphabet=["a", "b"],
        initial_state=0,
        final_states=[1],
        transitions=[
            Transition(source=0, symbol="a", target=1),
            Transition(source=1, symbol="b", target=1),
        ],
    )


def scenario_b_spec() -> AutomatonSpec:
    """Accepts a^n for n >= 2 via the branch 0 -> 1 -> 2."""
    return (
        AutomatonBuilder(AutomatonKind.NFA)
        .add_states([0, 1, 2])
        .add_symbol("a")
        .set_initial(0)
        .add_final(2)
        .add_transition(0, "a", 0)
        .add_transition(0, "a", 1)
        .add_transition(1, "a", 2)
        .build()
    )


def abc_star_spec() -> AutomatonSpec:
    """(abc)* with epsilon moves closing the loop."""
    return (
        AutomatonBuilder(infer_declarations=True)
        .set_initial(0)
        .add_final(0)
        .add_transition(0, "a", 1)
        .add_transition(1, "b", 2)
        .add_transition(2, "c", 3)
        .add_epsilon_transition(3, 0)
        .build()
    )


def ends_with_ab_spec() -> AutomatonSpec:
    """Words over {a,b} ending in 'ab'."""
    return (
        AutomatonBuilder(infer_declarations=True)
        .set_initial("s")
        .add_final("f")
        .add_transition("s", "a", "s")
        .add_transition("s", "b", "s")
        .add_transition("s", "a", "m")
        .add_transition("m", "b", "f")
        .build()
    )
