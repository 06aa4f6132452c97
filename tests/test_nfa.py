"""Tests for the nondeterministic automaton and its epsilon-closure."""

import random

import pytest

from fsm.exceptions import InvalidStateError
from fsm.nfa import Nfa


def build_a_bc_star_d() -> Nfa:
    """Hand-built Thompson-style NFA for a(b|c)*d."""
    nfa = Nfa()
    start = nfa.add_state(False)
    after_a = nfa.add_state(False)
    loop = nfa.add_state(False)
    after_bc = nfa.add_state(False)
    end = nfa.add_state(True)

    nfa.add_transition(start, "a", after_a)
    nfa.add_epsilon_transition(after_a, loop)
    nfa.add_transition(loop, "b", after_bc)
    nfa.add_transition(loop, "c", after_bc)
    nfa.add_epsilon_transition(after_bc, loop)
    nfa.add_transition(loop, "d", end)
    return nfa


class TestEndsWithOne:
    WORDS = [
        ("1", True),
        ("0101", True),
        ("00000001", True),
        ("", False),
        ("00000", False),
        ("11110", False),
        ("11", True),
        ("10", False),
    ]

    @pytest.mark.parametrize("word,expected", WORDS)
    def test_accepts(self, ends_with_one, word, expected):
        assert ends_with_one.accepts(word) is expected

    def test_accepts_one_shot_iterator(self, ends_with_one):
        assert ends_with_one.accepts(iter("001"))
        assert not ends_with_one.accepts(iter("010"))


class TestEndsWithB:
    @pytest.mark.parametrize(
        "word,expected",
        [("b", True), ("ab", True), ("abab", True), ("", False), ("a", False), ("ba", False)],
    )
    def test_accepts(self, ends_with_b, word, expected):
        assert ends_with_b.accepts(word) is expected


class TestTransitions:
    def test_transitions_accumulate(self):
        nfa = Nfa()
        s = nfa.add_state(False)
        t1 = nfa.add_state(False)
        t2 = nfa.add_state(True)

        nfa.add_transition(s, "c", t1)
        nfa.add_transition(s, "c", t2)

        assert nfa.next(s, "c") == frozenset({t1, t2})
        assert nfa.num_transitions() == 2
        assert nfa.accepts("c")

    def test_duplicate_transition_is_stored_once(self):
        nfa = Nfa()
        s = nfa.add_state(False)
        t = nfa.add_state(True)

        nfa.add_transition(s, "c", t)
        nfa.add_transition(s, "c", t)

        assert nfa.num_transitions() == 1

    def test_epsilon_transitions_are_separate(self):
        nfa = Nfa()
        a = nfa.add_state(False)
        b = nfa.add_state(True)
        nfa.add_epsilon_transition(a, b)

        assert nfa.next_epsilon(a) == frozenset({b})
        assert nfa.next_epsilon(b) == frozenset()
        assert nfa.num_transitions() == 0
        assert nfa.num_epsilon_transitions() == 1
        assert list(nfa.epsilon_transitions()) == [(a, b)]
        assert list(nfa.transitions()) == []

    def test_no_symbol_is_reserved_for_epsilon(self):
        nfa = Nfa()
        a = nfa.add_state(False)
        b = nfa.add_state(True)
        for symbol in [None, "", "ε"]:
            nfa.add_transition(a, symbol, b)

        assert nfa.num_epsilon_transitions() == 0
        assert not nfa.accepts([])
        assert nfa.accepts([None])
        assert nfa.accepts([""])
        assert nfa.accepts(["ε"])

    def test_next_on_unknown_symbol(self, ends_with_one):
        assert ends_with_one.next(ends_with_one.state_id(0), "2") == frozenset()

    def test_foreign_states_are_rejected(self):
        nfa = Nfa()
        a = nfa.add_state(True)
        foreign = Nfa().add_state(True)

        with pytest.raises(InvalidStateError):
            nfa.add_transition(a, "x", foreign)
        with pytest.raises(InvalidStateError):
            nfa.add_epsilon_transition(foreign, a)
        with pytest.raises(InvalidStateError):
            nfa.add_epsilon_transition(a, 1)
        with pytest.raises(InvalidStateError):
            nfa.epsilon_closure([a, foreign])
        assert nfa.num_transitions() == 0
        assert nfa.num_epsilon_transitions() == 0


class TestEpsilonClosure:
    def test_single_state_without_epsilon(self):
        nfa = Nfa()
        a = nfa.add_state(False)

        assert nfa.epsilon_closure(a) == frozenset({a})

    def test_chain(self):
        nfa = Nfa()
        a, b, c, d = [nfa.add_state(False) for _ in range(4)]
        nfa.add_epsilon_transition(a, b)
        nfa.add_epsilon_transition(b, c)
        nfa.add_transition(c, "x", d)

        assert nfa.epsilon_closure(a) == frozenset({a, b, c})
        assert nfa.epsilon_closure(b) == frozenset({b, c})
        assert nfa.epsilon_closure([c, d]) == frozenset({c, d})

    def test_cycle_terminates(self):
        nfa = Nfa()
        a = nfa.add_state(False)
        b = nfa.add_state(True)
        nfa.add_epsilon_transition(a, b)
        nfa.add_epsilon_transition(b, a)

        closure = nfa.epsilon_closure(a)

        assert closure == frozenset({a, b})
        assert len(closure) == 2
        assert nfa.accepts("")

    def test_self_loop_terminates(self, ends_with_b):
        b = ends_with_b.state_id(1)

        assert ends_with_b.epsilon_closure(b) == frozenset({b})

    def test_idempotent(self):
        nfa = Nfa()
        states = [nfa.add_state(False) for _ in range(6)]
        for src, tgt in [(0, 1), (1, 2), (2, 0), (3, 4), (4, 4)]:
            nfa.add_epsilon_transition(states[src], states[tgt])

        for seeds in [[states[0]], [states[3]], [states[5]], states[2:4]]:
            closure = nfa.epsilon_closure(seeds)
            assert nfa.epsilon_closure(closure) == closure
            assert set(seeds) <= closure

    def test_empty_seed_set(self):
        nfa = Nfa()
        nfa.add_state(False)

        assert nfa.epsilon_closure([]) == frozenset()


class TestSimulation:
    @pytest.mark.parametrize(
        "word,expected",
        [
            ("ad", True),
            ("abd", True),
            ("acd", True),
            ("abcd", True),
            ("acbd", True),
            ("abbbd", True),
            ("a", False),
            ("d", False),
            ("ab", False),
            ("aad", False),
            ("abda", False),
        ],
    )
    def test_epsilon_loops(self, word, expected):
        assert build_a_bc_star_d().accepts(word) is expected

    def test_empty_input_uses_closure_of_initial(self):
        nfa = Nfa()
        a = nfa.add_state(False)
        b = nfa.add_state(True)

        assert not nfa.accepts("")
        nfa.add_epsilon_transition(a, b)
        assert nfa.accepts("")

    def test_empty_input_follows_initial_flag(self, ends_with_one):
        assert ends_with_one.accepts([]) == ends_with_one.accepting(ends_with_one.initial)

    def test_empty_automaton_accepts_nothing(self):
        nfa = Nfa()

        assert not nfa.accepts("")
        assert nfa.simulate("ab") == []

    def test_explicit_initial_state(self, ends_with_one):
        ends_with_one.initial = ends_with_one.state_id(1)

        assert ends_with_one.accepts("")
        assert ends_with_one.accepts("1")
        assert not ends_with_one.accepts("0")

    def test_dead_input_stops_reading(self):
        nfa = Nfa()
        a = nfa.add_state(True)
        nfa.add_transition(a, "a", a)

        def word():
            yield "a"
            yield "b"
            pytest.fail("input read after the active set became empty")

        assert not nfa.accepts(word())

    def test_simulate(self, ends_with_one):
        a, b = ends_with_one.state_id(0), ends_with_one.state_id(1)

        assert ends_with_one.simulate("10") == [
            frozenset({a}),
            frozenset({a, b}),
            frozenset({a}),
        ]

    def test_simulate_stops_after_empty_set(self):
        nfa = Nfa()
        a = nfa.add_state(True)

        assert nfa.simulate("xyz") == [frozenset({a}), frozenset()]

    def test_step(self):
        nfa = build_a_bc_star_d()
        start, after_a, loop = [nfa.state_id(i) for i in range(3)]

        assert nfa.step([start], "a") == frozenset({after_a, loop})
        assert nfa.step([start], "b") == frozenset()

    def test_transition_order_does_not_matter(self):
        edges = [
            ("sym", 0, "0", 0),
            ("sym", 0, "1", 0),
            ("sym", 0, "1", 1),
            ("sym", 1, "0", 0),
            ("sym", 1, "1", 1),
            ("sym", 1, "0", 2),
            ("eps", 2, None, 1),
            ("eps", 0, None, 0),
        ]
        words = ["", "0", "1", "10", "01", "0101", "110", "1001", "000"]

        def build(order):
            nfa = Nfa()
            states = [nfa.add_state(i == 1) for i in range(3)]
            for kind, src, symbol, tgt in order:
                if kind == "eps":
                    nfa.add_epsilon_transition(states[src], states[tgt])
                else:
                    nfa.add_transition(states[src], symbol, states[tgt])
            return [nfa.accepts(word) for word in words]

        expected = build(edges)
        rng = random.Random(1234)
        for _ in range(25):
            shuffled = list(edges)
            rng.shuffle(shuffled)
            assert build(shuffled) == expected
