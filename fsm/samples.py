"""Small ready-made automata, used by the terminal and the tests."""

from typing_extensions import *

from fsm.automaton import Automaton
from fsm.dfa import Dfa
from fsm.nfa import Nfa


def even_zeros_dfa() -> Dfa[str]:
    """DFA over {0, 1} accepting the words with an even number of 0s.

    State a (initial, accepting) means an even count so far, b an odd count.
    """
    dfa: Dfa[str] = Dfa()
    a = dfa.add_state(True)
    b = dfa.add_state(False)
    # Loops
    dfa.add_transition(a, "1", a)
    dfa.add_transition(b, "1", b)
    # Parity flips
    dfa.add_transition(a, "0", b)
    dfa.add_transition(b, "0", a)
    return dfa


def ends_with_one_nfa() -> Nfa[str]:
    """NFA over {0, 1} accepting the words that end in 1."""
    nfa: Nfa[str] = Nfa()
    a = nfa.add_state(False)
    b = nfa.add_state(True)
    nfa.add_epsilon_transition(a, a)
    nfa.add_transition(a, "0", a)
    nfa.add_transition(a, "1", a)
    nfa.add_transition(a, "1", b)
    nfa.add_transition(b, "0", a)
    nfa.add_transition(b, "1", b)
    return nfa


def ends_with_b_nfa() -> Nfa[str]:
    """NFA over {a, b} accepting the words that end in b."""
    nfa: Nfa[str] = Nfa()
    a = nfa.add_state(False)
    b = nfa.add_state(True)
    nfa.add_transition(a, "a", a)
    nfa.add_transition(a, "b", a)
    nfa.add_transition(a, "b", b)
    nfa.add_epsilon_transition(b, b)
    return nfa


SAMPLES: Dict[str, Callable[[], Automaton]] = {
    "even_zeros": even_zeros_dfa,
    "ends_with_one": ends_with_one_nfa,
    "ends_with_b": ends_with_b_nfa,
}
