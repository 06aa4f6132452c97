"""
fsm - Deterministic and nondeterministic finite automata over any hashable alphabet.

Example usage:
    >>> from fsm import Nfa
    >>> nfa = Nfa()
    >>> a = nfa.add_state(False)
    >>> b = nfa.add_state(True)
    >>> nfa.add_transition(a, "x", b)
    >>> nfa.accepts("x")
    True
"""

from fsm.automaton import Automaton, State, StateId, StateRegistry
from fsm.dfa import Dfa
from fsm.nfa import Nfa
from fsm.exceptions import AutomatonError, InvalidStateError

__version__ = "0.1.0"

__all__ = [
    "Automaton",
    "State",
    "StateId",
    "StateRegistry",
    "Dfa",
    "Nfa",
    "AutomatonError",
    "InvalidStateError",
    "__version__",
]
