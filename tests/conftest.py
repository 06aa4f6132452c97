import pytest

from fsm.dfa import Dfa
from fsm.nfa import Nfa
from fsm.samples import ends_with_b_nfa, ends_with_one_nfa, even_zeros_dfa


@pytest.fixture()
def even_zeros() -> Dfa:
    """DFA accepting words over {0, 1} with an even number of 0s."""
    return even_zeros_dfa()


@pytest.fixture()
def ends_with_one() -> Nfa:
    """NFA accepting words over {0, 1} that end in 1."""
    return ends_with_one_nfa()


@pytest.fixture()
def ends_with_b() -> Nfa:
    return ends_with_b_nfa()
