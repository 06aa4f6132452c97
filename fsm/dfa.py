"""Deterministic finite automaton over an arbitrary hashable alphabet."""

import logging
from typing_extensions import *

from fsm.automaton import Automaton, StateId, T, symbol_label

logger = logging.getLogger(__name__)


class Dfa(Automaton[T]):
    """
    Deterministic finite automaton.

    Every (state, symbol) pair has at most one successor. Registering a second
    transition for the same pair replaces the first one. A missing transition
    rejects the word; there is no implicit dead state.

    Example:
        >>> dfa = Dfa()
        >>> even = dfa.add_state(True)
        >>> odd = dfa.add_state(False)
        >>> dfa.add_transition(even, "0", odd)
        >>> dfa.add_transition(odd, "0", even)
        >>> dfa.accepts("00")
        True
    """

    type_name = "DFA"

    def __init__(self):
        super().__init__()
        self._delta: Dict[Tuple[int, T], int] = {}

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add_transition(self, src: StateId, symbol: T, tgt: StateId) -> None:
        key = (self._registry.validate(src), symbol)
        target = self._registry.validate(tgt)

        previous = self._delta.get(key)
        if previous is not None and previous != target:
            logger.debug(
                "overwriting transition %s -%r-> q%d with %s", src, symbol, previous, tgt
            )
        self._delta[key] = target

    # -------------------------------------------------------------------------
    # Transition queries
    # -------------------------------------------------------------------------

    def next(self, state: StateId, symbol: T) -> Optional[StateId]:
        """Successor of ``state`` on ``symbol``, or None if there is no transition."""
        target = self._delta.get((self._registry.validate(state), symbol))
        if target is None:
            return None
        return self._registry.lookup(target)

    def transitions(self) -> Iterator[Tuple[StateId, T, StateId]]:
        for (src, symbol), tgt in self._delta.items():
            yield self._registry.lookup(src), symbol, self._registry.lookup(tgt)

    def num_transitions(self) -> int:
        return len(self._delta)

    def _graph_edges(self) -> Iterator[Tuple[StateId, str, StateId]]:
        for src, symbol, tgt in self.transitions():
            yield src, symbol_label(symbol), tgt

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def _run(self, word: Iterable[T]) -> Iterator[Optional[int]]:
        """Yield the index of each state visited, starting with the initial state.

        Yields None and stops when a symbol has no transition.
        """
        current = self._registry.validate(self.initial)
        yield current
        for symbol in word:
            current = self._delta.get((current, symbol))
            yield current
            if current is None:
                return

    def simulate(self, word: Iterable[T]) -> List[StateId]:
        """
        Path of states visited while reading ``word``.

        The path is cut short at the first symbol without a transition, so a
        path shorter than ``len(word) + 1`` means the word was rejected there.
        """
        if self.initial is None:
            return []
        return [
            self._registry.lookup(index) for index in self._run(word) if index is not None
        ]

    def accepts(self, word: Iterable[T]) -> bool:
        if self.initial is None:
            return False

        current = None
        for current in self._run(word):
            pass

        if current is None:
            logger.debug("rejected: missing transition")
            return False

        result = self._registry.is_accepting(self._registry.lookup(current))
        logger.debug("%s in q%d", "accepted" if result else "rejected", current)
        return result
