"""Nondeterministic finite automaton with epsilon transitions."""

import logging
from collections import defaultdict
from typing_extensions import *

from fsm.automaton import EPSILON_LABEL, Automaton, StateId, T, symbol_label

logger = logging.getLogger(__name__)


class Nfa(Automaton[T]):
    """
    Nondeterministic finite automaton with epsilon transitions.

    Transitions for the same (state, symbol) pair accumulate. Epsilon moves are
    kept in their own relation, so no symbol value is reserved for them.

    Simulation keeps the set of active states and advances it one symbol at a
    time: the next set is the epsilon-closure of all symbol-successors of the
    current set. No backtracking is involved.
    """

    type_name = "NFA"

    def __init__(self):
        super().__init__()
        self._delta: Dict[Tuple[int, T], Set[int]] = defaultdict(set)
        self._epsilon: Dict[int, Set[int]] = defaultdict(set)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def add_transition(self, src: StateId, symbol: T, tgt: StateId) -> None:
        key = (self._registry.validate(src), symbol)
        self._delta[key].add(self._registry.validate(tgt))

    def add_epsilon_transition(self, src: StateId, tgt: StateId) -> None:
        source = self._registry.validate(src)
        self._epsilon[source].add(self._registry.validate(tgt))

    # -------------------------------------------------------------------------
    # Transition queries
    # -------------------------------------------------------------------------

    def _ids(self, indices: Iterable[int]) -> FrozenSet[StateId]:
        return frozenset(self._registry.lookup(index) for index in indices)

    def next(self, state: StateId, symbol: T) -> FrozenSet[StateId]:
        """Direct successors of ``state`` on ``symbol`` (no epsilon moves)."""
        return self._ids(self._delta.get((self._registry.validate(state), symbol), ()))

    def next_epsilon(self, state: StateId) -> FrozenSet[StateId]:
        return self._ids(self._epsilon.get(self._registry.validate(state), ()))

    def transitions(self) -> Iterator[Tuple[StateId, T, StateId]]:
        for (src, symbol), targets in self._delta.items():
            for tgt in targets:
                yield self._registry.lookup(src), symbol, self._registry.lookup(tgt)

    def epsilon_transitions(self) -> Iterator[Tuple[StateId, StateId]]:
        for src, targets in self._epsilon.items():
            for tgt in targets:
                yield self._registry.lookup(src), self._registry.lookup(tgt)

    def num_transitions(self) -> int:
        return sum(len(targets) for targets in self._delta.values())

    def num_epsilon_transitions(self) -> int:
        return sum(len(targets) for targets in self._epsilon.values())

    def _graph_edges(self) -> Iterator[Tuple[StateId, str, StateId]]:
        for src, symbol, tgt in self.transitions():
            yield src, symbol_label(symbol), tgt
        for src, tgt in self.epsilon_transitions():
            yield src, EPSILON_LABEL, tgt

    # -------------------------------------------------------------------------
    # Epsilon closure
    # -------------------------------------------------------------------------

    def _closure(self, seeds: Iterable[int]) -> FrozenSet[int]:
        closure = set(seeds)
        stack = list(closure)
        while stack:
            s = stack.pop()
            for next_state in self._epsilon.get(s, ()):
                if next_state not in closure:
                    closure.add(next_state)
                    stack.append(next_state)
        return frozenset(closure)

    def epsilon_closure(
        self, states: Union[StateId, Iterable[StateId]]
    ) -> FrozenSet[StateId]:
        """
        Smallest superset of ``states`` closed under epsilon moves.

        Args:
            states: A single state id or an iterable of state ids.

        Returns:
            The closure. Cycles in the epsilon relation are fine; every state
            is visited at most once.
        """
        if isinstance(states, StateId):
            states = [states]
        return self._ids(self._closure(self._registry.validate(s) for s in states))

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def _step(self, active: Iterable[int], symbol: T) -> FrozenSet[int]:
        targets: Set[int] = set()
        for state in active:
            targets.update(self._delta.get((state, symbol), ()))
        return self._closure(targets)

    def step(self, active: Iterable[StateId], symbol: T) -> FrozenSet[StateId]:
        """Active set after reading ``symbol`` from the active set ``active``."""
        indices = [self._registry.validate(state) for state in active]
        return self._ids(self._step(indices, symbol))

    def _run(self, word: Iterable[T]) -> Iterator[FrozenSet[int]]:
        """Yield the active set before the first symbol and after each symbol.

        Stops after yielding an empty set: nothing can become active again.
        """
        active = self._closure([self._registry.validate(self.initial)])
        yield active
        for symbol in word:
            active = self._step(active, symbol)
            yield active
            if not active:
                return

    def simulate(self, word: Iterable[T]) -> List[FrozenSet[StateId]]:
        if self.initial is None:
            return []
        return [self._ids(active) for active in self._run(word)]

    def accepts(self, word: Iterable[T]) -> bool:
        if self.initial is None:
            return False

        active: FrozenSet[int] = frozenset()
        for active in self._run(word):
            pass

        result = any(
            self._registry.is_accepting(self._registry.lookup(state)) for state in active
        )
        logger.debug(
            "%s with %d active states", "accepted" if result else "rejected", len(active)
        )
        return result
