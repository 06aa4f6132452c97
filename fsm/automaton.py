import itertools
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from typing_extensions import *

from graphviz import Digraph, escape

from fsm.exceptions import InvalidStateError

logger = logging.getLogger(__name__)

# Alphabet type: any hashable value
T = TypeVar("T", bound=Hashable)

EPSILON_LABEL = "ε"
LABEL_SEPARATOR = ", "

GRAPH_ATTR = {
    "rankdir": "LR",
    "splines": "true",
    "nodesep": "0.8",
    "ranksep": "1.2",
    "labelloc": "t",
    "fontsize": "14",
    "fontname": "Arial",
    "bgcolor": "white",
    "pad": "0.5",
    "dpi": "300",
}

NODE_ATTR = {
    "shape": "circle",
    "fontsize": "14",
    "fontname": "Arial",
    "width": "0.6",
    "height": "0.6",
    "fixedsize": "true",
    "style": "filled",
    "fillcolor": "lightblue",
    "color": "black",
    "penwidth": "2",
}

EDGE_ATTR = {
    "fontsize": "12",
    "fontname": "Arial",
    "arrowsize": "0.8",
    "penwidth": "1.5",
    "color": "black",
}

_owner_tokens = itertools.count()


def symbol_label(symbol: Any) -> str:
    """
    Edge label for a symbol.

    Text that could be mistaken for a merged label or for epsilon is shown
    quoted, so "a, b" stays distinct from the two symbols "a" and "b".
    """
    text = str(symbol)
    if (
        text == EPSILON_LABEL
        or not text
        or any(c in text for c in LABEL_SEPARATOR.strip() + "\"'")
    ):
        return repr(text)
    return text


@dataclass(frozen=True, order=True)
class StateId:
    """
    Opaque handle naming a state of one automaton.

    index: dense, 0-based position in creation order
    owner: token of the registry that allocated it
    """

    index: int
    owner: int = field(repr=False)

    def __int__(self) -> int:
        return self.index

    def __index__(self) -> int:
        return self.index

    def __str__(self) -> str:
        return f"q{self.index}"


@dataclass(frozen=True)
class State:
    id: StateId
    accepting: bool = False

    def __str__(self) -> str:
        return str(self.id)


class StateRegistry:
    """Allocates state ids and remembers which states are accepting."""

    def __init__(self):
        self._owner = next(_owner_tokens)
        self._accepting: List[bool] = []

    def add_state(self, is_accepting: bool = False) -> StateId:
        state = StateId(len(self._accepting), self._owner)
        self._accepting.append(bool(is_accepting))
        logger.debug("added state %s (accepting=%s)", state, is_accepting)
        return state

    def validate(self, state: Any) -> int:
        """Return the dense index of ``state``, or raise InvalidStateError."""
        if not isinstance(state, StateId):
            raise InvalidStateError(state, "not a state id")
        if state.owner != self._owner or not 0 <= state.index < len(self._accepting):
            raise InvalidStateError(state, "belongs to another automaton")
        return state.index

    def is_accepting(self, state: StateId) -> bool:
        return self._accepting[self.validate(state)]

    def lookup(self, index: int) -> StateId:
        """Get the id of the state created at position ``index``."""
        if not 0 <= index < len(self._accepting):
            raise InvalidStateError(index, f"automaton has {len(self)} states")
        return StateId(index, self._owner)

    def __len__(self) -> int:
        return len(self._accepting)

    def __iter__(self) -> Iterator[StateId]:
        for index in range(len(self._accepting)):
            yield StateId(index, self._owner)

    def __contains__(self, state: Any) -> bool:
        return (
            isinstance(state, StateId)
            and state.owner == self._owner
            and 0 <= state.index < len(self._accepting)
        )


class Automaton(ABC, Generic[T]):
    """
    Common base of Dfa and Nfa.

    Owns the state registry and the choice of initial state. Subclasses own
    the transition tables and the simulation.
    """

    type_name = "Automaton"

    def __init__(self):
        self._registry = StateRegistry()
        self._initial: Optional[StateId] = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(states={self.num_states()}, "
            f"transitions={self.num_transitions()})"
        )

    # -------------------------------------------------------------------------
    # States
    # -------------------------------------------------------------------------

    def add_state(self, is_accepting: bool = False) -> StateId:
        return self._registry.add_state(is_accepting)

    def state(self, state: StateId) -> State:
        return State(state, self._registry.is_accepting(state))

    def __getitem__(self, state: StateId) -> State:
        return self.state(state)

    def accepting(self, state: StateId) -> bool:
        return self._registry.is_accepting(state)

    def state_id(self, index: int) -> StateId:
        return self._registry.lookup(index)

    def states(self) -> Iterator[State]:
        for state in self._registry:
            yield self.state(state)

    def num_states(self) -> int:
        return len(self._registry)

    def __len__(self) -> int:
        return len(self._registry)

    def __contains__(self, state: Any) -> bool:
        return state in self._registry

    @property
    def initial(self) -> Optional[StateId]:
        """The initial state: the first state added unless set explicitly."""
        if self._initial is not None:
            return self._initial
        if len(self._registry):
            return self._registry.lookup(0)
        return None

    @initial.setter
    def initial(self, state: StateId) -> None:
        self._registry.validate(state)
        self._initial = state

    @abstractmethod
    def num_transitions(self) -> int:
        ...

    @abstractmethod
    def transitions(self) -> Iterator[Tuple[StateId, T, StateId]]:
        ...

    @abstractmethod
    def accepts(self, word: Iterable[T]) -> bool:
        ...

    @abstractmethod
    def simulate(self, word: Iterable[T]) -> List[Any]:
        ...

    @abstractmethod
    def _graph_edges(self) -> Iterator[Tuple[StateId, str, StateId]]:
        """Yield (source, label, target) for every edge to draw."""

    # -------------------------------------------------------------------------
    # Visualization
    # -------------------------------------------------------------------------

    def to_graphviz(self, filename: Optional[str] = None, view: bool = False) -> Digraph:
        """Build a Graphviz graph of this automaton, rendering it when a filename is given."""
        dot = Digraph(
            name=self.type_name,
            format="png",
            graph_attr=dict(GRAPH_ATTR, label=self.type_name),
            node_attr=NODE_ATTR,
            edge_attr=EDGE_ATTR,
        )

        dot.node("__start__", shape="point", width="0.01", style="invis")

        for state in self.states():
            if state.accepting:
                dot.node(
                    str(state),
                    label=str(state),
                    shape="doublecircle",
                    fillcolor="lightgreen",
                    peripheries="2",
                )
            else:
                dot.node(str(state), label=str(state))

        if self.initial is not None:
            dot.edge("__start__", str(self.initial), penwidth="2")

        edges = defaultdict(set)
        for src, label, tgt in self._graph_edges():
            edges[(src, tgt)].add(label)

        for (src, tgt), labels in sorted(edges.items()):
            label = escape(LABEL_SEPARATOR.join(sorted(labels)))
            if src == tgt:
                dot.edge(str(src), str(tgt), label=label, headport="n", tailport="n")
            else:
                dot.edge(str(src), str(tgt), label=label)

        if filename is not None:
            dot.render(filename, view=view, cleanup=True)
        return dot

    def render_graphviz(self) -> str:
        """DOT source of this automaton."""
        return self.to_graphviz().source
