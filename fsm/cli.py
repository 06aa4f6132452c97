import argparse
import logging
from typing_extensions import *

from graphviz import CalledProcessError, ExecutableNotFound

from fsm.automaton import Automaton, StateId
from fsm.dfa import Dfa
from fsm.exceptions import AutomatonError
from fsm.nfa import Nfa
from fsm.samples import SAMPLES

HELP = """
Commands:
  BUILDING:
    new_dfa <name>               - Create an empty DFA
    new_nfa <name>               - Create an empty NFA
    state <name> [accept]        - Add a state (accepting if 'accept' given)
    trans <name> <q> <sym> <q'>  - Add transition q -sym-> q'
    eps <name> <q> <q'>          - Add epsilon transition q -> q' (NFA only)
    initial <name> <q>           - Set the initial state (default: first state)
    sample <sample> [name]       - Load a sample automaton

  RUNNING:
    test <name> [word]           - Test if word is accepted (omit for empty word)
    trace <name> [word]          - Show the states visited while reading word

  INSPECTING:
    list                         - List all automata
    show <name>                  - Show automaton info
    dot <name>                   - Print Graphviz DOT source
    graph <name> [file]          - Render automaton to <file>.png

  GENERAL:
    delete <name>                - Delete automaton
    clear                        - Clear all
    exit                         - Exit

States are written as q0, q1, ... (or just 0, 1, ...). Every character of a
word is one symbol.
"""

EMPTY_WORDS = ["eps", "epsilon", "ε"]


def parse_state(automaton: Automaton, token: str) -> StateId:
    """Resolve 'q3' or '3' to a state id of ``automaton``."""
    index = token[1:] if token.lower().startswith("q") else token
    if not index.isdigit():
        raise ValueError(f"Not a state: {token}")
    return automaton.state_id(int(index))


def parse_word(parts: List[str]) -> str:
    word = parts[2] if len(parts) > 2 else ""
    if word.lower() in EMPTY_WORDS:
        return ""
    return word


def format_states(states: Iterable[StateId]) -> str:
    labels = [str(state) for state in sorted(states)]
    return "{" + ",".join(labels) + "}"


def describe(name: str, aut: Automaton) -> str:
    lines = [
        f"\n{name}:",
        f"  Type: {aut.type_name}",
        f"  States: {aut.num_states()}",
        f"  Start: {aut.initial}",
        f"  Accepting: {format_states(s.id for s in aut.states() if s.accepting)}",
        f"  Transitions: {aut.num_transitions()}",
    ]
    for src, symbol, tgt in sorted(aut.transitions(), key=lambda t: (t[0], str(t[1]), t[2])):
        lines.append(f"    {src} -{symbol}-> {tgt}")
    if isinstance(aut, Nfa):
        lines.append(f"  Epsilon transitions: {aut.num_epsilon_transitions()}")
        for src, tgt in sorted(aut.epsilon_transitions()):
            lines.append(f"    {src} -ε-> {tgt}")
    return "\n".join(lines) + "\n"


def run_command(command: str, automata: Dict[str, Automaton]) -> bool:
    """Execute one terminal command. Returns False when the terminal should exit."""
    parts = command.split()
    if not parts:
        return True
    cmd = parts[0].lower()

    # Exit
    if cmd in ["exit", "quit"]:
        return False

    # Help
    elif cmd == "help":
        print(HELP)

    # Create automata
    elif cmd in ["new_dfa", "new_nfa"]:
        if len(parts) < 2:
            print(f"Usage: {cmd} <name>")
        else:
            automata[parts[1]] = Dfa() if cmd == "new_dfa" else Nfa()
            print(f"Created: {parts[1]}")

    # Load a sample
    elif cmd == "sample":
        if len(parts) < 2:
            print(f"Usage: sample <sample> [name]  (samples: {', '.join(SAMPLES)})")
        elif parts[1] not in SAMPLES:
            print(f"Sample not found: {parts[1]}")
        else:
            result_name = parts[2] if len(parts) > 2 else parts[1]
            automata[result_name] = SAMPLES[parts[1]]()
            print(f"Created: {result_name}")

    # List
    elif cmd == "list":
        if automata:
            print("Automata:")
            for name, aut in sorted(automata.items()):
                print(f"  {name}: {aut.type_name}, {aut.num_states()} states")
        else:
            print("Nothing loaded")

    # Delete
    elif cmd == "delete":
        if len(parts) < 2:
            print("Usage: delete <name>")
        elif parts[1] in automata:
            del automata[parts[1]]
            print(f"Deleted: {parts[1]}")
        else:
            print(f"Not found: {parts[1]}")

    # Clear all
    elif cmd == "clear":
        automata.clear()
        print("Cleared all")

    # Everything below works on an existing automaton
    elif cmd in ["state", "trans", "eps", "initial", "test", "trace", "show", "dot", "graph"]:
        if len(parts) < 2:
            print(f"Usage: {cmd} <name> ... (type 'help')")
        elif parts[1] not in automata:
            print(f"Automaton not found: {parts[1]}")
        else:
            run_automaton_command(cmd, parts, automata[parts[1]])

    else:
        print(f"Unknown command: {cmd}")

    return True


def run_automaton_command(cmd: str, parts: List[str], aut: Automaton) -> None:
    name = parts[1]

    # Add state
    if cmd == "state":
        accepting = len(parts) > 2 and parts[2].lower() in ["accept", "accepting", "final"]
        state = aut.add_state(accepting)
        print(f"Added state {state}{' (accepting)' if accepting else ''}")

    # Add transition
    elif cmd == "trans":
        if len(parts) < 5:
            print("Usage: trans <name> <q> <sym> <q'>")
        else:
            src, tgt = parse_state(aut, parts[2]), parse_state(aut, parts[4])
            aut.add_transition(src, parts[3], tgt)
            print(f"Added {src} -{parts[3]}-> {tgt}")

    # Add epsilon transition
    elif cmd == "eps":
        if not isinstance(aut, Nfa):
            print("eps is only valid for NFA automata")
        elif len(parts) < 4:
            print("Usage: eps <name> <q> <q'>")
        else:
            src, tgt = parse_state(aut, parts[2]), parse_state(aut, parts[3])
            aut.add_epsilon_transition(src, tgt)
            print(f"Added {src} -ε-> {tgt}")

    # Set initial state
    elif cmd == "initial":
        if len(parts) < 3:
            print("Usage: initial <name> <q>")
        else:
            aut.initial = parse_state(aut, parts[2])
            print(f"Start: {aut.initial}")

    # Test word
    elif cmd == "test":
        print("ACCEPTED" if aut.accepts(parse_word(parts)) else "REJECTED")

    # Trace word
    elif cmd == "trace":
        word = parse_word(parts)
        steps = aut.simulate(word)
        if not steps:
            print("Automaton has no states")
            return
        for i, step in enumerate(steps):
            label = format_states(step) if isinstance(aut, Nfa) else str(step)
            consumed = word[:i] or "ε"
            print(f"  {consumed}: {label}")
        if not isinstance(aut, Nfa) and len(steps) <= len(word):
            print(f"  stuck at symbol {len(steps)}: {word[len(steps) - 1]!r}")
        print("ACCEPTED" if aut.accepts(word) else "REJECTED")

    # Show info
    elif cmd == "show":
        print(describe(name, aut))

    # DOT source
    elif cmd == "dot":
        print(aut.render_graphviz())

    # Render graph
    elif cmd == "graph":
        filename = parts[2] if len(parts) > 2 else name
        try:
            aut.to_graphviz(filename=filename, view=False)
            print(f"Created: {filename}.png")
        except (ExecutableNotFound, CalledProcessError) as e:
            print(f"Error: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """Simple interactive terminal for building and running automata."""
    parser = argparse.ArgumentParser(description="Build and run finite automata")
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        default=[],
        help="Run a command and exit (may be repeated)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s"
        )

    automata: Dict[str, Automaton] = {}

    if args.command:
        for command in args.command:
            try:
                if not run_command(command, automata):
                    break
            except (AutomatonError, ValueError) as e:
                print(f"Error: {e}")
        return 0

    print("Automaton Terminal - Type 'help' for commands\n")

    while True:
        try:
            if not run_command(input("> ").strip(), automata):
                break
        except KeyboardInterrupt:
            print("\nUse 'exit' to quit")
        except EOFError:
            break
        except (AutomatonError, ValueError) as e:
            print(f"Error: {e}")

    print("Goodbye!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
