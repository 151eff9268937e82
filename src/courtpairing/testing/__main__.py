"""Testing CLI for Court Pairing.

Interactive and standard command-line access to the session simulator and
the round checker.
"""

# Court Pairing
# Copyright (C) 2025  Court Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import argparse
import copy
import json
import sys
import time
from pathlib import Path
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from courtpairing.utils import setup_logger

logger = setup_logger(__name__)

DISTRIBUTIONS = ["uniform", "normal", "skewed", "club", "mixed"]


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


# Command definitions with their options
COMMANDS = {
    "simulate": {
        "description": "Simulate a random session and check every round",
        "options": {
            "--players": "Number of players (default: 16)",
            "--courts": "Number of courts (default: 3)",
            "--rounds": "Number of rounds (default: 8)",
            "--distribution": "Rating distribution (uniform/normal/skewed/club/mixed)",
            "--rated-courts": "Courts with a minimum rating (default: 0)",
            "--rated-minimum": "Minimum rating of rated courts (default: 4.0)",
            "--partnerships": "Fixed partnerships to configure (default: 0)",
            "--pause-rate": "Chance per round of a pause toggle (default: 0.0)",
            "--no-scoring": "Do not record scores",
            "--seed": "Random seed for reproducibility",
            "--output": "Save the simulated session as JSON",
        },
    },
    "validate": {
        "description": "Check the rounds of a saved session",
        "options": {
            "--file": "Session file to validate (JSON)",
            "--round": "Specific round to validate",
            "--detailed": "Show detailed check results",
            "--export": "Export validation report (json/txt)",
        },
    },
    "stats": {
        "description": "Print player stats of a saved session",
        "options": {
            "--file": "Session file (JSON)",
        },
    },
    "benchmark": {
        "description": "Time round generation",
        "options": {
            "--players": "Number of players (default: 64)",
            "--courts": "Number of courts (default: 16)",
            "--rounds": "Rounds per iteration (default: 8)",
            "--iterations": "Number of iterations (default: 5)",
        },
    },
    "help": {
        "description": "Show help for specific command",
        "options": {
            "<command>": "Command name to get help for",
        },
    },
    "exit": {"description": "Exit the interactive mode", "options": {}},
}


BANNER = (
    f"\n{Colors.BOLD}{Colors.OKBLUE}courtpairing-test{Colors.ENDC}"
    " - simulate, check and inspect court sessions\n"
    f"{Colors.BOLD}help{Colors.ENDC} lists commands, "
    f"{Colors.BOLD}exit{Colors.ENDC} leaves\n"
)


def describe_commands(command: Optional[str] = None) -> str:
    """Return help text for one command, or the command list."""
    if command is None or command not in COMMANDS:
        lines = []
        if command is not None:
            lines.append(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        lines.append(f"{Colors.BOLD}Commands:{Colors.ENDC}")
        lines.extend(
            f"  {Colors.OKGREEN}{name:<10}{Colors.ENDC} {info['description']}"
            for name, info in COMMANDS.items()
        )
        return "\n".join(lines)

    info = COMMANDS[command]
    lines = [f"{Colors.BOLD}{command}{Colors.ENDC}: {info['description']}"]
    lines.extend(
        f"  {Colors.OKCYAN}{option:<16}{Colors.ENDC} {text}"
        for option, text in info["options"].items()
    )
    return "\n".join(lines)


def command_completer() -> NestedCompleter:
    """Complete command names, their options, and ``help <command>``."""
    options = {
        name: WordCompleter(list(info["options"])) if info["options"] else None
        for name, info in COMMANDS.items()
    }
    options["help"] = WordCompleter(list(COMMANDS))
    options.update({f"/{name}": completer for name, completer in list(options.items())})
    return NestedCompleter.from_nested_dict(options)


def load_session_file(file_path: Path):
    """Load a session and its players from a JSON file written by ``simulate``."""
    from courtpairing.models.player import Player
    from courtpairing.models.session import Session

    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    session = Session.from_dict(data["session"])
    players = [Player.from_dict(p) for p in data.get("players", [])]
    return session, players


def run_simulate_command(args: argparse.Namespace) -> int:
    """Run the simulate command."""
    from courtpairing.testing.simulator import (
        RatingDistribution,
        SessionSimulator,
        SimulationConfig,
    )

    print(f"\n{Colors.BOLD}Simulating session...{Colors.ENDC}")

    config = SimulationConfig(
        num_players=args.players,
        num_courts=args.courts,
        num_rounds=args.rounds,
        rating_distribution=RatingDistribution[args.distribution.upper()],
        rated_courts=args.rated_courts,
        rated_minimum=args.rated_minimum,
        partnerships=args.partnerships,
        pause_rate=args.pause_rate,
        scoring=not args.no_scoring,
        seed=args.seed,
    )

    report = SessionSimulator(config).run()

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(report.to_json(), encoding="utf-8")
        print(f"{Colors.OKGREEN}Session saved to: {output_path}{Colors.ENDC}")

    repeats = report.partner_repeat_summary()
    print(f"\n{Colors.BOLD}Session Simulated:{Colors.ENDC}")
    print(f"  Players: {len(report.players)}")
    print(f"  Courts: {len(report.session.courts)}")
    print(f"  Rounds completed: {report.rounds_completed}")
    print(f"  Sit-out spread: {report.sit_out_spread()}")
    print(
        f"  Repeat partners: {repeats['repeated_pairs']}/{repeats['distinct_pairs']} "
        f"pairs ({repeats['repeat_rate'] * 100:.1f}%)"
    )
    if report.stopped_early:
        print(f"  {Colors.WARNING}Stopped early: {report.stopped_early}{Colors.ENDC}")

    if report.violations:
        print(f"  {Colors.FAIL}Violations: {len(report.violations)}{Colors.ENDC}")
        for round_number, check in report.violations:
            print(f"    Round {round_number}: {check}")
        return 1

    print(f"  {Colors.OKGREEN}All rounds passed every check{Colors.ENDC}")
    return 0


def run_validate_command(args: argparse.Namespace) -> int:
    """Run the validation command.

    Each round is checked against the stats as they stood before it. The pause
    set of each round is taken to be everyone on the roster who is absent from
    it.
    """
    from courtpairing.controllers.session import aggregate_round_stats
    from courtpairing.validation import RoundChecker

    if not args.file:
        print(f"{Colors.FAIL}Error: --file required{Colors.ENDC}")
        return 1

    file_path = Path(args.file)
    if not file_path.exists():
        print(f"{Colors.FAIL}Error: File not found: {file_path}{Colors.ENDC}")
        return 1

    print(f"\n{Colors.BOLD}Validating session: {file_path}{Colors.ENDC}")

    session, players = load_session_file(file_path)
    checker = RoundChecker()

    # Replay the rounds so each one sees the stats it was generated from
    replay = copy.deepcopy(session)
    replay.live_data.player_stats = []
    reports = []
    for round_data in session.live_data.rounds:
        absent = [pid for pid in session.player_ids if pid not in round_data.player_ids]
        if args.round is None or args.round == round_data.round_number:
            reports.append(checker.check_round(round_data, replay, players, absent))
        if round_data.is_completed:
            replay.live_data.player_stats = aggregate_round_stats(
                round_data,
                replay.live_data.player_stats,
                partnership_constraint=session.partnership_constraint,
                players=players,
            )

    if not reports:
        print(f"{Colors.WARNING}No rounds to validate{Colors.ENDC}")
        return 1

    invalid = [r for r in reports if not r.is_valid]
    print(f"\n{Colors.BOLD}Validation Results:{Colors.ENDC}")
    print(f"  Rounds checked: {len(reports)}")
    print(f"  Rounds with violations: {len(invalid)}")

    for report in reports:
        color = Colors.OKGREEN if report.is_valid else Colors.FAIL
        print(f"  {color}{report.summary}{Colors.ENDC}")
        if args.detailed:
            for result in report.results:
                print(
                    f"    - {result.check}: {result.status.value} "
                    f"({result.severity.value}) {result.description}"
                )
                if result.details and not result.passed:
                    print(f"      {result.details}")

    if args.export:
        export_path = Path(args.export)
        if export_path.suffix == ".json":
            export_data = {
                "session_id": session.id,
                "rounds": [
                    {
                        "round_number": r.round_number,
                        "is_valid": r.is_valid,
                        "summary": r.summary,
                        "results": [
                            {
                                "check": c.check,
                                "status": c.status.value,
                                "severity": c.severity.value,
                                "description": c.description,
                                "details": c.details,
                            }
                            for c in r.results
                        ],
                    }
                    for r in reports
                ],
            }
            export_path.write_text(json.dumps(export_data, indent=2), encoding="utf-8")
        else:
            export_path.write_text(
                "\n".join(r.summary for r in reports), encoding="utf-8"
            )

        print(f"\n{Colors.OKGREEN}Report exported to: {export_path}{Colors.ENDC}")

    return 1 if invalid else 0


def run_stats_command(args: argparse.Namespace) -> int:
    """Print the player stats table of a saved session."""
    from courtpairing.analysis import format_player_stats

    file_path = Path(args.file)
    if not file_path.exists():
        print(f"{Colors.FAIL}Error: File not found: {file_path}{Colors.ENDC}")
        return 1

    session, players = load_session_file(file_path)
    print(f"\n{Colors.BOLD}{session.name}{Colors.ENDC}")
    print(
        f"State: {session.state.value}, "
        f"stats through round {session.live_data.stats_through_round}\n"
    )
    print(format_player_stats(session.live_data.player_stats, players))
    return 0


def run_benchmark_command(args: argparse.Namespace) -> int:
    """Run performance benchmarks."""
    from courtpairing.testing.simulator import SessionSimulator, SimulationConfig

    print(f"\n{Colors.BOLD}Running performance benchmark...{Colors.ENDC}")
    print(f"Session size: {args.players} players, {args.courts} courts")
    print(f"Rounds: {args.rounds}, iterations: {args.iterations}\n")

    times = []

    for i in range(args.iterations):
        config = SimulationConfig(
            num_players=args.players,
            num_courts=args.courts,
            num_rounds=args.rounds,
            seed=42 + i,
        )
        simulator = SessionSimulator(config)
        start = time.perf_counter()
        simulator.run()
        elapsed = time.perf_counter() - start
        times.append(elapsed)

        print(f"  Iteration {i+1}/{args.iterations}: {elapsed*1000:.2f}ms")

    avg_time = sum(times) / len(times)
    per_round = avg_time / max(args.rounds, 1)

    print(f"\n{Colors.BOLD}Results:{Colors.ENDC}")
    print(f"  Average session: {avg_time*1000:.2f}ms")
    print(f"  Average round: {per_round*1000:.2f}ms")
    print(f"  Min: {min(times)*1000:.2f}ms")
    print(f"  Max: {max(times)*1000:.2f}ms")

    return 0


def add_simulate_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--players", type=int, default=16, help="Number of players")
    parser.add_argument("--courts", type=int, default=3, help="Number of courts")
    parser.add_argument("--rounds", type=int, default=8, help="Number of rounds")
    parser.add_argument(
        "--distribution",
        choices=DISTRIBUTIONS,
        default="normal",
        help="Rating distribution",
    )
    parser.add_argument(
        "--rated-courts", type=int, default=0, help="Courts with a minimum rating"
    )
    parser.add_argument(
        "--rated-minimum", type=float, default=4.0, help="Minimum rating of rated courts"
    )
    parser.add_argument(
        "--partnerships", type=int, default=0, help="Fixed partnerships to configure"
    )
    parser.add_argument(
        "--pause-rate", type=float, default=0.0, help="Chance per round of a pause toggle"
    )
    parser.add_argument("--no-scoring", action="store_true", help="Do not record scores")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--output", help="Output file path")


def add_validate_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--file", required=True, help="Session file (JSON)")
    parser.add_argument("--round", type=int, help="Specific round to validate")
    parser.add_argument(
        "--detailed", action="store_true", help="Show detailed check results"
    )
    parser.add_argument("--export", help="Export report (json/txt)")


def add_benchmark_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--players", type=int, default=64, help="Number of players")
    parser.add_argument("--courts", type=int, default=16, help="Number of courts")
    parser.add_argument("--rounds", type=int, default=8, help="Number of rounds")
    parser.add_argument(
        "--iterations", type=int, default=5, help="Number of iterations"
    )


def create_command_parser(command: str) -> argparse.ArgumentParser:
    """Create the parser for one command in interactive mode."""
    parser = argparse.ArgumentParser(
        prog=command, description=COMMANDS[command]["description"]
    )
    if command == "simulate":
        add_simulate_arguments(parser)
    elif command == "validate":
        add_validate_arguments(parser)
    elif command == "stats":
        parser.add_argument("--file", required=True, help="Session file (JSON)")
    elif command == "benchmark":
        add_benchmark_arguments(parser)
    return parser


COMMAND_HANDLERS = {
    "simulate": run_simulate_command,
    "validate": run_validate_command,
    "stats": run_stats_command,
    "benchmark": run_benchmark_command,
}


def run_interactive_mode():
    """Run in interactive mode with autocomplete."""
    print(BANNER)

    style = Style.from_dict(
        {
            "prompt": "#00aa00 bold",
        }
    )

    session = PromptSession(
        completer=command_completer(),
        history=InMemoryHistory(),
        style=style,
    )

    while True:
        try:
            user_input = session.prompt("courtpairing-test> ").strip()

            if not user_input:
                continue

            if user_input in ["exit", "quit", "q", "/exit"]:
                print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
                break

            parts = user_input.split()
            command = parts[0].lstrip("/")

            if command in ("help", "?"):
                topic = parts[1].lstrip("/") if len(parts) > 1 else None
                print(describe_commands(topic))
                continue

            if command not in COMMAND_HANDLERS:
                print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
                print(f"Type {Colors.BOLD}help{Colors.ENDC} to list commands")
                continue

            try:
                args = create_command_parser(command).parse_args(parts[1:])
                COMMAND_HANDLERS[command](args)
            except SystemExit:
                # argparse calls sys.exit on error, catch it
                continue
            except Exception as e:
                print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
                logger.exception("Command execution failed")

        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
        except EOFError:
            print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
            break

    return 0


def run_standard_mode():
    """Run in standard CLI mode (non-interactive)."""
    parser = create_main_parser()
    args = parser.parse_args()

    if args.interactive:
        return run_interactive_mode()

    if hasattr(args, "func"):
        return args.func(args)
    else:
        parser.print_help()
        return 0


def create_main_parser():
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="courtpairing-test",
        description="Testing CLI for Court Pairing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  courtpairing-test

  # Simulate a club night
  courtpairing-test simulate --players 23 --courts 4 --rounds 10 --rated-courts 1

  # Check a saved session
  courtpairing-test validate --file session.json --detailed

  # Benchmark generation
  courtpairing-test benchmark --players 128 --courts 32
        """,
    )

    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Start in interactive mode"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    sim_parser = subparsers.add_parser("simulate", help="Simulate a random session")
    add_simulate_arguments(sim_parser)
    sim_parser.set_defaults(func=run_simulate_command)

    val_parser = subparsers.add_parser("validate", help="Check a saved session")
    add_validate_arguments(val_parser)
    val_parser.set_defaults(func=run_validate_command)

    stats_parser = subparsers.add_parser("stats", help="Print player stats")
    stats_parser.add_argument("--file", required=True)
    stats_parser.set_defaults(func=run_stats_command)

    bench_parser = subparsers.add_parser("benchmark", help="Time round generation")
    add_benchmark_arguments(bench_parser)
    bench_parser.set_defaults(func=run_benchmark_command)

    return parser


def main() -> int:
    """Main entry point for courtpairing-test CLI."""
    if len(sys.argv) == 1:
        return run_interactive_mode()

    if "--interactive" in sys.argv or "-i" in sys.argv:
        return run_interactive_mode()

    return run_standard_mode()


if __name__ == "__main__":
    sys.exit(main())
