#!/usr/bin/env python3
"""
POLYEQ Command-Line Interface

Provides an interactive REPL plus one-shot, compare, random-test and
pipe/filter modes.

Usage:
    polyeq                              # Start REPL
    polyeq -e "2(x+1)"                  # Analyze one expression
    polyeq -c "(x+y)^2" "x^2+2xy+y^2"   # Compare two expressions
    polyeq --random 10 --seed 1         # Analyze generated expressions
    polyeq --edge-cases                 # Analyze the built-in edge cases
    echo "1+x == x+1" | polyeq          # Filter mode

Input lines:
    EXPR               Analyze an expression
    EXPR == EXPR       Compare two expressions
    # comment          Ignored

REPL Commands:
    :help              Show help
    :tokens on|off     Show the token stream
    :tree on|off       Show the parse tree
    :json on|off       Print results as JSON
    :random [N]        Analyze N random expressions
    :edge              Analyze the built-in edge cases
    :quit              Exit
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .engine import ExpressionEngine, Analysis, Comparison
from .errors import PolyeqError
from .generator import ExpressionGenerator, EDGE_CASES

# Try to import readline for better REPL experience
try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False

logger = logging.getLogger(__name__)

COMPARE_SEPARATOR = "=="


class PolyeqCompleter:
    """Tab completer for the POLYEQ REPL."""

    COMMANDS = [
        ":help", ":quit", ":exit", ":q",
        ":tokens", ":tree", ":json",
        ":random", ":edge",
    ]

    TOGGLE_OPTIONS = ["on", "off"]

    def __init__(self, repl: 'PolyeqREPL'):
        self.repl = repl
        self.matches: List[str] = []

    def complete(self, text: str, state: int) -> Optional[str]:
        """Return the next possible completion for 'text'."""
        if state == 0:
            line = readline.get_line_buffer() if HAS_READLINE else ""
            self.matches = self._get_matches(text, line)

        try:
            return self.matches[state]
        except IndexError:
            return None

    def _get_matches(self, text: str, line: str) -> List[str]:
        """Get list of matches for the current input."""
        line = line.lstrip()

        for cmd in (":tokens ", ":tree ", ":json "):
            if line.startswith(cmd):
                return [t for t in self.TOGGLE_OPTIONS if t.startswith(text)]

        if text.startswith(":") or (line.startswith(":") and " " not in line):
            return [c for c in self.COMMANDS if c.startswith(text)]

        return []


def parse_toggle(arg: str, current: bool) -> bool:
    """Interpret an on/off argument; anything else flips the current value."""
    arg = arg.lower()
    if arg in ("on", "true", "1"):
        return True
    if arg in ("off", "false", "0"):
        return False
    return not current


class PolyeqREPL:
    """Interactive REPL for polyeq."""

    def __init__(self, engine: Optional[ExpressionEngine] = None,
                 rng: Optional[random.Random] = None):
        self.engine = engine or ExpressionEngine()
        self.generator = ExpressionGenerator(rng=rng)
        self.show_tokens = False
        self.show_tree = False
        self.json_output = False
        self.running = True

        if HAS_READLINE:
            self.history_file = Path.home() / ".polyeq_history"
            try:
                readline.read_history_file(self.history_file)
            except (FileNotFoundError, OSError):
                pass
            readline.set_history_length(1000)

            self.completer = PolyeqCompleter(self)
            readline.set_completer(self.completer.complete)
            readline.parse_and_bind("tab: complete")
            readline.set_completer_delims(" \t\n")

    def save_history(self):
        """Save readline history."""
        if HAS_READLINE:
            try:
                readline.write_history_file(self.history_file)
            except OSError as e:
                logger.warning("could not save history to %s: %s", self.history_file, e)

    def handle_command(self, line: str) -> Optional[str]:
        """
        Handle a REPL command (starts with :).

        Returns a message to print, or None.
        """
        parts = line[1:].split(None, 1)
        if not parts:
            return "Unknown command. Type :help for help."

        cmd = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else ""

        if cmd == "help":
            return self.help_text()

        elif cmd in ("quit", "exit", "q"):
            self.running = False
            return None

        elif cmd == "tokens":
            self.show_tokens = parse_toggle(arg, self.show_tokens)
            return f"Tokens {'shown' if self.show_tokens else 'hidden'}"

        elif cmd == "tree":
            self.show_tree = parse_toggle(arg, self.show_tree)
            return f"Tree {'shown' if self.show_tree else 'hidden'}"

        elif cmd == "json":
            self.json_output = parse_toggle(arg, self.json_output)
            return f"JSON output {'enabled' if self.json_output else 'disabled'}"

        elif cmd == "random":
            try:
                count = int(arg) if arg else 5
            except ValueError:
                return "Usage: :random [N]"
            return self.process_many(self.generator.expressions(count))

        elif cmd == "edge":
            return self.process_many(EDGE_CASES)

        else:
            return f"Unknown command: {cmd}. Type :help for help."

    def help_text(self) -> str:
        """Return help text."""
        return """POLYEQ REPL Commands:
  :help              Show this help
  :tokens on|off     Show the token stream
  :tree on|off       Show the parse tree
  :json on|off       Print results as JSON
  :random [N]        Analyze N random expressions (default 5)
  :edge              Analyze the built-in edge cases
  :quit              Exit

Syntax:
  EXPR               Print the canonical form of EXPR
  EXPR == EXPR       Compare two expressions
"""

    def format_analysis(self, result: Analysis) -> str:
        if self.json_output:
            return json.dumps(result.to_dict())
        lines = []
        if self.show_tokens:
            lines.append(result.format("tokens"))
        if self.show_tree:
            lines.append(result.format("tree"))
        lines.append(result.canonical)
        return "\n".join(lines)

    def format_comparison(self, result: Comparison) -> str:
        if self.json_output:
            return json.dumps(result.to_dict())
        lines = []
        for side in (result.a, result.b):
            if self.show_tokens:
                lines.append(side.format("tokens"))
            if self.show_tree:
                lines.append(side.format("tree"))
        lines.append(result.format("brief"))
        return "\n".join(lines)

    def evaluate_line(self, line: str) -> str:
        """
        Analyze or compare one input line.

        Raises:
            PolyeqError: If either expression fails to tokenize or parse
        """
        if COMPARE_SEPARATOR in line:
            left, right = line.split(COMPARE_SEPARATOR, 1)
            return self.format_comparison(self.engine.compare(left.strip(), right.strip()))
        return self.format_analysis(self.engine.analyze(line))

    def process_many(self, texts) -> str:
        """Analyze several expressions, one "text => result" block each."""
        lines = []
        for text in texts:
            lines.append(f"{text}  =>  {self.process_line(text)}")
        return "\n".join(lines)

    def process_line(self, line: str) -> Optional[str]:
        """
        Process a single line of input.

        Returns the result to print, or None.
        """
        line = line.strip()

        # Empty line or comment
        if not line or line.startswith("#"):
            return None

        if line.startswith(":"):
            return self.handle_command(line)

        try:
            return self.evaluate_line(line)
        except PolyeqError as e:
            return f"Error: {e}"

    def run(self):
        """Run the REPL loop."""
        print("POLYEQ - Polynomial Equality via canonical forms")
        print("Type :help for help, :quit to exit")
        print()

        while self.running:
            try:
                line = input("polyeq> ")
                result = self.process_line(line)
                if result:
                    print(result)
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print()
                continue

        self.save_history()


class BatchRunner:
    """Runs polyeq on expressions that do not come from the REPL."""

    def __init__(self, repl: Optional[PolyeqREPL] = None):
        self.repl = repl or PolyeqREPL()

    def run_expression(self, text: str) -> int:
        """
        Analyze (or, with "==", compare) one expression and print the result.

        Returns:
            Exit code (0 for success, 1 on error)
        """
        try:
            print(self.repl.evaluate_line(text))
        except PolyeqError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    def run_line(self, line: str) -> int:
        """Like run_expression, but blank lines and comments are skipped."""
        line = line.strip()
        if not line or line.startswith("#"):
            return 0
        return self.run_expression(line)

    def run_compare(self, a: str, b: str) -> int:
        """Compare two expressions."""
        try:
            result = self.repl.engine.compare(a, b)
        except PolyeqError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(self.repl.format_comparison(result))
        return 0

    def run_many(self, texts) -> int:
        """Analyze several expressions; stop at the first failure."""
        for text in texts:
            if not self.repl.json_output:
                print(f"# {text}")
            code = self.run_line(text)
            if code:
                return code
        return 0

    def run_stdin(self) -> int:
        """
        Read lines from stdin and analyze or compare them.

        Returns:
            Exit code (0 for success)
        """
        for line in sys.stdin:
            code = self.run_line(line)
            if code:
                return code
        return 0


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="polyeq",
        description="POLYEQ - Polynomial Equality via canonical forms",
        epilog="Examples:\n"
               "  polyeq                            Start REPL\n"
               "  polyeq -e '2(x+1)'                Analyze an expression\n"
               "  polyeq -c '1+x' 'x+1'             Compare two expressions\n"
               "  polyeq --random 10 --seed 1       Random expressions\n"
               "  echo '1+x == x+1' | polyeq        Filter mode\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "-e", "--expr",
        help="Analyze a single expression"
    )

    parser.add_argument(
        "-c", "--compare",
        nargs=2,
        metavar=("A", "B"),
        help="Compare two expressions"
    )

    parser.add_argument(
        "--random",
        type=int,
        metavar="N",
        help="Analyze N randomly generated expressions"
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for --random"
    )

    parser.add_argument(
        "--depth",
        type=int,
        default=3,
        help="Maximum nesting depth for --random (default: 3)"
    )

    parser.add_argument(
        "--edge-cases",
        action="store_true",
        help="Analyze the built-in edge cases"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (canonical forms only)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.random is not None and args.random < 0:
        parser.error("--random must be non-negative")
    if args.depth < 0:
        parser.error("--depth must be non-negative")

    rng = random.Random(args.seed) if args.seed is not None else None
    runner = BatchRunner(PolyeqREPL(rng=rng))
    runner.repl.json_output = args.json
    if not args.quiet:
        runner.repl.show_tokens = True
        runner.repl.show_tree = True

    # Determine mode
    if args.compare:
        sys.exit(runner.run_compare(*args.compare))

    elif args.expr is not None:
        sys.exit(runner.run_expression(args.expr))

    elif args.random is not None:
        texts = runner.repl.generator.expressions(args.random, args.depth)
        sys.exit(runner.run_many(texts))

    elif args.edge_cases:
        sys.exit(runner.run_many(EDGE_CASES))

    elif not sys.stdin.isatty():
        # Pipe/filter mode prints canonical forms unless asked otherwise
        runner.repl.show_tokens = False
        runner.repl.show_tree = False
        sys.exit(runner.run_stdin())

    else:
        runner.repl.show_tokens = False
        runner.repl.show_tree = False
        runner.repl.run()


if __name__ == "__main__":
    main()
