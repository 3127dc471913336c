"""
Interactive console for exploring dice macros.

Typing a macro shows its statistics, one roll and its distribution. Lines
starting with ':' are commands:

    :gen MIN MAX [FACE ...]   forge combinations for a target range
    :roll MACRO               roll a macro once
    :lang LOCALE              switch the label locale
    q                         quit
"""

import random

from prompt_toolkit import ANSI, PromptSession
from prompt_toolkit.completion import WordCompleter

from rollforge.core.combinations import generate_fallback
from rollforge.core.config import EngineSettings
from rollforge.core.dice_parser import format_macro, parse
from rollforge.core.labels import LabelCatalog
from rollforge.core.sheets import (
    print_candidates_table,
    print_distribution_sheet,
    print_outcome_sheet,
    print_stats_sheet,
)
from rollforge.core.simulation import simulate_once
from rollforge.core.statistics import compute_stats
from rollforge.core.utils import cprint, crule

COMMANDS = [":gen", ":roll", ":lang", "q"]


class MacroConsole:
    """
    Read-eval-print loop over the dice engine.

    Uses prompt_toolkit for input with history and command completion, and
    rich for every output.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the console.

        Args:
            settings (EngineSettings | None): Settings, defaults if None.
            rng (random.Random | None): Random source for rolls.

        """
        self.settings = settings or EngineSettings()
        self.rng = rng
        self.locale = self.settings.locale

    def run(self) -> None:
        """Prompts for input until the user quits."""
        session: PromptSession = PromptSession(
            completer=WordCompleter(COMMANDS, sentence=True),
        )
        crule("RollForge", style="bold green")
        while True:
            try:
                answer = session.prompt(ANSI("\nMacro > "))
            except (EOFError, KeyboardInterrupt):
                break
            if not self.handle(answer):
                break

    def handle(self, answer: str) -> bool:
        """
        Handles one line of input.

        Args:
            answer (str): The line typed by the user.

        Returns:
            bool: False when the user asked to quit, True otherwise.

        """
        answer = answer.strip()
        if not answer:
            return True
        if answer.lower() == "q":
            return False
        command, _, rest = answer.partition(" ")
        if command == ":gen":
            self.forge(rest.split())
        elif command == ":roll":
            print_outcome_sheet(simulate_once(rest, self.rng), self.locale)
        elif command == ":lang":
            self.switch_locale(rest.strip())
        elif command.startswith(":"):
            cprint(f"[red]Unknown command {command}[/]. Try one of: {', '.join(COMMANDS)}")
        else:
            self.analyze(answer)
        return True

    def analyze(self, macro: str) -> None:
        """Prints the statistics, one roll and the distribution of a macro."""
        parsed = parse(macro)
        normalized = format_macro(parsed)
        if parsed.ignored:
            cprint(f"[yellow]Ignored: {', '.join(parsed.ignored)}[/]")
        print_stats_sheet(normalized, compute_stats(parsed), self.locale)
        print_outcome_sheet(simulate_once(parsed, self.rng), self.locale)
        print_distribution_sheet(
            parsed, self.settings.simulation_count, self.rng, self.locale
        )

    def forge(self, args: list[str]) -> None:
        """Generates combinations from ':gen MIN MAX [FACE ...]' arguments."""
        if len(args) < 2 or not all(arg.lstrip("-").isdigit() for arg in args[:2]):
            cprint("[red]Usage: :gen MIN MAX [FACE ...][/]")
            return
        target_min, target_max = int(args[0]), int(args[1])
        faces = args[2:] or self.settings.available_faces
        candidates = generate_fallback(
            target_min, target_max, faces, self.settings.max_candidates
        )
        print_candidates_table(candidates, self.locale)

    def switch_locale(self, locale: str) -> None:
        locales = LabelCatalog().locales
        if locale in locales:
            self.locale = locale
            cprint(f"Locale set to [bold]{locale}[/]")
        else:
            cprint(f"[red]Unknown locale '{locale}'[/]. Available: {', '.join(locales)}")
