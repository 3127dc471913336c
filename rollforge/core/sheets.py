"""
Module for printing statistics, rolls, histograms and combinations in a formatted way.
"""

import random

from rich.padding import Padding
from rich.table import Table

from rollforge.core.combinations import CombinationCandidate
from rollforge.core.dice_parser import ParsedMacro, as_parsed, format_macro
from rollforge.core.distribution import distribution_for, is_single_die
from rollforge.core.labels import label_text, translate
from rollforge.core.simulation import SimulationOutcome, chart_data
from rollforge.core.statistics import RollStats
from rollforge.core.utils import cprint, make_bar


def stats_to_string(stats: RollStats, locale: str | None = None) -> str:
    """
    Converts statistics to a formatted, translated summary.

    Args:
        stats (RollStats): The statistics to format.
        locale (str | None): The locale of the summary.

    Returns:
        str: The summary with colored values.

    """
    return translate(
        "stats.summary",
        locale,
        min=f"[red]{stats.min}[/]",
        max=f"[green]{stats.max}[/]",
        average=f"[yellow]{stats.average:.2f}[/]",
    )


def print_stats_sheet(
    macro: str,
    stats: RollStats,
    locale: str | None = None,
    padding: int = 2,
) -> None:
    """
    Prints the statistics of a macro.

    Args:
        macro (str): The normalized macro.
        stats (RollStats): Its statistics.
        locale (str | None): The locale of the labels.
        padding (int): Left padding for the output. Defaults to 2.

    """
    sheet = f"[bold cyan]{macro}[/]: {stats_to_string(stats, locale)}"
    cprint(Padding(sheet, (0, padding)))


def outcome_to_string(outcome: SimulationOutcome, locale: str | None = None) -> str:
    return translate(
        "roll.result",
        locale,
        total=f"[bold yellow]{outcome.total}[/]",
        breakdown=outcome.describe(),
    )


def print_outcome_sheet(
    outcome: SimulationOutcome,
    locale: str | None = None,
    padding: int = 2,
) -> None:
    cprint(Padding(outcome_to_string(outcome, locale), (0, padding)))


def histogram_table(
    histogram: dict[int, float],
    title: str = "",
    bar_length: int = 40,
) -> Table:
    """
    Builds a table drawing one bar per total.

    Args:
        histogram (dict[int, float]): Occurrences or weights per total.
        title (str): The title of the table.
        bar_length (int): Length of the longest bar.

    Returns:
        Table: The table, ready to print.

    """
    points = chart_data(histogram)
    total = sum(frequency for _, frequency in points)
    peak = max((frequency for _, frequency in points), default=0)
    table = Table(title=title or None, pad_edge=False)
    table.add_column("Roll", style="cyan", justify="right")
    table.add_column("Count", justify="right")
    table.add_column("%", justify="right", style="magenta")
    table.add_column("")
    for roll, frequency in points:
        share = frequency / total * 100 if total else 0.0
        table.add_row(
            str(roll),
            f"{frequency:g}",
            f"{share:.1f}",
            make_bar(frequency, peak, bar_length, "blue"),
        )
    return table


def print_histogram(histogram: dict[int, float], title: str = "") -> None:
    cprint(histogram_table(histogram, title))


def candidates_table(
    candidates: list[CombinationCandidate],
    locale: str | None = None,
) -> Table:
    """
    Builds a table listing ranked combinations.

    Args:
        candidates (list[CombinationCandidate]): The candidates, in rank order.
        locale (str | None): The locale of the headers and labels.

    Returns:
        Table: The table, ready to print.

    """
    table = Table(title=translate("table.combinations", locale), pad_edge=False)
    table.add_column("#", style="cyan")
    table.add_column(translate("table.macro", locale), style="bold")
    table.add_column(translate("table.min", locale), justify="right")
    table.add_column(translate("table.max", locale), justify="right")
    table.add_column(translate("table.average", locale), justify="right")
    table.add_column(translate("table.fit", locale))
    table.add_column(translate("table.shape", locale), style="blue")
    for i, candidate in enumerate(candidates, 1):
        label = candidate.fit_label
        table.add_row(
            str(i),
            candidate.macro,
            str(candidate.min),
            str(candidate.max),
            f"{candidate.average:.2f}",
            f"[{label.color}]{label_text(label, locale)} ({candidate.fit_score:.0f})[/]",
            label_text(candidate.distribution_label, locale),
        )
    return table


def print_candidates_table(
    candidates: list[CombinationCandidate],
    locale: str | None = None,
) -> None:
    if not candidates:
        cprint(f"[yellow]{translate('generate.empty', locale)}[/]")
        return
    cprint(candidates_table(candidates, locale))


def print_distribution_sheet(
    macro: str | ParsedMacro,
    runs: int,
    rng: random.Random | None = None,
    locale: str | None = None,
) -> dict[int, float]:
    """
    Prints the distribution of a macro, exact for single dice, simulated otherwise.

    Args:
        macro (str | ParsedMacro): The macro text or an already parsed macro.
        runs (int): The number of rolls simulated, or the weight spread.
        rng (random.Random | None): Random source for the simulation.
        locale (str | None): The locale of the title.

    Returns:
        dict[int, float]: The histogram that was printed.

    """
    parsed = as_parsed(macro)
    normalized = format_macro(parsed)
    if is_single_die(parsed):
        title = translate("simulation.theoretical", locale, macro=normalized)
    else:
        title = translate("simulation.title", locale, macro=normalized, runs=runs)
    histogram = distribution_for(parsed, runs, rng)
    print_histogram(histogram, title)
    return histogram
