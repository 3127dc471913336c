"""
Dice parser module for the engine.

Turns dice macros such as "2d6+1dF-3" into a structured ParsedMacro. Parsing
is permissive: a chunk counts for the die or number it starts with, chunks
that are not fully understood are reported in ParsedMacro.ignored, so partially typed input never breaks a
caller.
"""

import re
from logging import debug
from typing import Any, Literal

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field

from rollforge.core.constants import (
    BINARY_SIDES,
    BINARY_VALUES,
    FUDGE_TAG,
    FUDGE_VALUES,
    FaceKind,
)
from rollforge.core.error_handling import ensure_string

# A single signed dice term, e.g. "+2d6", "-dF", "d20". Chunks are matched on
# their prefix, so "2d6x" still yields 2d6.
TERM_PATTERN = re.compile(r"([+-]?)(\d*)[dD](\d+|[fF])")
# A signed integer modifier, e.g. "+3", "-10", "7", matched on the prefix too.
MODIFIER_PATTERN = re.compile(r"[+-]?\d+")
# Boundaries before each sign, keeping the sign with the following chunk.
SIGN_SPLIT = re.compile(r"(?=[+-])")
WHITESPACE = re.compile(r"\s+")


class DiceFace(BaseModel):
    """The face type of a die: either numeric with a number of sides, or Fudge."""

    model_config = ConfigDict(frozen=True)

    kind: FaceKind = Field(description="Whether the die is numeric or Fudge")
    sides: int | None = Field(
        default=None,
        description="Number of sides for numeric dice, None for Fudge dice",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if self.kind == FaceKind.NUMERIC:
            if self.sides is None or self.sides < 1:
                raise ValueError("numeric faces must have at least one side")
        elif self.sides is not None:
            raise ValueError("Fudge faces do not have a number of sides")

    @classmethod
    def numeric(cls, sides: int) -> "DiceFace":
        return cls(kind=FaceKind.NUMERIC, sides=sides)

    @classmethod
    def fudge(cls) -> "DiceFace":
        return cls(kind=FaceKind.FUDGE)

    @property
    def is_fudge(self) -> bool:
        return self.kind == FaceKind.FUDGE

    @property
    def is_binary(self) -> bool:
        """A d2, which rolls 0 or 1 rather than 1 or 2."""
        return self.kind == FaceKind.NUMERIC and self.sides == BINARY_SIDES

    @property
    def values(self) -> tuple[int, ...]:
        """
        Returns every value this face can roll, in ascending order.

        Only meant for enumerating small faces; bounds and counts come from
        `low`, `high` and `face_count`, which do not build the sequence.

        Returns:
            tuple[int, ...]: The possible values.

        """
        if self.is_fudge:
            return FUDGE_VALUES
        if self.is_binary:
            return BINARY_VALUES
        return tuple(range(self.low, self.high + 1))

    @property
    def low(self) -> int:
        if self.is_fudge:
            return FUDGE_VALUES[0]
        if self.is_binary:
            return BINARY_VALUES[0]
        return 1

    @property
    def high(self) -> int:
        if self.is_fudge:
            return FUDGE_VALUES[-1]
        if self.is_binary:
            return BINARY_VALUES[-1]
        return self.sides or 1

    @property
    def mean(self) -> float:
        return (self.low + self.high) / 2

    @property
    def face_count(self) -> int:
        return self.high - self.low + 1

    @property
    def tag(self) -> str:
        """Returns the notation of one die of this face, e.g. 'd6' or 'dF'."""
        if self.is_fudge:
            return FUDGE_TAG
        return f"d{self.sides}"

    def __str__(self) -> str:
        return self.tag


class DiceTerm(BaseModel):
    """A signed group of identical dice within a macro."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(ge=1, description="Number of dice rolled")
    face: DiceFace = Field(description="Face type of every die in the group")
    sign: Literal[1, -1] = Field(default=1, description="+1 to add, -1 to subtract")

    def to_notation(self, leading: bool = False) -> str:
        """
        Renders the term in dice notation.

        Args:
            leading (bool): Whether this is the first term, which omits a '+'.

        Returns:
            str: The notation, e.g. '+2d6' or '-1dF'.

        """
        body = f"{self.count}{self.face.tag}"
        if self.sign < 0:
            return f"-{body}"
        return body if leading else f"+{body}"

    def __str__(self) -> str:
        return self.to_notation(leading=True)


class ParsedMacro(BaseModel):
    """The structured representation of a dice macro."""

    terms: list[DiceTerm] = Field(
        default_factory=list,
        description="Dice terms in the order they appear in the macro",
    )
    modifier: int = Field(default=0, description="Sum of all flat modifiers")
    ignored: list[str] = Field(
        default_factory=list,
        description="Chunks not fully understood, whatever their prefix contributed",
    )

    @property
    def is_complete(self) -> bool:
        """True when every chunk of the macro was understood."""
        return not self.ignored

    @property
    def dice_count(self) -> int:
        return sum(term.count for term in self.terms)

    def __str__(self) -> str:
        return format_macro(self)


def _parse_term(match: re.Match[str]) -> DiceTerm | None:
    sign_str, count_str, sides_str = match.groups()
    count = int(count_str) if count_str else 1
    if sides_str.upper() == "F":
        face = DiceFace.fudge()
    else:
        sides = int(sides_str)
        if sides < 1:
            return None
        face = DiceFace.numeric(sides)
    if count < 1:
        return None
    return DiceTerm(count=count, face=face, sign=-1 if sign_str == "-" else 1)


def parse(macro: str) -> ParsedMacro:
    """
    Parses a dice macro into its terms and flat modifier.

    The macro is stripped of whitespace and split before every '+' or '-'.
    Each chunk is either a dice term ('2d6', '-d8', '+3dF') or an integer
    modifier, read from the start of the chunk: '2d6x' counts as 2d6 and
    '+5x' as +5. Chunks with trailing text, invalid dice ('0d6', '2d0') or no
    leading die or number are listed in the result's `ignored` field; the
    last two contribute 0.

    Args:
        macro (str): The dice macro, e.g. "2d6+1dF-3".

    Returns:
        ParsedMacro: The parsed macro. Never raises for malformed input.

    """
    macro = ensure_string(macro, "macro")
    text = WHITESPACE.sub("", macro)
    result = ParsedMacro()
    if not text:
        return result

    for chunk in SIGN_SPLIT.split(text):
        if not chunk:
            continue
        match = TERM_PATTERN.match(chunk)
        if match:
            term = _parse_term(match)
            if term is None:
                match = None
            else:
                result.terms.append(term)
        else:
            match = MODIFIER_PATTERN.match(chunk)
            if match:
                result.modifier += int(match.group())
        if match and match.end() == len(chunk):
            continue
        if match:
            message = f"Ignoring trailing '{chunk[match.end():]}' of chunk '{chunk}'"
        else:
            message = f"Ignoring unparseable chunk '{chunk}' in dice macro"
        log_warning(message, {"macro": macro, "chunk": chunk})
        result.ignored.append(chunk)

    debug(f"Parsed '{macro}' → {format_macro(result)}")
    return result


def as_parsed(macro: "str | ParsedMacro") -> ParsedMacro:
    """Returns the macro unchanged if already parsed, otherwise parses it."""
    if isinstance(macro, ParsedMacro):
        return macro
    return parse(macro)


def format_macro(parsed: ParsedMacro) -> str:
    """
    Renders a parsed macro back to dice notation.

    Terms keep their original order, the modifier comes last and is omitted
    when zero. A macro without terms renders as its modifier alone.

    Args:
        parsed (ParsedMacro): The macro to render.

    Returns:
        str: The normalized notation, e.g. '1d6+2d4-1dF+3'.

    """
    parts = [
        term.to_notation(leading=index == 0) for index, term in enumerate(parsed.terms)
    ]
    if not parts:
        return str(parsed.modifier)
    if parsed.modifier:
        parts.append(f"{parsed.modifier:+d}")
    return "".join(parts)


def normalize_macro(macro: str) -> str:
    """Returns the normalized notation of a macro, used to compare macros."""
    return format_macro(parse(macro))


def parse_face(tag: Any) -> DiceFace | None:
    """
    Parses a face tag such as 'd6', 'D20', 'dF', 'd2' or a bare side count.

    Args:
        tag (Any): The face tag, as a string or an integer number of sides.

    Returns:
        DiceFace | None: The face, or None if the tag is not understood.

    """
    if isinstance(tag, DiceFace):
        return tag
    if isinstance(tag, int) and not isinstance(tag, bool):
        tag = str(tag)
    text = WHITESPACE.sub("", ensure_string(tag, "face tag"))
    if text and not text[0].lower() == "d":
        text = f"d{text}"
    match = TERM_PATTERN.fullmatch(text)
    if match and not match.group(1) and not match.group(2):
        term = _parse_term(match)
        if term is not None:
            return term.face
    log_warning(
        f"Unknown dice face '{tag}'",
        {"tag": tag},
    )
    return None
