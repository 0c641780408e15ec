"""Column tag parsing and name normalization.

A tag is a separator-joined token list attached to a record field, e.g.
``"obar,omitempty"`` or ``"firstBlahDay,DATE"``. Tokens are classified in
order, first match wins:

- ``omitempty`` marks the column optional
- a column type name (``STRING``, ``LONG``, ...) overrides the inferred type
- anything else is a candidate column name

Unrecognized tokens are never rejected; they simply become names.
Tokens are not stripped, so ``" omitempty"`` is a name, not the flag.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from domoschema.codes import ColumnType
from domoschema.errors import ConfigurationError

OMIT_EMPTY = "omitempty"
EXCLUDE = "-"
DEFAULT_SEPARATOR = ","

Normalizer = Callable[[str], str]


def identity(name: str) -> str:
    return name


def snake_case(name: str) -> str:
    """CamelCase / mixedCase to snake_case; existing underscores are kept."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


NORMALIZERS: Dict[str, Normalizer] = {
    "identity": identity,
    "lower": str.lower,
    "upper": str.upper,
    "snake_case": snake_case,
}


def get_normalizer(name: str) -> Normalizer:
    """Look up a built-in normalizer by name."""
    try:
        return NORMALIZERS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown normalizer '{name}', expected one of {sorted(NORMALIZERS)}"
        ) from None


@dataclass(frozen=True)
class ParsedTag:
    """Classified tokens of one field tag."""
    names: Tuple[str, ...]
    column_type: Optional[ColumnType] = None
    omit_empty: bool = False

    @property
    def excluded(self) -> bool:
        """True when the tag's only name token is the exclusion marker."""
        return len(self.names) == 1 and self.names[0] == EXCLUDE

    @property
    def has_name(self) -> bool:
        return len(self.names) > 0 and self.names[0] != ""


def parse_tag(
    tag: Optional[str],
    normalizer: Normalizer = identity,
    separator: str = DEFAULT_SEPARATOR,
) -> ParsedTag:
    """Split and classify a field tag.

    An absent tag parses like the empty string: a single empty name token,
    which leaves the field name as the column name.
    """
    names = []
    column_type = None
    omit_empty = False
    for token in (tag or "").split(separator):
        if token == OMIT_EMPTY:
            omit_empty = True
            continue
        parsed_type = ColumnType.parse(token)
        if parsed_type is not None:
            # last type token wins
            column_type = parsed_type
        else:
            names.append(normalizer(token))
    return ParsedTag(names=tuple(names), column_type=column_type, omit_empty=omit_empty)
