"""
Configuration for the markup-tree pattern annotator.

Contains the Response and Quantifier enums, default pattern options,
common tag groups, and the configuration error type.
"""

from enum import Enum


class Response(str, Enum):
    """Everything a pattern can answer when offered a single node."""

    MATCHING = "matching"
    NON_MATCHING = "non_matching"
    INCOMPLETE = "incomplete"
    # The pattern matched entirely *before* this node; the node itself
    # still has to be offered to the freshly reset pattern.
    COMPLETED = "completed"
    # Stop examining patterns on this node and do not descend into it.
    BREAK = "break"
    # Declined to participate here (depth or application limits).
    UNAPPLIED = "unapplied"


class Quantifier(str, Enum):
    """How a field pattern combines its configured options."""

    ANY = "any"
    ALL = "all"


class PatternConfigError(ValueError):
    """Raised when a pattern or annotator is configured inconsistently."""


# ---------------------------------------------------------------------------
# Default pattern options
# ---------------------------------------------------------------------------

DEFAULT_PRIORITY = 0         # declared for configuration, never consulted
DEFAULT_DEPTH = 0            # relative depth window; negative disables it
DEFAULT_ABSOLUTE_DEPTH = -1  # absolute depth ceiling; negative disables it
DEFAULT_APPLICATIONS = -1    # maximum completed matches; negative = unbounded

# Repeat bound used for every child of a sequence without explicit repeats
DEFAULT_REPEAT: tuple[int, int] = (1, 1)
UNBOUNDED = -1


# ---------------------------------------------------------------------------
# Tag groups commonly used when assembling patterns for rendered Markdown
# ---------------------------------------------------------------------------

HEADING_TAGS: list[str] = ["h1", "h2", "h3", "h4", "h5"]

# Blocks whose contents must not be pattern-matched internally
BLOCK_TAGS: list[str] = ["ul", "ol", "pre"]


# Fields understood by ``dom.node_field`` beyond plain attribute names
FIELD_TAG = "tag"
FIELD_CLASS = "class"


def check_limit(name: str, value: object) -> int:
    """Validate an integer limit option (depth, applications, …).

    Booleans are rejected even though they are ``int`` subclasses.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise PatternConfigError(
            f"{name} must be an integer, got {value!r}"
        )
    return value
