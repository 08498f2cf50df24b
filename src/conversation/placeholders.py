"""
Placeholder resolution for script text.

Scripts are written with a fixed vocabulary of bracket/parenthesis tokens
such as ``(customer's first name)`` or ``[Agent Name]``, plus bare
underscore blanks (``_____``). Tokens map directly to context values.
Blanks are ambiguous, so the text just before the blank decides what
goes there: "producer number" or "NPN" means the agent's license number,
"phone" means the customer's phone. A blank with no such hint is left
untouched.

Missing values become a visible bracketed label (``[Customer First Name]``)
so the agent notices unfilled data instead of reading a blank line.

Usage:
    ctx = PlaceholderContext(agent_name="Dana Reyes", customer_first_name="Ruth")
    resolve_placeholders("Hi (customer's first name), this is [Agent Name].", ctx)
    # -> "Hi Ruth, this is Dana Reyes."
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from src.config import settings
from src.schemas.customer_schema import PlaceholderContext

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_WINDOW = settings.script.placeholder_window

_APOS = "['’]?s?"


@dataclass(frozen=True)
class TokenRule:
    """One placeholder vocabulary entry."""

    name: str
    patterns: tuple[str, ...]
    fallback: str
    value: Callable[[PlaceholderContext], Optional[str]]
    template: str = "{}"


def _first_word(value: Optional[str]) -> Optional[str]:
    if not value or not value.strip():
        return None
    return value.split()[0]


TOKEN_RULES: tuple[TokenRule, ...] = (
    TokenRule(
        name="agent_first_name",
        patterns=(
            r"\[agent first name\]",
            rf"\(agent{_APOS} first name\)",
            r"\(your first name\)",
        ),
        fallback="[Agent First Name]",
        value=lambda ctx: _first_word(ctx.agent_name),
    ),
    TokenRule(
        name="agent_name",
        patterns=(
            r"\[agent (?:full )?name\]",
            rf"\(agent{_APOS} (?:full )?name\)",
            r"\[your name\]",
            r"\(your name\)",
        ),
        fallback="[Agent Name]",
        value=lambda ctx: ctx.agent_name,
    ),
    TokenRule(
        name="customer_first_name",
        patterns=(
            r"\[customer first name\]",
            rf"\(customer{_APOS} first name\)",
            r"\[first name\]",
            r"\(first name\)",
        ),
        fallback="[Customer First Name]",
        value=lambda ctx: ctx.customer_first_name,
    ),
    TokenRule(
        name="customer_honorific",
        patterns=(
            r"\(mr\.?\s*/\s*mrs\.?\s*\[?last name\]?\)",
            r"mr\.?\s*/\s*mrs\.?\s*\[last name\]",
        ),
        fallback="Mr./Mrs. [Customer Last Name]",
        value=lambda ctx: ctx.customer_last_name,
        template="Mr./Mrs. {}",
    ),
    TokenRule(
        name="customer_last_name",
        patterns=(
            r"\[customer last name\]",
            rf"\(customer{_APOS} last name\)",
            r"\[last name\]",
            r"\(last name\)",
        ),
        fallback="[Customer Last Name]",
        value=lambda ctx: ctx.customer_last_name,
    ),
    TokenRule(
        name="customer_state",
        patterns=(
            r"\[customer state\]",
            rf"\(customer{_APOS} state\)",
            r"\[state\]",
            r"\(state\)",
        ),
        fallback="[Customer State]",
        value=lambda ctx: ctx.customer_state,
    ),
)

_RULES_BY_NAME = {rule.name: rule for rule in TOKEN_RULES}


@dataclass(frozen=True)
class BlankHint:
    """Keywords that, found just before a blank, decide what fills it."""

    name: str
    keywords: tuple[str, ...]
    fallback: str
    value: Callable[[PlaceholderContext], Optional[str]]


BLANK_HINTS: tuple[BlankHint, ...] = (
    BlankHint(
        name="agent_npn",
        keywords=("producer number", "npn", "license number"),
        fallback="[Producer Number]",
        value=lambda ctx: ctx.agent_npn,
    ),
    BlankHint(
        name="customer_phone",
        keywords=("telephone", "phone"),
        fallback="[Customer Phone]",
        value=lambda ctx: ctx.customer_phone,
    ),
)

BLANK_PATTERN = r"_{3,}"

_TOKEN_RE = re.compile(
    "|".join(
        f"(?P<{rule.name}>{'|'.join(rule.patterns)})" for rule in TOKEN_RULES
    )
    + f"|(?P<blank>{BLANK_PATTERN})",
    re.IGNORECASE,
)


def _usable(value: Optional[str]) -> Optional[str]:
    """Return the stripped value, or None if it is empty or itself holds a placeholder."""
    if value is None:
        return None
    value = str(value).strip()
    if not value or _TOKEN_RE.search(value):
        return None
    return value


def _match_blank_hint(preceding: str) -> Optional[BlankHint]:
    """Pick the hint whose keyword sits closest to the end of ``preceding``."""
    lowered = preceding.lower()
    best: Optional[BlankHint] = None
    best_pos = -1
    for hint in BLANK_HINTS:
        for keyword in hint.keywords:
            pos = lowered.rfind(keyword)
            if pos == -1:
                continue
            end = pos + len(keyword)
            if end > best_pos:
                best, best_pos = hint, end
    return best


def resolve_placeholders(
    text: str,
    context: Optional[PlaceholderContext] = None,
    window: int = DEFAULT_CONTEXT_WINDOW,
) -> str:
    """
    Substitute known placeholder tokens in ``text``.

    The lookback window for blanks is taken from the already-resolved
    output, so running the resolver over its own output is a no-op.

    Args:
        text: Raw script text.
        context: Values to substitute. Missing values use fallback labels.
        window: Number of preceding characters inspected for blank hints.

    Returns:
        The resolved text.
    """
    if not text:
        return text
    ctx = context or PlaceholderContext()
    out: list[str] = []
    cursor = 0

    for match in _TOKEN_RE.finditer(text):
        out.append(text[cursor:match.start()])
        cursor = match.end()
        kind = match.lastgroup

        if kind == "blank":
            preceding = "".join(out)[-window:] if window > 0 else ""
            hint = _match_blank_hint(preceding)
            if hint is None:
                out.append(match.group(0))
                continue
            value = _usable(hint.value(ctx))
            out.append(value if value is not None else hint.fallback)
            continue

        rule = _RULES_BY_NAME[kind]
        value = _usable(rule.value(ctx))
        if value is None:
            logger.debug("No value for placeholder '%s', using fallback", rule.name)
            out.append(rule.fallback)
        else:
            out.append(rule.template.format(value))

    out.append(text[cursor:])
    return "".join(out)
