"""
Tax Matcher - Filter a tax class's rules down to those that apply to a
ship-to location at an as-of time.

A rule matches when all of:
    - it is active and its validity window contains as_of;
    - ``country``, if set, equals the ship-to country (trimmed, any case);
    - ``region``, if set, equals the ship-to region (trimmed, any case);
    - ``postal_pattern``, if set, glob-matches the whole ship-to postal code.

Unset rule fields are wildcards.  A set rule field with no corresponding
ship-to value never matches.

Postal patterns are globs: ``*`` matches any run of characters, ``?``
exactly one, ``[...]`` one character from a class (``[!...]`` or ``[^...]``
negates).  Matching is anchored and case-insensitive.  A malformed pattern
(empty, unterminated class, bad range) matches nothing and never raises.
A class cannot contain a literal ``]``: the first ``]`` always closes it, so
``[]a]`` is malformed here where fnmatch would read ``[]a]`` as "``]`` or
``a``".
"""

from __future__ import annotations

import re
from datetime import datetime
from functools import lru_cache
from typing import Sequence

from pricing_engines.tracer import traced_engine
from pricing_kernel.domain.catalog import ShipTo, TaxRule
from pricing_kernel.logging_config import get_logger

logger = get_logger("engines.jurisdiction")


def glob_to_regex(pattern: str) -> str | None:
    """
    Translate a postal glob into an anchored regular expression.

    Returns None when the pattern is malformed.
    """
    if not pattern:
        return None

    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        elif ch == "[":
            j = i + 1
            negate = j < n and pattern[j] in "!^"
            if negate:
                j += 1
            close = pattern.find("]", j)
            if close == -1 or close == j:
                return None
            body = pattern[j:close]
            body = body.replace("\\", "\\\\").replace("[", "\\[").replace("^", "\\^")
            out.append("[" + ("^" if negate else "") + body + "]")
            i = close
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


@lru_cache(maxsize=1024)
def compile_postal_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compiled, case-insensitive matcher for a postal glob, or None if malformed."""
    source = glob_to_regex(pattern.strip())
    if source is None:
        return None
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error:
        return None


def postal_matches(pattern: str, postal: str | None) -> bool:
    """True if the whole postal code matches the glob pattern."""
    if postal is None:
        return False
    compiled = compile_postal_pattern(pattern)
    if compiled is None:
        return False
    return compiled.fullmatch(postal.strip()) is not None


def _same_code(rule_value: str, ship_value: str | None) -> bool:
    if ship_value is None:
        return False
    return rule_value.strip().casefold() == ship_value.strip().casefold()


def rule_matches(rule: TaxRule, ship_to: ShipTo | None, as_of: datetime) -> bool:
    """True if the rule is in force at as_of and scoped to this ship-to."""
    if not rule.is_effective(as_of):
        return False

    dest = ship_to or ShipTo()
    if rule.country and not _same_code(rule.country, dest.country):
        return False
    if rule.region and not _same_code(rule.region, dest.region):
        return False
    if rule.postal_pattern and not postal_matches(rule.postal_pattern, dest.postal):
        return False
    return True


class TaxMatcher:
    """Select the tax rules that apply to a line."""

    @traced_engine(
        "jurisdiction", "1.0",
        fingerprint_fields=("rules", "ship_to", "as_of"),
        summarize=lambda matched: {"matched_rule_ids": [r.id for r in matched]},
    )
    def match(
        self,
        *,
        rules: Sequence[TaxRule],
        ship_to: ShipTo | None,
        as_of: datetime,
    ) -> tuple[TaxRule, ...]:
        """Matching rules, ordered by priority then id."""
        candidates = list(rules)
        matched = sorted(
            (r for r in candidates if rule_matches(r, ship_to, as_of)),
            key=lambda r: (r.priority, r.id),
        )
        logger.debug("tax_rules_matched", extra={
            "candidate_count": len(candidates),
            "matched_count": len(matched),
            "matched_rule_ids": [r.id for r in matched],
            "country": ship_to.country if ship_to else None,
            "region": ship_to.region if ship_to else None,
        })
        return tuple(matched)
