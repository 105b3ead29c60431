"""Parsing of active-week annotations."""

import re

_RANGE = re.compile(r"^(\d+)(?:\s*-\s*(\d+))?$")
_PARITY = re.compile(r"\b(odd|even)\b", re.IGNORECASE)


def parse_weeks(text: str) -> list[int]:
    """Parse a week annotation into sorted week numbers.
    
    Accepts comma separated numbers and ranges, optionally restricted to
    odd or even weeks: ``"1-16"``, ``"1,3,5-7"``, ``"1-16 odd"``.
    
    Args:
        text: Week annotation.
        
    Returns:
        Sorted list of distinct 1-based week numbers.
        
    Raises:
        ValueError: If the annotation cannot be parsed.
    """
    parity = None
    match = _PARITY.search(text)
    if match:
        parity = match.group(1).lower()
        text = _PARITY.sub("", text)
    
    weeks: set[int] = set()
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        range_match = _RANGE.match(part)
        if not range_match:
            raise ValueError(f"Cannot parse weeks: {part!r}")
        first = int(range_match.group(1))
        last = int(range_match.group(2) or first)
        if first < 1 or last < first:
            raise ValueError(f"Invalid week range: {part!r}")
        weeks.update(range(first, last + 1))
    
    if not weeks:
        raise ValueError(f"No weeks in annotation: {text!r}")
    
    if parity == "odd":
        weeks = {week for week in weeks if week % 2 == 1}
    elif parity == "even":
        weeks = {week for week in weeks if week % 2 == 0}
    
    return sorted(weeks)
