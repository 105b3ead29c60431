"""Default settings for the timetable engine.

Values can be overridden through environment variables so that the CLI and
tests do not need to thread every knob through call sites.
"""

import os
from typing import Optional

DEFAULT_WEEK_COUNT = int(os.environ.get("TIMETABLE_WEEK_COUNT", 20))

DEFAULT_PALETTE_INDEX = int(os.environ.get("TIMETABLE_PALETTE_INDEX", 0))

# Unset means floating local times in exported calendars.
ICAL_TIMEZONE: Optional[str] = os.environ.get("TIMETABLE_ICAL_TIMEZONE") or None
