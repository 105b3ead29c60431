"""Importer for HTML timetable tables."""

import logging
import re
from datetime import time
from typing import Optional

from bs4 import BeautifulSoup, Tag

from timetable import config
from timetable.grid import DAYS_PER_WEEK, SLOT_TIMES
from timetable.models import Session

from .base import BaseImporter
from .weeks import parse_weeks

logger = logging.getLogger(__name__)


class HtmlTimetableImporter(BaseImporter):
    """Parser for timetable pages exported as an HTML table.

    The first column of every slot row holds the slot number (``"3"``) or
    the clock time the slot starts at (``"10:10"``). The next seven
    columns are Monday to Sunday. A cell may hold several entries, each
    introduced by an ``a.subject_name`` link and optionally followed by an
    ``a.room_name`` link and a ``span.weeks`` annotation. An entry
    repeated in consecutive rows of a column, or a cell with ``rowspan``,
    becomes one session lasting several slots.
    """

    WEEKS_PATTERN = re.compile(
        r"weeks?\s*:?\s*([\d\s,\-]+(?:\s*(?:odd|even))?)",
        re.IGNORECASE
    )

    def __init__(self, week_count: int = config.DEFAULT_WEEK_COUNT) -> None:
        """Initialize the importer.

        Args:
            week_count: Weeks assumed for entries without a weeks annotation.
        """
        self._week_count = week_count
        self._soup: Optional[BeautifulSoup] = None

    def load_html(self, html: str) -> BeautifulSoup:
        """Parse raw HTML and keep it for ``parse_sessions``.

        Args:
            html: Page source.

        Returns:
            Parsed HTML as BeautifulSoup object.
        """
        self._soup = BeautifulSoup(html, "lxml")
        return self._soup

    def load(self, source: str) -> list[Session]:
        with open(source, encoding="utf-8") as f:
            self.load_html(f.read())
        return self.parse_sessions()

    def _parse_slot(self, label: str) -> Optional[int]:
        """Map a row label to a 1-based slot number.

        Args:
            label: Slot number like "3" or start time like "10:10".

        Returns:
            Slot number, or None if the label is not a slot.
        """
        label = label.strip()
        if re.fullmatch(r"\d{1,2}", label):
            return int(label)

        match = re.fullmatch(r"(\d{1,2}):(\d{2})", label)
        if match:
            hour, minute = map(int, match.groups())
            start = time(hour, minute)
            for index, (slot_start, _) in enumerate(SLOT_TIMES, start=1):
                if slot_start == start:
                    return index
            logger.warning("No slot starts at %s", label)

        return None

    def _parse_weeks_text(self, text: str) -> Optional[list[int]]:
        match = self.WEEKS_PATTERN.search(text)
        if not match:
            return None
        return parse_weeks(match.group(1))

    def _parse_cell_content(self, cell: Tag) -> list[dict]:
        """Parse content of a timetable cell.

        Args:
            cell: BeautifulSoup Tag representing a table cell.

        Returns:
            List of entry dictionaries (a cell can hold several entries).
        """
        subject_links = cell.find_all("a", class_="subject_name")
        if not subject_links:
            return []

        entries: list[dict] = []

        for subject_link in subject_links:
            result: dict = {
                "title": subject_link.get_text(strip=True),
                "location": "",
                "weeks": None,
            }

            # Everything up to the next subject link belongs to this entry
            segment: list = []
            for sibling in subject_link.next_siblings:
                if isinstance(sibling, Tag):
                    if sibling.name == "a" and "subject_name" in sibling.get("class", []):
                        break
                    if sibling.name == "br":
                        continue
                segment.append(sibling)

            segment_text = " ".join(
                item.get_text(" ", strip=True) if isinstance(item, Tag) else str(item).strip()
                for item in segment
            )

            for item in segment:
                if not isinstance(item, Tag):
                    continue
                if item.name == "a" and "room_name" in item.get("class", []):
                    room = item
                else:
                    room = item.find("a", class_="room_name")
                if room:
                    result["location"] = room.get_text(strip=True)
                    break

            try:
                weeks_tag = next(
                    (item for item in segment
                     if isinstance(item, Tag) and "weeks" in item.get("class", [])),
                    None
                )
                if weeks_tag is not None:
                    result["weeks"] = parse_weeks(weeks_tag.get_text(strip=True))
                else:
                    result["weeks"] = self._parse_weeks_text(segment_text)
            except ValueError as e:
                logger.warning("Skipping '%s': %s", result["title"], e)
                continue

            if not result["title"]:
                continue

            entries.append(result)

        return entries

    @staticmethod
    def _same_entry(first: dict, second: dict) -> bool:
        return (first["title"] == second["title"] and
                first["location"] == second["location"] and
                first["weeks"] == second["weeks"])

    def parse_sessions(self) -> list[Session]:
        """Parse the timetable table and extract all sessions.

        Returns:
            List of Session objects, column by column.

        Raises:
            RuntimeError: If no HTML has been loaded.
            ValueError: If the page has no timetable table or slot rows.
        """
        if not self._soup:
            raise RuntimeError("No timetable loaded. Call load_html() first.")

        table = self._soup.find("table", class_=re.compile(r"timetable"))
        if not table or not isinstance(table, Tag):
            table = self._soup.find("table")

        if not table or not isinstance(table, Tag):
            raise ValueError("Timetable table not found in the page")

        slots: list[int] = []
        # Cell grid stores list of entries per cell (multiple entries possible)
        cell_grid: list[list[list[dict]]] = []
        # Rows still covered by a rowspan cell from above, per column
        covered = [0] * DAYS_PER_WEEK

        for row in table.find_all("tr"):
            if not isinstance(row, Tag):
                continue

            cells = row.find_all(["td", "th"])
            if not cells:
                continue

            slot = self._parse_slot(cells[0].get_text(strip=True))
            if slot is None:
                continue
            slots.append(slot)

            day_cells = iter(cells[1:])
            row_data: list[list[dict]] = []
            for col in range(DAYS_PER_WEEK):
                if covered[col]:
                    covered[col] -= 1
                    row_data.append([])
                    continue

                cell = next(day_cells, None)
                if not isinstance(cell, Tag):
                    row_data.append([])
                    continue

                try:
                    span = max(int(cell.get("rowspan", 1)), 1)
                except ValueError:
                    span = 1
                covered[col] = span - 1

                cell_entries = self._parse_cell_content(cell)
                for entry in cell_entries:
                    entry["span"] = span
                row_data.append(cell_entries)

            cell_grid.append(row_data)

        if not slots:
            raise ValueError("No time slots found in timetable table")

        sessions: list[Session] = []
        processed: set[tuple[int, int, int]] = set()  # (row, col, entry index)

        for col in range(DAYS_PER_WEEK):
            for row, row_data in enumerate(cell_grid):
                for index, entry in enumerate(row_data[col]):
                    entry_key = (row, col, index)
                    if entry_key in processed:
                        continue
                    processed.add(entry_key)

                    # Count how many consecutive rows repeat the same entry
                    duration = entry["span"]
                    next_row = row + 1
                    while next_row < len(cell_grid):
                        match = next(
                            ((other_index, other)
                             for other_index, other in enumerate(cell_grid[next_row][col])
                             if (next_row, col, other_index) not in processed
                             and self._same_entry(entry, other)),
                            None
                        )
                        if match is None:
                            break
                        other_index, other = match
                        duration += other["span"]
                        processed.add((next_row, col, other_index))
                        next_row += 1

                    weeks = entry["weeks"] or list(range(1, self._week_count + 1))

                    try:
                        sessions.append(Session(
                            title=entry["title"],
                            location=entry["location"],
                            start_slot=slots[row],
                            duration=duration,
                            weekday=col + 1,
                            active_weeks=tuple(weeks),
                        ))
                    except ValueError as e:
                        logger.warning("Skipping invalid session '%s': %s", entry["title"], e)

        return sessions
