"""Importers turning external timetable sources into sessions."""

from .base import BaseImporter
from .html_importer import HtmlTimetableImporter
from .json_importer import JsonImporter
from .weeks import parse_weeks

__all__ = ["BaseImporter", "HtmlTimetableImporter", "JsonImporter", "parse_weeks"]
