"""Participant intake from spreadsheets."""

from lessonbook.intake.excel import REQUIRED_COLUMNS, ExcelParticipantLoader
from lessonbook.intake.exceptions import IntakeError

__all__ = ["REQUIRED_COLUMNS", "ExcelParticipantLoader", "IntakeError"]
