"""ExcelParticipantLoader - reads participants from a spreadsheet."""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from lessonbook.entities import create_participant
from lessonbook.intake.exceptions import IntakeError

if TYPE_CHECKING:
    from lessonbook.registration import RegistrationEngine
    from lessonbook.store import Participant

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "email", "phone", "ageGroup")


def _is_filled(value: object) -> bool:
    return isinstance(value, str) and value.strip() != ""


class ExcelParticipantLoader:
    """Builds participants from the first sheet of an ``.xlsx`` workbook.

    The sheet needs a header row with ``name``, ``email``, ``phone`` and
    ``ageGroup`` columns. Rows missing any of them are skipped.
    """

    def parse_file(self, path: str | Path) -> list[Participant]:
        """Parse participants from a workbook on disk.

        Raises:
            IntakeError: If the file is not a readable workbook.
        """
        return self._parse(Path(path))

    def parse_bytes(self, data: bytes) -> list[Participant]:
        """Parse participants from workbook contents, e.g. an upload."""
        return self._parse(io.BytesIO(data))

    def bulk_load_and_register(
        self, path: str | Path, lesson_id: str, engine: RegistrationEngine
    ) -> int:
        """Register everyone in the workbook into one lesson.

        Returns:
            Number of registrations created.
        """
        participants = self.parse_file(path)
        registrations = engine.bulk_register(lesson_id, participants)
        logger.info("Imported %d participants into lesson %s", len(registrations), lesson_id)
        return len(registrations)

    def _parse(self, source: Path | io.BytesIO) -> list[Participant]:
        try:
            df = pd.read_excel(source, sheet_name=0, dtype=str, engine="openpyxl")
        except (ValueError, KeyError, zipfile.BadZipFile) as e:
            raise IntakeError(f"Could not read spreadsheet: {e}") from e

        df.columns = [str(column).strip() for column in df.columns]
        missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            logger.warning("Spreadsheet is missing columns: %s", ", ".join(missing))
            return []

        participants = []
        skipped = 0
        for record in df[list(REQUIRED_COLUMNS)].to_dict(orient="records"):
            if not all(_is_filled(record[column]) for column in REQUIRED_COLUMNS):
                skipped += 1
                continue
            participants.append(
                create_participant(
                    name=record["name"],
                    email=record["email"],
                    phone=record["phone"],
                    age_group=record["ageGroup"],
                )
            )

        if skipped:
            logger.info("Skipped %d incomplete spreadsheet rows", skipped)
        return participants
