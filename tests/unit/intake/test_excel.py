"""Unit tests for ExcelParticipantLoader."""

import logging

import pandas as pd
import pytest

from lessonbook.intake import ExcelParticipantLoader, IntakeError
from lessonbook.registration import RegistrationEngine
from lessonbook.store import Store

ROWS = [
    {"name": "Emma", "email": "emma@example.com", "phone": "111", "ageGroup": "1-2 years"},
    {"name": "Leo", "email": "leo@example.com", "phone": "222", "ageGroup": "1-2 years"},
]


@pytest.fixture
def loader() -> ExcelParticipantLoader:
    return ExcelParticipantLoader()


@pytest.fixture
def write_workbook(tmp_path):
    """Write rows to an .xlsx file and return its path."""

    def _write(rows, name: str = "participants.xlsx"):
        path = tmp_path / name
        pd.DataFrame(rows).to_excel(path, index=False)
        return path

    return _write


@pytest.mark.unit
class TestParse:
    """Tests for parsing workbooks."""

    def test_parses_rows_in_order(self, loader, write_workbook) -> None:
        participants = loader.parse_file(write_workbook(ROWS))

        assert [p.name for p in participants] == ["Emma", "Leo"]
        assert participants[0].email == "emma@example.com"
        assert participants[0].phone == "111"
        assert participants[0].age_group == "1-2 years"
        assert participants[0].id != participants[1].id

    def test_trims_values(self, loader, write_workbook) -> None:
        rows = [{"name": " Emma ", "email": "emma@example.com ", "phone": "1", "ageGroup": "x"}]
        participant = loader.parse_file(write_workbook(rows))[0]

        assert participant.name == "Emma"
        assert participant.email == "emma@example.com"

    def test_skips_incomplete_rows(self, loader, write_workbook, caplog) -> None:
        caplog.set_level(logging.INFO, logger="lessonbook")
        rows = [
            ROWS[0],
            {"name": "No Phone", "email": "np@example.com", "phone": None, "ageGroup": "1-2 years"},
            {"name": "   ", "email": "blank@example.com", "phone": "3", "ageGroup": "1-2 years"},
            ROWS[1],
        ]

        participants = loader.parse_file(write_workbook(rows))

        assert [p.name for p in participants] == ["Emma", "Leo"]
        assert "Skipped 2 incomplete spreadsheet rows" in caplog.text

    def test_numeric_phone_is_read_as_text(self, loader, write_workbook) -> None:
        rows = [{"name": "Emma", "email": "e@example.com", "phone": 777123456, "ageGroup": "a"}]
        assert loader.parse_file(write_workbook(rows))[0].phone == "777123456"

    def test_extra_columns_are_ignored(self, loader, write_workbook) -> None:
        rows = [{**ROWS[0], "notes": "allergic to peanuts"}]
        assert len(loader.parse_file(write_workbook(rows))) == 1

    def test_missing_column_yields_nothing(self, loader, write_workbook, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="lessonbook")
        rows = [{"name": "Emma", "email": "emma@example.com", "phone": "111"}]

        assert loader.parse_file(write_workbook(rows)) == []
        assert "ageGroup" in caplog.text

    def test_header_whitespace_is_ignored(self, loader, write_workbook) -> None:
        rows = [{f" {key} ": value for key, value in ROWS[0].items()}]
        assert len(loader.parse_file(write_workbook(rows))) == 1

    def test_parse_bytes(self, loader, write_workbook) -> None:
        data = write_workbook(ROWS).read_bytes()
        assert [p.name for p in loader.parse_bytes(data)] == ["Emma", "Leo"]

    def test_not_a_workbook(self, loader) -> None:
        with pytest.raises(IntakeError):
            loader.parse_bytes(b"name,email\nEmma,emma@example.com\n")


@pytest.mark.unit
class TestBulkLoadAndRegister:
    """Tests for bulk_load_and_register."""

    def test_registers_everyone(self, loader, write_workbook, store: Store, make_lesson) -> None:
        lesson = make_lesson(capacity=1)
        engine = RegistrationEngine(store)

        count = loader.bulk_load_and_register(write_workbook(ROWS), lesson.id, engine)

        assert count == 2
        statuses = [r.status for r in store.registrations.list_by_lesson(lesson.id)]
        assert sorted(statuses) == ["confirmed", "waitlist"]
        assert len(store.participants.list_all()) == 2

    def test_empty_sheet_registers_nobody(
        self, loader, write_workbook, store: Store, make_lesson
    ) -> None:
        lesson = make_lesson()
        path = write_workbook([{"name": "Emma"}])

        assert loader.bulk_load_and_register(path, lesson.id, RegistrationEngine(store)) == 0
