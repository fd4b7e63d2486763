from __future__ import annotations

from gradrank.core.aggregate import merge_and_rank
from gradrank.core.models import RowErrorReason
from gradrank.export.delimited import export_to_delimited
from gradrank.ingest.delimited import parse_records, parse_rows, validate_file_structure


class TestValidateFileStructure:
    def test_plain_headers(self, ce_csv):
        assert validate_file_structure(ce_csv) is True

    def test_fuzzy_headers(self):
        assert validate_file_structure("Student Name,StudentID,Dept,GPA\nA,1,CE,3.0\n") is True

    def test_header_only_with_newline_is_valid(self):
        assert validate_file_structure("Name,ID,Department,GPA\n") is True

    def test_single_line_fails(self):
        assert validate_file_structure("Name,ID,Department,GPA") is False

    def test_empty_content_fails(self):
        assert validate_file_structure("") is False

    def test_missing_column_fails(self):
        assert validate_file_structure("Name,ID,GPA\nA,1,3.0\n") is False

    def test_extra_columns_ignored(self):
        assert validate_file_structure("Faculty,Name,ID,Department,GPA,Credits\nF,A,1,CE,3.0,120\n") is True

    def test_crlf_line_endings(self):
        assert validate_file_structure("Name,ID,Department,GPA\r\nA,1,CE,3.0\r\n") is True


class TestParseRows:
    def test_counts_match_rows(self, ce_csv):
        records = parse_records(ce_csv)
        assert len(records) == 2
        assert records[0].name == "Jane Smith"
        assert records[0].external_id == "118"
        assert records[0].department == "Computer Engineering"
        assert records[0].gpa == 3.95
        assert all(r.rank is None for r in records)

    def test_header_only_yields_nothing(self):
        assert parse_records("Name,ID,Department,GPA\n") == []

    def test_invalid_gpa_dropped(self):
        result = parse_rows("Name,ID,Department,GPA\nA,1,CE,notanumber\nB,2,CE,3.2\n")
        assert [r.name for r in result.records] == ["B"]
        assert len(result.skipped) == 1
        assert result.skipped[0].reason is RowErrorReason.INVALID_GPA
        assert result.skipped[0].line_number == 2

    def test_non_finite_gpa_dropped(self):
        result = parse_rows("Name,ID,Department,GPA\nA,1,CE,inf\nB,2,CE,nan\n")
        assert result.records == []
        assert [e.reason for e in result.skipped] == [RowErrorReason.INVALID_GPA] * 2

    def test_underscore_and_unicode_digits_dropped(self):
        result = parse_rows("Name,ID,Department,GPA\nA,1,CE,3_5\nB,2,CE,\u0663.5\nC,3,CE,3.5abc\nD,4,CE,.5\n")
        assert [(r.name, r.gpa) for r in result.records] == [("D", 0.5)]
        assert [e.reason for e in result.skipped] == [RowErrorReason.INVALID_GPA] * 3

    def test_column_count_mismatch(self):
        result = parse_rows("Name,ID,Department,GPA\nSmith, Jane,1,CE,3.2\nB,2,CE\n")
        assert result.records == []
        assert [e.reason for e in result.skipped] == [RowErrorReason.COLUMN_COUNT] * 2

    def test_missing_column_skips_every_row(self):
        result = parse_rows("Name,ID,GPA\nA,1,3.0\n")
        assert result.records == []
        assert result.skipped[0].reason is RowErrorReason.MISSING_COLUMN

    def test_empty_name_or_id(self):
        result = parse_rows("Name,ID,Department,GPA\n,1,CE,3.0\nB,,CE,3.0\n")
        assert result.records == []
        assert [e.reason for e in result.skipped] == [RowErrorReason.EMPTY_FIELD] * 2

    def test_blank_lines_ignored(self):
        result = parse_rows("Name,ID,Department,GPA\n\nA,1,CE,3.0\n   \n")
        assert len(result.records) == 1
        assert result.skipped == []

    def test_values_trimmed_and_columns_reordered(self):
        records = parse_records("GPA , Dept , Student Name , Student ID\r\n 3.5 , CE , Jane , 7 \r\n")
        assert len(records) == 1
        r = records[0]
        assert (r.name, r.external_id, r.department, r.gpa) == ("Jane", "7", "CE", 3.5)

    def test_file_name_carried_on_errors(self):
        result = parse_rows("Name,ID,Department,GPA\nA,1,CE,x\n", file_name="ce.csv")
        assert result.skipped[0].file_name == "ce.csv"


class TestRoundTrip:
    def test_export_then_parse_keeps_tuples(self, ce_csv, ee_csv):
        original = parse_records(ce_csv) + parse_records(ee_csv)
        exported = export_to_delimited(merge_and_rank(original))
        reparsed = parse_records(exported)

        def tuples(rs):
            return sorted((r.name, r.external_id, r.department, r.gpa) for r in rs)

        assert tuples(reparsed) == tuples(original)
