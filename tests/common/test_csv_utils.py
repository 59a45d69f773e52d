"""Tests for grocery_catalog/common/csv_utils.py"""

import csv

from grocery_catalog.common.csv_utils import ROW_FIELDNAMES, export_rows, rows_to_records, write_csv


class TestRowsToRecords:
    def test_wire_names_in_order(self, sample_rows):
        records = rows_to_records(sample_rows)
        assert list(records[0].keys()) == ROW_FIELDNAMES

    def test_values_are_strings(self, sample_rows):
        record = rows_to_records(sample_rows)[0]
        assert record["price"] == "120"
        assert record["netWeight"] == "250 g"
        assert record["image"] == ""
        assert record["supermarket"] == "Asda"

    def test_missing_net_weight(self, sample_rows):
        assert rows_to_records(sample_rows)[2]["netWeight"] == ""


class TestWriteCsv:
    def test_empty_rows_writes_nothing(self, tmp_path):
        path = tmp_path / "out.csv"
        assert write_csv(path, []) == 0
        assert not path.exists()

    def test_export_rows(self, tmp_path, sample_rows):
        path = tmp_path / "salad.csv"
        assert export_rows(path, sample_rows) == 3

        with open(path, encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))

        assert [row["name"] for row in rows] == ["Spinach", "cherry tomatoes", "Organic Chard"]
        assert rows[2]["subcategory"] == "leafy - organic"
