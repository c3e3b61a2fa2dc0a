"""
Tests for CSV and PDF export data
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime

from scoring import GroupKey, GroupWeights, compute_result, default_inputs
from exports import build_csv_row, rows_to_csv, build_report, selected_labels


class TestCsvRow:

    def test_leading_columns(self):
        inputs = default_inputs()
        row = build_csv_row(inputs, compute_result(inputs))
        assert list(row)[:3] == ["totalScore", "class", "lead"]
        assert row["totalScore"] == "37.5"
        assert row["class"] == "A3"
        assert row["lead"] == "4–6 weken"

    def test_inputs_flattened(self):
        inputs = default_inputs()
        row = build_csv_row(inputs, compute_result(inputs))
        assert row["skuCount"] == "300"
        assert row["retourPercentage"] == "7"
        assert row["platformType"] == "Shopify"
        assert row["vasActiviteiten"] == "stickeren"
        assert row["inboundBijzonderheden"] == "kwaliteitscontrole; barcodering"
        assert row["postnlApis"] == "Locatie; Checkout; Retour; Track & Trace"

    def test_group_columns_last(self):
        inputs = default_inputs()
        row = build_csv_row(inputs, compute_result(inputs))
        group_columns = [key for key in row if key.startswith("group_")]
        assert len(group_columns) == 7
        assert list(row)[-7:] == group_columns
        assert row["group_technisch"] == "36.0"
        assert row["group_contract"] == "30.0"


class TestRowsToCsv:

    def test_quotes_everything_and_unions_headers(self):
        csv_text = rows_to_csv([{"a": 1, "b": 'x"y'}, {"b": 2, "c": None}])
        assert csv_text == '"a","b","c"\n"1","x""y",""\n"","2",""\n'

    def test_single_row_export(self):
        inputs = default_inputs()
        csv_text = rows_to_csv([build_csv_row(inputs, compute_result(inputs))])
        header, values = csv_text.strip().split("\n")
        assert header.startswith('"totalScore","class","lead","skuCount"')
        assert values.startswith('"37.5","A3","4–6 weken","300"')


class TestReport:

    def test_header_fields(self):
        inputs = default_inputs()
        report = build_report(
            inputs,
            compute_result(inputs),
            preset_name="Demo klant",
            generated_at=datetime(2026, 10, 19, 9, 30),
        )
        assert report.title == "Onboarding Classifier — Samenvatting"
        assert report.generated_at == "2026-10-19T09:30:00"
        assert report.preset_name == "Demo klant"
        assert report.classification == "A3"
        assert report.lead == "4–6 weken"
        assert report.total_score_label == "37.5"
        assert report.filename == "onboarding-classifier-2026-10-19.pdf"

    def test_sections(self):
        inputs = default_inputs()
        report = build_report(inputs, compute_result(inputs))
        assert [s.title for s in report.sections] == ["Operationele kenmerken", "Technische integratie"]

        operational = report.sections[0].rows
        assert ("Aantal SKU's", "300") in operational
        assert ("Retourpercentage", "7%") in operational
        assert ("VAS-activiteiten", "stickeren") in operational

        technical = report.sections[1].rows
        assert ("PostNL API's", "Locatie, Checkout, Retour, Track & Trace") in technical
        assert ("Kanalen", "maatwerk") in technical

    def test_nothing_selected(self):
        inputs = default_inputs().model_copy(update={"postnlApis": {"Locatie": False}})
        report = build_report(inputs, compute_result(inputs))
        assert ("PostNL API's", "Geen") in report.sections[1].rows

    def test_total_matches_csv_when_clamped(self):
        inputs = default_inputs()
        weights = GroupWeights(**{group.value: 1.0 for group in GroupKey})
        result = compute_result(inputs, group_weights=weights)
        assert build_report(inputs, result).total_score_label == "100.0"
        assert build_csv_row(inputs, result)["totalScore"] == "100.0"

    def test_blank_preset_name(self):
        inputs = default_inputs()
        assert build_report(inputs, compute_result(inputs), preset_name="").preset_name is None


def test_selected_labels_handles_missing():
    assert selected_labels(None) == []
    assert selected_labels({"a": True, "b": False}) == ["a"]
