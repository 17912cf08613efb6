"""Unit tests for the SurveyReport container and builder."""
from __future__ import annotations

import json

import pytest

from src.reporting.context import SurveyReport, build_survey_report, summarize_customer
from src.reporting.models import AggregationFilter, PartitionCounts
from src.survey_data import Partition, SurveyData


def _customer(name, fields, *, month=1, ignore=False, description=""):
    return {
        "Contact": {"DisplayName": name, "MobilePhone": "0912"},
        "Fields": fields,
        "Description": description,
        "DeliveryMonth": month,
        "DeliveryYear": "1403",
        "Ignore": ignore,
        "PipelineChangeTime": "2024-05-01T08:00:00",
    }


def _sample_data() -> SurveyData:
    return SurveyData.from_api_items(
        [
            {
                "perCustomerResults": [
                    _customer(
                        "Ali",
                        {"Field_A": 10, "Field_B": 9, "Field_8785_1_17": "عالی"},
                        description="نام خودرو: X200<br>شماره شاسی: CH-1",
                    ),
                    _customer("Reza", {"Field_A": 4, "Field_B": 6}, month=2),
                    _customer("Test", {"Field_A": 1}, ignore=True),
                ]
            },
            {"inProgress": [_customer("Maryam", {}, description="نام خودرو: T5")]},
            {"AverageAll": {"average_Field_A": 6.5, "average_Field_B": "8"}},
            {"NotAnswered": [_customer("Hadi", {}), _customer("Nima", {}, month=2)]},
            {
                "fieldsGuid": [
                    {"Key": "Field_A", "Title": "برخورد پرسنل"},
                    {"Key": "Field_B", "Title": "سرعت تحویل"},
                ]
            },
        ]
    )


def test_default_filter_report():
    report = build_survey_report(_sample_data())

    assert report.counts == PartitionCounts(completed=3, in_progress=1, not_answered=2)
    assert [qa.key for qa in report.question_averages] == ["Field_B", "Field_A"]
    assert report.question_averages[0].label == "سرعت تحویل"
    assert report.question_averages[0].score == pytest.approx(7.5)
    assert report.question_averages[1].score == pytest.approx(5.0)
    assert report.overall_index == pytest.approx(6.25)
    assert report.distribution.total == report.counts.completed


def test_customer_cards():
    report = build_survey_report(_sample_data())
    ali = report.customers[0]

    assert ali.contact.display_name == "Ali"
    assert ali.score == pytest.approx(9.5)
    assert ali.dissatisfied is False
    assert ali.vehicle.car_model == "X200"
    assert ali.vehicle.chassis_number == "CH-1"
    assert ali.comment == "عالی"

    maryam = report.in_progress[0]
    assert maryam.status is Partition.IN_PROGRESS
    assert maryam.score == 0
    assert maryam.dissatisfied is False
    assert maryam.vehicle.car_model == "T5"
    assert maryam.pipeline_change_time == "2024-05-01T08:00:00"


def test_filters_flow_through_every_section():
    survey_filter = AggregationFilter(
        month=1, exclude_ignored=True, dissatisfied_only=True
    )
    report = build_survey_report(_sample_data(), survey_filter)

    # Ali (month 1) is satisfied, Reza is month 2, Test is ignored
    assert report.customers == []
    assert report.question_averages == []
    assert report.overall_index == 0.0
    assert report.distribution.total == 0
    assert report.counts == PartitionCounts(completed=0, in_progress=1, not_answered=1)


def test_report_is_deterministic():
    data = _sample_data()
    survey_filter = AggregationFilter(exclude_ignored=True)

    first = build_survey_report(data, survey_filter).to_dict()
    build_survey_report(data, AggregationFilter(dissatisfied_only=True))
    second = build_survey_report(data, survey_filter).to_dict()

    assert first == second


def test_to_dict_is_json_ready():
    report = build_survey_report(_sample_data())
    as_dict = report.to_dict()

    assert as_dict["filter"]["year"] == "all"
    assert as_dict["counts"]["total"] == 6
    assert as_dict["customers"][0]["status"] == "completed"
    assert as_dict["customers"][0]["vehicle"]["car_model"] == "X200"
    not_answered = as_dict["partitions"]["not_answered"]
    assert not_answered[0]["contact"]["display_name"] == "Hadi"
    assert report() == as_dict
    json.dumps(as_dict, ensure_ascii=False)


def test_empty_report():
    report = build_survey_report(SurveyData())

    assert isinstance(report, SurveyReport)
    assert report.counts.total == 0
    assert report.question_averages == []
    assert report.distribution.to_dict() == {
        "dissatisfied": 0,
        "average": 0,
        "good": 0,
        "excellent": 0,
    }


def test_summarize_customer_threshold():
    data = _sample_data()
    reza = data.completed[1]

    assert summarize_customer(reza, Partition.COMPLETED).dissatisfied is True
    lenient = summarize_customer(reza, Partition.COMPLETED, threshold=5)
    assert lenient.dissatisfied is False


def test_server_averages_shown_unfiltered():
    survey_filter = AggregationFilter(month=2)
    report = build_survey_report(_sample_data(), survey_filter)

    assert [(qa.key, qa.label, qa.score) for qa in report.server_averages] == [
        ("Field_B", "سرعت تحویل", 8.0),
        ("Field_A", "برخورد پرسنل", 6.5),
    ]
    assert report.to_dict()["server_averages"][0]["key"] == "Field_B"
