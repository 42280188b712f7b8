"""
Tests for MetricLogRepository: raw storage, parsing and degradation of
malformed data.
"""
import datetime
import json
import logging

import pytest

from progress_svc.core.exceptions import MalformedSourceDataError, UnknownMetricLogError
from progress_svc.repositories.metric_log_repository import parse_entries
from progress_svc.schemas.entries import DailyIntake, ProgressEntry, SleepEntry
from progress_svc.services.chart.models import SourceLogs


def test_missing_log_is_empty(metric_log_repo):
    assert metric_log_repo.get_raw("progress") is None
    assert metric_log_repo.load_entries("progress") == []


def test_unknown_key_is_rejected(metric_log_repo):
    with pytest.raises(UnknownMetricLogError) as exc_info:
        metric_log_repo.load_entries("steps")
    assert exc_info.value.status_code == 404

    with pytest.raises(UnknownMetricLogError):
        metric_log_repo.save_raw("steps", "[]")


def test_save_and_load_entries(metric_log_repo):
    entries = [
        ProgressEntry(date="2024-01-01", weight=80, bmi=26.1),
        ProgressEntry(date="2024-01-08", weight=79, bmi=25.7),
    ]
    metric_log_repo.save_entries("progress", entries)

    loaded = metric_log_repo.load_entries("progress")
    assert loaded == entries
    assert loaded[0].date == datetime.date(2024, 1, 1)


def test_entries_are_stored_with_client_keys(metric_log_repo):
    metric_log_repo.save_entries("daily_intake", [
        DailyIntake(date="2024-01-01", total_intake=1850, target_calories=1800),
    ])
    payload = json.loads(metric_log_repo.get_raw("daily_intake"))
    assert payload == [{"date": "2024-01-01", "totalIntake": 1850.0, "targetCalories": 1800.0}]


def test_save_replaces_previous_log(metric_log_repo):
    metric_log_repo.save_entries("sleep", [SleepEntry(date="2024-01-01", hours=7)])
    metric_log_repo.save_entries("sleep", [SleepEntry(date="2024-01-02", hours=6.5)])
    assert metric_log_repo.load_entries("sleep") == [SleepEntry(date="2024-01-02", hours=6.5)]


def test_unrelated_keys_are_ignored(metric_log_repo):
    metric_log_repo.save_raw("daily_intake", json.dumps([
        {"date": "2024-01-01", "totalIntake": 1850, "targetCalories": 1800, "loggedMeals": [{"name": "Oats"}]},
    ]))
    metric_log_repo.save_raw("fasting", json.dumps([
        {"date": "2024-01-01", "duration": 16, "startTime": "20:00", "endTime": "12:00"},
    ]))

    (intake,) = metric_log_repo.load_entries("daily_intake")
    assert intake.total_intake == 1850
    (fast,) = metric_log_repo.load_entries("fasting")
    assert fast.duration == 16


class TestMalformedData:
    """Malformed stored data reads as an empty log and is logged."""

    @pytest.mark.parametrize("payload", [
        "not json at all",
        '{"date": "2024-01-01", "hours": 7}',
        '[{"date": "2024-01-01"}]',
        '[{"date": "yesterday", "hours": 7}]',
        '[{"date": "2024-01-01", "hours": "lots"}]',
    ])
    def test_degrades_to_empty(self, metric_log_repo, payload):
        metric_log_repo.save_raw("sleep", payload)
        assert metric_log_repo.load_entries("sleep") == []

    def test_warning_is_logged(self, metric_log_repo, caplog):
        metric_log_repo.save_raw("water", "[{broken")
        with caplog.at_level(logging.WARNING):
            assert metric_log_repo.load_entries("water") == []
        assert any("water" in r.getMessage() and r.levelno == logging.WARNING for r in caplog.records)

    def test_other_logs_are_unaffected(self, metric_log_repo):
        metric_log_repo.save_raw("sleep", "garbage")
        metric_log_repo.save_entries("progress", [ProgressEntry(date="2024-01-01", weight=80, bmi=26.1)])

        sources = metric_log_repo.load_sources()
        assert sources.sleep == ()
        assert len(sources.progress) == 1


def test_load_sources(metric_log_repo):
    metric_log_repo.save_entries("progress", [ProgressEntry(date="2024-01-01", weight=80, bmi=26.1)])
    metric_log_repo.save_entries("sleep", [SleepEntry(date="2024-01-01", hours=7)])

    sources = metric_log_repo.load_sources()
    assert isinstance(sources, SourceLogs)
    assert sources.total_entries() == 2
    assert sources.daily_intake == ()
    # hashable, so it can key the snapshot cache
    assert hash(sources) == hash(metric_log_repo.load_sources())


class TestParseEntries:

    def test_valid(self):
        (entry,) = parse_entries("water", [{"date": "2024-01-01", "glasses": 8}])
        assert entry.glasses == 8

    def test_invalid_raises(self):
        with pytest.raises(MalformedSourceDataError) as exc_info:
            parse_entries("water", [{"date": "2024-01-01"}])
        assert exc_info.value.status_code == 422

    def test_unknown_key(self):
        with pytest.raises(UnknownMetricLogError):
            parse_entries("steps", [])
