"""Tests for CSV data collection."""

from __future__ import annotations

import csv

import pytest

from waypoint_pursuit.data_collector import (
    TRACKING_HEADER,
    WAYPOINT_HEADER,
    DataCollector,
    write_waypoints,
)
from waypoint_pursuit.geometry import Point2D


def read_rows(filepath):
    with open(filepath, newline="") as f:
        return list(csv.reader(f))


@pytest.fixture(autouse=True)
def no_run_dir_env(monkeypatch):
    monkeypatch.delenv("RUN_DIR", raising=False)


def test_write_waypoints(tmp_path, straight_path):
    output = tmp_path / "waypoints.csv"
    write_waypoints(straight_path, output)
    rows = read_rows(output)
    assert rows[0] == WAYPOINT_HEADER
    assert len(rows) == 1 + 4
    assert [float(v) for v in rows[1][1:]] == [0.0, 0.0, 1.0]
    assert [float(v) for v in rows[-1][1:]] == [30.0, 0.0, 3.0]


def test_explicit_run_dir(tmp_path):
    collector = DataCollector(output_dir=str(tmp_path), run_dir=str(tmp_path / "run_a"))
    assert collector.run_dir == tmp_path / "run_a"
    assert collector.tracking_output_path == tmp_path / "run_a" / "tracking.csv"


def test_run_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("RUN_DIR", str(tmp_path / "from_env"))
    collector = DataCollector(output_dir=str(tmp_path))
    assert collector.run_dir == tmp_path / "from_env"


def test_timestamped_run_dir(tmp_path):
    collector = DataCollector(output_dir=str(tmp_path))
    assert collector.run_dir.parent == tmp_path / "results"
    assert collector.run_dir.name.startswith("run_")


def test_output_dir_must_be_directory(tmp_path):
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("x")
    with pytest.raises(ValueError):
        DataCollector(output_dir=str(not_a_dir))


def test_tracking_rows_written(tmp_path, straight_path):
    run_dir = tmp_path / "run"
    state = {"x": 1.0, "y": 0.5, "theta": 0.1}
    data = straight_path.get_look_ahead_point(Point2D(1.0, 0.5), 2.0)

    with DataCollector(run_dir=str(run_dir)) as collector:
        collector.log_waypoints(straight_path)
        collector.log_tracking(0, 0.0, state, data, 1.0, -0.2)
        collector.log_tracking(1, 0.05, state, data, 1.0, -0.2)

    assert collector.tracking_csv_file is None
    rows = read_rows(run_dir / "tracking.csv")
    assert rows[0] == TRACKING_HEADER
    assert len(rows) == 3
    sample = dict(zip(TRACKING_HEADER, rows[2]))
    assert int(sample["tick"]) == 1
    assert float(sample["look_ahead_x"]) == pytest.approx(data.look_ahead_point.x)
    assert float(sample["remaining_distance"]) == pytest.approx(29.0)
    assert float(sample["omega_cmd"]) == pytest.approx(-0.2)
    assert (run_dir / "waypoints.csv").exists()
