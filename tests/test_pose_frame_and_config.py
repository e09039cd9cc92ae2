import json

import pytest

from movement_coach.exercise_analysis import config_utils
from movement_coach.exercise_analysis.config_utils import (
    DEFAULT_CONFIG,
    get_section,
    load_analyzer_config,
    merge_config,
)
from movement_coach.pose_detection.pose_frame import Joint, Keypoint, PoseFrame


def test_from_landmarks_reads_visibility_and_synthesizes_neck():
    landmarks = {
        "nose": [0.5, 0.1, -0.2, 0.99],
        "left_shoulder": [0.6, 0.3, 0.0, 0.9],
        "right_shoulder": [0.4, 0.3, 0.0, 0.6],
        "left_pinky": [0.7, 0.5, 0.0, 0.8],
        "left_hip": [0.55, 0.6, 0.7],
    }
    frame = PoseFrame.from_landmarks(landmarks, timestamp=1.5)

    assert frame.timestamp == 1.5
    assert frame.get(Joint.NOSE).confidence == 0.99
    assert frame.get(Joint.LEFT_HIP) == Keypoint(0.55, 0.6, 0.7)
    neck = frame.get(Joint.NECK)
    assert neck.position == pytest.approx((0.5, 0.3))
    assert neck.confidence == 0.6
    # no right hip, so no root
    assert not frame.has(Joint.ROOT)
    assert len(frame.keypoints) == 5


def test_low_confidence_joint_is_unavailable():
    frame = PoseFrame(keypoints={Joint.LEFT_KNEE: Keypoint(0.5, 0.5, 0.2)})
    assert frame.get(Joint.LEFT_KNEE, min_confidence=0.3) is None
    assert frame.get(Joint.LEFT_KNEE) is not None
    assert frame.missing([Joint.LEFT_KNEE, Joint.RIGHT_KNEE], 0.3) == [Joint.LEFT_KNEE, Joint.RIGHT_KNEE]


def test_with_timestamp_copies():
    frame = PoseFrame(keypoints={Joint.NOSE: Keypoint(0.5, 0.1)})
    stamped = frame.with_timestamp(3.0)
    assert stamped.timestamp == 3.0
    assert frame.timestamp is None
    assert stamped.keypoints == frame.keypoints


def test_missing_config_file_falls_back_to_defaults(tmp_path):
    config = load_analyzer_config(str(tmp_path / "nope.json"))
    assert config == DEFAULT_CONFIG


def test_invalid_config_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    assert load_analyzer_config(str(path)) == DEFAULT_CONFIG


def test_partial_config_is_merged_over_defaults(tmp_path):
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"squat": {"minimum_hold_time": 0.6, "weights": {"forward_lean": 40}}}))
    config = load_analyzer_config(str(path))
    assert config["squat"]["minimum_hold_time"] == 0.6
    assert config["squat"]["weights"]["forward_lean"] == 40
    assert config["squat"]["weights"]["knees_cave_in"] == 20.0
    assert config["plank"] == DEFAULT_CONFIG["plank"]


def test_defaults_come_from_the_shipped_file():
    with open(config_utils._DEFAULT_CONFIG_PATH) as f:
        shipped = json.load(f)
    assert DEFAULT_CONFIG == shipped
    assert config_utils._ANALYZER_CONFIG == shipped
    assert load_analyzer_config() is not DEFAULT_CONFIG


def test_unknown_section_is_empty():
    assert get_section("no_such_exercise", {"min_confidence": 0.5}) == {"min_confidence": 0.5}


def test_get_section_applies_override_without_mutating():
    section = get_section("plank", {"target_time": 60})
    assert section["target_time"] == 60
    assert get_section("plank")["target_time"] == 30.0


def test_merge_config_does_not_share_nested_dicts():
    merged = merge_config(DEFAULT_CONFIG, None)
    merged["squat"]["weights"]["forward_lean"] = 0
    assert DEFAULT_CONFIG["squat"]["weights"]["forward_lean"] == 25.0
