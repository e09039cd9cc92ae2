import pytest

from movement_coach.exercise_analysis.session import ExercisePhase
from movement_coach.exercise_analysis.shoulder_raise_analyzer import ShoulderRaiseAnalyzer, arm_elevation
from movement_coach.feedback.form_feedback import FeedbackType
from movement_coach.pose_detection.pose_frame import Joint


def run(analyzer, session, frames):
    return [analyzer.analyze(frame, [frame], session) for frame in frames]


@pytest.mark.parametrize("wrist, expected", [
    ((0.5, 0.8), 0.0),
    ((0.8, 0.3), 90.0),
    ((0.2, 0.3), 90.0),
    ((0.5, 0.0), 180.0),
])
def test_arm_elevation(wrist, expected):
    assert arm_elevation((0.5, 0.3), wrist) == pytest.approx(expected)


def test_hanging_arms_are_not_raised(arm_raise_frame, session):
    # Hanging arms are 90 deg from horizontal, the same as arms overhead
    analyzer = ShoulderRaiseAnalyzer()
    analyzer.analyze(arm_raise_frame(0, t=0.0), [], session)
    assert session.current_phase == ExercisePhase.READY
    analyzer.analyze(arm_raise_frame(90, t=1.0), [], session)
    assert session.current_phase == ExercisePhase.PEAK


def test_full_raise_counts_on_the_way_down(arm_raise_frame, session):
    analyzer = ShoulderRaiseAnalyzer()
    timeline = [(0, 0.0), (90, 0.5), (90, 1.2), (0, 1.5), (0, 2.0)]
    results = run(analyzer, session, [arm_raise_frame(e, t=t) for e, t in timeline])

    assert [r.rep_count for r in results] == [0, 0, 0, 1, 1]
    assert len(session.form_scores) == len(timeline)


def test_short_raise_is_not_counted(arm_raise_frame, session):
    analyzer = ShoulderRaiseAnalyzer()
    timeline = [(0, 0.0), (90, 0.5), (0, 0.7)]
    run(analyzer, session, [arm_raise_frame(e, t=t) for e, t in timeline])

    assert session.rep_count == 0
    assert session.current_phase == ExercisePhase.READY

    # a proper raise afterwards still counts
    timeline = [(90, 1.1), (90, 1.8), (0, 2.0)]
    run(analyzer, session, [arm_raise_frame(e, t=t) for e, t in timeline])
    assert session.rep_count == 1


def test_two_cycles_count_two(arm_raise_frame, session):
    analyzer = ShoulderRaiseAnalyzer()
    timeline = [(0, 0.0), (90, 0.5), (0, 1.5), (90, 2.0), (0, 3.0)]
    run(analyzer, session, [arm_raise_frame(e, t=t) for e, t in timeline])
    assert session.rep_count == 2


def test_phases(arm_raise_frame, session):
    analyzer = ShoulderRaiseAnalyzer()
    analyzer.analyze(arm_raise_frame(90, t=0.0), [], session)
    assert session.current_phase == ExercisePhase.PEAK
    analyzer.analyze(arm_raise_frame(0, t=1.0), [], session)
    assert session.current_phase == ExercisePhase.COMPLETED
    analyzer.analyze(arm_raise_frame(0, t=1.5), [], session)
    assert session.current_phase == ExercisePhase.READY


def test_feedback_precedence(arm_raise_frame, session):
    analyzer = ShoulderRaiseAnalyzer()

    result = analyzer.analyze(arm_raise_frame(0, t=0.0), [], session)
    assert result.feedback == "Raise your arms to shoulder height"
    assert result.feedback_type == FeedbackType.NEEDS_IMPROVEMENT

    result = analyzer.analyze(arm_raise_frame(70, t=0.5), [], session)
    assert result.feedback == "Hold the position"
    assert result.feedback_type == FeedbackType.GOOD

    result = analyzer.analyze(arm_raise_frame(70, t=1.2), [], session)
    assert result.feedback == "Great! Now lower slowly"

    result = analyzer.analyze(arm_raise_frame(90, t=1.4), [], session)
    assert result.feedback == "Excellent form!"
    assert result.feedback_type == FeedbackType.EXCELLENT

    result = analyzer.analyze(arm_raise_frame(90, 30, t=1.6), [], session)
    assert result.feedback == "Keep arms level"
    assert result.feedback_type == FeedbackType.NEEDS_IMPROVEMENT


def test_form_score(arm_raise_frame, session):
    analyzer = ShoulderRaiseAnalyzer()
    analyzer.analyze(arm_raise_frame(90, t=0.0), [], session)
    analyzer.analyze(arm_raise_frame(80, 70, t=0.1), [], session)
    # sides 80 and 60, symmetry 80
    assert session.form_scores == pytest.approx([100.0, (80.0 + 60.0 + 80.0) / 3])


def test_missing_wrist(arm_raise_frame, drop_joints, session):
    frame = drop_joints(arm_raise_frame(90, t=0.0), Joint.RIGHT_WRIST)
    result = ShoulderRaiseAnalyzer().analyze(frame, [], session)
    assert result.feedback == "Make sure both arms are visible"
    assert result.feedback_type == FeedbackType.NEEDS_IMPROVEMENT
    assert session.form_scores == []
