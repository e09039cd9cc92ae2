import argparse
import json
import os
import sys
import traceback

from .exercise_analysis.factory import ExerciseAnalyzerFactory
from .movement_analyzer import ExerciseTarget


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Movement Coach - rep counting and form feedback")
    parser.add_argument(
        "--exercise",
        type=str,
        default="squats",
        help=f"Exercise to analyze (one of: {', '.join(ExerciseAnalyzerFactory.supported_exercises())})"
    )
    parser.add_argument(
        "--camera",
        type=int,
        default=0,
        help="Camera device ID"
    )
    parser.add_argument(
        "--video",
        type=str,
        help="Path to a video file to analyze instead of the camera"
    )
    parser.add_argument(
        "--target-reps",
        type=int,
        help="Prescribed number of reps, used for progress reporting"
    )
    return parser


def main(argv=None) -> int:
    """Main entry point for the movement coach."""
    args = build_parser().parse_args(argv)

    if args.video and not os.path.isfile(args.video):
        print(f"Video file not found: {args.video}")
        return 1

    try:
        target = ExerciseTarget(reps=args.target_reps) if args.target_reps is not None else None
    except ValueError as e:
        print(f"Invalid target: {e}")
        return 1

    # cv2 and mediapipe are only needed here
    from .trainer import ExerciseTrainer

    try:
        print("Initializing Movement Coach...")
        trainer = ExerciseTrainer(exercise_id=args.exercise, target=target)
        trainer.start(args.video if args.video else args.camera)
    except Exception as e:
        print(f"Error running trainer: {e}")
        traceback.print_exc()
        return 1

    print(json.dumps(trainer.summary(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
