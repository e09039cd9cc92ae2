import time
from typing import Dict, Optional, Union

import cv2
import numpy as np

from .movement_analyzer import ExerciseTarget, MovementAnalyzer
from .pose_detection.base_detector import BasePoseDetector
from .utils.logger import get_logger

logger = get_logger("ExerciseTrainer")


class ExerciseTrainer:
    """Feeds camera or video frames through pose detection into a MovementAnalyzer."""

    def __init__(
        self,
        exercise_id: str = "squats",
        target: Optional[ExerciseTarget] = None,
        pose_detector: Optional[BasePoseDetector] = None
    ):
        """
        Initialize the trainer.

        Args:
            exercise_id: Exercise to analyze
            target: Optional prescription for progress reporting
            pose_detector: Pose source; MediaPipe is used when omitted
        """
        if pose_detector is None:
            from .pose_detection.mediapipe_detector import MediaPipePoseDetector
            pose_detector = MediaPipePoseDetector()
        self.pose_detector = pose_detector
        self.movement_analyzer = MovementAnalyzer(exercise_id, target=target)

        self.cap = None
        self.is_running = False
        self.missing_pose_counter = 0
        self.missing_pose_threshold = 30  # ~1 second at 30fps
        self._last_feedback: Optional[str] = None

    def start(self, source: Union[int, str] = 0) -> None:
        """
        Run the analysis loop until the source is exhausted or interrupted.

        Args:
            source: Camera device ID or path to a video file
        """
        self.cap = cv2.VideoCapture(source)
        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open video source: {source}")
        self.is_running = True
        frame_count = 0
        try:
            while self.is_running:
                try:
                    ret, frame = self.cap.read()
                    if not ret:
                        break
                    frame_count += 1
                    self.process_frame(frame)
                except KeyboardInterrupt:
                    logger.info("KeyboardInterrupt received. Exiting gracefully...")
                    break
        finally:
            self.stop()
        logger.info(f"Processed {frame_count} frames")

    def stop(self) -> None:
        """Stop the trainer and release resources."""
        self.is_running = False
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        self.pose_detector.close()

    def process_frame(self, frame: np.ndarray, timestamp: Optional[float] = None) -> Dict:
        """
        Process a single frame.

        Args:
            frame: BGR image
            timestamp: Capture time; the monotonic clock is used when omitted

        Returns:
            Dictionary containing processing results
        """
        if timestamp is None:
            timestamp = time.monotonic()
        pose = self.pose_detector.detect(frame, timestamp=timestamp)

        if pose is None:
            self.missing_pose_counter += 1
            if self.missing_pose_counter == self.missing_pose_threshold:
                logger.warning("We can't see your full body. Please adjust your position or camera.")
        else:
            self.missing_pose_counter = 0

        result = self.movement_analyzer.analyze_frame(pose)

        # Only log when the message changes to avoid spamming every frame
        if result.feedback != self._last_feedback:
            logger.info(f"[{result.feedback_type.value}] {result.feedback} (reps: {result.rep_count})")
            self._last_feedback = result.feedback

        return {
            "pose": pose,
            "result": result,
            "progress": self.movement_analyzer.progress()
        }

    def summary(self) -> Dict:
        return self.movement_analyzer.get_session_summary().to_dict()
