from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from .pose_frame import PoseFrame


class BasePoseDetector(ABC):
    """Base class for pose sources that feed the movement analyzer."""

    @abstractmethod
    def detect(self, frame: np.ndarray, timestamp: Optional[float] = None) -> Optional[PoseFrame]:
        """
        Detect the pose of a single person in the given frame.

        Args:
            frame: Input frame as numpy array
            timestamp: Capture time of the frame in seconds

        Returns:
            PoseFrame for the first (most confident) detection, or None when
            nobody was found
        """
        pass

    @abstractmethod
    def get_landmark_names(self) -> List[str]:
        """
        Get the list of landmark names that this detector provides.

        Returns:
            List of landmark names
        """
        pass

    def close(self) -> None:
        """Release model resources. Default is a no-op."""
