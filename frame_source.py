import logging
import os

import cv2

from palette_config import parse_time_str
from palette_errors import DecodeError, SourceOpenError

logger = logging.getLogger(__name__)


class VideoFrameSource:
    """지정 구간의 프레임을 순서대로 한 번만 내보내는 OpenCV 기반 프레임 소스

    프레임은 디코더가 준 그대로(BGR, uint8, HxWx3) 전달됩니다.
    """

    def __init__(self, video_path, start_time=None, end_time=None):
        self.video_path = str(video_path)
        if not os.path.isfile(self.video_path):
            raise SourceOpenError(f"동영상 경로가 파일이 아닙니다: {self.video_path}")

        self.start_sec = parse_time_str(start_time)
        self.end_sec = parse_time_str(end_time) if end_time else None

        self.cap = cv2.VideoCapture(self.video_path)
        if not self.cap.isOpened():
            self.cap.release()
            raise SourceOpenError(f"동영상을 열 수 없습니다: {self.video_path}")

        self.fps = self.cap.get(cv2.CAP_PROP_FPS) or 30.0
        self.total_frames = max(int(self.cap.get(cv2.CAP_PROP_FRAME_COUNT)), 0)

        self.start_frame = int(round(self.start_sec * self.fps))
        if self.end_sec is not None:
            self.end_frame = int(round(self.end_sec * self.fps))
        else:
            self.end_frame = self.total_frames

        if self.start_frame > 0:
            self.cap.set(cv2.CAP_PROP_POS_FRAMES, self.start_frame)
        self.frame_number = self.start_frame
        self.frames_read = 0
        # 길이를 모르는 스트림은 끝까지 읽음
        self._bounded = self.end_sec is not None or self.total_frames > 0
        self._exhausted = False

        logger.debug("opened %s: fps=%.3f total=%d window=[%d, %d)",
                     self.video_path, self.fps, self.total_frames, self.start_frame, self.end_frame)

    @property
    def frame_total(self):
        """진행률 표시용 처리 예정 프레임 수 (컨테이너가 알려주지 않으면 0)"""
        return max(self.end_frame - self.start_frame, 0)

    def __iter__(self):
        # 재시작 불가: 다시 스캔하려면 새로 열어야 함
        if self._exhausted:
            return
        try:
            while not self._bounded or self.frame_number < self.end_frame:
                try:
                    ret, frame = self.cap.read()
                except cv2.error as e:
                    raise DecodeError(f"프레임 디코딩 실패 (프레임 {self.frame_number}): {e}",
                                      frames_processed=self.frames_read) from e
                if not ret:
                    break
                if frame is None or frame.size == 0 or frame.shape[0] == 0:
                    raise DecodeError(f"빈 프레임이 디코딩되었습니다 (프레임 {self.frame_number})",
                                      frames_processed=self.frames_read)

                self.frame_number += 1
                self.frames_read += 1
                yield frame
        finally:
            self._exhausted = True

        if self.frames_read == 0:
            raise SourceOpenError(f"디코딩 가능한 프레임이 없습니다: {self.video_path}",
                                  context={"start_frame": self.start_frame, "end_frame": self.end_frame})

    def close(self):
        self.cap.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
