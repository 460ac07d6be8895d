"""
Main controller for blink-to-hotkey interaction.
"""

import queue
import threading
import time

import cv2

from config import Config
from dispatch import PasteHotkeySink
from perception import FaceLandmarkService
from session import DetectionSession


class FrameProducer(threading.Thread):
    """
    Capture worker: reads camera frames, runs face landmark perception and
    hands (frame, eyes, timestamp) to the consumer through a bounded queue.

    When the queue is full the oldest frame is dropped so the consumer always
    sees recent samples.
    """

    def __init__(self, perception, frames, camera_index=Config.CAMERA_INDEX):
        super().__init__(name="FrameProducer", daemon=True)
        self.perception = perception
        self.frames = frames
        self.camera_index = camera_index
        self.cap = None
        self._stop_event = threading.Event()

    def open(self):
        """Open the camera; raises RuntimeError if it is unavailable."""
        self.cap = cv2.VideoCapture(self.camera_index)
        if not self.cap.isOpened():
            raise RuntimeError(f"Camera {self.camera_index} not found.")
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, Config.CAMERA_WIDTH)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, Config.CAMERA_HEIGHT)

    def run(self):
        while not self._stop_event.is_set():
            ret, frame = self.cap.read()
            if not ret:
                print("[Error] Failed to read from camera")
                break

            # Flip frame horizontally for mirror effect
            frame = cv2.flip(frame, 1)
            timestamp = time.monotonic()
            eyes = self.perception.detect(frame, timestamp)
            self._offer((frame, eyes, timestamp))

    def _offer(self, item):
        try:
            self.frames.put_nowait(item)
        except queue.Full:
            try:
                self.frames.get_nowait()
            except queue.Empty:
                pass
            self.frames.put_nowait(item)

    def stop(self):
        self._stop_event.set()

    def release(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None


class BlinkHotkeyController:
    """
    Main controller: double blink sends the paste hotkey.

    Modes:
        1. Calibration: record open-eye and closed-eye openness references
        2. Detection: a double blink within GESTURE_WINDOW fires the hotkey

    The controller runs on the main thread and is the only consumer of the
    frame queue; all session state changes happen here.
    """

    def __init__(self, camera_index=Config.CAMERA_INDEX, hotkey=None,
                 model_path=Config.FACE_LANDMARKER_MODEL_PATH, sink=None):
        self.perception = FaceLandmarkService(model_path=model_path)
        self.frames = queue.Queue(maxsize=Config.FRAME_QUEUE_SIZE)
        self.producer = FrameProducer(self.perception, self.frames, camera_index)

        self.session = DetectionSession(sink if sink is not None else PasteHotkeySink(keys=hotkey))
        self.calibration_mode = True

    def run(self):
        """Main application loop."""
        print("=" * 60)
        print("BLINK HOTKEY - Starting...")
        print("=" * 60)
        print("\nControls:")
        print("  - Press 'M' to toggle calibration mode")
        print("  - In calibration mode: 'O' open eyes, 'B' blink, 'R' reset")
        print("  - Double blink (blink twice quickly) to paste")
        print("  - Press 'Q' to quit at any time")
        print()

        cv2.namedWindow(Config.WINDOW_NAME, cv2.WINDOW_NORMAL)

        try:
            self.producer.open()
            self.producer.start()

            while True:
                try:
                    frame, eyes, timestamp = self.frames.get(timeout=1.0)
                except queue.Empty:
                    if not self.producer.is_alive():
                        print("[Error] Camera stream ended")
                        break
                    continue

                if eyes is None:
                    snapshot = self.session.process_no_face(timestamp)
                else:
                    snapshot = self.session.process_landmarks(eyes.left, eyes.right, timestamp)

                frame = self._draw(frame, eyes, snapshot)
                cv2.imshow(Config.WINDOW_NAME, frame)

                key = cv2.waitKey(1) & 0xFF
                if key in (ord('q'), ord('Q')):
                    print("\n[Info] Quitting...")
                    break
                self._handle_keypress(key)

        finally:
            self.cleanup()

    def _handle_keypress(self, key):
        if key in (ord('m'), ord('M')):
            self.calibration_mode = not self.calibration_mode
            mode = "calibration" if self.calibration_mode else "detection"
            print(f"[Info] Switched to {mode} mode")
            return

        if not self.calibration_mode:
            return

        if key in (ord('o'), ord('O')):
            self.session.calibrate_open()
        elif key in (ord('b'), ord('B')):
            self.session.calibrate_blink()
        elif key in (ord('r'), ord('R')):
            self.session.reset_calibration()

    # Drawing ----------------------------------------------------------

    def _draw(self, frame, eyes, snapshot):
        height, width = frame.shape[:2]

        # Draw semi-transparent header for better text visibility
        overlay = frame.copy()
        cv2.rectangle(overlay, (0, 0), (width, 110), (0, 0, 0), -1)
        frame = cv2.addWeighted(overlay, 0.5, frame, 0.5, 0)

        if eyes is None:
            cv2.putText(frame, "No face detected!", (width//2 - 100, height//2),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.8, Config.COLOR_RED, 2)
        else:
            self._draw_eye(frame, eyes.left)
            self._draw_eye(frame, eyes.right)

        if self.calibration_mode:
            self._draw_calibration(frame, snapshot)
        else:
            self._draw_detection(frame, snapshot)

        openness_text = f"Current Eye Openness: {snapshot.current_openness:.3f}"
        cv2.putText(frame, openness_text, (20, height - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, Config.COLOR_YELLOW, 1)

        return frame

    def _draw_calibration(self, frame, snapshot):
        cv2.putText(frame, "Calibration Mode", (20, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.8, Config.COLOR_YELLOW, 2)
        cv2.putText(frame, "'O' open eyes | 'B' blink | 'R' reset | 'M' done",
                    (20, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, Config.COLOR_WHITE, 1)

        open_text = "-" if snapshot.open_value is None else f"{snapshot.open_value:.3f}"
        blink_text = "-" if snapshot.blink_value is None else f"{snapshot.blink_value:.3f}"
        line = f"Open: {open_text}  Blink: {blink_text}"
        if snapshot.threshold is not None:
            line += f"  Calibration Threshold: {snapshot.threshold:.3f}"
        cv2.putText(frame, line, (20, 90),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, Config.COLOR_CYAN, 1)

    def _draw_detection(self, frame, snapshot):
        height, width = frame.shape[:2]

        if snapshot.threshold is None:
            cv2.putText(frame, "Please calibrate first.", (20, 40),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.8, Config.COLOR_ORANGE, 2)
            cv2.putText(frame, "Press 'M' to enter calibration mode", (20, 70),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, Config.COLOR_WHITE, 1)
            return

        if snapshot.blink_detected:
            cv2.putText(frame, "Blink Detected", (20, 40),
                        cv2.FONT_HERSHEY_SIMPLEX, 1.0, Config.COLOR_GREEN, 2)
        else:
            cv2.putText(frame, "No Blink", (20, 40),
                        cv2.FONT_HERSHEY_SIMPLEX, 1.0, Config.COLOR_RED, 2)

        status = (f"Threshold: {snapshot.threshold:.3f} | "
                  f"Blinks: {snapshot.pending_blink_count}/{Config.GESTURE_BLINKS} | "
                  f"Pastes: {snapshot.gestures_recognized}")
        cv2.putText(frame, status, (20, 75),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, Config.COLOR_WHITE, 1)

        # Visual feedback right after a gesture
        recent = (snapshot.last_gesture_time is not None and
                  time.monotonic() - snapshot.last_gesture_time < Config.FLASH_DURATION)
        if recent:
            if snapshot.last_dispatch is not None and snapshot.last_dispatch.ok:
                cv2.putText(frame, "PASTE!", (width//2 - 60, height//2),
                            cv2.FONT_HERSHEY_SIMPLEX, 1.5, Config.COLOR_GREEN, 3)
            else:
                cv2.putText(frame, "Paste failed - check permissions", (width//2 - 180, height//2),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.7, Config.COLOR_RED, 2)

        # Blink indicator - shows current state
        if snapshot.blink_detected:
            color = Config.COLOR_RED
        elif snapshot.pending_blink_count > 0:
            # Yellow while waiting for the second blink
            color = Config.COLOR_YELLOW
        else:
            color = Config.COLOR_GREEN
        cv2.circle(frame, (width - 30, 90), 15, color, -1)

    @staticmethod
    def _draw_eye(frame, points):
        if not points:
            return
        height, width = frame.shape[:2]
        for x, y in points:
            cv2.circle(frame, (int(x * width), int(y * height)), 1, Config.COLOR_GREEN, -1)

    def cleanup(self):
        """Release resources."""
        self.producer.stop()
        if self.producer.is_alive():
            self.producer.join(timeout=2.0)
        self.producer.release()
        self.session.reset()
        cv2.destroyAllWindows()
        self.perception.close()
        print("[Info] Cleanup complete. Goodbye!")
