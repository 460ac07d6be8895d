"""
Blink Hotkey
============
Main entry point for the double-blink paste application.

Uses MediaPipe FaceLandmarker for eye landmarks and PyAutoGUI to send the
paste shortcut when you blink twice within one second.

Controls:
    - Press 'M' to toggle calibration mode
    - In calibration mode, press 'O' with eyes open and 'B' with eyes closed
    - Press 'R' to reset calibration
    - Double blink to paste
    - Press 'Q' to quit

Usage:
    python main.py [--camera 0] [--hotkey ctrl+v]
"""

import argparse

from config import Config
from controller import BlinkHotkeyController


def parse_hotkey(text):
    """Turn 'ctrl+v' into ('ctrl', 'v')."""
    keys = tuple(k.strip().lower() for k in text.split('+') if k.strip())
    if not keys:
        raise argparse.ArgumentTypeError(f"invalid hotkey: {text!r}")
    return keys


def main(argv=None):
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(description="Double blink to paste")
    parser.add_argument('--camera', '-c', type=int, default=Config.CAMERA_INDEX,
                        help=f'Camera index (default: {Config.CAMERA_INDEX})')
    parser.add_argument('--hotkey', type=parse_hotkey, default=Config.PASTE_HOTKEY,
                        help=f"Keys to press, joined by '+' (default: {'+'.join(Config.PASTE_HOTKEY)})")
    parser.add_argument('--model', default=Config.FACE_LANDMARKER_MODEL_PATH,
                        help='Path to face_landmarker.task (downloaded if missing)')
    args = parser.parse_args(argv)

    print("\n" + "=" * 60)
    print("   BLINK HOTKEY")
    print("=" * 60 + "\n")

    try:
        controller = BlinkHotkeyController(camera_index=args.camera, hotkey=args.hotkey,
                                           model_path=args.model)
        controller.run()
    except (RuntimeError, OSError) as e:
        print(f"[Error] {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
