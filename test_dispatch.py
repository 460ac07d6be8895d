
import unittest
from unittest import mock
from config import Config
from dispatch import DispatchSink, PasteHotkeySink

class TestPasteHotkeySink(unittest.TestCase):
    def test_sends_paste_hotkey(self):
        backend = mock.Mock()
        sink = PasteHotkeySink(backend=backend)
        result = sink.trigger()
        backend.hotkey.assert_called_once_with(*Config.PASTE_HOTKEY)
        self.assertTrue(result.ok)
        self.assertIsNone(result.error)

    def test_disables_failsafe_and_pause(self):
        backend = mock.Mock()
        PasteHotkeySink(backend=backend)
        self.assertFalse(backend.FAILSAFE)
        self.assertEqual(backend.PAUSE, 0)

    def test_custom_keys(self):
        backend = mock.Mock()
        sink = PasteHotkeySink(keys=("ctrl", "shift", "v"), backend=backend)
        sink.trigger()
        backend.hotkey.assert_called_once_with("ctrl", "shift", "v")

    def test_backend_failure_is_returned_not_raised(self):
        backend = mock.Mock()
        backend.hotkey.side_effect = RuntimeError("accessibility permission denied")
        sink = PasteHotkeySink(backend=backend)
        result = sink.trigger()
        self.assertFalse(result.ok)
        self.assertIn("permission denied", result.error)

    def test_no_retry_after_failure(self):
        backend = mock.Mock()
        backend.hotkey.side_effect = OSError("no display")
        sink = PasteHotkeySink(backend=backend)
        sink.trigger()
        self.assertEqual(backend.hotkey.call_count, 1)

    def test_base_sink_is_abstract(self):
        with self.assertRaises(NotImplementedError):
            DispatchSink().trigger()

if __name__ == '__main__':
    unittest.main()
