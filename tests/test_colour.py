"""Unit tests for colour detection and styling."""

from __future__ import annotations

import threading
import time
import unittest
from unittest import mock

from climsg import colour
from climsg.colour import CODES, RESET, ColourMode, Style, detect_colour, set_colour_enabled, style


class _FakeStream:
    def __init__(self, tty: bool) -> None:
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


class _ClosedStream:
    def isatty(self) -> bool:
        raise ValueError("I/O operation on closed file")


class DetectColourTest(unittest.TestCase):
    def test_terminal_enables_colour(self) -> None:
        self.assertTrue(detect_colour({}, _FakeStream(True)))

    def test_pipe_disables_colour(self) -> None:
        self.assertFalse(detect_colour({}, _FakeStream(False)))

    def test_no_color_disables_on_terminal(self) -> None:
        self.assertFalse(detect_colour({"NO_COLOR": "1"}, _FakeStream(True)))

    def test_empty_no_color_is_ignored(self) -> None:
        self.assertTrue(detect_colour({"NO_COLOR": ""}, _FakeStream(True)))

    def test_force_color_enables_on_pipe(self) -> None:
        self.assertTrue(detect_colour({"FORCE_COLOR": "1"}, _FakeStream(False)))

    def test_force_color_beats_no_color(self) -> None:
        self.assertTrue(detect_colour({"NO_COLOR": "1", "FORCE_COLOR": "1"}, _FakeStream(False)))

    def test_dumb_terminal_disables_colour(self) -> None:
        self.assertFalse(detect_colour({"TERM": "dumb"}, _FakeStream(True)))

    def test_stream_without_isatty_disables_colour(self) -> None:
        self.assertFalse(detect_colour({}, object()))  # type: ignore[arg-type]

    def test_closed_stream_disables_colour(self) -> None:
        self.assertFalse(detect_colour({}, _ClosedStream()))  # type: ignore[arg-type]


class StyleTest(unittest.TestCase):
    def test_disabled_returns_text_unchanged(self) -> None:
        for tag in Style:
            self.assertEqual(style(tag, "hello", enabled=False), "hello")

    def test_enabled_wraps_text(self) -> None:
        self.assertEqual(style(Style.ERROR, "Error", enabled=True), "\x1b[1;0031mError\x1b[000000m")
        for tag in Style:
            self.assertEqual(style(tag, "x", enabled=True), CODES[tag] + "x" + RESET)

    def test_codes_share_one_length(self) -> None:
        # * Equal lengths keep tab-aligned columns aligned.
        lengths = {len(code) for code in CODES.values()}
        lengths.add(len(RESET))
        self.assertEqual(lengths, {len(RESET)})

    def test_every_tag_has_a_code(self) -> None:
        self.assertEqual(set(CODES), set(Style))


class ProcessColourStateTest(unittest.TestCase):
    def setUp(self) -> None:
        patcher_detected = mock.patch.object(colour, "_DETECTED", None)
        patcher_override = mock.patch.object(colour, "_OVERRIDE", None)
        patcher_detected.start()
        patcher_override.start()
        self.addCleanup(patcher_detected.stop)
        self.addCleanup(patcher_override.stop)

    def test_override_beats_environment(self) -> None:
        with mock.patch.object(colour, "detect_colour", return_value=False):
            set_colour_enabled(True)
            self.assertTrue(colour.colour_enabled())
            self.assertIn(CODES[Style.INFO], style(Style.INFO, "Info"))

            set_colour_enabled(False)
            self.assertFalse(colour.colour_enabled())
            self.assertEqual(style(Style.INFO, "Info"), "Info")

    def test_clearing_override_restores_detected_state(self) -> None:
        with mock.patch.object(colour, "detect_colour", return_value=True):
            set_colour_enabled(False)
            self.assertFalse(colour.colour_enabled())
            set_colour_enabled(None)
            self.assertTrue(colour.colour_enabled())

    def test_detection_runs_once(self) -> None:
        with mock.patch.object(colour, "detect_colour", return_value=True) as detect:
            self.assertTrue(colour.colour_enabled())
            self.assertTrue(colour.colour_enabled())
        detect.assert_called_once()

    def test_concurrent_first_use_detects_once(self) -> None:
        calls: list[int] = []

        def slow_detect() -> bool:
            calls.append(1)
            time.sleep(0.05)
            return True

        results: list[bool] = []
        results_lock = threading.Lock()

        def worker() -> None:
            value = colour.colour_enabled()
            with results_lock:
                results.append(value)

        with mock.patch.object(colour, "detect_colour", side_effect=slow_detect):
            threads = [threading.Thread(target=worker) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join(5.0)

        self.assertEqual(len(calls), 1)
        self.assertEqual(results, [True] * 8)


class ColourModeTest(unittest.TestCase):
    def test_parse_accepts_names(self) -> None:
        self.assertIs(ColourMode.parse("auto"), ColourMode.AUTO)
        self.assertIs(ColourMode.parse(" ALWAYS "), ColourMode.ALWAYS)
        self.assertIs(ColourMode.parse("never"), ColourMode.NEVER)

    def test_parse_rejects_unknown(self) -> None:
        with self.assertRaises(ValueError):
            ColourMode.parse("sometimes")

    def test_fixed_modes_ignore_process_state(self) -> None:
        self.addCleanup(set_colour_enabled, None)
        set_colour_enabled(False)
        self.assertTrue(ColourMode.ALWAYS.resolve())
        set_colour_enabled(True)
        self.assertFalse(ColourMode.NEVER.resolve())
        self.assertTrue(ColourMode.AUTO.resolve())
