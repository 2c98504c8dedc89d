"""
Test suite for input/
=====================
Tests for the pynput-backed controllers, with pynput's Controller and
Listener replaced so no input is injected into the running session.
"""

import time

import pytest

pynput_keyboard = pytest.importorskip("pynput.keyboard")

from pynput.keyboard import Key, KeyCode  # noqa: E402

import input.keyboard_controller as keyboard_controller  # noqa: E402
import input.mouse_controller as mouse_controller  # noqa: E402


class RecordingController:
    def __init__(self):
        self.events = []

    def press(self, key):
        self.events.append(("press", key))

    def release(self, key):
        self.events.append(("release", key))


class FakeListener:
    def __init__(self, on_press=None, on_release=None):
        self.on_press = on_press
        self.on_release = on_release
        self.started = False
        self.daemon = False

    def start(self):
        self.started = True

    def stop(self):
        self.started = False


@pytest.fixture
def keyboard(monkeypatch):
    monkeypatch.setattr(keyboard_controller, "Controller", RecordingController)
    monkeypatch.setattr(keyboard_controller, "Listener", FakeListener)
    return keyboard_controller.KeyboardController()


@pytest.fixture
def mouse(monkeypatch):
    monkeypatch.setattr(mouse_controller, "Controller", RecordingController)
    return mouse_controller.MouseController()


class TestKeyboardController:
    """Tests for KeyboardController"""

    def test_hold_key_default(self, keyboard):
        keyboard.press()
        keyboard.release()
        assert keyboard.kb.events == [("press", Key.shift), ("release", Key.shift)]

    def test_is_pressed_tracks_listener_events(self, keyboard):
        assert not keyboard.is_pressed()
        listener = keyboard._listener
        assert listener.started
        listener.on_press(Key.shift_r)
        assert keyboard.is_pressed()
        listener.on_release(Key.shift_r)
        assert not keyboard.is_pressed()

    def test_character_keys_case_insensitive(self, keyboard):
        keyboard.start_listener()
        keyboard._listener.on_press(KeyCode.from_char("Q"))
        assert keyboard.is_pressed("q")

    def test_stop_listener_clears_state(self, keyboard):
        keyboard.start_listener()
        keyboard._listener.on_press(Key.shift)
        keyboard.stop_listener()
        assert keyboard._listener is None
        keyboard.start_listener()
        assert not keyboard.is_pressed()


class TestMouseController:
    """Tests for MouseController"""

    def test_right_click(self, mouse):
        mouse.right_click()
        assert mouse.mouse.events == [
            ("press", mouse_controller.Button.right),
            ("release", mouse_controller.Button.right),
        ]

    def test_release_right_only_when_held(self, mouse):
        mouse.release_right()
        assert mouse.mouse.events == []

    def test_right_click_does_not_sleep(self, mouse, monkeypatch):
        def no_sleep(seconds):
            raise AssertionError(f"right_click slept {seconds}s inside a tick")

        monkeypatch.setattr(time, "sleep", no_sleep)
        mouse.right_click()
        assert len(mouse.mouse.events) == 2

    def test_right_click_leaves_button_up(self, mouse):
        mouse.right_click()
        mouse.release_right()
        assert [e[0] for e in mouse.mouse.events] == ["press", "release"]
