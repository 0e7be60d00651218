"""
Tests for key decoding and the network progress checklist.
"""

import curses

from emd.app import App, Intent
from emd.navigation import Screen
from emd.plan import LoadMultiStepDetail, NetworkStep, partial_for_step
from emd.tui import decode_key, progress_lines

from fakes import FakeProvider, network_payloads


def test_command_keys():
    """Letters and arrows map to intents outside text input."""
    assert decode_key(ord("j"), Screen.EC2_SELECT) == (Intent.DOWN, "")
    assert decode_key(curses.KEY_UP, Screen.EC2_SELECT) == (Intent.UP, "")
    assert decode_key(ord("r"), Screen.EC2_SELECT) == (Intent.REFRESH, "")
    assert decode_key(ord("K"), Screen.BLUEPRINT_DETAIL) == (Intent.MOVE_UP, "")
    assert decode_key(10, Screen.REGION_SELECT) == (Intent.SELECT, "")
    assert decode_key(127, Screen.PREVIEW) == (Intent.BACK, "")
    assert decode_key(ord("z"), Screen.PREVIEW) is None
    assert decode_key(-1, Screen.PREVIEW) is None


def test_name_input_keys():
    """The name input screen treats printable keys as text."""
    assert decode_key(ord("q"), Screen.BLUEPRINT_NAME_INPUT) == (Intent.TEXT, "q")
    assert decode_key("q", Screen.BLUEPRINT_NAME_INPUT) == (Intent.TEXT, "q")
    assert decode_key(127, Screen.BLUEPRINT_NAME_INPUT) == (Intent.BACKSPACE, "")
    assert decode_key("\x7f", Screen.BLUEPRINT_NAME_INPUT) == (Intent.BACKSPACE, "")
    assert decode_key(27, Screen.BLUEPRINT_NAME_INPUT) == (Intent.BACK, "")
    assert decode_key("\x1b", Screen.BLUEPRINT_NAME_INPUT) == (Intent.BACK, "")
    assert decode_key(13, Screen.BLUEPRINT_NAME_INPUT) == (Intent.SELECT, "")
    assert decode_key("\n", Screen.BLUEPRINT_NAME_INPUT) == (Intent.SELECT, "")


def test_wide_characters_in_name_input():
    """Hangul from get_wch arrives whole and builds the typed name."""
    typed = [decode_key(ch, Screen.BLUEPRINT_NAME_INPUT) for ch in "서울 prod"]
    assert all(intent == Intent.TEXT for intent, _ in typed)
    assert "".join(text for _, text in typed) == "서울 prod"

    # A lone UTF-8 byte is not a character
    assert decode_key("서".encode("utf-8")[0], Screen.BLUEPRINT_NAME_INPUT) is None


def test_str_keys_outside_name_input():
    """Characters from get_wch map to the same commands as key codes."""
    assert decode_key("j", Screen.EC2_SELECT) == (Intent.DOWN, "")
    assert decode_key("\t", Screen.BLUEPRINT_SELECT) == (Intent.TAB, "")
    assert decode_key("\n", Screen.EC2_SELECT) == (Intent.SELECT, "")
    assert decode_key("서", Screen.EC2_SELECT) is None
    assert decode_key(None, Screen.EC2_SELECT) is None


def test_progress_lines():
    """Finished steps are checked and the in-flight step is marked."""
    app = App(FakeProvider())
    assert progress_lines(app) == []

    machine = app.machine
    machine.begin_task(LoadMultiStepDetail("vpc-1"))
    payloads = network_payloads("vpc-1")
    for step in (NetworkStep.VPC_INFO, NetworkStep.SUBNETS):
        machine.advance_multistep(step, partial_for_step(step, payloads[step]))

    lines = progress_lines(app)
    assert len(lines) == 7
    assert lines[0].startswith("[x]")
    assert lines[1].startswith("[x]")
    assert lines[2] == "[>] Internet Gateway"
    assert lines[6].startswith("[ ]")
