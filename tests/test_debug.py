import logging

import pytest

from debug import COMPONENTS, Debug


def test_components_start_disabled(quiet_debug):
    assert set(quiet_debug.status()) == set(COMPONENTS)
    assert not any(quiet_debug.status().values())


def test_instances_share_switches(quiet_debug):
    quiet_debug.enable("rotor")
    assert Debug().status()["rotor"]
    Debug().toggle("rotor")
    assert not quiet_debug.status()["rotor"]


def test_status_is_a_copy(quiet_debug):
    quiet_debug.status()["plugboard"] = True
    assert not quiet_debug.status()["plugboard"]


def test_unknown_component(quiet_debug):
    with pytest.raises(ValueError):
        quiet_debug.enable("keyboard")


def test_log_gating(quiet_debug, caplog):
    with caplog.at_level(logging.DEBUG, logger="ENIGMA"):
        quiet_debug.log("rotor", "hidden")
        quiet_debug.enable("rotor")
        quiet_debug.log("rotor", "shown")
        quiet_debug.toggle_global(False)
        quiet_debug.log("rotor", "muted")
    assert "[ROTOR] shown" in caplog.text
    assert "hidden" not in caplog.text
    assert "muted" not in caplog.text
    assert "active=['rotor']" in repr(quiet_debug)
