# utilities.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

from alphabet import UPPER, Alphabet
from debug import Debug
from errors import ConfigError, SymbolError
from machine import Machine
from permutation import Permutation
from rotor_and_reflector import Rotor, make_rotor

debug = Debug()

# ────────────────────────────────────────────────────────────────────────
#  0. Wheel database
# ────────────────────────────────────────────────────────────────────────

# (name, type, wiring, notches); type is R / N / M as in config files
NAVAL_WHEELS: List[Tuple[str, str, str, str]] = [
    ("I",     "M", "EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
    ("II",    "M", "AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
    ("III",   "M", "BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
    ("IV",    "M", "ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
    ("V",     "M", "VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
    ("VI",    "M", "JPGVOUMFYQBENHZRDKASXLICTW", "ZM"),
    ("VII",   "M", "NZJHGRCXMYSWBOUFAIVLPEKQDT", "ZM"),
    ("VIII",  "M", "FKQHTLXOCBJSPDZRAMEWNIUYGV", "ZM"),
    ("Beta",  "N", "LEYJVCNIXWPBQMDRTAKZGFUHOS", ""),
    ("Gamma", "N", "FSOKANUERHMBTIYCWLQPZXVGJD", ""),
    ("B",     "R", "ENKQAUYWJICOPBLMDXZVFTHRGS", ""),
    ("C",     "R", "RDOBJNTKVEHMLFCWZAXGYIPSUQ", ""),
]

NAVAL_SLOTS = 5
NAVAL_PAWLS = 3


@dataclass(slots=True)
class MachineConfig:
    """Everything a configuration file describes."""

    alphabet: Alphabet
    num_rotors: int
    num_pawls: int
    rotors: Dict[str, Rotor] = field(default_factory=dict)

    def build(self) -> Machine:
        return Machine(self.alphabet, self.num_rotors, self.num_pawls, self.rotors)


@dataclass(slots=True)
class MessageSetting:
    """One ``* …`` line: rotor order, positions, ring and plugboard."""

    rotors: List[str]
    setting: str
    ring: str | None = None
    plugboard: str = ""

    def apply(self, machine: Machine) -> None:
        """Configure *machine*; an omitted ring puts every ring at index 0."""
        expected = machine.num_rotors - 1
        ring = self.ring
        if ring is None:
            ring = machine.alphabet.to_char(0) * expected

        # everything is checked before the machine is touched
        for what, value in (("Rotor setting", self.setting), ("Ring setting", ring)):
            if len(value) != expected:
                raise ConfigError(f"{what} {value!r} must have {expected} symbols")
            bad = [ch for ch in value if ch not in machine.alphabet]
            if bad:
                raise SymbolError(f"{what} symbols {''.join(bad)!r} not in alphabet")
        plugboard = Permutation(self.plugboard, machine.alphabet)

        machine.insert_rotors(self.rotors)
        machine.set_ring(ring)
        machine.set_rotors(self.setting)
        machine.set_plugboard(plugboard)


def add_to_catalog(catalog: Dict[str, Rotor], rotor: Rotor) -> None:
    if rotor.name in catalog:
        raise ConfigError(f"Rotor {rotor.name!r} described twice")
    catalog[rotor.name] = rotor


def naval_config() -> MachineConfig:
    """The historical naval wheel set on the 26-letter alphabet."""
    alphabet = Alphabet(UPPER)
    catalog: Dict[str, Rotor] = {}
    for name, kind, wiring, notches in NAVAL_WHEELS:
        perm = Permutation.from_wiring(wiring, alphabet)
        add_to_catalog(catalog, make_rotor(name, kind, perm, notches))
    return MachineConfig(alphabet, NAVAL_SLOTS, NAVAL_PAWLS, catalog)


# ────────────────────────────────────────────────────────────────────────
#  1. Configuration files
# ────────────────────────────────────────────────────────────────────────


def _parse_count(token: str | None, what: str) -> int:
    if token is None:
        raise ConfigError("configuration file truncated")
    try:
        return int(token)
    except ValueError:
        raise ConfigError(f"Bad {what} value {token!r}") from None


def read_rotor(tokens: List[str], pos: int, alphabet: Alphabet) -> Tuple[Rotor, int]:
    """Parse ``NAME TYPE (cycles)…`` starting at ``tokens[pos]``.

    Returns the rotor and the index of the first unread token.
    """
    if pos + 1 >= len(tokens):
        raise ConfigError(f"Bad rotor description near {tokens[pos]!r}")
    name, type_tok = tokens[pos], tokens[pos + 1]
    pos += 2

    cycles: List[str] = []
    while pos < len(tokens) and tokens[pos].startswith("("):
        cycles.append(tokens[pos])
        pos += 1

    kind, notches = type_tok[0], type_tok[1:]
    perm = Permutation(" ".join(cycles), alphabet)
    return make_rotor(name, kind, perm, notches), pos


def read_config(text: str) -> MachineConfig:
    """Parse the plain-text configuration format.

    First line: the alphabet. Then ``numRotors numPawls``, then rotor
    descriptions; a description's cycles may run onto later lines.
    """
    lines = text.splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)
    if not lines:
        raise ConfigError("configuration file is empty")

    alphabet = Alphabet(lines[0])
    tokens = " ".join(lines[1:]).split()

    num_rotors = _parse_count(tokens[0] if tokens else None, "numRotors")
    num_pawls = _parse_count(tokens[1] if len(tokens) > 1 else None, "numPawls")

    catalog: Dict[str, Rotor] = {}
    pos = 2
    while pos < len(tokens):
        rotor, pos = read_rotor(tokens, pos, alphabet)
        add_to_catalog(catalog, rotor)

    debug.log("config", f"read {len(catalog)} rotors over {alphabet.size} symbols")
    return MachineConfig(alphabet, num_rotors, num_pawls, catalog)


def _json_count(data: dict, key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigError(f"Bad {key} value {value!r}")
    return _parse_count(str(value), key)


def _json_text(entry: dict, key: str, default: str = "") -> str:
    value = entry.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"Rotor {entry.get('name')!r}: {key} must be a string")
    return value


def read_json_config(data: dict) -> MachineConfig:
    if not isinstance(data, dict):
        raise ConfigError("JSON config must be an object")
    required = {"alphabet", "slots", "pawls", "rotors"}
    missing = required - data.keys()
    if missing:
        raise ConfigError(f"Missing keys in config: {', '.join(sorted(missing))}")
    if not isinstance(data["alphabet"], str):
        raise ConfigError("alphabet must be a string")
    if not isinstance(data["rotors"], list):
        raise ConfigError("rotors must be a list")

    num_rotors = _json_count(data, "slots")
    num_pawls = _json_count(data, "pawls")
    alphabet = Alphabet(data["alphabet"])
    catalog: Dict[str, Rotor] = {}
    for entry in data["rotors"]:
        if not isinstance(entry, dict):
            raise ConfigError(f"Rotor entry {entry!r} must be an object")
        try:
            name, type_tok = entry["name"], entry["type"]
        except KeyError as exc:
            raise ConfigError(f"Rotor entry {entry!r} lacks {exc.args[0]!r}") from None
        if not isinstance(name, str) or not isinstance(type_tok, str) or not type_tok:
            raise ConfigError(f"Rotor entry {entry!r}: name and type must be strings")

        if "wiring" in entry:
            perm = Permutation.from_wiring(_json_text(entry, "wiring"), alphabet)
        else:
            perm = Permutation(_json_text(entry, "cycles"), alphabet)
        notches = _json_text(entry, "notches", type_tok[1:])
        add_to_catalog(catalog, make_rotor(name, type_tok[:1], perm, notches))

    return MachineConfig(alphabet, num_rotors, num_pawls, catalog)


def load_config(path: str | Path) -> MachineConfig:
    """Read a configuration file; ``*.json`` files use the JSON layout."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{path}: not UTF-8 text ({exc.reason})") from None
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from None
        return read_json_config(data)
    return read_config(text)


# ────────────────────────────────────────────────────────────────────────
#  2. Setting lines
# ────────────────────────────────────────────────────────────────────────


def is_setting_line(line: str) -> bool:
    return line.lstrip().startswith("*")


def parse_setting(line: str, num_rotors: int) -> MessageSetting:
    """Split ``* B Beta III IV I AXLE [RING] (HQ) (EX)`` into its parts."""
    tokens = line.strip().split()
    if not tokens or tokens[0] != "*":
        raise ConfigError(f"Setting line must start with '*': {line!r}")
    tokens = tokens[1:]

    if len(tokens) < num_rotors + 1:
        raise ConfigError(f"Setting line needs {num_rotors} rotors and a setting: {line!r}")
    rotors = tokens[:num_rotors]
    setting = tokens[num_rotors]
    rest = tokens[num_rotors + 1:]

    ring = None
    if rest and not rest[0].startswith("("):
        ring, rest = rest[0], rest[1:]
    return MessageSetting(rotors, setting, ring, " ".join(rest))


# ────────────────────────────────────────────────────────────────────────
#  3. Text preprocessing
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str, alphabet: Alphabet) -> str:
    """Drop symbols the alphabet lacks (spaces included).

    A symbol missing from the alphabet is upper‑cased when its capital
    is there, so ``"hiawatha"`` suits an upper‑case alphabet while a
    lower‑case alphabet keeps its own symbols untouched.
    """
    kept = []
    for ch in msg:
        if ch not in alphabet:
            ch = ch.upper()
        if ch in alphabet:
            kept.append(ch)
    return "".join(kept)


def group_message(msg: str, block: int = 5) -> str:
    """``"QVPQSOKOIL"`` → ``"QVPQS OKOIL"``; the last group may be short."""
    return " ".join(msg[i : i + block] for i in range(0, len(msg), block))


__all__ = [
    "NAVAL_WHEELS",
    "MachineConfig",
    "MessageSetting",
    "naval_config",
    "read_rotor",
    "read_config",
    "read_json_config",
    "load_config",
    "is_setting_line",
    "parse_setting",
    "preprocess_message",
    "group_message",
]
