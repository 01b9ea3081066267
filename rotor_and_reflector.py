# rotor_and_reflector.py
from __future__ import annotations

from typing import ClassVar, Dict

from alphabet import Alphabet
from debug import Debug
from errors import ConfigError, RangeError
from permutation import Permutation

debug = Debug()


class Rotor:
    """A wheel named *name* whose wiring at position 0 is *permutation*.

    Subclasses only differ in whether they move, reflect or carry notches;
    the signal path through the wiring is shared.
    """

    kind: ClassVar[str] = "N"

    def __init__(self, name: str, permutation: Permutation) -> None:
        self.name = name
        self.permutation = permutation
        self.alphabet: Alphabet = permutation.alphabet
        self.size = permutation.size
        self._setting = 0
        self._ring_setting = 0

    # ── capabilities ──────────────────────────────────────────────
    @property
    def rotates(self) -> bool:
        return False

    @property
    def reflecting(self) -> bool:
        return False

    def at_notch(self) -> bool:
        """True iff the rotor to my left may advance on the next step."""
        return False

    def advance(self) -> None:
        """Move one position, if I can. Plain rotors cannot."""

    # ── position & ring ───────────────────────────────────────────
    @property
    def setting(self) -> int:
        return self._setting

    @property
    def ring_setting(self) -> int:
        return self._ring_setting

    def set(self, posn: int | str) -> None:
        """Turn to index *posn*, or to the index of symbol *posn*."""
        if isinstance(posn, str):
            posn = self.alphabet.to_index(posn)
        if not (0 <= posn < self.size):
            raise RangeError(
                f"Rotor {self.name}: position {posn} out of range 0–{self.size - 1}"
            )
        self._setting = posn
        debug.log("rotor", f"{self.name} set to {self.alphabet.to_char(posn)}")

    def set_ring(self, posn: int | str) -> None:
        if isinstance(posn, str):
            posn = self.alphabet.to_index(posn)
        if not (0 <= posn < self.size):
            raise RangeError(
                f"Rotor {self.name}: ring {posn} out of range 0–{self.size - 1}"
            )
        self._ring_setting = posn
        debug.log("rotor", f"{self.name} ring at {self.alphabet.to_char(posn)}")

    # ── signal paths ─────────────────────────────────────────────
    def convert_forward(self, p: int) -> int:
        shift = self._setting - self._ring_setting
        return self.permutation.wrap(self.permutation.permute(p + shift) - shift)

    def convert_backward(self, e: int) -> int:
        shift = self._setting - self._ring_setting
        return self.permutation.wrap(self.permutation.invert(e + shift) - shift)

    # ── niceties ─────────────────────────────────────────────────
    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {self.name} "
            f"pos={self._setting} ring={self._ring_setting}>"
        )


class FixedRotor(Rotor):
    """A rotor with no ratchet: it never moves once set."""

    kind = "N"


class MovingRotor(Rotor):
    """A rotor with a ratchet and notches at the symbols in *notches*."""

    kind = "M"

    def __init__(self, name: str, permutation: Permutation, notches: str = "") -> None:
        super().__init__(name, permutation)
        if not set(notches) <= set(self.alphabet.symbols):
            raise ConfigError(
                f"Rotor {name}: notch symbols {notches!r} must be in the alphabet"
            )
        self.notches = notches
        self._notch_idx = frozenset(self.alphabet.to_index(ch) for ch in notches)

    @property
    def rotates(self) -> bool:
        return True

    def at_notch(self) -> bool:
        effective = self.permutation.wrap(self.setting + self.ring_setting)
        return effective in self._notch_idx

    def advance(self) -> None:
        self._setting = self.permutation.wrap(self._setting + 1)


class Reflector(FixedRotor):
    """The leftmost wheel; its wiring may not map any contact to itself."""

    kind = "R"

    def __init__(self, name: str, permutation: Permutation) -> None:
        if not permutation.derangement():
            raise ConfigError(
                f"Reflector {name}: wiring {permutation} has fixed points"
            )
        super().__init__(name, permutation)

    @property
    def reflecting(self) -> bool:
        return True

    def set(self, posn: int | str) -> None:
        if isinstance(posn, str):
            posn = self.alphabet.to_index(posn)
        if posn != 0:
            raise ConfigError(f"Reflector {self.name} cannot be set to {posn}")
        super().set(posn)


ROTOR_KINDS: Dict[str, type[Rotor]] = {
    cls.kind: cls for cls in (Reflector, FixedRotor, MovingRotor)
}


def make_rotor(name: str, kind: str, permutation: Permutation, notches: str = "") -> Rotor:
    """Build the variant tagged *kind* (``R``, ``N`` or ``M``)."""
    try:
        cls = ROTOR_KINDS[kind]
    except KeyError:
        raise ConfigError(f"Rotor {name}: unknown rotor type {kind!r}") from None
    if cls is MovingRotor:
        return MovingRotor(name, permutation, notches)
    if notches:
        raise ConfigError(f"Rotor {name}: only moving rotors carry notches")
    return cls(name, permutation)
