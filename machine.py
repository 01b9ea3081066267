# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import overload

from alphabet import Alphabet
from debug import Debug
from errors import ConfigError, SymbolError
from permutation import Permutation
from rotor_and_reflector import Rotor

debug = Debug()


class Machine:
    """A rotor machine with *num_rotors* slots and *num_pawls* pawls.

    *all_rotors* is the catalog the slots are filled from, either a
    mapping ``name -> Rotor`` or any iterable of rotors. Slots hold the
    catalog's own rotor objects, so one catalog should not drive two
    machines at once.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        num_pawls: int,
        all_rotors: Mapping[str, Rotor] | Iterable[Rotor],
    ) -> None:
        if num_pawls <= 0:
            raise ConfigError(f"Machine needs at least one pawl, got {num_pawls}")
        if num_rotors <= num_pawls:
            raise ConfigError(
                f"Machine needs more rotor slots ({num_rotors}) than pawls ({num_pawls})"
            )

        if isinstance(all_rotors, Mapping):
            all_rotors = all_rotors.values()
        catalog: dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in catalog:
                raise ConfigError(f"Duplicate rotor name {rotor.name!r} in catalog")
            if rotor.alphabet != alphabet:
                raise ConfigError(f"Rotor {rotor.name}: alphabet differs from machine's")
            catalog[rotor.name] = rotor

        self.alphabet = alphabet
        self.num_rotors = num_rotors
        self.num_pawls = num_pawls
        self.all_rotors = catalog
        self.slots: list[Rotor] = []
        self.plugboard = Permutation("", alphabet)

    # ── setup ───────────────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill the slots, left to right, with the rotors called *names*.

        ``names[0]`` must name a reflector and the last name a moving
        rotor; no fixed rotor may stand right of a moving one.
        """
        if len(names) != self.num_rotors:
            raise ConfigError(
                f"Got {len(names)} rotors for {self.num_rotors} slots"
            )
        rotors = [self._grab(name) for name in names]

        if not rotors[0].reflecting:
            raise ConfigError(f"Leftmost rotor {rotors[0].name} is not a reflector")
        if not rotors[-1].rotates:
            raise ConfigError(f"Rightmost rotor {rotors[-1].name} is not a moving rotor")

        seen: set[str] = set()
        moving_seen = False
        for rotor in rotors:
            if rotor.name in seen:
                raise ConfigError(f"Rotor {rotor.name} inserted twice")
            seen.add(rotor.name)
        for rotor in rotors[1:]:
            if rotor.reflecting:
                raise ConfigError(f"Reflector {rotor.name} outside the leftmost slot")
            if rotor.rotates:
                moving_seen = True
            elif moving_seen:
                raise ConfigError(
                    f"Fixed rotor {rotor.name} placed right of a moving rotor"
                )

        moving = sum(1 for r in rotors if r.rotates)
        if moving != self.num_pawls:
            debug.warn(
                "config",
                f"{moving} moving rotors inserted for {self.num_pawls} pawls",
            )

        self.slots = rotors
        debug.log("config", f"slots: {' '.join(r.name for r in rotors)}")

    def set_rotors(self, setting: str) -> None:
        """Turn every non-reflector slot to its symbol in *setting*."""
        self._check_setting(setting, "Rotor setting")
        for rotor, ch in zip(self.slots[1:], setting):
            rotor.set(ch)

    def set_ring(self, setting: str) -> None:
        """Apply ring offsets, one symbol per non-reflector slot."""
        self._check_setting(setting, "Ring setting")
        for rotor, ch in zip(self.slots[1:], setting):
            rotor.set_ring(ch)

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self.alphabet:
            raise ConfigError("Plugboard alphabet differs from machine's")
        self.plugboard = plugboard
        debug.log("plugboard", f"{plugboard}")

    @property
    def positions(self) -> str:
        """Current window symbols of the non-reflector slots."""
        return "".join(self.alphabet.to_char(r.setting) for r in self.slots[1:])

    # ── stepping logic  ─────────────────────────────────────────

    def step(self) -> None:
        """Advance rotors for one key-press, double-step included.

        Only the contiguous run of moving rotors at the right end takes
        part. Notches are read before anything moves: a rotor advances
        if it is the rightmost, if its right neighbour sits at a notch,
        or if it sits at its own notch while its left neighbour (also
        in the run) is about to advance.
        """
        if not self.slots:
            raise ConfigError("No rotors inserted")
        last = len(self.slots) - 1
        first = last
        while first > 1 and self.slots[first - 1].rotates:
            first -= 1

        run = range(first, last + 1)
        notched = {i: self.slots[i].at_notch() for i in run}

        advancing = []
        for i in run:
            if (
                i == last
                or notched[i + 1]
                or (notched[i] and i > first)
            ):
                advancing.append(i)

        for i in advancing:
            self.slots[i].advance()
        debug.log("stepping", f"advanced {[self.slots[i].name for i in advancing]}"
                              f" -> {self.positions}")

    # ── encipher  ───────────────────────────────────────────────

    @overload
    def convert(self, c: int) -> int: ...
    @overload
    def convert(self, c: str) -> str: ...

    def convert(self, c):
        """Step, then encode *c*: an index, or a whole line of symbols."""
        if isinstance(c, str):
            return self._convert_text(c)
        return self._convert_index(c)

    def _convert_index(self, c: int) -> int:
        self.step()

        signal = self.plugboard.permute(c)
        debug.log("plugboard", f"{c}->{signal}")

        for rotor in reversed(self.slots):
            signal = rotor.convert_forward(signal)

        for rotor in self.slots[1:]:
            signal = rotor.convert_backward(signal)

        out = self.plugboard.invert(signal)
        debug.log("encipher", f"{self.alphabet.to_char(self.plugboard.wrap(c))}"
                              f" -> {self.alphabet.to_char(out)}")
        return out

    def _convert_text(self, msg: str) -> str:
        msg = "".join(msg.split())
        bad = [ch for ch in msg if ch not in self.alphabet]
        if bad:
            raise SymbolError(f"Symbols {''.join(bad)!r} not in machine alphabet")

        to_index, to_char = self.alphabet.to_index, self.alphabet.to_char
        return "".join(to_char(self._convert_index(to_index(ch))) for ch in msg)

    # ── helpers ─────────────────────────────────────────────────

    def _grab(self, name: str) -> Rotor:
        try:
            return self.all_rotors[name]
        except KeyError:
            raise ConfigError(f"No rotor named {name!r} in catalog") from None

    def _check_setting(self, setting: str, what: str) -> None:
        if not self.slots:
            raise ConfigError("No rotors inserted")
        if len(setting) != self.num_rotors - 1:
            raise ConfigError(
                f"{what} {setting!r} must have {self.num_rotors - 1} symbols"
            )
        for ch in setting:
            if ch not in self.alphabet:
                raise SymbolError(f"{what} symbol {ch!r} not in alphabet")

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self.slots) or "empty"
        return f"<Machine [{names}] at {self.positions or '-'}>"
