# permutation.py
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import overload

from alphabet import Alphabet
from debug import Debug
from errors import FormatError, SymbolError

debug = Debug()


def parse_cycles(text: str) -> list[str]:
    """Split ``"(ABC) (DE)"`` into ``["ABC", "DE"]``; whitespace is ignored."""
    cycles: list[str] = []
    current: list[str] | None = None

    for ch in "".join(text.split()):
        if ch == "(":
            if current is not None:
                raise FormatError(f"Unexpected '(' inside a cycle in {text!r}")
            current = []
        elif ch == ")":
            if current is None:
                raise FormatError(f"Unmatched ')' in {text!r}")
            cycles.append("".join(current))
            current = None
        elif current is None:
            raise FormatError(f"Symbol {ch!r} outside of any cycle in {text!r}")
        else:
            current.append(ch)

    if current is not None:
        raise FormatError(f"Unclosed cycle in {text!r}")
    return cycles


class Permutation:
    """A bijection on an alphabet's indices, given in cycle notation.

    Symbols that appear in no cycle are fixed points. Lookups go through
    successor / predecessor tables built once here, so ``permute`` and
    ``invert`` cost the same whatever the alphabet size.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        self.alphabet = alphabet
        self.size = alphabet.size
        self.cycles: tuple[str, ...] = tuple(parse_cycles(cycles))

        seen: set[str] = set()
        for cycle in self.cycles:
            for ch in cycle:
                if ch in seen:
                    raise FormatError(f"Symbol {ch!r} repeated in cycles {cycles!r}")
                if ch not in alphabet:
                    raise FormatError(
                        f"Symbol {ch!r} in cycles {cycles!r} is not in alphabet"
                    )
                seen.add(ch)

        # integer lookup tables
        self._fwd = list(range(self.size))
        self._rev = list(range(self.size))
        for cycle in self.cycles:
            idx = [alphabet.to_index(ch) for ch in cycle]
            for a, b in zip(idx, idx[1:] + idx[:1]):
                self._fwd[a] = b
                self._rev[b] = a

        self._fixed = sum(1 for i, j in enumerate(self._fwd) if i == j)
        debug.log("permutation", f"{self!r} fixed={self._fixed}")

    # ── alternate constructors ────────────────────────────────────
    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a permuted alphabet: symbol *k* maps to ``wiring[k]``."""
        if sorted(wiring) != sorted(alphabet.symbols):
            raise FormatError("wiring must be a permutation of alphabet")

        groups: list[str] = []
        done: set[str] = set()
        for start in alphabet:
            if start in done:
                continue
            group, ch = [], start
            while ch not in done:
                done.add(ch)
                group.append(ch)
                ch = wiring[alphabet.to_index(ch)]
            groups.append("".join(group))
        return cls(" ".join(f"({g})" for g in groups), alphabet)

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[str | Sequence[str]],
        alphabet: Alphabet,
    ) -> "Permutation":
        """Plugboard-style swaps, e.g. ``["AB", "CD"]`` or ``[("A", "B")]``."""
        groups: list[str] = []
        for raw in pairs:
            if len(raw) != 2:
                raise FormatError(f"Pair {raw!r} must be exactly 2 symbols")
            a, b = raw
            if a == b:
                raise FormatError(f"Pair cannot map a symbol to itself: {a}")
            groups.append(f"({a}{b})")
        return cls(" ".join(groups), alphabet)

    # ── arithmetic ────────────────────────────────────────────────
    def wrap(self, p: int) -> int:
        """Return *p* reduced into ``0 .. size-1``."""
        return ((p % self.size) + self.size) % self.size

    @overload
    def permute(self, p: int) -> int: ...
    @overload
    def permute(self, p: str) -> str: ...

    def permute(self, p):
        if isinstance(p, str):
            return self.alphabet.to_char(self._fwd[self._index_of(p)])
        return self._fwd[self.wrap(p)]

    @overload
    def invert(self, c: int) -> int: ...
    @overload
    def invert(self, c: str) -> str: ...

    def invert(self, c):
        if isinstance(c, str):
            return self.alphabet.to_char(self._rev[self._index_of(c)])
        return self._rev[self.wrap(c)]

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return self._fixed == 0

    # ── helpers ───────────────────────────────────────────────────
    def _index_of(self, symbol: str) -> int:
        if symbol not in self.alphabet:
            raise SymbolError(f"Symbol {symbol!r} not in permutation alphabet")
        return self.alphabet.to_index(symbol)

    def __len__(self) -> int:
        return self.size

    def __str__(self) -> str:
        return " ".join(f"({c})" for c in self.cycles if len(c) > 1)

    def __repr__(self) -> str:
        return f"<Permutation {self}>"
