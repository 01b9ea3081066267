# alphabet.py
from __future__ import annotations

from collections.abc import Iterator

from debug import Debug
from errors import ConfigError, RangeError, SymbolError

debug = Debug()

UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Alphabet:
    """Ordered, duplicate-free symbols, each paired with a dense index."""

    def __init__(self, symbols: str = UPPER) -> None:
        symbols = "".join(symbols.split())
        if not symbols:
            raise ConfigError("Alphabet must contain at least one symbol")

        self.symbols: str = symbols
        self.size: int = len(symbols)
        self._to_index: dict[str, int] = {}
        for i, ch in enumerate(symbols):
            if ch in self._to_index:
                raise ConfigError(f"Duplicate symbol {ch!r} in alphabet {symbols!r}")
            self._to_index[ch] = i

        debug.log("alphabet", f"{self.size} symbols: {symbols}")

    # symbol → integer index
    def to_index(self, symbol: str) -> int:
        try:
            return self._to_index[symbol]
        except KeyError:
            raise SymbolError(
                f"Symbol {symbol!r} not in alphabet {self.symbols!r}"
            ) from None

    # integer index → symbol
    def to_char(self, index: int) -> str:
        if not (0 <= index < self.size):
            raise RangeError(f"Index {index} out of range 0–{self.size - 1}")
        return self.symbols[index]

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._to_index

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[str]:
        return iter(self.symbols)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self.symbols == other.symbols

    def __hash__(self) -> int:
        return hash(self.symbols)

    def __repr__(self) -> str:
        return f"<Alphabet {self.symbols}>"
