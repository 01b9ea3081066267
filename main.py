# main.py
from __future__ import annotations

import argparse
import sys
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterable, List, Sequence

from debug import COMPONENTS, Debug
from errors import ConfigError, EnigmaError
from utilities import (
    MachineConfig,
    MessageSetting,
    group_message,
    is_setting_line,
    load_config,
    naval_config,
    parse_setting,
    preprocess_message,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()


@dataclass(slots=True)
class Config:
    """Runtime switches for the front end."""

    block: int = 5                  # output group size
    debug_components: List[str] = field(default_factory=list)
    log_file: str | None = None


# ────────────────────────────────────────────────────────────────────────
#  1. MachineContext – wraps a Machine & reset logic
# ────────────────────────────────────────────────────────────────────────


class MachineContext:
    """A machine plus the last setting line applied to it."""

    def __init__(self, machine_cfg: MachineConfig) -> None:
        self.config = machine_cfg
        self.machine = machine_cfg.build()
        self.setting: MessageSetting | None = None

    @classmethod
    def from_file(cls, path: str | Path | None) -> "MachineContext":
        """Load *path*, or the built-in naval wheels when *path* is None."""
        return cls(load_config(path) if path else naval_config())

    def setup(self, line: str) -> None:
        setting = parse_setting(line, self.machine.num_rotors)
        setting.apply(self.machine)
        self.setting = setting
        debug.log("config", f"setup {line.strip()!r}")

    def rewind(self) -> None:
        """Turn the rotors back to the last setting line's positions."""
        if self.setting is None:
            raise ConfigError("missing setting")
        self.machine.set_rotors(self.setting.setting)

    def encipher_block(self, text: str) -> str:
        """Encipher *text* from the start position of the current setting."""
        self.rewind()
        return self.machine.convert(text)


# ────────────────────────────────────────────────────────────────────────
#  2. Message scripts
# ────────────────────────────────────────────────────────────────────────


def process(ctx: MachineContext, lines: Iterable[str], out: IO[str], cfg: Config) -> None:
    """Run a message script: ``*`` lines set up, other lines are converted."""
    started = False
    for raw in lines:
        line = raw.rstrip("\r\n")
        if is_setting_line(line):
            ctx.setup(line)
            started = True
        elif not line.strip():
            print(file=out)
        elif not started:
            raise ConfigError("missing setting")
        else:
            print(group_message(ctx.machine.convert(line), cfg.block), file=out)

    if not started:
        raise ConfigError("missing setting")


# ────────────────────────────────────────────────────────────────────────
#  3. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with a rotor machine")
    p.add_argument("input", nargs="?", help="Message script to read (default: stdin)")
    p.add_argument("output", nargs="?", help="Where to write results (default: stdout)")
    p.add_argument("-c", "--config", metavar="FILE", help="Machine description, plain text or .json. Default: built-in naval wheels.")
    p.add_argument("-s", "--setting", metavar="LINE", help="Setting line for one-shot mode, e.g. '* B Beta III IV I AXLE (HQ)'")
    p.add_argument("-m", "--message", metavar="TEXT", help="Convert TEXT once under --setting instead of reading a script.")
    p.add_argument("--block", type=int, default=5, help="Output group size. Default: 5")
    p.add_argument("--debug", action="append", default=[], choices=COMPONENTS, metavar="COMPONENT", help=f"Log a component; repeatable. One of: {', '.join(COMPONENTS)}")
    p.add_argument("--log-file", metavar="FILE", help="Also write debug output to FILE.")
    return p.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    cfg = Config(block=args.block, debug_components=args.debug, log_file=args.log_file)
    if cfg.log_file:
        Debug(log_to=cfg.log_file)
    debug.enable(*cfg.debug_components)

    if cfg.block <= 0:
        raise ConfigError(f"Block size must be positive, got {cfg.block}")

    ctx = MachineContext.from_file(args.config)

    # one‑shot mode ------------------------------------------------------
    if args.message is not None:
        if not args.setting:
            raise ConfigError("--message needs --setting")
        ctx.setup(args.setting)
        clean = preprocess_message(args.message, ctx.machine.alphabet)
        print(group_message(ctx.machine.convert(clean), cfg.block))
        return

    # message script -----------------------------------------------------
    with ExitStack() as stack:
        src = stack.enter_context(open(args.input, encoding="utf-8")) if args.input else sys.stdin
        dst = stack.enter_context(open(args.output, "w", encoding="utf-8")) if args.output else sys.stdout
        lines = src
        if args.setting:
            lines = [args.setting, *src]
        process(ctx, lines, dst, cfg)


# ────────────────────────────────────────────────────────────────────────
#  4. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        run(args)
    except (EnigmaError, OSError, UnicodeDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
