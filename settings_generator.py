# settings_generator.py
from __future__ import annotations

import argparse
import sys
from random import Random, SystemRandom
from typing import List, Sequence

from errors import ConfigError, EnigmaError
from utilities import MachineConfig, load_config, naval_config

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return up to *k* disjoint plug pairs drawn from *alpha*."""
    if k < 0:
        raise ConfigError(f"Plug pair count must not be negative, got {k}")
    pool = rng.sample(alpha, len(alpha))
    pairs = [a + b for a, b in zip(pool[::2], pool[1::2])]
    return pairs[:k]


def choose_rotors(cfg: MachineConfig, rng: Random | SystemRandom) -> List[str]:
    """Pick a legal left-to-right rotor order for *cfg*'s slots."""
    names = sorted(cfg.rotors)
    reflectors = [n for n in names if cfg.rotors[n].reflecting]
    moving = [n for n in names if cfg.rotors[n].rotates]
    fixed = [n for n in names if n not in reflectors and n not in moving]

    n_fixed = cfg.num_rotors - cfg.num_pawls - 1
    if not reflectors:
        raise ConfigError("Catalog has no reflector")
    if len(moving) < cfg.num_pawls:
        raise ConfigError(
            f"Catalog has {len(moving)} moving rotors, {cfg.num_pawls} needed"
        )

    right = rng.sample(moving, cfg.num_pawls)
    spare = [n for n in moving if n not in right]
    # fixed wheels first; spare moving wheels fill in when fixed ones run out
    left = rng.sample(fixed, min(n_fixed, len(fixed)))
    short = n_fixed - len(left)
    if short > len(spare):
        raise ConfigError(f"Catalog too small for {cfg.num_rotors} slots")
    left += rng.sample(spare, short)

    return [rng.choice(reflectors), *left, *right]


def generate_setting(
    cfg: MachineConfig,
    rng: Random | SystemRandom,
    *,
    pairs: int = 10,
    ring: bool = False,
) -> str:
    """Return a random setting line that *cfg*'s machine will accept."""
    alpha = cfg.alphabet.symbols
    rotors = choose_rotors(cfg, rng)
    parts = ["*", *rotors, "".join(rng.choices(alpha, k=cfg.num_rotors - 1))]
    if ring:
        parts.append("".join(rng.choices(alpha, k=cfg.num_rotors - 1)))
    parts += [f"({p})" for p in choose_pairs(alpha, pairs, rng)]
    return " ".join(parts)


def parse_cli(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a random setting line")
    p.add_argument("--config", metavar="FILE", help="Machine description (default: built-in naval wheels)")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--pairs", type=int, default=10, help="Plugboard pairs (default: 10)")
    p.add_argument("--ring", action="store_true", help="Also emit a random ring setting")
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_cli(argv)
    try:
        cfg = load_config(args.config) if args.config else naval_config()
        line = generate_setting(cfg, build_rng(args.seed), pairs=args.pairs, ring=args.ring)
    except (EnigmaError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
