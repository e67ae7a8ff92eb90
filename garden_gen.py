#!/usr/bin/env python3
"""
Garden Generator Script

Generate a karesansui garden: zones → phased placement → refinement

Usage:
    python garden_gen.py --width 120 --height 60 --seed 42 --output data/gardens
"""

import argparse
import json
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path

import yaml
from tqdm import tqdm

from garden_generator import GeneratorConfig, GenerationCancelled, InvalidDimensionsError, generate, legend
from garden_generator.constants import DEFAULT_HEIGHT, DEFAULT_WIDTH

# Seconds before the CLI gives up on a run
CLI_TIMEOUT = 30.0


def format_legend() -> str:
    """One line per symbol: symbol = name (meaning)."""
    return "\n".join(f"{info.symbol} = {info.name} ({info.meaning})" for info in legend().values())


def load_config(path: str) -> GeneratorConfig:
    """Load generation overrides from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        return GeneratorConfig.from_dict(yaml.safe_load(f))


def main():
    parser = argparse.ArgumentParser(description="Generate a karesansui rock garden")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Garden width in cells")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="Garden height in cells")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--config", type=str, default=None, help="YAML file with generator settings")
    parser.add_argument("--output", type=str, default=None, help="Output directory")
    parser.add_argument("--timeout", type=float, default=None,
                        help=f"Seconds before giving up (default {CLI_TIMEOUT:g}, 0 disables)")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    config = load_config(args.config) if args.config else GeneratorConfig()
    if args.timeout is not None:
        if args.timeout < 0:
            parser.error(f"--timeout must not be negative, got {args.timeout:g}")
        config = replace(config, timeout=args.timeout or None)
    elif config.timeout is None:
        config = replace(config, timeout=CLI_TIMEOUT)

    with tqdm(total=100, desc="Generating", unit="%") as bar:
        def report(percent: int):
            bar.update(percent - bar.n)

        try:
            result = generate(args.width, args.height, seed=args.seed, progress=report, config=config)
        except InvalidDimensionsError as e:
            parser.error(str(e))
        except GenerationCancelled as e:
            bar.close()
            print(f"Generation stopped: {e}")
            raise SystemExit(1)

    print(result.to_text())
    print()
    print(format_legend())
    for warning in result.warnings:
        print(f"Warning: {warning.kind.value} placed {warning.placed}/{warning.minimum}")

    if args.output:
        output_dir = Path(args.output)
        output_dir.mkdir(parents=True, exist_ok=True)

        with open(output_dir / "garden.txt", "w", encoding="utf-8") as f:
            f.write(result.to_text() + "\n")

        with open(output_dir / "summary.json", "w") as f:
            json.dump({
                "generated_at": datetime.now().isoformat(),
                "config": config.to_dict(),
                **{k: v for k, v in result.to_dict().items() if k != "rows"},
            }, f, indent=2)

        print(f"Done! garden -> {output_dir}")


if __name__ == "__main__":
    main()
