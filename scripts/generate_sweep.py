#!/usr/bin/env python3
"""Generate a logarithmic sweep (and its inverse filter) for room measurement."""

import argparse
import sys
from pathlib import Path

# Add src to path for running from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from resonara.audio import compute_inverse_filter, generate_log_sweep
from resonara.utils import write_audio


def main():
    """Write sweep.wav and sweep_inverse.wav."""
    parser = argparse.ArgumentParser(description="Generate a log sine sweep")
    parser.add_argument("--start", type=float, default=20.0, help="Start frequency in Hz (default: 20)")
    parser.add_argument("--end", type=float, default=20000.0, help="End frequency in Hz (default: 20000)")
    parser.add_argument("--duration", type=float, default=5.0, help="Sweep length in seconds (default: 5)")
    parser.add_argument("--sample-rate", type=int, default=44100, help="Sample rate (default: 44100)")
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=Path("data/sweeps"),
        help="Output directory (default: data/sweeps)",
    )
    args = parser.parse_args()

    args.output_dir.mkdir(parents=True, exist_ok=True)

    sweep = generate_log_sweep(args.start, args.end, args.duration, args.sample_rate)
    inverse = compute_inverse_filter(sweep)

    sweep_path = args.output_dir / "sweep.wav"
    inverse_path = args.output_dir / "sweep_inverse.wav"
    write_audio(sweep_path, sweep, args.sample_rate)
    write_audio(inverse_path, inverse, args.sample_rate)

    print(f"Sweep: {args.start:.0f} Hz -> {args.end:.0f} Hz over {args.duration:.1f}s")
    print(f"  Saved: {sweep_path}")
    print(f"  Saved: {inverse_path}")


if __name__ == "__main__":
    main()
