#!/usr/bin/env python3
"""
Analyze a room from recordings of the discovery passes.

This tool measures:
- Ambient noise floor (per energy centre) from a recording of the empty room
- Reverberation time (RT60) from a recording of a few claps
- Instrument profiles and room compatibility from instrument recordings

Usage:
    python scripts/analyze_room.py --ambient data/room/ambient.wav
    python scripts/analyze_room.py --ambient ambient.wav --claps claps.wav \\
        --instrument singing-bowl=bowl.wav --instrument gong=gong.wav -o report.json

Example workflow:
    1. Record ~15 s of the quiet room, then a few claps ~1 s apart
    2. Record each instrument for a few seconds
    3. Run this script and review the JSON report
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from tqdm import tqdm

# Add src to path for running from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from resonara.analysis import (
    AmbientListenSession,
    ClapCaptureSession,
    InstrumentRecordingSession,
    build_room_profile,
    print_summary,
    save_report,
)
from resonara.audio import SpectrumAnalyser, split_blocks
from resonara.utils import EngineConfig, load_audio

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Capture block size used by the live clap recorder
CLAP_BLOCK_SIZE = 4096


def analyze_ambient(path: Path, config: EngineConfig, analyser: SpectrumAnalyser):
    """Noise floor from a recording of the empty room."""
    audio, _ = load_audio(path, config.sample_rate)

    # Only the listening window is used
    max_samples = int(config.listen_duration_seconds * config.sample_rate)
    audio = audio[:max_samples]

    session = AmbientListenSession(config.sample_rate, config.fft_size)
    blocks = analyser.time_domain_frames(audio, config.hop_length)
    frames = analyser.frequency_frames(audio, config.hop_length)
    for block, frame in zip(blocks, frames):
        session.add_frame(block, frame)

    return session.finalise()


def analyze_claps(path: Path, config: EngineConfig):
    """Clap test on a recording of claps."""
    audio, _ = load_audio(path, config.sample_rate)

    session = ClapCaptureSession(
        config.sample_rate,
        detector_config=config.transients,
        decay_seconds=config.decay_capture_seconds,
    )
    for block in split_blocks(audio, CLAP_BLOCK_SIZE):
        session.add_block(block)

    return session.finalise()


def analyze_instrument(
    instrument_id: str,
    path: Path,
    config: EngineConfig,
    analyser: SpectrumAnalyser,
    noise_floor,
):
    """Profile one instrument recording against the room."""
    audio, _ = load_audio(path, config.sample_rate)

    session = InstrumentRecordingSession(
        instrument_id,
        sample_rate=config.sample_rate,
        fft_size=config.fft_size,
        num_harmonics=config.num_harmonics,
    )
    for frame in analyser.frequency_frames(audio, config.hop_length):
        session.add_frame(frame)

    return session.finalise(noise_floor)


def parse_instrument(value: str) -> Tuple[str, Path]:
    """Parse ``id=path`` (or just a path, using the file stem as id)."""
    if "=" in value:
        instrument_id, path = value.split("=", 1)
        return instrument_id.strip(), Path(path)
    path = Path(value)
    return path.stem, path


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Analyze a room's acoustics from discovery recordings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --ambient ambient.wav
    %(prog)s --ambient ambient.wav --claps claps.wav -o data/analysis/room.json
    %(prog)s --claps claps.wav --instrument crystal-bowl=bowl.wav --name "Studio A"
        """
    )
    parser.add_argument("--ambient", type=Path, help="Recording of the quiet room")
    parser.add_argument("--claps", type=Path, help="Recording of the clap test")
    parser.add_argument(
        "--instrument",
        action="append",
        default=[],
        metavar="ID=PATH",
        help="Instrument recording, repeatable (id from the instrument library)",
    )
    parser.add_argument("--name", default="Room", help="Room name (default: Room)")
    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Path to engine configuration YAML (default: configs/engine.yaml)",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("data/analysis/room_profile.json"),
        help="Output JSON report (default: data/analysis/room_profile.json)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output",
    )

    args = parser.parse_args(argv)

    if args.quiet:
        logging.getLogger().setLevel(logging.WARNING)

    if not (args.ambient or args.claps or args.instrument):
        parser.error("Provide at least one of --ambient, --claps or --instrument")

    try:
        config = EngineConfig.from_yaml(args.config)
    except FileNotFoundError:
        if args.config:
            raise
        logger.info("No engine config found, using defaults")
        config = EngineConfig()

    analyser = SpectrumAnalyser(config.sample_rate, config.fft_size, config.smoothing)

    noise_floor = None
    if args.ambient:
        logger.info(f"Analyzing ambient recording: {args.ambient}")
        noise_floor = analyze_ambient(args.ambient, config, analyser)

    clap_captures = []
    if args.claps:
        logger.info(f"Analyzing clap recording: {args.claps}")
        clap_result = analyze_claps(args.claps, config)
        if clap_result.error:
            logger.warning(clap_result.error)
        clap_captures = clap_result.captures

    profiles = []
    instruments = [parse_instrument(v) for v in args.instrument]
    for instrument_id, path in tqdm(instruments, desc="Profiling instruments", disable=args.quiet):
        try:
            profile = analyze_instrument(instrument_id, path, config, analyser, noise_floor)
        except FileNotFoundError as e:
            logger.error(str(e))
            continue
        if profile is not None:
            profiles.append(profile)

    room = build_room_profile(args.name, noise_floor, clap_captures, profiles)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    save_report(room, args.output)
    logger.info(f"Report saved to: {args.output}")

    if not args.quiet:
        print_summary(room)


if __name__ == "__main__":
    main()
