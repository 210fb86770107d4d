"""Command line entry point: offline analysis of audio files and the API server."""

import argparse
import json
import sys
from pathlib import Path

from swappy.analysis.beats import detect_beats, estimate_bpm
from swappy.analysis.engine import AnalysisEngine
from swappy.audio.loader import load_audio
from swappy.config import settings
from swappy.main import configure_logging, run


def _cmd_beats(args) -> int:
    peak = settings.beat_peak_threshold if args.peak_threshold is None else args.peak_threshold
    relative = (
        settings.beat_relative_threshold if args.relative_threshold is None else args.relative_threshold
    )
    audio = load_audio(args.file, sr=settings.sample_rate)
    beats = detect_beats(audio.mono, audio.sample_rate, peak_threshold=peak, relative_threshold=relative)
    bpm = estimate_bpm(beats)
    if args.json:
        print(json.dumps({"beats": beats, "bpm": bpm}))
    else:
        for t in beats:
            print(f"{t:.3f}")
        if bpm is not None:
            print(f"# bpm {bpm}", file=sys.stderr)
    return 0


def _cmd_transients(args) -> int:
    engine = AnalysisEngine(sensitivity=args.sensitivity, frame_size=args.frame_size)
    audio = load_audio(args.file, sr=settings.sample_rate)
    transients = engine.stream_transients(audio)
    if args.json:
        print(json.dumps({"transients": transients}))
    else:
        for t in transients:
            print(f"{t:.3f}")
    return 0


def _cmd_serve(args) -> int:
    run(reload=args.reload)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="swappy",
        description="Beat and transient analysis for audio files",
    )
    parser.add_argument("--log-level", default=None,
                        help=f"Logging level (default: {settings.log_level})")
    sub = parser.add_subparsers(dest="command", required=True)

    beats = sub.add_parser("beats", help="Print beat times of an audio file")
    beats.add_argument("file", type=Path)
    beats.add_argument("--peak-threshold", type=float, default=None,
                       help=f"Minimum bucket RMS (default: {settings.beat_peak_threshold})")
    beats.add_argument("--relative-threshold", type=float, default=None,
                       help="Minimum fraction of the loudest bucket "
                            f"(default: {settings.beat_relative_threshold})")
    beats.add_argument("--json", action="store_true")
    beats.set_defaults(func=_cmd_beats)

    transients = sub.add_parser("transients", help="Print transient times of an audio file")
    transients.add_argument("file", type=Path)
    transients.add_argument("--sensitivity", type=float, default=None,
                            help=f"Relative energy rise, 0.01-1.0 (default: {settings.transient_threshold})")
    transients.add_argument("--frame-size", type=int, default=None,
                            help=f"Samples per frame (default: {settings.frame_size})")
    transients.add_argument("--json", action="store_true")
    transients.set_defaults(func=_cmd_transients)

    serve = sub.add_parser("serve", help="Run the HTTP/WebSocket API")
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=_cmd_serve)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        return args.func(args)
    # UnsupportedAudioError is a ValueError
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
