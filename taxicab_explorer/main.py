#!/usr/bin/env python3
"""
Flight vs Street Distance Explorer

Runs one trip of the flight agent (straight line) and the street agent
(shortest unblocked grid path) on a virtual clock and exports the result.

Usage:
    taxicab-explorer [--config configs/default.yaml] [options]

Examples:
    taxicab-explorer
    taxicab-explorer --config configs/default.yaml --gif --out-dir results/
    taxicab-explorer --start 3 3 --end 11 11 --block 11 10 11 11 --block 10 11 11 11
    taxicab-explorer --mode grid --pause-at 1500 --pause-for 2000 --no-snapshot
"""

import argparse
import logging
import sys
from pathlib import Path

from taxicab_explorer.config import ExplorerConfig, load_config
from taxicab_explorer.model.grid import canonical_edge
from taxicab_explorer.model.pathfinder import PathNotFoundError
from taxicab_explorer.model.scheduler import VirtualFrameScheduler
from taxicab_explorer.model.session import ExplorerSession
from taxicab_explorer.model.state import AnimationState, DisplayMode
from taxicab_explorer.export.csv_writer import CSVWriter
from taxicab_explorer.export.visualizer import Visualizer
from taxicab_explorer.export.reporter import Reporter

GIF_FPS = 20


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Flight vs Street Distance Explorer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    taxicab-explorer
    taxicab-explorer --config configs/default.yaml --gif --out-dir results/
    taxicab-explorer --start 3 3 --end 11 11 --block 11 10 11 11
    taxicab-explorer --mode grid --pause-at 1500 --pause-for 2000
        """
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file (default: built-in demo)')

    # Optional overrides
    parser.add_argument('--size', type=int, default=None,
                        help='Override grid size')
    parser.add_argument('--start', type=int, nargs=2, metavar=('X', 'Y'), default=None,
                        help='Override start point')
    parser.add_argument('--end', type=int, nargs=2, metavar=('X', 'Y'), default=None,
                        help='Override end point')
    parser.add_argument('--mode', choices=[m.value for m in DisplayMode], default=None,
                        help='Agents taking part: direct, grid or both')
    parser.add_argument('--block', type=int, nargs=4, action='append', default=None,
                        metavar=('X1', 'Y1', 'X2', 'Y2'),
                        help='Block the street between two adjacent cells (repeatable)')
    parser.add_argument('--pause-at', type=float, default=None, metavar='MS',
                        help='Pause the trip this many ms after start')
    parser.add_argument('--pause-for', type=float, default=None, metavar='MS',
                        help='Length of the scripted pause in ms')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')
    parser.add_argument('--verbose', action='store_true', default=False,
                        help='Log pathfinding and animation details')

    return parser.parse_args(argv)


def apply_overrides(config: ExplorerConfig, args: argparse.Namespace) -> None:
    """Apply CLI overrides onto a loaded config, then re-validate."""
    if args.size is not None:
        config.grid.size = args.size
    if args.start is not None:
        config.points.start = tuple(args.start)
    if args.end is not None:
        config.points.end = tuple(args.end)
    if args.mode is not None:
        config.animation.mode = DisplayMode(args.mode)
    if args.block:
        for x1, y1, x2, y2 in args.block:
            config.streets.blocked.append(canonical_edge((x1, y1), (x2, y2)))
    if args.pause_at is not None:
        config.animation.pause_at_ms = args.pause_at
    if args.pause_for is not None:
        config.animation.pause_for_ms = args.pause_for
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    config.out_dir = args.out_dir
    config.validate()


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format='%(message)s')

    # Load configuration
    try:
        config = load_config(args.config) if args.config else ExplorerConfig()
        apply_overrides(config, args)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    scheduler = VirtualFrameScheduler(1000.0 / config.animation.fps)
    session = ExplorerSession.from_config(config, scheduler)

    if not config.quiet:
        print("Initializing explorer...")
        print(f"  Grid: {config.grid.size}x{config.grid.size}")
        print(f"  Trip: {config.points.start} -> {config.points.end}")
        print(f"  Mode: {config.animation.mode.value}")
        print(f"  Blocked streets: {len(session.grid.blocked)}")

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'frames.csv')
        csv_writer.open()

    visualizer = Visualizer(session.grid)
    reporter = Reporter(str(args.config) if args.config else None)
    gif_every = max(1, round(config.animation.fps / GIF_FPS))

    def on_frame(snapshot):
        if csv_writer:
            csv_writer.append(snapshot)
        reporter.update(snapshot)
        if config.gif_enabled:
            if (snapshot.frame % gif_every == 0 or
                    snapshot.state is AnimationState.COMPLETED):
                visualizer.buffer_frame(snapshot, session.motion.current_path)

    session.motion.add_listener(on_frame)

    try:
        session.start()
    except PathNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        if csv_writer:
            csv_writer.close()
        return 1

    if not config.quiet:
        print(f"\nRunning trip ({session.motion.duration_ms:.0f} ms)...")

    # Frame loop on the virtual clock
    pause_at = config.animation.pause_at_ms
    frame_budget = int(session.motion.duration_ms / scheduler.frame_interval_ms) + 10
    try:
        while session.motion.is_active and frame_budget > 0:
            if (pause_at is not None and session.motion.pause_count == 0 and
                    scheduler.now() - session.motion.started_at >= pause_at):
                session.pause()
                if not config.quiet:
                    print(f"  Paused at {session.motion.progress:.0%} "
                          f"for {config.animation.pause_for_ms:.0f} ms")
                scheduler.advance(config.animation.pause_for_ms)
                session.resume()
            scheduler.step()
            frame_budget -= 1
    except KeyboardInterrupt:
        if not config.quiet:
            print("\nTrip interrupted by user.")

    # Cleanup and final exports
    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'frames.csv'}")

    if config.snapshot_enabled:
        snapshot_path = config.out_dir / 'final_frame.png'
        visualizer.save_snapshot(session.motion.snapshot(), snapshot_path,
                                 session.motion.current_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'trip.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, fps=GIF_FPS)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    # Print summary report
    if not config.quiet:
        report = reporter.generate_summary(
            session,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    if session.state is not AnimationState.COMPLETED:
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
