#!/usr/bin/env python3
"""
ROBOCAR - Global Path Node
==========================

Drives the vehicle through an operator waypoint list: plans toward the
current waypoint every tick, publishes the composite global path and the
lifecycle state, and exits once the final goal is confirmed.

This entry point runs the node against the simulated vehicle:

    python main.py
    python main.py --config config/global_path.yaml --fast
    python main.py --waypoints mission.txt --shutdown-behavior 3
    python main.py --new-waypoints detour.txt --replace-at 200

Waypoint files hold one "x,y" pair per line (meters, local frame); lines
starting with '#' are ignored.
"""

import sys
import signal
import argparse
from dataclasses import replace
from pathlib import Path
from typing import List, Tuple

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))


def read_waypoint_file(path: str) -> List[Tuple[float, float]]:
    """Read "x,y" lines into a list of points."""
    points = []
    with open(path, 'r') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                parts = line.split(',')
                if len(parts) >= 2:
                    points.append((float(parts[0]), float(parts[1])))
    return points


def run_simulation(args) -> int:
    """Run the global path node against the simulated vehicle."""
    from core import load_config
    from global_path_controller import GlobalPathController
    from interface import RecordingPublisher
    from simulation import SimulatedVehicle

    print("=" * 60)
    print("   ROBOCAR - GLOBAL PATH NODE (SIMULATION)")
    print("=" * 60)

    config = load_config(args.config)

    # Command line overrides
    if args.waypoints:
        points = read_waypoint_file(args.waypoints)
        config.waypoints_x = [p[0] for p in points]
        config.waypoints_y = [p[1] for p in points]
        print(f"Waypoints loaded from {args.waypoints}: {len(points)}")
    if args.goal_dist is not None:
        config = replace(config, goal_dist=args.goal_dist)
    if args.shutdown_behavior is not None:
        config = replace(config, shutdown_behavior=args.shutdown_behavior)
    if args.rate is not None:
        config = replace(config, loop_rate=args.rate)

    publisher = RecordingPublisher(keep_history=False)
    controller = GlobalPathController(config, publisher=publisher, realtime=not args.fast)

    vehicle = SimulatedVehicle(publisher, controller.on_pose)
    vehicle.set_pose(args.start_x, args.start_y, args.start_theta)
    controller.on_tick(vehicle.update)

    if args.new_waypoints:
        new_points = read_waypoint_file(args.new_waypoints)

        def submit_at_tick(dt):
            if controller.tick == args.replace_at:
                controller.on_new_waypoints(new_points)

        controller.on_tick(submit_at_tick)

    def handle_signal(signum, frame):
        print(f"\n[GLOBAL_PATH] Signal {signum} received, stopping")
        controller.stop()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    print(f"Start pose: ({args.start_x}, {args.start_y}, {args.start_theta})")
    code = controller.run(max_ticks=args.max_ticks)

    print(f"Vehicle: pos=({vehicle.x:.1f},{vehicle.y:.1f}) "
          f"distance travelled={vehicle.distance_travelled:.1f}m "
          f"sim time={vehicle.sim_time:.1f}s")
    return code


def main():
    parser = argparse.ArgumentParser(
        description='ROBOCAR - Global Path Node',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --fast
  python main.py --waypoints mission.txt --goal-dist 2.0
  python main.py --shutdown-behavior 3 --max-ticks 2000
"""
    )

    parser.add_argument(
        '--config', '-c',
        default=str(Path(__file__).parent / 'config' / 'global_path.yaml'),
        help='YAML configuration file (default: config/global_path.yaml)'
    )
    parser.add_argument(
        '--waypoints', '-w',
        type=str,
        help='Static waypoint file (x,y per line), overrides the config list'
    )
    parser.add_argument(
        '--goal-dist',
        type=float,
        help='Waypoint reached distance (meters)'
    )
    parser.add_argument(
        '--shutdown-behavior',
        type=int,
        help='1 soft stop, 2 soft stop + shutdown, 3 hard stop + shutdown'
    )
    parser.add_argument(
        '--rate',
        type=float,
        help='Loop rate (Hz)'
    )
    parser.add_argument(
        '--max-ticks',
        type=int,
        help='Stop after this many ticks'
    )
    parser.add_argument(
        '--fast',
        action='store_true',
        help='Do not sleep between ticks'
    )

    sim_group = parser.add_argument_group('Simulation Options')
    sim_group.add_argument('--start-x', type=float, default=0.0, help='Start X (meters)')
    sim_group.add_argument('--start-y', type=float, default=0.0, help='Start Y (meters)')
    sim_group.add_argument('--start-theta', type=float, default=0.0, help='Start heading (radians)')
    sim_group.add_argument(
        '--new-waypoints',
        type=str,
        help='Waypoint file submitted as a replacement list during the run'
    )
    sim_group.add_argument(
        '--replace-at',
        type=int,
        default=100,
        help='Tick at which --new-waypoints is submitted (default: 100)'
    )

    args = parser.parse_args()
    return run_simulation(args)


if __name__ == '__main__':
    sys.exit(main())
