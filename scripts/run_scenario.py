"""CLI for running a single elevator dispatch scenario defined in a JSON config."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from scheduler import LearnedMetaPolicy, get_scheduler
from simulation import (
    Building,
    ElevatorConstraints,
    MorningRushWindow,
    PoissonTraffic,
    ScheduledTraffic,
    Simulator,
    SimulatorSettings,
)

logger = logging.getLogger("run_scenario")


def build_simulation(config: Dict) -> Simulator:
    building_cfg = config.get("building", {})
    constraints = ElevatorConstraints(**building_cfg.get("constraints", {}))
    building = Building.create(
        num_floors=building_cfg.get("num_floors", 10),
        elevator_count=building_cfg.get("elevator_count", 2),
        constraints=constraints,
    )

    scheduler_cfg = config.get("scheduler", {})
    scheduler = get_scheduler(
        scheduler_cfg.get("name", "longest_queue_first"),
        building,
        **scheduler_cfg.get("options", {}),
    )

    settings = SimulatorSettings(**config.get("settings", {}))
    random_seed = config.get("random_seed")

    traffic_cfg = config.get("traffic", {})
    traffic = None
    if "arrivals" in traffic_cfg:
        traffic = ScheduledTraffic(tuple(event) for event in traffic_cfg["arrivals"])

    simulation = Simulator(
        building=building,
        scheduler=scheduler,
        settings=settings,
        traffic=traffic,
        random_seed=random_seed,
        metrics_hook_interval=config.get("metrics_hook_interval", 0),
    )
    if traffic is None:
        bursts = [
            MorningRushWindow(
                start_time=b.get("start_time", 0),
                end_time=b.get("end_time", 0),
                multiplier=b.get("multiplier", 1.0),
                origin_floor=b.get("origin_floor", 0),
                destination_focus=b.get("destination_focus"),
            )
            for b in traffic_cfg.get("morning_bursts", [])
        ]
        simulation.traffic = PoissonTraffic(
            building.num_floors,
            arrival_rate_per_floor=traffic_cfg.get("arrival_rate_per_floor", 0.01),
            morning_bursts=bursts,
            rng=simulation.random,
        )
    return simulation


def run_simulation(simulation: Simulator) -> List[Dict]:
    snapshots: List[Dict] = []
    simulation.on_event("metrics", lambda payload: snapshots.append(asdict(payload["metrics"])))
    simulation.run()
    simulation.stats.close(simulation.current_time)
    scheduler = simulation.scheduler
    if isinstance(scheduler, LearnedMetaPolicy):
        scheduler.reward_last_interval(simulation)
    return snapshots


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write metrics snapshots as JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log dispatch decisions")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = json.loads(args.config.read_text())
    simulation = build_simulation(config)
    logger.info("Running %s with %s", config.get("name", args.config.stem), simulation.scheduler)
    snapshots = run_simulation(simulation)

    final_metrics = asdict(simulation.stats.snapshot(simulation.current_time))
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "simulated_seconds": simulation.clock.elapsed_seconds,
        "scheduler": str(simulation.scheduler),
        "final_metrics": final_metrics,
        "metrics_over_time": snapshots,
    }
    scheduler = simulation.scheduler
    if isinstance(scheduler, LearnedMetaPolicy):
        results["policy_usage"] = {
            "policies": [str(policy) for policy in scheduler.policies],
            "action_usage": scheduler.action_usage,
            "seconds": scheduler.usage_seconds(simulation),
        }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Scheduler: {results['scheduler']}")
    print(f"Simulated: {results['simulated_seconds']:.0f} s")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if "policy_usage" in results:
        print("Policy usage (seconds):")
        for name, seconds in results["policy_usage"]["seconds"].items():
            print(f"  {name}: {seconds:.0f}")
    if args.output:
        print(f"Saved metrics to {args.output}")


if __name__ == "__main__":
    main()
