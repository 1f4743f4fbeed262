import argparse

from dispatch import POLICIES
from experiments import run_experiments, summarize
from simulator import DEFAULT_PARAMS, Simulation

# (trucks, stations)
SCENARIOS = [
    (3, 1),
    (5, 2),
    (10, 3),
    (50, 3),
    (1, 1),   # no waits
    (30, 1),  # lots of waits
    (0, 1),
    (1, 0),
    (0, 0),
]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Mining truck fleet discrete-event simulation")
    parser.add_argument("--trucks", type=int, help="run a single configuration with this many trucks")
    parser.add_argument("--stations", type=int, default=1)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--trace", action="store_true")
    parser.add_argument("--policy", choices=sorted(POLICIES), default="shortest_queue")
    parser.add_argument("--replications", type=int, default=0,
                        help="print a replication summary instead of per-entity statistics")
    parser.add_argument("--mining-min", type=int, default=DEFAULT_PARAMS["mining_time_min"])
    parser.add_argument("--mining-max", type=int, default=DEFAULT_PARAMS["mining_time_max"])
    parser.add_argument("--travel-time", type=float, default=DEFAULT_PARAMS["travel_time"])
    parser.add_argument("--unload-time", type=float, default=DEFAULT_PARAMS["unload_time"])
    parser.add_argument("--sim-time", type=float, default=DEFAULT_PARAMS["sim_time"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    params = {
        "mining_time_min": args.mining_min,
        "mining_time_max": args.mining_max,
        "travel_time": args.travel_time,
        "unload_time": args.unload_time,
        "sim_time": args.sim_time,
    }
    scenarios = SCENARIOS if args.trucks is None else [(args.trucks, args.stations)]

    for num_trucks, num_stations in scenarios:
        print(f"==== {num_trucks} Trucks, {num_stations} Stations ====")
        if args.replications > 0:
            runs = run_experiments(num_trucks, num_stations, args.replications,
                                   params=params, seed=args.seed, policy=args.policy)
            print(summarize(runs).to_string())
            print()
            continue
        sim = Simulation(num_trucks, num_stations, params=params, seed=args.seed,
                         policy=args.policy, trace=args.trace)
        res = sim.run()
        print(sim.format_stats())
        print(f"Simulated time: {res['sim_time']:.1f}")
        print(f"Total loads delivered: {res['total_loads']}")
        print()


if __name__ == "__main__":
    main()
