import random
from collections import Counter

import pandas as pd

from dispatch import get_policy
from event import Event, EventKind, EventQueue
from station import Station
from truck import Truck

# all times in minutes
DEFAULT_PARAMS = {
    "mining_time_min": 60,
    "mining_time_max": 300,
    "travel_time": 30,
    "unload_time": 5,
    "sim_time": 4320,  # 72 hours
}


def make_params(params=None):
    merged = dict(DEFAULT_PARAMS)
    if params:
        unknown = set(params) - set(DEFAULT_PARAMS)
        if unknown:
            raise ValueError(f"unknown parameters: {sorted(unknown)}")
        merged.update(params)
    for key, value in merged.items():
        if value < 0:
            raise ValueError(f"{key} must be non-negative, got {value}")
    if not all(isinstance(merged[k], int) for k in ("mining_time_min", "mining_time_max")):
        raise ValueError("mining time range must be whole minutes")
    if merged["mining_time_min"] > merged["mining_time_max"]:
        raise ValueError("mining_time_min is greater than mining_time_max")
    return merged


class Simulation:
    def __init__(self, num_trucks, num_stations, params=None, seed=None, rng=None, policy=None, trace=False):
        if num_trucks < 0 or num_stations < 0:
            raise ValueError("truck and station counts must be non-negative")
        self.params = make_params(params)
        self.rng = rng if rng is not None else random.Random(seed)
        self.policy = get_policy(policy)
        self.tracing = trace

        self.t = 0.0
        self.events = EventQueue()
        self.trucks = [Truck(i) for i in range(num_trucks)]
        self.stations = [Station(i) for i in range(num_stations)]

        # (kind, truck_id) -> number of handled events
        self.processed = Counter()
        self.stats = {"events_processed": 0, "events_discarded": 0}

        self.handlers = {
            EventKind.FINISH_MINING: self.finish_mining,
            EventKind.ARRIVE_STATION: self.arrive_station,
            EventKind.START_UNLOADING: self.start_unloading,
            EventKind.FINISH_UNLOADING: self.finish_unloading,
        }

    @property
    def horizon(self):
        return self.params["sim_time"]

    def schedule(self, time, kind, truck_id, station_id=None):
        self.events.push(Event(time, kind, truck_id, station_id))

    def trace(self, msg):
        if self.tracing:
            print(f"[{self.t:.1f}] {msg}")

    def trace_state(self):
        if self.tracing:
            busy = sum(1 for s in self.stations if s.busy)
            queued = sum(s.queue_length() for s in self.stations)
            self.trace(f"State: busy stations={busy}, trucks at stations={queued}")

    def sample_mining(self):
        return self.rng.randint(self.params["mining_time_min"], self.params["mining_time_max"])

    # -------------------- MAIN LOOP --------------------

    def run(self):
        for truck in self.trucks:
            duration = self.sample_mining()
            truck.total_mining_time += duration
            self.schedule(self.t + duration, EventKind.FINISH_MINING, truck.id)
            self.trace(f"Truck {truck.id} mining for {duration}")

        while not self.events.is_empty():
            ev = self.events.pop_earliest()
            if ev.time > self.horizon:
                # this one and everything after it fall outside the run
                self.stats["events_discarded"] = len(self.events) + 1
                break
            self.t = ev.time
            self.dispatch(ev)

        self.trace("Simulation finished")
        return self.summary()

    def dispatch(self, ev):
        try:
            handler = self.handlers[ev.kind]
        except KeyError:
            raise ValueError(f"unknown event kind: {ev.kind!r}") from None
        if ev.station_id is None:
            handler(ev.truck_id)
        else:
            handler(ev.truck_id, ev.station_id)
        self.processed[ev.kind, ev.truck_id] += 1
        self.stats["events_processed"] += 1

    # -------------------- HANDLERS --------------------

    def finish_mining(self, truck_id):
        truck = self.trucks[truck_id]
        travel = self.params["travel_time"]
        truck.state = "traveling_to_station"
        truck.total_travel_time += travel
        self.trace(f"Truck {truck_id} finished mining, traveling to stations")
        self.schedule(self.t + travel, EventKind.ARRIVE_STATION, truck_id)

    def arrive_station(self, truck_id):
        truck = self.trucks[truck_id]
        if not self.stations:
            # nowhere to unload: the truck waits out the rest of the run
            truck.state = "stalled"
            truck.total_wait_time += self.horizon - self.t
            self.trace(f"Truck {truck_id} arrived but there are no stations, stalled")
            return

        station_id = self.policy.select(self.stations, self.t, self.params["unload_time"])
        station = self.stations[station_id]
        truck.state = "at_station"
        truck.arrival_time = self.t
        station.queue.append(truck_id)
        self.trace(f"Truck {truck_id} joined station {station_id}, queue length {station.queue_length()}")

        if not station.busy and len(station.queue) == 1:
            self.schedule(self.t, EventKind.START_UNLOADING, station.queue[0], station_id)

    def start_unloading(self, truck_id, station_id):
        truck = self.trucks[truck_id]
        station = self.stations[station_id]
        assert station.queue and station.queue[0] == truck_id, "only the queue front may unload"

        unload = self.params["unload_time"]
        station.busy = True
        station.pending_start = False
        truck.total_wait_time += self.t - truck.arrival_time
        truck.total_unload_time += unload
        station.total_busy_time += unload
        station.busy_until = self.t + unload
        self.trace(f"Truck {truck_id} unloading at station {station_id}")
        self.trace_state()
        self.schedule(station.busy_until, EventKind.FINISH_UNLOADING, truck_id, station_id)

    def finish_unloading(self, truck_id, station_id):
        truck = self.trucks[truck_id]
        station = self.stations[station_id]
        assert station.queue and station.queue[0] == truck_id, "unloading truck must be the queue front"

        truck.loads_delivered += 1
        station.queue.popleft()
        if station.queue:
            # stays busy, the next truck starts at this same instant
            station.pending_start = True
            self.schedule(self.t, EventKind.START_UNLOADING, station.queue[0], station_id)
        else:
            station.busy = False
        self.trace(f"Truck {truck_id} delivered load {truck.loads_delivered} at station {station_id}")

        travel = self.params["travel_time"]
        truck.state = "traveling_to_site"
        truck.total_travel_time += travel
        duration = self.sample_mining()
        truck.total_mining_time += duration
        self.schedule(self.t + travel + duration, EventKind.FINISH_MINING, truck_id)

    # -------------------- REPORTING --------------------

    def handled(self, kind, truck_id):
        return self.processed[kind, truck_id]

    def truck_stats(self):
        return [truck.as_dict() for truck in self.trucks]

    def station_stats(self):
        rows = []
        for station in self.stations:
            busy = station.busy_time_until(self.horizon)
            rows.append({
                "id": station.id,
                "total_busy_time": busy,
                "utilization": busy / self.horizon * 100.0 if self.horizon else 0.0,
            })
        return rows

    def trucks_df(self):
        columns = ["id", "loads_delivered", "total_wait_time", "total_travel_time",
                   "total_mining_time", "total_unload_time"]
        return pd.DataFrame(self.truck_stats(), columns=columns).set_index("id")

    def stations_df(self):
        columns = ["id", "total_busy_time", "utilization"]
        return pd.DataFrame(self.station_stats(), columns=columns).set_index("id")

    def summary(self):
        trucks = self.truck_stats()
        stations = self.station_stats()
        return {
            "sim_time": self.t,
            "total_loads": sum(t["loads_delivered"] for t in trucks),
            "avg_wait_time": sum(t["total_wait_time"] for t in trucks) / len(trucks) if trucks else 0.0,
            "avg_utilization": sum(s["utilization"] for s in stations) / len(stations) if stations else 0.0,
            "events_processed": self.stats["events_processed"],
        }

    def format_stats(self):
        lines = ["", "==================== Simulation Statistics ===================="]
        for t in self.truck_stats():
            lines += [
                f"Truck {t['id']} Statistics:",
                f"  Loads Delivered: {t['loads_delivered']}",
                f"  Total Wait Time (min): {t['total_wait_time']:g}",
                f"  Total Travel Time (min): {t['total_travel_time']:g}",
                f"  Total Mining Time (min): {t['total_mining_time']:g}",
                f"  Total Unload Time (min): {t['total_unload_time']:g}",
                "",
            ]
        for s in self.station_stats():
            lines += [
                f"Station {s['id']} Statistics:",
                f"  Total Busy Time (min): {s['total_busy_time']:g}",
                f"  Utilization: {s['utilization']:.2f} %",
                "",
            ]
        lines.append("===============================================================")
        return "\n".join(lines)
