from dataclasses import dataclass


@dataclass
class Truck:
    id: int
    state: str = "mining"  # mining, traveling_to_station, at_station, traveling_to_site, stalled
    loads_delivered: int = 0
    arrival_time: float = 0.0
    total_wait_time: float = 0.0
    total_travel_time: float = 0.0
    total_mining_time: float = 0.0
    total_unload_time: float = 0.0

    def as_dict(self):
        return {
            "id": self.id,
            "loads_delivered": self.loads_delivered,
            "total_wait_time": self.total_wait_time,
            "total_travel_time": self.total_travel_time,
            "total_mining_time": self.total_mining_time,
            "total_unload_time": self.total_unload_time,
        }
