import heapq
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EventKind(Enum):
    FINISH_MINING = "finish_mining"
    ARRIVE_STATION = "arrive_station"
    START_UNLOADING = "start_unloading"
    FINISH_UNLOADING = "finish_unloading"


@dataclass(frozen=True)
class Event:
    time: float
    kind: EventKind
    truck_id: int
    station_id: Optional[int] = None


class EventQueue:
    """Events ordered by time; equal times come out in insertion order."""

    def __init__(self):
        self._heap = []
        self._counter = itertools.count()

    def push(self, event):
        heapq.heappush(self._heap, (event.time, next(self._counter), event))

    def pop_earliest(self):
        # IndexError on an empty queue, same as heapq
        return heapq.heappop(self._heap)[2]

    def peek(self):
        if self._heap:
            return self._heap[0][2]
        return None

    def is_empty(self):
        return not self._heap

    def __len__(self):
        return len(self._heap)
