from collections import deque
from dataclasses import dataclass, field


@dataclass
class Station:
    id: int
    busy: bool = False
    busy_until: float = 0.0
    total_busy_time: float = 0.0
    # set between one unload finishing and the next truck starting at the same instant
    pending_start: bool = False
    # truck ids in arrival order; the front one is unloading while busy
    queue: deque = field(default_factory=deque)

    def queue_length(self):
        return len(self.queue)

    def busy_time_until(self, horizon):
        """Busy time with a still-running unload cut off at the horizon."""
        if self.busy and self.busy_until > horizon:
            return self.total_busy_time - (self.busy_until - horizon)
        return self.total_busy_time
