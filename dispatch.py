"""Station selection for trucks arriving from the mining site."""


class DispatchPolicy:
    name = None

    def select(self, stations, now, unload_time):
        """Return the id of the station the arriving truck should join."""
        raise NotImplementedError


class ShortestQueueLength(DispatchPolicy):
    """Fewest trucks queued (the unloading one included), lowest id on ties.

    Ignores how long the truck being served still needs, so a shorter queue
    may free up later than a longer one.
    """

    name = "shortest_queue"

    def select(self, stations, now, unload_time):
        best = None
        for station in stations:
            if best is None or station.queue_length() < best.queue_length():
                best = station
        return best.id


class EarliestProjectedFree(DispatchPolicy):
    """Station that will be able to start a new unload soonest."""

    name = "earliest_free"

    def projected_free(self, station, now, unload_time):
        if station.busy and not station.pending_start:
            # the front truck leaves at busy_until, the rest each need a full unload
            return max(now, station.busy_until) + (len(station.queue) - 1) * unload_time
        return now + len(station.queue) * unload_time

    def select(self, stations, now, unload_time):
        best, best_time = None, None
        for station in stations:
            t = self.projected_free(station, now, unload_time)
            if best is None or t < best_time:
                best, best_time = station, t
        return best.id


POLICIES = {
    ShortestQueueLength.name: ShortestQueueLength,
    EarliestProjectedFree.name: EarliestProjectedFree,
}


def get_policy(policy=None):
    if policy is None:
        return ShortestQueueLength()
    if isinstance(policy, DispatchPolicy):
        return policy
    try:
        return POLICIES[policy]()
    except KeyError:
        raise ValueError(f"unknown dispatch policy: {policy!r}") from None
