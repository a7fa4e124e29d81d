# Picks the single slowest route of a normalized dataset.

from route_structures import ErrorKind, MetricTag, NormalizedRoute, PipelineError, SelectionResult

NO_METRIC_MESSAGE = "No hay campos de velocidad ni de duración en el dataset."


def select_slowest(routes: list[NormalizedRoute]) -> SelectionResult | PipelineError:
    """
    Two-tier rule, decided for the whole dataset:
    1. If any route reports a speed, the lowest speed wins.
    2. Otherwise, if any route reports a duration, the highest duration wins.
    Ties go to the route that appears first. Routes that only report a duration
    are ignored as soon as one route anywhere reports a speed.
    """
    with_speed = [r for r in routes if r.speed is not None]
    if with_speed:
        # min() keeps the first of several equal candidates.
        slowest = min(with_speed, key=lambda r: r.speed)
        return SelectionResult(route=slowest, metric=MetricTag.SPEED)

    with_duration = [r for r in routes if r.duration is not None]
    if with_duration:
        slowest = max(with_duration, key=lambda r: r.duration)
        return SelectionResult(route=slowest, metric=MetricTag.DURATION)

    return PipelineError(ErrorKind.NO_METRIC_AVAILABLE, NO_METRIC_MESSAGE)
