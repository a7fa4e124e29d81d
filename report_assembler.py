# Turns the selected route into a log line and the fields shown on the report.

from field_extractor import format_number, text_of
from route_structures import AssembledReport, DisplayFields, MetricTag, SelectionResult

# Label and hint shown next to the winning metric.
METRIC_DISPLAY = {
    MetricTag.SPEED: ("velocidad", "menor es más lenta"),
    MetricTag.DURATION: ("duración", "mayor es más lenta"),
}


def assemble(result: SelectionResult) -> AssembledReport:
    route = result.route
    route_id = text_of(route.id)
    value = format_number(result.value)

    log_line = f"id={route_id} | name={route.name} | {result.metric.value}={value}"

    label, hint = METRIC_DISPLAY[result.metric]
    display = DisplayFields(
        id=route_id,
        name=route.name,
        metric_label=label,
        metric_value=value,
        hint=hint,
    )
    return AssembledReport(log_line=log_line, display=display)
