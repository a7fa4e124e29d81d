# Serves the slowest-route report as a one-page website.

from flask import Flask, jsonify, render_template

from dataset_adapters import DatasetAdapter
from route_structures import ErrorKind, ReportOutcome
from slowest_route import REPORT_TITLE, Settings, run_report


def status_for(outcome: ReportOutcome) -> int:
    if outcome.ok:
        return 200
    match outcome.error.kind:
        case ErrorKind.FETCH_ERROR | ErrorKind.INVALID_RESPONSE:
            return 502
        case ErrorKind.MISSING_CONFIGURATION:
            return 500
        case _:
            # The dataset was read fine, it just had nothing to report.
            return 200


def create_app(settings: Settings, adapter: DatasetAdapter | None = None) -> Flask:
    app = Flask(__name__)

    @app.route('/')
    def home():
        outcome = run_report(settings, adapter)
        if not outcome.ok:
            print(f"   > [Report] {outcome.error.kind.value}: {outcome.error.message}")
        page = render_template(
            'report.html',
            title=REPORT_TITLE,
            outcome=outcome,
            log_file=settings.log_file,
        )
        return page, status_for(outcome)

    @app.route('/api/slowest')
    def slowest():
        outcome = run_report(settings, adapter)
        if not outcome.ok:
            body = {'status': 'error', 'kind': outcome.error.kind.value, 'message': outcome.error.message}
            return jsonify(body), status_for(outcome)

        display = outcome.report.display
        return jsonify({
            'status': 'success',
            'id': display.id,
            'name': display.name,
            'metric': display.metric_label,
            'value': display.metric_value,
            'clause': display.clause,
            'logged': outcome.logged,
        })

    return app
