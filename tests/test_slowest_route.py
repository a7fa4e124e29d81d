import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

from dataset_adapters import DatasetAdapter
from route_structures import ErrorKind, PipelineError
from slowest_route import Settings, load_settings, load_timezone, main, run_report


class StaticAdapter(DatasetAdapter):
    """Hands back a fixed document instead of calling the API."""

    def __init__(self, document):
        super().__init__()
        self.document = document

    def fetch_document(self):
        return self.document


class TestRunReport(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.log_path = Path(self.tmp.name) / 'log.txt'
        self.settings = Settings(
            dataset_url='https://datos.example.org/trafico.json',
            log_file=str(self.log_path),
            timezone=ZoneInfo('Europe/Madrid'),
        )

    def log_lines(self):
        if not self.log_path.exists():
            return []
        return self.log_path.read_text(encoding='utf-8').splitlines()

    def test_speed_path(self):
        records = [
            {'id': 1, 'name': 'A', 'avg_speed': 40},
            {'id': 2, 'name': 'B', 'avg_speed': 12},
            {'id': 3, 'name': 'B2', 'duration': 999},
        ]
        outcome = run_report(self.settings, StaticAdapter({'result': {'records': records}}))

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.report.log_line, 'id=2 | name=B | speed=12')
        self.assertEqual(outcome.report.display.id, '2')
        lines = self.log_lines()
        self.assertEqual(len(lines), 1)
        self.assertRegex(lines[0], r'^\[\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d[+-]\d\d:\d\d\] id=2 \| name=B \| speed=12$')
        self.assertEqual(lines[0], outcome.logged)

    def test_duration_path(self):
        records = [
            {'id': 'x', 'ruta': 'Foo', 'tiempo_medio': 30},
            {'id': 'y', 'ruta': 'Bar', 'duration': 90},
        ]
        outcome = run_report(self.settings, StaticAdapter(records))

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.report.log_line, 'id=y | name=Bar | duration=90')
        self.assertEqual(outcome.report.display.clause, 'duración = 90 (mayor es más lenta)')

    def test_empty_records(self):
        """Test that an empty dataset is an error and nothing is logged"""
        outcome = run_report(self.settings, StaticAdapter({'records': []}))

        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.error.kind, ErrorKind.NO_RECORDS_FOUND)
        self.assertIsNone(outcome.report)
        self.assertEqual(self.log_lines(), [])

    def test_no_metric(self):
        outcome = run_report(self.settings, StaticAdapter({'data': [{'id': 1, 'name': 'A'}]}))

        self.assertEqual(outcome.error.kind, ErrorKind.NO_METRIC_AVAILABLE)
        self.assertEqual(self.log_lines(), [])

    def test_adapter_error_is_passed_through(self):
        error = PipelineError(ErrorKind.FETCH_ERROR, 'HTTP 500 al llamar a x')
        outcome = run_report(self.settings, StaticAdapter(error))

        self.assertIs(outcome.error, error)
        self.assertEqual(self.log_lines(), [])

    def test_missing_url(self):
        self.settings.dataset_url = ''
        outcome = run_report(self.settings)

        self.assertEqual(outcome.error.kind, ErrorKind.MISSING_CONFIGURATION)
        self.assertEqual(outcome.error.message, 'La URL de la API no está configurada.')

    @patch('dataset_adapters.requests.get')
    def test_uses_configured_url(self, mock_get):
        response = MagicMock(status_code=200, content=b'[]')
        response.json.return_value = [{'id': 7, 'vel_media': '8.5'}]
        mock_get.return_value = response

        outcome = run_report(self.settings)

        self.assertEqual(mock_get.call_args[0][0], 'https://datos.example.org/trafico.json')
        self.assertEqual(outcome.report.log_line, 'id=7 | name=ruta_7 | speed=8.5')


class TestSettings(unittest.TestCase):
    @patch('slowest_route.load_dotenv')
    def test_defaults(self, _):
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.dataset_url, 'https://datos.vigo.org/data/trafico/treal_congestion.json')
        self.assertEqual(settings.log_file, 'log.txt')
        self.assertEqual(settings.timezone.key, 'Europe/Madrid')

    @patch('slowest_route.load_dotenv')
    def test_environment_overrides(self, _):
        env = {'DATASET_URL': ' https://x.test/d.json ', 'CONGESTION_LOG': '/tmp/c.log', 'REPORT_TZ': 'UTC'}
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings(verbose=True)
        self.assertEqual(settings.dataset_url, 'https://x.test/d.json')
        self.assertEqual(settings.log_file, '/tmp/c.log')
        self.assertEqual(settings.timezone.key, 'UTC')
        self.assertTrue(settings.verbose)

    def test_invalid_timezone(self):
        with self.assertRaises(ValueError):
            load_timezone('Mars/Olympus_Mons')


class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.dump = Path(self.tmp.name) / 'dump.json'
        self.log_path = Path(self.tmp.name) / 'log.txt'

    @patch('slowest_route.load_dotenv')
    def test_file_run(self, _):
        self.dump.write_text(json.dumps({'records': [{'id': 'a', 'speed': 3}]}), encoding='utf-8')

        with patch('builtins.print') as mock_print:
            code = main(['--file', str(self.dump), '--log-file', str(self.log_path), '--tz', 'UTC'])

        self.assertEqual(code, 0)
        printed = '\n'.join(str(c.args[0]) for c in mock_print.call_args_list if c.args)
        self.assertIn('velocidad = 3 (menor es más lenta)', printed)
        self.assertTrue(self.log_path.read_text(encoding='utf-8').endswith('] id=a | name=ruta_a | speed=3\n'))

    @patch('slowest_route.load_dotenv')
    def test_error_exit_code(self, _):
        self.dump.write_text('{"records": []}', encoding='utf-8')

        with patch('builtins.print'):
            code = main(['--file', str(self.dump), '--log-file', str(self.log_path)])

        self.assertEqual(code, 1)
        self.assertFalse(self.log_path.exists())


if __name__ == '__main__':
    unittest.main()
