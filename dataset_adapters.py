# Contains the adapter classes for reading congestion datasets from open-data sources.

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import requests

from route_structures import ErrorKind, PipelineError

CONNECT_TIMEOUT_SEC = 10
READ_TIMEOUT_SEC = 20

INVALID_JSON_MESSAGE = "Respuesta no es JSON válido"
NO_RECORDS_MESSAGE = "No se encontraron registros en la respuesta de la API."


class DatasetAdapter(ABC):
    """
    Abstract Base Class (blueprint) for all dataset sources.
    Every adapter hands back the decoded JSON document, or a PipelineError.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    @abstractmethod
    def fetch_document(self) -> Any | PipelineError:
        """Reads the dataset and returns the decoded JSON document."""
        pass

    def log(self, message: str):
        if self.verbose:
            print(f"   > [{type(self).__name__}] {message}")


class OpenDataJsonAdapter(DatasetAdapter):
    """The adapter for a JSON endpoint of a municipal open-data catalogue."""
    HEADERS = {'Accept': 'application/json'}

    def __init__(self, url: str, verbose: bool = False):
        super().__init__(verbose=verbose)
        self.url = url

    def fetch_document(self) -> Any | PipelineError:
        self.log(f"GET {self.url}")
        try:
            response = requests.get(
                self.url,
                headers=self.HEADERS,
                timeout=(CONNECT_TIMEOUT_SEC, READ_TIMEOUT_SEC),
                allow_redirects=True,
            )
        except requests.exceptions.RequestException as e:
            print(f"   > Error connecting to the open-data API: {e}")
            return PipelineError(ErrorKind.FETCH_ERROR, f"Error de conexión: {e}")

        self.log(f"HTTP {response.status_code}, {len(response.content)} bytes")
        if not 200 <= response.status_code < 300:
            return PipelineError(
                ErrorKind.FETCH_ERROR,
                f"HTTP {response.status_code} al llamar a {self.url}")

        try:
            document = response.json()
        except ValueError:
            print(f"   > Error parsing the open-data API response from: {self.url}")
            return PipelineError(ErrorKind.INVALID_RESPONSE, INVALID_JSON_MESSAGE)
        if document is None:
            return PipelineError(ErrorKind.INVALID_RESPONSE, INVALID_JSON_MESSAGE)
        return document


class LocalFileAdapter(DatasetAdapter):
    """Reads a dataset previously saved to disk, for offline or reproducible runs."""

    def __init__(self, path, verbose: bool = False):
        super().__init__(verbose=verbose)
        self.path = Path(path)

    def fetch_document(self) -> Any | PipelineError:
        self.log(f"Reading {self.path}")
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            print(f"   > Error reading dataset file: {e}")
            return PipelineError(ErrorKind.FETCH_ERROR, f"No se pudo leer {self.path}: {e}")
        except UnicodeDecodeError:
            print(f"   > Error decoding dataset file: {self.path}")
            return PipelineError(ErrorKind.INVALID_RESPONSE, INVALID_JSON_MESSAGE)

        try:
            document = json.loads(content)
        except ValueError:
            print(f"   > Error parsing dataset file: {self.path}")
            return PipelineError(ErrorKind.INVALID_RESPONSE, INVALID_JSON_MESSAGE)
        if document is None:
            return PipelineError(ErrorKind.INVALID_RESPONSE, INVALID_JSON_MESSAGE)
        return document


def locate_records(document: Any) -> list | PipelineError:
    """
    Finds the records array inside the document. Shapes tried in order:
    {result: {records: [...]}}, {records: [...]}, {data: [...]}, [...].
    """
    records = None
    if isinstance(document, dict):
        result = document.get('result')
        if isinstance(result, dict) and isinstance(result.get('records'), list):
            records = result['records']
        elif isinstance(document.get('records'), list):
            records = document['records']
        elif isinstance(document.get('data'), list):
            records = document['data']
    elif isinstance(document, list):
        records = document

    if not records:
        return PipelineError(ErrorKind.NO_RECORDS_FOUND, NO_RECORDS_MESSAGE)
    return records
