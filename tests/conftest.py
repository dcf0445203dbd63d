"""
Shared fixtures: an in-memory store answering the client's HTTP calls
"""
from unittest.mock import Mock, patch
from urllib.parse import urlparse

import pytest
import requests

from archivestats import Client


def resolve(document, path):
    """Resolve a dotted path, fanning out over arrays like the store does."""
    values = [document]
    for part in path.split("."):
        next_values = []
        for value in values:
            if isinstance(value, list):
                value = [item.get(part) for item in value if isinstance(item, dict)]
                next_values.append([item for item in value if item is not None])
            elif isinstance(value, dict) and part in value:
                next_values.append(value[part])
        values = next_values
    if not values:
        return None
    return values[0]


def evaluate(expression, document):
    if isinstance(expression, str) and expression.startswith("$"):
        return resolve(document, expression[1:])
    if isinstance(expression, dict) and "$sum" in expression:
        value = evaluate(expression["$sum"], document)
        if isinstance(value, list):
            return sum(v for v in value if isinstance(v, (int, float)))
        return value if isinstance(value, (int, float)) else 0
    return expression


def run_pipeline(documents, pipeline):
    rows = [dict(doc) for doc in documents]
    for stage in pipeline:
        (name, spec), = stage.items()
        if name == "$project":
            projected = []
            for row in rows:
                out = {} if spec.get("_id", 1) == 0 else {"_id": row.get("_id")}
                for key, expr in spec.items():
                    if key != "_id":
                        out[key] = evaluate(expr, row)
                projected.append(out)
            rows = projected
        elif name == "$group":
            if spec["_id"] is not None:
                raise ValueError("only null group keys are supported")
            if not rows:
                continue
            group = {"_id": None}
            for key, acc in spec.items():
                if key == "_id":
                    continue
                group[key] = sum(evaluate(acc["$sum"], row) or 0 for row in rows)
            rows = [group]
        elif name == "$limit":
            rows = rows[:spec]
        else:
            raise ValueError(f"Unrecognized pipeline stage name: '{name}'")
    return rows


class FakeStore:
    """Collections of raw documents served through a patched session."""

    def __init__(self):
        self.collections = {}
        self.calls = []

    def load(self, name, documents):
        self.collections[name] = [dict(doc) for doc in documents]

    @staticmethod
    def _response(payload, status_code=200):
        response = Mock()
        response.status_code = status_code
        response.reason = "OK" if status_code < 400 else "Bad Request"
        response.json.return_value = payload
        return response

    def handle(self, method, url, json=None, params=None, timeout=None):
        self.calls.append({"method": method, "url": url, "json": json})
        path = urlparse(url).path.strip("/").split("/")

        if path == ["ping"]:
            return self._response({"ok": True})
        if path == ["collections"]:
            return self._response({"ok": True, "result": {"collections": sorted(self.collections)}})

        _, name, command = path
        documents = self.collections.get(name, [])
        if command == "find":
            return self._response({"ok": True, "result": {"documents": documents}})
        if command == "count":
            return self._response({"ok": True, "result": {"count": len(documents)}})
        if command == "aggregate":
            try:
                rows = run_pipeline(documents, json["pipeline"])
            except ValueError as e:
                return self._response({"ok": False, "error": str(e)}, status_code=400)
            return self._response({"ok": True, "result": {"documents": rows}})
        return self._response({"ok": False, "error": "not found"}, status_code=404)


def archive(*page_counts):
    """Raw entries, one per list of page counts; ``None`` omits Documents."""
    entries = []
    for i, counts in enumerate(page_counts):
        entry = {"_id": f"entry-{i}", "Name": f"Entry {i}"}
        if counts is not None:
            entry["Documents"] = [{"PageCount": n} for n in counts]
        entries.append(entry)
    return entries


@pytest.fixture
def store():
    """Patch requests so every client call is answered by a FakeStore."""
    fake = FakeStore()
    with patch.object(requests.Session, "request", side_effect=fake.handle):
        yield fake


@pytest.fixture
def client(store):
    with Client(host="localhost", port=8080, database="local") as client:
        yield client


@pytest.fixture
def entries(client):
    return client.collection("ArchiveEntry")
