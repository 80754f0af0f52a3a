"""Pytest configuration and fixtures."""

import base64
import json

import pytest

from plasmid_browser.parsing.normalizer import normalize_rows
from plasmid_browser.records.models import Dataset, Member

DATA_URL = "https://script.example.com/macros/echo?user_content_key=abc"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Records GET calls and replays queued responses or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_token(claims):
    """Build an unsigned JWT carrying the given claims."""

    def _segment(data):
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return f"{_segment({'alg': 'none'})}.{_segment(claims)}.sig"


@pytest.fixture
def raw_rows():
    return [
        {
            "Plasmid_Name": "pNRC4",
            "Plasmid_Information": "NRC4 in pICSL86977",
            "Antibiotics": "Kan",
            "Descriptions": "NRC4 with C-terminal mCherry",
            "Box_(Location)": "A1",
            "Benchling": "https://benchling.com/x/y/",
            "memberId": "alice",
            "memberName": "Alice",
            "worksheet": "S1",
        },
        {
            "Plasmid_Name": "pKan1",
            "Plasmid_Information": "empty vector",
            "Antibiotics": "Kan",
            "Descriptions": "backbone",
            "Box_(Location)": "A2",
            "Benchling": None,
            "memberId": "bob",
            "memberName": "Bob",
            "worksheet": "S2",
        },
        {
            "Plasmid_Name": "pAmp7",
            "Plasmid_Information": "GFP reporter",
            "Antibiotics": "Amp",
            "Descriptions": "",
            "Box_(Location)": "A10",
            "Benchling": {"url": "https://www.benchling.com/s/seq-7", "text": "seq-7"},
            "memberId": "alice",
            "memberName": "Alice",
            "worksheet": "S3",
        },
    ]


@pytest.fixture
def members():
    return [
        Member(memberId="alice", name="Alice", worksheets=["S3", "S1", "Empty"]),
        Member(memberId="bob", name="Bob", worksheets=["S2"]),
    ]


@pytest.fixture
def dataset(raw_rows, members):
    return Dataset(members=members, rows=normalize_rows(raw_rows), updated_at="2025-01-02T03:04:05Z", generation=1)


@pytest.fixture
def payload(raw_rows):
    return {
        "members": [
            {"memberId": "alice", "name": "Alice", "worksheets": ["S3", "S1", "Empty"]},
            {"memberId": "bob", "name": "Bob", "worksheets": ["S2"]},
        ],
        "rows": raw_rows,
        "updatedAt": "2025-01-02T03:04:05Z",
    }
