import pytest

from otbeat_snippet import compile_snippet_parser


SAMPLE_SNIPPET = (
    "STUDIO WORKOUT SUMMARY Bothell, WA 06/13/2021 12:15 PM Tiffany 15 0 0 0 0 "
    "MINUTES / ZONE 55 CALORIES BURNED 0 SPLAT POINTS 75 AVG. HEART-RATE Peak HR: 80"
)


def make_snippet(month="06", day="13", year="2021", city="Bothell", calories="55"):
    return (
        f"STUDIO WORKOUT SUMMARY {city}, WA {month}/{day}/{year} 12\u200c:15 PM Tiffany "
        f"15 0 0 0 0 MINUTES / ZONE {calories} CALORIES BURNED 0 SPLAT POINTS "
        "75 AVG. HEART-RATE Peak HR: 80"
    )


@pytest.fixture
def sample_snippet():
    return SAMPLE_SNIPPET


@pytest.fixture(scope="session")
def snippet_parser():
    return compile_snippet_parser()


class _Request:
    def __init__(self, result):
        self._result = result

    def execute(self):
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


class FakeGmailService:
    """
    In-memory stand-in for service.users().messages() of the Gmail client.

    pages: list of messages.list responses, returned in order.
    snippets: message id -> raw snippet text.
    """

    def __init__(self, pages=None, snippets=None):
        self.pages = list(pages or [])
        self.snippets = dict(snippets or {})
        self.list_calls = []
        self.get_calls = []

    def users(self):
        return self

    def messages(self):
        return self

    def list(self, **kwargs):
        self.list_calls.append(kwargs)
        index = len(self.list_calls) - 1
        page = self.pages[index] if index < len(self.pages) else {}
        return _Request(page)

    def get(self, **kwargs):
        self.get_calls.append(kwargs)
        msg_id = kwargs["id"]
        return _Request({"id": msg_id, "snippet": self.snippets[msg_id]})


@pytest.fixture
def fake_gmail():
    return FakeGmailService
