# gmail_read.py

import os
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from google.auth.transport.requests import Request
from googleapiclient.discovery import build

from bs4 import BeautifulSoup


# -----------------------------------------------------------
# CONFIG
# -----------------------------------------------------------

SCOPES = ["https://www.googleapis.com/auth/gmail.readonly"]

# OAuth client secret downloaded from the Google Cloud console
CREDENTIALS_PATH = "oauth.json"

# Cached user token, created after the first browser login
TOKEN_PATH = "token.json"

# max per messages.list call
PAGE_SIZE = 500


# -----------------------------------------------------------
# DATA MODEL
# -----------------------------------------------------------

@dataclass
class SnippetMessage:
    message_id: str
    snippet: str


# -----------------------------------------------------------
# AUTH
# -----------------------------------------------------------

def load_credentials(credentials_path=CREDENTIALS_PATH, token_path=TOKEN_PATH):
    """
    Uses the client secret + cached token to authenticate against Gmail.
    The browser flow only runs when there is no usable token.
    """
    creds = None

    if os.path.exists(token_path):
        creds = Credentials.from_authorized_user_file(token_path, SCOPES)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            flow = InstalledAppFlow.from_client_secrets_file(credentials_path, SCOPES)
            creds = flow.run_local_server(port=0)

        print(f"[Gmail] Saving credential file to: {token_path}", file=sys.stderr)
        with open(token_path, "w") as token:
            token.write(creds.to_json())

    return creds


def build_gmail_service(creds):
    return build("gmail", "v1", credentials=creds, cache_discovery=False)


# -----------------------------------------------------------
# LIST IDS (WITH PAGINATION)
# -----------------------------------------------------------

def list_all_message_ids(service, query: str = "", max_results: Optional[int] = None) -> List[str]:
    """
    Return list of Gmail message IDs matching the query.
    - max_results: if None, fetch everything; else stop when limit reached.
    """
    all_ids: List[str] = []
    page_token = None

    while True:
        page_size = PAGE_SIZE
        if max_results is not None:
            remaining = max_results - len(all_ids)
            if remaining <= 0:
                break
            page_size = min(page_size, remaining)

        response = service.users().messages().list(
            userId="me",
            q=query,
            maxResults=page_size,
            pageToken=page_token,
        ).execute()

        all_ids.extend([m["id"] for m in response.get("messages", [])])

        page_token = response.get("nextPageToken")
        if not page_token:
            break

    if max_results is not None:
        all_ids = all_ids[:max_results]
    return all_ids


# -----------------------------------------------------------
# FETCH SNIPPETS
# -----------------------------------------------------------

def clean_snippet(snippet: str) -> str:
    # Gmail returns snippets HTML-escaped (&#39; &amp; ...)
    if not snippet:
        return ""
    return BeautifulSoup(snippet, "html.parser").get_text()


def get_snippet(service, msg_id: str) -> SnippetMessage:
    msg = service.users().messages().get(
        userId="me", id=msg_id, format="minimal"
    ).execute()
    return SnippetMessage(message_id=msg_id, snippet=clean_snippet(msg.get("snippet", "")))


def fetch_snippets(
    service_factory: Callable[[], object],
    msg_ids: List[str],
    max_workers: int = 1,
) -> List[SnippetMessage]:
    """
    Fetch the snippet of every message in msg_ids, in the same order.

    The Gmail client's HTTP transport is not thread-safe, so with
    max_workers > 1 every worker thread builds its own service object.
    """
    if max_workers <= 1 or len(msg_ids) <= 1:
        service = service_factory()
        return [get_snippet(service, mid) for mid in msg_ids]

    local = threading.local()

    def _fetch(mid):
        service = getattr(local, "service", None)
        if service is None:
            service = local.service = service_factory()
        return get_snippet(service, mid)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(_fetch, msg_ids))
