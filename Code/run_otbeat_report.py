import argparse
import functools
import sys
import traceback

from gmail_read import (
    CREDENTIALS_PATH,
    TOKEN_PATH,
    build_gmail_service,
    fetch_snippets,
    list_all_message_ids,
    load_credentials,
)
from otbeat_report import build_report, write_report
from otbeat_snippet import compile_snippet_parser

DEFAULT_SENDER = "OTbeatReport@orangetheoryfitness.com"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Export OTbeat workout summaries from Gmail to CSV."
    )
    parser.add_argument(
        "--from", dest="sender", default=DEFAULT_SENDER,
        help="Sender of Orange Theory data emails",
    )
    parser.add_argument("-o", "--output", default=None, help="CSV output path (default: stdout)")
    parser.add_argument("--credentials", default=CREDENTIALS_PATH, help="OAuth client secret file")
    parser.add_argument("--token", default=TOKEN_PATH, help="Cached OAuth token file")
    parser.add_argument("--max-results", type=int, default=None, help="Stop after this many emails")
    parser.add_argument("--workers", type=int, default=1, help="Concurrent snippet fetches")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # compile once up front so a broken schema fails before any network call
    snippet_parser = compile_snippet_parser()

    creds = load_credentials(args.credentials, args.token)
    service_factory = functools.partial(build_gmail_service, creds)

    query = f"from:{args.sender}"
    print(f"[Gmail] Searching: {query}", file=sys.stderr)
    msg_ids = list_all_message_ids(service_factory(), query=query, max_results=args.max_results)
    print(f"[Gmail] Found {len(msg_ids)} email(s).", file=sys.stderr)

    messages = fetch_snippets(service_factory, msg_ids, max_workers=args.workers)

    df = build_report(messages, snippet_parser)
    write_report(df, args.output)
    return df


def cli():
    try:
        main()
    except Exception as e:
        print("\n[OTbeat] ERROR OCCURRED", file=sys.stderr)
        print(type(e).__name__, ":", e, file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    cli()
