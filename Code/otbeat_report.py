# otbeat_report.py

import sys
from typing import Iterable, List, Mapping, Optional

import pandas as pd

from gmail_read import SnippetMessage
from pattern_extractor import CompiledSchema

Record = Mapping[str, str]

CSV_HEADER = [
    "Date",
    "Time",
    "Zone 1",
    "Zone 2",
    "Zone 3",
    "Zone 4",
    "Zone 5",
    "Calories",
    "Average Heart Rate",
    "Peak Heart Rate",
    "Location",
]


# -----------------------------------------------------------
# MATCHING
# -----------------------------------------------------------

def parse_snippets(messages: Iterable[SnippetMessage], parser: CompiledSchema) -> List[Record]:
    """
    Run every snippet through the parser. Snippets that don't fit the
    grammar (other emails from the same sender, truncated snippets) are
    reported and skipped.
    """
    records: List[Record] = []
    skipped = 0

    for msg in messages:
        result = parser.match(msg.snippet)
        if not result:
            skipped += 1
            print(
                f"[OTbeat] snippet did not match pattern, ignoring ({msg.message_id}): {msg.snippet}",
                file=sys.stderr,
            )
            continue
        records.append(result.record)

    print(f"[OTbeat] Matched {len(records)} snippet(s), skipped {skipped}.", file=sys.stderr)
    return records


# -----------------------------------------------------------
# SORTING
# -----------------------------------------------------------

def date_key(record: Record) -> str:
    return f"{record['Year']}-{record['Month']}-{record['Day']}"


def sort_records(records: Iterable[Record]) -> List[Record]:
    # Plain string comparison: "2021-10-1" sorts before "2021-2-1".
    # Only calendar order while month and day are zero-padded, as OTbeat sends them.
    return sorted(records, key=date_key)


# -----------------------------------------------------------
# CSV
# -----------------------------------------------------------

def record_to_row(record: Record) -> List[str]:
    return [
        f"{record['Month']}/{record['Day']}/{record['Year']}",
        f"{record['Hour']}:{record['Minute']}",
        record["Zone1"],
        record["Zone2"],
        record["Zone3"],
        record["Zone4"],
        record["Zone5"],
        record["Calories"],
        record["AverageHeartRate"],
        record["PeakHeartRate"],
        f"{record['City']}, {record['State']}",
    ]


def records_to_dataframe(records: Iterable[Record]) -> pd.DataFrame:
    rows = [record_to_row(r) for r in records]
    return pd.DataFrame(rows, columns=CSV_HEADER, dtype=str)


def build_report(messages: Iterable[SnippetMessage], parser: CompiledSchema) -> pd.DataFrame:
    records = parse_snippets(messages, parser)
    return records_to_dataframe(sort_records(records))


def write_report(df: pd.DataFrame, output_path: Optional[str] = None) -> None:
    """Write the report as CSV to output_path, or stdout when not given."""
    if output_path:
        df.to_csv(output_path, index=False, lineterminator="\n")
        print(f"[Report] Saved {len(df)} workout(s) → {output_path}", file=sys.stderr)
    else:
        df.to_csv(sys.stdout, index=False, lineterminator="\n")
