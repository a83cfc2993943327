"""CSV export of translation history."""
from typing import Iterable

from models import TranslationRecord

CSV_HEADER = ("Date", "Mode", "Input", "Output")
CSV_FILENAME = "translations.csv"


def csv_cell(value) -> str:
    # only quotes are escaped; commas and newlines stay inside the quoted field
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def records_to_csv(records: Iterable[TranslationRecord]) -> str:
    rows = [",".join(CSV_HEADER)]
    for rec in records:
        rows.append(",".join((
            csv_cell(rec.created_at.isoformat()),
            csv_cell(rec.mode),
            csv_cell(rec.input_text),
            csv_cell(rec.output_text),
        )))
    return "\n".join(rows)
