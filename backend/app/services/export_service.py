"""
Spreadsheet output: CSV export of influencer records and the XLSX import template.
"""
import csv
import io
from datetime import date
from typing import Iterable, List, Optional

import pandas as pd

from app.models.influencer import Influencer
from app.services.importer.columns import TEMPLATE_HEADERS

EXPORT_COLUMNS = [
    ("Name", "name"),
    ("Platform", "platform"),
    ("Handle", "handle"),
    ("Profile URL", "profile_url"),
    ("Country", "country"),
    ("City", "city"),
    ("Languages", "languages"),
    ("Followers", "followers"),
    ("Avg Likes", "avg_likes"),
    ("Avg Comments", "avg_comments"),
    ("Engagement Rate", "engagement_rate"),
    ("Main Category", "main_category"),
    ("Sub Categories", "sub_categories"),
    ("Collab Types", "collab_types"),
    ("Base Price", "base_price_text"),
    ("Contact Email", "contact_email"),
    ("Contact DM", "contact_dm"),
    ("Status", "status"),
    ("Tags", "tags"),
    ("Notes Summary", "notes_summary"),
    ("Created At", "created_at"),
]

LIST_SEPARATOR = "; "
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
TEMPLATE_FILE_NAME = "influencer-import-template.xlsx"


def format_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return LIST_SEPARATOR.join(value)
    if hasattr(value, "value"):  # Enums
        return str(value.value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def influencers_to_csv(influencers: Iterable[Influencer]) -> str:
    """Render records as CSV with every cell quoted and lists joined by "; "."""
    headers = [header for header, _ in EXPORT_COLUMNS]
    rows: List[List[str]] = [
        [format_cell(getattr(influencer, attribute)) for _, attribute in EXPORT_COLUMNS]
        for influencer in influencers
    ]
    frame = pd.DataFrame(rows, columns=headers, dtype=str)
    return frame.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def export_file_name(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"influencers-{today.isoformat()}.csv"


def build_import_template() -> bytes:
    """Empty XLSX workbook whose header row is the Korean column labels."""
    buffer = io.BytesIO()
    pd.DataFrame(columns=[header for _, header in TEMPLATE_HEADERS]).to_excel(
        buffer, index=False, sheet_name="influencers", engine="openpyxl"
    )
    return buffer.getvalue()
