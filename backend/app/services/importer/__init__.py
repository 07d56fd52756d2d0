"""Spreadsheet import pipeline: parsing, column mapping, row validation and batch persistence"""

from .korean_numbers import parse_korean_number, parse_decimal
from .platforms import normalize_platform
from .columns import (
    auto_map_columns,
    normalize_mapping,
    parse_mapping_json,
    merge_mappings,
    CANONICAL_FIELDS,
    TEMPLATE_HEADERS,
)
from .row import Row, extract_field
from .row_processor import (
    InfluencerCandidate,
    AcceptedRow,
    RejectedRow,
    process_row,
    derive_handle,
    derive_engagement_rate,
)
from .file_parser import ParsedSheet, parse_upload
from .batch_importer import BatchImporter, ImportReport, ImportStore, SQLAlchemyImportStore

__all__ = [
    'parse_korean_number', 'parse_decimal', 'normalize_platform',
    'auto_map_columns', 'normalize_mapping', 'parse_mapping_json', 'merge_mappings', 'CANONICAL_FIELDS', 'TEMPLATE_HEADERS',
    'Row', 'extract_field',
    'InfluencerCandidate', 'AcceptedRow', 'RejectedRow', 'process_row', 'derive_handle', 'derive_engagement_rate',
    'ParsedSheet', 'parse_upload',
    'BatchImporter', 'ImportReport', 'ImportStore', 'SQLAlchemyImportStore',
]
