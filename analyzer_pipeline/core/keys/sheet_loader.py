"""
Google Sheet Key Loader
Fetches YouTube keys, Gemini keys and access keys from a published Google Sheet.
"""

import io
import logging
import time
import unicodedata
from typing import List, Optional, Tuple

import pandas as pd
import requests

from ..errors import ConfigurationError
from .access_keys import AccessKey

logger = logging.getLogger(__name__)

SHEET_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export"

YOUTUBE_KEY_COLUMN = "API Key Youtube"
GEMINI_KEY_COLUMN = "API Gemini"


def sanitize_header(header: str) -> str:
    """Lowercases a header and strips diacritics ("Ngày hết hạn" -> "ngay het han")."""
    if not header:
        return ""
    decomposed = unicodedata.normalize("NFD", header.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).replace("đ", "d")


def parse_csv_rows(csv_text: str) -> List[List[str]]:
    """
    Parses CSV text into non-empty rows of stripped cells.

    Raises:
        ConfigurationError: The text is not well-formed CSV (e.g. ragged rows).
    """
    text = csv_text.lstrip("\ufeff")
    if not text.strip():
        return []
    try:
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.ParserError as e:
        raise ConfigurationError(f"Google Sheet CSV is malformed: {e}") from e
    rows = []
    for record in df.itertuples(index=False):
        row = [str(cell).strip() for cell in record]
        if any(row):
            rows.append(row)
    return rows


def keys_from_column(rows: List[List[str]], column_name: str) -> List[str]:
    """
    Returns the non-empty cells under `column_name` (case-insensitive header match).

    Raises:
        ConfigurationError: The header row does not contain `column_name`.
    """
    if not rows:
        return []

    headers = [h.strip().upper() for h in rows[0]]
    target = column_name.strip().upper()
    if target not in headers:
        logger.error(f"Column '{column_name}' not found in the Google Sheet. Check the header name.")
        raise ConfigurationError(
            f"Column '{column_name}' not found in the Google Sheet. Columns found: [{', '.join(rows[0])}]"
        )

    index = headers.index(target)
    return [row[index] for row in rows[1:] if index < len(row) and row[index]]


def access_keys_from_rows(rows: List[List[str]]) -> Tuple[List[AccessKey], List[str]]:
    """
    Extracts access keys and expiration dates.

    The access-key column is the first header mentioning "key"/"khoa" without
    "api"; the expiration column mentions "exp" or "het" and "han".

    Returns:
        (keys, headers_found) where headers_found is the raw header row.
    """
    header_index = next((i for i, row in enumerate(rows) if any(row)), None)
    if header_index is None:
        return [], []

    original_headers = rows[header_index]
    sanitized = [sanitize_header(h) for h in original_headers]

    key_index = next(
        (i for i, h in enumerate(sanitized) if ("key" in h or "khoa" in h) and "api" not in h),
        -1,
    )
    exp_index = next(
        (i for i, h in enumerate(sanitized) if "exp" in h or ("het" in h and "han" in h)),
        -1,
    )
    if key_index == -1 or exp_index == -1:
        return [], original_headers

    keys = []
    for row in rows[header_index + 1:]:
        if len(row) <= max(key_index, exp_index):
            continue
        token, expiration = row[key_index], row[exp_index]
        if token and expiration:
            keys.append(AccessKey(key=token, expiration_date=expiration))
    return keys, original_headers


class SheetKeyLoader:
    """
    Loads credential pools from a Google Sheet published as CSV.

    The sheet must be shared as "Anyone with the link can view".
    """

    def __init__(self, sheet_id: str, sheet_name: Optional[str] = None, timeout: float = 20.0,
                 session: Optional[requests.Session] = None):
        self._sheet_id = sheet_id
        self._sheet_name = sheet_name
        self._timeout = timeout
        self._session = session or requests.Session()
        self._rows: Optional[List[List[str]]] = None

    def fetch_rows(self, refresh: bool = False) -> List[List[str]]:
        """Downloads and parses the sheet once per loader unless `refresh` is set."""
        if self._rows is not None and not refresh:
            return self._rows

        params = {"format": "csv", "_": str(int(time.time() * 1000))}
        if self._sheet_name:
            params["sheet"] = self._sheet_name
        url = SHEET_EXPORT_URL.format(sheet_id=self._sheet_id)
        label = self._sheet_name or "default"

        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ConfigurationError(f"Failed to fetch Google Sheet (sheet: {label}): {e}") from e

        response.encoding = "utf-8"
        text = response.text
        head = text.strip().lower()
        if head.startswith("<!doctype html") or head.startswith("<html"):
            raise ConfigurationError(
                f'Could not retrieve CSV data for sheet "{label}". The sheet may not exist, '
                'or it is not public ("Anyone with the link can view").'
            )

        self._rows = parse_csv_rows(text)
        logger.info(f"Loaded {len(self._rows)} rows from Google Sheet (sheet: {label})")
        return self._rows

    def youtube_keys(self) -> List[str]:
        return keys_from_column(self.fetch_rows(), YOUTUBE_KEY_COLUMN)

    def gemini_keys(self) -> List[str]:
        return keys_from_column(self.fetch_rows(), GEMINI_KEY_COLUMN)

    def access_keys(self) -> List[AccessKey]:
        """
        Raises:
            ConfigurationError: The sheet has data but no key/expiration columns.
        """
        rows = self.fetch_rows()
        keys, headers_found = access_keys_from_rows(rows)
        if not keys and any(any(row) for row in rows):
            raise ConfigurationError(
                "Could not find the 'Key' and/or 'Expiration date' columns in the Google Sheet. "
                f"Columns found: [{', '.join(headers_found)}]"
            )
        return keys
