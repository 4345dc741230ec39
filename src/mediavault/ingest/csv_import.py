"""CSV ingestion of media rows into the tree."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from mediavault.errors import DuplicateMediaError, InvalidInputError
from mediavault.models import DEFAULT_TITLE, ROOT_ID, ImportResult, MediaItem, MediaType
from mediavault.tree import TreeStore
from mediavault.util.drive_links import extract_file_id, is_link
from mediavault.util.time import now_utc

logger = logging.getLogger(__name__)

HEADER_PREFIX: str = "id,"


@dataclass(frozen=True, slots=True)
class CsvRow:
    """One parsed ``id,type,title,folder`` row (values stripped, type lower-cased)."""

    id: str
    type: str
    title: str = ""
    folder: str = ""
    line: int = 0


def has_header(text: str) -> bool:
    first = text.lstrip("﻿").split("\n", 1)[0].strip()
    return first.lower().startswith(HEADER_PREFIX)


def parse_csv(text: str) -> list[CsvRow]:
    """
    Parse CSV text into rows.

    Rows missing an id or a type are dropped; blank lines are ignored.
    """
    rows, _dropped = _read_rows(text)
    return rows


def _read_rows(text: str) -> tuple[list[CsvRow], int]:
    """Return parsed rows and the number of non-blank records dropped."""
    if not isinstance(text, str):
        raise InvalidInputError("CSV input must be text")

    body = text.lstrip("﻿")
    reader = csv.reader(io.StringIO(body))
    skip_first = has_header(body)

    rows: list[CsvRow] = []
    dropped = 0
    for index, fields in enumerate(reader):
        line = reader.line_num
        if index == 0 and skip_first:
            continue
        values = [f.strip() for f in fields]
        if not any(values):
            continue
        values += [""] * (4 - len(values))
        media_id, media_type, title, folder = values[:4]
        if not media_id or not media_type:
            logger.debug("Skipping CSV line %d: missing id or type", line)
            dropped += 1
            continue
        rows.append(
            CsvRow(
                id=media_id,
                type=media_type.lower(),
                title=title,
                folder=folder,
                line=line,
            )
        )
    return rows, dropped


def import_rows(
    store: TreeStore,
    rows: Iterable[CsvRow],
    parent_id: str = ROOT_ID,
    *,
    now: Optional[datetime] = None,
) -> ImportResult:
    """
    Add parsed rows to the tree.

    The folder column is resolved as: an existing folder id, else a child of
    parent_id with that name, else a new folder created under parent_id.
    """
    store.get_folder(parent_id)
    stamp = now or now_utc()
    result = ImportResult()

    for row in rows:
        file_id = _resolve_file_id(row.id)
        if file_id is None:
            _skip(result, row, "unrecognised Drive link")
            continue

        try:
            media_type = MediaType(row.type)
        except ValueError:
            _skip(result, row, f"unknown media type {row.type!r}")
            continue

        folder_id = _resolve_folder(store, row.folder, parent_id, result)
        item = MediaItem(
            id=file_id,
            type=media_type,
            title=row.title or DEFAULT_TITLE,
            added=stamp,
        )
        try:
            store.add_media(folder_id, item)
        except DuplicateMediaError:
            _skip(result, row, f"duplicate media {file_id}")
            continue
        result.imported += 1

    logger.info(
        "CSV import: %d imported, %d skipped, %d folders created",
        result.imported,
        result.skipped,
        len(result.created_folders),
    )
    return result


def import_csv(store: TreeStore, text: str, parent_id: str = ROOT_ID) -> ImportResult:
    """Parse and import; rows dropped by the parser count as skipped."""
    rows, dropped = _read_rows(text)
    result = import_rows(store, rows, parent_id)
    result.skipped += dropped
    return result


def _resolve_file_id(value: str) -> Optional[str]:
    if is_link(value):
        return extract_file_id(value)
    return value


def _resolve_folder(store: TreeStore, folder: str, parent_id: str, result: ImportResult) -> str:
    if not folder:
        return parent_id
    if store.has_folder(folder):
        return folder
    existing = store.find_child_by_name(parent_id, folder)
    if existing is not None:
        return existing.id
    new_id = store.create_folder(parent_id, folder)
    result.created_folders.append(new_id)
    return new_id


def _skip(result: ImportResult, row: CsvRow, reason: str) -> None:
    logger.debug("Skipping CSV line %d: %s", row.line, reason)
    result.skipped += 1
    result.errors.append(f"line {row.line}: {reason}")
