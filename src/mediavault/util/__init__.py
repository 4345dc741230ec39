from .drive_links import (
    BARE_ID_LENGTH,
    extract_file_id,
    is_link,
    preview_url,
    thumbnail_url,
)
from .ids import new_folder_id, new_installation_id, new_uuid
from .key_value import KeyValueStore
from .time import (
    EPOCH,
    coerce_timestamp,
    from_epoch_millis,
    normalize_dt,
    now_utc,
    parse_rfc3339,
    same_instant,
    to_epoch_millis,
    to_rfc3339,
)

__all__ = [
    "new_uuid",
    "new_folder_id",
    "new_installation_id",
    "KeyValueStore",
    "BARE_ID_LENGTH",
    "extract_file_id",
    "is_link",
    "preview_url",
    "thumbnail_url",
    "EPOCH",
    "now_utc",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
    "same_instant",
    "from_epoch_millis",
    "to_epoch_millis",
    "coerce_timestamp",
]
