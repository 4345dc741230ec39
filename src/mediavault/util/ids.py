from __future__ import annotations

import uuid


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def new_folder_id() -> str:
    """Generate a new folder id (``folder-<hex>``)."""
    return f"folder-{uuid.uuid4().hex}"


def new_installation_id() -> str:
    """Generate the anonymous per-installation identity used as a document key."""
    return uuid.uuid4().hex
