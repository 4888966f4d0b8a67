# File location: src/seniku/utils/history.py
"""
Image history of a submission.

History is never stored. It is rebuilt on every read from the archived
revision snapshots plus the image the submission currently carries.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel


class ImageRef(BaseModel):
    image_url: str
    image_medium: Optional[str] = None
    image_thumbnail: Optional[str] = None


class HistoryEntry(BaseModel):
    version: int
    image_url: str
    image_medium: Optional[str] = None
    image_thumbnail: Optional[str] = None
    submitted_at: datetime
    revision_note: Optional[str] = None
    is_current: bool = False


def same_image(a, b) -> bool:
    """Two image holders carry the same artwork when their full-size URLs match."""
    if a is None or b is None:
        return False
    return a.image_url == b.image_url


def reconstruct_history(
    current_image: ImageRef,
    current_timestamp: datetime,
    revisions: Iterable,
) -> List[HistoryEntry]:
    """
    Merge revision snapshots and the live image into one ascending timeline.

    The live image appears exactly once: either it is the newest snapshot,
    which is then flagged as current, or it is appended at the next version.
    """
    ordered = sorted(revisions, key=lambda r: r.version)
    history = [
        HistoryEntry(
            version=r.version,
            image_url=r.image_url,
            image_medium=r.image_medium,
            image_thumbnail=r.image_thumbnail,
            submitted_at=r.submitted_at,
            revision_note=r.revision_note,
        )
        for r in ordered
    ]

    if history and same_image(history[-1], current_image):
        history[-1].is_current = True
        return history

    next_version = history[-1].version + 1 if history else 1
    history.append(
        HistoryEntry(
            version=next_version,
            image_url=current_image.image_url,
            image_medium=current_image.image_medium,
            image_thumbnail=current_image.image_thumbnail,
            submitted_at=current_timestamp,
            is_current=True,
        )
    )
    return history


def history_for(submission) -> List[HistoryEntry]:
    """Convenience wrapper for a loaded Submission row."""
    return reconstruct_history(
        ImageRef(
            image_url=submission.image_url,
            image_medium=submission.image_medium,
            image_thumbnail=submission.image_thumbnail,
        ),
        submission.submitted_at,
        submission.revisions,
    )
