"""
Notes on influencers: append-only, newest first.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import BusinessLogicError
from app.models.influencer import InfluencerNote
from app.models.schemas import NoteAuthor, NoteResponse
from app.models.user import User

logger = logging.getLogger(__name__)


def to_note_response(note: InfluencerNote, author: Optional[User] = None) -> NoteResponse:
    author = author or note.author
    author_name = author.display_name if author else None
    return NoteResponse(
        id=note.id,
        content=note.content,
        created_at=note.created_at,
        author=NoteAuthor(name=author_name),
    )


async def list_notes(db: AsyncSession, influencer_id: UUID) -> List[InfluencerNote]:
    result = await db.execute(
        select(InfluencerNote)
        .options(selectinload(InfluencerNote.author))
        .where(InfluencerNote.influencer_id == influencer_id)
        .order_by(desc(InfluencerNote.created_at))
    )
    return list(result.scalars().all())


async def add_note(
    db: AsyncSession,
    influencer_id: UUID,
    author: User,
    content: str
) -> InfluencerNote:
    """
    Append a note. The caller checks that the influencer exists.

    Raises:
        BusinessLogicError: If the content is blank after trimming
    """
    content = (content or "").strip()
    if not content:
        raise BusinessLogicError("Note content is required")

    note = InfluencerNote(influencer_id=influencer_id, author_id=author.id, content=content)
    db.add(note)
    await db.commit()
    await db.refresh(note)

    logger.info(f"User {author.id} added note {note.id} to influencer {influencer_id}")
    return note
