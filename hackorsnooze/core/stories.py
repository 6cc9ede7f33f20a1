from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from hackorsnooze.core.db.partial_update import apply_partial_update
from hackorsnooze.core.db.tables.story import Story
from hackorsnooze.core.db.tables.user import User
from hackorsnooze.core.errors import AccountNotFound, NotStoryAuthor, StoryNotFound
from hackorsnooze.core.logger import get_logger

logger = get_logger(__name__)

# author is owned by the account name cascade, never patched directly
PATCHABLE_FIELDS = ("title", "url")


def get_story(session: Session, story_id: int) -> Story:
    story = session.execute(select(Story).where(Story.story_id == story_id)).scalar()

    if not story:
        raise StoryNotFound(story_id)
    return story


def get_own_story(session: Session, story_id: int, username: str) -> Story:
    """Fetch a story, raising NotStoryAuthor unless ``username`` posted it"""
    story = get_story(session, story_id)
    if story.username != username:
        raise NotStoryAuthor()
    return story


def add_story(session: Session, username: str, title: str, url: str) -> Story:
    """Post a story; the author is the poster's current display name."""
    user = session.execute(select(User).where(User.username == username)).scalar()
    if not user:
        raise AccountNotFound(username)

    story = Story(title=title, url=url, author=user.name, username=username)
    session.add(story)
    session.commit()
    session.refresh(story)

    logger.info(f"Story {story.story_id} posted by {username}")
    return story


def patch_story(session: Session, story_id: int, fields: dict[str, Any]) -> Story:
    unknown = set(fields) - set(PATCHABLE_FIELDS)
    if unknown:
        raise ValueError(f"Fields cannot be patched: {sorted(unknown)}")

    get_story(session, story_id)

    items = dict(fields)
    items["updated_at"] = datetime.now(timezone.utc)
    apply_partial_update(session, "stories", items, "story_id", story_id)
    session.commit()

    return get_story(session, story_id)


def delete_story(session: Session, story_id: int) -> Story:
    story = get_story(session, story_id)
    # keep the returned row loaded after the delete commits
    session.expunge(story)
    session.execute(delete(Story).where(Story.story_id == story_id))
    session.commit()

    logger.info(f"Story {story_id} deleted")
    return story
