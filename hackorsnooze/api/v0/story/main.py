from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hackorsnooze.core import stories
from hackorsnooze.core.db.session import get_current_user, get_db
from hackorsnooze.core.db.tables.user import User
from hackorsnooze.api.v0.story.models import StoryCreate, StoryResponse, StoryUpdate

router = APIRouter(prefix="/stories")


@router.post("", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
def create_story(
    story_data: StoryCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
):
    """Post a story; the author shown is the poster's display name"""
    story = stories.add_story(
        session, current_user.username, story_data.title, story_data.url
    )
    return StoryResponse.model_validate(story)


@router.get("/{story_id}", response_model=StoryResponse)
def get_story(
    story_id: int,
    session: Session = Depends(get_db),
):
    return StoryResponse.model_validate(stories.get_story(session, story_id))


@router.patch("/{story_id}", response_model=StoryResponse)
def update_story(
    story_id: int,
    story_data: StoryUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
):
    """
    Update a story's title and/or url.
    """
    stories.get_own_story(session, story_id, current_user.username)
    story = stories.patch_story(session, story_id, story_data.model_dump(exclude_unset=True))
    return StoryResponse.model_validate(story)


@router.delete("/{story_id}")
def delete_story(
    story_id: int,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_db),
):
    stories.get_own_story(session, story_id, current_user.username)
    story = stories.delete_story(session, story_id)
    return {
        "message": f"Story with ID '{story_id}' successfully deleted.",
        "story": StoryResponse.model_validate(story),
    }
