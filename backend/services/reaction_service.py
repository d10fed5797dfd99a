"""Service for post like and save toggles."""

import uuid
from typing import Optional

from sqlalchemy.orm import Session

from models.exceptions import ActorMismatchException, PostNotFoundException
from repositories.post_repository import PostRepository
from repositories.reaction_repository import (
    ReactionRepository,
    like_repository,
    save_repository,
)


class ReactionService:
    """Service for like/save business logic."""

    @staticmethod
    def _toggle(
        db: Session,
        repo: ReactionRepository,
        post_id: uuid.UUID,
        actor_id: uuid.UUID,
        claimed_user_id: Optional[uuid.UUID],
    ) -> tuple[bool, int]:
        """
        Flip the (post, actor) reaction and return (active, fresh count).

        Raises:
            ActorMismatchException: Body names a different user than the session
            PostNotFoundException: Post missing, soft-deleted or hidden
        """
        if claimed_user_id is not None and claimed_user_id != actor_id:
            raise ActorMismatchException()

        if PostRepository(db).get_visible(post_id) is None:
            raise PostNotFoundException()

        existing = repo.get(post_id, actor_id)
        if existing:
            repo.remove(existing)
            active = False
        else:
            repo.add(post_id, actor_id)
            active = True
        repo.commit()

        return active, repo.count_for_post(post_id)

    @staticmethod
    def toggle_like(
        db: Session,
        post_id: uuid.UUID,
        actor_id: uuid.UUID,
        claimed_user_id: Optional[uuid.UUID] = None,
    ) -> dict[str, bool | int]:
        """
        Toggle the caller's like on a post.

        Returns:
            Dict with 'liked' (bool) and 'likes_count' (int).
        """
        liked, count = ReactionService._toggle(
            db, like_repository(db), post_id, actor_id, claimed_user_id
        )
        return {"liked": liked, "likes_count": count}

    @staticmethod
    def toggle_save(
        db: Session,
        post_id: uuid.UUID,
        actor_id: uuid.UUID,
        claimed_user_id: Optional[uuid.UUID] = None,
    ) -> dict[str, bool | int]:
        """
        Toggle the caller's bookmark on a post.

        Returns:
            Dict with 'saved' (bool) and 'saves_count' (int).
        """
        saved, count = ReactionService._toggle(
            db, save_repository(db), post_id, actor_id, claimed_user_id
        )
        return {"saved": saved, "saves_count": count}
