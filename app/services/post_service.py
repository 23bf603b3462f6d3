import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.social_post import SocialPost, PostLike, PostComment, VisibilityEnum
from app.models.user import User
from app.schemas.social import PostCreate

logger = logging.getLogger(__name__)


class PostService:
    async def get(self, db: AsyncSession, post_id: int) -> SocialPost:
        post = await db.get(SocialPost, post_id)
        if post is None:
            raise HTTPException(status_code=404, detail="Post not found")
        return post

    async def feed(self, db: AsyncSession, user_id: int, limit: int = 20) -> List[SocialPost]:
        """Public posts plus the user's own, newest first."""
        result = await db.execute(
            select(SocialPost)
            .where(or_(SocialPost.visibility == VisibilityEnum.public, SocialPost.user_id == user_id))
            .order_by(SocialPost.created_at.desc(), SocialPost.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, author: User, data: PostCreate) -> SocialPost:
        if not data.content and not data.media_urls:
            raise HTTPException(status_code=400, detail="Post cannot be empty")

        post = SocialPost(
            user_id=author.id,
            content=data.content,
            media_urls=list(data.media_urls),
            challenge_id=data.challenge_id,
            visibility=data.visibility,
            likes=[],
            comments=[],
        )
        post.user = author
        db.add(post)
        await db.commit()
        logger.info("User %s published post %s", author.id, post.id)
        return post

    async def toggle_like(self, db: AsyncSession, post_id: int, user: User) -> SocialPost:
        post = await self.get(db, post_id)
        like = next((l for l in post.likes if l.user_id == user.id), None)

        if like is not None:
            post.likes.remove(like)
        else:
            try:
                async with db.begin_nested():
                    post.likes.append(PostLike(user_id=user.id))
            except IntegrityError:
                # Someone else's request already stored this like
                logger.warning("Duplicate like on post %s by user %s", post_id, user.id)
                await db.refresh(post)
                return post
        await db.commit()
        return post

    async def add_comment(self, db: AsyncSession, post_id: int, user: User, content: Optional[str]) -> SocialPost:
        content = (content or "").strip()
        if not content:
            raise HTTPException(status_code=400, detail="Comment cannot be empty")

        post = await self.get(db, post_id)
        comment = PostComment(user_id=user.id, content=content)
        comment.user = user
        post.comments.append(comment)
        await db.commit()
        return post


post_service = PostService()
