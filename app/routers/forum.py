from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional

from app import models, crud, schemas
from app.database import get_db
from app.dependencies import get_current_user
from app.core.rate_limit import limiter

router = APIRouter(prefix="/forum", tags=["forum"])


@router.get("/categories", response_model=List[schemas.ForumCategory])
def get_categories(db: Session = Depends(get_db)):
    return crud.get_forum_categories(db)


@router.get("/posts", response_model=schemas.ForumPostListResponse)
def get_posts(
    category_id: Optional[int] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    posts, total = crud.get_forum_posts(db, skip=skip, limit=limit, category_id=category_id)
    return schemas.ForumPostListResponse(posts=posts, total=total, has_more=(skip + limit) < total)


@router.post("/posts", response_model=schemas.ForumPost, status_code=201)
@limiter.limit("10/minute")
def create_post(
    request: Request,
    post: schemas.ForumPostCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if post.category_id is not None and not crud.get_forum_category(db, post.category_id):
        raise HTTPException(status_code=404, detail="Category not found")

    db_post = crud.create_forum_post(db, post, author_id=current_user.id)
    return crud.get_forum_post(db, db_post.id)


@router.get("/posts/{post_id}", response_model=schemas.ForumPost)
def get_post(post_id: int, db: Session = Depends(get_db)):
    post = crud.get_forum_post(db, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    return crud.increment_post_views(db, post)


@router.get("/posts/{post_id}/replies", response_model=List[schemas.ForumReply])
def get_replies(post_id: int, db: Session = Depends(get_db)):
    if not crud.get_forum_post(db, post_id):
        raise HTTPException(status_code=404, detail="Post not found")
    return crud.get_forum_replies(db, post_id)


@router.post("/posts/{post_id}/replies", response_model=schemas.ForumReply, status_code=201)
@limiter.limit("20/minute")
def create_reply(
    request: Request,
    post_id: int,
    reply: schemas.ForumReplyCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    post = crud.get_forum_post(db, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    if post.is_locked:
        raise HTTPException(status_code=403, detail="This post is locked")

    return crud.create_forum_reply(db, post, reply, author_id=current_user.id)


@router.post("/posts/{post_id}/like", response_model=schemas.ForumLikeResult)
def toggle_like(
    post_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    post = crud.get_forum_post(db, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    liked, likes_count = crud.toggle_forum_like(db, post, current_user.id)
    return schemas.ForumLikeResult(liked=liked, likes_count=likes_count)
