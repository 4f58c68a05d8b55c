from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from datetime import datetime
from . import models, schemas
from typing import Optional, List, Tuple
from .core.change_feed import change_feed
from .core.hashing import Hasher
from .core.pages import DEFAULT_PAGES, page_key

# ============= USER CRUD =============

def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email).first()

def get_user_by_username(db: Session, username: str):
    return db.query(models.User).filter(models.User.username == username).first()

def create_user(db: Session, user: schemas.UserCreate, role: models.UserRole = models.UserRole.USER):
    db_user = models.User(
        email=user.email,
        hashed_password=Hasher.get_password_hash(user.password),
        username=user.username,
        display_name=user.display_name,
        role=role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def authenticate_user(db: Session, identifier: str, password: str) -> Optional[models.User]:
    user = get_user_by_username(db, username=identifier)
    if not user:
        user = get_user_by_email(db, email=identifier)
    if not user:
        return None

    #check if user account is active
    if not user.is_active:
        return None

    if not Hasher.verify_password(password, user.hashed_password):
        return None
    return user

# ============= PAGE MAINTENANCE CRUD =============

def _page_snapshot(page: models.PageMaintenance) -> dict:
    return schemas.PageMaintenance.model_validate(page).model_dump(mode="json")

def _publish_page_change(change_type: schemas.ChangeType, record: dict):
    change_feed.publish(schemas.ChangeEvent(
        type=change_type,
        page_path=record["page_path"],
        record=record,
    ))

def get_page_maintenance(db: Session, page_path: str) -> Optional[models.PageMaintenance]:
    return db.query(models.PageMaintenance).filter(
        models.PageMaintenance.page_path == page_key(page_path)
    ).first()

def get_page_maintenance_list(db: Session) -> List[models.PageMaintenance]:
    return db.query(models.PageMaintenance).order_by(models.PageMaintenance.page_path).all()

def create_page_maintenance(db: Session, page: schemas.PageMaintenanceCreate) -> models.PageMaintenance:
    db_page = models.PageMaintenance(
        page_path=page_key(page.page_path),
        page_name=page.page_name,
        is_maintenance=page.is_maintenance,
        maintenance_message=page.maintenance_message,
    )
    db.add(db_page)
    db.commit()
    db.refresh(db_page)
    _publish_page_change(schemas.ChangeType.INSERT, _page_snapshot(db_page))
    return db_page

def toggle_page_maintenance(
    db: Session,
    page_path: str,
    is_maintenance: bool,
    maintenance_message: Optional[str] = None
) -> Optional[models.PageMaintenance]:
    db_page = get_page_maintenance(db, page_path)
    if not db_page:
        return None

    db_page.is_maintenance = is_maintenance
    #keep the stored message when the toggle does not carry one
    if maintenance_message:
        db_page.maintenance_message = maintenance_message
    db_page.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(db_page)
    _publish_page_change(schemas.ChangeType.UPDATE, _page_snapshot(db_page))
    return db_page

def update_maintenance_message(db: Session, page_path: str, maintenance_message: str) -> Optional[models.PageMaintenance]:
    db_page = get_page_maintenance(db, page_path)
    if not db_page:
        return None

    db_page.maintenance_message = maintenance_message
    db_page.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(db_page)
    _publish_page_change(schemas.ChangeType.UPDATE, _page_snapshot(db_page))
    return db_page

def delete_page_maintenance(db: Session, page_path: str) -> bool:
    db_page = get_page_maintenance(db, page_path)
    if not db_page:
        return False

    snapshot = _page_snapshot(db_page)
    db.delete(db_page)
    db.commit()
    _publish_page_change(schemas.ChangeType.DELETE, snapshot)
    return True

def ensure_default_pages(db: Session) -> int:
    """insert the site's default maintenance pages that are missing"""
    existing = {path for (path,) in db.query(models.PageMaintenance.page_path).all()}
    created = 0
    for page in DEFAULT_PAGES:
        if page["page_path"] in existing:
            continue
        db.add(models.PageMaintenance(is_maintenance=False, **page))
        created += 1
    if created:
        db.commit()
    return created

# ============= CASINO CRUD =============

def get_casino(db: Session, casino_id: int) -> Optional[models.Casino]:
    return db.query(models.Casino).filter(models.Casino.id == casino_id).first()

def get_casino_by_slug(db: Session, slug: str) -> Optional[models.Casino]:
    return db.query(models.Casino).filter(models.Casino.slug == slug).first()

def get_casinos(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    active_only: bool = False,
    search: Optional[str] = None
) -> Tuple[List[models.Casino], int]:
    query = db.query(models.Casino)

    if active_only:
        query = query.filter(models.Casino.is_active == True)
    if search:
        query = query.filter(models.Casino.name.ilike(f"%{search.strip()}%"))

    total = query.count()
    casinos = query.order_by(
        models.Casino.sort_order, models.Casino.rating.desc(), models.Casino.id
    ).offset(skip).limit(limit).all()
    return casinos, total

def create_casino(db: Session, casino: schemas.CasinoCreate) -> models.Casino:
    db_casino = models.Casino(**casino.model_dump())
    db.add(db_casino)
    db.commit()
    db.refresh(db_casino)
    return db_casino

def update_casino(db: Session, casino_id: int, casino_update: schemas.CasinoUpdate) -> Optional[models.Casino]:
    db_casino = get_casino(db, casino_id)
    if db_casino:
        for key, value in casino_update.model_dump(exclude_unset=True).items():
            setattr(db_casino, key, value)
        db.commit()
        db.refresh(db_casino)
    return db_casino

def delete_casino(db: Session, casino_id: int) -> bool:
    db_casino = get_casino(db, casino_id)
    if db_casino:
        db.delete(db_casino)
        db.commit()
        return True
    return False

def delete_casinos(db: Session, casino_ids: List[int]) -> int:
    deleted = db.query(models.Casino).filter(
        models.Casino.id.in_(casino_ids)
    ).delete(synchronize_session=False)
    db.commit()
    return deleted

# ============= HERO BANNER CRUD =============

def get_hero_banner(db: Session, banner_id: int) -> Optional[models.HeroBanner]:
    return db.query(models.HeroBanner).filter(models.HeroBanner.id == banner_id).first()

def get_hero_banners(db: Session, active_only: bool = False) -> List[models.HeroBanner]:
    query = db.query(models.HeroBanner)
    if active_only:
        query = query.filter(models.HeroBanner.is_active == True)
    return query.order_by(models.HeroBanner.sort_order, models.HeroBanner.id).all()

def create_hero_banner(db: Session, banner: schemas.HeroBannerCreate) -> models.HeroBanner:
    db_banner = models.HeroBanner(**banner.model_dump())
    db.add(db_banner)
    db.commit()
    db.refresh(db_banner)
    return db_banner

def update_hero_banner(db: Session, banner_id: int, banner_update: schemas.HeroBannerUpdate) -> Optional[models.HeroBanner]:
    db_banner = get_hero_banner(db, banner_id)
    if db_banner:
        for key, value in banner_update.model_dump(exclude_unset=True).items():
            setattr(db_banner, key, value)
        db.commit()
        db.refresh(db_banner)
    return db_banner

def delete_hero_banner(db: Session, banner_id: int) -> bool:
    db_banner = get_hero_banner(db, banner_id)
    if db_banner:
        db.delete(db_banner)
        db.commit()
        return True
    return False

# ============= CASINO REPORT CRUD =============

def get_casino_report(db: Session, report_id: int) -> Optional[models.CasinoReport]:
    return db.query(models.CasinoReport).filter(models.CasinoReport.id == report_id).first()

def get_casino_reports(db: Session) -> List[models.CasinoReport]:
    return db.query(models.CasinoReport).order_by(
        models.CasinoReport.created_at.desc(), models.CasinoReport.id.desc()
    ).all()

def create_casino_report(db: Session, report: schemas.CasinoReportCreate) -> models.CasinoReport:
    db_report = models.CasinoReport(**report.model_dump())
    db.add(db_report)
    db.commit()
    db.refresh(db_report)
    return db_report

def update_casino_report(db: Session, report_id: int, report_update: schemas.CasinoReportUpdate) -> Optional[models.CasinoReport]:
    db_report = get_casino_report(db, report_id)
    if db_report:
        for key, value in report_update.model_dump(exclude_unset=True).items():
            setattr(db_report, key, value)
        db.commit()
        db.refresh(db_report)
    return db_report

def delete_casino_report(db: Session, report_id: int) -> bool:
    db_report = get_casino_report(db, report_id)
    if db_report:
        db.delete(db_report)
        db.commit()
        return True
    return False

# ============= PAGE CONTENT CRUD =============

def get_page_content(db: Session, content_id: int) -> Optional[models.PageContent]:
    return db.query(models.PageContent).filter(models.PageContent.id == content_id).first()

def get_page_content_by_key(db: Session, page_name: str, section_name: str, content_key: str) -> Optional[models.PageContent]:
    return db.query(models.PageContent).filter(
        models.PageContent.page_name == page_name,
        models.PageContent.section_name == section_name,
        models.PageContent.content_key == content_key,
    ).first()

def get_page_contents(
    db: Session,
    page_name: Optional[str] = None,
    section_name: Optional[str] = None,
    active_only: bool = True
) -> List[models.PageContent]:
    query = db.query(models.PageContent)

    if page_name:
        query = query.filter(models.PageContent.page_name == page_name)
    if section_name:
        query = query.filter(models.PageContent.section_name == section_name)
    if active_only:
        query = query.filter(models.PageContent.is_active == True)

    return query.order_by(models.PageContent.created_at, models.PageContent.id).all()

def upsert_page_content(db: Session, content: schemas.PageContentUpsert) -> Tuple[models.PageContent, bool]:
    """write one content value, keyed by page, section and key; returns (row, created)"""
    db_content = get_page_content_by_key(db, content.page_name, content.section_name, content.content_key)
    created = db_content is None

    if created:
        db_content = models.PageContent(**content.model_dump())
        db.add(db_content)
    else:
        db_content.content_value = content.content_value
        db_content.content_type = content.content_type
        db_content.is_active = content.is_active

    db.commit()
    db.refresh(db_content)
    return db_content, created

def update_page_content(db: Session, content_id: int, content_update: schemas.PageContentUpdate) -> Optional[models.PageContent]:
    db_content = get_page_content(db, content_id)
    if db_content:
        for key, value in content_update.model_dump(exclude_unset=True).items():
            setattr(db_content, key, value)
        db.commit()
        db.refresh(db_content)
    return db_content

def delete_page_content(db: Session, content_id: int) -> bool:
    db_content = get_page_content(db, content_id)
    if db_content:
        db.delete(db_content)
        db.commit()
        return True
    return False

# ============= HOMEPAGE CRUD =============

#component -> (model, create schema, update schema, response schema)
HOMEPAGE_COMPONENTS = {
    schemas.HomepageComponent.FAQ_ITEMS: (
        models.FaqItem, schemas.FaqItemCreate, schemas.FaqItemUpdate, schemas.FaqItem
    ),
    schemas.HomepageComponent.TICKER_ITEMS: (
        models.TickerItem, schemas.TickerItemCreate, schemas.TickerItemUpdate, schemas.TickerItem
    ),
    schemas.HomepageComponent.LOGO_SLIDER_ITEMS: (
        models.LogoSliderItem, schemas.LogoSliderItemCreate, schemas.LogoSliderItemUpdate, schemas.LogoSliderItem
    ),
}

def get_homepage_items(db: Session, component: schemas.HomepageComponent, active_only: bool = False):
    model = HOMEPAGE_COMPONENTS[component][0]
    query = db.query(model)
    if active_only:
        query = query.filter(model.is_active == True)
    return query.order_by(model.sort_order, model.id).all()

def get_homepage_item(db: Session, component: schemas.HomepageComponent, item_id: int):
    model = HOMEPAGE_COMPONENTS[component][0]
    return db.query(model).filter(model.id == item_id).first()

def create_homepage_item(db: Session, component: schemas.HomepageComponent, data: dict):
    model = HOMEPAGE_COMPONENTS[component][0]
    db_item = model(**data)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item

def update_homepage_item(db: Session, component: schemas.HomepageComponent, item_id: int, data: dict):
    db_item = get_homepage_item(db, component, item_id)
    if db_item:
        for key, value in data.items():
            setattr(db_item, key, value)
        db.commit()
        db.refresh(db_item)
    return db_item

def delete_homepage_item(db: Session, component: schemas.HomepageComponent, item_id: int) -> bool:
    db_item = get_homepage_item(db, component, item_id)
    if db_item:
        db.delete(db_item)
        db.commit()
        return True
    return False

# ============= MEDIA CRUD =============

def create_media_file(db: Session, **fields) -> models.MediaFile:
    db_media = models.MediaFile(**fields)
    db.add(db_media)
    db.commit()
    db.refresh(db_media)
    return db_media

def get_media_file(db: Session, media_id: int) -> Optional[models.MediaFile]:
    return db.query(models.MediaFile).filter(models.MediaFile.id == media_id).first()

def get_media_files(db: Session, skip: int = 0, limit: int = 100) -> List[models.MediaFile]:
    return db.query(models.MediaFile).order_by(
        models.MediaFile.upload_date.desc()
    ).offset(skip).limit(limit).all()

def delete_media_file(db: Session, media_id: int) -> bool:
    db_media = get_media_file(db, media_id)
    if db_media:
        db.delete(db_media)
        db.commit()
        return True
    return False

def get_referenced_media_urls(db: Session) -> set:
    """every media URL still used by site content"""
    urls = set()
    for column in (
        models.Casino.logo_url,
        models.HeroBanner.image_url,
        models.LogoSliderItem.logo_url,
    ):
        urls.update(url for (url,) in db.query(column).filter(column.isnot(None)).all())
    return urls

# ============= FORUM CRUD =============

def get_forum_categories(db: Session) -> List[models.ForumCategory]:
    return db.query(models.ForumCategory).order_by(
        models.ForumCategory.sort_order, models.ForumCategory.name
    ).all()

def get_forum_category(db: Session, category_id: int) -> Optional[models.ForumCategory]:
    return db.query(models.ForumCategory).filter(models.ForumCategory.id == category_id).first()

def get_forum_posts(
    db: Session,
    skip: int = 0,
    limit: int = 20,
    category_id: Optional[int] = None
) -> Tuple[List[models.ForumPost], int]:
    query = db.query(models.ForumPost).options(
        joinedload(models.ForumPost.author),
        joinedload(models.ForumPost.category)
    )
    if category_id is not None:
        query = query.filter(models.ForumPost.category_id == category_id)

    total = query.count()
    posts = query.order_by(
        models.ForumPost.is_pinned.desc(), models.ForumPost.created_at.desc(), models.ForumPost.id.desc()
    ).offset(skip).limit(limit).all()
    return posts, total

def get_forum_post(db: Session, post_id: int) -> Optional[models.ForumPost]:
    return db.query(models.ForumPost).options(
        joinedload(models.ForumPost.author),
        joinedload(models.ForumPost.category)
    ).filter(models.ForumPost.id == post_id).first()

def create_forum_post(db: Session, post: schemas.ForumPostCreate, author_id: int) -> models.ForumPost:
    db_post = models.ForumPost(**post.model_dump(), author_id=author_id)
    db.add(db_post)
    db.commit()
    db.refresh(db_post)
    return db_post

def increment_post_views(db: Session, post: models.ForumPost) -> models.ForumPost:
    post.views_count = models.ForumPost.views_count + 1
    db.commit()
    db.refresh(post)
    return post

def get_forum_replies(db: Session, post_id: int) -> List[models.ForumReply]:
    return db.query(models.ForumReply).options(
        joinedload(models.ForumReply.author)
    ).filter(models.ForumReply.post_id == post_id).order_by(models.ForumReply.created_at, models.ForumReply.id).all()

def create_forum_reply(db: Session, post: models.ForumPost, reply: schemas.ForumReplyCreate, author_id: int) -> models.ForumReply:
    db_reply = models.ForumReply(content=reply.content, post_id=post.id, author_id=author_id)
    db.add(db_reply)
    post.replies_count = models.ForumPost.replies_count + 1
    db.commit()
    db.refresh(db_reply)
    return db_reply

def toggle_forum_like(db: Session, post: models.ForumPost, user_id: int) -> Tuple[bool, int]:
    """like or unlike a post, returns (liked, likes_count)"""
    existing = db.query(models.ForumLike).filter(
        models.ForumLike.post_id == post.id,
        models.ForumLike.user_id == user_id
    ).first()

    if existing:
        db.delete(existing)
        liked = False
    else:
        db.add(models.ForumLike(post_id=post.id, user_id=user_id))
        liked = True
    db.flush()

    post.likes_count = db.query(func.count(models.ForumLike.id)).filter(
        models.ForumLike.post_id == post.id
    ).scalar()
    db.commit()
    db.refresh(post)
    return liked, post.likes_count
