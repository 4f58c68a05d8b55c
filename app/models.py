from sqlalchemy import Boolean, Column, Integer, String, ForeignKey, DateTime, Date, Text, Float, UniqueConstraint, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from .database import Base

# ============= ENUMS =============

class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"

class PostType(str, enum.Enum):
    DISCUSSION = "discussion"
    REVIEW = "review"
    QUESTION = "question"

class ReportStatus(str, enum.Enum):
    UNLICENSED = "Unlicensed"
    SCAM_INDICATED = "Scam Indicated"
    MANY_USERS_REPORTED = "Many Users Reported"

# ============= USER MODEL =============

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True)
    email = Column(String, unique=True, index=True)
    hashed_password = Column(String)
    is_active = Column(Boolean, default=True)
    role = Column(Enum(UserRole, values_callable=lambda x: [e.value for e in x]), default=UserRole.USER, nullable=False)
    display_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    forum_posts = relationship("ForumPost", back_populates="author")
    forum_replies = relationship("ForumReply", back_populates="author")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

# ============= PAGE MAINTENANCE =============

class PageMaintenance(Base):
    __tablename__ = "page_maintenance"

    id = Column(Integer, primary_key=True, index=True)
    #logical path key: "home" for "/", otherwise the path without its leading slash
    page_path = Column(String, unique=True, index=True, nullable=False)
    page_name = Column(String, nullable=False)
    is_maintenance = Column(Boolean, default=False, nullable=False)
    maintenance_message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

# ============= CASINO CONTENT =============

class Casino(Base):
    __tablename__ = "casinos"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, index=True, nullable=False)
    rating = Column(Float, default=0.0, nullable=False)
    bonus = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    logo_url = Column(String, nullable=True)
    affiliate_url = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

class HeroBanner(Base):
    __tablename__ = "hero_banners"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    subtitle = Column(String(300), nullable=True)
    image_url = Column(String, nullable=False)
    link_url = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

class CasinoReport(Base):
    __tablename__ = "casino_reports"

    id = Column(Integer, primary_key=True, index=True)
    casino_name = Column(String(100), nullable=False)
    status = Column(Enum(ReportStatus, values_callable=lambda x: [e.value for e in x]), nullable=False)
    last_reported = Column(Date, nullable=False)
    summary = Column(Text, nullable=False)
    url = Column(String, default="#", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

# ============= PAGE CONTENT =============

class PageContent(Base):
    __tablename__ = "page_contents"
    __table_args__ = (
        UniqueConstraint("page_name", "section_name", "content_key", name="uq_page_content_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    page_name = Column(String(100), index=True, nullable=False)
    section_name = Column(String(100), nullable=False)
    content_type = Column(String(50), default="text", nullable=False)
    content_key = Column(String(100), nullable=False)
    content_value = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

# ============= HOMEPAGE COMPONENTS =============

class FaqItem(Base):
    __tablename__ = "faq_items"

    id = Column(Integer, primary_key=True, index=True)
    question = Column(String(300), nullable=False)
    answer = Column(Text, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

class TickerItem(Base):
    __tablename__ = "ticker_items"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(String(300), nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

class LogoSliderItem(Base):
    __tablename__ = "logo_slider_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    logo_url = Column(String, nullable=False)
    link_url = Column(String, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

# ============= MEDIA =============

class MediaFile(Base):
    __tablename__ = "media_files"

    id = Column(Integer, primary_key=True, index=True)
    object_name = Column(String, unique=True, index=True, nullable=False)
    original_filename = Column(String, nullable=False)
    content_type = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    file_url = Column(String, nullable=False)
    uploaded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    upload_date = Column(DateTime, default=datetime.utcnow, nullable=False)

# ============= FORUM =============

class ForumCategory(Base):
    __tablename__ = "forum_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    icon_name = Column(String(50), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    posts = relationship("ForumPost", back_populates="category")

class ForumPost(Base):
    __tablename__ = "forum_posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    post_type = Column(Enum(PostType, values_callable=lambda x: [e.value for e in x]), default=PostType.DISCUSSION, nullable=False)
    casino_name = Column(String(100), nullable=True)
    rating = Column(Integer, nullable=True)
    is_pinned = Column(Boolean, default=False, nullable=False)
    is_locked = Column(Boolean, default=False, nullable=False)
    views_count = Column(Integer, default=0, nullable=False)
    likes_count = Column(Integer, default=0, nullable=False)
    replies_count = Column(Integer, default=0, nullable=False)
    category_id = Column(Integer, ForeignKey("forum_categories.id"), nullable=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    category = relationship("ForumCategory", back_populates="posts")
    author = relationship("User", back_populates="forum_posts")
    replies = relationship("ForumReply", back_populates="post", cascade="all, delete-orphan")
    likes = relationship("ForumLike", back_populates="post", cascade="all, delete-orphan")

class ForumReply(Base):
    __tablename__ = "forum_replies"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    post_id = Column(Integer, ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    post = relationship("ForumPost", back_populates="replies")
    author = relationship("User", back_populates="forum_replies")

class ForumLike(Base):
    __tablename__ = "forum_likes"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    post = relationship("ForumPost", back_populates="likes")

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_forum_like_post_user"),)
