from pydantic import BaseModel, EmailStr, field_validator, Field, ConfigDict, StrictBool
from typing import Optional, List
from datetime import date, datetime
from enum import Enum

# ============= ENUMS =============

class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"

class PostType(str, Enum):
    DISCUSSION = "discussion"
    REVIEW = "review"
    QUESTION = "question"

class ReportStatus(str, Enum):
    UNLICENSED = "Unlicensed"
    SCAM_INDICATED = "Scam Indicated"
    MANY_USERS_REPORTED = "Many Users Reported"

class HomepageComponent(str, Enum):
    FAQ_ITEMS = "faq_items"
    TICKER_ITEMS = "ticker_items"
    LOGO_SLIDER_ITEMS = "logo_slider_items"

class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

# ============= USER SCHEMAS =============

class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters with uppercase, lowercase, number, and special character")
    display_name: Optional[str] = Field(None, max_length=50)

    @field_validator('password')
    @classmethod
    def validate_password_strength(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters long')
        if not any(c.isupper() for c in v):
            raise ValueError('Password must contain at least one uppercase letter')
        if not any(c.islower() for c in v):
            raise ValueError('Password must contain at least one lowercase letter')
        if not any(c.isdigit() for c in v):
            raise ValueError('Password must contain at least one number')
        return v

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        v = v.strip()
        import re
        if not re.match(r'^[a-zA-Z0-9_-]+$', v):
            raise ValueError('Username can only contain letters, numbers, hyphens, and underscores')
        return v

class UserPublic(BaseModel):
    id: int
    username: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class User(UserPublic):
    email: EmailStr
    role: UserRole
    is_active: bool
    created_at: datetime

class UserDetail(User):
    is_admin: bool

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str

class RefreshTokenRequest(BaseModel):
    refresh_token: str

# ============= MAINTENANCE SCHEMAS =============

class MaintenanceStatus(BaseModel):
    """status of a single page as served by the maintenance read endpoint"""
    is_maintenance: StrictBool = False
    maintenance_message: Optional[str] = None

    model_config = ConfigDict(frozen=True)

class PageMaintenance(BaseModel):
    id: int
    page_path: str
    page_name: str
    is_maintenance: bool
    maintenance_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PageMaintenanceList(BaseModel):
    pages: List[PageMaintenance]

class PageMaintenanceCreate(BaseModel):
    page_path: str = Field(..., min_length=1, max_length=200)
    page_name: str = Field(..., min_length=1, max_length=100)
    is_maintenance: bool = False
    maintenance_message: Optional[str] = Field(None, max_length=500)

class MaintenanceToggle(BaseModel):
    page_path: str
    is_maintenance: bool
    maintenance_message: Optional[str] = Field(None, max_length=500)

class MaintenanceMessageUpdate(BaseModel):
    page_path: str
    maintenance_message: str = Field(..., max_length=500)

class PageMaintenanceResult(BaseModel):
    success: bool
    page: PageMaintenance
    message: str

class ChangeEvent(BaseModel):
    type: ChangeType
    table: str = "page_maintenance"
    page_path: str
    record: dict = Field(default_factory=dict)
    commit_timestamp: datetime = Field(default_factory=datetime.utcnow)

# ============= CASINO SCHEMAS =============

class CasinoBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=120, pattern=r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
    rating: float = Field(0.0, ge=0, le=5)
    bonus: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    affiliate_url: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0

class CasinoCreate(CasinoBase):
    pass

class CasinoUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=120, pattern=r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
    rating: Optional[float] = Field(None, ge=0, le=5)
    bonus: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    affiliate_url: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

class CasinoStatusUpdate(BaseModel):
    is_active: bool

class CasinoBulkDelete(BaseModel):
    ids: List[int] = Field(..., min_length=1)

class Casino(CasinoBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class CasinoListResponse(BaseModel):
    casinos: List[Casino]
    total: int
    has_more: bool

# ============= HERO BANNER SCHEMAS =============

class HeroBannerCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    subtitle: Optional[str] = Field(None, max_length=300)
    image_url: str = Field(..., min_length=1)
    link_url: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0

class HeroBannerUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    subtitle: Optional[str] = Field(None, max_length=300)
    image_url: Optional[str] = Field(None, min_length=1)
    link_url: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

class HeroBanner(HeroBannerCreate):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

# ============= CASINO REPORT SCHEMAS =============

class CasinoReportCreate(BaseModel):
    casino_name: str = Field(..., min_length=1, max_length=100)
    status: ReportStatus
    last_reported: date
    summary: str = Field(..., min_length=1)
    url: str = "#"

class CasinoReportUpdate(BaseModel):
    casino_name: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[ReportStatus] = None
    last_reported: Optional[date] = None
    summary: Optional[str] = Field(None, min_length=1)
    url: Optional[str] = None

class CasinoReport(CasinoReportCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class CasinoReportListResponse(BaseModel):
    reports: List[CasinoReport]
    count: int

# ============= PAGE CONTENT SCHEMAS =============

class PageContentUpsert(BaseModel):
    page_name: str = Field(..., min_length=1, max_length=100)
    section_name: str = Field(..., min_length=1, max_length=100)
    content_key: str = Field(..., min_length=1, max_length=100)
    content_value: str
    content_type: str = Field("text", max_length=50)
    is_active: bool = True

class PageContentUpdate(BaseModel):
    content_value: Optional[str] = None
    content_type: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None

class PageContent(PageContentUpsert):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PageContentResult(BaseModel):
    content: PageContent
    action: str

# ============= HOMEPAGE SCHEMAS =============

class FaqItemCreate(BaseModel):
    question: str = Field(..., min_length=1, max_length=300)
    answer: str = Field(..., min_length=1)
    sort_order: int = 0
    is_active: bool = True

class FaqItemUpdate(BaseModel):
    question: Optional[str] = Field(None, min_length=1, max_length=300)
    answer: Optional[str] = Field(None, min_length=1)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

class FaqItem(FaqItemCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)

class TickerItemCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=300)
    sort_order: int = 0
    is_active: bool = True

class TickerItemUpdate(BaseModel):
    text: Optional[str] = Field(None, min_length=1, max_length=300)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

class TickerItem(TickerItemCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)

class LogoSliderItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    logo_url: str = Field(..., min_length=1)
    link_url: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True

class LogoSliderItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    logo_url: Optional[str] = Field(None, min_length=1)
    link_url: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

class LogoSliderItem(LogoSliderItemCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)

class HomepageContent(BaseModel):
    faq_items: List[FaqItem]
    ticker_items: List[TickerItem]
    logo_slider_items: List[LogoSliderItem]

# ============= MEDIA SCHEMAS =============

class MediaFile(BaseModel):
    id: int
    object_name: str
    original_filename: str
    content_type: str
    file_size: int
    file_url: str
    upload_date: datetime

    model_config = ConfigDict(from_attributes=True)

# ============= FORUM SCHEMAS =============

class ForumCategory(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    icon_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class ForumPostCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    content: str = Field(..., min_length=1, max_length=10000)
    post_type: PostType = PostType.DISCUSSION
    category_id: Optional[int] = None
    casino_name: Optional[str] = Field(None, max_length=100)
    rating: Optional[int] = Field(None, ge=1, le=5)

class ForumPost(BaseModel):
    id: int
    title: str
    content: str
    post_type: PostType
    casino_name: Optional[str] = None
    rating: Optional[int] = None
    is_pinned: bool
    is_locked: bool
    views_count: int
    likes_count: int
    replies_count: int
    category_id: Optional[int] = None
    category: Optional[ForumCategory] = None
    author: UserPublic
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ForumPostListResponse(BaseModel):
    posts: List[ForumPost]
    total: int
    has_more: bool

class ForumReplyCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)

class ForumReply(BaseModel):
    id: int
    content: str
    post_id: int
    author: UserPublic
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ForumLikeResult(BaseModel):
    liked: bool
    likes_count: int
