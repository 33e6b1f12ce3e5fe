# styleinspo/models/domain/theme.py
"""Pydantic models for the site-wide theme and the singleton site settings."""

from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import Field, StringConstraints

from .common import CamelModel

# Values are written verbatim into theme.css, so only plain color and font
# tokens are accepted
CssColor = Annotated[str, StringConstraints(
    strip_whitespace=True,
    max_length=64,
    pattern=r"^(#[0-9a-fA-F]{3,8}|(rgb|rgba|hsl|hsla)\([0-9a-z.,%/ -]*\)|[a-zA-Z]+)$"
)]
FontFamily = Annotated[str, StringConstraints(
    strip_whitespace=True,
    min_length=1,
    max_length=200,
    pattern="^[A-Za-z0-9 ,'\"_-]+$"
)]


class LogoSettings(CamelModel):
    url: Optional[str] = None
    width: int = Field(120, ge=1, le=2000)
    height: int = Field(40, ge=1, le=2000)
    position: Literal["left", "center", "right"] = "center"
    show_with_title: bool = True


class ColorSettings(CamelModel):
    primary: CssColor = "#ec4899"
    secondary: CssColor = "#9333ea"
    accent: CssColor = "#f59e0b"
    background: CssColor = "#fafafa"
    background_secondary: CssColor = "#f5f5f5"
    text: CssColor = "#171717"
    text_muted: CssColor = "#737373"
    button: CssColor = "#ec4899"
    button_hover: CssColor = "#be185d"
    tag_background: CssColor = "#ec4899"
    tag_text: CssColor = "#ffffff"
    card_background: CssColor = "#ffffff"
    card_overlay: CssColor = "rgba(0, 0, 0, 0.6)"
    header_background: CssColor = "#ffffff"
    header_border: CssColor = "#e5e7eb"


class TypographySettings(CamelModel):
    font_family: FontFamily = "Geist Sans"
    heading_size: Literal["small", "medium", "large", "xl"] = "large"
    body_size: Literal["small", "medium", "large"] = "medium"
    font_weight: Literal["light", "normal", "medium", "bold"] = "normal"


class LayoutSettings(CamelModel):
    container_width: Literal["narrow", "normal", "wide", "full"] = "normal"
    spacing: Literal["tight", "normal", "relaxed"] = "normal"
    border_radius: Literal["none", "small", "medium", "large"] = "medium"


class ThemeSettings(CamelModel):
    """The active site-wide visual configuration."""
    id: str
    name: str
    logo: LogoSettings = Field(default_factory=LogoSettings)
    colors: ColorSettings = Field(default_factory=ColorSettings)
    typography: TypographySettings = Field(default_factory=TypographySettings)
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ThemeUpdate(CamelModel):
    """Partial theme update, merged section by section over the active theme."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    logo: Optional[Dict[str, Any]] = None
    colors: Optional[Dict[str, Any]] = None
    typography: Optional[Dict[str, Any]] = None
    layout: Optional[Dict[str, Any]] = None


SOCIAL_NETWORKS = ("facebook", "twitter", "pinterest", "instagram", "tiktok")


class PublicSiteSettings(CamelModel):
    """Footer and social configuration visible to every visitor."""
    footer_logo_url: Optional[str] = None
    footer_logo_size: int = 150
    footer_text_color: CssColor = "#9ca3af"
    social_facebook: str = ""
    social_twitter: str = ""
    social_pinterest: str = ""
    social_instagram: str = ""
    social_tiktok: str = ""
    updated_at: Optional[datetime] = None

    @property
    def social_links(self) -> Dict[str, str]:
        """Only the networks with a URL are shown."""
        links = {}
        for network in SOCIAL_NETWORKS:
            url = (getattr(self, f"social_{network}") or "").strip()
            if url:
                links[network] = url
        return links

    def to_response(self) -> Dict[str, Any]:
        data = self.to_json_dict()
        data["socialLinks"] = self.social_links
        return data


class SiteSettings(PublicSiteSettings):
    """Full singleton settings record, including the contact recipient."""
    id: str = "default"
    admin_email: str = ""


class SiteSettingsUpdate(CamelModel):
    """Partial site settings update. An empty string clears a social link."""
    footer_logo_url: Optional[str] = None
    footer_logo_size: Optional[int] = Field(None, ge=16, le=1000)
    footer_text_color: Optional[CssColor] = None
    social_facebook: Optional[str] = None
    social_twitter: Optional[str] = None
    social_pinterest: Optional[str] = None
    social_instagram: Optional[str] = None
    social_tiktok: Optional[str] = None
    admin_email: Optional[str] = None
