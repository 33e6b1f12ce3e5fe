"""SEO content generation for looks.

Generation runs in two stages:
1. Best-effort vision analysis of the main image (see ``services.vision``).
2. Deterministic templating of every SEO field from the vision fields, the
   admin's occasion/season overrides and the look's items. No network calls
   happen in this stage.

Any failure in stage 2 is returned as ``success=False`` with a message. The
caller decides whether to persist, so a failed run never touches stored SEO.
"""

import json
import math
import random
import re
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from styleinspo.core.logging import get_logger, monitor_performance
from styleinspo.models.domain.look import (
    AIAnalysis,
    ContentSection,
    FashionItem,
    InternalLink,
    KeywordSet,
    SEOData
)
from styleinspo.models.domain.seo import (
    SEOGenerationRequest,
    SEOGenerationResponse,
    VisionAnalysisResult
)
from styleinspo.services.vision import VisionAnalyzer
from styleinspo.utils.url_helpers import slugify

logger = get_logger(__name__)

DEFAULT_COLOR = 'stylish'
DEFAULT_OCCASION = 'casual'
DEFAULT_SEASON = 'versatile'
DEFAULT_STYLE = 'modern fashion'
DEFAULT_PRICE_RANGE = (50.0, 200.0)

TITLE_MAX_LENGTH = 60
META_MAX_LENGTH = 160

CONFIDENCE_WITH_VISION = 0.85
CONFIDENCE_WITHOUT_VISION = 0.70

H2_HEADINGS = ['How to Style This Look', 'When to Wear', 'Shop the Items', 'Complete the Look']

META_TEMPLATES = (
    '{color} {occasion} outfit - {count} {style} pieces. Shop the complete look now.',
    '{count}-piece {color} {occasion} ensemble. Perfect {style} styling inspiration.',
    'Shop {color} {occasion} look: {count} {style} pieces for any season.',
)

OCCASION_TIPS = {
    'professional': ['Keep makeup subtle', 'Choose structured handbag', 'Add blazer layer'],
    'casual': ['Mix and match pieces', 'Add sneakers or flats', 'Layer with cardigan'],
    'formal': ['Add statement jewelry', 'Choose elegant heels', 'Include evening clutch'],
    'date-night': ['Add bold lipstick', 'Choose romantic accessories', 'Include strappy heels'],
    'street-style': ['Add trendy sneakers', 'Layer multiple pieces', 'Include bold accessories'],
}

OCCASION_GUIDES = {
    'professional': 'Perfect for office meetings, presentations, business events.',
    'casual': 'Ideal for weekend outings, coffee dates, social gatherings.',
    'formal': 'Great for special events, dinner parties, upscale occasions.',
    'date-night': 'Perfect for romantic dinners, cocktail bars, evening events.',
    'street-style': 'Ideal for urban adventures, festivals, creative events.',
}

_PRICE_CHARS = re.compile(r'[^0-9.]')


def clamp(text: str, limit: int) -> str:
    """Cut to ``limit`` characters, ending in an ellipsis when cut."""
    if len(text) <= limit:
        return text
    return text[:limit - 3] + '...'


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def parse_price(price: Optional[str]) -> Optional[float]:
    """Numeric value of a free-text price, or None when it cannot be read."""
    digits = _PRICE_CHARS.sub('', price or '')
    if not digits:
        return None
    try:
        value = float(digits)
    except ValueError:
        return None
    return value if math.isfinite(value) and value > 0 else None


def format_price(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return f'{value:.2f}'


def compute_price_range(prices: Iterable[Optional[str]]) -> Tuple[str, str]:
    """Lowest and highest readable price, formatted without a currency sign.

    Unreadable prices are ignored; with none readable the fixed
    $50 to $200 range is used.
    """
    values = [v for v in (parse_price(p) for p in prices) if v is not None]
    low, high = (min(values), max(values)) if values else DEFAULT_PRICE_RANGE
    return format_price(low), format_price(high)


def body_type_suitability(style: str, occasion: str) -> List[str]:
    suitability = ['all body types']
    if 'structured' in style or 'tailored' in style:
        suitability.extend(['straight body type', 'apple body type'])
    if 'flowy' in style or 'loose' in style:
        suitability.extend(['pear body type', 'hourglass body type'])
    if occasion == 'professional':
        suitability.extend(['petite', 'tall'])
    return suitability[:4]


def item_seo_texts(item: FashionItem, color: str, style: str, occasion: str) -> Tuple[str, str]:
    """Description and alt text for one item."""
    name = item.name or 'piece'
    optimized_name = ' '.join(part for part in (color, item.category, name) if part).strip()
    description = (
        f'This {optimized_name.lower()} features {style} styling '
        f'perfect for {occasion} occasions.'
    )
    if item.price:
        description += f' Available for {item.price}.'
    alt_text = f'{optimized_name} - {style} style for {occasion}'
    return description, alt_text


def reconcile_item_seo(
    seo: SEOData,
    items: Sequence[FashionItem],
    analysis: Optional[AIAnalysis] = None
) -> SEOData:
    """Key the per-item maps by the current item ids.

    Entries for removed items are dropped. Items without entries get
    generated ones so every current item is covered.
    """
    color = (analysis.colors[0] if analysis and analysis.colors else '') or DEFAULT_COLOR
    style = analysis.style_aesthetic if analysis else DEFAULT_STYLE
    occasion = analysis.occasion if analysis else DEFAULT_OCCASION

    descriptions: Dict[str, str] = {}
    alt_texts: Dict[str, str] = {}
    for item in items:
        generated = None
        if item.id in seo.item_descriptions:
            descriptions[item.id] = seo.item_descriptions[item.id]
        else:
            generated = item_seo_texts(item, color, style, occasion)
            descriptions[item.id] = generated[0]
        if item.id in seo.item_alt_texts:
            alt_texts[item.id] = seo.item_alt_texts[item.id]
        else:
            generated = generated or item_seo_texts(item, color, style, occasion)
            alt_texts[item.id] = generated[1]

    return seo.model_copy(update={
        'item_descriptions': descriptions,
        'item_alt_texts': alt_texts
    })


class SEOContentGenerator:
    """Build the SEO bundle and AI analysis snapshot for a look."""

    def __init__(
        self,
        analyzer: VisionAnalyzer,
        brand_name: str = 'Fashion Affiliate',
        choose: Callable[[Sequence[str]], str] = random.choice
    ):
        self.analyzer = analyzer
        self.brand_name = brand_name
        self.choose = choose

    @monitor_performance("seo_generate")
    async def generate(self, request: SEOGenerationRequest) -> SEOGenerationResponse:
        try:
            vision = await self.analyzer.analyze(request.main_image)
        except Exception as e:
            # Vision is optional; analyzers should not raise, but never let one end the run
            logger.warning("Vision analysis raised, continuing without it", error=e)
            vision = None

        try:
            response = self.synthesize(request, vision)
        except Exception as e:
            logger.error("SEO generation failed", error=e, look_id=request.look_id)
            return SEOGenerationResponse(
                success=False,
                error=str(e) or 'Failed to generate SEO content'
            )

        try:
            json.dumps(response.to_json_dict())
        except (TypeError, ValueError, OverflowError) as e:
            logger.error("SEO bundle serialization failed", error=e, look_id=request.look_id)
            return SEOGenerationResponse(
                success=False,
                error='Failed to serialize response data'
            )

        logger.info(
            "SEO content generated",
            look_id=request.look_id,
            vision_provider=vision.provider if vision else None
        )
        return response

    def synthesize(
        self,
        request: SEOGenerationRequest,
        vision: Optional[VisionAnalysisResult]
    ) -> SEOGenerationResponse:
        """Template every field from already-known values."""
        items = request.items
        colors = (vision.colors if vision else None) or [DEFAULT_COLOR]
        occasion = request.user_occasion or (vision.occasion if vision else None) or DEFAULT_OCCASION
        season = request.user_season or (vision.season if vision else None) or DEFAULT_SEASON
        style = (vision.style_aesthetic if vision else None) or DEFAULT_STYLE
        detected_items = (
            (vision.detected_items if vision else None)
            or [item.name for item in items if item.name]
        )
        count = len(items)

        low, high = compute_price_range(item.price for item in items)
        color = colors[0] or 'Stylish'
        occasion_title = capitalize_first(occasion)

        title = clamp(f'{color} {occasion_title} Outfit - {count} Piece Look', TITLE_MAX_LENGTH)

        analysis = AIAnalysis(
            detected_items=detected_items,
            colors=colors,
            style_aesthetic=style,
            occasion=occasion,
            season=season,
            price_range=f'${low} - ${high}',
            body_type_suitability=body_type_suitability(style, occasion),
            confidence=CONFIDENCE_WITH_VISION if vision else CONFIDENCE_WITHOUT_VISION
        )

        item_descriptions: Dict[str, str] = {}
        item_alt_texts: Dict[str, str] = {}
        for item in items:
            if item.name:
                description, alt_text = item_seo_texts(item, colors[0], style, occasion)
                item_descriptions[item.id] = description
                item_alt_texts[item.id] = alt_text

        seo = SEOData(
            page_title=title,
            meta_description=self._meta_description(color, occasion, count, style),
            url_slug=slugify(title),
            h1=f'{color} {occasion_title} Outfit Inspiration',
            h2s=list(H2_HEADINGS),
            outfit_description=self._outfit_description(
                color, occasion, season, count, style, detected_items
            ),
            styling_tips=self._styling_tips(color, occasion, season, style),
            occasion_guide=OCCASION_GUIDES.get(occasion, OCCASION_GUIDES['casual']),
            item_descriptions=item_descriptions,
            keywords=self._keywords(color, occasion, season, style, count),
            image_alt_text=(
                f'{color} {occasion} outfit featuring {count} coordinated pieces '
                f'in {style} style'
            ),
            item_alt_texts=item_alt_texts,
            schema_markup=self._schema_markup(
                title, request.main_image, color, occasion, season, style, count, low, high
            ),
            internal_links=[
                InternalLink(
                    text=f'Similar {occasion_title} Outfits',
                    url=f'/{occasion.lower()}-outfits'
                ),
                InternalLink(text=f'More {season} Looks', url=f'/{season.lower()}-outfits'),
                InternalLink(
                    text=f'{color} Fashion Inspiration',
                    url=f'/{color.lower()}-outfits'
                ),
            ],
            content_sections=[
                ContentSection(
                    heading=f'Shop This {occasion_title} Look',
                    content=(
                        f'{color} {occasion} outfit with {count} {style} pieces. '
                        f'Perfect for {season} styling and everyday wear.'
                    )
                ),
                ContentSection(
                    heading='Complete the Look',
                    content=(
                        f'Add accessories, shoes, and layers to personalize this '
                        f'{style} {occasion} ensemble for any occasion.'
                    )
                ),
            ]
        )

        return SEOGenerationResponse(success=True, seo_data=seo, ai_analysis=analysis)

    def _meta_description(self, color: str, occasion: str, count: int, style: str) -> str:
        template = self.choose(META_TEMPLATES)
        return clamp(
            template.format(color=color, occasion=occasion, count=count, style=style),
            META_MAX_LENGTH
        )

    @staticmethod
    def _outfit_description(
        color: str,
        occasion: str,
        season: str,
        count: int,
        style: str,
        detected_items: List[str]
    ) -> str:
        item_list = ', '.join(detected_items[:3]) if detected_items else 'coordinated pieces'
        season_text = 'year-round' if season == 'current' else season
        return (
            f'{color} {occasion} outfit featuring {count} {style} pieces. '
            f'Includes {item_list}. Perfect for {season_text} styling. '
            'Versatile, high-quality items that transition seamlessly from day to night. '
            f'Complete your {style} wardrobe with this coordinated {occasion} ensemble.'
        )

    @staticmethod
    def _styling_tips(color: str, occasion: str, season: str, style: str) -> List[str]:
        base_tips = [
            f'Add {color.lower()} accessories',
            f'Layer for {season} weather',
            'Mix textures and patterns',
            f'Choose {style} shoes',
            'Accessorize with minimal jewelry',
        ]
        specific = OCCASION_TIPS.get(occasion, OCCASION_TIPS['casual'])
        return base_tips[:3] + specific[:2]

    @staticmethod
    def _keywords(color: str, occasion: str, season: str, style: str, count: int) -> KeywordSet:
        lower_color = color.lower()
        return KeywordSet(
            primary=[
                f'{lower_color} {occasion} outfit',
                f'{style} {occasion} look',
                f'{season} fashion outfit',
            ],
            secondary=[
                f'{count} piece outfit',
                f'{lower_color} {style} style',
                f'{occasion} outfit inspiration',
                f'{season} wardrobe essentials',
            ],
            long_tail=[
                f'how to style {lower_color} {occasion} outfit',
                f'{season} {occasion} fashion inspiration',
                f'{style} outfit ideas for {occasion}',
                f'{lower_color} {occasion} look styling tips',
            ]
        )

    def _schema_markup(
        self,
        title: str,
        image: str,
        color: str,
        occasion: str,
        season: str,
        style: str,
        count: int,
        low: str,
        high: str
    ) -> Dict:
        return {
            '@context': 'https://schema.org/',
            '@type': 'Product',
            'name': title,
            'description': (
                f'{color} {occasion} outfit with {count} pieces in {style} style. '
                f'Perfect for {season} styling and {occasion} occasions.'
            ),
            'image': image,
            'category': f'{occasion} fashion outfit',
            'color': color,
            'style': style,
            'offers': {
                '@type': 'AggregateOffer',
                'priceCurrency': 'USD',
                'lowPrice': low,
                'highPrice': high,
                'availability': 'https://schema.org/InStock',
                'offerCount': count
            },
            'brand': {
                '@type': 'Brand',
                'name': self.brand_name
            },
            'additionalProperty': [
                {'@type': 'PropertyValue', 'name': 'Occasion', 'value': occasion},
                {'@type': 'PropertyValue', 'name': 'Season', 'value': season},
                {'@type': 'PropertyValue', 'name': 'Style', 'value': style},
                {'@type': 'PropertyValue', 'name': 'Pieces', 'value': str(count)},
            ],
            'keywords': f'{color}, {occasion}, {style}, {season}, fashion, outfit, style'
        }
