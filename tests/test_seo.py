"""Tests for SEO content generation."""

import pytest

from conftest import StubVisionProvider
from styleinspo.models.domain.look import AIAnalysis, FashionItem, SEOData
from styleinspo.models.domain.seo import SEOGenerationRequest, VisionAnalysisResult
from styleinspo.services.seo import (
    OCCASION_GUIDES,
    SEOContentGenerator,
    body_type_suitability,
    clamp,
    compute_price_range,
    parse_price,
    reconcile_item_seo
)
from styleinspo.services.vision import VisionAnalyzer, VisionProviderError
from styleinspo.utils.url_helpers import slugify

IMAGE_URL = "https://images.example.com/look.jpg"


def first_template(templates):
    return templates[0]


def make_request(**overrides) -> SEOGenerationRequest:
    data = {
        "look_id": "look-1",
        "main_image": IMAGE_URL,
        "title": "Office Layers",
        "items": [
            FashionItem(id="blazer", name="Camel Blazer", price="$120", category="outerwear"),
            FashionItem(id="blouse", name="Silk Blouse", price="$49.99", category="tops"),
        ]
    }
    data.update(overrides)
    return SEOGenerationRequest(**data)


def make_generator(*providers) -> SEOContentGenerator:
    return SEOContentGenerator(
        VisionAnalyzer(providers),
        brand_name="Test Boutique",
        choose=first_template
    )


NAVY_VISION = VisionAnalysisResult(
    detected_items=["blazer", "trousers"],
    colors=["navy", "white"],
    style_aesthetic="tailored minimalist",
    occasion="professional",
    season="fall",
    provider="openai"
)


class TestPriceRange:
    def test_ignores_unreadable_prices(self):
        assert compute_price_range(["$49.99", "$120", "N/A", ""]) == ("49.99", "120")

    def test_defaults_without_readable_prices(self):
        assert compute_price_range([]) == ("50", "200")
        assert compute_price_range(["free", None]) == ("50", "200")

    def test_parses_thousands_separators(self):
        assert parse_price("$1,299.00") == 1299.0
        assert parse_price("$0") is None

    def test_ignores_prices_too_large_to_represent(self):
        huge = "$" + "9" * 400

        assert parse_price(huge) is None
        assert compute_price_range([huge, "$20"]) == ("20", "20")


def test_clamp_adds_ellipsis_only_when_cut():
    assert clamp("short", 60) == "short"
    clamped = clamp("x" * 80, 60)
    assert len(clamped) == 60
    assert clamped.endswith("...")


def test_slugify():
    assert slugify("Navy Professional Outfit - 2 Piece Look") == "navy-professional-outfit-2-piece-look"
    assert slugify("  --Hello, World!--  ") == "hello-world"


def test_body_type_suitability_is_capped():
    assert body_type_suitability("tailored structured", "professional") == [
        "all body types",
        "straight body type",
        "apple body type",
        "petite",
    ]
    assert body_type_suitability("modern fashion", "casual") == ["all body types"]


class TestGenerate:
    async def test_uses_first_provider_that_succeeds(self):
        failing = StubVisionProvider("replicate", error=VisionProviderError("model down"))
        working = StubVisionProvider("openai", result=NAVY_VISION)

        result = await make_generator(failing, working).generate(make_request())

        assert result.success is True
        assert failing.calls == [IMAGE_URL]
        assert working.calls == [IMAGE_URL]
        assert result.ai_analysis.colors == ["navy", "white"]
        assert result.ai_analysis.confidence == 0.85
        assert result.seo_data.page_title == "navy Professional Outfit - 2 Piece Look"
        assert result.seo_data.h1 == "navy Professional Outfit Inspiration"

    async def test_without_vision_uses_defaults(self):
        failing = StubVisionProvider("replicate", error=VisionProviderError("model down"))
        also_failing = StubVisionProvider("openai", error=RuntimeError("quota"))

        result = await make_generator(failing, also_failing).generate(make_request())

        assert result.success is True
        analysis = result.ai_analysis
        assert analysis.colors == ["stylish"]
        assert analysis.occasion == "casual"
        assert analysis.season == "versatile"
        assert analysis.style_aesthetic == "modern fashion"
        assert analysis.detected_items == ["Camel Blazer", "Silk Blouse"]
        assert analysis.confidence == 0.7
        assert analysis.price_range == "$49.99 - $120"

    async def test_non_http_image_skips_vision(self):
        provider = StubVisionProvider("openai", result=NAVY_VISION)

        result = await make_generator(provider).generate(
            make_request(main_image="data:image/png;base64,AAAA")
        )

        assert result.success is True
        assert provider.calls == []
        assert result.ai_analysis.confidence == 0.7

    async def test_admin_overrides_beat_vision(self):
        provider = StubVisionProvider("openai", result=NAVY_VISION)

        result = await make_generator(provider).generate(
            make_request(user_occasion="formal", user_season="winter")
        )

        assert result.ai_analysis.occasion == "formal"
        assert result.ai_analysis.season == "winter"
        assert result.seo_data.occasion_guide == OCCASION_GUIDES["formal"]
        assert result.seo_data.internal_links[1].url == "/winter-outfits"

    async def test_templated_fields(self):
        result = await make_generator().generate(make_request())
        seo = result.seo_data

        assert seo.meta_description == (
            "stylish casual outfit - 2 modern fashion pieces. Shop the complete look now."
        )
        assert seo.url_slug == "stylish-casual-outfit-2-piece-look"
        assert seo.h2s == ["How to Style This Look", "When to Wear", "Shop the Items", "Complete the Look"]
        assert seo.styling_tips == [
            "Add stylish accessories",
            "Layer for versatile weather",
            "Mix textures and patterns",
            "Mix and match pieces",
            "Add sneakers or flats",
        ]
        assert seo.keywords.primary[0] == "stylish casual outfit"
        assert seo.image_alt_text == (
            "stylish casual outfit featuring 2 coordinated pieces in modern fashion style"
        )
        assert seo.item_descriptions["blouse"] == (
            "This stylish tops silk blouse features modern fashion styling "
            "perfect for casual occasions. Available for $49.99."
        )
        assert seo.item_alt_texts["blazer"] == (
            "stylish outerwear Camel Blazer - modern fashion style for casual"
        )

    async def test_schema_markup_offers(self):
        result = await make_generator().generate(make_request())
        markup = result.seo_data.schema_markup

        assert markup["@type"] == "Product"
        assert markup["image"] == IMAGE_URL
        assert markup["brand"] == {"@type": "Brand", "name": "Test Boutique"}
        assert markup["offers"]["lowPrice"] == "49.99"
        assert markup["offers"]["highPrice"] == "120"
        assert markup["offers"]["offerCount"] == 2

    async def test_unnamed_items_get_no_item_copy(self):
        request = make_request(items=[
            FashionItem(id="named", name="Scarf"),
            FashionItem(id="unnamed", name=""),
        ])

        result = await make_generator().generate(request)

        assert set(result.seo_data.item_descriptions) == {"named"}
        assert result.ai_analysis.detected_items == ["Scarf"]

    async def test_long_title_is_truncated(self):
        vision = NAVY_VISION.model_copy(
            update={"colors": ["extraordinarily luminous midnight sapphire blue"]}
        )

        result = await make_generator(StubVisionProvider("openai", result=vision)).generate(
            make_request()
        )

        title = result.seo_data.page_title
        assert len(title) == 60
        assert title.endswith("...")

    async def test_template_failure_is_reported(self, mocker):
        generator = make_generator()
        mocker.patch.object(generator, "synthesize", side_effect=RuntimeError("boom"))

        result = await generator.generate(make_request())

        assert result.success is False
        assert result.error == "boom"
        assert result.seo_data is None


class TestReconcileItemSeo:
    @pytest.fixture
    def seo(self) -> SEOData:
        return SEOData(
            page_title="t",
            meta_description="m",
            url_slug="t",
            h1="h",
            item_descriptions={"keep": "kept copy", "gone": "stale"},
            item_alt_texts={"keep": "kept alt", "gone": "stale"}
        )

    def test_drops_removed_and_fills_new_items(self, seo):
        items = [FashionItem(id="keep", name="Tote"), FashionItem(id="new", name="Boots")]
        analysis = AIAnalysis(colors=["black"], style_aesthetic="edgy", occasion="street-style")

        reconciled = reconcile_item_seo(seo, items, analysis)

        assert reconciled.item_descriptions["keep"] == "kept copy"
        assert set(reconciled.item_descriptions) == {"keep", "new"}
        assert reconciled.item_alt_texts["new"] == "black Boots - edgy style for street-style"

    def test_leaves_other_fields_alone(self, seo):
        reconciled = reconcile_item_seo(seo, [])

        assert reconciled.item_descriptions == {}
        assert reconciled.page_title == "t"
