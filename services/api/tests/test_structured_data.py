import pytest

from app.extraction import Page
from app.extraction.structured_data import (
    find_recipe_node,
    flatten_instructions,
    iter_json_blocks,
    resolve_image,
    extract,
)

PANCAKES = {
    "@context": "https://schema.org",
    "@type": "Recipe",
    "name": "Fluffy Pancakes",
    "description": "Weekend pancakes &amp; syrup.",
    "image": [{"@type": "ImageObject", "url": "https://example.com/pancakes.jpg"}],
    "recipeYield": ["4 servings", "12 pancakes"],
    "prepTime": "PT10M",
    "cookTime": "PT1H5M",
    "recipeIngredient": ["1 1/2 cups flour", " 2 eggs ", ""],
    "recipeInstructions": [
        {"@type": "HowToStep", "text": "Mix the <b>dry</b> ingredients."},
        {"@type": "HowToStep", "text": "Cook on a hot griddle."},
    ],
    "nutrition": {
        "@type": "NutritionInformation",
        "calories": "240 kcal",
        "proteinContent": "6.4 g",
        "fatContent": "9 g",
        "carbohydrateContent": "32 g",
        "sodiumContent": "1,200 mg",
        "sugarContent": "12.5 g",
    },
}


def test_extract_basic_fields(ld_json_page):
    page = Page(url="https://example.com/pancakes", html=ld_json_page(PANCAKES))
    draft = extract(page)

    assert draft.title == "Fluffy Pancakes"
    assert draft.description == "Weekend pancakes & syrup."
    assert draft.image_url == "https://example.com/pancakes.jpg"
    assert draft.servings == "4 servings"
    assert draft.prep_time == "10m"
    assert draft.cook_time == "1h 5m"
    assert draft.ingredients == ["1 1/2 cups flour", "2 eggs"]
    assert draft.instructions == ["Mix the dry ingredients.", "Cook on a hot griddle."]


def test_extract_coerces_nutrition(ld_json_page):
    draft = extract(Page(url="https://example.com/p", html=ld_json_page(PANCAKES)))
    facts = draft.nutrition

    assert facts.calories == 240
    assert facts.protein_g == 6
    assert facts.fat_g == 9
    assert facts.carbs_g == 32
    assert facts.sodium_mg == 1200
    # Decimal point survives coercion
    assert facts.sugar_g == 12.5
    assert facts.fiber_g is None


def test_extract_does_not_parse_dom(ld_json_page):
    page = Page(url="https://example.com/p", html=ld_json_page(PANCAKES))
    assert extract(page) is not None
    assert page.dom_parsed is False


def test_recipe_inside_graph(ld_json_page):
    data = {
        "@context": "https://schema.org",
        "@graph": [
            {"@type": "WebSite", "name": "Food Blog"},
            {"@type": ["Recipe", "NewsArticle"], "name": "Graph Soup", "recipeIngredient": ["1 onion"]},
        ],
    }
    draft = extract(Page(url="https://example.com/soup", html=ld_json_page(data)))
    assert draft.title == "Graph Soup"


def test_recipe_in_top_level_list_and_main_entity():
    assert find_recipe_node([{"@type": "Person"}, {"@type": "Recipe", "name": "A"}])["name"] == "A"
    assert find_recipe_node({"@type": "WebPage", "mainEntity": {"@type": "Recipe", "name": "B"}})["name"] == "B"
    assert find_recipe_node({"@type": "WebPage"}) is None


def test_malformed_block_is_skipped():
    html = """
    <script type="application/ld+json">{ "@type": "Recipe", broken </script>
    <script type="text/javascript">var x = {"@type": "Recipe"};</script>
    <script type="application/ld+json"><!-- {"@type": "Recipe", "name": "Second"} --></script>
    """
    blocks = list(iter_json_blocks(html))
    assert blocks == [{"@type": "Recipe", "name": "Second"}]

    draft = extract(Page(url="https://example.com", html=html))
    assert draft.title == "Second"


@pytest.mark.parametrize("script_type", [
    "application/ld+json;charset=utf-8",
    "application/ld+json; charset=utf-8",
    "Application/LD+JSON",
])
def test_type_attribute_with_parameters(script_type):
    html = f'<script type="{script_type}">{{"@type": "Recipe", "name": "Typed"}}</script>'
    assert list(iter_json_blocks(html)) == [{"@type": "Recipe", "name": "Typed"}]


def test_no_json_returns_none():
    assert extract(Page(url="https://example.com", html="<html><body><p>Hi</p></body></html>")) is None


def test_flatten_instructions_sections():
    raw = [
        {
            "@type": "HowToSection",
            "name": "Dough",
            "itemListElement": [
                {"@type": "HowToStep", "text": "Mix flour and water."},
                {"@type": "HowToStep", "text": "Knead."},
            ],
        },
        {"@type": "HowToStep", "text": "Bake."},
    ]
    assert flatten_instructions(raw) == ["Mix flour and water. Knead.", "Bake."]


@pytest.mark.parametrize("raw,expected", [
    ("Step one.\nStep two.", ["Step one.", "Step two."]),
    (["Plain string step"], ["Plain string step"]),
    (None, []),
    (42, []),
])
def test_flatten_instructions_shapes(raw, expected):
    assert flatten_instructions(raw) == expected


@pytest.mark.parametrize("image,expected", [
    ("https://x/a.jpg", "https://x/a.jpg"),
    (["https://x/a.jpg", "https://x/b.jpg"], "https://x/a.jpg"),
    ({"@type": "ImageObject", "url": "https://x/c.jpg"}, "https://x/c.jpg"),
    ([{"url": ""}, {"contentUrl": "https://x/d.jpg"}], "https://x/d.jpg"),
    (None, None),
])
def test_resolve_image(image, expected):
    assert resolve_image(image) == expected
