from unittest.mock import patch, AsyncMock

from app.services.page_fetch import PageStatusError

RECIPE_HTML = """
<html><head><script type="application/ld+json">
{"@type": "Recipe", "name": "Tomato Soup", "recipeYield": "2",
 "recipeIngredient": ["4 tomatoes"], "recipeInstructions": ["Simmer."],
 "nutrition": {"calories": "150 kcal"}}
</script></head><body></body></html>
"""


def test_parse_recipe_success(client):
    with patch("app.services.recipe_import.fetch_page", AsyncMock(return_value=RECIPE_HTML)):
        response = client.post("/api/parse-recipe", json={"url": "https://example.com/soup"})

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Tomato Soup"
    assert data["source_url"] == "https://example.com/soup"
    assert data["servings"] == "2"
    assert data["calories"] == 150
    assert "error" not in data


def test_parse_recipe_missing_url(client):
    response = client.post("/api/parse-recipe", json={})
    assert response.status_code == 200
    assert response.json() == {"error": "URL is required"}


def test_parse_recipe_invalid_body(client):
    response = client.post(
        "/api/parse-recipe",
        content="definitely not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 200
    assert response.json() == {"error": "URL is required"}


def test_parse_recipe_wrong_shape(client):
    response = client.post("/api/parse-recipe", json=["https://example.com"])
    assert response.status_code == 200
    assert response.json() == {"error": "URL is required"}


def test_parse_recipe_fetch_failure_is_still_200(client):
    with patch("app.services.recipe_import.fetch_page", AsyncMock(side_effect=PageStatusError(503))):
        response = client.post("/api/parse-recipe", json={"url": "https://example.com/down"})

    assert response.status_code == 200
    assert response.json() == {"error": "Failed to fetch page (HTTP 503)"}


def test_ready(client):
    response = client.get("/api/ready")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "ai_enabled": False, "fdc_configured": True}
