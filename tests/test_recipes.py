"""Tests for fallback recipes, suggestions and AI response handling"""
import json
import random
from datetime import datetime

import pytest
from openai import OpenAIError

from conftest import fake_openai
from selva_app.core.errors import GenerationError
from selva_app.recipes.fallback import (
    BREAKFAST, DINNER, FALLBACK_RECIPES, LUNCH, SNACK, category_for_hour, pick_fallback_recipe,
)
from selva_app.recipes.suggestions import suggestions_for
from selva_app.services.ai import RecipeAI, as_data_url, build_recipe_prompt, parse_recipe_response

RECIPE_JSON = {
    "name": "Frango na Manteiga",
    "time": "25min",
    "calories": "520kcal",
    "protein": "48g",
    "ingredients": ["frango", "manteiga"],
    "steps": ["Tempere", "Grelhe"],
    "tip": "Use sobrecoxa",
}


@pytest.mark.parametrize("hour,category", [
    (0, DINNER), (4, DINNER), (5, BREAKFAST), (9, BREAKFAST), (10, LUNCH),
    (13, LUNCH), (14, SNACK), (17, SNACK), (18, DINNER), (23, DINNER),
])
def test_time_buckets(hour, category):
    assert category_for_hour(hour) == category


def test_every_category_has_two_recipes():
    assert sorted(FALLBACK_RECIPES) == sorted([BREAKFAST, LUNCH, SNACK, DINNER])
    assert all(len(recipes) == 2 for recipes in FALLBACK_RECIPES.values())


def test_pick_fallback_recipe_matches_hour():
    """Test the picked recipe belongs to the current meal category"""
    recipe = pick_fallback_recipe(datetime(2024, 1, 1, 7, 30), rng=random.Random(1))
    assert recipe.meal_type == BREAKFAST
    assert recipe.name in [r.name for r in FALLBACK_RECIPES[BREAKFAST]]


def test_pick_fallback_recipe_returns_copy():
    recipe = pick_fallback_recipe(datetime(2024, 1, 1, 12, 0))
    recipe.ingredients.append("extra")
    assert all("extra" not in r.ingredients for r in FALLBACK_RECIPES[LUNCH])


def test_suggestions_per_goal():
    assert suggestions_for("gain_muscle")[1].name == "Picanha na Manteiga com Ovos Fritos"
    assert suggestions_for("lose")[0].name == "Omelete de Ervas com Queijo"
    assert len(suggestions_for(None)) == 3
    assert suggestions_for("unknown") == suggestions_for("lose_weight")


def test_parse_plain_json():
    recipe = parse_recipe_response(json.dumps(RECIPE_JSON))
    assert recipe.name == "Frango na Manteiga"
    assert recipe.ingredients == ["frango", "manteiga"]


def test_parse_fenced_json():
    """Test markdown code fences around the JSON are tolerated"""
    text = "Aqui está:\n```json\n" + json.dumps(RECIPE_JSON) + "\n```"
    assert parse_recipe_response(text).time == "25min"
    bare = "```\n" + json.dumps(RECIPE_JSON) + "\n```"
    assert parse_recipe_response(bare).protein == "48g"


@pytest.mark.parametrize("text", [
    None,
    "",
    "not json at all",
    "[1, 2, 3]",
    json.dumps({**RECIPE_JSON, "ingredients": []}),
    json.dumps({"time": "10min"}),
])
def test_parse_rejects_bad_responses(text):
    with pytest.raises(GenerationError):
        parse_recipe_response(text)


def test_prompt_includes_preferences():
    prompt = build_recipe_prompt("ovos, bacon", "FOCO EM SAÚDE - receita nutritiva e equilibrada. ")
    assert "ovos, bacon" in prompt
    assert "Preferências: FOCO EM SAÚDE" in prompt
    assert "Preferências" not in build_recipe_prompt("ovos")


def test_data_url():
    assert as_data_url("abc") == "data:image/jpeg;base64,abc"
    assert as_data_url("data:image/png;base64,abc") == "data:image/png;base64,abc"


def test_generate_without_client_raises():
    with pytest.raises(GenerationError):
        RecipeAI(client=None).generate_recipe("ovos")


def test_generate_with_client():
    """Test the model reply is parsed and the prompt carries the preferences"""
    client = fake_openai("```json\n" + json.dumps(RECIPE_JSON) + "\n```")
    ai = RecipeAI(client=client, model="gpt-4o-mini")
    recipe = ai.generate_recipe("frango", "Tipo de refeição: jantar. ")
    assert recipe.name == "Frango na Manteiga"
    call = client.chat.completions.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert "Tipo de refeição: jantar." in call["messages"][1]["content"]


def test_generate_api_error_becomes_generation_error():
    ai = RecipeAI(client=fake_openai(OpenAIError("quota")))
    with pytest.raises(GenerationError):
        ai.generate_recipe("frango")


def test_generate_requires_ingredients():
    ai = RecipeAI(client=fake_openai(json.dumps(RECIPE_JSON)))
    with pytest.raises(GenerationError):
        ai.generate_recipe("   ")


def test_analyze_image():
    client = fake_openai(" ovos, tomate, queijo ")
    ai = RecipeAI(client=client)
    assert ai.analyze_image("abc") == "ovos, tomate, queijo"
    content = client.chat.completions.calls[0]["messages"][1]["content"]
    assert content[1]["image_url"]["url"] == "data:image/jpeg;base64,abc"
