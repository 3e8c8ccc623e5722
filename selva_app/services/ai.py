"""OpenAI-backed recipe generation and ingredient recognition."""
import json
import re
from functools import lru_cache
from typing import Optional

from openai import OpenAI, OpenAIError, RateLimitError
from pydantic import ValidationError as PydanticValidationError

from selva_app.core.config import get_settings
from selva_app.core.errors import GenerationError
from selva_app.core.logger import setup_logger
from selva_app.schemas.schemas import Recipe

logger = setup_logger(__name__)

RECIPE_SYSTEM_PROMPT = """Você é um nutricionista especialista em dietas low-carb, carnívora e Protocolo Selva.
Crie receitas saudáveis focadas em:
- Proteínas de alta qualidade (carnes, peixes, ovos)
- Gorduras saudáveis (azeite, abacate, castanhas)
- Baixo teor de carboidratos
- Sem açúcares refinados ou ultraprocessados

Responda SEMPRE em formato JSON válido com a seguinte estrutura:
{
  "name": "Nome da receita",
  "time": "tempo de preparo (ex: 25min)",
  "calories": "calorias aproximadas (ex: 520kcal)",
  "protein": "proteína aproximada (ex: 48g)",
  "ingredients": ["ingrediente 1", "ingrediente 2", ...],
  "steps": ["passo 1", "passo 2", ...],
  "tip": "dica nutricional ou de preparo"
}"""

IMAGE_SYSTEM_PROMPT = (
    "Você é um assistente que identifica ingredientes em fotos. Liste apenas os ingredientes "
    "que você consegue identificar, separados por vírgula. Seja conciso."
)

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def build_recipe_prompt(ingredients: str, preferences: str = "") -> str:
    prompt = f"Crie uma receita deliciosa e saudável usando principalmente estes ingredientes: {ingredients}\n"
    if preferences:
        prompt += f"Preferências: {preferences}\n"
    prompt += "\nLembre-se de focar em proteínas e gorduras boas, mantendo baixo carboidrato."
    return prompt


def parse_recipe_response(text: Optional[str]) -> Recipe:
    """Extract the recipe JSON, tolerating markdown code fences around it."""
    if not text:
        raise GenerationError("Empty response from the model")
    match = _FENCED_JSON.search(text)
    payload = match.group(1) if match else text.strip()
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Model response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise GenerationError("Model response is not a JSON object")
    try:
        recipe = Recipe.model_validate(data)
    except PydanticValidationError as e:
        raise GenerationError(f"Model response is not a recipe: {e}") from e
    if not recipe.name.strip() or not recipe.ingredients:
        raise GenerationError("Model recipe is missing a name or ingredients")
    return recipe


def as_data_url(image_base64: str) -> str:
    if image_base64.startswith("data:"):
        return image_base64
    return f"data:image/jpeg;base64,{image_base64}"


class RecipeAI:
    """Thin wrapper over the chat completions API; every failure surfaces as GenerationError."""

    def __init__(self, client: Optional[OpenAI] = None, model: str = "gpt-4o-mini"):
        self.client = client
        self.model = model

    @property
    def available(self) -> bool:
        return self.client is not None

    def _complete(self, messages, **kwargs) -> str:
        if self.client is None:
            raise GenerationError("OPENAI_API_KEY is not configured")
        try:
            completion = self.client.chat.completions.create(model=self.model, messages=messages, **kwargs)
        except RateLimitError as e:
            raise GenerationError(f"OpenAI quota exceeded: {e}") from e
        except OpenAIError as e:
            raise GenerationError(f"OpenAI request failed: {e}") from e
        if not completion.choices:
            raise GenerationError("OpenAI returned no choices")
        return completion.choices[0].message.content

    def generate_recipe(self, ingredients: str, preferences: str = "") -> Recipe:
        if not ingredients or not ingredients.strip():
            raise GenerationError("No ingredients given")
        text = self._complete(
            [
                {"role": "system", "content": RECIPE_SYSTEM_PROMPT},
                {"role": "user", "content": build_recipe_prompt(ingredients, preferences)},
            ],
            temperature=0.8,
            max_tokens=1000,
        )
        return parse_recipe_response(text)

    def analyze_image(self, image_base64: str) -> str:
        """Comma-separated ingredients recognized in a photo."""
        if not image_base64:
            raise GenerationError("No image given")
        text = self._complete(
            [
                {"role": "system", "content": IMAGE_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": "Quais ingredientes você consegue identificar nesta imagem?"},
                        {"type": "image_url", "image_url": {"url": as_data_url(image_base64)}},
                    ],
                },
            ],
            max_tokens=200,
        )
        ingredients = (text or "").strip()
        if not ingredients:
            raise GenerationError("No ingredients recognized")
        return ingredients


@lru_cache()
def get_recipe_ai() -> RecipeAI:
    """Shared RecipeAI; without an API key every call falls back."""
    settings = get_settings()
    client = OpenAI(api_key=settings.OPENAI_API_KEY) if settings.OPENAI_API_KEY else None
    if client is None:
        logger.info("OPENAI_API_KEY not set; recipe generation will use fallback recipes")
    return RecipeAI(client=client, model=settings.OPENAI_MODEL)
