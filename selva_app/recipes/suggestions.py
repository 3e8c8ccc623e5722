"""Dashboard recipe suggestions per goal."""
from typing import List, Optional

from selva_app.quiz.steps import Goal, normalize_goal
from selva_app.schemas.schemas import RecipeSuggestion

SUGGESTIONS = {
    Goal.LOSE_WEIGHT: [
        RecipeSuggestion(name="Omelete de Ervas com Queijo", type="Manhã", icon="🍳"),
        RecipeSuggestion(name="Peito de Frango Grelhado com Brócolis", type="Almoço", icon="🍗"),
        RecipeSuggestion(name="Filé de Peixe ao Forno com Azeite", type="Jantar", icon="🐟"),
    ],
    Goal.GAIN_MUSCLE: [
        RecipeSuggestion(name="Ovos Mexidos com Bacon e Queijo", type="Manhã", icon="🥓"),
        RecipeSuggestion(name="Picanha na Manteiga com Ovos Fritos", type="Almoço", icon="🥩"),
        RecipeSuggestion(name="Sobrecoxa de Frango Assada", type="Jantar", icon="🍗"),
    ],
    Goal.HEALTH: [
        RecipeSuggestion(name="Iogurte Natural com Frutas e Mel", type="Manhã", icon="🍯"),
        RecipeSuggestion(name="Salmão Grelhado com Aspargos", type="Almoço", icon="🐟"),
        RecipeSuggestion(name="Mix de Queijos e Oleaginosas", type="Lanche", icon="🧀"),
    ],
    Goal.ENERGY: [
        RecipeSuggestion(name="Ovos Poché com Abacate", type="Manhã", icon="🥑"),
        RecipeSuggestion(name="Bife de Fígado com Cebola", type="Almoço", icon="🥩"),
        RecipeSuggestion(name="Caldo de Carne com Legumes Selva", type="Jantar", icon="🥣"),
    ],
}


def suggestions_for(goal: Optional[str]) -> List[RecipeSuggestion]:
    return list(SUGGESTIONS[normalize_goal(goal) or Goal.LOSE_WEIGHT])
