"""Static recipes served when AI generation is unavailable."""
from datetime import datetime
import random
from typing import Dict, List, Optional

from selva_app.schemas.schemas import Recipe

BREAKFAST = "cafe_da_manha"
LUNCH = "almoco"
SNACK = "lanche"
DINNER = "jantar"

# (start hour inclusive, end hour exclusive, category)
TIME_BUCKETS = (
    (0, 5, DINNER),
    (5, 10, BREAKFAST),
    (10, 14, LUNCH),
    (14, 18, SNACK),
    (18, 24, DINNER),
)

FALLBACK_RECIPES: Dict[str, List[Recipe]] = {
    BREAKFAST: [
        Recipe(
            name="Ovos Mexidos com Bacon e Queijo",
            time="15min", calories="450kcal", protein="28g", meal_type=BREAKFAST,
            ingredients=[
                "3 ovos caipiras",
                "4 fatias de bacon",
                "50g de queijo minas",
                "1 colher de manteiga",
                "Sal e pimenta a gosto",
            ],
            steps=[
                "Frite o bacon em frigideira até ficar crocante",
                "Bata os ovos com sal e pimenta",
                "Na gordura do bacon, adicione a manteiga",
                "Despeje os ovos e mexa delicadamente",
                "Adicione queijo e bacon picado",
                "Sirva quando os ovos estiverem cremosos",
            ],
            tip="Os ovos caipiras são mais nutritivos e ricos em ômega-3!",
        ),
        Recipe(
            name="Iogurte Natural com Frutas e Mel",
            time="5min", calories="280kcal", protein="15g", meal_type=BREAKFAST,
            ingredients=[
                "200g de iogurte natural integral",
                "1/2 banana madura",
                "5 morangos frescos",
                "1 colher de mel puro",
                "Canela em pó a gosto",
            ],
            steps=[
                "Coloque o iogurte em uma tigela",
                "Corte as frutas em pedaços",
                "Disponha as frutas sobre o iogurte",
                "Regue com mel puro de abelha",
                "Finalize com canela em pó",
            ],
            tip="O mel é o único adoçante permitido na Dieta da Selva - use com moderação!",
        ),
    ],
    LUNCH: [
        Recipe(
            name="Bife de Picanha Grelhado na Manteiga",
            time="20min", calories="580kcal", protein="52g", meal_type=LUNCH,
            ingredients=[
                "300g de picanha",
                "2 colheres de manteiga",
                "Sal grosso a gosto",
                "Pimenta do reino moída",
                "Alho picado (opcional)",
            ],
            steps=[
                "Retire a carne da geladeira 30 min antes",
                "Tempere generosamente com sal grosso",
                "Aqueça a frigideira com manteiga",
                "Grelhe 4-5 min de cada lado (ao ponto)",
                "Adicione mais manteiga e alho no final",
                "Deixe descansar 5 min antes de cortar",
            ],
            tip="A gordura da picanha é saudável e saborosa - não retire!",
        ),
        Recipe(
            name="Frango Assado com Ervas",
            time="45min", calories="420kcal", protein="48g", meal_type=LUNCH,
            ingredients=[
                "2 sobrecoxas de frango com pele",
                "2 colheres de manteiga derretida",
                "Alecrim e tomilho frescos",
                "4 dentes de alho",
                "Sal e pimenta a gosto",
            ],
            steps=[
                "Tempere o frango com sal, pimenta e ervas",
                "Espalhe manteiga por toda a pele",
                "Disponha os alhos ao redor",
                "Asse a 200°C por 40 minutos",
                "Regue com o molho algumas vezes",
                "Sirva com a pele crocante",
            ],
            tip="A pele do frango é rica em colágeno - não descarte!",
        ),
    ],
    SNACK: [
        Recipe(
            name="Queijo com Frutas e Mel",
            time="5min", calories="320kcal", protein="18g", meal_type=SNACK,
            ingredients=[
                "100g de queijo coalho ou minas",
                "1 maçã pequena fatiada",
                "1 colher de mel",
                "Canela em pó",
            ],
            steps=[
                "Corte o queijo em cubos ou fatias",
                "Fatie a maçã em lâminas finas",
                "Disponha alternando queijo e maçã",
                "Regue com mel",
                "Polvilhe canela por cima",
            ],
            tip="Combinação perfeita de proteína, gordura e doce natural!",
        ),
        Recipe(
            name="Ovos Cozidos com Manteiga",
            time="12min", calories="220kcal", protein="14g", meal_type=SNACK,
            ingredients=[
                "2 ovos caipiras",
                "1 colher de manteiga",
                "Sal e pimenta a gosto",
                "Ervas finas (opcional)",
            ],
            steps=[
                "Cozinhe os ovos por 8-10 minutos",
                "Coloque em água gelada",
                "Descasque e corte ao meio",
                "Adicione uma noz de manteiga em cada",
                "Tempere com sal e pimenta",
            ],
            tip="Ovos são o alimento mais completo da natureza!",
        ),
    ],
    DINNER: [
        Recipe(
            name="Omelete Recheada de Queijo",
            time="15min", calories="420kcal", protein="32g", meal_type=DINNER,
            ingredients=[
                "3 ovos",
                "60g de queijo muçarela",
                "1 colher de manteiga",
                "Sal e pimenta a gosto",
                "Orégano a gosto",
            ],
            steps=[
                "Bata os ovos com sal e pimenta",
                "Derreta a manteiga em frigideira média",
                "Despeje os ovos e deixe cozinhar",
                "Quando firmar embaixo, adicione queijo",
                "Dobre ao meio",
                "Sirva com orégano por cima",
            ],
            tip="Jantar leve e proteico - ideal para boa noite de sono!",
        ),
        Recipe(
            name="Salmão Grelhado com Limão",
            time="18min", calories="380kcal", protein="42g", meal_type=DINNER,
            ingredients=[
                "200g de filé de salmão",
                "Suco de 1 limão",
                "2 colheres de manteiga",
                "Sal e pimenta a gosto",
                "Endro fresco",
            ],
            steps=[
                "Tempere o salmão com sal e limão",
                "Aqueça a frigideira com manteiga",
                "Grelhe 4 minutos de cada lado",
                "Adicione mais manteiga derretida",
                "Finalize com endro fresco",
            ],
            tip="Salmão é rico em ômega-3 - excelente para o cérebro!",
        ),
    ],
}


def category_for_hour(hour: int) -> str:
    for start, end, category in TIME_BUCKETS:
        if start <= hour < end:
            return category
    raise ValueError(f"Hour out of range: {hour}")


def pick_fallback_recipe(now: Optional[datetime] = None, rng=random) -> Recipe:
    """Random recipe of the meal category matching the local hour."""
    now = now or datetime.now()
    recipes = FALLBACK_RECIPES[category_for_hour(now.hour)]
    return rng.choice(recipes).model_copy(deep=True)
