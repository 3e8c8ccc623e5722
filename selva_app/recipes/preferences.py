"""Turns a UserProfile into the free-text preference string sent to the recipe model."""
from typing import Optional

from selva_app.quiz.steps import ActivityLevel, Goal, Protein, Restriction, SleepQuality, StressLevel
from selva_app.schemas.schemas import UserProfile

GOAL_DIRECTIVES = {
    Goal.LOSE_WEIGHT: "FOCO EM EMAGRECIMENTO - receita com menos calorias, mais proteína e saciedade",
    Goal.GAIN_MUSCLE: "FOCO EM GANHO DE MASSA - receita rica em proteína e calorias adequadas",
    Goal.HEALTH: "FOCO EM SAÚDE - receita nutritiva e equilibrada",
    Goal.ENERGY: "FOCO EM ENERGIA - receita que proporciona disposição prolongada",
}

PROTEIN_NAMES = {
    Protein.BEEF: "carne bovina",
    Protein.CHICKEN: "frango",
    Protein.PORK: "porco/bacon",
    Protein.FISH: "peixes",
    Protein.EGGS: "ovos",
    Protein.CHEESE: "queijos",
}

RESTRICTION_PHRASES = {
    Restriction.LACTOSE: "intolerância à lactose (EVITAR laticínios)",
    Restriction.GLUTEN: "intolerância ao glúten (EVITAR glúten)",
    Restriction.SEAFOOD: "alergia a frutos do mar (EVITAR peixes e frutos do mar)",
    Restriction.PORK: "não come carne de porco (EVITAR porco e bacon)",
    Restriction.EGGS: "alergia a ovos (EVITAR ovos)",
}

HIGH_STRESS = (StressLevel.HIGH, StressLevel.VERY_HIGH)
POOR_SLEEP = (SleepQuality.POOR, SleepQuality.REGULAR)
VERY_ACTIVE = (ActivityLevel.ATHLETE, ActivityLevel.ACTIVE)

STRESS_CLAUSE = "Pessoa com ALTO ESTRESSE - incluir ingredientes relaxantes e nutritivos. "
SLEEP_CLAUSE = "Qualidade de sono ruim - evitar cafeína, preferir alimentos que ajudam no sono. "
ACTIVITY_CLAUSE = "Pessoa muito ativa - receita com mais proteína para recuperação muscular. "


def _is_set(value) -> bool:
    return bool(value) and value != "any"


def compile_preferences(profile: Optional[UserProfile], meal_type: Optional[str] = None,
                        cook_time: Optional[str] = None) -> str:
    """Build the preference clauses in a fixed order; unknown values are skipped."""
    preferences = ""
    if _is_set(meal_type):
        preferences += f"Tipo de refeição: {meal_type}. "
    if _is_set(cook_time):
        preferences += f"Tempo máximo de preparo: {cook_time} minutos. "

    if profile is None:
        return preferences

    directive = GOAL_DIRECTIVES.get(profile.goal)
    if directive:
        preferences += f"{directive}. "

    proteins = [PROTEIN_NAMES[p] for p in profile.favorite_proteins if p in PROTEIN_NAMES]
    if proteins:
        preferences += f"Proteínas preferidas: {', '.join(proteins)}. "

    restrictions = [RESTRICTION_PHRASES[r] for r in profile.restrictions if r in RESTRICTION_PHRASES]
    if restrictions:
        preferences += f"RESTRIÇÕES IMPORTANTES: {', '.join(restrictions)}. "

    if profile.stress_level in HIGH_STRESS:
        preferences += STRESS_CLAUSE
    if profile.sleep_quality in POOR_SLEEP:
        preferences += SLEEP_CLAUSE
    if profile.activity_level in VERY_ACTIVE:
        preferences += ACTIVITY_CLAUSE
    return preferences
