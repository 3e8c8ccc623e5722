"""Display texts for a finished quiz."""
from selva_app.core.utils import bmi_category
from selva_app.quiz.steps import (
    ACTIVITY_TEXTS, GENDER_TEXTS, GOAL_TEXTS, HYDRATION_TEXTS, PROTEIN_TEXTS,
    ROUTINE_TEXTS, SLEEP_TEXTS, STRESS_TEXTS,
)
from selva_app.schemas.schemas import ProfileSummary, UserProfile

UNDEFINED = "Não definido"


def _kg(value: float) -> str:
    """80.0 -> '80', 79.5 -> '79.5'."""
    return f"{value:g}"


def weight_goal_text(weight, goal_weight) -> str:
    if weight and goal_weight:
        diff = weight - goal_weight
        if diff > 0:
            return f"{_kg(weight)}kg → {_kg(goal_weight)}kg (-{diff:.1f}kg)"
        if diff < 0:
            return f"{_kg(weight)}kg → {_kg(goal_weight)}kg (+{abs(diff):.1f}kg)"
        return f"Manter {_kg(weight)}kg"
    if weight:
        return f"Peso atual: {_kg(weight)}kg"
    return UNDEFINED


def describe_profile(profile: UserProfile) -> ProfileSummary:
    if profile.age and profile.gender and profile.height:
        physical = f"{profile.age} anos, {GENDER_TEXTS[profile.gender]}, {profile.height}cm"
    else:
        physical = "Não informado"

    if profile.bmi:
        bmi_text = f"{profile.bmi:.1f} ({bmi_category(profile.bmi)})"
    else:
        bmi_text = "Não calculado"

    if profile.favorite_proteins:
        proteins = ", ".join(PROTEIN_TEXTS[p] for p in profile.favorite_proteins)
    else:
        proteins = "Todas as proteínas"

    return ProfileSummary(
        goal_text=GOAL_TEXTS.get(profile.goal, UNDEFINED),
        physical_data_text=physical,
        bmi_text=bmi_text,
        weight_goal_text=weight_goal_text(profile.weight, profile.goal_weight),
        activity_text=ACTIVITY_TEXTS.get(profile.activity_level, UNDEFINED),
        stress_text=STRESS_TEXTS.get(profile.stress_level, UNDEFINED),
        sleep_text=SLEEP_TEXTS.get(profile.sleep_quality, UNDEFINED),
        hydration_text=HYDRATION_TEXTS.get(profile.hydration, UNDEFINED),
        routine_text=ROUTINE_TEXTS.get(profile.routine, UNDEFINED),
        proteins_text=proteins,
    )
