"""Question catalogue for the onboarding quiz.

Every answer is an enumeration with a display table next to it, so the
result screen, the profile summary and the recipe preference compiler all
read the same labels. The ten steps below are the canonical schema.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Type


class Goal(str, Enum):
    LOSE_WEIGHT = "lose_weight"
    GAIN_MUSCLE = "gain_muscle"
    HEALTH = "health"
    ENERGY = "energy"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    ATHLETE = "athlete"


class StressLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class SleepQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    REGULAR = "regular"
    POOR = "poor"


class Hydration(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    GOOD = "good"
    EXCELLENT = "excellent"


class Protein(str, Enum):
    BEEF = "beef"
    CHICKEN = "chicken"
    PORK = "pork"
    FISH = "fish"
    EGGS = "eggs"
    CHEESE = "cheese"


class Restriction(str, Enum):
    LACTOSE = "lactose"
    GLUTEN = "gluten"
    SEAFOOD = "seafood"
    PORK = "pork"
    EGGS = "eggs"
    NONE = "none"


class Routine(str, Enum):
    REGULAR = "regular"
    FLEXIBLE = "flexible"
    INTERMITTENT = "intermittent"
    FREQUENT = "frequent"


# Goals written by the older profile form
LEGACY_GOALS: Dict[str, Goal] = {
    "lose": Goal.LOSE_WEIGHT,
    "gain": Goal.GAIN_MUSCLE,
    "maintain": Goal.HEALTH,
}


def normalize_goal(value) -> Optional[Goal]:
    """Map quiz or legacy goal strings onto Goal; unknown values give None."""
    if value is None or value == "":
        return None
    if isinstance(value, Goal):
        return value
    if value in LEGACY_GOALS:
        return LEGACY_GOALS[value]
    try:
        return Goal(value)
    except ValueError:
        return None


GOAL_TEXTS = {
    Goal.LOSE_WEIGHT: "Perder peso",
    Goal.GAIN_MUSCLE: "Ganhar massa muscular",
    Goal.HEALTH: "Melhorar a saúde",
    Goal.ENERGY: "Mais energia e disposição",
}

GENDER_TEXTS = {
    Gender.MALE: "Masculino",
    Gender.FEMALE: "Feminino",
}

ACTIVITY_TEXTS = {
    ActivityLevel.SEDENTARY: "🛋️ Sedentário",
    ActivityLevel.LIGHT: "🚶 Leve",
    ActivityLevel.MODERATE: "🏃 Moderado",
    ActivityLevel.ACTIVE: "💪 Ativo",
    ActivityLevel.ATHLETE: "🏆 Atleta",
}

STRESS_TEXTS = {
    StressLevel.LOW: "😌 Baixo",
    StressLevel.MODERATE: "😐 Moderado",
    StressLevel.HIGH: "😓 Alto",
    StressLevel.VERY_HIGH: "🤯 Muito alto",
}

SLEEP_TEXTS = {
    SleepQuality.EXCELLENT: "⭐ Excelente",
    SleepQuality.GOOD: "😊 Boa",
    SleepQuality.REGULAR: "😕 Regular",
    SleepQuality.POOR: "😫 Ruim",
}

HYDRATION_TEXTS = {
    Hydration.LOW: "🥤 Menos de 1L",
    Hydration.MODERATE: "💧 1-1.5L",
    Hydration.GOOD: "💦 1.5-2L",
    Hydration.EXCELLENT: "🌊 Mais de 2L",
}

ROUTINE_TEXTS = {
    Routine.REGULAR: "Horários regulares",
    Routine.FLEXIBLE: "Flexível",
    Routine.INTERMITTENT: "Jejum intermitente",
    Routine.FREQUENT: "Várias refeições ao dia",
}

PROTEIN_TEXTS = {
    Protein.BEEF: "Carne bovina",
    Protein.CHICKEN: "Frango",
    Protein.PORK: "Porco/Bacon",
    Protein.FISH: "Peixes",
    Protein.EGGS: "Ovos",
    Protein.CHEESE: "Queijos",
}

RESTRICTION_TEXTS = {
    Restriction.LACTOSE: "Intolerância à lactose",
    Restriction.GLUTEN: "Intolerância ao glúten",
    Restriction.SEAFOOD: "Alergia a frutos do mar",
    Restriction.PORK: "Não come carne de porco",
    Restriction.EGGS: "Alergia a ovos",
    Restriction.NONE: "Nenhuma restrição",
}


class StepKind(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    PHYSICAL = "physical"


@dataclass(frozen=True)
class QuizStep:
    number: int
    field: str
    kind: StepKind
    title: str
    # None for free-form multiple choice (habits) and the physical step
    choices: Optional[Type[Enum]] = None
    labels: Optional[Dict] = None
    error_message: str = ""


QUIZ_STEPS: Tuple[QuizStep, ...] = (
    QuizStep(1, "goal", StepKind.SINGLE, "Qual é o seu principal objetivo?",
             Goal, GOAL_TEXTS, "Por favor, selecione seu objetivo"),
    QuizStep(2, "physical", StepKind.PHYSICAL, "Seus dados físicos",
             error_message="Por favor, preencha todos os dados físicos"),
    QuizStep(3, "activity_level", StepKind.SINGLE, "Qual é o seu nível de atividade física?",
             ActivityLevel, ACTIVITY_TEXTS, "Por favor, selecione seu nível de atividade"),
    QuizStep(4, "stress_level", StepKind.SINGLE, "Como está seu nível de estresse?",
             StressLevel, STRESS_TEXTS, "Por favor, selecione seu nível de estresse"),
    QuizStep(5, "sleep_quality", StepKind.SINGLE, "Como é a qualidade do seu sono?",
             SleepQuality, SLEEP_TEXTS, "Por favor, selecione sua qualidade de sono"),
    QuizStep(6, "hydration", StepKind.SINGLE, "Quanta água você bebe por dia?",
             Hydration, HYDRATION_TEXTS, "Por favor, selecione seu nível de hidratação"),
    QuizStep(7, "current_habits", StepKind.MULTIPLE, "Quais são seus hábitos alimentares atuais?"),
    QuizStep(8, "favorite_proteins", StepKind.MULTIPLE, "Quais proteínas você prefere?",
             Protein, PROTEIN_TEXTS),
    QuizStep(9, "restrictions", StepKind.MULTIPLE, "Você tem alguma restrição alimentar?",
             Restriction, RESTRICTION_TEXTS),
    QuizStep(10, "routine", StepKind.SINGLE, "Como é a sua rotina de refeições?",
             Routine, ROUTINE_TEXTS, "Por favor, selecione sua rotina"),
)

TOTAL_STEPS = len(QUIZ_STEPS)
# Step number used for the result screen
RESULT_STEP = TOTAL_STEPS + 1


def get_step(number: int) -> QuizStep:
    if not 1 <= number <= TOTAL_STEPS:
        raise ValueError(f"Quiz step must be between 1 and {TOTAL_STEPS}, got {number}")
    return QUIZ_STEPS[number - 1]
