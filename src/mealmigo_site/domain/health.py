"""Health profile models gathered by the onboarding quiz and health wizard.

Field names mirror the stored document keys.
"""

# ruff: noqa: N815

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RiskLevel = Literal["low", "moderate", "high"]
SexAtBirth = Literal["male", "female", "intersex", "prefer_not_to_say"]

CONDITIONS: tuple[str, ...] = (
    "hypertension",
    "diabetes",
    "heart_disease",
    "asthma",
    "epilepsy",
    "orthopedic_issues",
    "pregnancy",
    "recent_surgery",
)
ALLERGIES: tuple[str, ...] = ("peanut", "penicillin", "shellfish", "pollen", "lactose")
INJURIES: tuple[str, ...] = ("knee", "ankle", "shoulder", "lower_back", "neck")
EQUIPMENT: tuple[str, ...] = (
    "none",
    "mat",
    "dumbbells",
    "resistance_band",
    "barbell",
    "bike",
    "treadmill",
)


class _Section(BaseModel):
    model_config = ConfigDict(extra="allow")


class ParqPlus(_Section):
    """Seven yes/no PAR-Q+ screening answers."""

    q1_chestPain: bool = False
    q2_dizziness: bool = False
    q3_boneJointProblem: bool = False
    q4_prescriptionMeds: bool = False
    q5_heartCondition: bool = False
    q6_bloodPressureIssue: bool = False
    q7_otherReason: bool = False
    notes: str = ""


class Demographics(_Section):
    birthYear: int | None = None
    sexAtBirth: SexAtBirth | None = None
    heightCm: float | None = None
    weightKg: float | None = None
    country: str | None = None


class TagList(_Section):
    items: list[str] = Field(default_factory=list)
    other: str = ""


class Injuries(_Section):
    items: list[str] = Field(default_factory=list)
    notes: str = ""


class Medication(_Section):
    name: str = ""
    purpose: str | None = None
    dose: str | None = None
    frequency: str | None = None
    startedOn: str | None = None
    notes: str | None = None


class Constraints(_Section):
    hiImpact: bool = True
    overheadLifts: bool = True
    heat: bool = True
    notes: str = ""


class DoctorClearance(_Section):
    hasClearance: bool = False
    clearanceDate: str | None = None
    providerName: str | None = None


class EmergencyContact(_Section):
    name: str | None = None
    relationship: str | None = None
    phone: str | None = None
    countryCode: str | None = None


class Consent(_Section):
    tosAcceptedAt: str | None = None
    healthConsentAt: str | None = None
    shareWithCoach: bool = False


class Fitness(_Section):
    goal: str | None = None
    experienceLevel: str | None = None
    preferredIntensity: str | None = None
    equipment: list[str] = Field(default_factory=list)


class HealthProfile(_Section):
    """Per-user health and onboarding answers."""

    version: int = 1
    completed: bool = False
    riskLevel: RiskLevel = "low"
    demographics: Demographics = Field(default_factory=Demographics)
    parqPlus: ParqPlus = Field(default_factory=ParqPlus)
    conditions: TagList = Field(default_factory=TagList)
    medications: list[Medication] = Field(default_factory=list)
    allergies: TagList = Field(default_factory=TagList)
    injuries: Injuries = Field(default_factory=Injuries)
    constraints: Constraints = Field(default_factory=Constraints)
    doctorClearance: DoctorClearance = Field(default_factory=DoctorClearance)
    emergency: EmergencyContact = Field(default_factory=EmergencyContact)
    consent: Consent = Field(default_factory=Consent)
    fitness: Fitness = Field(default_factory=Fitness)
    createdAt: str | None = None
    updatedAt: str | None = None


Goal = Literal["weight_loss", "muscle_gain", "balanced", "maintenance"]
DietPreference = Literal[
    "no_preference", "vegetarian", "vegan", "pescatarian", "halal", "kosher"
]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]

CUISINES: tuple[str, ...] = (
    "asian",
    "mediterranean",
    "mexican",
    "indian",
    "italian",
    "american",
    "middle_eastern",
    "japanese",
    "korean",
)


class Quiz(BaseModel):
    """Pre-signup quiz answers."""

    heightCm: float | None = None
    weightKg: float | None = None
    birthday: str | None = None
    goal: Goal | None = None
    dietPreference: DietPreference | None = None
    cuisineLikes: list[str] = Field(default_factory=list)
    foodsToAvoid: str | None = None
    cookingTime: Literal["5-10", "10-20", "20-30", "30+"] | None = None
    budget: Literal["low", "medium", "high"] | None = None
    activityLevel: ActivityLevel | None = None


class QuizDraft(BaseModel):
    """Onboarding progress held until the account exists."""

    health_profile: HealthProfile = Field(default_factory=HealthProfile)
    quiz: Quiz = Field(default_factory=Quiz)
    step: int = 0
