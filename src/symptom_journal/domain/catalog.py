"""
Symptom catalogue.

Declarative tables describing how entry fields group into body-system
categories, how they are labelled in reports, and the column order of the
CSV export. Report visibility rules are evaluated from these tables only.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from symptom_journal.domain.entry import SymptomEntry


class FieldKind(str, Enum):
    """Kinds of entry fields."""

    SEVERITY = "severity"
    NOTES = "notes"
    TEXT = "text"


class Symptom(BaseModel):
    """
    One reportable item within a category.

    A symptom has a severity field, a notes field, or both. Items without a
    severity (swelling, blood pressure, ...) are free-text only.
    """

    label: str
    short_label: str
    severity: str | None = None
    notes: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name in (self.severity, self.notes) if name)

    def severity_of(self, entry: SymptomEntry) -> int:
        return getattr(entry, self.severity) if self.severity else 0

    def notes_of(self, entry: SymptomEntry) -> str:
        return getattr(entry, self.notes) if self.notes else ""

    def is_reported(self, entry: SymptomEntry) -> bool:
        return self.severity_of(entry) > 0 or bool(self.notes_of(entry))


class Category(BaseModel):
    """A body-system category rendered and suppressed as one block."""

    key: str
    title: str
    short_title: str
    symptoms: tuple[Symptom, ...]

    model_config = ConfigDict(frozen=True)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(name for symptom in self.symptoms for name in symptom.field_names)

    def is_visible(self, entry: SymptomEntry) -> bool:
        """True unless every severity is 0 and every note is empty."""
        return any(symptom.is_reported(entry) for symptom in self.symptoms)


def _rated(label: str, short_label: str, severity: str, notes: str | None) -> Symptom:
    return Symptom(label=label, short_label=short_label, severity=severity, notes=notes)


def _text(label: str, short_label: str, notes: str) -> Symptom:
    return Symptom(label=label, short_label=short_label, notes=notes)


CATEGORIES: tuple[Category, ...] = (
    Category(
        key="head_neuro",
        title="Head / Neurological",
        short_title="Head / Neurological",
        symptoms=(
            _rated("Headache Severity", "Headache Severity", "headache_severity", "headache_notes"),
            _rated("Dizziness Severity", "Dizziness Severity", "dizziness_severity", "dizziness"),
            _rated("Tinnitus Severity", "Tinnitus Severity", "tinnitus_severity", "tinnitus"),
            _rated(
                "Vision Problems Severity",
                "Vision Problems",
                "vision_problems_severity",
                "vision_problems",
            ),
            _rated(
                "Memory Issues Severity", "Memory Issues", "memory_issues_severity", "memory_issues"
            ),
        ),
    ),
    Category(
        key="mental_sleep",
        title="Mental Health / Sleep",
        short_title="Mental Health / Sleep",
        symptoms=(
            _rated("Mood Severity", "Mood", "mood_severity", "mood"),
            _rated("PTSD Severity", "PTSD", "ptsd_severity", "ptsd_symptoms"),
            _rated(
                "Sleep Quality Severity", "Sleep Quality", "sleep_quality_severity", "sleep_quality"
            ),
            _rated("Fatigue Level", "Fatigue", "fatigue_level", None),
        ),
    ),
    Category(
        key="respiratory",
        title="Respiratory / Airway",
        short_title="Respiratory",
        symptoms=(
            _rated("Throat Pain Severity", "Throat Pain", "throat_pain_severity", "throat_pain"),
            _rated("Cough Severity", "Cough", "cough_severity", "cough"),
            _rated(
                "Breathing Problems Severity",
                "Breathing",
                "breathing_problems_severity",
                "breathing_problems",
            ),
        ),
    ),
    Category(
        key="cardio_renal",
        title="Cardio / Renal",
        short_title="Cardio / Renal",
        symptoms=(
            _text("Swelling", "Swelling", "swelling"),
            _text("Urination Issues", "Urination", "urination_issues"),
            _text("Blood Pressure", "Blood Pressure", "blood_pressure"),
        ),
    ),
    Category(
        key="digestive",
        title="GI / Digestive",
        short_title="Digestive",
        symptoms=(
            _rated("Reflux Severity", "Reflux", "reflux_severity", "reflux"),
            _rated(
                "Stomach Pain Severity", "Stomach Pain", "stomach_pain_severity", "stomach_pain"
            ),
            _rated(
                "Bowel Issues Severity", "Bowel Issues", "bowel_issues_severity", "bowel_issues"
            ),
            _rated(
                "Appetite Changes Severity",
                "Appetite",
                "appetite_changes_severity",
                "appetite_changes",
            ),
        ),
    ),
    Category(
        key="skin",
        title="Skin / Extremities",
        short_title="Skin",
        symptoms=(
            _text("Alopecia", "Alopecia", "alopecia"),
            _text("Foot Fungus", "Foot Fungus", "foot_fungus"),
            _text("Dry Hands/Feet", "Dry Hands/Feet", "dry_hands"),
        ),
    ),
    Category(
        key="musculoskeletal",
        title="Musculoskeletal",
        short_title="Musculoskeletal",
        symptoms=(
            _rated("Back Pain Severity", "Back Pain", "back_pain_severity", None),
            _rated(
                "Neck/Shoulder Pain Severity",
                "Neck/Shoulder",
                "neck_shoulder_pain_severity",
                "neck_shoulder_pain",
            ),
            _rated("Flare-ups Severity", "Flare-ups", "flare_ups_severity", "flare_ups"),
            _rated("Limitations Severity", "Limitations", "limitations_severity", "limitations"),
        ),
    ),
    Category(
        key="overall_impact",
        title="Overall Impact",
        short_title="Overall Impact",
        symptoms=(
            _text("Work Days Missed", "Work Days Missed", "work_days_missed"),
            _text("Activities Couldn't Do", "Activities Missed", "activities_couldnt_do"),
            _text("Treatments Used", "Treatments", "treatments_used"),
            _text("Other Notes", "Notes", "other_notes"),
        ),
    ),
)

CATEGORY_KEYS: tuple[str, ...] = tuple(category.key for category in CATEGORIES)


def get_category(key: str) -> Category:
    for category in CATEGORIES:
        if category.key == key:
            return category
    raise KeyError(key)


def visible_categories(entry: SymptomEntry) -> list[Category]:
    """Categories with at least one reported symptom, in report order."""
    return [category for category in CATEGORIES if category.is_visible(entry)]


class Headline(BaseModel):
    """A headline symptom used by summaries and charts."""

    field: str
    name: str
    average_label: str

    model_config = ConfigDict(frozen=True)


HEADACHE = Headline(
    field="headache_severity", name="Headache", average_label="Average Headache Severity"
)
FATIGUE = Headline(field="fatigue_level", name="Fatigue", average_label="Average Fatigue Level")
BACK_PAIN = Headline(
    field="back_pain_severity", name="Back Pain", average_label="Average Back Pain"
)
MOOD = Headline(field="mood_severity", name="Mood", average_label="Average Mood Severity")

HEADLINE_SYMPTOMS: tuple[Headline, ...] = (HEADACHE, FATIGUE, BACK_PAIN, MOOD)
HEADLINE_FIELDS: tuple[str, ...] = tuple(h.field for h in HEADLINE_SYMPTOMS)


# (column header, entry attribute). Order is part of the export format.
CSV_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Date", "date"),
    ("Headache Severity", "headache_severity"),
    ("Headache Notes", "headache_notes"),
    ("Dizziness Severity", "dizziness_severity"),
    ("Dizziness", "dizziness"),
    ("Tinnitus Severity", "tinnitus_severity"),
    ("Tinnitus", "tinnitus"),
    ("Vision Problems Severity", "vision_problems_severity"),
    ("Vision Problems", "vision_problems"),
    ("Memory Issues Severity", "memory_issues_severity"),
    ("Memory Issues", "memory_issues"),
    ("Mood Severity", "mood_severity"),
    ("Mood", "mood"),
    ("PTSD Severity", "ptsd_severity"),
    ("PTSD Symptoms", "ptsd_symptoms"),
    ("Sleep Quality Severity", "sleep_quality_severity"),
    ("Sleep Quality", "sleep_quality"),
    ("Fatigue Level", "fatigue_level"),
    ("Throat Pain Severity", "throat_pain_severity"),
    ("Throat Pain", "throat_pain"),
    ("Cough Severity", "cough_severity"),
    ("Cough", "cough"),
    ("Breathing Problems Severity", "breathing_problems_severity"),
    ("Breathing Problems", "breathing_problems"),
    ("Swelling", "swelling"),
    ("Urination Issues", "urination_issues"),
    ("Blood Pressure", "blood_pressure"),
    ("Reflux Severity", "reflux_severity"),
    ("Reflux", "reflux"),
    ("Stomach Pain Severity", "stomach_pain_severity"),
    ("Stomach Pain", "stomach_pain"),
    ("Bowel Issues Severity", "bowel_issues_severity"),
    ("Bowel Issues", "bowel_issues"),
    ("Appetite Changes Severity", "appetite_changes_severity"),
    ("Appetite Changes", "appetite_changes"),
    ("Alopecia", "alopecia"),
    ("Foot Fungus", "foot_fungus"),
    ("Dry Hands", "dry_hands"),
    ("Back Pain Severity", "back_pain_severity"),
    ("Neck/Shoulder Pain Severity", "neck_shoulder_pain_severity"),
    ("Neck/Shoulder Pain", "neck_shoulder_pain"),
    ("Flare-ups Severity", "flare_ups_severity"),
    ("Flare-ups", "flare_ups"),
    ("Limitations Severity", "limitations_severity"),
    ("Limitations", "limitations"),
    ("Work Days Missed", "work_days_missed"),
    ("Activities Couldn't Do", "activities_couldnt_do"),
    ("Treatments Used", "treatments_used"),
    ("Other Notes", "other_notes"),
)


def field_kind(name: str) -> FieldKind:
    """Classify an entry attribute by its role in the catalogue."""
    for category in CATEGORIES:
        for symptom in category.symptoms:
            if name == symptom.severity:
                return FieldKind.SEVERITY
            if name == symptom.notes:
                return FieldKind.NOTES if symptom.severity else FieldKind.TEXT
    raise KeyError(name)
