"""
Symptom entry domain model and persisted schema.

One entry records a single day's symptom severities (0-10) and free-text
notes. A severity of 0 or an empty note means "not reported", not
"reported as zero".
"""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from symptom_journal.utils.timezone_utils import to_utc, utc_now


class SymptomEntry(BaseModel):
    """
    A dated symptom record.

    Persisted keys are camelCase aliases of the attribute names. Every
    symptom field has a default so files written before a field existed
    still load.
    """

    id: UUID = Field(default_factory=uuid4, description="Opaque entry identifier")
    date: datetime = Field(default_factory=utc_now, description="Entry timestamp (UTC)")

    # Head / Neurological
    headache_severity: int = 0
    headache_notes: str = ""
    dizziness_severity: int = 0
    dizziness: str = ""
    tinnitus_severity: int = 0
    tinnitus: str = ""
    vision_problems_severity: int = 0
    vision_problems: str = ""
    memory_issues_severity: int = 0
    memory_issues: str = ""

    # Mental Health / Sleep
    mood_severity: int = 0
    mood: str = ""
    ptsd_severity: int = 0
    ptsd_symptoms: str = ""
    sleep_quality_severity: int = 0
    sleep_quality: str = ""
    fatigue_level: int = 0

    # Respiratory / Airway
    throat_pain_severity: int = 0
    throat_pain: str = ""
    cough_severity: int = 0
    cough: str = ""
    breathing_problems_severity: int = 0
    breathing_problems: str = ""

    # Cardio / Renal
    swelling: str = ""
    urination_issues: str = ""
    blood_pressure: str = ""

    # GI / Digestive
    reflux_severity: int = 0
    reflux: str = ""
    stomach_pain_severity: int = 0
    stomach_pain: str = ""
    bowel_issues_severity: int = 0
    bowel_issues: str = ""
    appetite_changes_severity: int = 0
    appetite_changes: str = ""

    # Skin / Extremities
    alopecia: str = ""
    foot_fungus: str = ""
    dry_hands: str = ""

    # Musculoskeletal
    back_pain_severity: int = 0
    neck_shoulder_pain_severity: int = 0
    neck_shoulder_pain: str = ""
    flare_ups_severity: int = 0
    flare_ups: str = ""
    limitations_severity: int = 0
    limitations: str = ""

    # Overall Impact
    work_days_missed: str = ""
    activities_couldnt_do: str = ""
    treatments_used: str = ""
    other_notes: str = ""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return to_utc(value)

    @field_serializer("date")
    def _serialize_date(self, value: datetime) -> str:
        return value.isoformat().replace("+00:00", "Z")

    def to_dict(self) -> dict[str, Any]:
        """
        Convert entry to its persisted dictionary representation.

        Returns:
            JSON-compatible dictionary keyed by the camelCase schema names.
        """
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SymptomEntry":
        """Build an entry from its persisted dictionary representation."""
        return cls.model_validate(data)
