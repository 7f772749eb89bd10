"""Engine result models — what each engine hands back to the caller.

Sterilization engines return a WHO-MEC style classification
(:class:`FemaleSterilizationResult`, :class:`MaleSterilizationResult`).
The natural-method screen returns a :class:`FABEligibilityResult` rating the
symptoms-based and calendar-based methods separately.
The fertility engines return a :class:`FertilityResult` whose date fields
are filled only once both complete cycle data and an LMP date exist.

Results are created once per evaluation and never mutated.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from contrasafe_rulesets.models.answer import CycleLength


class Category(str, Enum):
    """Sterilization eligibility category.

    A = Accept, C = Caution, D = Delay, S = Special (referral).
    Restrictiveness order: S > D > C > A.
    """

    A = "A"
    C = "C"
    D = "D"
    S = "S"


# ---------------------------------------------------------------------------
# Sterilization
# ---------------------------------------------------------------------------

class SterilizationResult(BaseModel):
    """Fields shared by both sterilization engines."""

    model_config = ConfigDict(frozen=True)

    category: Category
    category_label: str
    explanation: str
    reasons: Tuple[str, ...] = ()
    sti_advisory: Optional[str] = None


class FemaleSterilizationResult(SterilizationResult):
    clinical_action: str
    # True only when all three counselling confirmations were answered yes
    counselling_confirmed: bool = False


class MaleSterilizationResult(SterilizationResult):
    clinical_recommendation: str
    counselling_alerts: Tuple[str, ...] = ()
    temporary_contraception_recommended: bool = False
    referral_required: bool = False


# ---------------------------------------------------------------------------
# Fertility awareness
# ---------------------------------------------------------------------------

FertilityMethod = Literal["calendar", "sdm"]
DayType = Literal["safe", "fertile", "expected-period"]


class DateWindow(BaseModel):
    """An inclusive date range; ``end`` is ``None`` for an open-ended window.

    ``start_display`` / ``end_display`` are the ``DD/MM/YYYY`` renderings.
    """

    model_config = ConfigDict(frozen=True)

    start: date
    end: Optional[date] = None
    start_display: str
    end_display: Optional[str] = None

    def contains(self, day: date) -> bool:
        if day < self.start:
            return False
        return self.end is None or day <= self.end


class SafeWindow(BaseModel):
    """Lower-risk days on either side of the fertile window.

    ``before_fertile`` is ``None`` when the fertile window starts on day 1.
    """

    model_config = ConfigDict(frozen=True)

    before_fertile: Optional[DateWindow] = None
    after_fertile: DateWindow


class PredictedDate(BaseModel):
    """A predicted calendar date with its long-form rendering."""

    model_config = ConfigDict(frozen=True)

    predicted_date: date
    formatted_date: str


class CalendarDay(BaseModel):
    """One day of the Calendar Method cycle strip."""

    model_config = ConfigDict(frozen=True)

    calendar_date: date
    formatted_date: str
    day_type: DayType
    day_number: int


class FertilityResult(BaseModel):
    """Outcome of the Calendar Method or Standard Days Method calculators.

    Three shapes share this model:

      - statistics-only: incomplete or ineligible cycle data, no dates
      - eligible without LMP: cycle statistics only
      - full: statistics plus fertile/safe windows and predictions
    """

    model_config = ConfigDict(frozen=True)

    method: FertilityMethod
    eligible: bool
    shortest_cycle: Optional[CycleLength] = None
    longest_cycle: Optional[CycleLength] = None
    avg_cycle_length: Optional[int] = None
    earliest_fertile_day: Optional[CycleLength] = None
    latest_fertile_day: Optional[CycleLength] = None
    lmp_date: Optional[date] = None
    fertile_window: Optional[DateWindow] = None
    safe_window: Optional[SafeWindow] = None
    next_period: Optional[PredictedDate] = None
    # Calendar Method only
    recalculation_date: Optional[PredictedDate] = None
    calendar_days: Optional[Tuple[CalendarDay, ...]] = None
    message: str
    educational_message: str
    warning: Optional[str] = None

    @property
    def has_dates(self) -> bool:
        return self.fertile_window is not None


# ---------------------------------------------------------------------------
# Natural methods (fertility awareness based)
# ---------------------------------------------------------------------------

FABMethod = Literal["SYM", "CAL"]
AdvisoryType = Literal["medication-evaluation", "sti", "high-risk-pregnancy"]


class ContributingFactor(BaseModel):
    """A condition and the category it imposes on one method."""

    model_config = ConfigDict(frozen=True)

    condition: str
    category: Category


class FABAdvisory(BaseModel):
    """Counselling note that never changes a method's category."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: AdvisoryType
    message: str


class FABMethodResult(BaseModel):
    """Eligibility of one natural method (categories A, C or D only).

    ``contributing_factors`` lists only the factors at the final category,
    and is empty when the method is accepted.
    """

    model_config = ConfigDict(frozen=True)

    method: FABMethod
    method_name: str
    category: Category
    category_label: str
    explanation: str
    action_required: Optional[str] = None
    contributing_factors: Tuple[ContributingFactor, ...] = ()


class FABEligibilityResult(BaseModel):
    """Outcome of the natural-method screen.

    During pregnancy the methods do not apply: ``not_applicable`` is set
    and both method results are ``None``.
    """

    model_config = ConfigDict(frozen=True)

    not_applicable: bool = False
    not_applicable_message: Optional[str] = None
    sym: Optional[FABMethodResult] = None
    cal: Optional[FABMethodResult] = None
    advisories: Tuple[FABAdvisory, ...] = ()
