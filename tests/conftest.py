from datetime import date

import pytest

from contrasafe_rulesets.questionnaire import QuestionnaireFlow
from contrasafe_rulesets.sections import SectionStore

# Fixed "today" so date bounds do not depend on the wall clock
TODAY = date(2024, 1, 20)


@pytest.fixture(scope="session")
def store():
    """Load the bundled SectionStore once for the entire test session."""
    s = SectionStore()
    s.load()
    return s


@pytest.fixture
def flow(store):
    """QuestionnaireFlow over the shared store."""
    return QuestionnaireFlow(store)


@pytest.fixture
def today():
    return TODAY
