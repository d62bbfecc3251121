"""
Study Service Factory
Centralizes wiring the state store and the study service from configuration.
"""

from leitner.application.config import AppConfig
from leitner.application.service import StudyService, demo_cards
from leitner.domain.ports import StudyStateStore
from leitner.infrastructure.memory_store import InMemoryStudyStore


def get_state_store(config: AppConfig) -> StudyStateStore:
    """
    Returns a fresh state store seeded according to config.
    """
    seed = demo_cards() if config.seed_demo_cards else []
    return InMemoryStudyStore(seed_cards=seed, start_day=config.start_day)


def get_study_service(config: AppConfig) -> StudyService:
    """
    Returns a StudyService backed by a new state store.
    """
    return StudyService(get_state_store(config), config)
