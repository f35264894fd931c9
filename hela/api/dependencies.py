"""Service composition and FastAPI dependencies."""

from dataclasses import dataclass, field

from fastapi import Request

from hela.classification.pipeline import Classifier
from hela.config import Settings
from hela.exceptions import ConfigurationError
from hela.notes.importer import NoteImporter
from hela.query.planner import QueryPlanner
from hela.search.evaluator import SearchEvaluator
from hela.store.service import InMemoryRecordStore, RecordStore


@dataclass
class Services:
    """Long-lived collaborators shared by all requests."""

    classifier: Classifier
    store: RecordStore
    planner: QueryPlanner = field(default_factory=QueryPlanner)
    importer: NoteImporter = field(default_factory=NoteImporter)
    search: SearchEvaluator = field(init=False)

    def __post_init__(self) -> None:
        # Search shares this container's planner.
        self.search = SearchEvaluator(self.planner)


def build_services(settings: Settings) -> Services:
    """Compose the default services from settings.

    Args:
        settings: Application settings.

    Returns:
        Services with HTTP-backed classifier tiers and an in-memory store.
    """
    return Services(
        classifier=Classifier.from_settings(settings),
        store=InMemoryRecordStore(),
    )


def get_services(request: Request) -> Services:
    """Resolve the services attached to the running application.

    Raises:
        ConfigurationError: If the application started without services.
    """
    services: Services | None = getattr(request.app.state, "services", None)
    if services is None:
        raise ConfigurationError("Application services are not initialized")
    return services
