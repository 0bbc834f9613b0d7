"""
Base observer interface for all row observers.

All observers must inherit from AbstractObserver and implement the process() method.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from src.core.errors import CoercionError
from src.observability.logger import get_logger

if TYPE_CHECKING:
    from src.core.subject.row_context import RowContext


logger = get_logger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


class AbstractObserver(ABC):
    """
    Abstract base class for all row observers.

    Each observer declares a unique name and the names of the observers
    that must have run before it for the same row. The subject uses
    these declarations to order the observers.
    """

    name: str = ""
    requires: tuple[str, ...] = ()

    def handle(self, context: "RowContext") -> None:
        """
        Run the observer for the row in the passed context.

        Args:
            context: State of the row being imported
        """
        self.process(context)

    @abstractmethod
    def process(self, context: "RowContext") -> None:
        """
        Process the observer's business logic.

        Args:
            context: State of the row being imported
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name}, requires={self.requires})"


class AbstractProductImportObserver(AbstractObserver):
    """Base class for observers that import one product per SKU and batch."""

    def has_been_processed(self, context: "RowContext") -> bool:
        """
        Query whether the row's SKU has already been imported in this batch.

        Raises:
            MissingKeyError: If the row has no SKU
        """
        sku = context.sku
        if context.subject.has_been_processed(sku):
            logger.debug(
                f"Skipping already processed SKU '{sku}'",
                extra={"observer": self.name, "sku": sku, "row_number": context.row_number},
            )
            return True
        return False

    def build_entity(self, model: type[EntityT], attr: dict[str, Any]) -> EntityT:
        """
        Validate prepared attributes into an entity model.

        Raises:
            CoercionError: If a value breaks a constraint of the model
        """
        try:
            return model(**attr)
        except ValidationError as e:
            error = e.errors()[0]
            field_name = ".".join(str(part) for part in error["loc"]) or model.__name__
            raise CoercionError(
                field_name, field_name, error.get("input"), model.__name__, error["msg"]
            ) from e
