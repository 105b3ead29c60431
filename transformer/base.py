"""Abstract base class for session transformers."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Sequence

from timetable.models import Session


class BaseTransformer(ABC):
    """Renders a semester of sessions into an output document.
    
    A transformer lays sessions out on real dates: semester week 1 starts
    at ``start_date`` and a session with weekday ``n`` falls ``n - 1`` days
    into each of its active weeks. ``transform`` builds the document and
    keeps it, so ``save`` can only follow a ``transform`` call.
    """
    
    @abstractmethod
    def transform(self, sessions: Sequence[Session], start_date: date) -> Any:
        """Transform sessions into the target format.
        
        Args:
            sessions: Sessions to transform.
            start_date: First day (Monday) of semester week 1.
            
        Returns:
            Transformed data in the target format.
        """
        pass
    
    @abstractmethod
    def save(self, output_path: str) -> None:
        """Save the transformed data to a file.
        
        Args:
            output_path: Path to the output file.
        """
        pass
