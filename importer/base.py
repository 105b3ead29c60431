"""Abstract base class for session importers."""

from abc import ABC, abstractmethod

from timetable.models import Session


class BaseImporter(ABC):
    """Interface for loading sessions from an external source.
    
    Extend this class to support further source formats (spreadsheets,
    portal exports, etc.). The result is meant to be handed wholesale to
    ``ScheduleStore.set_session_list``.
    """
    
    @abstractmethod
    def load(self, source: str) -> list[Session]:
        """Read sessions from a source.
        
        Args:
            source: Path to the source file.
            
        Returns:
            Sessions in source order.
        """
        pass
