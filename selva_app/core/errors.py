"""Domain errors shared by the quiz, profile and recipe layers."""
from typing import List, Optional


class ValidationError(Exception):
    """A quiz answer the user has to correct before moving on."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields or [])


class RemoteSyncError(Exception):
    """Syncing the finalized profile to the server-side profile failed."""
    pass


class GenerationError(Exception):
    """The AI collaborator could not produce a usable answer."""
    pass


class DuplicateRecipeError(Exception):
    """A recipe with the same name is already in the user's saved set."""

    def __init__(self, name: str):
        super().__init__(f"Recipe '{name}' already saved")
        self.name = name
