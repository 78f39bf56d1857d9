"""Domain business rules and constants."""

from typing import Final

DATE_FORMAT: Final = "%Y-%m-%d"
TODAY_KEYWORD: Final = "now"

# Creation is journaled as a transition out of the deleted state
CREATION_DELETED_OLD: Final = True
