"""U.S. state name <-> two-letter abbreviation normalization."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

US_STATE_ABBREVIATIONS: Mapping[str, str] = MappingProxyType({
    "Alabama": "AL", "Alaska": "AK", "Arizona": "AZ", "Arkansas": "AR",
    "California": "CA", "Colorado": "CO", "Connecticut": "CT",
    "Delaware": "DE", "Florida": "FL", "Georgia": "GA", "Hawaii": "HI",
    "Idaho": "ID", "Illinois": "IL", "Indiana": "IN", "Iowa": "IA",
    "Kansas": "KS", "Kentucky": "KY", "Louisiana": "LA", "Maine": "ME",
    "Maryland": "MD", "Massachusetts": "MA", "Michigan": "MI",
    "Minnesota": "MN", "Mississippi": "MS", "Missouri": "MO",
    "Montana": "MT", "Nebraska": "NE", "Nevada": "NV",
    "New Hampshire": "NH", "New Jersey": "NJ", "New Mexico": "NM",
    "New York": "NY", "North Carolina": "NC", "North Dakota": "ND",
    "Ohio": "OH", "Oklahoma": "OK", "Oregon": "OR", "Pennsylvania": "PA",
    "Rhode Island": "RI", "South Carolina": "SC", "South Dakota": "SD",
    "Tennessee": "TN", "Texas": "TX", "Utah": "UT", "Vermont": "VT",
    "Virginia": "VA", "Washington": "WA", "West Virginia": "WV",
    "Wisconsin": "WI", "Wyoming": "WY", "District of Columbia": "DC",
})


class StateNormalizer:
    """Converts between full U.S. state names and postal abbreviations.

    Args:
        table: Immutable mapping of full state name to abbreviation.
    """

    def __init__(self, table: Mapping[str, str] = US_STATE_ABBREVIATIONS) -> None:
        self._to_abbr = MappingProxyType(
            {name.casefold(): abbr for name, abbr in table.items()}
        )
        self._to_name = MappingProxyType(
            {abbr.upper(): name for name, abbr in table.items()}
        )

    def to_abbreviation(self, name_or_abbr: str) -> str:
        """Return the two-letter code for a state name.

        Short all-caps input ("NH", "NY") is assumed to already be an
        abbreviation. Unknown names come back unchanged.
        """
        if not name_or_abbr:
            return ""
        if len(name_or_abbr) <= 3 and name_or_abbr.upper() == name_or_abbr:
            return name_or_abbr
        return self._to_abbr.get(name_or_abbr.casefold(), name_or_abbr)

    def to_state_name(self, abbr: str) -> str:
        """Return the full state name for an abbreviation, or the input."""
        if not abbr:
            return ""
        return self._to_name.get(abbr.strip().upper(), abbr)

    def same_state(self, a: str, b: str) -> bool:
        """Compare two state strings, ignoring case and name/abbr form."""
        if not a or not b:
            return False
        if a.casefold() == b.casefold():
            return True
        return self.to_abbreviation(a).casefold() == self.to_abbreviation(b).casefold()


_default = StateNormalizer()


def to_abbreviation(name_or_abbr: str) -> str:
    """Module-level shortcut using the built-in 51-entry table."""
    return _default.to_abbreviation(name_or_abbr)
