"""
Design token table types.

Token files are Style-Dictionary shaped: named groups whose leaves are
`{"value": ..., "type": ...}` objects.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TokenValue(BaseModel):
    model_config = ConfigDict(extra="allow")

    value: str | int | float
    type: str | None = None


TokenGroup = dict[str, TokenValue]


class Typography(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    font_family: TokenGroup = Field(default_factory=dict, alias="fontFamily")
    font_size: TokenGroup = Field(default_factory=dict, alias="fontSize")
    font_weight: TokenGroup = Field(default_factory=dict, alias="fontWeight")
    line_height: TokenGroup = Field(default_factory=dict, alias="lineHeight")
    letter_spacing: TokenGroup = Field(default_factory=dict, alias="letterSpacing")


class DesignTokens(BaseModel):
    """
    Loaded token table.

    The typed groups feed the backend scale maps; `raw` keeps the parsed
    document so that `$`-references can address any path in it.
    """

    model_config = ConfigDict(populate_by_name=True)

    spacing: TokenGroup = Field(default_factory=dict)
    size: TokenGroup = Field(default_factory=dict)
    color: TokenGroup = Field(default_factory=dict)
    typography: Typography = Field(default_factory=Typography)
    border_radius: TokenGroup = Field(default_factory=dict, alias="borderRadius")
    shadow: TokenGroup = Field(default_factory=dict)
    raw: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> DesignTokens:
        return cls()
