"""Configuration for Step 03: Encode BIF file."""

from pydantic import BaseModel, Field


class EncodeBifConfig(BaseModel):
    width: int | None = Field(None, gt=0, description="Header width (None = thumbnail width from extraction)")
    height: int | None = Field(None, gt=0, description="Header height (None = thumbnail height from extraction)")
    output_suffix: str = Field(".bif", description="Suffix of the default output file name")
