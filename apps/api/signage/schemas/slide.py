"""Slide API schemas."""

from pydantic import BaseModel, StrictStr


class SlideAssetQuery(BaseModel):
    id: StrictStr
    name: StrictStr
