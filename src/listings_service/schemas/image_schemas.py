from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class ImageUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    alt_text: Optional[str] = Field(None, max_length=255)
    sort_order: Optional[int] = Field(None, ge=0)
    is_main: Optional[StrictBool] = None


class SetMainImageRequest(BaseModel):
    property_id: Optional[str] = Field(None, description="Owning property id or code")
    image_id: Optional[str] = Field(None, description="Image to promote to main")


class ImageDeleteResult(BaseModel):
    deleted_files: int = Field(..., description="Files actually removed from storage")
    failed_files: int = Field(
        ..., description="Files that exist but could not be removed"
    )
