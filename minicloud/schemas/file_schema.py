from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional


class ReturnFile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1], description="File identification number")
    title: str = Field(..., examples=["report"], description="Title provided by the owner")
    description: Optional[str] = Field(None, description="Optional description provided by the owner")
    content_type: str = Field(..., examples=["application/pdf"], description="Type detected from the file content")
    size: int = Field(..., examples=[4005], description="File size in bytes")
    short_code: Optional[str] = Field(None, examples=["1a2b3c4d"], description="Public link code, null when private")
    shared: bool = Field(..., description="Whether the file is reachable through a public link")
    uploaded_at: Optional[datetime] = Field(None, examples=["2025-09-03T12:34:56Z"])
