"""Pydantic schemas for the chat endpoint."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ChatRequest(BaseModel):
    """Inbound chat message from the site visitor."""

    model_config = ConfigDict(json_schema_extra={"examples": [{"message": "What has Lisa built with Supabase?"}]})

    message: StrictStr = Field(
        ...,
        min_length=1,
        description="The visitor's question for the persona assistant.",
    )
