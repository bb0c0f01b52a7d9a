"""
FileChat Voice - Schemas.

Settings shared with the browser's speech recognition and synthesis.
"""

from pydantic import BaseModel, Field, field_validator


class VoiceSettings(BaseModel):
    """Playback settings handed to the browser's speech synthesis."""

    voice: str = "default"
    language: str = "en-US"
    rate: float = Field(default=1.0, gt=0.0, le=10.0)
    pitch: float = Field(default=1.0, ge=0.0, le=2.0)
    volume: float = Field(default=0.8, ge=0.0, le=1.0)


class RecognitionSettings(BaseModel):
    """Capture settings for the browser's speech recognition."""

    language: str = "en-US"
    continuous: bool = False
    interim_results: bool = True
    max_alternatives: int = 1


class VoiceDefaultsResponse(BaseModel):
    recognition: RecognitionSettings
    synthesis: VoiceSettings


class TTSRequest(BaseModel):
    text: str = Field(..., max_length=10000)
    voice: str | None = None
    language: str | None = None
    rate: float | None = Field(default=None, gt=0.0, le=10.0)
    pitch: float | None = Field(default=None, ge=0.0, le=2.0)
    volume: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Text is required")
        return value


class TTSResponse(BaseModel):
    success: bool = True
    message: str = "Text-to-speech request processed"
    settings: VoiceSettings
