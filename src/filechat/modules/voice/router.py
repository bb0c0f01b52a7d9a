"""
FileChat Voice - Router.

Speech runs in the browser; these endpoints only validate requests and
hand out the settings to use.
"""

from fastapi import APIRouter

from filechat.deps import require_voice
from filechat.modules.voice.schemas import (
    RecognitionSettings,
    TTSRequest,
    TTSResponse,
    VoiceDefaultsResponse,
    VoiceSettings,
)

router = APIRouter(prefix="/api/voice", tags=["voice"], dependencies=[require_voice])


@router.get("/settings", response_model=VoiceDefaultsResponse)
async def get_voice_settings():
    """Default capture and playback settings."""
    return VoiceDefaultsResponse(recognition=RecognitionSettings(), synthesis=VoiceSettings())


@router.post("/tts", response_model=TTSResponse)
async def text_to_speech(request: TTSRequest):
    """Validate a TTS request and return the effective playback settings."""
    overrides = request.model_dump(exclude={"text"}, exclude_none=True)
    return TTSResponse(settings=VoiceSettings(**overrides))
