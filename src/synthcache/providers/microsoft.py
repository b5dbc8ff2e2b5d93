"""Microsoft Azure Speech text-to-speech provider implementation."""

from ..errors import ValidationError
from ..formats import R8
from ..markup import wrap_for_voice
from ..models import ProviderAudio, SynthesisRequest, VoiceInfo
from .base import ProviderContext, TTSProvider

OUTPUT_FORMATS = {
    R8: "raw-8khz-16bit-mono-pcm",
    "mp3": "audio-16khz-32kbitrate-mono-mp3",
}


def _endpoint(region: str) -> str:
    return f"https://{region}.tts.speech.microsoft.com"


class MicrosoftProvider(TTSProvider):
    """Azure Speech over REST.

    The service requires SSML with an explicit voice element, so plain text
    and bare ``<speak>`` documents are wrapped before sending. A
    ``deployment_id`` selects a custom neural voice endpoint.
    """

    name = "microsoft"
    required_credentials = ("api_key", "region")
    supports_streaming = True

    def validate(self, request: SynthesisRequest) -> None:
        super().validate(request)
        if not request.voice_or_deployment:
            raise ValidationError("microsoft requires voice or deployment_id")
        if not (request.language or request.deployment_id):
            raise ValidationError("microsoft requires language or deployment_id")

    def streaming_params(self, request: SynthesisRequest) -> dict:
        params = {
            "api_key": request.credentials.get("api_key"),
            "region": request.credentials.get("region"),
        }
        if request.deployment_id:
            params["deploymentId"] = request.deployment_id
        return params

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        credentials = request.credentials
        ssml = wrap_for_voice(
            request.text, request.language or "en-US", request.voice_or_deployment
        )

        url = credentials.get("custom_tts_endpoint_url") or (
            f"{_endpoint(credentials['region'])}/cognitiveservices/v1"
        )
        params = {"deploymentId": request.deployment_id} if request.deployment_id else None

        audio = await self._post(
            context,
            url,
            params=params,
            content=ssml.encode("utf-8"),
            headers={
                "Ocp-Apim-Subscription-Key": credentials["api_key"],
                "Content-Type": "application/ssml+xml",
                "X-Microsoft-OutputFormat": OUTPUT_FORMATS.get(
                    audio_format.extension, OUTPUT_FORMATS["mp3"]
                ),
                "User-Agent": "synthcache",
            },
        )
        return self._audio(audio, audio_format)

    async def list_voices(self, credentials, context) -> list[VoiceInfo]:
        region = credentials.get("region")
        if not region:
            raise ValidationError("microsoft requires region in credentials")
        data = await self._get_json(
            context,
            f"{_endpoint(region)}/cognitiveservices/voices/list",
            headers={"Ocp-Apim-Subscription-Key": credentials.get("api_key", "")},
        )
        return [
            VoiceInfo(
                voice_id=voice["ShortName"],
                name=voice.get("DisplayName") or voice["ShortName"],
                provider=self.name,
                language=voice.get("Locale"),
                gender=voice.get("Gender"),
            )
            for voice in data
        ]
