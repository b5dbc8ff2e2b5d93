"""Amazon Polly text-to-speech provider implementation."""

import asyncio
from collections.abc import Mapping
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..credentials.fetchers import get_aws_session
from ..errors import ProviderError
from ..models import ProviderAudio, SynthesisRequest, VoiceInfo
from .base import ProviderContext, TTSProvider


class PollyProvider(TTSProvider):
    """Amazon Polly via boto3.

    Credentials may carry ``access_key_id`` / ``secret_access_key`` and
    optionally ``role_arn``. When any of these are present a temporary STS
    session is obtained through the credential cache; otherwise the default
    boto3 credential chain applies.
    """

    name = "aws"
    required_fields = ("voice",)
    max_text_length = 3000

    async def _client_kwargs(
        self, credentials: Mapping[str, Any], context: ProviderContext
    ) -> dict[str, Any]:
        region = credentials.get("region") or "us-east-1"
        kwargs: dict[str, Any] = {"region_name": region}
        key_id = credentials.get("access_key_id")
        secret = credentials.get("secret_access_key")
        role_arn = credentials.get("role_arn")
        if (key_id and secret) or role_arn:
            session = await get_aws_session(
                context.credential_cache, key_id, secret, region, role_arn
            )
            kwargs["aws_access_key_id"] = session.access_key_id
            kwargs["aws_secret_access_key"] = session.secret_access_key
            kwargs["aws_session_token"] = session.session_token
        return kwargs

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        client_kwargs = await self._client_kwargs(request.credentials, context)
        params: dict[str, Any] = {
            "OutputFormat": "mp3",
            "SampleRate": str(audio_format.sample_rate),
            "Text": request.text,
            "TextType": "ssml" if self.is_markup(request) else "text",
            "VoiceId": request.voice,
        }
        if request.engine:
            params["Engine"] = request.engine
        if request.language:
            params["LanguageCode"] = request.language

        # Run synchronous boto3 client in thread to avoid blocking event loop
        def _sync_synthesize() -> bytes:
            polly = boto3.client("polly", **client_kwargs)
            response = polly.synthesize_speech(**params)
            return response["AudioStream"].read()

        try:
            audio = await asyncio.to_thread(_sync_synthesize)
        except ClientError as e:
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            raise ProviderError(f"Polly synthesis failed: {e}", self.name, status, e) from e
        except BotoCoreError as e:
            raise ProviderError(f"Polly synthesis failed: {e}", self.name, None, e) from e

        return self._audio(audio, audio_format)

    async def list_voices(self, credentials, context) -> list[VoiceInfo]:
        client_kwargs = await self._client_kwargs(credentials, context)

        def _sync_describe() -> list[dict]:
            polly = boto3.client("polly", **client_kwargs)
            return polly.describe_voices()["Voices"]

        try:
            voices = await asyncio.to_thread(_sync_describe)
        except ClientError as e:
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            raise ProviderError(f"Failed to list voices: {e}", self.name, status, e) from e
        except BotoCoreError as e:
            raise ProviderError(f"Failed to list voices: {e}", self.name, None, e) from e

        return [
            VoiceInfo(
                voice_id=voice["Id"],
                name=voice.get("Name") or voice["Id"],
                provider=self.name,
                language=voice.get("LanguageCode"),
                gender=voice.get("Gender"),
            )
            for voice in voices
        ]
