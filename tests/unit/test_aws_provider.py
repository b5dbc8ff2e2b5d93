"""Unit tests for the Amazon Polly provider."""

import io
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from synthcache.config import SynthCacheConfig
from synthcache.credentials import CredentialCache
from synthcache.errors import ProviderError
from synthcache.models import AudioFormat, SynthesisRequest
from synthcache.providers import ProviderContext
from synthcache.providers.aws import PollyProvider
from test_helpers import InMemoryCacheStore

STS_RESPONSE = {
    "Credentials": {"AccessKeyId": "ASIA", "SecretAccessKey": "tmp", "SessionToken": "st"}
}


def make_context(store: InMemoryCacheStore) -> ProviderContext:
    return ProviderContext(
        http=MagicMock(),
        credential_cache=CredentialCache(store),
        config=SynthCacheConfig(),
        audio_format=AudioFormat("mp3", 24000),
    )


def fake_clients(polly: MagicMock, sts: MagicMock):
    def factory(service: str, **kwargs):
        return {"polly": polly, "sts": sts}[service]

    return factory


class TestPollyProvider:
    """Test Polly synthesis through boto3."""

    @pytest.mark.asyncio
    async def test_synthesize_with_session_credentials(self, store) -> None:
        polly = MagicMock()
        polly.synthesize_speech.return_value = {"AudioStream": io.BytesIO(b"mp3")}
        sts = MagicMock()
        sts.get_session_token.return_value = STS_RESPONSE

        request = SynthesisRequest(
            provider="polly",
            text="<speak>Hi</speak>",
            voice="Joanna",
            engine="neural",
            language="en-US",
            credentials={"access_key_id": "AK", "secret_access_key": "SK", "region": "eu-west-1"},
        )
        with patch("boto3.client", side_effect=fake_clients(polly, sts)) as client:
            audio = await PollyProvider().synthesize(request, make_context(store))

        assert audio.audio == b"mp3"
        params = polly.synthesize_speech.call_args.kwargs
        assert params["TextType"] == "ssml"
        assert params["Engine"] == "neural"
        assert params["SampleRate"] == "24000"
        polly_kwargs = client.call_args_list[-1].kwargs
        assert polly_kwargs["aws_session_token"] == "st"
        assert polly_kwargs["region_name"] == "eu-west-1"

    @pytest.mark.asyncio
    async def test_session_reused_across_calls(self, store) -> None:
        polly = MagicMock()
        polly.synthesize_speech.side_effect = lambda **kw: {"AudioStream": io.BytesIO(b"a")}
        sts = MagicMock()
        sts.get_session_token.return_value = STS_RESPONSE
        request = SynthesisRequest(
            provider="aws", text="Hi", voice="Joanna",
            credentials={"access_key_id": "AK", "secret_access_key": "SK"},
        )
        with patch("boto3.client", side_effect=fake_clients(polly, sts)):
            provider = PollyProvider()
            await provider.synthesize(request, make_context(store))
            await provider.synthesize(request, make_context(store))

        assert sts.get_session_token.call_count == 1
        assert polly.synthesize_speech.call_count == 2

    @pytest.mark.asyncio
    async def test_default_chain_skips_sts(self, store) -> None:
        polly = MagicMock()
        polly.synthesize_speech.return_value = {"AudioStream": io.BytesIO(b"mp3")}
        sts = MagicMock()
        request = SynthesisRequest(provider="aws", text="Hi", voice="Joanna")
        with patch("boto3.client", side_effect=fake_clients(polly, sts)):
            await PollyProvider().synthesize(request, make_context(store))
        sts.get_session_token.assert_not_called()
        assert store.data == {}

    @pytest.mark.asyncio
    async def test_client_error_mapped(self, store) -> None:
        polly = MagicMock()
        polly.synthesize_speech.side_effect = ClientError(
            {"Error": {"Code": "InvalidSsmlException", "Message": "bad"},
             "ResponseMetadata": {"HTTPStatusCode": 400}},
            "SynthesizeSpeech",
        )
        request = SynthesisRequest(provider="aws", text="Hi", voice="Joanna")
        with patch("boto3.client", side_effect=fake_clients(polly, MagicMock())):
            with pytest.raises(ProviderError) as exc_info:
                await PollyProvider().synthesize(request, make_context(store))
        assert exc_info.value.status_code == 400
        assert exc_info.value.provider == "aws"

    @pytest.mark.asyncio
    async def test_list_voices(self, store) -> None:
        polly = MagicMock()
        polly.describe_voices.return_value = {
            "Voices": [{"Id": "Joanna", "Name": "Joanna", "LanguageCode": "en-US",
                        "Gender": "Female"}]
        }
        with patch("boto3.client", side_effect=fake_clients(polly, MagicMock())):
            voices = await PollyProvider().list_voices({}, make_context(store))
        assert voices[0].voice_id == "Joanna"
        assert voices[0].language == "en-US"
