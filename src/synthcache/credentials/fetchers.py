"""Token endpoints for providers that authenticate with short-lived credentials.

Each ``fetch_*`` function performs one round trip and returns a
FetchedCredential; each ``get_*`` function wraps it in the credential cache.
"""

import asyncio
import time

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import CredentialError
from .cache import CredentialCache
from .models import BearerTokenCredential, FetchedCredential, SessionCredential

AWS_SESSION_SECONDS = 3600
# Drop AWS sessions ten minutes early so they never lapse mid-call
AWS_SAFETY_MARGIN = 600
TOKEN_SAFETY_MARGIN = 30

IBM_TOKEN_URL = "https://iam.cloud.ibm.com/identity/token"
NUANCE_TOKEN_URL = "https://auth.crt.nuance.com/oauth2/token"
VERBIO_TOKEN_URL = "https://auth.speechcenter.verbio.com:444/api/v1/token"


async def _post_for_json(
    http: httpx.AsyncClient, provider: str, url: str, **kwargs
) -> dict:
    try:
        response = await http.post(url, **kwargs)
    except httpx.HTTPError as e:
        raise CredentialError(
            f"Failed to reach {provider} token endpoint: {e}", provider, None, e
        ) from e

    if response.status_code != 200:
        raise CredentialError(
            f"{provider} token endpoint returned {response.status_code}",
            provider,
            response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        raise CredentialError(
            f"{provider} token endpoint returned invalid JSON", provider, 200, e
        ) from e


def _require(data: dict, field: str, provider: str):
    if field not in data:
        raise CredentialError(f"{provider} token response missing {field}", provider)
    return data[field]


async def fetch_aws_session(
    access_key_id: str | None,
    secret_access_key: str | None,
    region: str,
    role_arn: str | None = None,
) -> FetchedCredential:
    """Obtain temporary AWS credentials from STS.

    Uses AssumeRole when a role ARN is given, GetSessionToken otherwise.

    Raises:
        CredentialError: If STS rejects the request or is unreachable
    """

    # Run synchronous boto3 client in thread to avoid blocking event loop
    def _sync_fetch() -> dict:
        kwargs = {"region_name": region}
        if access_key_id and secret_access_key:
            kwargs["aws_access_key_id"] = access_key_id
            kwargs["aws_secret_access_key"] = secret_access_key
        sts = boto3.client("sts", **kwargs)
        if role_arn:
            return sts.assume_role(
                RoleArn=role_arn,
                RoleSessionName="synthcache",
                DurationSeconds=AWS_SESSION_SECONDS,
            )
        return sts.get_session_token(DurationSeconds=AWS_SESSION_SECONDS)

    try:
        data = await asyncio.to_thread(_sync_fetch)
    except ClientError as e:
        status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        raise CredentialError(f"AWS STS request failed: {e}", "aws", status, e) from e
    except BotoCoreError as e:
        raise CredentialError(f"AWS STS request failed: {e}", "aws", None, e) from e

    creds = data["Credentials"]
    return FetchedCredential(
        credential=SessionCredential(
            provider="aws",
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
        ),
        expires_in=AWS_SESSION_SECONDS,
        safety_margin=AWS_SAFETY_MARGIN,
    )


async def fetch_ibm_token(http: httpx.AsyncClient, api_key: str) -> FetchedCredential:
    """Exchange an IBM Cloud API key for an IAM access token."""
    data = await _post_for_json(
        http,
        "ibm",
        IBM_TOKEN_URL,
        data={"grant_type": "urn:ibm:params:oauth:grant-type:apikey", "apikey": api_key},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    return FetchedCredential(
        credential=BearerTokenCredential(
            provider="ibm", access_token=_require(data, "access_token", "ibm")
        ),
        expires_in=float(_require(data, "expires_in", "ibm")),
        safety_margin=TOKEN_SAFETY_MARGIN,
    )


async def fetch_nuance_token(
    http: httpx.AsyncClient, client_id: str, secret: str, scope: str = "tts"
) -> FetchedCredential:
    """Obtain a Nuance Mix access token with the client credentials grant."""
    data = await _post_for_json(
        http,
        "nuance",
        NUANCE_TOKEN_URL,
        data={"grant_type": "client_credentials", "scope": scope},
        auth=(client_id, secret),
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    return FetchedCredential(
        credential=BearerTokenCredential(
            provider="nuance", access_token=_require(data, "access_token", "nuance")
        ),
        expires_in=float(_require(data, "expires_in", "nuance")),
        safety_margin=TOKEN_SAFETY_MARGIN,
    )


async def fetch_verbio_token(
    http: httpx.AsyncClient, client_id: str, client_secret: str
) -> FetchedCredential:
    """Obtain a Verbio access token.

    Verbio reports an absolute expiration time (epoch seconds) rather than
    a lifetime.
    """
    data = await _post_for_json(
        http,
        "verbio",
        VERBIO_TOKEN_URL,
        json={"client_id": client_id, "client_secret": client_secret},
        headers={"User-Agent": "synthcache"},
    )
    expiration = float(_require(data, "expiration_time", "verbio"))
    return FetchedCredential(
        credential=BearerTokenCredential(
            provider="verbio", access_token=_require(data, "access_token", "verbio")
        ),
        expires_in=expiration - time.time(),
        safety_margin=TOKEN_SAFETY_MARGIN,
    )


async def get_aws_session(
    cache: CredentialCache,
    access_key_id: str | None,
    secret_access_key: str | None,
    region: str,
    role_arn: str | None = None,
) -> SessionCredential:
    """Get temporary AWS credentials, from cache when possible."""
    material = [access_key_id or "", region, role_arn or ""]
    credential = await cache.get_or_fetch(
        "aws",
        material,
        lambda: fetch_aws_session(access_key_id, secret_access_key, region, role_arn),
    )
    return credential  # type: ignore[return-value]


async def get_ibm_token(
    cache: CredentialCache, http: httpx.AsyncClient, api_key: str
) -> BearerTokenCredential:
    """Get an IBM IAM token, from cache when possible."""
    credential = await cache.get_or_fetch(
        "ibm", [api_key], lambda: fetch_ibm_token(http, api_key)
    )
    return credential  # type: ignore[return-value]


async def get_nuance_token(
    cache: CredentialCache,
    http: httpx.AsyncClient,
    client_id: str,
    secret: str,
    scope: str = "tts",
) -> BearerTokenCredential:
    """Get a Nuance access token, from cache when possible."""
    credential = await cache.get_or_fetch(
        "nuance",
        [client_id, secret, scope],
        lambda: fetch_nuance_token(http, client_id, secret, scope),
    )
    return credential  # type: ignore[return-value]


async def get_verbio_token(
    cache: CredentialCache, http: httpx.AsyncClient, client_id: str, client_secret: str
) -> BearerTokenCredential:
    """Get a Verbio access token, from cache when possible."""
    credential = await cache.get_or_fetch(
        "verbio",
        [client_id, client_secret],
        lambda: fetch_verbio_token(http, client_id, client_secret),
    )
    return credential  # type: ignore[return-value]
