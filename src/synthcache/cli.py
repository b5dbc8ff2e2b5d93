"""Typer CLI definition for synthcache."""

import asyncio
import logging
import shutil
from pathlib import Path

import typer

from .cache.admin import CacheAdmin
from .cache.manager import SynthesisCacheManager
from .cache.storage import CacheStore, RedisCacheStore
from .config import CONFIG_PATH, ConfigError, SynthCacheConfig, generate_config, load_config
from .errors import (
    CacheServiceError,
    CredentialError,
    ProviderError,
    ValidationError,
)
from .models import PurgeResult, SynthesisRequest
from .providers import ProviderRegistry

app = typer.Typer(help="Synthesize speech through cached TTS providers")

DebugOption = typer.Option(
    False, "--debug", help="Show verbose error messages and cache activity"
)


def open_store(config: SynthCacheConfig) -> CacheStore:
    """Connect to the cache service named in the configuration."""
    return RedisCacheStore.from_url(config.redis.url)


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def _load(debug: bool) -> SynthCacheConfig:
    try:
        return load_config()
    except ConfigError as e:
        _fail(e, debug, "Configuration error")


def _fail(error: Exception, debug: bool, label: str = "Error") -> None:
    if debug:
        typer.echo(f"Debug - {label}: {error!r}", err=True)
    else:
        typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1) from None


def _credentials(config: SynthCacheConfig, provider: str) -> dict:
    credentials = config.credentials_for(provider)
    if not credentials:
        credentials = config.credentials_for(ProviderRegistry.resolve(provider))
    return credentials


async def _close(store: CacheStore) -> None:
    close = getattr(store, "close", None)
    if close is not None:
        await close()


@app.command()
def synth(
    text: str = typer.Argument(..., help="Text or SSML to synthesize"),
    provider: str = typer.Option(..., "-p", "--provider", help="TTS provider"),
    voice: str | None = typer.Option(None, "-v", "--voice", help="Voice ID"),
    language: str | None = typer.Option(None, "-l", "--language", help="Language code"),
    engine: str | None = typer.Option(None, "--engine", help="Provider engine"),
    model: str | None = typer.Option(None, "-m", "--model", help="Provider model ID"),
    instructions: str | None = typer.Option(
        None, "--instructions", help="Delivery prompt (OpenAI)"
    ),
    tenant: str | None = typer.Option(None, "--tenant", help="Tenant scoping the cache"),
    salt: str | None = typer.Option(None, "--salt", help="Artifact filename salt"),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Copy the synthesized audio to this file"
    ),
    render: bool = typer.Option(
        False, "--render", help="Always render audio, never hand off to streaming"
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Skip the cache lookup"),
    no_streaming: bool = typer.Option(
        False, "--no-streaming", help="Disable streaming handoff"
    ),
    debug: bool = DebugOption,
) -> None:
    """Synthesize text and print the artifact path (or streaming directive)."""
    _configure_logging(debug)
    config = _load(debug)

    async def _run():
        store = open_store(config)
        try:
            request = SynthesisRequest(
                provider=provider,
                text=text,
                voice=voice,
                language=language,
                engine=engine,
                model=model,
                instructions=instructions,
                tenant=tenant,
                salt=salt,
                credentials=_credentials(config, provider),
                disable_cache=no_cache,
                render_for_caching=render,
                disable_streaming=no_streaming,
            )
            async with SynthesisCacheManager(store, config) as manager:
                return await manager.get_or_synthesize(request)
        finally:
            await _close(store)

    try:
        result = asyncio.run(_run())
    except ValidationError as e:
        _fail(e, debug, "Validation error")
    except CredentialError as e:
        _fail(e, debug, "Credential error")
    except ProviderError as e:
        _fail(e, debug, "Provider error")
    except OSError as e:
        _fail(e, debug, "File system error")

    if result.is_streaming:
        typer.echo(result.directive)
        return

    if output and result.artifact_path:
        shutil.copyfile(result.artifact_path, output)
        typer.echo(f"Audio saved to {output}")

    origin = "cache" if result.served_from_cache else f"{provider} ({result.elapsed_ms}ms)"
    typer.echo(f"{result.artifact_path} [{result.extension} @ {result.sample_rate}Hz] from {origin}")


@app.command()
def purge(
    tenant: str | None = typer.Option(None, "--tenant", help="Purge only this tenant"),
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="Purge the single entry for this provider"
    ),
    voice: str | None = typer.Option(None, "-v", "--voice", help="Voice of the entry"),
    language: str | None = typer.Option(None, "-l", "--language", help="Language of the entry"),
    engine: str | None = typer.Option(None, "--engine", help="Engine of the entry"),
    model: str | None = typer.Option(None, "-m", "--model", help="Model of the entry"),
    text: str | None = typer.Option(None, "--text", help="Text of the entry"),
    credentials: bool = typer.Option(
        False, "--credentials", help="Purge cached provider credentials instead"
    ),
    debug: bool = DebugOption,
) -> None:
    """Purge cached synthesis results.

    With --provider or --text only the single entry those fields (and
    --tenant) identify is removed.
    """
    _configure_logging(debug)
    config = _load(debug)

    async def _run() -> PurgeResult:
        store = open_store(config)
        try:
            admin = CacheAdmin(store)
            if credentials:
                return await admin.purge_credentials()
            if provider or text:
                return await admin.purge_one(
                    tenant=tenant,
                    provider=provider,
                    language=language,
                    voice=voice,
                    engine=engine,
                    model=model,
                    text=text,
                )
            if tenant:
                return await admin.purge_by_tenant(tenant)
            return await admin.purge_all()
        finally:
            await _close(store)

    result = asyncio.run(_run())
    if result.error:
        typer.echo(f"Error: {result.error} (purged {result.purged_count})", err=True)
        raise typer.Exit(1)
    typer.echo(f"Purged {result.purged_count} entries")


@app.command()
def size(
    pattern: str | None = typer.Option(None, "--pattern", help="Key pattern to count"),
    debug: bool = DebugOption,
) -> None:
    """Count cached synthesis results."""
    _configure_logging(debug)
    config = _load(debug)

    async def _run() -> int:
        store = open_store(config)
        try:
            return await CacheAdmin(store).size_of(pattern)
        finally:
            await _close(store)

    try:
        count = asyncio.run(_run())
    except CacheServiceError as e:
        _fail(e, debug, "Cache service error")
    typer.echo(str(count))


@app.command()
def voices(
    provider: str = typer.Option(..., "-p", "--provider", help="TTS provider"),
    debug: bool = DebugOption,
) -> None:
    """List voices offered by a provider."""
    _configure_logging(debug)
    config = _load(debug)

    async def _run():
        store = open_store(config)
        try:
            async with SynthesisCacheManager(store, config) as manager:
                return await manager.list_voices(provider, _credentials(config, provider))
        finally:
            await _close(store)

    try:
        voice_list = asyncio.run(_run())
    except ValidationError as e:
        _fail(e, debug, "Validation error")
    except (CredentialError, ProviderError) as e:
        _fail(e, debug, "Failed to list voices")

    for voice in voice_list:
        details = ", ".join(v for v in (voice.language, voice.gender) if v)
        suffix = f" ({details})" if details else ""
        typer.echo(f"{voice.voice_id}\t{voice.name}{suffix}")


@app.command("init-config")
def init_config(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write the default configuration file."""
    if CONFIG_PATH.exists() and not force:
        typer.echo(f"Config already exists at {CONFIG_PATH} (use --force to overwrite)")
        raise typer.Exit(1)
    path = generate_config(CONFIG_PATH)
    typer.echo(f"Wrote default config to {path}")
