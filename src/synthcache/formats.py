"""Output format policy per provider.

The extension and sample rate are decided before any artifact path is
built, so the cached entry and the written file always agree.
"""

from .models import AudioFormat

MP3 = "mp3"
R8 = "r8"
WAV = "wav"

# Providers that only ever emit 8 kHz signed linear PCM
FIXED_PCM_PROVIDERS = frozenset({"nuance", "nvidia", "verbio"})

# Providers that emit raw PCM when a downstream engine will play them live
LIVE_PCM_PROVIDERS = frozenset({"deepgram", "rimelabs"})

NOMINAL_MP3_RATE = 24000
PCM_RATE = 8000

DEFAULT_RATES = {MP3: NOMINAL_MP3_RATE, R8: PCM_RATE, WAV: 16000}


def format_for_extension(extension: str, preferred: AudioFormat) -> AudioFormat:
    """Format of an existing audio file, trusting its extension.

    The preferred format's rate is kept when the extension agrees with it.
    """
    extension = extension.lower().lstrip(".")
    if not extension or extension == preferred.extension:
        return preferred
    return AudioFormat(extension, DEFAULT_RATES.get(extension, NOMINAL_MP3_RATE))


def resolve_format(
    provider: str,
    *,
    render_for_caching: bool = False,
    disable_streaming: bool = False,
    trim_silence: bool = False,
) -> AudioFormat:
    """Resolve container extension and sample rate for a provider.

    Args:
        provider: Canonical provider name (aliases already resolved)
        render_for_caching: Audio is rendered only to populate the cache
        disable_streaming: Streaming handoff is off for this request
        trim_silence: The downstream engine trims silence from raw PCM

    Returns:
        AudioFormat with extension and sample rate
    """
    live = not render_for_caching and not disable_streaming

    if provider in FIXED_PCM_PROVIDERS:
        return AudioFormat(R8, PCM_RATE)

    if provider == "microsoft":
        if live or trim_silence:
            return AudioFormat(R8, PCM_RATE)
        return AudioFormat(MP3, 16000)

    if provider in LIVE_PCM_PROVIDERS:
        if live:
            return AudioFormat(R8, PCM_RATE)
        return AudioFormat(MP3, NOMINAL_MP3_RATE)

    if provider == "speechmatics":
        return AudioFormat(WAV, 16000)

    return AudioFormat(MP3, NOMINAL_MP3_RATE)
