"""
Down-samples browser PCM chunks (48 kHz mono float32) to 24 kHz pcm16, the
format the realtime transcriber expects.
"""

import logging

import numpy as np
import resampy

from .config import get_settings

log = logging.getLogger(__name__)

FLOAT32_BYTES = 4


class AudioProcessor:
    def __init__(self) -> None:
        self.settings = get_settings()

    def downsample(self, pcm_bytes: bytes) -> bytes:
        usable = len(pcm_bytes) - len(pcm_bytes) % FLOAT32_BYTES
        if usable == 0:
            return b""
        if usable != len(pcm_bytes):
            log.debug(f"Dropping {len(pcm_bytes) - usable} trailing bytes of a partial sample")

        audio = np.frombuffer(pcm_bytes[:usable], dtype=np.float32)
        resampled = resampy.resample(
            audio,
            self.settings.sampling_rate_in,
            self.settings.sampling_rate_out,
        )

        # float32 [-1, 1] -> int16
        clamped = np.clip(resampled, -1.0, 1.0)
        return (clamped * 32767).astype(np.int16).tobytes()

