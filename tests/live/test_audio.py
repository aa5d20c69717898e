"""
Tests for PCM encoding, framing and the queue-backed audio input.
"""

import base64

import numpy as np
import pytest

from neurosync.core.live.audio import PCMFramer, QueueAudioInput, encode_pcm_frame


@pytest.mark.unit
class TestEncodePcmFrame:
    def test_scales_and_clips(self):
        frame = encode_pcm_frame(np.array([0.0, 1.0, -1.0, 2.5], dtype=np.float32))

        samples = np.frombuffer(frame.to_bytes(), dtype="<i2")
        assert samples.tolist() == [0, 32767, -32767, 32767]

    def test_mime_type_carries_rate(self):
        assert encode_pcm_frame(np.zeros(4), sample_rate=24000).mime_type == "audio/pcm;rate=24000"

    def test_little_endian_bytes(self):
        frame = encode_pcm_frame(np.array([1.0]))

        assert base64.b64decode(frame.data) == b"\xff\x7f"

    def test_wire_shape(self):
        wire = encode_pcm_frame(np.zeros(2)).to_wire()

        assert wire == {"mimeType": "audio/pcm;rate=16000", "data": "AAAAAA=="}


@pytest.mark.unit
class TestPCMFramer:
    def test_emits_full_frames_only(self):
        framer = PCMFramer(frame_size=4096)

        assert len(framer.push(np.zeros(5000))) == 1
        assert framer.pending == 904

        frames = framer.push(np.zeros(4000))
        assert len(frames) == 1
        assert framer.pending == 808

    def test_large_chunk_yields_several_frames(self):
        framer = PCMFramer(frame_size=4)

        frames = framer.push(np.arange(10, dtype=np.float32))

        assert [f.tolist() for f in frames] == [[0, 1, 2, 3], [4, 5, 6, 7]]
        assert framer.pending == 2

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            PCMFramer(frame_size=0)


@pytest.mark.unit
class TestQueueAudioInput:
    async def test_push_and_read(self):
        audio = QueueAudioInput()
        await audio.open()

        audio.push(np.ones(3))

        assert (await audio.read()).tolist() == [1.0, 1.0, 1.0]

    async def test_push_ignored_when_closed(self):
        audio = QueueAudioInput()

        audio.push(np.ones(3))

        assert await audio.read() is None

    async def test_close_wakes_reader(self):
        audio = QueueAudioInput()
        await audio.open()

        await audio.close()
        await audio.close()

        assert await audio.read() is None
        assert audio.is_open is False
