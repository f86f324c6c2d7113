"""
JavaScript injected into meeting pages for audio capture.

The tap wraps navigator.mediaDevices.getUserMedia before the platform's own
scripts run. The platform receives its stream untouched; a clone of the
audio tracks feeds a ScriptProcessorNode whose fixed-size buffers are posted
to the host through an exposed binding. The processor output is routed
through a zero-gain node so nothing is played back.
"""

AUDIO_TAP_JS = r"""
(() => {
    const BINDING = "__BINDING_NAME__";
    const CHUNK_SIZE = __CHUNK_SIZE__;

    if (window.__meetingBotAudioTapInstalled) return;
    window.__meetingBotAudioTapInstalled = true;

    const media = navigator.mediaDevices;
    if (!media || typeof media.getUserMedia !== 'function') {
        console.log('[meeting-bot] getUserMedia unavailable, audio tap not installed');
        return;
    }

    const originalGetUserMedia = media.getUserMedia.bind(media);
    const taps = [];
    let audioContext = null;

    function toBase64(samples) {
        const bytes = new Uint8Array(samples.buffer, samples.byteOffset, samples.byteLength);
        let binary = '';
        for (let i = 0; i < bytes.length; i += 0x8000) {
            binary += String.fromCharCode.apply(null, bytes.subarray(i, i + 0x8000));
        }
        return btoa(binary);
    }

    function tap(stream) {
        const tracks = stream.getAudioTracks();
        if (!tracks.length) return;
        try {
            audioContext = audioContext || new (window.AudioContext || window.webkitAudioContext)();
            if (audioContext.state === 'suspended') {
                audioContext.resume().catch(() => {});
            }
            const shadow = new MediaStream(tracks.map((track) => track.clone()));
            const source = audioContext.createMediaStreamSource(shadow);
            const processor = audioContext.createScriptProcessor(CHUNK_SIZE, 1, 1);
            const silence = audioContext.createGain();
            silence.gain.value = 0;

            processor.onaudioprocess = (event) => {
                const send = window[BINDING];
                if (typeof send !== 'function') return;
                // Copy: the input buffer is reused by the audio thread
                const samples = new Float32Array(event.inputBuffer.getChannelData(0));
                send({
                    audio: toBase64(samples),
                    sampleRate: audioContext.sampleRate,
                    sampleCount: samples.length,
                    timestamp: Date.now(),
                }).catch(() => {});
            };

            source.connect(processor);
            processor.connect(silence);
            silence.connect(audioContext.destination);
            taps.push({ source, processor, silence, shadow });
            console.log('[meeting-bot] audio tap attached (' + CHUNK_SIZE + ' samples/chunk)');
        } catch (err) {
            console.log('[meeting-bot] audio tap failed: ' + err);
        }
    }

    media.getUserMedia = async function (constraints) {
        const stream = await originalGetUserMedia(constraints);
        if (constraints && constraints.audio) {
            tap(stream);
        }
        return stream;
    };
})();
"""

CONSOLE_PREFIX = "[meeting-bot]"


def build_audio_tap_script(binding_name: str, chunk_size: int) -> str:
    """Render the tap script for a binding name and chunk size."""
    return (
        AUDIO_TAP_JS
        .replace("__BINDING_NAME__", binding_name)
        .replace("__CHUNK_SIZE__", str(int(chunk_size)))
    )
