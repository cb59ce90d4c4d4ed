"""The RTP capabilities supported by the media worker."""

from __future__ import annotations

from .rtp_parameters import (
    MediaKind,
    RtcpFeedback,
    RtpCapabilities,
    RtpCodecCapability,
    RtpHeaderExtension,
    RtpHeaderExtensionDirection,
)
from .utils import clone

_SENDRECV = RtpHeaderExtensionDirection.SENDRECV
_RECVONLY = RtpHeaderExtensionDirection.RECVONLY


def _transport_cc() -> list[RtcpFeedback]:
    return [RtcpFeedback(type="transport-cc")]


def _video_feedback() -> list[RtcpFeedback]:
    return [
        RtcpFeedback(type="nack"),
        RtcpFeedback(type="nack", parameter="pli"),
        RtcpFeedback(type="ccm", parameter="fir"),
        RtcpFeedback(type="goog-remb"),
        RtcpFeedback(type="transport-cc"),
    ]


def _audio(mime_type: str, clock_rate: int, **kwargs) -> RtpCodecCapability:
    return RtpCodecCapability(
        kind=MediaKind.AUDIO, mime_type=mime_type, clock_rate=clock_rate, **kwargs
    )


def _video(mime_type: str, packetization_mode: int | None = None) -> RtpCodecCapability:
    parameters = {}
    if packetization_mode is not None:
        parameters = {
            "packetization-mode": packetization_mode,
            "level-asymmetry-allowed": 1,
        }
    return RtpCodecCapability(
        kind=MediaKind.VIDEO,
        mime_type=mime_type,
        clock_rate=90000,
        parameters=parameters,
        rtcp_feedback=_video_feedback(),
    )


def _ext(kind: MediaKind, uri: str, preferred_id: int, direction) -> RtpHeaderExtension:
    return RtpHeaderExtension(
        kind=kind,
        uri=uri,
        preferred_id=preferred_id,
        preferred_encrypt=False,
        direction=direction,
    )


_MID = "urn:ietf:params:rtp-hdrext:sdes:mid"
_ABS_SEND_TIME = "http://www.webrtc.org/experiments/rtp-hdrext/abs-send-time"
_TRANSPORT_CC = "http://www.ietf.org/id/draft-holmer-rmcat-transport-wide-cc-extensions-01"

_SUPPORTED_RTP_CAPABILITIES = RtpCapabilities(
    codecs=[
        _audio("audio/opus", 48000, channels=2, rtcp_feedback=_transport_cc()),
        _audio("audio/PCMU", 8000, preferred_payload_type=0, rtcp_feedback=_transport_cc()),
        _audio("audio/PCMA", 8000, preferred_payload_type=8, rtcp_feedback=_transport_cc()),
        _audio("audio/ISAC", 32000, rtcp_feedback=_transport_cc()),
        _audio("audio/ISAC", 16000, rtcp_feedback=_transport_cc()),
        _audio("audio/G722", 8000, preferred_payload_type=9, rtcp_feedback=_transport_cc()),
        _audio("audio/iLBC", 8000, rtcp_feedback=_transport_cc()),
        _audio("audio/SILK", 24000, rtcp_feedback=_transport_cc()),
        _audio("audio/SILK", 16000, rtcp_feedback=_transport_cc()),
        _audio("audio/SILK", 12000, rtcp_feedback=_transport_cc()),
        _audio("audio/SILK", 8000, rtcp_feedback=_transport_cc()),
        _audio("audio/CN", 32000, preferred_payload_type=13),
        _audio("audio/CN", 16000, preferred_payload_type=13),
        _audio("audio/CN", 8000, preferred_payload_type=13),
        _audio("audio/telephone-event", 48000),
        _audio("audio/telephone-event", 32000),
        _audio("audio/telephone-event", 16000),
        _audio("audio/telephone-event", 8000),
        _video("video/VP8"),
        _video("video/VP9"),
        _video("video/H264", 1),
        _video("video/H264", 0),
        _video("video/H265", 1),
        _video("video/H265", 0),
    ],
    header_extensions=[
        _ext(MediaKind.AUDIO, _MID, 1, _SENDRECV),
        _ext(MediaKind.VIDEO, _MID, 1, _SENDRECV),
        _ext(MediaKind.VIDEO, "urn:ietf:params:rtp-hdrext:sdes:rtp-stream-id", 2, _RECVONLY),
        _ext(
            MediaKind.VIDEO,
            "urn:ietf:params:rtp-hdrext:sdes:repaired-rtp-stream-id",
            3,
            _RECVONLY,
        ),
        _ext(MediaKind.AUDIO, _ABS_SEND_TIME, 4, _SENDRECV),
        _ext(MediaKind.VIDEO, _ABS_SEND_TIME, 4, _SENDRECV),
        # Audio only enables transport-wide-cc when receiving media.
        _ext(MediaKind.AUDIO, _TRANSPORT_CC, 5, _RECVONLY),
        _ext(MediaKind.VIDEO, _TRANSPORT_CC, 5, _SENDRECV),
        _ext(
            MediaKind.VIDEO,
            "http://tools.ietf.org/html/draft-ietf-avtext-framemarking-07",
            6,
            _SENDRECV,
        ),
        _ext(MediaKind.VIDEO, "urn:ietf:params:rtp-hdrext:framemarking", 7, _SENDRECV),
        _ext(MediaKind.AUDIO, "urn:ietf:params:rtp-hdrext:ssrc-audio-level", 10, _SENDRECV),
        _ext(MediaKind.VIDEO, "urn:3gpp:video-orientation", 11, _SENDRECV),
        _ext(MediaKind.VIDEO, "urn:ietf:params:rtp-hdrext:toffset", 12, _SENDRECV),
    ],
)


def get_supported_rtp_capabilities() -> RtpCapabilities:
    """Return an independent copy of the supported RTP capabilities."""
    return clone(_SUPPORTED_RTP_CAPABILITIES)