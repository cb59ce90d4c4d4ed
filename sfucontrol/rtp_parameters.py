"""RTP capabilities and parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class MediaKind(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"


class RtpHeaderExtensionDirection(str, Enum):
    SENDRECV = "sendrecv"
    SENDONLY = "sendonly"
    RECVONLY = "recvonly"
    INACTIVE = "inactive"


def _is_rtx_mime_type(mime_type: str) -> bool:
    return mime_type.lower().endswith("/rtx")


def _optional_int(data: Mapping[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    return None if value is None else int(value)


@dataclass
class RtcpFeedback:
    """An RTCP feedback message supported for a codec."""

    type: str
    parameter: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.parameter:
            data["parameter"] = self.parameter
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtcpFeedback":
        return cls(type=data["type"], parameter=data.get("parameter", ""))


@dataclass
class RtpCodecCapability:
    """A codec within RTP capabilities."""

    kind: MediaKind
    mime_type: str
    clock_rate: int
    preferred_payload_type: Optional[int] = None
    channels: Optional[int] = None
    parameters: dict[str, Any] = field(default_factory=dict)
    rtcp_feedback: list[RtcpFeedback] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.kind = MediaKind(self.kind)

    def is_rtx_codec(self) -> bool:
        return _is_rtx_mime_type(self.mime_type)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "mimeType": self.mime_type}
        if self.preferred_payload_type is not None:
            data["preferredPayloadType"] = self.preferred_payload_type
        data["clockRate"] = self.clock_rate
        if self.channels is not None:
            data["channels"] = self.channels
        if self.parameters:
            data["parameters"] = dict(self.parameters)
        if self.rtcp_feedback:
            data["rtcpFeedback"] = [fb.to_dict() for fb in self.rtcp_feedback]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtpCodecCapability":
        return cls(
            kind=data["kind"],
            mime_type=data["mimeType"],
            clock_rate=int(data["clockRate"]),
            preferred_payload_type=_optional_int(data, "preferredPayloadType"),
            channels=_optional_int(data, "channels"),
            parameters=dict(data.get("parameters") or {}),
            rtcp_feedback=[RtcpFeedback.from_dict(fb) for fb in data.get("rtcpFeedback") or []],
        )


@dataclass
class RtpHeaderExtension:
    """A supported RTP header extension; no kind means any kind."""

    uri: str
    preferred_id: int
    kind: Optional[MediaKind] = None
    preferred_encrypt: bool = False
    direction: Optional[RtpHeaderExtensionDirection] = None

    def __post_init__(self) -> None:
        if self.kind is not None:
            self.kind = MediaKind(self.kind)
        if self.direction is not None:
            self.direction = RtpHeaderExtensionDirection(self.direction)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind.value if self.kind is not None else "",
            "uri": self.uri,
            "preferredId": self.preferred_id,
        }
        if self.preferred_encrypt:
            data["preferredEncrypt"] = True
        if self.direction is not None:
            data["direction"] = self.direction.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtpHeaderExtension":
        return cls(
            uri=data["uri"],
            preferred_id=int(data["preferredId"]),
            kind=data.get("kind") or None,
            preferred_encrypt=bool(data.get("preferredEncrypt", False)),
            direction=data.get("direction") or None,
        )


@dataclass
class RtpCapabilities:
    """What an endpoint can receive at media level."""

    codecs: list[RtpCodecCapability] = field(default_factory=list)
    header_extensions: list[RtpHeaderExtension] = field(default_factory=list)
    fec_mechanisms: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.codecs:
            data["codecs"] = [codec.to_dict() for codec in self.codecs]
        if self.header_extensions:
            data["headerExtensions"] = [ext.to_dict() for ext in self.header_extensions]
        if self.fec_mechanisms:
            data["fecMechanisms"] = list(self.fec_mechanisms)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtpCapabilities":
        return cls(
            codecs=[RtpCodecCapability.from_dict(c) for c in data.get("codecs") or []],
            header_extensions=[
                RtpHeaderExtension.from_dict(e) for e in data.get("headerExtensions") or []
            ],
            fec_mechanisms=list(data.get("fecMechanisms") or []),
        )


@dataclass
class RtpCodecParameters:
    """A codec in use within RTP parameters."""

    mime_type: str
    payload_type: int
    clock_rate: int
    channels: Optional[int] = None
    parameters: dict[str, Any] = field(default_factory=dict)
    rtcp_feedback: list[RtcpFeedback] = field(default_factory=list)

    def is_rtx_codec(self) -> bool:
        return _is_rtx_mime_type(self.mime_type)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "mimeType": self.mime_type,
            "payloadType": self.payload_type,
            "clockRate": self.clock_rate,
        }
        if self.channels is not None:
            data["channels"] = self.channels
        if self.parameters:
            data["parameters"] = dict(self.parameters)
        if self.rtcp_feedback:
            data["rtcpFeedback"] = [fb.to_dict() for fb in self.rtcp_feedback]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtpCodecParameters":
        return cls(
            mime_type=data["mimeType"],
            payload_type=int(data["payloadType"]),
            clock_rate=int(data["clockRate"]),
            channels=_optional_int(data, "channels"),
            parameters=dict(data.get("parameters") or {}),
            rtcp_feedback=[RtcpFeedback.from_dict(fb) for fb in data.get("rtcpFeedback") or []],
        )


@dataclass
class RtpEncodingRtx:
    """The RTX stream associated with an RTP stream."""

    ssrc: int

    def to_dict(self) -> dict[str, Any]:
        return {"ssrc": self.ssrc}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtpEncodingRtx":
        return cls(ssrc=int(data["ssrc"]))


@dataclass
class RtpEncodingParameters:
    """One media RTP stream and its RTX stream, if any."""

    ssrc: Optional[int] = None
    rid: str = ""
    codec_payload_type: Optional[int] = None
    rtx: Optional[RtpEncodingRtx] = None
    dtx: bool = False
    scalability_mode: str = ""
    scale_resolution_down_by: Optional[int] = None
    max_bitrate: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.ssrc is not None:
            data["ssrc"] = self.ssrc
        if self.rid:
            data["rid"] = self.rid
        if self.codec_payload_type is not None:
            data["codecPayloadType"] = self.codec_payload_type
        if self.rtx is not None:
            data["rtx"] = self.rtx.to_dict()
        if self.dtx:
            data["dtx"] = True
        if self.scalability_mode:
            data["scalabilityMode"] = self.scalability_mode
        if self.scale_resolution_down_by is not None:
            data["scaleResolutionDownBy"] = self.scale_resolution_down_by
        if self.max_bitrate is not None:
            data["maxBitrate"] = self.max_bitrate
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtpEncodingParameters":
        rtx = data.get("rtx")
        return cls(
            ssrc=_optional_int(data, "ssrc"),
            rid=data.get("rid", ""),
            codec_payload_type=_optional_int(data, "codecPayloadType"),
            rtx=RtpEncodingRtx.from_dict(rtx) if rtx is not None else None,
            dtx=bool(data.get("dtx", False)),
            scalability_mode=data.get("scalabilityMode", ""),
            scale_resolution_down_by=_optional_int(data, "scaleResolutionDownBy"),
            max_bitrate=_optional_int(data, "maxBitrate"),
        )


@dataclass
class RtpHeaderExtensionParameters:
    """An RTP header extension in use within RTP parameters."""

    uri: str
    id: int
    encrypt: bool = False
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"uri": self.uri, "id": self.id}
        if self.encrypt:
            data["encrypt"] = True
        if self.parameters:
            data["parameters"] = dict(self.parameters)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtpHeaderExtensionParameters":
        return cls(
            uri=data["uri"],
            id=int(data["id"]),
            encrypt=bool(data.get("encrypt", False)),
            parameters=dict(data.get("parameters") or {}),
        )


@dataclass
class RtcpParameters:
    """RTCP settings; reduced size and mux default to true when unset."""

    cname: str = ""
    reduced_size: Optional[bool] = None
    mux: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.cname:
            data["cname"] = self.cname
        if self.reduced_size is not None:
            data["reducedSize"] = self.reduced_size
        if self.mux is not None:
            data["mux"] = self.mux
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtcpParameters":
        reduced_size = data.get("reducedSize")
        mux = data.get("mux")
        return cls(
            cname=data.get("cname", ""),
            reduced_size=None if reduced_size is None else bool(reduced_size),
            mux=None if mux is None else bool(mux),
        )


@dataclass
class RtpParameters:
    """A media stream sent to or received from an endpoint."""

    codecs: list[RtpCodecParameters] = field(default_factory=list)
    mid: str = ""
    header_extensions: list[RtpHeaderExtensionParameters] = field(default_factory=list)
    encodings: list[RtpEncodingParameters] = field(default_factory=list)
    rtcp: RtcpParameters = field(default_factory=RtcpParameters)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.mid:
            data["mid"] = self.mid
        data["codecs"] = [codec.to_dict() for codec in self.codecs]
        if self.header_extensions:
            data["headerExtensions"] = [ext.to_dict() for ext in self.header_extensions]
        if self.encodings:
            data["encodings"] = [enc.to_dict() for enc in self.encodings]
        data["rtcp"] = self.rtcp.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RtpParameters":
        return cls(
            codecs=[RtpCodecParameters.from_dict(c) for c in data.get("codecs") or []],
            mid=data.get("mid", ""),
            header_extensions=[
                RtpHeaderExtensionParameters.from_dict(e)
                for e in data.get("headerExtensions") or []
            ],
            encodings=[RtpEncodingParameters.from_dict(e) for e in data.get("encodings") or []],
            rtcp=RtcpParameters.from_dict(data.get("rtcp") or {}),
        )