"""SCTP capabilities and parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass
class NumSctpStreams:
    """Initially requested outgoing (OS) and maximum incoming (MIS) streams."""

    os: int = 0
    mis: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"OS": self.os, "MIS": self.mis}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NumSctpStreams":
        return cls(os=int(data.get("OS", 0)), mis=int(data.get("MIS", 0)))


@dataclass
class SctpCapabilities:
    """SCTP capabilities of an endpoint."""

    num_streams: NumSctpStreams = field(default_factory=NumSctpStreams)

    def to_dict(self) -> dict[str, Any]:
        return {"numStreams": self.num_streams.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SctpCapabilities":
        return cls(num_streams=NumSctpStreams.from_dict(data.get("numStreams", {})))


@dataclass
class SctpParameters:
    """SCTP association parameters of a transport."""

    port: int = 5000
    os: int = 0
    mis: int = 0
    max_message_size: int = 0
    is_data_channel: bool = False
    sctp_buffered_amount: int = 0
    send_buffer_size: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "port": self.port,
            "os": self.os,
            "mis": self.mis,
            "maxMessageSize": self.max_message_size,
        }
        if self.is_data_channel:
            data["isDataChannel"] = True
        if self.sctp_buffered_amount:
            data["sctpBufferedAmount"] = self.sctp_buffered_amount
        if self.send_buffer_size:
            data["sendBufferSize"] = self.send_buffer_size
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SctpParameters":
        return cls(
            port=int(data.get("port", 0)),
            os=int(data.get("os", 0)),
            mis=int(data.get("mis", 0)),
            max_message_size=int(data.get("maxMessageSize", 0)),
            is_data_channel=bool(data.get("isDataChannel", False)),
            sctp_buffered_amount=int(data.get("sctpBufferedAmount", 0)),
            send_buffer_size=int(data.get("sendBufferSize", 0)),
        )


@dataclass
class SctpStreamParameters:
    """Reliability settings of one SCTP stream."""

    stream_id: int = 0
    ordered: Optional[bool] = None
    max_packet_life_time: int = 0
    max_retransmits: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"streamId": self.stream_id}
        if self.ordered is not None:
            data["ordered"] = self.ordered
        if self.max_packet_life_time:
            data["maxPacketLifeTime"] = self.max_packet_life_time
        if self.max_retransmits:
            data["maxRetransmits"] = self.max_retransmits
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SctpStreamParameters":
        ordered = data.get("ordered")
        return cls(
            stream_id=int(data.get("streamId", 0)),
            ordered=None if ordered is None else bool(ordered),
            max_packet_life_time=int(data.get("maxPacketLifeTime", 0)),
            max_retransmits=int(data.get("maxRetransmits", 0)),
        )