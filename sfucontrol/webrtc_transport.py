"""WebRTC transport: ICE and DTLS state on top of the common transport."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol, TypeVar, Union

from .sctp_parameters import NumSctpStreams, SctpParameters
from .transport import (
    SctpState,
    Transport,
    TransportListenIp,
    TransportProtocol,
    TransportTraceEventData,
    TransportTuple,
    TransportType,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class IceState(str, Enum):
    NEW = "new"
    CONNECTED = "connected"
    COMPLETED = "completed"
    DISCONNECTED = "disconnected"
    CLOSED = "closed"


class DtlsRole(str, Enum):
    AUTO = "auto"
    CLIENT = "client"
    SERVER = "server"


class DtlsState(str, Enum):
    NEW = "new"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"
    CLOSED = "closed"


def _coerce(enum_type: type[E], value: Any) -> Any:
    """Return ``value`` as a member of ``enum_type`` when it is one, else as is."""
    if value is None or value == "":
        return None
    try:
        return enum_type(value)
    except ValueError:
        return value


class _NotifyingChannel(Protocol):
    def request(self, method: str, internal: Any, data: Any = None) -> Any: ...

    def on(self, event: str, listener: Callable[..., Any]) -> Any: ...

    def remove_all_listeners(self, event: str) -> Any: ...


@dataclass
class IceParameters:
    """Local ICE credentials of the transport."""

    username_fragment: str
    password: str
    ice_lite: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "usernameFragment": self.username_fragment,
            "password": self.password,
        }
        if self.ice_lite:
            data["iceLite"] = True
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IceParameters":
        return cls(
            username_fragment=data.get("usernameFragment", ""),
            password=data.get("password", ""),
            ice_lite=bool(data.get("iceLite", False)),
        )


@dataclass
class IceCandidate:
    """A local ICE candidate; the type is always ``host``."""

    foundation: str
    priority: int
    ip: str
    protocol: TransportProtocol
    port: int
    type: str = ""
    tcp_type: str = ""

    def __post_init__(self) -> None:
        self.protocol = TransportProtocol(self.protocol)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "foundation": self.foundation,
            "priority": self.priority,
            "ip": self.ip,
            "protocol": self.protocol.value,
            "port": self.port,
        }
        if self.type:
            data["type"] = self.type
        if self.tcp_type:
            data["tcpType"] = self.tcp_type
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IceCandidate":
        return cls(
            foundation=data.get("foundation", ""),
            priority=int(data.get("priority", 0)),
            ip=data.get("ip", ""),
            protocol=data["protocol"],
            port=int(data.get("port", 0)),
            type=data.get("type", ""),
            tcp_type=data.get("tcpType", ""),
        )


@dataclass
class DtlsFingerprint:
    """A certificate fingerprint and the hash algorithm that produced it."""

    algorithm: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"algorithm": self.algorithm, "value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DtlsFingerprint":
        return cls(algorithm=data["algorithm"], value=data["value"])


@dataclass
class DtlsParameters:
    """DTLS role and certificate fingerprints."""

    fingerprints: list[DtlsFingerprint] = field(default_factory=list)
    role: Optional[DtlsRole] = None

    def __post_init__(self) -> None:
        if self.role is not None:
            self.role = DtlsRole(self.role)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.role is not None:
            data["role"] = self.role.value
        data["fingerprints"] = [fp.to_dict() for fp in self.fingerprints]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DtlsParameters":
        return cls(
            fingerprints=[DtlsFingerprint.from_dict(fp) for fp in data.get("fingerprints") or []],
            role=data.get("role") or None,
        )


@dataclass
class WebRtcTransportOptions:
    """Options for creating a WebRTC transport."""

    listen_ips: list[TransportListenIp] = field(default_factory=list)
    enable_udp: Optional[bool] = None
    enable_tcp: bool = False
    prefer_udp: bool = False
    prefer_tcp: bool = False
    initial_available_outgoing_bitrate: int = 0
    enable_sctp: bool = False
    num_sctp_streams: NumSctpStreams = field(default_factory=NumSctpStreams)
    max_sctp_message_size: int = 0
    sctp_send_buffer_size: int = 0
    app_data: Any = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.listen_ips:
            data["listenIps"] = [ip.to_dict() for ip in self.listen_ips]
        if self.enable_udp is not None:
            data["enableUdp"] = self.enable_udp
        for key, flag in (
            ("enableTcp", self.enable_tcp),
            ("preferUdp", self.prefer_udp),
            ("preferTcp", self.prefer_tcp),
        ):
            if flag:
                data[key] = True
        if self.initial_available_outgoing_bitrate:
            data["initialAvailableOutgoingBitrate"] = self.initial_available_outgoing_bitrate
        if self.enable_sctp:
            data["enableSctp"] = True
        data["numSctpStreams"] = self.num_sctp_streams.to_dict()
        if self.max_sctp_message_size:
            data["maxSctpMessageSize"] = self.max_sctp_message_size
        if self.sctp_send_buffer_size:
            data["sctpSendBufferSize"] = self.sctp_send_buffer_size
        if self.app_data is not None:
            data["appData"] = self.app_data
        return data


def _decode(data: Union[bytes, str, Mapping[str, Any], None]) -> Mapping[str, Any]:
    if data is None:
        return {}
    if isinstance(data, (bytes, bytearray, str)):
        decoded = json.loads(data) if data else {}
        return decoded if isinstance(decoded, Mapping) else {}
    return data


class WebRtcTransport(Transport):
    """A transport speaking ICE, DTLS and optionally SCTP with a WebRTC endpoint.

    Emits ``icestatechange``, ``iceselectedtuplechange``, ``dtlsstatechange``,
    ``sctpstatechange`` and ``trace``, also on its observer.
    """

    def __init__(
        self,
        internal: Mapping[str, Any],
        channel: _NotifyingChannel,
        payload_channel: Any = None,
        *,
        data: Mapping[str, Any],
        app_data: Any = None,
    ) -> None:
        sctp_data = data.get("sctpParameters")
        super().__init__(
            internal,
            channel,
            payload_channel,
            transport_type=TransportType.WEBRTC,
            sctp_parameters=SctpParameters.from_dict(sctp_data) if sctp_data else None,
            sctp_state=_coerce(SctpState, data.get("sctpState")),
            app_data=app_data,
        )
        self.ice_role: str = data.get("iceRole", "")
        self.ice_parameters = IceParameters.from_dict(data.get("iceParameters") or {})
        self.ice_candidates = [
            IceCandidate.from_dict(candidate) for candidate in data.get("iceCandidates") or []
        ]
        self.ice_state = _coerce(IceState, data.get("iceState"))
        tuple_data = data.get("iceSelectedTuple")
        self.ice_selected_tuple: Optional[TransportTuple] = (
            TransportTuple.from_dict(tuple_data) if tuple_data else None
        )
        self.dtls_parameters = DtlsParameters.from_dict(data.get("dtlsParameters") or {})
        self.dtls_state = _coerce(DtlsState, data.get("dtlsState"))
        self.dtls_remote_cert: str = data.get("dtlsRemoteCert", "")

        channel.on(self.id, self.handle_notification)

    def _mark_states_closed(self) -> None:
        self.ice_selected_tuple = None
        self.ice_state = IceState.CLOSED
        self.dtls_state = DtlsState.CLOSED
        if self.sctp_state:
            self.sctp_state = SctpState.CLOSED

    def close(self) -> None:
        """Close the transport, marking ICE, DTLS and SCTP as closed."""
        if self.closed:
            return
        self._mark_states_closed()
        super().close()

    def router_closed(self) -> None:
        """Close the transport because its router was closed."""
        if self.closed:
            return
        self._mark_states_closed()
        super().router_closed()

    def connect(self, dtls_parameters: Optional[DtlsParameters]) -> DtlsRole | None:
        """Provide the remote DTLS parameters; returns the local DTLS role."""
        logger.debug("connect()")
        if dtls_parameters is None:
            raise TypeError("missing dtlsParameters")

        response = self._channel.request(
            "transport.connect",
            self.internal,
            {"dtlsParameters": dtls_parameters.to_dict()},
        )
        role = (response or {}).get("dtlsLocalRole")
        self.dtls_parameters.role = DtlsRole(role) if role else None
        return self.dtls_parameters.role

    def restart_ice(self) -> IceParameters:
        """Restart ICE and return the new local ICE parameters."""
        logger.debug("restartIce()")
        response = self._channel.request("transport.restartIce", self.internal)
        parameters = IceParameters.from_dict((response or {}).get("iceParameters") or {})
        self.ice_parameters = parameters
        return parameters

    def handle_notification(
        self, event: str, data: Union[bytes, str, Mapping[str, Any], None] = None
    ) -> None:
        """Apply a notification sent by the worker for this transport."""
        payload = _decode(data)

        if event == "icestatechange":
            self.ice_state = _coerce(IceState, payload.get("iceState"))
            self._notify("icestatechange", self.ice_state)
        elif event == "iceselectedtuplechange":
            selected = TransportTuple.from_dict(payload.get("iceSelectedTuple") or {})
            self.ice_selected_tuple = selected
            self._notify("iceselectedtuplechange", selected)
        elif event == "dtlsstatechange":
            self.dtls_state = _coerce(DtlsState, payload.get("dtlsState"))
            if self.dtls_state == DtlsState.CONNECTED:
                self.dtls_remote_cert = payload.get("dtlsRemoteCert", "")
            self._notify("dtlsstatechange", self.dtls_state)
        elif event == "sctpstatechange":
            self.sctp_state = _coerce(SctpState, payload.get("sctpState"))
            self._notify("sctpstatechange", self.sctp_state)
        elif event == "trace":
            trace = TransportTraceEventData.from_dict(payload)
            self._notify("trace", trace)
        else:
            logger.error('ignoring unknown event "%s"', event)

    def _notify(self, event: str, value: Any) -> None:
        self.safe_emit(event, value)
        self.observer.safe_emit(event, value)