"""Common transport behaviour: lifecycle, worker requests, MIDs and SCTP ids."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol

from .sctp_parameters import SctpParameters

logger = logging.getLogger(__name__)

_MAX_MID = 100_000_000


class _Channel(Protocol):
    def request(self, method: str, internal: Any, data: Any = None) -> Any: ...

    def remove_all_listeners(self, event: str) -> Any: ...


class _TransportClosable(Protocol):
    def transport_closed(self) -> Any: ...


@dataclass(eq=False)
class _Listener:
    callback: Callable[..., Any]
    once: bool


class EventEmitter:
    """Minimal thread-safe event emitter."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[_Listener]] = {}
        self._lock = threading.RLock()

    def on(self, event: str, listener: Callable[..., Any]) -> "EventEmitter":
        with self._lock:
            self._listeners.setdefault(event, []).append(_Listener(listener, False))
        return self

    def once(self, event: str, listener: Callable[..., Any]) -> "EventEmitter":
        with self._lock:
            self._listeners.setdefault(event, []).append(_Listener(listener, True))
        return self

    def off(self, event: str, listener: Callable[..., Any]) -> "EventEmitter":
        with self._lock:
            entries = self._listeners.get(event, [])
            for entry in entries:
                if entry.callback == listener:
                    entries.remove(entry)
                    break
            if not entries:
                self._listeners.pop(event, None)
        return self

    def _take(self, event: str) -> list[_Listener]:
        with self._lock:
            entries = list(self._listeners.get(event, ()))
            remaining = [entry for entry in entries if not entry.once]
            if remaining:
                self._listeners[event] = remaining
            else:
                self._listeners.pop(event, None)
        return entries

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener of ``event``; errors propagate to the caller."""
        entries = self._take(event)
        for entry in entries:
            entry.callback(*args)
        return bool(entries)

    def safe_emit(self, event: str, *args: Any) -> bool:
        """Call every listener of ``event``, logging and swallowing errors."""
        entries = self._take(event)
        for entry in entries:
            try:
                entry.callback(*args)
            except Exception:
                logger.exception("listener of %r raised", event)
        return bool(entries)

    def remove_all_listeners(self, event: Optional[str] = None) -> "EventEmitter":
        with self._lock:
            if event is None:
                self._listeners.clear()
            else:
                self._listeners.pop(event, None)
        return self

    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._listeners.get(event, ()))


class TransportType(str, Enum):
    DIRECT = "DirectTransport"
    PLAIN = "PlainTransport"
    PIPE = "PipeTransport"
    WEBRTC = "WebrtcTransport"


class TransportProtocol(str, Enum):
    UDP = "udp"
    TCP = "tcp"


class TransportTraceEventType(str, Enum):
    PROBATION = "probation"
    BWE = "bwe"


class SctpState(str, Enum):
    NEW = "new"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"
    CLOSED = "closed"


@dataclass
class TransportListenIp:
    """Listening IP and the IP announced to peers (useful behind NAT)."""

    ip: str = ""
    announced_ip: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.ip:
            data["ip"] = self.ip
        if self.announced_ip:
            data["announcedIp"] = self.announced_ip
        return data


@dataclass
class TransportTuple:
    """Local and remote address of a transport."""

    local_ip: str = ""
    local_port: int = 0
    remote_ip: str = ""
    remote_port: int = 0
    protocol: str = ""

    def to_dict(self) -> dict[str, Any]:
        pairs = {
            "localIp": self.local_ip,
            "localPort": self.local_port,
            "remoteIp": self.remote_ip,
            "remotePort": self.remote_port,
            "protocol": self.protocol,
        }
        return {key: value for key, value in pairs.items() if value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TransportTuple":
        return cls(
            local_ip=data.get("localIp", ""),
            local_port=int(data.get("localPort", 0)),
            remote_ip=data.get("remoteIp", ""),
            remote_port=int(data.get("remotePort", 0)),
            protocol=data.get("protocol", ""),
        )


@dataclass
class TransportTraceEventData:
    """A trace event reported by the worker."""

    type: Any = ""
    timestamp: int = 0
    direction: str = ""
    info: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TransportTraceEventData":
        raw_type = data.get("type", "")
        try:
            trace_type: Any = TransportTraceEventType(raw_type)
        except ValueError:
            trace_type = raw_type
        return cls(
            type=trace_type,
            timestamp=int(data.get("timestamp", 0)),
            direction=data.get("direction", ""),
            info=data.get("info"),
        )


class SctpStreamIdsExhaustedError(Exception):
    """Raised when every SCTP stream id of a transport is in use."""


class Transport(EventEmitter):
    """Base transport.

    Emits ``routerclose``, ``@close``, ``@producerclose`` and
    ``@dataproducerclose``; its observer emits ``close``.
    """

    def __init__(
        self,
        internal: Mapping[str, Any],
        channel: _Channel,
        payload_channel: Optional[_Channel] = None,
        *,
        transport_type: TransportType = TransportType.WEBRTC,
        sctp_parameters: Optional[SctpParameters] = None,
        sctp_state: Optional[SctpState] = None,
        app_data: Any = None,
    ) -> None:
        super().__init__()
        logger.debug("constructor()")
        self._internal = dict(internal)
        self._channel = channel
        self._payload_channel = payload_channel
        self._transport_type = TransportType(transport_type)
        self.sctp_parameters = sctp_parameters
        self.sctp_state = sctp_state
        self._app_data = app_data if app_data is not None else {}
        self._closed = False
        self._observer = EventEmitter()
        self._lock = threading.RLock()
        self._cname_for_producers = ""
        self._next_mid = 0
        self._sctp_stream_ids: list[bool] = []
        self._next_sctp_stream_id = 0
        self.producers: dict[str, _TransportClosable] = {}
        self.consumers: dict[str, _TransportClosable] = {}
        self.data_producers: dict[str, _TransportClosable] = {}
        self.data_consumers: dict[str, _TransportClosable] = {}

    @property
    def id(self) -> str:
        return self._internal["transportId"]

    @property
    def internal(self) -> dict[str, Any]:
        return dict(self._internal)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def app_data(self) -> Any:
        return self._app_data

    @property
    def observer(self) -> EventEmitter:
        return self._observer

    @property
    def transport_type(self) -> TransportType:
        return self._transport_type

    def _mark_closed(self) -> bool:
        with self._lock:
            if self._closed:
                return False
            self._closed = True
            return True

    def _close_children(self) -> None:
        for producer in list(self.producers.values()):
            producer.transport_closed()
            self.emit("@producerclose", producer)
        self.producers.clear()

        for consumer in list(self.consumers.values()):
            consumer.transport_closed()
        self.consumers.clear()

        for data_producer in list(self.data_producers.values()):
            data_producer.transport_closed()
            self.emit("@dataproducerclose", data_producer)
        self.data_producers.clear()

        for data_consumer in list(self.data_consumers.values()):
            data_consumer.transport_closed()
        self.data_consumers.clear()

    def _remove_notification_listeners(self) -> None:
        self._channel.remove_all_listeners(self.id)
        if self._payload_channel is not None:
            self._payload_channel.remove_all_listeners(self.id)

    def close(self) -> None:
        """Close the transport and everything created on it."""
        if not self._mark_closed():
            return
        logger.debug("close()")

        self._remove_notification_listeners()
        try:
            self._channel.request("transport.close", self.internal)
        except Exception as error:
            logger.error("transport.close request failed: %s", error)

        self._close_children()

        self.emit("@close")
        self.remove_all_listeners()

        self._observer.safe_emit("close")
        self._observer.remove_all_listeners()

    def router_closed(self) -> None:
        """Close the transport because its router was closed."""
        if not self._mark_closed():
            return
        logger.debug("routerClosed()")

        self._remove_notification_listeners()
        self._close_children()

        self.safe_emit("routerclose")
        self.remove_all_listeners()

        self._observer.safe_emit("close")
        self._observer.remove_all_listeners()

    def dump(self) -> Any:
        logger.debug("dump()")
        return self._channel.request("transport.dump", self.internal)

    def get_stats(self) -> Any:
        logger.debug("getStats()")
        return self._channel.request("transport.getStats", self.internal)

    def set_max_incoming_bitrate(self, bitrate: int) -> Any:
        """Set the maximum incoming bitrate for receiving media."""
        logger.debug("setMaxIncomingBitrate() [bitrate:%d]", bitrate)
        return self._channel.request(
            "transport.setMaxIncomingBitrate", self.internal, {"bitrate": bitrate}
        )

    def enable_trace_event(self, *args: Any) -> Any:
        """Enable the ``trace`` event for the given trace types."""
        logger.debug("enableTraceEvent()")
        types = [arg.value if isinstance(arg, Enum) else str(arg) for arg in args]
        return self._channel.request(
            "transport.enableTraceEvent", self.internal, {"types": types}
        )

    def next_mid(self) -> str:
        """Return the next consumer MID; MIDs use at most 8 characters."""
        with self._lock:
            mid = str(self._next_mid)
            self._next_mid += 1
            if self._next_mid == _MAX_MID:
                logger.error('consume() | reaching max MID value "%d"', _MAX_MID)
                self._next_mid = 0
            return mid

    def producer_cname(self, cname: str) -> str:
        """Return the RTCP CNAME that a new producer must use.

        Pipe transports keep each producer's own CNAME; other transports
        adopt the first one given, or a random one if none was given.
        """
        if self._transport_type is TransportType.PIPE:
            return cname
        with self._lock:
            if not self._cname_for_producers:
                self._cname_for_producers = cname or str(uuid.uuid4())[:8]
            return self._cname_for_producers

    def allocate_sctp_stream_id(self) -> int:
        """Reserve and return a free SCTP stream id."""
        with self._lock:
            mis = self.sctp_parameters.mis if self.sctp_parameters is not None else 0
            if not mis:
                raise TypeError("missing data.sctpParameters.MIS")
            if not self._sctp_stream_ids:
                self._sctp_stream_ids = [False] * mis

            count = len(self._sctp_stream_ids)
            for offset in range(count):
                stream_id = (self._next_sctp_stream_id + offset) % count
                if not self._sctp_stream_ids[stream_id]:
                    self._sctp_stream_ids[stream_id] = True
                    self._next_sctp_stream_id = stream_id + 1
                    return stream_id

            raise SctpStreamIdsExhaustedError("no sctpStreamId available")

    def release_sctp_stream_id(self, stream_id: int) -> None:
        """Make a previously allocated SCTP stream id available again."""
        with self._lock:
            if 0 <= stream_id < len(self._sctp_stream_ids):
                self._sctp_stream_ids[stream_id] = False