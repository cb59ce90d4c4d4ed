# sfucontrol

Building blocks for the control side of a selective forwarding unit (SFU)
media worker: RTP, SCTP and SRTP parameter models, the table of supported RTP
capabilities, scalability mode parsing, locating the worker binary, and
transport state handling (including WebRTC ICE and DTLS state).

The package has no runtime dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `sfucontrol.rtp_parameters` – `MediaKind`, `RtpHeaderExtensionDirection`,
  `RtcpFeedback`, `RtpCodecCapability`, `RtpHeaderExtension`,
  `RtpCapabilities`, `RtpCodecParameters`, `RtpEncodingRtx`,
  `RtpEncodingParameters`, `RtpHeaderExtensionParameters`, `RtcpParameters`
  and `RtpParameters`. Each dataclass has `to_dict()` and `from_dict()` for
  the camel-case JSON shape; unset optional fields are left out of
  `to_dict()`. Codec classes have `is_rtx_codec()`, true when the MIME type
  ends in `/rtx` (case-insensitive).
- `sfucontrol.sctp_parameters` – `NumSctpStreams` (`OS`/`MIS`),
  `SctpCapabilities`, `SctpParameters` and `SctpStreamParameters`, each with
  `to_dict()` and `from_dict()`.
- `sfucontrol.srtp_parameters` – `SrtpCryptoSuite` and `SrtpParameters`.
- `sfucontrol.scalability_modes` – `parse_scalability_mode()` returns a
  `ScalabilityMode` with `spatial_layers`, `temporal_layers` and `ksvc`;
  anything unrecognised gives one spatial and one temporal layer.
- `sfucontrol.supported_rtp_capabilities` – `get_supported_rtp_capabilities()`
  returns an independent copy of the built-in codec and header extension table.
- `sfucontrol.worker` – `WorkerLogLevel`, `WorkerLogTag`,
  `WorkerResourceUsage.from_dict()`, `resolve_worker_bin()`,
  `split_worker_command()`, and `WORKER_BIN`, resolved from the environment at
  import time.
- `sfucontrol.transport` – `EventEmitter` (`on`, `once`, `off`, `emit`,
  `safe_emit`, `remove_all_listeners`, `listener_count`), the enums
  `TransportType`, `TransportProtocol`, `TransportTraceEventType` and
  `SctpState`, the dataclasses `TransportListenIp`, `TransportTuple` and
  `TransportTraceEventData`, and `Transport`.
- `sfucontrol.webrtc_transport` – `IceState`, `DtlsRole`, `DtlsState`,
  `IceParameters`, `IceCandidate`, `DtlsFingerprint`, `DtlsParameters`,
  `WebRtcTransportOptions` and `WebRtcTransport`.

## Examples

Parse a scalability mode:

```python
from sfucontrol.scalability_modes import parse_scalability_mode

mode = parse_scalability_mode("L3T2_KEY")
assert (mode.spatial_layers, mode.temporal_layers, mode.ksvc) == (3, 2, True)
```

List the supported codecs:

```python
from sfucontrol.supported_rtp_capabilities import get_supported_rtp_capabilities

caps = get_supported_rtp_capabilities()
print([codec.mime_type for codec in caps.codecs])
```

Work out which worker binary to launch. `MEDIASOUP_WORKER_BIN` wins when set;
otherwise the path is built from `MEDIASOUP_HOME` (or a platform default) and
`MEDIASOUP_BUILDTYPE` (`Debug`, anything else meaning `Release`):

```python
from sfucontrol.worker import resolve_worker_bin, split_worker_command

bin_path = resolve_worker_bin({"MEDIASOUP_HOME": "/opt/worker"}, "linux")
# '/opt/worker/worker/out/Release/mediasoup-worker'
program, args = split_worker_command("valgrind " + bin_path, ["--logLevel=warn"])
# program == 'valgrind', args == [bin_path, '--logLevel=warn']
```

Use the event emitter:

```python
from sfucontrol.transport import EventEmitter

events = EventEmitter()
events.once("close", lambda: print("closed"))
events.emit("close")        # prints "closed"
events.listener_count("close")  # 0
```

Drive a transport. A transport talks to the worker through a channel object
you supply: it needs `request(method, internal, data=None)` and
`remove_all_listeners(event)`; `WebRtcTransport` also needs
`on(event, listener)`, through which it receives worker notifications.

```python
from sfucontrol.sctp_parameters import SctpParameters
from sfucontrol.transport import Transport, TransportType


class RecordingChannel:
    def __init__(self):
        self.requests = []

    def request(self, method, internal, data=None):
        self.requests.append((method, data))
        return {}

    def remove_all_listeners(self, event):
        pass


transport = Transport(
    {"routerId": "r1", "transportId": "t1"},
    RecordingChannel(),
    transport_type=TransportType.PLAIN,
    sctp_parameters=SctpParameters(os=16, mis=16),
)
transport.next_mid()                 # '0', then '1', ...
transport.producer_cname("abc")      # 'abc' for every later producer too
stream_id = transport.allocate_sctp_stream_id()   # 0
transport.release_sctp_stream_id(stream_id)
transport.close()
```

`allocate_sctp_stream_id()` raises `TypeError` when the transport has no SCTP
`mis`, and `SctpStreamIdsExhaustedError` when every id is taken. MIDs wrap to
0 after 99,999,999.

`WebRtcTransport` is built from the worker's transport data (a dict in the
worker's JSON shape) and keeps `ice_state`, `ice_selected_tuple`,
`ice_parameters`, `ice_candidates`, `dtls_parameters`, `dtls_state`,
`dtls_remote_cert` and `sctp_state` up to date from the notifications passed
to `handle_notification(event, data)`. `connect(dtls_parameters)` sends the
remote DTLS parameters and stores the local role from the reply (it raises
`TypeError` when given `None`); `restart_ice()` stores and returns new ICE
parameters. Closing marks ICE and DTLS, and SCTP if present, as closed.

## What this package does not do

- It does not start or supervise the worker process, and has no channel
  implementation: the socket protocol to the worker is up to you.
- There are no routers, producers, consumers, data producers or data
  consumers, and no `produce`/`consume` operations. `Transport` only closes
  the objects you place in its `producers`, `consumers`, `data_producers`
  and `data_consumers` dicts (anything with a `transport_closed()` method).
- Parameters are not validated beyond enum values, and there is no RTP
  capability negotiation.
- There is no command-line program.