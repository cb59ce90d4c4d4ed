import pytest

from sfucontrol.sctp_parameters import SctpParameters
from sfucontrol.transport import (
    EventEmitter,
    SctpStreamIdsExhaustedError,
    Transport,
    TransportTraceEventData,
    TransportTraceEventType,
    TransportTuple,
    TransportType,
)


class FakeChannel:
    def __init__(self, responses=None, fail=False):
        self.requests = []
        self.removed = []
        self.responses = responses or {}
        self.fail = fail

    def request(self, method, internal, data=None):
        self.requests.append((method, internal, data))
        if self.fail:
            raise RuntimeError("channel closed")
        return self.responses.get(method)

    def remove_all_listeners(self, event):
        self.removed.append(event)


class FakeChild:
    def __init__(self):
        self.closed_count = 0

    def transport_closed(self):
        self.closed_count += 1


INTERNAL = {"routerId": "r1", "transportId": "t1"}


def make_transport(**kwargs):
    channel = kwargs.pop("channel", FakeChannel())
    payload = FakeChannel()
    return Transport(INTERNAL, channel, payload, **kwargs), channel, payload


def test_emitter_on_and_emit_passes_args():
    emitter = EventEmitter()
    calls = []
    emitter.on("x", lambda *a: calls.append(a))
    assert emitter.emit("x", 1, "two") is True
    emitter.emit("x")
    assert calls == [(1, "two"), ()]


def test_emitter_once_runs_once():
    emitter = EventEmitter()
    calls = []
    emitter.once("x", calls.append)
    emitter.emit("x", 1)
    emitter.emit("x", 2)
    assert calls == [1]
    assert emitter.listener_count("x") == 0


def test_emitter_off_removes_listener():
    emitter = EventEmitter()
    calls = []
    emitter.on("x", calls.append)
    emitter.once("x", calls.append)
    emitter.off("x", calls.append)
    assert emitter.listener_count("x") == 1
    emitter.off("x", calls.append)
    assert emitter.emit("x", 1) is False
    assert calls == []


def test_emit_propagates_errors_and_safe_emit_swallows():
    emitter = EventEmitter()
    calls = []

    def boom(*_):
        raise ValueError("boom")

    emitter.on("x", boom)
    emitter.on("x", calls.append)
    with pytest.raises(ValueError):
        emitter.emit("x", 1)
    assert emitter.safe_emit("x", 2) is True
    assert calls == [2]


def test_remove_all_listeners_by_event_and_all():
    emitter = EventEmitter()
    emitter.on("a", print)
    emitter.on("b", print)
    emitter.remove_all_listeners("a")
    assert emitter.listener_count("a") == 0
    assert emitter.listener_count("b") == 1
    emitter.remove_all_listeners()
    assert emitter.listener_count("b") == 0


def test_transport_tuple_round_trip():
    data = {
        "localIp": "1.1.1.1",
        "localPort": 1111,
        "remoteIp": "2.2.2.2",
        "remotePort": 2222,
        "protocol": "udp",
    }
    tup = TransportTuple.from_dict(data)
    assert tup.local_port == 1111
    assert tup.to_dict() == data


def test_trace_event_data_from_dict():
    event = TransportTraceEventData.from_dict(
        {"type": "probation", "timestamp": 5, "direction": "out", "info": {"a": 1}}
    )
    assert event.type is TransportTraceEventType.PROBATION
    assert event.timestamp == 5
    assert event.info == {"a": 1}
    unknown = TransportTraceEventData.from_dict({"type": "foo"})
    assert unknown.type == "foo"


def test_close_requests_and_emits():
    transport, channel, payload = make_transport()
    producer, consumer, data_producer, data_consumer = (FakeChild() for _ in range(4))
    transport.producers["p"] = producer
    transport.consumers["c"] = consumer
    transport.data_producers["dp"] = data_producer
    transport.data_consumers["dc"] = data_consumer

    events = []
    transport.on("@producerclose", lambda p: events.append(("producer", p)))
    transport.on("@dataproducerclose", lambda p: events.append(("data", p)))
    transport.on("@close", lambda: events.append(("close", None)))
    observed = []
    transport.observer.once("close", lambda: observed.append(True))

    transport.close()

    assert transport.closed is True
    assert channel.requests == [("transport.close", INTERNAL, None)]
    assert channel.removed == ["t1"]
    assert payload.removed == ["t1"]
    assert events == [("producer", producer), ("data", data_producer), ("close", None)]
    assert observed == [True]
    assert [c.closed_count for c in (producer, consumer, data_producer, data_consumer)] == [1] * 4
    assert transport.producers == {} and transport.data_consumers == {}

    transport.close()
    assert len(channel.requests) == 1
    assert producer.closed_count == 1


def test_close_survives_channel_error():
    transport, _, _ = make_transport(channel=FakeChannel(fail=True))
    observed = []
    transport.observer.once("close", lambda: observed.append(True))
    transport.close()
    assert transport.closed is True
    assert observed == [True]


def test_router_closed_emits_routerclose_without_request():
    transport, channel, _ = make_transport()
    events = []
    transport.on("routerclose", lambda: events.append("routerclose"))
    transport.observer.on("close", lambda: events.append("observer"))
    transport.router_closed()
    assert transport.closed is True
    assert channel.requests == []
    assert events == ["routerclose", "observer"]
    transport.close()
    assert channel.requests == []


def test_dump_and_get_stats_forward_to_channel():
    channel = FakeChannel(
        {"transport.dump": {"id": "t1"}, "transport.getStats": [{"type": "webrtc-transport"}]}
    )
    transport, _, _ = make_transport(channel=channel)
    assert transport.dump() == {"id": "t1"}
    assert transport.get_stats() == [{"type": "webrtc-transport"}]
    assert [r[0] for r in channel.requests] == ["transport.dump", "transport.getStats"]


def test_set_max_incoming_bitrate_request():
    transport, channel, _ = make_transport()
    transport.set_max_incoming_bitrate(100000)
    assert channel.requests == [
        ("transport.setMaxIncomingBitrate", INTERNAL, {"bitrate": 100000})
    ]


def test_enable_trace_event_types():
    transport, channel, _ = make_transport()
    transport.enable_trace_event("probation", TransportTraceEventType.BWE)
    transport.enable_trace_event()
    assert channel.requests[0][2] == {"types": ["probation", "bwe"]}
    assert channel.requests[1][2] == {"types": []}


def test_next_mid_counts_and_wraps():
    transport, _, _ = make_transport()
    assert [transport.next_mid() for _ in range(3)] == ["0", "1", "2"]
    transport._next_mid = 99999999
    assert transport.next_mid() == "99999999"
    assert transport.next_mid() == "0"


def test_producer_cname_adopts_first_given():
    transport, _, _ = make_transport()
    assert transport.producer_cname("abc") == "abc"
    assert transport.producer_cname("other") == "abc"
    assert transport.producer_cname("") == "abc"


def test_producer_cname_random_when_missing():
    transport, _, _ = make_transport()
    cname = transport.producer_cname("")
    assert len(cname) == 8
    assert transport.producer_cname("later") == cname


def test_pipe_transport_keeps_producer_cname():
    transport, _, _ = make_transport(transport_type=TransportType.PIPE)
    assert transport.producer_cname("abc") == "abc"
    assert transport.producer_cname("xyz") == "xyz"


def test_sctp_stream_id_allocation_and_release():
    transport, _, _ = make_transport(sctp_parameters=SctpParameters(os=3, mis=3))
    assert [transport.allocate_sctp_stream_id() for _ in range(3)] == [0, 1, 2]
    with pytest.raises(SctpStreamIdsExhaustedError):
        transport.allocate_sctp_stream_id()
    transport.release_sctp_stream_id(1)
    assert transport.allocate_sctp_stream_id() == 1


def test_sctp_stream_id_requires_mis():
    transport, _, _ = make_transport()
    with pytest.raises(TypeError):
        transport.allocate_sctp_stream_id()