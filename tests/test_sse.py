import asyncio

from auditflow.sse import SSEDecoder, ServerSentEvent, aiter_events, iter_events


def _lines(text: str) -> list[str]:
    return text.split("\n")


class TestIterEvents:
    def test_data_events(self):
        events = list(iter_events(_lines('data: {"type": "content"}\n\ndata: second\n\n')))
        assert [e.data for e in events] == ['{"type": "content"}', "second"]
        assert events[0].json() == {"type": "content"}
        assert events[0].event == "message"

    def test_multiline_data_is_joined(self):
        events = list(iter_events(_lines("data: line one\ndata: line two\n\n")))
        assert events == [ServerSentEvent(data="line one\nline two")]

    def test_fields(self):
        text = "event: update\nid: 42\nretry: 3000\ndata: x\n\n"
        (event,) = iter_events(_lines(text))
        assert event.event == "update"
        assert event.id == "42"
        assert event.retry == 3000

    def test_last_event_id_carries_over(self):
        events = list(iter_events(_lines("id: 7\ndata: a\n\ndata: b\n\n")))
        assert [e.id for e in events] == ["7", "7"]

    def test_comments_and_unknown_fields_ignored(self):
        events = list(iter_events(_lines(": keep-alive\nfoo: bar\ndata: x\n\n")))
        assert [e.data for e in events] == ["x"]

    def test_value_without_space_and_field_without_colon(self):
        events = list(iter_events(_lines("data:tight\ndata\n\n")))
        assert events[0].data == "tight\n"

    def test_blank_lines_without_data_do_not_dispatch(self):
        assert list(iter_events(_lines("\n\nevent: ping\n\n"))) == []

    def test_empty_data_does_not_dispatch(self):
        events = list(iter_events(_lines("data:\n\nevent: x\ndata: \n\ndata: y\n\n")))
        assert events == [ServerSentEvent(data="y")]

    def test_two_empty_data_lines_dispatch_a_newline(self):
        assert [e.data for e in iter_events(_lines("data:\ndata:\n\n"))] == ["\n"]

    def test_invalid_retry_ignored(self):
        (event,) = iter_events(_lines("retry: soon\ndata: x\n\n"))
        assert event.retry is None

    def test_crlf_lines(self):
        events = list(iter_events(["data: x\r\n", "\r\n"]))
        assert [e.data for e in events] == ["x"]

    def test_incomplete_event_at_end_is_dropped(self):
        assert list(iter_events(_lines("data: done\n\ndata: partial"))) == [
            ServerSentEvent(data="done")
        ]


class TestAsync:
    def test_aiter_events(self):
        async def lines():
            for line in ["data: a", "", "data: b", ""]:
                yield line

        async def collect():
            return [e.data async for e in aiter_events(lines())]

        assert asyncio.run(collect()) == ["a", "b"]


class TestDecoder:
    def test_incremental(self):
        decoder = SSEDecoder()
        assert decoder.decode("data: x") is None
        sse = decoder.decode("")
        assert sse.data == "x"
        assert decoder.decode("") is None
