from __future__ import annotations

import asyncio
import unittest

from llm.llm_types import StreamAccumulator, StreamEvent
from llm.stream_decoder import StreamDecoder, parse_stream_line


def _chunk(text: str) -> str:
    return f'data: {{"choices":[{{"delta":{{"content":"{text}"}}}}]}}\n'


class ParseStreamLineTests(unittest.TestCase):
    def test_content_line(self) -> None:
        event = parse_stream_line('data: {"choices":[{"delta":{"content":"Hi"}}]}')
        self.assertEqual(event, StreamEvent.content("Hi"))

    def test_done_sentinel(self) -> None:
        self.assertEqual(parse_stream_line("data: [DONE]"), StreamEvent.done())

    def test_non_data_lines_produce_nothing(self) -> None:
        for line in ["", ": keep-alive", "event: message", "id: 4", "data:[DONE]", "retry: 10"]:
            with self.subTest(line=line):
                self.assertIsNone(parse_stream_line(line))

    def test_malformed_json(self) -> None:
        event = parse_stream_line("data: {not valid json")
        self.assertEqual(event, StreamEvent.malformed("{not valid json"))

    def test_missing_or_empty_content_produces_nothing(self) -> None:
        for payload in [
            '{"choices":[{"delta":{"role":"assistant"}}]}',
            '{"choices":[{"delta":{"content":""}}]}',
            '{"choices":[]}',
            '{"choices":[{"finish_reason":"stop"}]}',
            '{"choices":[{"delta":{"content":null}}]}',
            "[1, 2]",
            '"just a string"',
        ]:
            with self.subTest(payload=payload):
                self.assertIsNone(parse_stream_line(f"data: {payload}"))

    def test_crlf_line_endings(self) -> None:
        self.assertEqual(parse_stream_line("data: [DONE]\r"), StreamEvent.done())


class StreamDecoderTests(unittest.TestCase):
    def test_happy_path(self) -> None:
        written: list[str] = []
        decoder = StreamDecoder(sink=written.append)
        chunks = [_chunk("Hi"), _chunk(" there"), "data: [DONE]\n"]

        events = list(decoder.decode(chunks))

        self.assertEqual(
            events,
            [StreamEvent.content("Hi"), StreamEvent.content(" there"), StreamEvent.done()],
        )
        self.assertEqual(written, ["Hi", " there"])
        self.assertEqual(decoder.text, "Hi there")
        self.assertTrue(decoder.saw_done)

    def test_malformed_line_does_not_stop_decoding(self) -> None:
        decoder = StreamDecoder()
        chunks = [_chunk("A"), "data: {not valid json\n", _chunk("B"), "data: [DONE]\n"]

        events = list(decoder.decode(chunks))

        self.assertEqual(decoder.text, "AB")
        self.assertEqual([e.kind for e in events], ["content", "malformed", "content", "done"])
        self.assertEqual(decoder.accumulator.malformed_count, 1)

    def test_blank_and_non_data_lines_are_ignored(self) -> None:
        decoder = StreamDecoder()
        chunks = ["\n", ": OPENROUTER PROCESSING\n\n", _chunk("x"), "event: ping\n", "data: [DONE]\n"]

        events = list(decoder.decode(chunks))

        self.assertEqual(events, [StreamEvent.content("x"), StreamEvent.done()])

    def test_nothing_after_done_is_processed(self) -> None:
        written: list[str] = []
        decoder = StreamDecoder(sink=written.append)
        chunks = [_chunk("one") + "data: [DONE]\n" + _chunk("two"), _chunk("three")]

        list(decoder.decode(chunks))

        self.assertEqual(written, ["one"])
        self.assertEqual(decoder.feed(_chunk("four")), [])
        self.assertEqual(decoder.text, "one")

    def test_record_split_across_chunks(self) -> None:
        line = _chunk("split")
        decoder = StreamDecoder()

        events = list(decoder.decode([line[:12].encode(), line[12:].encode(), b"data: [DONE]\n"]))

        self.assertEqual(events[0], StreamEvent.content("split"))
        self.assertEqual(decoder.text, "split")

    def test_multibyte_character_split_across_chunks(self) -> None:
        raw = 'data: {"choices":[{"delta":{"content":"café"}}]}\n'.encode("utf-8")
        cut = raw.index("é".encode("utf-8")) + 1
        decoder = StreamDecoder()

        list(decoder.decode([raw[:cut], raw[cut:]]))

        self.assertEqual(decoder.text, "café")

    def test_closure_without_done_keeps_text(self) -> None:
        decoder = StreamDecoder()

        events = list(decoder.decode([_chunk("partial")]))

        self.assertEqual(events, [StreamEvent.content("partial")])
        self.assertEqual(decoder.text, "partial")
        self.assertFalse(decoder.saw_done)

    def test_unterminated_final_line_is_flushed_on_closure(self) -> None:
        decoder = StreamDecoder()

        list(decoder.decode([_chunk("a"), _chunk("b").rstrip("\n")]))

        self.assertEqual(decoder.text, "ab")

    def test_sink_is_called_before_next_chunk_is_read(self) -> None:
        order: list[str] = []
        decoder = StreamDecoder(sink=lambda text: order.append(f"sink:{text}"))

        def _chunks():
            order.append("read:1")
            yield _chunk("first")
            order.append("read:2")
            yield _chunk("second")

        for _ in decoder.decode(_chunks()):
            pass

        self.assertEqual(order, ["read:1", "sink:first", "read:2", "sink:second"])

    def test_decode_async(self) -> None:
        written: list[str] = []
        decoder = StreamDecoder(sink=written.append)

        async def _chunks():
            for chunk in [_chunk("Hi").encode(), b"\n", _chunk(" there").encode(), b"data: [DONE]\n"]:
                yield chunk

        async def _collect() -> list[StreamEvent]:
            return [event async for event in decoder.decode_async(_chunks())]

        events = asyncio.run(_collect())

        self.assertEqual(events[-1], StreamEvent.done())
        self.assertEqual(written, ["Hi", " there"])
        self.assertEqual(decoder.text, "Hi there")


class StreamAccumulatorTests(unittest.TestCase):
    def test_collects_content_in_order(self) -> None:
        state = StreamAccumulator()
        state.add(StreamEvent.content("A"))
        state.add(StreamEvent.malformed("{"))
        state.add(StreamEvent.content("B"))
        state.add(StreamEvent.done())

        self.assertEqual(state.text, "AB")
        self.assertTrue(state.saw_done)
        self.assertEqual(state.malformed_count, 1)


if __name__ == "__main__":
    unittest.main()
