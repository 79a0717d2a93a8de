"""Unit tests for flashcard, summary and search-query generation."""

import json

import pytest

from landr_agent.chunking import ChunkConfig, ChunkProcessingError
from landr_agent.config.settings import RuntimeSettings
from landr_agent.learning import (
    Flashcard,
    FlashcardFormatError,
    FlashcardSet,
    MaterialConfig,
    MaterialGenerator,
    merge_flashcard_sets,
    parse_flashcards,
)
from landr_agent.providers.openai_compat import OpenAICompatibleProvider
from landr_agent.reliability.retry import RetryPolicy
from tests.helpers.providers import ScriptedProvider

pytestmark = pytest.mark.unit

PARAGRAPHS = ["a" * 60, "b" * 60, "c" * 60]
THREE_CHUNK_MATERIAL = "\n\n".join(PARAGRAPHS)


def flashcard_answer(title="", tags=(), cards=()):
    return json.dumps({
        "title": title,
        "tags": list(tags),
        "flashcards": [{"question": q, "answer": a} for q, a in cards],
    })


def prompt_of(provider, call=0):
    return provider.calls[call]["turns"][-1].text


@pytest.fixture
def material_config():
    return MaterialConfig(
        chunk_config=ChunkConfig(max_chunk_chars=100, overlap_chars=10, max_total_chars=100),
        inter_chunk_delay_seconds=0,
        retry_policy=RetryPolicy(max_attempts=3, base_delay=0.0, max_delay=0.0, jitter=False),
    )


class TestParseFlashcards:

    def test_fenced_json(self):
        answer = "```json\n" + flashcard_answer("Rust", ["Systems"], [("What is Rust?", "A language")]) + "\n```"

        result = parse_flashcards(answer)

        assert result.title == "Rust"
        assert result.tags == ["Systems"]
        assert result.flashcards == [Flashcard(question="What is Rust?", answer="A language")]

    @pytest.mark.parametrize("answer", [
        "Here are your flashcards!",
        "[]",
        '{"title": "x", "flashcards": [{"question": "no answer"}]}',
    ])
    def test_malformed_answers(self, answer):
        with pytest.raises(FlashcardFormatError) as exc_info:
            parse_flashcards(answer)
        assert exc_info.value.raw == answer


class TestMergeFlashcardSets:

    def test_first_title_tag_union_and_dedup(self):
        sets = [
            FlashcardSet(title="", tags=["Rust"], flashcards=[Flashcard(question="What is ownership?", answer="1")]),
            FlashcardSet(
                title="Rust Basics",
                tags=["Rust", "Memory"],
                flashcards=[
                    Flashcard(question="  what is OWNERSHIP? ", answer="duplicate"),
                    Flashcard(question="What is borrowing?", answer="2"),
                ],
            ),
            FlashcardSet(title="Later title", tags=["Memory", "Safety"]),
        ]

        merged = merge_flashcard_sets(sets)

        assert merged.title == "Rust Basics"
        assert merged.tags == ["Rust", "Memory", "Safety"]
        assert [c.answer for c in merged.flashcards] == ["1", "2"]

    def test_empty(self):
        assert merge_flashcard_sets([]) == FlashcardSet()


class TestMaterialGenerator:

    @pytest.mark.asyncio
    async def test_generate_flashcards_prompt(self, material_config):
        provider = ScriptedProvider("groq", [flashcard_answer("T", ["x"], [("q", "a")])])
        generator = MaterialGenerator(provider, config=material_config)

        result = await generator.generate_flashcards("Ownership moves values.", ["Rust", "Go"])

        assert result.title == "T"
        prompt = prompt_of(provider)
        assert "Existing tags you might reuse if relevant: Rust, Go" in prompt
        assert prompt.endswith("Text:\nOwnership moves values.")

    @pytest.mark.asyncio
    async def test_generate_flashcards_truncates_content(self):
        provider = ScriptedProvider("groq", [flashcard_answer()])
        generator = MaterialGenerator(provider, config=MaterialConfig(max_content_chars=50))

        await generator.generate_flashcards("a" * 50 + "z" * 30)

        assert prompt_of(provider).endswith("Text:\n" + "a" * 50)

    @pytest.mark.asyncio
    async def test_chunked_flashcards_are_merged(self, material_config):
        provider = ScriptedProvider("groq", [
            flashcard_answer("", ["Rust"], [("What is ownership?", "moves")]),
            flashcard_answer("Rust Basics", ["Rust", "Memory"], [("what is ownership?", "dup"), ("What is borrowing?", "refs")]),
            "not json at all",
        ])
        generator = MaterialGenerator(provider, config=material_config)

        result = await generator.generate_flashcards_from_chunks(THREE_CHUNK_MATERIAL, ["Rust"])

        assert provider.call_count == 3
        assert result.title == "Rust Basics"
        assert result.tags == ["Rust", "Memory"]
        assert [c.question for c in result.flashcards] == ["What is ownership?", "What is borrowing?"]
        assert prompt_of(provider, 0).endswith("a" * 60 + "\n\n")

    @pytest.mark.asyncio
    async def test_all_chunks_failing(self, material_config):
        provider = ScriptedProvider("groq", ["still not json"])
        generator = MaterialGenerator(provider, config=material_config)

        with pytest.raises(ChunkProcessingError) as exc_info:
            await generator.generate_flashcards_from_chunks(THREE_CHUNK_MATERIAL)

        assert len(exc_info.value.errors) == 3
        assert all(isinstance(e, FlashcardFormatError) for e in exc_info.value.errors)

    @pytest.mark.asyncio
    async def test_single_chunk_retried_on_transient_error(self, material_config):
        provider = ScriptedProvider("groq", [RuntimeError("503 service unavailable"), flashcard_answer("Short")])
        generator = MaterialGenerator(provider, config=material_config)

        result = await generator.generate_flashcards_from_chunks("Short material.")

        assert result.title == "Short"
        assert provider.call_count == 2

    @pytest.mark.asyncio
    async def test_summary_uses_summary_provider(self):
        flashcards = ScriptedProvider("groq")
        summaries = ScriptedProvider("cerebras", ["  Key points.  "])
        generator = MaterialGenerator(flashcards, summary_provider=summaries, config=MaterialConfig(summary_max_content_chars=10))

        summary = await generator.generate_summary("0123456789overflow")

        assert summary == "Key points."
        assert flashcards.call_count == 0
        assert prompt_of(summaries).endswith("Text:\n0123456789")

    @pytest.mark.asyncio
    async def test_summary_of_empty_material(self):
        with pytest.raises(ValueError):
            await MaterialGenerator(ScriptedProvider()).generate_summary("   ")

    def test_summary_provider_defaults_to_provider(self):
        provider = ScriptedProvider("groq")
        assert MaterialGenerator(provider).summary_provider is provider

    @pytest.mark.asyncio
    async def test_optimize_search_query(self):
        provider = ScriptedProvider("groq", ['  "rust async runtimes 2025"  '])

        query = await MaterialGenerator(provider).optimize_search_query("Rust and async")

        assert query == "rust async runtimes 2025"
        assert 'The user likes: "Rust and async"' in prompt_of(provider)

    @pytest.mark.asyncio
    async def test_optimize_search_query_length_cap(self):
        provider = ScriptedProvider("groq", ["q" * 500])
        assert len(await MaterialGenerator(provider).optimize_search_query("anything")) == 380

    @pytest.mark.asyncio
    async def test_optimize_search_query_needs_interests(self):
        with pytest.raises(ValueError):
            await MaterialGenerator(ScriptedProvider()).optimize_search_query("")

    def test_from_settings(self):
        generator = MaterialGenerator.from_settings(RuntimeSettings(groq_api_key="gk"))

        assert isinstance(generator.provider, OpenAICompatibleProvider)
        assert generator.provider.name == "groq"


class TestProcessMaterial:

    @pytest.mark.asyncio
    async def test_small_material(self, material_config):
        flashcards = ScriptedProvider("groq", [flashcard_answer("Intro", ["Rust"], [("q1", "a1")])])
        summaries = ScriptedProvider("cerebras", ["A short summary."])
        generator = MaterialGenerator(flashcards, summary_provider=summaries, config=material_config)

        result = await generator.process_material("Rust is a systems language.", ["Rust"])

        assert result.title == "Intro"
        assert result.tags == ["Rust"]
        assert [c.question for c in result.flashcards] == ["q1"]
        assert result.summary == "A short summary."
        assert flashcards.call_count == 1

    @pytest.mark.asyncio
    async def test_large_material_is_chunked(self, material_config):
        material_config.chunking_token_threshold = 10
        flashcards = ScriptedProvider("groq", [
            flashcard_answer("One", [], [("q1", "a")]),
            flashcard_answer("Two", [], [("q2", "a")]),
            flashcard_answer("Three", [], [("q3", "a")]),
        ])
        generator = MaterialGenerator(flashcards, summary_provider=ScriptedProvider("cerebras"), config=material_config)

        result = await generator.process_material(THREE_CHUNK_MATERIAL)

        assert flashcards.call_count == 3
        assert result.title == "One"
        assert [c.question for c in result.flashcards] == ["q1", "q2", "q3"]

    @pytest.mark.asyncio
    async def test_summary_failure_is_not_fatal(self, material_config):
        flashcards = ScriptedProvider("groq", [flashcard_answer("Intro", cards=[("q", "a")])])
        summaries = ScriptedProvider("cerebras", [RuntimeError("invalid api key")])
        generator = MaterialGenerator(flashcards, summary_provider=summaries, config=material_config)

        result = await generator.process_material("Some material.")

        assert result.summary is None
        assert len(result.flashcards) == 1

    @pytest.mark.asyncio
    async def test_flashcard_failure_is_fatal(self, material_config):
        flashcards = ScriptedProvider("groq", ["I cannot help with that."])
        generator = MaterialGenerator(flashcards, summary_provider=ScriptedProvider("cerebras"), config=material_config)

        with pytest.raises(FlashcardFormatError):
            await generator.process_material("Some material.")

        assert flashcards.call_count == 1

    @pytest.mark.asyncio
    async def test_empty_material(self):
        with pytest.raises(ValueError):
            await MaterialGenerator(ScriptedProvider()).process_material("")
