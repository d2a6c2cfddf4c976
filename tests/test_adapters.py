"""Tests for the provider adapters and the adapter registry.

The provider SDK clients are replaced with mocks, so these tests run
without API keys or network access.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from arbiter.adapters.anthropic_adapter import AnthropicJudge
from arbiter.adapters.base import BaseEmbedder, BaseJudge, EmbeddingResult, GenerationConfig
from arbiter.adapters.openai_adapter import OpenAIEmbedder, OpenAIJudge
from arbiter.adapters.registry import get_embedder, get_judge
from arbiter.evaluation.errors import JudgeOutputError
from arbiter.evaluation.statements import StatementList

SCHEMA = StatementList.model_json_schema()


class _EchoJudge(BaseJudge):
    """A custom judge for dotted-path loading tests."""

    async def generate_structured(self, schema, prompt):
        return {"prompt": prompt}


class _NotAJudge:
    pass


def _make_openai_response(content: str | None) -> SimpleNamespace:
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _make_openai_judge(content: str | None, **config) -> OpenAIJudge:
    judge = OpenAIJudge(GenerationConfig(model="gpt-4o-mini", **config))
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_make_openai_response(content))
    judge._client = client
    return judge


def _make_anthropic_judge(*blocks: SimpleNamespace) -> AnthropicJudge:
    judge = AnthropicJudge(GenerationConfig(model="claude-test", max_tokens=512))
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=SimpleNamespace(content=list(blocks)))
    judge._client = client
    return judge


class TestOpenAIJudge:
    @pytest.mark.asyncio
    async def test_parses_json_content(self):
        judge = _make_openai_judge('{"statements": ["a"]}')
        assert await judge.generate_structured(SCHEMA, "prompt") == {"statements": ["a"]}

    @pytest.mark.asyncio
    async def test_request_carries_schema_and_config(self):
        judge = _make_openai_judge('{"statements": []}', temperature=0.2, extras={"seed": 7})
        await judge.generate_structured(SCHEMA, "the prompt")
        kwargs = judge._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["messages"] == [{"role": "user", "content": "the prompt"}]
        assert kwargs["response_format"]["json_schema"]["name"] == "StatementList"
        assert kwargs["response_format"]["json_schema"]["schema"] == SCHEMA
        assert kwargs["temperature"] == 0.2
        assert kwargs["seed"] == 7

    @pytest.mark.asyncio
    async def test_fenced_reply_is_extracted(self):
        judge = _make_openai_judge('```json\n{"statements": ["b"]}\n```')
        assert await judge.generate_structured(SCHEMA, "p") == {"statements": ["b"]}

    @pytest.mark.asyncio
    async def test_no_json_raises(self):
        judge = _make_openai_judge("I cannot help with that.")
        with pytest.raises(JudgeOutputError, match="StatementList"):
            await judge.generate_structured(SCHEMA, "p")

    def test_provider_name(self):
        assert OpenAIJudge().provider_name() == "openai"


class TestOpenAIEmbedder:
    @pytest.mark.asyncio
    async def test_restores_input_order(self):
        embedder = OpenAIEmbedder(model="text-embedding-3-small")
        client = MagicMock()
        client.embeddings.create = AsyncMock(
            return_value=SimpleNamespace(
                data=[
                    SimpleNamespace(index=1, embedding=[0.0, 1.0]),
                    SimpleNamespace(index=0, embedding=[1.0, 0.0]),
                ],
                usage=SimpleNamespace(total_tokens=12),
            )
        )
        embedder._client = client
        result = await embedder.embed_many(["first", "second"])
        assert result.embeddings == [[1.0, 0.0], [0.0, 1.0]]
        assert result.usage_tokens == 12
        assert client.embeddings.create.call_args.kwargs["input"] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_empty_input_skips_request(self):
        embedder = OpenAIEmbedder()
        embedder._client = MagicMock()
        assert await embedder.embed_many([]) == EmbeddingResult(embeddings=[])


class TestAnthropicJudge:
    @pytest.mark.asyncio
    async def test_returns_forced_tool_input(self):
        judge = _make_anthropic_judge(
            SimpleNamespace(type="tool_use", name="submit_answer", input={"statements": ["x"]})
        )
        assert await judge.generate_structured(SCHEMA, "p") == {"statements": ["x"]}
        kwargs = judge._client.messages.create.call_args.kwargs
        assert kwargs["tool_choice"] == {"type": "tool", "name": "submit_answer"}
        assert kwargs["tools"][0]["input_schema"] == SCHEMA
        assert kwargs["max_tokens"] == 512

    @pytest.mark.asyncio
    async def test_falls_back_to_text_json(self):
        judge = _make_anthropic_judge(
            SimpleNamespace(type="text", text='Result: {"statements": ["y"]}')
        )
        assert await judge.generate_structured(SCHEMA, "p") == {"statements": ["y"]}

    @pytest.mark.asyncio
    async def test_no_answer_raises(self):
        judge = _make_anthropic_judge(SimpleNamespace(type="text", text="no"))
        with pytest.raises(JudgeOutputError):
            await judge.generate_structured(SCHEMA, "p")


class TestRegistry:
    def test_builtin_judges(self):
        assert isinstance(get_judge("openai"), OpenAIJudge)
        assert isinstance(get_judge("anthropic"), AnthropicJudge)

    def test_builtin_embedder_with_kwargs(self):
        embedder = get_embedder("openai", model="text-embedding-3-large")
        assert isinstance(embedder, BaseEmbedder)
        assert embedder.model == "text-embedding-3-large"

    def test_judge_config_kwarg(self):
        judge = get_judge("openai", config=GenerationConfig(model="gpt-4o"))
        assert judge.config.model == "gpt-4o"

    def test_dotted_path(self):
        judge = get_judge(f"{__name__}._EchoJudge")
        assert isinstance(judge, _EchoJudge)

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown judge"):
            get_judge("nonexistent")

    def test_embedder_has_no_anthropic_builtin(self):
        with pytest.raises(ValueError, match="Unknown embedder"):
            get_embedder("anthropic")

    def test_not_a_subclass_raises(self):
        with pytest.raises(TypeError, match="not a subclass of BaseJudge"):
            get_judge(f"{__name__}._NotAJudge")

    def test_missing_attribute_raises(self):
        with pytest.raises(ImportError, match="no attribute"):
            get_judge(f"{__name__}._Missing")
