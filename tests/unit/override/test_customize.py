"""Tests for OverrideEngine.customize (applying resolved overrides)."""
from __future__ import annotations

import logging

import pytest

from promptstack.core.errors import OverridesDisabledError, PromptStackError
from promptstack.core.items import Section, Weighted
from promptstack.core.override import OverrideEngine

from helpers import MemoryStorage, item_texts

LAYERS = ["/layer1", "/layer2", "/layer3"]


def _base() -> Section:
    return Section("Base").add("original")


class TestOverridePolicy:
    @pytest.mark.asyncio
    async def test_disabled_override_raises(self, storage: MemoryStorage, override_logs) -> None:
        storage.add_many(["/layer1/test.md"])
        engine = OverrideEngine(LAYERS, overrides=False, storage=storage)
        base = _base()

        with pytest.raises(OverridesDisabledError, match="overrides are not enabled"):
            await engine.customize("test.md", base)

        assert item_texts(base) == ["original"]
        assert any(r.levelno == logging.ERROR for r in override_logs.records)

    @pytest.mark.asyncio
    async def test_disabled_override_raises_before_fragments_apply(self, storage: MemoryStorage) -> None:
        storage.add_many(["/layer2/test.md", "/layer1/test-pre.md", "/layer1/test-post.md"])
        engine = OverrideEngine(LAYERS, storage=storage)
        base = _base()

        with pytest.raises(PromptStackError):
            await engine.customize("test.md", base)

        assert len(base) == 1

    @pytest.mark.asyncio
    async def test_enabled_override_replaces_tree(self, storage: MemoryStorage) -> None:
        storage.add_many(["/layer2/test.md"])
        engine = OverrideEngine(LAYERS, overrides=True, storage=storage)
        base = _base()

        result = await engine.customize("test.md", base)

        assert result is not base
        assert item_texts(result) == ["Content from /layer2/test.md"]
        assert item_texts(base) == ["original"]

    @pytest.mark.asyncio
    async def test_fragments_apply_to_override_tree(self, storage: MemoryStorage) -> None:
        storage.add_many(["/layer1/test.md", "/layer2/test-pre.md", "/layer3/test-post.md"])
        engine = OverrideEngine(LAYERS, overrides=True, storage=storage)
        base = _base()

        result = await engine.customize("test.md", base)

        assert item_texts(result) == [
            "Content from /layer2/test-pre.md",
            "Content from /layer1/test.md",
            "Content from /layer3/test-post.md",
        ]
        assert item_texts(base) == ["original"]

    @pytest.mark.asyncio
    async def test_fragments_allowed_without_overrides(self, storage: MemoryStorage) -> None:
        storage.add_many(["/layer1/test-pre.md", "/layer1/test-post.md"])
        engine = OverrideEngine(LAYERS, overrides=False, storage=storage)
        base = _base()

        result = await engine.customize("test.md", base)

        assert result is base
        assert len(base) == 3


class TestFragmentOrdering:
    @pytest.mark.asyncio
    async def test_every_layer_contributes_pre_and_post(self, storage: MemoryStorage) -> None:
        storage.add_many(f"{d}/test-{kind}.md" for d in LAYERS for kind in ("pre", "post"))
        engine = OverrideEngine(LAYERS, overrides=True, storage=storage)
        base = _base()

        result = await engine.customize("test.md", base)

        assert result is base
        assert len(result) == 7
        assert item_texts(result) == [
            "Content from /layer3/test-pre.md",
            "Content from /layer2/test-pre.md",
            "Content from /layer1/test-pre.md",
            "original",
            "Content from /layer3/test-post.md",
            "Content from /layer2/test-post.md",
            "Content from /layer1/test-post.md",
        ]

    @pytest.mark.asyncio
    async def test_fragments_nest_as_sections(self, storage: MemoryStorage) -> None:
        storage.add_many(["/layer1/test-pre.md", "/layer1/test-post.md"])
        engine = OverrideEngine(LAYERS, storage=storage)

        result = await engine.customize("test.md", _base())

        assert isinstance(result.items[0], Section)
        assert isinstance(result.items[1], Weighted)
        assert isinstance(result.items[2], Section)

    @pytest.mark.asyncio
    async def test_no_customizations_returns_base_unchanged(self, storage: MemoryStorage) -> None:
        engine = OverrideEngine(LAYERS, storage=storage)
        base = _base()

        result = await engine.customize("test.md", base)

        assert result is base
        assert item_texts(result) == ["original"]


class TestCustomizeLogging:
    @pytest.mark.asyncio
    async def test_enabled_override_warns_once(self, storage: MemoryStorage, override_logs) -> None:
        storage.add_many(["/layer2/test.md"])
        engine = OverrideEngine(LAYERS, overrides=True, storage=storage)

        await engine.customize("test.md", _base())

        warnings = [r for r in override_logs.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].args == (1,)

    @pytest.mark.asyncio
    async def test_debug_log_contains_formatted_result(self, storage: MemoryStorage, override_logs) -> None:
        storage.add("/layer1/test-post.md", "appended text")
        engine = OverrideEngine(LAYERS, storage=storage)

        await engine.customize("test.md", _base())

        assert any("appended text" in r.getMessage() for r in override_logs.records)
