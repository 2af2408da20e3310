import asyncio

import pytest

from leanbot_core.reveal import TextRevealScheduler


TEXT = "Hello world this is a test"


def test_ticks_reveal_three_words_at_a_time():
    updates = []
    reveal = TextRevealScheduler(TEXT, chunk_size=3, on_update=lambda text, done: updates.append((text, done)))

    assert reveal.displayed_text == ""
    assert reveal.is_complete is False

    assert reveal.tick() == "Hello world this"
    assert reveal.is_complete is False
    assert reveal.tick() == TEXT
    assert reveal.is_complete is True

    # 完成后继续 tick 不再变化，也不再回调
    assert reveal.tick() == TEXT
    assert updates == [("Hello world this", False), (TEXT, True)]


def test_frames_are_growing_prefixes_ending_with_full_text():
    reveal = TextRevealScheduler("one two three four five six seven", chunk_size=3)
    frames = list(reveal.frames())
    assert frames == ["one two three", "one two three four five six", "one two three four five six seven"]
    for shorter, longer in zip(frames, frames[1:]):
        assert longer.startswith(shorter)
    # 每次调用都从头开始
    assert list(reveal.frames()) == frames


def test_prefixes_keep_original_whitespace():
    reveal = TextRevealScheduler("Line one\nLine  two", chunk_size=3)
    assert reveal.tick() == "Line one\nLine"
    assert reveal.tick() == "Line one\nLine  two"


def test_disabled_shows_full_text_immediately():
    reveal = TextRevealScheduler(TEXT, enabled=False)
    assert reveal.displayed_text == TEXT
    assert reveal.is_complete is True
    assert list(reveal.frames()) == [TEXT]


def test_empty_text_completes_on_first_tick():
    reveal = TextRevealScheduler("")
    assert list(reveal.frames()) == [""]
    assert reveal.tick() == ""
    assert reveal.is_complete is True


def test_invalid_parameters():
    with pytest.raises(ValueError):
        TextRevealScheduler(TEXT, chunk_size=0)
    with pytest.raises(ValueError):
        TextRevealScheduler(TEXT, delay=0)


def test_from_settings():
    class SettingsStub:
        reveal_chunk_size = 2
        reveal_delay_seconds = 0.01
        reveal_enabled = True

    reveal = TextRevealScheduler.from_settings(TEXT, SettingsStub())
    assert reveal.tick() == "Hello world"


def test_set_text_restarts_from_empty():
    reveal = TextRevealScheduler(TEXT)
    reveal.tick()
    reveal.set_text("Completely different reply text here")
    assert reveal.displayed_text == ""
    assert reveal.is_complete is False
    assert reveal.tick() == "Completely different reply"

    # 相同文本不会重置进度
    reveal.set_text("Completely different reply text here")
    assert reveal.displayed_text == "Completely different reply"


@pytest.mark.asyncio
async def test_timer_runs_to_completion():
    updates = []
    reveal = TextRevealScheduler(TEXT, delay=0.01, on_update=lambda text, done: updates.append(done))

    result = await asyncio.wait_for(reveal.wait_complete(), timeout=2)

    assert result == TEXT
    assert reveal.is_complete is True
    assert updates == [False, True]
    await asyncio.sleep(0)
    assert reveal.is_running is False


@pytest.mark.asyncio
async def test_disabled_never_starts_a_task():
    reveal = TextRevealScheduler(TEXT, enabled=False)
    assert await reveal.wait_complete() == TEXT
    assert reveal.is_running is False


@pytest.mark.asyncio
async def test_context_exit_cancels_timer():
    async with TextRevealScheduler(TEXT, delay=10) as reveal:
        assert reveal.is_running is True
    assert reveal.is_running is False
    assert reveal.is_complete is False
    assert reveal.displayed_text == ""


@pytest.mark.asyncio
async def test_set_text_while_running_restarts_timer():
    reveal = TextRevealScheduler(TEXT, delay=10)
    reveal.start()
    reveal.set_text("New text")
    assert reveal.is_running is True
    assert reveal.displayed_text == ""
    await reveal.aclose()
    assert reveal.is_running is False


@pytest.mark.asyncio
async def test_independent_schedulers():
    first = TextRevealScheduler(TEXT, chunk_size=1, delay=0.01)
    second = TextRevealScheduler("short one", chunk_size=1, delay=0.01)

    results = await asyncio.wait_for(asyncio.gather(first.wait_complete(), second.wait_complete()), timeout=2)

    assert results == [TEXT, "short one"]
