"""Stage catalog: character pools and background themes."""

from __future__ import annotations

from kanafall.config import HOME_ROW_KEYS
from kanafall.models import Stage

# Background tags understood by the renderer (see renderer/colors.py)
BACKGROUNDS = ("sky", "meadow", "sunset", "ocean", "forest", "dusk", "sakura", "lavender")


def _stage(stage_id: int, label: str, chars: str | tuple[str, ...], background: str) -> Stage:
    characters = tuple(chars) if isinstance(chars, str) else chars
    return Stage(id=stage_id, label=label, characters=characters, background=background)


STAGES: dict[int, Stage] = {
    s.id: s
    for s in (
        _stage(1, "F/J練習", HOME_ROW_KEYS, "sky"),
        _stage(2, "あ行", "あいうえお", "meadow"),
        _stage(3, "か行", "かきくけこ", "sunset"),
        _stage(4, "さ行", "さしすせそ", "ocean"),
        _stage(5, "た行", "たちつてと", "forest"),
        _stage(6, "な行", "なにぬねの", "dusk"),
        _stage(7, "は行", "はひふへほ", "sakura"),
        _stage(8, "ま行", "まみむめも", "lavender"),
        _stage(9, "や行", "やゆよ", "sky"),
        _stage(10, "わ行", "わをん", "meadow"),
        _stage(11, "が行", "がぎぐげご", "sunset"),
        _stage(12, "ざ行", "ざじずぜぞ", "ocean"),
        _stage(13, "だ行", "だぢづでど", "forest"),
        _stage(14, "ば行", "ばびぶべぼ", "dusk"),
        _stage(15, "ぱ行", "ぱぴぷぺぽ", "sakura"),
        _stage(16, "きゃ行", ("きゃ", "きゅ", "きょ"), "lavender"),
        _stage(17, "しゃ行", ("しゃ", "しゅ", "しょ"), "sky"),
        _stage(18, "ちゃ行", ("ちゃ", "ちゅ", "ちょ"), "meadow"),
        _stage(19, "にゃ行", ("にゃ", "にゅ", "にょ"), "sunset"),
        _stage(20, "ひゃ行", ("ひゃ", "ひゅ", "ひょ"), "ocean"),
        _stage(21, "みゃ行", ("みゃ", "みゅ", "みょ"), "forest"),
        _stage(22, "りゃ行", ("りゃ", "りゅ", "りょ"), "dusk"),
        _stage(23, "ふぁ行", ("ふぁ", "ふぃ", "ふぇ", "ふぉ"), "sakura"),
        _stage(24, "ぎゃ行", ("ぎゃ", "ぎゅ", "ぎょ"), "lavender"),
        _stage(25, "じゃ行", ("じゃ", "じゅ", "じょ"), "sky"),
        _stage(26, "ぢゃ行", ("ぢゃ", "ぢゅ", "ぢょ"), "meadow"),
        _stage(27, "びゃ行", ("びゃ", "びゅ", "びょ"), "sunset"),
        _stage(28, "ぴゃ行", ("ぴゃ", "ぴゅ", "ぴょ"), "ocean"),
    )
}

STAGE_IDS: tuple[int, ...] = tuple(sorted(STAGES))


def get_stage(stage_id: int) -> Stage:
    """Look up a stage, falling back to the first one for unknown IDs."""
    return STAGES.get(stage_id, STAGES[STAGE_IDS[0]])


def characters_for(stage_id: int) -> tuple[str, ...]:
    return get_stage(stage_id).characters


def pool_for(stage_ids: tuple[int, ...] | list[int]) -> list[str]:
    """Concatenate the character pools of several stages, in stage order."""
    pool: list[str] = []
    for stage_id in stage_ids:
        if stage_id in STAGES:
            pool.extend(STAGES[stage_id].characters)
    return pool
