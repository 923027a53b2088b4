"""Kana to romaji table.

Every prompt resolves to a tuple of accepted full key sequences, uppercase,
in the same alphabet the input matcher normalizes keys to. The first entry is
the spelling shown under the prompt and followed by the finger guide.
"""

from __future__ import annotations

ROMAJI_TABLE: dict[str, tuple[str, ...]] = {
    # あ行
    "あ": ("A",), "い": ("I", "YI"), "う": ("U", "WU", "WHU"), "え": ("E",), "お": ("O",),
    # か行
    "か": ("KA", "CA"), "き": ("KI",), "く": ("KU", "CU", "QU"), "け": ("KE",), "こ": ("KO", "CO"),
    # さ行
    "さ": ("SA",), "し": ("SHI", "SI", "CI"), "す": ("SU",), "せ": ("SE", "CE"), "そ": ("SO",),
    # た行
    "た": ("TA",), "ち": ("CHI", "TI"), "つ": ("TSU", "TU"), "て": ("TE",), "と": ("TO",),
    # な行
    "な": ("NA",), "に": ("NI",), "ぬ": ("NU",), "ね": ("NE",), "の": ("NO",),
    # は行
    "は": ("HA",), "ひ": ("HI",), "ふ": ("FU", "HU"), "へ": ("HE",), "ほ": ("HO",),
    # ま行
    "ま": ("MA",), "み": ("MI",), "む": ("MU",), "め": ("ME",), "も": ("MO",),
    # や行
    "や": ("YA",), "ゆ": ("YU",), "よ": ("YO",),
    # わ行
    "わ": ("WA",), "を": ("WO",), "ん": ("NN", "XN"),
    # が行
    "が": ("GA",), "ぎ": ("GI",), "ぐ": ("GU",), "げ": ("GE",), "ご": ("GO",),
    # ざ行
    "ざ": ("ZA",), "じ": ("JI", "ZI"), "ず": ("ZU",), "ぜ": ("ZE",), "ぞ": ("ZO",),
    # だ行
    "だ": ("DA",), "ぢ": ("DI",), "づ": ("DU",), "で": ("DE",), "ど": ("DO",),
    # ば行
    "ば": ("BA",), "び": ("BI",), "ぶ": ("BU",), "べ": ("BE",), "ぼ": ("BO",),
    # ぱ行
    "ぱ": ("PA",), "ぴ": ("PI",), "ぷ": ("PU",), "ぺ": ("PE",), "ぽ": ("PO",),
    # きゃ行
    "きゃ": ("KYA",), "きゅ": ("KYU",), "きょ": ("KYO",),
    # しゃ行
    "しゃ": ("SHA", "SYA"), "しゅ": ("SHU", "SYU"), "しょ": ("SHO", "SYO"),
    # ちゃ行
    "ちゃ": ("CHA", "TYA", "CYA"), "ちゅ": ("CHU", "TYU", "CYU"), "ちょ": ("CHO", "TYO", "CYO"),
    # にゃ行
    "にゃ": ("NYA",), "にゅ": ("NYU",), "にょ": ("NYO",),
    # ひゃ行
    "ひゃ": ("HYA",), "ひゅ": ("HYU",), "ひょ": ("HYO",),
    # みゃ行
    "みゃ": ("MYA",), "みゅ": ("MYU",), "みょ": ("MYO",),
    # りゃ行
    "りゃ": ("RYA",), "りゅ": ("RYU",), "りょ": ("RYO",),
    # ふぁ行
    "ふぁ": ("FA", "FWA"), "ふぃ": ("FI", "FYI"), "ふぇ": ("FE", "FYE"), "ふぉ": ("FO", "FWO"),
    # ぎゃ行
    "ぎゃ": ("GYA",), "ぎゅ": ("GYU",), "ぎょ": ("GYO",),
    # じゃ行
    "じゃ": ("JA", "ZYA", "JYA"), "じゅ": ("JU", "ZYU", "JYU"), "じょ": ("JO", "ZYO", "JYO"),
    # ぢゃ行
    "ぢゃ": ("DYA",), "ぢゅ": ("DYU",), "ぢょ": ("DYO",),
    # びゃ行
    "びゃ": ("BYA",), "びゅ": ("BYU",), "びょ": ("BYO",),
    # ぴゃ行
    "ぴゃ": ("PYA",), "ぴゅ": ("PYU",), "ぴょ": ("PYO",),
}


def accepted_sequences(prompt: str) -> tuple[str, ...]:
    """Return every full key sequence that completes ``prompt``.

    Prompts missing from the table are typed literally.
    """
    if not prompt:
        return ()
    return ROMAJI_TABLE.get(prompt, (prompt.upper(),))


def display_romaji(prompt: str) -> str:
    sequences = accepted_sequences(prompt)
    return sequences[0] if sequences else ""


def guide_key(prompt: str, typed: str = "") -> str | None:
    """Next key to press along the displayed spelling, or None when off-track."""
    spelling = display_romaji(prompt)
    if not spelling:
        return None
    if not spelling.startswith(typed) or len(typed) >= len(spelling):
        # Follow whichever accepted spelling the player is actually typing
        for alt in accepted_sequences(prompt):
            if alt.startswith(typed) and len(typed) < len(alt):
                return alt[len(typed)]
        return None
    return spelling[len(typed)]
