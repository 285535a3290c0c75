"""
Novelty compatibility games.

Every score mixes fixed letter rules with a variety term. The variety term
comes from a ``random.Random`` seeded with the normalized inputs, so the
same pair of names (in either order) always gets the same score.
"""

import random
import re
from typing import Any, Dict, List, Sequence

from ..helpers import _choice, _clamp, _err, _make_calc_entry, _ok, _round_int, _text

_CATEGORY = "fun-games"

_VOWELS = re.compile(r"[aeiou]")
_CONSONANTS = re.compile(r"[bcdfghjklmnpqrstvwxyz]")
_DOUBLED = re.compile(r"(.)\1")

ROMANTIC_NAMES = ["rose", "lily", "jade", "ruby", "pearl", "diamond", "crystal", "amber", "sapphire", "emerald"]
STRONG_NAMES = ["alex", "max", "leo", "ace", "rex", "zeus", "thor", "odin", "titan", "atlas"]
NATURE_NAMES = ["river", "ocean", "mountain", "forest", "sky", "star", "moon", "sun", "wind", "rain", "snow",
                "flower", "tree"]


# ── Helpers ──────────────────────────────────────────────────────────────────

def _normalize(name: str) -> str:
    return re.sub(r"\s", "", name.lower())


def _rng(*parts: str) -> random.Random:
    return random.Random("|".join(parts))


def _pair_rng(kind: str, a: str, b: str) -> random.Random:
    return _rng(kind, *sorted((a, b)))


def _step(diff: int, steps: Sequence[int]) -> int:
    """steps[0] for diff 0, steps[1] for diff <= 1 and so on; 0 past the end."""
    for limit, points in enumerate(steps):
        if diff <= limit:
            return points
    return 0


def _count(pattern: "re.Pattern[str]", name: str) -> int:
    return len(pattern.findall(name))


def _shared(a: str, b: str) -> set:
    return {ch for ch in a if ch in b}


def _letter_bonus(combined: str, weights: Dict[str, int]) -> int:
    return sum(points for letter, points in weights.items() if letter in combined)


def _ending_bonus(a: str, b: str) -> int:
    end_a, end_b = a[-2:], b[-2:]
    if end_a == end_b:
        return 12
    if end_a[1:2] == end_b[1:2]:
        return 8
    if end_a[0:1] == end_b[0:1]:
        return 4
    return 0


def _contains_any(words: List[str], *names: str) -> bool:
    return any(word in name for word in words for name in names)


def _percent_tier(score: int, labels: Sequence[str]) -> str:
    """Ten bands: >= 90 maps to labels[0], ... , < 10 to labels[9]."""
    index = 9 - min(score // 10, 9)
    return labels[index]


def _names(v: Dict[str, Any]) -> Any:
    a = _normalize(v["name1"])
    b = _normalize(v["name2"])
    if not a:
        return _err("Name cannot be blank", "name1")
    if not b:
        return _err("Name cannot be blank", "name2")
    return a, b


# 1. Love Percentage ──────────────────────────────────────────────────────────
LOVE_TIERS = (
    "Soulmate Alert!", "Love Birds!", "Sweet Chemistry!", "Potential Partners!", "Friends with Benefits!",
    "Opposites Attract!", "Mystery Romance!", "Adventure Awaits!", "Learning Experience!", "Plot Twist!",
)
_LOVE_LETTERS = {"l": 8, "o": 6, "v": 7, "e": 6, "h": 4, "a": 4, "r": 4, "t": 4}


def run_love_percentage(v: Dict[str, Any]) -> Dict[str, Any]:
    names = _names(v)
    if isinstance(names, dict):
        return names
    a, b = names

    score = 30.0
    score += _step(abs(len(a) - len(b)), (15, 10, 10, 5, 5, 2, 2))
    score += _step(abs(_count(_VOWELS, a) - _count(_VOWELS, b)), (12, 8, 4))
    score += _step(abs(_count(_CONSONANTS, a) - _count(_CONSONANTS, b)), (10, 6, 3))
    shared = _shared(a, b)
    score += len(shared) * 3
    score += _letter_bonus(a + b, _LOVE_LETTERS)
    score += _ending_bonus(a, b)
    if _DOUBLED.search(a) and _DOUBLED.search(b):
        score += 8
    if _contains_any(ROMANTIC_NAMES, a, b):
        score += 10
    if _contains_any(STRONG_NAMES, a, b):
        score += 8
    rule_score = score
    score += _pair_rng("love", a, b).random() * 35

    pct = int(_clamp(_round_int(score), 5, 95))
    return _ok(pct, [f"letter rules: {rule_score:g}", "variety: seeded from the two names",
                     "percentage clamped to 5-95"],
               tier=_percent_tier(pct, LOVE_TIERS), shared_letters="".join(sorted(shared)))


# 2. Name Compatibility ───────────────────────────────────────────────────────
NAME_TIERS = (
    "Name Soulmates!", "Perfect Match!", "Great Harmony!", "Nice Balance!", "Interesting Mix!",
    "Opposites Attract!", "Mystery Combination!", "Unique Pair!", "Adventure Awaits!", "Plot Twist!",
)
_NAME_LETTERS = {"l": 6, "o": 4, "v": 5, "e": 4, "h": 3, "a": 3, "r": 3, "t": 3, "s": 2, "u": 2, "p": 2, "n": 2}


def _common_frequency(a: str, b: str) -> int:
    return sum(min(a.count(ch), b.count(ch)) for ch in set(a) if ch in b)


def run_name_compatibility(v: Dict[str, Any]) -> Dict[str, Any]:
    names = _names(v)
    if isinstance(names, dict):
        return names
    a, b = names

    score = 25.0
    score += _step(abs(len(a) - len(b)), (18, 15, 12, 8, 5, 3, 3, 1, 1))
    vowels_a, vowels_b = _count(_VOWELS, a), _count(_VOWELS, b)
    score += _step(abs(vowels_a - vowels_b), (12, 8, 5, 3))
    score += _step(abs(_count(_CONSONANTS, a) - _count(_CONSONANTS, b)), (12, 8, 5, 3))

    shared = _shared(a, b)
    score += len(shared) * 2.5
    if len(shared) >= 5:
        score += 8
    elif len(shared) >= 3:
        score += 5
    elif len(shared) >= 2:
        score += 3

    score += _letter_bonus(a + b, _NAME_LETTERS)
    if _DOUBLED.search(a) and _DOUBLED.search(b):
        score += 8
    # syllables are approximated by vowel count
    score += _step(abs(vowels_a - vowels_b), (10, 6, 3))
    score += _ending_bonus(a, b)

    if a[:2] == b[:2]:
        score += 8
    elif a[:1] == b[:1]:
        score += 4

    if _contains_any(ROMANTIC_NAMES + ["love", "heart", "soul"], a, b):
        score += 8
    if _contains_any(STRONG_NAMES + ["king", "queen", "prince", "princess"], a, b):
        score += 6
    if _contains_any(NATURE_NAMES, a, b):
        score += 5
    score += _common_frequency(a, b) * 1.5
    rule_score = score
    score += _pair_rng("name", a, b).random() * 30

    pct = int(_clamp(_round_int(score), 5, 95))
    return _ok(pct, [f"letter rules: {rule_score:g}", "variety: seeded from the two names",
                     "percentage clamped to 5-95"],
               tier=_percent_tier(pct, NAME_TIERS), shared_letters="".join(sorted(shared)))


# 3. Zodiac Match ─────────────────────────────────────────────────────────────
ELEMENTS = {
    "Aries": "Fire", "Taurus": "Earth", "Gemini": "Air", "Cancer": "Water",
    "Leo": "Fire", "Virgo": "Earth", "Libra": "Air", "Scorpio": "Water",
    "Sagittarius": "Fire", "Capricorn": "Earth", "Aquarius": "Air", "Pisces": "Water",
}
SIGNS = list(ELEMENTS)

MODALITIES = {
    "Aries": "Cardinal", "Cancer": "Cardinal", "Libra": "Cardinal", "Capricorn": "Cardinal",
    "Taurus": "Fixed", "Leo": "Fixed", "Scorpio": "Fixed", "Aquarius": "Fixed",
    "Gemini": "Mutable", "Virgo": "Mutable", "Sagittarius": "Mutable", "Pisces": "Mutable",
}
YANG_SIGNS = {"Aries", "Gemini", "Leo", "Libra", "Sagittarius", "Aquarius"}
PLANETS = {
    "Aries": "Mars", "Taurus": "Venus", "Gemini": "Mercury", "Cancer": "Moon",
    "Leo": "Sun", "Virgo": "Mercury", "Libra": "Venus", "Scorpio": "Pluto",
    "Sagittarius": "Jupiter", "Capricorn": "Saturn", "Aquarius": "Uranus", "Pisces": "Neptune",
}
COMPATIBLE_PLANETS = {
    "Sun": ["Moon", "Venus", "Jupiter"],
    "Moon": ["Sun", "Venus", "Neptune"],
    "Mercury": ["Venus", "Jupiter"],
    "Venus": ["Sun", "Moon", "Mercury", "Jupiter"],
    "Mars": ["Jupiter", "Pluto"],
    "Jupiter": ["Sun", "Venus", "Mercury", "Mars"],
    "Saturn": ["Pluto", "Uranus"],
    "Uranus": ["Saturn", "Neptune"],
    "Neptune": ["Moon", "Uranus"],
    "Pluto": ["Mars", "Saturn"],
}
_COMPATIBLE_ELEMENTS = ({"Fire", "Air"}, {"Water", "Earth"})
_CHALLENGING_ELEMENTS = ({"Fire", "Water"}, {"Air", "Earth"})

# Pairwise bonus; pairs not listed (including a sign with itself) score 2.
SIGN_MATRIX: Dict[str, Dict[str, int]] = {
    "Aries": {"Leo": 28, "Sagittarius": 25, "Gemini": 18, "Aquarius": 16, "Libra": 12, "Cancer": 8,
              "Capricorn": 6, "Taurus": 4, "Virgo": 3, "Scorpio": 2, "Pisces": 5},
    "Taurus": {"Virgo": 28, "Capricorn": 25, "Cancer": 18, "Pisces": 16, "Scorpio": 12, "Leo": 8,
               "Aquarius": 6, "Gemini": 4, "Libra": 3, "Sagittarius": 2, "Aries": 4},
    "Gemini": {"Libra": 28, "Aquarius": 25, "Aries": 18, "Leo": 16, "Sagittarius": 12, "Virgo": 8,
               "Pisces": 6, "Cancer": 4, "Scorpio": 3, "Capricorn": 2, "Taurus": 4},
    "Cancer": {"Scorpio": 28, "Pisces": 25, "Taurus": 18, "Virgo": 16, "Capricorn": 12, "Gemini": 8,
               "Sagittarius": 6, "Leo": 4, "Aquarius": 3, "Aries": 2, "Libra": 4},
    "Leo": {"Aries": 28, "Sagittarius": 25, "Gemini": 18, "Libra": 16, "Aquarius": 12, "Cancer": 8,
            "Capricorn": 6, "Taurus": 4, "Scorpio": 3, "Pisces": 2, "Virgo": 4},
    "Virgo": {"Taurus": 28, "Capricorn": 25, "Cancer": 18, "Scorpio": 16, "Pisces": 12, "Leo": 8,
              "Aquarius": 6, "Gemini": 4, "Sagittarius": 3, "Aries": 2, "Libra": 4},
    "Libra": {"Gemini": 28, "Aquarius": 25, "Leo": 18, "Sagittarius": 16, "Aries": 12, "Virgo": 8,
              "Pisces": 6, "Cancer": 4, "Capricorn": 3, "Taurus": 2, "Scorpio": 4},
    "Scorpio": {"Cancer": 28, "Pisces": 25, "Virgo": 18, "Capricorn": 16, "Taurus": 12, "Libra": 8,
                "Sagittarius": 6, "Gemini": 4, "Aquarius": 3, "Leo": 2, "Aries": 4},
    "Sagittarius": {"Aries": 28, "Leo": 25, "Libra": 18, "Aquarius": 16, "Gemini": 12, "Scorpio": 8,
                    "Pisces": 6, "Cancer": 4, "Capricorn": 3, "Virgo": 2, "Taurus": 4},
    "Capricorn": {"Taurus": 28, "Virgo": 25, "Scorpio": 18, "Pisces": 16, "Cancer": 12, "Sagittarius": 8,
                  "Aquarius": 6, "Leo": 4, "Aries": 3, "Gemini": 2, "Libra": 4},
    "Aquarius": {"Gemini": 28, "Libra": 25, "Sagittarius": 18, "Aries": 16, "Leo": 12, "Capricorn": 8,
                 "Pisces": 6, "Taurus": 4, "Scorpio": 3, "Cancer": 2, "Virgo": 4},
    "Pisces": {"Cancer": 28, "Scorpio": 25, "Capricorn": 18, "Taurus": 16, "Virgo": 12, "Aquarius": 8,
               "Sagittarius": 6, "Gemini": 4, "Aries": 3, "Leo": 2, "Libra": 4},
}

ZODIAC_TIERS = (
    "Cosmic Soulmates!", "Perfect Zodiac Match!", "Great Zodiac Harmony!", "Nice Zodiac Balance!",
    "Interesting Zodiac Mix!", "Opposite Zodiac Signs!", "Mystery Zodiac Combination!", "Unique Zodiac Pair!",
    "Adventure Zodiac Awaits!", "Zodiac Plot Twist!",
)


def _element_match(sign1: str, sign2: str) -> str:
    pair = {ELEMENTS[sign1], ELEMENTS[sign2]}
    if len(pair) == 1:
        return "Same Element"
    if pair in _COMPATIBLE_ELEMENTS:
        return "Compatible Elements"
    return "Different Elements"


def run_zodiac_match(v: Dict[str, Any]) -> Dict[str, Any]:
    sign1, sign2 = v["sign1"], v["sign2"]
    log = ["base 20"]
    score = 20.0
    if sign1 == sign2:
        score += 35
        log.append("same sign +35")

    elements = {ELEMENTS[sign1], ELEMENTS[sign2]}
    if len(elements) == 1:
        score += 22
    elif elements in _COMPATIBLE_ELEMENTS:
        score += 18
    elif elements in _CHALLENGING_ELEMENTS:
        score += 8

    matrix_bonus = SIGN_MATRIX[sign1].get(sign2, 2)
    score += matrix_bonus
    log.append(f"sign pairing +{matrix_bonus}")

    score += 15 if MODALITIES[sign1] == MODALITIES[sign2] else 8
    score += 8 if (sign1 in YANG_SIGNS) != (sign2 in YANG_SIGNS) else 4

    planet1, planet2 = PLANETS[sign1], PLANETS[sign2]
    if planet1 == planet2:
        score += 10
    elif planet2 in COMPATIBLE_PLANETS.get(planet1, []):
        score += 6
    log.append(f"rule score {score:g}")

    score += _pair_rng("zodiac", sign1, sign2).random() * 25
    pct = int(_clamp(_round_int(score), 5, 95))
    log.append("variety: seeded from the two signs")
    return _ok(pct, log, tier=_percent_tier(pct, ZODIAC_TIERS), element_match=_element_match(sign1, sign2),
               elements=[ELEMENTS[sign1], ELEMENTS[sign2]], ruling_planets=[planet1, planet2])


# 4. Future Partner Name ──────────────────────────────────────────────────────
# (name, meaning, origin, gender, base compatibility)
NAME_TABLE = [
    ("Alexander", "Defender of the people", "Greek", "Male", 95),
    ("Sebastian", "Venerable, revered", "Greek", "Male", 88),
    ("Gabriel", "God is my strength", "Hebrew", "Male", 87),
    ("Lucas", "Light", "Latin", "Male", 89),
    ("Mateo", "Gift of God", "Hebrew", "Male", 86),
    ("Ethan", "Strong, firm", "Hebrew", "Male", 88),
    ("Noah", "Rest, comfort", "Hebrew", "Male", 85),
    ("Liam", "Strong-willed warrior", "Irish", "Male", 87),
    ("William", "Resolute protector", "German", "Male", 91),
    ("James", "Supplanter", "Hebrew", "Male", 86),
    ("Benjamin", "Son of the right hand", "Hebrew", "Male", 89),
    ("Henry", "Estate ruler", "German", "Male", 88),
    ("Samuel", "Name of God", "Hebrew", "Male", 85),
    ("Jack", "God is gracious", "English", "Male", 86),
    ("Owen", "Young warrior", "Welsh", "Male", 87),
    ("Daniel", "God is my judge", "Hebrew", "Male", 89),
    ("Christopher", "Bearer of Christ", "Greek", "Male", 86),
    ("Anthony", "Priceless one", "Latin", "Male", 87),
    ("David", "Beloved", "Hebrew", "Male", 90),
    ("Joseph", "He will add", "Hebrew", "Male", 85),
    ("Isabella", "Devoted to God", "Hebrew", "Female", 92),
    ("Olivia", "Olive tree", "Latin", "Female", 90),
    ("Sophia", "Wisdom", "Greek", "Female", 94),
    ("Emma", "Universal", "German", "Female", 91),
    ("Luna", "Moon", "Latin", "Female", 93),
    ("Aria", "Air, song", "Italian", "Female", 92),
    ("Mia", "Mine", "Italian", "Female", 90),
    ("Charlotte", "Free woman", "French", "Female", 88),
    ("Amelia", "Work", "German", "Female", 92),
    ("Ava", "Life", "Hebrew", "Female", 89),
    ("Harper", "Harp player", "English", "Female", 87),
    ("Evelyn", "Desired", "English", "Female", 90),
    ("Abigail", "Father's joy", "Hebrew", "Female", 91),
    ("Emily", "Rival", "Latin", "Female", 89),
    ("Elizabeth", "God is my oath", "Hebrew", "Female", 93),
    ("Grace", "Grace of God", "Latin", "Female", 92),
    ("Chloe", "Blooming", "Greek", "Female", 90),
    ("Victoria", "Victory", "Latin", "Female", 88),
    ("Scarlett", "Red", "English", "Female", 89),
    ("Penelope", "Weaver", "Greek", "Female", 87),
    ("Aanya", "Grace", "Indian", "Female", 90),
    ("Ananya", "Unique, matchless", "Indian", "Female", 91),
    ("Priya", "Beloved", "Indian", "Female", 92),
    ("Diya", "Lamp, light", "Indian", "Female", 89),
    ("Kavya", "Poetry", "Indian", "Female", 88),
    ("Isha", "Goddess, protector", "Indian", "Female", 90),
    ("Riya", "Singer", "Indian", "Female", 87),
    ("Neha", "Rain, love", "Indian", "Female", 88),
    ("Sanya", "Brilliant, moment", "Indian", "Female", 86),
    ("Aarohi", "Musical tune", "Indian", "Female", 89),
    ("Alex", "Defender of the people", "Greek", "Non-binary", 88),
    ("Jordan", "To flow down", "Hebrew", "Non-binary", 87),
    ("Taylor", "Tailor", "English", "Non-binary", 86),
    ("Casey", "Brave", "Irish", "Non-binary", 89),
    ("Riley", "Courageous", "Irish", "Non-binary", 88),
    ("Avery", "Ruler of the elves", "English", "Non-binary", 87),
    ("Quinn", "Wise", "Irish", "Non-binary", 90),
    ("Sage", "Wise one", "Latin", "Non-binary", 89),
    ("River", "Stream of water", "English", "Non-binary", 88),
    ("Phoenix", "Mythical bird", "Greek", "Non-binary", 91),
]

ORIGINS = ["Any", "English", "Spanish", "French", "Italian", "German", "Irish", "Scottish", "Welsh", "Greek",
           "Latin", "Hebrew", "Arabic", "Japanese", "Chinese", "Korean", "Indian", "Russian", "Polish", "Dutch",
           "Swedish", "Norwegian", "Finnish", "Portuguese", "Brazilian", "Mexican", "African", "Native American",
           "Celtic", "Norse", "Roman"]

PERSONALITY_BONUS = {
    "Romantic Dreamer": 5, "Adventurous Explorer": 3, "Creative Artist": 4, "Logical Thinker": 2,
    "Social Butterfly": 6, "Quiet Observer": 1, "Energetic Athlete": 3, "Mysterious Soul": 4,
    "Funny Comedian": 7, "Caring Helper": 5, "Practical Planner": 2, "Spiritual Seeker": 4,
}

_PARTNER_BANDS = [
    (90, "Incredible"),
    (80, "Excellent"),
    (70, "Good"),
    (60, "Decent"),
]


def _candidates(gender: str, origin: str) -> list:
    by_gender = [row for row in NAME_TABLE if gender == "Any" or row[3] == gender]
    by_origin = [row for row in by_gender if origin == "Any" or row[2] == origin]
    if origin != "Any" and by_origin:
        return by_origin
    if gender != "Any" and by_gender:
        return by_gender
    return NAME_TABLE


def run_future_partner_name(v: Dict[str, Any]) -> Dict[str, Any]:
    your_name = (v["your_name"] or "").strip()
    if v["your_name"] is not None and not your_name:
        return _err("Name cannot be blank", "your_name")
    gender, origin, personality = v["preferred_gender"], v["preferred_origin"], v["personality"]

    pool = _candidates(gender, origin)
    log = [f"{len(pool)} candidate names"]
    if origin != "Any" and not any(row[2] == origin for row in pool):
        log.append(f"no {origin} names for this preference; origin filter dropped")
    rng = _rng("partner", your_name.lower(), gender, origin, personality)
    name, meaning, name_origin, _, base = pool[rng.randrange(len(pool))]

    score = base + PERSONALITY_BONUS.get(personality, 0)
    if your_name:
        mine, theirs = your_name.lower(), name.lower()
        score += len(_shared(mine, theirs)) * 2
        diff = abs(len(your_name) - len(name))
        if diff <= 2:
            score += 3
        elif diff <= 4:
            score += 1
    compatibility = int(_clamp(score, 50, 99))

    tier = "Interesting"
    for threshold, label in _PARTNER_BANDS:
        if compatibility >= threshold:
            tier = label
            break
    log.append(f"compatibility = base {base} with personality and name bonuses, clamped to 50-99")
    return _ok(name, log, tier=tier, meaning=meaning, origin=name_origin, compatibility=compatibility)


# ── Registry ─────────────────────────────────────────────────────────────────

def _name_pair() -> list:
    return [_text("name1", "First name"), _text("name2", "Second name")]


CALCULATORS: Dict[str, Dict[str, Any]] = {
    "love_percentage": _make_calc_entry(
        "love_percentage", run_love_percentage, "Love Percentage Calculator",
        "A just-for-fun love score for two names.",
        _CATEGORY,
        _name_pair(),
        tags=["love", "names"],
        related=["name_compatibility", "zodiac_match"],
    ),
    "name_compatibility": _make_calc_entry(
        "name_compatibility", run_name_compatibility, "Name Compatibility Calculator",
        "How well two names go together, scored on letters, sounds and shape.",
        _CATEGORY,
        _name_pair(),
        tags=["names"],
        related=["love_percentage"],
    ),
    "zodiac_match": _make_calc_entry(
        "zodiac_match", run_zodiac_match, "Zodiac Match Calculator",
        "Compatibility of two sun signs from element, modality, polarity and ruling planet.",
        _CATEGORY,
        [_choice("sign1", "First sign", SIGNS), _choice("sign2", "Second sign", SIGNS)],
        tags=["astrology", "love"],
        related=["love_percentage"],
    ),
    "future_partner_name": _make_calc_entry(
        "future_partner_name", run_future_partner_name, "Future Partner Name Generator",
        "Suggests a partner name with its meaning, origin and a compatibility score.",
        _CATEGORY,
        [_text("your_name", "Your name", required=False),
         _choice("preferred_gender", "Preferred gender", ["Any", "Male", "Female", "Non-binary"], default="Any"),
         _choice("preferred_origin", "Preferred origin", ORIGINS, default="Any"),
         _choice("personality", "Personality type", ["Any"] + list(PERSONALITY_BONUS), default="Any")],
        tags=["names", "love"],
        related=["name_compatibility"],
    ),
}
