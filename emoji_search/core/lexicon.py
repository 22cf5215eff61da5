# emoji_search/core/lexicon.py
"""
Built-in vocabulary used to enrich catalog entries before indexing.

 - JAPANESE_ROMAJI: Japanese phrase -> romaji spellings (first one is canonical)
 - ROMAJI_ENGLISH: romaji word -> English meanings
 - CATEGORIES: category tag -> name fragments that place an emoji in it
 - STANDARD_EMOJI: the default standard catalog, name -> (code points, keywords)

enrich_entry() folds all of these into an entry's aliases/keywords so the
index builder only ever has to look at the entry itself.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from .models import EmojiEntry, EmojiKind

JAPANESE_ROMAJI: Dict[str, Tuple[str, ...]] = {
    # greetings
    "おはようございます": ("ohayougozaimasu", "ohayou gozaimasu"),
    "おはよう": ("ohayou", "ohayo", "oha"),
    "こんにちは": ("konnichiwa", "konnichiha", "konnichi"),
    "こんばんは": ("konbanwa", "konbanha", "konban"),
    "おやすみなさい": ("oyasuminasai",),
    "おやすみ": ("oyasumi",),
    # thanks
    "ありがとうございます": ("arigatougozaimasu", "arigato gozaimasu"),
    "ありがとう": ("arigatou", "arigato", "arigataya"),
    "どうも": ("doumo", "domo"),
    "さすが": ("sasuga",),
    # apologies
    "すみません": ("sumimasen", "sumi"),
    "ごめんなさい": ("gomennasai", "gomen"),
    "ごめん": ("gomen",),
    # work
    "お疲れ様でした": ("otsukaresamadeshita", "otsukare sama deshita"),
    "お疲れ様です": ("otsukaresamadesu", "otsukare sama desu"),
    "お疲れ様": ("otsukaresama", "otsukare sama"),
    "お疲れ": ("otsukare", "otsu"),
    "確認します": ("kakuninshimasu", "kakunin shimasu"),
    "確認": ("kakunin",),
    "助かります": ("tasukarimasu", "tasukaru", "tsukaru"),
    "よろしくお願いします": ("yoroshikuonegaishimasu", "yoroshiku onegai shimasu"),
    "よろしく": ("yoroshiku", "yoro"),
    # reactions
    "なるほど": ("naruhodo", "naru"),
    "わかりました": ("wakarimashita", "wakari", "wakatta"),
    "はい": ("hai",),
    "いいえ": ("iie",),
    "がんばって": ("ganbatte", "ganba"),
    "がんばれ": ("ganbare",),
    "すごい": ("sugoi",),
    "すばらしい": ("subarashii",),
    # actions / people
    "お辞儀": ("ojigi",),
    "男性": ("dansei", "otoko"),
    "女性": ("josei", "onna"),
    "拍手": ("hakushu",),
    "笑": ("warai", "wara", "emi"),
    "泣": ("naki", "naku"),
    "怒": ("ikari", "oko"),
    "喜": ("yorokobi",),
    "悲": ("kanashimi",),
}

ROMAJI_ENGLISH: Dict[str, Tuple[str, ...]] = {
    "ohayou": ("good morning", "morning", "gm"),
    "ohayougozaimasu": ("good morning", "morning", "gm"),
    "konnichiwa": ("hello", "hi", "good afternoon"),
    "konbanwa": ("good evening", "evening"),
    "oyasumi": ("good night", "night", "gn"),
    "arigatou": ("thank you", "thanks", "ty", "thx"),
    "arigataya": ("thank you", "thanks", "grateful"),
    "sasuga": ("as expected", "impressive", "wow", "amazing"),
    "sumimasen": ("excuse me", "sorry", "pardon"),
    "gomennasai": ("sorry", "apologies", "my bad"),
    "otsukare": ("good work", "well done", "tired", "exhausted"),
    "otsukaresama": ("good work", "thank you for your hard work"),
    "kakunin": ("confirm", "check", "verify", "confirmation"),
    "tasukaru": ("helpful", "saved", "lifesaver", "help"),
    "yoroshiku": ("please", "regards", "nice to meet you"),
    "naruhodo": ("i see", "understood", "got it", "aha"),
    "wakarimashita": ("understood", "got it", "roger", "ok"),
    "hai": ("yes", "yeah", "yep", "sure"),
    "iie": ("no", "nope", "nah"),
    "ganbatte": ("good luck", "do your best", "fighting"),
    "sugoi": ("amazing", "awesome", "great", "wow"),
    "ojigi": ("bow", "bowing", "respect"),
    "ojigi_dansei": ("man bowing", "male bow", "bowing man"),
    "ojigi_josei": ("woman bowing", "female bow", "bowing woman"),
    "dansei": ("man", "male", "gentleman"),
    "josei": ("woman", "female", "lady"),
    "hakushu": ("clap", "applause", "clapping"),
}

CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "greetings": ("ohayou", "ohayo", "konnichiwa", "konbanwa", "oyasumi", "wave", "hello"),
    "thanks": ("arigatou", "arigato", "arigataya", "sasuga", "pray", "thanks"),
    "work": ("otsukare", "otsukaresama", "kakunin", "tasukaru", "yoroshiku"),
    "emotions": ("joy", "smile", "heart", "cry", "angry", "confused", "thinking"),
    "gestures": ("ojigi", "hakushu", "thumbsup", "thumbsdown", "ok_hand", "clap", "raised_hands"),
    "celebrations": ("tada", "party", "fire", "sparkles", "rocket", "hundred"),
}

# polite endings dropped to produce the short form of a custom emoji name
POLITE_SUFFIXES = ("shimasu", "desu", "masu")

# quick reaction -> custom emoji names it usually goes by, preferred first
QUICK_REACTIONS: Dict[str, Tuple[str, ...]] = {
    "kakunin": ("kakuninshimasu", "kakunin", "kakunin_shimasu", "kakunin-shimasu"),
    "sasuga": ("sasuga", "sasuga2", "sasuga1", "sasuga_", "sasuga-"),
    "tsukaru": ("tasukarimasu", "tasukaru", "tsukaru", "tasukari"),
    "otsukare": ("otsukaresamadesu", "otsukaresama", "otsukare", "otsukaresama_desu", "otsukaresamadeshita"),
    "oha": ("ohayougozaimasu", "ohayou", "oha", "ohayo", "ohayou_gozaimasu"),
    "arigataya": ("arigataya", "arigatai", "arigata", "arigataya_"),
}

# fragments that mark a custom emoji name as a Japanese-style reaction
REACTION_FRAGMENTS = (
    "arigatou", "arigato", "arigataya",
    "kakunin", "check",
    "sasuga", "sugoi", "subarashi",
    "ohayou", "ohayo", "oha",
    "otsukare", "otsu",
    "tasuka", "tsuka", "help",
    "naruhodo", "naru",
    "yoroshiku", "yoro",
    "ganbatte", "ganba", "ganbaru",
    "ii", "good", "ok",
    "hai", "yes",
    "wakarimashita", "wakari", "wakatta",
    "doumo", "domo",
    "sumimasen", "sumi",
    "gomennasai", "gomen",
)

# romaji shorter than this is too ambiguous to detect inside another name
_MIN_ROMAJI_PROBE = 4

STANDARD_EMOJI: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "+1": ("\U0001F44D", ("thumbsup", "like", "approve", "yes")),
    "thumbsup": ("\U0001F44D", ("+1", "like", "approve", "yes")),
    "-1": ("\U0001F44E", ("thumbsdown", "dislike", "no")),
    "thumbsdown": ("\U0001F44E", ("-1", "dislike", "no")),
    "heart": ("❤️", ("love", "like", "red heart")),
    "eyes": ("\U0001F440", ("look", "see", "watching")),
    "raised_hands": ("\U0001F64C", ("hooray", "celebrate", "praise")),
    "clap": ("\U0001F44F", ("applause", "congrats", "well done")),
    "wave": ("\U0001F44B", ("hello", "hi", "goodbye", "bye")),
    "ok_hand": ("\U0001F44C", ("ok", "perfect", "fine")),
    "pray": ("\U0001F64F", ("please", "thanks", "hope", "high five")),
    "fire": ("\U0001F525", ("hot", "lit", "flame")),
    "tada": ("\U0001F389", ("party", "celebrate", "congratulations", "hooray")),
    "rocket": ("\U0001F680", ("ship", "launch", "fast")),
    "white_check_mark": ("✅", ("done", "check", "complete", "yes")),
    "x": ("❌", ("no", "wrong", "cross", "cancel")),
    "joy": ("\U0001F602", ("laugh", "tears", "lol", "funny")),
    "smile": ("\U0001F60A", ("happy", "pleased", "blush")),
    "sweat_smile": ("\U0001F605", ("relief", "nervous", "phew")),
    "laughing": ("\U0001F606", ("laugh", "lol", "haha")),
    "wink": ("\U0001F609", ("flirt", "joke")),
    "heart_eyes": ("\U0001F60D", ("love", "crush", "adore")),
    "sob": ("\U0001F62D", ("cry", "tears", "sad")),
    "thinking_face": ("\U0001F914", ("think", "hmm", "ponder", "wonder")),
    "confused": ("\U0001F615", ("puzzled", "unsure")),
    "neutral_face": ("\U0001F610", ("meh", "indifferent")),
    "expressionless": ("\U0001F611", ("blank", "deadpan")),
    "no_mouth": ("\U0001F636", ("speechless", "silent")),
    "rolling_eyes": ("\U0001F644", ("whatever", "eyeroll")),
    "grimacing": ("\U0001F62C", ("awkward", "eek")),
    "relieved": ("\U0001F60C", ("calm", "relief")),
    "pensive": ("\U0001F614", ("sad", "thoughtful")),
    "sleepy": ("\U0001F62A", ("tired", "sleep")),
    "sleeping": ("\U0001F634", ("zzz", "sleep", "tired")),
    "mask": ("\U0001F637", ("sick", "ill")),
    "face_with_thermometer": ("\U0001F912", ("sick", "fever")),
    "nauseated_face": ("\U0001F922", ("sick", "gross")),
    "sneezing_face": ("\U0001F927", ("sick", "cold", "sneeze")),
    "hot_face": ("\U0001F975", ("hot", "heat", "sweating")),
    "cold_face": ("\U0001F976", ("cold", "freezing")),
    "woozy_face": ("\U0001F974", ("dizzy", "drunk")),
    "dizzy_face": ("\U0001F635", ("dizzy", "spiral")),
    "exploding_head": ("\U0001F92F", ("mind blown", "shocked")),
    "cowboy_hat_face": ("\U0001F920", ("cowboy", "yeehaw")),
    "party": ("\U0001F973", ("celebrate", "birthday")),
    "partying_face": ("\U0001F973", ("celebrate", "birthday", "party")),
    "sunglasses": ("\U0001F60E", ("cool", "shades")),
    "nerd_face": ("\U0001F913", ("nerd", "geek", "smart")),
    "face_with_monocle": ("\U0001F9D0", ("inspect", "curious")),
    "worried": ("\U0001F61F", ("nervous", "concerned")),
    "frowning_face": ("☹️", ("sad", "unhappy")),
    "hushed": ("\U0001F62F", ("surprised", "quiet")),
    "astonished": ("\U0001F632", ("amazed", "surprised", "shocked")),
    "flushed": ("\U0001F633", ("embarrassed", "blush")),
    "pleading_face": ("\U0001F97A", ("please", "puppy eyes", "beg")),
    "fearful": ("\U0001F628", ("scared", "afraid")),
    "cold_sweat": ("\U0001F630", ("nervous", "anxious")),
    "cry": ("\U0001F622", ("sad", "tear")),
    "scream": ("\U0001F631", ("horror", "shocked", "omg")),
    "disappointed": ("\U0001F61E", ("sad", "let down")),
    "sweat": ("\U0001F613", ("hard work", "stress")),
    "weary": ("\U0001F629", ("tired", "frustrated")),
    "tired_face": ("\U0001F62B", ("tired", "exhausted")),
    "yawning_face": ("\U0001F971", ("bored", "tired", "yawn")),
    "triumph": ("\U0001F624", ("proud", "huff")),
    "rage": ("\U0001F621", ("angry", "mad", "furious")),
    "angry": ("\U0001F620", ("mad", "annoyed")),
    "smiling_imp": ("\U0001F608", ("devil", "evil", "mischief")),
    "skull": ("\U0001F480", ("dead", "lol", "dying")),
    "poop": ("\U0001F4A9", ("hankey", "crap")),
    "clown_face": ("\U0001F921", ("clown", "silly")),
    "ghost": ("\U0001F47B", ("boo", "halloween", "spooky")),
    "alien": ("\U0001F47D", ("ufo", "space")),
    "robot_face": ("\U0001F916", ("robot", "bot", "machine")),
    "smiley_cat": ("\U0001F63A", ("cat", "happy")),
    "joy_cat": ("\U0001F639", ("cat", "laugh")),
    "heart_eyes_cat": ("\U0001F63B", ("cat", "love")),
    "handshake": ("\U0001F91D", ("deal", "agreement", "meeting")),
    "punch": ("\U0001F44A", ("fist bump", "fist", "hit")),
    "crossed_fingers": ("\U0001F91E", ("luck", "hopeful")),
    "v": ("✌️", ("victory", "peace")),
    "love_you_gesture": ("\U0001F91F", ("ily", "love")),
    "metal": ("\U0001F918", ("rock", "horns")),
    "point_left": ("\U0001F448", ("left", "direction")),
    "point_right": ("\U0001F449", ("right", "direction")),
    "point_up": ("☝️", ("up", "this", "direction")),
    "point_down": ("\U0001F447", ("down", "direction")),
    "raised_hand": ("✋", ("stop", "hand", "high five")),
    "vulcan_salute": ("\U0001F596", ("spock", "prosper")),
    "call_me_hand": ("\U0001F919", ("call", "shaka")),
    "muscle": ("\U0001F4AA", ("strong", "flex", "workout")),
    "writing_hand": ("✍️", ("write", "note")),
    "sparkles": ("✨", ("shiny", "new", "magic")),
    "star": ("⭐", ("favorite", "gold star")),
    "star2": ("\U0001F31F", ("glowing star", "shine")),
    "zap": ("⚡", ("lightning", "thunder", "fast")),
    "boom": ("\U0001F4A5", ("explosion", "collision", "bang")),
    "hundred": ("\U0001F4AF", ("100", "perfect", "score")),
    "100": ("\U0001F4AF", ("hundred", "perfect", "score")),
    "coffee": ("☕", ("cafe", "espresso", "break")),
    "beers": ("\U0001F37B", ("cheers", "drinks", "bar")),
    "cake": ("\U0001F370", ("dessert", "birthday")),
    "bug": ("\U0001F41B", ("insect", "defect")),
    "memo": ("\U0001F4DD", ("note", "write", "document")),
    "bulb": ("\U0001F4A1", ("idea", "light")),
    "warning": ("⚠️", ("caution", "alert")),
    "lock": ("\U0001F512", ("secure", "private")),
    "hourglass": ("⌛", ("wait", "time")),
    "calendar": ("\U0001F4C6", ("date", "schedule")),
    "bow": ("\U0001F647", ("bowing", "sorry", "respect", "ojigi")),
}


def default_standard_catalog() -> Dict[str, EmojiEntry]:
    """Fresh copy of the bundled standard catalog as EmojiEntry objects."""
    return {
        name: EmojiEntry(
            id=name,
            kind=EmojiKind.STANDARD,
            render_value=value,
            keywords=keywords,
        )
        for name, (value, keywords) in STANDARD_EMOJI.items()
    }


def _name_parts(name: str) -> List[str]:
    return [p for p in re.split(r"[_\-\s]+", name.lower()) if p]


def romaji_aliases(name: str) -> List[str]:
    """Romaji spellings and the Japanese form for phrases found inside `name`."""
    low = name.lower()
    out: List[str] = []
    for japanese, spellings in JAPANESE_ROMAJI.items():
        if japanese in name:
            out.extend(spellings)
            continue
        for spelling in spellings:
            probe = spelling.replace(" ", "")
            if len(probe) >= _MIN_ROMAJI_PROBE and probe in low:
                out.append(japanese)
                out.extend(s for s in spellings if s != spelling)
                break
    return out


def english_aliases(name: str) -> List[str]:
    low = name.lower()
    out: List[str] = list(ROMAJI_ENGLISH.get(low, ()))
    for part in _name_parts(low):
        if part != low:
            out.extend(ROMAJI_ENGLISH.get(part, ()))
    return out


def categories_for(name: str) -> List[str]:
    low = name.lower()
    return [cat for cat, fragments in CATEGORIES.items() if any(f in low for f in fragments)]


def spelling_variants(name: str) -> List[str]:
    out: List[str] = []
    if "_" in name:
        out.append(name.replace("_", ""))
        out.append(name.replace("_", "-"))
        out.append(name.replace("_", " "))
    for suffix in POLITE_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            out.append(name[: -len(suffix)])
            break
    return out


def enrich_entry(entry: EmojiEntry) -> EmojiEntry:
    """Return `entry` with lexicon aliases, English meanings and category tags added."""
    aliases = romaji_aliases(entry.id) + english_aliases(entry.id) + spelling_variants(entry.id)
    cats = categories_for(entry.id)
    return entry.with_metadata(
        keywords=cats,
        aliases=aliases,
        category=cats[0] if cats else None,
    )
