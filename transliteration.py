import logging
import re

logger = logging.getLogger(__name__)

# CJK unified ideographs: basic block, ext A, ext B-G, compatibility ideographs and supplement.
HAN_PATTERN = re.compile(
    "[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\U00020000-\U0002ebef\U0002f800-\U0002fa1f\U00030000-\U0003134f]"
)

_UNSET = object()
_lazy_pinyin = _UNSET


# Returns True if the text contains at least one Chinese character.
def contains_han(text):
    return bool(HAN_PATTERN.search(text or ""))


def _load_pinyin():
    """Import pypinyin once; remembers a failed import so it is not retried."""
    global _lazy_pinyin
    if _lazy_pinyin is _UNSET:
        try:
            from pypinyin import lazy_pinyin
        except ImportError as e:
            logger.info("pypinyin not available, queries are sent as typed: %s", e)
            lazy_pinyin = None
        _lazy_pinyin = lazy_pinyin
    return _lazy_pinyin


def romanize(text):
    """
    Return toneless pinyin for `text` with whitespace removed ("北京" -> "beijing"),
    or None when the transliteration library can't be used.
    """
    lazy_pinyin = _load_pinyin()
    if lazy_pinyin is None:
        return None
    try:
        syllables = lazy_pinyin(text)
    except Exception as e:
        logger.warning("Pinyin conversion failed for %r: %s", text, e)
        return None
    return re.sub(r"\s+", "", "".join(syllables))
