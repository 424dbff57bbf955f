import transliteration


def test_contains_han():
    assert transliteration.contains_han("北京")
    assert transliteration.contains_han("Beijing 北京")
    assert not transliteration.contains_han("Beijing")
    assert not transliteration.contains_han("")

def test_romanize_strips_tones_and_spaces():
    assert transliteration.romanize("北京") == "beijing"
    assert transliteration.romanize("上海") == "shanghai"

def test_romanize_without_library(no_pinyin):
    assert transliteration.romanize("北京") is None

def test_failed_import_is_not_retried(monkeypatch):
    import builtins

    attempts = []
    real_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "pypinyin":
            attempts.append(name)
            raise ImportError("no pypinyin")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(transliteration, "_lazy_pinyin", transliteration._UNSET)
    monkeypatch.setattr(builtins, "__import__", fake_import)
    assert transliteration.romanize("北京") is None
    assert transliteration.romanize("上海") is None
    assert attempts == ["pypinyin"]

def test_contains_han_supplementary_ranges():
    assert transliteration.contains_han("\U0002F800")
    assert transliteration.contains_han("\U00030000")
    assert not transliteration.contains_han("\U0002FA20")
