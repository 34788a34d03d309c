from logic.badges import TitleBadge


def test_known_codes_map_to_their_badge():
    assert TitleBadge.from_code("RN") is TitleBadge.RN
    assert TitleBadge.from_code(" lpn ") is TitleBadge.LPN
    assert TitleBadge.from_code("MA") is TitleBadge.MA


def test_unknown_codes_fall_back_to_other():
    assert TitleBadge.from_code("RT") is TitleBadge.OTHER
    assert TitleBadge.from_code("") is TitleBadge.OTHER
    assert TitleBadge.from_code(None) is TitleBadge.OTHER
    # the fallback member itself is not a code
    assert TitleBadge.from_code("other") is TitleBadge.OTHER


def test_css_uses_both_colours():
    css = TitleBadge.RN.css()
    assert "#DBEAFE" in css and "#1E40AF" in css
