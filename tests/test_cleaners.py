from screenplay_parser.text.cleaners import clean_layout_noise, is_layout_noise


def test_clean_layout_noise_drops_page_furniture_keeps_blanks():
    lines = [
        "(CONTINUED)",
        "SARAH",
        "(MORE)",
        "",
        "12.",
        "Hello there.",
        "CONTINUED: (2)",
        "PAGE 3",
        "Rev. 05/12/2001",
    ]
    assert clean_layout_noise(lines) == ["SARAH", "", "Hello there."]


def test_screenplay_content_is_not_noise():
    for line in ("(beat)", "INT. OFFICE - DAY", "12 GREAT HALL", "She continued walking."):
        assert not is_layout_noise(line)
