"""
Tests for SectionSplitter: marker split, numbered-list split and fallback.
"""

from domain.parsing import DISH_MARKER, ParserVocabulary, SectionSplitter, split

from test_fixtures import MILANESA_REPLY, NUMBERED_REPLY, TWO_DISH_REPLY


def test_single_marker_is_one_fragment_with_whole_reply():
    fragments = split(MILANESA_REPLY)
    assert fragments == [MILANESA_REPLY.strip()]


def test_repeated_marker_splits_per_dish_and_drops_preamble():
    fragments = split(TWO_DISH_REPLY)

    assert len(fragments) == 2
    assert all(f.startswith(DISH_MARKER) for f in fragments)
    assert fragments[0].startswith(f"{DISH_MARKER} Café con leche")
    assert fragments[1].startswith(f"{DISH_MARKER} Tostadas con manteca")
    assert "Buen provecho" not in "".join(fragments)


def test_marker_count_matches_fragment_count():
    reply = "\n".join(f"{DISH_MARKER} Plato {i}\nCalorías: {i}" for i in range(1, 5))
    assert len(split(reply)) == 4


def test_blank_content_between_markers_is_dropped():
    reply = f"{DISH_MARKER}   \n{DISH_MARKER} Empanada\nCalorías: 300 kcal"
    assert split(reply) == [f"{DISH_MARKER} Empanada\nCalorías: 300 kcal"]


def test_numbered_list_splits_per_item():
    fragments = split(NUMBERED_REPLY)

    assert fragments == [
        "1. Ensalada César\n"
        "   Calorías: 320 kcal\n"
        "   Proteínas: 14g\n"
        "   Grasas: 22g\n"
        "   Carbohidratos: 18g",
        "2. Agua mineral\n"
        "   Calorías: 0 kcal\n"
        "   Proteínas: 0g\n"
        "   Grasas: 0g\n"
        "   Carbohidratos: 0g",
    ]


def test_indented_numbered_lines_start_items():
    reply = "  1. Mate\n  2. Medialunas"
    assert split(reply) == ["1. Mate", "2. Medialunas"]


def test_decimal_at_line_start_is_not_a_list_item():
    reply = "1.5 tazas de arroz\nCalorías: 300 kcal"
    assert split(reply) == [reply]


def test_marker_rule_wins_over_numbered_list():
    reply = (
        f"{DISH_MARKER} Fideos\n1. Calorías: 400 kcal\n"
        f"{DISH_MARKER} Flan\n2. Calorías: 250 kcal"
    )
    fragments = split(reply)
    assert len(fragments) == 2
    assert all(f.startswith(DISH_MARKER) for f in fragments)


def test_unstructured_reply_is_single_trimmed_fragment():
    assert split("  Hola, ¿qué comiste hoy?  \n") == ["Hola, ¿qué comiste hoy?"]


def test_empty_and_missing_input_give_one_empty_fragment():
    assert split("") == [""]
    assert split("   \n ") == [""]
    assert split(None) == [""]


def test_resplitting_a_fragment_is_stable():
    for fragment in split(TWO_DISH_REPLY) + split("Guiso de lentejas"):
        assert split(fragment) == [fragment]


def test_custom_marker_from_vocabulary():
    splitter = SectionSplitter(ParserVocabulary(dish_marker="🥣 Plato:"))
    reply = "🥣 Plato: Avena\nCalorías: 150\n🥣 Plato: Yogur\nCalorías: 90"

    assert splitter.split(reply) == [
        "🥣 Plato: Avena\nCalorías: 150",
        "🥣 Plato: Yogur\nCalorías: 90",
    ]
    # the default marker no longer triggers a split for this splitter
    assert len(splitter.split(TWO_DISH_REPLY)) == 1


def test_single_marker_with_numbered_ingredients_stays_one_dish():
    reply = (
        f"{DISH_MARKER} Ensalada completa\n"
        "Ingredientes:\n"
        "1. Lechuga\n"
        "2. Tomate\n"
        "Calorías: 200 kcal\n"
        "Proteínas: 5g\n"
        "Grasas: 10g\n"
        "Carbohidratos: 20g\n"
    )
    assert split(reply) == [reply.strip()]
