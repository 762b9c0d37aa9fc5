"""Tests for inline property extraction."""

import pytest

from vaultprops.properties import (
    Checkbox,
    Date,
    Link,
    List,
    Number,
    Text,
    insert_property,
    parse,
    replace_property,
)
from vaultprops.properties.inline import (
    BracketSpan,
    PropertyPatterns,
    assign_group,
    line_offsets,
    scan_brackets,
    tokenize_span,
)


def test_parse_text():
    props = parse("Esto es [titulo::Mi Libro] de texto.")

    assert len(props) == 1
    assert props[0].key == "titulo"
    assert props[0].value == Text("Mi Libro")
    assert props[0].raw_value == "Mi Libro"
    assert props[0].group_id is None
    assert props[0].hidden is False


def test_parse_number():
    props = parse("El precio es [precio::99.99] euros.")

    assert len(props) == 1
    assert props[0].key == "precio"
    assert props[0].value == Number(99.99)


def test_parse_boolean_in_source_order():
    props = parse("Estado: [completado::true] y [pendiente::false]")

    assert [p.value for p in props] == [Checkbox(True), Checkbox(False)]
    assert [p.key for p in props] == ["completado", "pendiente"]


def test_parse_date():
    props = parse("Fecha: [fecha::2025-11-29]")

    assert props[0].value == Date("2025-11-29")


def test_parse_link_sets_linked_note():
    props = parse("Autor: [autor::@Cervantes]")

    assert props[0].value == Link("Cervantes")
    assert props[0].linked_note == "Cervantes"


def test_parse_list():
    props = parse("Items: [items::uno, dos, tres]")

    assert len(props) == 1
    assert props[0].value == List(("uno", "dos", "tres"))
    assert props[0].group_id is None


def test_parse_unicode_key():
    props = parse("[año::1605] [título::Ficciones]")

    assert [p.key for p in props] == ["año", "título"]
    assert props[0].value == Number(1605.0)


def test_parse_multiple_lines():
    content = """
# Mi Libro

[tipo::libro]
[titulo::Don Quijote]
[autor::@Cervantes]
[año::1605]
[paginas::863]
[leido::true]

Este es un gran libro.
"""
    props = parse(content)

    assert len(props) == 6
    assert [p.line_number for p in props] == [4, 5, 6, 7, 8, 9]


def test_line_numbers():
    props = parse("Linea 1\n[campo::valor]\nLinea 3")

    assert len(props) == 1
    assert props[0].line_number == 2


def test_line_number_on_first_and_last_line():
    props = parse("[a::1]\nmedio\n[b::2]")

    assert [p.line_number for p in props] == [1, 3]


def test_offsets_cover_bracket_span():
    content = "El [precio::100] es bajo."
    prop = parse(content)[0]

    assert content[prop.char_start:prop.char_end] == "[precio::100]"


def test_hidden_property():
    props = parse("[campo:::valor] y [otro::visible]")

    assert props[0].hidden is True
    assert props[0].value == Text("valor")
    assert props[1].hidden is False


def test_separator_spacing_is_allowed():
    props = parse("[precio ::  42 ]")

    assert props[0].key == "precio"
    assert props[0].value == Number(42.0)
    assert props[0].raw_value == "42"


def test_grouped_properties():
    props = parse("Referencia: [autor::Cervantes, libro::Quijote, año::1605]")

    assert len(props) == 3
    assert props[0].group_id is not None
    assert props[0].group_id == props[1].group_id == props[2].group_id
    assert [p.key for p in props] == ["autor", "libro", "año"]
    assert props[0].value == Text("Cervantes")
    assert props[1].value == Text("Quijote")
    assert props[2].value == Number(1605.0)
    # every member points at the same bracket
    content = "Referencia: [autor::Cervantes, libro::Quijote, año::1605]"
    assert {(p.char_start, p.char_end) for p in props} == {(12, len(content))}


def test_grouped_with_links():
    props = parse("[tipo::libro, autor::@Cervantes, titulo::Quijote]")

    assert len(props) == 3
    assert props[1].value == Link("Cervantes")
    assert props[1].linked_note == "Cervantes"


def test_grouped_value_stops_at_last_comma_before_next_key():
    props = parse("[tags::a, b, extra libro::Quijote]")

    assert [p.key for p in props] == ["tags", "libro"]
    # "extra" sits between the last comma and the next key and is dropped
    assert props[0].value == List(("a", "b"))
    assert props[1].value == Text("Quijote")


def test_grouped_value_without_comma_runs_to_next_key():
    props = parse("[a::uno b::dos]")

    assert props[0].raw_value == "uno"
    assert props[1].raw_value == "dos"
    assert props[0].group_id == props[1].group_id == 1


def test_grouped_hidden_flags_are_per_pair():
    props = parse("[juego::Celeste, comprado:::2023-01-15]")

    assert [p.hidden for p in props] == [False, True]
    assert props[1].value == Date("2023-01-15")


def test_escaped_comma():
    props = parse("[titulo::Cien años de soledad\\, novela]")

    assert len(props) == 1
    assert props[0].group_id is None
    assert props[0].value == Text("Cien años de soledad, novela")
    assert props[0].raw_value == "Cien años de soledad, novela"


def test_escaped_comma_inside_grouped_value():
    props = parse("[titulo::Cien años\\, novela, autor::@García Márquez]")

    assert len(props) == 2
    assert props[0].value == Text("Cien años, novela")
    assert props[1].value == Link("García Márquez")


def test_individual_has_no_group():
    props = parse("[autor::Cervantes] escribió [libro::Quijote]")

    assert [p.group_id for p in props] == [None, None]


def test_multiple_groups():
    content = """
[autor::Cervantes, libro::Quijote]
[autor::Borges, libro::Ficciones]
"""
    props = parse(content)

    assert len(props) == 4
    assert [p.group_id for p in props] == [1, 1, 2, 2]


def test_group_ids_ignore_standalone_spans():
    content = "[x::1] [a::1, b::2] [y::2] [z::3] [c::3, d::4] [w::4]"
    props = parse(content)

    groups = [(p.key, p.group_id) for p in props]
    assert groups == [
        ("x", None),
        ("a", 1),
        ("b", 1),
        ("y", None),
        ("z", None),
        ("c", 2),
        ("d", 2),
        ("w", None),
    ]


def test_brackets_without_pairs_are_ignored():
    content = "- [ ] tarea\n[enlace](http://example.com) [nota: sin par] [[wiki]]"

    assert parse(content) == []


def test_brackets_do_not_nest():
    # the first "]" closes the span; the inner "[" is plain text
    props = parse("[outer::[inner::x] y]")

    assert [p.key for p in props] == ["outer", "inner"]
    assert props[0].raw_value == "["
    assert props[1].value == Text("x")
    assert props[0].group_id == props[1].group_id == 1
    assert props[0].char_end == len("[outer::[inner::x]")


def test_key_must_start_with_letter():
    assert parse("[1campo::x]")[0].key == "campo"
    assert parse("[_::x]") == []


@pytest.mark.parametrize("content", ["[²::x]", "[Ⅻ::x]", "[½::x]", "[²³::x]"])
def test_numeral_symbols_do_not_start_a_key(content):
    assert parse(content) == []


def test_key_after_numeral_symbol():
    props = parse("[½kg::2] [Ⅻsiglo::XII]")

    assert [p.key for p in props] == ["kg", "siglo"]
    assert props[0].value == Number(2.0)
    # numeral symbols are fine after the first letter
    assert parse("[tomoⅫ::x]")[0].key == "tomoⅫ"


def test_parse_is_total():
    for content in ["", "[", "]", "[]", "[::]", "[:::]", "[a::", "a::b", "[a::b\\]", "\x00[k::\x00]"]:
        for prop in parse(content):
            assert prop.key
            assert 0 <= prop.char_start < prop.char_end <= len(content)


def test_parse_returns_fresh_results():
    content = "[a::1]"
    first = parse(content)
    second = parse(content)

    assert first == second
    assert first is not second


def test_full_text_honours_hidden():
    props = parse("[visible::uno] [oculto:::dos\\, tres]")

    assert props[0].full_text() == "[visible::uno]"
    assert props[1].full_text() == "[oculto:::dos, tres]"


def test_to_dict():
    prop = parse("[autor::@Cervantes]")[0]

    assert prop.to_dict() == {
        "key": "autor",
        "value": {"type": "link", "value": "Cervantes"},
        "raw_value": "@Cervantes",
        "line": 1,
        "char_start": 0,
        "char_end": 19,
        "linked_note": "Cervantes",
        "group_id": None,
        "hidden": False,
    }


def test_line_offsets():
    assert line_offsets("a\nbc\n") == [0, 2, 5]
    assert line_offsets("") == [0]


def test_scan_brackets_positions():
    spans = list(scan_brackets("x [a::1]\n[b]"))

    assert spans == [
        BracketSpan(inner="a::1", line_number=1, char_start=2, char_end=8),
        BracketSpan(inner="b", line_number=2, char_start=9, char_end=12),
    ]


def test_tokenize_span_without_pair():
    span = BracketSpan(inner="solo texto", line_number=1, char_start=0, char_end=12)

    assert tokenize_span(span) == []


def test_assign_group_threads_counter():
    single = parse("[a::1]")
    pair = parse("[a::1]")[:1] * 2

    unchanged, counter = assign_group(single, 4)
    assert counter == 4
    assert unchanged[0].group_id is None

    grouped, counter = assign_group(pair, 4)
    assert counter == 5
    assert [p.group_id for p in grouped] == [5, 5]


def test_custom_patterns_are_used():
    patterns = PropertyPatterns()

    assert parse("[a::1, b::2]", patterns) == parse("[a::1, b::2]")


def test_replace_property():
    content = "El [precio::100] es bajo."
    prop = parse(content)[0]

    assert replace_property(content, prop, "200") == "El [precio::200] es bajo."


def test_replace_property_reparses_with_new_value():
    content = "Linea\nEl [precio::100] es bajo."
    new_content = replace_property(content, parse(content)[0], "@Tienda")
    props = parse(new_content)

    assert len(props) == 1
    assert props[0].key == "precio"
    assert props[0].value == Link("Tienda")
    assert props[0].line_number == 2


def test_replace_hidden_property_writes_visible_separator():
    content = "[precio:::100]"
    new_content = replace_property(content, parse(content)[0], "5")

    assert new_content == "[precio::5]"
    assert parse(new_content)[0].hidden is False


def test_replace_grouped_property_rewrites_whole_bracket():
    content = "[a::1, b::2] fin"
    b = parse(content)[1]

    assert replace_property(content, b, "3") == "[b::3] fin"


@pytest.mark.parametrize(
    "content,line,expected",
    [
        ("uno\ndos\ntres", 2, "uno\ndos [k::v]\ntres"),
        ("uno\ndos\n", 2, "uno\ndos [k::v]\n"),
        ("uno\r\ndos\r\n", 1, "uno [k::v]\r\ndos\r\n"),
        ("solo", 1, "solo [k::v]"),
        ("uno\n\ntres", 2, "uno\n [k::v]\ntres"),
    ],
)
def test_insert_property(content, line, expected):
    assert insert_property(content, line, "k", "v") == expected


@pytest.mark.parametrize("line", [0, -1, 3, 10])
def test_insert_property_out_of_range_is_noop(line):
    content = "uno\ndos\n"

    assert insert_property(content, line, "k", "v") == content


def test_insert_property_into_empty_content_is_noop():
    assert insert_property("", 1, "k", "v") == ""


def test_inserted_property_is_parsed():
    content = insert_property("Titulo\nCuerpo", 2, "leido", "true")
    props = parse(content)

    assert props[0].key == "leido"
    assert props[0].value == Checkbox(True)
    assert props[0].line_number == 2
