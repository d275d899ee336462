import json

import pytest

from src.zebra.errors import ConfigurationError
from src.zebra.loader import load_puzzles
from src.zebra.model import ClueKind, Value
from src.zebra.parser import parse_puzzle


def test_parser_uses_zebra_like_header_names():
    puzzle = {
        "id": "zebra-mini",
        "size": "3*0",
        "puzzle": """There are 3 houses, numbered 1 to 3 from left to right.
- The people are of nationalities: `norwegian`, `german`, `dane`
- People have unique favorite book genres: `fantasy`, `mystery`, `romance`
- People use unique phone models: `iphone 13`, `oneplus 9`, `samsung galaxy s21`

## Clues:
1. The German is in the first house.
""",
    }

    parsed = parse_puzzle(puzzle)
    names = [c.name for c in parsed.categories]
    assert names == ["Nationality", "BookGenre", "PhoneModel"]
    assert parsed.size == 3
    assert len(parsed.clues) == 1
    clue = parsed.clues[0]
    assert clue.kind == ClueKind.FORCED
    assert clue.a == Value("Nationality", "german")
    assert clue.position == 0


def test_text_clues_map_to_clue_kinds():
    puzzle = {
        "id": "kinds",
        "size": "4*2",
        "puzzle": """There are 4 houses, numbered 1 to 4 from left to right.
- Colors: red, blue, green, white
- Drinks: tea, milk, water, coffee

## Clues:
1. The red house is directly left of the blue house.
2. The tea drinker and the milk drinker are next to each other.
3. There is one house between the green house and the coffee drinker.
4. The white house is somewhere to the right of the water drinker.
5. The person in the blue house is not the milk drinker.
6. The tea drinker is not in the fourth house.
7. The green house is the coffee drinker.
8. Nobody here can be parsed.
""",
    }

    parsed = parse_puzzle(puzzle)
    kinds = [c.kind for c in parsed.clues]
    assert kinds == [
        ClueKind.LEFT_OF,
        ClueKind.NEXT_TO,
        ClueKind.DISTANCE,
        ClueKind.SOMEWHERE_LEFT_OF,
        ClueKind.NOT_LINKED,
        ClueKind.EXCLUDED,
        ClueKind.LINKED,
    ]
    distance = parsed.clues[2]
    assert distance.distance == 2
    somewhere = parsed.clues[3]
    assert somewhere.a == Value("Drink", "water")
    assert somewhere.b == Value("Color", "white")
    assert parsed.clues[5].position == 3


def test_structured_puzzle_resolves_labels():
    parsed = parse_puzzle({
        "id": "structured",
        "categories": [
            {"name": "Color", "values": ["Red", "Blue", "Green"]},
            {"name": "Pet", "values": ["Dog", "Cat", "Fish"]},
        ],
        "clues": [
            {"kind": "next_to", "a": "red", "b": "Fish", "description": "red by the fish"},
            {"kind": "implies", "a": "Dog", "position": 0, "b": "Green", "other_position": 2},
        ],
    })
    assert parsed.id == "structured"
    assert parsed.clues[0].description == "red by the fish"
    assert parsed.clues[0].a == Value("Color", "Red")
    assert parsed.clues[1].other_position == 2


def test_structured_puzzle_errors():
    base = {"categories": {"Color": ["Red", "Blue"], "Pet": ["Dog", "Cat"]}}
    with pytest.raises(ConfigurationError):
        parse_puzzle({**base, "clues": [{"kind": "sideways", "a": "Red"}]})
    with pytest.raises(ConfigurationError):
        parse_puzzle({**base, "clues": [{"kind": "linked", "a": "Purple", "b": "Dog"}]})
    with pytest.raises(ConfigurationError):
        parse_puzzle({**base, "clues": [{"kind": "forced", "a": "Red", "position": "left"}]})
    with pytest.raises(ConfigurationError):
        parse_puzzle({"categories": {"Color": ["Red", "Blue"], "Pet": ["Dog"]}})


def test_ambiguous_label_needs_a_category():
    base = {"categories": {"Color": ["Orange", "Blue"], "Fruit": ["Orange", "Apple"]}}
    with pytest.raises(ConfigurationError):
        parse_puzzle({**base, "clues": [{"kind": "forced", "a": "Orange", "position": 0}]})

    parsed = parse_puzzle({
        **base,
        "clues": [{"kind": "forced", "a": "Orange", "a_category": "Fruit", "position": 0}],
    })
    assert parsed.clues[0].a == Value("Fruit", "Orange")


def test_text_without_categories_is_rejected():
    with pytest.raises(ConfigurationError):
        parse_puzzle({"id": "empty", "puzzle": ""})


def test_loader_reads_json_and_jsonl(tmp_path):
    structured = {"id": "s", "categories": {"Color": ["Red"]}, "clues": []}
    json_file = tmp_path / "one.json"
    json_file.write_text(json.dumps([structured]), encoding="utf-8")
    assert load_puzzles(str(json_file)) == [structured]

    jsonl_file = tmp_path / "many.jsonl"
    jsonl_file.write_text(
        json.dumps({"id": "lgp-test-3x2-1", "puzzle": "Colors: red"}) + "\n{broken\n",
        encoding="utf-8",
    )
    records = load_puzzles(str(jsonl_file))
    assert len(records) == 1
    assert records[0]["size"] == "3*2"


def test_loader_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_puzzles(str(tmp_path / "missing.json"))


def test_list_categories_need_name_and_values():
    with pytest.raises(ConfigurationError, match="Category #1"):
        parse_puzzle({"categories": [{"values": ["Red", "Blue"]}]})
    with pytest.raises(ConfigurationError, match="Category #2"):
        parse_puzzle({"categories": [
            {"name": "Color", "values": ["Red", "Blue"]},
            {"name": "Pet"},
        ]})
    with pytest.raises(ConfigurationError):
        parse_puzzle({"categories": ["Color"]})


def test_category_values_given_as_a_string_are_rejected():
    with pytest.raises(ConfigurationError, match="Color"):
        parse_puzzle({"categories": {"Color": "Red", "Pet": "Dog"}})
    with pytest.raises(ConfigurationError):
        parse_puzzle({"categories": [{"name": "Color", "values": "Red"}]})
