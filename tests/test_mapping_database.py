"""Tests for in-memory mapping matching."""

import pytest

from mappings_bot.mappings.database import MappingDatabase, intermediate_id
from mappings_bot.mappings.types import Mapping, MappingType

PLAYER = Mapping(MappingType.CLASS, "net/minecraft/entity/player/EntityPlayer", "EntityPlayer")
ATTACK = Mapping(MappingType.METHOD, "func_70097_a", "attackEntityFrom", owner="EntityPlayer", desc="(F)Z")
INVENTORY = Mapping(MappingType.FIELD, "field_71071_by", "inventory", owner="EntityPlayer", comment="Items")
SOURCE = Mapping(MappingType.PARAM, "p_70097_1_", "source", owner="EntityPlayer")
AMOUNT = Mapping(MappingType.PARAM, "p_70097_2_", "amount", owner="EntityPlayer")


@pytest.fixture
def database():
    return MappingDatabase("1.12.2", [PLAYER, ATTACK, INVENTORY, SOURCE, AMOUNT])


@pytest.mark.parametrize(
    "intermediate, expected",
    [
        ("func_70097_a", "70097"),
        ("field_71071_by", "71071"),
        ("p_70097_1_", "70097"),
        ("p_i1234_1_", "1234"),
        ("method_5643", "5643"),
        ("net/minecraft/class_1657", "1657"),
        ("EntityPlayer", None),
    ],
)
def test_intermediate_id(intermediate, expected):
    assert intermediate_id(intermediate) == expected


def test_exact_name(database):
    assert database.lookup("inventory") == [INVENTORY]


def test_exact_intermediate(database):
    assert database.lookup("func_70097_a") == [ATTACK]


def test_numeric_id_keeps_order(database):
    assert database.lookup("70097") == [ATTACK, SOURCE, AMOUNT]


def test_numeric_id_with_type(database):
    assert database.lookup("70097", MappingType.PARAM) == [SOURCE, AMOUNT]


def test_case_insensitive(database):
    assert database.lookup("ATTACKENTITYFROM") == [ATTACK]


def test_qualified_suffix(database):
    assert database.lookup("EntityPlayer.inventory") == [INVENTORY]
    assert database.lookup("entityplayer#attackEntityFrom") == [ATTACK]


def test_type_filter_excludes(database):
    assert database.lookup("inventory", MappingType.METHOD) == []


def test_no_match(database):
    assert database.lookup("nothing") == []
    assert database.lookup("Some.nothing") == []


def test_format_message():
    text = ATTACK.format_message("1.12.2")
    assert text.splitlines() == [
        "**MC 1.12.2: EntityPlayer.attackEntityFrom**",
        "__Name__: `func_70097_a` => `attackEntityFrom`",
        "__Descriptor__: `(F)Z`",
    ]


def test_class_qualified_name_ignores_owner():
    mapping = Mapping(MappingType.CLASS, "class_1", "Foo", owner="pkg")
    assert mapping.qualified_name == "Foo"


def test_from_dict():
    mapping = Mapping.from_dict({"type": "Field", "intermediate": "field_1_a", "name": "x", "owner": "A"})
    assert mapping == Mapping(MappingType.FIELD, "field_1_a", "x", owner="A")


def test_mapping_type_from_name():
    assert MappingType.from_name("param") is MappingType.PARAM
    with pytest.raises(ValueError):
        MappingType.from_name("package")
