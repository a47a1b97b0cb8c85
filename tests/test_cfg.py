import pytest

from harbol.cfg import (
    build_file,
    get_bool,
    get_color,
    get_float,
    get_int,
    get_section,
    get_str,
    get_type,
    get_vec4d,
    set_bool,
    set_color,
    set_float,
    set_int,
    set_str,
    set_to_null,
    set_vec4d,
    to_str,
)
from harbol.cfg_parser import CfgType, CfgValue, Color, Vec4D, parse_cstr, parse_file

REALISTIC = """'root': {
    'firstName': 'John',
    'lastName': 'Smith',
    'isAlive': true,
    'age': 0x18 ,
    'money': 35.42e4
    'myself': <FILE>
    'address': {
        'streetAddress': '21 2nd Street',
        'city': 'New York',
        'state': 'NY',
        'postalCode': '10021-3100'
    },
    'phoneNumbers.': {
        '1' {
            'type': 'home \\x5c',
            'number': '212 555-0000'
        },
        '2' {
            'type': 'office',
            'number': '646 555-0000'
        },
        '3' {
            'type': 'mobile',
            'number': '[phone]'
        }
    },
    'colors': c[ 0xff, 0xff, 0xff, 0xaa ],
    'origin': v[10.0f, 24.43, 25.0, 0xB.p+2],
    'children': {},
    'spouse': null
    'test_iota': {
        '<enum>': iota
        '<enum>': {
            'a': iota
            'b': iota
            'c': iota
        }
        '2': iota
        '3': iota
    }
    'test_IOTA': {
        '1': IOTA
        '2': IOTA
        '3': IOTA
    }
}"""


@pytest.fixture
def cfg():
    return parse_cstr(REALISTIC)


def test_small_to_str():
    small = parse_cstr("'section': { 'lel': null }")
    assert to_str(small) == '"section": {\n\t"lel": null\n}\n'


def test_get_escaped_dot_section(cfg):
    section = get_section(cfg, "root.phoneNumbers\\..1")
    assert set(section) == {"type", "number"}
    assert to_str(section) == '"type": "home \\"\n"number": "212 555-0000"\n'


def test_get_string_in_subsection(cfg):
    assert get_str(cfg, "root.phoneNumbers\\..1.type") == "home \\"
    assert get_str(cfg, "root.phoneNumbers\\..2.type") == "office"


def test_wrong_type_lookup_returns_none(cfg):
    assert get_str(cfg, "root.age") is None
    assert get_float(cfg, "root.age") is None


def test_scalar_getters(cfg):
    assert get_int(cfg, "root.age") == 24
    assert get_float(cfg, "root.money") == 354200.0
    assert get_bool(cfg, "root.isAlive") is True
    assert get_str(cfg, "root.myself") == "C-string-cfg"
    assert get_color(cfg, "root.colors") == Color(255, 255, 255, 170)


def test_vector_getter(cfg):
    vec = get_vec4d(cfg, "root.origin")
    assert vec.x == 10.0
    assert vec.y == pytest.approx(24.43, rel=1e-6)
    assert vec.z == 25.0
    assert vec.w == 44.0


def test_iota_values(cfg):
    assert get_int(cfg, "root.test_iota.0") == 0
    assert get_int(cfg, "root.test_iota.1.c") == 2
    assert get_int(cfg, "root.test_iota.2") == 1
    assert get_int(cfg, "root.test_iota.3") == 2
    assert get_int(cfg, "root.test_IOTA.3") == 2


def test_set_null_to_string_with_override(cfg):
    set_str(cfg, "root.spouse", "Jane Smith", True)
    assert get_str(cfg, "root.spouse") == "Jane Smith"
    assert '\t"spouse": "Jane Smith"\n' in to_str(cfg)


def test_set_back_to_null(cfg):
    set_str(cfg, "root.spouse", "Jane Smith", True)
    set_to_null(cfg, "root.spouse")
    assert get_type(cfg, "root.spouse") == CfgType.NULL
    assert '\t"spouse": null\n' in to_str(cfg)


def test_get_types(cfg):
    assert get_type(cfg, "root.phoneNumbers\\.") == CfgType.MAP
    assert get_type(cfg, "root.spouse") == CfgType.NULL
    assert get_type(cfg, "root.money") == CfgType.FLOAT
    assert get_type(cfg, "root.origin") == CfgType.VEC4D
    assert get_type(cfg, "root.nothing") == CfgType.INVALID


def test_top_level_null_is_invalid():
    small = parse_cstr("'a': null 'b': 5")
    assert get_type(small, "a") == CfgType.INVALID
    assert get_type(small, "b") == CfgType.INT


def test_adding_other_cfg_as_section(cfg):
    small = parse_cstr("'section': { 'lel': null }")
    cfg["former lovers"] = CfgValue(CfgType.MAP, small)
    assert get_type(cfg, "former lovers.section") == CfgType.MAP
    assert get_type(cfg, "former lovers.section.lel") == CfgType.NULL
    assert to_str(cfg).endswith('"former lovers": {\n\t"section": {\n\t\t"lel": null\n\t}\n}\n')


def test_set_without_override_raises(cfg):
    with pytest.raises(TypeError):
        set_int(cfg, "root.money", 3)
    assert get_float(cfg, "root.money") == 354200.0


def test_set_missing_key_raises(cfg):
    with pytest.raises(KeyError):
        set_int(cfg, "root.missing", 3, True)
    with pytest.raises(KeyError):
        set_to_null(cfg, "root.missing")


def test_setters_same_type(cfg):
    set_int(cfg, "root.age", 30)
    set_float(cfg, "root.money", 1.5)
    set_bool(cfg, "root.isAlive", False)
    set_color(cfg, "root.colors", Color(1, 2, 3, 4))
    set_vec4d(cfg, "root.origin", Vec4D(1.0, 2.0, 3.0, 4.0))
    assert get_int(cfg, "root.age") == 30
    assert get_float(cfg, "root.money") == 1.5
    assert get_bool(cfg, "root.isAlive") is False
    assert get_color(cfg, "root.colors") == Color(1, 2, 3, 4)
    assert get_vec4d(cfg, "root.origin") == Vec4D(1.0, 2.0, 3.0, 4.0)


def test_override_convert_changes_type(cfg):
    set_bool(cfg, "root.age", True, True)
    assert get_type(cfg, "root.age") == CfgType.BOOL
    assert get_int(cfg, "root.age") is None


def test_scalar_formatting():
    small = parse_cstr("'f': 1.5 'c': c[1, 2, 3, 4] 'v': v[1.0, 2.0] 't': true 's': 'x'")
    assert to_str(small) == (
        '"f": 1.500000\n'
        '"c": c[ 1, 2, 3, 4 ]\n'
        '"v": v[ 1.000000, 2.000000, 0.000000, 0.000000 ]\n'
        '"t": true\n'
        '"s": "x"\n'
    )


def test_build_file_round_trip(tmp_path):
    small = parse_cstr("'a': { 'b': 3 'c': 'hi' 'd': v[1.0, 2.0, 3.0, 4.0] } 'e': false")
    path = tmp_path / "out.ini"
    build_file(small, path, True)
    assert path.read_text() == to_str(small)
    assert to_str(parse_file(path)) == to_str(small)


def test_build_file_append(tmp_path):
    small = parse_cstr("'a': 1")
    path = tmp_path / "out.ini"
    build_file(small, path, True)
    build_file(small, path, False)
    assert path.read_text() == '"a": 1\n"a": 1\n'
    build_file(small, path, True)
    assert path.read_text() == '"a": 1\n'