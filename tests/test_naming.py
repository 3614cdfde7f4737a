import pytest

from gplus.naming import ns_column_name, to_db_name


@pytest.mark.parametrize(
    ("given", "expected"),
    [
        ("", ""),
        ("a", "a"),
        ("A", "a"),
        ("AB", "ab"),
        ("UserName", "user_name"),
        ("userName", "user_name"),
        ("user_name", "user_name"),
        ("UserID", "user_id"),
        ("APIKey", "api_key"),
        ("HTTPSConfig", "https_config"),
        ("XMLParser", "xml_parser"),
        ("MyXMLParser", "my_xml_parser"),
        ("Version2", "version2"),
        ("V2Ray", "v2_ray"),
        ("ID", "id"),
    ],
)
def test_to_db_name(given, expected):
    assert to_db_name(given) == expected


@pytest.mark.parametrize(
    ("given", "expected"),
    [
        ("XYZField", "xyz_field"),
        ("AB2Field", "ab2_field"),
    ],
)
def test_to_db_name_consecutive_uppercase(given, expected):
    assert to_db_name(given) == expected


@pytest.mark.parametrize(
    ("given", "expected"),
    [
        ("UserName", "user_name"),
        ("APIKey", "api_key"),
        ("HTTPSConfig", "https_config"),
    ],
)
def test_ns_column_name(given, expected):
    assert ns_column_name(given) == expected
    assert ns_column_name(given) == to_db_name(given)