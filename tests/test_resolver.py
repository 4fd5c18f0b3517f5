import json

from contractgen.resolver import (
    FieldResolver,
    available_fields,
    field_aliases,
    parse_extension_fields,
    resolve,
)


def test_top_level_exact_match():
    res = resolve({"baseSalary": 280000}, "baseSalary")
    assert res.found
    assert res.value == 280000
    assert res.matched_name == "baseSalary"
    assert res.source == "record"


def test_top_level_wins_over_extension():
    record = {"clinicalFTE": 0.5, "dynamicFields": json.dumps({"clinicalFTE": "0.9"})}
    res = resolve(record, "clinicalFTE")
    assert res.value == 0.5
    assert res.source == "record"


def test_extension_capitalized_variant():
    record = {"name": "Dr. B", "dynamicFields": json.dumps({"DivisionChiefFTE": "0.3"})}
    res = resolve(record, "divisionChiefFTE")
    assert res.found
    assert float(res.value) == 0.3
    assert res.matched_name == "DivisionChiefFTE"
    assert res.source == "extension"


def test_extension_fte_suffix_normalized():
    record = {"dynamicFields": {"teachingFTE": "0.1"}}
    res = resolve(record, "teachingFte")
    assert res.found
    assert res.matched_name == "teachingFTE"


def test_extension_empty_string_is_accepted():
    record = {"dynamicFields": json.dumps({"Notes": ""})}
    res = resolve(record, "notes")
    assert res.found
    assert res.value == ""


def test_null_top_level_falls_through_to_extension():
    record = {"researchFTE": None, "dynamicFields": json.dumps({"ResearchFTE": "0.2"})}
    res = resolve(record, "researchFTE")
    assert res.value == "0.2"
    assert res.source == "extension"


def test_extension_checked_before_record_variants():
    record = {
        "divisionChiefFte": 0.9,
        "dynamicFields": json.dumps({"DivisionChiefFTE": "0.3"}),
    }
    res = resolve(record, "divisionChiefFTE")
    assert res.value == "0.3"


def test_record_variants():
    assert resolve({"divisionChiefFte": 0.3}, "divisionChiefFTE").matched_name == "divisionChiefFte"
    assert resolve({"clinical": 0.4}, "clinicalFTE").matched_name == "clinical"
    assert resolve({"admin": 0.1}, "adminFte").matched_name == "admin"
    assert resolve({"specialty": "Cardiology"}, "Specialty").matched_name == "specialty"


def test_malformed_extension_is_ignored():
    record = {"dynamicFields": "{not json", "clinical": 0.4}
    res = resolve(record, "clinicalFTE")
    assert res.found
    assert res.matched_name == "clinical"

    assert not resolve({"dynamicFields": "[1, 2]"}, "x").found


def test_not_found():
    res = resolve({"name": "Dr. A"}, "baseSalary")
    assert not res.found
    assert res.value is None
    assert res.matched_name is None
    assert not resolve(None, "baseSalary").found
    assert not resolve({"name": "x"}, "").found


def test_alias_table_is_data():
    aliases = field_aliases("divisionChiefFTE")
    assert aliases.extension == ("divisionChiefFTE", "DivisionChiefFTE")
    assert aliases.record == ("divisionchieffte", "divisionChiefFte", "divisionChief")
    assert field_aliases("divisionChiefFTE") is aliases


def test_alias_table_for_fte_title_case():
    aliases = field_aliases("administrativeFte")
    assert aliases.extension == ("administrativeFte", "AdministrativeFte", "administrativeFTE")
    assert "administrative" in aliases.record


def test_parse_extension_fields():
    assert parse_extension_fields('{"A": 1}') == {"A": 1}
    assert parse_extension_fields({"A": 1}) == {"A": 1}
    assert parse_extension_fields(None) == {}
    assert parse_extension_fields("") == {}
    assert parse_extension_fields("null") == {}
    assert parse_extension_fields(42) == {}


def test_resolver_parses_blob_once(monkeypatch):
    calls = []
    import contractgen.resolver as resolver_mod

    real = resolver_mod.parse_extension_fields

    def counting(raw):
        calls.append(raw)
        return real(raw)

    monkeypatch.setattr(resolver_mod, "parse_extension_fields", counting)
    r = FieldResolver({"dynamicFields": json.dumps({"A": "1", "B": "2"})})
    assert r.value("a") == "1"
    assert r.value("b") == "2"
    assert len(calls) == 1


def test_custom_extension_key():
    r = FieldResolver({"extra": json.dumps({"Bonus": 5})}, extension_key="extra")
    assert r.value("bonus") == 5


def test_available_fields():
    record = {"name": "Dr. A", "dynamicFields": json.dumps({"ClinicalFTE": "0.8", "name": "dup"})}
    assert available_fields(record) == ["name", "ClinicalFTE"]
