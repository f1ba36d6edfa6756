import copy

import pytest
from cloud_dns_signers import Field, Fields, SigningRequest


def test_field_single_valued_basics() -> None:
    field = Field(name="fname", values=["fval"])
    assert field.name == "fname"
    assert field.values == ["fval"]
    assert field.as_string() == "fval"


def test_field_multi_valued_basics() -> None:
    field = Field(name="fname", values=["fval1", "fval2"])
    assert field.values == ["fval1", "fval2"]
    assert field.as_string() == "fval1,fval2"
    assert field.as_string(delimiter=", ") == "fval1, fval2"


@pytest.mark.parametrize(
    "values,expected",
    [
        # Single-valued fields are serialized without any quoting or escaping.
        (["val1"], "val1"),
        (['"val1"'], '"val1"'),
        (["val\\1"], "val\\1"),
        (["val1", "val2"], "val1,val2"),
        # Values containing commas must be double-quoted.
        (["val1", "val2,val3"], 'val1,"val2,val3"'),
        (['"val1"', "val2"], '"\\"val1\\"",val2'),
    ],
)
def test_field_serialization(values: list[str], expected: str) -> None:
    field = Field(name="_", values=values)
    assert field.as_string() == expected


def test_field_add_and_set() -> None:
    field = Field(name="fname")
    assert field.as_string() == ""
    field.add("fval1")
    field.add("fval2")
    assert field.values == ["fval1", "fval2"]
    field.set(["fval3"])
    assert field.values == ["fval3"]


def test_field_repr() -> None:
    field = Field(name="fname", values=["fval1", "fval2"])
    assert repr(field) == "Field(name='fname', value=['fval1', 'fval2'])"


@pytest.mark.parametrize(
    "f1,f2",
    [
        (
            Field(name="fname", values=["fval1", "fval2"]),
            Field(name="fname", values=["fval2", "fval1"]),
        ),
        (
            Field(name="fname1", values=["fval1"]),
            Field(name="fname2", values=["fval1"]),
        ),
    ],
)
def test_field_inequality(f1: Field, f2: Field) -> None:
    assert f1 != f2


@pytest.mark.parametrize(
    "initial_fields",
    [
        [
            Field(name="fname1", values=["val1"]),
            Field(name="fname1", values=["val2"]),
        ],
        # uniqueness is checked _after_ normalizing field names
        [
            Field(name="fNaMe1", values=["val1"]),
            Field(name="fname1", values=["val2"]),
        ],
    ],
)
def test_repeated_initial_field_names(initial_fields: list[Field]) -> None:
    with pytest.raises(ValueError):
        Fields(initial_fields)


def test_fields_lookup_is_case_insensitive() -> None:
    fields = Fields([Field(name="Content-Type", values=["application/json"])])
    assert "content-type" in fields
    assert "CONTENT-TYPE" in fields
    assert fields["content-type"].name == "Content-Type"
    assert fields.get("x-missing") is None
    assert len(fields) == 1


def test_fields_set_field_replaces_case_variant() -> None:
    fields = Fields([Field(name="host", values=["old.example.com"])])
    fields.set_field(Field(name="Host", values=["new.example.com"]))
    assert len(fields) == 1
    assert fields.as_dict() == {"Host": "new.example.com"}


def test_fields_setitem_name_mismatch() -> None:
    fields = Fields()
    with pytest.raises(ValueError):
        fields["x-one"] = Field(name="x-two", values=["val"])


def test_fields_delitem() -> None:
    fields = Fields([Field(name="x-one", values=["1"]), Field(name="x-two")])
    del fields["X-One"]
    assert list(fields) == [Field(name="x-two")]


def test_fields_from_mapping() -> None:
    headers = {"Content-Type": "application/json", "X-Skip": None, "X-Count": 3}
    fields = Fields.from_mapping(headers)  # type: ignore
    assert fields.as_dict() == {"Content-Type": "application/json", "X-Count": "3"}
    assert Fields.from_mapping(None) == Fields()


def test_signing_request_accepts_plain_header_mapping() -> None:
    request = SigningRequest(
        method="GET", host="dns.example.com", fields={"Accept": "application/json"}
    )
    assert isinstance(request.fields, Fields)
    assert request.fields["accept"].as_string() == "application/json"
    assert request.path is None
    assert request.query is None
    assert request.body is None


def test_signing_request_deepcopy() -> None:
    request = SigningRequest(
        method="POST",
        host="dns.example.com",
        path="/v1/zone",
        query={"name": ["a", "b"]},
        fields=Fields([Field(name="x-one", values=["1"])]),
        body=b"{}",
    )
    new_request = copy.deepcopy(request)
    assert new_request is not request
    assert new_request.fields == request.fields
    assert new_request.fields is not request.fields
    assert new_request.query == request.query
    assert new_request.query is not request.query
    assert new_request.body is request.body

    new_request.fields.set_field(Field(name="x-two", values=["2"]))
    assert "x-two" not in request.fields
