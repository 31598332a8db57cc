from __future__ import annotations

from pathlib import Path

import pytest
from pypdf import PdfReader, PdfWriter

from signplace.exceptions.errors import FieldNotFoundError, FormError
from signplace.logic.form_state import FormState, validate_field
from signplace.logic.pdf_form_fields import PdfFormFieldReader
from signplace.models.form_field import FieldType, FormField
from signplace.models.page_geometry import PageRect

from .conftest import make_pdf

_RECT = PageRect(0, 0, 10, 10)


def _f(name: str, ftype: FieldType = FieldType.TEXT, **kw) -> FormField:
    return FormField(name=name, field_type=ftype, page_index=kw.pop("page_index", 0), rect=_RECT, **kw)


# ---------------------------------------------------------------- rules

@pytest.mark.parametrize("value", [None, "", False, []])
def test_required_field_needs_a_value(value) -> None:
    assert validate_field(_f("name", required=True), value) == "name is required"


def test_optional_field_may_stay_empty() -> None:
    assert validate_field(_f("name"), "") is None


def test_text_max_length() -> None:
    field = _f("zip", max_length=5)
    assert validate_field(field, "12345") is None
    assert validate_field(field, "123456") == "zip exceeds maximum length of 5"


@pytest.mark.parametrize("ftype", [FieldType.DROPDOWN, FieldType.RADIO])
def test_single_choice_must_be_an_option(ftype: FieldType) -> None:
    field = _f("state", ftype, options=("CA", "NY"))
    assert validate_field(field, "NY") is None
    assert validate_field(field, "TX") == "state has invalid option"


def test_list_choices_must_all_be_options() -> None:
    field = _f("langs", FieldType.LIST, options=("de", "en"))
    assert validate_field(field, ["de", "en"]) is None
    assert validate_field(field, ["de", "fr"]) == "langs has invalid options"


# ---------------------------------------------------------------- state

def test_state_starts_from_document_values() -> None:
    form = FormState([_f("name", value="Ann"), _f("agree", FieldType.CHECKBOX, value=True)])
    assert form.values == {"name": "Ann", "agree": True}
    assert form.value("name") == "Ann"


def test_signature_fields_are_not_form_values() -> None:
    form = FormState([_f("sig", FieldType.SIGNATURE)])
    assert not form
    assert form.fields == []


def test_validate_collects_errors_and_update_clears_them() -> None:
    form = FormState([_f("name", required=True, value=""), _f("city", value="")])

    assert not form.validate()
    assert form.errors == {"name": "name is required"}

    form.update_field("name", "Ann")
    assert form.errors == {}
    assert form.validate()


def test_unknown_and_read_only_fields() -> None:
    form = FormState([_f("locked", read_only=True, value="x")])
    with pytest.raises(FieldNotFoundError):
        form.update_field("missing", "y")
    with pytest.raises(FormError):
        form.update_field("locked", "y")
    assert form.value("locked") == "x"


def test_widgets_of_one_field_share_a_value() -> None:
    form = FormState([_f("initials", page_index=0), _f("initials", page_index=1)])
    assert len(form.fields) == 1
    form.update_field("initials", "AB")
    assert form.values == {"initials": "AB"}


# ---------------------------------------------------------------- with pypdf

def test_reader_reports_required_and_max_length(tmp_path: Path) -> None:
    pdf = make_pdf(tmp_path / "form.pdf", [(600, 800)], text_fields=[
        (0, "zip", PageRect(60, 700, 120, 40), {"maxlen": 5, "fieldFlags": "required"}),
    ])
    (field,) = PdfFormFieldReader(PdfReader(str(pdf))).list_fields()

    assert field.required
    assert field.max_length == 5
    assert field.value == ""
    assert validate_field(field, "123456") == "zip exceeds maximum length of 5"


def test_fill_writes_text_values(tmp_path: Path) -> None:
    pdf = make_pdf(tmp_path / "form.pdf", [(600, 800), (600, 800)], text_fields=[
        (0, "name", PageRect(60, 700, 120, 40)),
        (1, "city", PageRect(60, 700, 120, 40)),
    ])
    reader = PdfReader(str(pdf))
    form = FormState(PdfFormFieldReader(reader).list_fields())
    form.update_field("name", "Ann")
    form.update_field("city", "Berlin")

    writer = PdfWriter(clone_from=reader)
    assert form.fill(writer) == 2
    out = tmp_path / "filled.pdf"
    with out.open("wb") as fh:
        writer.write(fh)

    values = {name: f.get("/V") for name, f in PdfReader(str(out)).get_fields().items()}
    assert values["name"] == "Ann"
    assert values["city"] == "Berlin"


def test_fill_without_values_leaves_writer_alone() -> None:
    form = FormState([_f("name", value=None)])
    assert form.fill(PdfWriter()) == 0
