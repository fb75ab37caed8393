"""Tests for template loading and AcroForm filling."""

from io import BytesIO
from pathlib import Path

import pytest
from PyPDF2 import PdfReader

from taxforms_core.exceptions import ConfigurationError, TemplateUnavailableError
from taxforms_core.field_maps import FormType
from taxforms_core.pdf_filler import PdfFormFiller, TemplateStore


BOX_1 = "topmostSubform[0].CopyA[0].RightCol[0].f1_11[0]"
DIRECT_SALES = "topmostSubform[0].CopyA[0].RightCol[0].c1_1[0]"
NESTED_BOX = "topmostSubform[0].f1_1[0]"


def nested_field_template(rect: str = "40 700 290 714") -> bytes:
    """A one-page PDF whose text widget hangs off a parent field, as in IRS templates."""
    objects = [
        "<< /Type /Catalog /Pages 2 0 R /AcroForm << /Fields [4 0 R] >> >>",
        "<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Annots [5 0 R] >>",
        "<< /T (topmostSubform[0]) /Kids [5 0 R] >>",
        f"<< /Type /Annot /Subtype /Widget /FT /Tx /T (f1_1[0]) /Parent 4 0 R /P 3 0 R /Rect [{rect}] >>",
    ]
    content = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(content))
        content += f"{number} 0 obj\n{body}\nendobj\n".encode()

    xref_offset = len(content)
    content += f"xref\n0 {len(objects) + 1}\n0000000000 65535 f \n".encode()
    for offset in offsets:
        content += f"{offset:010d} 00000 n \n".encode()
    content += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_offset}\n%%EOF\n".encode()
    return content


@pytest.fixture
def nec_filler(templates: TemplateStore) -> PdfFormFiller:
    return PdfFormFiller(templates.load(FormType.NEC_1099), form_type=FormType.NEC_1099)


class TestTemplateStore:
    """Template lookup in the configured directory."""

    def test_load_returns_pdf_bytes(self, templates: TemplateStore):
        assert templates.load("1099-NEC").startswith(b"%PDF")

    def test_available_reports_each_form(self, templates: TemplateStore, tmp_path: Path):
        assert all(templates.available().values())

        empty = TemplateStore(tmp_path)
        assert not any(empty.available().values())

    def test_missing_template_raises(self, tmp_path: Path):
        with pytest.raises(TemplateUnavailableError) as exc_info:
            TemplateStore(tmp_path).load(FormType.W2)
        assert exc_info.value.form_type == "W-2"

    def test_template_dir_that_is_a_file_raises(self, tmp_path: Path):
        not_a_dir = tmp_path / "templates"
        not_a_dir.write_text("")
        with pytest.raises(ConfigurationError) as exc_info:
            TemplateStore(not_a_dir)
        assert exc_info.value.config_key == "TAXFORMS_TEMPLATE_DIR"
        assert exc_info.value.details["actual"] == str(not_a_dir)

    def test_missing_template_dir_is_allowed(self, tmp_path: Path):
        store = TemplateStore(tmp_path / "not-downloaded-yet")
        assert not any(store.available().values())
        with pytest.raises(TemplateUnavailableError):
            store.load(FormType.NEC_1099)

    def test_empty_template_raises(self, tmp_path: Path):
        (tmp_path / "fw3.pdf").write_bytes(b"")
        with pytest.raises(TemplateUnavailableError):
            TemplateStore(tmp_path).load(FormType.W3)

    def test_unreadable_template_raises(self):
        with pytest.raises(TemplateUnavailableError):
            PdfFormFiller(b"this is not a pdf", form_type=FormType.W2)

    def test_malformed_widget_raises(self):
        with pytest.raises(TemplateUnavailableError) as exc_info:
            PdfFormFiller(nested_field_template(rect="/a /b /c /d"), form_type=FormType.W2)
        assert exc_info.value.form_type == "W-2"


class TestFieldLookup:
    """Resolving locators against template fields."""

    def test_indexes_every_widget(self, nec_filler: PdfFormFiller):
        assert BOX_1 in nec_filler.field_names
        assert len(nec_filler.field_names) == 19

    def test_exact_name(self, nec_filler: PdfFormFiller):
        assert nec_filler.try_set(BOX_1, "750.00")
        assert nec_filler.filled_values == {BOX_1: "750.00"}

    def test_partial_name_with_and_without_index(self, tmp_path: Path, template_builder):
        path = template_builder(tmp_path / "partial.pdf", ["Form[0].Copy1[0].f1_9[0]"])
        filler = PdfFormFiller(path.read_bytes())
        assert filler.has_field("f1_9[0]")
        assert filler.has_field("f1_9")
        assert filler.try_set("f1_9", "50000.00")
        assert filler.filled_values == {"Form[0].Copy1[0].f1_9[0]": "50000.00"}

    def test_missing_field_is_skipped(self, nec_filler: PdfFormFiller):
        assert not nec_filler.try_set("f9_99", "1")
        assert not nec_filler.try_set(None, "1")
        assert nec_filler.filled_values == {}

    def test_empty_value_is_skipped(self, nec_filler: PdfFormFiller):
        assert not nec_filler.try_set(BOX_1, "")
        assert not nec_filler.try_set(BOX_1, None)

    def test_check_only_matches_checkboxes(self, nec_filler: PdfFormFiller):
        assert not nec_filler.try_check(BOX_1, True)
        assert nec_filler.try_check(DIRECT_SALES, True)
        assert nec_filler.filled_values == {DIRECT_SALES: True}


class TestRender:
    """Flattened and editable output."""

    def test_flattened_output_has_no_form(self, nec_filler: PdfFormFiller):
        nec_filler.try_set(BOX_1, "750.00")
        nec_filler.try_check(DIRECT_SALES, True)

        reader = PdfReader(BytesIO(nec_filler.render(flatten=True)))

        assert not reader.get_fields()
        assert "/Annots" not in reader.pages[0]
        assert "750.00" in reader.pages[0].extract_text()

    def test_editable_output_keeps_values(self, nec_filler: PdfFormFiller):
        nec_filler.try_set(BOX_1, "750.00")
        nec_filler.try_check(DIRECT_SALES, True)

        reader = PdfReader(BytesIO(nec_filler.render(flatten=False)))
        fields = reader.get_fields()

        assert len(reader.pages) == 1
        assert len(reader.pages[0]["/Annots"]) == 19
        assert fields[BOX_1]["/V"] == "750.00"
        assert fields[DIRECT_SALES]["/V"] == "/Yes"
        assert reader.trailer["/Root"]["/AcroForm"]["/NeedAppearances"] == True  # noqa: E712

    def test_editable_output_keeps_field_hierarchy(self):
        filler = PdfFormFiller(nested_field_template())
        assert filler.field_names == [NESTED_BOX]
        assert filler.try_set("f1_1", "Acme Consulting LLC")

        content = filler.render(flatten=False)
        reader = PdfReader(BytesIO(content))
        widget = reader.pages[0]["/Annots"][0].get_object()

        assert len(reader.pages) == 1
        assert widget["/V"] == "Acme Consulting LLC"
        assert widget["/Parent"]["/T"] == "topmostSubform[0]"
        assert "topmostSubform[0]" in reader.get_fields()
        assert PdfFormFiller(content).field_names == [NESTED_BOX]

    def test_flattens_nested_template(self):
        filler = PdfFormFiller(nested_field_template())
        filler.try_set(NESTED_BOX, "Acme Consulting LLC")

        reader = PdfReader(BytesIO(filler.render(flatten=True)))

        assert not reader.get_fields()
        assert "Acme Consulting LLC" in reader.pages[0].extract_text()

    def test_unfilled_template_still_renders(self, nec_filler: PdfFormFiller):
        content = nec_filler.render(flatten=True)
        assert content.startswith(b"%PDF")
        assert len(PdfReader(BytesIO(content)).pages) == 1
