"""Filling IRS fillable PDF templates.

Templates are the blank AcroForm PDFs published by the IRS. Fields are
looked up by the locators in ``field_maps``; a locator that the loaded
template revision does not carry is skipped with a debug log entry rather
than failing the document.

Two output modes:
- flattened: every filled value is drawn into its widget rectangle with
  reportlab, merged onto the template page with PyPDF2, and the interactive
  form is dropped, leaving a non-editable document.
- editable: values are written into the form fields and viewers are asked
  to regenerate appearances.
"""

import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.errors import PdfReadError
from PyPDF2.generic import ArrayObject, NameObject, TextStringObject
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .exceptions import ConfigurationError, TemplateUnavailableError
from .field_maps import FormType

logger = structlog.get_logger()

_INDEX_SUFFIX = re.compile(r"\[\d+\]$")

FONT_NAME = "Helvetica"
MAX_FONT_SIZE = 10.0
MIN_FONT_SIZE = 5.0


def _resolve(obj: Any) -> Any:
    """Dereference an indirect PDF object."""
    return obj.get_object() if hasattr(obj, "get_object") else obj


class TemplateStore:
    """Locates the blank form templates inside a directory.

    Example:
        store = TemplateStore("/srv/irs-templates")
        pdf_bytes = store.load(FormType.NEC_1099)
    """

    def __init__(self, template_dir: Union[str, Path]):
        """
        Raises:
            ConfigurationError: If the path exists but is not a directory
        """
        self.template_dir = Path(template_dir)
        # A missing directory is allowed; previews never read templates
        if self.template_dir.exists() and not self.template_dir.is_dir():
            raise ConfigurationError(
                f"Template directory {self.template_dir} is not a directory",
                config_key="TAXFORMS_TEMPLATE_DIR",
                expected="Directory containing the blank IRS fillable PDFs",
                actual=str(self.template_dir),
            )

    def path_for(self, form_type: Union[FormType, str]) -> Path:
        return self.template_dir / FormType.parse(form_type).template_file

    def load(self, form_type: Union[FormType, str]) -> bytes:
        """Read a template.

        Raises:
            TemplateUnavailableError: If the file is missing or unreadable
        """
        form_type = FormType.parse(form_type)
        path = self.path_for(form_type)
        try:
            content = path.read_bytes()
        except OSError as e:
            logger.error("template_load_failed", form_type=form_type.value, path=str(path), error=str(e))
            raise TemplateUnavailableError(
                f"{form_type.value} template not found at {path}",
                form_type=form_type.value,
                path=str(path),
            ) from e

        if not content:
            raise TemplateUnavailableError(
                f"{form_type.value} template is empty",
                form_type=form_type.value,
                path=str(path),
            )
        return content

    def available(self) -> dict[FormType, bool]:
        """Report which templates are present."""
        return {form_type: self.path_for(form_type).is_file() for form_type in FormType}


@dataclass
class FormWidget:
    """One on-page widget of an AcroForm field."""
    name: str
    page_index: int
    rect: tuple[float, float, float, float]
    field_type: Optional[str]
    on_state: str
    annotation: Any
    field: Any

    @property
    def partial_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_checkbox(self) -> bool:
        return self.field_type == "/Btn"


class PdfFormFiller:
    """Fills one copy of a form template.

    A filler is single-use: create one per generated document.

    Example:
        filler = PdfFormFiller(store.load(FormType.NEC_1099), form_type=FormType.NEC_1099)
        filler.try_set(FORM_1099_NEC_FIELDS.locator(Form1099NECBox.PAYER_NAME), "Acme LLC")
        pdf_bytes = filler.render(flatten=True)
    """

    def __init__(self, template: bytes, form_type: Optional[FormType] = None):
        self.form_type = form_type
        try:
            self._reader = PdfReader(io.BytesIO(template))
            self._widgets = self._index_widgets()
        except (PdfReadError, KeyError, ValueError, TypeError) as e:
            label = form_type.value if form_type else "form"
            raise TemplateUnavailableError(
                f"{label} template could not be read: {e}",
                form_type=form_type.value if form_type else None,
            ) from e

        self._by_name: dict[str, list[FormWidget]] = {}
        self._by_partial: dict[str, list[FormWidget]] = {}
        for widget in self._widgets:
            self._by_name.setdefault(widget.name, []).append(widget)
            partial = widget.partial_name
            self._by_partial.setdefault(partial, []).append(widget)
            stripped = _INDEX_SUFFIX.sub("", partial)
            if stripped != partial:
                self._by_partial.setdefault(stripped, []).append(widget)

        self._text_values: dict[str, str] = {}
        self._check_values: dict[str, bool] = {}

    # -------------------------------------------------------------------------
    # Template inspection
    # -------------------------------------------------------------------------

    def _index_widgets(self) -> list[FormWidget]:
        widgets = []
        for page_index, page in enumerate(self._reader.pages):
            for ref in _resolve(page.get("/Annots")) or []:
                annotation = _resolve(ref)
                if annotation.get("/Subtype") != "/Widget":
                    continue

                names = []
                field = None
                field_type = None
                node = annotation
                while node is not None:
                    if "/T" in node:
                        names.insert(0, str(node["/T"]))
                        if field is None:
                            field = node
                    if field_type is None and "/FT" in node:
                        field_type = str(node["/FT"])
                    node = _resolve(node.get("/Parent"))

                if not names:
                    continue

                rect = tuple(float(v) for v in _resolve(annotation.get("/Rect", [0, 0, 0, 0])))
                widgets.append(FormWidget(
                    name=".".join(names),
                    page_index=page_index,
                    rect=rect,
                    field_type=field_type,
                    on_state=self._on_state(annotation),
                    annotation=annotation,
                    field=field,
                ))
        return widgets

    @staticmethod
    def _on_state(annotation: Any) -> str:
        appearances = _resolve(annotation.get("/AP"))
        normal = _resolve(appearances.get("/N")) if appearances else None
        if normal is not None and hasattr(normal, "keys"):
            for state in normal.keys():
                if state != "/Off":
                    return str(state)
        return "/Yes"

    @property
    def field_names(self) -> list[str]:
        """Fully-qualified names of every field in the template."""
        return sorted(self._by_name)

    @property
    def filled_values(self) -> dict[str, Union[str, bool]]:
        """Values recorded so far, keyed by fully-qualified field name."""
        return {**self._text_values, **self._check_values}

    def _match(self, locator: str) -> list[FormWidget]:
        return self._by_name.get(locator) or self._by_partial.get(locator) or []

    def has_field(self, locator: Optional[str]) -> bool:
        return bool(locator) and bool(self._match(locator))

    # -------------------------------------------------------------------------
    # Filling
    # -------------------------------------------------------------------------

    def try_set(self, locator: Optional[str], value: Any) -> bool:
        """Record a text value for a field.

        Returns False, without raising, when the locator is unmapped, the
        template lacks the field, or the value is empty.
        """
        if not locator:
            return False
        text = "" if value is None else str(value)
        if not text:
            return False

        widgets = self._match(locator)
        if not widgets:
            logger.debug("template_field_missing", locator=locator, form_type=self._form_label)
            return False

        for name in {w.name for w in widgets}:
            self._text_values[name] = text
        return True

    def try_check(self, locator: Optional[str], checked: bool) -> bool:
        """Record a checkbox state. Never raises."""
        if not locator:
            return False

        widgets = [w for w in self._match(locator) if w.is_checkbox]
        if not widgets:
            logger.debug("template_field_missing", locator=locator, form_type=self._form_label)
            return False

        for name in {w.name for w in widgets}:
            self._check_values[name] = bool(checked)
        return True

    @property
    def _form_label(self) -> Optional[str]:
        return self.form_type.value if self.form_type else None

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, flatten: bool = True) -> bytes:
        """Produce the filled document as PDF bytes."""
        if flatten:
            writer = self._render_flattened()
        else:
            writer = self._render_editable()

        buffer = io.BytesIO()
        writer.write(buffer)
        content = buffer.getvalue()
        logger.debug(
            "form_rendered",
            form_type=self._form_label,
            flatten=flatten,
            fields_filled=len(self._text_values) + len(self._check_values),
            size=len(content),
        )
        return content

    def _render_editable(self) -> PdfWriter:
        for widget in self._widgets:
            if widget.name in self._text_values:
                widget.field[NameObject("/V")] = TextStringObject(self._text_values[widget.name])
            elif widget.name in self._check_values:
                state = NameObject(widget.on_state if self._check_values[widget.name] else "/Off")
                widget.field[NameObject("/V")] = state
                widget.annotation[NameObject("/AS")] = state

        # Pages go in without annotations: add_page strips /Parent from every
        # nested object it clones, which would cut widgets off their fields.
        writer = PdfWriter()
        added = [writer.add_page(page, excluded_keys=("/Annots",)) for page in self._reader.pages]

        root = self._reader.trailer["/Root"]
        if "/AcroForm" in root:
            writer._root_object[NameObject("/AcroForm")] = root.raw_get("/AcroForm").clone(writer)

        # Widgets cloned with the field tree above are reused here
        for page, new_page in zip(self._reader.pages, added):
            annotations = _resolve(page.get("/Annots"))
            if annotations:
                new_page[NameObject("/Annots")] = ArrayObject(a.clone(writer) for a in annotations)

        writer.set_need_appearances_writer()
        return writer

    def _render_flattened(self) -> PdfWriter:
        writer = PdfWriter()
        for page_index, page in enumerate(self._reader.pages):
            page_widgets = [w for w in self._widgets if w.page_index == page_index]
            overlay = self._overlay_page(page, page_widgets)
            if overlay is not None:
                page.merge_page(overlay)

            annotations = _resolve(page.get("/Annots"))
            if annotations is not None:
                kept = [a for a in annotations if _resolve(a).get("/Subtype") != "/Widget"]
                if kept:
                    page[NameObject("/Annots")] = ArrayObject(kept)
                else:
                    del page["/Annots"]

            writer.add_page(page)
        return writer

    def _overlay_page(self, page: Any, widgets: list[FormWidget]):
        drawn = [
            w for w in widgets
            if w.name in self._text_values or self._check_values.get(w.name)
        ]
        if not drawn:
            return None

        width = float(page.mediabox.width)
        height = float(page.mediabox.height)
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(width, height))

        for widget in drawn:
            if widget.name in self._text_values:
                self._draw_text(pdf, widget.rect, self._text_values[widget.name])
            else:
                self._draw_check(pdf, widget.rect)

        pdf.showPage()
        pdf.save()
        buffer.seek(0)
        return PdfReader(buffer).pages[0]

    @staticmethod
    def _draw_text(pdf: canvas.Canvas, rect: tuple, text: str) -> None:
        x1, y1, x2, y2 = rect
        left, bottom = min(x1, x2), min(y1, y2)
        box_width, box_height = abs(x2 - x1), abs(y2 - y1)
        lines = text.splitlines() or [text]

        size = min(MAX_FONT_SIZE, max(MIN_FONT_SIZE, (box_height - 2) / len(lines)))
        widest = max(stringWidth(line, FONT_NAME, size) for line in lines)
        if widest > box_width - 4 and widest > 0:
            size = max(MIN_FONT_SIZE, size * (box_width - 4) / widest)

        pdf.setFont(FONT_NAME, size)
        line_height = size * 1.15
        if len(lines) == 1:
            y = bottom + (box_height - size) / 2 + 1
        else:
            y = bottom + box_height - line_height
        for line in lines:
            pdf.drawString(left + 2, y, line)
            y -= line_height

    @staticmethod
    def _draw_check(pdf: canvas.Canvas, rect: tuple) -> None:
        x1, y1, x2, y2 = rect
        size = max(MIN_FONT_SIZE, min(abs(x2 - x1), abs(y2 - y1)) - 2)
        pdf.setFont(FONT_NAME, size)
        pdf.drawCentredString((x1 + x2) / 2, min(y1, y2) + (abs(y2 - y1) - size) / 2 + 1, "X")
