from markupsafe import Markup

from src.api.documents.services.renderer import RenderedInvoice, get_templates


def build_print_document(rendered: RenderedInvoice) -> str:
    """
    Standalone HTML page around the rendered invoice that opens the print dialog on load.
    Elements marked `.no-print` are hidden when printing.
    """
    return get_templates().get_template("print.html.jinja").render(
        invoice_number=rendered.invoice_number or "",
        body=Markup(rendered.html),
    )
