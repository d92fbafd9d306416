"""CSV download helpers."""
import csv
from decimal import Decimal

from django.http import HttpResponse


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Ya" if value else "Tidak"
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return str(value)


def rows_to_csv_response(rows, columns, filename):
    """Return ``rows`` as a ``<filename>.csv`` attachment.

    ``columns`` is a list of ``(header, source)`` pairs. ``source`` is an
    attribute name or a callable taking the row. The file starts with a
    UTF-8 BOM so Excel detects the encoding.
    """
    response = HttpResponse(content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}.csv"'
    response.write("\ufeff")

    writer = csv.writer(response)
    writer.writerow([header for header, _ in columns])
    for row in rows:
        writer.writerow([
            _cell(source(row) if callable(source) else getattr(row, source, None))
            for _, source in columns
        ])
    return response
