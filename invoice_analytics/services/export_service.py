import io
import logging
from typing import List

import pandas as pd

from invoice_analytics.core.config import settings
from invoice_analytics.schemas.invoice import Invoice

logger = logging.getLogger(__name__)

EXCEL_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_NAME = "Invoices"

# Spreadsheet header -> Invoice field
EXPORT_COLUMNS = {
    "Invoice Number": "invoiceNumber",
    "Issue Date": "issueDate",
    "Due Date": "dueDate",
    "Vendor Name": "vendorName",
    "Vendor Address": "vendorAddress",
    "Vendor Phone": "vendorPhone",
    "Vendor Email": "vendorEmail",
    "Customer Name": "customerName",
    "Customer Address": "customerAddress",
    "Customer Phone": "customerPhone",
    "Customer Email": "customerEmail",
    "Status": "status",
    "Currency": "currency",
    "Subtotal": "subtotal",
    "Discount": "discount",
    "Tax Rate": "taxRate",
    "Tax Amount": "taxAmount",
    "Total Amount": "totalAmount",
    "Terms": "terms",
}

MONEY_COLUMNS = ("Subtotal", "Discount", "Tax Rate", "Tax Amount", "Total Amount")


class ExportService:

    @staticmethod
    def invoices_to_frame(invoices: List[Invoice]) -> pd.DataFrame:
        records = [
            {header: getattr(invoice, field) for header, field in EXPORT_COLUMNS.items()}
            for invoice in invoices[: settings.EXPORT_MAX_ROWS]
        ]
        df = pd.DataFrame(records, columns=list(EXPORT_COLUMNS))
        for column in MONEY_COLUMNS:
            df[column] = df[column].astype(float)
        df["Terms"] = df["Terms"].fillna("")
        return df

    @staticmethod
    def to_excel(invoices: List[Invoice]) -> bytes:
        """Render invoices as a single-sheet xlsx workbook."""
        if len(invoices) > settings.EXPORT_MAX_ROWS:
            logger.warning(f"Export truncated to {settings.EXPORT_MAX_ROWS} of {len(invoices)} invoices")

        df = ExportService.invoices_to_frame(invoices)
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
        logger.info(f"Exported {len(df)} invoices to Excel")
        return buffer.getvalue()
