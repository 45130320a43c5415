import io
import logging
import zipfile
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd
from fastapi import HTTPException, UploadFile
from pydantic import ValidationError

from invoice_analytics.core.config import settings
from invoice_analytics.core.security import Principal
from invoice_analytics.schemas.invoice import InvoiceCreate, InvoiceImportFailure, InvoiceImportResult
from invoice_analytics.services.export_service import EXPORT_COLUMNS
from invoice_analytics.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

# Same headers as the export, so an exported workbook imports unchanged.
# The total is always recomputed.
IMPORT_COLUMNS = {header: field for header, field in EXPORT_COLUMNS.items() if field != "totalAmount"}
REQUIRED_COLUMNS = ("Invoice Number", "Issue Date", "Due Date", "Vendor Name", "Customer Name", "Subtotal")

# Header aliases: "Vendor Name", "vendor name" and "vendorName" all match
HEADER_ALIASES = {
    **{header.lower(): header for header in IMPORT_COLUMNS},
    **{field.lower(): header for header, field in IMPORT_COLUMNS.items()},
}


def _cell(value: Any) -> Any:
    """Normalise a spreadsheet cell to a date, a stripped string or None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _validation_message(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in detail['loc'])}: {detail['msg']}" for detail in error.errors()
    )


class ImportService:

    @staticmethod
    def validate_file(file: UploadFile) -> None:
        if not file.filename:
            raise HTTPException(status_code=400, detail="No file provided")
        if not any(file.filename.lower().endswith(ext) for ext in settings.IMPORT_ALLOWED_EXTENSIONS):
            raise HTTPException(
                status_code=400,
                detail=f"Invalid file type. Only {', '.join(settings.IMPORT_ALLOWED_EXTENSIONS)} files are allowed.",
            )

    @staticmethod
    def read_frame(content: bytes, filename: str) -> pd.DataFrame:
        try:
            if filename.lower().endswith(".csv"):
                df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
            else:
                df = pd.read_excel(io.BytesIO(content))
        except UnicodeDecodeError:
            raise HTTPException(status_code=400, detail=f"File {filename} encoding is not supported. Please use UTF-8.")
        except pd.errors.EmptyDataError:
            raise HTTPException(status_code=400, detail=f"File {filename} is empty or invalid")
        except (ValueError, zipfile.BadZipFile) as e:
            raise HTTPException(status_code=400, detail=f"Error parsing {filename}: {str(e)}")

        if df.empty:
            raise HTTPException(status_code=400, detail=f"File {filename} is empty")

        df.columns = [HEADER_ALIASES.get(str(column).strip().lower(), str(column).strip()) for column in df.columns]
        missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            raise HTTPException(status_code=400, detail=f"Missing required column(s): {', '.join(missing)}")
        return df

    @staticmethod
    def parse_rows(content: bytes, filename: str) -> List[Dict[str, Any]]:
        """One InvoiceCreate-shaped dict per spreadsheet row; blank cells are left out."""
        df = ImportService.read_frame(content, filename)
        df = df.astype(object).where(pd.notnull(df), None)

        rows = []
        for record in df.to_dict("records"):
            values = {}
            for header, field in IMPORT_COLUMNS.items():
                value = _cell(record.get(header))
                if value is not None:
                    values[field] = value
            if "status" in values:
                values["status"] = str(values["status"]).upper()
            rows.append(values)
        return rows

    @staticmethod
    async def import_invoices(
        principal: Principal, file: UploadFile, tenant_id: Optional[str] = None
    ) -> InvoiceImportResult:
        """
        Create one invoice per row of an uploaded CSV or Excel file.

        Rows are created independently: a row that fails validation is
        reported with its row number and the rest still import.
        """
        ImportService.validate_file(file)
        content = await file.read()
        if len(content) > settings.IMPORT_MAX_FILE_SIZE:
            raise HTTPException(
                status_code=413,
                detail=f"File {file.filename} exceeds maximum size of {settings.IMPORT_MAX_FILE_SIZE / (1024*1024):.0f}MB",
            )

        tenant = await InvoiceService.resolve_tenant(principal, tenant_id)
        rows = ImportService.parse_rows(content, file.filename)

        imported, failed = [], []
        for index, values in enumerate(rows):
            row_number = index + 2
            invoice_number = values.get("invoiceNumber")
            try:
                data = InvoiceCreate(**values, tenantId=tenant)
                imported.append(await InvoiceService.create_invoice(principal, data))
            except ValidationError as e:
                failed.append(InvoiceImportFailure(row=row_number, invoiceNumber=invoice_number, error=_validation_message(e)))
            except HTTPException as e:
                failed.append(InvoiceImportFailure(row=row_number, invoiceNumber=invoice_number, error=str(e.detail)))
            except Exception as e:
                logger.error(f"Import failed for row {row_number} of {file.filename}: {e}")
                failed.append(InvoiceImportFailure(row=row_number, invoiceNumber=invoice_number, error=str(e)))

        logger.info(f"Imported {len(imported)} of {len(rows)} invoice(s) from {file.filename} for tenant {tenant}")
        return InvoiceImportResult(
            imported=imported,
            failed=failed,
            total=len(rows),
            successCount=len(imported),
            failureCount=len(failed),
        )
