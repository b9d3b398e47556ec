# luxselle/services/supplier_import.py
"""
Supplier spreadsheet imports.

Parses CSV or XLSX uploads with pandas, maps each row through a supplier
column template into SupplierItem records, and records the run as a
SystemJob plus a `supplier_import` activity event.

A file that cannot be parsed aborts before any row is touched. A row that
cannot be mapped is reported in `error_messages` and the rest continue.
"""

import hashlib
import io
import logging
import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from luxselle.core.config import get_settings
from luxselle.core.enums import ActivityEventType, DEFAULT_ORG_ID, JobStatus, SupplierAvailability
from luxselle.core.exceptions import DuplicateImportError, ImportFileError
from luxselle.core.utils import round_money, utc_now
from luxselle.models.supplier import SupplierImportRecord, SupplierItem
from luxselle.repos.settings import SettingsRepo
from luxselle.repos.suppliers import SupplierImportRecordRepo, SupplierItemRepo, SupplierRepo
from luxselle.schemas.supplier import ImportPreview, ImportResult, SupplierColumnMap, SupplierImportTemplate
from luxselle.services.activity_logger import ActivityLogger
from luxselle.services.fx import usd_to_eur
from luxselle.services.job_service import record_job

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 10
DEFAULT_FX_USD_TO_EUR = 0.92
PLACEHOLDER_IMAGE_URL = "https://placehold.co/300x300.png"
PLACEHOLDER_SOURCE_URL = "https://example.com/source"

# Column layout of the Brand Street Tokyo export, used when a supplier has no template
DEFAULT_TEMPLATE = SupplierImportTemplate(
    column_map=SupplierColumnMap(
        external_id="SKU",
        title="Title",
        brand="Brand",
        sku="SKU",
        condition_rank="Rank",
        ask_price_usd="For you in USD",
        selling_price_usd="Selling Price",
        availability="STATUS",
    ),
    availability_map={},
    default_availability=SupplierAvailability.UPLOADED,
    trim_values=True,
)


class ParsedImportFile:
    def __init__(self, headers: List[str], rows: List[Dict[str, str]], file_type: str):
        self.headers = headers
        self.rows = rows
        self.file_type = file_type


def dedupe_id_for(supplier_id: str, file_bytes: bytes) -> str:
    """SHA-256 of `supplier_id:` followed by the raw file bytes."""
    digest = hashlib.sha256()
    digest.update(f"{supplier_id}:".encode("utf-8"))
    digest.update(file_bytes)
    return digest.hexdigest()


def parse_amount(raw: str) -> float:
    cleaned = re.sub(r"[^0-9.\-]", "", raw or "")
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def _valid_url(value: str, fallback: str) -> str:
    if not value:
        return fallback
    parsed = urlparse(value)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return value
    return fallback


def is_workbook(file_name: str, mime_type: Optional[str] = None) -> bool:
    lower = (file_name or "").lower()
    return lower.endswith(".xlsx") or lower.endswith(".xls") or "sheet" in (mime_type or "")


def parse_import_file(file_bytes: bytes, file_name: str, mime_type: Optional[str] = None) -> ParsedImportFile:
    """
    Read a CSV or workbook into headers and string-valued row dicts.

    Raises:
        ImportFileError: The content cannot be parsed
    """
    workbook = is_workbook(file_name, mime_type)
    try:
        if workbook:
            df = pd.read_excel(io.BytesIO(file_bytes), sheet_name=0, dtype=str, engine="openpyxl")
        else:
            df = pd.read_csv(
                io.BytesIO(file_bytes),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                skipinitialspace=True,
            )
    except pd.errors.EmptyDataError:
        return ParsedImportFile([], [], "xlsx" if workbook else "csv")
    except Exception as e:
        logger.warning(f"Unparsable import file {file_name!r}: {e}")
        raise ImportFileError(f"Could not parse {'workbook' if workbook else 'CSV'} file: {e}")

    df = df.fillna("")
    df.columns = [str(column).strip() for column in df.columns]
    headers = [column for column in df.columns if column and not column.startswith("Unnamed:")]

    rows = []
    for record in df.to_dict(orient="records"):
        row = {key: str(record.get(key, "")).strip() for key in headers}
        if any(row.values()):
            rows.append(row)
    return ParsedImportFile(headers, rows, "xlsx" if workbook else "csv")


def preview_import_file(file_bytes: bytes, file_name: str, mime_type: Optional[str] = None) -> ImportPreview:
    parsed = parse_import_file(file_bytes, file_name, mime_type)
    return ImportPreview(headers=parsed.headers, rows=parsed.rows[:PREVIEW_ROWS], total_rows=len(parsed.rows))


class SupplierImportService:
    """
    Handles supplier file imports for one organisation.

    Attributes:
        db (AsyncSession): Session shared by every write of an import run.
    """

    def __init__(self, db: AsyncSession, organisation_id: str = DEFAULT_ORG_ID, actor: str = "system"):
        self.db = db
        self.organisation_id = organisation_id
        self.actor = actor
        self.suppliers = SupplierRepo(db, organisation_id)
        self.items = SupplierItemRepo(db, organisation_id)
        self.import_records = SupplierImportRecordRepo(db, organisation_id)
        self.settings_repo = SettingsRepo(db, organisation_id)
        self.activity = ActivityLogger(db, organisation_id)

    def _read(self, row: Dict[str, str], template: SupplierImportTemplate, field: str) -> str:
        column = getattr(template.column_map, field)
        if not column:
            return ""
        raw = str(row.get(column, "") or "")
        return raw.strip() if template.trim_values else raw

    def _availability(self, raw: str, template: SupplierImportTemplate) -> str:
        value = raw.strip()
        default = SupplierAvailability(template.default_availability).value
        if not value:
            return default
        mapped = (
            template.availability_map.get(value)
            or template.availability_map.get(value.upper())
            or template.availability_map.get(value.lower())
        )
        if mapped:
            return SupplierAvailability(mapped).value
        if value.lower() in {a.value for a in SupplierAvailability}:
            return value.lower()
        return default

    def map_row(
        self,
        supplier_id: str,
        row: Dict[str, str],
        template: SupplierImportTemplate,
        fx_usd_to_eur: float,
        index: int,
    ) -> SupplierItem:
        """
        Build a SupplierItem from one row.

        Raises:
            ValueError: The row has no usable ask price
        """
        brand = self._read(row, template, "brand")
        sku = self._read(row, template, "sku")
        external_id = self._read(row, template, "external_id") or sku or f"{supplier_id}-{index + 1}"
        title = self._read(row, template, "title") or f"{brand} {sku}".strip() or f"Supplier Item {index + 1}"

        ask_usd_raw = parse_amount(self._read(row, template, "ask_price_usd"))
        ask_eur_raw = parse_amount(self._read(row, template, "ask_price_eur"))
        if ask_usd_raw <= 0 and ask_eur_raw <= 0:
            raise ValueError("Missing ask price")
        ask_usd = ask_usd_raw if ask_usd_raw > 0 else ask_eur_raw / fx_usd_to_eur
        ask_eur = ask_eur_raw if ask_eur_raw > 0 else usd_to_eur(ask_usd, fx_usd_to_eur)

        sell_usd_raw = parse_amount(self._read(row, template, "selling_price_usd"))
        sell_eur_raw = parse_amount(self._read(row, template, "selling_price_eur"))
        sell_usd = sell_usd_raw if sell_usd_raw > 0 else (sell_eur_raw / fx_usd_to_eur if sell_eur_raw > 0 else None)
        sell_eur = sell_eur_raw if sell_eur_raw > 0 else (usd_to_eur(sell_usd, fx_usd_to_eur) if sell_usd else None)

        now = utc_now()
        return SupplierItem(
            organisation_id=self.organisation_id,
            supplier_id=supplier_id,
            external_id=external_id,
            title=title,
            brand=brand,
            sku=sku,
            condition_rank=self._read(row, template, "condition_rank"),
            ask_price_usd=round_money(ask_usd),
            ask_price_eur=round_money(ask_eur),
            selling_price_usd=round_money(sell_usd) if sell_usd else None,
            selling_price_eur=round_money(sell_eur) if sell_eur else None,
            availability=self._availability(self._read(row, template, "availability"), template),
            image_url=_valid_url(self._read(row, template, "image_url"), PLACEHOLDER_IMAGE_URL),
            source_url=_valid_url(self._read(row, template, "source_url"), PLACEHOLDER_SOURCE_URL),
            raw_payload=dict(row),
            last_seen_at=now,
            created_by=self.actor,
            updated_by=self.actor,
        )

    async def import_with_template(
        self,
        supplier_id: str,
        rows: List[Dict[str, str]],
        template: SupplierImportTemplate,
        job_type: str = "supplier_import",
        record_job_row: bool = True,
        record_activity: bool = True,
    ) -> ImportResult:
        """
        Map and stage every row. Writes are flushed, not committed.
        """
        effective = await self.settings_repo.get_effective()
        fx_rate = effective.fx_usd_to_eur or DEFAULT_FX_USD_TO_EUR
        result = ImportResult(total=len(rows))

        for index, row in enumerate(rows):
            try:
                item = self.map_row(supplier_id, row, template, fx_rate, index)
            except (ValueError, TypeError, ZeroDivisionError) as e:
                result.errors += 1
                result.error_messages.append(f"Row {index + 1}: {e}")
                continue
            self.db.add(item)
            result.success += 1
        await self.db.flush()

        logger.info(
            f"Supplier {supplier_id} import: {result.success}/{result.total} rows, {result.errors} errors"
        )

        if record_job_row:
            job = await record_job(
                self.db,
                job_type=job_type,
                status=JobStatus.SUCCEEDED if result.errors == 0 else JobStatus.FAILED,
                last_error=f"{result.errors} errors occurred" if result.errors else "",
                error_count=result.errors,
                progress={
                    "total": result.total,
                    "processed": result.total,
                    "created": result.success,
                    "updated": 0,
                    "skipped": 0,
                    "errors": [{"index": i, "message": m} for i, m in enumerate(result.error_messages)],
                },
                input={"supplierId": supplier_id},
                organisation_id=self.organisation_id,
            )
            result.job_id = job.id

        if record_activity:
            await self.activity.log_activity(
                ActivityEventType.SUPPLIER_IMPORT,
                entity_type="supplier",
                entity_id=supplier_id,
                payload={
                    "jobType": job_type,
                    "total": result.total,
                    "success": result.success,
                    "errors": result.errors,
                },
                actor=self.actor,
            )
        return result

    async def import_upload(
        self,
        supplier_id: str,
        file_bytes: bytes,
        file_name: str,
        mime_type: Optional[str] = None,
        template: Optional[SupplierImportTemplate] = None,
        source: str = "upload",
    ) -> ImportResult:
        """
        Import an uploaded file for a supplier.

        Template precedence: the posted template, then the supplier's stored
        template, then the default Brand Street Tokyo layout.

        Raises:
            NotFoundError: Unknown supplier
            DuplicateImportError: This exact file was already imported for the supplier
            ImportFileError: The file is too large or cannot be parsed
        """
        max_bytes = get_settings().IMPORT_MAX_FILE_MB * 1024 * 1024
        if len(file_bytes) > max_bytes:
            raise ImportFileError(f"File exceeds the {get_settings().IMPORT_MAX_FILE_MB} MB limit")

        supplier = await self.suppliers.get_or_404(supplier_id)
        dedupe_id = dedupe_id_for(supplier_id, file_bytes)
        if await self.import_records.exists(dedupe_id):
            raise DuplicateImportError(dedupe_id)

        parsed = parse_import_file(file_bytes, file_name, mime_type)

        if template is None and supplier.import_template:
            template = SupplierImportTemplate.model_validate(supplier.import_template)
        template = template or DEFAULT_TEMPLATE

        try:
            result = await self.import_with_template(supplier_id, parsed.rows, template)
            self.db.add(
                SupplierImportRecord(
                    organisation_id=self.organisation_id,
                    dedupe_id=dedupe_id,
                    supplier_id=supplier_id,
                    file_name=file_name or "",
                    source=source,
                    imported_count=result.success,
                    created_by=self.actor,
                    updated_by=self.actor,
                )
            )
            await self.db.flush()
            supplier.item_count = await self.items.count_for_supplier(supplier_id)
            supplier.updated_at = utc_now()
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return result
