"""Tax record pipelines: validate -> derive -> persist"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from wealthblend.domain.exceptions import ValidationError
from wealthblend.domain.models import TaxRecord
from wealthblend.domain.tax import derive_tax
from wealthblend.domain.validation import validate_tax_record
from wealthblend.infrastructure.database.repositories import TaxRecordRepository
from wealthblend.infrastructure.observability.logging import log_record_saved
from wealthblend.infrastructure.observability.metrics import record_saved, validation_failures_counter
from wealthblend.services.common import build_record, merge_patch

RECORD_TYPE = "tax_record"
DERIVED_FIELDS = ("taxable_income", "refund_or_owed")


def _persist(
    repo: TaxRecordRepository,
    record: TaxRecord,
    now: datetime,
    operation: str,
    request_id: Optional[str],
) -> TaxRecord:
    for document in record.documents:
        if document.upload_date is None:
            document.upload_date = now

    validate_tax_record(record, now)
    saved = repo.save(derive_tax(record), now)

    record_saved(RECORD_TYPE, operation)
    log_record_saved(RECORD_TYPE, saved.id, saved.user_id, operation, request_id)
    return saved


def create_tax_record(
    repo: TaxRecordRepository,
    user_id: str,
    raw: Dict[str, Any],
    now: datetime,
    request_id: Optional[str] = None,
) -> TaxRecord:
    try:
        record = build_record(TaxRecord, user_id, raw, DERIVED_FIELDS)
        return _persist(repo, record, now, "create", request_id)
    except ValidationError:
        validation_failures_counter.labels(record_type=RECORD_TYPE).inc()
        raise


def update_tax_record(
    repo: TaxRecordRepository,
    record_id: str,
    user_id: str,
    patch: Dict[str, Any],
    now: datetime,
    request_id: Optional[str] = None,
) -> TaxRecord:
    current = repo.get(record_id, user_id)
    try:
        record = merge_patch(current, patch, DERIVED_FIELDS)
        return _persist(repo, record, now, "update", request_id)
    except ValidationError:
        validation_failures_counter.labels(record_type=RECORD_TYPE).inc()
        raise


def list_tax_records(
    repo: TaxRecordRepository,
    user_id: str,
    tax_year: Optional[int] = None,
    status: Optional[str] = None,
) -> List[TaxRecord]:
    return repo.list_for_user(user_id, tax_year=tax_year, status=status)
