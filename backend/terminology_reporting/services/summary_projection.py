"""Summary projection: one reporting row per run.

The projection joins each run with its steps and error count and folds the
per-terminology step outcomes into a single ``UpdateSummaryOut``. Outcome
values (versions, counts, validation rates) are read from step ``details``
text written by the pipeline as ``key: value`` pairs, e.g.::

    Version: 20240501, Concepts: 350,123, Descriptions: 1,204,882
    VMPs=24011; AMPs=160234; XML validation: 99.8%

A terminology with no steps in the run yields ``None`` for all of its fields,
so a missing outcome can always be told apart from a failed one.
"""

import logging
import re
from collections import defaultdict
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from terminology_reporting.constants.terminology import (
    BOOLEAN_FIELDS,
    DECIMAL_FIELDS,
    DETAIL_FIELDS_BY_TYPE,
    INTEGER_FIELDS,
    SUCCESS_FIELD_BY_TYPE,
    TERMINOLOGY_ALIASES,
    TerminologyType,
)
from terminology_reporting.models import UpdateError, UpdateRun, UpdateStep
from terminology_reporting.schemas.reporting import UpdateSummaryOut

log = logging.getLogger(__name__)

# Split on ';' or newlines, and on commas only when a new "key:" follows,
# so thousands separators inside counts survive.
_PAIR_SEPARATOR = re.compile(r"[;\n]|,(?=\s*[A-Za-z][A-Za-z0-9 _+\-]*\s*[:=])")
_KEY_VALUE = re.compile(r"^\s*([^:=]+?)\s*[:=]\s*(.*?)\s*$")
_KEY_NOISE = re.compile(r"[\s_\-]")

_BOOLEAN_VALUES = {
    "true": True, "yes": True, "y": True, "1": True,
    "false": False, "no": False, "n": False, "0": False,
}


def normalize_key(key: str) -> str:
    return _KEY_NOISE.sub("", key).lower()


def parse_step_details(details: Optional[str]) -> Dict[str, str]:
    """Parse step details text into a dict of normalised key -> raw value."""
    if not details:
        return {}
    pairs = {}
    for chunk in _PAIR_SEPARATOR.split(details):
        match = _KEY_VALUE.match(chunk)
        if match and match.group(2):
            pairs[normalize_key(match.group(1))] = match.group(2)
    return pairs


def resolve_terminology(label: Optional[str]) -> Optional[TerminologyType]:
    """Map a stored terminology label ('SNOMED', 'dm+d', 'SNOMED CT') to its type."""
    if not label:
        return None
    return TERMINOLOGY_ALIASES.get(re.sub(r"[^A-Z]", "", label.upper()))


def format_duration(seconds: Optional[int]) -> Optional[str]:
    if seconds is None:
        return None
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def _coerce(field: str, raw: str, step: UpdateStep):
    """Convert a raw detail value for ``field``; None when it does not parse."""
    value = raw.strip()
    try:
        if field in INTEGER_FIELDS:
            return int(value.replace(",", "").replace(" ", ""))
        if field in DECIMAL_FIELDS:
            # Rates are not clamped; a trailing '%' is dropped without rescaling
            return Decimal(value.rstrip("%").strip())
        if field in BOOLEAN_FIELDS:
            return _BOOLEAN_VALUES[value.lower()]
    except (ValueError, InvalidOperation, KeyError):
        log.warning(
            "Run %s step %s (%s): could not parse %s from %r, leaving it empty",
            step.run_id, step.step_id, step.step_name, field, raw,
        )
        return None
    return value


def fold_terminology_steps(terminology: TerminologyType, steps: Sequence[UpdateStep]) -> Dict[str, object]:
    """
    Fold the steps of one terminology type into its summary fields.

    Steps are applied in ``step_order``; a value from a later step replaces an
    earlier one. Values that fail to parse are skipped.
    """
    detail_fields = DETAIL_FIELDS_BY_TYPE[terminology]
    success_field = SUCCESS_FIELD_BY_TYPE[terminology]
    fields: Dict[str, object] = {name: None for name in detail_fields.values()}
    fields[success_field] = None

    if not steps:
        return fields

    fields[success_field] = all(step.success for step in steps)
    for step in sorted(steps, key=lambda s: (s.step_order, s.step_id or 0)):
        for key, raw in parse_step_details(step.details).items():
            field = detail_fields.get(key)
            if field is None:
                continue
            value = _coerce(field, raw, step)
            if value is not None:
                fields[field] = value
    return fields


def group_steps_by_terminology(steps: Sequence[UpdateStep]) -> Dict[TerminologyType, List[UpdateStep]]:
    grouped: Dict[TerminologyType, List[UpdateStep]] = defaultdict(list)
    for step in steps:
        terminology = resolve_terminology(step.terminology_type)
        if terminology is None:
            log.warning(
                "Run %s step %s has unknown terminology type %r; not included in summary",
                step.run_id, step.step_id, step.terminology_type,
            )
            continue
        grouped[terminology].append(step)
    return grouped


def summarize_run(run: UpdateRun, steps: Sequence[UpdateStep], error_count: int) -> UpdateSummaryOut:
    """Build the summary row for one run from its steps and error count."""
    grouped = group_steps_by_terminology(steps)
    fields: Dict[str, object] = {}
    for terminology in TerminologyType:
        fields.update(fold_terminology_steps(terminology, grouped.get(terminology, [])))

    return UpdateSummaryOut(
        run_id=run.run_id,
        start_time=run.start_time,
        end_time=run.end_time,
        duration_formatted=run.duration_formatted or format_duration(run.duration_seconds),
        overall_success=bool(run.success) and all(step.success for step in steps),
        updates_found=run.updates_found or 0,
        server_name=run.server_name or "",
        whatif_mode=bool(run.whatif_mode),
        error_count=error_count,
        **fields,
    )


def build_summaries(db: Session, runs: Sequence[UpdateRun]) -> List[UpdateSummaryOut]:
    """Project the given runs into summaries, preserving their order."""
    if not runs:
        return []
    run_ids = [run.run_id for run in runs]

    steps_by_run: Dict[object, List[UpdateStep]] = defaultdict(list)
    steps = (
        db.query(UpdateStep)
        .filter(UpdateStep.run_id.in_(run_ids))
        .order_by(UpdateStep.terminology_type, UpdateStep.step_order, UpdateStep.step_id)
        .all()
    )
    for step in steps:
        steps_by_run[step.run_id].append(step)

    error_counts = dict(
        db.query(UpdateError.run_id, func.count(UpdateError.error_id))
        .filter(UpdateError.run_id.in_(run_ids))
        .group_by(UpdateError.run_id)
        .all()
    )

    return [
        summarize_run(run, steps_by_run.get(run.run_id, []), error_counts.get(run.run_id, 0))
        for run in runs
    ]


def collect_snomed_validation_rates(db: Session) -> List[Decimal]:
    """SNOMED cross-validation rate of every run summary that has one."""
    steps = (
        db.query(UpdateStep)
        .join(UpdateRun, UpdateRun.run_id == UpdateStep.run_id)
        .order_by(UpdateStep.run_id, UpdateStep.step_order, UpdateStep.step_id)
        .all()
    )
    steps_by_run: Dict[object, List[UpdateStep]] = defaultdict(list)
    for step in steps:
        steps_by_run[step.run_id].append(step)

    rates = []
    for run_steps in steps_by_run.values():
        dmd_steps = group_steps_by_terminology(run_steps).get(TerminologyType.DMD, [])
        rate = fold_terminology_steps(TerminologyType.DMD, dmd_steps)["snomed_validation_rate"]
        if rate is not None:
            rates.append(rate)
    return rates
