"""
Export data for the CSV download and the PDF summary.
Only the data is built here; rendering is left to the client.
"""
import csv
import io
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from scoring import ClassifierInput, ClassifierResult, TIERS

CSV_FILENAME = "onboarding-classifier.csv"
REPORT_TITLE = "Onboarding Classifier — Samenvatting"


class ReportSection(BaseModel):
    title: str
    rows: List[Tuple[str, str]] = Field(default_factory=list)


class ReportData(BaseModel):
    """Everything the PDF collaborator needs for the summary document"""
    title: str = REPORT_TITLE
    generated_at: str
    preset_name: Optional[str] = None
    classification: str
    lead: str
    total_score_label: str
    sections: List[ReportSection] = Field(default_factory=list)
    filename: str


def selected_labels(options: Optional[Dict[str, bool]]) -> List[str]:
    return [label for label, active in (options or {}).items() if active]


def build_csv_row(inputs: ClassifierInput, result: ClassifierResult) -> Dict[str, Any]:
    """One flat row: score, class, lead time, every input, every group score"""
    row: Dict[str, Any] = {
        "totalScore": f"{result.total_score_progress:.1f}",
        "class": result.classification.code.value,
        "lead": result.classification.lead,
    }
    for key, value in inputs.model_dump().items():
        if isinstance(value, dict):
            row[key] = "; ".join(selected_labels(value))
        else:
            row[key] = _fmt(value)
    for group in result.group_scores:
        row[f"group_{group.key.value}"] = group.score_label
    return row


def rows_to_csv(rows: List[Dict[str, Any]]) -> str:
    """Header is the union of keys in first-seen order; every field quoted"""
    headers: List[str] = []
    for row in rows:
        for key in row:
            if key not in headers:
                headers.append(key)

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if row.get(h) is None else row.get(h) for h in headers])
    return buf.getvalue()


def _list_or_none(options: Optional[Dict[str, bool]]) -> str:
    active = selected_labels(options)
    return ", ".join(active) if active else "Geen"


def _fmt(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_report(
    inputs: ClassifierInput,
    result: ClassifierResult,
    preset_name: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> ReportData:
    """Sections and header data for the PDF summary"""
    generated_at = generated_at or datetime.now()
    code = result.classification.code

    sections = [
        ReportSection(
            title="Operationele kenmerken",
            rows=[
                ("Aantal SKU's", _fmt(inputs.skuCount)),
                ("SKU-complexiteit", inputs.skuComplexity),
                ("Ordervolume/mnd (gem.)", _fmt(inputs.orderVolume)),
                ("Piekvolume", _fmt(inputs.orderPeak)),
                ("Seizoensinvloeden", inputs.seizoensinvloed),
                ("Retourpercentage", f"{_fmt(inputs.retourPercentage)}%"),
                ("VAS-activiteiten", _list_or_none(inputs.vasActiviteiten)),
                ("Inbound bijzonderheden", _list_or_none(inputs.inboundBijzonderheden)),
            ],
        ),
        ReportSection(
            title="Technische integratie",
            rows=[
                ("Platformtype", inputs.platformType),
                ("Type koppeling", inputs.typeKoppeling),
                ("PostNL API's", _list_or_none(inputs.postnlApis)),
                ("Kanalen", inputs.verzendMethoden),
            ],
        ),
    ]

    return ReportData(
        generated_at=generated_at.isoformat(timespec="seconds"),
        preset_name=preset_name or None,
        classification=code.value,
        lead=TIERS[code].lead,
        total_score_label=result.total_score_label,
        sections=sections,
        filename=f"onboarding-classifier-{generated_at.date().isoformat()}.pdf",
    )
