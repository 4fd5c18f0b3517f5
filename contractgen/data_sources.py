# contractgen/data_sources.py

import csv
import io
import json
import re
import ssl
import urllib.parse
import urllib.request
from typing import Dict, List, Optional, Tuple

import certifi

from contractgen.settings import EXTENSION_KEY


GS_HOST = "docs.google.com"
_SHEET_ID_RE = re.compile(r"/spreadsheets/d/([A-Za-z0-9_-]+)")

# Known provider columns: record key -> accepted header spellings (compared
# lower-cased with whitespace collapsed). Every other column is kept in the
# extension blob under its original header text.
SCHEMA_COLUMNS = {
    "compensationYear": ("compensation year", "compensationyear", "year"),
    "employeeId": ("employee id", "employeeid", "emp id"),
    "name": ("provider name", "providername", "name"),
    "providerType": ("provider type", "providertype", "type"),
    "specialty": ("specialty",),
    "subspecialty": ("subspecialty", "sub specialty"),
    "positionTitle": ("position title", "positiontitle", "title"),
    "credentials": ("credentials",),
    "startDate": ("start date", "startdate"),
    "originalAgreementDate": ("original agreement date", "originalagreementdate", "agreement date"),
    "organizationName": ("organization name", "organizationname", "organization"),
    "contractTerm": ("contract term", "contractterm", "term"),
    "hourlyWage": ("hourly wage", "hourlywage"),
    "baseSalary": ("base salary", "basesalary", "salary"),
    "signingBonus": ("signing bonus", "signingbonus"),
    "relocationBonus": ("relocation bonus", "relocationbonus"),
    "qualityBonus": ("quality bonus", "qualitybonus"),
    "cmeAmount": ("cme amount", "cmeamount"),
    "conversionFactor": ("conversion factor", "conversionfactor"),
    "wRVUTarget": ("wrvu target", "wrvutarget", "wrvu"),
    "fte": ("fte",),
    "administrativeFte": ("administrative fte", "administrativefte"),
    "administrativeRole": ("administrative role", "administrativerole"),
}

_HEADER_LOOKUP = {
    variant: key for key, variants in SCHEMA_COLUMNS.items() for variant in variants
}


# -------------------------------------------------
# Public API
# -------------------------------------------------

def load_csv(path: str) -> Tuple[List[Dict[str, str]], List[str]]:
    """
    Load provider records from a local CSV file.

    Returns:
        records: one dict per row; known columns under their schema key,
                 all other columns JSON-encoded under ``dynamicFields``
        headers: ordered list of the original (stripped) column headers
    """
    with open(path, mode="r", encoding="utf-8-sig", newline="") as f:
        return _parse_csv_text(f.read())


def load_google_sheet(sheet_url: str, timeout: int = 20) -> Tuple[List[Dict[str, str]], List[str]]:
    """
    Load provider records from a Google Sheet shared as "anyone with the link".

    The sheet is downloaded through its CSV export and parsed exactly like
    ``load_csv``.
    """
    return _parse_csv_text(_download_text(sheet_export_url(sheet_url), timeout=timeout))


def sheet_export_url(sheet_url: str) -> str:
    """
    CSV export link for a sheet URL. The tab comes from ``gid`` in the
    query or fragment, defaulting to the first tab.

    Raises ValueError for anything that is not a docs.google.com sheet.
    """
    parsed = urllib.parse.urlparse(sheet_url or "")
    if parsed.hostname != GS_HOST:
        raise ValueError(f"Not a Google Sheets URL: {sheet_url!r}")

    m = _SHEET_ID_RE.search(parsed.path)
    if not m:
        raise ValueError(f"No spreadsheet id in URL: {sheet_url!r}")

    params = urllib.parse.parse_qs(parsed.query)
    params.update(urllib.parse.parse_qs(parsed.fragment))
    gid = next((g for g in params.get("gid", []) if g.isdigit()), "0")

    query = urllib.parse.urlencode({"format": "csv", "gid": gid})
    return f"https://{GS_HOST}/spreadsheets/d/{m.group(1)}/export?{query}"


def schema_key_for_header(header: str) -> Optional[str]:
    norm = re.sub(r"\s+", " ", str(header).strip().lower())
    return _HEADER_LOOKUP.get(norm)


def build_record(row: Dict[str, str], extension_key: str = EXTENSION_KEY) -> Dict[str, str]:
    record: Dict[str, str] = {}
    extension: Dict[str, str] = {}

    for k, v in (row.items() if row else []):
        if k is None:
            continue
        header = str(k).strip()
        if not header:
            continue
        value = "" if v is None else str(v).strip()

        key = schema_key_for_header(header)
        if key:
            record[key] = value
        else:
            extension[header] = value

    if extension:
        record[extension_key] = json.dumps(extension)
    return record


# -------------------------------------------------
# Internal helpers
# -------------------------------------------------

def _parse_csv_text(csv_text: str) -> Tuple[List[Dict[str, str]], List[str]]:
    records = []

    f = io.StringIO(csv_text)
    reader = csv.DictReader(f)

    headers = [str(h).strip() for h in (reader.fieldnames or [])]

    for row in reader:
        if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
            continue
        records.append(build_record(row))

    return records, headers


def _download_text(url: str, timeout: int = 20) -> str:
    context = ssl.create_default_context(cafile=certifi.where())
    req = urllib.request.Request(url, headers={"User-Agent": "contractgen"})

    with urllib.request.urlopen(req, timeout=timeout, context=context) as resp:
        if resp.status != 200:
            raise RuntimeError(f"Sheet download failed: HTTP {resp.status}")
        raw = resp.read()

    # Exports are UTF-8, sometimes with a BOM
    return raw.decode("utf-8-sig", errors="replace")
