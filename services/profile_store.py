"""
Profile Store — reads member profiles and writes booked date requests.
Primary source: CSV files in data/ directory.
Optional: Google Sheets 2-way sync via gspread OAuth2 user login.

Auth flow:
  1. Create an OAuth 2.0 Client ID (Desktop) at console.cloud.google.com
  2. Download the client_secret JSON → save as credentials.json in project root
  3. Set KNOCK_SHEET_ID in .env
  4. Call connect_sheets(); on first run a browser opens for Google login
     and the token is saved locally
"""
from __future__ import annotations
import logging
import os
import time
from pathlib import Path
from typing import List, Optional

import gspread
import pandas as pd
from dotenv import load_dotenv

from models.date_request import DateRequest
from models.errors import ProfileStoreError, ValidationError
from models.profile import Profile

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Path configuration
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
PROFILES_CSV = DATA_DIR / "profiles.csv"
DATE_REQUESTS_CSV = DATA_DIR / "date_requests.csv"

# OAuth2 credentials paths
OAUTH_CREDS_FILE = PROJECT_ROOT / "credentials.json"          # client secret
OAUTH_TOKEN_FILE = PROJECT_ROOT / "authorized_user.json"      # saved token

PROFILES_SHEET = "Profiles"
DATE_REQUESTS_SHEET = "DateRequests"

# ---------------------------------------------------------------------------
# Google Sheets integration (OAuth2 user login — no service-account key)
# ---------------------------------------------------------------------------
_spreadsheet = None


def connect_sheets() -> bool:
    """
    Attempt to open the configured spreadsheet with OAuth2 user credentials.
    Returns False (CSV-only mode) if not configured or auth fails.
    """
    global _spreadsheet
    load_dotenv()

    sheet_id = os.getenv("KNOCK_SHEET_ID", "").strip()
    if not sheet_id:
        logger.info("KNOCK_SHEET_ID not set in .env — using CSV only.")
        return False

    if not OAUTH_CREDS_FILE.exists():
        logger.info(
            f"OAuth credentials file not found at {OAUTH_CREDS_FILE}. "
            "Download 'Desktop' OAuth client JSON from Google Cloud Console "
            "and save it as credentials.json in the project root."
        )
        return False

    try:
        client = gspread.oauth(
            credentials_filename=str(OAUTH_CREDS_FILE),
            authorized_user_filename=str(OAUTH_TOKEN_FILE),
        )
        _spreadsheet = client.open_by_key(sheet_id)
    except (gspread.exceptions.GSpreadException, OSError, ValueError) as e:
        logger.warning(f"Google Sheets init failed: {e}. Falling back to CSV.")
        return False

    logger.info(f"Google Sheets connected: {_spreadsheet.title}")
    return True


def disconnect_sheets() -> None:
    global _spreadsheet
    _spreadsheet = None


def is_sheets_connected() -> bool:
    """Check if Google Sheets is currently connected."""
    return _spreadsheet is not None


def _retry(func, retries: int = 3):
    """Simple retry wrapper with exponential backoff."""
    last_error = None
    for attempt in range(retries):
        try:
            return func()
        except (gspread.exceptions.GSpreadException, OSError) as e:
            last_error = e
            wait = 2 ** attempt
            logger.warning(f"Retry {attempt + 1}/{retries} after {wait}s: {e}")
            time.sleep(wait)
    raise ProfileStoreError(f"All {retries} retries failed") from last_error


def _read_sheet(name: str) -> Optional[pd.DataFrame]:
    if not _spreadsheet:
        return None
    try:
        ws = _retry(lambda: _spreadsheet.worksheet(name))
        records = ws.get_all_records()
    except ProfileStoreError as e:
        logger.warning(f"Sheets read failed, falling back to CSV: {e}")
        return None
    if not records:
        return None
    logger.info(f"Loaded {len(records)} rows from Google Sheets worksheet {name}.")
    return pd.DataFrame(records).astype(str)


def _read_csv(path: Path) -> pd.DataFrame:
    return pd.read_csv(path, dtype=str, keep_default_na=False)


# ---------------------------------------------------------------------------
# READ operations
# ---------------------------------------------------------------------------

def load_profiles_df() -> pd.DataFrame:
    """Load profiles as a DataFrame."""
    df = _read_sheet(PROFILES_SHEET)
    if df is not None:
        return df
    if not PROFILES_CSV.exists():
        raise ProfileStoreError(f"Profiles file not found: {PROFILES_CSV}")
    return _read_csv(PROFILES_CSV)


def load_profiles() -> List[Profile]:
    """Load all valid profiles; rows that fail validation are skipped."""
    profiles = []
    for index, row in load_profiles_df().iterrows():
        try:
            profiles.append(Profile.from_dict(row))
        except ValidationError as e:
            logger.warning(f"Skipping profile row {index}: {e}")
    logger.info(f"Loaded {len(profiles)} profiles.")
    return profiles


def find_profile(profiles: List[Profile], identifier: str) -> Optional[Profile]:
    """Find a profile by id or name (case-insensitive)."""
    identifier = identifier.strip().lower()
    for p in profiles:
        if p.id.lower() == identifier or p.name.lower() == identifier:
            return p
    return None


def load_date_requests_df() -> pd.DataFrame:
    """Load stored date request rows as-is; empty when nothing has been saved yet."""
    df = _read_sheet(DATE_REQUESTS_SHEET)
    if df is not None:
        return df
    if not DATE_REQUESTS_CSV.exists():
        return pd.DataFrame()
    return _read_csv(DATE_REQUESTS_CSV)


def load_date_requests() -> List[DateRequest]:
    requests = []
    for index, row in load_date_requests_df().iterrows():
        try:
            requests.append(DateRequest.from_dict(row))
        except ValidationError as e:
            logger.warning(f"Skipping date request row {index}: {e}")
    return requests


# ---------------------------------------------------------------------------
# WRITE operations
# ---------------------------------------------------------------------------

def _save_df_to_csv(df: pd.DataFrame, path: Path) -> None:
    """Persist a DataFrame to its CSV file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info(f"Saved {len(df)} rows to {path.name}")


def _sync_df_to_sheet(df: pd.DataFrame, worksheet_name: str) -> None:
    """Write a DataFrame back to a Google Sheet worksheet (full replace)."""
    if not _spreadsheet:
        return
    try:
        ws = _retry(lambda: _spreadsheet.worksheet(worksheet_name))
        ws.clear()
        header = df.columns.values.tolist()
        rows = df.astype(str).values.tolist()
        ws.update([header] + rows)
    except (ProfileStoreError, gspread.exceptions.GSpreadException) as e:
        logger.error(f"Failed to sync {worksheet_name} to Sheets: {e}")
        return
    logger.info(f"Synced {worksheet_name} to Google Sheets ({len(rows)} rows).")


def save_profiles(profiles: List[Profile]) -> None:
    """Save profiles to CSV + optionally Google Sheets."""
    df = pd.DataFrame([p.to_dict() for p in profiles])
    _save_df_to_csv(df, PROFILES_CSV)
    _sync_df_to_sheet(df, PROFILES_SHEET)


def save_date_request(request: DateRequest) -> None:
    """
    Insert or replace one date request (matched on request_id).

    Works on the stored rows directly, so rows this version cannot parse are
    written back untouched rather than dropped.
    """
    df = load_date_requests_df()
    if "request_id" in df.columns:
        df = df[df["request_id"].astype(str).str.strip() != request.request_id]
    row = pd.DataFrame([request.to_dict()])
    df = pd.concat([df, row], ignore_index=True) if not df.empty else row
    _save_df_to_csv(df, DATE_REQUESTS_CSV)
    _sync_df_to_sheet(df, DATE_REQUESTS_SHEET)
