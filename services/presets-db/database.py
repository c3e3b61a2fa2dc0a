"""
SQLite storage for Onboarding Classifier presets
"""
import aiosqlite
import json
import logging
import os
import re
import uuid
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple

logger = logging.getLogger(__name__)

DATABASE_PATH = os.environ.get('DATABASE_PATH', '/app/data/presets.db')

# A stored bundle is only usable when all four parts are present
REQUIRED_PAYLOAD_KEYS = ('inputs', 'gw', 'vw', 'th')

# Canonical dashed form only; anything else is looked up by name
UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE
)


def is_complete_payload(data: Any) -> bool:
    """Every part present and not null (an empty mapping still counts)"""
    return isinstance(data, dict) and all(data.get(key) is not None for key in REQUIRED_PAYLOAD_KEYS)


def is_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.match(str(value)))


def _match(id_or_name: str) -> Tuple[str, str]:
    """UUIDs address the id column, anything else the name column"""
    if is_uuid(id_or_name):
        return 'id', str(id_or_name).lower()
    return 'name', id_or_name


def _row_to_record(row: aiosqlite.Row) -> Dict[str, Any]:
    return {
        'id': row['id'],
        'name': row['name'],
        'data': json.loads(row['data_json']),
        'created_at': row['created_at'],
        'updated_at': row['updated_at'],
    }


def _connect():
    # Explicit transactions; writers take the lock with BEGIN IMMEDIATE
    return aiosqlite.connect(DATABASE_PATH, isolation_level=None)


async def init_db():
    """Initialize database with required tables"""
    directory = os.path.dirname(DATABASE_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)

    async with aiosqlite.connect(DATABASE_PATH) as db:
        await db.execute('''
            CREATE TABLE IF NOT EXISTS classifier_presets (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                data_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        ''')
        await db.execute('CREATE INDEX IF NOT EXISTS idx_presets_name ON classifier_presets(name)')
        await db.commit()
        logger.info(f"Database initialized at {DATABASE_PATH}")


async def list_presets(
    search: Optional[str] = None,
    limit: int = 100,
    offset: int = 0
) -> List[Dict[str, Any]]:
    """Newest first; incomplete bundles are skipped"""
    async with aiosqlite.connect(DATABASE_PATH) as db:
        db.row_factory = aiosqlite.Row

        query = 'SELECT * FROM classifier_presets WHERE 1=1'
        params: List[Any] = []

        if search:
            query += ' AND name LIKE ?'
            params.append(f'%{search}%')

        query += ' ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?'
        params.extend([limit, offset])

        cursor = await db.execute(query, params)
        rows = await cursor.fetchall()

    records = []
    for row in rows:
        record = _row_to_record(row)
        if is_complete_payload(record['data']):
            records.append(record)
        else:
            logger.warning(f"Skipping incomplete preset '{record['name']}' ({record['id']})")
    return records


async def _fetch_preset(db: aiosqlite.Connection, id_or_name: str) -> Optional[Dict[str, Any]]:
    column, value = _match(id_or_name)
    db.row_factory = aiosqlite.Row
    cursor = await db.execute(
        f'SELECT * FROM classifier_presets WHERE {column} = ? ORDER BY created_at DESC LIMIT 1',
        (value,)
    )
    row = await cursor.fetchone()
    if row:
        return _row_to_record(row)
    return None


async def get_preset(id_or_name: str) -> Optional[Dict[str, Any]]:
    """Get preset by id or name"""
    async with aiosqlite.connect(DATABASE_PATH) as db:
        return await _fetch_preset(db, id_or_name)


async def name_exists(db: aiosqlite.Connection, name: str, exclude_id: Optional[str] = None) -> bool:
    """Case-insensitive name check, optionally ignoring one preset id"""
    query = 'SELECT COUNT(*) FROM classifier_presets WHERE lower(name) = lower(?)'
    params: List[Any] = [name]
    if exclude_id:
        query += ' AND id != ?'
        params.append(exclude_id)

    cursor = await db.execute(query, params)
    (count,) = await cursor.fetchone()
    return count > 0


async def uniqueize_name(db: aiosqlite.Connection, base: str, exclude_id: Optional[str] = None) -> str:
    """
    'base' if free, otherwise 'base -1', 'base -2', ...
    Call inside the write transaction so the name cannot be taken in between.
    """
    if not await name_exists(db, base, exclude_id):
        return base
    i = 1
    while await name_exists(db, f'{base} -{i}', exclude_id):
        i += 1
    return f'{base} -{i}'


async def save_preset(name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a new preset and return the stored record.

    The API rejects short names; a blank name only reaches this point
    from direct callers and is replaced by a timestamped one.
    """
    safe_name = (name or '').strip() or f'Preset {datetime.now():%Y-%m-%d %H:%M:%S}'
    preset_id = str(uuid.uuid4())
    now = datetime.now().isoformat()

    async with _connect() as db:
        await db.execute('BEGIN IMMEDIATE')
        try:
            final_name = await uniqueize_name(db, safe_name)
            await db.execute('''
                INSERT INTO classifier_presets (id, name, data_json, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
            ''', (preset_id, final_name, json.dumps(payload, ensure_ascii=False), now, now))
            await db.execute('COMMIT')
        except Exception:
            await db.execute('ROLLBACK')
            raise

    return {
        'id': preset_id,
        'name': final_name,
        'data': payload,
        'created_at': now,
        'updated_at': now,
    }


async def update_preset(
    id_or_name: str,
    name: Optional[str],
    payload: Dict[str, Any]
) -> Tuple[int, Optional[str], Optional[str]]:
    """
    Update-in-place by id or name.
    Returns (updated row count, preset id, final name).
    """
    async with _connect() as db:
        await db.execute('BEGIN IMMEDIATE')
        try:
            existing = await _fetch_preset(db, id_or_name)
            if not existing:
                await db.execute('ROLLBACK')
                return 0, None, None

            target = (name or '').strip() or existing['name']
            final_name = await uniqueize_name(db, target, exclude_id=existing['id'])
            cursor = await db.execute('''
                UPDATE classifier_presets
                SET name = ?, data_json = ?, updated_at = ?
                WHERE id = ?
            ''', (final_name, json.dumps(payload, ensure_ascii=False), datetime.now().isoformat(), existing['id']))
            await db.execute('COMMIT')
        except Exception:
            await db.execute('ROLLBACK')
            raise

    return cursor.rowcount, existing['id'], final_name


async def delete_preset(id_or_name: str) -> int:
    """Delete by id or name; returns the number of removed presets"""
    column, value = _match(id_or_name)
    async with aiosqlite.connect(DATABASE_PATH) as db:
        cursor = await db.execute(f'DELETE FROM classifier_presets WHERE {column} = ?', (value,))
        await db.commit()
        return cursor.rowcount
