from __future__ import annotations

CREATE_OVERLAY_PREFS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS overlay_prefs (
  view_id TEXT PRIMARY KEY,
  enabled BOOLEAN NOT NULL,
  layers_json TEXT NOT NULL,
  updated_ms BIGINT
);
"""

SELECT_OVERLAY_PREFS_SQL = """
SELECT enabled, layers_json
FROM overlay_prefs
WHERE view_id = ?
"""

UPSERT_OVERLAY_PREFS_SQL = """
INSERT OR REPLACE INTO overlay_prefs (view_id, enabled, layers_json, updated_ms)
VALUES (?, ?, ?, ?)
"""

LIST_OVERLAY_VIEWS_SQL = """
SELECT view_id
FROM overlay_prefs
ORDER BY view_id
"""
