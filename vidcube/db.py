from __future__ import annotations

from typing import Dict, List, Optional

import duckdb

# Column order shared by every videos SELECT
VIDEO_COLUMNS = (
    "id",
    "title",
    "genre",
    "age_rating",
    "src",
    "media_type",
    "created_at",
    "publisher",
    "producer",
)
COMMENT_COLUMNS = ("id", "video_id", "author_email", "text", "posted_at")

SCHEMA = (
    "CREATE SEQUENCE comment_seq",
    "CREATE SEQUENCE rating_seq",
    """
    CREATE TABLE videos (
      position INTEGER NOT NULL,
      id VARCHAR PRIMARY KEY,
      title VARCHAR NOT NULL,
      genre VARCHAR NOT NULL,
      age_rating VARCHAR NOT NULL,
      src VARCHAR NOT NULL,
      media_type VARCHAR NOT NULL,
      created_at BIGINT NOT NULL,
      publisher VARCHAR NOT NULL,
      producer VARCHAR NOT NULL
    )
    """,
    """
    CREATE TABLE comments (
      seq INTEGER DEFAULT nextval('comment_seq'),
      id VARCHAR PRIMARY KEY,
      video_id VARCHAR NOT NULL,
      author_email VARCHAR NOT NULL,
      text VARCHAR NOT NULL,
      posted_at BIGINT NOT NULL
    )
    """,
    """
    CREATE TABLE ratings (
      seq INTEGER DEFAULT nextval('rating_seq'),
      video_id VARCHAR NOT NULL,
      value DOUBLE NOT NULL
    )
    """,
)


def connect() -> duckdb.DuckDBPyConnection:
    """Fresh in-memory connection with the schema applied."""
    con = duckdb.connect(database=":memory:")
    for statement in SCHEMA:
        con.execute(statement)
    return con


def _video_rows(rows) -> List[Dict]:
    return [dict(zip(VIDEO_COLUMNS, r)) for r in rows]


def insert_video(con: duckdb.DuckDBPyConnection, video: Dict, at_head: bool) -> None:
    """
    Insert a video row. ``position`` orders the list: head inserts take
    ``min - 1``, appends take ``max + 1``.
    """
    agg = "MIN(position) - 1" if at_head else "MAX(position) + 1"
    row = con.execute(f"SELECT COALESCE({agg}, 0) FROM videos").fetchone()
    position = int(row[0])
    con.execute(
        f"""
        INSERT INTO videos (position, {", ".join(VIDEO_COLUMNS)})
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [position] + [video[c] for c in VIDEO_COLUMNS],
    )


def query_videos(con: duckdb.DuckDBPyConnection) -> List[Dict]:
    rows = con.execute(
        f"""
        SELECT {", ".join(VIDEO_COLUMNS)}
        FROM videos
        ORDER BY position
        """
    ).fetchall()
    return _video_rows(rows)


def query_videos_by_recency(con: duckdb.DuckDBPyConnection) -> List[Dict]:
    rows = con.execute(
        f"""
        SELECT {", ".join(VIDEO_COLUMNS)}
        FROM videos
        ORDER BY created_at DESC, position
        """
    ).fetchall()
    return _video_rows(rows)


def query_video(con: duckdb.DuckDBPyConnection, video_id: str) -> Optional[Dict]:
    rows = con.execute(
        f"""
        SELECT {", ".join(VIDEO_COLUMNS)}
        FROM videos
        WHERE id = ?
        """,
        [video_id],
    ).fetchall()
    if not rows:
        return None
    return _video_rows(rows)[0]


def query_search(
    con: duckdb.DuckDBPyConnection, query: str, genre: str, age_rating: str
) -> List[Dict]:
    clauses = []
    params: List = []
    if query:
        # strpos matches literally, unlike LIKE with % and _
        clauses.append("strpos(lower(title), lower(?)) > 0")
        params.append(query)
    if genre:
        clauses.append("genre = ?")
        params.append(genre)
    if age_rating:
        clauses.append("age_rating = ?")
        params.append(age_rating)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    rows = con.execute(
        f"""
        SELECT {", ".join(VIDEO_COLUMNS)}
        FROM videos
        {where}
        ORDER BY position
        """,
        params,
    ).fetchall()
    return _video_rows(rows)


def insert_comment(con: duckdb.DuckDBPyConnection, comment: Dict) -> None:
    con.execute(
        f"""
        INSERT INTO comments ({", ".join(COMMENT_COLUMNS)})
        VALUES (?, ?, ?, ?, ?)
        """,
        [comment[c] for c in COMMENT_COLUMNS],
    )


def query_comments(con: duckdb.DuckDBPyConnection, video_id: str) -> List[Dict]:
    rows = con.execute(
        f"""
        SELECT {", ".join(COMMENT_COLUMNS)}
        FROM comments
        WHERE video_id = ?
        ORDER BY seq DESC
        """,
        [video_id],
    ).fetchall()
    return [dict(zip(COMMENT_COLUMNS, r)) for r in rows]


def insert_rating(con: duckdb.DuckDBPyConnection, video_id: str, value: float) -> None:
    con.execute(
        """
        INSERT INTO ratings (video_id, value) VALUES (?, ?)
        """,
        [video_id, value],
    )


def query_rating_summary(con: duckdb.DuckDBPyConnection, video_id: str) -> Dict:
    row = con.execute(
        """
        SELECT AVG(value), COUNT(*) FROM ratings WHERE video_id = ?
        """,
        [video_id],
    ).fetchone()
    if not row or row[0] is None:
        return {"average": 0.0, "count": 0}
    return {"average": float(row[0]), "count": int(row[1])}
