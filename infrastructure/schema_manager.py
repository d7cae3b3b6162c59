"""
Schema and migration management for SQLite database.
"""

import logging
import sqlite3

logger = logging.getLogger("dinner.schema")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Call initialize() to ensure schema is present and migrations are applied.
    """

    def __init__(self, db_path: str, use_uri: bool = False):
        self.db_path = db_path
        self.use_uri = use_uri

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        conn = self._connect()
        try:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        if not self.use_uri:  # Skip WAL for in-memory databases
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS dinner (
                id VARCHAR(36) PRIMARY KEY,
                name VARCHAR(80),
                date DATETIME,
                team_size INTEGER,
                teams_per_course INTEGER
            )
            """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS course (
                id VARCHAR(36) PRIMARY KEY,
                name VARCHAR(80),
                position INTEGER
            )
            """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS team (
                id VARCHAR(36) PRIMARY KEY,
                dinner_id VARCHAR(36)
            )
            """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS team_member (
                id VARCHAR(36) PRIMARY KEY,
                name VARCHAR(50),
                team_id VARCHAR(36)
            )
            """
        )

    def _add_column_if_not_exists(self, cursor, table: str, column: str, column_type: str) -> None:
        cursor.execute(f"PRAGMA table_info({table})")
        columns = {row[1] for row in cursor.fetchall()}
        if column not in columns:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("add_dinner_id_to_course", self._migration_add_dinner_id_to_course),
            ("add_team_address_and_position", self._migration_add_team_address_and_position),
            ("add_member_position", self._migration_add_member_position),
            ("create_course_match_tables", self._migration_create_course_match_tables),
            ("add_indexes_v1", self._migration_add_indexes_v1),
        ]

    def _migration_add_dinner_id_to_course(self, cursor) -> None:
        self._add_column_if_not_exists(cursor, "course", "dinner_id", "VARCHAR(36)")

    def _migration_add_team_address_and_position(self, cursor) -> None:
        # position preserves registration order, which drives roster-order hosting
        self._add_column_if_not_exists(cursor, "team", "address", "TEXT")
        self._add_column_if_not_exists(cursor, "team", "position", "INTEGER DEFAULT 0")

    def _migration_add_member_position(self, cursor) -> None:
        self._add_column_if_not_exists(cursor, "team_member", "position", "INTEGER DEFAULT 0")

    def _migration_create_course_match_tables(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS course_match (
                id VARCHAR(36) PRIMARY KEY,
                dinner_id VARCHAR(36) NOT NULL,
                course_id VARCHAR(36) NOT NULL,
                host_team_id VARCHAR(36) NOT NULL,
                position INTEGER NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS course_match_guest (
                match_id VARCHAR(36) NOT NULL,
                team_id VARCHAR(36) NOT NULL,
                position INTEGER NOT NULL,
                PRIMARY KEY (match_id, team_id)
            )
            """
        )
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schedule_run (
                dinner_id VARCHAR(36) PRIMARY KEY,
                seed INTEGER NOT NULL,
                state TEXT NOT NULL,
                repeat_meetings INTEGER NOT NULL,
                max_pair_repeats INTEGER NOT NULL,
                lower_bound INTEGER NOT NULL DEFAULT 0,
                attempts INTEGER NOT NULL,
                non_hosting_team_ids TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _migration_add_indexes_v1(self, cursor) -> None:
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_course_dinner ON course(dinner_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_team_dinner ON team(dinner_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_team_member_team ON team_member(team_id)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_course_match_dinner ON course_match(dinner_id, position)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_course_match_guest_team ON course_match_guest(team_id)"
        )
