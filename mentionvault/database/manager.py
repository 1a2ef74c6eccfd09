"""
Database manager for mentionvault.

This module persists the curated participant list and the active participant
of each local user using DuckDB.
"""

import duckdb
import getpass
import logging
from typing import Dict, Iterable, List, Optional

from ..models import Participant


class DatabaseManager:
    """
    Manages the DuckDB database holding participants and user identities.
    """

    def __init__(self, db_path: str = "mentionvault.db"):
        """
        Initialize the database manager.

        Args:
            db_path: Path to the DuckDB database file (":memory:" for tests)
        """
        self.db_path = db_path
        self.connection = None

    def connect(self):
        """Establish connection to the database."""
        self.connection = duckdb.connect(self.db_path)

    def disconnect(self):
        """Close the database connection."""
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()

    def _require_connection(self):
        if not self.connection:
            raise RuntimeError("Database connection not established")
        return self.connection

    def initialize_database(self):
        """
        Create all necessary tables if they don't exist.
        """
        connection = self._require_connection()

        # Curated participants, kept in the order the user arranged them
        connection.execute("""
            CREATE TABLE IF NOT EXISTS participants (
                participant_id VARCHAR NOT NULL,
                name VARCHAR NOT NULL,
                position INTEGER NOT NULL
            )
        """)

        # Which participant each local (OS) user is acting as
        connection.execute("""
            CREATE TABLE IF NOT EXISTS active_users (
                username VARCHAR PRIMARY KEY,
                participant_id VARCHAR NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    def load_participants(self) -> List[Participant]:
        """
        Load the curated participant list.

        Returns:
            Participants in their saved order
        """
        connection = self._require_connection()

        results = connection.execute("""
            SELECT participant_id, name
            FROM participants
            ORDER BY position
        """).fetchall()

        return [Participant(id=row[0], name=row[1]) for row in results]

    def save_participants(self, participants: Iterable[Participant]) -> None:
        """
        Replace the stored participant list in a single transaction.

        Args:
            participants: The complete, ordered participant list

        Raises:
            ValueError: if two participants share an id; the previously
                stored list is kept
        """
        connection = self._require_connection()
        rows = [[p.id, p.name, position] for position, p in enumerate(participants)]

        # participant_id is unique; enforced here, not by the table
        seen = set()
        for row in rows:
            if row[0] in seen:
                raise ValueError(f"Duplicate participant id: {row[0]}")
            seen.add(row[0])

        connection.begin()
        try:
            connection.execute("DELETE FROM participants")
            if rows:
                connection.executemany("""
                    INSERT INTO participants (participant_id, name, position)
                    VALUES (?, ?, ?)
                """, rows)
        except duckdb.Error:
            connection.rollback()
            raise
        connection.commit()
        logging.info(f"Saved {len(rows)} participants")

    @staticmethod
    def _resolve_username(username: Optional[str]) -> str:
        return username if username else getpass.getuser()

    def load_active_identifier(self, username: Optional[str] = None) -> Optional[str]:
        """
        Get the participant id the local user is acting as.

        Args:
            username: OS user name; defaults to the current user

        Returns:
            The active participant id, or None if none is set
        """
        connection = self._require_connection()

        result = connection.execute("""
            SELECT participant_id FROM active_users WHERE username = ?
        """, [self._resolve_username(username)]).fetchone()

        return result[0] if result else None

    def save_active_identifier(self, participant_id: str, username: Optional[str] = None) -> None:
        """
        Set the participant id the local user is acting as.

        An empty id clears the active participant.
        """
        if not participant_id:
            self.clear_active_identifier(username)
            return

        connection = self._require_connection()
        connection.execute("""
            INSERT OR REPLACE INTO active_users (username, participant_id, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
        """, [self._resolve_username(username), participant_id])

    def clear_active_identifier(self, username: Optional[str] = None) -> None:
        """Forget the active participant of the local user."""
        connection = self._require_connection()
        connection.execute("""
            DELETE FROM active_users WHERE username = ?
        """, [self._resolve_username(username)])

    def get_user_mapping(self) -> Dict[str, str]:
        """
        Get the active participant of every known local user.

        Returns:
            Mapping of OS user name to participant id
        """
        connection = self._require_connection()
        results = connection.execute("""
            SELECT username, participant_id FROM active_users ORDER BY username
        """).fetchall()
        return {row[0]: row[1] for row in results}
