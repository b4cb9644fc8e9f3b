"""Legacy JSON import/export format.

The legacy blob looks like::

    {
        "inputRecords": [
            {"members": ["A", "B", "C", "D"], "scores": [400, 300, 200, 100],
             "timestamp": "2024/5/1 20:00:00"},
            ...
        ]
    }

Older exports carry extra per-record fields (sortedMembers, ranks,
rankBonuses, tiedGroups, ...) and a top-level members list. Those are
ignored: ranks and statistics are always recomputed from raw scores.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from mjleague.scoring.settlement import PLAYERS_PER_GAME, PlayerScore
from mjleague.scoring.validation import ScoreValidationError, validate_players

logger = logging.getLogger(__name__)


class LegacyFormatError(ValueError):
    """Raised when a legacy blob or record cannot be read."""


@dataclass
class LegacyGame:
    """One importable game."""

    timestamp: str
    players: list[PlayerScore]


@dataclass
class SkippedRecord:
    """A record left out of an import, with the reason."""

    index: int
    error: str
    raw: Any


@dataclass
class LegacyBlob:
    """Parsed legacy blob: importable games plus skipped records."""

    total: int
    games: list[LegacyGame] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)


def format_timestamp(moment: datetime | None = None) -> str:
    """Format a game timestamp the way the league displays them."""
    moment = moment or datetime.now()
    return f"{moment.year}/{moment.month}/{moment.day} {moment:%H:%M:%S}"


def _coerce_name(raw: Any) -> str:
    if raw is None:
        return ""
    return (raw if isinstance(raw, str) else str(raw)).strip()


def _coerce_score(raw: Any) -> float:
    if isinstance(raw, bool):
        return math.nan
    if not isinstance(raw, (int, float, str)):
        return math.nan
    try:
        return float(raw)
    except (ValueError, OverflowError):
        return math.nan


def parse_legacy_record(record: Any) -> list[PlayerScore]:
    """Read the four players of one legacy record.

    Raises:
        LegacyFormatError: If the record is malformed or fails validation
    """
    if not isinstance(record, dict):
        raise LegacyFormatError("Record must be an object")

    members = record.get("members")
    scores = record.get("scores")
    if not isinstance(members, list) or not isinstance(scores, list):
        raise LegacyFormatError("Missing members/scores fields")
    if len(members) != PLAYERS_PER_GAME or len(scores) != PLAYERS_PER_GAME:
        raise LegacyFormatError(f"members/scores must both have {PLAYERS_PER_GAME} entries")

    players = []
    for position, (raw_name, raw_score) in enumerate(zip(members, scores, strict=True), start=1):
        name = _coerce_name(raw_name)
        if not name:
            raise LegacyFormatError(f"Player {position} has an empty name")
        score = _coerce_score(raw_score)
        if not math.isfinite(score):
            raise LegacyFormatError(f"Player {position} score is not a valid number")
        players.append(PlayerScore(member_name=name, score=score))

    try:
        return validate_players(players)
    except ScoreValidationError as e:
        raise LegacyFormatError(str(e)) from e


def parse_legacy_blob(text: str) -> LegacyBlob:
    """Parse a legacy JSON export, skipping records that cannot be imported.

    Raises:
        LegacyFormatError: If the text is not JSON or has no inputRecords list
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LegacyFormatError("Data is not valid JSON") from e

    if not isinstance(data, dict) or "inputRecords" not in data:
        raise LegacyFormatError("Missing inputRecords field")

    records = data["inputRecords"]
    if not isinstance(records, list):
        raise LegacyFormatError("inputRecords must be a list")

    blob = LegacyBlob(total=len(records))
    for index, record in enumerate(records):
        try:
            players = parse_legacy_record(record)
        except LegacyFormatError as e:
            logger.warning(f"Skipping legacy record {index}: {e}")
            blob.skipped.append(SkippedRecord(index=index, error=str(e), raw=record))
            continue

        timestamp = record.get("timestamp")
        if not isinstance(timestamp, str) or not timestamp.strip():
            timestamp = format_timestamp()
        blob.games.append(LegacyGame(timestamp=timestamp, players=players))

    return blob


def export_legacy_blob(games: list[LegacyGame]) -> str:
    """Serialize games into the legacy format, players by descending score."""
    records = []
    for game in games:
        ordered = sorted(game.players, key=lambda p: p.score, reverse=True)
        records.append(
            {
                "members": [p.member_name for p in ordered],
                "scores": [_export_number(p.score) for p in ordered],
                "timestamp": game.timestamp,
            }
        )
    return json.dumps({"inputRecords": records}, ensure_ascii=False, indent=2)


def _export_number(score: float) -> int | float:
    return int(score) if float(score).is_integer() else score
