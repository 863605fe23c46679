#!/usr/bin/env python3

import os
import re
import json
import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Any

import pytz
from dateutil import parser as date_parser

NANOS_PER_SECOND = 1_000_000_000

_EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)

# dateutil stops at microseconds, so the fraction is split off and kept exact
_TIMESTAMP_RE = re.compile(
    r'^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})'
    r'(?:\.(?P<fraction>\d{1,9}))?'
    r'(?P<offset>[Zz]|[+-]\d{2}:?\d{2})?$'
)


def format_timestamp(ns: int) -> str:
    """Format nanoseconds since the epoch as an RFC 3339 UTC string.

    The fraction keeps nanosecond precision with trailing zeros trimmed
    and is omitted entirely for whole seconds.
    """
    seconds, nanos = divmod(ns, NANOS_PER_SECOND)
    dt = _EPOCH + timedelta(seconds=seconds)
    text = (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
    )
    if nanos:
        text += '.' + f"{nanos:09d}".rstrip('0')
    return text + 'Z'


def parse_timestamp(text: str) -> int:
    """Parse an ISO-8601 timestamp into UTC nanoseconds since the epoch.

    Naive timestamps are taken to be UTC.

    Raises:
        ValueError: If the text is not a full date and time.
    """
    match = _TIMESTAMP_RE.match(text.strip())
    if not match:
        raise ValueError(f"Invalid timestamp: {text!r}")

    offset = match.group('offset') or ''
    dt = date_parser.isoparse(match.group('base') + offset.upper())
    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    seconds = calendar.timegm(dt.astimezone(pytz.utc).utctimetuple())
    fraction = (match.group('fraction') or '').ljust(9, '0')
    return seconds * NANOS_PER_SECOND + int(fraction)


def _to_datetime(ns: int) -> datetime:
    return _EPOCH + timedelta(microseconds=ns // 1000)


@dataclass(frozen=True)
class FileRecord:
    """POSIX metadata for one matched regular file."""

    path: str
    inode: int
    size: int
    uid: int
    gid: int
    mtime_ns: int
    ctime_ns: int

    @property
    def mtime(self) -> datetime:
        """Modification time in UTC, truncated to microseconds."""
        return _to_datetime(self.mtime_ns)

    @property
    def ctime(self) -> datetime:
        """Status change time in UTC, truncated to microseconds."""
        return _to_datetime(self.ctime_ns)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file_path': self.path,
            'inode': self.inode,
            'size': self.size,
            'uid': self.uid,
            'gid': self.gid,
            'mtime': format_timestamp(self.mtime_ns),
            'ctime': format_timestamp(self.ctime_ns),
        }

    def to_json_line(self) -> str:
        """Serialize to a single line of JSON (no trailing newline)."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FileRecord':
        return cls(
            path=data['file_path'],
            inode=int(data['inode']),
            size=int(data['size']),
            uid=int(data['uid']),
            gid=int(data['gid']),
            mtime_ns=parse_timestamp(data['mtime']),
            ctime_ns=parse_timestamp(data['ctime']),
        )

    @classmethod
    def from_json_line(cls, line: str) -> 'FileRecord':
        return cls.from_dict(json.loads(line))


def extract_record(path: str, st: os.stat_result) -> FileRecord:
    """Map a raw stat result onto a FileRecord. Performs no I/O."""
    return FileRecord(
        path=path,
        inode=st.st_ino,
        size=st.st_size,
        uid=st.st_uid,
        gid=st.st_gid,
        mtime_ns=st.st_mtime_ns,
        ctime_ns=st.st_ctime_ns,
    )
