"""Inbound messages consumed by the subscription broker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Connect:
    observer_id: str


@dataclass(frozen=True)
class Join:
    observer_id: str
    site_id: str


@dataclass(frozen=True)
class Leave:
    observer_id: str
    site_id: str


@dataclass(frozen=True)
class SnapshotRequest:
    observer_id: str
    site_id: str


@dataclass(frozen=True)
class Disconnect:
    observer_id: str


BrokerMessage = Union[Connect, Join, Leave, SnapshotRequest, Disconnect]
