"""Tests for proctab data models."""

import dataclasses

import pytest

from proctab.models import ProcessRecord, View


def test_process_record_creation():
    """Test ProcessRecord dataclass creation."""
    record = ProcessRecord(pid=123, name="test_process", cpu_percent=50.0, memory_rss=1024000)

    assert record.pid == 123
    assert record.name == "test_process"
    assert record.cpu_percent == 50.0
    assert record.memory_rss == 1024000


def test_process_record_is_frozen():
    """Test that ProcessRecord is immutable (frozen)."""
    record = ProcessRecord(pid=1, name="init", cpu_percent=0.1, memory_rss=10000)

    with pytest.raises(dataclasses.FrozenInstanceError):
        record.pid = 999


def test_process_record_uses_slots():
    """Test that ProcessRecord uses __slots__ for memory efficiency."""
    record = ProcessRecord(pid=1, name="init", cpu_percent=0.1, memory_rss=10000)

    # Slots-based dataclasses don't have __dict__
    assert not hasattr(record, "__dict__")


def test_view_is_a_value():
    """Test that equal views compare equal and cannot be mutated."""
    rows = (ProcessRecord(pid=1, name="init", cpu_percent=0.0, memory_rss=0),)
    view = View(rows=rows, selected=0, status="refreshed")

    assert view == View(rows=rows, selected=0, status="refreshed")
    with pytest.raises(dataclasses.FrozenInstanceError):
        view.selected = None
