"""
Student Grade Tracker Package
=============================

SGPA/CGPA calculation, attendance projection with condonation rules, course
catalog autocomplete and a "what-if" grade predictor that can write its
draft back to the official record.

ARCHITECTURE OVERVIEW
---------------------

┌─────────────────────────────────────────────────────────────────────────┐
│                         ALGORITHM LAYER                                  │
│        (Pure logic - returns data structures, NO UI/printing)           │
│                                                                         │
│  ┌─────────────┐  ┌──────────────────┐  ┌───────────────────────────┐  │
│  │ GPA engine  │  │Attendance engine │  │ Catalog search / trends   │  │
│  └─────────────┘  └──────────────────┘  └───────────────────────────┘  │
│                                                                         │
│  ┌───────────────────────────────────────────────────────────────────┐  │
│  │   PredictionSession (draft, snapshot, change plan, commit)        │  │
│  └───────────────────────────────────────────────────────────────────┘  │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   │ Returns dataclasses
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│                         DATA LAYER                                       │
│  RecordRepository → RecordStore (SupabaseStore | LocalStore)            │
│  DataLoader (static catalog)                                            │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│          GradeTracker (orchestrator) → TerminalDisplay                  │
└─────────────────────────────────────────────────────────────────────────┘

PACKAGE STRUCTURE
-----------------

gradetrack/
├── __init__.py          # This file - main exports
├── config.py            # Constants and Settings
├── exceptions.py        # GradeTrackError hierarchy
├── tracker.py           # GradeTracker orchestrator
├── cli.py               # Command-line interface
├── models/              # Data classes and enums
├── data/                # Catalog loading, record stores, parsing
├── engines/             # GPA, attendance, search, trends, reconciliation
└── ui/                  # TerminalDisplay

USAGE
-----

    from gradetrack import compute_gpa, PredictionSession, RecordRepository, LocalStore

    repo = RecordRepository(LocalStore("gradetrack_data.json"))
    session = PredictionSession.start(repo, "me")
    sem = session.add_semester("Semester 1", 1)
    session.add_course(sem.id, "Computer Programming", 3, "A+", code="CSE101")
    session.commit(repo)

Running from command line:

    gradetrack dashboard
    python -m gradetrack predict

"""

# Version
__version__ = "1.0.0"

# Main exports
from .tracker import GradeTracker, create_store
from .cli import main

# Model exports
from .models import (
    Grade,
    GRADES,
    PersistedId,
    PendingId,
    Course,
    Semester,
    AttendanceCourse,
    AttendanceProfile,
    CatalogItem,
    ChangePlan,
    Operation,
    CommitResult,
)

# Engine exports
from .engines import (
    compute_gpa,
    compute_sgpa,
    compute_cgpa,
    get_total_credits,
    format_gpa,
    compute_condonation,
    summarize,
    search_catalog,
    PredictionSession,
    build_change_plan,
)

# Data exports
from .data import DataLoader, RecordRepository, RecordStore, LocalStore, SupabaseStore

# UI exports
from .ui import TerminalDisplay

# Configuration and errors
from .config import Settings, load_settings
from .exceptions import GradeTrackError, ValidationError, PersistenceError, ConfigError

__all__ = [
    # Version
    "__version__",
    # Main entry points
    "GradeTracker",
    "create_store",
    "main",
    # Models
    "Grade",
    "GRADES",
    "PersistedId",
    "PendingId",
    "Course",
    "Semester",
    "AttendanceCourse",
    "AttendanceProfile",
    "CatalogItem",
    "ChangePlan",
    "Operation",
    "CommitResult",
    # Engines
    "compute_gpa",
    "compute_sgpa",
    "compute_cgpa",
    "get_total_credits",
    "format_gpa",
    "compute_condonation",
    "summarize",
    "search_catalog",
    "PredictionSession",
    "build_change_plan",
    # Data
    "DataLoader",
    "RecordRepository",
    "RecordStore",
    "LocalStore",
    "SupabaseStore",
    # UI
    "TerminalDisplay",
    # Config / errors
    "Settings",
    "load_settings",
    "GradeTrackError",
    "ValidationError",
    "PersistenceError",
    "ConfigError",
]
