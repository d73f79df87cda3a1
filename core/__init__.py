"""Reminder core library — data model, prioritization engine, persistence.

Public API re-exports for convenient imports:
    from core import derive_view, rank_tasks, partition, complete_task, ...
"""

# Workspace & paths
from core.workspace import (
    workspace_root,
    get_user_timezone,
    now_local,
    today_str,
    blob_path,
    settings_path,
    hooks_config_path,
    log_dir,
    lock_path,
)

# File I/O
from core.fileio import (
    read_text,
    read_json,
    read_yaml,
    locked,
    write_json_atomic,
    write_yaml_atomic,
)

# Clock
from core.clock import (
    NO_DEADLINE_DAYS,
    days_remaining,
    deadline_instant,
    format_countdown,
    is_urgent,
    same_local_day,
    time_level,
)

# Task store
from core.tasks import (
    validate_task,
    visible_tasks,
    find_task,
    new_draft,
    save_task,
    delete_task,
    complete_task,
)

# Ranking & partition
from core.ranking import compare_tasks, rank_tasks
from core.partition import partition

# History archive
from core.history import (
    archive_task,
    find_entry,
    restore_entry,
    purge_entry,
)

# View
from core.view import derive_view

# Persistence
from core.storage import (
    load_blob,
    save_blob,
    load_state,
    load_settings,
    save_settings,
)

# Models
from core.models import (
    SORT_TIME,
    SORT_IMPORTANCE,
    SORT_MODES,
    ENTRY_NORMAL,
    ENTRY_DAILY_LOG,
    HISTORY_CAPACITY,
    IMPORTANCE_LEVELS,
    ImportanceLevel,
    Task,
    HistoryEntry,
    ReminderState,
    Settings,
    RankedTask,
    DashboardView,
)
