from __future__ import annotations

import calendar
import datetime as dt

from .activity_days import WEEKS_IN_LAST_SIX_MONTHS, calc_offset, week_starts
from .models import Column, CommitCountTable, Grid

RESET = "\033[0m"
STYLE_EMPTY = "\033[0;37;30m"
STYLE_LOW = "\033[1;30;47m"  # 1-4 commits
STYLE_MEDIUM = "\033[1;30;43m"  # 5-9
STYLE_HIGH = "\033[1;30;42m"  # 10+
STYLE_TODAY = "\033[1;37;45m"

GUTTER_WIDTH = 5
DAY_LABELS = {1: "Mon", 3: "Wed", 5: "Fri"}


def build_cols(table: CommitCountTable) -> Grid:
    """
    Lay the day offsets out as week columns.

    A column opens on every key with `k % 7 == 0` and is stored once a key with
    `k % 7 == 6` closes it, zero padded to 7 days. A trailing run of keys that
    never reaches day 6 is not stored.
    """
    cols: Grid = {}
    col: Column = []
    for k in sorted(table):
        week, day = divmod(k, 7)
        if day == 0:
            col = []
        col.append(table[k])
        if day == 6:
            if len(col) < 7:
                col = col + [0] * (7 - len(col))
            cols[week] = col
    return cols


def cell_style(val: int, today: bool) -> str:
    if today:
        return STYLE_TODAY
    if val >= 10:
        return STYLE_HIGH
    if val >= 5:
        return STYLE_MEDIUM
    if val > 0:
        return STYLE_LOW
    return STYLE_EMPTY


def cell_text(val: int) -> str:
    if val == 0:
        return "  - "
    if val >= 100:
        return f"{val} "
    if val >= 10:
        return f" {val} "
    return f"  {val} "


def format_cell(val: int, today: bool = False, *, color: bool = True) -> str:
    text = cell_text(val)
    if not color:
        return text
    return cell_style(val, today) + text + RESET


def day_label(day: int) -> str:
    label = DAY_LABELS.get(day, "")
    return f" {label} " if label else " " * GUTTER_WIDTH


def render_months(now: dt.datetime) -> str:
    starts = week_starts(now)
    parts = [" " * GUTTER_WIDTH]
    month = starts[0].month if starts else now.month
    for d in starts:
        if d.month != month:
            parts.append(calendar.month_name[d.month][:3] + " ")
            month = d.month
        else:
            parts.append("    ")
    return "".join(parts).rstrip()


def render_cells(grid: Grid, *, now: dt.datetime, color: bool = True) -> str:
    today_day = calc_offset(now) - 1
    lines = [render_months(now)]
    for j in range(6, -1, -1):
        row = [day_label(j)]
        for i in range(WEEKS_IN_LAST_SIX_MONTHS + 1, -1, -1):
            col = grid.get(i)
            if col is not None and i == 0 and j == today_day:
                row.append(format_cell(col[j], True, color=color))
            elif col is not None and len(col) > j:
                row.append(format_cell(col[j], color=color))
            else:
                row.append(format_cell(0, color=color))
        lines.append("".join(row))
    return "\n".join(lines)


def print_commit_stats(table: CommitCountTable, *, now: dt.datetime, color: bool = True) -> None:
    print("\n\n")
    print(render_cells(build_cols(table), now=now, color=color))
