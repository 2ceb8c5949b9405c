"""Command-line interface for the shared carer rota."""

from __future__ import annotations

import argparse
from typing import Optional

from rota.config import RotaConfig, load_config
from rota.domain.keys import date_key
from rota.engine.editor import ScheduleEditor, build_editor
from rota.io.export_csv import export_schedule_csv
from rota.sync.transport import MemoryTransport


def _editor(args: argparse.Namespace) -> ScheduleEditor:
    cfg = load_config(args.config) if args.config else RotaConfig()
    transport = MemoryTransport() if args.backend == "memory" else None
    editor = build_editor(cfg, transport=transport)
    if getattr(args, "days", 0) is None:
        args.days = cfg.initial_days
    editor.store.wait_until_loaded()
    return editor


def _finish(editor: ScheduleEditor, future) -> None:
    """Wait for the write, then report and shut the store down."""
    ok = future.result()
    editor.store.close()
    if not ok:
        raise RuntimeError(str(editor.store.last_error))


def _cmd_show(args: argparse.Namespace) -> None:
    """Print the rota from today."""
    editor = _editor(args)
    try:
        rows = editor.engine.rows(editor.generate_days(args.days))
        last_date = None
        for row in rows:
            head = f"{row['date']} {row['weekday']}" if row["date"] != last_date else " " * 14
            marker = "*" if row["isToday"] else " "
            print(f"{marker}{head}  {row['icon']} {row['display']:<14} "
                  f"{row['name'] or '-':<16} {row['comment']}")
            last_date = row["date"]
    finally:
        editor.store.close()


def _cmd_set_time(args: argparse.Namespace) -> None:
    """Set start/end of a shift. Morning changes also move the evening start."""
    editor = _editor(args)
    try:
        future = editor.save_times(date_key(args.date), args.shift, args.start, args.end)
    except Exception as e:
        editor.store.close()
        print(f"[ERROR] Update failed: {e}")
        raise
    _finish(editor, future)
    print(f"[OK] {args.date} {args.shift}: {args.start}-{args.end}")


def _cmd_set_field(field: str):
    def _cmd(args: argparse.Namespace) -> None:
        editor = _editor(args)
        try:
            future = editor.update_shift_field(date_key(args.date), args.shift, field, args.value)
        except Exception as e:
            editor.store.close()
            print(f"[ERROR] Update failed: {e}")
            raise
        _finish(editor, future)
        print(f"[OK] {args.date} {args.shift}: {field} = {args.value.strip()!r}")
    return _cmd


def _cmd_clear(args: argparse.Namespace) -> None:
    """Clear a field (stored as an empty value)."""
    editor = _editor(args)
    try:
        future = editor.clear_field(date_key(args.date), args.shift, args.field)
    except Exception as e:
        editor.store.close()
        print(f"[ERROR] Clear failed: {e}")
        raise
    _finish(editor, future)
    print(f"[OK] {args.date} {args.shift}: {args.field} cleared")


def _cmd_export(args: argparse.Namespace) -> None:
    """Export the visible rota to CSV."""
    editor = _editor(args)
    try:
        count = export_schedule_csv(editor.engine, args.out, args.days)
        print(f"[OK] Exported {count} shifts to {args.out}")
    except Exception as e:
        print(f"[ERROR] Export failed: {e}")
        raise
    finally:
        editor.store.close()


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="rota",
        description="Shared day/night carer rota",
    )
    parser.add_argument("--config", help="Path to config YAML/JSON")
    parser.add_argument("--backend", choices=["firestore", "memory"], default="firestore",
                        help="Shared document store (memory is process-local)")

    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print the rota from today")
    show.add_argument("--days", type=int, help="Number of days (default 21)")
    show.set_defaults(func=_cmd_show)

    st = sub.add_parser("set-time", help="Set a shift's start and end time")
    st.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
    st.add_argument("--shift", required=True, choices=["morning", "evening"])
    st.add_argument("--start", required=True, help="HH:MM")
    st.add_argument("--end", required=True, help="HH:MM")
    st.set_defaults(func=_cmd_set_time)

    for command, field, help_text in (
        ("set-name", "name", "Assign a carer to a shift"),
        ("set-comment", "comment", "Add a note to a shift"),
    ):
        p = sub.add_parser(command, help=help_text)
        p.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
        p.add_argument("--shift", required=True, choices=["morning", "evening"])
        p.add_argument("value")
        p.set_defaults(func=_cmd_set_field(field))

    clr = sub.add_parser("clear", help="Clear a shift field")
    clr.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
    clr.add_argument("--shift", required=True, choices=["morning", "evening"])
    clr.add_argument("--field", required=True, choices=["name", "comment", "timeStart", "timeEnd"])
    clr.set_defaults(func=_cmd_clear)

    exp = sub.add_parser("export", help="Export the rota to CSV")
    exp.add_argument("--out", required=True, help="Path to output CSV")
    exp.add_argument("--days", type=int, help="Number of days (default 21)")
    exp.set_defaults(func=_cmd_export)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
