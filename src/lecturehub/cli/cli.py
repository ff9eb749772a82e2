"""CLI entrypoint: Typer app definition and command registration"""

import typer

from lecturehub.cli.commands import (
    backup_cmd, bookmark_cmd, complete_cmd, convert_cmd, courses_cmd, export_cmd, init_cmd,
    lectures_cmd, meta_cmd, note_cmd, read_cmd, restore_cmd, search_cmd, start_cmd, stats_cmd,
)


app = typer.Typer(name="lecturehub", no_args_is_help=True, help="Course lecture hub: notes, progress, search, export")

app.command(name="init")(init_cmd)
app.command(name="convert")(convert_cmd)
app.command(name="meta")(meta_cmd)
app.command(name="courses")(courses_cmd)
app.command(name="lectures")(lectures_cmd)
app.command(name="read")(read_cmd)
app.command(name="search")(search_cmd)
app.command(name="complete")(complete_cmd)
app.command(name="start")(start_cmd)
app.command(name="note")(note_cmd)
app.command(name="bookmark")(bookmark_cmd)
app.command(name="stats")(stats_cmd)
app.command(name="export")(export_cmd)
app.command(name="backup")(backup_cmd)
app.command(name="restore")(restore_cmd)
