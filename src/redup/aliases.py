from redup.core.models import OutputFormat

FORMAT_ALIASES = {
    "txt": OutputFormat.TEXT,
    "text": OutputFormat.TEXT,
    "csv": OutputFormat.CSV,
    "sql": OutputFormat.SQLITE,
    "sqlite": OutputFormat.SQLITE,
    "db": OutputFormat.SQLITE,
}

FORMAT_CHOICES = list(FORMAT_ALIASES.keys())

FORMAT_HELP_TEXT = (
    "Output format (Default: txt):\n"
    "  txt, text         : Groups separated by a '-' line, one path per line\n"
    "  csv               : Rows of hash,file_path,group_id\n"
    "  sql, sqlite, db   : SQLite database with 'groups' and 'files' tables\n"
    "                      (requires --output)\n"
)

JOBS_HELP_TEXT = (
    "Maximum number of files hashed concurrently.\n"
    "Default: min(32, CPU count + 4)"
)

EPILOG_TEXT = """
Examples:
  Find duplicates in Downloads folder
  %(prog)s ~/Downloads

  Hash only the files you pipe in
  find ~/Pictures -name '*.jpg' | %(prog)s --stdin

  Same as above using the trailing '--' shorthand
  ls | %(prog)s --

  Write a CSV report, hashing at most 8 files at a time
  %(prog)s ~/Downloads -f csv -o report.csv -j 8

  Store groups in a SQLite database
  %(prog)s ~/Downloads -f sql -o duplicates.db

Files are compared by content, so duplicates are found whatever their names.
"""
